"""DragState - transient state of an in-flight drag."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from deliveryhub.reorder.exceptions import DragInProgressError

logger = logging.getLogger(__name__)


@dataclass
class DragState:
    """Which ticket is being dragged and where its placeholder sits."""

    dragged_ticket_id: str | None = None
    placeholder_index: int | None = None
    highlighted_column: str | None = None

    @property
    def active(self) -> bool:
        return self.dragged_ticket_id is not None

    def begin(self, ticket_id: str) -> None:
        """Start dragging ``ticket_id``.

        Raises:
            DragInProgressError: If another drag has not been cleared.
        """
        if self.active:
            raise DragInProgressError(f"Already dragging {self.dragged_ticket_id}")
        self.dragged_ticket_id = ticket_id

    def hover(self, column_key: str, placeholder_index: int | None) -> None:
        """Move the placeholder; None places it at the end of the column."""
        self.highlighted_column = column_key
        self.placeholder_index = placeholder_index

    def clear(self) -> None:
        self.dragged_ticket_id = None
        self.placeholder_index = None
        self.highlighted_column = None

    @contextmanager
    def session(self, ticket_id: str) -> Iterator[DragState]:
        """Drag ``ticket_id`` for the duration of the block.

        State is cleared on exit whether the drop succeeded or raised.
        """
        self.begin(ticket_id)
        try:
            yield self
        finally:
            logger.debug("Drag of %s ended", ticket_id)
            self.clear()

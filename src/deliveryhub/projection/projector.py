"""PersonaViewProjector - groups enriched tickets into persona-scoped columns."""

from __future__ import annotations

from collections.abc import Iterable

from deliveryhub.config import DEFAULT_VIEW, BoardConfig
from deliveryhub.enrichment import TicketView
from deliveryhub.projection.exceptions import ColumnNotFoundError, ViewNotFoundError
from deliveryhub.projection.models import Column
from deliveryhub.stages import NEUTRAL_COLUMN_STYLE, Persona, Stage

ALL_INTENTIONS = "all"
DEFAULT_OWNER = "Default"


def _matches_intention(ticket: TicketView, intention_filter: str | None) -> bool:
    if not intention_filter or intention_filter.strip().lower() == ALL_INTENTIONS:
        return True
    return (ticket.intention or "").strip().lower() == intention_filter.strip().lower()


def _sort_key(ticket: TicketView) -> float:
    return ticket.sort_order or 0


class PersonaViewProjector:
    """Projects tickets onto the columns of one persona's board view.

    Every method is a pure function of the configuration and its arguments.
    """

    def __init__(self, config: BoardConfig) -> None:
        self.config = config

    def views(self, persona: Persona) -> list[str]:
        """View names defined for ``persona``, in configuration order."""
        return list(self.config.layout(persona).board_views)

    def column_keys(self, persona: Persona, view: str, show_extended: bool) -> list[str]:
        """Ordered column keys for a view.

        Raises:
            ViewNotFoundError: If ``view`` is not defined for ``persona``.
        """
        layout = self.config.layout(persona)
        if view not in layout.board_views:
            raise ViewNotFoundError(f"View '{view}' not defined for {persona}")
        keys = layout.board_views[view]
        if show_extended:
            return list(keys)
        return [key for key in keys if not layout.column_is_extended.get(key, False)]

    def first_stage(self, persona: Persona, column_key: str) -> Stage | None:
        """Stage assigned to tickets dropped into ``column_key``; None when it has no stages.

        Raises:
            ColumnNotFoundError: If the column is not defined for ``persona``.
        """
        layout = self.config.layout(persona)
        if column_key not in layout.column_to_stages:
            raise ColumnNotFoundError(f"Column '{column_key}' not defined for {persona}")
        stages = layout.column_to_stages[column_key]
        return stages[0] if stages else None

    def column_for_stage(
        self, persona: Persona, stage: Stage, view: str = DEFAULT_VIEW
    ) -> str | None:
        """First column of ``view`` that contains ``stage``."""
        layout = self.config.layout(persona)
        for key in layout.board_views.get(view, ()):
            if stage in layout.column_to_stages.get(key, ()):
                return key
        return None

    def column_owner(self, persona: Persona, column_key: str) -> str:
        """Owner of the column's first stage, or ``"Default"``."""
        stages = self.config.layout(persona).column_to_stages.get(column_key, ())
        if not stages:
            return DEFAULT_OWNER
        return self.config.stage_owners.get(stages[0], DEFAULT_OWNER)

    def build_columns(
        self,
        persona: Persona,
        view: str,
        show_extended: bool,
        intention_filter: str | None,
        tickets: Iterable[TicketView],
        hide_empty: bool = False,
    ) -> list[Column]:
        """Build the board columns for one persona view.

        Args:
            persona: Whose column layout to use.
            view: Board view name, e.g. ``"all"`` or ``"predev"``.
            show_extended: Include columns flagged as extended.
            intention_filter: ``"all"`` (or None) passes every ticket, anything
                else is a case-insensitive match on the ticket's intention.
            tickets: Enriched tickets, in fetch order.
            hide_empty: Drop columns that end up with no tickets.

        Returns:
            Columns in view order, each with its tickets sorted by sort order.

        Raises:
            ViewNotFoundError: If ``view`` is not defined for ``persona``.
        """
        keys = self.column_keys(persona, view, show_extended)
        layout = self.config.layout(persona)
        ticket_list = list(tickets)

        columns = []
        for key in keys:
            member_stages = layout.column_to_stages.get(key, ())
            members = set(member_stages)
            column_tickets = [
                t
                for t in ticket_list
                if t.stage in members and _matches_intention(t, intention_filter)
            ]
            column_tickets.sort(key=_sort_key)
            if hide_empty and not column_tickets:
                continue
            columns.append(
                Column(
                    key=key,
                    display_name=self.config.display_names.get(key, key),
                    member_stages=tuple(member_stages),
                    style=self.config.column_styles.get(key, NEUTRAL_COLUMN_STYLE),
                    owner=self.column_owner(persona, key),
                    is_extended=layout.column_is_extended.get(key, False),
                    tickets=column_tickets,
                )
            )
        return columns

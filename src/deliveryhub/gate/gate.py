"""TransitionGate - checks required fields before a stage change commits."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from deliveryhub.gate.exceptions import GateCheckError, MissingFieldsError, StageUpdateError
from deliveryhub.gate.models import PendingTransition, TransitionOutcome, TransitionStatus
from deliveryhub.gateway import DeliveryGateway, GatewayError
from deliveryhub.stages import Stage
from deliveryhub.tickets import FieldSpec

logger = logging.getLogger(__name__)

CommitFn = Callable[[], Awaitable[None]]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class TransitionGate:
    """Runs the required-field check in front of every stage change.

    The comment attached to a move is written after the stage change and
    never decides whether the move succeeded.
    """

    def __init__(self, gateway: DeliveryGateway, author: str | None = None) -> None:
        self.gateway = gateway
        self.author = author

    async def request(
        self,
        ticket_id: str,
        target_stage: Stage,
        comment: str | None = None,
        commit: CommitFn | None = None,
    ) -> TransitionOutcome:
        """Ask to move ``ticket_id`` to ``target_stage``.

        Args:
            ticket_id: Ticket to move.
            target_stage: Destination stage.
            comment: Optional status comment posted after a successful move.
            commit: Mutation to run when no input is needed; defaults to
                ``gateway.update_ticket_stage``.

        Returns:
            COMMITTED when the stage changed, NEEDS_INPUT with the required
            fields when the caller has to collect values first.

        Raises:
            GateCheckError: If the required fields could not be fetched.
            StageUpdateError: If the mutation failed.
        """
        fields = await self.required_fields(target_stage)
        if fields:
            logger.info(
                "Ticket %s needs %d field(s) before %s", ticket_id, len(fields), target_stage
            )
            return TransitionOutcome(
                status=TransitionStatus.NEEDS_INPUT,
                ticket_id=ticket_id,
                target_stage=target_stage,
                fields=list(fields),
                pending=PendingTransition(
                    ticket_id=ticket_id, target_stage=target_stage, fields=tuple(fields)
                ),
            )

        if commit is None:

            async def commit() -> None:
                await self.gateway.update_ticket_stage(ticket_id, target_stage)

        try:
            await commit()
        except GatewayError as e:
            logger.error("Moving %s to %s failed: %s", ticket_id, target_stage, e)
            raise StageUpdateError(str(e)) from e

        logger.info("Ticket %s moved to %s", ticket_id, target_stage)
        return TransitionOutcome(
            status=TransitionStatus.COMMITTED,
            ticket_id=ticket_id,
            target_stage=target_stage,
            comment_saved=await self._post_comment(ticket_id, comment),
        )

    async def required_fields(self, target_stage: Stage) -> list[FieldSpec]:
        """Fields the backend requires before ``target_stage``.

        Raises:
            GateCheckError: If the lookup failed.
        """
        try:
            return await self.gateway.get_required_fields_for_stage(target_stage)
        except GatewayError as e:
            logger.error("Required-field check for %s failed: %s", target_stage, e)
            raise GateCheckError(f"Could not check requirements for {target_stage}: {e}") from e

    async def prepare(self, ticket_id: str, target_stage: Stage) -> PendingTransition:
        """Pending transition for a guided save started outside ``request``.

        Raises:
            GateCheckError: If the lookup failed.
        """
        fields = await self.required_fields(target_stage)
        return PendingTransition(ticket_id=ticket_id, target_stage=target_stage, fields=tuple(fields))

    async def complete(
        self,
        pending: PendingTransition,
        values: Mapping[str, Any],
        comment: str | None = None,
    ) -> TransitionOutcome:
        """Commit a pending transition with the collected field values.

        Raises:
            MissingFieldsError: If a required field has no value.
            StageUpdateError: If the save failed.
        """
        missing = [name for name in pending.required_names if _is_blank(values.get(name))]
        if missing:
            raise MissingFieldsError(missing)

        try:
            await self.gateway.save_transition(pending.ticket_id, pending.target_stage, values)
        except GatewayError as e:
            logger.error("Saving transition of %s failed: %s", pending.ticket_id, e)
            raise StageUpdateError(str(e)) from e

        logger.info("Ticket %s moved to %s with field values", pending.ticket_id, pending.target_stage)
        return TransitionOutcome(
            status=TransitionStatus.COMMITTED,
            ticket_id=pending.ticket_id,
            target_stage=pending.target_stage,
            comment_saved=await self._post_comment(pending.ticket_id, comment),
        )

    async def _post_comment(self, ticket_id: str, comment: str | None) -> bool | None:
        if _is_blank(comment):
            return None
        try:
            await self.gateway.post_status_comment(ticket_id, comment.strip(), self.author)
        except GatewayError as e:
            logger.warning("Status comment for %s not saved: %s", ticket_id, e)
            return False
        return True

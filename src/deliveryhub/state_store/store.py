"""TicketStore - persistence API over the local SQLite database."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from deliveryhub.blocking import link_map
from deliveryhub.state_store.database import Database
from deliveryhub.state_store.exceptions import (
    DependencyExistsError,
    DependencyNotFoundError,
    InvalidTicketFieldError,
    TicketNotFoundError,
)
from deliveryhub.state_store.models import (
    CommentRecord,
    DependencyRecord,
    FileLinkRecord,
    StageRequirementRecord,
    TicketRecord,
)
from deliveryhub.stages import Stage
from deliveryhub.tickets import DEFAULT_PRIORITY, Dependency, FieldSpec, Ticket

logger = logging.getLogger(__name__)

TICKET_NAME_PREFIX = "T-"

# Canonical field name -> column attribute, for fields callers may write
_WRITABLE = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "intention": "intention",
    "developer_days_size": "developer_days_size",
    "actual_hours": "actual_hours",
    "estimated_hours": "estimated_hours",
    "tags": "tags",
    "projected_uat_date": "projected_uat_date",
    "stored_eta": "calculated_eta",
    "developer": "developer",
    "epic": "epic",
    "owner_name": "owner_name",
    "is_active": "is_active",
}
_NUMBER_FIELDS = {"developer_days_size", "actual_hours", "estimated_hours"}
_DATE_FIELDS = {"projected_uat_date", "stored_eta"}


def _coerce(name: str, value: Any) -> Any:
    if value is None or value == "":
        return None
    try:
        if name in _NUMBER_FIELDS:
            return float(value)
        if name in _DATE_FIELDS:
            if isinstance(value, date):
                return value
            return date.fromisoformat(str(value))
    except (TypeError, ValueError) as e:
        raise InvalidTicketFieldError(f"Invalid value for {name}: {value!r}") from e
    if name == "is_active":
        return bool(value)
    return str(value)


def _apply_fields(record: TicketRecord, values: Mapping[str, Any]) -> None:
    unknown = sorted(set(values) - set(_WRITABLE))
    if unknown:
        raise InvalidTicketFieldError("Unknown ticket field(s): " + ", ".join(unknown))
    for name, value in values.items():
        setattr(record, _WRITABLE[name], _coerce(name, value))


def _to_dependency(record: DependencyRecord) -> Dependency:
    return Dependency(
        id=record.id,
        blocking_ticket_id=record.blocking_ticket_id,
        blocked_ticket_id=record.blocked_ticket_id,
    )


def _to_ticket(
    record: TicketRecord,
    blocked_by: Mapping[str, list] | None = None,
    blocking: Mapping[str, list] | None = None,
) -> Ticket:
    return Ticket(
        id=record.id,
        name=record.name,
        title=record.title,
        description=record.description,
        stage=Stage.parse(record.stage),
        priority=record.priority,
        intention=record.intention,
        sort_order=record.sort_order,
        developer_days_size=record.developer_days_size,
        actual_hours=record.actual_hours,
        estimated_hours=record.estimated_hours,
        tags=record.tags,
        created_date=record.created_at,
        projected_uat_date=record.projected_uat_date,
        stored_eta=record.calculated_eta,
        developer=record.developer,
        epic=record.epic,
        owner_name=record.owner_name,
        is_active=record.is_active,
        blocked_by=tuple((blocked_by or {}).get(record.id, ())),
        blocking=tuple((blocking or {}).get(record.id, ())),
    )


class TicketStore:
    """CRUD operations for tickets, dependencies, comments and stage requirements.

    Each call opens and closes its own session.
    """

    def __init__(self, db_path: str = "deliveryhub.db") -> None:
        """Initialize the store, creating tables if they don't exist.

        Args:
            db_path: Path to SQLite database file
        """
        self._db = Database(db_path)
        self._db.create_tables()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    def _get_record(self, session: Session, ticket_id: str) -> TicketRecord:
        record = session.get(TicketRecord, ticket_id)
        if record is None:
            raise TicketNotFoundError(f"Ticket with id '{ticket_id}' not found")
        return record

    def _hydrate(self, session: Session, records: Sequence[TicketRecord]) -> list[Ticket]:
        ids = [r.id for r in records]
        deps = session.scalars(
            select(DependencyRecord).where(
                or_(
                    DependencyRecord.blocked_ticket_id.in_(ids),
                    DependencyRecord.blocking_ticket_id.in_(ids),
                )
            )
        ).all()
        linked_ids = {d.blocked_ticket_id for d in deps} | {d.blocking_ticket_id for d in deps}
        names = dict(
            session.execute(
                select(TicketRecord.id, TicketRecord.name).where(TicketRecord.id.in_(linked_ids))
            ).all()
        )
        blocked_by, blocking = link_map((_to_dependency(d) for d in deps), names)
        return [_to_ticket(r, blocked_by, blocking) for r in records]

    # --- Ticket Operations ---

    def create_ticket(
        self,
        title: str,
        description: str = "",
        priority: str | None = None,
        stage: Stage = Stage.BACKLOG,
        **fields: Any,
    ) -> Ticket:
        """Create a ticket at the end of its stage.

        Args:
            title: Short title
            description: Long description
            priority: Defaults to Medium when empty
            stage: Initial stage, Backlog unless seeding
            **fields: Other writable fields (intention, tags, ...)

        Returns:
            The created Ticket with generated id and name

        Raises:
            InvalidTicketFieldError: If a field name or value is invalid
        """
        session = self._db.get_session()
        try:
            max_sort = session.scalar(select(func.max(TicketRecord.sort_order)))
            count = session.scalar(select(func.count(TicketRecord.id))) or 0
            record = TicketRecord(
                name=f"{TICKET_NAME_PREFIX}{count + 1:04d}",
                title=title,
                description=description,
                stage=stage.value,
                priority=priority or DEFAULT_PRIORITY.value,
                sort_order=(max_sort or 0) + 1,
            )
            _apply_fields(record, fields)
            session.add(record)
            session.commit()
            session.refresh(record)
            logger.info("Created ticket %s (%s)", record.name, record.id)
            return _to_ticket(record)
        except InvalidTicketFieldError:
            session.rollback()
            raise
        finally:
            session.close()

    def get_ticket(self, ticket_id: str) -> Ticket:
        """Get ticket by ID.

        Raises:
            TicketNotFoundError: If ticket doesn't exist
        """
        session = self._db.get_session()
        try:
            return self._hydrate(session, [self._get_record(session, ticket_id)])[0]
        finally:
            session.close()

    def list_tickets(self, active_only: bool = True) -> list[Ticket]:
        """All tickets with their dependency links, ordered by sort order."""
        session = self._db.get_session()
        try:
            query = select(TicketRecord).order_by(
                TicketRecord.sort_order.asc().nulls_first(), TicketRecord.created_at
            )
            if active_only:
                query = query.where(TicketRecord.is_active.is_(True))
            return self._hydrate(session, session.scalars(query).all())
        finally:
            session.close()

    def update_stage(self, ticket_id: str, stage: Stage) -> None:
        """Move a ticket to ``stage``.

        Raises:
            TicketNotFoundError: If ticket doesn't exist
        """
        session = self._db.get_session()
        try:
            record = self._get_record(session, ticket_id)
            record.stage = stage.value
            session.commit()
        finally:
            session.close()

    def update_sort_order(self, ticket_id: str, sort_order: float) -> None:
        """Write a ticket's sort key.

        Raises:
            TicketNotFoundError: If ticket doesn't exist
        """
        self.set_sort_orders({ticket_id: sort_order})

    def set_sort_orders(self, sort_orders: Mapping[str, float]) -> None:
        """Write several sort keys in one transaction.

        Raises:
            TicketNotFoundError: If any ticket doesn't exist; nothing is written
        """
        session = self._db.get_session()
        try:
            for ticket_id, value in sort_orders.items():
                self._get_record(session, ticket_id).sort_order = value
            session.commit()
        except TicketNotFoundError:
            session.rollback()
            raise
        finally:
            session.close()

    def reorder(self, ticket_id: str, new_stage: Stage, new_index: int) -> None:
        """Move a ticket into ``new_stage`` at position ``new_index``.

        The stage's tickets are renumbered 1..n in their new order.

        Raises:
            TicketNotFoundError: If ticket doesn't exist
        """
        session = self._db.get_session()
        try:
            record = self._get_record(session, ticket_id)
            siblings = list(
                session.scalars(
                    select(TicketRecord)
                    .where(
                        TicketRecord.stage == new_stage.value,
                        TicketRecord.id != ticket_id,
                        TicketRecord.is_active.is_(True),
                    )
                    .order_by(TicketRecord.sort_order.asc().nulls_first(), TicketRecord.created_at)
                ).all()
            )
            index = max(0, min(new_index, len(siblings)))
            siblings.insert(index, record)
            record.stage = new_stage.value
            for position, sibling in enumerate(siblings, start=1):
                sibling.sort_order = float(position)
            session.commit()
        finally:
            session.close()

    def save_transition(
        self, ticket_id: str, stage: Stage | None, values: Mapping[str, Any]
    ) -> None:
        """Write field values and (optionally) a new stage in one transaction.

        Raises:
            TicketNotFoundError: If ticket doesn't exist
            InvalidTicketFieldError: If a field name or value is invalid
        """
        session = self._db.get_session()
        try:
            record = self._get_record(session, ticket_id)
            _apply_fields(record, values)
            if stage is not None:
                record.stage = stage.value
            session.commit()
        except InvalidTicketFieldError:
            session.rollback()
            raise
        finally:
            session.close()

    def store_etas(self, etas: Mapping[str, date]) -> None:
        """Persist calculated ETAs; unknown ids are ignored."""
        session = self._db.get_session()
        try:
            for ticket_id, eta in etas.items():
                record = session.get(TicketRecord, ticket_id)
                if record is not None:
                    record.calculated_eta = eta
            session.commit()
        finally:
            session.close()

    def search_tickets(
        self, term: str, exclude_ids: Iterable[str] = (), limit: int = 20
    ) -> list[Ticket]:
        """Active tickets whose name or title contains ``term``."""
        pattern = f"%{term}%"
        session = self._db.get_session()
        try:
            query = (
                select(TicketRecord)
                .where(
                    TicketRecord.is_active.is_(True),
                    or_(TicketRecord.name.ilike(pattern), TicketRecord.title.ilike(pattern)),
                )
                .order_by(TicketRecord.name)
                .limit(limit)
            )
            excluded = list(exclude_ids)
            if excluded:
                query = query.where(TicketRecord.id.not_in(excluded))
            return [_to_ticket(r) for r in session.scalars(query).all()]
        finally:
            session.close()

    # --- Dependency Operations ---

    def add_dependency(self, blocked_id: str, blocking_id: str) -> Dependency:
        """Record that ``blocking_id`` blocks ``blocked_id``.

        Raises:
            TicketNotFoundError: If either ticket doesn't exist
            DependencyExistsError: If the edge already exists
        """
        session = self._db.get_session()
        try:
            self._get_record(session, blocked_id)
            self._get_record(session, blocking_id)
            record = DependencyRecord(blocking_ticket_id=blocking_id, blocked_ticket_id=blocked_id)
            session.add(record)
            session.commit()
            return _to_dependency(record)
        except IntegrityError as e:
            session.rollback()
            raise DependencyExistsError(
                f"Ticket '{blocking_id}' already blocks '{blocked_id}'"
            ) from e
        finally:
            session.close()

    def remove_dependency(self, dependency_id: str) -> None:
        """Delete a dependency edge.

        Raises:
            DependencyNotFoundError: If the edge doesn't exist
        """
        session = self._db.get_session()
        try:
            record = session.get(DependencyRecord, dependency_id)
            if record is None:
                raise DependencyNotFoundError(f"Dependency with id '{dependency_id}' not found")
            session.delete(record)
            session.commit()
        finally:
            session.close()

    def list_dependencies(self) -> list[Dependency]:
        """Every dependency edge. Inspection helper; the board reads edges through tickets."""
        session = self._db.get_session()
        try:
            return [_to_dependency(d) for d in session.scalars(select(DependencyRecord)).all()]
        finally:
            session.close()

    # --- Comments and Files ---

    def add_comment(
        self, ticket_id: str, body: str, author: str | None = None, source: str = "DeliveryHub"
    ) -> CommentRecord:
        """Attach a comment to a ticket.

        Raises:
            TicketNotFoundError: If ticket doesn't exist
        """
        session = self._db.get_session()
        try:
            self._get_record(session, ticket_id)
            comment = CommentRecord(ticket_id=ticket_id, body=body, author=author, source=source)
            session.add(comment)
            session.commit()
            session.refresh(comment)
            return comment
        finally:
            session.close()

    def list_comments(self, ticket_id: str) -> list[CommentRecord]:
        """Comments on a ticket, oldest first. Inspection helper; no route exposes comments."""
        session = self._db.get_session()
        try:
            return list(
                session.scalars(
                    select(CommentRecord)
                    .where(CommentRecord.ticket_id == ticket_id)
                    .order_by(CommentRecord.created_at)
                ).all()
            )
        finally:
            session.close()

    def link_files(self, ticket_id: str, file_ids: Iterable[str]) -> None:
        """Attach uploaded files; already linked files are skipped.

        Raises:
            TicketNotFoundError: If ticket doesn't exist
        """
        session = self._db.get_session()
        try:
            self._get_record(session, ticket_id)
            existing = set(
                session.scalars(
                    select(FileLinkRecord.file_id).where(FileLinkRecord.ticket_id == ticket_id)
                ).all()
            )
            for file_id in dict.fromkeys(file_ids):
                if file_id not in existing:
                    session.add(FileLinkRecord(ticket_id=ticket_id, file_id=file_id))
            session.commit()
        finally:
            session.close()

    def list_files(self, ticket_id: str) -> list[str]:
        """File ids linked to a ticket. Inspection helper; no route exposes file links."""
        session = self._db.get_session()
        try:
            return list(
                session.scalars(
                    select(FileLinkRecord.file_id)
                    .where(FileLinkRecord.ticket_id == ticket_id)
                    .order_by(FileLinkRecord.id)
                ).all()
            )
        finally:
            session.close()

    # --- Stage Requirements ---

    def required_fields(self, stage: Stage) -> list[FieldSpec]:
        """Fields that must be filled before a ticket enters ``stage``."""
        session = self._db.get_session()
        try:
            rows = session.scalars(
                select(StageRequirementRecord)
                .where(StageRequirementRecord.stage == stage.value)
                .order_by(StageRequirementRecord.position, StageRequirementRecord.id)
            ).all()
            return [
                FieldSpec(
                    name=row.field_name,
                    label=row.label,
                    field_type=row.field_type,
                    required=row.required,
                )
                for row in rows
            ]
        finally:
            session.close()

    def set_required_fields(self, stage: Stage, fields: Sequence[FieldSpec]) -> None:
        """Replace the requirement list for ``stage``.

        Raises:
            InvalidTicketFieldError: If a field is not a writable ticket field
        """
        unknown = sorted({f.name for f in fields} - set(_WRITABLE))
        if unknown:
            raise InvalidTicketFieldError("Unknown ticket field(s): " + ", ".join(unknown))
        session = self._db.get_session()
        try:
            for row in session.scalars(
                select(StageRequirementRecord).where(StageRequirementRecord.stage == stage.value)
            ).all():
                session.delete(row)
            session.flush()
            for position, spec in enumerate(fields):
                session.add(
                    StageRequirementRecord(
                        stage=stage.value,
                        field_name=spec.name,
                        label=spec.label,
                        field_type=spec.field_type,
                        required=spec.required,
                        position=position,
                    )
                )
            session.commit()
        finally:
            session.close()


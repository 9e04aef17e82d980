"""FieldMapper - turns raw backend records into canonical Ticket objects.

Backend records may carry their field names with or without the
``delivery__`` namespace prefix. The mapper resolves that once, here, so
nothing downstream ever looks at raw field names.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from deliveryhub.stages import Stage, StageError
from deliveryhub.tickets.exceptions import RecordMappingError
from deliveryhub.tickets.models import (
    BlockerCandidate,
    DependencyLink,
    ETAProjection,
    ETAResult,
    FieldSpec,
    Ticket,
)

logger = logging.getLogger(__name__)

NAMESPACE_PREFIX = "delivery__"

# Canonical attribute -> backend field name
FIELDS = {
    "id": "Id",
    "name": "Name",
    "title": "BriefDescriptionTxt__c",
    "description": "DetailsTxt__c",
    "stage": "StageNamePk__c",
    "priority": "PriorityPk__c",
    "sort_order": "SortOrderNumber__c",
    "is_active": "IsActiveBool__c",
    "tags": "Tags__c",
    "epic": "Epic__c",
    "intention": "ClientIntentionPk__c",
    "developer_days_size": "DeveloperDaysSizeNumber__c",
    "stored_eta": "CalculatedETADate__c",
    "actual_hours": "TotalLoggedHoursNumber__c",
    "estimated_hours": "EstimatedHoursNumber__c",
    "projected_uat_date": "ProjectedUATReadyDate__c",
    "created_date": "CreatedDate",
    "developer": "Developer__c",
}

BLOCKED_BY_RELATION = "Ticket_Dependency1__r"
BLOCKING_RELATION = "Ticket_Dependency__r"
BLOCKING_TICKET = "Blocking_Ticket__c"
BLOCKED_TICKET = "Blocked_Ticket__c"


def _parse_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value)).date()
    except ValueError as e:
        raise RecordMappingError(f"Invalid date: {value!r}") from e


def _parse_datetime(value: Any) -> datetime | date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as e:
        raise RecordMappingError(f"Invalid timestamp: {value!r}") from e


def _parse_number(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise RecordMappingError(f"Invalid number: {value!r}") from e


def _text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


class FieldMapper:
    """Resolves backend field names regardless of namespace prefix."""

    def __init__(self, prefix: str = NAMESPACE_PREFIX) -> None:
        self.prefix = prefix

    def get(self, record: Mapping[str, Any] | None, field_name: str) -> Any:
        """Look up ``field_name`` in ``record``.

        Tries the exact key, then the key without the prefix, then the key
        with the prefix. First hit wins; a missing field gives None.
        """
        if not record:
            return None
        if field_name in record:
            return record[field_name]
        local_name = field_name.removeprefix(self.prefix)
        if local_name in record:
            return record[local_name]
        namespaced = self.prefix + local_name
        if namespaced in record:
            return record[namespaced]
        return None

    def _links(
        self, relations: Iterable[Mapping[str, Any]] | None, other_end: str
    ) -> tuple[DependencyLink, ...]:
        links = []
        for dep in relations or ():
            other_id = self.get(dep, other_end)
            related = self.get(dep, other_end.replace("__c", "__r")) or {}
            links.append(
                DependencyLink(
                    ticket_id=str(other_id),
                    name=str(related.get("Name") or other_id),
                    dependency_id=str(dep.get("Id")),
                )
            )
        return tuple(links)

    def ticket(self, record: Mapping[str, Any]) -> Ticket:
        """Build a Ticket from one raw record.

        Raises:
            UnknownStageError: If the record's stage is not a lifecycle stage.
            RecordMappingError: If the id is missing or a value cannot be parsed.
        """
        ticket_id = self.get(record, FIELDS["id"])
        if not ticket_id:
            raise RecordMappingError("Record has no Id")

        raw_stage = self.get(record, FIELDS["stage"])
        if raw_stage is None:
            raise RecordMappingError(f"Record {ticket_id} has no stage")
        stage = Stage.parse(raw_stage)

        owner = record.get("Owner") or {}
        is_active = self.get(record, FIELDS["is_active"])

        return Ticket(
            id=str(ticket_id),
            name=str(self.get(record, FIELDS["name"]) or ticket_id),
            title=self.get(record, FIELDS["title"]) or "",
            description=self.get(record, FIELDS["description"]) or "",
            stage=stage,
            priority=_text(self.get(record, FIELDS["priority"])),
            intention=_text(self.get(record, FIELDS["intention"])),
            sort_order=_parse_number(self.get(record, FIELDS["sort_order"])),
            developer_days_size=_parse_number(self.get(record, FIELDS["developer_days_size"])),
            actual_hours=_parse_number(self.get(record, FIELDS["actual_hours"])),
            estimated_hours=_parse_number(self.get(record, FIELDS["estimated_hours"])),
            tags=_text(self.get(record, FIELDS["tags"])),
            created_date=_parse_datetime(self.get(record, FIELDS["created_date"])),
            projected_uat_date=_parse_date(self.get(record, FIELDS["projected_uat_date"])),
            stored_eta=_parse_date(self.get(record, FIELDS["stored_eta"])),
            developer=_text(self.get(record, FIELDS["developer"])),
            epic=_text(self.get(record, FIELDS["epic"])),
            owner_name=owner.get("Name") if isinstance(owner, Mapping) else None,
            is_active=True if is_active is None else bool(is_active),
            blocked_by=self._links(self.get(record, BLOCKED_BY_RELATION), BLOCKING_TICKET),
            blocking=self._links(self.get(record, BLOCKING_RELATION), BLOCKED_TICKET),
        )

    def tickets(self, records: Iterable[Mapping[str, Any]]) -> list[Ticket]:
        """Map many records, skipping (and logging) the ones that cannot be mapped."""
        tickets = []
        for record in records:
            try:
                tickets.append(self.ticket(record))
            except (StageError, RecordMappingError) as e:
                logger.warning("Skipping ticket record %s: %s", record.get("Id"), e)
        return tickets

    def to_record(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Translate canonical attribute names to backend field names.

        Unknown keys pass through unchanged.
        """
        record: dict[str, Any] = {}
        for key, value in fields.items():
            if isinstance(value, date):
                value = value.isoformat()
            record[FIELDS.get(key, key)] = value
        return record


def ticket_from_record(record: Mapping[str, Any]) -> Ticket:
    """Build a Ticket from one raw record with the default mapper."""
    return FieldMapper().ticket(record)


def eta_result_from_payload(payload: Mapping[str, Any] | None) -> ETAResult:
    """Parse the scheduler payload ``{tickets: [{ticketId, calculatedETA}], pushedBackTicketNumbers}``.

    Entries without a ticket id or date are dropped.
    """
    if not payload:
        return ETAResult()
    if not isinstance(payload, Mapping):
        raise RecordMappingError(f"ETA payload is not an object: {payload!r}")
    projections = []
    for entry in payload.get("tickets") or ():
        if not isinstance(entry, Mapping):
            raise RecordMappingError(f"ETA entry is not an object: {entry!r}")
        ticket_id = entry.get("ticketId")
        eta = _parse_date(entry.get("calculatedETA"))
        if ticket_id and eta is not None:
            projections.append(ETAProjection(ticket_id=str(ticket_id), calculated_eta=eta))
    pushed_back = [str(t) for t in payload.get("pushedBackTicketNumbers") or ()]
    return ETAResult(tickets=projections, pushed_back=pushed_back)


def field_spec_from_payload(payload: Mapping[str, Any]) -> FieldSpec:
    if not isinstance(payload, Mapping):
        raise RecordMappingError(f"Field spec is not an object: {payload!r}")
    name = payload.get("name") or payload.get("apiName")
    if not name:
        raise RecordMappingError(f"Field spec has no name: {payload!r}")
    return FieldSpec(
        name=str(name),
        label=str(payload.get("label") or name),
        field_type=str(payload.get("type") or payload.get("field_type") or "text"),
        required=bool(payload.get("required", True)),
    )


def blocker_from_payload(payload: Mapping[str, Any], mapper: FieldMapper | None = None) -> BlockerCandidate:
    if not isinstance(payload, Mapping):
        raise RecordMappingError(f"Blocker candidate is not an object: {payload!r}")
    mapper = mapper or FieldMapper()
    return BlockerCandidate(
        id=str(mapper.get(payload, FIELDS["id"])),
        name=str(mapper.get(payload, FIELDS["name"]) or ""),
        title=mapper.get(payload, FIELDS["title"]) or "",
        stage=_text(mapper.get(payload, FIELDS["stage"])),
    )

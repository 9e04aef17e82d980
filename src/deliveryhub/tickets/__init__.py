"""Tickets - canonical ticket models and raw-record ingestion."""

from deliveryhub.tickets.exceptions import RecordMappingError, TicketError
from deliveryhub.tickets.fields import (
    FIELDS,
    NAMESPACE_PREFIX,
    FieldMapper,
    blocker_from_payload,
    eta_result_from_payload,
    field_spec_from_payload,
    ticket_from_record,
)
from deliveryhub.tickets.models import (
    DEFAULT_PRIORITY,
    AiSuggestion,
    BlockerCandidate,
    Dependency,
    DependencyLink,
    ETAProjection,
    ETAResult,
    FieldSpec,
    Priority,
    Ticket,
    priority_rank,
)

__all__ = [
    "DEFAULT_PRIORITY",
    "FIELDS",
    "NAMESPACE_PREFIX",
    "AiSuggestion",
    "BlockerCandidate",
    "Dependency",
    "DependencyLink",
    "ETAProjection",
    "ETAResult",
    "FieldMapper",
    "FieldSpec",
    "Priority",
    "RecordMappingError",
    "Ticket",
    "TicketError",
    "blocker_from_payload",
    "eta_result_from_payload",
    "field_spec_from_payload",
    "priority_rank",
    "ticket_from_record",
]

"""Pydantic models for REST API."""

from datetime import date, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class NotificationResponse(BaseModel):
    """User-facing message attached to a response."""

    model_config = ConfigDict(from_attributes=True)

    title: str
    message: str
    severity: str


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None
    notification: NotificationResponse | None = None


# Board models


class ColumnStyleResponse(BaseModel):
    """Column header or option chip colours."""

    model_config = ConfigDict(from_attributes=True)

    bg: str
    color: str
    css: str


class DependencyLinkResponse(BaseModel):
    """The other end of a dependency edge."""

    model_config = ConfigDict(from_attributes=True)

    ticket_id: str
    name: str
    dependency_id: str


class TicketViewResponse(BaseModel):
    """A board card."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    title: str
    description: str
    stage: str
    priority: str | None
    intention: str | None
    sort_order: float | None
    size_display: str
    hours_display: str
    uat_display: str | None
    display_date: str
    date_label: str
    relative_days: int | None
    is_high_priority: bool
    priority_class: str
    owner_name: str | None
    developer: str | None
    epic: str | None
    tags: list[str]
    is_blocked_by: list[DependencyLinkResponse]
    is_blocking: list[DependencyLinkResponse]
    is_currently_blocked: bool


class ColumnResponse(BaseModel):
    """One board column with its cards."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    display_name: str
    member_stages: list[str]
    style: ColumnStyleResponse
    owner: str
    is_extended: bool
    tickets: list[TicketViewResponse]


class BoardResponse(BaseModel):
    """Columns of one persona view."""

    persona: str
    view: str
    columns: list[ColumnResponse]
    pushed_back: list[str]
    dev_count: int
    refreshed_at: datetime | None


class BoardConfigResponse(BaseModel):
    """Choices a board client needs to render its controls."""

    personas: list[str]
    views: dict[str, list[str]]
    view_labels: dict[str, str]
    intentions: list[str]


class DevCountUpdate(BaseModel):
    """Request model for changing the developer count."""

    dev_count: int = Field(..., ge=1, le=100)


class PrioritizeRequest(BaseModel):
    """Request model for prioritizing tickets in the ETA projection."""

    ticket_ids: list[str] = Field(default_factory=list)


# Transition models


class TransitionOptionResponse(BaseModel):
    """A move offered for the selected ticket."""

    model_config = ConfigDict(from_attributes=True)

    target: str
    label: str
    icon: str
    style: ColumnStyleResponse
    autofocus: bool


class TicketOptionsResponse(BaseModel):
    """Advance and backtrack moves."""

    model_config = ConfigDict(from_attributes=True)

    advance: list[TransitionOptionResponse]
    backtrack: list[TransitionOptionResponse]


class FieldSpecResponse(BaseModel):
    """A field required before a stage change."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    label: str
    field_type: str
    required: bool


class TransitionOutcomeResponse(BaseModel):
    """Result of a requested stage change."""

    model_config = ConfigDict(from_attributes=True)

    status: str
    ticket_id: str
    target_stage: str
    fields: list[FieldSpecResponse]
    comment_saved: bool | None


class TransitionRequest(BaseModel):
    """Request model for moving a ticket."""

    target_stage: str = Field(..., min_length=1)
    comment: str | None = None
    persona: str | None = None


class TransitionCompleteRequest(BaseModel):
    """Request model for saving required fields together with the move."""

    target_stage: str = Field(..., min_length=1)
    values: dict[str, Any] = Field(default_factory=dict)
    comment: str | None = None


class DropRequest(BaseModel):
    """Request model for a drag-and-drop."""

    persona: str
    view: str = "all"
    show_extended: bool = False
    intention: str | None = None
    source_column: str
    target_column: str
    drop_index: int | None = Field(default=None, ge=0)


# Ticket models


class TicketResponse(BaseModel):
    """Response model for a stored ticket."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    title: str
    description: str
    stage: str
    priority: str | None
    intention: str | None
    sort_order: float | None
    stored_eta: date | None


class TicketCreate(BaseModel):
    """Request model for creating a ticket."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    priority: str | None = Field(default=None, max_length=20)
    intention: str | None = Field(default=None, max_length=50)
    file_ids: list[str] = Field(default_factory=list)


class EnhanceRequest(BaseModel):
    """Request model for AI enhancement of a draft ticket."""

    title: str = ""
    description: str = ""


class AiSuggestionResponse(BaseModel):
    """Rewritten ticket text."""

    model_config = ConfigDict(from_attributes=True)

    title: str | None
    description: str | None
    estimated_days: float | None


# Dependency models


class BlockerCandidateResponse(BaseModel):
    """Search hit when adding a blocker."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    title: str
    stage: str | None


class BlockerCreate(BaseModel):
    """Request model for adding a blocking ticket."""

    blocking_ticket_id: str = Field(..., min_length=1)


class DependencyResponse(BaseModel):
    """Response model for a dependency edge."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    blocking_ticket_id: str
    blocked_ticket_id: str


def action_response(result: Any, data: Any = None) -> APIResponse[Any]:
    """Wrap a board ActionResult; failed actions carry their message as ``error``."""
    notification = None
    if result.notification is not None:
        notification = NotificationResponse.model_validate(result.notification)
    error = None
    if not result.success:
        error = notification.message if notification else "Action failed"
    return APIResponse(data=data, error=error, notification=notification)

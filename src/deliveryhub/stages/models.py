"""Data models for the stage lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from deliveryhub.stages.exceptions import UnknownPersonaError, UnknownStageError


class Stage(StrEnum):
    """Delivery lifecycle stage.

    Values are the labels stored on ticket records, so they double as the
    wire format.
    """

    BACKLOG = "Backlog"
    SCOPING_IN_PROGRESS = "Scoping In Progress"
    CLARIFICATION_REQUESTED = "Clarification Requested (Pre-Dev)"
    PROVIDING_CLARIFICATION = "Providing Clarification"
    READY_FOR_SIZING = "Ready for Sizing"
    SIZING_UNDERWAY = "Sizing Underway"
    READY_FOR_PRIORITIZATION = "Ready for Prioritization"
    PRIORITIZING = "Prioritizing"
    PROPOSAL_REQUESTED = "Proposal Requested"
    DRAFTING_PROPOSAL = "Drafting Proposal"
    READY_FOR_TECH_REVIEW = "Ready for Tech Review"
    TECH_REVIEWING = "Tech Reviewing"
    READY_FOR_CLIENT_APPROVAL = "Ready for Client Approval"
    IN_CLIENT_APPROVAL = "In Client Approval"
    READY_FOR_DEVELOPMENT = "Ready for Development"
    IN_DEVELOPMENT = "In Development"
    DEV_CLARIFICATION_REQUESTED = "Dev Clarification Requested"
    PROVIDING_DEV_CLARIFICATION = "Providing Dev Clarification"
    BACK_FOR_DEVELOPMENT = "Back For Development"
    DEV_BLOCKED = "Dev Blocked"
    READY_FOR_SCRATCH_TEST = "Ready for Scratch Test"
    SCRATCH_TESTING = "Scratch Testing"
    READY_FOR_QA = "Ready for QA"
    QA_IN_PROGRESS = "QA In Progress"
    READY_FOR_INTERNAL_UAT = "Ready for Internal UAT"
    INTERNAL_UAT = "Internal UAT"
    READY_FOR_CLIENT_UAT = "Ready for Client UAT"
    IN_CLIENT_UAT = "In Client UAT"
    READY_FOR_UAT_SIGN_OFF = "Ready for UAT Sign-off"
    PROCESSING_SIGN_OFF = "Processing Sign-off"
    READY_FOR_MERGE = "Ready for Merge"
    MERGING = "Merging"
    READY_FOR_DEPLOYMENT = "Ready for Deployment"
    DEPLOYING = "Deploying"
    DEPLOYED_TO_PROD = "Deployed to Prod"
    DONE = "Done"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, value: str | Stage) -> Stage:
        """Convert a stage label into a Stage.

        Raises:
            UnknownStageError: If the label is not a lifecycle stage.
        """
        if isinstance(value, Stage):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownStageError(f"Unknown stage: {value!r}") from None

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STAGES


TERMINAL_STAGES = frozenset({Stage.DONE, Stage.CANCELLED})


class Persona(StrEnum):
    """User role selecting which board configuration tables apply."""

    CLIENT = "Client"
    CONSULTANT = "Consultant"
    DEVELOPER = "Developer"
    QA = "QA"

    @classmethod
    def parse(cls, value: str | Persona) -> Persona:
        """Convert a persona name into a Persona (case-insensitive)."""
        if isinstance(value, Persona):
            return value
        for persona in cls:
            if persona.value.lower() == str(value).strip().lower():
                return persona
        raise UnknownPersonaError(f"Unknown persona: {value!r}")


@dataclass(frozen=True)
class ColumnStyle:
    """Background/foreground colours for a column header or option chip."""

    bg: str
    color: str

    @property
    def css(self) -> str:
        return f"background:{self.bg};color:{self.color};"


# Neutral styles used when no entry is registered for a key
NEUTRAL_OPTION_STYLE = ColumnStyle(bg="#e0e0e0", color="#222")
NEUTRAL_COLUMN_STYLE = ColumnStyle(bg="#ffffff", color="#11182c")


@dataclass(frozen=True)
class OptionOverride:
    """Persona-specific decoration for a single transition edge.

    Any attribute left as None falls back to the default decoration.
    """

    label: str | None = None
    icon: str | None = None
    style: ColumnStyle | None = None
    autofocus: bool = False


@dataclass(frozen=True)
class TransitionOption:
    """A legal move offered to the user for the selected ticket.

    Attributes:
        target: Stage the ticket would move to.
        label: Button text.
        icon: Emoji shown beside the label.
        style: Chip colours.
        autofocus: Whether the option should receive initial focus.
    """

    target: Stage
    label: str
    icon: str
    style: ColumnStyle
    autofocus: bool = False

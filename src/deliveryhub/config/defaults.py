"""Built-in board configuration tables."""

from __future__ import annotations

from types import MappingProxyType

from deliveryhub.config.models import BoardConfig, PersonaLayout
from deliveryhub.stages import ColumnStyle, OptionOverride, Persona, Stage, StageGraph

S = Stage

# Forward and lateral moves, including fast-forwards to later queue states
ADVANCE_EDGES: dict[Stage, list[Stage]] = {
    S.BACKLOG: [S.SCOPING_IN_PROGRESS, S.READY_FOR_SIZING, S.READY_FOR_PRIORITIZATION],
    S.SCOPING_IN_PROGRESS: [
        S.CLARIFICATION_REQUESTED,
        S.READY_FOR_SIZING,
        S.READY_FOR_PRIORITIZATION,
    ],
    S.CLARIFICATION_REQUESTED: [
        S.PROVIDING_CLARIFICATION,
        S.READY_FOR_SIZING,
        S.READY_FOR_TECH_REVIEW,
    ],
    S.PROVIDING_CLARIFICATION: [
        S.READY_FOR_SIZING,
        S.READY_FOR_PRIORITIZATION,
        S.READY_FOR_TECH_REVIEW,
    ],
    S.READY_FOR_SIZING: [
        S.SIZING_UNDERWAY,
        S.READY_FOR_PRIORITIZATION,
        S.READY_FOR_TECH_REVIEW,
        S.READY_FOR_CLIENT_APPROVAL,
    ],
    S.SIZING_UNDERWAY: [
        S.READY_FOR_PRIORITIZATION,
        S.PROPOSAL_REQUESTED,
        S.READY_FOR_TECH_REVIEW,
        S.READY_FOR_CLIENT_APPROVAL,
    ],
    S.READY_FOR_PRIORITIZATION: [
        S.PRIORITIZING,
        S.READY_FOR_DEVELOPMENT,
        S.READY_FOR_TECH_REVIEW,
    ],
    S.PRIORITIZING: [S.PROPOSAL_REQUESTED, S.READY_FOR_TECH_REVIEW, S.READY_FOR_DEVELOPMENT],
    S.PROPOSAL_REQUESTED: [S.DRAFTING_PROPOSAL],
    S.DRAFTING_PROPOSAL: [S.READY_FOR_TECH_REVIEW, S.READY_FOR_PRIORITIZATION],
    S.READY_FOR_TECH_REVIEW: [
        S.TECH_REVIEWING,
        S.READY_FOR_CLIENT_APPROVAL,
        S.READY_FOR_DEVELOPMENT,
    ],
    S.TECH_REVIEWING: [S.READY_FOR_CLIENT_APPROVAL, S.READY_FOR_DEVELOPMENT],
    S.READY_FOR_CLIENT_APPROVAL: [S.IN_CLIENT_APPROVAL, S.READY_FOR_DEVELOPMENT],
    S.IN_CLIENT_APPROVAL: [S.READY_FOR_DEVELOPMENT],
    S.READY_FOR_DEVELOPMENT: [S.IN_DEVELOPMENT],
    S.IN_DEVELOPMENT: [
        S.DEV_CLARIFICATION_REQUESTED,
        S.DEV_BLOCKED,
        S.READY_FOR_SCRATCH_TEST,
        S.READY_FOR_QA,
        S.READY_FOR_DEPLOYMENT,
    ],
    S.DEV_CLARIFICATION_REQUESTED: [S.PROVIDING_DEV_CLARIFICATION],
    S.PROVIDING_DEV_CLARIFICATION: [S.BACK_FOR_DEVELOPMENT],
    S.BACK_FOR_DEVELOPMENT: [S.IN_DEVELOPMENT],
    S.DEV_BLOCKED: [S.IN_DEVELOPMENT, S.PROVIDING_DEV_CLARIFICATION],
    S.READY_FOR_SCRATCH_TEST: [
        S.SCRATCH_TESTING,
        S.READY_FOR_QA,
        S.READY_FOR_INTERNAL_UAT,
        S.READY_FOR_CLIENT_UAT,
    ],
    S.SCRATCH_TESTING: [
        S.READY_FOR_QA,
        S.READY_FOR_INTERNAL_UAT,
        S.READY_FOR_CLIENT_UAT,
        S.BACK_FOR_DEVELOPMENT,
    ],
    S.READY_FOR_QA: [S.QA_IN_PROGRESS, S.READY_FOR_INTERNAL_UAT, S.READY_FOR_CLIENT_UAT],
    S.QA_IN_PROGRESS: [S.READY_FOR_INTERNAL_UAT, S.READY_FOR_CLIENT_UAT, S.BACK_FOR_DEVELOPMENT],
    S.READY_FOR_INTERNAL_UAT: [S.INTERNAL_UAT, S.READY_FOR_CLIENT_UAT],
    S.INTERNAL_UAT: [S.READY_FOR_CLIENT_UAT, S.BACK_FOR_DEVELOPMENT],
    S.READY_FOR_CLIENT_UAT: [
        S.IN_CLIENT_UAT,
        S.READY_FOR_UAT_SIGN_OFF,
        S.READY_FOR_MERGE,
        S.READY_FOR_DEPLOYMENT,
    ],
    S.IN_CLIENT_UAT: [
        S.READY_FOR_UAT_SIGN_OFF,
        S.READY_FOR_MERGE,
        S.READY_FOR_DEPLOYMENT,
        S.BACK_FOR_DEVELOPMENT,
    ],
    S.READY_FOR_UAT_SIGN_OFF: [S.PROCESSING_SIGN_OFF, S.READY_FOR_MERGE, S.READY_FOR_DEPLOYMENT],
    S.PROCESSING_SIGN_OFF: [S.READY_FOR_MERGE, S.READY_FOR_DEPLOYMENT, S.BACK_FOR_DEVELOPMENT],
    S.READY_FOR_MERGE: [S.MERGING, S.READY_FOR_DEPLOYMENT],
    S.MERGING: [S.READY_FOR_DEPLOYMENT],
    S.READY_FOR_DEPLOYMENT: [S.DEPLOYING],
    S.DEPLOYING: [S.DEPLOYED_TO_PROD],
    S.DEPLOYED_TO_PROD: [S.DONE],
    S.DONE: [],
    S.CANCELLED: [S.BACKLOG, S.READY_FOR_SIZING],
}

BACKTRACK_EDGES: dict[Stage, list[Stage]] = {
    S.BACKLOG: [S.CANCELLED],
    S.SCOPING_IN_PROGRESS: [S.BACKLOG, S.CANCELLED],
    S.CLARIFICATION_REQUESTED: [S.BACKLOG, S.CANCELLED],
    S.PROVIDING_CLARIFICATION: [S.CLARIFICATION_REQUESTED, S.BACKLOG, S.CANCELLED],
    S.READY_FOR_SIZING: [S.CLARIFICATION_REQUESTED, S.BACKLOG, S.CANCELLED],
    S.SIZING_UNDERWAY: [S.READY_FOR_SIZING, S.BACKLOG, S.CANCELLED],
    S.READY_FOR_PRIORITIZATION: [S.READY_FOR_SIZING, S.BACKLOG, S.CANCELLED],
    S.PRIORITIZING: [S.READY_FOR_PRIORITIZATION, S.CANCELLED],
    S.PROPOSAL_REQUESTED: [S.READY_FOR_PRIORITIZATION, S.READY_FOR_SIZING, S.CANCELLED],
    S.DRAFTING_PROPOSAL: [S.PROPOSAL_REQUESTED, S.CANCELLED],
    S.READY_FOR_TECH_REVIEW: [S.PROPOSAL_REQUESTED, S.READY_FOR_PRIORITIZATION, S.CANCELLED],
    S.TECH_REVIEWING: [S.READY_FOR_TECH_REVIEW, S.CANCELLED],
    S.READY_FOR_CLIENT_APPROVAL: [S.READY_FOR_TECH_REVIEW, S.CANCELLED],
    S.IN_CLIENT_APPROVAL: [S.READY_FOR_CLIENT_APPROVAL, S.CANCELLED],
    S.READY_FOR_DEVELOPMENT: [
        S.IN_CLIENT_APPROVAL,
        S.READY_FOR_CLIENT_APPROVAL,
        S.READY_FOR_TECH_REVIEW,
        S.CANCELLED,
    ],
    S.IN_DEVELOPMENT: [S.READY_FOR_DEVELOPMENT, S.CANCELLED],
    S.DEV_CLARIFICATION_REQUESTED: [S.IN_DEVELOPMENT, S.CANCELLED],
    S.PROVIDING_DEV_CLARIFICATION: [S.DEV_CLARIFICATION_REQUESTED, S.CANCELLED],
    S.BACK_FOR_DEVELOPMENT: [S.DEV_CLARIFICATION_REQUESTED, S.READY_FOR_DEVELOPMENT, S.CANCELLED],
    S.DEV_BLOCKED: [S.IN_DEVELOPMENT, S.CANCELLED],
    S.READY_FOR_SCRATCH_TEST: [S.IN_DEVELOPMENT, S.CANCELLED],
    S.SCRATCH_TESTING: [S.READY_FOR_SCRATCH_TEST, S.READY_FOR_DEVELOPMENT, S.CANCELLED],
    S.READY_FOR_QA: [S.READY_FOR_SCRATCH_TEST, S.CANCELLED],
    S.QA_IN_PROGRESS: [S.READY_FOR_QA, S.READY_FOR_SCRATCH_TEST, S.CANCELLED],
    S.READY_FOR_INTERNAL_UAT: [S.READY_FOR_QA, S.CANCELLED],
    S.INTERNAL_UAT: [S.READY_FOR_INTERNAL_UAT, S.READY_FOR_QA, S.CANCELLED],
    S.READY_FOR_CLIENT_UAT: [S.READY_FOR_INTERNAL_UAT, S.READY_FOR_DEVELOPMENT, S.CANCELLED],
    S.IN_CLIENT_UAT: [S.READY_FOR_CLIENT_UAT, S.READY_FOR_INTERNAL_UAT, S.CANCELLED],
    S.READY_FOR_UAT_SIGN_OFF: [S.IN_CLIENT_UAT, S.CANCELLED],
    S.PROCESSING_SIGN_OFF: [S.READY_FOR_UAT_SIGN_OFF, S.READY_FOR_DEVELOPMENT, S.CANCELLED],
    S.READY_FOR_MERGE: [
        S.PROCESSING_SIGN_OFF,
        S.READY_FOR_CLIENT_UAT,
        S.READY_FOR_DEVELOPMENT,
        S.CANCELLED,
    ],
    S.MERGING: [S.READY_FOR_MERGE, S.CANCELLED],
    S.READY_FOR_DEPLOYMENT: [S.READY_FOR_MERGE, S.READY_FOR_CLIENT_UAT, S.CANCELLED],
    S.DEPLOYING: [S.READY_FOR_DEPLOYMENT, S.CANCELLED],
    S.DEPLOYED_TO_PROD: [S.READY_FOR_DEPLOYMENT, S.READY_FOR_CLIENT_UAT, S.CANCELLED],
    S.DONE: [S.DEPLOYED_TO_PROD, S.CANCELLED],
    S.CANCELLED: [S.BACKLOG, S.READY_FOR_SIZING, S.READY_FOR_DEVELOPMENT],
}

# Client-facing wording for the approval and UAT hand-offs
ADVANCE_OVERRIDES = {
    Persona.CLIENT: {
        S.IN_CLIENT_APPROVAL: {
            S.READY_FOR_DEVELOPMENT: OptionOverride(
                label="Approve for Development", icon="✅", autofocus=True
            ),
        },
        S.IN_CLIENT_UAT: {
            S.READY_FOR_UAT_SIGN_OFF: OptionOverride(label="Accept UAT", icon="✅", autofocus=True),
        },
    },
}

BACKTRACK_OVERRIDES: dict = {}


def _style(bg: str, color: str) -> ColumnStyle:
    return ColumnStyle(bg=bg, color=color)


_GREY = _style("rgba(243, 244, 246, 0.8)", "#1F2937")
_AMBER = _style("rgba(254, 243, 199, 0.5)", "#D97706")
_RED = _style("rgba(254, 226, 226, 0.5)", "#DC2626")
_SKY = _style("rgba(224, 242, 254, 0.5)", "#0284C7")
_ORANGE = _style("rgba(255, 237, 213, 0.5)", "#EA580C")
_GREEN = _style("rgba(220, 252, 231, 0.5)", "#16A34A")
_DEV = _style("rgba(255, 145, 0, 0.3)", "#C2410C")
_BLOCKED = _style("rgba(254, 202, 202, 0.6)", "#991B1B")
_QA = _style("rgba(219, 234, 254, 0.5)", "#1E40AF")
_QA_ACTIVE = _style("rgba(191, 219, 254, 0.5)", "#1D4ED8")
_UAT = _style("rgba(191, 219, 254, 0.5)", "#2563EB")
_SIGN_OFF = _style("rgba(221, 214, 254, 0.5)", "#7C3AED")
_DEPLOY = _style("rgba(237, 233, 254, 0.5)", "#6D28D9")

COLUMN_STYLES: dict[str, ColumnStyle] = {
    "Backlog": _GREY,
    "Scoping": _AMBER,
    "Clarification Requested": _RED,
    "Providing Clarification": _RED,
    "Clarification": _RED,
    "Ready for Sizing": _SKY,
    "Sizing Underway": _ORANGE,
    "Sizing": _ORANGE,
    "Estimation": _ORANGE,
    "Ready for Prioritization": _SKY,
    "Prioritizing": _SKY,
    "Prioritization": _SKY,
    "Proposal Requested": _ORANGE,
    "Drafting Proposal": _ORANGE,
    "Proposal": _ORANGE,
    "Dev Approval": _AMBER,
    "Ready for Client Approval": _AMBER,
    "In Client Approval": _AMBER,
    "Client Approval": _AMBER,
    "Ready for Development": _GREEN,
    "Dev Queue": _GREEN,
    "In Development": _DEV,
    "Dev Work": _DEV,
    "Rework": _BLOCKED,
    "Blocked": _BLOCKED,
    "Dev Clarification Requested": _RED,
    "Providing Dev Clarification": _RED,
    "Dev Clarification": _RED,
    "Ready for Scratch Test": _QA,
    "Scratch Testing": _QA,
    "Ready for QA": _QA,
    "QA In Progress": _QA_ACTIVE,
    "Ready for Internal UAT": _QA,
    "Internal UAT": _QA_ACTIVE,
    "QA & Review": _style("rgba(219, 234, 254, 0.5)", "#1D4ED8"),
    "QA": _QA,
    "Client UAT": _UAT,
    "UAT": _UAT,
    "Ready for Client UAT": _UAT,
    "In Client UAT": _UAT,
    "Ready for UAT Sign-off": _SIGN_OFF,
    "Processing Sign-off": _SIGN_OFF,
    "Deployment Prep": _SIGN_OFF,
    "Deployment": _DEPLOY,
    "Ready for Merge": _DEPLOY,
    "Merging": _DEPLOY,
    "Ready for Deployment": _DEPLOY,
    "Deploying": _DEPLOY,
    "Deployed": _style("rgba(209, 250, 229, 0.5)", "#059669"),
    "Done": _style("rgba(229, 231, 235, 0.5)", "#374151"),
    "Cancelled": _style("rgba(229, 231, 235, 0.5)", "#6B7280"),
}

# Only keys whose display text differs from the key itself
DISPLAY_NAMES: dict[str, str] = {
    "Clarification Requested (Pre-Dev)": "Clarification Requested",
    "Dev Work": "Active Dev",
    "Blocked": "⛔ Blocked",
    "Scoping In Progress": "Active Scoping",
    "Ready for Development": "Dev Queue",
    "Back For Development": "Rework",
    "Dev Blocked": "Blocked",
    "Intake": "Intake Queue",
    "Clarification (In-Dev)": "Dev Clarification",
    "Ready for Scratch Test": "To Scratch Test",
    "Ready for QA": "To QA",
    "QA In Progress": "QA",
    "Ready for Internal UAT": "To Internal UAT",
    "Ready for Merge": "To Merge",
    "Ready for Deployment": "To Deploy",
    "Pending Tech Approval": "Tech Approval",
    "Pending Client Approval": "Client Approval",
}

STAGE_OWNERS: dict[Stage, str] = {
    S.BACKLOG: "Consultant",
    S.SCOPING_IN_PROGRESS: "Consultant",
    S.CLARIFICATION_REQUESTED: "Client",
    S.PROVIDING_CLARIFICATION: "Client",
    S.READY_FOR_SIZING: "Developer",
    S.SIZING_UNDERWAY: "Developer",
    S.READY_FOR_PRIORITIZATION: "Client",
    S.PRIORITIZING: "Client",
    S.PROPOSAL_REQUESTED: "Developer",
    S.DRAFTING_PROPOSAL: "Developer",
    S.READY_FOR_TECH_REVIEW: "Consultant",
    S.TECH_REVIEWING: "Consultant",
    S.READY_FOR_CLIENT_APPROVAL: "Client",
    S.IN_CLIENT_APPROVAL: "Client",
    S.READY_FOR_DEVELOPMENT: "Developer",
    S.IN_DEVELOPMENT: "Developer",
    S.DEV_CLARIFICATION_REQUESTED: "Client",
    S.PROVIDING_DEV_CLARIFICATION: "Client",
    S.BACK_FOR_DEVELOPMENT: "Developer",
    S.DEV_BLOCKED: "Developer",
    S.READY_FOR_SCRATCH_TEST: "QA",
    S.SCRATCH_TESTING: "QA",
    S.READY_FOR_QA: "QA",
    S.QA_IN_PROGRESS: "QA",
    S.READY_FOR_INTERNAL_UAT: "Consultant",
    S.INTERNAL_UAT: "Consultant",
    S.READY_FOR_CLIENT_UAT: "Client",
    S.IN_CLIENT_UAT: "Client",
    S.READY_FOR_UAT_SIGN_OFF: "Client",
    S.PROCESSING_SIGN_OFF: "Client",
    S.READY_FOR_MERGE: "Consultant",
    S.MERGING: "Consultant",
    S.READY_FOR_DEPLOYMENT: "Consultant",
    S.DEPLOYING: "Consultant",
    S.DEPLOYED_TO_PROD: "System",
    S.DONE: "All",
    S.CANCELLED: "All",
}

VIEW_LABELS = {
    "all": "All",
    "predev": "Pre-Dev",
    "indev": "In-Dev & Review",
    "deployed": "Deployed/Done",
}

INTENTIONS = ("Will Do", "Sizing Only")

_IN_DEV = [
    S.READY_FOR_DEVELOPMENT,
    S.IN_DEVELOPMENT,
    S.BACK_FOR_DEVELOPMENT,
    S.DEV_BLOCKED,
    S.DEV_CLARIFICATION_REQUESTED,
    S.PROVIDING_DEV_CLARIFICATION,
]
_QA_STAGES = [
    S.READY_FOR_SCRATCH_TEST,
    S.SCRATCH_TESTING,
    S.READY_FOR_QA,
    S.QA_IN_PROGRESS,
    S.READY_FOR_INTERNAL_UAT,
    S.INTERNAL_UAT,
]
_UAT_STAGES = [
    S.READY_FOR_CLIENT_UAT,
    S.IN_CLIENT_UAT,
    S.READY_FOR_UAT_SIGN_OFF,
    S.PROCESSING_SIGN_OFF,
]
_DEPLOY_STAGES = [S.READY_FOR_MERGE, S.MERGING, S.READY_FOR_DEPLOYMENT, S.DEPLOYING]
_CLOSED = [S.DONE, S.CANCELLED]

CLIENT_LAYOUT = PersonaLayout.build(
    column_to_stages={
        "Backlog": [S.BACKLOG],
        "Scoping": [S.SCOPING_IN_PROGRESS],
        "Clarification Requested (Pre-Dev)": [S.CLARIFICATION_REQUESTED],
        "Providing Clarification": [S.PROVIDING_CLARIFICATION],
        "Estimation": [S.READY_FOR_SIZING, S.SIZING_UNDERWAY],
        "Ready for Prioritization": [S.READY_FOR_PRIORITIZATION],
        "Prioritizing": [S.PRIORITIZING],
        "Proposal": [S.PROPOSAL_REQUESTED, S.DRAFTING_PROPOSAL],
        "Dev Approval": [S.READY_FOR_TECH_REVIEW, S.TECH_REVIEWING],
        "Ready for Client Approval": [S.READY_FOR_CLIENT_APPROVAL],
        "In Client Approval": [S.IN_CLIENT_APPROVAL],
        "In Development": _IN_DEV,
        "QA & Review": _QA_STAGES,
        "Ready for Client UAT": [S.READY_FOR_CLIENT_UAT],
        "In Client UAT": [S.IN_CLIENT_UAT],
        "Deployment Prep": [S.READY_FOR_UAT_SIGN_OFF, S.PROCESSING_SIGN_OFF, *_DEPLOY_STAGES],
        "Deployed": [S.DEPLOYED_TO_PROD],
        "Done": _CLOSED,
    },
    column_is_extended={
        "Proposal": True,
        "Dev Approval": True,
        "QA & Review": True,
        "Deployment Prep": True,
        "Done": True,
    },
    board_views={
        "all": [
            "Backlog",
            "Scoping",
            "Clarification Requested (Pre-Dev)",
            "Providing Clarification",
            "Estimation",
            "Ready for Prioritization",
            "Prioritizing",
            "Proposal",
            "Dev Approval",
            "Ready for Client Approval",
            "In Client Approval",
            "In Development",
            "QA & Review",
            "Ready for Client UAT",
            "In Client UAT",
            "Deployment Prep",
            "Deployed",
            "Done",
        ],
        "predev": [
            "Backlog",
            "Scoping",
            "Clarification Requested (Pre-Dev)",
            "Providing Clarification",
            "Estimation",
            "Ready for Prioritization",
            "Prioritizing",
            "Proposal",
        ],
        "indev": [
            "Dev Approval",
            "Ready for Client Approval",
            "In Client Approval",
            "In Development",
            "QA & Review",
        ],
        "deployed": ["Ready for Client UAT", "In Client UAT", "Deployment Prep", "Deployed", "Done"],
    },
)

CONSULTANT_LAYOUT = PersonaLayout.build(
    column_to_stages={
        "Backlog": [S.BACKLOG],
        "Scoping In Progress": [S.SCOPING_IN_PROGRESS],
        "Clarification Requested (Pre-Dev)": [S.CLARIFICATION_REQUESTED],
        "Providing Clarification": [S.PROVIDING_CLARIFICATION],
        "Ready for Sizing": [S.READY_FOR_SIZING],
        "Sizing Underway": [S.SIZING_UNDERWAY],
        "Ready for Prioritization": [S.READY_FOR_PRIORITIZATION],
        "Prioritizing": [S.PRIORITIZING],
        "Proposal Requested": [S.PROPOSAL_REQUESTED],
        "Drafting Proposal": [S.DRAFTING_PROPOSAL],
        "Ready for Tech Review": [S.READY_FOR_TECH_REVIEW],
        "Tech Reviewing": [S.TECH_REVIEWING],
        "Client Approval": [S.READY_FOR_CLIENT_APPROVAL, S.IN_CLIENT_APPROVAL],
        "Dev Queue": [S.READY_FOR_DEVELOPMENT],
        "Dev Work": [S.IN_DEVELOPMENT],
        "Rework": [S.BACK_FOR_DEVELOPMENT],
        "Blocked": [S.DEV_BLOCKED],
        "Dev Clarification": [S.DEV_CLARIFICATION_REQUESTED, S.PROVIDING_DEV_CLARIFICATION],
        "Ready for Scratch Test": [S.READY_FOR_SCRATCH_TEST],
        "Scratch Testing": [S.SCRATCH_TESTING],
        "Ready for QA": [S.READY_FOR_QA],
        "QA In Progress": [S.QA_IN_PROGRESS],
        "Ready for Internal UAT": [S.READY_FOR_INTERNAL_UAT],
        "Internal UAT": [S.INTERNAL_UAT],
        "Client UAT": [S.READY_FOR_CLIENT_UAT, S.IN_CLIENT_UAT],
        "Ready for UAT Sign-off": [S.READY_FOR_UAT_SIGN_OFF],
        "Processing Sign-off": [S.PROCESSING_SIGN_OFF],
        "Ready for Merge": [S.READY_FOR_MERGE],
        "Merging": [S.MERGING],
        "Ready for Deployment": [S.READY_FOR_DEPLOYMENT],
        "Deploying": [S.DEPLOYING],
        "Deployed": [S.DEPLOYED_TO_PROD],
        "Done": _CLOSED,
    },
    column_is_extended={
        "Client Approval": True,
        "Client UAT": True,
        "Ready for UAT Sign-off": True,
        "Processing Sign-off": True,
        "Ready for Merge": True,
        "Merging": True,
        "Ready for Deployment": True,
        "Deploying": True,
    },
    board_views={
        "all": [
            "Backlog",
            "Scoping In Progress",
            "Clarification Requested (Pre-Dev)",
            "Providing Clarification",
            "Ready for Sizing",
            "Sizing Underway",
            "Ready for Prioritization",
            "Prioritizing",
            "Proposal Requested",
            "Drafting Proposal",
            "Ready for Tech Review",
            "Tech Reviewing",
            "Client Approval",
            "Dev Queue",
            "Dev Work",
            "Rework",
            "Blocked",
            "Dev Clarification",
            "Ready for Scratch Test",
            "Scratch Testing",
            "Ready for QA",
            "QA In Progress",
            "Ready for Internal UAT",
            "Internal UAT",
            "Client UAT",
            "Ready for UAT Sign-off",
            "Processing Sign-off",
            "Ready for Merge",
            "Merging",
            "Ready for Deployment",
            "Deploying",
            "Deployed",
            "Done",
        ],
        "predev": [
            "Backlog",
            "Scoping In Progress",
            "Clarification Requested (Pre-Dev)",
            "Providing Clarification",
            "Ready for Sizing",
            "Sizing Underway",
            "Ready for Prioritization",
            "Prioritizing",
            "Proposal Requested",
            "Drafting Proposal",
        ],
        "indev": [
            "Ready for Tech Review",
            "Tech Reviewing",
            "Client Approval",
            "Dev Queue",
            "Dev Work",
            "Rework",
            "Blocked",
            "Dev Clarification",
            "Ready for Scratch Test",
            "Scratch Testing",
            "Ready for QA",
            "QA In Progress",
        ],
        "deployed": [
            "Ready for Internal UAT",
            "Internal UAT",
            "Client UAT",
            "Ready for UAT Sign-off",
            "Processing Sign-off",
            "Ready for Merge",
            "Merging",
            "Ready for Deployment",
            "Deploying",
            "Deployed",
            "Done",
        ],
    },
)

DEVELOPER_LAYOUT = PersonaLayout.build(
    column_to_stages={
        "Backlog": [S.BACKLOG, S.SCOPING_IN_PROGRESS],
        "Clarification": [S.CLARIFICATION_REQUESTED, S.PROVIDING_CLARIFICATION],
        "Ready for Sizing": [S.READY_FOR_SIZING],
        "Sizing Underway": [S.SIZING_UNDERWAY],
        "Prioritization": [S.READY_FOR_PRIORITIZATION, S.PRIORITIZING],
        "Proposal Requested": [S.PROPOSAL_REQUESTED],
        "Drafting Proposal": [S.DRAFTING_PROPOSAL],
        "Ready for Tech Review": [S.READY_FOR_TECH_REVIEW],
        "Tech Reviewing": [S.TECH_REVIEWING],
        "Client Approval": [S.READY_FOR_CLIENT_APPROVAL, S.IN_CLIENT_APPROVAL],
        "Dev Queue": [S.READY_FOR_DEVELOPMENT],
        "Dev Work": [S.IN_DEVELOPMENT],
        "Rework": [S.BACK_FOR_DEVELOPMENT],
        "Blocked": [S.DEV_BLOCKED],
        "Dev Clarification": [S.DEV_CLARIFICATION_REQUESTED, S.PROVIDING_DEV_CLARIFICATION],
        "QA": _QA_STAGES,
        "UAT": _UAT_STAGES,
        "Deployment": _DEPLOY_STAGES,
        "Deployed": [S.DEPLOYED_TO_PROD],
        "Done": _CLOSED,
    },
    column_is_extended={
        "Backlog": True,
        "Clarification": True,
        "Prioritization": True,
        "Client Approval": True,
        "QA": True,
        "UAT": True,
        "Deployment": True,
        "Deployed": True,
        "Done": True,
    },
    board_views={
        "all": [
            "Backlog",
            "Clarification",
            "Ready for Sizing",
            "Sizing Underway",
            "Prioritization",
            "Proposal Requested",
            "Drafting Proposal",
            "Ready for Tech Review",
            "Tech Reviewing",
            "Client Approval",
            "Dev Queue",
            "Dev Work",
            "Rework",
            "Blocked",
            "Dev Clarification",
            "QA",
            "UAT",
            "Deployment",
            "Deployed",
            "Done",
        ],
        "predev": [
            "Backlog",
            "Clarification",
            "Ready for Sizing",
            "Sizing Underway",
            "Prioritization",
            "Proposal Requested",
            "Drafting Proposal",
        ],
        "indev": [
            "Ready for Tech Review",
            "Tech Reviewing",
            "Client Approval",
            "Dev Queue",
            "Dev Work",
            "Rework",
            "Blocked",
            "Dev Clarification",
        ],
        "deployed": ["QA", "UAT", "Deployment", "Deployed", "Done"],
    },
)

QA_LAYOUT = PersonaLayout.build(
    column_to_stages={
        "Backlog": [S.BACKLOG, S.SCOPING_IN_PROGRESS],
        "Clarification": [S.CLARIFICATION_REQUESTED, S.PROVIDING_CLARIFICATION],
        "Sizing": [S.READY_FOR_SIZING, S.SIZING_UNDERWAY],
        "Prioritization": [
            S.READY_FOR_PRIORITIZATION,
            S.PRIORITIZING,
            S.PROPOSAL_REQUESTED,
            S.DRAFTING_PROPOSAL,
        ],
        "Dev Approval": [S.READY_FOR_TECH_REVIEW, S.TECH_REVIEWING],
        "Client Approval": [S.READY_FOR_CLIENT_APPROVAL, S.IN_CLIENT_APPROVAL],
        "Dev Queue": [S.READY_FOR_DEVELOPMENT],
        "Dev Work": _IN_DEV[1:],
        "Ready for Scratch Test": [S.READY_FOR_SCRATCH_TEST],
        "Scratch Testing": [S.SCRATCH_TESTING],
        "Ready for QA": [S.READY_FOR_QA],
        "QA In Progress": [S.QA_IN_PROGRESS],
        "Ready for Internal UAT": [S.READY_FOR_INTERNAL_UAT],
        "Internal UAT": [S.INTERNAL_UAT],
        "UAT": _UAT_STAGES,
        "Deployment": _DEPLOY_STAGES,
        "Deployed": [S.DEPLOYED_TO_PROD],
        "Done": _CLOSED,
    },
    column_is_extended={
        "Backlog": True,
        "Clarification": True,
        "Sizing": True,
        "Prioritization": True,
        "Dev Approval": True,
        "Client Approval": True,
        "UAT": True,
        "Deployment": True,
        "Deployed": True,
        "Done": True,
    },
    board_views={
        "all": [
            "Backlog",
            "Clarification",
            "Sizing",
            "Prioritization",
            "Dev Approval",
            "Client Approval",
            "Dev Queue",
            "Dev Work",
            "Ready for Scratch Test",
            "Scratch Testing",
            "Ready for QA",
            "QA In Progress",
            "Ready for Internal UAT",
            "Internal UAT",
            "UAT",
            "Deployment",
            "Deployed",
            "Done",
        ],
        "predev": [
            "Backlog",
            "Clarification",
            "Sizing",
            "Prioritization",
            "Dev Approval",
            "Client Approval",
        ],
        "indev": [
            "Dev Queue",
            "Dev Work",
            "Ready for Scratch Test",
            "Scratch Testing",
            "Ready for QA",
            "QA In Progress",
        ],
        "deployed": ["Ready for Internal UAT", "Internal UAT", "UAT", "Deployment", "Deployed", "Done"],
    },
)

DEFAULT_LAYOUTS = {
    Persona.CLIENT: CLIENT_LAYOUT,
    Persona.CONSULTANT: CONSULTANT_LAYOUT,
    Persona.DEVELOPER: DEVELOPER_LAYOUT,
    Persona.QA: QA_LAYOUT,
}


def default_stage_graph() -> StageGraph:
    """StageGraph built from the default edge and override tables."""
    return StageGraph(
        advance_edges=ADVANCE_EDGES,
        backtrack_edges=BACKTRACK_EDGES,
        advance_overrides=ADVANCE_OVERRIDES,
        backtrack_overrides=BACKTRACK_OVERRIDES,
        styles=COLUMN_STYLES,
    )


def default_board_config() -> BoardConfig:
    """The built-in board configuration."""
    return BoardConfig(
        stage_graph=default_stage_graph(),
        layouts=MappingProxyType(dict(DEFAULT_LAYOUTS)),
        column_styles=MappingProxyType(dict(COLUMN_STYLES)),
        display_names=MappingProxyType(dict(DISPLAY_NAMES)),
        stage_owners=MappingProxyType(dict(STAGE_OWNERS)),
        view_labels=MappingProxyType(dict(VIEW_LABELS)),
        intentions=INTENTIONS,
    )

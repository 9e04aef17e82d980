"""Reorder - drop classification, fractional sort keys and drag state."""

from deliveryhub.reorder.drag import DragState
from deliveryhub.reorder.engine import (
    DEFAULT_MIN_GAP,
    ReorderEngine,
    midpoint,
    needs_rebalance,
    rebalance,
)
from deliveryhub.reorder.exceptions import DragInProgressError, InvalidDropError, ReorderError
from deliveryhub.reorder.models import DropKind, DropPlan

__all__ = [
    "DEFAULT_MIN_GAP",
    "DragInProgressError",
    "DragState",
    "DropKind",
    "DropPlan",
    "InvalidDropError",
    "ReorderEngine",
    "ReorderError",
    "midpoint",
    "needs_rebalance",
    "rebalance",
]

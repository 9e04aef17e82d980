"""Custom exceptions for drag-and-drop reordering."""


class ReorderError(Exception):
    """Base exception for reorder errors."""


class InvalidDropError(ReorderError):
    """Drop target cannot accept the ticket."""


class DragInProgressError(ReorderError):
    """A drag is already active."""

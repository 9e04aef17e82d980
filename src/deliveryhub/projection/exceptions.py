"""Custom exceptions for view projection."""


class ProjectionError(Exception):
    """Base exception for view projection errors."""


class ViewNotFoundError(ProjectionError):
    """Board view with given name is not defined for the persona."""


class ColumnNotFoundError(ProjectionError):
    """Column with given key is not defined for the persona."""

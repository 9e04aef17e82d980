"""Custom exceptions for ticket dependencies."""


class DependencyError(Exception):
    """Base exception for dependency graph errors."""


class SelfDependencyError(DependencyError, ValueError):
    """A ticket cannot block itself."""


class DependencyOperationError(DependencyError):
    """The backend failed to search, create or remove a dependency."""

"""Custom exceptions for the local ticket store."""


class StateStoreError(Exception):
    """Base exception for local store errors."""


class TicketNotFoundError(StateStoreError):
    """Ticket with given ID does not exist."""


class DependencyNotFoundError(StateStoreError):
    """Dependency with given ID does not exist."""


class DependencyExistsError(StateStoreError):
    """The same blocking edge is already recorded."""


class InvalidTicketFieldError(StateStoreError):
    """Field name or value cannot be written to a ticket."""

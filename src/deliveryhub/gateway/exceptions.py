"""Custom exceptions for the delivery gateway."""


class GatewayError(Exception):
    """Base exception for delivery backend errors."""


class TicketNotFoundError(GatewayError):
    """Ticket with given ID does not exist."""


class DependencyNotFoundError(GatewayError):
    """Dependency with given ID does not exist."""


class InvalidGatewayResponseError(GatewayError):
    """Backend answered with a payload that cannot be parsed."""


class AiEnhancementUnavailableError(GatewayError):
    """The backend offers no AI enhancement service."""

"""Gateway - async interface to the delivery backend."""

from deliveryhub.gateway.exceptions import (
    AiEnhancementUnavailableError,
    DependencyNotFoundError,
    GatewayError,
    InvalidGatewayResponseError,
    TicketNotFoundError,
)
from deliveryhub.gateway.http import HttpDeliveryGateway
from deliveryhub.gateway.protocol import DeliveryGateway

__all__ = [
    "AiEnhancementUnavailableError",
    "DeliveryGateway",
    "DependencyNotFoundError",
    "GatewayError",
    "HttpDeliveryGateway",
    "InvalidGatewayResponseError",
    "TicketNotFoundError",
]

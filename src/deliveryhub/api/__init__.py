"""REST API for the DeliveryHub board."""

from deliveryhub.api.app import build_gateway, create_app

__all__ = ["build_gateway", "create_app"]

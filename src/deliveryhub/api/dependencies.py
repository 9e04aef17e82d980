"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from deliveryhub.board import BoardService
from deliveryhub.gateway import DeliveryGateway

# Global gateway instance (initialized on app startup)
_gateway: DeliveryGateway | None = None


def init_gateway(gateway: DeliveryGateway) -> DeliveryGateway:
    """Initialize the global gateway instance."""
    global _gateway  # noqa: PLW0603
    _gateway = gateway
    return _gateway


async def close_gateway() -> None:
    """Close the global gateway instance."""
    global _gateway  # noqa: PLW0603
    if _gateway is not None:
        await _gateway.close()
        _gateway = None


# Global BoardService instance (initialized on app startup)
_board_service: BoardService | None = None


def init_board_service(service: BoardService) -> BoardService:
    """Initialize the global BoardService instance."""
    global _board_service  # noqa: PLW0603
    _board_service = service
    return _board_service


def close_board_service() -> None:
    """Drop the global BoardService instance."""
    global _board_service  # noqa: PLW0603
    _board_service = None


def get_board_service() -> Generator[BoardService, None, None]:
    """Dependency that provides the BoardService instance."""
    if _board_service is None:
        raise RuntimeError("BoardService not initialized. Call init_board_service() first.")
    yield _board_service


# Type alias for dependency injection
BoardServiceDep = Annotated[BoardService, Depends(get_board_service)]

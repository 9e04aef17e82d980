"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from deliveryhub.api.dependencies import (
    close_board_service,
    close_gateway,
    init_board_service,
    init_gateway,
)
from deliveryhub.api.models import APIResponse
from deliveryhub.api.routes import board, dependencies, tickets
from deliveryhub.board import BoardService, BoardTicketNotFoundError
from deliveryhub.config import default_board_config, load_board_config
from deliveryhub.gateway import (
    DependencyNotFoundError,
    GatewayError,
    HttpDeliveryGateway,
    TicketNotFoundError,
)
from deliveryhub.projection import ProjectionError
from deliveryhub.reorder import DragInProgressError, InvalidDropError
from deliveryhub.settings import Settings
from deliveryhub.stages import StageError
from deliveryhub.state_store import LocalDeliveryGateway, TicketStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from deliveryhub.gateway import DeliveryGateway

logger = logging.getLogger(__name__)


def build_gateway(settings: Settings) -> DeliveryGateway:
    """Remote gateway when a backend URL is configured, else the local store."""
    if settings.backend_url:
        logger.info("Using remote delivery backend at %s", settings.backend_url)
        return HttpDeliveryGateway(settings.backend_url, token=settings.backend_token)
    logger.info("Using local ticket store at %s", settings.db_path)
    return LocalDeliveryGateway(TicketStore(settings.db_path))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings

    # Startup
    if settings.board_config_path:
        config = load_board_config(settings.board_config_path)
    else:
        config = default_board_config()
    gateway = init_gateway(build_gateway(settings))
    service = init_board_service(
        BoardService(
            gateway,
            config,
            dev_count=settings.default_dev_count,
            ai_timeout=settings.ai_timeout_seconds,
        )
    )
    await service.refresh()

    yield
    # Shutdown
    close_board_service()
    await close_gateway()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message).model_dump(),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="DeliveryHub API",
        description="REST API for the DeliveryHub kanban board",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings or Settings.from_env()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(BoardTicketNotFoundError)
    @app.exception_handler(TicketNotFoundError)
    async def ticket_not_found_handler(_request: Request, _exc: Exception) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Ticket not found")

    @app.exception_handler(DependencyNotFoundError)
    async def dependency_not_found_handler(
        _request: Request, _exc: DependencyNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Dependency not found")

    @app.exception_handler(ProjectionError)
    async def projection_error_handler(_request: Request, exc: ProjectionError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(StageError)
    @app.exception_handler(InvalidDropError)
    async def invalid_input_handler(_request: Request, exc: Exception) -> JSONResponse:
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))

    @app.exception_handler(DragInProgressError)
    async def drag_in_progress_handler(
        _request: Request, _exc: DragInProgressError
    ) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, "Another drop is still being processed")

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(_request: Request, exc: GatewayError) -> JSONResponse:
        logger.error("Unhandled gateway error: %s", exc)
        return _error(status.HTTP_502_BAD_GATEWAY, "Delivery backend error")

    # Include routers
    app.include_router(board.router, prefix="/api/v1")
    app.include_router(tickets.router, prefix="/api/v1")
    app.include_router(dependencies.router, prefix="/api/v1")

    return app

"""Shared pytest fixtures and configuration."""

from collections.abc import Callable
from datetime import date
from typing import Any
from unittest.mock import AsyncMock

import pytest

from deliveryhub.config import BoardConfig, default_board_config
from deliveryhub.enrichment import TicketEnricher, TicketView
from deliveryhub.stages import Stage
from deliveryhub.tickets import ETAResult, Ticket

TODAY = date(2026, 1, 15)


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def board_config() -> BoardConfig:
    """The built-in board configuration."""
    return default_board_config()


@pytest.fixture
def make_ticket() -> Callable[..., Ticket]:
    """Factory for canonical tickets with sensible defaults."""

    def _make(ticket_id: str = "t1", stage: Stage = Stage.BACKLOG, **kwargs: Any) -> Ticket:
        kwargs.setdefault("name", f"T-{ticket_id}")
        kwargs.setdefault("title", f"Ticket {ticket_id}")
        return Ticket(id=ticket_id, stage=stage, **kwargs)

    return _make


@pytest.fixture
def make_view(make_ticket: Callable[..., Ticket]) -> Callable[..., TicketView]:
    """Factory for enriched tickets."""
    enricher = TicketEnricher(today=lambda: TODAY)

    def _make(ticket_id: str = "t1", stage: Stage = Stage.BACKLOG, **kwargs: Any) -> TicketView:
        return enricher.enrich([make_ticket(ticket_id, stage, **kwargs)])[0]

    return _make


@pytest.fixture
def mock_gateway() -> AsyncMock:
    """Gateway double: empty board, no required fields, every call succeeds."""
    gateway = AsyncMock()
    gateway.fetch_tickets.return_value = []
    gateway.fetch_etas.return_value = ETAResult()
    gateway.get_required_fields_for_stage.return_value = []
    return gateway

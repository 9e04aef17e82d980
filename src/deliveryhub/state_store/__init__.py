"""State Store - SQLite persistence for the standalone board."""

from deliveryhub.state_store.database import Database
from deliveryhub.state_store.eta import EtaScheduler, add_business_days
from deliveryhub.state_store.exceptions import (
    DependencyExistsError,
    DependencyNotFoundError,
    InvalidTicketFieldError,
    StateStoreError,
    TicketNotFoundError,
)
from deliveryhub.state_store.gateway import LocalDeliveryGateway
from deliveryhub.state_store.store import TicketStore

__all__ = [
    "Database",
    "DependencyExistsError",
    "DependencyNotFoundError",
    "EtaScheduler",
    "InvalidTicketFieldError",
    "LocalDeliveryGateway",
    "StateStoreError",
    "TicketNotFoundError",
    "TicketStore",
    "add_business_days",
]

"""Blocking - dependency edges between tickets."""

from deliveryhub.blocking.exceptions import (
    DependencyError,
    DependencyOperationError,
    SelfDependencyError,
)
from deliveryhub.blocking.graph import MIN_SEARCH_LENGTH, DependencyGraph, link_map

__all__ = [
    "MIN_SEARCH_LENGTH",
    "DependencyError",
    "DependencyGraph",
    "DependencyOperationError",
    "SelfDependencyError",
    "link_map",
]

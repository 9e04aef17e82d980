"""Projection - persona-scoped board columns."""

from deliveryhub.projection.exceptions import (
    ColumnNotFoundError,
    ProjectionError,
    ViewNotFoundError,
)
from deliveryhub.projection.models import Column
from deliveryhub.projection.projector import (
    ALL_INTENTIONS,
    DEFAULT_OWNER,
    PersonaViewProjector,
)

__all__ = [
    "ALL_INTENTIONS",
    "DEFAULT_OWNER",
    "Column",
    "ColumnNotFoundError",
    "PersonaViewProjector",
    "ProjectionError",
    "ViewNotFoundError",
]

"""Enrichment - per-ticket view models for the board."""

from deliveryhub.enrichment.enricher import (
    DATE_FORMAT,
    NO_DATE_LABEL,
    NO_DATE_TEXT,
    UAT_DATE_FORMAT,
    TicketEnricher,
    relative_suffix,
    split_tags,
)
from deliveryhub.enrichment.models import TicketView

__all__ = [
    "DATE_FORMAT",
    "NO_DATE_LABEL",
    "NO_DATE_TEXT",
    "UAT_DATE_FORMAT",
    "TicketEnricher",
    "TicketView",
    "relative_suffix",
    "split_tags",
]

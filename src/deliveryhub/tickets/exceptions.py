"""Custom exceptions for ticket ingestion."""


class TicketError(Exception):
    """Base exception for ticket model errors."""


class RecordMappingError(TicketError):
    """Raw record cannot be turned into a Ticket."""

"""Custom exceptions for the board service."""


class BoardError(Exception):
    """Base exception for board service errors."""


class BoardTicketNotFoundError(BoardError):
    """Ticket is not part of the current board snapshot."""

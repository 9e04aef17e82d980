"""Board - the engine composed over a delivery gateway."""

from deliveryhub.board.exceptions import BoardError, BoardTicketNotFoundError
from deliveryhub.board.models import ActionResult, BoardSnapshot, TicketOptions
from deliveryhub.board.service import BoardService

__all__ = [
    "ActionResult",
    "BoardError",
    "BoardService",
    "BoardSnapshot",
    "BoardTicketNotFoundError",
    "TicketOptions",
]

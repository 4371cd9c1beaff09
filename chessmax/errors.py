"""
Exception hierarchy for the rules engine.

Every error the engine raises derives from ChessError so callers (the UCI
driver, the web API, a GUI) can catch engine failures with a single clause
while still distinguishing the specific cause when they need to.
"""


class ChessError(Exception):
    """Base class for all engine errors."""


class IllegalMoveError(ChessError):
    """
    Raised by Board.apply_move when a move cannot be committed.

    Either the moving piece does not belong to the side to move, the origin
    square does not hold the piece the move describes, or the move is not
    in that piece's legal-move set.
    """


class InvalidFenError(ChessError, ValueError):
    """Raised when a FEN string cannot be parsed into a position."""


class SimulationError(ChessError):
    """
    Raised by the search simulation primitive when no piece stands on the
    move's origin square in the piece list being simulated.
    """

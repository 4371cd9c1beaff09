"""
Move value object and square-name helpers.

A Move is created by move generation, consumed once by Board.apply_move and
then kept in the board's history. It is frozen: the board never edits a
move after the fact, it builds a new one (dataclasses.replace) when it needs
to attach the piece references of the board that executed it.

Equality and hashing only look at the coordinates, the promotion choice and
the special-move tag. The piece references are left out so a
move generated on one board compares equal to the same move generated on a
clone of that board, which is what the legality filter and the search rely
on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chessmax.constants import BOARD_SIZE, FILES, MoveKind, PieceKind
from chessmax.errors import ChessError

if TYPE_CHECKING:
    from chessmax.pieces import Piece


def on_board(row: int, column: int) -> bool:
    """True if (row, column) lies inside the 8x8 grid."""
    return 0 <= row < BOARD_SIZE and 0 <= column < BOARD_SIZE


def square_name(row: int, column: int) -> str:
    """
    Convert grid coordinates to an algebraic square name.

    Row 0 is rank 8, so (6, 4) is "e2" and (0, 0) is "a8".
    """
    return f"{FILES[column]}{BOARD_SIZE - row}"


def parse_square(name: str) -> tuple[int, int]:
    """
    Convert an algebraic square name ("e4") to (row, column).

    Raises:
        ChessError: If the name is not a valid square.
    """
    if len(name) != 2 or name[0] not in FILES or not name[1].isdigit():
        raise ChessError(f"invalid square name: {name!r}")
    rank = int(name[1])
    if not 1 <= rank <= BOARD_SIZE:
        raise ChessError(f"invalid square name: {name!r}")
    return BOARD_SIZE - rank, FILES.index(name[0])


@dataclass(frozen=True)
class Move:
    """
    Immutable description of a single ply.

    Attributes:
        from_row, from_col: Origin square.
        to_row, to_col:     Destination square. For castling this is the
                            king's destination (g- or c-file).
        piece:              The moving piece, as it stood when the move
                            was generated.
        captured:           The piece removed by this move, if any. For en
                            passant this is the pawn beside the origin, not
                            a piece on the destination square.
        promotion:          Piece kind the pawn turns into, or None.
        kind:               Special-move tag.
    """

    from_row: int
    from_col: int
    to_row: int
    to_col: int
    piece: Piece = field(compare=False, repr=False)
    captured: Piece | None = field(default=None, compare=False, repr=False)
    promotion: PieceKind | None = None
    kind: MoveKind = MoveKind.NORMAL

    @property
    def origin(self) -> tuple[int, int]:
        return self.from_row, self.from_col

    @property
    def destination(self) -> tuple[int, int]:
        return self.to_row, self.to_col

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def uci(self) -> str:
        """Long algebraic (UCI) form, e.g. "e2e4" or "e7e8q"."""
        text = square_name(self.from_row, self.from_col) + square_name(self.to_row, self.to_col)
        if self.promotion is not None:
            text += self.promotion.symbol
        return text

    def __str__(self) -> str:
        return self.uci()

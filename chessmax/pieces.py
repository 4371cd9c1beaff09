"""
Chess pieces and pseudo-legal move generation.

A piece is a small mutable record: kind, colour, current square and a
"has moved" flag (only meaningful for kings and rooks, where it gates
castling). The six piece variants form a closed set (PieceKind), so move
generation is a table of plain functions keyed by kind instead of a class
hierarchy. That keeps cloning trivial: a clone is just a field-for-field
copy with no shared state.

Pseudo-legal means "geometrically reachable": the generators below ignore
whether the move would leave the mover's own king attacked. That check is
done once, centrally, by chessmax.legality.

Generation order is fixed and part of the engine's determinism contract:
pawns yield the single push, the double push, then captures from the lower
column to the higher one; sliders walk their directions in the order of
the direction tables below; promotions always come out queen, rook,
bishop, knight.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable

from chessmax.constants import (
    BOARD_SIZE,
    PIECE_VALUES,
    PROMOTION_KINDS,
    MoveKind,
    PieceKind,
)
from chessmax.move import Move, on_board

if TYPE_CHECKING:
    from chessmax.board import Board

# ---------------------------------------------------------------------------
# Direction tables
# ---------------------------------------------------------------------------

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1),
)
KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1),
)
ROOK_DIRECTIONS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
BISHOP_DIRECTIONS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))


def pawn_direction(is_white: bool) -> int:
    """Row delta of a pawn advance: White moves toward row 0."""
    return -1 if is_white else 1


def pawn_start_row(is_white: bool) -> int:
    return BOARD_SIZE - 2 if is_white else 1


def back_rank(is_white: bool) -> int:
    """Row of the given side's back rank (rank 1 for White, rank 8 for Black)."""
    return BOARD_SIZE - 1 if is_white else 0


@dataclass(eq=False)
class Piece:
    """
    A single piece on the board.

    Pieces compare by identity (eq=False): two rooks with the same fields
    are still two different rooks, and list.remove() on the board's piece
    list must remove the exact instance that was captured.
    """

    kind: PieceKind
    is_white: bool
    row: int
    column: int
    has_moved: bool = False

    @property
    def position(self) -> tuple[int, int]:
        return self.row, self.column

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.kind]

    @property
    def fen_char(self) -> str:
        """FEN letter: upper case for White, lower case for Black."""
        return self.kind.symbol.upper() if self.is_white else self.kind.symbol

    def clone(self) -> Piece:
        """Independent copy with identical kind, colour, square and flags."""
        return replace(self)

    def generate_pseudo_legal_moves(self, board: Board) -> list[Move]:
        """Every geometrically reachable move for this piece on `board`."""
        return MOVE_GENERATORS[self.kind](self, board)

    def __repr__(self) -> str:
        colour = "white" if self.is_white else "black"
        return f"Piece({colour} {self.kind.name.lower()} at {self.row},{self.column})"


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------


def _step_moves(piece: Piece, board: Board, offsets: tuple[tuple[int, int], ...]) -> list[Move]:
    """Single-step moves (knight, king): any in-bounds square not held by a friend."""
    moves = []
    for d_row, d_col in offsets:
        row, col = piece.row + d_row, piece.column + d_col
        if not on_board(row, col):
            continue
        target = board.piece_at(row, col)
        if target is not None and target.is_white == piece.is_white:
            continue
        moves.append(Move(piece.row, piece.column, row, col, piece, target))
    return moves


def _slide_moves(piece: Piece, board: Board, directions: tuple[tuple[int, int], ...]) -> list[Move]:
    """
    Sliding moves (bishop, rook, queen).

    Each ray is extended square by square until it leaves the board or hits
    a piece. The blocking square is included only when it holds an enemy.
    """
    moves = []
    for d_row, d_col in directions:
        row, col = piece.row + d_row, piece.column + d_col
        while on_board(row, col):
            target = board.piece_at(row, col)
            if target is None:
                moves.append(Move(piece.row, piece.column, row, col, piece))
            else:
                if target.is_white != piece.is_white:
                    moves.append(Move(piece.row, piece.column, row, col, piece, target))
                break
            row += d_row
            col += d_col
    return moves


def _pawn_arrivals(piece: Piece, row: int, col: int, captured: Piece | None) -> list[Move]:
    """One move onto (row, col), or four promotion moves if that is the last rank."""
    if row == back_rank(not piece.is_white):
        return [
            Move(piece.row, piece.column, row, col, piece, captured, promotion, MoveKind.PROMOTION)
            for promotion in PROMOTION_KINDS
        ]
    return [Move(piece.row, piece.column, row, col, piece, captured)]


def _pawn_moves(piece: Piece, board: Board) -> list[Move]:
    moves = []
    direction = pawn_direction(piece.is_white)
    one = piece.row + direction
    if not on_board(one, piece.column):
        return moves

    # Pushes: one square, then two from the starting rank through an empty square.
    if board.piece_at(one, piece.column) is None:
        moves.extend(_pawn_arrivals(piece, one, piece.column, None))
        two = one + direction
        if piece.row == pawn_start_row(piece.is_white) and board.piece_at(two, piece.column) is None:
            moves.append(Move(piece.row, piece.column, two, piece.column, piece))

    # Diagonal captures, including en passant onto the board's target square.
    for d_col in (-1, 1):
        col = piece.column + d_col
        if not on_board(one, col):
            continue
        target = board.piece_at(one, col)
        if target is not None:
            if target.is_white != piece.is_white:
                moves.extend(_pawn_arrivals(piece, one, col, target))
        elif board.en_passant == (one, col):
            victim = board.piece_at(piece.row, col)
            if victim is not None and victim.kind is PieceKind.PAWN and victim.is_white != piece.is_white:
                moves.append(
                    Move(piece.row, piece.column, one, col, piece, victim, None, MoveKind.EN_PASSANT)
                )
    return moves


def _knight_moves(piece: Piece, board: Board) -> list[Move]:
    return _step_moves(piece, board, KNIGHT_OFFSETS)


def _bishop_moves(piece: Piece, board: Board) -> list[Move]:
    return _slide_moves(piece, board, BISHOP_DIRECTIONS)


def _rook_moves(piece: Piece, board: Board) -> list[Move]:
    return _slide_moves(piece, board, ROOK_DIRECTIONS)


def _queen_moves(piece: Piece, board: Board) -> list[Move]:
    return _slide_moves(piece, board, BISHOP_DIRECTIONS) + _slide_moves(piece, board, ROOK_DIRECTIONS)


def _castling_moves(king: Piece, board: Board) -> list[Move]:
    """
    Castling candidates for an unmoved king on its home square.

    Requires, per side: the castling right, an unmoved friendly rook in the
    corner, empty squares between king and rook, and no enemy attack on any
    square the king stands on or passes through (e-file, then the two
    squares toward the rook).
    """
    home = back_rank(king.is_white)
    if king.has_moved or king.position != (home, 4):
        return []

    enemy = not king.is_white
    if board.is_square_attacked(home, 4, enemy):
        return []

    moves = []
    for kingside in (True, False):
        if not board.castling.allows(king.is_white, kingside):
            continue
        rook = board.piece_at(home, 7 if kingside else 0)
        if (
            rook is None
            or rook.kind is not PieceKind.ROOK
            or rook.is_white != king.is_white
            or rook.has_moved
        ):
            continue
        between = (5, 6) if kingside else (1, 2, 3)
        if any(board.piece_at(home, col) is not None for col in between):
            continue
        transit = (5, 6) if kingside else (3, 2)
        if any(board.is_square_attacked(home, col, enemy) for col in transit):
            continue
        moves.append(Move(home, 4, home, transit[-1], king, None, None, MoveKind.CASTLE))
    return moves


def _king_moves(piece: Piece, board: Board) -> list[Move]:
    return _step_moves(piece, board, KING_OFFSETS) + _castling_moves(piece, board)


MOVE_GENERATORS: dict[PieceKind, Callable[[Piece, Board], list[Move]]] = {
    PieceKind.PAWN:   _pawn_moves,
    PieceKind.KNIGHT: _knight_moves,
    PieceKind.BISHOP: _bishop_moves,
    PieceKind.ROOK:   _rook_moves,
    PieceKind.QUEEN:  _queen_moves,
    PieceKind.KING:   _king_moves,
}

"""
FEN (Forsyth-Edwards Notation) parsing and formatting.

A FEN string has six space-separated fields:

    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
    placement                                  side castling ep halfmove fullmove

The placement field lists ranks from 8 down to 1, which matches the board's
row order (row 0 = rank 8), so the n-th rank in the string is row n.

The two clock fields are optional on input (several GUIs send only the
first four fields) and default to "0 1".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chessmax.constants import BOARD_SIZE, PieceKind
from chessmax.errors import ChessError, InvalidFenError
from chessmax.move import parse_square, square_name
from chessmax.pieces import Piece, back_rank, pawn_start_row

if TYPE_CHECKING:
    from chessmax.board import Board

_KINDS_BY_LETTER: dict[str, PieceKind] = {kind.symbol: kind for kind in PieceKind}

# (row, column) of each rook's corner -> castling letter it backs.
_CORNER_RIGHTS: dict[tuple[int, int], str] = {
    (BOARD_SIZE - 1, 7): "K",
    (BOARD_SIZE - 1, 0): "Q",
    (0, 7): "k",
    (0, 0): "q",
}


@dataclass
class FenPosition:
    """
    A parsed FEN string.

    Attributes:
        pieces:          Pieces in FEN order (a8 ... h8, a7 ... h1), with
                         has_moved already derived from the castling field.
        white_to_move:   Side to move.
        castling:        Castling field ("KQkq", "-", ...), minus rights whose
                         king or rook is off its home square.
        en_passant:      En-passant target square, or None.
        halfmove_clock:  Plies since the last pawn move or capture.
        fullmove_number: Starts at 1, incremented after each Black move.
    """

    pieces: list[Piece] = field(default_factory=list)
    white_to_move: bool = True
    castling: str = "-"
    en_passant: tuple[int, int] | None = None
    halfmove_clock: int = 0
    fullmove_number: int = 1


def _parse_placement(placement: str) -> list[Piece]:
    ranks = placement.split("/")
    if len(ranks) != BOARD_SIZE:
        raise InvalidFenError(f"expected {BOARD_SIZE} ranks, got {len(ranks)}")

    pieces = []
    for row, rank in enumerate(ranks):
        column = 0
        for char in rank:
            if char.isdigit():
                column += int(char)
                continue
            kind = _KINDS_BY_LETTER.get(char.lower())
            if kind is None:
                raise InvalidFenError(f"unknown piece letter {char!r}")
            if column >= BOARD_SIZE:
                raise InvalidFenError(f"rank {BOARD_SIZE - row} is too long")
            pieces.append(Piece(kind, char.isupper(), row, column))
            column += 1
        if column != BOARD_SIZE:
            raise InvalidFenError(f"rank {BOARD_SIZE - row} describes {column} squares")
    return pieces


def _check_pieces(pieces: list[Piece]) -> None:
    for is_white in (True, False):
        kings = sum(1 for p in pieces if p.kind is PieceKind.KING and p.is_white == is_white)
        if kings != 1:
            colour = "white" if is_white else "black"
            raise InvalidFenError(f"expected exactly one {colour} king, found {kings}")
    for piece in pieces:
        if piece.kind is PieceKind.PAWN and piece.row in (0, BOARD_SIZE - 1):
            raise InvalidFenError(f"pawn on back rank at {square_name(piece.row, piece.column)}")


def _supported_castling(pieces: list[Piece], castling: str) -> str:
    """
    Keep only the castling letters backed by the board: the king on e1/e8
    and an own rook in the matching corner.
    """
    by_square = {piece.position: piece for piece in pieces}
    kept = ""
    for corner, letter in _CORNER_RIGHTS.items():
        if letter not in castling:
            continue
        is_white = letter.isupper()
        king = by_square.get((back_rank(is_white), 4))
        rook = by_square.get(corner)
        if (
            king is not None and king.kind is PieceKind.KING and king.is_white == is_white
            and rook is not None and rook.kind is PieceKind.ROOK and rook.is_white == is_white
        ):
            kept += letter
    return kept or "-"


def _mark_moved(pieces: list[Piece], castling: str) -> None:
    """
    Derive has_moved from the castling field.

    A king keeps has_moved=False only while it stands on e1/e8 and its side
    still holds some castling right; a rook only while it stands in a corner
    whose right is still listed. Pawns off their starting rank are marked
    moved for completeness.
    """
    for piece in pieces:
        if piece.kind is PieceKind.KING:
            rights = "KQ" if piece.is_white else "kq"
            home = piece.position == (back_rank(piece.is_white), 4)
            piece.has_moved = not (home and any(r in castling for r in rights))
        elif piece.kind is PieceKind.ROOK:
            letter = _CORNER_RIGHTS.get(piece.position)
            owns_corner = letter is not None and letter.isupper() == piece.is_white
            piece.has_moved = not (owns_corner and letter in castling)
        elif piece.kind is PieceKind.PAWN:
            piece.has_moved = piece.row != pawn_start_row(piece.is_white)


def parse_fen(text: str) -> FenPosition:
    """
    Parse a FEN string.

    Args:
        text: FEN with four or six fields.

    Returns:
        FenPosition describing the position.

    Raises:
        InvalidFenError: If any field is malformed, a side does not have
                         exactly one king, or a pawn sits on a back rank.
    """
    fields = text.split()
    if len(fields) not in (4, 6):
        raise InvalidFenError(f"expected 4 or 6 fields, got {len(fields)}: {text!r}")
    placement, side, castling, en_passant = fields[:4]

    pieces = _parse_placement(placement)
    _check_pieces(pieces)

    if side not in ("w", "b"):
        raise InvalidFenError(f"side to move must be 'w' or 'b', got {side!r}")

    if castling != "-" and (not castling or any(c not in "KQkq" for c in castling)):
        raise InvalidFenError(f"invalid castling field {castling!r}")

    target = None
    if en_passant != "-":
        try:
            target = parse_square(en_passant)
        except ChessError as exc:
            raise InvalidFenError(f"invalid en passant square {en_passant!r}") from exc

    halfmove, fullmove = 0, 1
    if len(fields) == 6:
        try:
            halfmove, fullmove = int(fields[4]), int(fields[5])
        except ValueError as exc:
            raise InvalidFenError(f"invalid move counters in {text!r}") from exc
        if halfmove < 0 or fullmove < 1:
            raise InvalidFenError(f"invalid move counters in {text!r}")

    castling = _supported_castling(pieces, castling)
    _mark_moved(pieces, castling)
    return FenPosition(
        pieces=pieces,
        white_to_move=side == "w",
        castling=castling,
        en_passant=target,
        halfmove_clock=halfmove,
        fullmove_number=fullmove,
    )


def placement_field(board: Board) -> str:
    """The piece-placement field for the board's current grid."""
    ranks = []
    for row in range(BOARD_SIZE):
        rank = ""
        empty = 0
        for column in range(BOARD_SIZE):
            piece = board.piece_at(row, column)
            if piece is None:
                empty += 1
                continue
            if empty:
                rank += str(empty)
                empty = 0
            rank += piece.fen_char
        if empty:
            rank += str(empty)
        ranks.append(rank)
    return "/".join(ranks)


def board_to_fen(board: Board) -> str:
    """Format the board's full state as a six-field FEN string."""
    en_passant = "-" if board.en_passant is None else square_name(*board.en_passant)
    return " ".join((
        placement_field(board),
        "w" if board.white_to_move else "b",
        board.castling.fen(),
        en_passant,
        str(board.halfmove_clock),
        str(board.fullmove_number),
    ))

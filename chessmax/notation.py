"""Standard algebraic notation (SAN) for moves."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessmax.constants import BOARD_SIZE, FILES, MoveKind, PieceKind
from chessmax.legality import all_legal_moves, has_legal_move
from chessmax.move import Move, square_name

if TYPE_CHECKING:
    from chessmax.board import Board


def _disambiguation(board: Board, move: Move, kind: PieceKind) -> str:
    # Other pieces of the same kind that could also reach the destination.
    rivals = [
        other for other in all_legal_moves(board)
        if other.destination == move.destination
        and other.origin != move.origin
        and board.piece_at(other.from_row, other.from_col).kind is kind
    ]
    if not rivals:
        return ""
    if all(other.from_col != move.from_col for other in rivals):
        return FILES[move.from_col]
    if all(other.from_row != move.from_row for other in rivals):
        return str(BOARD_SIZE - move.from_row)
    return square_name(move.from_row, move.from_col)


def to_san(board: Board, move: Move) -> str:
    """
    Format `move` in standard algebraic notation.

    Args:
        board: The position *before* the move. Not modified.
        move:  A legal move in that position.

    Returns:
        SAN such as "e4", "exd5", "Nbd7", "R1a3", "e8=Q", "O-O" or "Qxf7#".
    """
    if move.kind is MoveKind.CASTLE:
        text = "O-O" if move.to_col > move.from_col else "O-O-O"
    else:
        piece = board.piece_at(move.from_row, move.from_col)
        capture = move.kind is MoveKind.EN_PASSANT or board.piece_at(move.to_row, move.to_col) is not None
        destination = square_name(move.to_row, move.to_col)
        if piece.kind is PieceKind.PAWN:
            text = f"{FILES[move.from_col]}x{destination}" if capture else destination
            if move.promotion is not None:
                text += "=" + move.promotion.symbol.upper()
        else:
            text = piece.kind.symbol.upper() + _disambiguation(board, move, piece.kind)
            text += ("x" if capture else "") + destination

    child = board.after(move)
    if child.is_in_check():
        text += "+" if has_legal_move(child) else "#"
    return text

"""
Legal-move filter: the single authority on move legality.

Pieces only know geometry; they generate pseudo-legal candidates. This
module turns candidates into legal moves with one rule: play the move on a
clone of the board and discard it if the mover's own king is attacked
afterwards. Nothing else in the engine may authorize a move.

Because every candidate is tried on its own clone, the live board is never
touched, and the same position always yields the same list in the same
order (piece-list order, then generation order within each piece).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessmax.move import Move

if TYPE_CHECKING:
    from chessmax.board import Board
    from chessmax.pieces import Piece


def leaves_king_attacked(board: Board, move: Move) -> bool:
    """True if playing `move` leaves the mover's king attacked."""
    mover_is_white = board.piece_at(move.from_row, move.from_col).is_white
    return board.after(move).is_in_check(mover_is_white)


def legal_moves(board: Board, piece: Piece) -> list[Move]:
    """
    Legal moves for one piece.

    The piece is looked up on the board by its coordinates, so a clone from
    Board.get_piece_list() works as well as the live instance. Pieces of the
    side not to move, or stale references that no longer match the board,
    have no legal moves.

    Args:
        board: Position to move in. Not modified.
        piece: The piece to move.

    Returns:
        Legal moves in generation order.
    """
    if piece.is_white != board.white_to_move:
        return []
    live = board.piece_at(piece.row, piece.column)
    if live is None or live.kind is not piece.kind or live.is_white != piece.is_white:
        return []
    return [
        move for move in live.generate_pseudo_legal_moves(board)
        if not leaves_king_attacked(board, move)
    ]


def all_legal_moves(board: Board) -> list[Move]:
    """Union of legal moves over every piece of the side to move, in piece-list order."""
    moves = []
    for piece in list(board.pieces):
        if piece.is_white == board.white_to_move:
            moves.extend(legal_moves(board, piece))
    return moves


def has_legal_move(board: Board) -> bool:
    """True as soon as one legal move is found; cheaper than all_legal_moves()."""
    for piece in list(board.pieces):
        if piece.is_white != board.white_to_move:
            continue
        for move in piece.generate_pseudo_legal_moves(board):
            if not leaves_king_attacked(board, move):
                return True
    return False


def perft(board: Board, depth: int) -> int:
    """
    Count leaf nodes of the legal move tree to the given depth.

    Perft counts for standard test positions are published, which makes
    this the reference check for move generation: any missing or extra
    move (castling through check, en passant exposing the king, a skipped
    under-promotion) changes the count.
    """
    if depth == 0:
        return 1
    moves = all_legal_moves(board)
    if depth == 1:
        return len(moves)
    return sum(perft(board.after(move), depth - 1) for move in moves)

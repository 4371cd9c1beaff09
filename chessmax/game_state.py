"""
Game-state classification: ongoing, check, checkmate, stalemate and the
rule-based draws.

evaluate_game_state() is meant to be called once per ply, after
Board.apply_move, for the side that is now to move. Checkmate and
stalemate are decided purely from two facts, both computed through the
legality filter:

    in_check      the side to move has its king attacked
    has_move      the side to move has at least one legal move

    checkmate  = in_check and not has_move
    stalemate  = not in_check and not has_move

The draw rules (insufficient material, fifty-move rule, threefold
repetition) are layered on top and only apply while the side to move
still has a legal move, so a mate delivered on the hundredth quiet ply is
still a mate.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from chessmax.constants import FIFTY_MOVE_HALFMOVES, REPETITION_LIMIT, PieceKind
from chessmax.legality import has_legal_move

if TYPE_CHECKING:
    from chessmax.board import Board


class GameStatus(enum.Enum):
    ONGOING = "ongoing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    INSUFFICIENT_MATERIAL = "insufficient_material"
    FIFTY_MOVE_RULE = "fifty_move_rule"
    THREEFOLD_REPETITION = "threefold_repetition"

    @property
    def is_terminal(self) -> bool:
        return self not in (GameStatus.ONGOING, GameStatus.CHECK)

    @property
    def is_draw(self) -> bool:
        return self.is_terminal and self is not GameStatus.CHECKMATE


def is_checkmate(board: Board) -> bool:
    return board.is_in_check() and not has_legal_move(board)


def is_stalemate(board: Board) -> bool:
    return not board.is_in_check() and not has_legal_move(board)


def is_insufficient_material(board: Board) -> bool:
    """
    True if neither side can possibly deliver mate.

    Covers king vs king, king and a single minor piece vs king, and kings
    with bishops that all stand on squares of one colour.
    """
    others = [p for p in board.pieces if p.kind is not PieceKind.KING]
    if any(p.kind in (PieceKind.PAWN, PieceKind.ROOK, PieceKind.QUEEN) for p in others):
        return False
    if len(others) <= 1:
        return True
    if all(p.kind is PieceKind.BISHOP for p in others):
        return len({(p.row + p.column) % 2 for p in others}) == 1
    return False


def is_fifty_move_rule(board: Board) -> bool:
    return board.halfmove_clock >= FIFTY_MOVE_HALFMOVES


def is_threefold_repetition(board: Board) -> bool:
    """True if the current position has occurred at least three times in this game."""
    current = board.position_key()
    keys = [board.initial_key]
    keys.extend(entry.key for entry in board.history)
    return keys.count(current) >= REPETITION_LIMIT


def evaluate_game_state(board: Board) -> GameStatus:
    """
    Classify the position for the side to move.

    Total over any valid board: it never raises and never modifies the board.
    """
    in_check = board.is_in_check()
    if not has_legal_move(board):
        return GameStatus.CHECKMATE if in_check else GameStatus.STALEMATE
    if is_insufficient_material(board):
        return GameStatus.INSUFFICIENT_MATERIAL
    if is_fifty_move_rule(board):
        return GameStatus.FIFTY_MOVE_RULE
    if is_threefold_repetition(board):
        return GameStatus.THREEFOLD_REPETITION
    return GameStatus.CHECK if in_check else GameStatus.ONGOING


def game_result(board: Board) -> str:
    """PGN result string: "1-0", "0-1", "1/2-1/2", or "*" while the game goes on."""
    status = evaluate_game_state(board)
    if status is GameStatus.CHECKMATE:
        return "0-1" if board.white_to_move else "1-0"
    if status.is_draw:
        return "1/2-1/2"
    return "*"

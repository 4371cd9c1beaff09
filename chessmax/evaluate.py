"""
Static position evaluation: material plus optional piece-square bonuses.

A bot needs to assign a number to any piece list so it can compare the
positions its candidate moves lead to. The baseline is pure material: the
sum of piece values for the evaluated side minus the same sum for the
opponent (pawn 1, knight 3, bishop 3, rook 5, queen 9; kings are not
counted).

Stronger presets add a positional term from piece-square tables, which
rewards knights in the centre, rooks on the seventh rank, a sheltered king
while queens are on the board and an active king once they are gone. The
table set for pawns and kings depends on the game phase, which is
classified from the piece list alone (see classify_phase). The positional
term is measured in centipawns, converted to pawn units and scaled by the
preset's positional_weight, so a weight of 0 reproduces the material
baseline exactly.

Everything here is a pure function of its arguments. The evaluator works
on piece lists rather than boards so the search can score the cloned,
simulated lists it produces without building a Board for every leaf.
"""

from __future__ import annotations

import enum
import math
from typing import Iterable

from chessmax.constants import (
    BOARD_SIZE,
    CENTRAL_KING_DISTANCE,
    ENDGAME_PIECE_COUNT,
    FULL_MATERIAL_PIECE_COUNT,
    OPENING_PIECE_COUNT,
    PIECE_VALUES,
    PST,
    QUEENLESS_ENDGAME_PIECE_COUNT,
    PieceKind,
)
from chessmax.pieces import Piece, back_rank


class GamePhase(enum.Enum):
    OPENING = "opening"
    MIDDLE_GAME = "middle_game"
    END_GAME = "end_game"


def _king(pieces: list[Piece], is_white: bool) -> Piece | None:
    for piece in pieces:
        if piece.kind is PieceKind.KING and piece.is_white == is_white:
            return piece
    return None


def _is_central(king: Piece | None) -> bool:
    if king is None:
        return False
    center = (BOARD_SIZE - 1) / 2
    return math.hypot(king.row - center, king.column - center) <= CENTRAL_KING_DISTANCE


def _is_castled(king: Piece | None) -> bool:
    return king is not None and king.row == back_rank(king.is_white) and king.column in (2, 6)


def _is_on_start(king: Piece | None) -> bool:
    return king is not None and king.position == (back_rank(king.is_white), 4)


def classify_phase(pieces: Iterable[Piece]) -> GamePhase:
    """
    Classify the game phase of a piece list.

    Rules, first match wins (piece counts exclude kings):
        - fewer than 6 pieces                         -> END_GAME
        - exactly one queen left                      -> END_GAME
        - no queens: fewer than 28 pieces             -> END_GAME, else MIDDLE_GAME
        - both kings near the centre                  -> END_GAME
        - both kings on a castled square (c- or g-file of their back rank)
                                                      -> MIDDLE_GAME
        - both kings on e1/e8: at least 29 pieces     -> OPENING, else MIDDLE_GAME
        - fewer than 30 pieces                        -> MIDDLE_GAME
        - otherwise                                   -> OPENING

    Args:
        pieces: Any piece collection; need not contain kings.

    Returns:
        The classified GamePhase.
    """
    pieces = list(pieces)
    count = sum(1 for p in pieces if p.kind is not PieceKind.KING)
    queens = sum(1 for p in pieces if p.kind is PieceKind.QUEEN)

    if count < ENDGAME_PIECE_COUNT:
        return GamePhase.END_GAME
    if queens == 1:
        return GamePhase.END_GAME
    if queens == 0:
        return GamePhase.END_GAME if count < QUEENLESS_ENDGAME_PIECE_COUNT else GamePhase.MIDDLE_GAME

    white_king, black_king = _king(pieces, True), _king(pieces, False)
    if _is_central(white_king) and _is_central(black_king):
        return GamePhase.END_GAME
    if _is_castled(white_king) and _is_castled(black_king):
        return GamePhase.MIDDLE_GAME
    if _is_on_start(white_king) and _is_on_start(black_king):
        return GamePhase.OPENING if count >= OPENING_PIECE_COUNT else GamePhase.MIDDLE_GAME
    if count < FULL_MATERIAL_PIECE_COUNT:
        return GamePhase.MIDDLE_GAME
    return GamePhase.OPENING


def evaluate_material(pieces: Iterable[Piece], white_perspective: bool) -> int:
    """Material balance in pawn units: evaluated side minus opponent."""
    score = 0
    for piece in pieces:
        value = PIECE_VALUES[piece.kind]
        score += value if piece.is_white == white_perspective else -value
    return score


def evaluate_positional(
    pieces: Iterable[Piece],
    white_perspective: bool,
    phase: GamePhase | None = None,
) -> int:
    """
    Piece-square balance in centipawns: evaluated side minus opponent.

    Tables are written from White's side with row 0 = rank 8; a Black piece
    reads the vertically mirrored row, so a black knight on f6 scores like a
    white knight on f3.
    """
    pieces = list(pieces)
    if phase is None:
        phase = classify_phase(pieces)
    table_index = 1 if phase is GamePhase.END_GAME else 0

    score = 0
    for piece in pieces:
        table = PST[piece.kind][table_index]
        row = piece.row if piece.is_white else BOARD_SIZE - 1 - piece.row
        bonus = table[row][piece.column]
        score += bonus if piece.is_white == white_perspective else -bonus
    return score


def evaluate(
    pieces: Iterable[Piece],
    white_perspective: bool,
    positional_weight: float = 0.0,
) -> float:
    """
    Score a piece list from one side's perspective.

    Args:
        pieces:            Piece snapshot to score. Not modified.
        white_perspective: True to score for White, False for Black.
        positional_weight: Multiplier for the piece-square term. 0 gives
                           the plain material balance.

    Returns:
        Score in pawn units. Positive means the evaluated side is ahead.

    Example:
        >>> from chessmax.board import Board
        >>> evaluate(Board().get_piece_list(), True)
        0.0
    """
    pieces = list(pieces)
    score = float(evaluate_material(pieces, white_perspective))
    if positional_weight:
        score += positional_weight * evaluate_positional(pieces, white_perspective) / 100
    return score

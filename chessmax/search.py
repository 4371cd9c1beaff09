"""
Search primitives shared by every bot: move simulation, one-ply selection
and fixed-depth negamax with alpha-beta pruning.

Isolation model:
    The live board is never modified by a search. Every exploratory step
    works on a fresh copy: one-ply scoring deep-clones the piece list and
    simulates the move on the clone (simulate_move), and deeper nodes are
    expanded with Board.after(), which clones the whole board before
    playing the move. Only the move finally returned is ever committed, by
    the caller, through Board.apply_move.

Determinism:
    Root moves are visited in enumeration order (piece-list order, then
    generation order) and a move only replaces the current best when it
    scores strictly higher, so ties always go to the first move seen. No
    randomness is involved anywhere. Interior nodes are ordered with
    MVV-LVA to get more alpha-beta cutoffs; that changes how many nodes are
    visited but not the value backed up to the root.

Threading model:
    Search runs on the caller's thread. A caller that wants a time budget
    passes a threading.Event in SearchState.stop_event and sets it from
    elsewhere (the UCI driver uses a timer). The search then abandons the
    root move in progress and returns the best fully searched one.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, field
from typing import Iterable, NamedTuple

from chessmax.board import Board
from chessmax.constants import CHECKMATE_SCORE, DRAW_SCORE, PIECE_VALUES, MoveKind
from chessmax.errors import SimulationError
from chessmax.evaluate import evaluate
from chessmax.legality import all_legal_moves
from chessmax.move import Move, square_name
from chessmax.pieces import Piece

_log = logging.getLogger(__name__)


@dataclass
class SearchState:
    """
    Mutable bookkeeping for one search.

    Attributes:
        stop_event: Set by an outside caller to abort the search early.
        node_count: Positions scored or expanded so far.
        best_move:  Best root move found so far.
        best_score: Score of best_move from the side-to-move's perspective.
    """

    stop_event: threading.Event = field(default_factory=threading.Event)
    node_count: int = 0
    best_move: Move | None = None
    best_score: float = -math.inf


class SimulatedPosition(NamedTuple):
    """Result of simulate_move: the new piece list and the move as simulated."""

    pieces: list[Piece]
    move: Move


def simulate_move(pieces: Iterable[Piece], move: Move, strict: bool = True) -> SimulatedPosition:
    """
    Deep-clone a piece list and play `move` on the clone.

    The moving piece is found by the move's origin coordinates. An
    opposite-colour piece on the destination (or, for en passant, beside
    the origin) is removed from the clone and attached to the returned
    move as its captured piece. Promotions change the clone's kind and
    castling also relocates the rook, so the simulated list matches the
    position the real move would produce.

    Args:
        pieces: Piece list to start from. Never modified.
        move:   Move to simulate.
        strict: If True, a missing origin piece raises SimulationError.
                If False the untouched clone is returned and a warning is
                logged.

    Returns:
        SimulatedPosition(pieces, move).

    Raises:
        SimulationError: In strict mode, when no piece stands on the origin.
    """
    clone = [piece.clone() for piece in pieces]
    mover = next((p for p in clone if p.position == move.origin), None)
    if mover is None:
        where = square_name(move.from_row, move.from_col)
        if strict:
            raise SimulationError(f"{move.uci()}: no piece on {where} to simulate")
        _log.warning("simulate_move: no piece on %s for %s; position left unchanged", where, move.uci())
        return SimulatedPosition(clone, move)

    capture_square = (move.from_row, move.to_col) if move.kind is MoveKind.EN_PASSANT else move.destination
    captured = next(
        (p for p in clone if p.position == capture_square and p.is_white != mover.is_white),
        None,
    )
    if captured is not None:
        clone.remove(captured)

    mover.row, mover.column = move.destination
    mover.has_moved = True
    if move.promotion is not None:
        mover.kind = move.promotion

    if move.kind is MoveKind.CASTLE:
        kingside = move.to_col > move.from_col
        rook_square = (move.from_row, 7 if kingside else 0)
        rook = next((p for p in clone if p.position == rook_square), None)
        if rook is not None:
            rook.column = 5 if kingside else 3
            rook.has_moved = True

    return SimulatedPosition(clone, Move(
        move.from_row, move.from_col, move.to_row, move.to_col,
        mover, captured, move.promotion, move.kind,
    ))


def _order_moves(moves: list[Move]) -> list[Move]:
    """
    Order moves with MVV-LVA (Most Valuable Victim - Least Valuable Attacker).

    Captures come first, highest victim value first and cheapest attacker
    first among equal victims; quiet moves keep their generation order at
    the end (sorted() is stable).
    """
    def _mvv_lva_score(move: Move) -> int:
        if move.captured is None:
            return 0
        return 100 + 10 * PIECE_VALUES[move.captured.kind] - PIECE_VALUES[move.piece.kind]

    return sorted(moves, key=_mvv_lva_score, reverse=True)


def best_one_ply_move(
    board: Board,
    state: SearchState,
    positional_weight: float = 0.0,
) -> tuple[Move | None, float]:
    """
    Pick the move whose simulated resulting position scores highest.

    Every legal move of the side to move is simulated on a clone of the
    piece list and scored from the mover's perspective. The first move
    with the strictly greatest score wins.

    Returns:
        (best move, its score), or (None, -inf) when there is no legal move.
    """
    mover_is_white = board.white_to_move
    pieces = board.get_piece_list()

    for move in all_legal_moves(board):
        if state.stop_event.is_set():
            break
        state.node_count += 1
        simulated = simulate_move(pieces, move)
        score = evaluate(simulated.pieces, mover_is_white, positional_weight)
        if score > state.best_score:
            state.best_score = score
            state.best_move = move

    return state.best_move, state.best_score


def negamax(
    board: Board,
    depth: int,
    alpha: float,
    beta: float,
    ply: int,
    state: SearchState,
    positional_weight: float = 0.0,
) -> float:
    """
    Negamax search with alpha-beta pruning.

    Negamax is minimax written for a zero-sum game: the score of a position
    for the side to move is the negation of the best score the opponent can
    reach from it, so every node maximizes and the recursion flips signs.

    Nodes at depth 1 are scored with the same simulate-and-evaluate step
    the one-ply bot uses, so a depth-N search is exactly N plies of
    simulate-and-score.

    Args:
        board:  Position at this node. Not modified.
        depth:  Remaining plies, at least 1.
        alpha:  Lower bound of the search window.
        beta:   Upper bound of the search window.
        ply:    Distance from the root, used to prefer faster mates.
        state:  Shared bookkeeping (stop flag, node counter).
        positional_weight: Forwarded to evaluate().

    Returns:
        Score from the perspective of the side to move at this node.
        Returns DRAW_SCORE immediately if the search was stopped; the root
        discards that result.
    """
    if state.stop_event.is_set():
        return DRAW_SCORE

    state.node_count += 1
    moves = all_legal_moves(board)

    # Terminal node: checkmate scores encode distance so the engine prefers
    # the fastest mate and the slowest loss.
    if not moves:
        if board.is_in_check():
            return -(CHECKMATE_SCORE - ply)
        return DRAW_SCORE

    if depth <= 1:
        mover_is_white = board.white_to_move
        best = -math.inf
        for move in moves:
            simulated = simulate_move(board.pieces, move)
            score = evaluate(simulated.pieces, mover_is_white, positional_weight)
            if score > best:
                best = score
            if best >= beta:
                break
        return best

    best = -math.inf
    for move in _order_moves(moves):
        score = -negamax(board.after(move), depth - 1, -beta, -alpha, ply + 1, state, positional_weight)
        if score > best:
            best = score
        if best > alpha:
            alpha = best
        # Beta cutoff: the opponent already has a better alternative earlier
        # in the tree and will never allow this line.
        if alpha >= beta:
            break
    return best


def search_best_move(
    board: Board,
    depth: int,
    state: SearchState,
    positional_weight: float = 0.0,
) -> tuple[Move | None, float]:
    """
    Root of the fixed-depth search.

    Depth 1 is the one-ply selection. Deeper searches expand each root move
    on its own board clone and back up negamax scores. The root keeps the
    first move with the strictly greatest score, exactly like the one-ply
    selection.

    Returns:
        (best move, its score), or (None, -inf) when there is no legal move.
    """
    if depth <= 1:
        return best_one_ply_move(board, state, positional_weight)

    for move in all_legal_moves(board):
        if state.stop_event.is_set():
            break
        score = -negamax(
            board.after(move), depth - 1, -math.inf, -state.best_score, 1, state, positional_weight,
        )
        if state.stop_event.is_set():
            # Interrupted mid-subtree: the score is incomplete, discard it.
            break
        if score > state.best_score:
            state.best_score = score
            state.best_move = move

    return state.best_move, state.best_score

"""Tests for move simulation and the search primitives."""

import logging
import math
import threading

import pytest

from chessmax.board import Board
from chessmax.constants import CHECKMATE_SCORE, DRAW_SCORE, MoveKind, PieceKind
from chessmax.errors import SimulationError
from chessmax.move import Move, parse_square
from chessmax.pieces import Piece
from chessmax.search import (
    SearchState,
    best_one_ply_move,
    negamax,
    search_best_move,
    simulate_move,
)

from conftest import BACK_RANK_MATE_IN_ONE, CASTLING_READY, STALEMATE, play


def at(pieces, name):
    square = parse_square(name)
    return next((p for p in pieces if p.position == square), None)


# ---------------------------------------------------------------------------
# simulate_move
# ---------------------------------------------------------------------------


class TestSimulateMove:
    def test_capture_removes_victim_from_clone_only(self):
        board = Board("4k3/8/8/3q4/8/8/8/3RK3 w - - 0 1")
        pieces = board.get_piece_list()
        simulated = simulate_move(pieces, board.parse_uci("d1d5"))
        assert len(simulated.pieces) == 3
        assert len(pieces) == 4
        assert simulated.move.captured.kind is PieceKind.QUEEN
        assert at(simulated.pieces, "d5").kind is PieceKind.ROOK
        assert at(pieces, "d1").kind is PieceKind.ROOK

    def test_quiet_move_has_no_capture(self, start_board):
        simulated = simulate_move(start_board.get_piece_list(), start_board.parse_uci("g1f3"))
        assert simulated.move.captured is None
        assert len(simulated.pieces) == 32

    def test_promotion(self):
        board = Board("8/P6k/8/8/8/8/8/K7 w - - 0 1")
        simulated = simulate_move(board.get_piece_list(), board.parse_uci("a7a8q"))
        assert at(simulated.pieces, "a8").kind is PieceKind.QUEEN

    def test_castling_moves_the_rook(self):
        board = Board(CASTLING_READY)
        simulated = simulate_move(board.get_piece_list(), board.parse_uci("e1c1"))
        assert at(simulated.pieces, "c1").kind is PieceKind.KING
        assert at(simulated.pieces, "d1").kind is PieceKind.ROOK
        assert at(simulated.pieces, "a1") is None

    def test_en_passant_removes_the_passed_pawn(self):
        board = play(Board(), "e2e4", "a7a6", "e4e5", "d7d5")
        move = board.parse_uci("e5d6")
        assert move.kind is MoveKind.EN_PASSANT
        simulated = simulate_move(board.get_piece_list(), move)
        assert at(simulated.pieces, "d5") is None
        assert simulated.move.captured.kind is PieceKind.PAWN

    def test_missing_origin_raises_in_strict_mode(self, start_board):
        ghost = Move(4, 4, 3, 4, Piece(PieceKind.PAWN, True, 4, 4))
        with pytest.raises(SimulationError):
            simulate_move(start_board.get_piece_list(), ghost)

    def test_missing_origin_is_logged_in_lenient_mode(self, start_board, caplog):
        ghost = Move(4, 4, 3, 4, Piece(PieceKind.PAWN, True, 4, 4))
        with caplog.at_level(logging.WARNING, logger="chessmax.search"):
            simulated = simulate_move(start_board.get_piece_list(), ghost, strict=False)
        assert len(simulated.pieces) == 32
        assert simulated.move.captured is None
        assert "no piece on e4" in caplog.text


# ---------------------------------------------------------------------------
# Selection and negamax
# ---------------------------------------------------------------------------


class TestOnePly:
    def test_first_of_equal_moves_wins(self, start_board):
        move, score = best_one_ply_move(start_board, SearchState())
        assert move.uci() == "a2a3"
        assert score == 0.0

    def test_grabs_free_material(self):
        board = Board("4k3/8/8/3q4/8/8/8/3RK3 w - - 0 1")
        state = SearchState()
        move, score = best_one_ply_move(board, state)
        assert move.uci() == "d1d5"
        assert score == 5.0
        assert state.node_count == len(board.legal_moves())

    def test_no_legal_moves(self, fools_mate):
        move, score = best_one_ply_move(fools_mate, SearchState())
        assert move is None
        assert score == -math.inf


class TestNegamax:
    def test_checkmated_side_scores_mate(self, fools_mate):
        assert negamax(fools_mate, 2, -math.inf, math.inf, 0, SearchState()) == -CHECKMATE_SCORE

    def test_stalemate_scores_draw(self):
        assert negamax(Board(STALEMATE), 2, -math.inf, math.inf, 0, SearchState()) == DRAW_SCORE

    def test_depth_two_finds_mate_in_one(self):
        board = Board(BACK_RANK_MATE_IN_ONE)
        move, score = search_best_move(board, 2, SearchState())
        assert move.uci() == "a1a8"
        assert score == CHECKMATE_SCORE - 1

    def test_depth_two_avoids_defended_pawn(self):
        board = Board("4k3/8/2p5/3p4/8/8/8/3QK3 w - - 0 1")
        greedy, _ = search_best_move(board, 1, SearchState())
        careful, _ = search_best_move(board, 2, SearchState())
        assert greedy.uci() == "d1d5"
        assert careful.uci() != "d1d5"

    def test_search_does_not_modify_board(self):
        board = Board("r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1")
        before = board.fen()
        search_best_move(board, 2, SearchState())
        assert board.fen() == before
        assert board.history == []

    def test_preset_stop_event_returns_no_move(self, start_board):
        stop = threading.Event()
        stop.set()
        state = SearchState(stop_event=stop)
        move, _ = search_best_move(start_board, 3, state)
        assert move is None
        assert state.node_count == 0

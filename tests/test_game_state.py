"""Tests for game-state classification."""

import pytest

from chessmax.board import Board
from chessmax.game_state import (
    GameStatus,
    evaluate_game_state,
    game_result,
    is_checkmate,
    is_insufficient_material,
    is_stalemate,
)

from conftest import BARE_KINGS, STALEMATE, play


class TestCheckmateAndStalemate:
    def test_fools_mate(self, fools_mate):
        assert evaluate_game_state(fools_mate) is GameStatus.CHECKMATE
        assert is_checkmate(fools_mate)
        assert not is_stalemate(fools_mate)
        assert fools_mate.history[-1].san == "Qh4#"
        assert game_result(fools_mate) == "0-1"

    def test_rook_mate_on_the_e_file(self):
        board = Board("4k3/8/4K3/8/8/8/8/R7 w - - 0 1")
        play(board, "a1a8")
        assert evaluate_game_state(board) is GameStatus.CHECKMATE
        assert game_result(board) == "1-0"

    def test_queen_mate_on_the_e_file(self):
        board = Board("k7/8/8/1q6/8/2n5/7P/4K3 b - - 0 1")
        play(board, "b5e2")
        assert board.history[-1].san == "Qe2#"
        assert evaluate_game_state(board) is GameStatus.CHECKMATE
        assert game_result(board) == "0-1"

    def test_stalemate(self):
        board = Board(STALEMATE)
        assert evaluate_game_state(board) is GameStatus.STALEMATE
        assert is_stalemate(board)
        assert game_result(board) == "1/2-1/2"

    def test_check_is_not_terminal(self):
        board = Board("4k3/8/8/8/8/8/8/4R1K1 b - - 0 1")
        status = evaluate_game_state(board)
        assert status is GameStatus.CHECK
        assert not status.is_terminal
        assert game_result(board) == "*"

    def test_start_position_is_ongoing(self, start_board):
        assert evaluate_game_state(start_board) is GameStatus.ONGOING

    def test_classification_does_not_modify_board(self, fools_mate):
        before = fools_mate.fen()
        evaluate_game_state(fools_mate)
        assert fools_mate.fen() == before


class TestDraws:
    @pytest.mark.parametrize("fen", [
        BARE_KINGS,
        "8/8/8/4k3/8/8/8/1N2K3 w - - 0 1",
        "8/8/8/4k3/8/8/8/2B1K3 w - - 0 1",
        "5b2/8/8/4k3/8/8/8/2B1K3 w - - 0 1",
    ])
    def test_insufficient_material(self, fen):
        board = Board(fen)
        assert is_insufficient_material(board)
        status = evaluate_game_state(board)
        assert status is GameStatus.INSUFFICIENT_MATERIAL
        assert status.is_draw

    @pytest.mark.parametrize("fen", [
        "2b5/8/8/4k3/8/8/8/2B1K3 w - - 0 1",
        "8/8/8/4k3/8/8/8/1NN1K3 w - - 0 1",
        "8/8/8/4k3/8/8/4P3/4K3 w - - 0 1",
    ])
    def test_sufficient_material(self, fen):
        assert not is_insufficient_material(Board(fen))

    def test_fifty_move_rule(self):
        board = Board("8/8/8/4k3/8/8/8/R3K3 w - - 100 60")
        assert evaluate_game_state(board) is GameStatus.FIFTY_MOVE_RULE

    def test_ninety_nine_plies_is_not_yet_a_draw(self):
        board = Board("8/8/8/4k3/8/8/8/R3K3 w - - 99 60")
        assert evaluate_game_state(board) is GameStatus.ONGOING
        play(board, "a1a2")
        assert evaluate_game_state(board) is GameStatus.FIFTY_MOVE_RULE

    def test_checkmate_outranks_fifty_move_rule(self):
        board = Board("4k3/8/4K3/8/8/8/8/R7 w - - 99 80")
        play(board, "a1a8")
        assert evaluate_game_state(board) is GameStatus.CHECKMATE

    def test_threefold_repetition(self, start_board):
        shuffle = ("g1f3", "g8f6", "f3g1", "f6g8")
        play(start_board, *shuffle)
        assert evaluate_game_state(start_board) is GameStatus.ONGOING
        play(start_board, *shuffle)
        status = evaluate_game_state(start_board)
        assert status is GameStatus.THREEFOLD_REPETITION
        assert game_result(start_board) == "1/2-1/2"

    def test_repetition_after_a_double_push(self, start_board):
        # After 1.e4 e5 the e6 square is recorded but no white pawn can use it.
        play(start_board, "e2e4", "e7e5")
        shuffle = ("g1f3", "g8f6", "f3g1", "f6g8")
        play(start_board, *shuffle)
        assert evaluate_game_state(start_board) is GameStatus.ONGOING
        play(start_board, *shuffle)
        assert evaluate_game_state(start_board) is GameStatus.THREEFOLD_REPETITION

    def test_live_en_passant_makes_a_different_position(self):
        board = Board("4k3/8/8/8/4p3/8/3P4/4K3 w - - 0 1")
        play(board, "d2d4")
        assert board.position_key().endswith(" b - d3")
        shuffle = ("e8d8", "e1f1", "d8e8", "f1e1")
        play(board, *shuffle, *shuffle)
        assert board.position_key().endswith(" b - -")
        assert evaluate_game_state(board) is GameStatus.ONGOING
        play(board, *shuffle)
        assert evaluate_game_state(board) is GameStatus.THREEFOLD_REPETITION

"""Tests for BotConfig, the bot strategies and the presets."""

import threading

import pytest
from pydantic import ValidationError

from chessmax.board import Board
from chessmax.bots import (
    PRESETS,
    BotConfig,
    Hikaru,
    Magnus,
    Martin,
    MinimaxAi,
    OnePlyAi,
    create_bot,
)
from chessmax.constants import STARTING_FEN

from conftest import BACK_RANK_MATE_IN_ONE


class TestBotConfig:
    def test_defaults(self):
        config = BotConfig(name="Test")
        assert (config.sprite, config.elo, config.depth, config.positional_weight) == (1, 0, 1, 0.0)

    def test_depth_must_be_positive(self):
        with pytest.raises(ValidationError):
            BotConfig(name="Test", depth=0)

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            BotConfig(name="Test", positional_weight=-1)

    def test_frozen(self):
        config = BotConfig(name="Test")
        with pytest.raises(ValidationError):
            config.depth = 4


class TestPresets:
    @pytest.mark.parametrize("cls, name, sprite, elo, depth", [
        (Martin, "Martin", 1, 250, 1),
        (Hikaru, "Hikaru", 2, 1200, 2),
        (Magnus, "Magnus", 30, 2000, 3),
    ])
    def test_preset_configuration(self, cls, name, sprite, elo, depth):
        bot = cls()
        assert (bot.name, bot.sprite, bot.elo, bot.depth) == (name, sprite, elo, depth)

    def test_strategies(self):
        assert isinstance(Martin(), OnePlyAi)
        assert isinstance(Hikaru(), MinimaxAi)
        assert isinstance(Magnus(), MinimaxAi)

    def test_create_bot_is_case_insensitive(self):
        assert isinstance(create_bot("MAGNUS"), Magnus)
        assert set(PRESETS) == {"martin", "hikaru", "magnus"}

    def test_create_bot_unknown(self):
        with pytest.raises(ValueError):
            create_bot("stockfish")

    def test_config_override(self):
        bot = create_bot("hikaru", BotConfig(name="Sparring", depth=1))
        assert bot.name == "Sparring"
        assert bot.depth == 1


class TestFindStrategicMove:
    def test_martin_opening_move(self, start_board):
        assert Martin().find_strategic_move(start_board).uci() == "a2a3"

    def test_deterministic(self):
        board = Board("r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3")
        bot = Hikaru()
        assert bot.find_strategic_move(board) == bot.find_strategic_move(board)

    @pytest.mark.parametrize("cls", [Hikaru, Magnus])
    def test_mate_in_one(self, cls):
        board = Board(BACK_RANK_MATE_IN_ONE)
        assert cls().find_strategic_move(board).uci() == "a1a8"

    @pytest.mark.parametrize("cls", [Martin, Hikaru])
    def test_board_is_untouched(self, cls, start_board):
        cls().find_strategic_move(start_board)
        assert start_board.fen() == STARTING_FEN
        assert start_board.history == []

    def test_result_can_be_applied(self, start_board):
        for _ in range(4):
            move = Hikaru().find_strategic_move(start_board)
            start_board.apply_move(move)
        assert len(start_board.history) == 4

    @pytest.mark.parametrize("cls", [Martin, Hikaru])
    def test_no_move_when_mated(self, cls, fools_mate):
        assert cls().find_strategic_move(fools_mate) is None

    def test_stopped_search_still_returns_a_legal_move(self, start_board):
        stop = threading.Event()
        stop.set()
        bot = Magnus()
        move = bot.find_strategic_move(start_board, stop)
        assert move in start_board.legal_moves()
        assert bot.last_search.stop_event is stop

    def test_last_search_records_nodes(self, start_board):
        bot = Martin()
        assert bot.last_search is None
        bot.find_strategic_move(start_board)
        assert bot.last_search.node_count == 20
        assert bot.last_search.best_move.uci() == "a2a3"

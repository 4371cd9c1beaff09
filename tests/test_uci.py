"""Tests for the UCI front end."""

import io

import pytest

from chessmax.constants import CHECKMATE_SCORE, STARTING_FEN
from chessmax.errors import ChessError
from interface.uci import UciHandler, format_score, run_uci_loop, split_position, think_time_ms

from conftest import BACK_RANK_MATE_IN_ONE


def run_go(handler, line="go"):
    handler.dispatch(line)
    handler.search_thread.join(timeout=60)
    assert not handler.search_thread.is_alive()


def bestmove(output: str) -> str:
    lines = [line for line in output.splitlines() if line.startswith("bestmove")]
    assert len(lines) == 1
    return lines[0].split()[1]


class TestHandshake:
    def test_uci(self, capsys):
        UciHandler().dispatch("uci")
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "id name ChessMax"
        assert "option name Bot type combo default Martin var Martin var Hikaru var Magnus" in out
        assert out[-1] == "uciok"

    def test_isready(self, capsys):
        UciHandler().dispatch("isready\n")
        assert capsys.readouterr().out == "readyok\n"

    def test_unknown_command_goes_to_stderr(self, capsys):
        UciHandler().dispatch("register later")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "register" in captured.err

    def test_blank_line(self, capsys):
        UciHandler().dispatch("   \n")
        assert capsys.readouterr() == ("", "")

    def test_setoption_bot(self, capsys):
        handler = UciHandler()
        handler.dispatch("setoption name Bot value Magnus")
        assert handler.bot.name == "Magnus"
        handler.dispatch("setoption name Bot value Kasparov")
        assert handler.bot.name == "Magnus"
        assert "unknown bot" in capsys.readouterr().err

    def test_setoption_unknown_option(self, capsys):
        handler = UciHandler()
        handler.dispatch("setoption name Hash value 64")
        assert handler.bot.name == "Martin"
        assert capsys.readouterr().out == ""


class TestPosition:
    def test_startpos_with_moves(self):
        handler = UciHandler()
        handler.dispatch("position startpos moves e2e4 e7e5")
        assert handler.board.fen() == "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR w KQkq e6 0 2"
        assert [entry.san for entry in handler.board.history] == ["e4", "e5"]

    def test_fen(self):
        handler = UciHandler()
        handler.dispatch(f"position fen {BACK_RANK_MATE_IN_ONE}")
        assert handler.board.fen() == BACK_RANK_MATE_IN_ONE

    def test_fen_with_moves(self):
        handler = UciHandler()
        handler.dispatch(f"position fen {STARTING_FEN} moves d2d4")
        assert handler.board.fen().startswith("rnbqkbnr/pppppppp/8/8/3P4/8/PPP1PPPP/RNBQKBNR b")

    def test_illegal_move_stops_replay(self, capsys):
        handler = UciHandler()
        handler.dispatch("position startpos moves e2e4 e2e4 d7d5")
        assert len(handler.board.history) == 1
        assert "stopping replay" in capsys.readouterr().err

    def test_bad_fen_keeps_previous_position(self, capsys):
        handler = UciHandler()
        handler.dispatch("position startpos moves e2e4")
        handler.dispatch("position fen not/a/fen w - - 0 1")
        assert len(handler.board.history) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "bad position command" in captured.err

    def test_split_position(self):
        assert split_position(["startpos"]) == (None, [])
        assert split_position(["startpos", "moves", "e2e4"]) == (None, ["e2e4"])
        assert split_position(["fen", "8/8", "w", "moves", "a1a2"]) == ("8/8 w", ["a1a2"])
        with pytest.raises(ChessError):
            split_position(["kiwipete"])


class TestGo:
    def test_martin_from_start(self, capsys):
        handler = UciHandler()
        handler.dispatch("position startpos")
        run_go(handler)
        out = capsys.readouterr().out
        assert bestmove(out) == "a2a3"
        assert "info depth 1 score cp 0 nodes 20 time" in out

    def test_mate_is_reported(self, capsys):
        handler = UciHandler()
        handler.dispatch("setoption name Bot value Hikaru")
        handler.dispatch(f"position fen {BACK_RANK_MATE_IN_ONE}")
        run_go(handler)
        out = capsys.readouterr().out
        assert bestmove(out) == "a1a8"
        assert "score mate 1" in out

    def test_no_legal_moves(self, capsys):
        handler = UciHandler()
        handler.dispatch("position startpos moves f2f3 e7e5 g2g4 d8h4")
        run_go(handler)
        assert bestmove(capsys.readouterr().out) == "(none)"

    def test_movetime_budget_still_answers(self, capsys):
        handler = UciHandler()
        handler.dispatch("setoption name Bot value Magnus")
        handler.dispatch("position startpos")
        run_go(handler, "go movetime 1")
        move = bestmove(capsys.readouterr().out)
        assert move in {m.uci() for m in handler.board.legal_moves()}

    def test_search_runs_on_a_copy(self, capsys):
        handler = UciHandler()
        handler.dispatch("position startpos")
        run_go(handler)
        assert handler.board.fen() == STARTING_FEN

    def test_quit_exits(self):
        with pytest.raises(SystemExit):
            UciHandler().dispatch("quit")


class TestHelpers:
    @pytest.mark.parametrize("score, expected", [
        (0.0, "cp 0"),
        (1.5, "cp 150"),
        (-3.0, "cp -300"),
        (CHECKMATE_SCORE - 1, "mate 1"),
        (CHECKMATE_SCORE - 3, "mate 2"),
        (-(CHECKMATE_SCORE - 2), "mate -1"),
        (float("-inf"), "cp 0"),
    ])
    def test_format_score(self, score, expected):
        assert format_score(score) == expected

    @pytest.mark.parametrize("tokens, white, expected", [
        (["movetime", "500"], True, 500),
        (["wtime", "40000", "btime", "20000", "winc", "100", "binc", "50"], True, 1100),
        (["wtime", "40000", "btime", "20000", "winc", "100", "binc", "50"], False, 550),
        (["infinite"], True, None),
        (["depth", "5"], True, None),
        ([], True, None),
    ])
    def test_think_time(self, tokens, white, expected):
        assert think_time_ms(tokens, white) == expected

    def test_loop_runs_until_quit(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("uci\nisready\nbogus\nquit\nisready\n"))
        with pytest.raises(SystemExit):
            run_uci_loop()
        captured = capsys.readouterr()
        assert "uciok" in captured.out
        assert captured.out.count("readyok") == 1
        assert "bogus" in captured.err

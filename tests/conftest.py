"""Shared positions and helpers for the test suite."""

import pytest

from chessmax.board import Board

# ---------------------------------------------------------------------------
# Test positions (FEN)
# ---------------------------------------------------------------------------

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
ENDGAME_ROOKS = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"
PROMOTION_TANGLE = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"
CHECKED_CASTLE = "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8"
CASTLING_READY = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
BACK_RANK_MATE_IN_ONE = "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1"
STALEMATE = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"
BARE_KINGS = "8/8/8/4k3/8/8/8/4K3 w - - 0 1"


def play(board: Board, *moves: str) -> Board:
    """Apply a sequence of UCI moves to `board` and return it."""
    for text in moves:
        board.apply_move(board.parse_uci(text))
    return board


def legal_ucis(board: Board) -> list[str]:
    return [move.uci() for move in board.legal_moves()]


@pytest.fixture
def start_board() -> Board:
    return Board()


@pytest.fixture
def fools_mate() -> Board:
    """White has just been mated: 1.f3 e5 2.g4 Qh4#."""
    return play(Board(), "f2f3", "e7e5", "g2g4", "d8h4")

#!/usr/bin/env python3
"""
Perft divide: compare ChessMax move generation against python-chess.

For each root move, counts the leaf nodes below it with both engines and
prints any move whose counts differ (or that only one engine generates).
Descend into a mismatching move by appending it to the FEN's move list to
find the exact position where generation goes wrong.

Usage: python3 tools/perft.py DEPTH [FEN] [moves m1 m2 ...]
"""
import os
import sys

REPO = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO not in sys.path:
    sys.path.insert(0, REPO)

import chess

from chessmax.board import Board
from chessmax.constants import STARTING_FEN
from chessmax.legality import all_legal_moves, perft


def reference_perft(board: chess.Board, depth: int) -> int:
    """Leaf count from python-chess, used as the reference."""
    if depth == 0:
        return 1
    total = 0
    for move in board.legal_moves:
        board.push(move)
        total += reference_perft(board, depth - 1)
        board.pop()
    return total


def divide(fen: str, depth: int, moves: list[str]) -> int:
    """Print per-move counts that disagree; return the number of mismatches."""
    ours = Board(fen)
    reference = chess.Board(fen)
    for uci in moves:
        ours.apply_move(ours.parse_uci(uci))
        reference.push_uci(uci)

    our_counts = {m.uci(): perft(ours.after(m), depth - 1) for m in all_legal_moves(ours)}
    ref_counts = {}
    for move in reference.legal_moves:
        reference.push(move)
        ref_counts[move.uci()] = reference_perft(reference, depth - 1)
        reference.pop()

    mismatches = 0
    for uci in sorted(set(our_counts) | set(ref_counts)):
        a, b = our_counts.get(uci), ref_counts.get(uci)
        if a != b:
            mismatches += 1
            print(f"{uci:<6} chessmax={a} python-chess={b}")
    print(f"total  chessmax={sum(our_counts.values())} python-chess={sum(ref_counts.values())}")
    return mismatches


def main() -> None:
    args = sys.argv[1:]
    if not args:
        print(__doc__)
        sys.exit(2)
    depth = int(args[0])
    rest = args[1:]
    moves: list[str] = []
    if "moves" in rest:
        idx = rest.index("moves")
        rest, moves = rest[:idx], rest[idx + 1:]
    fen = " ".join(rest) or STARTING_FEN
    sys.exit(1 if divide(fen, depth, moves) else 0)


if __name__ == "__main__":
    main()

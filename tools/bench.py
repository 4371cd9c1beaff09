#!/usr/bin/env python3
"""
Bot benchmark over the UCI driver.

Plays one "go" per fixed position for a bot preset and prints the reported
depth, score, node count and wall time. Compare runs before and after a
change to move generation, evaluation or search: fewer nodes at the same
depth means better pruning, less time per node means faster generation or
evaluation.

Usage: python3 tools/bench.py [BotName]     (default: Hikaru)
"""
import os
import subprocess
import sys
from dataclasses import dataclass

REPO = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
ENGINE = [sys.executable, os.path.join(REPO, "interface", "uci.py")]

# Keep this list stable so numbers stay comparable between runs.
POSITIONS = [
    ("Start",        "startpos"),
    ("After 1.e4",   "startpos moves e2e4"),
    ("Sicilian",     "startpos moves e2e4 c7c5"),
    ("Italian",      "startpos moves e2e4 e7e5 g1f3 b8c6 f1c4"),
    ("London",       "startpos moves d2d4 d7d5 g1f3 g8f6 c1f4"),
    ("Mid-open",     "fen r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"),
    ("Kiwipete",     "fen r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"),
    ("Back rank",    "fen 6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1"),
    ("Rook ending",  "fen 8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1"),
    ("Pawn race",    "fen 8/1p4k1/p7/P1K5/8/8/8/8 w - - 0 1"),
]


@dataclass
class BenchResult:
    label: str
    move: str = "(none)"
    depth: int = 0
    score: str = "-"
    nodes: int = 0
    time_ms: int = 0


def _parse_info(line: str, result: BenchResult) -> None:
    """Copy depth/score/nodes/time out of an "info" line into result."""
    tokens = line.split()
    for key in ("depth", "nodes", "time"):
        if key in tokens:
            field = "time_ms" if key == "time" else key
            setattr(result, field, int(tokens[tokens.index(key) + 1]))
    if "score" in tokens:
        at = tokens.index("score")
        result.score = " ".join(tokens[at + 1:at + 3])


class Engine:
    """A UCI driver subprocess reused for every position of a run."""

    def __init__(self, bot: str) -> None:
        self.proc = subprocess.Popen(
            ENGINE,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            env={**os.environ, "PYTHONPATH": REPO},
        )
        self.send("uci", f"setoption name Bot value {bot}", "isready")
        self.wait_for("readyok")

    def send(self, *lines: str) -> None:
        self.proc.stdin.write("".join(line + "\n" for line in lines))
        self.proc.stdin.flush()

    def wait_for(self, prefix: str) -> str:
        for line in self.proc.stdout:
            if line.startswith(prefix):
                return line.strip()
        raise RuntimeError(f"engine exited before sending {prefix!r}")

    def search(self, label: str, position: str) -> BenchResult:
        result = BenchResult(label)
        self.send("ucinewgame", f"position {position}", "go")
        for line in self.proc.stdout:
            if line.startswith("info"):
                _parse_info(line, result)
            elif line.startswith("bestmove"):
                result.move = line.split()[1]
                break
        return result

    def close(self) -> None:
        self.send("quit")
        self.proc.wait(timeout=5)


def _row(label: str, move: str, depth: str, score: str, nodes: str, time_ms: str) -> str:
    return f"{label:<14} {move:<7} {depth:>5} {score:>10} {nodes:>8} {time_ms:>9}"


def main() -> None:
    bot = sys.argv[1] if len(sys.argv) > 1 else "Hikaru"
    print(f"ChessMax benchmark: bot={bot} python={sys.executable}")
    print()
    print(_row("Position", "Move", "Depth", "Score", "Nodes", "Time(ms)"))
    print("-" * 58)

    engine = Engine(bot)
    results = []
    try:
        for label, position in POSITIONS:
            r = engine.search(label, position)
            results.append(r)
            print(_row(r.label, r.move, str(r.depth), r.score, f"{r.nodes:,}", f"{r.time_ms:,}"))
    finally:
        engine.close()

    searched = [r for r in results if r.nodes]
    if searched:
        print("-" * 58)
        nodes = sum(r.nodes for r in searched) // len(searched)
        time_ms = sum(r.time_ms for r in searched) // len(searched)
        print(_row("AVERAGE", "", "", "", f"{nodes:,}", f"{time_ms:,}"))


if __name__ == "__main__":
    main()

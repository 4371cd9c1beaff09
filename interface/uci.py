"""
UCI front end for the ChessMax bots.

Speaks the Universal Chess Interface over stdin/stdout so a bot can sit
behind any UCI GUI or match runner (cutechess-cli, fastchess, ...). Every
reply line is flushed as soon as it is written. stdout carries protocol
lines only; diagnostics go to stderr.

Supported commands:
    uci, isready, ucinewgame
    setoption name Bot value <Martin|Hikaru|Magnus>
    position startpos|fen <FEN> [moves <m1> <m2> ...]
    go [movetime <ms> | wtime <ms> btime <ms> [winc <ms> binc <ms>] | infinite]
    stop, quit

Searching:
    "go" hands a copy of the current board to the selected bot on a daemon
    thread, so the reader loop keeps consuming stdin and can act on "stop".
    A time budget is a threading.Timer that sets the bot's stop event;
    without one the bot searches to its preset depth.
"""

import math
import os
import sys
import threading
import time

# Allow "python interface/uci.py" from a source checkout.
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

from chessmax.board import Board
from chessmax.bots import PRESETS, Ai, create_bot
from chessmax.constants import CHECKMATE_SCORE
from chessmax.errors import ChessError

DEFAULT_BOT = "martin"
# Scores this close to CHECKMATE_SCORE are reported as mate distances.
MATE_WINDOW = 1_000
# Share of the remaining clock spent on one move.
MOVES_TO_GO = 40
JOIN_TIMEOUT_S = 2.0


def _send(line: str) -> None:
    print(line, flush=True)


def _warn(message: str) -> None:
    """Diagnostics for humans; a GUI never reads stderr."""
    print(message, file=sys.stderr, flush=True)


def format_score(score: float) -> str:
    """
    Render a search score as the UCI "score" argument.

    Pawn-unit scores become centipawns ("cp 35"). Scores within MATE_WINDOW
    of CHECKMATE_SCORE become "mate N" in full moves, negative when the
    side to move is the one getting mated. A search that never scored a
    move (stopped immediately) reports "cp 0".
    """
    if not math.isfinite(score):
        return "cp 0"
    if abs(score) < CHECKMATE_SCORE - MATE_WINDOW:
        return f"cp {round(score * 100)}"
    plies = CHECKMATE_SCORE - int(abs(score))
    moves = (plies + 1) // 2
    return f"mate {moves}" if score > 0 else f"mate {-moves}"


def split_position(tokens: list[str]) -> tuple[str | None, list[str]]:
    """
    Split the arguments of "position" into (fen, moves).

    fen is None for "startpos". Raises ChessError for anything else.
    """
    if "moves" in tokens:
        cut = tokens.index("moves")
        head, moves = tokens[:cut], tokens[cut + 1:]
    else:
        head, moves = tokens, []
    if head == ["startpos"]:
        return None, moves
    if head and head[0] == "fen":
        return " ".join(head[1:]), moves
    raise ChessError(f"unsupported position arguments: {' '.join(tokens)!r}")


def think_time_ms(tokens: list[str], white_to_move: bool) -> int | None:
    """
    Time budget for one "go", in milliseconds, or None for no budget.

    movetime wins outright. Otherwise the mover gets 1/MOVES_TO_GO of its
    clock plus its increment. "infinite", "depth N" and a bare "go" leave
    the bot to finish its preset depth.
    """
    limits: dict[str, int] = {}
    for key, value in zip(tokens, tokens[1:]):
        if value.lstrip("-").isdigit():
            limits.setdefault(key, int(value))

    if "movetime" in limits:
        return max(1, limits["movetime"])
    clock, increment = ("wtime", "winc") if white_to_move else ("btime", "binc")
    if clock not in limits:
        return None
    return max(1, limits[clock] // MOVES_TO_GO + limits.get(increment, 0))


class UciHandler:
    """
    Protocol state between commands.

    Attributes:
        board:         Position set by the last "position" command.
        bot:           Bot that answers "go".
        search_thread: Thread running the current "go", or None.
        stop_event:    Stop flag handed to the current search.
        timer:         Budget timer of the current search, or None.
    """

    def __init__(self) -> None:
        self.board = Board()
        self.bot: Ai = create_bot(DEFAULT_BOT)
        self.search_thread: threading.Thread | None = None
        self.stop_event = threading.Event()
        self.timer: threading.Timer | None = None
        self._commands = {
            "uci": self.on_uci,
            "isready": self.on_isready,
            "ucinewgame": self.on_ucinewgame,
            "setoption": self.on_setoption,
            "position": self.on_position,
            "go": self.on_go,
            "stop": self.on_stop,
            "quit": self.on_quit,
        }

    def dispatch(self, line: str) -> None:
        """Run one input line. Unknown commands are skipped, as UCI requires."""
        tokens = line.split()
        if not tokens:
            return
        command = self._commands.get(tokens[0])
        if command is None:
            _warn(f"uci: ignoring unknown command {tokens[0]!r}")
            return
        command(tokens[1:])

    # -----------------------------------------------------------------------
    # Commands
    # -----------------------------------------------------------------------

    def on_uci(self, args: list[str]) -> None:
        _send("id name ChessMax")
        _send("id author ChessMax Project")
        names = " ".join(f"var {preset.DEFAULT_CONFIG.name}" for preset in PRESETS.values())
        _send(f"option name Bot type combo default {self.bot.name} {names}")
        _send("uciok")

    def on_isready(self, args: list[str]) -> None:
        _send("readyok")

    def on_ucinewgame(self, args: list[str]) -> None:
        self._halt_search()
        self.board = Board()

    def on_setoption(self, args: list[str]) -> None:
        """Handle "setoption name <id> value <x>"; only the Bot option exists."""
        if "name" not in args or "value" not in args:
            _warn(f"uci: malformed setoption: {' '.join(args)}")
            return
        name_at, value_at = args.index("name"), args.index("value")
        name = " ".join(args[name_at + 1:value_at])
        value = " ".join(args[value_at + 1:])
        if name.lower() != "bot":
            _warn(f"uci: no option named {name!r}")
            return
        try:
            self.bot = create_bot(value)
        except ValueError as exc:
            _warn(f"uci: {exc}")

    def on_position(self, args: list[str]) -> None:
        """
        Set up the position to search.

        A malformed command or FEN leaves the previous position in place.
        Move replay stops at the first move that is not legal, keeping the
        position reached up to that point.
        """
        try:
            fen, moves = split_position(args)
            board = Board() if fen is None else Board(fen)
        except ChessError as exc:
            _warn(f"uci: bad position command: {exc}")
            return

        for text in moves:
            try:
                board.apply_move(board.parse_uci(text))
            except ChessError as exc:
                _warn(f"uci: stopping replay at {text!r}: {exc}")
                break
        self.board = board

    def on_go(self, args: list[str]) -> None:
        """Start the bot on a private copy of the board and return at once."""
        self._halt_search()

        stop = self.stop_event = threading.Event()
        board, bot = self.board.copy(), self.bot
        budget_ms = think_time_ms(args, board.white_to_move)

        def think() -> None:
            started = time.monotonic()
            try:
                move = bot.find_strategic_move(board, stop)
            except Exception as exc:
                _warn(f"uci: search failed: {exc}")
                move = None
            if move is None:
                _send("bestmove (none)")
                return
            elapsed = max(1, round((time.monotonic() - started) * 1000))
            report = bot.last_search
            _send(
                f"info depth {bot.depth} score {format_score(report.best_score)} "
                f"nodes {report.node_count} time {elapsed}"
            )
            _send(f"bestmove {move.uci()}")

        if budget_ms is not None:
            self.timer = threading.Timer(budget_ms / 1000, stop.set)
            self.timer.daemon = True
            self.timer.start()
        self.search_thread = threading.Thread(target=think, name="uci-search", daemon=True)
        self.search_thread.start()

    def on_stop(self, args: list[str]) -> None:
        self._halt_search()

    def on_quit(self, args: list[str]) -> None:
        self._halt_search()
        raise SystemExit(0)

    def _halt_search(self) -> None:
        """Stop the running search, if any, and wait briefly for its bestmove."""
        self.stop_event.set()
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None
        thread, self.search_thread = self.search_thread, None
        if thread is not None and thread.is_alive():
            thread.join(timeout=JOIN_TIMEOUT_S)


def run_uci_loop() -> None:
    """
    Read commands from stdin until "quit" or end of input.

    One bad command never takes the engine down mid-match: anything a
    command raises is reported on stderr and the loop carries on.
    """
    handler = UciHandler()
    for line in sys.stdin:
        try:
            handler.dispatch(line)
        except Exception as exc:
            _warn(f"uci: error while handling {line.strip()!r}: {exc}")


if __name__ == "__main__":
    run_uci_loop()

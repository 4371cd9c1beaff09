"""
Bot strategies and their presets.

Every bot is an Ai: a named strategy with a display sprite, an ELO rating
and a search depth, all carried in an explicit BotConfig value. The engine
treats name, sprite and ELO as opaque labels for whoever renders the bot;
only depth and positional_weight influence play.

Two strategies exist:

    OnePlyAi   Simulates every legal move once and keeps the best-scoring
               resulting position. Martin is the preset.
    MinimaxAi  The same simulate-and-score step, recursed to the configured
               depth with negamax and alpha-beta. Hikaru and Magnus are
               presets.

Both are deterministic: the same board and the same config always produce
the same move.
"""

from __future__ import annotations

import abc
import logging
import threading
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, field_validator

from chessmax.board import Board
from chessmax.move import Move
from chessmax.search import SearchState, best_one_ply_move, search_best_move

_log = logging.getLogger(__name__)


class BotConfig(BaseModel):
    """
    Immutable bot configuration supplied by the caller.

    Fields:
        name:              Display name.
        sprite:            Sprite index for the bot's avatar (1-based).
        elo:               Advertised rating; carried, never interpreted.
        depth:             Search depth in plies, at least 1.
        positional_weight: Weight of the piece-square term in evaluation.
                           0 means material only.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    sprite: int = 1
    elo: int = 0
    depth: int = 1
    positional_weight: float = 0.0

    @field_validator("depth")
    @classmethod
    def check_depth(cls, v: int) -> int:
        """Reject depths below one ply."""
        if v < 1:
            raise ValueError("depth must be at least 1")
        return v

    @field_validator("positional_weight")
    @classmethod
    def check_positional_weight(cls, v: float) -> float:
        if v < 0:
            raise ValueError("positional_weight must not be negative")
        return v


class Ai(abc.ABC):
    """
    Abstract bot.

    Subclasses provide DEFAULT_CONFIG and _search(). Callers may pass their
    own BotConfig to override the preset's defaults.

    Attributes:
        config:      The bot's configuration.
        last_search: SearchState of the most recent find_strategic_move()
                     call (node count, best score), or None.
    """

    DEFAULT_CONFIG: ClassVar[BotConfig]

    def __init__(self, config: BotConfig | None = None) -> None:
        self.config = config if config is not None else self.DEFAULT_CONFIG
        self.last_search: SearchState | None = None

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def sprite(self) -> int:
        return self.config.sprite

    @property
    def elo(self) -> int:
        return self.config.elo

    @property
    def depth(self) -> int:
        return self.config.depth

    def find_strategic_move(self, board: Board, stop_event: threading.Event | None = None) -> Move | None:
        """
        Choose a move for the side to move.

        The board is not modified; commit the result with board.apply_move().

        Args:
            board:      Position to move in.
            stop_event: Optional event an outside caller sets to cut the
                        search short.

        Returns:
            The chosen legal move, or None if the side to move has none.
        """
        state = SearchState(stop_event=stop_event if stop_event is not None else threading.Event())
        move, score = self._search(board, state)

        # Stopped before the first root move finished: any legal move beats none.
        if move is None and state.stop_event.is_set():
            moves = board.legal_moves()
            move = moves[0] if moves else None
            state.best_move = move

        self.last_search = state
        _log.debug(
            "%s chose %s (score %.2f, nodes %d)",
            self.name, move.uci() if move else None, score, state.node_count,
        )
        return move

    @abc.abstractmethod
    def _search(self, board: Board, state: SearchState) -> tuple[Move | None, float]:
        """Return (best move, score) for the side to move."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.config!r})"


class OnePlyAi(Ai):
    """Greedy one-ply selection; ignores config.depth."""

    def _search(self, board: Board, state: SearchState) -> tuple[Move | None, float]:
        return best_one_ply_move(board, state, self.config.positional_weight)


class MinimaxAi(Ai):
    """Fixed-depth negamax search to config.depth plies."""

    def _search(self, board: Board, state: SearchState) -> tuple[Move | None, float]:
        return search_best_move(board, self.config.depth, state, self.config.positional_weight)


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


class Martin(OnePlyAi):
    DEFAULT_CONFIG = BotConfig(name="Martin", sprite=1, elo=250, depth=1)


class Hikaru(MinimaxAi):
    DEFAULT_CONFIG = BotConfig(name="Hikaru", sprite=2, elo=1200, depth=2, positional_weight=1.0)


class Magnus(MinimaxAi):
    DEFAULT_CONFIG = BotConfig(name="Magnus", sprite=30, elo=2000, depth=3, positional_weight=1.0)


PRESETS: dict[str, type[Ai]] = {
    "martin": Martin,
    "hikaru": Hikaru,
    "magnus": Magnus,
}


def create_bot(name: str, config: BotConfig | None = None) -> Ai:
    """
    Instantiate a preset by name (case-insensitive).

    Raises:
        ValueError: If no preset has that name.
    """
    try:
        preset = PRESETS[name.lower()]
    except KeyError:
        raise ValueError(f"unknown bot {name!r}; choose one of {', '.join(PRESETS)}") from None
    return preset(config)

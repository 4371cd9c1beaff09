"""
FastAPI web application for the ChessMax engine.

Exposes the engine to a browser board over a small JSON API:

    GET  /api/bots         Available bot presets and their configuration.
    POST /api/legal-moves  Legal moves of the piece on one square (for
                           move highlighting).
    POST /api/state        Game status, check flag, phase and evaluation.
    POST /api/move         Let a bot move in the given position.

Handlers are plain (sync) functions, so FastAPI runs them in its thread
pool and a slow bot search never blocks the event loop. Every request
carries the complete position as FEN and the server keeps no game between
requests; the board UI is a separate client.
"""

import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator

from chessmax.board import Board
from chessmax.bots import PRESETS, create_bot
from chessmax.constants import STARTING_FEN
from chessmax.errors import ChessError, InvalidFenError
from chessmax.evaluate import classify_phase, evaluate
from chessmax.game_state import evaluate_game_state
from chessmax.move import parse_square

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

logging.basicConfig(level=logging.INFO)
_log = logging.getLogger(__name__)

app = FastAPI(title="ChessMax", version="1.0.0")


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class FenRequest(BaseModel):
    """Any request that carries a position."""

    fen: str = STARTING_FEN


class LegalMovesRequest(FenRequest):
    """
    Fields:
        square: Algebraic square of the piece to inspect, e.g. "e2".
    """

    square: str

    @field_validator("square")
    @classmethod
    def check_square(cls, v: str) -> str:
        """Normalize to lower case and reject anything that is not a square."""
        v = v.strip().lower()
        try:
            parse_square(v)
        except ChessError as exc:
            raise ValueError(str(exc)) from exc
        return v


class MoveRequest(FenRequest):
    """
    Fields:
        bot: Preset name (case-insensitive), e.g. "martin" or "magnus".
    """

    bot: str = "martin"

    @field_validator("bot")
    @classmethod
    def check_bot(cls, v: str) -> str:
        if v.lower() not in PRESETS:
            raise ValueError(f"unknown bot {v!r}; choose one of {', '.join(PRESETS)}")
        return v.lower()


class BotInfo(BaseModel):
    key: str
    name: str
    sprite: int
    elo: int
    depth: int


class LegalMovesResponse(BaseModel):
    square: str
    moves: list[str]


class StateResponse(BaseModel):
    """
    Fields:
        status:     GameStatus value, e.g. "ongoing", "check", "checkmate".
        in_check:   Whether the side to move is in check.
        phase:      "opening", "middle_game" or "end_game".
        evaluation: Score in pawn units from the side-to-move's perspective.
        legal_moves: Number of legal moves for the side to move.
    """

    status: str
    in_check: bool
    phase: str
    evaluation: float
    legal_moves: int


class MoveResponse(BaseModel):
    """
    Fields:
        move:   Bot move in UCI notation (e.g. "e2e4", "e7e8q").
        san:    The same move in standard algebraic notation.
        fen:    Board FEN after the bot's move is applied.
        status: Game status for the side to move after the bot's move.
    """

    move: str
    san: str
    fen: str
    status: str


def _load_board(fen: str) -> Board:
    try:
        return Board(fen)
    except InvalidFenError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid FEN: {exc}") from exc


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.get("/api/bots", response_model=list[BotInfo])
def api_bots() -> list[BotInfo]:
    """List the bot presets with their default configuration."""
    return [
        BotInfo(
            key=key,
            name=preset.DEFAULT_CONFIG.name,
            sprite=preset.DEFAULT_CONFIG.sprite,
            elo=preset.DEFAULT_CONFIG.elo,
            depth=preset.DEFAULT_CONFIG.depth,
        )
        for key, preset in PRESETS.items()
    ]


@app.post("/api/legal-moves", response_model=LegalMovesResponse)
def api_legal_moves(request: LegalMovesRequest) -> LegalMovesResponse:
    """Legal moves of the piece on `square`; empty if the square is empty or not the mover's."""
    board = _load_board(request.fen)
    piece = board.piece_at(*parse_square(request.square))
    moves = board.get_legal_moves(piece) if piece is not None else []
    return LegalMovesResponse(square=request.square, moves=[m.uci() for m in moves])


@app.post("/api/state", response_model=StateResponse)
def api_state(request: FenRequest) -> StateResponse:
    """Classify the position for the side to move."""
    board = _load_board(request.fen)
    pieces = board.get_piece_list()
    return StateResponse(
        status=evaluate_game_state(board).value,
        in_check=board.is_in_check(),
        phase=classify_phase(pieces).value,
        evaluation=evaluate(pieces, board.white_to_move, positional_weight=1.0),
        legal_moves=len(board.legal_moves()),
    )


@app.post("/api/move", response_model=MoveResponse)
def api_move(request: MoveRequest) -> MoveResponse:
    """
    Let the requested bot move in the given position.

    Raises:
        HTTPException 400: Malformed FEN or game already over.
        HTTPException 500: The bot failed or returned no move.
    """
    board = _load_board(request.fen)

    status = evaluate_game_state(board)
    if status.is_terminal:
        raise HTTPException(status_code=400, detail=f"Game is already over: {status.value}")

    bot = create_bot(request.bot)
    try:
        move = bot.find_strategic_move(board)
    except Exception as exc:
        _log.exception("Bot %s failed for FEN=%s", bot.name, request.fen)
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc

    if move is None:
        raise HTTPException(status_code=500, detail="Engine returned no move")

    board.apply_move(move)
    entry = board.history[-1]
    _log.info(
        "Bot=%s move=%s nodes=%d fen=%s",
        bot.name,
        entry.move.uci(),
        bot.last_search.node_count,
        request.fen[:40],
    )

    return MoveResponse(
        move=entry.move.uci(),
        san=entry.san,
        fen=board.fen(),
        status=evaluate_game_state(board).value,
    )

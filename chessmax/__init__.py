"""
ChessMax rules engine and bot package.

This package implements the complete rules of chess (check, checkmate,
stalemate, castling, en passant, promotion, and the rule-based draws) plus
a family of deterministic bots that pick moves by simulating and scoring
candidate positions on cloned boards.

Modules:
    constants   - Piece kinds, piece values, PST arrays, and draw limits
    move        - Immutable Move value and square-name helpers
    pieces      - Piece record and pseudo-legal move generation per kind
    fen         - FEN parsing and formatting
    board       - Board state, move application, history and replay
    legality    - Legal-move filter and perft
    notation    - Standard algebraic notation
    game_state  - Check / checkmate / stalemate / draw classification
    evaluate    - Static evaluation (material + piece-square tables)
    search      - Move simulation, one-ply selection, negamax
    bots        - BotConfig, the Ai strategies, and the bot presets
"""

from chessmax.board import Board, CastlingRights, HistoryEntry
from chessmax.bots import Ai, BotConfig, Hikaru, Magnus, Martin, MinimaxAi, OnePlyAi, create_bot
from chessmax.constants import MoveKind, PieceKind
from chessmax.errors import ChessError, IllegalMoveError, InvalidFenError, SimulationError
from chessmax.game_state import GameStatus, evaluate_game_state
from chessmax.move import Move
from chessmax.pieces import Piece

__all__ = [
    "Ai",
    "Board",
    "BotConfig",
    "CastlingRights",
    "ChessError",
    "GameStatus",
    "Hikaru",
    "HistoryEntry",
    "IllegalMoveError",
    "InvalidFenError",
    "Magnus",
    "Martin",
    "MinimaxAi",
    "Move",
    "MoveKind",
    "OnePlyAi",
    "Piece",
    "PieceKind",
    "SimulationError",
    "create_bot",
    "evaluate_game_state",
]

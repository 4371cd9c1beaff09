"""
Engine constants: board geometry, piece values, piece-square tables, and
search scores.

All numeric constants used throughout the engine are defined here so that
the rules, evaluation and search modules never need to introduce new magic
numbers. Centralizing constants makes tuning and experimentation much easier.

Board coordinates are (row, column) pairs. Row 0 is rank 8 (Black's back
rank) and row 7 is rank 1 (White's back rank); column 0 is the a-file. All
piece-square tables below are written in that same orientation, from
White's point of view, so a White piece on (row, col) reads table[row][col]
directly and a Black piece reads the vertically mirrored row.
"""

import enum

# ---------------------------------------------------------------------------
# Colours and geometry
# ---------------------------------------------------------------------------
# Colours are plain booleans, the same convention python-chess uses
# (chess.WHITE is True). This keeps "side to move" a single flag.

WHITE: bool = True
BLACK: bool = False

BOARD_SIZE: int = 8

FILES: str = "abcdefgh"

STARTING_FEN: str = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


class PieceKind(enum.Enum):
    """The closed set of chess piece variants."""

    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"

    @property
    def symbol(self) -> str:
        """Lower-case FEN letter for this kind."""
        return self.value


class MoveKind(enum.Enum):
    """Special-move tag carried by every Move."""

    NORMAL = "normal"
    CASTLE = "castle"
    EN_PASSANT = "en_passant"
    PROMOTION = "promotion"


# Promotion candidates are always generated in this order.
PROMOTION_KINDS: tuple[PieceKind, ...] = (
    PieceKind.QUEEN,
    PieceKind.ROOK,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
)

# ---------------------------------------------------------------------------
# Piece values (pawn units)
# ---------------------------------------------------------------------------
# Standard relative weights. The king is excluded from material counting:
# both kings are always on the board, so they cancel out anyway.

PAWN_VALUE: int = 1
KNIGHT_VALUE: int = 3
BISHOP_VALUE: int = 3
ROOK_VALUE: int = 5
QUEEN_VALUE: int = 9
KING_VALUE: int = 0

PIECE_VALUES: dict[PieceKind, int] = {
    PieceKind.PAWN:   PAWN_VALUE,
    PieceKind.KNIGHT: KNIGHT_VALUE,
    PieceKind.BISHOP: BISHOP_VALUE,
    PieceKind.ROOK:   ROOK_VALUE,
    PieceKind.QUEEN:  QUEEN_VALUE,
    PieceKind.KING:   KING_VALUE,
}

# ---------------------------------------------------------------------------
# Special scores
# ---------------------------------------------------------------------------
# The mate score dwarfs any material sum so the search always prefers a
# forced mate. Mate distance is encoded as CHECKMATE_SCORE - ply.

CHECKMATE_SCORE: int = 100_000
DRAW_SCORE: int = 0

# ---------------------------------------------------------------------------
# Draw rules
# ---------------------------------------------------------------------------
# The fifty-move rule counts full moves by each side, i.e. 100 plies
# without a pawn move or a capture.
FIFTY_MOVE_HALFMOVES: int = 100
REPETITION_LIMIT: int = 3

# ---------------------------------------------------------------------------
# Game phase thresholds
# ---------------------------------------------------------------------------
# Piece counts below exclude both kings. A full starting army is 30.
ENDGAME_PIECE_COUNT: int = 6
QUEENLESS_ENDGAME_PIECE_COUNT: int = 28
OPENING_PIECE_COUNT: int = 29
FULL_MATERIAL_PIECE_COUNT: int = 30
CENTRAL_KING_DISTANCE: float = 2.0

# ---------------------------------------------------------------------------
# Piece-square tables (centipawns, White's point of view, row 0 = rank 8)
# ---------------------------------------------------------------------------
# Based on the "simplified evaluation function" tables. The evaluator
# divides by 100 so positional bonuses are measured in pawn units like
# the material values above.

PAWN_TABLE: tuple[tuple[int, ...], ...] = (
    (0,   0,   0,   0,   0,   0,   0,   0),
    (50,  50,  50,  50,  50,  50,  50,  50),
    (10,  10,  20,  30,  30,  20,  10,  10),
    (5,   5,   10,  25,  25,  10,  5,   5),
    (0,   0,   0,   20,  20,  0,   0,   0),
    (5,   -5,  -10, 0,   0,   -10, -5,  5),
    (5,   10,  10,  -20, -20, 10,  10,  5),
    (0,   0,   0,   0,   0,   0,   0,   0),
)

PAWN_END_TABLE: tuple[tuple[int, ...], ...] = (
    (0,   0,   0,   0,   0,   0,   0,   0),
    (80,  80,  80,  80,  80,  80,  80,  80),
    (50,  50,  50,  50,  50,  50,  50,  50),
    (30,  30,  30,  30,  30,  30,  30,  30),
    (20,  20,  20,  20,  20,  20,  20,  20),
    (10,  10,  10,  10,  10,  10,  10,  10),
    (10,  10,  10,  10,  10,  10,  10,  10),
    (0,   0,   0,   0,   0,   0,   0,   0),
)

KNIGHT_TABLE: tuple[tuple[int, ...], ...] = (
    (-50, -40, -30, -30, -30, -30, -40, -50),
    (-40, -20, 0,   0,   0,   0,   -20, -40),
    (-30, 0,   10,  15,  15,  10,  0,   -30),
    (-30, 5,   15,  20,  20,  15,  5,   -30),
    (-30, 0,   15,  20,  20,  15,  0,   -30),
    (-30, 5,   10,  15,  15,  10,  5,   -30),
    (-40, -20, 0,   5,   5,   0,   -20, -40),
    (-50, -40, -30, -30, -30, -30, -40, -50),
)

BISHOP_TABLE: tuple[tuple[int, ...], ...] = (
    (-20, -10, -10, -10, -10, -10, -10, -20),
    (-10, 0,   0,   0,   0,   0,   0,   -10),
    (-10, 0,   5,   10,  10,  5,   0,   -10),
    (-10, 5,   5,   10,  10,  5,   5,   -10),
    (-10, 0,   10,  10,  10,  10,  0,   -10),
    (-10, 10,  10,  10,  10,  10,  10,  -10),
    (-10, 5,   0,   0,   0,   0,   5,   -10),
    (-20, -10, -10, -10, -10, -10, -10, -20),
)

ROOK_TABLE: tuple[tuple[int, ...], ...] = (
    (0,   0,   0,   0,   0,   0,   0,   0),
    (5,   10,  10,  10,  10,  10,  10,  5),
    (-5,  0,   0,   0,   0,   0,   0,   -5),
    (-5,  0,   0,   0,   0,   0,   0,   -5),
    (-5,  0,   0,   0,   0,   0,   0,   -5),
    (-5,  0,   0,   0,   0,   0,   0,   -5),
    (-5,  0,   0,   0,   0,   0,   0,   -5),
    (0,   0,   0,   5,   5,   0,   0,   0),
)

QUEEN_TABLE: tuple[tuple[int, ...], ...] = (
    (-20, -10, -10, -5,  -5,  -10, -10, -20),
    (-10, 0,   0,   0,   0,   0,   0,   -10),
    (-10, 0,   5,   5,   5,   5,   0,   -10),
    (-5,  0,   5,   5,   5,   5,   0,   -5),
    (0,   0,   5,   5,   5,   5,   0,   -5),
    (-10, 5,   5,   5,   5,   5,   0,   -10),
    (-10, 0,   5,   0,   0,   0,   0,   -10),
    (-20, -10, -10, -5,  -5,  -10, -10, -20),
)

KING_START_TABLE: tuple[tuple[int, ...], ...] = (
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-20, -30, -30, -40, -40, -30, -30, -20),
    (-10, -20, -20, -20, -20, -20, -20, -10),
    (20,  20,  0,   0,   0,   0,   20,  20),
    (20,  30,  10,  0,   0,   10,  30,  20),
)

KING_END_TABLE: tuple[tuple[int, ...], ...] = (
    (-50, -40, -30, -20, -20, -30, -40, -50),
    (-30, -20, -10, 0,   0,   -10, -20, -30),
    (-30, -10, 20,  30,  30,  20,  -10, -30),
    (-30, -10, 30,  40,  40,  30,  -10, -30),
    (-30, -10, 30,  40,  40,  30,  -10, -30),
    (-30, -10, 20,  30,  30,  20,  -10, -30),
    (-30, -30, 0,   0,   0,   0,   -30, -30),
    (-50, -30, -30, -30, -30, -30, -30, -50),
)

# (middlegame table, endgame table) per piece kind. Only pawns and kings
# change their preferences once the board empties out.
PST: dict[PieceKind, tuple[tuple[tuple[int, ...], ...], tuple[tuple[int, ...], ...]]] = {
    PieceKind.PAWN:   (PAWN_TABLE, PAWN_END_TABLE),
    PieceKind.KNIGHT: (KNIGHT_TABLE, KNIGHT_TABLE),
    PieceKind.BISHOP: (BISHOP_TABLE, BISHOP_TABLE),
    PieceKind.ROOK:   (ROOK_TABLE, ROOK_TABLE),
    PieceKind.QUEEN:  (QUEEN_TABLE, QUEEN_TABLE),
    PieceKind.KING:   (KING_START_TABLE, KING_END_TABLE),
}

"""
Board: the complete, mutable state of one game.

The board owns every piece instance on it (an ordered list plus an 8x8 grid
pointing at the same objects), the side to move, castling rights, the
en-passant target, the two FEN move counters, and the append-only history
of committed moves.

Three ways to move:

    apply_move(move)  Validated commit used by callers (UI, UCI, bots).
                      Rejects anything that is not a legal move for the
                      side to move and records the move in history.
    after(move)       Returns a clone with the move played. The live board
                      is untouched. The legality filter and the search use
                      this; it is the engine's isolation mechanism.
    undo_move()       Restores the previous position from history.

Invariants kept by every mutation:
    - each piece's (row, column) equals its slot in the grid;
    - no two pieces share a square;
    - the en-passant target only survives the ply right after a two-square
      pawn advance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from chessmax import legality
from chessmax.constants import BOARD_SIZE, STARTING_FEN, MoveKind, PieceKind
from chessmax.errors import ChessError, IllegalMoveError
from chessmax.fen import FenPosition, board_to_fen, parse_fen, placement_field
from chessmax.move import Move, parse_square, square_name
from chessmax.notation import to_san
from chessmax.pieces import (
    BISHOP_DIRECTIONS,
    KING_OFFSETS,
    KNIGHT_OFFSETS,
    ROOK_DIRECTIONS,
    Piece,
    pawn_direction,
)

_log = logging.getLogger(__name__)

# Corner square -> (colour, kingside) of the castling right its rook backs.
_ROOK_CORNERS: dict[tuple[int, int], tuple[bool, bool]] = {
    (BOARD_SIZE - 1, 7): (True, True),
    (BOARD_SIZE - 1, 0): (True, False),
    (0, 7): (False, True),
    (0, 0): (False, False),
}


@dataclass(frozen=True)
class CastlingRights:
    """Castling availability for both sides, kingside and queenside."""

    white_kingside: bool = True
    white_queenside: bool = True
    black_kingside: bool = True
    black_queenside: bool = True

    @classmethod
    def from_fen(cls, text: str) -> CastlingRights:
        return cls("K" in text, "Q" in text, "k" in text, "q" in text)

    def allows(self, is_white: bool, kingside: bool) -> bool:
        if is_white:
            return self.white_kingside if kingside else self.white_queenside
        return self.black_kingside if kingside else self.black_queenside

    def revoke(self, is_white: bool, kingside: bool | None = None) -> CastlingRights:
        """Copy with one right (or both, if kingside is None) of one side removed."""
        prefix = "white" if is_white else "black"
        changes = {}
        if kingside is None or kingside:
            changes[f"{prefix}_kingside"] = False
        if kingside is None or not kingside:
            changes[f"{prefix}_queenside"] = False
        return replace(self, **changes)

    def fen(self) -> str:
        text = "".join(
            letter
            for letter, allowed in (
                ("K", self.white_kingside),
                ("Q", self.white_queenside),
                ("k", self.black_kingside),
                ("q", self.black_queenside),
            )
            if allowed
        )
        return text or "-"


@dataclass(frozen=True)
class HistoryEntry:
    """
    One committed ply.

    Attributes:
        move: The executed move, with piece and captured references filled in.
        san:  Standard algebraic notation of the move, computed before it
              was played.
        fen:  The full FEN of the position after the move.
        key:  Board.position_key() of that position, for repetition checks.
    """

    move: Move
    san: str
    fen: str
    key: str


def _empty_grid() -> list[list[Piece | None]]:
    return [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]


class Board:
    """
    Mutable chess position plus game history.

    Attributes:
        pieces:          Ordered list of pieces on the board. Iteration
                         order drives move enumeration order.
        grid:            8x8 grid of the same Piece objects (or None).
        white_to_move:   Turn indicator.
        castling:        Current CastlingRights.
        en_passant:      Target square (row, column) or None.
        halfmove_clock:  Plies since the last pawn move or capture.
        fullmove_number: FEN full-move counter.
        history:         Committed moves, oldest first.
        initial_fen:     FEN the game started from; replay starts here.
        initial_key:     position_key() of the starting position.
    """

    def __init__(self, fen: str = STARTING_FEN) -> None:
        self.initial_fen = fen
        self.history: list[HistoryEntry] = []
        self._load(parse_fen(fen))
        self.initial_key = self.position_key()

    def _load(self, position: FenPosition) -> None:
        self.pieces: list[Piece] = list(position.pieces)
        self.grid = _empty_grid()
        for piece in self.pieces:
            self.grid[piece.row][piece.column] = piece
        self.white_to_move = position.white_to_move
        self.castling = CastlingRights.from_fen(position.castling)
        self.en_passant = position.en_passant
        self.halfmove_clock = position.halfmove_clock
        self.fullmove_number = position.fullmove_number

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    def piece_at(self, row: int, column: int) -> Piece | None:
        return self.grid[row][column]

    def get_piece_list(self) -> tuple[Piece, ...]:
        """
        Read-only snapshot of the pieces for external consumers.

        The returned pieces are clones: callers (renderers, evaluators) can
        hold on to them or modify them without touching the live board.
        """
        return tuple(piece.clone() for piece in self.pieces)

    def king(self, is_white: bool) -> Piece | None:
        for piece in self.pieces:
            if piece.kind is PieceKind.KING and piece.is_white == is_white:
                return piece
        return None

    def is_square_attacked(self, row: int, column: int, by_white: bool) -> bool:
        """
        True if any piece of colour `by_white` attacks (row, column).

        Works outward from the target square instead of generating moves for
        every enemy piece, and never considers castling, so it is safe to
        call from inside king move generation.
        """
        # Pawns: a White pawn attacks diagonally toward row 0, so it sits
        # one row further from row 0 than the square it attacks.
        pawn_row = row - pawn_direction(by_white)
        for d_col in (-1, 1):
            col = column + d_col
            if 0 <= pawn_row < BOARD_SIZE and 0 <= col < BOARD_SIZE:
                piece = self.grid[pawn_row][col]
                if piece is not None and piece.is_white == by_white and piece.kind is PieceKind.PAWN:
                    return True

        for offsets, kind in ((KNIGHT_OFFSETS, PieceKind.KNIGHT), (KING_OFFSETS, PieceKind.KING)):
            for d_row, d_col in offsets:
                r, c = row + d_row, column + d_col
                if 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE:
                    piece = self.grid[r][c]
                    if piece is not None and piece.is_white == by_white and piece.kind is kind:
                        return True

        for directions, kind in ((ROOK_DIRECTIONS, PieceKind.ROOK), (BISHOP_DIRECTIONS, PieceKind.BISHOP)):
            for d_row, d_col in directions:
                r, c = row + d_row, column + d_col
                while 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE:
                    piece = self.grid[r][c]
                    if piece is not None:
                        if piece.is_white == by_white and piece.kind in (kind, PieceKind.QUEEN):
                            return True
                        break
                    r += d_row
                    c += d_col
        return False

    def is_in_check(self, is_white: bool | None = None) -> bool:
        """
        True if the king of the given colour (default: side to move) is
        attacked. A side without a king is never in check.
        """
        if is_white is None:
            is_white = self.white_to_move
        king = self.king(is_white)
        if king is None:
            return False
        return self.is_square_attacked(king.row, king.column, not is_white)

    def get_legal_moves(self, piece: Piece) -> list[Move]:
        """Legal moves of `piece`; delegates to the legality filter."""
        return legality.legal_moves(self, piece)

    def legal_moves(self) -> list[Move]:
        """All legal moves of the side to move, in piece-list order."""
        return legality.all_legal_moves(self)

    def fen(self) -> str:
        return board_to_fen(self)

    def has_en_passant_capture(self) -> bool:
        """True if the side to move has a legal en-passant capture right now."""
        if self.en_passant is None:
            return False
        row, column = self.en_passant
        pawn_row = row - pawn_direction(self.white_to_move)
        if not 0 <= pawn_row < BOARD_SIZE:
            return False
        for col in (column - 1, column + 1):
            if not 0 <= col < BOARD_SIZE:
                continue
            piece = self.grid[pawn_row][col]
            if piece is None or piece.kind is not PieceKind.PAWN or piece.is_white != self.white_to_move:
                continue
            if any(move.kind is MoveKind.EN_PASSANT for move in self.get_legal_moves(piece)):
                return True
        return False

    def position_key(self) -> str:
        """
        Identity of the position for repetition: placement, side to move and
        castling rights, plus the en-passant square only when the capture
        can actually be played.
        """
        en_passant = square_name(*self.en_passant) if self.has_en_passant_capture() else "-"
        return " ".join((
            placement_field(self),
            "w" if self.white_to_move else "b",
            self.castling.fen(),
            en_passant,
        ))

    # -----------------------------------------------------------------------
    # Mutation
    # -----------------------------------------------------------------------

    def apply_move(self, move: Move) -> Move:
        """
        Commit a move to the live board.

        The move is matched (by squares, promotion and tag) against the
        legal moves of the piece on its origin square, and the generated
        legal move is what gets executed, so callers may build a Move from
        a snapshot piece.

        Args:
            move: The move to play.

        Returns:
            The executed move, with piece and captured references pointing
            at this board's pieces.

        Raises:
            IllegalMoveError: If the origin is empty, the mover is not the
                              side to move or does not match the piece on
                              the origin, or the move is not legal.
        """
        origin = self.piece_at(move.from_row, move.from_col)
        where = square_name(move.from_row, move.from_col)
        if origin is None:
            raise IllegalMoveError(f"no piece on {where}")
        if origin.is_white != self.white_to_move:
            side = "white" if self.white_to_move else "black"
            raise IllegalMoveError(f"{move.uci()}: it is {side}'s turn")
        if move.piece.kind is not origin.kind or move.piece.is_white != origin.is_white:
            raise IllegalMoveError(f"{move.uci()}: moving piece does not match the piece on {where}")

        for legal in self.get_legal_moves(origin):
            if legal == move:
                break
        else:
            raise IllegalMoveError(f"{move.uci()} is not a legal move")

        # SAN needs the position before the move (disambiguation, check suffix).
        san = to_san(self, legal)
        executed = self._commit(legal)
        self.history.append(HistoryEntry(executed, san, self.fen(), self.position_key()))
        _log.debug("ply %d: %s (%s)", len(self.history), executed.uci(), san)
        return executed

    def after(self, move: Move) -> Board:
        """
        Clone the board and play `move` on the clone, without validation.

        The move is resolved on the clone by its coordinates, so it may have
        been generated on this board or on any equal position.
        """
        child = self.copy()
        child._commit(move)
        return child

    def copy(self) -> Board:
        """Deep copy of the position. History entries are shared (they are immutable)."""
        clone = Board.__new__(Board)
        clone.initial_fen = self.initial_fen
        clone.initial_key = self.initial_key
        clone.history = list(self.history)
        clone.pieces = [piece.clone() for piece in self.pieces]
        clone.grid = _empty_grid()
        for piece in clone.pieces:
            clone.grid[piece.row][piece.column] = piece
        clone.white_to_move = self.white_to_move
        clone.castling = self.castling
        clone.en_passant = self.en_passant
        clone.halfmove_clock = self.halfmove_clock
        clone.fullmove_number = self.fullmove_number
        return clone

    def _remove(self, piece: Piece) -> None:
        self.pieces.remove(piece)
        self.grid[piece.row][piece.column] = None

    def _relocate(self, piece: Piece, row: int, column: int) -> None:
        self.grid[piece.row][piece.column] = None
        piece.row, piece.column = row, column
        self.grid[row][column] = piece
        piece.has_moved = True

    def _commit(self, move: Move) -> Move:
        piece = self.grid[move.from_row][move.from_col]
        if piece is None:
            raise ChessError(f"{move.uci()}: no piece on {square_name(move.from_row, move.from_col)}")

        if move.kind is MoveKind.EN_PASSANT:
            captured = self.grid[move.from_row][move.to_col]
        else:
            captured = self.grid[move.to_row][move.to_col]
        if captured is not None:
            self._remove(captured)

        self._relocate(piece, move.to_row, move.to_col)

        if move.kind is MoveKind.CASTLE:
            kingside = move.to_col > move.from_col
            rook = self.grid[move.from_row][7 if kingside else 0]
            self._relocate(rook, move.from_row, 5 if kingside else 3)

        if move.promotion is not None:
            promoted = Piece(move.promotion, piece.is_white, move.to_row, move.to_col, has_moved=True)
            self.pieces[self.pieces.index(piece)] = promoted
            self.grid[move.to_row][move.to_col] = promoted

        rights = self.castling
        if piece.kind is PieceKind.KING:
            rights = rights.revoke(piece.is_white)
        for square in (move.origin, move.destination):
            corner = _ROOK_CORNERS.get(square)
            if corner is not None:
                rights = rights.revoke(*corner)
        self.castling = rights

        self.en_passant = None
        if piece.kind is PieceKind.PAWN and abs(move.to_row - move.from_row) == 2:
            self.en_passant = ((move.from_row + move.to_row) // 2, move.from_col)

        if piece.kind is PieceKind.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1
        if not self.white_to_move:
            self.fullmove_number += 1
        self.white_to_move = not self.white_to_move

        return replace(move, piece=piece, captured=captured)

    # -----------------------------------------------------------------------
    # History navigation
    # -----------------------------------------------------------------------

    def position_at(self, ply: int) -> Board:
        """
        Reconstruct the position after `ply` committed moves.

        ply=0 is the starting position; ply=len(history) is the current
        one. The returned board is independent and has an empty history.

        Raises:
            IndexError: If ply is outside 0..len(history).
        """
        if not 0 <= ply <= len(self.history):
            raise IndexError(f"ply {ply} outside 0..{len(self.history)}")
        if ply == 0:
            return Board(self.initial_fen)
        return Board(self.history[ply - 1].fen)

    def undo_move(self) -> Move:
        """
        Take back the last committed move and return it.

        The previous position is rebuilt from its FEN snapshot, so piece
        objects are replaced by fresh instances.

        Raises:
            IndexError: If there is no move to undo.
        """
        if not self.history:
            raise IndexError("no move to undo")
        entry = self.history.pop()
        fen = self.history[-1].fen if self.history else self.initial_fen
        self._load(parse_fen(fen))
        return entry.move

    def parse_uci(self, text: str) -> Move:
        """
        Resolve a long-algebraic move ("e2e4", "e7e8q") to the matching
        legal move of the side to move.

        Raises:
            IllegalMoveError: If the text is malformed or no legal move matches.
        """
        text = text.strip().lower()
        if len(text) not in (4, 5):
            raise IllegalMoveError(f"malformed move {text!r}")
        try:
            origin = parse_square(text[:2])
            destination = parse_square(text[2:4])
        except ChessError as exc:
            raise IllegalMoveError(f"malformed move {text!r}") from exc
        promotion = text[4] if len(text) == 5 else None

        piece = self.piece_at(*origin)
        if piece is not None:
            for move in self.get_legal_moves(piece):
                symbol = move.promotion.symbol if move.promotion is not None else None
                if move.destination == destination and symbol == promotion:
                    return move
        raise IllegalMoveError(f"{text} is not a legal move")

    def __str__(self) -> str:
        rows = []
        for row in range(BOARD_SIZE):
            cells = [p.fen_char if p is not None else "." for p in self.grid[row]]
            rows.append(f"{BOARD_SIZE - row} " + " ".join(cells))
        rows.append("  a b c d e f g h")
        return "\n".join(rows)

    def __repr__(self) -> str:
        return f"Board({self.fen()!r})"


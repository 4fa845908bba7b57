"""
Thin adapter over python-chess, the rules engine the tutor treats as a black box.

The search and classifier only need a handful of primitives: the ordered list
of legal moves (with the moved and captured piece kinds already resolved),
a scoped make/undo pair, and square lookups. Keeping them here means the rest
of the package never pokes at python-chess internals directly.
"""

import enum
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

import chess


class MoveFlag(enum.Enum):
    """Special properties of a move, resolved before the move is played."""

    CAPTURE = "capture"
    KINGSIDE_CASTLE = "kingside_castle"
    QUEENSIDE_CASTLE = "queenside_castle"
    EN_PASSANT = "en_passant"
    PROMOTION = "promotion"


CASTLE_FLAGS = frozenset({MoveFlag.KINGSIDE_CASTLE, MoveFlag.QUEENSIDE_CASTLE})


@dataclass(frozen=True)
class MoveInfo:
    """
    A legal move together with the metadata the classifier needs.

    python-chess moves only carry squares, so the piece kinds and flags are
    resolved against the board the move was generated from.

    Attributes:
        move:        The underlying python-chess move (for push/pop and UCI).
        from_square: Origin square.
        to_square:   Destination square.
        piece:       Piece type of the moving piece.
        color:       Colour of the moving side.
        captured:    Piece type captured, or None. En passant captures a pawn.
        flags:       Set of MoveFlag values.
        san:         Standard algebraic notation in the generating position.
    """

    move: chess.Move
    from_square: int
    to_square: int
    piece: int
    color: bool
    captured: int | None
    flags: frozenset[MoveFlag]
    san: str

    @property
    def is_capture(self) -> bool:
        return MoveFlag.CAPTURE in self.flags

    @property
    def is_castle(self) -> bool:
        return bool(self.flags & CASTLE_FLAGS)

    @property
    def is_en_passant(self) -> bool:
        return MoveFlag.EN_PASSANT in self.flags

    @property
    def is_promotion(self) -> bool:
        return MoveFlag.PROMOTION in self.flags

    def uci(self) -> str:
        return self.move.uci()


def describe_move(board: chess.Board, move: chess.Move) -> MoveInfo:
    """Resolve a legal python-chess move into a MoveInfo for `board`."""
    piece = board.piece_at(move.from_square)
    if piece is None:
        raise ValueError(f"no piece on {chess.square_name(move.from_square)} for move {move.uci()}")

    flags: set[MoveFlag] = set()
    captured: int | None = None

    if board.is_en_passant(move):
        flags.update((MoveFlag.CAPTURE, MoveFlag.EN_PASSANT))
        captured = chess.PAWN
    elif board.is_capture(move):
        flags.add(MoveFlag.CAPTURE)
        captured = board.piece_type_at(move.to_square)

    if board.is_kingside_castling(move):
        flags.add(MoveFlag.KINGSIDE_CASTLE)
    elif board.is_queenside_castling(move):
        flags.add(MoveFlag.QUEENSIDE_CASTLE)

    if move.promotion is not None:
        flags.add(MoveFlag.PROMOTION)

    return MoveInfo(
        move=move,
        from_square=move.from_square,
        to_square=move.to_square,
        piece=piece.piece_type,
        color=piece.color,
        captured=captured,
        flags=frozenset(flags),
        san=board.san(move),
    )


def legal_moves(board: chess.Board) -> list[MoveInfo]:
    """All legal moves for the side to move, in python-chess generation order."""
    return [describe_move(board, move) for move in board.legal_moves]


@contextmanager
def applied(board: chess.Board, move: chess.Move) -> Iterator[chess.Board]:
    """
    Push `move` for the duration of the with-block and always pop it again.

    The pop runs on every exit path (normal return, `break` out of a pruned
    loop, or an exception), so a parent node always sees its own position.
    """
    board.push(move)
    try:
        yield board
    finally:
        board.pop()


def board_at(board: chess.Board, square: int) -> tuple[int, bool] | None:
    """Return (piece_type, color) on `square`, or None if it is empty."""
    piece = board.piece_at(square)
    if piece is None:
        return None
    return piece.piece_type, piece.color


def load_board(fen: str) -> chess.Board:
    """
    Build a board from a FEN string.

    Raises:
        ValueError: If the FEN is malformed or describes an invalid position
                    (e.g. missing kings), as reported by python-chess.
    """
    board = chess.Board(fen)
    status = board.status()
    if status != chess.STATUS_VALID:
        raise ValueError(f"invalid position ({status!r}): {fen}")
    return board

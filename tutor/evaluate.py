"""
Static position evaluation: material plus piece-square tables.

The search needs a number for every leaf it reaches. This evaluator sums,
for every piece on the board, its material value and a placement bonus read
from a fixed 64-entry table for its kind. White pieces add to the score and
Black pieces subtract from it.

Unlike a negamax engine, the score is NOT relative to the side to move: it is
always from White's point of view. The minimax search decides per node
whether it wants the maximum (White to move) or the minimum (Black to move).

The evaluator deliberately knows nothing about checkmate or stalemate; the
search handles terminal positions before it ever calls evaluate().
"""

import chess

from tutor.constants import PIECE_VALUES, PST


def piece_score(piece_type: int, color: bool, square: int) -> int:
    """
    Signed contribution of one piece: material plus placement bonus.

    The tables are laid out rank 8 first, so a White piece reads index
    sq ^ 56 (rank flipped) and a Black piece reads sq directly, which is the
    same table seen from Black's side of the board.
    """
    idx = square ^ 56 if color == chess.WHITE else square
    value = PIECE_VALUES[piece_type] + PST[piece_type][idx]
    return value if color == chess.WHITE else -value


def evaluate(board: chess.Board) -> int:
    """
    Centipawn evaluation from White's perspective.

    Args:
        board: The position to score. Not modified.

    Returns:
        Sum over occupied squares of material + placement, positive when
        White is better. The starting position scores 0.

    Example:
        >>> import chess
        >>> evaluate(chess.Board())
        0
    """
    total = 0
    for square, piece in board.piece_map().items():
        total += piece_score(piece.piece_type, piece.color, square)
    return total

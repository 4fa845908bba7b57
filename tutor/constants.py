"""
Tutor constants: piece values, piece-square tables, difficulty tiers, and
classification thresholds.

Every tunable number used by the evaluator, search, move selector and tactic
classifier is defined here so the other modules never introduce new magic
numbers.

Piece values follow the centipawn convention (1 pawn = 100 cp). Scores are
always from White's point of view: positive means White is better.
"""

import chess

# ---------------------------------------------------------------------------
# Piece values (centipawns)
# ---------------------------------------------------------------------------

PAWN_VALUE: int = 100
KNIGHT_VALUE: int = 320
BISHOP_VALUE: int = 330
ROOK_VALUE: int = 500
QUEEN_VALUE: int = 900
KING_VALUE: int = 20_000  # Counted like any other piece; makes losing the king catastrophic

PIECE_VALUES: dict[int, int] = {
    chess.PAWN:   PAWN_VALUE,
    chess.KNIGHT: KNIGHT_VALUE,
    chess.BISHOP: BISHOP_VALUE,
    chess.ROOK:   ROOK_VALUE,
    chess.QUEEN:  QUEEN_VALUE,
    chess.KING:   KING_VALUE,
}

# ---------------------------------------------------------------------------
# Piece-square tables
# ---------------------------------------------------------------------------
# Written the way a diagram is read from White's side: index 0 = a8,
# index 63 = h1. A White piece on python-chess square sq uses index sq ^ 56;
# a Black piece uses sq directly, which mirrors the table vertically.

PAWN_TABLE: tuple[int, ...] = (
      0,   0,   0,   0,   0,   0,   0,   0,
     50,  50,  50,  50,  50,  50,  50,  50,
     10,  10,  20,  30,  30,  20,  10,  10,
      5,   5,  10,  25,  25,  10,   5,   5,
      0,   0,   0,  20,  20,   0,   0,   0,
      5,  -5, -10,   0,   0, -10,  -5,   5,
      5,  10,  10, -20, -20,  10,  10,   5,
      0,   0,   0,   0,   0,   0,   0,   0,
)

KNIGHT_TABLE: tuple[int, ...] = (
    -50, -40, -30, -30, -30, -30, -40, -50,
    -40, -20,   0,   0,   0,   0, -20, -40,
    -30,   0,  10,  15,  15,  10,   0, -30,
    -30,   5,  15,  20,  20,  15,   5, -30,
    -30,   0,  15,  20,  20,  15,   0, -30,
    -30,   5,  10,  15,  15,  10,   5, -30,
    -40, -20,   0,   5,   5,   0, -20, -40,
    -50, -40, -30, -30, -30, -30, -40, -50,
)

BISHOP_TABLE: tuple[int, ...] = (
    -20, -10, -10, -10, -10, -10, -10, -20,
    -10,   0,   0,   0,   0,   0,   0, -10,
    -10,   0,   5,  10,  10,   5,   0, -10,
    -10,   5,   5,  10,  10,   5,   5, -10,
    -10,   0,  10,  10,  10,  10,   0, -10,
    -10,  10,  10,  10,  10,  10,  10, -10,
    -10,   5,   0,   0,   0,   0,   5, -10,
    -20, -10, -10, -10, -10, -10, -10, -20,
)

ROOK_TABLE: tuple[int, ...] = (
      0,   0,   0,   0,   0,   0,   0,   0,
      5,  10,  10,  10,  10,  10,  10,   5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
      0,   0,   0,   5,   5,   0,   0,   0,
)

QUEEN_TABLE: tuple[int, ...] = (
    -20, -10, -10,  -5,  -5, -10, -10, -20,
    -10,   0,   0,   0,   0,   0,   0, -10,
    -10,   0,   5,   5,   5,   5,   0, -10,
     -5,   0,   5,   5,   5,   5,   0,  -5,
      0,   0,   5,   5,   5,   5,   0,  -5,
    -10,   5,   5,   5,   5,   5,   0, -10,
    -10,   0,   5,   0,   0,   0,   0, -10,
    -20, -10, -10,  -5,  -5, -10, -10, -20,
)

# Early-game king: stay home behind the pawns, centre squares are penalised.
KING_TABLE: tuple[int, ...] = (
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -20, -30, -30, -40, -40, -30, -30, -20,
    -10, -20, -20, -20, -20, -20, -20, -10,
     20,  20,   0,   0,   0,   0,  20,  20,
     20,  30,  10,   0,   0,  10,  30,  20,
)

PST: dict[int, tuple[int, ...]] = {
    chess.PAWN:   PAWN_TABLE,
    chess.KNIGHT: KNIGHT_TABLE,
    chess.BISHOP: BISHOP_TABLE,
    chess.ROOK:   ROOK_TABLE,
    chess.QUEEN:  QUEEN_TABLE,
    chess.KING:   KING_TABLE,
}

# ---------------------------------------------------------------------------
# Special scores
# ---------------------------------------------------------------------------
# Mate scores are offset by the remaining depth so that a quicker mate always
# outranks a slower one. Both values stay integers for alpha-beta comparisons.

CHECKMATE_SCORE: int = 100_000
DRAW_SCORE: int = 0

# Bounds used as the initial alpha-beta window. Larger than any reachable
# score, including mate scores.
INFINITY: int = 1_000_000_000

# ---------------------------------------------------------------------------
# Difficulty tiers
# ---------------------------------------------------------------------------
# Search depth per tier; easy never searches.

DIFFICULTY_DEPTHS: dict[str, int] = {
    "easy":   0,
    "medium": 2,
    "hard":   3,
    "expert": 4,
}

# Probability that the medium tier plays a random move instead of searching.
MEDIUM_RANDOM_RATE: float = 0.5

DIFFICULTY_DESCRIPTIONS: dict[str, str] = {
    "easy":   "Random moves - Great for beginners",
    "medium": "Makes some mistakes - Good for learning",
    "hard":   "Strong player - Challenging",
    "expert": "Very strong - Expert level",
}

# ---------------------------------------------------------------------------
# Analysis / reporting
# ---------------------------------------------------------------------------

ANALYSIS_LIMIT: int = 5          # candidates returned by analyze()
MAX_ANALYSIS_DEPTH: int = 4      # cap applied by the web layer

# How often (in nodes) the search polls its stop event.
STOP_CHECK_NODES: int = 1_024

# ---------------------------------------------------------------------------
# Classification thresholds
# ---------------------------------------------------------------------------

CENTER_SQUARES: frozenset[int] = frozenset({chess.D4, chess.D5, chess.E4, chess.E5})

# Captured-piece value bands (>=).
MAJOR_CAPTURE_VALUE: int = 500
MINOR_CAPTURE_VALUE: int = 300

# Generic fallback bands on abs(score) (>).
EXCELLENT_SCORE: int = 900
VERY_GOOD_SCORE: int = 500
GOOD_SCORE: int = 200
DECENT_SCORE: int = 0

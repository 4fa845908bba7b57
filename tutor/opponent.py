"""
Difficulty policy for the computer opponent.

Each tier is a pure mapping from (position, random source) to a move:

    easy    uniform-random legal move
    medium  random move with probability MEDIUM_RANDOM_RATE, else depth-2 best
    hard    depth-3 best move
    expert  depth-4 best move

Nothing is remembered between calls. The random source is injectable so
tests can pin it with a seeded random.Random.
"""

import enum
import logging
import random

import chess

from tutor.constants import DIFFICULTY_DEPTHS, DIFFICULTY_DESCRIPTIONS, MEDIUM_RANDOM_RATE
from tutor.rules import MoveInfo, legal_moves
from tutor.search import SearchState, search_root

logger = logging.getLogger(__name__)


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @property
    def depth(self) -> int:
        return DIFFICULTY_DEPTHS[self.value]

    @property
    def description(self) -> str:
        return DIFFICULTY_DESCRIPTIONS[self.value]


def parse_difficulty(value: "Difficulty | str") -> Difficulty:
    """Accept a Difficulty or its (case-insensitive) name."""
    if isinstance(value, Difficulty):
        return value
    try:
        return Difficulty(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(d.value for d in Difficulty)
        raise ValueError(f"unknown difficulty {value!r}; expected one of: {choices}") from None


def describe_difficulty(difficulty: "Difficulty | str") -> str:
    return parse_difficulty(difficulty).description


def best_move(
    board: chess.Board,
    depth: int,
    state: SearchState | None = None,
) -> MoveInfo | None:
    """
    Deterministic best move at `depth` plies.

    White keeps the highest score, Black the lowest. Comparisons are strict,
    so among equal scores the first move in generation order wins.

    Returns:
        The chosen move, or None if the side to move has no legal moves.
    """
    scored = search_root(board, depth, state)
    chosen = choose_best(scored, board.turn == chess.WHITE)
    if chosen is not None:
        logger.debug("best_move depth=%d move=%s", depth, chosen.san)
    return chosen


def choose_best(scored: list[tuple[MoveInfo, int]], maximizing: bool) -> MoveInfo | None:
    """
    Pick the best of already scored root moves; the first one wins ties.

    Also used on the partial results of a stopped search.
    """
    if not scored:
        return None
    chosen, chosen_score = scored[0]
    for info, score in scored[1:]:
        if (maximizing and score > chosen_score) or (not maximizing and score < chosen_score):
            chosen, chosen_score = info, score
    return chosen


def pick_move(
    board: chess.Board,
    difficulty: "Difficulty | str",
    rng: random.Random | None = None,
    state: SearchState | None = None,
) -> MoveInfo | None:
    """
    Choose the computer's move for `board` at the given difficulty.

    Args:
        board:      Current position. Not modified.
        difficulty: A Difficulty or its name ("easy", "medium", ...).
        rng:        Random source for the random tiers. Defaults to a fresh
                    random.Random().
        state:      Optional SearchState for node counting and interruption.

    Returns:
        The chosen move, or None when there is no legal move (the caller is
        expected to have already detected the end of the game).

    Raises:
        ValueError:    If the difficulty name is unknown.
        SearchAborted: If the search was stopped through `state`.
    """
    tier = parse_difficulty(difficulty)
    if rng is None:
        rng = random.Random()

    moves = legal_moves(board)
    if not moves:
        return None

    if tier is Difficulty.EASY:
        return rng.choice(moves)

    if tier is Difficulty.MEDIUM and rng.random() < MEDIUM_RANDOM_RATE:
        return rng.choice(moves)

    return best_move(board, tier.depth, state)

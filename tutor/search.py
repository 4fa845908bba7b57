"""
Search entry point: depth-limited minimax with alpha-beta pruning.

Scores are always from White's point of view, so instead of negamax's
"negate and swap the window" trick the search alternates explicitly between a
maximizing node (White to move) and a minimizing node (Black to move).

What this search deliberately does NOT have:
    - move ordering: moves are tried in python-chess generation order, so
      pruning efficiency is whatever that order happens to give;
    - transposition table, iterative deepening, quiescence search.

Terminal positions:
    A node whose side to move is checkmated scores CHECKMATE_SCORE plus the
    remaining depth (negated when White is the mated side), so a mate found
    nearer the root outranks a slower one. Stalemate scores DRAW_SCORE. This
    check runs before the depth test so that a mate delivered on the last ply
    is still recognised.

Interruption:
    The search is synchronous, but a caller embedding it in a responsive UI
    can hand in a SearchState and set its stop_event from another thread.
    Every STOP_CHECK_NODES nodes the search polls the event and raises
    SearchAborted. The board is restored on the way out because every push is
    paired with a pop in rules.applied().
"""

import logging
import threading
from dataclasses import dataclass, field

import chess

from tutor.constants import (
    CHECKMATE_SCORE,
    DRAW_SCORE,
    INFINITY,
    STOP_CHECK_NODES,
)
from tutor.evaluate import evaluate
from tutor.rules import MoveInfo, applied, legal_moves

logger = logging.getLogger(__name__)


class SearchAborted(RuntimeError):
    """Raised when a search is stopped through its SearchState.stop_event."""


@dataclass
class SearchState:
    """
    Per-call bookkeeping for one search.

    Attributes:
        stop_event: Set from another thread to abort the search at its next
                    check point.
        node_count: Number of nodes visited so far.
        scored:     Root moves whose search finished, with their scores, in
                    the order they completed. Still valid after an abort.
    """

    stop_event: threading.Event = field(default_factory=threading.Event)
    node_count: int = 0
    scored: list[tuple[MoveInfo, int]] = field(default_factory=list)

    def visit(self) -> None:
        """Count a node and honour a pending stop request."""
        self.node_count += 1
        if self.node_count % STOP_CHECK_NODES == 0 and self.stop_event.is_set():
            raise SearchAborted(f"search stopped after {self.node_count} nodes")


def terminal_score(board: chess.Board, depth: int) -> int | None:
    """
    Score for a finished game, or None if the side to move has a legal move.

    Args:
        board: Position to test. Not modified.
        depth: Remaining depth at this node; added to the mate score so that
               quicker mates are preferred.
    """
    if any(board.generate_legal_moves()):
        return None
    if not board.is_check():
        return DRAW_SCORE
    mate = CHECKMATE_SCORE + depth
    # The side to move is the one that has been mated.
    return -mate if board.turn == chess.WHITE else mate


def minimax(
    board: chess.Board,
    depth: int,
    alpha: int,
    beta: int,
    maximizing: bool,
    state: SearchState | None = None,
) -> int:
    """
    Minimax search with alpha-beta pruning.

    Args:
        board:      Current position. Modified in place via push/pop and
                    always restored before returning (or raising).
        depth:      Remaining depth in plies. 0 returns the static evaluation.
        alpha:      Best score the maximizing side can already guarantee.
        beta:       Best score the minimizing side can already guarantee.
        maximizing: True when the side to move wants the highest score
                    (White in every call made by this package).
        state:      Optional SearchState for node counting and interruption.

    Returns:
        Score in centipawns from White's perspective.

    Raises:
        SearchAborted: If state.stop_event was set.
    """
    if state is not None:
        state.visit()

    terminal = terminal_score(board, depth)
    if terminal is not None:
        return terminal

    if depth == 0:
        return evaluate(board)

    if maximizing:
        best = -INFINITY
        for move in board.legal_moves:
            with applied(board, move):
                score = minimax(board, depth - 1, alpha, beta, False, state)
            best = max(best, score)
            alpha = max(alpha, score)
            if beta <= alpha:
                break
        return best

    best = INFINITY
    for move in board.legal_moves:
        with applied(board, move):
            score = minimax(board, depth - 1, alpha, beta, True, state)
        best = min(best, score)
        beta = min(beta, score)
        if beta <= alpha:
            break
    return best


def search_root(
    board: chess.Board,
    depth: int,
    state: SearchState | None = None,
) -> list[tuple[MoveInfo, int]]:
    """
    Score every legal move of the side to move.

    Each root move gets its own full (-inf, +inf) window, so the scores are
    exact minimax values and can be compared and ranked freely. This is the
    shared first step of best-move selection and of move analysis. When a
    SearchState is given, every finished root move is also recorded in
    state.scored, so a stopped search still leaves its completed results.

    Args:
        board: Position to analyse. The caller's board is never touched; the
               search runs on a private copy.
        depth: Total depth in plies, counting the root move itself (>= 1).
        state: Optional SearchState for node counting and interruption.

    Returns:
        (move, score) pairs in generation order. Empty if there are no legal
        moves.

    Raises:
        ValueError:    If depth < 1.
        SearchAborted: If the search was stopped.
    """
    if depth < 1:
        raise ValueError(f"search depth must be at least 1, got {depth}")

    work = board.copy()
    maximizing = work.turn == chess.WHITE
    scored: list[tuple[MoveInfo, int]] = []

    for info in legal_moves(work):
        with applied(work, info.move):
            score = minimax(work, depth - 1, -INFINITY, INFINITY, not maximizing, state)
        scored.append((info, score))
        if state is not None:
            state.scored.append((info, score))

    if state is not None:
        logger.debug("search_root depth=%d moves=%d nodes=%d", depth, len(scored), state.node_count)
    return scored

"""Tests for the difficulty policy of the computer opponent."""

import random
from collections import Counter

import chess
import pytest

from tutor.opponent import (
    Difficulty,
    best_move,
    choose_best,
    describe_difficulty,
    parse_difficulty,
    pick_move,
)
from tutor.rules import legal_moves

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
# 1.e4 e5 2.Nf3 Qg5?? - the queen hangs to the knight.
HANGING_QUEEN = "rnb1kbnr/pppp1ppp/8/4p1q1/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3"
QUEENS = "4k3/8/8/3q4/8/8/8/3QK3 w - - 0 1"


class _FixedRandom(random.Random):
    """random.Random whose random() always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


class TestDifficulty:
    def test_depths(self) -> None:
        assert [d.depth for d in Difficulty] == [0, 2, 3, 4]

    def test_parse_accepts_names(self) -> None:
        assert parse_difficulty("Expert") is Difficulty.EXPERT
        assert parse_difficulty(Difficulty.HARD) is Difficulty.HARD

    def test_parse_rejects_unknown(self) -> None:
        with pytest.raises(ValueError, match="grandmaster"):
            parse_difficulty("grandmaster")

    def test_descriptions(self) -> None:
        assert describe_difficulty("easy") == "Random moves - Great for beginners"
        assert "Expert" in describe_difficulty(Difficulty.EXPERT)


class TestPickMove:
    def test_no_legal_moves_returns_none(self) -> None:
        board = chess.Board(FOOLS_MATE)
        for tier in Difficulty:
            assert pick_move(board, tier, rng=random.Random(1)) is None

    def test_easy_is_roughly_uniform(self) -> None:
        board = chess.Board()
        rng = random.Random(1234)
        samples = 2000
        counts = Counter(pick_move(board, "easy", rng=rng).uci() for _ in range(samples))

        assert set(counts) == {m.uci() for m in board.legal_moves}
        expected = samples / len(counts)
        assert all(0.5 * expected < n < 1.5 * expected for n in counts.values())

    def test_medium_plays_randomly_below_threshold(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fail(*args, **kwargs):
            raise AssertionError("medium tier should not search on its random branch")

        monkeypatch.setattr("tutor.opponent.best_move", fail)
        board = chess.Board(HANGING_QUEEN)
        move = pick_move(board, "medium", rng=_FixedRandom(0.1))
        assert move is not None
        assert move.move in board.legal_moves

    def test_medium_searches_above_threshold(self) -> None:
        board = chess.Board(HANGING_QUEEN)
        move = pick_move(board, "medium", rng=_FixedRandom(0.9))
        assert move.uci() == "f3g5"

    def test_hard_takes_hanging_queen(self) -> None:
        board = chess.Board(HANGING_QUEEN)
        assert pick_move(board, Difficulty.HARD).uci() == "f3g5"

    def test_expert_takes_hanging_queen(self) -> None:
        board = chess.Board(QUEENS)
        move = pick_move(board, "expert")
        assert move.uci() == "d1d5"
        assert move.captured == chess.QUEEN

    def test_does_not_modify_board(self) -> None:
        board = chess.Board()
        board.push_san("e4")
        board.push_san("e5")
        before = (board.fen(), list(board.move_stack), board.turn, board.fullmove_number)

        pick_move(board, "hard")

        assert (board.fen(), list(board.move_stack), board.turn, board.fullmove_number) == before


class TestBestMove:
    def test_depth_two_avoids_losing_move(self) -> None:
        board = chess.Board(HANGING_QUEEN)
        assert best_move(board, 2).uci() == "f3g5"

    def test_black_minimizes(self) -> None:
        # Mirror image of the queen trade: Black should take on d4.
        board = chess.Board(QUEENS).mirror()
        assert best_move(board, 2).uci() == "d8d4"

    def test_ties_keep_first_move(self, monkeypatch: pytest.MonkeyPatch) -> None:
        board = chess.Board()
        moves = legal_moves(board)
        fake = [(moves[0], 5), (moves[1], 7), (moves[2], 7), (moves[3], 1)]
        monkeypatch.setattr("tutor.opponent.search_root", lambda *args, **kwargs: fake)

        assert best_move(board, 2) == moves[1]

    def test_ties_keep_first_move_for_black(self, monkeypatch: pytest.MonkeyPatch) -> None:
        board = chess.Board()
        board.push_san("e4")
        moves = legal_moves(board)
        fake = [(moves[0], 5), (moves[1], -3), (moves[2], -3), (moves[3], 1)]
        monkeypatch.setattr("tutor.opponent.search_root", lambda *args, **kwargs: fake)

        assert best_move(board, 2) == moves[1]

    def test_is_deterministic(self) -> None:
        board = chess.Board()
        assert best_move(board, 2) == best_move(board, 2)


class TestChooseBest:
    def test_empty_gives_none(self) -> None:
        assert choose_best([], True) is None

    def test_picks_by_side(self) -> None:
        moves = legal_moves(chess.Board())
        scored = [(moves[0], 3), (moves[1], 40), (moves[2], -25)]
        assert choose_best(scored, True) == moves[1]
        assert choose_best(scored, False) == moves[2]

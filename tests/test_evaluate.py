"""Tests for the static evaluator."""

import chess
import pytest

from tutor.constants import KING_VALUE, PAWN_VALUE
from tutor.evaluate import evaluate, piece_score

POSITIONS = [
    chess.STARTING_FEN,
    "rnb1kbnr/pppp1ppp/8/4p1q1/4P3/5N2/PPPP1PPP/RNBQKB1R w - - 2 3",
    "r3k3/8/8/3N4/8/8/8/4K3 w - - 0 1",
    "6k1/5ppp/8/8/8/8/5PPP/4R1K1 w - - 0 1",
    "r1bq1rk1/pp2bppp/2n1pn2/3p4/2PP4/2N1PN2/PP3PPP/R2QKB1R w - - 0 8",
]


class TestEvaluate:
    def test_starting_position_is_level(self) -> None:
        assert evaluate(chess.Board()) == 0

    def test_material_and_placement_are_summed(self) -> None:
        # Kings cancel out (both on their home squares, bonus 0); the e2 pawn
        # is worth 100 but sits on a -20 square.
        board = chess.Board("4k3/8/8/8/8/8/4P3/4K3 w - - 0 1")
        assert evaluate(board) == PAWN_VALUE - 20

    def test_score_is_from_whites_point_of_view(self) -> None:
        white_to_move = chess.Board("4k3/8/8/8/8/8/4P3/4K3 w - - 0 1")
        black_to_move = chess.Board("4k3/8/8/8/8/8/4P3/4K3 b - - 0 1")
        assert evaluate(white_to_move) == evaluate(black_to_move) > 0

    def test_king_value_is_counted(self) -> None:
        assert piece_score(chess.KING, chess.WHITE, chess.E1) == KING_VALUE
        assert piece_score(chess.KING, chess.BLACK, chess.E8) == -KING_VALUE

    def test_black_tables_are_mirrored(self) -> None:
        assert piece_score(chess.PAWN, chess.WHITE, chess.D4) == -piece_score(
            chess.PAWN, chess.BLACK, chess.D5
        )
        assert piece_score(chess.PAWN, chess.BLACK, chess.A2) == -(PAWN_VALUE + 50)

    @pytest.mark.parametrize("fen", POSITIONS)
    def test_colour_swap_negates_score(self, fen: str) -> None:
        board = chess.Board(fen)
        assert evaluate(board.mirror()) == -evaluate(board)

    def test_does_not_modify_board(self) -> None:
        board = chess.Board(POSITIONS[1])
        before = board.fen()
        evaluate(board)
        assert board.fen() == before

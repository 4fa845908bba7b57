"""Tests for the FastAPI endpoints."""

import chess
import pytest
from fastapi.testclient import TestClient

from tutor.opponent import Difficulty, describe_difficulty
from web.app import app

BACK_RANK = "6k1/5ppp/8/8/8/8/5PPP/4R1K1 w - - 0 1"
FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


class TestMoveEndpoint:
    def test_returns_legal_move(self, client: TestClient) -> None:
        response = client.post(
            "/api/move",
            json={"fen": chess.STARTING_FEN, "difficulty": "easy", "seed": 7},
        )
        assert response.status_code == 200
        body = response.json()

        board = chess.Board()
        assert chess.Move.from_uci(body["move"]) in board.legal_moves
        board.push_uci(body["move"])
        assert body["fen"] == board.fen()
        assert body["difficulty"] == "easy"

    def test_same_seed_same_move(self, client: TestClient) -> None:
        payload = {"fen": chess.STARTING_FEN, "difficulty": "easy", "seed": 42}
        first = client.post("/api/move", json=payload).json()["move"]
        second = client.post("/api/move", json=payload).json()["move"]
        assert first == second

    def test_difficulty_is_case_insensitive(self, client: TestClient) -> None:
        response = client.post("/api/move", json={"fen": BACK_RANK, "difficulty": "HARD"})
        assert response.status_code == 200
        assert response.json()["move"] == "e1e8"
        assert response.json()["difficulty"] == "hard"

    def test_rejects_bad_fen(self, client: TestClient) -> None:
        response = client.post("/api/move", json={"fen": "not a fen"})
        assert response.status_code == 400

    def test_rejects_finished_game(self, client: TestClient) -> None:
        response = client.post("/api/move", json={"fen": FOOLS_MATE})
        assert response.status_code == 400
        assert "over" in response.json()["detail"]

    def test_rejects_unknown_difficulty(self, client: TestClient) -> None:
        response = client.post("/api/move", json={"fen": chess.STARTING_FEN, "difficulty": "godlike"})
        assert response.status_code == 422


class TestAnalyzeEndpoint:
    def test_reports_mate_first(self, client: TestClient) -> None:
        response = client.post("/api/analyze", json={"fen": BACK_RANK, "depth": 1})
        assert response.status_code == 200
        body = response.json()
        assert body["turn"] == "white"
        assert len(body["moves"]) <= 5
        best = body["moves"][0]
        assert best["move"] == "e1e8"
        assert best["san"] == "Re8#"
        assert best["technique"] == "Checkmate"
        assert best["tier"] == "Winning"

    def test_depth_is_clamped(self, client: TestClient) -> None:
        response = client.post("/api/analyze", json={"fen": BACK_RANK, "depth": 0})
        assert response.status_code == 200
        assert response.json()["depth"] == 1

    def test_finished_game_has_no_moves(self, client: TestClient) -> None:
        response = client.post("/api/analyze", json={"fen": FOOLS_MATE, "depth": 2})
        assert response.status_code == 200
        assert response.json()["moves"] == []

    def test_rejects_bad_fen(self, client: TestClient) -> None:
        response = client.post("/api/analyze", json={"fen": "8/8/8/8/8/8/8/8 w - - 0 1"})
        assert response.status_code == 400


class TestDifficultiesEndpoint:
    def test_lists_tiers(self, client: TestClient) -> None:
        body = client.get("/api/difficulties").json()
        assert [d["name"] for d in body] == ["easy", "medium", "hard", "expert"]
        assert [d["depth"] for d in body] == [0, 2, 3, 4]
        assert body[0]["description"] == "Random moves - Great for beginners"
        assert [d["description"] for d in body] == [describe_difficulty(t) for t in Difficulty]

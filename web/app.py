"""
FastAPI web application for the chess tutor.

Exposes the tutor core to the browser front end:

    POST /api/move          computer opponent's reply at a difficulty tier
    POST /api/analyze       top candidate moves with tactic labels
    GET  /api/difficulties  the tiers, their depths and descriptions

Architecture notes:
- Sync endpoints (not async): FastAPI runs sync handlers in a thread pool,
  which keeps the CPU-bound search off the event loop.
- Stateless per request: the client sends the full FEN each time. Debouncing
  repeated analysis requests while the user drags pieces is the front end's
  job; every request here is answered independently.
"""

import logging
import random

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator

from tutor.classify import analyze
from tutor.constants import MAX_ANALYSIS_DEPTH
from tutor.opponent import Difficulty, describe_difficulty, parse_difficulty, pick_move
from tutor.rules import load_board

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

logging.basicConfig(level=logging.INFO)
_log = logging.getLogger(__name__)

app = FastAPI(title="Chess Tutor", version="1.0.0")


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class MoveRequest(BaseModel):
    """
    Ask the computer opponent for a move.

    Fields:
        fen:        Full FEN of the current position.
        difficulty: One of easy, medium, hard, expert.
        seed:       Optional seed for the random tiers, for reproducible games.
    """

    fen: str
    difficulty: str = Difficulty.MEDIUM.value
    seed: int | None = None

    @field_validator("difficulty")
    @classmethod
    def check_difficulty(cls, v: str) -> str:
        """Reject unknown tiers up front (surfaced as a 422)."""
        return parse_difficulty(v).value


class MoveResponse(BaseModel):
    """
    The opponent's reply.

    Fields:
        move:       Move in UCI notation (e.g. "e7e5").
        san:        Same move in SAN (e.g. "e5").
        fen:        Board FEN after the move is applied.
        difficulty: Tier that produced the move.
    """

    move: str
    san: str
    fen: str
    difficulty: str


class AnalyzeRequest(BaseModel):
    """
    Ask for the best candidate moves.

    Fields:
        fen:   Full FEN of the position to analyse.
        depth: Search depth in plies, clamped to [1, MAX_ANALYSIS_DEPTH].
    """

    fen: str
    depth: int = 2

    @field_validator("depth")
    @classmethod
    def clamp_depth(cls, v: int) -> int:
        """Clamp depth so a request cannot start a runaway search."""
        return max(1, min(v, MAX_ANALYSIS_DEPTH))


class CandidateMove(BaseModel):
    move: str
    san: str
    score: int
    tier: str
    technique: str | None
    explanation: str
    motifs: list[str]


class AnalyzeResponse(BaseModel):
    fen: str
    turn: str
    depth: int
    moves: list[CandidateMove]


class DifficultyInfo(BaseModel):
    name: str
    depth: int
    description: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_fen(fen: str) -> chess.Board:
    try:
        return load_board(fen)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid FEN: {exc}") from exc


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.post("/api/move", response_model=MoveResponse)
def api_move(request: MoveRequest) -> MoveResponse:
    """
    Compute the computer opponent's move for the given position.

    Raises:
        HTTPException 400: Malformed FEN or game already over.
        HTTPException 500: Search failed unexpectedly.
    """
    board = _parse_fen(request.fen)

    if board.is_game_over():
        raise HTTPException(
            status_code=400,
            detail=f"Game is already over: {board.result()}",
        )

    rng = random.Random(request.seed)
    try:
        move = pick_move(board, request.difficulty, rng=rng)
    except Exception as exc:
        _log.exception("Move selection failed for FEN=%s", request.fen)
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc

    if move is None:
        raise HTTPException(status_code=500, detail="Engine returned no move")

    _log.info("Move=%s difficulty=%s fen=%s", move.uci(), request.difficulty, request.fen[:40])

    board.push(move.move)
    return MoveResponse(
        move=move.uci(),
        san=move.san,
        fen=board.fen(),
        difficulty=request.difficulty,
    )


@app.post("/api/analyze", response_model=AnalyzeResponse)
def api_analyze(request: AnalyzeRequest) -> AnalyzeResponse:
    """
    Return up to five candidate moves, best first for the side to move.

    A finished game yields an empty move list rather than an error, so the
    advisor panel can simply show nothing.

    Raises:
        HTTPException 400: Malformed FEN.
        HTTPException 500: Search failed unexpectedly.
    """
    board = _parse_fen(request.fen)

    try:
        analyses = analyze(board, request.depth)
    except Exception as exc:
        _log.exception("Analysis failed for FEN=%s", request.fen)
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc

    _log.info("Analyze depth=%d candidates=%d fen=%s", request.depth, len(analyses), request.fen[:40])

    return AnalyzeResponse(
        fen=board.fen(),
        turn="white" if board.turn == chess.WHITE else "black",
        depth=request.depth,
        moves=[
            CandidateMove(
                move=a.move.uci(),
                san=a.move.san,
                score=a.score,
                tier=a.tier.value,
                technique=a.technique.value if a.technique is not None else None,
                explanation=a.explanation,
                motifs=list(a.motifs),
            )
            for a in analyses
        ],
    )


@app.get("/api/difficulties", response_model=list[DifficultyInfo])
def api_difficulties() -> list[DifficultyInfo]:
    """List the difficulty tiers for the opponent picker."""
    return [
        DifficultyInfo(name=d.value, depth=d.depth, description=describe_difficulty(d))
        for d in Difficulty
    ]

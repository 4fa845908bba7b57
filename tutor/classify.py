"""
Move analysis for the "best moves" advisor.

analyze() scores every legal move with the same root search the computer
opponent uses, then labels each one independently of its score with a tier,
a technique and a sentence explaining the idea. The labels come from a fixed
decision order where the first match wins:

    1. checkmate                      Winning / Checkmate
    2. check (a checking fork is      Excellent / Check (or Fork)
       reported as a fork)
    3. capture, by captured value     Material Gain / Minor Piece Capture /
                                      Pawn Capture
    4. castling                       Good / Castling
    5. en passant                     Good / En Passant
    6. promotion                      Excellent / Pawn Promotion
    7. tactic detectors               Fork, Pin, Skewer, Discovered Attack,
                                      Deflection, Decoy
    8. positional detectors           Center Control, Piece Development,
                                      King Safety, Pawn Structure
    9. generic band on abs(score)     no technique

The analysed candidates are then ranked for the side to move and cut to the
top ANALYSIS_LIMIT.
"""

import enum
import logging
from dataclasses import dataclass

import chess

from tutor.constants import (
    ANALYSIS_LIMIT,
    DECENT_SCORE,
    EXCELLENT_SCORE,
    GOOD_SCORE,
    MAJOR_CAPTURE_VALUE,
    MINOR_CAPTURE_VALUE,
    PIECE_VALUES,
    VERY_GOOD_SCORE,
)
from tutor.rules import MoveFlag, MoveInfo, applied
from tutor.search import SearchState, search_root
from tutor.tactics import POSITIONAL_DETECTORS, TACTIC_DETECTORS

logger = logging.getLogger(__name__)


class Tier(str, enum.Enum):
    WINNING = "Winning"
    EXCELLENT = "Excellent"
    VERY_GOOD = "Very Good"
    GOOD = "Good"
    DECENT = "Decent"
    NEUTRAL = "Neutral"


class Technique(str, enum.Enum):
    CHECKMATE = "Checkmate"
    CHECK = "Check"
    MATERIAL_GAIN = "Material Gain"
    MINOR_PIECE_CAPTURE = "Minor Piece Capture"
    PAWN_CAPTURE = "Pawn Capture"
    CASTLING = "Castling"
    EN_PASSANT = "En Passant"
    PAWN_PROMOTION = "Pawn Promotion"
    FORK = "Fork"
    PIN = "Pin"
    SKEWER = "Skewer"
    DISCOVERED_ATTACK = "Discovered Attack"
    DEFLECTION = "Deflection"
    DECOY = "Decoy"
    CENTER_CONTROL = "Center Control"
    PIECE_DEVELOPMENT = "Piece Development"
    KING_SAFETY = "King Safety"
    PAWN_STRUCTURE = "Pawn Structure"


# Detector name -> (tier, technique) when that detector decides the label.
_DETECTOR_LABELS: dict[str, tuple[Tier, Technique]] = {
    "fork":              (Tier.EXCELLENT, Technique.FORK),
    "pin":               (Tier.VERY_GOOD, Technique.PIN),
    "skewer":            (Tier.VERY_GOOD, Technique.SKEWER),
    "discovered_attack": (Tier.VERY_GOOD, Technique.DISCOVERED_ATTACK),
    "deflection":        (Tier.GOOD, Technique.DEFLECTION),
    "decoy":             (Tier.GOOD, Technique.DECOY),
    "center_control":    (Tier.GOOD, Technique.CENTER_CONTROL),
    "development":       (Tier.GOOD, Technique.PIECE_DEVELOPMENT),
    "king_safety":       (Tier.DECENT, Technique.KING_SAFETY),
    "pawn_structure":    (Tier.DECENT, Technique.PAWN_STRUCTURE),
}


@dataclass(frozen=True)
class MoveAnalysis:
    """
    One analysed candidate move.

    Attributes:
        move:        The candidate.
        score:       Root search score after the move (White's perspective).
        tier:        How good the move looks to a student.
        technique:   The idea behind the move, or None for a quiet move.
        explanation: One or two sentences describing the idea.
        motifs:      Names of every tactic detector that matched, in detector
                     order, even those overruled by an earlier rule.
    """

    move: MoveInfo
    score: int
    tier: Tier
    technique: Technique | None
    explanation: str
    motifs: tuple[str, ...] = ()


def _generic_tier(score: int) -> Tier:
    magnitude = abs(score)
    if magnitude > EXCELLENT_SCORE:
        return Tier.EXCELLENT
    if magnitude > VERY_GOOD_SCORE:
        return Tier.VERY_GOOD
    if magnitude > GOOD_SCORE:
        return Tier.GOOD
    if magnitude > DECENT_SCORE:
        return Tier.DECENT
    return Tier.NEUTRAL


def _capture_label(info: MoveInfo) -> tuple[Tier, Technique, str]:
    value = PIECE_VALUES[info.captured]
    name = chess.piece_name(info.captured)
    if value >= MAJOR_CAPTURE_VALUE:
        return Tier.EXCELLENT, Technique.MATERIAL_GAIN, (
            f"{info.san} wins the {name}, a major gain of material."
        )
    if value >= MINOR_CAPTURE_VALUE:
        return Tier.VERY_GOOD, Technique.MINOR_PIECE_CAPTURE, (
            f"{info.san} captures a {name}, winning a minor piece."
        )
    return Tier.GOOD, Technique.PAWN_CAPTURE, f"{info.san} picks up a pawn."


def classify_move(board: chess.Board, info: MoveInfo, score: int) -> MoveAnalysis:
    """
    Label one candidate move.

    Args:
        board: The position the move was generated from. Used as scratch
               space (moves are pushed and popped) and handed back unchanged.
        info:  The candidate move.
        score: Its search score, carried through and used by the generic
               fallback.
    """
    with applied(board, info.move):
        is_mate = board.is_checkmate()
        is_check = board.is_check()

    tactics: list[tuple[str, str]] = []
    for name, detector in TACTIC_DETECTORS:
        matched, text = detector(board, info)
        if matched:
            tactics.append((name, text))
    motifs = tuple(name for name, _ in tactics)

    def result(tier: Tier, technique: Technique | None, text: str) -> MoveAnalysis:
        return MoveAnalysis(info, score, tier, technique, text, motifs)

    if is_mate:
        return result(Tier.WINNING, Technique.CHECKMATE, f"{info.san} is checkmate. The game is over.")

    if is_check:
        if "fork" in motifs:
            return result(Tier.EXCELLENT, Technique.FORK, dict(tactics)["fork"])
        return result(Tier.EXCELLENT, Technique.CHECK, (
            f"{info.san} puts the king in check and forces your opponent to respond."
        ))

    if info.is_capture:
        return result(*_capture_label(info))

    if info.is_castle:
        side = "kingside" if MoveFlag.KINGSIDE_CASTLE in info.flags else "queenside"
        return result(Tier.GOOD, Technique.CASTLING, (
            f"{info.san} castles {side}, bringing the king to safety and the rook into play."
        ))

    if info.is_en_passant:
        return result(Tier.GOOD, Technique.EN_PASSANT, (
            f"{info.san} captures en passant, taking the pawn that just ran past."
        ))

    if info.is_promotion:
        promoted = chess.piece_name(info.move.promotion)
        return result(Tier.EXCELLENT, Technique.PAWN_PROMOTION, (
            f"{info.san} promotes the pawn to a {promoted}."
        ))

    if tactics:
        name, text = tactics[0]
        tier, technique = _DETECTOR_LABELS[name]
        return result(tier, technique, text)

    for name, detector in POSITIONAL_DETECTORS:
        matched, text = detector(board, info)
        if matched:
            tier, technique = _DETECTOR_LABELS[name]
            return result(tier, technique, text)

    tier = _generic_tier(score)
    return result(tier, None, (
        f"{info.san} is a {tier.value.lower()} move; the position evaluates to "
        f"{score:+d} centipawns afterwards."
    ))


def rank(
    analyses: list[MoveAnalysis],
    maximizing: bool,
    limit: int = ANALYSIS_LIMIT,
) -> list[MoveAnalysis]:
    """
    Best candidates first for the side to move: highest score for White,
    lowest for Black. The sort is stable, so equal scores keep generation
    order.
    """
    ordered = sorted(analyses, key=lambda a: a.score, reverse=maximizing)
    return ordered[:limit]


def analyze(
    board: chess.Board,
    depth: int,
    state: SearchState | None = None,
) -> list[MoveAnalysis]:
    """
    Suggest the best moves in a position, each with a reason.

    Args:
        board: Position to analyse. Not modified.
        depth: Search depth in plies, counting the candidate move (>= 1).
        state: Optional SearchState for node counting and interruption.

    Returns:
        At most ANALYSIS_LIMIT analyses ordered best-first for the side to
        move. Empty when there are no legal moves.

    Raises:
        ValueError:    If depth < 1.
        SearchAborted: If the search was stopped through `state`.
    """
    scored = search_root(board, depth, state)
    if not scored:
        return []

    work = board.copy()
    analyses = [classify_move(work, info, score) for info, score in scored]
    top = rank(analyses, work.turn == chess.WHITE)
    logger.debug(
        "analyze depth=%d candidates=%d top=%s",
        depth,
        len(analyses),
        ", ".join(f"{a.move.san}({a.score})" for a in top),
    )
    return top

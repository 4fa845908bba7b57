"""
Tactical and positional pattern detectors.

Each detector looks at one candidate move in the position it was generated
from and answers (matched, explanation). The explanation is a sentence meant
for a student, so it names pieces and squares rather than internal terms.

Detectors receive the classifier's private board. Any detector that needs the
position after the move plays it inside rules.applied(), so the board is
always handed back unchanged.

Pins and skewers are found geometrically: starting from the destination of a
moved bishop, rook or queen, walk each of its rays, take the first enemy
piece hit and the piece directly behind it on the same ray. Whichever of the
two is worth more decides the pattern (king counts as most valuable).
"""

from typing import Callable

import chess

from tutor.constants import CENTER_SQUARES, PIECE_VALUES
from tutor.rules import MoveInfo, applied, board_at

Detection = tuple[bool, str]
Detector = Callable[[chess.Board, MoveInfo], Detection]

NO_MATCH: Detection = (False, "")

_ROOK_RAYS = ((0, 1), (0, -1), (1, 0), (-1, 0))
_BISHOP_RAYS = ((1, 1), (1, -1), (-1, 1), (-1, -1))
_SLIDER_RAYS: dict[int, tuple[tuple[int, int], ...]] = {
    chess.BISHOP: _BISHOP_RAYS,
    chess.ROOK:   _ROOK_RAYS,
    chess.QUEEN:  _ROOK_RAYS + _BISHOP_RAYS,
}


def _describe(piece_type: int, square: int) -> str:
    return f"{chess.piece_name(piece_type)} on {chess.square_name(square)}"


def _back_rank(color: bool) -> int:
    return 0 if color == chess.WHITE else 7


def attacked_targets(board: chess.Board, square: int) -> list[tuple[int, int]]:
    """
    Enemy pieces the piece on `square` could take right now.

    A piece pinned to its own king cannot actually capture off the pin line,
    so a pinned attacker contributes no targets.

    Returns:
        (square, piece_type) pairs in square order.
    """
    piece = board.piece_at(square)
    if piece is None or board.is_pinned(piece.color, square):
        return []
    targets = []
    for target in board.attacks(square):
        occupant = board_at(board, target)
        if occupant is not None and occupant[1] != piece.color:
            targets.append((target, occupant[0]))
    return targets


def _ray_pairs(board: chess.Board, square: int) -> list[tuple[int, int, int, int]]:
    """
    (front_sq, front_type, back_sq, back_type) for every ray of the slider on
    `square` that hits an enemy piece with another enemy piece right behind it.
    """
    piece = board.piece_at(square)
    if piece is None or piece.piece_type not in _SLIDER_RAYS:
        return []

    pairs = []
    for d_file, d_rank in _SLIDER_RAYS[piece.piece_type]:
        hits: list[tuple[int, chess.Piece]] = []
        file, rank = chess.square_file(square), chess.square_rank(square)
        while len(hits) < 2:
            file, rank = file + d_file, rank + d_rank
            if not (0 <= file < 8 and 0 <= rank < 8):
                break
            occupant = board.piece_at(chess.square(file, rank))
            if occupant is not None:
                hits.append((chess.square(file, rank), occupant))
        if len(hits) == 2 and all(hit.color != piece.color for _, hit in hits):
            (front_sq, front), (back_sq, back) = hits
            pairs.append((front_sq, front.piece_type, back_sq, back.piece_type))
    return pairs


# ---------------------------------------------------------------------------
# Tactical detectors
# ---------------------------------------------------------------------------


def detect_fork(board: chess.Board, info: MoveInfo) -> Detection:
    """
    The moved piece newly attacks two or more enemy pieces at once.

    Targets the piece already hit from its origin square do not count: sliding
    a rook along a file it already controlled creates no new double attack.
    """
    already_hit = board.attacks(info.from_square)
    with applied(board, info.move):
        targets = [
            (square, piece_type)
            for square, piece_type in attacked_targets(board, info.to_square)
            if square not in already_hit
        ]
    if len(targets) < 2:
        return NO_MATCH

    ranked = sorted(targets, key=lambda t: PIECE_VALUES[t[1]], reverse=True)
    (saved_sq, saved), (lost_sq, lost) = ranked[0], ranked[1]
    mover = chess.piece_name(info.piece)

    if saved == chess.KING:
        return True, (
            f"{info.san} forks the king and the {_describe(lost, lost_sq)}. "
            f"Your opponent can save only one of them: the king will likely be "
            f"saved since it has to deal with the check, so the "
            f"{chess.piece_name(lost)} is left for your {mover}."
        )
    return True, (
        f"{info.san} forks the {_describe(saved, saved_sq)} and the "
        f"{_describe(lost, lost_sq)}. Your opponent can save only one of them: "
        f"the {chess.piece_name(saved)} will likely be saved, and the "
        f"{chess.piece_name(lost)} falls."
    )


def detect_pin(board: chess.Board, info: MoveInfo) -> Detection:
    """The moved slider pins an enemy piece to a king or a more valuable piece."""
    with applied(board, info.move):
        pairs = _ray_pairs(board, info.to_square)

    for front_sq, front, back_sq, back in pairs:
        if front == chess.KING:
            continue
        if back == chess.KING:
            return True, (
                f"{info.san} pins the {_describe(front, front_sq)} to the king on "
                f"{chess.square_name(back_sq)}; it cannot move without exposing the king."
            )
        if PIECE_VALUES[back] > PIECE_VALUES[front]:
            return True, (
                f"{info.san} pins the {_describe(front, front_sq)}. If it moves, the "
                f"{_describe(back, back_sq)} behind it is lost."
            )
    return NO_MATCH


def detect_skewer(board: chess.Board, info: MoveInfo) -> Detection:
    """The moved slider attacks a valuable piece with a lesser one behind it."""
    with applied(board, info.move):
        pairs = _ray_pairs(board, info.to_square)

    for front_sq, front, back_sq, back in pairs:
        if PIECE_VALUES[front] > PIECE_VALUES[back]:
            return True, (
                f"{info.san} skewers the {_describe(front, front_sq)}. Once it steps "
                f"aside, the {_describe(back, back_sq)} behind it can be taken."
            )
    return NO_MATCH


def detect_discovered_attack(board: chess.Board, info: MoveInfo) -> Detection:
    """Moving this piece opens a line for another friendly piece."""
    us = info.color
    before: dict[int, chess.SquareSet] = {}
    for square in chess.SquareSet(board.occupied_co[us]):
        if square != info.from_square:
            before[square] = board.attacks(square)

    with applied(board, info.move):
        for square, old_attacks in before.items():
            for target in board.attacks(square) - old_attacks:
                victim = board.piece_at(target)
                if victim is None or victim.color == us:
                    continue
                attacker = board.piece_type_at(square)
                return True, (
                    f"{info.san} uncovers an attack: your {_describe(attacker, square)} "
                    f"now hits the {_describe(victim.piece_type, target)}."
                )
    return NO_MATCH


def detect_deflection(board: chess.Board, info: MoveInfo) -> Detection:
    """A check or a capture forces the opponent to respond to it."""
    if board.gives_check(info.move):
        return True, (
            f"{info.san} gives check and drags the defence away from its duties."
        )
    if info.is_capture:
        return True, (
            f"{info.san} takes the {chess.piece_name(info.captured)}; the recapture "
            f"would pull a defender away from what it was guarding."
        )
    return NO_MATCH


def detect_decoy(board: chess.Board, info: MoveInfo) -> Detection:
    if info.is_capture and PIECE_VALUES[info.captured] > PIECE_VALUES[info.piece]:
        return True, (
            f"{info.san} trades your {chess.piece_name(info.piece)} for a more "
            f"valuable {chess.piece_name(info.captured)}."
        )
    return NO_MATCH


# ---------------------------------------------------------------------------
# Positional detectors
# ---------------------------------------------------------------------------


def detect_center_control(board: chess.Board, info: MoveInfo) -> Detection:
    if info.to_square in CENTER_SQUARES:
        return True, (
            f"{info.san} puts your {chess.piece_name(info.piece)} on "
            f"{chess.square_name(info.to_square)}, one of the four central squares."
        )
    return NO_MATCH


def detect_development(board: chess.Board, info: MoveInfo) -> Detection:
    if info.piece not in (chess.KNIGHT, chess.BISHOP, chess.QUEEN):
        return NO_MATCH
    home = _back_rank(info.color)
    if chess.square_rank(info.from_square) == home and chess.square_rank(info.to_square) != home:
        return True, (
            f"{info.san} develops your {chess.piece_name(info.piece)} off the back "
            f"rank and into the game."
        )
    return NO_MATCH


def detect_king_safety(board: chess.Board, info: MoveInfo) -> Detection:
    if info.is_castle:
        return True, f"{info.san} tucks your king away and connects the rooks."
    if info.piece == chess.KING and chess.square_distance(info.from_square, info.to_square) == 1:
        return True, (
            f"{info.san} steps the king to {chess.square_name(info.to_square)}, "
            f"a safer square."
        )
    return NO_MATCH


def detect_pawn_structure(board: chess.Board, info: MoveInfo) -> Detection:
    if info.piece == chess.PAWN and not info.is_capture:
        return True, (
            f"{info.san} advances a pawn to {chess.square_name(info.to_square)}, "
            f"shaping your pawn structure and gaining space."
        )
    return NO_MATCH


# Ordered: the classifier takes the first match.
TACTIC_DETECTORS: tuple[tuple[str, Detector], ...] = (
    ("fork", detect_fork),
    ("pin", detect_pin),
    ("skewer", detect_skewer),
    ("discovered_attack", detect_discovered_attack),
    ("deflection", detect_deflection),
    ("decoy", detect_decoy),
)

POSITIONAL_DETECTORS: tuple[tuple[str, Detector], ...] = (
    ("center_control", detect_center_control),
    ("development", detect_development),
    ("king_safety", detect_king_safety),
    ("pawn_structure", detect_pawn_structure),
)

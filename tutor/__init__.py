"""
Chess tutor engine package.

The computer opponent and "best moves" advisor of the chess tutor: a
depth-limited minimax search with alpha-beta pruning over python-chess
positions, a material + piece-square evaluator, a difficulty-tiered move
selector, and a classifier that labels candidate moves with tactical and
positional ideas.

Modules:
    constants - Piece values, piece-square tables, tiers and thresholds
    rules     - Adapter over python-chess (MoveInfo, scoped make/undo)
    evaluate  - Static evaluation from White's perspective
    search    - Minimax with alpha-beta, root move scoring, interruption
    opponent  - Difficulty policy for the computer opponent
    tactics   - Fork/pin/skewer/... and positional detectors
    classify  - MoveAnalysis records, decision order, ranking
"""

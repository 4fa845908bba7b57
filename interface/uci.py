"""
UCI (Universal Chess Interface) front end for the tutor's computer opponent.

Lets any UCI GUI or testing tool (cutechess-cli, a lichess bot bridge, ...)
play against the opponent at one of the tutor's difficulty tiers. The engine
reads commands from stdin and writes responses to stdout, flushing every line.

Protocol overview:
    GUI → Engine: uci, isready, ucinewgame, setoption, position, go, stop, quit
    Engine → GUI: id name, id author, option, uciok, readyok, info, bestmove

The tier is chosen with:
    setoption name Difficulty value expert

Search depth is fixed per tier, so clock tokens on "go" (wtime, movetime,
...) are accepted and ignored.

Threading model:
    The UCI loop runs on the main thread and must never block on the search.
    "go" spawns a daemon thread; "stop" sets the SearchState's stop_event,
    which makes the search raise SearchAborted at its next check point. An
    aborted search still has to answer: it plays the best of the root moves
    it finished scoring, or the first legal move if it finished none.

Critical rule: NEVER print to stdout except for valid UCI responses.
Debug output goes to stderr.
"""

import sys
import os
import random
import threading
import time

# ---------------------------------------------------------------------------
# Path setup: make 'tutor' importable when this script is run directly
# (python interface/uci.py from the repo root).
# ---------------------------------------------------------------------------
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

import chess
from tutor.opponent import Difficulty, choose_best, parse_difficulty, pick_move
from tutor.search import SearchAborted, SearchState


def _send(line: str) -> None:
    """Write a UCI response line to stdout and flush immediately."""
    print(line, flush=True)


def _log(message: str) -> None:
    """Write a diagnostic line to stderr; stdout is reserved for the protocol."""
    print(message, file=sys.stderr, flush=True)


class UciHandler:
    """
    Stateful handler for the UCI protocol.

    Attributes:
        board:         Current position, updated by "position" commands.
        difficulty:    Tier used for the next "go".
        rng:           Random source for the easy and medium tiers.
        search_thread: The active search thread, or None.
        search_state:  SearchState of the active search; its stop_event is
                       what "stop" sets.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.board: chess.Board = chess.Board()
        self.difficulty: Difficulty = Difficulty.MEDIUM
        self.rng: random.Random = rng if rng is not None else random.Random()
        self.search_thread: threading.Thread | None = None
        self.search_state: SearchState = SearchState()

    # -----------------------------------------------------------------------
    # Command handlers
    # -----------------------------------------------------------------------

    def handle_uci(self) -> None:
        """Identify the engine and advertise the Difficulty option."""
        _send("id name ChessTutor")
        _send("id author Chess Tutor Project")
        choices = " ".join(f"var {d.value}" for d in Difficulty)
        _send(f"option name Difficulty type combo default {self.difficulty.value} {choices}")
        _send("uciok")

    def handle_isready(self) -> None:
        _send("readyok")

    def handle_ucinewgame(self) -> None:
        self._stop_search()
        self.board = chess.Board()

    def handle_setoption(self, tokens: list[str]) -> None:
        """
        Parse "setoption name <id> [value <x>]".

        Only Difficulty is recognised; anything else is logged and ignored.
        """
        if "name" not in tokens:
            return
        name_idx = tokens.index("name")
        if "value" in tokens:
            value_idx = tokens.index("value")
            name = " ".join(tokens[name_idx + 1:value_idx])
            value = " ".join(tokens[value_idx + 1:])
        else:
            name = " ".join(tokens[name_idx + 1:])
            value = ""

        if name.lower() != "difficulty":
            _log(f"uci: ignoring unknown option: {name!r}")
            return
        try:
            self.difficulty = parse_difficulty(value)
        except ValueError as e:
            _log(f"uci: {e}")

    def handle_position(self, tokens: list[str]) -> None:
        """
        Parse and apply a "position" command.

        Command formats:
            position startpos [moves e2e4 e7e5 ...]
            position fen <FEN> [moves e2e4 e7e5 ...]
        """
        try:
            if not tokens:
                return

            if tokens[0] == "startpos":
                self.board = chess.Board()
                move_tokens = tokens[2:] if len(tokens) > 1 and tokens[1] == "moves" else []
            elif tokens[0] == "fen":
                if "moves" in tokens:
                    moves_idx = tokens.index("moves")
                    fen = " ".join(tokens[1:moves_idx])
                    move_tokens = tokens[moves_idx + 1:]
                else:
                    fen = " ".join(tokens[1:])
                    move_tokens = []
                self.board = chess.Board(fen)
            else:
                _log(f"uci: unknown position type: {tokens[0]}")
                return

            for uci_move in move_tokens:
                move = chess.Move.from_uci(uci_move)
                if move in self.board.legal_moves:
                    self.board.push(move)
                else:
                    _log(f"uci: illegal move in position command: {uci_move}")
                    break

        except ValueError as e:
            _log(f"uci: error in position command: {e}")

    def handle_go(self, tokens: list[str]) -> None:
        """
        Start choosing a move in a background thread.

        `tokens` (clock parameters) are ignored: each tier searches to a fixed
        depth. The board is copied so a following "position" command cannot
        race with the search.
        """
        self._stop_search()

        self.search_state = SearchState()
        state = self.search_state
        board_copy = self.board.copy()
        difficulty = self.difficulty
        rng = self.rng

        def search_and_reply() -> None:
            """Run the tier's policy and emit info + bestmove."""
            try:
                start = time.monotonic()
                try:
                    move = pick_move(board_copy, difficulty, rng=rng, state=state)
                    best = move.move if move is not None else None
                except SearchAborted:
                    partial = choose_best(state.scored, board_copy.turn == chess.WHITE)
                    if partial is not None:
                        _log(f"uci: search stopped, playing best of {len(state.scored)} scored moves")
                        best = partial.move
                    else:
                        _log("uci: search stopped before any move was scored, playing first legal move")
                        best = next(iter(board_copy.legal_moves), None)
                elapsed_ms = max(1, int((time.monotonic() - start) * 1000))

                if best is not None:
                    _send(
                        f"info depth {difficulty.depth} nodes {state.node_count} "
                        f"time {elapsed_ms}"
                    )
                    _send(f"bestmove {best.uci()}")
                else:
                    _send("bestmove (none)")

            except Exception as e:
                _log(f"search error: {e}")
                _send("bestmove (none)")

        self.search_thread = threading.Thread(target=search_and_reply, daemon=True)
        self.search_thread.start()

    def handle_stop(self) -> None:
        self._stop_search()

    def handle_quit(self) -> None:
        self._stop_search()
        sys.exit(0)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    def _stop_search(self) -> None:
        """
        Signal the running search to stop and wait for its bestmove.

        The join timeout keeps the loop responsive even if a search thread
        misbehaves.
        """
        self.search_state.stop_event.set()
        if self.search_thread is not None and self.search_thread.is_alive():
            self.search_thread.join(timeout=2.0)
        self.search_thread = None


def run_uci_loop() -> None:
    """
    Main UCI protocol loop.

    Reads lines from stdin until "quit" or EOF. Each command is wrapped so a
    bug in one handler is logged to stderr instead of killing the engine.
    """
    handler = UciHandler()

    for raw_line in sys.stdin:
        line = raw_line.strip()
        if not line:
            continue

        tokens = line.split()
        command = tokens[0]
        args = tokens[1:]

        try:
            if command == "uci":
                handler.handle_uci()
            elif command == "isready":
                handler.handle_isready()
            elif command == "ucinewgame":
                handler.handle_ucinewgame()
            elif command == "setoption":
                handler.handle_setoption(args)
            elif command == "position":
                handler.handle_position(args)
            elif command == "go":
                handler.handle_go(args)
            elif command == "stop":
                handler.handle_stop()
            elif command == "quit":
                handler.handle_quit()
            else:
                _log(f"uci: ignoring unknown command: {command!r}")

        except Exception as e:
            _log(f"uci: unhandled error for command {command!r}: {e}")


if __name__ == "__main__":
    run_uci_loop()

"""
Round controller: commands, gravity, lock delay, scoring and hold.

This module ties the Board and Piece together into one round. A caller
(renderer, input loop, test) feeds it discrete commands and one ``tick()``
per frame, and reads back immutable ``GameSnapshot`` objects to draw.

Per tick, in order:
  1. Commands received since the last tick are applied (``apply``).
  2. The gravity timer counts down; the lock timer counts down only while
     the current piece is PLACING.
  3. When gravity fires the piece tries to drop one row.
  4. When the lock timer runs out on a PLACING piece it is locked, full
     lines are cleared and scored, and the next piece spawns. A spawn that
     does not fit ends the round.
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from typing import Optional

import numpy as np

from clonetris.config import GameConfig
from clonetris.game.board import Board
from clonetris.game.pieces import Piece, PieceKind, PieceState, random_piece

logger = logging.getLogger(__name__)


class Command(enum.IntEnum):
    """Discrete input commands accepted by the round."""
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    SOFT_DROP = 2
    ROTATE_CW = 3
    ROTATE_CCW = 4
    HOLD = 5
    HARD_DROP = 6


class TickOutcome(enum.Enum):
    """Result of advancing the round by one tick."""
    RUNNING = "running"
    GAME_OVER = "game_over"


def _frozen(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class GameSnapshot:
    """Read-only view of a round for rendering.

    Arrays are copies flagged non-writeable, so holding on to a snapshot
    never observes later changes to the round.
    """

    board: np.ndarray
    width: int
    height: int
    current_kind: PieceKind
    current_mask: np.ndarray
    current_x: int
    current_y: int
    current_rotation: int
    current_state: PieceState
    next_kind: PieceKind
    next_mask: np.ndarray
    held_kind: PieceKind
    held_mask: np.ndarray
    score: int
    score_text: str
    lines: int
    pieces: int
    shine_frame: int
    game_over: bool


class TetrisGame:
    """One round of the game.

    Attributes:
        config: The round's fixed tunables.
        board: The board of locked cells.
        current: The piece under player control.
        next: The piece that spawns after the current one locks.
        held: The held piece, or a NONE-kind piece when nothing is held.
        score: Current score.
        lines: Total lines cleared this round.
        pieces: Number of pieces locked this round.
        drop_timer: Ticks until gravity next fires.
        lock_timer: Ticks left before a PLACING piece locks.
        shine_frame: Cosmetic animation frame for a resting piece (0-6).
        game_over: Whether the round has ended.
    """

    def __init__(self, config: GameConfig | None = None, rng: Optional[random.Random] = None) -> None:
        """Initialize and start a new round.

        Args:
            config: Round configuration; defaults to ``GameConfig()``.
            rng: Random source for piece draws; defaults to one seeded from
                ``config.seed``.
        """
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.board = Board(self.config.board_width, self.config.board_height)
        self.reset()

    def reset(self) -> GameSnapshot:
        """Clear the board and counters and draw fresh current/next pieces.

        Returns:
            Snapshot of the new round.
        """
        self.board.reset()
        self.score: int = 0
        self.lines: int = 0
        self.pieces: int = 0
        self.drop_timer: int = self.config.gravity_period
        self.lock_timer: int = self.config.lock_delay
        self.shine_frame: int = 0
        self.game_over: bool = False
        self.current: Piece = self._new_piece()
        self.next: Piece = self._new_piece()
        self.held: Piece = Piece(PieceKind.NONE, self.config.spawn_x, self.config.spawn_y)
        if not self.board.test_placement(self.current):
            self._end_round()
        return self.get_state()

    # ── Frame driving ────────────────────────────────────────────────────

    def step(self, *commands: Command) -> TickOutcome:
        """Apply the given commands, then advance one tick."""
        for command in commands:
            self.apply(command)
        return self.tick()

    def apply(self, command: Command) -> None:
        """Dispatch one input command to the current piece.

        Commands are ignored once the round is over.

        Raises:
            ValueError: If ``command`` is not a ``Command`` value.
        """
        command = Command(command)
        if self.game_over:
            return

        if command == Command.MOVE_LEFT:
            self.current.translate(self.board, -1, 0)
        elif command == Command.MOVE_RIGHT:
            self.current.translate(self.board, 1, 0)
        elif command == Command.SOFT_DROP:
            self._drop_one()
        elif command == Command.ROTATE_CW:
            self.current.srs_rotate(self.board, True)
        elif command == Command.ROTATE_CCW:
            self.current.srs_rotate(self.board, False)
        elif command == Command.HOLD:
            self._hold()
        elif command == Command.HARD_DROP:
            self._hard_drop()

    def tick(self) -> TickOutcome:
        """Advance timers by one frame, applying gravity and locking."""
        if self.game_over:
            return TickOutcome.GAME_OVER

        self.drop_timer -= 1
        if self.current.state is PieceState.PLACING:
            self.lock_timer -= 1

        if self.drop_timer <= 0:
            self._drop_one()
            self.drop_timer = self.config.gravity_period

        if self.lock_timer <= 0 and self.current.state is PieceState.PLACING:
            self._lock_piece()

        self.shine_frame = 6 - ((max(self.lock_timer, 0) // 10) % 7)
        return TickOutcome.GAME_OVER if self.game_over else TickOutcome.RUNNING

    # ── Snapshots ────────────────────────────────────────────────────────

    def format_score(self) -> str:
        return f"{self.score:0{self.config.score_digits}d}"

    def get_state(self) -> GameSnapshot:
        """Return an immutable snapshot of everything a renderer needs."""
        return GameSnapshot(
            board=_frozen(self.board.get_grid()),
            width=self.board.width,
            height=self.board.height,
            current_kind=self.current.kind,
            current_mask=_frozen(self.current.mask.copy()),
            current_x=self.current.x,
            current_y=self.current.y,
            current_rotation=self.current.rotation,
            current_state=self.current.state,
            next_kind=self.next.kind,
            next_mask=_frozen(self.next.mask.copy()),
            held_kind=self.held.kind,
            held_mask=_frozen(self.held.mask.copy()),
            score=self.score,
            score_text=self.format_score(),
            lines=self.lines,
            pieces=self.pieces,
            shine_frame=self.shine_frame,
            game_over=self.game_over,
        )

    # ── Internals ────────────────────────────────────────────────────────

    def _new_piece(self) -> Piece:
        return random_piece(self.rng, self.config.spawn_x, self.config.spawn_y)

    def _drop_one(self) -> bool:
        """Try to move the current piece down one row.

        A successful drop makes the piece ACTIVE again and refills the lock
        timer; a blocked drop marks it PLACING.

        Returns:
            True if the piece moved.
        """
        piece = self.current
        if piece.state is PieceState.PLACED:
            return False
        old_y = piece.y
        piece.translate(self.board, 0, 1)
        if piece.y == old_y:
            piece.state = PieceState.PLACING
            return False
        piece.state = PieceState.ACTIVE
        self.lock_timer = self.config.lock_delay
        return True

    def _hard_drop(self) -> int:
        """Drop the current piece as far as it goes and start locking it.

        A piece that is already resting (PLACING) is left where it is.

        Returns:
            Number of rows dropped.
        """
        piece = self.current
        if piece.state is not PieceState.ACTIVE:
            return 0
        rows = 0
        while True:
            old_y = piece.y
            piece.translate(self.board, 0, 1)
            if piece.y == old_y:
                break
            rows += 1
        piece.state = PieceState.PLACING
        return rows

    def _hold(self) -> bool:
        """Swap the current piece with the held one.

        With nothing held, the current piece is stored untouched and the next
        piece comes into play. Otherwise the held piece takes the current
        piece's position with its rotation reset to 0. Holding is disabled
        while the current piece is PLACING.

        Returns:
            True if the hold was performed.
        """
        if self.current.state is not PieceState.ACTIVE:
            return False

        if self.held.kind is PieceKind.NONE:
            self.held = self.current
            self.current = self.next
            self.next = self._new_piece()
            if not self.board.test_placement(self.current):
                self._end_round()
            return True

        incoming = self.held.copy()
        incoming.x, incoming.y = self.current.x, self.current.y
        for _ in range(incoming.rotation):
            incoming.rotate_ccw()
        incoming.state = PieceState.ACTIVE
        if not self.board.test_placement(incoming):
            logger.debug("Hold refused: %s does not fit at (%d, %d)", incoming.kind.name, incoming.x, incoming.y)
            return False

        self.held = self.current
        self.current = incoming
        return True

    def _lock_piece(self) -> int:
        """Lock the current piece, clear and score lines, spawn the next one.

        Returns:
            Number of lines cleared.
        """
        piece = self.current
        piece.state = PieceState.PLACED
        self.board.place_piece(piece)
        self.pieces += 1

        full_lines = self.board.full_lines()
        cleared = len(full_lines)
        self.score += self.config.score_table[cleared]
        self.lines += cleared
        self.board.clear_lines(full_lines)
        logger.debug(
            "Locked %s at (%d, %d) rotation %d; cleared rows %s, score %d",
            piece.kind.name, piece.x, piece.y, piece.rotation, full_lines, self.score,
        )

        self.current = self.next
        self.next = self._new_piece()
        self.lock_timer = self.config.lock_delay
        if not self.board.test_placement(self.current):
            self._end_round()
        return cleared

    def _end_round(self) -> None:
        self.game_over = True
        logger.info(
            "Game over: %s cannot spawn at (%d, %d). Score %d, lines %d, pieces %d",
            self.current.kind.name, self.current.x, self.current.y,
            self.score, self.lines, self.pieces,
        )

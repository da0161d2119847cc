"""
Tetromino definitions, SRS kick tables, and the falling piece itself.

Every piece lives in a fixed 5x5 mask. The mask holds the piece's fill id
(1-7) in occupied cells and 0 elsewhere, and always reflects the current
rotation: rotating transforms the mask rather than looking up a stored
rotation state.

Coordinate convention:
  - The mask is indexed [row, col]; (x, y) is the board offset of its
    top-left corner.
  - On the board, row 0 is the top and row increases downward.
  - Kick table dy values increase UPWARD, so they are subtracted from y.
"""

from __future__ import annotations

import enum
import random

import numpy as np

from clonetris.game.board import Board

MASK_SIZE = 5
SPAWN_X = 2
SPAWN_Y = 0


class PieceKind(enum.IntEnum):
    """The seven tetrominoes plus the NONE sentinel for an empty hold slot.

    The value is the fill id stored in masks and on the board.
    """
    NONE = 0
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


class PieceState(enum.Enum):
    """Lifecycle of a piece: falling, resting on the stack, locked."""
    ACTIVE = "active"
    PLACING = "placing"
    PLACED = "placed"


REAL_KINDS: tuple[PieceKind, ...] = tuple(k for k in PieceKind if k is not PieceKind.NONE)

# =============================================================================
# Spawn masks (rotation 0)
# =============================================================================
# 1 marks an occupied cell; the kind's fill id is multiplied in at build time.

_SPAWN_SHAPES: dict[PieceKind, tuple[tuple[int, ...], ...]] = {
    PieceKind.I: (
        (0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0),
        (0, 1, 1, 1, 1),
        (0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0),
    ),
    PieceKind.O: (
        (0, 0, 0, 0, 0),
        (0, 0, 1, 1, 0),
        (0, 0, 1, 1, 0),
        (0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0),
    ),
    PieceKind.T: (
        (0, 0, 0, 0, 0),
        (0, 0, 1, 0, 0),
        (0, 1, 1, 1, 0),
        (0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0),
    ),
    PieceKind.S: (
        (0, 0, 0, 0, 0),
        (0, 0, 1, 1, 0),
        (0, 1, 1, 0, 0),
        (0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0),
    ),
    PieceKind.Z: (
        (0, 0, 0, 0, 0),
        (0, 1, 1, 0, 0),
        (0, 0, 1, 1, 0),
        (0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0),
    ),
    PieceKind.J: (
        (0, 0, 0, 0, 0),
        (0, 1, 0, 0, 0),
        (0, 1, 1, 1, 0),
        (0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0),
    ),
    PieceKind.L: (
        (0, 0, 0, 0, 0),
        (0, 0, 0, 1, 0),
        (0, 1, 1, 1, 0),
        (0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0),
    ),
    PieceKind.NONE: ((0,) * MASK_SIZE,) * MASK_SIZE,
}

# =============================================================================
# SRS Offset Data
# =============================================================================
#
# Tables are per rotation STATE, not per transition: slot r holds the offsets
# associated with rotation r. The kick tried for a transition prev -> next is
# the component-wise difference table[prev][i] - table[next][i], which yields
# the usual guideline kicks for both directions from a single table.
#
# (dx, dy): dx positive = right, dy positive = UP.
# =============================================================================

KickTable = tuple[tuple[tuple[int, int], ...], ...]

KICK_TABLE_JLSTZ: KickTable = (
    ((0, 0), (0, 0), (0, 0), (0, 0), (0, 0)),
    ((0, 0), (1, 0), (1, -1), (0, 2), (1, 2)),
    ((0, 0), (0, 0), (0, 0), (0, 0), (0, 0)),
    ((0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)),
)

# The O piece only needs one "kick" per state: it undoes the drift of the
# mask rotating around the 5x5 centre.
KICK_TABLE_O: KickTable = (
    ((0, 0),),
    ((0, -1),),
    ((-1, -1),),
    ((-1, 0),),
)

KICK_TABLE_I: KickTable = (
    ((0, 0), (-1, 0), (2, 0), (-1, 0), (2, 0)),
    ((-1, 0), (0, 0), (0, 0), (0, 1), (0, -2)),
    ((-1, 1), (1, 1), (-2, 1), (1, 0), (-2, 0)),
    ((0, 1), (0, 1), (0, 1), (0, -1), (0, 2)),
)

KICK_TABLE_NONE: KickTable = ()

_KICK_TABLES: dict[PieceKind, KickTable] = {
    PieceKind.I: KICK_TABLE_I,
    PieceKind.O: KICK_TABLE_O,
    PieceKind.T: KICK_TABLE_JLSTZ,
    PieceKind.S: KICK_TABLE_JLSTZ,
    PieceKind.Z: KICK_TABLE_JLSTZ,
    PieceKind.J: KICK_TABLE_JLSTZ,
    PieceKind.L: KICK_TABLE_JLSTZ,
    PieceKind.NONE: KICK_TABLE_NONE,
}


def spawn_mask(kind: PieceKind) -> np.ndarray:
    """Return a fresh 5x5 mask for ``kind`` in its spawn orientation."""
    return np.array(_SPAWN_SHAPES[kind], dtype=np.int8) * np.int8(kind.value)


def kick_table(kind: PieceKind) -> KickTable:
    return _KICK_TABLES[kind]


class Piece:
    """A tetromino on (or destined for) the board.

    Attributes:
        kind: Which tetromino this is.
        mask: 5x5 int8 array of the shape in its current rotation.
        x: Board column of the mask's left edge.
        y: Board row of the mask's top edge.
        rotation: Rotation index 0-3, clockwise-increasing.
        kick_table: Per-rotation kick offsets for this piece's family.
        state: Lifecycle state (ACTIVE, PLACING or PLACED).
    """

    def __init__(self, kind: PieceKind, x: int = SPAWN_X, y: int = SPAWN_Y) -> None:
        self.kind = PieceKind(kind)
        self.mask = spawn_mask(self.kind)
        self.x = x
        self.y = y
        self.rotation = 0
        self.kick_table = kick_table(self.kind)
        self.state = PieceState.ACTIVE

    def __repr__(self) -> str:
        return (
            f"Piece(kind={self.kind.name}, x={self.x}, y={self.y}, "
            f"rotation={self.rotation}, state={self.state.name})"
        )

    def __str__(self) -> str:
        rows = ["".join(str(int(v)) for v in row) for row in self.mask]
        return "\n".join(rows + [str(self.rotation)])

    @property
    def position(self) -> tuple[int, int]:
        return self.x, self.y

    def copy(self) -> Piece:
        """Return an independent copy of this piece (mask included)."""
        clone = Piece.__new__(Piece)
        clone.kind = self.kind
        clone.mask = self.mask.copy()
        clone.x = self.x
        clone.y = self.y
        clone.rotation = self.rotation
        clone.kick_table = self.kick_table
        clone.state = self.state
        return clone

    def cells(self) -> list[tuple[int, int]]:
        """Return the absolute (x, y) board coordinates of occupied cells."""
        rows, cols = np.nonzero(self.mask)
        return [(self.x + int(c), self.y + int(r)) for r, c in zip(rows, cols)]

    # ── Movement ─────────────────────────────────────────────────────────

    def translate(self, board: Board, dx: int, dy: int) -> None:
        """Move by (dx, dy) if the destination is free, otherwise stay put.

        The move is all-or-nothing. Callers detect a blocked move by
        comparing the position before and after.
        """
        if self.state is PieceState.PLACED:
            return
        self.x += dx
        self.y += dy
        if not board.test_placement(self):
            self.x -= dx
            self.y -= dy

    # ── Rotation ─────────────────────────────────────────────────────────

    def rotate_cw(self) -> None:
        """Rotate the mask 90 degrees clockwise, unconditionally.

        Local cell (x, y) moves to (4 - y, x). Position is not touched and
        the board is not consulted.
        """
        self.rotation = (self.rotation + 1) % 4
        self.mask = np.rot90(self.mask, k=-1).copy()

    def rotate_ccw(self) -> None:
        """Inverse of :meth:`rotate_cw`."""
        self.rotation = (self.rotation + 3) % 4
        self.mask = np.rot90(self.mask, k=1).copy()

    def kick_vectors(self, prev_rotation: int, next_rotation: int) -> list[tuple[int, int]]:
        """Return the kick candidates for the transition prev -> next.

        Args:
            prev_rotation: Rotation index before the turn (0-3).
            next_rotation: Rotation index after the turn (0-3).

        Returns:
            List of (dx, dy) offsets in the order they must be tried, with dy
            in the table's upward-positive convention.
        """
        prev = self.kick_table[prev_rotation]
        nxt = self.kick_table[next_rotation]
        return [(p[0] - n[0], p[1] - n[1]) for p, n in zip(prev, nxt)]

    def srs_rotate(self, board: Board, clockwise: bool) -> bool:
        """Rotate with Super Rotation System wall kicks.

        The mask is rotated first, then every kick candidate is tried in
        order against the board; the first that fits is kept. If none fit,
        the piece is restored exactly as it was.

        Args:
            board: Board to test placements against (read only).
            clockwise: True for clockwise, False for counter-clockwise.

        Returns:
            True if the rotation happened, False otherwise.
        """
        if self.state is PieceState.PLACED:
            return False

        prev_rotation = self.rotation
        prev_x, prev_y = self.x, self.y

        if clockwise:
            self.rotate_cw()
        else:
            self.rotate_ccw()

        for kdx, kdy in self.kick_vectors(prev_rotation, self.rotation):
            self.x = prev_x + kdx
            self.y = prev_y - kdy
            if board.test_placement(self):
                return True

        self.x, self.y = prev_x, prev_y
        if clockwise:
            self.rotate_ccw()
        else:
            self.rotate_cw()
        return False


def random_piece(rng: random.Random | None = None, x: int = SPAWN_X, y: int = SPAWN_Y) -> Piece:
    """Draw a piece uniformly from the seven real kinds.

    Draws are independent: there is no bag and no history.
    """
    rng = rng or random
    return Piece(rng.choice(REAL_KINDS), x, y)

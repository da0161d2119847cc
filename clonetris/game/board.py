"""
Playfield grid for a falling-block round.

The board is a 2D numpy array (height x width) of int8 values:
  - 0 = empty cell
  - 1-7 = fill id of the locked piece (used for coloring)

There is no hidden buffer zone: every row from 0 to height-1 is part of the
field, and any piece cell above row 0 is out of bounds.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

import numpy as np

if TYPE_CHECKING:
    from clonetris.game.pieces import Piece


class Board:
    """Board of locked cells with collision testing and line clearing.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        grid: 2D numpy array of shape (height, width), dtype int8.
    """

    def __init__(self, width: int = 10, height: int = 22) -> None:
        """Initialize an empty board.

        Args:
            width: Number of columns.
            height: Number of rows.
        """
        self.width = width
        self.height = height
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    @classmethod
    def from_cells(cls, width: int, height: int, cells: Sequence[int]) -> Board:
        """Build a board from a flat row-major sequence of cell values.

        Raises:
            ValueError: If ``cells`` does not hold exactly width*height values.
        """
        if len(cells) != width * height:
            raise ValueError(
                f"Expected {width * height} cells for a {width}x{height} board, got {len(cells)}"
            )
        board = cls(width, height)
        board.grid = np.asarray(cells, dtype=np.int8).reshape(height, width).copy()
        return board

    @property
    def cells(self) -> tuple[int, ...]:
        """Row-major flat view of the grid as plain ints."""
        return tuple(int(v) for v in self.grid.ravel())

    def test_placement(self, piece: Piece) -> bool:
        """Check whether every occupied cell of ``piece`` lands on a free cell.

        A placement is valid if every nonzero mask cell:
          - Is within the board (0 <= col < width, 0 <= row < height).
            Cells above row 0 count as out of bounds.
          - Does not overlap a nonzero board cell.

        Args:
            piece: Piece whose mask and (x, y) offset are tested.

        Returns:
            True if the placement is valid, False otherwise.
        """
        rows, cols = np.nonzero(piece.mask)
        board_rows = rows + piece.y
        board_cols = cols + piece.x
        if (
            np.any(board_rows < 0)
            or np.any(board_rows >= self.height)
            or np.any(board_cols < 0)
            or np.any(board_cols >= self.width)
        ):
            return False
        return not np.any(self.grid[board_rows, board_cols] != 0)

    def place_piece(self, piece: Piece) -> None:
        """Write the piece's mask values into the grid.

        Does NOT check validity first; the caller must have tested the
        placement.
        """
        rows, cols = np.nonzero(piece.mask)
        self.grid[rows + piece.y, cols + piece.x] = piece.mask[rows, cols]

    def full_lines(self) -> list[int]:
        """Return the indices of completely filled rows, top to bottom."""
        full = np.all(self.grid != 0, axis=1)
        return [int(r) for r in np.flatnonzero(full)]

    def clear_lines(self, rows: Iterable[int]) -> int:
        """Remove the given rows and shift everything above them down.

        Each removed row pulls the rows above it down by one and leaves an
        empty row at the top.

        Returns:
            The number of rows removed.
        """
        rows = sorted(set(rows))
        if not rows:
            return 0
        keep = np.ones(self.height, dtype=bool)
        keep[rows] = False
        empty_rows = np.zeros((len(rows), self.width), dtype=np.int8)
        self.grid = np.vstack([empty_rows, self.grid[keep]])
        return len(rows)

    def get_grid(self) -> np.ndarray:
        """Return a copy of the board grid."""
        return self.grid.copy()

    def reset(self) -> None:
        """Clear the entire board, setting all cells to 0."""
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

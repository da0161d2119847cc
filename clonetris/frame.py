"""
Text renderer for game snapshots.

Draws the board with the current piece overlaid, plus a sidebar with the
score, the next piece preview and the held piece preview. Only reads
``GameSnapshot`` objects; never touches a live round.
"""

from __future__ import annotations

import numpy as np

from clonetris.game.pieces import PieceKind
from clonetris.game.tetris import GameSnapshot

EMPTY_CELL = "."
SIDEBAR_GAP = "   "

# ── Fill id -> display character ─────────────────────────────────────────
CELL_CHARS: dict[int, str] = {kind.value: kind.name for kind in PieceKind if kind is not PieceKind.NONE}
CELL_CHARS[0] = EMPTY_CELL


def overlay_grid(snapshot: GameSnapshot) -> np.ndarray:
    """Return the board grid with the current piece drawn on top.

    Piece cells outside the board are skipped. The snapshot's own arrays
    are left untouched.
    """
    grid = snapshot.board.copy()
    if snapshot.game_over:
        return grid
    rows, cols = np.nonzero(snapshot.current_mask)
    for r, c in zip(rows, cols):
        by = snapshot.current_y + int(r)
        bx = snapshot.current_x + int(c)
        if 0 <= by < snapshot.height and 0 <= bx < snapshot.width:
            grid[by, bx] = snapshot.current_mask[r, c]
    return grid


def _grid_lines(grid: np.ndarray) -> list[str]:
    return ["".join(CELL_CHARS[int(v)] for v in row) for row in grid]


def _preview_lines(mask: np.ndarray) -> list[str]:
    """Trim a 5x5 mask to the rows holding cells (all blank rows if empty)."""
    lines = _grid_lines(mask)
    filled = [line for line in lines if line.strip(EMPTY_CELL)]
    return filled or [EMPTY_CELL * mask.shape[1]]


def render_frame(snapshot: GameSnapshot) -> str:
    """Compose a full text frame: board on the left, sidebar on the right."""
    board_lines = _grid_lines(overlay_grid(snapshot))

    sidebar = ["SCORE", snapshot.score_text, "", "NEXT"]
    sidebar += _preview_lines(snapshot.next_mask)
    sidebar += ["", "HOLD"]
    sidebar += _preview_lines(snapshot.held_mask)
    sidebar += ["", f"LINES {snapshot.lines}"]
    if snapshot.game_over:
        sidebar += ["", "GAME OVER"]

    height = max(len(board_lines), len(sidebar))
    blank_board = " " * snapshot.width
    out = []
    for i in range(height):
        left = board_lines[i] if i < len(board_lines) else blank_board
        right = sidebar[i] if i < len(sidebar) else ""
        out.append((left + SIDEBAR_GAP + right).rstrip())
    return "\n".join(out)

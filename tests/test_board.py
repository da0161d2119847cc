from __future__ import annotations

import numpy as np
import pytest

from clonetris.game.board import Board
from clonetris.game.pieces import Piece, PieceKind


def test_new_board_is_empty() -> None:
    board = Board(10, 22)
    assert board.grid.shape == (22, 10)
    assert board.cells == (0,) * 220


def test_from_cells_is_row_major() -> None:
    cells = [0] * 12
    cells[5] = 3  # row 1, col 1 on a 4-wide board
    board = Board.from_cells(4, 3, cells)
    assert board.grid[1, 1] == 3
    assert board.cells == tuple(cells)


def test_from_cells_rejects_wrong_length() -> None:
    with pytest.raises(ValueError):
        Board.from_cells(4, 3, [0] * 11)


def test_test_placement_accepts_spawn_on_empty_board() -> None:
    board = Board(10, 22)
    for kind in PieceKind:
        assert board.test_placement(Piece(kind))


# T occupies mask columns 1-3
@pytest.mark.parametrize(
    "x, expected",
    [(-1, True), (-2, False), (6, True), (7, False)],
)
def test_test_placement_left_and_right_edges(x: int, expected: bool) -> None:
    board = Board(10, 22)
    assert board.test_placement(Piece(PieceKind.T, x, 5)) is expected


def test_test_placement_rejects_cells_above_the_top() -> None:
    board = Board(10, 22)
    # T occupies mask rows 1-2, so y=-1 puts its top cell on row 0
    assert board.test_placement(Piece(PieceKind.T, 2, -1))
    assert not board.test_placement(Piece(PieceKind.T, 2, -2))


def test_test_placement_rejects_cells_below_the_bottom() -> None:
    board = Board(10, 22)
    # T's lowest cell is mask row 2
    assert board.test_placement(Piece(PieceKind.T, 2, 19))
    assert not board.test_placement(Piece(PieceKind.T, 2, 20))


def test_test_placement_ignores_empty_mask_cells_outside_board() -> None:
    board = Board(10, 22)
    # I occupies only mask row 2, columns 1-4; rows 0-1 and 3-4 hang off freely
    piece = Piece(PieceKind.I, -1, -2)
    assert board.test_placement(piece)


def test_test_placement_rejects_overlap() -> None:
    board = Board(10, 22)
    piece = Piece(PieceKind.O, 2, 5)
    board.grid[7, 4] = 1
    assert not board.test_placement(piece)
    board.grid[7, 4] = 0
    board.grid[7, 6] = 1  # just right of the O
    assert board.test_placement(piece)


def test_test_placement_is_pure() -> None:
    board = Board(10, 22)
    board.grid[21, :] = 5
    before = board.get_grid()
    board.test_placement(Piece(PieceKind.L, 2, 19))
    assert np.array_equal(board.grid, before)


def test_place_piece_writes_fill_ids() -> None:
    board = Board(10, 22)
    piece = Piece(PieceKind.S, 0, 10)
    board.place_piece(piece)
    assert int(np.count_nonzero(board.grid)) == 4
    for x, y in piece.cells():
        assert board.grid[y, x] == PieceKind.S.value


def test_full_lines_ascending() -> None:
    board = Board(10, 22)
    board.grid[:, 0] = 1
    board.grid[5, :] = 2
    board.grid[7, :] = 3
    assert board.full_lines() == [5, 7]


def test_full_lines_empty_when_every_row_has_a_gap() -> None:
    board = Board(10, 22)
    board.grid[:, :] = 1
    board.grid[np.arange(22), np.arange(22) % 10] = 0
    assert board.full_lines() == []


def test_clear_lines_shifts_rows_above_down() -> None:
    board = Board(4, 6)
    board.grid[1] = [1, 0, 0, 0]
    board.grid[2] = [2, 2, 2, 2]
    board.grid[3] = [0, 3, 0, 0]
    board.grid[4] = [4, 4, 4, 4]
    board.grid[5] = [0, 0, 5, 0]

    assert board.clear_lines(board.full_lines()) == 2

    expected = np.array(
        [
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [1, 0, 0, 0],
            [0, 3, 0, 0],
            [0, 0, 5, 0],
        ],
        dtype=np.int8,
    )
    assert np.array_equal(board.grid, expected)


def test_clear_lines_with_nothing_to_clear() -> None:
    board = Board(4, 6)
    board.grid[5] = [1, 0, 1, 1]
    before = board.get_grid()
    assert board.clear_lines([]) == 0
    assert np.array_equal(board.grid, before)


def test_reset_zeroes_grid() -> None:
    board = Board(10, 22)
    board.grid[3, 3] = 7
    board.reset()
    assert not board.grid.any()

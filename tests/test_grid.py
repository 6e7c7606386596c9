import numpy as np
import pytest

from block_puzzle.game import (
    OUT_OF_RANGE,
    GameGrid,
    GamePiece,
    IllegalPlacementError,
    PieceType,
    all_piece_ids,
)


def test_new_grid_is_empty():
    grid = GameGrid(5, 4)
    assert grid.grid.shape == (4, 5)
    assert all(v == 0 for v in grid.values())


def test_get_outside_board_returns_sentinel():
    grid = GameGrid(5, 5)
    assert grid.get(-1, 0) == OUT_OF_RANGE
    assert grid.get(0, 5) == OUT_OF_RANGE
    assert grid.get(5, 5) == OUT_OF_RANGE
    assert grid.get(4, 4) == 0


def test_can_place_respects_edges():
    grid = GameGrid(5, 5)
    line = GamePiece.create(PieceType.LINE)
    assert not grid.can_place(line, 0, 2)
    assert grid.can_place(line, 1, 2)
    assert not grid.can_place(line, 4, 2)
    assert grid.can_place(GamePiece.create(PieceType.DOT), 0, 0)


def test_can_place_rejects_overlap_and_does_not_mutate():
    grid = GameGrid(5, 5)
    grid.set(2, 1, 3)
    plus = GamePiece.create(PieceType.PLUS)
    before = grid.clone_state()
    assert not grid.can_place(plus, 2, 2)
    assert grid.can_place(plus, 2, 3)
    assert np.array_equal(grid.grid, before)


def test_place_adds_piece_value():
    grid = GameGrid(5, 5)
    square = GamePiece.create(PieceType.SQUARE)
    filled = grid.place(square, 1, 1)
    assert sorted(filled) == [(0, 0), (0, 1), (1, 0), (1, 1)]
    for x, y in filled:
        assert grid.get(x, y) == square.value
    assert int(np.count_nonzero(grid.grid)) == 4


def test_place_without_room_raises_and_leaves_grid():
    grid = GameGrid(5, 5)
    grid.set(1, 1, 2)
    before = grid.clone_state()
    with pytest.raises(IllegalPlacementError):
        grid.place(GamePiece.create(PieceType.PLUS), 1, 1)
    with pytest.raises(IllegalPlacementError):
        grid.place(GamePiece.create(PieceType.LINE), 0, 3)
    assert np.array_equal(grid.grid, before)


def test_gated_placements_keep_cell_values_in_range():
    rng = np.random.default_rng(7)
    grid = GameGrid(5, 5)
    for _ in range(200):
        piece = GamePiece.create(int(rng.integers(15)))
        piece.rotate(int(rng.integers(4)))
        x, y = int(rng.integers(5)), int(rng.integers(5))
        if grid.can_place(piece, x, y):
            grid.place(piece, x, y)
            assert grid.grid.min() >= 0
            assert grid.grid.max() <= 15
        cleared = grid.detect_full_lines()
        grid.clear(cleared.cells)


def test_every_piece_fits_at_the_centre_of_an_empty_board():
    for piece_id in all_piece_ids():
        grid = GameGrid(5, 5)
        piece = GamePiece.create(piece_id)
        grid.place(piece, 2, 2)
        assert set(np.unique(grid.grid)) <= {0, piece.value}


def test_single_full_row_detected_and_cleared():
    grid = GameGrid(5, 5)
    for x in range(5):
        grid.set(x, 2, 1)
    grid.set(0, 0, 3)

    cleared = grid.detect_full_lines()
    assert cleared.lines == 1
    assert cleared.cells == frozenset((x, 2) for x in range(5))

    grid.clear(cleared.cells)
    assert all(grid.get(x, 2) == 0 for x in range(5))
    assert grid.get(0, 0) == 3
    assert int(np.count_nonzero(grid.grid)) == 1


def test_crossing_row_and_column_count_twice_but_clear_once():
    grid = GameGrid(5, 5)
    for i in range(5):
        grid.set(i, 2, 1)
        grid.set(1, i, 1)
    cleared = grid.detect_full_lines()
    assert cleared.lines == 2
    assert cleared.blocks == 9
    assert (1, 2) in cleared.cells


def test_no_full_lines():
    grid = GameGrid(5, 5)
    for x in range(4):
        grid.set(x, 0, 1)
    cleared = grid.detect_full_lines()
    assert not cleared
    assert cleared.blocks == 0


def test_non_square_board_columns():
    grid = GameGrid(3, 6)
    for y in range(6):
        grid.set(2, y, 5)
    cleared = grid.detect_full_lines()
    assert cleared.lines == 1
    assert cleared.cells == frozenset((2, y) for y in range(6))


def test_values_are_column_major():
    grid = GameGrid(3, 2)
    grid.set(1, 0, 7)
    grid.set(2, 1, 9)
    assert grid.values() == [0, 0, 7, 0, 0, 9]


def test_set_rejects_illegal_cell_values():
    grid = GameGrid(5, 5)
    with pytest.raises(ValueError):
        grid.set(0, 0, 16)

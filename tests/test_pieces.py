import numpy as np
import pytest

from block_puzzle.game import (
    GamePiece,
    InvalidPieceIdError,
    PIECE_COUNT,
    PieceType,
    all_piece_ids,
    rotate,
    shape_of,
)


def test_catalogue_has_fifteen_pieces():
    assert PIECE_COUNT == 15
    assert list(all_piece_ids()) == list(range(15))


def test_all_piece_ids_is_restartable():
    ids = all_piece_ids()
    assert list(ids) == list(ids)


def test_shape_of_line():
    assert shape_of(0).tolist() == [[0, 0, 0], [1, 1, 1], [0, 0, 0]]


def test_shape_values_are_colour_indices():
    for piece_id in all_piece_ids():
        shape = shape_of(piece_id)
        assert shape.shape == (3, 3)
        assert set(np.unique(shape)) <= {0, piece_id + 1}
        assert np.count_nonzero(shape) > 0


@pytest.mark.parametrize("piece_id", [-1, 15, 99])
def test_shape_of_rejects_unknown_ids(piece_id):
    with pytest.raises(InvalidPieceIdError):
        shape_of(piece_id)


def test_invalid_piece_id_is_a_value_error():
    with pytest.raises(ValueError):
        GamePiece.create(15)


def test_rotate_is_clockwise():
    m = np.arange(9).reshape(3, 3)
    assert rotate(m, 1).tolist() == [[6, 3, 0], [7, 4, 1], [8, 5, 2]]


def test_four_rotations_return_original():
    for piece_id in all_piece_ids():
        m = shape_of(piece_id)
        assert np.array_equal(rotate(rotate(rotate(rotate(m, 1), 1), 1), 1), m)


def test_rotate_times_wrap_modulo_four():
    m = shape_of(PieceType.L)
    assert np.array_equal(rotate(m, 5), rotate(m, 1))
    assert np.array_equal(rotate(m, -1), rotate(m, 3))


def test_rotate_does_not_mutate_input():
    m = shape_of(PieceType.J)
    before = m.copy()
    out = rotate(m, 0)
    out[0, 0] = 9
    rotate(m, 1)
    assert np.array_equal(m, before)


def test_game_piece_rotation_keeps_identity():
    piece = GamePiece.create(PieceType.L)
    piece.rotate(3)
    assert piece.kind is PieceType.L
    assert piece.rotation == 3
    assert np.array_equal(piece.blocks, rotate(shape_of(PieceType.L), 3))
    piece.rotate(1)
    assert piece.rotation == 0
    assert np.array_equal(piece.blocks, shape_of(PieceType.L))


def test_game_piece_offsets_relative_to_centre():
    dot = GamePiece.create(PieceType.DOT)
    assert dot.value == 4
    assert dot.name == "dot"
    assert dot.offsets() == [(0, 0, 4)]
    line = GamePiece.create(PieceType.LINE)
    assert line.offsets() == [(-1, 0, 1), (0, 0, 1), (1, 0, 1)]
    assert GamePiece.create(PieceType.INVERSE_CORNER).name == "inverse corner"

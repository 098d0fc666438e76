import numpy as np
import pytest

from madios.matrix import (
    diag,
    find,
    format_array,
    getsub,
    ind2sub,
    load_array,
    make_homogeneous,
    normalise_cols,
    parse_array,
    repmat,
    save_array,
    setsub,
    sub2ind,
)


@pytest.fixture
def grid():
    return np.arange(12, dtype=float).reshape(3, 4)


def test_format_array_layout():
    assert format_array(np.array([[1, 2], [3, 4]])) == "2 2\n1 2 \n3 4 \n"


def test_format_parse_round_trip(grid):
    parsed = parse_array(format_array(grid))
    assert parsed.shape == grid.shape
    assert np.array_equal(parsed, grid)


def test_parse_array_too_few_values():
    with pytest.raises(ValueError):
        parse_array("2 2\n1 2 3")


def test_parse_array_negative_dims():
    with pytest.raises(ValueError):
        parse_array("-1 2")


def test_save_load_round_trip(tmp_path, grid):
    target = tmp_path / "grid.txt"
    save_array(grid, target)
    assert np.array_equal(load_array(target), grid)


@pytest.mark.parametrize("row,col", [(0, 0), (2, 3), (1, 2)])
def test_sub2ind_ind2sub_round_trip(row, col):
    shape = (3, 4)
    assert ind2sub(shape, sub2ind(shape, row, col)) == (row, col)


def test_sub2ind_is_column_major(grid):
    index = sub2ind(grid.shape, 2, 1)
    assert grid.flatten(order="F")[index] == grid[2, 1]


def test_sub2ind_out_of_bounds():
    with pytest.raises(IndexError):
        sub2ind((3, 4), 3, 0)


def test_ind2sub_out_of_bounds():
    with pytest.raises(IndexError):
        ind2sub((3, 4), 12)


def test_getsub_matches_slice(grid):
    block = getsub(grid, 1, 2, 1, 3)
    assert np.array_equal(block, grid[1:3, 1:4])
    block[0, 0] = -1.0
    assert grid[1, 1] != -1.0


def test_getsub_out_of_bounds(grid):
    with pytest.raises(IndexError):
        getsub(grid, 0, 3, 0, 0)


def test_getsub_empty_block(grid):
    with pytest.raises(ValueError):
        getsub(grid, 2, 1, 0, 0)


def test_setsub_then_getsub(grid):
    block = np.full((2, 2), 7.0)
    setsub(grid, 0, 1, 2, 3, block)
    assert np.array_equal(getsub(grid, 0, 1, 2, 3), block)
    assert grid[2, 3] == 11.0


def test_setsub_shape_mismatch(grid):
    with pytest.raises(ValueError):
        setsub(grid, 0, 1, 0, 1, np.zeros((3, 3)))


def test_repmat_tiles(grid):
    tiled = repmat(grid, 2, 3)
    assert tiled.shape == (6, 12)
    assert np.array_equal(tiled[3:6, 8:12], grid)


def test_diag_vector_round_trip():
    vector = np.array([[1.0, 2.0, 3.0]])
    square = diag(vector)
    assert square.shape == (3, 3)
    assert np.array_equal(diag(square).ravel(), vector.ravel())
    assert square[0, 1] == 0.0


def test_diag_of_rectangular_matrix(grid):
    column = diag(grid)
    assert column.shape == (3, 1)
    assert np.array_equal(column.ravel(), np.diagonal(grid))


def test_make_homogeneous_last_row_ones():
    data = np.array([[2.0, 6.0], [4.0, 3.0], [2.0, 3.0]])
    result = make_homogeneous(data)
    assert np.allclose(result[-1], 1.0)
    assert np.allclose(result * data[-1], data)


def test_normalise_cols_unit_length(grid):
    result = normalise_cols(grid + 1.0)
    assert np.allclose(np.linalg.norm(result, axis=0), 1.0)


def test_find_column_major(grid):
    indices = find(grid, lambda value: value > 5)
    assert len(indices) == int(np.sum(grid > 5))
    assert indices == sorted(indices)
    for index in indices:
        row, col = ind2sub(grid.shape, index)
        assert grid[row, col] > 5


def test_find_none_match(grid):
    assert find(grid, lambda value: value < 0) == []
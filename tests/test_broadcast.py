import numpy as np
import pytest

from circulararrays import (
    CircularArray, CircularVector, CircularStyle, OffsetArray,
    register_fusion)
from circulararrays import broadcast


@pytest.fixture
def grid():
    return CircularArray(np.arange(6).reshape(2, 3))


def test_sum_of_circular_arrays_is_circular(grid):
    total = grid + grid
    assert type(total) is CircularArray
    np.testing.assert_array_equal(total.data, 2 * grid.data)
    assert total[2, 3] == total[0, 0] == 0
    assert total[-1, -1] == 10
    assert total.style == CircularStyle('numpy')


def test_mixed_operands(grid):
    row = np.array([1, 1, 1])
    for result in (grid * row, row * grid, grid - 1, np.sqrt(grid)):
        assert isinstance(result, CircularArray)
        assert result.shape == (2, 3)
    assert (1 + grid)[2, 0] == 1


def test_comparisons_are_elementwise(grid):
    mask = grid > 2
    assert isinstance(mask, CircularArray)
    assert mask.dtype == bool
    assert mask.data.tolist() == [[False, False, False], [True, True, True]]


def test_list_backing_stays_a_list():
    a = CircularVector([1, 2, 3])
    b = CircularVector([10, 20, 30])
    c = a + b
    assert type(c) is CircularVector
    assert c.data == [11, 22, 33]
    assert c[-1] == 33
    d = np.array([1, 1, 1]) + a
    assert d.data == [2, 3, 4]


def test_leading_circular_operand_picks_the_kind():
    as_list = CircularVector([1, 2, 3])
    as_array = CircularVector(np.array([1, 2, 3]))
    assert isinstance((as_list + as_array).data, list)
    assert isinstance((as_array + as_list).data, np.ndarray)


def test_offset_backing_uses_generic_strategy():
    vec = CircularVector(OffsetArray([1, 2, 3], origin=1))
    doubled = vec + vec
    assert isinstance(doubled.data, OffsetArray)
    assert doubled.data.origin == (1,)
    assert doubled[0] == 6
    assert list(doubled) == [2, 4, 6]


def test_reductions(grid):
    assert np.sum(grid) == 15
    cols = np.add.reduce(grid)
    assert isinstance(cols, CircularVector)
    assert cols.data.tolist() == [3, 5, 7]
    assert cols[3] == 3


def test_tuple_results():
    quotient, remainder = np.divmod(CircularVector([5, 6, 7]), 2)
    assert quotient.data == [2, 3, 3]
    assert remainder.data == [1, 0, 1]


def test_out_argument():
    out = CircularVector([0, 0, 0])
    result = np.add(CircularVector([1, 2, 3]), 1, out=out)
    assert result is out
    assert out.data == [2, 3, 4]


def test_in_place_operators(grid):
    data = grid.data
    grid += 1
    assert grid.data is data
    assert data[0, 0] == 1
    vec = CircularVector([1, 2, 3])
    vec *= 2
    assert vec.data == [2, 4, 6]


def test_ufunc_at_writes_back():
    vec = CircularVector([1, 2, 3])
    np.add.at(vec, [0, 0], 1)
    assert vec.data == [3, 2, 3]


def test_incompatible_shapes(grid):
    with pytest.raises(ValueError):
        grid + np.ones(4)


def test_register_fusion(monkeypatch):
    monkeypatch.setattr(broadcast, '_fusion_strategies',
                        dict(broadcast._fusion_strategies))
    calls = []

    @register_fusion('offset')
    def fuse_offset(result, template, backend):
        calls.append(template)
        return OffsetArray(result, origin=5)

    vec = CircularVector(OffsetArray([1, 2], origin=1))
    result = vec * 3
    assert calls == [vec.data]
    assert result.data.origin == (5,)
    assert result[5] == 3
    assert broadcast.get_fusion_strategy(CircularStyle('offset')) is fuse_offset
    assert (broadcast.get_fusion_strategy(CircularStyle('unknown'))
            is broadcast.similar_fusion)


def test_ufunc_at_wraps_indices():
    vec = CircularVector(np.array([1, 2, 3]))
    np.add.at(vec, [3, -1], 10)
    assert vec.data.tolist() == [11, 2, 13]
    listed = CircularVector([1, 2, 3])
    np.add.at(listed, [4], 10)
    assert listed.data == [1, 12, 3]


def test_ufunc_at_on_grids_and_offsets(grid):
    np.add.at(grid, ([2, -1], [3, 4]), 100)
    assert grid.data[0, 0] == 100
    assert grid.data[1, 1] == 104
    np.add.at(grid, [6], 1)
    assert grid.data[0, 0] == 101
    vec = CircularVector(OffsetArray([1, 2, 3], origin=1))
    np.multiply.at(vec, [0, 4], 10)
    assert vec.data.data.tolist() == [10, 2, 30]


class Foreign(object):
    seen = None

    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        Foreign.seen = inputs
        return 'foreign'


def test_unknown_operands_take_over(grid):
    assert grid + Foreign() == 'foreign'
    assert Foreign.seen[0] is grid
    with pytest.raises(TypeError):
        np.add(grid, object())

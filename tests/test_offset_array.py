import numpy as np
import pytest

from circulararrays import CircularArray, CircularVector, OffsetArray, filled


@pytest.fixture
def one_based():
    return CircularVector(OffsetArray([10, 20, 30], origin=1))


def test_offset_array_bounds():
    off = OffsetArray([10, 20, 30], origin=1)
    assert off.axes == (range(1, 4),)
    assert off[1] == 10
    assert off[3] == 30
    with pytest.raises(IndexError):
        off[0]
    with pytest.raises(IndexError):
        off[4]
    with pytest.raises(ValueError):
        OffsetArray(np.zeros((2, 2)), origin=(1,))
    assert repr(off) == "OffsetArray(array([10, 20, 30]), origin=(1,))"


def test_remap_uses_first_index(one_based):
    assert one_based.axes == (range(1, 4),)
    assert one_based[1] == 10
    assert one_based[0] == 30
    assert one_based[3] == 30
    assert one_based[4] == 10
    assert one_based[-2] == 10
    one_based[6] = 0
    assert one_based.data[3] == 0


def test_multi_dimensional_offsets():
    arr = CircularArray(
        OffsetArray(np.arange(6).reshape(2, 3), origin=(1, -1)))
    assert arr.axes == (range(1, 3), range(-1, 2))
    assert arr.index_style == 'cartesian'
    assert arr[1, -1] == 0
    assert arr[0, 0] == 4
    assert arr[3, 2] == 0
    # linear indices address the storage from zero
    assert arr[7] == 1
    arr[-1] = 50
    assert arr.data.data[1, 2] == 50


def test_slices_keep_origin(one_based):
    part = one_based[:]
    assert isinstance(part.data, OffsetArray)
    assert part.data.origin == (1,)
    assert list(part) == [10, 20, 30]
    wrapped = one_based[2:6]
    assert list(wrapped) == [20, 30, 10, 20]


def test_mutation(one_based):
    one_based.delete_at(0)
    assert isinstance(one_based.data, OffsetArray)
    assert list(one_based) == [10, 20]
    assert one_based.axes == (range(1, 3),)
    one_based.insert_at(1, 5)
    assert list(one_based) == [5, 10, 20]
    one_based.delete_at([1, 4, 3])
    assert list(one_based) == [10]


def test_similar_and_copy(one_based):
    assert one_based.similar(shape=5).data.origin == (1,)
    assert one_based.similar(shape=(range(-2, 2),)).axes == (range(-2, 2),)
    assert one_based.similar(float).dtype == np.float64
    other = one_based.copy()
    other[1] = -1
    assert one_based[1] == 10
    assert 20 in one_based


def test_filled_offset():
    arr = filled(7, (range(1, 3), range(1, 3)), kind='offset')
    assert isinstance(arr.data, OffsetArray)
    assert arr.axes == (range(1, 3), range(1, 3))
    assert arr[0, 0] == 7


def test_huge_indices_pick_the_same_cell():
    vec = CircularVector(OffsetArray([10, 20, 30], origin=-1))
    big = 2**63 - 1
    assert list(vec[[big]]) == [vec[big]]
    assert vec[big] == 30
    assert list(CircularVector([10, 20, 30])[[2**70]]) == [20]


def test_offset_array_without_copy():
    arr = OffsetArray(np.arange(3), origin=1)
    assert np.asarray(arr) is arr.data
    with pytest.raises(ValueError):
        arr.__array__(dtype=float, copy=False)

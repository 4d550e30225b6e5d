import numpy as np
import pytest

from circulararrays.errors import ZeroExtentError
from circulararrays.remap import (
    is_scalar_index, remap_index, remap_array, expand_slice, remap_entry)


def test_scalar_indices():
    assert is_scalar_index(3)
    assert is_scalar_index(np.int32(-2))
    assert is_scalar_index(np.array(4))
    assert not is_scalar_index(True)
    assert not is_scalar_index(slice(1, 2))
    assert not is_scalar_index([1])
    assert not is_scalar_index(np.array([1]))


@pytest.mark.parametrize("i", range(-12, 13))
def test_remap_is_periodic(i):
    axis = range(5)
    j = remap_index(i, axis)
    assert j in axis
    assert j == remap_index(i + 5, axis) == remap_index(i - 5, axis)
    assert j == i % 5


def test_remap_respects_first_index():
    axis = range(1, 4)
    assert [remap_index(i, axis) for i in range(-1, 6)] == [2, 3, 1, 2, 3, 1, 2]


def test_remap_empty_axis():
    with pytest.raises(ZeroExtentError):
        remap_index(0, range(0))
    # ZeroExtentError is a kind of ZeroDivisionError
    with pytest.raises(ZeroDivisionError):
        remap_index(7, range(3, 3))


def test_remap_array():
    out = remap_array([-1, 0, 5, 11], range(5))
    assert out.tolist() == [4, 0, 0, 1]
    assert remap_array([], range(0)).size == 0
    with pytest.raises(ZeroExtentError):
        remap_array([1], range(0))


def test_expand_slice_crosses_seam():
    assert expand_slice(slice(-2, 3), range(5)).tolist() == [-2, -1, 0, 1, 2]
    assert expand_slice(slice(None), range(1, 4)).tolist() == [1, 2, 3]
    assert expand_slice(slice(None, None, -1), range(3)).tolist() == [2, 1, 0]
    with pytest.raises(ValueError):
        expand_slice(slice(None, None, 0), range(3))


def test_remap_entry():
    axis = range(4)
    assert remap_entry(-1, axis) == 3
    assert remap_entry(slice(2, 6), axis).tolist() == [2, 3, 0, 1]
    assert remap_entry([5, -5], axis).tolist() == [1, 3]
    assert remap_entry([True, False, False, True], axis).tolist() == [0, 3]
    assert remap_entry([True, True], range(1, 3)).tolist() == [1, 2]
    with pytest.raises(IndexError):
        remap_entry([True, False], axis)
    with pytest.raises(IndexError):
        remap_entry([0.5], axis)


def test_remap_array_matches_scalar_near_int64_limits():
    axis = range(-1, 2)
    big = 2**63 - 1
    assert remap_array([big], axis).tolist() == [remap_index(big, axis)]
    assert remap_array([-big - 1], axis).tolist() == [
        remap_index(-big - 1, axis)]


def test_remap_entry_accepts_ints_beyond_64_bits():
    axis = range(3)
    for i in (2**64 + 5, 2**70, -2**70, 2**63):
        assert remap_entry([i], axis).tolist() == [i % 3]
    with pytest.raises(IndexError):
        remap_entry([2**70, 'a'], axis)

"""
Index arithmetic for circular arrays.

Every axis is described by a ``range`` of valid positions, e.g.
``range(0, 5)`` for a numpy axis of length five or ``range(1, 6)`` for the
same axis counted from one. A raw index ``i`` is remapped onto that range as

    ((i - axis.start) % len(axis)) + axis.start

which is defined for every integer.
"""

import numbers

import numpy as np

from .errors import ZeroExtentError


def is_scalar_index(index):
    """True for python ints, numpy integers and 0-d integer arrays."""
    if isinstance(index, (bool, np.bool_)):
        return False
    if isinstance(index, numbers.Integral):
        return True
    return (isinstance(index, np.ndarray) and index.ndim == 0 and
            index.dtype.kind in 'iu')


def remap_index(index, axis):
    """
    Remap a single integer onto ``axis``.

    Parameters
    ----------
    index : int
    axis : range
        Valid positions along the axis. Its start is the first index of the
        backing container, which need not be zero.

    Raises
    ------
    ZeroExtentError
        If the axis is empty.
    """
    n = len(axis)
    if n == 0:
        raise ZeroExtentError(index, axis)
    return (int(index) - axis.start) % n + axis.start


def remap_array(index, axis):
    """
    Remap an integer array onto ``axis`` elementwise.

    Integers too large for ``np.intp`` (object or uint64 arrays) are
    remapped one by one with python ints.
    """
    index = np.asarray(index)
    n = len(axis)
    if n == 0:
        if index.size == 0:
            return index.astype(np.intp)
        raise ZeroExtentError(index, axis)
    if index.dtype.kind in 'iu' and np.can_cast(index.dtype, np.intp):
        index = index.astype(np.intp)
        # reduce before shifting so nothing leaves the intp range
        return (index % n - axis.start % n) % n + axis.start
    remapped = [remap_index(i, axis) for i in index.ravel()]
    return np.array(remapped, dtype=np.intp).reshape(index.shape)


def expand_slice(s, axis):
    """
    Expand a slice into the integer positions it covers.

    Slice bounds are positions in the unbounded circular index space, not
    python's count-from-the-end convention: on an axis ``range(0, 5)``,
    ``slice(-2, 3)`` covers ``-2, -1, 0, 1, 2`` and therefore crosses the
    seam. Missing bounds default to the ends of the axis.
    """
    step = 1 if s.step is None else int(s.step)
    if step == 0:
        raise ValueError("slice step cannot be zero")
    if step > 0:
        start = axis.start if s.start is None else int(s.start)
        stop = axis.stop if s.stop is None else int(s.stop)
    else:
        start = axis.stop - 1 if s.start is None else int(s.start)
        stop = axis.start - 1 if s.stop is None else int(s.stop)
    return np.arange(start, stop, step, dtype=np.intp)


def remap_entry(index, axis):
    """
    Remap one entry of an indexing key.

    Returns an int for scalar entries and an integer array for slices,
    integer sequences and boolean masks. Masks select positions directly and
    must cover the whole axis.
    """
    if is_scalar_index(index):
        return remap_index(index, axis)
    if isinstance(index, slice):
        return remap_array(expand_slice(index, axis), axis)
    index = np.asarray(index)
    if index.dtype.kind == 'b':
        if index.size != len(axis):
            raise IndexError(
                "boolean index of size %i does not match axis of length %i"
                % (index.size, len(axis)))
        return np.flatnonzero(index) + axis.start
    if index.size == 0:
        index = index.astype(np.intp)
    elif index.dtype.kind == 'O':
        # python ints beyond 64 bits
        if not all(is_scalar_index(i) for i in index.flat):
            raise IndexError(
                "only integers, slices, integer arrays and boolean masks "
                "are valid circular indices")
    elif index.dtype.kind not in 'iu':
        raise IndexError(
            "only integers, slices, integer arrays and boolean masks "
            "are valid circular indices")
    return remap_array(index, axis)

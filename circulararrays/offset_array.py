"""
Numpy arrays with arbitrary starting indices.

An ``OffsetArray`` stores a plain ndarray together with the index of the
first element along each axis. ``OffsetArray([10, 20, 30], origin=1)`` is
indexed with 1, 2 and 3. Indexing outside the declared axes raises
``IndexError`` just like numpy does.
"""

import numbers

import numpy as np


class OffsetArray(object):
    """
    Attributes
    ----------
    data : ndarray
        The underlying storage, always indexed from zero.
    origin : tuple of ints
        First valid index along each axis.
    """

    def __init__(self, data, origin=0):
        self.data = np.asanyarray(data)
        if isinstance(origin, numbers.Integral):
            origin = (origin,) * self.data.ndim
        origin = tuple(int(o) for o in origin)
        if len(origin) != self.data.ndim:
            raise ValueError(
                "origin %r does not match array with %i dimension(s)"
                % (origin, self.data.ndim))
        self.origin = origin

    @classmethod
    def from_axes(cls, axes, dtype=None):
        """Allocate an uninitialized array spanning the given ranges."""
        axes = tuple(axes)
        data = np.empty(tuple(len(ax) for ax in axes), dtype=dtype)
        return cls(data, tuple(ax.start for ax in axes))

    @property
    def shape(self):
        return self.data.shape

    @property
    def ndim(self):
        return self.data.ndim

    @property
    def size(self):
        return self.data.size

    @property
    def dtype(self):
        return self.data.dtype

    @property
    def axes(self):
        return tuple(
            range(o, o + n) for o, n in zip(self.origin, self.data.shape))

    def _to_zero_based(self, key):
        if not isinstance(key, tuple):
            key = (key,)
        if len(key) != self.ndim:
            raise IndexError(
                "OffsetArray with %i dimension(s) needs %i indices, got %i"
                % (self.ndim, self.ndim, len(key)))
        shifted = []
        for index, axis in zip(key, self.axes):
            index = np.asarray(index)
            if index.dtype.kind not in 'iu':
                raise IndexError("OffsetArray only accepts integer indices")
            if index.size and (index.min() < axis.start or
                               index.max() >= axis.stop):
                raise IndexError(
                    "index %s is out of bounds for axis %r" % (index, axis))
            index = index - axis.start
            shifted.append(int(index) if index.ndim == 0 else index)
        return tuple(shifted)

    def __getitem__(self, key):
        return self.data[self._to_zero_based(key)]

    def __setitem__(self, key, value):
        self.data[self._to_zero_based(key)] = value

    def __iter__(self):
        return iter(self.data.flat)

    def __len__(self):
        return len(self.data)

    def __contains__(self, value):
        return value in self.data

    def __array__(self, dtype=None, copy=None):
        if copy:
            return np.array(self.data, dtype=dtype, copy=True)
        if (copy is False and dtype is not None and
                np.dtype(dtype) != self.data.dtype):
            raise ValueError(
                "cannot cast OffsetArray to %s without a copy" % (dtype,))
        return np.asarray(self.data, dtype=dtype)

    def __repr__(self):
        return "OffsetArray(%r, origin=%r)" % (self.data, self.origin)

    def copy(self):
        return OffsetArray(self.data.copy(), self.origin)

"""
Arrays with fixed size and circular indexing.

A ``CircularArray`` wraps an existing array-like container and remaps every
index modulo the extent of its axis before handing it on, so that

    arr[i, j] == arr.data[i % rows, j % cols]

for zero-based data. Containers whose axes start elsewhere (see
``OffsetArray``) are remapped onto their own axes instead. Nothing but the
index is changed: shape, element type, iteration order and copy semantics
all come from the wrapped container.
"""

import logging
import numbers

import numpy as np
from numpy.lib.mixins import NDArrayOperatorsMixin

from . import broadcast
from .backends import get_backend, backend_by_name, normalize_shape
from .errors import ArityError
from .global_config import Setting, update_settings
from .remap import is_scalar_index, remap_index, remap_entry, expand_slice

logger = logging.getLogger(__name__)

# operand types elementwise operations know how to unwrap
_HANDLED_TYPES = (np.ndarray, np.generic, numbers.Number, list, tuple, slice)


class CircularArray(NDArrayOperatorsMixin):
    """
    N-dimensional array with circular indexing.

    Indexing accepts either one index per dimension or a single linear
    index. Each index may be any integer; it is remapped onto the valid
    range of its axis (or, for a linear index, onto the container's linear
    range). Slices, integer arrays and boolean masks are remapped the same
    way and return a new circular array over a container of the same kind.

    Wrapping one-dimensional data returns a ``CircularVector``.

    Attributes
    ----------
    data : array-like
        The wrapped container. It is not copied, and the circular array is
        assumed to be its only owner.
    backend : Backend
        Accessors for the kind of container in ``data``.
    """

    def __new__(cls, data):
        if cls is CircularArray and get_backend(data).ndim(data) == 1:
            cls = CircularVector
        return super().__new__(cls)

    def __init__(self, data):
        self.backend = get_backend(data)
        self.data = data

    @classmethod
    def filled(cls, value, shape, kind=None, dtype=None):
        """
        Create a circular array of the given shape with every cell set to
        (a copy of) ``value``. See ``filled``.
        """
        kwargs = {}
        if kind is not None:
            kwargs['kind'] = kind
        if dtype is not None:
            kwargs['dtype'] = dtype
        return filled(value, shape, **kwargs)

    @property
    def parent(self):
        return self.data

    @property
    def shape(self):
        return tuple(self.backend.shape(self.data))

    @property
    def ndim(self):
        return self.backend.ndim(self.data)

    @property
    def size(self):
        return int(np.prod(self.shape))

    @property
    def axes(self):
        """Valid (unremapped) index range of each axis."""
        return tuple(self.backend.axes(self.data))

    @property
    def dtype(self):
        return self.backend.dtype(self.data)

    @property
    def index_style(self):
        """Preferred access pattern of the data, 'linear' or 'cartesian'."""
        return self.backend.index_style(self.data)

    @property
    def style(self):
        return broadcast.CircularStyle(self.backend.name)

    def _resolve(self, key):
        """
        Remap an indexing key.

        Returns ``(linear, index, scalar)``; ``index`` is a tuple with one
        entry per axis, or a single entry if ``linear`` is set.
        """
        if not isinstance(key, tuple):
            key = (key,)
        if len(key) == self.ndim:
            axes = self.axes
            scalar = all(is_scalar_index(k) for k in key)
            remap = remap_index if scalar else remap_entry
            return False, tuple(
                remap(k, ax) for k, ax in zip(key, axes)), scalar
        if len(key) == 1:
            k, = key
            axis = self.backend.linear_axis(self.data)
            if is_scalar_index(k):
                return True, remap_index(k, axis), True
            return True, remap_entry(k, axis), False
        raise ArityError(self, key)

    def __getitem__(self, key):
        linear, index, scalar = self._resolve(key)
        if linear:
            if scalar:
                return self.backend.get_linear(self.data, index)
            return CircularArray(self.backend.take_linear(self.data, index))
        if scalar:
            return self.backend.get(self.data, index)
        return CircularArray(self.backend.take(self.data, index))

    def __setitem__(self, key, value):
        linear, index, scalar = self._resolve(key)
        if linear:
            if scalar:
                self.backend.set_linear(self.data, index, value)
            else:
                self.backend.put_linear(self.data, index, value)
        elif scalar:
            self.backend.set(self.data, index, value)
        else:
            self.backend.put(self.data, index, value)

    def __iter__(self):
        # Iteration is not circular: every cell once, in the data's order.
        return self.backend.iterate(self.data)

    def __len__(self):
        return self.size

    def __contains__(self, value):
        return self.backend.contains(self.data, value)

    def copy(self):
        return CircularArray(self.backend.copy(self.data))

    def __copy__(self):
        return self.copy()

    def __reduce__(self):
        # also used by copy.deepcopy, which then deep-copies the data
        return (CircularArray, (self.data,))

    def similar(self, dtype=None, shape=None):
        """
        Create an uninitialized circular array over the same kind of
        container.

        Parameters
        ----------
        dtype : data-type, optional
            Element type of the new data. Defaults to the current one.
        shape : int, range, or tuple of ints and ranges, optional
            Shape of the new data. Ranges set the first index of an axis
            for containers that support it. Defaults to the current shape.
        """
        return CircularArray(self.backend.similar(self.data, dtype, shape))

    def __array__(self, dtype=None, copy=None):
        arr = self.backend.to_numpy(self.data)
        if copy:
            return np.array(arr, dtype=dtype, copy=True)
        if copy is False and (not self.backend.views_data or (
                dtype is not None and np.dtype(dtype) != arr.dtype)):
            raise ValueError(
                "%s data cannot be exposed as an ndarray without a copy"
                % self.backend.name)
        return np.asarray(arr, dtype=dtype)

    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        for x in inputs + kwargs.get('out', ()):
            if not isinstance(x, _HANDLED_TYPES + (CircularArray,)):
                return NotImplemented
        return broadcast.fuse(ufunc, method, inputs, kwargs)

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.data)


class CircularVector(CircularArray):
    """
    One-dimensional circular array.

        vec[i] == vec.data[i % len(vec)]

    Besides element access, vectors support deleting and inserting
    elements at circular positions. Both change the length of the data;
    for containers that cannot be resized in place (numpy arrays) the
    ``data`` attribute is replaced with the resized container.
    """

    def __init__(self, data):
        super().__init__(data)
        if self.ndim != 1:
            raise ValueError(
                "CircularVector needs one-dimensional data, got %i dimensions"
                % self.ndim)

    @classmethod
    def filled(cls, value, shape, kind=None, dtype=None):
        if len(normalize_shape(shape)) != 1:
            raise ValueError(
                "CircularVector needs a one-dimensional shape, got %r"
                % (shape,))
        return super().filled(value, shape, kind, dtype)

    def delete_at(self, index):
        """
        Remove the element(s) at circular position(s) ``index``.

        ``index`` is an integer, a slice, or an iterable of integers. Indices
        are remapped first, duplicates (including congruent ones such as
        ``-1`` and ``len - 1``) are merged, and the remaining positions are
        removed in a single step. An empty selection leaves the vector
        unchanged.
        """
        axis = self.axes[0]
        if is_scalar_index(index):
            positions = [remap_index(index, axis)]
        else:
            if isinstance(index, slice):
                index = expand_slice(index, axis)
            positions = sorted({remap_index(i, axis) for i in index})
        if not positions:
            return self
        self.data = self.backend.delete(self.data, positions)
        logger.debug("Deleted %i element(s) from %s; length is now %i",
                     len(positions), type(self).__name__, len(self))
        return self

    def insert_at(self, index, value):
        """
        Insert ``value`` before the element at circular position ``index``.

        Since ``index`` is remapped, inserting at ``len(vec)`` puts the
        value in front of the first element.
        """
        position = remap_index(index, self.axes[0])
        self.data = self.backend.insert(self.data, position, value)
        logger.debug("Inserted an element into %s at %i; length is now %i",
                     type(self).__name__, position, len(self))
        return self

    def __delitem__(self, index):
        self.delete_at(index)


@update_settings(name='filled')
def filled(value, shape, kind: Setting = 'numpy', dtype: Setting = None):
    """
    Create a circular array with every cell set to a copy of ``value``.

    Parameters
    ----------
    value : object
    shape : int, range, or tuple of ints and ranges
        Negative extents raise ``ValueError``.
    kind : str
        Backing container kind: ``'numpy'``, ``'list'`` (one dimension
        only) or ``'offset'``. Defaults to ``config['filled.kind']``.
    dtype : data-type, optional
        Element type for numpy based kinds. Defaults to
        ``config['filled.dtype']``, or the type numpy infers from ``value``.
    """
    backend = backend_by_name(kind)
    data = backend.fill(value, shape, dtype)
    logger.debug("Allocated %s circular array with shape %r",
                 kind, tuple(backend.shape(data)))
    return CircularArray(data)

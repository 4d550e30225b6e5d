"""
Backing kinds for circular arrays.

A circular array never touches its data directly. Every read, write and
allocation goes through the ``Backend`` registered for the type of the
wrapped container, so the same remapping works over numpy arrays (including
subclasses such as ``np.memmap`` and masked arrays), plain python lists, and
``OffsetArray`` instances whose axes do not start at zero.

All indices handed to a backend have already been remapped: they lie in the
container's own axes and may be used verbatim.
"""

import copy
import logging
import numbers

import numpy as np

from .offset_array import OffsetArray

logger = logging.getLogger(__name__)

_backends_by_type = {}
_backends_by_name = {}


class Backend(object):
    """
    Capabilities a backing container must provide.

    Subclasses implement the container specific parts. Index arguments are
    tuples with one entry per axis. For ``get``/``set`` each entry is an
    int; for ``take``/``put`` each entry is an int (axis dropped) or an
    integer array (orthogonal selection along that axis).

    Attributes
    ----------
    name : str
        Short identifier, used by ``filled(kind=...)``.
    views_data : bool
        True if ``to_numpy`` returns a view that writes through to the
        container.
    """
    name = None
    views_data = True

    def ndim(self, data):
        return len(self.shape(data))

    def shape(self, data):
        raise NotImplementedError

    def axes(self, data):
        return tuple(range(n) for n in self.shape(data))

    def linear_axis(self, data):
        """Range of the container's native linear indices."""
        if self.ndim(data) == 1:
            return self.axes(data)[0]
        return range(int(np.prod(self.shape(data))))

    def index_style(self, data):
        return 'linear' if self.ndim(data) <= 1 else 'cartesian'

    def dtype(self, data):
        return data.dtype

    def get(self, data, index):
        return data[index]

    def set(self, data, index, value):
        data[index] = value

    def get_linear(self, data, k):
        raise NotImplementedError

    def set_linear(self, data, k, value):
        raise NotImplementedError

    def take(self, data, index):
        raise NotImplementedError

    def put(self, data, index, value):
        raise NotImplementedError

    def take_linear(self, data, k):
        raise NotImplementedError

    def put_linear(self, data, k, value):
        raise NotImplementedError

    def iterate(self, data):
        return iter(data)

    def contains(self, data, value):
        return value in data

    def copy(self, data):
        return data.copy()

    def similar(self, data, dtype=None, shape=None):
        raise NotImplementedError

    def fill(self, value, shape, dtype=None):
        raise NotImplementedError

    def delete(self, data, positions):
        """Remove sorted, unique positions; return the resulting container."""
        raise NotImplementedError

    def insert(self, data, position, value):
        """Insert before ``position``; return the resulting container."""
        raise NotImplementedError

    def to_numpy(self, data):
        return np.asarray(data)

    def __repr__(self):
        return "<%s backend>" % self.name


def register_backend(container_type, backend=None):
    """
    Register a backend for a container type (and its subclasses).

    Can be used directly or as a class decorator on the backend::

        @register_backend(MyContainer)
        class MyBackend(Backend):
            name = 'mine'
    """
    if backend is None:
        def decorator(backend_cls):
            register_backend(container_type, backend_cls())
            return backend_cls
        return decorator
    if isinstance(backend, type):
        backend = backend()
    _backends_by_type[container_type] = backend
    _backends_by_name[backend.name] = backend
    logger.debug("Registered %r for %s", backend, container_type.__name__)
    return backend


def get_backend(data):
    """Find the backend for ``data`` by walking its type's MRO."""
    for cls in type(data).__mro__:
        if cls in _backends_by_type:
            return _backends_by_type[cls]
    raise TypeError(
        "no circular array backend registered for type '%s'"
        % type(data).__name__)


def backend_by_name(name):
    try:
        return _backends_by_name[name]
    except KeyError:
        raise TypeError(
            "unknown backing kind '%s'; expected one of %s"
            % (name, sorted(_backends_by_name))) from None


def normalize_shape(shape):
    """
    Convert a shape given as ints and/or ranges into a tuple of ranges.

    Raises ``ValueError`` for negative extents.
    """
    if isinstance(shape, (numbers.Integral, range)):
        shape = (shape,)
    axes = []
    for dim in shape:
        if isinstance(dim, range):
            if dim.step != 1:
                raise ValueError("axis ranges must have unit step: %r" % dim)
            axes.append(dim)
            continue
        dim = int(dim)
        if dim < 0:
            raise ValueError("negative dimensions are not allowed: %r"
                             % (tuple(shape),))
        axes.append(range(dim))
    return tuple(axes)


def _zero_based_dims(axes, kind):
    for ax in axes:
        if ax.start != 0:
            raise ValueError(
                "%s backing containers are indexed from zero; got axis %r"
                % (kind, ax))
    return tuple(len(ax) for ax in axes)


def _is_plain_value(value):
    return isinstance(value, (numbers.Number, str, bytes, np.generic))


def _filled_ndarray(value, dims, dtype=None):
    if _is_plain_value(value):
        return np.full(dims, value, dtype=dtype)
    # Containers and other objects get one copy per cell.
    data = np.empty(dims, dtype=object if dtype is None else dtype)
    for index in np.ndindex(*dims):
        data[index] = copy.copy(value)
    return data


def _outer_key(index):
    """Turn a mixed int/array key into an ``np.ix_`` key and result shape."""
    flat = [np.ravel(entry) for entry in index]
    shape = sum((np.shape(entry) for entry in index), ())
    return np.ix_(*flat), shape


def _take_outer(arr, index):
    key, shape = _outer_key(index)
    return arr[key].reshape(shape)


def _put_outer(arr, index, value):
    key, shape = _outer_key(index)
    block = tuple(np.size(entry) for entry in index)
    arr[key] = np.broadcast_to(value, shape).reshape(block)


def _take_flat(arr, k):
    return np.take(arr, k)


def _put_flat(arr, k, value):
    arr.flat[np.ravel(k)] = np.ravel(np.broadcast_to(value, np.shape(k)))


def _delete_ndarray(arr, positions):
    return np.delete(arr, np.asarray(positions, dtype=np.intp))


def _insert_ndarray(arr, position, value):
    out = np.empty_like(arr, shape=(len(arr) + 1,))
    out[:position] = arr[:position]
    out[position] = value
    out[position+1:] = arr[position:]
    return out


@register_backend(np.ndarray)
class NumpyBackend(Backend):
    """Numpy arrays, indexed from zero, linear order is C order."""
    name = 'numpy'

    def shape(self, data):
        return data.shape

    def index_style(self, data):
        if data.ndim <= 1 or data.flags.c_contiguous:
            return 'linear'
        return 'cartesian'

    def get_linear(self, data, k):
        return data.flat[k]

    def set_linear(self, data, k, value):
        data.flat[k] = value

    def take(self, data, index):
        return _take_outer(data, index)

    def put(self, data, index, value):
        _put_outer(data, index, value)

    def take_linear(self, data, k):
        return _take_flat(data, k)

    def put_linear(self, data, k, value):
        _put_flat(data, k, value)

    def iterate(self, data):
        return iter(data.flat)

    def similar(self, data, dtype=None, shape=None):
        dims = data.shape if shape is None else _zero_based_dims(
            normalize_shape(shape), self.name)
        return np.empty_like(data, dtype=dtype, shape=dims)

    def fill(self, value, shape, dtype=None):
        dims = _zero_based_dims(normalize_shape(shape), self.name)
        return _filled_ndarray(value, dims, dtype)

    def delete(self, data, positions):
        return _delete_ndarray(data, positions)

    def insert(self, data, position, value):
        return _insert_ndarray(data, position, value)

    def to_numpy(self, data):
        return data


@register_backend(list)
class ListBackend(Backend):
    """
    Python lists. Always one-dimensional; nested lists are treated as
    lists of list elements rather than as a second dimension.
    """
    name = 'list'
    views_data = False

    def shape(self, data):
        return (len(data),)

    def dtype(self, data):
        return np.dtype(object)

    def get(self, data, index):
        return data[index[0]]

    def set(self, data, index, value):
        data[index[0]] = value

    def get_linear(self, data, k):
        return data[k]

    def set_linear(self, data, k, value):
        data[k] = value

    def take(self, data, index):
        k, = index
        return self.take_linear(data, k)

    def put(self, data, index, value):
        k, = index
        self.put_linear(data, k, value)

    def take_linear(self, data, k):
        if np.ndim(k) > 1:
            raise IndexError(
                "list backed arrays only accept one-dimensional index arrays")
        return [data[j] for j in np.ravel(k)]

    def put_linear(self, data, k, value):
        positions = [int(j) for j in np.ravel(k)]
        if np.ndim(value) > 0:
            values = list(np.ravel(np.asarray(value, dtype=object)))
            if len(values) != len(positions):
                raise ValueError(
                    "cannot assign %i values to %i positions"
                    % (len(values), len(positions)))
        else:
            values = [value] * len(positions)
        for j, v in zip(positions, values):
            data[j] = v

    def copy(self, data):
        return list(data)

    def similar(self, data, dtype=None, shape=None):
        n = len(data) if shape is None else self._length(shape)
        return [None] * n

    def fill(self, value, shape, dtype=None):
        return [copy.copy(value) for _ in range(self._length(shape))]

    def _length(self, shape):
        dims = _zero_based_dims(normalize_shape(shape), self.name)
        if len(dims) != 1:
            raise ValueError(
                "list backing containers are one-dimensional; got shape %r"
                % (dims,))
        return dims[0]

    def delete(self, data, positions):
        drop = set(positions)
        data[:] = [x for j, x in enumerate(data) if j not in drop]
        return data

    def insert(self, data, position, value):
        data.insert(position, value)
        return data

    def to_numpy(self, data):
        arr = np.asarray(data)
        if arr.ndim != 1:
            # ragged or nested elements: keep them as opaque objects
            arr = np.empty(len(data), dtype=object)
            arr[:] = data
        return arr


def _origin_of(result, index, axes):
    origin = tuple(
        ax.start for entry, ax in zip(index, axes) if np.ndim(entry) == 1)
    return origin if len(origin) == np.ndim(result) else 0


@register_backend(OffsetArray)
class OffsetBackend(Backend):
    """
    ``OffsetArray`` containers. Multi-indices use the array's own axes;
    linear indices of multi-dimensional arrays address the underlying
    storage in C order starting from zero.
    """
    name = 'offset'

    def shape(self, data):
        return data.shape

    def axes(self, data):
        return data.axes

    def _shift(self, data, index):
        return tuple(
            entry - ax.start for entry, ax in zip(index, data.axes))

    def _linear_start(self, data):
        return self.linear_axis(data).start

    def get_linear(self, data, k):
        return data.data.flat[k - self._linear_start(data)]

    def set_linear(self, data, k, value):
        data.data.flat[k - self._linear_start(data)] = value

    def take(self, data, index):
        result = _take_outer(data.data, self._shift(data, index))
        return OffsetArray(result, _origin_of(result, index, data.axes))

    def put(self, data, index, value):
        _put_outer(data.data, self._shift(data, index), value)

    def take_linear(self, data, k):
        result = _take_flat(data.data, k - self._linear_start(data))
        origin = self._linear_start(data) if result.ndim == 1 else 0
        return OffsetArray(result, origin)

    def put_linear(self, data, k, value):
        _put_flat(data.data, k - self._linear_start(data), value)

    def similar(self, data, dtype=None, shape=None):
        if dtype is None:
            dtype = data.dtype
        if shape is None:
            return OffsetArray.from_axes(data.axes, dtype)
        axes = normalize_shape(shape)
        if len(axes) == data.ndim:
            # plain lengths keep the source's first index on that axis
            axes = tuple(
                range(o, o + len(ax)) if isinstance(dim, numbers.Integral)
                else ax
                for dim, ax, o in zip(
                    self._dims(shape), axes, data.origin))
        return OffsetArray.from_axes(axes, dtype)

    def _dims(self, shape):
        if isinstance(shape, (numbers.Integral, range)):
            return (shape,)
        return tuple(shape)

    def fill(self, value, shape, dtype=None):
        axes = normalize_shape(shape)
        data = _filled_ndarray(value, tuple(len(ax) for ax in axes), dtype)
        return OffsetArray(data, tuple(ax.start for ax in axes))

    def delete(self, data, positions):
        start = data.origin[0]
        return OffsetArray(
            _delete_ndarray(
                data.data, np.asarray(positions, dtype=np.intp) - start),
            start)

    def insert(self, data, position, value):
        start = data.origin[0]
        return OffsetArray(
            _insert_ndarray(data.data, position - start, value), start)

    def to_numpy(self, data):
        return data.data

"""
Elementwise (ufunc) operations on circular arrays.

Numpy evaluates the operation itself: circular operands are unwrapped to
ndarray views of their data, so broadcasting and type promotion follow
numpy's usual rules. The only thing circular arrays add is the final step,
turning numpy's result back into a circular array whose backing container
has the same kind as the leading circular operand. That step is a *fusion
strategy*, registered per backing kind with ``register_fusion``.

A strategy is called as ``strategy(result, template, backend)`` where
``result`` is the ndarray numpy produced, ``template`` is the leading
operand's backing container and ``backend`` its ``Backend``. It returns a
new backing container holding the result's values.
"""

import logging
from collections import namedtuple

import numpy as np

logger = logging.getLogger(__name__)

_fusion_strategies = {}


class CircularStyle(namedtuple('CircularStyle', ['kind'])):
    """
    Tag for "circular array over backing kind ``kind``".

    The kind is a backend name such as ``'numpy'``, ``'list'`` or
    ``'offset'``.
    """
    __slots__ = ()

    def __repr__(self):
        return "CircularStyle(%r)" % (self.kind,)


def register_fusion(kind, strategy=None):
    """
    Register the fusion strategy for a backing kind.

    Usable as a decorator::

        @register_fusion('mine')
        def fuse_mine(result, template, backend):
            return MyContainer(result)
    """
    if isinstance(kind, CircularStyle):
        kind = kind.kind
    if strategy is None:
        def decorator(func):
            register_fusion(kind, func)
            return func
        return decorator
    _fusion_strategies[kind] = strategy
    logger.debug("Registered fusion strategy %s for kind '%s'",
                 getattr(strategy, '__name__', strategy), kind)
    return strategy


def full_index(backend, data):
    """Orthogonal index selecting every cell of ``data``."""
    return tuple(
        np.arange(ax.start, ax.stop, dtype=np.intp)
        for ax in backend.axes(data))


def similar_fusion(result, template, backend):
    """
    Generic strategy: allocate a same-kind container and copy into it.

    Works for any backend that implements ``similar`` and ``put``.
    """
    dest = backend.similar(template, result.dtype, result.shape)
    backend.put(dest, full_index(backend, dest), result)
    return dest


def get_fusion_strategy(style):
    return _fusion_strategies.get(style.kind, similar_fusion)


@register_fusion('numpy')
def ndarray_fusion(result, template, backend):
    # numpy already picked the output class through its own wrapping rules
    return result


@register_fusion('list')
def list_fusion(result, template, backend):
    if result.ndim != 1:
        raise ValueError(
            "elementwise result of shape %r cannot be stored in a list"
            % (result.shape,))
    return result.tolist()


def _unwrap(value, circular_type):
    if isinstance(value, circular_type):
        return value.backend.to_numpy(value.data)
    return value


def _wrap(result, leader, circular_type):
    if not isinstance(result, np.ndarray):
        return result
    if result.ndim == 0:
        return result[()]
    strategy = get_fusion_strategy(leader.style)
    return circular_type(strategy(result, leader.data, leader.backend))


def _at_index(target, index):
    """
    Remap the index of ``ufunc.at`` onto the ndarray view of ``target``.

    Entries keep numpy's pointwise meaning; only their values are remapped.
    """
    linear, remapped, scalar = target._resolve(index)
    backend, data = target.backend, target.data
    if linear:
        k = np.asarray(remapped) - backend.linear_axis(data).start
        return np.unravel_index(k, backend.shape(data))
    return tuple(
        np.asarray(entry) - ax.start
        for entry, ax in zip(remapped, backend.axes(data)))


def fuse(ufunc, method, inputs, kwargs):
    """
    Evaluate ``getattr(ufunc, method)(*inputs, **kwargs)`` with circular
    operands and wrap the result.

    The leftmost circular input (or, failing that, the leftmost circular
    ``out`` argument) decides the backing kind of the result. Scalar results
    are returned as they are; tuple results (e.g. ``np.divmod``) are wrapped
    element by element. With ``out=`` the given outputs are filled and
    returned, as numpy does.
    """
    from .circular_array import CircularArray

    outs = kwargs.get('out', ())
    circular = [x for x in tuple(inputs) + tuple(outs)
                if isinstance(x, CircularArray)]
    leader = circular[0]

    args = tuple(_unwrap(x, CircularArray) for x in inputs)
    if (method == 'at' and len(inputs) > 1 and
            isinstance(inputs[0], CircularArray)):
        args = (args[0], _at_index(inputs[0], inputs[1])) + args[2:]
    if outs:
        out_views = tuple(_unwrap(o, CircularArray) for o in outs)
        kwargs = dict(kwargs, out=out_views)
    result = getattr(ufunc, method)(*args, **kwargs)

    if outs:
        for out, view in zip(outs, out_views):
            if isinstance(out, CircularArray) and not out.backend.views_data:
                out.backend.put(
                    out.data, full_index(out.backend, out.data), view)
        return outs[0] if len(outs) == 1 else outs
    if method == 'at':
        target = inputs[0]
        if (isinstance(target, CircularArray) and
                not target.backend.views_data):
            target.backend.put(
                target.data, full_index(target.backend, target.data), args[0])
        return None
    if isinstance(result, tuple):
        return tuple(_wrap(r, leader, CircularArray) for r in result)
    return _wrap(result, leader, CircularArray)

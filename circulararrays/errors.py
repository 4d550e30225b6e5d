"""
Exceptions raised by circular arrays.

Circular indexing adds exactly two failure modes on top of whatever the
backing container raises itself. Errors from the backing container are
never caught or translated.
"""


class ArityError(IndexError):
    """
    Wrong number of indices.

    A circular array accepts either one index per dimension or a single
    linear index. The numeric range of an index is never an error.
    """
    def __init__(self, array, key):
        self.array = array
        self.key = key
        super().__init__(
            "%s with %i dimension(s) cannot be indexed with %i indices"
            % (type(array).__name__, array.ndim, len(key)))


class ZeroExtentError(ZeroDivisionError):
    """Remapping an index on an axis (or array) with no elements."""
    def __init__(self, index, axis):
        self.index = index
        self.axis = axis
        super().__init__(
            "cannot remap index %r onto empty range %r" % (index, axis))

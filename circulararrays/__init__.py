"""
Arrays with fixed size and circular indexing.
"""

from .errors import ArityError, ZeroExtentError  # noqa: F401
from .offset_array import OffsetArray  # noqa: F401
from .backends import Backend, register_backend, get_backend  # noqa: F401
from .broadcast import CircularStyle, register_fusion  # noqa: F401
from .circular_array import CircularArray, CircularVector, filled  # noqa: F401
from .global_config import config  # noqa: F401

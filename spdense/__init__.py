"""
Multithreaded sparse-by-dense matrix products for Python, with Numba kernels.
"""

from . import orient, vector
from .structure import Compressed, SparseVector
from .layout import DenseView
from .threads import set_threads, use_threads, get_threads

from .orient import *  # noqa: F401, F403
from .vector import *  # noqa: F401, F403

__version__ = "0.1.0"
__all__ = [
    'Compressed',
    'SparseVector',
    'DenseView',
    'set_threads',
    'use_threads',
    'get_threads',
] + orient.__all__ + vector.__all__

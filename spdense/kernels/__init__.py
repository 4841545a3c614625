"""
Compiled kernels.  These take raw arrays, check nothing, and write into
caller-owned buffers; :py:mod:`spdense.orient` and :py:mod:`spdense.vector`
are the checked entry points.
"""

from .rows import accumulate_rows, materialize_rows  # noqa: F401
from .gemv import gemv_dense  # noqa: F401
from .spdot import gallop_dot, gemv_sparse  # noqa: F401
from .outer import outer_dense, outer_sparse  # noqa: F401

"""
Missing-value conventions.

Dense inputs of integer origin mark missing entries with a reserved sentinel,
the minimum value of their (signed) integer type; this is the ``NA_integer_``
convention for 32-bit data.  Floating-point inputs use NaN, and boolean inputs
cannot be missing.  Kernels report missing results as NaN.

A missing term does not simply poison its own product: any row (or dot
product) that touches a missing entry is missing as a whole.  Kernels test for
the sentinel explicitly with :py:func:`is_missing` instead of relying on NaN
arithmetic, because integer sentinels have no NaN representation.
"""

import logging
import numpy as np
from numba.core import types
from numba.extending import overload
from numba.np.numpy_support import as_dtype

_log = logging.getLogger(__name__)


def na_value(dtype):
    """
    Get the missing-value sentinel for a data type.

    Args:
        dtype(numpy.dtype): the data type.

    Returns:
        the sentinel, or ``None`` if the type cannot represent missing values.
    """
    dtype = np.dtype(dtype)
    if dtype.kind == 'i':
        return np.iinfo(dtype).min
    elif dtype.kind == 'f':
        return np.nan
    else:
        return None


def is_missing(xs, i):
    """
    Query whether entry ``i`` of an integer array holds the missing sentinel.
    Floating-point, boolean and absent (``None``) arrays never report missing
    here; NaNs propagate through arithmetic on their own.
    """
    if xs is None or xs.dtype.kind != 'i':
        return False
    return xs[i] == np.iinfo(xs.dtype).min


@overload(is_missing)
def _ovl_is_missing(xs, i):
    def never(xs, i):
        return False

    if isinstance(xs, types.NoneType):
        return never
    elif isinstance(xs.dtype, types.Integer) and xs.dtype.signed:
        na = np.iinfo(as_dtype(xs.dtype)).min

        def check(xs, i):
            return xs[i] == na

        return check
    else:
        return never


def as_real(xs):
    """
    Convert a dense array to a floating-point array usable by the matrix
    kernels.  ``float32`` and ``float64`` arrays are returned unchanged; other
    types become ``float64``, with integer sentinels replaced by NaN.
    """
    xs = np.asarray(xs)
    if xs.dtype == np.float64 or xs.dtype == np.float32:
        return xs

    _log.debug('converting %s operand of shape %s to float64', xs.dtype, xs.shape)
    out = xs.astype(np.float64)
    na = na_value(xs.dtype)
    if xs.dtype.kind == 'i':
        out[xs == na] = np.nan
    return out

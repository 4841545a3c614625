import numpy as np
from numba.core import types
from numba.extending import overload


def narrow(alpha, y):
    """
    Convert a scalar to the element precision of an array.  Double-precision
    scalars applied to single-precision arrays are rounded once, here, rather
    than on every element.
    """
    return y.dtype.type(alpha)


@overload(narrow)
def _ovl_narrow(alpha, y):
    def to_single(alpha, y):
        return np.float32(alpha)

    def to_double(alpha, y):
        return np.float64(alpha)

    if y.dtype == types.float32:
        return to_single
    else:
        return to_double


def weight(vs, i):
    """
    Get entry ``i`` of a value array as a double.  In the special case that the
    array is ``None`` (a pattern-only structure), every entry weighs 1.
    """
    if vs is None:
        return 1.0
    else:
        return float(vs[i])


@overload(weight)
def _ovl_weight(vs, i):
    def one(vs, i):
        return 1.0

    def flag(vs, i):
        return 1.0 if vs[i] else 0.0

    def val(vs, i):
        return np.float64(vs[i])

    if isinstance(vs, types.NoneType):
        return one
    elif isinstance(vs.dtype, types.Boolean):
        return flag
    else:
        return val

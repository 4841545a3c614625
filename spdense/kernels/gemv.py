"""
Sparse matrix by dense vector multiplication.
"""

import numpy as np
from numba import njit, prange

from .._util import weight
from ..missing import is_missing


@njit(nogil=True)
def _row_dot(indptr, indices, values, x, row):
    acc = 0.0
    for ix in range(indptr[row], indptr[row + 1]):
        col = indices[ix]
        if is_missing(x, col):
            # a missing entry makes the whole row missing
            return np.nan
        acc += weight(values, ix) * weight(x, col)
    return acc


@njit(parallel=True, nogil=True)
def gemv_dense(indptr, indices, values, x, out):
    """
    Compute :math:`y = Ax` for a CSR matrix :math:`A` and dense vector :math:`x`.

    Sums are accumulated in double precision and stored in the precision of
    ``out``.  If :math:`x` has an integer type, any row touching an entry that
    holds the missing sentinel is NaN, regardless of its other terms.

    Args:
        indptr(numpy.ndarray): the row pointers of :math:`A`.
        indices(numpy.ndarray): the column indices of :math:`A`.
        values(numpy.ndarray or None): the values of :math:`A`.
        x(numpy.ndarray): the dense vector.
        out(numpy.ndarray): the result vector (**modified**), one entry per row.
    """
    m = len(indptr) - 1
    if m <= 0 or indptr[0] == indptr[m]:
        return

    for row in prange(m):
        out[row] = _row_dot(indptr, indices, values, x, row)

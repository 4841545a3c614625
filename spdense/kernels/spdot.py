"""
Dot products between sparse vectors, by galloping merge.

Both operands are sorted index lists with parallel value lists.  Two cursors
walk the lists; on a match the product is accumulated and both advance.
Otherwise the cursor behind is moved forward with a binary search
(lower bound) for the other cursor's index, so long runs of indices present
in only one operand, or one operand much sparser than the other, cost
:math:`O(\\log n)` per skip rather than a linear scan.
"""

import numpy as np
from numba import njit, prange

from .._util import weight
from ..missing import is_missing


@njit(nogil=True)
def gallop_dot(x_inds, x_vals, xs, xe, y_inds, y_vals, ys, ye, shift):
    """
    Compute the dot product of two sparse vector segments.

    Args:
        x_inds(numpy.ndarray): the indices of :math:`x` (ascending within the segment).
        x_vals(numpy.ndarray or None): the values of :math:`x`.
        xs(int): the start of the :math:`x` segment.
        xe(int): the end of the :math:`x` segment.
        y_inds(numpy.ndarray): the indices of :math:`y` (ascending within the segment).
        y_vals(numpy.ndarray or None):
            the values of :math:`y`; if ``None``, every match weighs 1.  Integer
            values may hold the missing sentinel.
        ys(int): the start of the :math:`y` segment.
        ye(int): the end of the :math:`y` segment.
        shift(int):
            the offset of :math:`y`'s index base over :math:`x`'s; index ``j``
            of :math:`y` matches index ``j - shift`` of :math:`x`.

    Returns:
        float: the dot product; 0 if either segment is empty, NaN if a matched
        entry of either operand is missing.
    """
    acc = 0.0
    p = xs
    q = ys
    while p < xe and q < ye:
        xi = x_inds[p]
        yi = y_inds[q] - shift
        if xi == yi:
            if is_missing(x_vals, p) or is_missing(y_vals, q):
                return np.nan
            acc += weight(x_vals, p) * weight(y_vals, q)
            p += 1
            q += 1
        elif xi < yi:
            p += np.searchsorted(x_inds[p:xe], yi)
        else:
            q += np.searchsorted(y_inds[q:ye], xi + shift)

    return acc


@njit(parallel=True, nogil=True)
def gemv_sparse(indptr, indices, values, y_inds, y_vals, shift, out):
    """
    Compute :math:`y = Ax` for a CSR matrix :math:`A` and sparse vector :math:`x`,
    one galloping dot product per row.

    Args:
        indptr(numpy.ndarray): the row pointers of :math:`A`.
        indices(numpy.ndarray): the column indices of :math:`A`.
        values(numpy.ndarray or None): the values of :math:`A`.
        y_inds(numpy.ndarray): the (ascending) indices of the vector.
        y_vals(numpy.ndarray or None): the values of the vector.
        shift(int): the vector's index base (0 or 1).
        out(numpy.ndarray): the result vector (**modified**), one entry per row.
    """
    m = len(indptr) - 1
    ny = len(y_inds)
    if m <= 0 or ny == 0 or indptr[0] == indptr[m]:
        return

    for row in prange(m):
        out[row] = gallop_dot(indices, values, indptr[row], indptr[row + 1],
                              y_inds, y_vals, 0, ny, shift)

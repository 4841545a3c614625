"""
Outer products of a sparse column with a row vector.

The sparse column is a single-column CSR matrix (each row has at most one
entry; only its first entry is read).  Both kernels build a new compressed
structure instead of a dense result, since the product is zero wherever the
column is.
"""

import numpy as np
from numba import njit

from ..primitives import axpy
from .._util import weight
from ..missing import is_missing


@njit(nogil=True)
def _populated_rows(indptr):
    m = len(indptr) - 1
    n = 0
    for i in range(m):
        if indptr[i] < indptr[i + 1]:
            n += 1

    rows = np.empty(n, dtype=np.intc)
    n = 0
    for i in range(m):
        if indptr[i] < indptr[i + 1]:
            rows[n] = i
            n += 1
    return rows


@njit(nogil=True)
def outer_dense(indptr, values, v):
    """
    Compute the outer product of a sparse column :math:`x` (``m`` rows) and a
    dense row vector :math:`v` (length ``k``), as a CSR matrix.

    Every populated row ``i`` of :math:`x` becomes a full row of ``k`` entries
    with indices ``0..k-1`` and values :math:`x_i v`; empty rows stay empty.
    Products are formed in the precision of :math:`v` and stored as doubles.

    Args:
        indptr(numpy.ndarray): the row pointers of :math:`x`.
        values(numpy.ndarray or None): the values of :math:`x`.
        v(numpy.ndarray): the dense vector.

    Returns:
        tuple: the row pointers, column indices and values of the product.
    """
    m = len(indptr) - 1
    k = len(v)
    rows = _populated_rows(indptr)
    nnz = len(rows) * k

    rowptrs = np.zeros(m + 1, dtype=np.intc)
    colinds = np.empty(nnz, dtype=np.intc)
    work = np.zeros(nnz, dtype=v.dtype)

    pos = 0
    for i in range(m):
        if indptr[i] < indptr[i + 1]:
            axpy(k, weight(values, indptr[i]), v, 1, work[pos:pos + k], 1)
            for j in range(k):
                colinds[pos + j] = j
            pos += k
        rowptrs[i + 1] = pos

    return rowptrs, colinds, work.astype(np.float64)


@njit(nogil=True)
def outer_sparse(indptr, values, y_inds, y_vals, shift, length):
    """
    Compute the outer product of a sparse column :math:`x` (``m`` rows) and a
    sparse row vector :math:`y` (logical length ``length``), as a CSC matrix.

    Each stored entry :math:`y_j` yields column ``j`` holding every populated
    row ``i`` of :math:`x` with value :math:`x_i y_j`; other columns are empty.
    A missing :math:`y_j` makes its whole column NaN, and a binary :math:`y`
    (``y_vals`` is ``None``) weighs 1.

    Args:
        indptr(numpy.ndarray): the row pointers of :math:`x`.
        values(numpy.ndarray or None): the values of :math:`x`.
        y_inds(numpy.ndarray): the (ascending) indices of :math:`y`.
        y_vals(numpy.ndarray or None): the values of :math:`y`.
        shift(int): the index base of :math:`y`.
        length(int): the logical length of :math:`y`.

    Returns:
        tuple: the column pointers, row indices and values of the product.
    """
    rows = _populated_rows(indptr)
    nr = len(rows)
    ny = len(y_inds)

    colptrs = np.zeros(length + 1, dtype=np.intc)
    rowinds = np.empty(nr * ny, dtype=np.intc)
    vals = np.empty(nr * ny, dtype=np.float64)

    pos = 0
    for jj in range(ny):
        col = y_inds[jj] - shift
        if is_missing(y_vals, jj):
            yv = np.nan
        else:
            yv = weight(y_vals, jj)

        for i in rows:
            rowinds[pos] = i
            vals[pos] = weight(values, indptr[i]) * yv
            pos += 1
        colptrs[col + 1] = nr

    for j in range(length):
        colptrs[j + 1] += colptrs[j]

    return colptrs, rowinds, vals

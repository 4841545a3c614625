"""
Sparse-row by dense-row-major multiplication.

Both kernels compute :math:`C = AB` for a CSR matrix :math:`A` (``m`` rows)
and a row-major dense matrix :math:`B` whose rows are ``n`` elements long,
adding scaled rows of :math:`B` into rows of the output.  They differ in the
layout of :math:`C`:

``accumulate_rows``
    :math:`C` is row-major, and each row is accumulated in place
    (:math:`C \\leftarrow AB + C`).

``materialize_rows``
    :math:`C` is column-major, so each output row is a strided column.  Rows
    are accumulated into a per-worker scratch row and copied out once
    complete; rows with no entries are not written at all.

Because a CSC matrix read as CSR is its transpose, and a column-major matrix
read as row-major is its transpose, these two kernels cover the products
:math:`AB`, :math:`A^T B`, :math:`AB^T`, :math:`A^T B^T`, :math:`BA` and
:math:`BA^T`; :py:mod:`spdense.orient` picks the operand roles.

Rows are independent and each output row is written by exactly one worker, so
results do not depend on the number of threads.
"""

import numpy as np
from numba import njit, prange, get_thread_id

from ..primitives import axpy, strided_copy
from .._util import weight


@njit(parallel=True, nogil=True)
def accumulate_rows(m, n, indptr, indices, values, dense, ldb, out, ldc):
    """
    Compute :math:`C \\leftarrow AB + C` with row-major :math:`C`.

    Args:
        m(int): the number of rows of :math:`A` and :math:`C`.
        n(int): the number of columns of :math:`B` and :math:`C`.
        indptr(numpy.ndarray): the row pointers of :math:`A`.
        indices(numpy.ndarray): the column indices of :math:`A`.
        values(numpy.ndarray or None): the values of :math:`A`.
        dense(numpy.ndarray): the flat storage of :math:`B`.
        ldb(int): the leading dimension of :math:`B`.
        out(numpy.ndarray): the flat storage of :math:`C` (**modified**).
        ldc(int): the leading dimension of :math:`C`.
    """
    if m <= 0 or indptr[0] == indptr[m]:
        return

    for row in prange(m):
        rs = row * ldc
        crow = out[rs:rs + n]
        for ix in range(indptr[row], indptr[row + 1]):
            bs = indices[ix] * ldb
            axpy(n, weight(values, ix), dense[bs:bs + n], 1, crow, 1)


@njit(parallel=True, nogil=True)
def materialize_rows(m, n, indptr, indices, values, dense, ldb, out, ldc, workers):
    """
    Compute :math:`C = AB` with column-major :math:`C`, which must be
    zero-initialized.

    Args:
        m(int): the number of rows of :math:`A` and :math:`C`.
        n(int): the number of columns of :math:`B` and :math:`C`.
        indptr(numpy.ndarray): the row pointers of :math:`A`.
        indices(numpy.ndarray): the column indices of :math:`A`.
        values(numpy.ndarray or None): the values of :math:`A`.
        dense(numpy.ndarray): the flat storage of :math:`B`.
        ldb(int): the leading dimension of :math:`B`.
        out(numpy.ndarray): the flat storage of :math:`C` (**modified**).
        ldc(int): the leading dimension of :math:`C`.
        workers(int): the number of scratch rows, one per worker id.
    """
    if m <= 0 or indptr[0] == indptr[m]:
        return

    # one scratch row per worker, freed when the kernel returns
    arena = np.empty((workers, n), dtype=dense.dtype)

    for row in prange(m):
        rsp = indptr[row]
        rep = indptr[row + 1]
        if rsp == rep:
            continue  # empty row

        work = arena[get_thread_id()]
        work[:] = 0
        for ix in range(rsp, rep):
            bs = indices[ix] * ldb
            axpy(n, weight(values, ix), dense[bs:bs + n], 1, work, 1)
        strided_copy(n, work, 1, out[row:], ldc)

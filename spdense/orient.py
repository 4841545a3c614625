"""
Products of compressed sparse and dense matrices.

Every product here runs on one of the two row kernels in
:py:mod:`spdense.kernels.rows`, which compute :math:`K = AB` for CSR
:math:`A` and row-major :math:`B`.  The functions differ only in which
operand plays :math:`A`, which plays :math:`B`, and whether the requested
result is :math:`K` or :math:`K^T`:

================================  ============  ================  ==========  ============
function                          result        :math:`A`         :math:`B`   result is
================================  ============  ================  ==========  ============
``matmul_csr_dense(x, y)``        ``x @ y``     ``x`` (CSR)       ``y``       :math:`K`
``crossprod_csc_dense(x, y)``     ``x.T @ y``   ``x.T`` (CSC)     ``y``       :math:`K`
``tcrossprod_csr_dense(x, y)``    ``x @ y.T``   ``x`` (CSR)       ``y.T``     :math:`K`
``matmul_dense_csc(x, y)``        ``x @ y``     ``y.T`` (CSC)     ``x.T``     :math:`K^T`
``crossprod_dense_csc(x, y)``     ``x.T @ y``   ``y.T`` (CSC)     ``x``       :math:`K^T`
``tcrossprod_dense_csr(x, y)``    ``x @ y.T``   ``y`` (CSR)       ``x.T``     :math:`K^T`
================================  ============  ================  ==========  ============

A CSC structure read as CSR is the transpose of the matrix it stores, and a
column-major array read as row-major is the transpose of its matrix, so none
of these needs to convert the sparse operand.  The dense operand is copied
only if it is not already row-major in the role it plays.  The output layout
selects the kernel: a row-major :math:`K` is accumulated in place, a
column-major one goes through per-worker scratch rows.

All functions accept the same keyword arguments:

``order``
    The memory layout of the result: ``'C'``, ``'F'``, or ``None`` (the
    default) for whichever layout needs no scratch rows.

``out``
    A zero-filled array of the result's shape and dtype to write into.

``nthreads``
    The number of worker threads (see :py:mod:`spdense.threads`).

Dense operands in single precision give single-precision results; double
precision and all other types give double precision, with integer missing
sentinels read as NaN.  Compressed values are always double precision.
"""

import logging
import numpy as np

from .structure import Compressed
from .layout import DenseView
from .missing import as_real
from .kernels.rows import accumulate_rows, materialize_rows
from . import threads

_log = logging.getLogger(__name__)

__all__ = [
    'matmul_csr_dense',
    'crossprod_csc_dense',
    'tcrossprod_csr_dense',
    'matmul_dense_csc',
    'crossprod_dense_csc',
    'tcrossprod_dense_csr',
]


def _row_major(b):
    "View a dense operand as row-major, copying only if its layout requires it."
    try:
        view = DenseView.of(b)
    except ValueError:
        view = None

    if view is None or view.order != 'C':
        _log.debug('copying %s dense operand to row-major', b.shape)
        view = DenseView.of(np.ascontiguousarray(b))
    return view


def _output(shape, dtype, order, out, flip):
    """
    Set up the kernel's output: a view of ``out`` (or a fresh zero array), as
    the kernel product :math:`K` (transposed from the result when ``flip``).
    """
    if out is None:
        if order is None:
            # the layout whose K is row-major needs no scratch rows
            order = 'F' if flip else 'C'
        elif order not in ('C', 'F'):
            raise ValueError(f'invalid order {order}')
        out = np.zeros(shape, dtype=dtype, order=order)
    else:
        if out.shape != shape:
            raise ValueError(f'output has shape {out.shape}, expected {shape}')
        if out.dtype != dtype:
            raise ValueError(f'output has dtype {out.dtype}, expected {dtype}')
        if not out.flags.writeable:
            raise ValueError('output is read-only')

    view = DenseView.of(out)
    if flip:
        view = view.transposed()
    return out, view


def _gemm(a: Compressed, b, flip, order=None, out=None, nthreads=None):
    """
    Compute :math:`K = AB` (or its transpose, when ``flip``) for CSR :math:`A`
    and dense :math:`B`.

    Args:
        a(Compressed): the CSR arrays of :math:`A`.
        b(numpy.ndarray): the 2-D dense :math:`B`, in any layout.
        flip(bool): whether the result is :math:`K^T` rather than :math:`K`.
        order(str or None): the result layout.
        out(numpy.ndarray or None): a zero-filled result buffer.
        nthreads(int or None): the thread count hint.

    Returns:
        numpy.ndarray: the result.
    """
    b = as_real(b)
    if b.ndim != 2:
        raise ValueError(f'dense operand must be 2-D, got {b.ndim}-D')
    m = a.n_major
    k, n = b.shape
    if a.n_minor != k:
        raise ValueError(f'inner dimensions do not match: {a.n_minor} != {k}')

    shape = (n, m) if flip else (m, n)
    out, cv = _output(shape, b.dtype, order, out, flip)
    assert cv.shape == (m, n)
    if m == 0 or n == 0 or a.nnz == 0:
        _log.debug('product of shape %s is empty', shape)
        return out

    bv = _row_major(b)

    with threads.parallel_region(nthreads, m) as nw:
        if cv.order == 'C':
            accumulate_rows(m, n, a.indptr, a.indices, a.values,
                            bv.buffer, bv.ld, cv.buffer, cv.ld)
        else:
            materialize_rows(m, n, a.indptr, a.indices, a.values,
                             bv.buffer, bv.ld, cv.buffer, cv.ld, nw)

    return out


def matmul_csr_dense(x: Compressed, y, **kwargs):
    """
    Compute ``x @ y`` for a CSR matrix ``x`` and a dense matrix ``y``.
    """
    return _gemm(x, y, False, **kwargs)


def crossprod_csc_dense(x: Compressed, y, **kwargs):
    """
    Compute ``x.T @ y`` for a CSC matrix ``x`` and a dense matrix ``y``.
    """
    return _gemm(x, y, False, **kwargs)


def tcrossprod_csr_dense(x: Compressed, y, **kwargs):
    """
    Compute ``x @ y.T`` for a CSR matrix ``x`` and a dense matrix ``y``.
    """
    return _gemm(x, np.asarray(y).T, False, **kwargs)


def matmul_dense_csc(x, y: Compressed, **kwargs):
    """
    Compute ``x @ y`` for a dense matrix ``x`` and a CSC matrix ``y``.
    """
    return _gemm(y, np.asarray(x).T, True, **kwargs)


def crossprod_dense_csc(x, y: Compressed, **kwargs):
    """
    Compute ``x.T @ y`` for a dense matrix ``x`` and a CSC matrix ``y``.
    """
    return _gemm(y, x, True, **kwargs)


def tcrossprod_dense_csr(x, y: Compressed, **kwargs):
    """
    Compute ``x @ y.T`` for a dense matrix ``x`` and a CSR matrix ``y``.
    """
    return _gemm(y, np.asarray(x).T, True, **kwargs)

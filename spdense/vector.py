"""
Products involving vectors: matrix-vector and vector-matrix products, sparse
dot products, and sparse outer products.
"""

import logging
import numpy as np

from .structure import Compressed, SparseVector
from .missing import as_real
from .kernels.gemv import gemv_dense
from .kernels.spdot import gallop_dot, gemv_sparse
from .kernels.outer import outer_dense as _outer_dense, outer_sparse as _outer_sparse
from . import threads

_log = logging.getLogger(__name__)

__all__ = [
    'matvec',
    'vecmat',
    'matvec_sparse',
    'dot',
    'outer_dense',
    'outer_sparse',
]


def _dense_vector(v):
    v = np.asarray(v)
    if v.ndim != 1:
        raise ValueError(f'expected a vector, got {v.ndim}-D array')
    if v.dtype.kind not in 'iufb':
        raise ValueError(f'unsupported vector type {v.dtype}')
    if v.dtype.kind == 'u' or (v.dtype.kind == 'f' and v.dtype not in (np.float32, np.float64)):
        v = v.astype(np.float64)
    return np.ascontiguousarray(v)


def _check_base(v: SparseVector):
    if v.base not in (0, 1):
        raise ValueError(f'index base must be 0 or 1, got {v.base}')


def _gemv(a: Compressed, v, nthreads):
    v = _dense_vector(v)
    if len(v) != a.n_minor:
        raise ValueError(f'vector has length {len(v)}, expected {a.n_minor}')

    dtype = np.float32 if v.dtype == np.float32 else np.float64
    out = np.zeros(a.n_major, dtype=dtype)
    if a.n_major == 0 or a.nnz == 0:
        return out

    with threads.parallel_region(nthreads, a.n_major):
        gemv_dense(a.indptr, a.indices, a.values, v, out)
    return out


def matvec(x: Compressed, y, nthreads=None):
    """
    Compute ``x @ y`` for a CSR matrix ``x`` and a dense vector ``y``.

    Sums are accumulated in double precision; the result is single-precision if
    ``y`` is, and double-precision otherwise.  Integer vectors may hold the
    missing sentinel (see :py:mod:`spdense.missing`): every row touching a
    missing entry is NaN.  Boolean vectors are read as 0/1.

    Args:
        x(Compressed): the CSR matrix.
        y(numpy.ndarray): the vector, of length ``x.n_minor``.
        nthreads(int or None): the number of threads.

    Returns:
        numpy.ndarray: the product, of length ``x.n_major``.
    """
    return _gemv(x, y, nthreads)


def vecmat(x, y: Compressed, nthreads=None):
    """
    Compute ``x @ y`` for a dense (row) vector ``x`` and a CSC matrix ``y``.
    The columns of ``y`` are the rows of its transpose, so this is
    :py:func:`matvec` of ``y`` read as CSR; a pattern-only ``y`` sums the
    entries of ``x`` it selects.

    Returns:
        numpy.ndarray: the product, of length ``y.n_major`` (the columns of ``y``).
    """
    return _gemv(y, x, nthreads)


def matvec_sparse(x: Compressed, y: SparseVector, nthreads=None):
    """
    Compute ``x @ y`` for a CSR matrix ``x`` and a sparse vector ``y``.

    Each row is a galloping-merge dot product (see
    :py:mod:`spdense.kernels.spdot`).  A binary ``y`` (no values) counts every
    match with weight 1.  Missing entries of an integer ``y`` make the rows
    that touch them NaN.

    Returns:
        numpy.ndarray: the double-precision product, of length ``x.n_major``.
    """
    _check_base(y)
    if y.length != x.n_minor:
        raise ValueError(f'vector has length {y.length}, expected {x.n_minor}')

    out = np.zeros(x.n_major)
    if x.n_major == 0 or y.nnz == 0 or x.nnz == 0:
        return out

    with threads.parallel_region(nthreads, x.n_major):
        gemv_sparse(x.indptr, x.indices, x.values, y.indices, y.values, y.base, out)
    return out


def dot(u: SparseVector, v: SparseVector):
    """
    Compute the dot product of two sparse vectors, reconciling their index
    bases.  The result is 0 if either is empty, and NaN if a matched entry of
    either vector is missing.  A binary ``v`` counts each match with
    weight 1.

    Returns:
        float: the dot product.
    """
    _check_base(u)
    _check_base(v)
    if u.length != v.length:
        raise ValueError(f'vector lengths {u.length} and {v.length} do not match')
    if u.nnz == 0 or v.nnz == 0:
        return 0.0

    return gallop_dot(u.indices, u.values, 0, u.nnz,
                      v.indices, v.values, 0, v.nnz, v.base - u.base)


def outer_dense(x: Compressed, v):
    """
    Compute ``x @ v`` for a single-column CSR matrix ``x`` and a dense vector
    ``v`` read as a row: the sparse outer product, as a CSR matrix.

    Args:
        x(Compressed): the CSR column (``n_minor`` is 1).
        v(numpy.ndarray): the vector.

    Returns:
        Compressed: the CSR product of shape ``(x.n_major, len(v))``.
    """
    if x.n_minor != 1:
        raise ValueError(f'expected a single-column matrix, got {x.n_minor} columns')
    v = _dense_vector(v)
    v = as_real(v)
    rps, cis, vs = _outer_dense(x.indptr, x.values, v)
    return Compressed(rps, cis, vs, len(v))


def outer_sparse(x: Compressed, y: SparseVector):
    """
    Compute ``x @ y`` for a single-column CSR matrix ``x`` and a sparse vector
    ``y`` read as a row: the sparse outer product, as a CSC matrix.

    Args:
        x(Compressed): the CSR column (``n_minor`` is 1).
        y(SparseVector): the vector.

    Returns:
        Compressed: the CSC product of shape ``(x.n_major, y.length)``.
    """
    if x.n_minor != 1:
        raise ValueError(f'expected a single-column matrix, got {x.n_minor} columns')
    _check_base(y)
    cps, ris, vs = _outer_sparse(x.indptr, x.values, y.indices, y.values, y.base, y.length)
    return Compressed(cps, ris, vs, x.n_major)

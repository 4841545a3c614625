"""
Compressed sparse structures consumed by the kernels.
"""

from typing import NamedTuple, Optional

import numpy as np
import scipy.sparse as sps

INTC = np.iinfo(np.intc)


class Compressed(NamedTuple):
    """
    A compressed sparse structure: an offset array, an index array and a value
    array.  Segment ``i`` holds entries ``indptr[i]:indptr[i+1]`` of
    ``indices`` and ``values``; indices are sorted within each segment.

    The same triple is a CSR matrix (segments are rows) or a CSC matrix
    (segments are columns); which one is meant is up to the function consuming
    it.  Read as CSR, a CSC matrix is its own transpose.

    Structures are never modified by the kernels, and are owned by the caller.

    Attributes:
        indptr(numpy.ndarray): segment offsets (length ``n_major + 1``).
        indices(numpy.ndarray): minor-axis indices (length ``nnz``).
        values(numpy.ndarray or None):
            entry values (length ``nnz``), or ``None`` if only the structure is
            stored; consumers then treat every entry as 1.
        n_minor(int): the extent of the minor (index) axis.
    """
    indptr: np.ndarray
    indices: np.ndarray
    values: Optional[np.ndarray]
    n_minor: int

    @property
    def n_major(self):
        "The number of segments (rows of a CSR, columns of a CSC)."
        return len(self.indptr) - 1

    @property
    def nnz(self):
        "The number of stored entries."
        return int(self.indptr[-1])

    def extent(self, i):
        "Get the storage extent of segment ``i``."
        return self.indptr[i], self.indptr[i + 1]

    def required_values(self):
        """
        Get the value array, returning an array of 1s if it is not present.
        """
        if self.values is None:
            return np.ones(self.nnz)
        else:
            return self.values

    @classmethod
    def from_scipy(cls, mat, copy=False):
        """
        Take the compressed arrays of a SciPy sparse matrix.  CSC matrices give
        column segments; anything else is read as CSR, converting if needed.

        Args:
            mat(scipy.sparse.spmatrix): a SciPy sparse matrix.
            copy(bool): if ``True``, never share storage with ``mat``.

        Returns:
            Compressed: the structure.
        """
        if mat.format == 'csc':
            n_minor = mat.shape[0]
        else:
            mat = mat.tocsr()
            n_minor = mat.shape[1]

        if not mat.has_sorted_indices:
            mat = mat.sorted_indices()

        ptrs = np.require(mat.indptr, np.intc if mat.nnz <= INTC.max else np.int64, 'C')
        inds = np.require(mat.indices, np.intc, 'C')
        vals = np.require(mat.data, np.float64, 'C')
        if copy:
            ptrs, inds, vals = ptrs.copy(), inds.copy(), vals.copy()
        return cls(ptrs, inds, vals, n_minor)

    def to_scipy(self, format='csr'):
        """
        Wrap the structure as a SciPy sparse matrix.

        Args:
            format(str): ``'csr'`` to read segments as rows, ``'csc'`` as columns.
        """
        values = self.required_values()
        if format == 'csr':
            return sps.csr_matrix((values, self.indices, self.indptr),
                                  shape=(self.n_major, self.n_minor))
        elif format == 'csc':
            return sps.csc_matrix((values, self.indices, self.indptr),
                                  shape=(self.n_minor, self.n_major))
        else:
            raise ValueError(f'unknown compressed format {format}')


class SparseVector(NamedTuple):
    """
    A sparse vector: ascending indices with a parallel value array.

    Attributes:
        indices(numpy.ndarray): the positions of the stored entries, ascending.
        values(numpy.ndarray or None):
            the stored values, or ``None`` for a binary (pattern) vector whose
            entries all weigh 1.  Integer values may hold the missing sentinel.
        length(int): the logical length of the vector.
        base(int): the index base, 0 or 1.
    """
    indices: np.ndarray
    values: Optional[np.ndarray]
    length: int
    base: int = 0

    @property
    def nnz(self):
        return len(self.indices)

    @classmethod
    def from_dense(cls, xs, base=0):
        "Collect the nonzero entries of a dense vector."
        xs = np.asarray(xs)
        nz = np.flatnonzero(xs)
        return cls(nz.astype(np.intc) + base, xs[nz], len(xs), base)

    def to_dense(self):
        "Expand to a dense ``float64`` vector (missing sentinels become NaN)."
        from .missing import as_real
        out = np.zeros(self.length)
        if self.values is None:
            out[self.indices - self.base] = 1.0
        else:
            out[self.indices - self.base] = as_real(self.values)
        return out

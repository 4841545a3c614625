"""
Views of dense matrix storage.
"""

from typing import NamedTuple

import numpy as np
from numpy.lib.stride_tricks import as_strided


class DenseView(NamedTuple):
    """
    A dense matrix as the kernels see it: a flat buffer, a leading dimension
    and an orientation.  In row-major (``'C'``) order element ``(i, j)`` lives
    at ``buffer[i * ld + j]``; in column-major (``'F'``) order at
    ``buffer[j * ld + i]``.  The leading dimension may exceed the logical
    extent, as it does for a slice of a larger matrix.

    A view never owns storage; ``buffer`` always aliases the array it was made
    from.

    Attributes:
        buffer(numpy.ndarray): the flat (1-D) storage.
        ld(int): the leading dimension, in elements.
        order(str): ``'C'`` (row-major) or ``'F'`` (column-major).
        nrows(int): the number of logical rows.
        ncols(int): the number of logical columns.
    """
    buffer: np.ndarray
    ld: int
    order: str
    nrows: int
    ncols: int

    @classmethod
    def of(cls, array):
        """
        View a 2-D array.

        Raises:
            ValueError: if the array is neither row- nor column-major with unit
                stride along its fastest axis.
        """
        if array.ndim != 2:
            raise ValueError(f'expected 2-D array, got {array.ndim}-D')
        nr, nc = array.shape
        isz = array.itemsize
        rs, cs = array.strides

        if array.flags.c_contiguous:
            order, ld = 'C', nc
        elif array.flags.f_contiguous:
            order, ld = 'F', nr
        elif cs == isz and rs > 0 and rs % isz == 0 and rs // isz >= nc:
            order, ld = 'C', rs // isz
        elif rs == isz and cs > 0 and cs % isz == 0 and cs // isz >= nr:
            order, ld = 'F', cs // isz
        else:
            raise ValueError(f'array with strides {array.strides} has no leading dimension')

        if nr == 0 or nc == 0:
            span = 0
        elif order == 'C':
            span = (nr - 1) * ld + nc
        else:
            span = (nc - 1) * ld + nr

        buffer = as_strided(array, shape=(span,), strides=(isz,),
                            writeable=array.flags.writeable)
        return cls(buffer, ld, order, nr, nc)

    @property
    def dtype(self):
        return self.buffer.dtype

    @property
    def shape(self):
        return self.nrows, self.ncols

    def transposed(self):
        """
        Reinterpret the same storage as the transposed matrix.  A column-major
        matrix is its transpose in row-major order.
        """
        order = 'F' if self.order == 'C' else 'C'
        return DenseView(self.buffer, self.ld, order, self.ncols, self.nrows)

    def to_array(self):
        "Get the 2-D array this view describes (a view, not a copy)."
        isz = self.buffer.itemsize
        if self.order == 'C':
            strides = (self.ld * isz, isz)
        else:
            strides = (isz, self.ld * isz)
        return as_strided(self.buffer, shape=self.shape, strides=strides,
                          writeable=self.buffer.flags.writeable)

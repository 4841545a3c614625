"""
BLAS-style level-1 primitives used by the matrix kernels.

These work on flat arrays with explicit strides, like their BLAS namesakes,
and compile separately for each element precision.
"""

from numba import njit

from ._util import narrow


@njit(nogil=True)
def axpy(n, alpha, x, incx, y, incy):
    """
    Compute :math:`y \\leftarrow \\alpha x + y` over ``n`` strided elements.

    ``alpha`` may be double-precision while ``x`` and ``y`` are single-precision;
    it is narrowed to the precision of ``y`` once, before the loop.

    Args:
        n(int): the number of elements.
        alpha(float): the scale factor.
        x(numpy.ndarray): the source array.
        incx(int): the stride between consecutive elements of ``x``.
        y(numpy.ndarray): the destination array (**modified**).
        incy(int): the stride between consecutive elements of ``y``.
    """
    a = narrow(alpha, y)
    if incx == 1 and incy == 1 and a == 1:
        for i in range(n):
            y[i] += x[i]
    else:
        for i in range(n):
            y[i * incy] += a * x[i * incx]


@njit(nogil=True)
def strided_copy(n, x, incx, y, incy):
    """
    Copy ``n`` strided elements from ``x`` into ``y``.  Both arrays must have the
    same precision.
    """
    for i in range(n):
        y[i * incy] = x[i * incx]

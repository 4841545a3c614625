import logging
import numpy as np

from spdense import Compressed
from spdense import orient
from spdense.missing import na_value
from spdense.kernels.rows import materialize_rows
from spdense.test_utils import compressed, finite_arrays, dense_of, csr_slow, assert_product_close

from pytest import mark, raises
from hypothesis import given
import hypothesis.strategies as st

_log = logging.getLogger(__name__)

ORDERS = [None, 'C', 'F']


def _example():
    # [[1, 2, 0], [0, 0, 0], [0, 0, 3]]
    return Compressed(np.array([0, 2, 2, 3], dtype=np.intc),
                      np.array([0, 1, 2], dtype=np.intc),
                      np.array([1.0, 2.0, 3.0]), 3)


EXAMPLE = np.array([[1, 2, 0], [0, 0, 0], [0, 0, 3]], dtype=np.float64)


@mark.parametrize('order', ORDERS)
def test_identity(order):
    out = orient.matmul_csr_dense(_example(), np.identity(3), order=order)
    assert np.array_equal(out, EXAMPLE)
    if order == 'F':
        assert out.flags.f_contiguous
    else:
        assert out.flags.c_contiguous


def test_identity_csc():
    # the same arrays read as CSC store the transpose
    out = orient.matmul_dense_csc(np.identity(3), _example())
    assert np.array_equal(out, EXAMPLE.T)
    assert out.flags.f_contiguous


def test_crossprod_csc_identity():
    out = orient.crossprod_csc_dense(_example(), np.identity(3))
    assert np.array_equal(out, EXAMPLE)


def test_tcrossprod_dense_csr_identity():
    out = orient.tcrossprod_dense_csr(np.identity(3), _example())
    assert np.array_equal(out, EXAMPLE.T)


@mark.parametrize('order', ORDERS)
@csr_slow()
@given(st.data())
def test_matmul_csr_dense(nthreads, order, data):
    m, k, n = data.draw(st.tuples(st.integers(0, 40), st.integers(0, 40), st.integers(1, 15)))
    x = data.draw(compressed(m, k))
    y = data.draw(finite_arrays((k, n)))

    out = orient.matmul_csr_dense(x, y, order=order)
    assert_product_close(out, dense_of(x), y)


@mark.parametrize('order', ORDERS)
@csr_slow()
@given(st.data())
def test_crossprod_csc_dense(nthreads, order, data):
    k, m, n = data.draw(st.tuples(st.integers(0, 40), st.integers(0, 40), st.integers(1, 15)))
    x = data.draw(compressed(k, m, format='csc'))
    y = data.draw(finite_arrays((k, n)))

    out = orient.crossprod_csc_dense(x, y, order=order)
    assert_product_close(out, dense_of(x, 'csc').T, y)


@mark.parametrize('order', ORDERS)
@csr_slow()
@given(st.data())
def test_tcrossprod_csr_dense(nthreads, order, data):
    m, k, n = data.draw(st.tuples(st.integers(0, 40), st.integers(0, 40), st.integers(1, 15)))
    x = data.draw(compressed(m, k))
    y = data.draw(finite_arrays((n, k)))

    out = orient.tcrossprod_csr_dense(x, y, order=order)
    assert_product_close(out, dense_of(x), y.T)


@mark.parametrize('order', ORDERS)
@csr_slow()
@given(st.data())
def test_matmul_dense_csc(nthreads, order, data):
    n, k, m = data.draw(st.tuples(st.integers(1, 15), st.integers(0, 40), st.integers(0, 40)))
    x = data.draw(finite_arrays((n, k)))
    y = data.draw(compressed(k, m, format='csc'))

    out = orient.matmul_dense_csc(x, y, order=order)
    assert_product_close(out, x, dense_of(y, 'csc'))


@mark.parametrize('order', ORDERS)
@csr_slow()
@given(st.data())
def test_crossprod_dense_csc(nthreads, order, data):
    n, k, m = data.draw(st.tuples(st.integers(1, 15), st.integers(0, 40), st.integers(0, 40)))
    x = data.draw(finite_arrays((k, n)))
    y = data.draw(compressed(k, m, format='csc'))

    out = orient.crossprod_dense_csc(x, y, order=order)
    assert_product_close(out, x.T, dense_of(y, 'csc'))


@mark.parametrize('order', ORDERS)
@csr_slow()
@given(st.data())
def test_tcrossprod_dense_csr(nthreads, order, data):
    n, k, m = data.draw(st.tuples(st.integers(1, 15), st.integers(0, 40), st.integers(0, 40)))
    x = data.draw(finite_arrays((n, k)))
    y = data.draw(compressed(m, k))

    out = orient.tcrossprod_dense_csr(x, y, order=order)
    assert_product_close(out, x, dense_of(y).T)


@csr_slow()
@given(st.data())
def test_matmul_is_tcrossprod_of_transpose(data):
    m, k, n = data.draw(st.tuples(st.integers(1, 30), st.integers(1, 30), st.integers(1, 10)))
    x = data.draw(compressed(m, k))
    y = data.draw(finite_arrays((k, n)))

    p1 = orient.matmul_csr_dense(x, y)
    p2 = orient.tcrossprod_csr_dense(x, np.ascontiguousarray(y.T))
    assert np.array_equal(p1, p2)


@csr_slow()
@given(st.data())
def test_csr_and_csc_orientations_agree(data):
    "Reading the same arrays as CSR or CSC gives transposed products"
    m, k, n = data.draw(st.tuples(st.integers(1, 30), st.integers(1, 30), st.integers(1, 10)))
    a = data.draw(compressed(m, k))
    y = data.draw(finite_arrays((k, n)))

    # a as CSR is A; as CSC it is A^T, so A y = (y^T A^T)^T = crossprod(A^T, y)
    p1 = orient.matmul_csr_dense(a, y)
    p2 = orient.crossprod_csc_dense(a, y)
    p3 = orient.crossprod_dense_csc(y, a)
    p4 = orient.matmul_dense_csc(np.ascontiguousarray(y.T), a)
    assert np.array_equal(p1, p2)
    assert np.array_equal(p1, p3.T)
    assert np.array_equal(p1, p4.T)


@mark.parametrize('order', ['C', 'F'])
@csr_slow()
@given(st.data())
def test_single_precision(order, data):
    m, k, n = data.draw(st.tuples(st.integers(0, 30), st.integers(0, 30), st.integers(1, 10)))
    x = data.draw(compressed(m, k))
    y = data.draw(finite_arrays((k, n), dtype='f4'))

    out = orient.matmul_csr_dense(x, y, order=order)
    assert out.dtype == np.float32
    assert_product_close(out, dense_of(x), y)

    out = orient.tcrossprod_dense_csr(np.ascontiguousarray(y.T), x, order=order)
    assert out.dtype == np.float32
    assert_product_close(out, y.T, dense_of(x).T)


@csr_slow()
@given(st.data())
def test_pattern_only(data):
    m, k, n = data.draw(st.tuples(st.integers(1, 30), st.integers(1, 30), st.integers(1, 10)))
    x = data.draw(compressed(m, k, values=False))
    y = data.draw(finite_arrays((k, n)))

    assert x.values is None
    out = orient.matmul_csr_dense(x, y)
    assert_product_close(out, dense_of(x), y)


def test_column_major_input_not_copied_for_tcrossprod(caplog):
    x = _example()
    y = np.asfortranarray(np.arange(12, dtype=np.float64).reshape(4, 3))
    with caplog.at_level(logging.DEBUG, logger='spdense.orient'):
        out = orient.tcrossprod_csr_dense(x, y)
    assert 'copying' not in caplog.text
    assert np.array_equal(out, EXAMPLE @ y.T)


def test_padded_input():
    x = _example()
    big = np.arange(30, dtype=np.float64).reshape(3, 10)
    y = big[:, 2:6]
    out = orient.matmul_csr_dense(x, y)
    assert np.array_equal(out, EXAMPLE @ y)


def test_integer_input():
    x = _example()
    y = np.arange(6, dtype=np.int32).reshape(3, 2)
    out = orient.matmul_csr_dense(x, y)
    assert out.dtype == np.float64
    assert np.array_equal(out, EXAMPLE @ y)


def test_integer_missing():
    x = _example()
    y = np.arange(6, dtype=np.int32).reshape(3, 2)
    y[2, 0] = na_value(np.int32)
    out = orient.matmul_csr_dense(x, y)
    assert np.isnan(out[2, 0])
    assert out[2, 1] == 15
    assert np.array_equal(out[:2, :], (EXAMPLE @ np.arange(6).reshape(3, 2))[:2, :])


@mark.parametrize('order', ['C', 'F'])
def test_output_buffer(order):
    x = _example()
    out = np.zeros((3, 3), order=order)
    res = orient.matmul_csr_dense(x, np.identity(3), out=out)
    assert res is out
    assert np.array_equal(out, EXAMPLE)


def test_output_buffer_flipped():
    x = _example()
    out = np.zeros((3, 3), order='C')
    res = orient.matmul_dense_csc(np.identity(3), x, out=out)
    assert res is out
    assert np.array_equal(out, EXAMPLE.T)


def test_output_padded():
    x = _example()
    big = np.zeros((3, 8))
    out = big[:, 1:4]
    orient.matmul_csr_dense(x, np.identity(3), out=out)
    assert np.array_equal(out, EXAMPLE)
    assert np.all(big[:, 0] == 0)
    assert np.all(big[:, 4:] == 0)


def test_output_bad_shape():
    with raises(ValueError):
        orient.matmul_csr_dense(_example(), np.identity(3), out=np.zeros((3, 4)))


def test_output_bad_dtype():
    with raises(ValueError):
        orient.matmul_csr_dense(_example(), np.identity(3), out=np.zeros((3, 3), 'f4'))


def test_bad_order():
    with raises(ValueError):
        orient.matmul_csr_dense(_example(), np.identity(3), order='K')


def test_dimension_mismatch():
    with raises(ValueError):
        orient.matmul_csr_dense(_example(), np.ones((4, 2)))
    with raises(ValueError):
        orient.matmul_dense_csc(np.ones((2, 4)), _example())


def test_empty_matrix():
    x = Compressed(np.zeros(5, np.intc), np.zeros(0, np.intc), np.zeros(0), 3)
    out = orient.matmul_csr_dense(x, np.ones((3, 2)))
    assert out.shape == (4, 2)
    assert np.all(out == 0)

    out = orient.matmul_dense_csc(np.ones((2, 3)), x)
    assert out.shape == (2, 4)
    assert np.all(out == 0)


def test_scratch_sized_to_workers(monkeypatch):
    "Column-major products get one scratch row per worker in use"
    seen = []

    def recording(*args):
        seen.append(args[-1])
        return materialize_rows(*args)

    monkeypatch.setattr(orient, 'materialize_rows', recording)
    out = orient.matmul_csr_dense(_example(), np.identity(3), order='F', nthreads=1)
    assert seen == [1]
    assert np.array_equal(out, EXAMPLE)


def test_bad_thread_count():
    with raises(ValueError):
        orient.matmul_csr_dense(_example(), np.identity(3), nthreads=0)
    with raises(ValueError):
        orient.matmul_dense_csc(np.identity(3), _example(), nthreads=-1)

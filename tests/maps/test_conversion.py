"""
Tests for conversions to numpy, scipy.sparse and scipy LinearOperator.
"""

import numpy as np
import pytest
import scipy.sparse as sp
import scipy.sparse.linalg as spla

from pylinearmaps import WrappedMap, as_scipy_operator, linear_map, to_dense, to_sparse
from pylinearmaps.core.compute.tolerances import FP64
from pylinearmaps.maps import conversion


class TestToDense:

    def test_composite(self, rng):
        M1 = rng.standard_normal((3, 4))
        M2 = rng.standard_normal((4, 2))
        np.testing.assert_allclose(
            to_dense(WrappedMap(M1) @ WrappedMap(M2)), M1 @ M2, rtol=FP64.rtol,
        )

    def test_wrapped_returns_copy(self):
        M = np.eye(2)
        D = to_dense(WrappedMap(M))
        D[0, 0] = 5.0
        assert M[0, 0] == 1.0

    def test_wrapped_sparse(self):
        D = to_dense(sp.csr_array(np.eye(3)))
        assert isinstance(D, np.ndarray)
        np.testing.assert_array_equal(D, np.eye(3))

    def test_method_form(self, rng):
        M = rng.standard_normal((2, 2))
        np.testing.assert_allclose((2 * WrappedMap(M)).to_dense(), 2 * M)

    def test_large_warns(self, monkeypatch):
        monkeypatch.setattr(conversion, 'DENSE_WARNING_ENTRIES', 4)
        with pytest.warns(RuntimeWarning, match="materializing"):
            to_dense(2 * WrappedMap(np.eye(3)))


class TestToSparse:

    def test_sparse_passthrough(self):
        S = to_sparse(sp.coo_array(np.eye(3)))
        assert isinstance(S, sp.csr_array)
        np.testing.assert_array_equal(S.toarray(), np.eye(3))

    def test_from_operator(self, rng):
        M = rng.standard_normal((3, 3))
        S = to_sparse(WrappedMap(M) + WrappedMap(M))
        assert sp.issparse(S)
        np.testing.assert_allclose(S.toarray(), 2 * M, rtol=FP64.rtol)


class TestScipyOperator:

    def test_matvec_rmatvec(self, rng):
        M = rng.standard_normal((4, 3)) + 1j * rng.standard_normal((4, 3))
        op = as_scipy_operator(WrappedMap(M))
        x = rng.standard_normal(3)
        y = rng.standard_normal(4)
        assert op.shape == (4, 3)
        assert op.dtype == np.complex128
        np.testing.assert_allclose(op.matvec(x), M @ x, rtol=FP64.rtol)
        np.testing.assert_allclose(op.rmatvec(y), M.conj().T @ y, rtol=FP64.rtol)
        np.testing.assert_allclose(op.matmat(np.eye(3)), M, rtol=FP64.rtol)

    def test_eigsh(self, spd_matrix):
        A = linear_map(spd_matrix, symmetric=True, posdef=True)
        op = as_scipy_operator(A @ A)
        vals = spla.eigsh(op, k=1, which='LM', return_eigenvectors=False)
        expected = np.linalg.eigvalsh(spd_matrix @ spd_matrix)[-1]
        np.testing.assert_allclose(vals[0], expected, rtol=1e-8)

    def test_svds(self, rng):
        M = rng.standard_normal((8, 5))
        op = as_scipy_operator(2 * WrappedMap(M))
        s = spla.svds(op, k=2, return_singular_vectors=False)
        expected = np.linalg.svd(2 * M, compute_uv=False)[:2]
        np.testing.assert_allclose(np.sort(s)[::-1], expected, rtol=1e-8)

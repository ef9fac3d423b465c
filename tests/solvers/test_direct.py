"""
Tests for the dense direct solver strategies.
"""

import numpy as np
import pytest

from pylinearmaps import WrappedMap, linear_map
from pylinearmaps.core.exceptions import NotPositiveDefiniteError, SingularMatrixError
from pylinearmaps.solvers import cholesky, direct


def _solve(solver, A, b):
    out = np.empty(b.shape, dtype=np.result_type(A.dtype, b.dtype))
    solver(A, b, out)
    return out


class TestDirect:

    def test_general(self, rng):
        M = rng.standard_normal((5, 5)) + 5 * np.eye(5)
        b = rng.standard_normal(5)
        np.testing.assert_allclose(
            _solve(direct, WrappedMap(M), b), np.linalg.solve(M, b), rtol=1e-10,
        )

    def test_hermitian(self, hermitian_matrix, rng):
        A = WrappedMap(hermitian_matrix, hermitian=True)
        b = rng.standard_normal(4) + 1j * rng.standard_normal(4)
        np.testing.assert_allclose(
            _solve(direct, A, b), np.linalg.solve(hermitian_matrix, b), rtol=1e-10,
        )

    def test_composite_operator(self, rng):
        M = rng.standard_normal((4, 4)) + 4 * np.eye(4)
        A = 2 * WrappedMap(M)
        b = rng.standard_normal(4)
        np.testing.assert_allclose(_solve(direct, A, b), np.linalg.solve(2 * M, b), rtol=1e-10)

    def test_singular(self):
        M = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
        with pytest.raises(SingularMatrixError) as exc_info:
            _solve(direct, WrappedMap(M), np.ones(3))
        assert exc_info.value.matrix_name == 'A'
        assert exc_info.value.condition_number > 1e15


class TestCholesky:

    def test_spd(self, spd_matrix, rng):
        b = rng.standard_normal(spd_matrix.shape[0])
        A = linear_map(spd_matrix, symmetric=True, posdef=True)
        np.testing.assert_allclose(
            _solve(cholesky, A, b), np.linalg.solve(spd_matrix, b), rtol=1e-10,
        )

    def test_hermitian_positive_definite(self, hermitian_matrix, rng):
        b = rng.standard_normal(4) + 1j * rng.standard_normal(4)
        np.testing.assert_allclose(
            _solve(cholesky, WrappedMap(hermitian_matrix), b),
            np.linalg.solve(hermitian_matrix, b),
            rtol=1e-10,
        )

    def test_indefinite(self):
        M = np.array([[1.0, 2.0], [2.0, 1.0]])
        with pytest.raises(NotPositiveDefiniteError) as exc_info:
            _solve(cholesky, WrappedMap(M), np.ones(2))
        assert exc_info.value.matrix_name == 'A'
        assert exc_info.value.min_eigenvalue == pytest.approx(-1.0)

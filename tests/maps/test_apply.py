"""
Tests for the apply engine: apply() and the 5-argument apply_into().
"""

import numpy as np
import pytest

from pylinearmaps import (
    FunctionMap,
    UniformScalingMap,
    WrappedMap,
    apply,
    apply_into,
    block_diag,
    compose,
    hstack,
    hvcat,
    identity,
    inverse,
    kron,
    kronsum,
    vstack,
)
from pylinearmaps.core.compute.tolerances import FP32, FP64
from pylinearmaps.core.compute.workspace import Workspace
from pylinearmaps.core.exceptions import DimensionError, ValidationError


@pytest.fixture
def operator(rng):
    """A composite operator and its dense equivalent."""
    M1 = rng.standard_normal((4, 3))
    M2 = rng.standard_normal((3, 5))
    return 2 * WrappedMap(M1) @ WrappedMap(M2) + WrappedMap(np.ones((4, 5))), 2 * M1 @ M2 + 1


# ═══════════════════════════════════════════════════════════════════════
# apply
# ═══════════════════════════════════════════════════════════════════════


class TestApply:

    def test_vector(self, operator, rng):
        A, dense = operator
        x = rng.standard_normal(5)
        y = apply(A, x)
        assert y.shape == (4,)
        np.testing.assert_allclose(y, dense @ x, rtol=FP64.rtol)

    def test_matrix(self, operator, rng):
        A, dense = operator
        X = rng.standard_normal((5, 3))
        np.testing.assert_allclose(apply(A, X), dense @ X, rtol=FP64.rtol)

    def test_list_input(self, operator):
        A, dense = operator
        np.testing.assert_allclose(apply(A, [1, 2, 3, 4, 5]), dense @ np.arange(1.0, 6.0),
                                   rtol=FP64.rtol)

    def test_call_and_matvec_aliases(self, operator, rng):
        A, dense = operator
        x = rng.standard_normal(5)
        np.testing.assert_allclose(A(x), dense @ x, rtol=FP64.rtol)
        np.testing.assert_allclose(A.matvec(x), dense @ x, rtol=FP64.rtol)

    def test_result_dtype(self, rng):
        A32 = WrappedMap(rng.standard_normal((3, 3)).astype(np.float32))
        assert apply(A32, np.ones(3, dtype=np.float32)).dtype == np.float32
        assert apply(A32, np.ones(3)).dtype == np.float64
        assert apply(A32, np.ones(3, dtype=np.complex64)).dtype == np.complex64

    def test_float32_accuracy(self, rng):
        M = rng.standard_normal((3, 3)).astype(np.float32)
        x = rng.standard_normal(3).astype(np.float32)
        np.testing.assert_allclose(apply(WrappedMap(M), x), M @ x, rtol=FP32.rtol, atol=FP32.atol)

    def test_wrong_length(self, operator):
        with pytest.raises(DimensionError, match="does not match operator columns 5"):
            apply(operator[0], np.ones(4))

    def test_3d_input(self, operator):
        with pytest.raises(DimensionError):
            apply(operator[0], np.ones((5, 2, 2)))

    def test_non_numeric_input(self, operator):
        with pytest.raises(ValidationError):
            apply(operator[0], ["a"] * 5)

    def test_input_untouched(self, operator, rng):
        x = rng.standard_normal(5)
        x_copy = x.copy()
        apply(operator[0], x)
        np.testing.assert_array_equal(x, x_copy)

    def test_empty_operator(self):
        A = WrappedMap(np.zeros((0, 3)))
        assert apply(A, np.ones(3)).shape == (0,)


# ═══════════════════════════════════════════════════════════════════════
# apply_into
# ═══════════════════════════════════════════════════════════════════════


class TestApplyInto:

    @pytest.mark.parametrize("alpha, beta", [(1, 0), (2.5, 0), (1, 1), (-1, 0.5), (0, 2)])
    def test_five_argument_form(self, operator, rng, alpha, beta):
        A, dense = operator
        x = rng.standard_normal(5)
        out = rng.standard_normal(4)
        expected = alpha * dense @ x + beta * out
        result = apply_into(out, A, x, alpha, beta)
        assert result is out
        np.testing.assert_allclose(out, expected, rtol=FP64.rtol, atol=FP64.atol)

    def test_beta_zero_ignores_nan(self, operator, rng):
        A, dense = operator
        x = rng.standard_normal(5)
        out = np.full(4, np.nan)
        apply_into(out, A, x, 3, 0)
        assert np.all(np.isfinite(out))
        np.testing.assert_allclose(out, 3 * dense @ x, rtol=FP64.rtol)

    def test_complex_alpha(self, operator, rng):
        A, dense = operator
        x = rng.standard_normal(5)
        out = np.ones(4, dtype=np.complex128)
        apply_into(out, A, x, 1j, 1)
        np.testing.assert_allclose(out, 1j * dense @ x + 1, rtol=FP64.rtol)

    def test_real_out_cannot_hold_complex(self, operator):
        with pytest.raises(ValidationError, match="cannot store"):
            apply_into(np.empty(4), operator[0], np.ones(5), 1j)

    def test_wrong_out_shape(self, operator):
        with pytest.raises(DimensionError, match="expected shape"):
            apply_into(np.empty(3), operator[0], np.ones(5))

    def test_matrix_out_shape(self, operator):
        with pytest.raises(DimensionError):
            apply_into(np.empty((4, 3)), operator[0], np.ones((5, 2)))

    def test_aliasing_rejected(self):
        A = WrappedMap(np.eye(3))
        x = np.ones(3)
        with pytest.raises(ValueError, match="share memory"):
            apply_into(x, A, x)

    def test_invalid_scalar(self, operator):
        with pytest.raises(ValidationError, match="alpha"):
            apply_into(np.empty(4), operator[0], np.ones(5), "2")

    def test_workspace_reuse(self, rng):
        maps = [WrappedMap(rng.standard_normal((3, 3))) for _ in range(4)]
        K = kron(compose(*maps), WrappedMap(rng.standard_normal((2, 2))))
        ws = Workspace()
        out = np.empty(6)
        apply_into(out, K, rng.standard_normal(6), workspace=ws)
        first = ws.n_allocations
        apply_into(out, K, rng.standard_normal(6), workspace=ws)
        assert ws.n_allocations == first


# ═══════════════════════════════════════════════════════════════════════
# beta == 0 across map types
# ═══════════════════════════════════════════════════════════════════════


def _block_concat(rng):
    A = rng.standard_normal((2, 3))
    B = rng.standard_normal((2, 4))
    C = rng.standard_normal((5, 7))
    return hvcat((2, 1), A, B, C), np.block([[A, B], [C]])


def _block_diagonal(rng):
    A = rng.standard_normal((2, 3))
    B = rng.standard_normal((3, 2))
    dense = np.zeros((5, 5))
    dense[:2, :3] = A
    dense[2:, 3:] = B
    return block_diag(A, B), dense


def _function_map(rng, mutating):
    M = rng.standard_normal((4, 3))
    if mutating:
        def f(y, x):
            np.matmul(M, x, out=y)

        def fc(y, x):
            np.matmul(M.T, x, out=y)
    else:
        def f(x):
            return M @ x

        def fc(y):
            return M.T @ y
    return FunctionMap(f, (4, 3), adjoint=fc, mutating=mutating), M


def _spd(rng, n):
    G = rng.standard_normal((n, n))
    return G @ G.T + n * np.eye(n)


def _case_hvcat(rng):
    return _block_concat(rng)


def _case_hvcat_adjoint(rng):
    op, dense = _block_concat(rng)
    return op.H, dense.T


def _case_hstack_transpose(rng):
    A = rng.standard_normal((3, 2))
    B = rng.standard_normal((3, 4))
    return hstack(A, B).T, np.hstack([A, B]).T


def _case_zero_height_row(rng):
    M = rng.standard_normal((3, 4))
    return vstack(np.zeros((0, 4)), M), M


def _case_zero_height_row_transpose(rng):
    M = rng.standard_normal((3, 4))
    return vstack(np.zeros((0, 4)), M).T, M.T


def _case_zero_width_block(rng):
    M = rng.standard_normal((3, 4))
    return hstack(np.zeros((3, 0)), M), M


def _case_block_diag(rng):
    return _block_diagonal(rng)


def _case_block_diag_adjoint(rng):
    op, dense = _block_diagonal(rng)
    return op.H, dense.T


def _case_kron(rng):
    A = rng.standard_normal((2, 3))
    B = rng.standard_normal((3, 2))
    return kron(A, B), np.kron(A, B)


def _case_kron_transpose(rng):
    op, dense = _case_kron(rng)
    return op.T, dense.T


def _case_kronsum(rng):
    A = rng.standard_normal((2, 2))
    B = rng.standard_normal((3, 3))
    return kronsum(A, B), np.kron(A, np.eye(3)) + np.kron(np.eye(2), B)


def _case_function(rng):
    return _function_map(rng, mutating=False)


def _case_function_adjoint(rng):
    op, M = _function_map(rng, mutating=False)
    return op.H, M.T


def _case_mutating_function(rng):
    return _function_map(rng, mutating=True)


def _case_mutating_function_adjoint(rng):
    op, M = _function_map(rng, mutating=True)
    return op.H, M.T


def _case_inverse(rng):
    S = _spd(rng, 4)
    return inverse(S, 'direct'), np.linalg.inv(S)


def _case_inverse_transpose(rng):
    S = _spd(rng, 4)
    S[0, 1] += 0.5
    return inverse(S, 'direct').T, np.linalg.inv(S).T


def _case_identity(rng):
    return identity(4), np.eye(4)


def _case_uniform_scaling(rng):
    return UniformScalingMap(2.5, 3), 2.5 * np.eye(3)


def _case_composition_adjoint(rng):
    A = rng.standard_normal((4, 3))
    B = rng.standard_normal((3, 5))
    return compose(A, B).H, (A @ B).T


BETA_ZERO_CASES = [
    _case_hvcat,
    _case_hvcat_adjoint,
    _case_hstack_transpose,
    _case_zero_height_row,
    _case_zero_height_row_transpose,
    _case_zero_width_block,
    _case_block_diag,
    _case_block_diag_adjoint,
    _case_kron,
    _case_kron_transpose,
    _case_kronsum,
    _case_function,
    _case_function_adjoint,
    _case_mutating_function,
    _case_mutating_function_adjoint,
    _case_inverse,
    _case_inverse_transpose,
    _case_identity,
    _case_uniform_scaling,
    _case_composition_adjoint,
]


@pytest.mark.parametrize(
    "build", BETA_ZERO_CASES, ids=[case.__name__[len("_case_"):] for case in BETA_ZERO_CASES],
)
class TestBetaZeroAcrossMaps:

    def test_vector_out_of_nans(self, build, rng):
        op, dense = build(rng)
        x = rng.standard_normal(dense.shape[1])
        out = np.full(dense.shape[0], np.nan)
        apply_into(out, op, x, 2, 0)
        np.testing.assert_allclose(out, 2 * dense @ x, rtol=1e-8, atol=FP64.atol)

    def test_columns_out_of_nans(self, build, rng):
        op, dense = build(rng)
        X = rng.standard_normal((dense.shape[1], 2))
        out = np.full((dense.shape[0], 2), np.nan)
        apply_into(out, op, X)
        np.testing.assert_allclose(out, dense @ X, rtol=1e-8, atol=FP64.atol)

    def test_apply(self, build, rng):
        op, dense = build(rng)
        x = rng.standard_normal(dense.shape[1])
        np.testing.assert_allclose(apply(op, x), dense @ x, rtol=1e-8, atol=FP64.atol)

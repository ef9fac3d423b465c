"""
Tests for block concatenation and block-diagonal operators.
"""

import numpy as np
import pytest
import scipy.linalg
import scipy.sparse as sp

from pylinearmaps import (
    BlockMap,
    WrappedMap,
    apply_into,
    block,
    block_diag,
    hstack,
    hvcat,
    to_dense,
    vstack,
)
from pylinearmaps.core.compute.tolerances import FP64
from pylinearmaps.core.exceptions import DimensionError, ValidationError


@pytest.fixture
def blocks(rng):
    """Matrices conformable for [A B; C] with C spanning both columns."""
    A = rng.standard_normal((2, 3))
    B = rng.standard_normal((2, 4))
    C = rng.standard_normal((5, 7))
    return A, B, C


# ═══════════════════════════════════════════════════════════════════════
# Concatenation
# ═══════════════════════════════════════════════════════════════════════


class TestConcatenation:

    def test_hstack(self, blocks, rng):
        A, B, _ = blocks
        H = hstack(WrappedMap(A), WrappedMap(B))
        x = rng.standard_normal(7)
        assert H.shape == (2, 7)
        np.testing.assert_allclose(H @ x, np.hstack([A, B]) @ x, rtol=FP64.rtol)

    def test_vstack(self, blocks, rng):
        A, _, _ = blocks
        M = rng.standard_normal((4, 3))
        V = vstack(A, M)
        x = rng.standard_normal(3)
        assert V.shape == (6, 3)
        np.testing.assert_allclose(V @ x, np.vstack([A, M]) @ x, rtol=FP64.rtol)

    def test_hvcat_ragged_layout(self, blocks):
        A, B, C = blocks
        Mb = hvcat((2, 1), A, B, C)
        assert isinstance(Mb, BlockMap)
        assert Mb.rows == (2, 1)
        np.testing.assert_allclose(to_dense(Mb), np.block([[A, B], [C]]), rtol=FP64.rtol)

    def test_block_nested_lists(self, blocks):
        A, B, C = blocks
        np.testing.assert_allclose(
            to_dense(block([[A, B], [C]])), np.block([[A, B], [C]]), rtol=FP64.rtol,
        )

    def test_block_rejects_flat_list(self, blocks):
        with pytest.raises(ValidationError, match="list of block rows"):
            block([blocks[0], blocks[1]])

    def test_sparse_blocks(self, rng):
        S = sp.csr_array(np.eye(3))
        D = rng.standard_normal((3, 2))
        H = hstack(S, D)
        np.testing.assert_allclose(to_dense(H), np.hstack([np.eye(3), D]), rtol=FP64.rtol)

    def test_adjoint_and_transpose(self, blocks, rng):
        A, B, C = blocks
        Bc = B + 1j * rng.standard_normal(B.shape)
        Mb = hvcat((2, 1), A, Bc, C)
        dense = np.block([[A, Bc], [C]])
        y = rng.standard_normal((7, 2)) + 1j * rng.standard_normal((7, 2))
        np.testing.assert_allclose(Mb.H @ y, dense.conj().T @ y, rtol=FP64.rtol)
        np.testing.assert_allclose(Mb.T @ y, dense.T @ y, rtol=FP64.rtol)

    def test_apply_into_beta(self, blocks, rng):
        A, B, C = blocks
        Mb = hvcat((2, 1), A, B, C)
        dense = np.block([[A, B], [C]])
        x = rng.standard_normal(7)
        out = rng.standard_normal(7)
        expected = 2 * dense @ x - out
        apply_into(out, Mb, x, 2, -1)
        np.testing.assert_allclose(out, expected, rtol=FP64.rtol)

    def test_zero_height_block_row(self):
        M = np.arange(6.0).reshape(2, 3)
        V = vstack(np.zeros((0, 3)), M)
        x = np.ones(3)
        assert V.shape == (2, 3)
        np.testing.assert_allclose(V @ x, [3.0, 12.0])
        out = np.full(2, np.nan)
        apply_into(out, V, x)
        np.testing.assert_allclose(out, [3.0, 12.0])

    def test_zero_width_leading_block_with_beta(self, rng):
        M = rng.standard_normal((2, 3))
        H = hstack(np.zeros((2, 0)), M)
        x = rng.standard_normal(3)
        out = rng.standard_normal(2)
        expected = M @ x + 3 * out
        apply_into(out, H, x, 1, 3)
        np.testing.assert_allclose(out, expected, rtol=FP64.rtol)

    def test_no_flags(self):
        I = WrappedMap(np.eye(2), symmetric=True, posdef=True)
        Z = WrappedMap(np.zeros((2, 2)))
        Mb = block([[I, Z], [Z, I]])
        assert not Mb.is_symmetric
        assert not Mb.is_posdef


class TestConcatenationErrors:

    def test_row_heights_differ(self, rng):
        with pytest.raises(DimensionError, match="equal row counts"):
            hstack(np.ones((2, 2)), np.ones((3, 2)))

    def test_column_totals_differ(self):
        with pytest.raises(DimensionError, match="block row 1 has 3 columns, expected 4"):
            hvcat((2, 1), np.ones((2, 2)), np.ones((2, 2)), np.ones((2, 3)))

    def test_rows_do_not_match_block_count(self):
        with pytest.raises(ValidationError, match="describe 3 blocks"):
            hvcat((2, 1), np.ones((2, 2)), np.ones((2, 2)))

    def test_empty_block_row(self):
        with pytest.raises(ValidationError):
            BlockMap((0,), [])


# ═══════════════════════════════════════════════════════════════════════
# Block diagonal
# ═══════════════════════════════════════════════════════════════════════


class TestBlockDiagonal:

    def test_matches_scipy(self, blocks, rng):
        A, B, C = blocks
        D = block_diag(A, B, C)
        dense = scipy.linalg.block_diag(A, B, C)
        assert D.shape == dense.shape
        x = rng.standard_normal(dense.shape[1])
        y = rng.standard_normal(dense.shape[0])
        np.testing.assert_allclose(D @ x, dense @ x, rtol=FP64.rtol)
        np.testing.assert_allclose(D.H @ y, dense.T @ y, rtol=FP64.rtol)

    def test_flags_need_every_block(self, spd_matrix, rng):
        P = WrappedMap(spd_matrix, symmetric=True, posdef=True)
        assert block_diag(P, 2 * P).is_posdef
        assert not block_diag(P, WrappedMap(rng.standard_normal((6, 6)))).is_symmetric

    def test_apply_into_beta(self, blocks, rng):
        A, B, C = blocks
        dense = scipy.linalg.block_diag(A, B, C)
        x = rng.standard_normal(dense.shape[1])
        out = rng.standard_normal(dense.shape[0])
        expected = 0.5 * dense @ x + 2 * out
        apply_into(out, block_diag(A, B, C), x, 0.5, 2)
        np.testing.assert_allclose(out, expected, rtol=FP64.rtol)

    def test_empty(self):
        with pytest.raises(ValidationError):
            block_diag()

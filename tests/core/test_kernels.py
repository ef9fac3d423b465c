"""
Tests for the in-place axpby kernels.

The 5-argument convention out = alpha * x + beta * out must ignore the
previous content of out when beta == 0, NaN included.
"""

import numpy as np
import pytest

from pylinearmaps.core.compute.kernels import axpby_into, axpby_owned_into, scale_into
from pylinearmaps.core.compute.workspace import Workspace


class TestScaleInto:

    def test_zero_clears_nan(self):
        out = np.array([np.nan, np.inf, 1.0])
        scale_into(out, 0)
        np.testing.assert_array_equal(out, 0.0)

    def test_one_is_noop(self):
        out = np.array([1.0, 2.0])
        scale_into(out, 1)
        np.testing.assert_array_equal(out, [1.0, 2.0])

    def test_scales(self):
        out = np.array([1.0, 2.0])
        scale_into(out, -2)
        np.testing.assert_array_equal(out, [-2.0, -4.0])


class TestAxpbyInto:

    @pytest.mark.parametrize("alpha, beta", [(1, 0), (2.5, 0), (1, 3), (2, -1), (0.5j, 2)])
    def test_matches_formula(self, rng, alpha, beta):
        x = rng.standard_normal(5) + 0j
        out = rng.standard_normal(5) + 0j
        expected = alpha * x + beta * out
        axpby_into(alpha, x, beta, out, Workspace())
        np.testing.assert_allclose(out, expected)

    def test_beta_zero_ignores_nan(self):
        x = np.arange(3.0)
        out = np.full(3, np.nan)
        axpby_into(2, x, 0, out, Workspace())
        np.testing.assert_array_equal(out, 2 * x)

    def test_x_untouched(self):
        x = np.arange(3.0)
        out = np.ones(3)
        axpby_into(2, x, 3, out, Workspace())
        np.testing.assert_array_equal(x, np.arange(3.0))

    def test_temporary_only_when_needed(self):
        ws = Workspace()
        x = np.ones(3)
        out = np.ones(3)
        axpby_into(1, x, 2, out, ws)
        axpby_into(2, x, 0, out, ws)
        assert ws.n_allocations == 0
        axpby_into(2, x, 2, out, ws)
        assert ws.n_allocations == 1


class TestAxpbyOwnedInto:

    def test_matches_formula(self, rng):
        tmp = rng.standard_normal(4)
        out = rng.standard_normal(4)
        expected = 3 * tmp + 2 * out
        axpby_owned_into(3, tmp, 2, out)
        np.testing.assert_allclose(out, expected)

    def test_complex_alpha_with_real_tmp(self):
        tmp = np.array([1.0, 2.0])
        out = np.array([1.0 + 0j, 1.0 + 0j])
        axpby_owned_into(1j, tmp, 1, out)
        np.testing.assert_allclose(out, [1 + 1j, 1 + 2j])

    def test_beta_zero_ignores_nan(self):
        tmp = np.array([1.0, 2.0])
        out = np.full(2, np.nan)
        axpby_owned_into(1, tmp, 0, out)
        np.testing.assert_array_equal(out, [1.0, 2.0])

"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def spd_matrix(rng):
    """Well-conditioned 6x6 symmetric positive definite matrix."""
    n = 6
    G = rng.standard_normal((n, n))
    return G @ G.T + n * np.eye(n)


@pytest.fixture
def complex_matrix(rng):
    """Dense 4x3 complex matrix."""
    return rng.standard_normal((4, 3)) + 1j * rng.standard_normal((4, 3))


@pytest.fixture
def hermitian_matrix(rng):
    """4x4 complex hermitian positive definite matrix."""
    G = rng.standard_normal((4, 4)) + 1j * rng.standard_normal((4, 4))
    return G @ G.conj().T + 4 * np.eye(4)

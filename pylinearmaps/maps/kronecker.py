"""
Kronecker products and Kronecker sums of operators.

Both are applied through the vec trick, never by forming the product.
With numpy's row-major vec (x = X.ravel()):

    kron(A, B) @ vec(X)     == vec(A @ X @ B.T)
    kronsum(A, B) @ vec(X)  == vec(A @ X + X @ B.T)

where kronsum(A, B) = kron(A, I) + kron(I, B) for square A and B.
"""

from __future__ import annotations

import numbers
from typing import Any, Callable, Sequence

import numpy as np
from numpy.typing import NDArray

from pylinearmaps.core.compute.workspace import Workspace
from pylinearmaps.core.exceptions import ValidationError
from pylinearmaps.core.validation import check_square
from pylinearmaps.maps.base import LinearMap

Hook = Callable[..., None]


class KroneckerMap(LinearMap):
    """
    Kronecker product A_1 (x) A_2 (x) ... (x) A_k.

    Nested Kronecker products are flattened. Symmetric, hermitian and
    posdef flags hold when every factor has them.
    """

    def __init__(self, maps: Sequence[Any]):
        from pylinearmaps.maps.factory import linear_map
        flat: list[LinearMap] = []
        for A in maps:
            A = linear_map(A)
            if isinstance(A, KroneckerMap):
                flat.extend(A.maps)
            else:
                flat.append(A)
        if len(flat) < 2:
            raise ValidationError("KroneckerMap: at least two factors required")
        self._maps = tuple(flat)
        # Applied as first (x) rest
        self._rest = flat[1] if len(flat) == 2 else KroneckerMap(flat[1:])

    @property
    def maps(self) -> tuple[LinearMap, ...]:
        return self._maps

    @property
    def shape(self) -> tuple[int, int]:
        m, n = 1, 1
        for A in self._maps:
            m *= A.shape[0]
            n *= A.shape[1]
        return (m, n)

    @property
    def dtype(self) -> np.dtype:
        return np.result_type(*(A.dtype for A in self._maps))

    @property
    def is_symmetric(self) -> bool:
        return all(A.is_symmetric for A in self._maps)

    @property
    def is_hermitian(self) -> bool:
        return all(A.is_hermitian for A in self._maps)

    @property
    def is_posdef(self) -> bool:
        return all(A.is_posdef for A in self._maps)

    def _apply_into(self, out, x, alpha, beta, workspace):
        A, B = self._maps[0], self._rest
        _kron_apply(A._apply_into, A.shape, B._apply_into, B.shape,
                    out, x, alpha, beta, workspace)

    def _adjoint_apply_into(self, out, x, alpha, beta, workspace):
        A, B = self._maps[0], self._rest
        _kron_apply(A._adjoint_apply_into, A.shape[::-1], B._adjoint_apply_into, B.shape[::-1],
                    out, x, alpha, beta, workspace)

    def _transpose_apply_into(self, out, x, alpha, beta, workspace):
        A, B = self._maps[0], self._rest
        _kron_apply(A._transpose_apply_into, A.shape[::-1], B._transpose_apply_into, B.shape[::-1],
                    out, x, alpha, beta, workspace)

    def _adjoint(self) -> LinearMap:
        from pylinearmaps.maps.transpose import adjoint
        return KroneckerMap([adjoint(A) for A in self._maps])

    def _transpose(self) -> LinearMap:
        from pylinearmaps.maps.transpose import transpose
        return KroneckerMap([transpose(A) for A in self._maps])

    def __repr__(self) -> str:
        return f"KroneckerMap({', '.join(repr(A) for A in self._maps)})"


def _kron_apply(
    hook_a: Hook,
    shape_a: tuple[int, int],
    hook_b: Hook,
    shape_b: tuple[int, int],
    out: NDArray[Any],
    x: NDArray[Any],
    alpha: Any,
    beta: Any,
    workspace: Workspace,
) -> None:
    """out[:, j] = alpha * vec(A X_j B^T) + beta * out[:, j], X_j = x[:, j] as (nA, nB)."""
    (ma, na), (mb, nb) = shape_a, shape_b
    for j in range(x.shape[1]):
        X = x[:, j].reshape(na, nb)
        Y = out[:, j].reshape(ma, mb)
        with workspace.borrow((mb, na), out.dtype) as T:
            # T = B X^T, then Y = A T^T = A X B^T
            hook_b(T, X.T, 1, 0, workspace)
            hook_a(Y, T.T, alpha, beta, workspace)


class KroneckerSumMap(LinearMap):
    """
    Kronecker sum A (+) B = kron(A, I_m) + kron(I_n, B) of square operators.

    Applied as A @ X + X @ B.T without temporaries. Symmetric, hermitian
    and posdef flags hold when both operands have them.
    """

    def __init__(self, A: Any, B: Any):
        from pylinearmaps.maps.factory import linear_map
        A = linear_map(A)
        B = linear_map(B)
        check_square(A.shape, 'KroneckerSumMap')
        check_square(B.shape, 'KroneckerSumMap')
        self._maps = (A, B)

    @property
    def maps(self) -> tuple[LinearMap, LinearMap]:
        return self._maps

    @property
    def shape(self) -> tuple[int, int]:
        n = self._maps[0].shape[0] * self._maps[1].shape[0]
        return (n, n)

    @property
    def dtype(self) -> np.dtype:
        return np.result_type(*(A.dtype for A in self._maps))

    @property
    def is_symmetric(self) -> bool:
        return all(A.is_symmetric for A in self._maps)

    @property
    def is_hermitian(self) -> bool:
        return all(A.is_hermitian for A in self._maps)

    @property
    def is_posdef(self) -> bool:
        return all(A.is_posdef for A in self._maps)

    def _apply_into(self, out, x, alpha, beta, workspace):
        A, B = self._maps
        _kronsum_apply(A._apply_into, B._apply_into, A.shape[0], B.shape[0],
                       out, x, alpha, beta, workspace)

    def _adjoint_apply_into(self, out, x, alpha, beta, workspace):
        A, B = self._maps
        _kronsum_apply(A._adjoint_apply_into, B._adjoint_apply_into, A.shape[0], B.shape[0],
                       out, x, alpha, beta, workspace)

    def _transpose_apply_into(self, out, x, alpha, beta, workspace):
        A, B = self._maps
        _kronsum_apply(A._transpose_apply_into, B._transpose_apply_into, A.shape[0], B.shape[0],
                       out, x, alpha, beta, workspace)

    def _adjoint(self) -> LinearMap:
        from pylinearmaps.maps.transpose import adjoint
        A, B = self._maps
        return KroneckerSumMap(adjoint(A), adjoint(B))

    def _transpose(self) -> LinearMap:
        from pylinearmaps.maps.transpose import transpose
        A, B = self._maps
        return KroneckerSumMap(transpose(A), transpose(B))

    def __repr__(self) -> str:
        A, B = self._maps
        return f"KroneckerSumMap({A!r}, {B!r})"


def _kronsum_apply(
    hook_a: Hook,
    hook_b: Hook,
    n: int,
    m: int,
    out: NDArray[Any],
    x: NDArray[Any],
    alpha: Any,
    beta: Any,
    workspace: Workspace,
) -> None:
    for j in range(x.shape[1]):
        X = x[:, j].reshape(n, m)
        Y = out[:, j].reshape(n, m)
        hook_a(Y, X, alpha, beta, workspace)
        # X B^T = (B X^T)^T, accumulated through the transposed view of Y
        hook_b(Y.T, X.T, alpha, 1, workspace)


def kron(*maps: Any) -> KroneckerMap:
    """Lazy Kronecker product of two or more operators."""
    return KroneckerMap(maps)


def kronsum(*maps: Any) -> LinearMap:
    """
    Lazy Kronecker sum of two or more square operators.

    kronsum(A, B, C) == kronsum(kronsum(A, B), C).
    """
    from pylinearmaps.maps.factory import linear_map
    if len(maps) < 2:
        raise ValidationError("kronsum: at least two operators required")
    result = linear_map(maps[0])
    for B in maps[1:]:
        result = KroneckerSumMap(result, B)
    return result


def kronpower(A: Any, k: int) -> LinearMap:
    """A (x) A (x) ... (x) A with k factors; kronpower(A, 1) is A."""
    from pylinearmaps.maps.factory import linear_map
    _check_positive_order(k, 'kronpower')
    A = linear_map(A)
    return A if k == 1 else KroneckerMap([A] * int(k))


def kronsumpower(A: Any, k: int) -> LinearMap:
    """A (+) A (+) ... (+) A with k terms; kronsumpower(A, 1) is A."""
    from pylinearmaps.maps.factory import linear_map
    _check_positive_order(k, 'kronsumpower')
    A = linear_map(A)
    check_square(A.shape, 'kronsumpower')
    return A if k == 1 else kronsum(*([A] * int(k)))


def _check_positive_order(k: Any, name: str) -> None:
    if isinstance(k, bool) or not isinstance(k, numbers.Integral) or k < 1:
        raise ValidationError(f"{name}: order must be a positive integer, got {k!r}")

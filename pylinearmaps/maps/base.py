"""
LinearMap base class.

A LinearMap is "something that can be multiplied by a vector": it has a
shape, an element dtype and a set of property flags, and it knows how to
write alpha * A @ x + beta * out into a caller-supplied buffer. It never
needs an explicit matrix.

Concrete variants form a closed set:
    leaves:      WrappedMap, FunctionMap, UniformScalingMap
    combinators: ScaledMap, LinearCombination, TransposeMap, AdjointMap,
                 CompositeMap, BlockMap, BlockDiagonalMap, KroneckerMap,
                 KroneckerSumMap
    adapter:     InverseMap

Operator syntax builds combinators lazily; nothing is evaluated until the
operator is applied.

    >>> A = linear_map(M, symmetric=True)
    >>> S = 2 * A + B.H @ B       # lazy
    >>> y = S @ x                 # evaluated here
"""

from __future__ import annotations

import numbers
from typing import Any, Callable

import numpy as np
import scipy.sparse as sp
from numpy.typing import NDArray

from pylinearmaps.core.compute.kernels import axpby_owned_into
from pylinearmaps.core.compute.workspace import Workspace
from pylinearmaps.core.exceptions import AdjointNotDefinedError, ValidationError


class LinearMap:
    """
    Abstract lazy linear operator.

    Subclasses implement:
        shape, dtype                       (properties)
        _apply_into(out, x, alpha, beta, workspace)
    and optionally:
        _adjoint_apply_into(...)           adjoint product
        _transpose_apply_into(...)         transpose product
        _adjoint(), _transpose()           algebraic push-down
        is_symmetric, is_hermitian, is_posdef

    The apply hooks receive 2D arrays (n, k) only; the public engine in
    pylinearmaps.maps.apply turns vectors into single-column views. They
    must compute out = alpha * A @ x + beta * out, ignoring the previous
    content of out when beta == 0, and must not modify x.

    Property flags default to False. A flag set to True is a promise that
    downstream code (solvers, property inference) relies on; it is never
    verified at apply time.
    """

    # Make numpy defer to our reflected operators (ndarray @ LinearMap)
    __array_ufunc__ = None

    # === Shape and dtype ===

    @property
    def shape(self) -> tuple[int, int]:
        """(rows, cols)."""
        raise NotImplementedError

    @property
    def dtype(self) -> np.dtype:
        """Element dtype of the operator."""
        raise NotImplementedError

    @property
    def ndim(self) -> int:
        return 2

    @property
    def size(self) -> int:
        """Number of entries of the equivalent matrix."""
        m, n = self.shape
        return m * n

    @property
    def is_square(self) -> bool:
        return self.shape[0] == self.shape[1]

    @property
    def is_real(self) -> bool:
        """True if the element domain is real."""
        return not np.issubdtype(self.dtype, np.complexfloating)

    # === Property flags ===

    @property
    def is_symmetric(self) -> bool:
        return False

    @property
    def is_hermitian(self) -> bool:
        return False

    @property
    def is_posdef(self) -> bool:
        return False

    # === Apply hooks ===

    def _apply_into(
        self,
        out: NDArray[Any],
        x: NDArray[Any],
        alpha: Any,
        beta: Any,
        workspace: Workspace,
    ) -> None:
        raise NotImplementedError

    def _adjoint_apply_into(
        self,
        out: NDArray[Any],
        x: NDArray[Any],
        alpha: Any,
        beta: Any,
        workspace: Workspace,
    ) -> None:
        if self.is_hermitian:
            self._apply_into(out, x, alpha, beta, workspace)
            return
        raise AdjointNotDefinedError(
            f"{type(self).__name__}: adjoint application is not defined"
        )

    def _transpose_apply_into(
        self,
        out: NDArray[Any],
        x: NDArray[Any],
        alpha: Any,
        beta: Any,
        workspace: Workspace,
    ) -> None:
        if self.is_symmetric:
            self._apply_into(out, x, alpha, beta, workspace)
            return
        if self.is_real:
            self._adjoint_apply_into(out, x, alpha, beta, workspace)
            return
        # A^T x = conj(A^H conj(x))
        conjugated_apply_into(self._adjoint_apply_into, out, x, alpha, beta, workspace)

    # === Algebraic push-down ===

    def _adjoint(self) -> LinearMap:
        from pylinearmaps.maps.transpose import AdjointMap
        return AdjointMap(self)

    def _transpose(self) -> LinearMap:
        from pylinearmaps.maps.transpose import TransposeMap
        return TransposeMap(self)

    # === Public API ===

    def matvec(self, x: Any) -> NDArray[Any]:
        """Compute A @ x for a vector (or matrix of columns) x."""
        from pylinearmaps.maps.apply import apply
        return apply(self, x)

    def matmat(self, X: Any) -> NDArray[Any]:
        """Compute A @ X for a 2D matrix of columns X."""
        from pylinearmaps.maps.apply import apply
        return apply(self, X)

    def rmatvec(self, x: Any) -> NDArray[Any]:
        """Compute A^H @ x."""
        from pylinearmaps.maps.apply import apply
        return apply(self.H, x)

    def rmatmat(self, X: Any) -> NDArray[Any]:
        """Compute A^H @ X."""
        from pylinearmaps.maps.apply import apply
        return apply(self.H, X)

    def adjoint(self) -> LinearMap:
        """Lazy conjugate transpose."""
        from pylinearmaps.maps.transpose import adjoint
        return adjoint(self)

    def transpose(self) -> LinearMap:
        """Lazy transpose."""
        from pylinearmaps.maps.transpose import transpose
        return transpose(self)

    @property
    def H(self) -> LinearMap:
        return self.adjoint()

    @property
    def T(self) -> LinearMap:
        return self.transpose()

    def to_dense(self) -> NDArray[Any]:
        """Materialize as a dense numpy array."""
        from pylinearmaps.maps.conversion import to_dense
        return to_dense(self)

    # === Operator syntax ===

    def __call__(self, x: Any) -> NDArray[Any]:
        return self.matvec(x)

    def __add__(self, other: Any) -> LinearMap:
        other = _as_operand(other)
        if other is None:
            return NotImplemented
        from pylinearmaps.maps.linear_combination import LinearCombination
        return LinearCombination((self, other))

    def __radd__(self, other: Any) -> LinearMap:
        other = _as_operand(other)
        if other is None:
            return NotImplemented
        from pylinearmaps.maps.linear_combination import LinearCombination
        return LinearCombination((other, self))

    def __neg__(self) -> LinearMap:
        from pylinearmaps.maps.scaled import ScaledMap
        return ScaledMap(-1, self)

    def __pos__(self) -> LinearMap:
        return self

    def __sub__(self, other: Any) -> LinearMap:
        other = _as_operand(other)
        if other is None:
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other: Any) -> LinearMap:
        other = _as_operand(other)
        if other is None:
            return NotImplemented
        return other + (-self)

    def __mul__(self, other: Any) -> Any:
        if _is_scalar(other):
            from pylinearmaps.maps.scaled import ScaledMap
            return ScaledMap(other, self)
        return self.__matmul__(other)

    def __rmul__(self, other: Any) -> Any:
        if _is_scalar(other):
            from pylinearmaps.maps.scaled import ScaledMap
            return ScaledMap(other, self)
        return self.__rmatmul__(other)

    def __truediv__(self, other: Any) -> LinearMap:
        if not _is_scalar(other):
            return NotImplemented
        from pylinearmaps.maps.scaled import ScaledMap
        return ScaledMap(1 / other, self)

    def __matmul__(self, other: Any) -> Any:
        if isinstance(other, LinearMap) or sp.issparse(other):
            from pylinearmaps.maps.composition import compose
            return compose(self, other)
        if _is_scalar(other):
            raise ValidationError("scalar operand not allowed with '@', use '*'")
        return self.matvec(other)

    def __rmatmul__(self, other: Any) -> Any:
        if _is_scalar(other):
            raise ValidationError("scalar operand not allowed with '@', use '*'")
        if isinstance(other, np.ndarray) and other.ndim == 1:
            # Row vector: x @ A = A^T x
            return self.transpose().matvec(other)
        # A matrix on the left becomes a factor of a lazy product
        from pylinearmaps.maps.composition import compose
        return compose(other, self)

    def __pow__(self, k: Any) -> LinearMap:
        from pylinearmaps.maps.composition import power
        return power(self, k)

    def __repr__(self) -> str:
        flags = [
            name for name, on in (
                ('symmetric', self.is_symmetric),
                ('hermitian', self.is_hermitian),
                ('posdef', self.is_posdef),
            ) if on
        ]
        suffix = f", {'/'.join(flags)}" if flags else ""
        return f"{type(self).__name__}(shape={self.shape}, dtype={self.dtype}{suffix})"


def _is_scalar(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return value.ndim == 0 and np.issubdtype(value.dtype, np.number)
    return isinstance(value, numbers.Number) and not isinstance(value, (bool, np.bool_))


def _as_operand(value: Any) -> LinearMap | None:
    """Wrap arrays taking part in map arithmetic; None for unsupported operands."""
    if isinstance(value, LinearMap):
        return value
    if isinstance(value, np.ndarray) or sp.issparse(value):
        from pylinearmaps.maps.wrapped import WrappedMap
        return WrappedMap(value)
    return None


def conjugated_apply_into(
    hook: Callable[..., None],
    out: NDArray[Any],
    x: NDArray[Any],
    alpha: Any,
    beta: Any,
    workspace: Workspace,
) -> None:
    """
    out = alpha * conj(B @ conj(x)) + beta * out, where hook applies B.

    Used to derive transpose from adjoint application (and vice versa)
    for complex operators.
    """
    with workspace.borrow(x.shape, out.dtype) as xc:
        np.conjugate(x, out=xc)
        with workspace.borrow(out.shape, out.dtype) as tmp:
            hook(tmp, xc, 1, 0, workspace)
            np.conjugate(tmp, out=tmp)
            axpby_owned_into(alpha, tmp, beta, out)


def scalar_dtype(value: Any) -> np.dtype:
    """Inexact dtype of a scalar; Python and numpy integers count as float64."""
    dtype = np.asarray(value).dtype
    if not np.issubdtype(dtype, np.inexact):
        return np.dtype(np.float64)
    return dtype

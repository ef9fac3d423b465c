"""
CompositeMap: A_k @ ... @ A_2 @ A_1, evaluated lazily.

The chain is stored flat in application order (A_1 first). Applying it
ping-pongs between two scratch buffers sized to the largest intermediate,
so a chain of any length needs at most two temporaries; the last factor
writes straight into the caller's output.

Property flags come from structural recognition on the chain (see
pylinearmaps.maps.properties.chain_flags): A^H @ A is hermitian and
B^H @ C @ B is hermitian / positive definite when C is, whatever B is.
"""

from __future__ import annotations

import numbers
from contextlib import ExitStack
from typing import Any, Callable, Sequence

import numpy as np
from numpy.typing import NDArray

from pylinearmaps.core.compute.workspace import Workspace
from pylinearmaps.core.exceptions import ValidationError
from pylinearmaps.core.validation import check_inner_dimensions, check_square
from pylinearmaps.maps.base import LinearMap
from pylinearmaps.maps.properties import chain_flags


class CompositeMap(LinearMap):
    """
    Product of operators.

    Args:
        maps: Factors in application order, i.e. CompositeMap([B, A])
            represents A @ B. Prefer compose(A, B) or A @ B.

    Nested compositions are flattened. Inner dimensions must match
    (DimensionError otherwise).
    """

    def __init__(self, maps: Sequence[Any]):
        from pylinearmaps.maps.factory import linear_map
        flat: list[LinearMap] = []
        for A in maps:
            A = linear_map(A)
            if isinstance(A, CompositeMap):
                flat.extend(A.maps)
            else:
                flat.append(A)
        if len(flat) < 2:
            raise ValidationError("CompositeMap: at least two operators required")
        for first, then in zip(flat, flat[1:]):
            check_inner_dimensions(then.shape, first.shape, 'CompositeMap')
        self._maps = tuple(flat)

    @property
    def maps(self) -> tuple[LinearMap, ...]:
        """Factors in application order."""
        return self._maps

    @property
    def shape(self) -> tuple[int, int]:
        return (self._maps[-1].shape[0], self._maps[0].shape[1])

    @property
    def dtype(self) -> np.dtype:
        return np.result_type(*(A.dtype for A in self._maps))

    @property
    def is_symmetric(self) -> bool:
        return chain_flags(self._maps)[0]

    @property
    def is_hermitian(self) -> bool:
        return chain_flags(self._maps)[1]

    @property
    def is_posdef(self) -> bool:
        return chain_flags(self._maps)[2]

    def _apply_into(self, out, x, alpha, beta, workspace):
        steps = [(A._apply_into, A.shape[0]) for A in self._maps]
        _run_chain(steps, out, x, alpha, beta, workspace)

    def _adjoint_apply_into(self, out, x, alpha, beta, workspace):
        # (A_k ... A_1)^H = A_1^H ... A_k^H: apply A_k^H first
        steps = [(A._adjoint_apply_into, A.shape[1]) for A in reversed(self._maps)]
        _run_chain(steps, out, x, alpha, beta, workspace)

    def _transpose_apply_into(self, out, x, alpha, beta, workspace):
        steps = [(A._transpose_apply_into, A.shape[1]) for A in reversed(self._maps)]
        _run_chain(steps, out, x, alpha, beta, workspace)

    def _adjoint(self) -> LinearMap:
        from pylinearmaps.maps.transpose import adjoint
        return CompositeMap([adjoint(A) for A in reversed(self._maps)])

    def _transpose(self) -> LinearMap:
        from pylinearmaps.maps.transpose import transpose
        return CompositeMap([transpose(A) for A in reversed(self._maps)])

    def __repr__(self) -> str:
        factors = " @ ".join(repr(A) for A in reversed(self._maps))
        return f"CompositeMap({factors})"


def _run_chain(
    steps: Sequence[tuple[Callable[..., None], int]],
    out: NDArray[Any],
    x: NDArray[Any],
    alpha: Any,
    beta: Any,
    workspace: Workspace,
) -> None:
    """Apply hooks in order, intermediates in at most two scratch buffers."""
    k = x.shape[1]
    inner = steps[:-1]
    rows_max = max(rows for _, rows in inner)
    n_buffers = min(len(inner), 2)

    with ExitStack() as stack:
        buffers = [
            stack.enter_context(workspace.borrow((rows_max * k,), out.dtype))
            for _ in range(n_buffers)
        ]
        src = x
        for i, (hook, rows) in enumerate(inner):
            dst = buffers[i % 2][:rows * k].reshape(rows, k)
            hook(dst, src, 1, 0, workspace)
            src = dst
        last_hook, _ = steps[-1]
        last_hook(out, src, alpha, beta, workspace)


def compose(*operands: Any) -> LinearMap:
    """
    Lazy product operands[0] @ operands[1] @ ... @ operands[-1].

    Args:
        *operands: LinearMaps, arrays or sparse matrices, in the order they
            appear in the mathematical product

    Returns:
        The operand itself for a single operand, else a CompositeMap

    Raises:
        DimensionError: If neighboring inner dimensions differ
    """
    from pylinearmaps.maps.factory import linear_map
    if not operands:
        raise ValidationError("compose: at least one operator required")
    if len(operands) == 1:
        return linear_map(operands[0])
    return CompositeMap(list(reversed(operands)))


def power(A: Any, k: int) -> LinearMap:
    """
    Lazy matrix power A ** k for integer k >= 0.

    A ** 0 is the identity of matching order and dtype.

    Raises:
        ValidationError: If k is not a non-negative integer
        DimensionError: If A is not square
    """
    from pylinearmaps.maps.factory import linear_map
    from pylinearmaps.maps.uniformscaling import UniformScalingMap
    A = linear_map(A)
    if isinstance(k, bool) or not isinstance(k, numbers.Integral) or k < 0:
        raise ValidationError(f"power: exponent must be a non-negative integer, got {k!r}")
    check_square(A.shape, 'power')
    if k == 0:
        return UniformScalingMap(A.dtype.type(1), A.shape[0])
    if k == 1:
        return A
    return CompositeMap([A] * int(k))

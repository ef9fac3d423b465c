"""
FunctionMap: an operator defined by apply functions.

Nothing about a function can be inferred, so shape, dtype and property
flags are declared by the caller. Claims that do not hold are the caller's
responsibility; they are not checked.

Two calling conventions are supported:
    out-of-place   y = f(x)
    in-place       f(y, x) writes into the pre-sized buffer y (mutating=True)

Functions always receive 1D vectors; a matrix of columns is applied one
column at a time.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import DTypeLike

from pylinearmaps.core.compute.kernels import axpby_into, axpby_owned_into
from pylinearmaps.core.exceptions import AdjointNotDefinedError, DimensionError, ValidationError
from pylinearmaps.core.protocols import ApplyFunction, MutatingApplyFunction
from pylinearmaps.core.validation import check_shape
from pylinearmaps.maps.base import LinearMap, conjugated_apply_into
from pylinearmaps.maps.properties import resolve_flags


class FunctionMap(LinearMap):
    """
    Operator backed by a forward callable and an optional adjoint callable.

    Args:
        f: Forward apply function
        shape: (rows, cols) of the operator
        adjoint: Adjoint apply function (same convention as f), optional
        mutating: If True, f and adjoint are called as f(y, x)
        dtype: Element dtype of the operator
        symmetric: Declared symmetry
        hermitian: Declared hermitian-ness
        posdef: Declared positive-definiteness

    Without an adjoint function, adjoint/transpose application works only
    for hermitian (or symmetric) maps; otherwise it raises
    AdjointNotDefinedError when applied.
    """

    def __init__(
        self,
        f: ApplyFunction | MutatingApplyFunction,
        shape: tuple[int, int],
        *,
        adjoint: ApplyFunction | MutatingApplyFunction | None = None,
        mutating: bool = False,
        dtype: DTypeLike = np.float64,
        symmetric: bool = False,
        hermitian: bool = False,
        posdef: bool = False,
    ):
        if not callable(f):
            raise ValidationError(f"FunctionMap: f must be callable, got {type(f).__name__}")
        if adjoint is not None and not callable(adjoint):
            raise ValidationError(
                f"FunctionMap: adjoint must be callable, got {type(adjoint).__name__}"
            )
        dtype = np.dtype(dtype)
        if not np.issubdtype(dtype, np.inexact):
            raise ValidationError(f"FunctionMap: dtype must be real or complex floating, got {dtype}")

        self._f = f
        self._fc = adjoint
        self._shape = check_shape(shape, 'shape')
        self._dtype = dtype
        self._mutating = bool(mutating)
        self._symmetric, self._hermitian, self._posdef = resolve_flags(
            self._shape,
            not np.issubdtype(dtype, np.complexfloating),
            symmetric=symmetric,
            hermitian=hermitian,
            posdef=posdef,
            name='FunctionMap',
        )

    @property
    def shape(self) -> tuple[int, int]:
        return self._shape

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def is_symmetric(self) -> bool:
        return self._symmetric

    @property
    def is_hermitian(self) -> bool:
        return self._hermitian

    @property
    def is_posdef(self) -> bool:
        return self._posdef

    @property
    def is_mutating(self) -> bool:
        return self._mutating

    @property
    def has_adjoint(self) -> bool:
        return self._fc is not None

    def _apply_into(self, out, x, alpha, beta, workspace):
        self._call_columns(self._f, out, x, alpha, beta, workspace)

    def _adjoint_apply_into(self, out, x, alpha, beta, workspace):
        if self._fc is not None:
            self._call_columns(self._fc, out, x, alpha, beta, workspace)
        elif self._hermitian:
            self._apply_into(out, x, alpha, beta, workspace)
        elif self._symmetric:
            # A^H = conj(A) for symmetric A
            conjugated_apply_into(self._apply_into, out, x, alpha, beta, workspace)
        else:
            raise AdjointNotDefinedError(
                "FunctionMap: no adjoint function given and map is not declared "
                "hermitian or symmetric"
            )

    def _call_columns(self, fn, out, x, alpha, beta, workspace):
        n_rows = out.shape[0]
        for j in range(x.shape[1]):
            xj = x[:, j]
            oj = out[:, j]
            if not self._mutating:
                yj = np.asarray(fn(xj))
                if yj.shape != (n_rows,):
                    raise DimensionError(
                        f"FunctionMap: function returned shape {yj.shape}, expected ({n_rows},)"
                    )
                axpby_into(alpha, yj, beta, oj, workspace)
            elif alpha == 1 and beta == 0 and oj.flags.c_contiguous:
                fn(oj, xj)
            else:
                with workspace.borrow((n_rows,), out.dtype) as tmp:
                    fn(tmp, xj)
                    axpby_owned_into(alpha, tmp, beta, oj)

    def __repr__(self) -> str:
        name = getattr(self._f, '__name__', type(self._f).__name__)
        return f"FunctionMap({name}, shape={self._shape}, dtype={self._dtype})"

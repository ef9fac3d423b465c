"""
Lazy linear maps.

This module provides the operator algebra: leaf operators wrapping
matrices or functions, combinators that build new operators from existing
ones without evaluating anything, and the apply engine that evaluates a
composite operator against vectors.

Public API:
    linear_map(obj, ...) -> LinearMap
    apply(A, x) / apply_into(out, A, x, alpha, beta)

Example:
    >>> from pylinearmaps.maps import linear_map, kron, inverse
    >>> A = linear_map(M, symmetric=True)
    >>> S = C @ inverse(A, solver='cg') @ B
    >>> y = S @ b
"""

from pylinearmaps.maps.base import LinearMap
from pylinearmaps.maps.wrapped import WrappedMap
from pylinearmaps.maps.function import FunctionMap
from pylinearmaps.maps.uniformscaling import UniformScalingMap, identity
from pylinearmaps.maps.factory import linear_map
from pylinearmaps.maps.scaled import ScaledMap
from pylinearmaps.maps.linear_combination import LinearCombination, linear_combination
from pylinearmaps.maps.transpose import AdjointMap, TransposeMap, adjoint, transpose
from pylinearmaps.maps.composition import CompositeMap, compose, power
from pylinearmaps.maps.blockmap import (
    BlockMap,
    BlockDiagonalMap,
    hstack,
    vstack,
    hvcat,
    block,
    block_diag,
)
from pylinearmaps.maps.kronecker import (
    KroneckerMap,
    KroneckerSumMap,
    kron,
    kronsum,
    kronpower,
    kronsumpower,
)
from pylinearmaps.maps.inverse import InverseMap, inverse
from pylinearmaps.maps.apply import apply, apply_into
from pylinearmaps.maps.conversion import to_dense, to_sparse, as_scipy_operator

__all__ = [
    # Base and leaves
    "LinearMap",
    "WrappedMap",
    "FunctionMap",
    "UniformScalingMap",
    "identity",
    "linear_map",
    # Combinators
    "ScaledMap",
    "LinearCombination",
    "linear_combination",
    "AdjointMap",
    "TransposeMap",
    "adjoint",
    "transpose",
    "CompositeMap",
    "compose",
    "power",
    "BlockMap",
    "BlockDiagonalMap",
    "hstack",
    "vstack",
    "hvcat",
    "block",
    "block_diag",
    "KroneckerMap",
    "KroneckerSumMap",
    "kron",
    "kronsum",
    "kronpower",
    "kronsumpower",
    # Solver-backed
    "InverseMap",
    "inverse",
    # Engine
    "apply",
    "apply_into",
    # Conversions
    "to_dense",
    "to_sparse",
    "as_scipy_operator",
]

"""
pylinearmaps: lazy linear operators for Python.

A LinearMap is anything that can be multiplied by a vector. Sums, scalar
multiples, adjoints, products, block concatenations, Kronecker products
and sums, and solver-backed inverses of LinearMaps are again LinearMaps,
evaluated only when applied, with symmetric / hermitian /
positive-definite properties propagated through the composition tree.

Submodules:
    maps: Operator algebra and apply engine
    solvers: Solver strategies for inverse operators (scipy-backed)
    core: Exceptions, validation, scratch buffers, tolerances
"""

__version__ = "0.1.0"

from pylinearmaps.maps import (
    LinearMap,
    WrappedMap,
    FunctionMap,
    UniformScalingMap,
    ScaledMap,
    LinearCombination,
    AdjointMap,
    TransposeMap,
    CompositeMap,
    BlockMap,
    BlockDiagonalMap,
    KroneckerMap,
    KroneckerSumMap,
    InverseMap,
    linear_map,
    identity,
    linear_combination,
    adjoint,
    transpose,
    compose,
    power,
    hstack,
    vstack,
    hvcat,
    block,
    block_diag,
    kron,
    kronsum,
    kronpower,
    kronsumpower,
    inverse,
    apply,
    apply_into,
    to_dense,
    to_sparse,
    as_scipy_operator,
)
from pylinearmaps.core.compute.workspace import Workspace
from pylinearmaps import solvers

__all__ = [
    "__version__",
    "LinearMap",
    "WrappedMap",
    "FunctionMap",
    "UniformScalingMap",
    "ScaledMap",
    "LinearCombination",
    "AdjointMap",
    "TransposeMap",
    "CompositeMap",
    "BlockMap",
    "BlockDiagonalMap",
    "KroneckerMap",
    "KroneckerSumMap",
    "InverseMap",
    "linear_map",
    "identity",
    "linear_combination",
    "adjoint",
    "transpose",
    "compose",
    "power",
    "hstack",
    "vstack",
    "hvcat",
    "block",
    "block_diag",
    "kron",
    "kronsum",
    "kronpower",
    "kronsumpower",
    "inverse",
    "apply",
    "apply_into",
    "to_dense",
    "to_sparse",
    "as_scipy_operator",
    "Workspace",
    "solvers",
]

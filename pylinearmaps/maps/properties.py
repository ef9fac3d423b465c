"""
Property inference for linear maps.

Every combinator derives its symmetric / hermitian / positive-definite
flags from its children through fixed rules. The rules may under-claim
(a flag reported False for an operator that happens to have the property)
but must never over-claim.

Two kinds of rules live here:

    flag rules       per-combinator algebra (linear combination, chains)
    structural rules recognition of A^H A and B^H C B shapes on a
                     flattened composition chain, by object identity,
                     never by numeric checks

Leaves take their flags from the caller through resolve_flags().
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from pylinearmaps.core.exceptions import ValidationError


def resolve_flags(
    shape: tuple[int, int],
    is_real: bool,
    *,
    symmetric: bool,
    hermitian: bool,
    posdef: bool,
    name: str,
) -> tuple[bool, bool, bool]:
    """
    Normalize caller-declared flags for a leaf operator.

    Claims are taken at face value (verifying them is the caller's
    responsibility), except that for real operators symmetric and
    hermitian are the same property.

    Args:
        shape: Operator shape
        is_real: Whether the element domain is real
        symmetric: Declared symmetry
        hermitian: Declared hermitian-ness
        posdef: Declared positive-definiteness
        name: Operator name for error messages

    Returns:
        (symmetric, hermitian, posdef)

    Raises:
        ValidationError: If a flag is claimed for a non-square operator
    """
    symmetric, hermitian, posdef = bool(symmetric), bool(hermitian), bool(posdef)
    if (symmetric or hermitian or posdef) and shape[0] != shape[1]:
        raise ValidationError(
            f"{name}: symmetric/hermitian/posdef claimed for non-square shape {shape}"
        )
    if is_real:
        symmetric = hermitian = symmetric or hermitian
    return symmetric, hermitian, posdef


def is_real_scalar(value: Any) -> bool:
    return bool(np.imag(value) == 0)


# ═══════════════════════════════════════════════════════════════════════
# Linear combinations
# ═══════════════════════════════════════════════════════════════════════


def split_term(lmap: Any) -> tuple[Any, Any]:
    """Return (coefficient, base map) of a linear-combination term."""
    from pylinearmaps.maps.scaled import ScaledMap
    if isinstance(lmap, ScaledMap):
        return lmap.scalar, lmap.lmap
    return 1, lmap


def combination_flags(terms: Sequence[Any]) -> tuple[bool, bool, bool]:
    """
    Flags of sum_i c_i * A_i.

    symmetric: every A_i symmetric and every c_i real
    hermitian: every A_i hermitian and every c_i real
    posdef:    every A_i posdef, every c_i real and >= 0, some c_i > 0
    """
    pairs = [split_term(t) for t in terms]
    all_real = all(is_real_scalar(c) for c, _ in pairs)
    symmetric = all_real and all(A.is_symmetric for _, A in pairs)
    hermitian = all_real and all(A.is_hermitian for _, A in pairs)
    posdef = (
        all_real
        and all(A.is_posdef for _, A in pairs)
        and all(np.real(c) >= 0 for c, _ in pairs)
        and any(np.real(c) > 0 for c, _ in pairs)
    )
    return symmetric, hermitian, posdef


# ═══════════════════════════════════════════════════════════════════════
# Structural recognition on composition chains
# ═══════════════════════════════════════════════════════════════════════


def is_adjoint_of(candidate: Any, lmap: Any) -> bool:
    """
    True if candidate is structurally the adjoint of lmap.

    Identity based: recognizes the shapes produced by adjoint() itself
    (wrapper unwrapping and push-down through combinators).
    """
    return _is_flipped(candidate, lmap, conjugate=True)


def is_transpose_of(candidate: Any, lmap: Any) -> bool:
    """True if candidate is structurally the transpose of lmap."""
    return _is_flipped(candidate, lmap, conjugate=False)


def _is_flipped(candidate: Any, lmap: Any, conjugate: bool) -> bool:
    from pylinearmaps.maps.transpose import AdjointMap, TransposeMap
    from pylinearmaps.maps.scaled import ScaledMap
    from pylinearmaps.maps.uniformscaling import UniformScalingMap
    from pylinearmaps.maps.linear_combination import LinearCombination
    from pylinearmaps.maps.composition import CompositeMap
    from pylinearmaps.maps.kronecker import KroneckerMap, KroneckerSumMap
    from pylinearmaps.maps.blockmap import BlockDiagonalMap
    from pylinearmaps.maps.inverse import InverseMap

    # Wrapper classes that realize this flip, and the other flip
    # (which coincides for real operators)
    same, other = (AdjointMap, TransposeMap) if conjugate else (TransposeMap, AdjointMap)
    real = candidate.is_real and lmap.is_real

    if candidate is lmap:
        return lmap.is_hermitian if conjugate else lmap.is_symmetric
    if isinstance(candidate, same) and candidate.lmap is lmap:
        return True
    if isinstance(lmap, same) and lmap.lmap is candidate:
        return True
    if real and isinstance(candidate, other) and candidate.lmap is lmap:
        return True
    if real and isinstance(lmap, other) and lmap.lmap is candidate:
        return True

    if type(candidate) is not type(lmap):
        return False

    if isinstance(candidate, ScaledMap):
        expected = np.conj(lmap.scalar) if conjugate else lmap.scalar
        return candidate.scalar == expected and _is_flipped(candidate.lmap, lmap.lmap, conjugate)
    if isinstance(candidate, UniformScalingMap):
        expected = np.conj(lmap.scalar) if conjugate else lmap.scalar
        return candidate.shape == lmap.shape and candidate.scalar == expected
    if isinstance(candidate, InverseMap):
        return _is_flipped(candidate.lmap, lmap.lmap, conjugate)
    if isinstance(candidate, CompositeMap):
        # (A_k ... A_1)^H = A_1^H ... A_k^H
        return len(candidate.maps) == len(lmap.maps) and all(
            _is_flipped(c, a, conjugate)
            for c, a in zip(candidate.maps, reversed(lmap.maps))
        )
    if isinstance(candidate, (LinearCombination, KroneckerMap, KroneckerSumMap, BlockDiagonalMap)):
        return len(candidate.maps) == len(lmap.maps) and all(
            _is_flipped(c, a, conjugate) for c, a in zip(candidate.maps, lmap.maps)
        )
    return False


def chain_flags(maps: Sequence[Any]) -> tuple[bool, bool, bool]:
    """
    Flags of a composition chain, maps given in application order.

    The chain [B_1, ..., B_j, C, B_j', ..., B_1'] (applied left to right)
    is peeled from both ends while the outer map is the adjoint (or
    transpose) of the inner one:

        fully peeled, even length   A^H A    -> hermitian, posdef if
                                               every factor of A is posdef
        peeled to one middle map C  B^H C B  -> hermitian if C is,
                                               posdef if C is hermitian
                                               and posdef
    Transpose pairs give the symmetric analogue. For real chains the two
    coincide. Anything else reports no flags.
    """
    real = all(A.is_real for A in maps)
    hermitian, posdef = _peel(maps, conjugate=True)
    symmetric, _ = _peel(maps, conjugate=False)
    if real:
        symmetric = hermitian = symmetric or hermitian
    return symmetric, hermitian, posdef


def _peel(maps: Sequence[Any], conjugate: bool) -> tuple[bool, bool]:
    """Return (structural symmetry or hermitian-ness, posdef) of a chain."""
    flipped = is_adjoint_of if conjugate else is_transpose_of
    lo, hi = 0, len(maps) - 1
    peeled = 0
    while lo < hi and flipped(maps[hi], maps[lo]):
        lo += 1
        hi -= 1
        peeled += 1

    if peeled == 0:
        return False, False
    if lo > hi:
        # B^H B is only semi-definite unless B is injective, which posdef factors are
        return True, all(A.is_posdef for A in maps[:peeled])
    if lo == hi:
        C = maps[lo]
        if conjugate:
            return C.is_hermitian, C.is_hermitian and C.is_posdef
        return C.is_symmetric, False
    return False, False

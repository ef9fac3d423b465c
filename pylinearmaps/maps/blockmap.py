"""
Block operators: concatenation and block-diagonal arrangement.

    hstack(A, B)                 [A B]
    vstack(A, B)                 [A; B]
    hvcat((2, 1), A, B, C)       [A B; C]       (blocks per block row)
    block([[A, B], [C]])         same, nested-list form
    block_diag(A, B)             [A 0; 0 B]

Blocks within one block row must have the same number of rows; every block
row must add up to the same number of columns. Blocks may differ in width
from row to row, so the layout is not necessarily a grid. Arrays and sparse
matrices are wrapped automatically.
"""

from __future__ import annotations

from itertools import accumulate
from typing import Any, Sequence

import numpy as np

from pylinearmaps.core.compute.kernels import scale_into
from pylinearmaps.core.exceptions import DimensionError, ValidationError
from pylinearmaps.maps.base import LinearMap


class BlockMap(LinearMap):
    """
    Block-structured operator built by concatenation.

    Args:
        rows: Number of blocks in each block row
        maps: Blocks in row-major order (sum(rows) of them)

    No property flags are inferred for concatenations. The adjoint and
    transpose are applied through the block layout, without building a
    transposed block structure.
    """

    def __init__(self, rows: Sequence[int], maps: Sequence[Any]):
        from pylinearmaps.maps.factory import linear_map
        rows = tuple(int(r) for r in rows)
        maps = tuple(linear_map(A) for A in maps)
        if not rows or any(r < 1 for r in rows):
            raise ValidationError(f"BlockMap: every block row needs at least one block, got rows={rows}")
        if sum(rows) != len(maps):
            raise ValidationError(
                f"BlockMap: rows={rows} describe {sum(rows)} blocks, got {len(maps)}"
            )

        layout = []
        start = 0
        n_cols = None
        row_offset = 0
        for i, count in enumerate(rows):
            row_maps = maps[start:start + count]
            start += count
            heights = {A.shape[0] for A in row_maps}
            if len(heights) != 1:
                shapes = ", ".join(str(A.shape) for A in row_maps)
                raise DimensionError(
                    f"BlockMap: blocks in block row {i} must have equal row counts, got {shapes}"
                )
            height = heights.pop()
            col_edges = [0] + list(accumulate(A.shape[1] for A in row_maps))
            if n_cols is None:
                n_cols = col_edges[-1]
            elif col_edges[-1] != n_cols:
                raise DimensionError(
                    f"BlockMap: block row {i} has {col_edges[-1]} columns, expected {n_cols}"
                )
            for j, (A, c0, c1) in enumerate(zip(row_maps, col_edges, col_edges[1:])):
                layout.append((A, row_offset, row_offset + height, c0, c1, j == 0))
            row_offset += height

        self._rows = rows
        self._maps = maps
        self._layout = tuple(layout)
        self._shape = (row_offset, n_cols)

    @property
    def rows(self) -> tuple[int, ...]:
        return self._rows

    @property
    def maps(self) -> tuple[LinearMap, ...]:
        return self._maps

    @property
    def shape(self) -> tuple[int, int]:
        return self._shape

    @property
    def dtype(self) -> np.dtype:
        return np.result_type(*(A.dtype for A in self._maps))

    def _apply_into(self, out, x, alpha, beta, workspace):
        for A, r0, r1, c0, c1, first in self._layout:
            # The first block of each block row initializes that row range
            A._apply_into(out[r0:r1], x[c0:c1], alpha, beta if first else 1, workspace)

    def _adjoint_apply_into(self, out, x, alpha, beta, workspace):
        scale_into(out, beta)
        for A, r0, r1, c0, c1, _ in self._layout:
            A._adjoint_apply_into(out[c0:c1], x[r0:r1], alpha, 1, workspace)

    def _transpose_apply_into(self, out, x, alpha, beta, workspace):
        scale_into(out, beta)
        for A, r0, r1, c0, c1, _ in self._layout:
            A._transpose_apply_into(out[c0:c1], x[r0:r1], alpha, 1, workspace)

    def __repr__(self) -> str:
        return f"BlockMap(rows={self._rows}, shape={self._shape}, dtype={self.dtype})"


class BlockDiagonalMap(LinearMap):
    """
    Block-diagonal operator diag(A_1, ..., A_k).

    Blocks may be rectangular. Flags hold when every block has them.
    """

    def __init__(self, maps: Sequence[Any]):
        from pylinearmaps.maps.factory import linear_map
        maps = tuple(linear_map(A) for A in maps)
        if not maps:
            raise ValidationError("BlockDiagonalMap: at least one block required")
        row_edges = [0] + list(accumulate(A.shape[0] for A in maps))
        col_edges = [0] + list(accumulate(A.shape[1] for A in maps))
        self._maps = maps
        self._layout = tuple(
            (A, r0, r1, c0, c1)
            for A, r0, r1, c0, c1 in zip(maps, row_edges, row_edges[1:], col_edges, col_edges[1:])
        )
        self._shape = (row_edges[-1], col_edges[-1])

    @property
    def maps(self) -> tuple[LinearMap, ...]:
        return self._maps

    @property
    def shape(self) -> tuple[int, int]:
        return self._shape

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
        for A, r0, r1, c0, c1 in self._layout:
            A._apply_into(out[r0:r1], x[c0:c1], alpha, beta, workspace)

    def _adjoint_apply_into(self, out, x, alpha, beta, workspace):
        for A, r0, r1, c0, c1 in self._layout:
            A._adjoint_apply_into(out[c0:c1], x[r0:r1], alpha, beta, workspace)

    def _transpose_apply_into(self, out, x, alpha, beta, workspace):
        for A, r0, r1, c0, c1 in self._layout:
            A._transpose_apply_into(out[c0:c1], x[r0:r1], alpha, beta, workspace)

    def _adjoint(self) -> LinearMap:
        from pylinearmaps.maps.transpose import adjoint
        return BlockDiagonalMap([adjoint(A) for A in self._maps])

    def _transpose(self) -> LinearMap:
        from pylinearmaps.maps.transpose import transpose
        return BlockDiagonalMap([transpose(A) for A in self._maps])

    def __repr__(self) -> str:
        return f"BlockDiagonalMap({', '.join(repr(A) for A in self._maps)})"


def hstack(*maps: Any) -> BlockMap:
    """Horizontal concatenation [A B ...]; row counts must agree."""
    return BlockMap((len(maps),), maps)


def vstack(*maps: Any) -> BlockMap:
    """Vertical concatenation [A; B; ...]; column counts must agree."""
    return BlockMap((1,) * len(maps), maps)


def hvcat(rows: Sequence[int], *maps: Any) -> BlockMap:
    """
    Horizontal and vertical concatenation in one call.

    Args:
        rows: Number of blocks in each block row
        *maps: Blocks in row-major order

    Example:
        hvcat((2, 1), A, B, C)   # [A B; C]
    """
    return BlockMap(rows, maps)


def block(blocks: Sequence[Sequence[Any]]) -> BlockMap:
    """
    Nested-list form of hvcat, in the spirit of numpy.block.

    Example:
        block([[A, B], [C]])     # [A B; C]
    """
    rows = []
    maps = []
    for row in blocks:
        if isinstance(row, (LinearMap, np.ndarray)):
            raise ValidationError("block: expected a list of block rows (list of lists)")
        rows.append(len(row))
        maps.extend(row)
    return BlockMap(rows, maps)


def block_diag(*maps: Any) -> BlockDiagonalMap:
    """Block-diagonal operator diag(A_1, ..., A_k)."""
    return BlockDiagonalMap(maps)

"""
Scratch-buffer pool for in-place operator application.

Composite operators need temporaries (the intermediate vector of a
composition, the partial product of a Kronecker map, ...). Rather than
allocating one buffer per node per call, the apply engine borrows flat
buffers from a Workspace and hands them back when the node is done.
Freed buffers are reused by later nodes, so the number of live buffers is
bounded by the nesting depth of the tree rather than by its node count.
"""

import logging
import math
from contextlib import contextmanager
from typing import Any, Iterator

import numpy as np
from numpy.typing import DTypeLike, NDArray

logger = logging.getLogger(__name__)


class Workspace:
    """
    Pool of reusable scratch buffers.

    Buffers are flat arrays; a borrow hands out a reshaped view of the
    first prod(shape) elements of the smallest free buffer that is large
    enough, and allocates a new one only when none fits. The new buffer
    replaces the largest free buffer of that dtype. A buffer of a different
    dtype is never reused, since views cannot reinterpret it.

    Usage:
        ws = Workspace()

        with ws.borrow((n, k), np.float64) as tmp:
            B._apply_into(tmp, x, 1, 0, ws)
            A._apply_into(out, tmp, alpha, beta, ws)

        ws.n_allocations  # number of np.empty calls made so far

    A Workspace is not thread-safe. Pass one per thread when applying
    operators concurrently.
    """

    def __init__(self):
        self._free: list[NDArray[Any]] = []
        self._n_allocations = 0
        self._n_borrowed = 0
        self._peak_borrowed = 0
        self._allocated_bytes = 0

    @contextmanager
    def borrow(self, shape: tuple[int, ...], dtype: DTypeLike) -> Iterator[NDArray[Any]]:
        """
        Borrow an uninitialized buffer of the given shape and dtype.

        Args:
            shape: Shape of the requested view
            dtype: Element dtype

        Yields:
            Writable C-contiguous array; its content is undefined on entry
        """
        dtype = np.dtype(dtype)
        size = math.prod(shape)
        flat = self._take(size, dtype)
        self._n_borrowed += 1
        self._peak_borrowed = max(self._peak_borrowed, self._n_borrowed)
        try:
            yield flat[:size].reshape(shape)
        finally:
            self._n_borrowed -= 1
            self._free.append(flat)

    def _take(self, size: int, dtype: np.dtype) -> NDArray[Any]:
        best = None
        for i, buf in enumerate(self._free):
            if buf.dtype == dtype and buf.size >= size:
                if best is None or buf.size < self._free[best].size:
                    best = i
        if best is not None:
            return self._free.pop(best)

        # The new buffer replaces the largest same-dtype one that was too small
        smaller = [i for i, buf in enumerate(self._free) if buf.dtype == dtype]
        if smaller:
            dropped = self._free.pop(max(smaller, key=lambda i: self._free[i].size))
            logger.debug("workspace dropped buffer: %d x %s", dropped.size, dtype)

        buf = np.empty(size, dtype=dtype)
        self._n_allocations += 1
        self._allocated_bytes += buf.nbytes
        logger.debug(
            "workspace allocated buffer %d: %d x %s (%d bytes total)",
            self._n_allocations, size, dtype, self._allocated_bytes,
        )
        return buf

    @property
    def n_allocations(self) -> int:
        """Number of buffers allocated over the lifetime of this pool."""
        return self._n_allocations

    @property
    def n_buffers(self) -> int:
        """Number of buffers currently held by the pool (free ones)."""
        return len(self._free)

    @property
    def peak_borrowed(self) -> int:
        """Largest number of buffers simultaneously on loan."""
        return self._peak_borrowed

    @property
    def allocated_bytes(self) -> int:
        """Total bytes allocated by this pool."""
        return self._allocated_bytes

    def clear(self) -> None:
        """Drop every pooled buffer. Borrowed buffers return to the pool as usual."""
        self._free.clear()

    def __repr__(self) -> str:
        return (
            f"Workspace(buffers={len(self._free)}, allocations={self._n_allocations}, "
            f"bytes={self._allocated_bytes})"
        )

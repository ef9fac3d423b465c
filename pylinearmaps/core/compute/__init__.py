"""
Shared compute infrastructure for pylinearmaps.

This module provides the scratch-buffer pool, in-place kernels and
tolerance tiers shared by every operator variant and solver strategy.

IMPORTANT: This is NOT where operator variants live. Those go in
pylinearmaps.maps. This module contains shared NUMERIC infrastructure.

Submodules:
    workspace: Reusable scratch buffers for in-place application
    kernels: axpby-style in-place updates
    tolerances: Numerical tolerance tiers
"""

from pylinearmaps.core.compute.workspace import Workspace
from pylinearmaps.core.compute.kernels import axpby_into, axpby_owned_into, scale_into
from pylinearmaps.core.compute.tolerances import (
    ToleranceTier,
    FP64,
    FP32,
    SOLVER_DEFAULT,
    PROPERTY_CHECK,
    select_tolerance,
)

__all__ = [
    # Scratch buffers
    "Workspace",
    # Kernels
    "axpby_into",
    "axpby_owned_into",
    "scale_into",
    # Tolerances
    "ToleranceTier",
    "FP64",
    "FP32",
    "SOLVER_DEFAULT",
    "PROPERTY_CHECK",
    "select_tolerance",
]

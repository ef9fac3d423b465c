"""
Solver selection by name.

InverseMap accepts either a Solver callable or one of the names below.
"""

from typing import Literal

from pylinearmaps.core.protocols import Solver
from pylinearmaps.solvers.direct import cholesky, direct
from pylinearmaps.solvers.iterative import bicgstab, cg, gmres, minres


# Type alias for solver selection
SolverChoice = Literal['cg', 'minres', 'gmres', 'bicgstab', 'direct', 'cholesky']

_SOLVERS: dict[str, Solver] = {
    'cg': cg,
    'minres': minres,
    'gmres': gmres,
    'bicgstab': bicgstab,
    'direct': direct,
    'cholesky': cholesky,
}


def get_solver(choice: SolverChoice | Solver) -> Solver:
    """
    Resolve a solver choice to a Solver callable.

    Args:
        choice: Registered name or any callable solver(A, b, out)

    Returns:
        Solver callable

    Raises:
        ValueError: If the name is unknown or choice is neither a name
            nor a callable
    """
    if isinstance(choice, str):
        try:
            return _SOLVERS[choice]
        except KeyError:
            raise ValueError(
                f"Unknown solver: {choice!r}, expected one of {sorted(_SOLVERS)}"
            ) from None
    if callable(choice):
        return choice
    raise ValueError(f"Unknown solver: {choice!r}")


def available_solvers() -> tuple[str, ...]:
    """Names accepted by get_solver()."""
    return tuple(sorted(_SOLVERS))

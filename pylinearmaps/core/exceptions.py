"""
Exception hierarchy for pylinearmaps.

All exceptions inherit from LinearMapsError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class LinearMapsError(Exception):
    """Base exception for all pylinearmaps errors."""
    pass


class ValidationError(LinearMapsError):
    """
    Input validation failed.

    Raised when user-provided inputs (arrays, scalars, property claims)
    fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Operator or array dimensions are incorrect or inconsistent.

    Raised when operands of a combinator are not conformable, or when a
    vector passed to an operator does not match its column count.
    """
    pass


class AdjointNotDefinedError(LinearMapsError):
    """
    Adjoint or transpose application is not available.

    Raised when a function-backed map without an adjoint callable is
    applied through its adjoint or transpose.
    """
    pass


class NumericalError(LinearMapsError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when a direct solve requires invertibility but the operator
    is singular or numerically rank-deficient.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not positive definite.

    Raised when an operation requires a positive definite operator
    (e.g., Cholesky-based solve) but the operator fails this requirement.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        min_eigenvalue: Minimum eigenvalue, if computed
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        min_eigenvalue: float | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.min_eigenvalue = min_eigenvalue


class ConvergenceError(LinearMapsError):
    """
    Iterative solver failed to converge.

    Raised when an iterative method (CG, MINRES, GMRES) fails to meet its
    tolerance within the iteration budget.

    Attributes:
        iterations: Number of iterations completed
        final_residual: Relative residual at termination, if computed
        reason: Why convergence failed (e.g., 'max_iterations', 'breakdown')
        threshold: The tolerance that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_residual: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_residual = final_residual
        self.reason = reason
        self.threshold = threshold

"""
Input validation utilities for pylinearmaps.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently broadcasting,
reshaping, or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes and
      integer -> float64 promotion)
    - No broadcasting of mismatched operands
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numbers
from typing import Any

import numpy as np
import scipy.sparse as sp
from numpy.typing import ArrayLike, NDArray

from pylinearmaps.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.inexact[Any]]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).
    Integer input is promoted to float64; real and complex floating dtypes
    are kept as they are.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with inexact (real or complex floating) dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    return _check_numeric_dtype(result, name)


def check_operand(matrix: Any, name: str) -> Any:
    """
    Validate a dense or sparse matrix to be wrapped as an operator.

    scipy.sparse inputs stay sparse; everything else goes through
    check_array. The result is always 2-dimensional.

    Args:
        matrix: numpy array, array-like or scipy.sparse matrix/array
        name: Parameter name for error messages

    Returns:
        numpy.ndarray or scipy.sparse object with inexact dtype

    Raises:
        ValidationError: If input is non-numeric
        DimensionError: If input is not 2D
    """
    if sp.issparse(matrix):
        matrix = _check_numeric_dtype(matrix, name)
    else:
        matrix = check_array(matrix, name)
    check_2d(matrix, name)
    return matrix


def _check_numeric_dtype(array: Any, name: str) -> Any:
    if array.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    # Reject non-numeric dtypes (strings, bytes, datetime, bool, etc.)
    if not np.issubdtype(array.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {array.dtype}, expected numeric data"
        )

    # Integer data is promoted; complex stays complex
    if not np.issubdtype(array.dtype, np.inexact):
        array = array.astype(np.float64)

    return array


def check_ndim(array: Any, ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Args:
        array: Array to check
        ndim: Required number of dimensions
        name: Parameter name for error messages

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_2d(array: Any, name: str) -> None:
    """
    Verify array is 2-dimensional.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        DimensionError: If array is not 2D
    """
    check_ndim(array, 2, name)


def check_scalar(value: Any, name: str) -> numbers.Number:
    """
    Verify value is a real or complex scalar.

    Zero-dimensional numpy arrays are unwrapped; booleans are rejected.

    Args:
        value: Candidate scalar
        name: Parameter name for error messages

    Returns:
        The scalar as a Python or numpy number

    Raises:
        ValidationError: If value is not a numeric scalar
    """
    if isinstance(value, np.ndarray) and value.ndim == 0:
        value = value[()]
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Number):
        raise ValidationError(
            f"{name}: expected a real or complex scalar, got {type(value).__name__}"
        )
    return value


def check_shape(shape: Any, name: str) -> tuple[int, int]:
    """
    Verify shape is a pair of non-negative integers.

    Args:
        shape: Candidate (rows, cols) pair
        name: Parameter name for error messages

    Returns:
        The shape as a tuple of two Python ints

    Raises:
        ValidationError: If shape is malformed
    """
    try:
        m, n = shape
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name}: expected (rows, cols), got {shape!r}") from e
    for dim in (m, n):
        if isinstance(dim, (bool, np.bool_)) or not isinstance(dim, numbers.Integral) or dim < 0:
            raise ValidationError(
                f"{name}: dimensions must be non-negative integers, got {shape!r}"
            )
    return int(m), int(n)


def check_square(shape: tuple[int, int], name: str) -> None:
    """
    Verify an operator shape is square.

    Args:
        shape: Operator shape
        name: Parameter name for error messages

    Raises:
        DimensionError: If rows != cols
    """
    if shape[0] != shape[1]:
        raise DimensionError(f"{name}: expected a square operator, got shape {shape}")


def check_same_shape(shapes: list[tuple[int, int]], name: str) -> None:
    """
    Verify all operand shapes are identical (sum-type combinators).

    Args:
        shapes: Operand shapes in order
        name: Combinator name for error messages

    Raises:
        DimensionError: If any shape differs from the first
    """
    if len(set(shapes)) > 1:
        details = ", ".join(str(s) for s in shapes)
        raise DimensionError(f"{name}: operand shapes must match, got {details}")


def check_inner_dimensions(
    left: tuple[int, int],
    right: tuple[int, int],
    name: str,
) -> None:
    """
    Verify left @ right is defined.

    Args:
        left: Shape of the operator applied last
        right: Shape of the operator applied first
        name: Combinator name for error messages

    Raises:
        DimensionError: If left cols != right rows
    """
    if left[1] != right[0]:
        raise DimensionError(
            f"{name}: inner dimensions must match, got {left} @ {right}"
        )


def check_input_vector(x: NDArray, n_cols: int, name: str) -> None:
    """
    Verify x can be fed to an operator with n_cols columns.

    Accepts a 1D vector of length n_cols or a 2D matrix whose columns
    are such vectors.

    Args:
        x: Input array
        n_cols: Operator column count
        name: Parameter name for error messages

    Raises:
        DimensionError: If x is not 1D/2D or has the wrong leading dimension
    """
    if x.ndim not in (1, 2):
        raise DimensionError(
            f"{name}: expected 1D vector or 2D matrix of columns, got {x.ndim}D with shape {x.shape}"
        )
    if x.shape[0] != n_cols:
        raise DimensionError(
            f"{name}: leading dimension {x.shape[0]} does not match operator columns {n_cols}"
        )


def check_output(
    out: NDArray,
    shape: tuple[int, ...],
    dtype: np.dtype,
    name: str,
) -> None:
    """
    Verify a caller-supplied output buffer can receive a result.

    Args:
        out: Output buffer
        shape: Required shape
        dtype: Dtype of the result to be stored
        name: Parameter name for error messages

    Raises:
        ValidationError: If out is not an ndarray or cannot hold dtype
        DimensionError: If out has the wrong shape
    """
    if not isinstance(out, np.ndarray):
        raise ValidationError(f"{name}: expected numpy.ndarray, got {type(out).__name__}")
    if out.shape != tuple(shape):
        raise DimensionError(f"{name}: expected shape {tuple(shape)}, got {out.shape}")
    if not np.can_cast(dtype, out.dtype, casting='same_kind'):
        raise ValidationError(
            f"{name}: cannot store {dtype} result in {out.dtype} buffer"
        )

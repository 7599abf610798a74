import logging

import numpy as np

from polytraj.segment.params import DEFAULT_PARAMS

logger = logging.getLogger(__name__)

# Largest number of coefficients (degree + 1) the shared table is built for.
MAX_N = 12


class UnsupportedOrderError(ValueError):
    pass


class DerivativeOutOfRangeError(IndexError):
    pass


def compute_base_coefficients(n: int) -> np.ndarray:
    """
    Computes the base coefficients of the derivatives of a polynomial with n coefficients.

    Row d holds the multipliers that d-fold differentiation puts in front of each power of t,
    i.e. B[d, j] = j! / (j - d)! for j >= d and 0 otherwise.

    Args:
        n (int): Number of coefficients of the polynomial

    Returns:
        np.ndarray: (n, n) table of derivative multipliers
    """
    if n < 1:
        raise UnsupportedOrderError(f"Polynomial needs at least one coefficient, got {n}")

    base_coefficients = np.zeros((n, n))
    base_coefficients[0, :] = 1.0
    for d in range(1, n):
        for j in range(d, n):
            base_coefficients[d, j] = (j - d + 1) * base_coefficients[d - 1, j]
    logger.debug("Computed %dx%d base coefficient table", n, n)
    return base_coefficients


BASE_COEFFICIENTS = compute_base_coefficients(MAX_N)
BASE_COEFFICIENTS.setflags(write=False)


def check_order(n: int) -> None:
    if not isinstance(n, (int, np.integer)) or isinstance(n, bool):
        raise UnsupportedOrderError(f"Polynomial order has to be an integer, got {n!r}")
    if n < 1 or n > MAX_N:
        raise UnsupportedOrderError(f"Polynomial order {n} outside of supported range [1, {MAX_N}]")


def base_coeffs_with_time(
    n: int, derivative: int, t: float, zero_time_epsilon: float = DEFAULT_PARAMS.zero_time_epsilon
) -> np.ndarray:
    """
    Base coefficients of a derivative multiplied with the according powers of t, as needed
    to build (in)equality constraints that are linear in the polynomial coefficients.

    :param n: number of coefficients of the polynomial
    :param derivative: derivative the row is computed for
    :param t: time of evaluation

    :return: np.ndarray of length n, its dot product with the coefficients is the derivative value at t
    """
    check_order(n)
    if derivative < 0 or derivative >= n:
        raise DerivativeOutOfRangeError(f"Derivative {derivative} outside of [0, {n})")

    coeffs = np.zeros(n)
    # first coefficient doesn't get multiplied
    coeffs[derivative] = BASE_COEFFICIENTS[derivative, derivative]
    if abs(t) < zero_time_epsilon:
        return coeffs

    t_power = t
    for j in range(derivative + 1, n):
        coeffs[j] = BASE_COEFFICIENTS[derivative, j] * t_power
        t_power *= t
    return coeffs

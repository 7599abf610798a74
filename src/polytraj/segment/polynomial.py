import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from polytraj.segment.basis import (
    BASE_COEFFICIENTS,
    DerivativeOutOfRangeError,
    base_coeffs_with_time,
    check_order,
)
from polytraj.segment.params import DEFAULT_PARAMS, PolynomialParams
from polytraj.segment.roots import DEFAULT_ROOT_SOLVER, RootSolver

logger = logging.getLogger(__name__)


class WrongDimensionError(ValueError):
    pass


@dataclass(frozen=True)
class MinMaxResult:
    success: bool
    t_min: float = np.nan
    t_max: float = np.nan
    min: float = np.nan
    max: float = np.nan

    @classmethod
    def failure(cls) -> "MinMaxResult":
        return cls(success=False)


class Polynomial:
    """
    Polynomial with a fixed number of coefficients n (degree n - 1), used as a single time segment of a trajectory.

    Coefficients are stored with increasing powers of t,
    i.e. c0 + c1*t + c2*t^2 ==> coefficients = [c0, c1, c2]

    Args:
        n (int): Number of coefficients, 1 <= n <= MAX_N
        coefficients (array-like, optional): Initial coefficients, zero if omitted
        root_solver (RootSolver, optional): Used for roots and the min/max search
        params (PolynomialParams): Numerical tolerances
    """

    root_solver: RootSolver
    params: PolynomialParams

    def __init__(
        self,
        n: int,
        coefficients=None,
        root_solver: Optional[RootSolver] = None,
        params: PolynomialParams = DEFAULT_PARAMS,
    ):
        check_order(n)
        self._n = int(n)
        self.root_solver = root_solver if root_solver is not None else DEFAULT_ROOT_SOLVER
        self.params = params
        self._coefficients = np.zeros(self._n)
        if coefficients is not None:
            self.set_coefficients(coefficients)

    @property
    def n(self) -> int:
        return self._n

    @property
    def coefficients(self) -> np.ndarray:
        return self._coefficients.copy()

    def __eq__(self, other):
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self._n == other._n and np.array_equal(self._coefficients, other._coefficients)

    __hash__ = None  # mutable

    def __repr__(self):
        return f"Polynomial(n={self._n}, coefficients={self._coefficients.tolist()})"

    def set_coefficients(self, coefficients) -> None:
        coefficients = np.array(coefficients, dtype=float).reshape(-1)
        if len(coefficients) != self._n:
            raise WrongDimensionError(
                f"Number of coefficients has to match, expected {self._n}, got {len(coefficients)}"
            )
        self._coefficients = coefficients

    def get_coefficients(self, derivative: int = 0) -> np.ndarray:
        """
        Returns the coefficients of the specified derivative, in the same increasing power order
        and zero padded at the high order end.
        """
        if derivative < 0 or derivative > self._n:
            raise DerivativeOutOfRangeError(f"Derivative {derivative} outside of [0, {self._n}]")
        if derivative == 0:
            return self.coefficients

        result = np.zeros(self._n)
        if derivative == self._n:
            return result
        result[: self._n - derivative] = (
            self._coefficients[derivative:] * BASE_COEFFICIENTS[derivative, derivative : self._n]
        )
        return result

    def _horner(self, t, derivative: int):
        # descending recurrence over the basis row, works for scalars and arrays of t
        row = BASE_COEFFICIENTS[derivative, : self._n]
        last = self._n - 1
        acc = row[last] * self._coefficients[last]
        for j in range(last - 1, derivative - 1, -1):
            acc = acc * t + row[j] * self._coefficients[j]
        return acc

    def evaluate(self, t: float, derivative: int = 0) -> float:
        """Value of the specified derivative at time t, 0.0 for derivatives at or beyond n."""
        if derivative < 0:
            raise DerivativeOutOfRangeError(f"Derivative has to be non-negative, got {derivative}")
        if derivative >= self._n:
            return 0.0
        return float(self._horner(t, derivative))

    def evaluate_derivatives(self, t: float, count: int) -> np.ndarray:
        """
        Evaluates the polynomial at time t for all derivatives up to count - 1,
        e.g. count = 3 gives [position, velocity, acceleration].
        """
        if count < 0 or count > self._n:
            raise DerivativeOutOfRangeError(f"Can evaluate at most {self._n} derivatives, requested {count}")
        result = np.zeros(count)
        for i in range(count):
            result[i] = self._horner(t, i)
        return result

    def sample(self, times: np.ndarray, derivative: int = 0) -> np.ndarray:
        """
        Evaluates the specified derivative on a grid of times.

        Args:
            times (np.ndarray): Sample times
            derivative (int): Derivative to evaluate

        Returns:
            np.ndarray: Values with the same shape as times
        """
        times = np.asarray(times, dtype=float)
        if derivative < 0:
            raise DerivativeOutOfRangeError(f"Derivative has to be non-negative, got {derivative}")
        if derivative >= self._n:
            return np.zeros_like(times)
        return self._horner(times, derivative) * np.ones_like(times)

    def compute_roots(self) -> np.ndarray:
        """Complex roots of the polynomial itself, not of its derivatives."""
        return self.root_solver.find_roots(self._coefficients)

    def get_roots(self, derivative: int) -> np.ndarray:
        return self.root_solver.find_roots(self.get_coefficients(derivative))

    def find_min_max(
        self, t_1: float, t_2: float, derivative: int, roots_of_derivative: Optional[np.ndarray] = None
    ) -> MinMaxResult:
        """
        Computes the minimum and maximum of the specified derivative between t_1 and t_2.

        The extrema of a polynomial on a closed interval lie either on the boundary or on a root of
        the next higher derivative, so all of those candidates are evaluated.

        :param t_1: start of the interval
        :param t_2: end of the interval, t_1 <= t_2
        :param derivative: derivative whose values are searched
        :param roots_of_derivative: roots of derivative + 1, computed if not given

        :return: MinMaxResult, success is False for an invalid interval or a negative derivative
        """
        if derivative < 0:
            logger.warning("Cannot find min/max of negative derivative %d", derivative)
            return MinMaxResult.failure()
        if t_1 > t_2:
            logger.warning("Invalid interval for min/max search: t_1 = %f > t_2 = %f", t_1, t_2)
            return MinMaxResult.failure()
        if derivative >= self._n:
            # derivative vanishes identically
            return MinMaxResult(success=True, t_min=t_1, t_max=t_1, min=0.0, max=0.0)

        if roots_of_derivative is None:
            roots_of_derivative = self.get_roots(derivative + 1)

        candidates = self.select_min_max_candidates_from_roots(
            t_1, t_2, roots_of_derivative, self.params.root_imag_tolerance
        )
        return self.select_min_max_from_candidates(candidates, derivative)

    @staticmethod
    def select_min_max_candidates_from_roots(
        t_start: float, t_end: float, roots: np.ndarray, imag_tolerance: float = DEFAULT_PARAMS.root_imag_tolerance
    ) -> list[float]:
        """Interval bounds followed by the real roots inside [t_start, t_end]."""
        candidates = [t_start, t_end]
        for root in np.asarray(roots, dtype=complex).reshape(-1):
            # Only real roots are critical points.
            if abs(root.imag) > imag_tolerance:
                continue
            if t_start <= root.real <= t_end:
                candidates.append(float(root.real))
        return candidates

    def select_min_max_from_candidates(self, candidates: list[float], derivative: int) -> MinMaxResult:
        if len(candidates) == 0:
            logger.warning("No candidates for min/max search")
            return MinMaxResult.failure()

        values = np.array([self.evaluate(t, derivative) for t in candidates])
        # argmin/argmax return the first occurrence on ties
        i_min = int(np.argmin(values))
        i_max = int(np.argmax(values))
        return MinMaxResult(
            success=True,
            t_min=float(candidates[i_min]),
            t_max=float(candidates[i_max]),
            min=float(values[i_min]),
            max=float(values[i_max]),
        )

    @staticmethod
    def base_coeffs_with_time(n: int, derivative: int, t: float) -> np.ndarray:
        return base_coeffs_with_time(n, derivative, t)

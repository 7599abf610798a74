import logging
from abc import ABC, abstractmethod

import numpy as np
import scipy.linalg
from numpy.polynomial import polynomial as P

logger = logging.getLogger(__name__)


class RootSolver(ABC):
    """
    Given real coefficients in increasing power order, returns all complex roots.

    Vanishing high-order coefficients are dropped first, so the number of roots is the
    effective degree of the polynomial. Constant and all-zero polynomials have no roots.
    """

    def find_roots(self, coefficients) -> np.ndarray:
        coefficients = np.asarray(coefficients, dtype=float)
        nonzero = np.flatnonzero(coefficients)
        if len(nonzero) == 0 or nonzero[-1] == 0:
            return np.array([], dtype=complex)

        trimmed = coefficients[: nonzero[-1] + 1]
        if len(trimmed) < len(coefficients):
            logger.debug(
                "Leading coefficients vanish, degree reduced from %d to %d", len(coefficients) - 1, len(trimmed) - 1
            )
        return np.asarray(self._solve(trimmed), dtype=complex)

    @abstractmethod
    def _solve(self, coefficients: np.ndarray) -> np.ndarray:
        """Roots of a polynomial of degree >= 1 with nonzero leading coefficient."""
        pass


class CompanionRootSolver(RootSolver):
    def _solve(self, coefficients: np.ndarray) -> np.ndarray:
        return P.polyroots(coefficients)


class EigenvalueRootSolver(RootSolver):
    def _solve(self, coefficients: np.ndarray) -> np.ndarray:
        degree = len(coefficients) - 1
        companion = np.zeros((degree, degree))
        companion[1:, :-1] = np.eye(degree - 1)
        companion[:, -1] = -coefficients[:-1] / coefficients[-1]
        return scipy.linalg.eigvals(companion)


DEFAULT_ROOT_SOLVER = CompanionRootSolver()

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class PolynomialParams:
    root_imag_tolerance: float = 1e-6  # max |imag| for a root to count as a critical point
    zero_time_epsilon: float = float(np.finfo(float).eps)  # |t| below this is treated as t = 0


DEFAULT_PARAMS = PolynomialParams()

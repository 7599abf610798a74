import logging
import math
import unittest

import numpy as np

from polytraj.segment.basis import (
    BASE_COEFFICIENTS,
    MAX_N,
    DerivativeOutOfRangeError,
    UnsupportedOrderError,
    base_coeffs_with_time,
    check_order,
    compute_base_coefficients,
)


class BaseCoefficientsTest(unittest.TestCase):
    def test_falling_factorials(self):
        table = compute_base_coefficients(6)
        for d in range(6):
            for j in range(6):
                expected = math.factorial(j) / math.factorial(j - d) if j >= d else 0.0
                self.assertEqual(table[d, j], expected)

    def test_small_table(self):
        expected = np.array(
            [
                [1, 1, 1, 1],
                [0, 1, 2, 3],
                [0, 0, 2, 6],
                [0, 0, 0, 6],
            ],
            dtype=float,
        )
        np.testing.assert_array_equal(compute_base_coefficients(4), expected)

    def test_shared_table_is_read_only(self):
        self.assertEqual(BASE_COEFFICIENTS.shape, (MAX_N, MAX_N))
        with self.assertRaises(ValueError):
            BASE_COEFFICIENTS[0, 0] = 5.0

    def test_invalid_size(self):
        with self.assertRaises(UnsupportedOrderError):
            compute_base_coefficients(0)

    def test_check_order(self):
        check_order(1)
        check_order(MAX_N)
        for n in (0, -3, MAX_N + 1):
            with self.assertRaises(UnsupportedOrderError):
                check_order(n)
        with self.assertRaises(UnsupportedOrderError):
            check_order(2.5)


class BaseCoeffsWithTimeTest(unittest.TestCase):
    def test_zero_time_single_entry(self):
        n = 8
        for d in range(n):
            coeffs = base_coeffs_with_time(n, d, 0.0)
            self.assertEqual(np.count_nonzero(coeffs), 1)
            self.assertEqual(coeffs[d], BASE_COEFFICIENTS[d, d])

    def test_tiny_time_is_zero(self):
        coeffs = base_coeffs_with_time(5, 1, 1e-20)
        np.testing.assert_array_equal(coeffs, [0.0, 1.0, 0.0, 0.0, 0.0])

    def test_row_matches_derivative(self):
        rng = np.random.default_rng(3)
        n = 7
        c = rng.uniform(-1.0, 1.0, n)
        t = 0.7
        for d in range(n):
            row = base_coeffs_with_time(n, d, t)
            expected = np.polynomial.polynomial.polyval(t, np.polynomial.polynomial.polyder(c, d))
            self.assertAlmostEqual(float(row @ c), float(expected), places=10)

    def test_explicit_values(self):
        # d/dt of [1, t, t^2, t^3] at t = 2 -> [0, 1, 4, 12]
        np.testing.assert_allclose(base_coeffs_with_time(4, 1, 2.0), [0.0, 1.0, 4.0, 12.0])

    def test_out_of_range(self):
        with self.assertRaises(DerivativeOutOfRangeError):
            base_coeffs_with_time(4, 4, 1.0)
        with self.assertRaises(DerivativeOutOfRangeError):
            base_coeffs_with_time(4, -1, 1.0)
        with self.assertRaises(UnsupportedOrderError):
            base_coeffs_with_time(MAX_N + 1, 0, 1.0)


if __name__ == "__main__":
    logging.basicConfig(encoding="utf-8", level=logging.DEBUG, format="%(levelname)s %(name)s:\t%(message)s")
    unittest.main()

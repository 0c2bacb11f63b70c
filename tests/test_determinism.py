import itertools
import unittest
import os
import sys
import numpy as np

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from nnmatrix import Matrix


class TestDeterminism(unittest.TestCase):

    def test_fill_calls_supplier_in_row_major_order(self):
        """The supplier is consumed row by row, left to right."""
        counter = itertools.count()
        filled = Matrix(2, 3).fill(lambda: next(counter))

        self.assertEqual(filled, Matrix.from_rows([[0, 1, 2], [3, 4, 5]]))
        self.assertEqual(next(counter), 6)

    def test_fill_keeps_shape_and_leaves_receiver_alone(self):
        template = Matrix.from_rows([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        filled = template.fill(lambda: 7.0)

        self.assertEqual(filled.shape, (3, 2))
        self.assertEqual(set(filled.row(2)), {7.0})
        self.assertEqual(list(template.row(2)), [5.0, 6.0])

    def test_seeded_gaussian_fill_is_reproducible(self):
        first = Matrix(4, 5).fill_gaussian(np.random.default_rng(2024))
        second = Matrix(4, 5).fill_gaussian(np.random.default_rng(2024))

        self.assertEqual(first, second)

    def test_gaussian_fill_matches_sequential_draws(self):
        """Each cell takes the next standard-normal draw in row-major order."""
        expected_source = np.random.default_rng(11)
        expected = [[expected_source.standard_normal() for _ in range(3)] for _ in range(2)]

        filled = Matrix(2, 3).fill_gaussian(np.random.default_rng(11))

        self.assertEqual(filled, Matrix.from_rows(expected))

    def test_gaussian_fill_advances_the_callers_generator(self):
        rng = np.random.default_rng(3)
        first = Matrix(2, 2).fill_gaussian(rng)
        second = Matrix(2, 2).fill_gaussian(rng)

        self.assertNotEqual(first, second)

    def test_different_seeds_differ(self):
        first = Matrix(3, 3).fill_gaussian(np.random.default_rng(1))
        second = Matrix(3, 3).fill_gaussian(np.random.default_rng(2))

        self.assertNotEqual(first, second)


if __name__ == '__main__':
    unittest.main()

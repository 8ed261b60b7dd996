#!/usr/bin/python
#-*-coding: utf-8 -*-

"""
Tests pour les formules de Bernstein.

Lance :
    python test_bernstein.py

@author: Nervures
@date: 2026-02
"""

import os
import sys
import unittest

import numpy as np

# Ajouter le repertoire sources/ au path
_here = os.path.dirname(os.path.abspath(__file__))
_src = os.path.normpath(os.path.join(_here, '..', 'sources'))
if _src not in sys.path:
    sys.path.insert(0, _src)

from model import bernstein


CUBIC = np.array([[0, 0, 0], [0, 10, 0], [10, 10, 0], [10, 0, 0]], dtype=float)


class TestRoots(unittest.TestCase):
    """Racines 1D."""

    def test_linear(self):
        self.assertEqual(bernstein.roots([2.0, -2.0]), [0.5])

    def test_linear_constant(self):
        self.assertEqual(bernstein.roots([3.0, 3.0]), [])

    def test_quadratic_two_roots(self):
        # (1-t)^2 * 0 + 2(1-t)t * 30 + t^2 * 0 : racines 0 et 1
        self.assertEqual(sorted(bernstein.roots([0.0, 30.0, 0.0])), [0.0, 1.0])

    def test_quadratic_degenerate_to_linear(self):
        """a - 2b + c = 0 : une seule racine."""
        self.assertEqual(bernstein.roots([30.0, 0.0, -30.0]), [0.5])

    def test_quadratic_no_real_root(self):
        self.assertEqual(bernstein.roots([1.0, 0.0, 1.0]), [])

    def test_quadratic_constant(self):
        self.assertEqual(bernstein.roots([0.0, 0.0, 0.0]), [])

    def test_unsupported(self):
        with self.assertRaises(RuntimeError):
            bernstein.roots([1.0, 2.0, 3.0, 4.0])


class TestDerivativePoints(unittest.TestCase):
    """Polygones des derivees."""

    def test_levels(self):
        levels = bernstein.derivative_points(CUBIC)
        self.assertEqual([len(l) for l in levels], [3, 2, 1])
        np.testing.assert_allclose(levels[0],
                                   [[0, 30, 0], [30, 0, 0], [0, -30, 0]])
        np.testing.assert_allclose(levels[1], [[60, -60, 0], [-60, -60, 0]])

    def test_linear(self):
        levels = bernstein.derivative_points([[0, 0, 0], [4, 2, 0]])
        self.assertEqual(len(levels), 1)
        np.testing.assert_allclose(levels[0], [[4, 2, 0]])


class TestEvaluation(unittest.TestCase):

    def test_cubic_broadcast(self):
        pts = bernstein.cubic(CUBIC[0], CUBIC[1], CUBIC[2], CUBIC[3],
                              np.array([0.0, 0.5, 1.0]))
        np.testing.assert_allclose(pts, [[0, 0, 0], [5, 7.5, 0], [10, 0, 0]])

    def test_quadratic_derivative2_shape(self):
        p0, p1, p2 = np.eye(3)
        self.assertEqual(bernstein.quadratic_derivative2(p0, p1, p2, 0.3).shape,
                         (3,))
        self.assertEqual(
            bernstein.quadratic_derivative2(p0, p1, p2, np.zeros(4)).shape,
            (4, 3))


class TestSplitMatrices(unittest.TestCase):
    """Matrices de subdivision."""

    def test_rows_sum_to_one(self):
        for order in (3, 4):
            left, right = bernstein.split_matrices(order, 0.3)
            np.testing.assert_allclose(left.sum(axis=1), 1.0)
            np.testing.assert_allclose(right.sum(axis=1), 1.0)

    def test_shared_row(self):
        left, right = bernstein.split_matrices(4, 0.3)
        np.testing.assert_array_equal(left[-1], right[0])

    def test_identity_at_one(self):
        left, _right = bernstein.split_matrices(4, 1.0)
        np.testing.assert_array_equal(left, np.eye(4))

    def test_unsupported_order(self):
        with self.assertRaises(RuntimeError):
            bernstein.split_matrices(5, 0.5)


class TestElevate(unittest.TestCase):

    def test_linear(self):
        q = bernstein.elevate([[0, 0, 0], [6, 0, 0]])
        np.testing.assert_allclose(q, [[0, 0, 0], [3, 0, 0], [6, 0, 0]])

    def test_quadratic(self):
        q = bernstein.elevate([[0, 0, 0], [3, 3, 0], [6, 0, 0]])
        np.testing.assert_allclose(q, [[0, 0, 0], [2, 2, 0], [4, 2, 0],
                                       [6, 0, 0]])


class TestFlatten(unittest.TestCase):
    """Aplatissement recursif."""

    def test_endpoints(self):
        pts = bernstein.flatten(CUBIC, 0.1)
        np.testing.assert_array_equal(pts[0], CUBIC[0])
        np.testing.assert_array_equal(pts[-1], CUBIC[-1])

    def test_points_on_curve(self):
        pts = bernstein.flatten(CUBIC, 0.1)
        for p in pts:
            # y = f(x) n'est pas explicite : on verifie la distance a une
            # evaluation dense
            dense = bernstein.cubic(CUBIC[0], CUBIC[1], CUBIC[2], CUBIC[3],
                                    np.linspace(0, 1, 4001))
            self.assertLess(np.min(np.linalg.norm(dense - p, axis=1)), 1e-2)

    def test_tolerance_refines(self):
        coarse = bernstein.flatten(CUBIC, 1.0)
        fine = bernstein.flatten(CUBIC, 0.01)
        self.assertLess(len(coarse), len(fine))

    def test_flat_input(self):
        line = np.array([[0, 0, 0], [1, 0, 0], [2, 0, 0], [3, 0, 0]], dtype=float)
        self.assertEqual(len(bernstein.flatten(line, 0.1)), 2)

    def test_max_depth(self):
        with self.assertLogs('model.bernstein', level='WARNING'):
            pts = bernstein.flatten(CUBIC, 1e-12, max_depth=2)
        self.assertEqual(len(pts), 5)

    def test_relative_tolerance(self):
        """Le critere suit la taille de la courbe, pas ses unites."""
        small = bernstein.flatten(CUBIC * 1e-3, 0.01)
        large = bernstein.flatten(CUBIC * 1e6, 0.01)
        self.assertGreater(len(small), 10)
        self.assertLess(abs(len(small) - len(large)), 3)


if __name__ == '__main__':
    unittest.main()

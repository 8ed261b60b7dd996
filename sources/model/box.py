#!/usr/bin/python
#-*-coding: utf-8 -*-

"""
Boite englobante 3D alignee sur les axes.

Valeur opaque retournee par :attr:`Segment.bounds` : un coin minimal et
des dimensions (largeur, hauteur, profondeur).

Creation::

    b = Box([0, 0, 0], 10, 5, 0)
    b = Box.from_points([[0, 0, 0], [10, 5, 0]])

@author: Nervures
@date: 2026-02
"""

import numpy as np


class Box:
    """Boite 3D alignee sur les axes (coin + dimensions)."""

    def __init__(self, corner, width, height, depth=0.0):
        """
        :param corner: coin minimal (x, y, z)
        :type corner: array-like, shape (3,)
        :param width: dimension selon x
        :type width: float
        :param height: dimension selon y
        :type height: float
        :param depth: dimension selon z
        :type depth: float
        """
        corner = np.asarray(corner, dtype=float)
        if corner.shape != (3,):
            raise ValueError(
                "corner doit etre un point (3,), recu shape %s"
                % str(corner.shape))
        self._corner = corner
        self._dims = np.array([width, height, depth], dtype=float)

    @classmethod
    def from_points(cls, points):
        """Plus petite boite contenant tous les points.

        :param points: nuage de points, ndarray(n, 3) avec n >= 1
        :type points: array-like
        :rtype: Box
        """
        pts = np.asarray(points, dtype=float)
        if pts.ndim != 2 or pts.shape[1] != 3 or len(pts) == 0:
            raise ValueError(
                "points doit etre un tableau (n, 3) non vide, recu shape %s"
                % str(pts.shape))
        lo = pts.min(axis=0)
        hi = pts.max(axis=0)
        width, height, depth = hi - lo
        return cls(lo, width, height, depth)

    def __repr__(self):
        return "Box(corner=%s, width=%g, height=%g, depth=%g)" % (
            self._corner.tolist(), self.width, self.height, self.depth)

    def __eq__(self, other):
        if not isinstance(other, Box):
            return NotImplemented
        return (np.array_equal(self._corner, other._corner)
                and np.array_equal(self._dims, other._dims))

    def __hash__(self):
        return hash(tuple(self._corner.tolist() + self._dims.tolist()))

    @property
    def corner(self):
        """Coin minimal, ndarray(3,)."""
        return self._corner.copy()

    @property
    def width(self):
        return float(self._dims[0])

    @property
    def height(self):
        return float(self._dims[1])

    @property
    def depth(self):
        return float(self._dims[2])

    @property
    def dimensions(self):
        """(largeur, hauteur, profondeur), ndarray(3,)."""
        return self._dims.copy()

    @property
    def minimum(self):
        return self._corner.copy()

    @property
    def maximum(self):
        return self._corner + self._dims

    @property
    def center(self):
        """Centre de la boite, ndarray(3,)."""
        return self._corner + 0.5 * self._dims

    def contains(self, point, tolerance=0.0):
        """Teste si un point est dans la boite (bords inclus).

        :param point: point (x, y, z)
        :param tolerance: marge ajoutee sur chaque face
        :type tolerance: float
        :rtype: bool
        """
        p = np.asarray(point, dtype=float)
        return bool(np.all(p >= self._corner - tolerance)
                    and np.all(p <= self._corner + self._dims + tolerance))

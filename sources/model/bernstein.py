#!/usr/bin/python
#-*-coding: utf-8 -*-

"""
Formules de Bernstein pour les segments de degre 1 a 3.

Fonctions utilitaires sans etat utilisees par :class:`Segment` :

- evaluation fermee (position, derivees premiere et seconde) ;
- polygones de controle des derivees et racines 1D associees ;
- matrices de subdivision (De Casteljau sous forme matricielle) ;
- elevation de degre ;
- aplatissement recursif pour l'echantillonnage adaptatif.

Les points sont des ndarray(3,). Le parametre ``t`` peut etre un scalaire
ou un ndarray(m,) ; le resultat est alors ndarray(3,) ou ndarray(m, 3).
Aucune fonction de ce module ne borne ``t`` : c'est le role de l'appelant.

@author: Nervures
@date: 2026-02
"""

import math
import logging

import numpy as np

logger = logging.getLogger(__name__)


def _column(t):
    """Parametre(s) en colonne pour la diffusion sur les coordonnees."""
    return np.asarray(t, dtype=float)[..., None]


# --------------------------------------------------------------------------
#  Evaluation
# --------------------------------------------------------------------------

def linear(p0, p1, t):
    """Interpolation affine (1 - t) * P0 + t * P1."""
    t = _column(t)
    return p0 * (1.0 - t) + p1 * t


def quadratic(p0, p1, p2, t):
    """B(t) = (1-t)^2 P0 + 2(1-t)t P1 + t^2 P2."""
    t = _column(t)
    mt = 1.0 - t
    return mt * mt * p0 + 2.0 * mt * t * p1 + t * t * p2


def cubic(p0, p1, p2, p3, t):
    """B(t) = (1-t)^3 P0 + 3(1-t)^2 t P1 + 3(1-t) t^2 P2 + t^3 P3."""
    t = _column(t)
    mt = 1.0 - t
    return (mt * mt * mt * p0 + 3.0 * mt * mt * t * p1
            + 3.0 * mt * t * t * p2 + t * t * t * p3)


def quadratic_derivative(p0, p1, p2, t):
    """B'(t) = 2(1-t)(P1 - P0) + 2t(P2 - P1)."""
    t = _column(t)
    return 2.0 * (1.0 - t) * (p1 - p0) + 2.0 * t * (p2 - p1)


def cubic_derivative(p0, p1, p2, p3, t):
    """B'(t) = 3(1-t)^2 (P1-P0) + 6(1-t)t (P2-P1) + 3t^2 (P3-P2)."""
    t = _column(t)
    mt = 1.0 - t
    return (3.0 * mt * mt * (p1 - p0) + 6.0 * mt * t * (p2 - p1)
            + 3.0 * t * t * (p3 - p2))


def quadratic_derivative2(p0, p1, p2, t):
    """B''(t) = 2(P0 - 2 P1 + P2), constante."""
    t = _column(t)
    return 2.0 * (p0 - 2.0 * p1 + p2) + 0.0 * t


def cubic_derivative2(p0, p1, p2, p3, t):
    """B''(t) = 6(1-t)(P0 - 2P1 + P2) + 6t(P1 - 2P2 + P3)."""
    t = _column(t)
    return (6.0 * (1.0 - t) * (p0 - 2.0 * p1 + p2)
            + 6.0 * t * (p1 - 2.0 * p2 + p3))


# --------------------------------------------------------------------------
#  Derivees et racines
# --------------------------------------------------------------------------

def derivative_points(points):
    """Polygones de controle des derivees successives.

    Differences finies repetees du polygone de controle, multipliees a
    chaque niveau par le degre courant :

        D1[i] = n * (P[i+1] - P[i]), D2[i] = (n-1) * (D1[i+1] - D1[i]), ...

    :param points: polygone de controle, ndarray(n+1, 3)
    :returns: liste [D1, D2, ..., Dn], chaque niveau ayant un point de moins
    :rtype: list[numpy.ndarray]
    """
    p = np.asarray(points, dtype=float)
    levels = []
    c = len(p) - 1
    while c >= 1:
        p = c * (p[1:] - p[:-1])
        levels.append(p)
        c -= 1
    return levels


def roots(values):
    """Racines d'un polynome de Bernstein 1D de degre 1 ou 2.

    Le polynome est donne par ses coefficients de Bernstein (2 ou 3
    valeurs). Les racines ne sont pas filtrees sur [0, 1].

    :param values: coefficients (a, b) ou (a, b, c)
    :returns: racines reelles
    :rtype: list[float]
    """
    values = [float(v) for v in values]
    if len(values) == 3:
        a, b, c = values
        d = a - 2.0 * b + c
        if d != 0.0:
            disc = b * b - a * c
            if disc < 0.0:
                return []
            m1 = -math.sqrt(disc)
            m2 = -a + b
            return [-(m1 + m2) / d, -(-m1 + m2) / d]
        if b != c:
            return [(2.0 * b - c) / (2.0 * (b - c))]
        return []
    if len(values) == 2:
        a, b = values
        if a != b:
            return [a / (a - b)]
        return []
    raise RuntimeError(
        "Racines non supportees pour %d coefficients" % len(values))


# --------------------------------------------------------------------------
#  Subdivision et elevation
# --------------------------------------------------------------------------

def split_matrices(order, t):
    """Matrices de subdivision gauche/droite en t.

    Appliquees au polygone de controle (une colonne par axe), elles
    donnent les polygones des deux morceaux [0, t] et [t, 1] :

        gauche = L @ P, droite = R @ P

    :param order: nombre de points de controle (3 ou 4)
    :type order: int
    :param t: parametre de coupe dans [0, 1]
    :type t: float
    :returns: (L, R), ndarray(order, order) chacune
    :rtype: tuple(numpy.ndarray, numpy.ndarray)
    """
    z = float(t)
    iz = 1.0 - z
    if order == 4:
        left = np.array([
            [1.0, 0.0, 0.0, 0.0],
            [iz, z, 0.0, 0.0],
            [iz * iz, 2.0 * iz * z, z * z, 0.0],
            [iz ** 3, 3.0 * iz * iz * z, 3.0 * iz * z * z, z ** 3],
        ])
        right = np.array([
            [iz ** 3, 3.0 * iz * iz * z, 3.0 * iz * z * z, z ** 3],
            [0.0, iz * iz, 2.0 * iz * z, z * z],
            [0.0, 0.0, iz, z],
            [0.0, 0.0, 0.0, 1.0],
        ])
        return left, right
    if order == 3:
        left = np.array([
            [1.0, 0.0, 0.0],
            [iz, z, 0.0],
            [iz * iz, 2.0 * iz * z, z * z],
        ])
        right = np.array([
            [iz * iz, 2.0 * iz * z, z * z],
            [0.0, iz, z],
            [0.0, 0.0, 1.0],
        ])
        return left, right
    raise RuntimeError(
        "Pas de matrice de subdivision pour %d points de controle" % order)


def elevate(points):
    """Eleve le degre d'un polygone de controle d'une unite.

    - Q0 = P0
    - Qi = (i/(n+1)) * P(i-1) + (1 - i/(n+1)) * Pi   pour i=1..n
    - Q(n+1) = Pn

    :param points: polygone de controle, ndarray(n+1, 3)
    :returns: polygone eleve, ndarray(n+2, 3)
    """
    P = np.asarray(points, dtype=float)
    n = len(P) - 1
    Q = np.empty((n + 2, P.shape[1]), dtype=float)
    Q[0] = P[0]
    Q[n + 1] = P[n]
    for i in range(1, n + 1):
        alpha = float(i) / (n + 1)
        Q[i] = alpha * P[i - 1] + (1.0 - alpha) * P[i]
    return Q


# --------------------------------------------------------------------------
#  Aplatissement
# --------------------------------------------------------------------------

def flatten(points, tolerance, max_depth=16):
    """Polyligne approchant une courbe par subdivision recursive en 1/2.

    Un morceau est accepte quand toutes les differences secondes de son
    polygone de controle sont de norme <= tolerance * longueur de ce
    polygone. Le critere est relatif : le nombre de points ne depend pas
    de l'echelle des coordonnees. Le resultat contient P0 et Pn exactement.

    :param points: polygone de controle, ndarray(3 ou 4, 3)
    :param tolerance: seuil relatif sur les differences secondes (> 0)
    :type tolerance: float
    :param max_depth: profondeur de subdivision maximale
    :type max_depth: int
    :returns: points de la polyligne, ndarray(m, 3)
    """
    pts = np.asarray(points, dtype=float)
    if len(pts) < 3:
        return pts.copy()
    left_m, right_m = split_matrices(len(pts), 0.5)
    tol2 = tolerance * tolerance
    out = [pts[0]]
    stack = [(pts, 0)]
    truncated = False
    while stack:
        p, depth = stack.pop()
        second = p[:-2] - 2.0 * p[1:-1] + p[2:]
        size = np.sum(np.linalg.norm(np.diff(p, axis=0), axis=1))
        # NaN : le test echoue, on descend jusqu'a max_depth
        if np.max(np.sum(second * second, axis=1)) <= tol2 * size * size:
            out.append(p[-1])
        elif depth >= max_depth:
            truncated = True
            out.append(p[-1])
        else:
            stack.append((right_m @ p, depth + 1))
            stack.append((left_m @ p, depth + 1))
    if truncated:
        logger.warning("Aplatissement tronque a la profondeur %d", max_depth)
    return np.array(out)

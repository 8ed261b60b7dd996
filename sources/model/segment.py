#!/usr/bin/python
#-*-coding: utf-8 -*-

"""
Segment de Bezier 3D de degre 1, 2 ou 3.

Un segment est une valeur immuable : point de depart, 0 a 2 points de
controle interieurs, point d'arrivee. Le nombre de points de controle
fixe le type (0 = lineaire, 1 = quadratique, 2 = cubique). Toutes les
operations de transformation retournent un nouveau segment.

Creation::

    s = line_segment([0, 0, 0], [10, 0, 0])
    q = quadratic_segment([0, 0, 0], [5, 10, 0], [10, 0, 0])
    c = cubic_segment([0, 0, 0], [0, 10, 0], [10, 10, 0], [10, 0, 0])
    g = Segment([0, 0, 0], [[5, 10, 0]], [10, 0, 0])   # forme generale

    c.position(0.5)          # ndarray(3,)
    c.project([5, 9, 0])     # SegmentProjection
    c.t_for_length(3.0)      # parametre a 3 unites du depart
    left, right = c.split(0.5)
    c.bounds                 # Box

Seuls la table d'echantillonnage (LUT) et la longueur sont calcules a la
demande et gardes en memoire. Ce cache ne participe ni a l'egalite ni au
hachage ; deux calculs concurrents produisent la meme table, le dernier
ecrit gagne, sans verrou.

@author: Nervures
@date: 2026-02
"""

import math
import numbers
import logging
from enum import Enum

import numpy as np

from . import bernstein
from .box import Box
from .segmentconfig import load_defaults

logger = logging.getLogger(__name__)

_DEFAULTS = load_defaults('segment')

LUT_SIZE = int(_DEFAULTS['lut_size'])
ON_ERROR = float(_DEFAULTS['on_error'])
PROJECTION_STEP = float(_DEFAULTS['projection_step'])
FLATTEN_TOLERANCE = float(_DEFAULTS['flatten_tolerance'])
FLATTEN_MAX_DEPTH = int(_DEFAULTS['flatten_max_depth'])

# Resolution fixe de t_for_length, independante de lut_size
ARC_LENGTH_LUT_SIZE = 100


class SegmentType(Enum):
    """Type d'un segment, valeur = nombre de points de controle."""

    LINEAR = 0
    QUADRATIC = 1
    CUBIC = 2


def _point(value, label='point'):
    """Copie un point en ndarray(3,) de flottants."""
    p = np.array(value, dtype=float)
    if p.shape != (3,):
        raise ValueError(
            "%s doit etre un point (3,), recu shape %s" % (label, str(p.shape)))
    return p


def _unsupported(kind):
    return RuntimeError("Type de segment non supporte : %r" % (kind,))


# --------------------------------------------------------------------------
#  Resultat de projection
# --------------------------------------------------------------------------

class SegmentProjection:
    """Projection d'un point sur un segment.

    Porte le segment source (par valeur), le parametre trouve, la distance
    au carre entre le point requete et le point projete, et le point
    projete. Non modifiable apres creation.
    """

    def __init__(self, segment, t, squared_distance, point):
        self._segment = segment
        self._t = float(t)
        self._squared_distance = float(squared_distance)
        self._point = np.array(point, dtype=float)
        self._point.flags.writeable = False

    def __repr__(self):
        return "SegmentProjection(t=%g, squared_distance=%g, point=%s)" % (
            self._t, self._squared_distance, self._point.tolist())

    @property
    def segment(self):
        return self._segment

    @property
    def t(self):
        """Parametre du point projete, dans [0, 1]."""
        return self._t

    @property
    def squared_distance(self):
        return self._squared_distance

    @property
    def distance(self):
        """Distance euclidienne (racine de squared_distance)."""
        return math.sqrt(self._squared_distance)

    @property
    def point(self):
        return self._point


# --------------------------------------------------------------------------
#  Classe Segment
# --------------------------------------------------------------------------

class Segment:
    """Segment de Bezier 3D lineaire, quadratique ou cubique.

    Stockage du polygone complet [start, control..., end] en ndarray(k, 3)
    non modifiable.
    """

    def __init__(self, start, control, end):
        """
        :param start: point de depart (x, y, z)
        :type start: array-like, shape (3,)
        :param control: 0, 1 ou 2 points de controle interieurs
        :type control: sequence of array-like
        :param end: point d'arrivee (x, y, z)
        :type end: array-like, shape (3,)
        :raises ValueError: si un point n'est pas 3D ou si le nombre de
            points de controle n'est pas 0, 1 ou 2
        """
        control = [_point(c, 'control') for c in control]
        if len(control) > 2:
            raise ValueError(
                "Il faut 0, 1 ou 2 points de controle, recu %d" % len(control))
        cpts = np.array([_point(start, 'start')] + control
                        + [_point(end, 'end')], dtype=float)
        cpts.flags.writeable = False
        self._cpts = cpts
        self._type = SegmentType(len(control))
        self._lut = None
        self._length = None

    @classmethod
    def from_points(cls, *points):
        """Segment depuis 2, 3 ou 4 points (depart, controles, arrivee).

        :rtype: Segment
        """
        if len(points) not in (2, 3, 4):
            raise ValueError(
                "Il faut 2, 3 ou 4 points, recu %d" % len(points))
        return cls(points[0], points[1:-1], points[-1])

    @classmethod
    def _from_polygon(cls, cpts):
        return cls(cpts[0], cpts[1:-1], cpts[-1])

    def copy(self, start=None, control=None, end=None):
        """Copie avec remplacement optionnel des points.

        :rtype: Segment
        """
        return Segment(self._cpts[0] if start is None else start,
                       self._cpts[1:-1] if control is None else control,
                       self._cpts[-1] if end is None else end)

    # ------------------------------------------------------------------
    #  Representation, egalite
    # ------------------------------------------------------------------

    def __repr__(self):
        return "Segment(%s, start=%s, control=%s, end=%s)" % (
            self._type.name.lower(), self._cpts[0].tolist(),
            self._cpts[1:-1].tolist(), self._cpts[-1].tolist())

    def __eq__(self, other):
        if not isinstance(other, Segment):
            return NotImplemented
        return (self._type is other._type
                and np.array_equal(self._cpts, other._cpts))

    def __hash__(self):
        return hash((self._type, tuple(self._cpts.ravel().tolist())))

    # ------------------------------------------------------------------
    #  Properties
    # ------------------------------------------------------------------

    @property
    def start(self):
        """Point de depart, ndarray(3,)."""
        return self._cpts[0].copy()

    @property
    def end(self):
        """Point d'arrivee, ndarray(3,)."""
        return self._cpts[-1].copy()

    @property
    def control(self):
        """Points de controle interieurs, ndarray(0, 1 ou 2, 3)."""
        return self._cpts[1:-1].copy()

    @property
    def points(self):
        """Polygone de controle complet, ndarray(k, 3)."""
        return self._cpts.copy()

    @property
    def segment_type(self):
        return self._type

    @property
    def degree(self):
        """Nombre de points de controle interieurs (0, 1 ou 2)."""
        return self._type.value

    @property
    def linear(self):
        return self._type is SegmentType.LINEAR

    # ------------------------------------------------------------------
    #  Evaluation
    # ------------------------------------------------------------------

    def position(self, t):
        """Point du segment en t, borne dans [0, 1].

        :param t: parametre, scalaire ou array
        :returns: ndarray(3,) si t scalaire, ndarray(m, 3) si t array
        """
        t = np.clip(np.asarray(t, dtype=float), 0.0, 1.0)
        P = self._cpts
        if self._type is SegmentType.LINEAR:
            return bernstein.linear(P[0], P[1], t)
        if self._type is SegmentType.QUADRATIC:
            return bernstein.quadratic(P[0], P[1], P[2], t)
        if self._type is SegmentType.CUBIC:
            return bernstein.cubic(P[0], P[1], P[2], P[3], t)
        raise _unsupported(self._type)

    def derivative(self, t):
        """Derivee premiere en t.

        Pour un segment lineaire, la derivee est la constante start - end.

        :param t: parametre, scalaire ou array
        :returns: vecteur(s) derivee
        """
        t = np.clip(np.asarray(t, dtype=float), 0.0, 1.0)
        P = self._cpts
        if self._type is SegmentType.LINEAR:
            d = P[0] - P[1]
            if t.ndim == 0:
                return d.copy()
            return np.tile(d, (len(t), 1))
        if self._type is SegmentType.QUADRATIC:
            return bernstein.quadratic_derivative(P[0], P[1], P[2], t)
        if self._type is SegmentType.CUBIC:
            return bernstein.cubic_derivative(P[0], P[1], P[2], P[3], t)
        raise _unsupported(self._type)

    def derivative2(self, t):
        """Derivee seconde en t (nulle pour un segment lineaire)."""
        t = np.clip(np.asarray(t, dtype=float), 0.0, 1.0)
        P = self._cpts
        if self._type is SegmentType.LINEAR:
            if t.ndim == 0:
                return np.zeros(3)
            return np.zeros((len(t), 3))
        if self._type is SegmentType.QUADRATIC:
            return bernstein.quadratic_derivative2(P[0], P[1], P[2], t)
        if self._type is SegmentType.CUBIC:
            return bernstein.cubic_derivative2(P[0], P[1], P[2], P[3], t)
        raise _unsupported(self._type)

    def curvature(self, t):
        """Courbure non signee en t.

        kappa = |B'(t) x B''(t)| / |B'(t)|^3

        Au point de rebroussement (B'(t) nul) le resultat est NaN : c'est
        a l'appelant de le filtrer.

        :param t: parametre, scalaire ou array
        :rtype: float ou ndarray
        """
        d = self.derivative(t)
        dd = self.derivative2(t)
        num = np.linalg.norm(np.cross(d, dd), axis=-1)
        den = np.linalg.norm(d, axis=-1) ** 3
        with np.errstate(divide='ignore', invalid='ignore'):
            kappa = np.true_divide(num, den)
        if np.ndim(kappa) == 0:
            return float(kappa)
        return kappa

    # ------------------------------------------------------------------
    #  Longueur et echantillonnage
    # ------------------------------------------------------------------

    @property
    def length(self):
        """Longueur du segment.

        Exacte pour un segment lineaire, somme des cordes de
        :meth:`adaptive_positions` sinon. Calculee une seule fois.
        """
        if self._length is None:
            if self._type is SegmentType.LINEAR:
                length = float(np.linalg.norm(self._cpts[1] - self._cpts[0]))
            else:
                pts = self.adaptive_positions()
                length = float(np.sum(
                    np.linalg.norm(np.diff(pts, axis=0), axis=1)))
            logger.debug("Longueur calculee : %g", length)
            self._length = length
        return self._length

    def adaptive_positions(self, tolerance=None):
        """Polyligne adaptative passant par les extrema.

        Le segment est coupe en [0, extrema..., 1], puis chaque morceau est
        subdivise jusqu'a ce que ses differences secondes ne depassent pas
        ``tolerance`` fois la longueur de son polygone de controle.

        :param tolerance: seuil relatif d'aplatissement (defaut :
            configuration, 0.01)
        :type tolerance: float or None
        :returns: points, ndarray(m, 3), de start a end inclus
        """
        if self._type is SegmentType.LINEAR:
            return self._cpts.copy()
        if tolerance is None:
            tolerance = FLATTEN_TOLERANCE
        cuts = sorted(set([0.0] + self.extrema() + [1.0]))
        parts = [self._cpts[:1]]
        for t0, t1 in zip(cuts[:-1], cuts[1:]):
            piece = self.sub(t0, t1)
            flat = bernstein.flatten(piece._cpts, tolerance, FLATTEN_MAX_DEPTH)
            parts.append(flat[1:])
        return np.vstack(parts)

    def _lookup_table(self, size):
        """LUT en cache (non copiee), reconstruite si la taille change."""
        if size < 1:
            raise ValueError("size doit etre >= 1, recu %d" % size)
        table = self._lut
        if table is None or len(table) != size + 1:
            logger.debug("Construction de la LUT : %d points", size + 1)
            table = self.position(np.arange(size + 1) / float(size))
            table.flags.writeable = False
            self._lut = table
        return table

    def lut(self, size=None):
        """Table de ``size + 1`` points a pas de parametre uniforme.

        :param size: nombre d'intervalles (defaut : configuration, 100)
        :type size: int or None
        :returns: copie de la table en cache, ndarray(size + 1, 3)
        """
        if size is None:
            size = LUT_SIZE
        return self._lookup_table(int(size)).copy()

    def equidistant_positions(self, count):
        """Points repartis uniformement en abscisse curviligne.

        :param count: nombre de points (>= 2)
        :type count: int
        :returns: ndarray(count, 3)
        """
        if count < 2:
            raise ValueError("count doit etre >= 2, recu %d" % count)
        total = self.length
        ts = [self.t_for_length(total * i / (count - 1.0))
              for i in range(count)]
        return self.position(np.array(ts))

    # ------------------------------------------------------------------
    #  Projection
    # ------------------------------------------------------------------

    def on(self, point, error=None):
        """Test d'appartenance grossier sur la LUT.

        :param point: point requete (x, y, z)
        :param error: rayon de tolerance (defaut : configuration, 5.0)
        :returns: moyenne des parametres des points de la LUT a moins de
            ``error`` du point, ou None si aucun
        :rtype: float or None
        """
        if error is None:
            error = ON_ERROR
        query = _point(point)
        table = self._lookup_table(LUT_SIZE)
        d2 = np.sum((table - query) ** 2, axis=1)
        hits = np.flatnonzero(d2 < error * error)
        if len(hits) == 0:
            return None
        return float(np.mean(hits) / (len(table) - 1))

    def project(self, point):
        """Point du segment le plus proche d'un point requete.

        Recherche grossiere sur la LUT, puis balayage fin de l'intervalle
        [(i-1)/n, (i+1)/n] autour du meilleur indice i. Si i est le premier
        ou le dernier indice, le point de la LUT est retourne tel quel.

        :param point: point requete (x, y, z)
        :rtype: SegmentProjection
        """
        query = _point(point)
        table = self._lookup_table(LUT_SIZE)
        last = len(table) - 1
        d2 = np.sum((table - query) ** 2, axis=1)
        index = int(np.argmin(d2))
        closest = float(d2[index])
        if index == 0 or index == last:
            return SegmentProjection(self, index / float(last), closest,
                                     table[index])

        count = int(round(2.0 / PROJECTION_STEP)) + 1
        step = PROJECTION_STEP / last
        ts = (index - 1) / float(last) + step * np.arange(count)
        ts = np.clip(ts, 0.0, 1.0)
        candidates = self.position(ts)
        dc = np.sum((candidates - query) ** 2, axis=1)
        best = int(np.argmin(dc))

        t = index / float(last)
        projected = table[index]
        if dc[best] < closest:
            closest = float(dc[best])
            t = float(ts[best])
            projected = candidates[best]
        return SegmentProjection(self, t, closest, projected)

    # ------------------------------------------------------------------
    #  Abscisse curviligne
    # ------------------------------------------------------------------

    def t_for_length(self, length):
        """Parametre t tel que la longueur de 0 a t vaille ``length``.

        Exact pour un segment lineaire. Sinon, ``length`` est borne dans
        [0, longueur totale], puis les cordes de la LUT (100 intervalles)
        sont cumulees jusqu'a depasser la cible ; t est interpole dans
        l'intervalle qui encadre la cible.

        Si la somme cumulee depasse la cible de ``overshoot`` dans
        l'intervalle i de corde d_i, t = (i + 1 - overshoot / d_i) / n :
        on recule depuis la fin de l'intervalle. La forme
        i / n + overshoot / d_i * dt, qui avance depuis son debut avec le
        depassement, n'est pas utilisee car elle n'est pas monotone.
        Le resultat est donc continu et croissant avec ``length``.

        :param length: longueur depuis le depart
        :type length: float
        :rtype: float
        """
        total = self.length
        if total == 0.0:
            return 0.0
        if self._type is SegmentType.LINEAR:
            return min(max(length / total, 0.0), 1.0)

        target = min(max(float(length), 0.0), total)
        if target == 0.0:
            return 0.0
        if target >= total:
            return 1.0

        table = self._lookup_table(ARC_LENGTH_LUT_SIZE)
        partitions = len(table) - 1
        chords = np.linalg.norm(np.diff(table, axis=0), axis=1)
        summed = np.cumsum(chords)
        index = int(np.searchsorted(summed, target, side='left'))
        if index >= partitions:
            return 1.0
        overshoot = summed[index] - target
        return float((index + 1 - overshoot / chords[index]) / partitions)

    # ------------------------------------------------------------------
    #  Subdivision
    # ------------------------------------------------------------------

    def split(self, t):
        """Coupe le segment en t (borne dans [0, 1]).

        :returns: (gauche, droite), de meme type que self
        :rtype: tuple(Segment, Segment)
        """
        u = float(np.clip(t, 0.0, 1.0))
        P = self._cpts
        if self._type is SegmentType.LINEAR:
            cut = P[0] + (P[1] - P[0]) * u
            return Segment(P[0], [], cut), Segment(cut, [], P[1])
        if self._type in (SegmentType.QUADRATIC, SegmentType.CUBIC):
            left_m, right_m = bernstein.split_matrices(len(P), u)
            return (Segment._from_polygon(left_m @ P),
                    Segment._from_polygon(right_m @ P))
        raise _unsupported(self._type)

    def sub(self, t0, t1):
        """Portion du segment entre t0 et t1.

        Si t0 > t1, la portion est parcourue en sens inverse.

        :rtype: Segment
        """
        t0 = float(np.clip(t0, 0.0, 1.0))
        t1 = float(np.clip(t1, 0.0, 1.0))
        if t0 > t1:
            return self.sub(t1, t0).reverse
        left = self.split(t1)[0]
        if t0 == 0.0:
            return left
        return left.split(t0 / t1)[1]

    # ------------------------------------------------------------------
    #  Extrema et boite englobante
    # ------------------------------------------------------------------

    def extrema(self):
        """Parametres des extrema par axe, tries, dans [0, 1].

        Racines des polygones de controle des derivees (premier niveau pour
        une quadratique, deux premiers niveaux pour une cubique), sur
        chacun des trois axes.

        :rtype: list[float]
        """
        if self._type is SegmentType.LINEAR:
            return []
        levels = bernstein.derivative_points(self._cpts)
        if self._type is SegmentType.QUADRATIC:
            polygons = levels[:1]
        elif self._type is SegmentType.CUBIC:
            polygons = levels[:2]
        else:
            raise _unsupported(self._type)
        found = set()
        for poly in polygons:
            for axis in range(3):
                found.update(bernstein.roots(poly[:, axis]))
        return sorted(t for t in found if 0.0 <= t <= 1.0)

    def extrema_points(self):
        """Points aux parametres de :meth:`extrema`, ndarray(m, 3)."""
        ext = self.extrema()
        if not ext:
            return np.empty((0, 3))
        return self.position(np.array(ext))

    @property
    def bounds(self):
        """Boite englobante serree : extremites et extrema.

        :rtype: Box
        """
        pts = np.vstack([self._cpts[:1], self._cpts[-1:],
                         self.extrema_points()])
        return Box.from_points(pts)

    # ------------------------------------------------------------------
    #  Elevation de degre, inversion
    # ------------------------------------------------------------------

    @property
    def quadratic(self):
        """Meme courbe sous forme quadratique.

        :raises RuntimeError: pour un segment cubique
        """
        if self._type is SegmentType.QUADRATIC:
            return self
        if self._type is SegmentType.LINEAR:
            return Segment._from_polygon(bernstein.elevate(self._cpts))
        raise RuntimeError(
            "Impossible de convertir un segment %s en quadratique"
            % self._type.name.lower())

    @property
    def cubic(self):
        """Meme courbe sous forme cubique."""
        if self._type is SegmentType.CUBIC:
            return self
        if self._type is SegmentType.QUADRATIC:
            return Segment._from_polygon(bernstein.elevate(self._cpts))
        if self._type is SegmentType.LINEAR:
            return Segment._from_polygon(
                bernstein.elevate(bernstein.elevate(self._cpts)))
        raise _unsupported(self._type)

    @property
    def reverse(self):
        """Meme courbe parcourue de end vers start."""
        return Segment._from_polygon(self._cpts[::-1])

    # ------------------------------------------------------------------
    #  Algebre
    # ------------------------------------------------------------------

    def _raised(self, target):
        if target is SegmentType.CUBIC:
            return self.cubic
        if target is SegmentType.QUADRATIC:
            return self.quadratic
        raise RuntimeError(
            "Un segment lineaire ne peut pas etre une cible d'elevation")

    def _aligned(self, other):
        """Polygones des deux operandes, le plus bas eleve au plus haut."""
        if self._type is other._type:
            return self._cpts, other._cpts
        target = max(self._type, other._type, key=lambda k: k.value)
        return self._raised(target)._cpts, other._raised(target)._cpts

    def __add__(self, other):
        if not isinstance(other, Segment):
            return NotImplemented
        a, b = self._aligned(other)
        return Segment._from_polygon(a + b)

    def __sub__(self, other):
        if not isinstance(other, Segment):
            return NotImplemented
        a, b = self._aligned(other)
        return Segment._from_polygon(a - b)

    def __mul__(self, scale):
        if not isinstance(scale, numbers.Real):
            return NotImplemented
        return Segment._from_polygon(self._cpts * float(scale))

    __rmul__ = __mul__

    def __truediv__(self, scale):
        if not isinstance(scale, numbers.Real):
            return NotImplemented
        return Segment._from_polygon(self._cpts / float(scale))

    # ------------------------------------------------------------------
    #  Transformation
    # ------------------------------------------------------------------

    def transform(self, matrix):
        """Applique une matrice 4x4 (affine ou projective).

        Chaque point du polygone est transforme comme un point homogene
        (x, y, z, 1), puis divise par sa composante w.

        :param matrix: matrice de transformation, ndarray(4, 4)
        :rtype: Segment
        """
        M = np.asarray(matrix, dtype=float)
        if M.shape != (4, 4):
            raise ValueError(
                "matrix doit etre (4, 4), recu shape %s" % str(M.shape))
        homogeneous = np.hstack([self._cpts, np.ones((len(self._cpts), 1))])
        h = homogeneous @ M.T
        with np.errstate(divide='ignore', invalid='ignore'):
            pts = h[:, :3] / h[:, 3:]
        return Segment._from_polygon(pts)

    # ------------------------------------------------------------------
    #  Visualisation
    # ------------------------------------------------------------------

    def plot(self, ax=None, show=True, control_polygon=True,
             sample_points=False):
        """Trace le segment dans le plan XY.

        :param ax: axes matplotlib existants (None = creation)
        :param show: appeler plt.show() a la fin
        :param control_polygon: afficher le polygone de controle
        :param sample_points: afficher les points de la LUT
        :returns: axes matplotlib
        """
        import matplotlib.pyplot as plt

        if ax is None:
            fig, ax = plt.subplots(1, 1, figsize=(10, 6))

        pts = self.position(np.linspace(0, 1, 200))
        ax.plot(pts[:, 0], pts[:, 1], 'b-', linewidth=1.5,
                label=self._type.name.lower())

        if sample_points:
            table = self._lookup_table(LUT_SIZE)
            ax.plot(table[:, 0], table[:, 1], 'b|', markersize=5,
                    label='LUT (%d points)' % len(table))

        if control_polygon:
            ax.plot(self._cpts[:, 0], self._cpts[:, 1],
                    'o--', color='gray', linewidth=0.8, markersize=4,
                    label='Polygone de controle')

        ax.set_aspect('equal')
        ax.grid(True, alpha=0.3)
        ax.legend(fontsize=8)

        if show:
            plt.show()

        return ax


# --------------------------------------------------------------------------
#  Constructeurs
# --------------------------------------------------------------------------

def line_segment(start, end):
    """Segment lineaire de start a end."""
    return Segment(start, [], end)


def quadratic_segment(start, c0, end):
    """Segment quadratique, un point de controle."""
    return Segment(start, [c0], end)


def cubic_segment(start, c0, c1, end):
    """Segment cubique, deux points de controle."""
    return Segment(start, [c0, c1], end)

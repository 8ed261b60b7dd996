#!/usr/bin/python
#-*-coding: utf-8 -*-

"""
Package curvetools : noyau de segments de Bezier 3D.

Evaluation, projection, abscisse curviligne, subdivision, extrema et
algebre a degre normalise sur des segments lineaires, quadratiques ou
cubiques.

Usage::

    from curvetools import cubic_segment

    c = cubic_segment([0, 0, 0], [0, 10, 0], [10, 10, 0], [10, 0, 0])
    left, right = c.split(0.5)
    c.project([5, 9, 0]).t

@author: Nervures
@date: 2026-02
"""

from .segment import (Segment, SegmentType, SegmentProjection,
                      line_segment, quadratic_segment, cubic_segment)
from .box import Box
from .segmentconfig import load_config, load_defaults, merge_params

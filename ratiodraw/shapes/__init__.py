"""
Exercise generation: shape type, target ratio and (for complex variants)
the unit-square polygon.

Usage::

    from ratiodraw.shapes import create_exercise, shape_bbox
    ex = create_exercise("random", "medium")
    bb = shape_bbox(ex)
"""

import numpy as np

from ratiodraw.config import DIFFICULTY_PRESETS, RANDOM_SHAPE, SHAPE_TYPES
from ratiodraw.shapes._types import Exercise, PixelBBox, Ratio, ShapeType  # noqa: F401
from ratiodraw.shapes.geometry import PathContext, shape_bbox, trace_path  # noqa: F401
from ratiodraw.shapes.polygons import generate_complex_points

COMPLEX_DENSITY = {ShapeType.COMPLEX: 1, ShapeType.COMPLEX_ROUNDED: 2}


def random_shape_type(rng=None) -> ShapeType:
    """Uniform pick among the concrete shape types."""
    rng = np.random if rng is None else rng
    return ShapeType(SHAPE_TYPES[rng.randint(len(SHAPE_TYPES))])


def generate_ratio(difficulty, rng=None) -> Ratio:
    """Random width:height ratio drawn from the difficulty's distribution."""
    try:
        preset = DIFFICULTY_PRESETS[difficulty]
    except KeyError:
        raise ValueError(f"Unknown difficulty: {difficulty!r}") from None
    rng = np.random if rng is None else rng

    if preset.float_range is not None and rng.random_sample() < preset.float_prob:
        lo, hi = preset.float_range
        # one decimal place, kept strictly below hi
        w = np.floor(rng.uniform(lo, hi) * 10) / 10
        h = np.floor(rng.uniform(lo, hi) * 10) / 10
    else:
        w = rng.randint(1, preset.int_max + 1)
        h = rng.randint(1, preset.int_max + 1)
    return Ratio(float(w), float(h))


def create_exercise(shape_type, difficulty, rng=None) -> Exercise:
    """New exercise; *shape_type* may be ``"random"``."""
    if shape_type == RANDOM_SHAPE:
        shape_type = random_shape_type(rng)
    try:
        shape_type = ShapeType(shape_type)
    except ValueError:
        raise ValueError(f"Unknown shape type: {shape_type!r}") from None

    ratio = generate_ratio(difficulty, rng)
    points = None
    if shape_type.is_complex:
        points = tuple(generate_complex_points(COMPLEX_DENSITY[shape_type], rng))
    return Exercise(shape_type, ratio, points)

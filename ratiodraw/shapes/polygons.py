"""
Irregular polygon generator for the "complex" exercise variants.

Points are scattered on all four edges of the unit square (so the outline
always touches every side of its bounding box) plus a few interior points,
ordered by angle around the square's centre and stretched back to exactly
fill [0, 1] x [0, 1].
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)

MAX_INTERIOR_POINTS = 6


def _edge_points(rng):
    return [
        (rng.random_sample(), 0.0),   # top
        (1.0, rng.random_sample()),   # right
        (rng.random_sample(), 1.0),   # bottom
        (0.0, rng.random_sample()),   # left
    ]


def sort_by_angle(points, center=(0.5, 0.5)):
    """Order points by atan2 around *center*, ascending."""
    cx, cy = center
    return sorted(points, key=lambda p: np.arctan2(p[1] - cy, p[0] - cx))


def renormalize(points):
    """Stretch *points* so their tight bounding box is exactly [0, 1]^2.

    Each axis is scaled independently; a zero extent keeps scale 1.
    """
    arr = np.asarray(points, dtype=np.float64)
    lo = arr.min(axis=0)
    hi = arr.max(axis=0)
    center = (lo + hi) / 2
    extent = hi - lo
    extent[extent == 0] = 1.0
    out = (arr - center) / extent + 0.5
    return [(float(x), float(y)) for x, y in out]


def generate_complex_points(density, rng=None):
    """Random closed polygon in the unit square.

    Parameters
    ----------
    density : int
        Points per square edge.  1 gives the sharper "complex" outline,
        2 the denser one consumed by the corner-rounding tracer.
    rng : numpy RandomState-like, optional
        Defaults to the global ``numpy.random`` state.

    Returns
    -------
    list of (x, y)
    """
    rng = np.random if rng is None else rng
    pts = []
    for _ in range(density):
        pts.extend(_edge_points(rng))
    n_interior = rng.randint(0, MAX_INTERIOR_POINTS + 1)
    for _ in range(n_interior):
        pts.append((rng.random_sample(), rng.random_sample()))

    pts = renormalize(sort_by_angle(pts))
    logger.debug("complex polygon: density=%d, %d interior, %d points",
                 density, n_interior, len(pts))
    return pts

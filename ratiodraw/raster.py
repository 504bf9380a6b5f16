"""
Low-level rasterization utilities backed by OpenCV.

All drawing functions operate in place on uint8 numpy images (H, W) or
(H, W, 3) and take coordinates in canvas space, where pixel (i, j) covers
the unit square [i, i+1) x [j, j+1).  Coordinates are handed to OpenCV in
fixed point (``SHIFT`` fractional bits) so sub-pixel positions survive the
shared-scale rendering of the overlap engine.
"""

import cv2
import numpy as np

from ratiodraw.config import WHITE

SHIFT = 4
_ONE = 1 << SHIFT


# ---------------------------------------------------------------------------
# Canvases
# ---------------------------------------------------------------------------

def new_canvas(size, color=WHITE, channels=3):
    """Return a square uint8 canvas filled with *color*."""
    if channels == 1:
        value = color if np.isscalar(color) else color[0]
        return np.full((size, size), value, dtype=np.uint8)
    return np.full((size, size, channels), color, dtype=np.uint8)


def to_luminance(img):
    """Grayscale view of *img* (copy for colour images)."""
    if img.ndim == 2:
        return img
    return cv2.cvtColor(img, cv2.COLOR_RGB2GRAY)


def _fixed(p):
    return (int(round((float(p[0]) - 0.5) * _ONE)),
            int(round((float(p[1]) - 0.5) * _ONE)))


def _fixed_array(points):
    return np.array([_fixed(p) for p in points], dtype=np.int32)


def _line_type(antialias):
    return cv2.LINE_AA if antialias else cv2.LINE_8


def _thickness(width):
    return max(1, int(round(width)))


# ---------------------------------------------------------------------------
# Core primitives
# ---------------------------------------------------------------------------

def rasterize_line(img, p1, p2, color=0, thickness=1, antialias=True):
    """Draw a line segment with round caps."""
    cv2.line(img, _fixed(p1), _fixed(p2), color, _thickness(thickness),
             lineType=_line_type(antialias), shift=SHIFT)
    return img


def rasterize_polyline(img, points, color=0, thickness=1, closed=False,
                       antialias=True):
    """Draw connected line segments through a list of points."""
    if len(points) < 2:
        return img
    cv2.polylines(img, [_fixed_array(points)], closed, color,
                  _thickness(thickness), lineType=_line_type(antialias),
                  shift=SHIFT)
    return img


def rasterize_dashed_polyline(img, points, color=0, thickness=1, closed=False,
                              dash_len=6, gap_len=4):
    """Draw a dashed polyline.  The dash pattern runs on across vertices."""
    pts = [np.array([float(p[0]), float(p[1])]) for p in points]
    if closed and len(pts) > 1:
        pts.append(pts[0])
    pattern = (dash_len, gap_len)
    phase = 0          # index into pattern
    left = pattern[0]  # remaining length of the current dash/gap
    for a, b in zip(pts[:-1], pts[1:]):
        d = b - a
        length = np.linalg.norm(d)
        if length < 1e-9:
            continue
        unit = d / length
        pos = 0.0
        while pos < length:
            step = min(left, length - pos)
            if phase == 0:
                rasterize_line(img, a + unit * pos, a + unit * (pos + step),
                               color, thickness)
            pos += step
            left -= step
            if left <= 1e-9:
                phase = 1 - phase
                left = pattern[phase]
    return img


def rasterize_filled_polygons(img, polygons, color=0, antialias=True):
    """Fill one or more closed polygons (even-odd free, OpenCV fillPoly)."""
    polys = [_fixed_array(poly) for poly in polygons if len(poly) >= 3]
    if polys:
        cv2.fillPoly(img, polys, color, lineType=_line_type(antialias),
                     shift=SHIFT)
    return img


def blend_filled_polygons(img, polygons, color, alpha):
    """Fill polygons with *color* at opacity *alpha* over *img*."""
    layer = img.copy()
    rasterize_filled_polygons(layer, polygons, color)
    cv2.addWeighted(layer, alpha, img, 1.0 - alpha, 0.0, dst=img)
    return img


def rasterize_filled_circle(img, center, radius, color=0, antialias=True):
    """Draw a filled circle."""
    cv2.circle(img, _fixed(center), max(1, int(round(radius * _ONE))), color,
               -1, lineType=_line_type(antialias), shift=SHIFT)
    return img


def rasterize_dashed_rectangle(img, x, y, w, h, color=0, thickness=1,
                               dash_len=4, gap_len=3):
    """Dashed axis-aligned rectangle outline."""
    corners = [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]
    return rasterize_dashed_polyline(img, corners, color, thickness, True,
                                     dash_len, gap_len)


def draw_grid(img, spacing, color, radius=1):
    """Dot grid, one dot every *spacing* pixels (edges excluded)."""
    size = img.shape[0]
    for gx in range(spacing, size, spacing):
        for gy in range(spacing, size, spacing):
            rasterize_filled_circle(img, (gx, gy), radius, color)
    return img


# ---------------------------------------------------------------------------
# Curve sampling (public, used by path flattening)
# ---------------------------------------------------------------------------

def bezier_samples(control_points, num_samples=16):
    """Evaluate a Bezier curve (any degree) via De Casteljau's algorithm."""
    cp = np.array(control_points, dtype=np.float64)
    n = len(cp) - 1
    ts = np.linspace(0, 1, num_samples)
    pts = []
    for t in ts:
        tmp = cp.copy()
        for k in range(n):
            tmp[:n - k] = (1 - t) * tmp[:n - k] + t * tmp[1:n - k + 1]
        pts.append((float(tmp[0][0]), float(tmp[0][1])))
    return pts


def ellipse_samples(center, axes, num_samples=96):
    """Points around an axis-aligned ellipse, clockwise in screen space."""
    cx, cy = center
    rx, ry = axes
    angles = np.linspace(0, 2 * np.pi, num_samples, endpoint=False)
    return [(cx + rx * np.cos(a), cy + ry * np.sin(a)) for a in angles]

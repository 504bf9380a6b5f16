"""
Headless freehand drawing surface.

Records pointer samples into strokes, supports undo / clear, renders the
ink with pressure-dependent width (eraser strokes paint background) and
reports the drawing's bounding box either from the recorded points or from
the pixels that are actually visible.

Pointer capture itself lives with the caller: feed samples through
``begin_stroke`` / ``extend_stroke`` / ``end_stroke``.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from ratiodraw.config import (
    BRUSH_MODES, BRUSH_RANGE, CANVAS_RES, DEFAULT_BRUSH, GRID_DOT,
    GRID_SPACING, INK, WHITE,
)
from ratiodraw.raster import (
    draw_grid, new_canvas, rasterize_filled_circle, rasterize_line,
    to_luminance,
)

logger = logging.getLogger(__name__)

# Rendered pixels darker than this count as visible ink (grid dots do not).
VISIBLE_INK_THRESHOLD = 128


def normalize_pressure(pressure):
    """Mouse pointers report 0 while pressed; treat that as half pressure."""
    return float(pressure) if pressure and pressure > 0 else 0.5


@dataclass
class StrokePoint:
    x: float
    y: float
    pressure: float = 0.5


@dataclass
class Stroke:
    points: List[StrokePoint] = field(default_factory=list)
    is_eraser: bool = False
    brush_size: float = DEFAULT_BRUSH["pen"]

    def copy(self):
        return Stroke([StrokePoint(p.x, p.y, p.pressure) for p in self.points],
                      self.is_eraser, self.brush_size)


@dataclass(frozen=True)
class DrawnBBox:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def w(self):
        return self.max_x - self.min_x

    @property
    def h(self):
        return self.max_y - self.min_y

    @property
    def cx(self):
        return (self.min_x + self.max_x) / 2

    @property
    def cy(self):
        return (self.min_y + self.max_y) / 2

    @classmethod
    def from_points(cls, points):
        """Tight box around (x, y) pairs or StrokePoints; None if empty."""
        xy = [(p.x, p.y) if isinstance(p, StrokePoint) else (p[0], p[1])
              for p in points]
        if not xy:
            return None
        arr = np.asarray(xy, dtype=np.float64)
        return cls(float(arr[:, 0].min()), float(arr[:, 0].max()),
                   float(arr[:, 1].min()), float(arr[:, 1].max()))


# ---------------------------------------------------------------------------
# Brush settings
# ---------------------------------------------------------------------------

class BrushSettings:
    """Brush size per mode (pen / eraser), optionally persisted as JSON."""

    def __init__(self, sizes=None):
        self._sizes = dict(DEFAULT_BRUSH)
        for mode, size in (sizes or {}).items():
            self.set(mode, size)

    @staticmethod
    def _check_mode(mode):
        if mode not in BRUSH_MODES:
            raise ValueError(f"Unknown brush mode: {mode!r}")

    def get(self, mode="pen"):
        self._check_mode(mode)
        return self._sizes[mode]

    def set(self, mode, size):
        self._check_mode(mode)
        lo, hi = BRUSH_RANGE
        self._sizes[mode] = int(min(hi, max(lo, round(float(size)))))
        return self._sizes[mode]

    def to_dict(self):
        return dict(self._sizes)

    def save(self, path):
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path):
        if not os.path.exists(path):
            raise FileNotFoundError(f"No brush settings at: {path}")
        with open(path) as f:
            return cls(json.load(f))


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_stroke(img, stroke, ink=INK, background=WHITE):
    """Draw one stroke; width follows pressure, eraser paints *background*."""
    pts = stroke.points
    if not pts:
        return img
    color = background if stroke.is_eraser else ink
    size = stroke.brush_size
    if len(pts) == 1:
        rasterize_filled_circle(img, (pts[0].x, pts[0].y),
                                size * pts[0].pressure, color)
        return img
    for p0, p1 in zip(pts[:-1], pts[1:]):
        width = size * ((p0.pressure + p1.pressure) / 2) * 2
        rasterize_line(img, (p0.x, p0.y), (p1.x, p1.y), color, width)
    return img


def render_strokes(strokes, size=CANVAS_RES, grid=True):
    """Fresh canvas with the grid and every stroke in order."""
    img = new_canvas(size)
    if grid:
        draw_grid(img, GRID_SPACING, GRID_DOT)
    for stroke in strokes:
        render_stroke(img, stroke)
    return img


def visible_ink_bbox(img, threshold=VISIBLE_INK_THRESHOLD):
    """Bounding box of dark pixels in a rendered drawing, or None."""
    ys, xs = np.nonzero(to_luminance(img) < threshold)
    if len(xs) == 0:
        return None
    # pixel (i, j) spans [i, i+1)
    return DrawnBBox(float(xs.min()), float(xs.max() + 1),
                     float(ys.min()), float(ys.max() + 1))


# ---------------------------------------------------------------------------
# Drawing session
# ---------------------------------------------------------------------------

class DrawingSession:
    """Ordered, append-only stroke list with undo / clear."""

    def __init__(self, brush=None, size=CANVAS_RES):
        self.brush = brush or BrushSettings()
        self.size = size
        self.eraser = False
        self._strokes: List[Stroke] = []
        self._current: Optional[Stroke] = None
        self._overlay_fn = None

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    @property
    def is_drawing(self):
        return self._current is not None

    def begin_stroke(self, x, y, pressure=0.5):
        mode = "eraser" if self.eraser else "pen"
        self._overlay_fn = None
        self._current = Stroke([StrokePoint(x, y, normalize_pressure(pressure))],
                               self.eraser, self.brush.get(mode))

    def extend_stroke(self, points):
        """Append coalesced samples: (x, y) or (x, y, pressure) tuples."""
        if self._current is None:
            return
        for p in points:
            pressure = p[2] if len(p) > 2 else 0.5
            self._current.points.append(
                StrokePoint(p[0], p[1], normalize_pressure(pressure)))

    def end_stroke(self):
        stroke, self._current = self._current, None
        if stroke is not None and stroke.points:
            self._strokes.append(stroke)
            logger.debug("stroke committed: %d points, eraser=%s",
                         len(stroke.points), stroke.is_eraser)

    def add_stroke(self, points, pressure=0.5):
        """Record a whole stroke at once (scripted input, tests)."""
        pts = list(points)
        if not pts:
            return
        first = pts[0]
        self.begin_stroke(first[0], first[1],
                          first[2] if len(first) > 2 else pressure)
        self.extend_stroke([p if len(p) > 2 else (p[0], p[1], pressure)
                            for p in pts[1:]])
        self.end_stroke()

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def undo(self):
        if self._strokes:
            self._strokes.pop()

    def clear(self):
        self._strokes = []
        self._current = None
        self._overlay_fn = None

    def is_empty(self):
        return not self._strokes

    def strokes(self):
        """Snapshot of committed strokes."""
        return [s.copy() for s in self._strokes]

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def bounding_box(self):
        """Box around every recorded pen point (erasing not accounted for)."""
        return DrawnBBox.from_points(
            p for s in self._strokes if not s.is_eraser for p in s.points)

    def visible_bounding_box(self):
        """Box around ink that is still visible after erasing."""
        if self.is_empty():
            return None
        return visible_ink_bbox(render_strokes(self._strokes, self.size, grid=False))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def set_overlay(self, fn):
        """*fn(img)* is drawn on top of the strokes at every render."""
        self._overlay_fn = fn

    def render(self):
        strokes = list(self._strokes)
        if self._current is not None:
            strokes.append(self._current)
        img = render_strokes(strokes, self.size)
        if self._overlay_fn is not None:
            self._overlay_fn(img)
        return img

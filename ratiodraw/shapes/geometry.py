"""
Shape geometry: reference bounding box and outline tracing.

``trace_path`` writes a shape's closed outline into a path context using a
canvas-like vocabulary (move_to / line_to / quadratic_curve_to / rect /
ellipse).  Every presentation (filled reference, dashed overlay, overlap
mask) goes through the same tracer, so they always agree on the outline.
"""

from ratiodraw.config import CANVAS_RES, FILL_RATIO
from ratiodraw.raster import bezier_samples, ellipse_samples
from ratiodraw.shapes._types import PixelBBox, ShapeType


def shape_bbox(exercise, canvas_res=CANVAS_RES, fill_ratio=FILL_RATIO):
    """Pixel bounding box of the reference shape, centred on the canvas.

    The larger side of the ratio occupies ``fill_ratio`` of the canvas.
    """
    ratio = exercise.ratio
    scale = canvas_res * fill_ratio / max(ratio.w, ratio.h)
    w = ratio.w * scale
    h = ratio.h * scale
    return PixelBBox((canvas_res - w) / 2, (canvas_res - h) / 2, w, h)


# ---------------------------------------------------------------------------
# Path context
# ---------------------------------------------------------------------------

class PathContext:
    """Records a path and flattens it into polygons.

    Curves are sampled on the fly, so ``polygons()`` is ready for
    ``cv2.fillPoly`` / ``cv2.polylines``.
    """

    def __init__(self, curve_samples=12, ellipse_samples=96):
        self.curve_samples = curve_samples
        self.ellipse_samples = ellipse_samples
        self.begin_path()

    def begin_path(self):
        self._subpaths = []
        self._current = None

    def _ensure_current(self, x, y):
        if self._current is None:
            self.move_to(x, y)

    def move_to(self, x, y):
        self._current = [(float(x), float(y))]
        self._subpaths.append(self._current)

    def line_to(self, x, y):
        if self._current is None:
            self.move_to(x, y)
            return
        self._current.append((float(x), float(y)))

    def quadratic_curve_to(self, cpx, cpy, x, y):
        self._ensure_current(cpx, cpy)
        start = self._current[-1]
        pts = bezier_samples([start, (cpx, cpy), (x, y)], self.curve_samples)
        self._current.extend(pts[1:])

    def rect(self, x, y, w, h):
        self.move_to(x, y)
        self.line_to(x + w, y)
        self.line_to(x + w, y + h)
        self.line_to(x, y + h)
        self.close_path()

    def ellipse(self, cx, cy, rx, ry):
        pts = ellipse_samples((cx, cy), (rx, ry), self.ellipse_samples)
        self.move_to(*pts[0])
        for p in pts[1:]:
            self.line_to(*p)
        self.close_path()

    def close_path(self):
        if self._current:
            start = self._current[0]
            self._current = None
            self.move_to(*start)

    def polygons(self):
        """Closed subpaths with at least two vertices."""
        return [list(sp) for sp in self._subpaths if len(sp) >= 2]

    def is_empty(self):
        return not self.polygons()


# ---------------------------------------------------------------------------
# Tracers
# ---------------------------------------------------------------------------

def _map_points(points, x, y, w, h):
    return [(x + px * w, y + py * h) for px, py in points]


def _trace_rectangle(ctx, exercise, x, y, w, h):
    ctx.rect(x, y, w, h)


def _trace_ellipse(ctx, exercise, x, y, w, h):
    ctx.ellipse(x + w / 2, y + h / 2, w / 2, h / 2)


def _trace_triangle(ctx, exercise, x, y, w, h):
    ctx.move_to(x + w / 2, y)
    ctx.line_to(x + w, y + h)
    ctx.line_to(x, y + h)
    ctx.close_path()


def _trace_complex(ctx, exercise, x, y, w, h):
    if not exercise.points:
        return
    mapped = _map_points(exercise.points, x, y, w, h)
    ctx.move_to(*mapped[0])
    for p in mapped[1:]:
        ctx.line_to(*p)
    ctx.close_path()


def _trace_complex_rounded(ctx, exercise, x, y, w, h):
    # Corners become quadratic curves: each vertex is the control point
    # between the midpoints of its two edges.
    if not exercise.points:
        return
    mapped = _map_points(exercise.points, x, y, w, h)
    n = len(mapped)
    last, first = mapped[-1], mapped[0]
    ctx.move_to((last[0] + first[0]) / 2, (last[1] + first[1]) / 2)
    for i in range(n):
        cur = mapped[i]
        nxt = mapped[(i + 1) % n]
        ctx.quadratic_curve_to(cur[0], cur[1],
                               (cur[0] + nxt[0]) / 2, (cur[1] + nxt[1]) / 2)
    ctx.close_path()


TRACERS = {
    ShapeType.RECTANGLE: _trace_rectangle,
    ShapeType.ELLIPSE: _trace_ellipse,
    ShapeType.TRIANGLE: _trace_triangle,
    ShapeType.COMPLEX: _trace_complex,
    ShapeType.COMPLEX_ROUNDED: _trace_complex_rounded,
}


def trace_path(ctx, exercise, x, y, w, h):
    """Begin a new path on *ctx* and trace the exercise's outline into it.

    Unknown shape types leave the path empty.
    """
    ctx.begin_path()
    tracer = TRACERS.get(exercise.shape_type)
    if tracer is not None:
        tracer(ctx, exercise, x, y, w, h)
    return ctx


def outline_polygons(exercise, x, y, w, h):
    """Flattened closed outline(s) of the shape at the given box."""
    return trace_path(PathContext(), exercise, x, y, w, h).polygons()

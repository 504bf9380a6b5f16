"""
Scoring a freehand drawing against the reference shape.

Three axes, each 0-100:

* ratio  - width:height of the drawn box vs the reference box
* size   - largest dimension of the drawn box vs the reference box
* shape  - pixel IoU of the filled reference vs the region the strokes
           enclose, both rendered at one shared scale

All box dimensions are canvas pixels (``CANVAS_RES`` space).
"""

import logging
from dataclasses import asdict, dataclass

import numpy as np

from ratiodraw.config import (
    GOOD_MATCH, INK_THRESHOLD, OV_DOT_RADIUS, OV_FILL, OV_LINE_WIDTH, OV_SIZE,
    RATIO_SPOT_ON_PCT, RATIO_WEIGHT, SHAPE_WEIGHT, SIZE_SPOT_ON_PCT,
    SIZE_WEIGHT, SOME_DEVIATION,
)
from ratiodraw.raster import (
    new_canvas, rasterize_filled_circle, rasterize_polyline, to_luminance,
)
from ratiodraw.shapes.render import render_shape_filled

logger = logging.getLogger(__name__)


@dataclass
class RatioSizeResult:
    ratio_score: int
    size_score: int
    ratio_detail: str
    size_detail: str
    hint: str


@dataclass
class OverlapResult:
    shape_score: int
    shape_detail: str


@dataclass
class AnalysisResult:
    ratio_score: int
    size_score: int
    shape_score: int
    overall_score: int
    ratio_detail: str
    size_detail: str
    shape_detail: str
    hint: str

    def to_dict(self):
        return asdict(self)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _round(v):
    """Round half up."""
    return int(np.floor(v + 0.5))


def clamp(n, lo=0, hi=100):
    return max(lo, min(hi, n))


def relative_score(drawn, target):
    """100 at equality, falling linearly to 0 at 100% relative difference."""
    diff = abs(drawn - target) / target
    return clamp(_round(100 * (1 - diff)))


def score_class(n):
    """Bucket a 0-100 score: ex / good / ok / poor."""
    if n >= 85:
        return "ex"
    if n >= 70:
        return "good"
    if n >= 50:
        return "ok"
    return "poor"


def describe_ratio(drawn, target):
    pct = abs((drawn - target) / target * 100)
    if pct < RATIO_SPOT_ON_PCT:
        return "spot on"
    if drawn > target:
        return f"{pct:.0f}% too wide"
    return f"{pct:.0f}% too tall"


def describe_size(drawn, ref):
    pct = abs((drawn - ref) / ref * 100)
    if pct < SIZE_SPOT_ON_PCT:
        return "spot on"
    if drawn > ref:
        return f"{pct:.0f}% too large"
    return f"{pct:.0f}% too small"


def make_hint(ratio_score, size_score, drawn_ratio, target_ratio, drawn_dim, ref_dim):
    if ratio_score >= 85 and size_score >= 85:
        return "Both ratio and size are spot on!"

    parts = []
    if ratio_score < 85:
        parts.append("make it narrower (or taller)" if drawn_ratio > target_ratio
                     else "make it wider (or shorter)")
    if size_score < 70:
        parts.append("draw it smaller" if drawn_dim > ref_dim else "draw it larger")
    return "; ".join(parts) if parts else "Good - keep practising!"


def shape_verdict(score):
    if score >= GOOD_MATCH:
        return "good match"
    if score >= SOME_DEVIATION:
        return "some deviation"
    return "shape mismatch"


# ---------------------------------------------------------------------------
# Ratio / size
# ---------------------------------------------------------------------------

def analyze_drawing(drawn_bbox, ref_bbox):
    """Compare box proportions and largest dimensions.

    Parameters
    ----------
    drawn_bbox : object with ``w`` and ``h`` (both > 0)
    ref_bbox : object with ``w`` and ``h`` (both > 0)

    Returns
    -------
    RatioSizeResult
    """
    drawn_ratio = drawn_bbox.w / drawn_bbox.h
    target_ratio = ref_bbox.w / ref_bbox.h
    ratio_score = relative_score(drawn_ratio, target_ratio)

    drawn_max = max(drawn_bbox.w, drawn_bbox.h)
    ref_max = max(ref_bbox.w, ref_bbox.h)
    size_score = relative_score(drawn_max, ref_max)

    return RatioSizeResult(
        ratio_score=ratio_score,
        size_score=size_score,
        ratio_detail=describe_ratio(drawn_ratio, target_ratio),
        size_detail=describe_size(drawn_max, ref_max),
        hint=make_hint(ratio_score, size_score, drawn_ratio, target_ratio,
                       drawn_max, ref_max),
    )


# ---------------------------------------------------------------------------
# Shape overlap (pixel IoU)
# ---------------------------------------------------------------------------

def _stroke_xy(stroke):
    pts = stroke.points if hasattr(stroke, "points") else stroke
    return [(p.x, p.y) if hasattr(p, "x") else (p[0], p[1]) for p in pts]


def flood_fill_exterior(gray, threshold=INK_THRESHOLD):
    """Mark background reachable from the canvas border.

    4-connected BFS seeded from every border pixel, blocked by pixels darker
    than *threshold*.  Light pixels left unmarked are enclosed by ink.

    Returns
    -------
    exterior : bool ndarray, same shape as *gray*
    """
    h, w = gray.shape
    passable = (np.asarray(gray) >= threshold).ravel().tolist()
    exterior = bytearray(w * h)
    queue = []

    def enqueue(idx):
        if not exterior[idx] and passable[idx]:
            exterior[idx] = 1
            queue.append(idx)

    for x in range(w):
        enqueue(x)
        enqueue((h - 1) * w + x)
    for y in range(1, h - 1):
        enqueue(y * w)
        enqueue(y * w + w - 1)

    head = 0
    while head < len(queue):
        idx = queue[head]
        head += 1
        x = idx % w
        if x > 0:
            enqueue(idx - 1)
        if x < w - 1:
            enqueue(idx + 1)
        if idx >= w:
            enqueue(idx - w)
        if idx < (h - 1) * w:
            enqueue(idx + w)

    return np.frombuffer(bytes(exterior), dtype=np.uint8).reshape(h, w).astype(bool)


def render_reference_mask(exercise, ref_bbox, size=OV_SIZE, fill=OV_FILL):
    """Canvas A: reference shape filled black at the shared scale, centred."""
    scale = fill / max(ref_bbox.w, ref_bbox.h)
    half = size / 2
    rw = ref_bbox.w * scale
    rh = ref_bbox.h * scale
    img = new_canvas(size, 255, channels=1)
    render_shape_filled(img, exercise, half - rw / 2, half - rh / 2, rw, rh, 0)
    return img


def render_stroke_mask(ref_bbox, drawn_bbox, strokes, size=OV_SIZE, fill=OV_FILL):
    """Canvas B: strokes at the reference's scale, drawn box centred.

    Only geometry is kept: fixed line width, no pressure, eraser strokes
    skipped.
    """
    scale = fill / max(ref_bbox.w, ref_bbox.h)
    half = size / 2
    dtx = half - drawn_bbox.cx * scale
    dty = half - drawn_bbox.cy * scale

    img = new_canvas(size, 255, channels=1)
    for stroke in strokes:
        if getattr(stroke, "is_eraser", False):
            continue
        pts = [(x * scale + dtx, y * scale + dty) for x, y in _stroke_xy(stroke)]
        if not pts:
            continue
        if len(pts) == 1:
            rasterize_filled_circle(img, pts[0], OV_DOT_RADIUS, 0, antialias=False)
            continue
        rasterize_polyline(img, pts, 0, OV_LINE_WIDTH, closed=False, antialias=False)
    return img


def overlap_masks(exercise, ref_bbox, drawn_bbox, strokes, size=OV_SIZE,
                  fill=OV_FILL, threshold=INK_THRESHOLD):
    """Boolean (in_ref, in_drawn) masks on the shared offscreen canvas."""
    ref_img = render_reference_mask(exercise, ref_bbox, size, fill)
    drawn_img = render_stroke_mask(ref_bbox, drawn_bbox, strokes, size, fill)

    exterior = flood_fill_exterior(drawn_img, threshold)
    in_ref = to_luminance(ref_img) < threshold
    in_drawn = (to_luminance(drawn_img) < threshold) | ~exterior
    return in_ref, in_drawn


def iou_score(in_ref, in_drawn):
    intersection = int(np.count_nonzero(in_ref & in_drawn))
    union = int(np.count_nonzero(in_ref | in_drawn))
    logger.debug("overlap: intersection=%d union=%d", intersection, union)
    if union == 0:
        return 0
    return clamp(_round(100 * intersection / union))


def compute_shape_overlap(exercise, ref_bbox, drawn_bbox, strokes):
    """Pixel IoU between the reference and the region the strokes enclose.

    Both are rendered at the SAME scale (fit from the reference), so a
    drawing of the wrong size or proportion loses overlap instead of being
    normalised away.

    Parameters
    ----------
    exercise : Exercise
    ref_bbox : PixelBBox
    drawn_bbox : DrawnBBox (``cx``, ``cy`` used)
    strokes : list of Stroke, or of point sequences

    Returns
    -------
    OverlapResult
    """
    in_ref, in_drawn = overlap_masks(exercise, ref_bbox, drawn_bbox, strokes)
    score = iou_score(in_ref, in_drawn)
    return OverlapResult(score, shape_verdict(score))


# ---------------------------------------------------------------------------
# Combined
# ---------------------------------------------------------------------------

def overall_score(ratio_score, size_score, shape_score):
    return clamp(_round(ratio_score * RATIO_WEIGHT + size_score * SIZE_WEIGHT
                        + shape_score * SHAPE_WEIGHT))


def evaluate(exercise, ref_bbox, drawn_bbox, strokes):
    """All three scores plus the weighted overall score."""
    rs = analyze_drawing(drawn_bbox, ref_bbox)
    ov = compute_shape_overlap(exercise, ref_bbox, drawn_bbox, strokes)
    return AnalysisResult(
        ratio_score=rs.ratio_score,
        size_score=rs.size_score,
        shape_score=ov.shape_score,
        overall_score=overall_score(rs.ratio_score, rs.size_score, ov.shape_score),
        ratio_detail=rs.ratio_detail,
        size_detail=rs.size_detail,
        shape_detail=ov.shape_detail,
        hint=rs.hint,
    )

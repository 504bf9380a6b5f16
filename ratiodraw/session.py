"""
One practice session: generate a target, collect a drawing, analyse it.

The session owns the current exercise, the rendered reference and the
drawing surface.  Analysis results are not kept beyond the call.
"""

import logging

import cv2

from ratiodraw.analysis import evaluate
from ratiodraw.config import (
    CANVAS_RES, DRAWN_BOX, MIN_DRAWN_SIZE, REF_FILL, REF_STROKE,
)
from ratiodraw.drawing import DrawingSession
from ratiodraw.raster import (
    new_canvas, rasterize_dashed_polyline, rasterize_dashed_rectangle,
)
from ratiodraw.shapes import create_exercise
from ratiodraw.shapes.render import render_shape, render_shape_outline

logger = logging.getLogger(__name__)


def format_ratio(ratio):
    """``"w : h  (w/h)"`` with the quotient to three decimals."""
    return f"{ratio.w:g} : {ratio.h:g}  ({ratio.w / ratio.h:.3f})"


def draw_legend(img):
    """Small "target" / "drawn area" key in the bottom-left corner."""
    lx, by = 10, img.shape[0] - 10
    rasterize_dashed_polyline(img, [(lx, by - 14), (lx + 18, by - 14)],
                              REF_FILL, 2, dash_len=6, gap_len=4)
    rasterize_dashed_polyline(img, [(lx, by), (lx + 18, by)],
                              DRAWN_BOX, 1, dash_len=4, gap_len=3)
    font = cv2.FONT_HERSHEY_SIMPLEX
    cv2.putText(img, "target", (lx + 22, by - 10), font, 0.35, REF_STROKE, 1,
                cv2.LINE_AA)
    cv2.putText(img, "drawn area", (lx + 22, by + 4), font, 0.35, DRAWN_BOX, 1,
                cv2.LINE_AA)
    return img


class ExerciseSession:
    """Generate / draw / analyse loop without any UI.

    Parameters
    ----------
    shape_type : str
        One of the shape types, or ``"random"``.
    difficulty : str
        ``"easy"``, ``"medium"`` or ``"hard"``.
    brush : BrushSettings or None
        Injected brush preferences for the drawing surface.
    rng : numpy RandomState-like or None
    """

    def __init__(self, shape_type="random", difficulty="medium", brush=None,
                 rng=None, canvas_res=CANVAS_RES):
        self.shape_type = shape_type
        self.difficulty = difficulty
        self.rng = rng
        self.canvas_res = canvas_res
        self.drawing = DrawingSession(brush=brush, size=canvas_res)
        self.exercise = None
        self.ref_bbox = None
        self.reference = new_canvas(canvas_res)
        self.ratio_revealed = None

    def generate(self):
        """Start a new round: fresh target, empty drawing, hidden ratio."""
        self.exercise = create_exercise(self.shape_type, self.difficulty, self.rng)
        self.ref_bbox = render_shape(self.reference, self.exercise)
        self.ratio_revealed = None
        self.drawing.clear()
        logger.info("new exercise: %s %g:%g (%s)", self.exercise.shape_type.value,
                    self.exercise.ratio.w, self.exercise.ratio.h, self.difficulty)
        return self.exercise

    def reveal_ratio(self):
        if self.exercise is None:
            return None
        self.ratio_revealed = format_ratio(self.exercise.ratio)
        return self.ratio_revealed

    def drawn_bbox(self, use_visible_bbox=False):
        if use_visible_bbox:
            return self.drawing.visible_bounding_box()
        return self.drawing.bounding_box()

    def analyze(self, use_visible_bbox=False):
        """Score the current drawing.

        Returns None (and changes nothing) when there is no exercise, nothing
        drawn, or the drawing is under ``MIN_DRAWN_SIZE`` in either direction.
        """
        if self.exercise is None or self.drawing.is_empty():
            return None
        drawn = self.drawn_bbox(use_visible_bbox)
        if drawn is None or drawn.w < MIN_DRAWN_SIZE or drawn.h < MIN_DRAWN_SIZE:
            logger.info("drawing too small to analyse: %s", drawn)
            return None

        result = evaluate(self.exercise, self.ref_bbox, drawn, self.drawing.strokes())
        logger.info("analysis: ratio=%d size=%d shape=%d overall=%d",
                    result.ratio_score, result.size_score, result.shape_score,
                    result.overall_score)
        self.reveal_ratio()
        self.drawing.set_overlay(self._make_overlay(drawn))
        return result

    def _make_overlay(self, drawn):
        # Target outline at its true size, centred on the drawn box.
        exercise, ref = self.exercise, self.ref_bbox
        ox = drawn.cx - ref.w / 2
        oy = drawn.cy - ref.h / 2

        def overlay(img):
            render_shape_outline(img, exercise, ox, oy, ref.w, ref.h)
            rasterize_dashed_rectangle(img, drawn.min_x, drawn.min_y, drawn.w,
                                       drawn.h, DRAWN_BOX, 1)
            draw_legend(img)

        return overlay

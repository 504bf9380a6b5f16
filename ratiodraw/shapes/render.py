"""
Presentations of a traced shape: filled reference, dashed overlay and the
solid mask used by the overlap engine.
"""

from ratiodraw.config import CANVAS_RES, REF_FILL, REF_STROKE, WHITE
from ratiodraw.raster import (
    blend_filled_polygons, new_canvas, rasterize_dashed_polyline,
    rasterize_filled_polygons, rasterize_polyline,
)
from ratiodraw.shapes.geometry import outline_polygons, shape_bbox


def render_shape(img, exercise):
    """Clear *img* and draw the reference shape, filled and outlined.

    Returns the ``PixelBBox`` used, which is what drawings are scored against.
    """
    img[...] = WHITE
    bb = shape_bbox(exercise, canvas_res=img.shape[0])
    polys = outline_polygons(exercise, bb.x, bb.y, bb.w, bb.h)
    rasterize_filled_polygons(img, polys, REF_FILL)
    for poly in polys:
        rasterize_polyline(img, poly, REF_STROKE, thickness=2, closed=True)
    return bb


def render_shape_outline(img, exercise, x, y, w, h, stroke_color=REF_FILL,
                         fill_color=REF_FILL, fill_alpha=0.07):
    """Dashed outline over a faint fill, for overlaying on a drawing."""
    polys = outline_polygons(exercise, x, y, w, h)
    blend_filled_polygons(img, polys, fill_color, fill_alpha)
    for poly in polys:
        rasterize_dashed_polyline(img, poly, stroke_color, thickness=2,
                                  closed=True, dash_len=6, gap_len=4)
    return img


def render_shape_filled(img, exercise, x, y, w, h, color=0):
    """Solid fill at exactly (x, y, w, h), no outline, no anti-aliasing."""
    polys = outline_polygons(exercise, x, y, w, h)
    rasterize_filled_polygons(img, polys, color, antialias=False)
    return img


def new_reference_canvas(exercise, size=CANVAS_RES):
    """Convenience: fresh RGB canvas with the reference drawn on it."""
    img = new_canvas(size)
    bb = render_shape(img, exercise)
    return img, bb

"""Tests for shape bounding boxes, outline tracing and rendering."""

import numpy as np
import pytest

from ratiodraw.config import CANVAS_RES, FILL_RATIO, REF_FILL
from ratiodraw.raster import new_canvas
from ratiodraw.shapes import Exercise, Ratio, ShapeType, create_exercise
from ratiodraw.shapes.geometry import (
    PathContext, outline_polygons, shape_bbox, trace_path,
)
from ratiodraw.shapes.render import (
    new_reference_canvas, render_shape, render_shape_filled,
    render_shape_outline,
)

MAX_SIDE = CANVAS_RES * FILL_RATIO


def _ex(shape, w=2, h=1, points=None):
    return Exercise(ShapeType(shape), Ratio(w, h), points)


SQUARE_POINTS = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))


class TestShapeBBox:
    @pytest.mark.parametrize("w,h", [(1, 1), (2, 1), (1, 3), (20, 1), (1.5, 15.9), (7, 10)])
    def test_larger_side_fills_fraction(self, w, h):
        bb = shape_bbox(_ex("rectangle", w, h))
        assert max(bb.w, bb.h) == pytest.approx(MAX_SIDE)
        assert bb.w <= MAX_SIDE + 1e-9
        assert bb.h <= MAX_SIDE + 1e-9

    @pytest.mark.parametrize("w,h", [(1, 1), (2, 1), (1, 3), (13.2, 4.7)])
    def test_ratio_preserved(self, w, h):
        bb = shape_bbox(_ex("ellipse", w, h))
        assert bb.w / bb.h == pytest.approx(w / h)

    def test_centred(self):
        bb = shape_bbox(_ex("triangle", 3, 1))
        assert bb.x + bb.w / 2 == pytest.approx(CANVAS_RES / 2)
        assert bb.y + bb.h / 2 == pytest.approx(CANVAS_RES / 2)

    def test_depends_only_on_ratio(self):
        a = shape_bbox(_ex("rectangle", 4, 2))
        b = shape_bbox(_ex("complex", 2, 1, SQUARE_POINTS))
        assert a == b

    def test_custom_canvas(self):
        bb = shape_bbox(_ex("rectangle", 1, 1), canvas_res=100, fill_ratio=0.5)
        assert (bb.x, bb.y, bb.w, bb.h) == pytest.approx((25, 25, 50, 50))


class TestPathContext:
    def test_rect(self):
        ctx = PathContext()
        ctx.rect(10, 20, 30, 40)
        assert ctx.polygons() == [[(10, 20), (40, 20), (40, 60), (10, 60)]]

    def test_line_to_without_move_starts_path(self):
        ctx = PathContext()
        ctx.line_to(1, 2)
        ctx.line_to(3, 4)
        assert ctx.polygons() == [[(1, 2), (3, 4)]]

    def test_lone_line_to_is_a_single_vertex(self):
        ctx = PathContext()
        ctx.line_to(5, 5)
        assert ctx.is_empty()

    def test_quadratic_ends_at_target(self):
        ctx = PathContext(curve_samples=8)
        ctx.move_to(0, 0)
        ctx.quadratic_curve_to(10, 10, 20, 0)
        poly = ctx.polygons()[0]
        assert len(poly) == 8
        assert poly[-1] == pytest.approx((20, 0))

    def test_begin_path_resets(self):
        ctx = PathContext()
        ctx.rect(0, 0, 5, 5)
        ctx.begin_path()
        assert ctx.is_empty()


class TestTracePath:
    def test_rectangle(self):
        polys = outline_polygons(_ex("rectangle"), 10, 20, 100, 50)
        assert polys == [[(10, 20), (110, 20), (110, 70), (10, 70)]]

    def test_triangle_apex_top_centre(self):
        polys = outline_polygons(_ex("triangle"), 0, 0, 100, 60)
        assert polys == [[(50, 0), (100, 60), (0, 60)]]

    def test_ellipse_inscribed(self):
        polys = outline_polygons(_ex("ellipse"), 0, 0, 200, 100)
        arr = np.array(polys[0])
        assert arr[:, 0].min() == pytest.approx(0, abs=1e-6)
        assert arr[:, 0].max() == pytest.approx(200, abs=1e-6)
        assert arr[:, 1].min() == pytest.approx(0, abs=0.1)
        assert arr[:, 1].max() == pytest.approx(100, abs=0.1)

    def test_complex_maps_points(self):
        polys = outline_polygons(_ex("complex", points=SQUARE_POINTS), 10, 10, 40, 20)
        assert polys == [[(10, 10), (50, 10), (50, 30), (10, 30)]]

    def test_complex_rounded_starts_at_edge_midpoint(self):
        polys = outline_polygons(_ex("complex-rounded", points=SQUARE_POINTS), 0, 0, 100, 100)
        poly = polys[0]
        # midpoint of the last->first edge: (0,100)->(0,0)
        assert poly[0] == pytest.approx((0, 50))
        assert len(poly) > len(SQUARE_POINTS)

    def test_complex_rounded_cuts_corners(self):
        polys = outline_polygons(_ex("complex-rounded", points=SQUARE_POINTS), 0, 0, 100, 100)
        arr = np.array(polys[0])
        assert arr.min() >= -1e-9 and arr.max() <= 100 + 1e-9
        # no sample reaches the corner itself
        assert np.min(np.linalg.norm(arr - np.array([0.0, 0.0]), axis=1)) > 10

    def test_complex_rounded_passes_through_edge_midpoints(self):
        polys = outline_polygons(_ex("complex-rounded", points=SQUARE_POINTS), 0, 0, 100, 100)
        arr = np.array(polys[0])
        for mid in [(50, 0), (100, 50), (50, 100), (0, 50)]:
            assert np.min(np.linalg.norm(arr - np.array(mid), axis=1)) < 1e-6

    def test_complex_without_points_is_empty(self):
        assert outline_polygons(_ex("complex"), 0, 0, 10, 10) == []

    def test_unknown_type_is_empty(self):
        ex = Exercise("star", Ratio(1, 1))
        ctx = trace_path(PathContext(), ex, 0, 0, 10, 10)
        assert ctx.is_empty()

    def test_generated_complex_traces(self):
        ex = create_exercise("complex", "easy", np.random.RandomState(3))
        polys = outline_polygons(ex, 0, 0, 100, 100)
        assert len(polys) == 1
        assert len(polys[0]) == len(ex.points)


class TestRender:
    def test_render_shape_returns_bbox(self):
        img = new_canvas(CANVAS_RES)
        ex = _ex("rectangle", 2, 1)
        bb = render_shape(img, ex)
        assert bb == shape_bbox(ex)
        assert tuple(img[350, 350]) == REF_FILL
        assert tuple(img[5, 5]) == (255, 255, 255)

    def test_render_shape_clears_previous(self):
        img = new_canvas(CANVAS_RES)
        render_shape(img, _ex("rectangle", 1, 1))
        render_shape(img, _ex("rectangle", 10, 1))
        # the square's top edge region is now background
        assert tuple(img[100, 350]) == (255, 255, 255)

    def test_new_reference_canvas(self):
        img, bb = new_reference_canvas(_ex("ellipse", 1, 1), size=200)
        assert img.shape == (200, 200, 3)
        assert bb.w == pytest.approx(200 * FILL_RATIO)

    def test_filled_mask(self):
        img = new_canvas(100, 255, channels=1)
        render_shape_filled(img, _ex("triangle"), 10, 10, 80, 80, 0)
        assert img[70, 50] == 0      # inside, near the base
        assert img[15, 15] == 255    # outside, top-left corner

    def test_filled_unknown_type_stays_blank(self):
        img = new_canvas(50, 255, channels=1)
        render_shape_filled(img, Exercise("star", Ratio(1, 1)), 5, 5, 40, 40)
        assert (img == 255).all()

    def test_outline_is_mostly_hollow(self):
        img = new_canvas(200)
        render_shape_outline(img, _ex("rectangle", 1, 1), 20, 20, 160, 160)
        # faint fill inside, not the solid reference colour
        assert tuple(img[100, 100]) != REF_FILL
        assert img[100, 100].min() > 200
        # dashes on the border
        assert img[19:22, 20:180].min() < 200

"""
Command-line demo: generate an exercise, simulate a freehand attempt at it
and print the scores.

The simulated hand traces the target outline with a chosen size / ratio
error, positional jitter and an optional unclosed gap, split over one or
more strokes.

Usage (CLI):
    python -m ratiodraw.demo --shape triangle --difficulty medium \
        --scale-w 1.1 --jitter 2 --save-path outputs/demo.png
    python -m ratiodraw.demo --trials 200 --save-path outputs/stats.png

Or from a notebook:
    from ratiodraw.demo import run_demo
    session, result = run_demo(shape_type="ellipse", seed=1)
"""

import argparse
import os
from collections import defaultdict

import numpy as np
from PIL import Image
from tqdm import tqdm

from ratiodraw.config import DIFFICULTY_PRESETS, RANDOM_SHAPE, SHAPE_TYPES
from ratiodraw.drawing import Stroke, StrokePoint
from ratiodraw.session import ExerciseSession
from ratiodraw.shapes.geometry import outline_polygons


def _resample(poly, step):
    """Points every *step* pixels along a closed polygon."""
    pts = np.asarray(poly + [poly[0]], dtype=np.float64)
    seg = np.linalg.norm(np.diff(pts, axis=0), axis=1)
    cum = np.concatenate([[0.0], np.cumsum(seg)])
    total = cum[-1]
    if total <= 0:
        return pts[:1]
    ts = np.arange(0.0, total + 1e-9, step)
    xs = np.interp(ts, cum, pts[:, 0])
    ys = np.interp(ts, cum, pts[:, 1])
    return np.stack([xs, ys], axis=1)


def simulate_strokes(exercise, ref_bbox, scale_w=1.0, scale_h=1.0,
                     offset=(0.0, 0.0), jitter=0.0, gap=0.0, num_strokes=1,
                     step=4.0, rng=None):
    """Fake a freehand trace of the exercise's outline.

    Parameters
    ----------
    exercise : Exercise
    ref_bbox : PixelBBox
    scale_w, scale_h : float
        Size error per axis (1.0 = exact).
    offset : (dx, dy)
        Where the drawing is placed relative to the reference centre.
    jitter : float
        Std-dev of Gaussian noise added to each sample, in pixels.
    gap : float
        Fraction of the outline left undrawn at the end (0 = closed).
    num_strokes : int
        Split the trace into this many consecutive strokes.

    Returns
    -------
    list of Stroke
    """
    rng = np.random if rng is None else rng
    w = ref_bbox.w * scale_w
    h = ref_bbox.h * scale_h
    cx = ref_bbox.x + ref_bbox.w / 2 + offset[0]
    cy = ref_bbox.y + ref_bbox.h / 2 + offset[1]
    polys = outline_polygons(exercise, cx - w / 2, cy - h / 2, w, h)

    strokes = []
    for poly in polys:
        pts = _resample(poly, step)
        keep = max(1, int(round(len(pts) * (1.0 - gap))))
        pts = pts[:keep]
        if jitter > 0:
            pts = pts + rng.normal(0.0, jitter, pts.shape)
        for chunk in np.array_split(pts, max(1, num_strokes)):
            if len(chunk) == 0:
                continue
            pressure = rng.uniform(0.3, 0.9, len(chunk))
            strokes.append(Stroke([StrokePoint(float(x), float(y), float(p))
                                   for (x, y), p in zip(chunk, pressure)]))
    return strokes


def run_demo(shape_type=RANDOM_SHAPE, difficulty="medium", scale_w=1.0,
             scale_h=1.0, jitter=1.5, gap=0.0, num_strokes=1, seed=None,
             use_visible_bbox=False):
    """Generate, simulate, analyse.  Returns (session, result)."""
    rng = np.random.RandomState(seed)
    session = ExerciseSession(shape_type, difficulty, rng=rng)
    session.generate()
    for stroke in simulate_strokes(session.exercise, session.ref_bbox,
                                   scale_w, scale_h, jitter=jitter, gap=gap,
                                   num_strokes=num_strokes, rng=rng):
        session.drawing.add_stroke([(p.x, p.y, p.pressure) for p in stroke.points])
    result = session.analyze(use_visible_bbox=use_visible_bbox)
    return session, result


def save_side_by_side(session, save_path):
    """Reference and drawing (with overlay) next to each other as a PNG."""
    os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
    frame = np.hstack([session.reference, session.drawing.render()])
    Image.fromarray(frame).save(save_path)
    print(f"Demo image saved to {save_path}")


def run_trials(num_trials, shape_type=RANDOM_SHAPE, difficulty="medium",
               max_error=0.2, jitter=2.0, seed=None):
    """Random size/ratio errors over many exercises; scores per axis."""
    rng = np.random.RandomState(seed)
    scores = defaultdict(list)
    for _ in tqdm(range(num_trials), desc="trials"):
        session = ExerciseSession(shape_type, difficulty, rng=rng)
        session.generate()
        sw, sh = 1.0 + rng.uniform(-max_error, max_error, 2)
        for stroke in simulate_strokes(session.exercise, session.ref_bbox, sw, sh,
                                       jitter=jitter, rng=rng):
            session.drawing.add_stroke([(p.x, p.y, p.pressure) for p in stroke.points])
        result = session.analyze()
        if result is None:
            continue
        scores["ratio"].append(result.ratio_score)
        scores["size"].append(result.size_score)
        scores["shape"].append(result.shape_score)
        scores["overall"].append(result.overall_score)
    return dict(scores)


def _print_result(session, result):
    ex = session.exercise
    print(f"Exercise: {ex.shape_type.value}  ratio {session.ratio_revealed}")
    if result is None:
        print("Drawing too small to analyse.")
        return
    print(f"  ratio   {result.ratio_score:3d}%  {result.ratio_detail}")
    print(f"  size    {result.size_score:3d}%  {result.size_detail}")
    print(f"  shape   {result.shape_score:3d}%  {result.shape_detail}")
    print(f"  overall {result.overall_score:3d}%  {result.hint}")


# -----------------------------------------------------------------------
# CLI
# -----------------------------------------------------------------------

def main(argv=None):
    p = argparse.ArgumentParser(description="ratiodraw scoring demo")
    p.add_argument("--shape", default=RANDOM_SHAPE,
                   choices=SHAPE_TYPES + [RANDOM_SHAPE])
    p.add_argument("--difficulty", default="medium", choices=list(DIFFICULTY_PRESETS))
    p.add_argument("--scale-w", type=float, default=1.0)
    p.add_argument("--scale-h", type=float, default=1.0)
    p.add_argument("--jitter", type=float, default=1.5)
    p.add_argument("--gap", type=float, default=0.0,
                   help="fraction of the outline left open")
    p.add_argument("--strokes", type=int, default=1)
    p.add_argument("--visible-bbox", action="store_true",
                   help="measure the drawing from rendered ink")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--trials", type=int, default=0,
                   help="run N random trials and report score statistics")
    p.add_argument("--figure", action="store_true",
                   help="save a matplotlib analysis figure instead of a PNG pair")
    p.add_argument("--save-path", default=None)
    args = p.parse_args(argv)

    if args.trials:
        scores = run_trials(args.trials, args.shape, args.difficulty,
                            jitter=args.jitter, seed=args.seed)
        for name, vals in scores.items():
            print(f"{name:8s} mean {np.mean(vals):5.1f}  min {min(vals):3d}  "
                  f"max {max(vals):3d}  (n={len(vals)})")
        if args.save_path:
            from ratiodraw.viz import plot_score_histogram
            plot_score_histogram(scores, args.save_path)
        return

    session, result = run_demo(args.shape, args.difficulty, args.scale_w,
                               args.scale_h, args.jitter, args.gap, args.strokes,
                               args.seed, args.visible_bbox)
    _print_result(session, result)
    if args.save_path and result is not None:
        if args.figure:
            from ratiodraw.viz import visualize_analysis
            visualize_analysis(session, result, args.save_path, args.visible_bbox)
        else:
            save_side_by_side(session, args.save_path)


if __name__ == "__main__":
    main()

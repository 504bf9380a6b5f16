"""
Visualization helpers for inspecting an analysis.

Usage (from a notebook or script):
    from ratiodraw.viz import visualize_analysis
    visualize_analysis(session, result, save_path="outputs/analysis.png")
"""

import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from ratiodraw.analysis import overlap_masks


# -----------------------------------------------------------------------
# Compositing helper
# -----------------------------------------------------------------------

def composite_masks(in_ref, in_drawn):
    """RGB image of two boolean masks.

    Overlap is green, reference only is blue, drawing only is red and
    everything else stays white.
    """
    h, w = in_ref.shape
    display = np.ones((h, w, 3), dtype=np.float32)
    both = in_ref & in_drawn
    ref_only = in_ref & ~in_drawn
    drawn_only = in_drawn & ~in_ref
    display[both] = (0.30, 0.75, 0.40)
    display[ref_only] = (0.40, 0.49, 0.92)
    display[drawn_only] = (0.94, 0.27, 0.27)
    return display


# -----------------------------------------------------------------------
# Analysis figure
# -----------------------------------------------------------------------

def visualize_analysis(session, result, save_path="outputs/analysis.png",
                       use_visible_bbox=False):
    """Three panels: reference, drawing with overlay, IoU masks.

    Parameters
    ----------
    session : ExerciseSession
        Already analysed (so the overlay is installed).
    result : AnalysisResult
    save_path : str

    Returns
    -------
    matplotlib.figure.Figure
    """
    drawn = session.drawn_bbox(use_visible_bbox)
    in_ref, in_drawn = overlap_masks(session.exercise, session.ref_bbox, drawn,
                                     session.drawing.strokes())

    fig, axes = plt.subplots(1, 3, figsize=(13, 4.8))
    ex = session.exercise
    axes[0].imshow(session.reference)
    axes[0].set_title(f"{ex.shape_type.value}  {session.reveal_ratio()}", fontsize=10)

    axes[1].imshow(session.drawing.render())
    axes[1].set_title(f"ratio {result.ratio_score}% ({result.ratio_detail})\n"
                      f"size {result.size_score}% ({result.size_detail})", fontsize=10)

    axes[2].imshow(composite_masks(in_ref, in_drawn))
    axes[2].set_title(f"shape {result.shape_score}% ({result.shape_detail})", fontsize=10)

    for ax in axes:
        ax.axis("off")
    fig.suptitle(f"overall {result.overall_score}%  -  {result.hint}", fontsize=12)
    plt.tight_layout()

    if save_path:
        os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
        fig.savefig(save_path, dpi=100)
        print(f"Analysis figure saved to {save_path}")
    plt.close(fig)
    return fig


def plot_score_histogram(scores, save_path="outputs/score_stats.png"):
    """Histogram of each score axis over a batch of trials.

    *scores* maps axis name -> list of 0-100 values.
    """
    names = list(scores)
    fig, axes = plt.subplots(1, len(names), figsize=(4 * len(names), 3.5))
    if len(names) == 1:
        axes = [axes]
    for ax, name in zip(axes, names):
        vals = scores[name]
        ax.hist(vals, bins=20, range=(0, 100), color="#667eea")
        ax.set_title(f"{name} (mean {np.mean(vals):.1f})" if vals else name)
        ax.set_xlim(0, 100)
    plt.tight_layout()

    if save_path:
        os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
        fig.savefig(save_path, dpi=100)
        print(f"Score statistics saved to {save_path}")
    plt.close(fig)
    return fig

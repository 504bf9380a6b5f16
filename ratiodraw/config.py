"""
Global configuration: canvas geometry, overlap-engine parameters, scoring
weights and difficulty presets.

Everything the reference renderer and the drawing surface share lives in the
same R x R pixel space (``CANVAS_RES``).  The overlap engine works on a much
smaller offscreen square (``OV_SIZE``) so the flood fill stays cheap.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

# ---------------------------------------------------------------------------
# Shape types
# ---------------------------------------------------------------------------

SHAPE_TYPES = ["rectangle", "ellipse", "triangle", "complex", "complex-rounded"]
RANDOM_SHAPE = "random"

# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------

CANVAS_RES = 700        # side of the square reference / drawing canvas
FILL_RATIO = 0.82       # fraction of the canvas taken by the larger side
GRID_SPACING = 25       # dot grid on the drawing surface

# ---------------------------------------------------------------------------
# Shape-overlap engine
# ---------------------------------------------------------------------------

OV_SIZE = 200                   # offscreen canvas resolution
OV_PAD = 20                     # guaranteed background border for flood seeds
OV_FILL = OV_SIZE - 2 * OV_PAD  # 160 - max usable span
OV_LINE_WIDTH = 2               # fixed stroke width, independent of brush
OV_DOT_RADIUS = 2               # single-point strokes
INK_THRESHOLD = 64              # luminance below this counts as ink

# Drawn boxes smaller than this (either side) are rejected before analysis
MIN_DRAWN_SIZE = 5

# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

RATIO_WEIGHT = 0.40
SIZE_WEIGHT = 0.25
SHAPE_WEIGHT = 0.35

RATIO_SPOT_ON_PCT = 3.0
SIZE_SPOT_ON_PCT = 5.0

GOOD_MATCH = 85
SOME_DEVIATION = 60

# ---------------------------------------------------------------------------
# Colours (RGB)
# ---------------------------------------------------------------------------

REF_FILL = (0x66, 0x7E, 0xEA)      # #667eea
REF_STROKE = (0x4C, 0x5E, 0xBD)    # #4c5ebd
INK = (0x1A, 0x1A, 0x2E)           # #1a1a2e
GRID_DOT = (0xDD, 0xE1, 0xEE)      # #dde1ee
DRAWN_BOX = (0xEF, 0x44, 0x44)     # #ef4444
WHITE = (255, 255, 255)

# ---------------------------------------------------------------------------
# Brushes
# ---------------------------------------------------------------------------

BRUSH_MODES = ("pen", "eraser")
DEFAULT_BRUSH = {"pen": 3, "eraser": 20}
BRUSH_RANGE = (1, 60)

# ---------------------------------------------------------------------------
# Difficulty presets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DifficultyPreset:
    name: str
    int_max: int                                  # integer sides in 1..int_max
    float_range: Optional[Tuple[float, float]] = None
    float_prob: float = 0.0                       # chance of one-decimal sides


PRESET_EASY = DifficultyPreset(name="easy", int_max=4)

PRESET_MEDIUM = DifficultyPreset(name="medium", int_max=10)

PRESET_HARD = DifficultyPreset(
    name="hard",
    int_max=20,
    float_range=(1.0, 16.0),
    float_prob=0.5,
)

DIFFICULTY_PRESETS = {"easy": PRESET_EASY, "medium": PRESET_MEDIUM, "hard": PRESET_HARD}

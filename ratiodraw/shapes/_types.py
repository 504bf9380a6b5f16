"""Shared types for the shapes package (avoids circular imports)."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

Point = Tuple[float, float]


class ShapeType(str, Enum):
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    TRIANGLE = "triangle"
    COMPLEX = "complex"
    COMPLEX_ROUNDED = "complex-rounded"

    @property
    def is_complex(self) -> bool:
        return self in (ShapeType.COMPLEX, ShapeType.COMPLEX_ROUNDED)


@dataclass(frozen=True)
class Ratio:
    """Target width:height proportion."""
    w: float
    h: float

    def __post_init__(self):
        if not (self.w > 0 and self.h > 0):
            raise ValueError(f"Ratio sides must be positive, got {self.w}:{self.h}")

    @property
    def value(self) -> float:
        return self.w / self.h


@dataclass(frozen=True)
class Exercise:
    """One round: which shape to draw and in what proportion.

    ``points`` holds the unit-square polygon for complex variants only.
    """
    shape_type: ShapeType
    ratio: Ratio
    points: Optional[Tuple[Point, ...]] = None


@dataclass(frozen=True)
class PixelBBox:
    """Axis-aligned box in canvas pixels."""
    x: float
    y: float
    w: float
    h: float

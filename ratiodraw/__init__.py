"""ratiodraw - draw a shape at a target width:height ratio and get scored."""

from ratiodraw.analysis import analyze_drawing, compute_shape_overlap, evaluate
from ratiodraw.drawing import BrushSettings, DrawingSession, DrawnBBox, Stroke, StrokePoint
from ratiodraw.session import ExerciseSession
from ratiodraw.shapes import Exercise, Ratio, ShapeType, create_exercise, shape_bbox

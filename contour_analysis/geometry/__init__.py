"""Contour data models and geometry helpers (pure numpy/OpenCV)."""

from .contour_models import BBox2D, Contour, ContourSet
from .contour_utils import normalize_contour, resample_contour_uniform

__all__ = [
    "BBox2D",
    "Contour",
    "ContourSet",
    "normalize_contour",
    "resample_contour_uniform",
]

"""Contour filtering, descriptors, template matching and overlap resolution."""

from .contour_analyzer import find_contours, analyze_shape
from .contour_filter import ContourFilter, max_area_for
from .templates import FoundTemplateDesc, Template, TemplateLibrary
from .descriptor_builder import build_template
from .shape_matcher import HuMomentMatchEngine, MatchEngine, match_shapes
from .overlap_resolver import resolve_overlaps

__all__ = [
    "find_contours",
    "analyze_shape",
    "ContourFilter",
    "max_area_for",
    "FoundTemplateDesc",
    "Template",
    "TemplateLibrary",
    "build_template",
    "HuMomentMatchEngine",
    "MatchEngine",
    "match_shapes",
    "resolve_overlaps",
]

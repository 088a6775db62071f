"""Contour detection and template matching on binarized frames."""

from contour_analysis.config import (
    ContourFilterConfig,
    DetectionConfig,
    MatchConfig,
    PreprocessConfig,
)
from contour_analysis.detection_pipeline import (
    FrameResult,
    ShapeDetectionPipeline,
    process_frame,
    run_detection,
)
from contour_analysis.geometry.contour_models import BBox2D, Contour, ContourSet
from contour_analysis.integration.shape_matching import (
    ContourFilter,
    FoundTemplateDesc,
    HuMomentMatchEngine,
    MatchEngine,
    Template,
    TemplateLibrary,
    build_template,
    find_contours,
    resolve_overlaps,
)

__all__ = [
    "ContourFilterConfig",
    "DetectionConfig",
    "MatchConfig",
    "PreprocessConfig",
    "FrameResult",
    "ShapeDetectionPipeline",
    "process_frame",
    "run_detection",
    "BBox2D",
    "Contour",
    "ContourSet",
    "ContourFilter",
    "FoundTemplateDesc",
    "HuMomentMatchEngine",
    "MatchEngine",
    "Template",
    "TemplateLibrary",
    "build_template",
    "find_contours",
    "resolve_overlaps",
]

"""Build fixed-length template descriptors from contours."""

from __future__ import annotations

from typing import Optional

from contour_analysis.geometry.contour_models import Contour
from contour_analysis.geometry.contour_utils import (
    normalize_contour,
    resample_contour_uniform,
)
from contour_analysis.integration.shape_matching.templates import Template


def build_template(
    contour: Contour,
    template_size: int,
    name: Optional[str] = None,
) -> Template:
    """
    Create a normalized, resampled template from a contour.

    The contour is scaled into the unit square around its bounding box
    center, then resampled by arc length to ``template_size`` points.

    Args:
        contour: Source contour
        template_size: Descriptor length
        name: Optional label (used for known-template entries)

    Returns:
        Template tagged with the source contour and its area
    """
    if template_size < 3:
        raise ValueError("template_size must be >= 3")

    normalized = normalize_contour(contour.points, bbox=contour.bounding_rect)
    vector = resample_contour_uniform(normalized, template_size)

    return Template(
        vector=vector,
        contour=contour,
        area=contour.area,
        template_size=template_size,
        name=name,
    )

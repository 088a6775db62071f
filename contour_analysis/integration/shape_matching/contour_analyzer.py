"""Contour tracing on binarized frames."""

from __future__ import annotations

from typing import Any, Dict, Optional

import cv2
import numpy as np

from contour_analysis.geometry.contour_models import BBox2D, Contour, ContourSet


def find_contours(binary_image: np.ndarray) -> ContourSet:
    """
    Trace every contour in a binarized frame.

    Uses list retrieval (all contours on one hierarchy level) and keeps every
    boundary point, so point counts reflect the true boundary length.

    Args:
        binary_image: Binary uint8 image (foreground > 0)

    Returns:
        ContourSet whose sibling links follow OpenCV's hierarchy
    """
    if binary_image is None or binary_image.size == 0:
        return ContourSet()

    if binary_image.ndim != 2:
        raise ValueError(f"Expected a single-channel image, got shape {binary_image.shape}")

    raw, hierarchy = cv2.findContours(
        binary_image.copy(), cv2.RETR_LIST, cv2.CHAIN_APPROX_NONE
    )
    if not raw:
        return ContourSet()

    links = hierarchy.reshape(-1, 4)
    contours = []
    for index, points in enumerate(raw):
        next_index: Optional[int] = int(links[index][0])
        if next_index < 0:
            next_index = None
        contours.append(
            Contour(
                points=points,
                area=float(cv2.contourArea(points)),
                bounding_rect=BBox2D.from_xywh(*cv2.boundingRect(points)),
                index=index,
                next_index=next_index,
            )
        )
    return ContourSet(contours)


def analyze_shape(contour: Contour) -> Dict[str, Any]:
    """
    Summarize a contour's shape properties.

    Returns:
        Dictionary of shape properties (area, perimeter, centroid, etc.)
    """
    points = contour.points
    perimeter = cv2.arcLength(points, True)

    M = cv2.moments(points)
    if M["m00"] != 0:
        cx = int(M["m10"] / M["m00"])
        cy = int(M["m01"] / M["m00"])
    else:
        rect = contour.bounding_rect
        cx, cy = rect.x0 + rect.w // 2, rect.y0 + rect.h // 2

    rect = contour.bounding_rect
    circularity = (
        4 * np.pi * contour.area / (perimeter * perimeter) if perimeter > 0 else 0
    )

    return {
        "area": contour.area,
        "point_count": contour.point_count,
        "perimeter": perimeter,
        "centroid": (cx, cy),
        "bounding_box": rect.to_xywh(),
        "circularity": circularity,
        "aspect_ratio": rect.w / rect.h if rect.h > 0 else 0,
    }

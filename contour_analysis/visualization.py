"""Overlay drawing for detection results."""

from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np

from contour_analysis.detection_pipeline import FrameResult

CONTOUR_COLOR: Tuple[int, int, int] = (0, 200, 0)
DETECTION_COLOR: Tuple[int, int, int] = (255, 0, 0)
TEXT_COLOR: Tuple[int, int, int] = (255, 255, 0)


def _to_rgb(frame: np.ndarray) -> np.ndarray:
    if frame.ndim == 2:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2RGB)
    if frame.ndim == 3 and frame.shape[2] == 4:
        return np.ascontiguousarray(frame[:, :, :3])
    if frame.ndim == 3 and frame.shape[2] == 3:
        return frame.copy()
    raise ValueError(f"Unsupported image shape: {frame.shape}")


def draw_detections(
    frame: np.ndarray,
    result: FrameResult,
    *,
    draw_contours: bool = True,
) -> np.ndarray:
    """
    Draw filtered contours and resolved detections on a copy of the frame.

    Returns:
        RGB uint8 overlay
    """
    overlay = _to_rgb(frame)
    if overlay.dtype != np.uint8:
        overlay = np.clip(overlay, 0, 255).astype(np.uint8)

    if draw_contours and result.contours:
        cv2.drawContours(
            overlay,
            [c.points.reshape(-1, 1, 2) for c in result.contours],
            -1,
            CONTOUR_COLOR,
            1,
        )

    for desc in result.found_templates:
        contour = desc.sample.contour
        cv2.drawContours(overlay, [contour.points.reshape(-1, 1, 2)], -1, DETECTION_COLOR, 2)
        rect = contour.bounding_rect
        label = f"{desc.template.name or '?'} {desc.rate:.2f}"
        cv2.putText(
            overlay,
            label,
            (rect.x0, max(10, rect.y0 - 4)),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.4,
            TEXT_COLOR,
            1,
            cv2.LINE_AA,
        )
    return overlay

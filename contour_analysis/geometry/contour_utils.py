"""Utilities for contour normalization and resampling."""

from __future__ import annotations

from typing import Optional

import numpy as np

from contour_analysis.geometry.contour_models import BBox2D


def normalize_contour(
    contour: np.ndarray,
    bbox: Optional[BBox2D] = None,
) -> np.ndarray:
    """
    Normalize contour to unit square [-0.5, 0.5] centered at origin.

    Args:
        contour: OpenCV contour (N, 1, 2) or (N, 2)
        bbox: Optional pre-computed bounding box

    Returns:
        Normalized contour (N, 2) float32
    """
    if contour.ndim == 3 and contour.shape[1] == 1:
        contour = contour.squeeze(1)

    contour = contour.astype(np.float32)

    if bbox is None:
        x0, y0 = contour.min(axis=0)
        x1, y1 = contour.max(axis=0) + 1
        bbox = BBox2D(x0=int(x0), y0=int(y0), x1=int(x1), y1=int(y1))

    cx = bbox.x0 + bbox.w / 2.0
    cy = bbox.y0 + bbox.h / 2.0
    centered = contour - np.array([[cx, cy]], dtype=np.float32)

    scale = max(bbox.w, bbox.h)
    if scale > 0:
        return centered / scale
    return centered


def resample_contour_uniform(
    contour: np.ndarray,
    num_points: int,
) -> np.ndarray:
    """
    Resample contour to exactly num_points uniformly spaced by arc length.

    Args:
        contour: Input contour (N, 2)
        num_points: Target number of vertices

    Returns:
        Resampled contour (num_points, 2) float32
    """
    if len(contour) == 0:
        raise ValueError("Contour must have at least 1 point")
    if len(contour) == 1:
        return np.tile(contour[0:1].astype(np.float32), (num_points, 1))

    contour_closed = np.vstack([contour, contour[0:1]]).astype(np.float64)

    distances = np.sqrt(np.sum(np.diff(contour_closed, axis=0) ** 2, axis=1))
    cumulative = np.concatenate([[0.0], np.cumsum(distances)])
    perimeter = cumulative[-1]

    if perimeter == 0:
        # All points coincide
        return np.tile(contour[0:1].astype(np.float32), (num_points, 1))

    target_lengths = np.linspace(0, perimeter, num_points, endpoint=False)

    resampled = np.zeros((num_points, 2), dtype=np.float32)
    resampled[:, 0] = np.interp(target_lengths, cumulative, contour_closed[:, 0])
    resampled[:, 1] = np.interp(target_lengths, cumulative, contour_closed[:, 1])
    return resampled

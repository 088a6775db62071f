"""Size, shape and edge-support filtering of traced contours."""

from __future__ import annotations

from typing import Iterable, List, Optional

import numpy as np

from contour_analysis.config import ContourFilterConfig
from contour_analysis.geometry.contour_models import Contour

# Smallest positive double
_EDGE_EPSILON = float(np.nextafter(0.0, 1.0))


def max_area_for(frame_width: int, frame_height: int) -> int:
    """Largest contour area still treated as an object in a frame of this size."""
    return (int(frame_width) * int(frame_height)) // 5


def _mask_intensity(mask: np.ndarray, point) -> float:
    x, y = point
    if 0 <= y < mask.shape[0] and 0 <= x < mask.shape[1]:
        return float(mask[y, x])
    return 0.0


class ContourFilter:
    """
    Keeps contours that look like object boundaries.

    The size/shape test rejects short, tiny, frame-sized or sparse boundaries.
    The edge-support test rejects contours whose first point and
    half-perimeter point both sit on empty pixels of the edge mask.
    """

    def __init__(
        self,
        config: Optional[ContourFilterConfig] = None,
        *,
        edge_support: bool = False,
    ):
        self.config = config or ContourFilterConfig()
        self.config.validate()
        self.edge_support = edge_support

    def passes_size_test(self, contour: Contour, max_area: float) -> bool:
        cfg = self.config
        count = contour.point_count
        if count == 0:
            return False
        return not (
            count < cfg.min_contour_length
            or contour.area < cfg.min_contour_area
            or contour.area > max_area
            or contour.area / count <= cfg.min_form_factor
        )

    @staticmethod
    def has_edge_support(contour: Contour, edge_mask: np.ndarray) -> bool:
        count = contour.point_count
        if count == 0:
            return False
        p1 = contour.point_at(0)
        p2 = contour.point_at((count // 2) % count)
        return not (
            _mask_intensity(edge_mask, p1) <= _EDGE_EPSILON
            and _mask_intensity(edge_mask, p2) <= _EDGE_EPSILON
        )

    def accepts(
        self,
        contour: Contour,
        max_area: float,
        edge_mask: Optional[np.ndarray] = None,
    ) -> bool:
        """True unless an enabled test rejects the contour."""
        if self.config.filter_contours_by_size and not self.passes_size_test(
            contour, max_area
        ):
            return False
        if self.edge_support:
            if edge_mask is None:
                raise ValueError("edge_mask is required when edge support filtering is enabled")
            if not self.has_edge_support(contour, edge_mask):
                return False
        return True

    def filter(
        self,
        contours: Iterable[Contour],
        frame_width: int,
        frame_height: int,
        edge_mask: Optional[np.ndarray] = None,
    ) -> List[Contour]:
        """
        Filter contours, preserving their order.

        Args:
            contours: Contours in sibling order (e.g. ``ContourSet.siblings()``)
            frame_width: Frame width in pixels
            frame_height: Frame height in pixels
            edge_mask: Dilated edge mask, required when edge support is enabled

        Returns:
            Accepted contours
        """
        if self.edge_support and edge_mask is None:
            raise ValueError("edge_mask is required when edge support filtering is enabled")
        max_area = max_area_for(frame_width, frame_height)
        return [c for c in contours if self.accepts(c, max_area, edge_mask)]

"""Template matching engines."""

from __future__ import annotations

from typing import Optional, Protocol

import cv2
import numpy as np

from contour_analysis.integration.shape_matching.templates import (
    FoundTemplateDesc,
    Template,
    TemplateLibrary,
)

_METHODS = {
    "I1": cv2.CONTOURS_MATCH_I1,
    "I2": cv2.CONTOURS_MATCH_I2,
    "I3": cv2.CONTOURS_MATCH_I3,
}


class MatchEngine(Protocol):
    """Finds the best library entry for a sample.

    Implementations must not mutate the library or the sample and must be
    safe to call from several threads against the same library.
    """

    def match(
        self, library: TemplateLibrary, sample: Template
    ) -> Optional[FoundTemplateDesc]:
        ...


def match_shapes(
    contour1: np.ndarray, contour2: np.ndarray, method: int = cv2.CONTOURS_MATCH_I2
) -> float:
    """
    Compare two contours using Hu-moment shape matching.

    Args:
        contour1: First contour (N, 2)
        contour2: Second contour (M, 2)
        method: OpenCV matching method

    Returns:
        Dissimilarity (lower is better, 0 is perfect match)
    """
    if contour1 is None or contour2 is None:
        raise ValueError("Contours must not be None")
    if len(contour1) < 3 or len(contour2) < 3:
        raise ValueError("Contours must have at least 3 points to match")
    return float(
        cv2.matchShapes(
            contour1.reshape(-1, 1, 2), contour2.reshape(-1, 1, 2), method, 0.0
        )
    )


def rate_from_distance(distance: float) -> float:
    """Map a non-negative dissimilarity onto a confidence rate in (0, 1]."""
    if not np.isfinite(distance):
        return 0.0
    return 1.0 / (1.0 + max(0.0, distance))


def _is_degenerate(vector: np.ndarray) -> bool:
    return cv2.moments(vector.reshape(-1, 1, 2))["m00"] == 0


class HuMomentMatchEngine:
    """
    Default engine comparing resampled template outlines with cv2.matchShapes.

    The best entry is returned when its rate reaches ``min_rate``.
    """

    def __init__(self, min_rate: float = 0.85, method: str = "I2"):
        if method not in _METHODS:
            raise ValueError(f"method must be one of {sorted(_METHODS)}")
        if not (0.0 <= min_rate <= 1.0):
            raise ValueError("min_rate must be in [0, 1]")
        self.min_rate = min_rate
        self.method = method

    def match(
        self, library: TemplateLibrary, sample: Template
    ) -> Optional[FoundTemplateDesc]:
        if sample.template_size != library.template_size:
            raise ValueError(
                f"Sample size {sample.template_size} does not match "
                f"library size {library.template_size}"
            )
        if len(library) == 0 or _is_degenerate(sample.vector):
            return None

        method = _METHODS[self.method]
        best: Optional[Template] = None
        best_rate = -1.0
        for template in library:
            if _is_degenerate(template.vector):
                continue
            rate = rate_from_distance(match_shapes(sample.vector, template.vector, method))
            if rate > best_rate:
                best, best_rate = template, rate

        if best is None or best_rate < self.min_rate:
            return None
        return FoundTemplateDesc(sample=sample, template=best, rate=best_rate)

"""Configuration models for the contour detection pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


_VALID_MATCH_METHODS = {"I1", "I2", "I3"}


@dataclass
class PreprocessConfig:
    """Configuration for turning a raw frame into a binarized frame."""

    equalize_hist: bool = False
    noise_filter: bool = False
    canny_threshold: int = 50
    blur: bool = True
    adaptive_threshold_block_size: int = 4
    adaptive_threshold_parameter: float = 1.2
    add_canny: bool = True
    edge_dilate_iterations: int = 3

    @property
    def effective_block_size(self) -> int:
        """Adaptive threshold window, coerced to an odd value >= 3."""
        size = self.adaptive_threshold_block_size
        return max(3, size + size % 2 + 1)

    def validate(self) -> None:
        """Validate configuration values."""
        if not (0 <= self.canny_threshold <= 255):
            raise ValueError("canny_threshold must be in [0, 255]")
        if self.adaptive_threshold_block_size < 0:
            raise ValueError("adaptive_threshold_block_size must be >= 0")
        if self.edge_dilate_iterations < 0:
            raise ValueError("edge_dilate_iterations must be >= 0")

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "equalize_hist": self.equalize_hist,
            "noise_filter": self.noise_filter,
            "canny_threshold": self.canny_threshold,
            "blur": self.blur,
            "adaptive_threshold_block_size": self.adaptive_threshold_block_size,
            "adaptive_threshold_parameter": self.adaptive_threshold_parameter,
            "add_canny": self.add_canny,
            "edge_dilate_iterations": self.edge_dilate_iterations,
        }


@dataclass
class ContourFilterConfig:
    """Thresholds for the size/shape contour test."""

    filter_contours_by_size: bool = True
    min_contour_length: int = 15
    min_contour_area: float = 10
    min_form_factor: float = 0.5

    def validate(self) -> None:
        """Validate configuration values."""
        if self.min_contour_length < 0:
            raise ValueError("min_contour_length must be >= 0")
        if self.min_contour_area < 0:
            raise ValueError("min_contour_area must be >= 0")
        if self.min_form_factor < 0:
            raise ValueError("min_form_factor must be >= 0")

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "filter_contours_by_size": self.filter_contours_by_size,
            "min_contour_length": self.min_contour_length,
            "min_contour_area": self.min_contour_area,
            "min_form_factor": self.min_form_factor,
        }


@dataclass
class MatchConfig:
    """Configuration for descriptor building and template matching."""

    only_find_contours: bool = False
    template_size: int = 30
    min_rate: float = 0.85
    method: str = "I2"

    def validate(self) -> None:
        """Validate configuration values."""
        if self.template_size < 3:
            raise ValueError("template_size must be >= 3")
        if not (0.0 <= self.min_rate <= 1.0):
            raise ValueError("min_rate must be in [0, 1]")
        if self.method not in _VALID_MATCH_METHODS:
            raise ValueError(f"method must be one of {_VALID_MATCH_METHODS}")

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "only_find_contours": self.only_find_contours,
            "template_size": self.template_size,
            "min_rate": self.min_rate,
            "method": self.method,
        }


@dataclass
class DetectionConfig:
    """Root configuration for one detection pass."""

    preprocess: PreprocessConfig = field(default_factory=PreprocessConfig)
    contour_filter: ContourFilterConfig = field(default_factory=ContourFilterConfig)
    matching: MatchConfig = field(default_factory=MatchConfig)
    max_workers: Optional[int] = None

    def validate(self) -> None:
        """Validate configuration values across groups."""
        self.preprocess.validate()
        self.contour_filter.validate()
        self.matching.validate()
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be >= 1 when provided")

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "preprocess": self.preprocess.to_dict(),
            "contour_filter": self.contour_filter.to_dict(),
            "matching": self.matching.to_dict(),
            "max_workers": self.max_workers,
        }

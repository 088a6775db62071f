"""Frame preprocessing: grayscale, smoothing, edges and adaptive binarization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from contour_analysis.config import PreprocessConfig


@dataclass(frozen=True)
class PreprocessedFrame:
    """Binarized frame plus the dilated edge mask used for contour filtering."""

    binarized: np.ndarray
    edge_mask: Optional[np.ndarray] = None

    @property
    def width(self) -> int:
        return int(self.binarized.shape[1])

    @property
    def height(self) -> int:
        return int(self.binarized.shape[0])


def to_gray_uint8(image: np.ndarray, prefer_alpha: bool = False) -> np.ndarray:
    """
    Convert an image to grayscale uint8.

    Args:
        image: Gray (H, W), RGB (H, W, 3) or RGBA (H, W, 4) array
        prefer_alpha: Whether to use alpha channel when present and meaningful

    Returns:
        Grayscale uint8 image
    """
    if image is None:
        raise ValueError("image is required")

    if image.ndim == 2:
        gray = image
    elif image.ndim == 3:
        if image.shape[2] == 4:
            alpha = image[:, :, 3]
            if prefer_alpha and np.ptp(alpha) > 0:
                gray = alpha
            else:
                gray = cv2.cvtColor(np.ascontiguousarray(image[:, :, :3]), cv2.COLOR_RGB2GRAY)
        elif image.shape[2] == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)
        elif image.shape[2] == 1:
            gray = image[:, :, 0]
        else:
            raise ValueError(f"Unsupported channel count: {image.shape[2]}")
    else:
        raise ValueError(f"Unsupported image shape: {image.shape}")

    if gray.dtype != np.uint8:
        max_val = float(np.max(gray)) if gray.size else 0.0
        if max_val <= 1.0:
            gray = (gray.astype(np.float32) * 255.0).clip(0, 255).astype(np.uint8)
        else:
            gray = np.clip(gray, 0, 255).astype(np.uint8)

    return np.ascontiguousarray(gray)


def pyramid_smooth(gray: np.ndarray) -> np.ndarray:
    """Down- then up-sample through the Gaussian pyramid, keeping the input size."""
    height, width = gray.shape[:2]
    down = cv2.pyrDown(gray)
    return cv2.pyrUp(down, dstsize=(width, height))


def extract_edges(gray: np.ndarray, threshold: int) -> np.ndarray:
    """Canny edge mask using the same value for both thresholds."""
    return cv2.Canny(gray, threshold, threshold)


def binarize(gray: np.ndarray, block_size: int, constant: float) -> np.ndarray:
    """
    Adaptive mean threshold followed by inversion.

    Pixels darker than their local mean minus ``constant`` become foreground
    (255).
    """
    thresh = cv2.adaptiveThreshold(
        gray,
        255,
        cv2.ADAPTIVE_THRESH_MEAN_C,
        cv2.THRESH_BINARY,
        block_size,
        constant,
    )
    return cv2.bitwise_not(thresh)


def dilate_mask(mask: np.ndarray, iterations: int) -> np.ndarray:
    if iterations <= 0:
        return mask
    kernel = np.ones((3, 3), dtype=np.uint8)
    return cv2.dilate(mask, kernel, iterations=iterations)


def preprocess_frame(
    frame: np.ndarray, config: Optional[PreprocessConfig] = None
) -> PreprocessedFrame:
    """
    Turn a raw frame into a binarized frame and an optional edge mask.

    Args:
        frame: Input image (gray, RGB or RGBA)
        config: Preprocessing options

    Returns:
        PreprocessedFrame; ``edge_mask`` is None unless ``noise_filter`` is set
    """
    if config is None:
        config = PreprocessConfig()
    config.validate()

    gray = to_gray_uint8(frame)
    if gray.size == 0:
        raise ValueError("frame must be non-empty")

    if config.equalize_hist:
        gray = cv2.equalizeHist(gray)

    smoothed = pyramid_smooth(gray)

    edges = None
    if config.noise_filter:
        edges = extract_edges(smoothed, config.canny_threshold)

    source = smoothed if config.blur else gray
    binarized = binarize(
        source,
        config.effective_block_size,
        config.adaptive_threshold_parameter,
    )

    if config.add_canny and edges is not None:
        binarized = cv2.bitwise_or(binarized, edges)

    # The filter looks at the dilated mask; the binarized frame gets the thin one.
    edge_mask = None
    if edges is not None:
        edge_mask = dilate_mask(edges, config.edge_dilate_iterations)

    return PreprocessedFrame(binarized=binarized, edge_mask=edge_mask)

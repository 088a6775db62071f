"""Image IO and preprocessing helpers for contour detection."""

from .image_loader import load_image, load_named_images, expand_image_paths
from .image_processor import PreprocessedFrame, preprocess_frame, to_gray_uint8

__all__ = [
    "load_image",
    "load_named_images",
    "expand_image_paths",
    "PreprocessedFrame",
    "preprocess_frame",
    "to_gray_uint8",
]

"""Image loading utilities for frames and reference images."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Union

import numpy as np
from PIL import Image

_IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff")


def load_image(image_path: Union[str, Path]) -> np.ndarray:
    """
    Load an image from file.

    Args:
        image_path: Path to the image file

    Returns:
        Image as numpy array (gray, RGB or RGBA)
    """
    path = Path(image_path)
    if not path.is_file():
        raise FileNotFoundError(f"Could not load image: {path}")
    with Image.open(path) as img:
        if img.mode not in ("L", "RGB", "RGBA"):
            img = img.convert("RGB")
        return np.array(img)


def expand_image_paths(paths: Iterable[Union[str, Path]]) -> List[Path]:
    """Expand directories into their image files, sorted by name."""
    expanded: List[Path] = []
    for entry in paths:
        path = Path(entry)
        if path.is_dir():
            expanded.extend(
                sorted(
                    p for p in path.iterdir()
                    if p.is_file() and p.suffix.lower() in _IMAGE_SUFFIXES
                )
            )
        else:
            expanded.append(path)
    return expanded


def load_named_images(paths: Iterable[Union[str, Path]]) -> Dict[str, np.ndarray]:
    """
    Load images keyed by file stem.

    Returns:
        Dictionary mapping file stem to image array, in path order
    """
    images: Dict[str, np.ndarray] = {}
    for path in expand_image_paths(paths):
        images[path.stem] = load_image(path)
    return images

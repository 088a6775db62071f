"""Collapse duplicate and nested detections of the same object."""

from __future__ import annotations

from typing import List, Sequence, Set

from contour_analysis.integration.shape_matching.templates import FoundTemplateDesc

INFLATE_MARGIN_PX = 4
DUPLICATE_AREA_RATIO = 0.9


def _rect_area(desc: FoundTemplateDesc) -> int:
    return desc.sample.contour.bounding_rect.area


def resolve_overlaps(
    detections: Sequence[FoundTemplateDesc],
    *,
    margin: int = INFLATE_MARGIN_PX,
    duplicate_ratio: float = DUPLICATE_AREA_RATIO,
) -> List[FoundTemplateDesc]:
    """
    Remove detections nested inside, or coinciding with, a larger one.

    Detections are ordered largest bounding box first. For each detection
    not yet removed, every later detection whose box fits inside its box
    (grown by ``margin``) is either a duplicate (area ratio above
    ``duplicate_ratio``; the lower rate loses, ties remove the larger) or a
    spurious sub-detection (always removed).

    Args:
        detections: Raw match results of one frame
        margin: Pixels added on every side of the larger box
        duplicate_ratio: Area ratio above which two boxes are duplicates

    Returns:
        Surviving detections, largest first
    """
    ordered = sorted(
        detections,
        key=lambda d: (-_rect_area(d), d.sample.contour.index),
    )

    removed: Set[int] = set()
    for i, big in enumerate(ordered):
        if i in removed:
            continue
        big_rect = big.sample.contour.bounding_rect
        big_area = big_rect.area
        outer = big_rect.inflate(margin, margin)
        for j in range(i + 1, len(ordered)):
            small = ordered[j]
            small_rect = small.sample.contour.bounding_rect
            if not outer.contains(small_rect):
                continue
            # Zero-area boxes sort last, so both are degenerate here.
            ratio = small_rect.area / big_area if big_area > 0 else 1.0
            if ratio > duplicate_ratio:
                if big.rate > small.rate:
                    removed.add(j)
                else:
                    removed.add(i)
            else:
                removed.add(j)

    return [desc for k, desc in enumerate(ordered) if k not in removed]

"""Data models for traced contours."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

import cv2
import numpy as np


@dataclass(frozen=True)
class BBox2D:
    """Axis-aligned 2D bounding box using exclusive max bounds."""

    x0: int
    y0: int
    x1: int
    y1: int

    @staticmethod
    def from_xywh(x: int, y: int, w: int, h: int) -> "BBox2D":
        """Create a box from an OpenCV-style (x, y, w, h) rectangle."""
        return BBox2D(x0=int(x), y0=int(y), x1=int(x) + int(w), y1=int(y) + int(h))

    @property
    def w(self) -> int:
        """Width in pixels."""
        return self.x1 - self.x0

    @property
    def h(self) -> int:
        """Height in pixels."""
        return self.y1 - self.y0

    @property
    def area(self) -> int:
        """Area in pixels."""
        return self.w * self.h

    def inflate(self, dx: int, dy: int) -> "BBox2D":
        """Return a copy grown by dx on the left and right and dy on top and bottom."""
        return BBox2D(x0=self.x0 - dx, y0=self.y0 - dy, x1=self.x1 + dx, y1=self.y1 + dy)

    def contains(self, other: "BBox2D") -> bool:
        """True when other lies entirely inside this box (edges may touch)."""
        return (
            self.x0 <= other.x0
            and self.y0 <= other.y0
            and other.x1 <= self.x1
            and other.y1 <= self.y1
        )

    def to_xywh(self) -> Tuple[int, int, int, int]:
        return (self.x0, self.y0, self.w, self.h)


@dataclass(frozen=True, eq=False)
class Contour:
    """Closed boundary traced from a binary frame.

    Points are stored as a read-only (N, 2) int32 array. ``next_index`` links
    to the next contour at the same hierarchy level, or None at the end of
    the sibling list.
    """

    points: np.ndarray
    area: float
    bounding_rect: BBox2D
    index: int = 0
    next_index: Optional[int] = None

    def __post_init__(self):
        points = np.asarray(self.points)
        if points.ndim == 3 and points.shape[1] == 1:
            points = points.reshape(-1, 2)
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError("Contour points must be (N, 2)")
        points = np.array(points, dtype=np.int32, order="C", copy=True)
        points.setflags(write=False)
        object.__setattr__(self, "points", points)

    @staticmethod
    def from_points(
        points: Sequence[Sequence[int]],
        index: int = 0,
        next_index: Optional[int] = None,
    ) -> "Contour":
        """Build a contour, deriving area and bounding box with OpenCV."""
        arr = np.asarray(points, dtype=np.int32).reshape(-1, 2)
        if len(arr) == 0:
            raise ValueError("Contour must have at least one point")
        area = float(cv2.contourArea(arr))
        bbox = BBox2D.from_xywh(*cv2.boundingRect(arr))
        return Contour(
            points=arr,
            area=area,
            bounding_rect=bbox,
            index=index,
            next_index=next_index,
        )

    @property
    def point_count(self) -> int:
        return int(self.points.shape[0])

    def point_at(self, i: int) -> Tuple[int, int]:
        """Return point i as (x, y)."""
        x, y = self.points[i]
        return int(x), int(y)


class ContourSet:
    """Traced contours with their sibling links."""

    def __init__(self, contours: Sequence[Contour] = ()):
        self._contours: Tuple[Contour, ...] = tuple(contours)

    def __len__(self) -> int:
        return len(self._contours)

    def __iter__(self) -> Iterator[Contour]:
        return iter(self._contours)

    def __getitem__(self, index: int) -> Contour:
        return self._contours[index]

    def siblings(self, start: int = 0) -> Iterator[Contour]:
        """Walk the sibling list forward from ``start``."""
        if not self._contours:
            return
        current: Optional[int] = start
        seen = set()
        while current is not None and current not in seen:
            seen.add(current)
            contour = self._contours[current]
            yield contour
            current = contour.next_index

"""Tests for contour data models (pure Python)."""

from __future__ import annotations

import unittest

import numpy as np

from contour_analysis.geometry.contour_models import BBox2D, Contour, ContourSet


def _square(x: int, y: int, size: int) -> np.ndarray:
    return np.array(
        [[x, y], [x + size, y], [x + size, y + size], [x, y + size]], dtype=np.int32
    )


class TestBBox2D(unittest.TestCase):
    def test_dimensions(self) -> None:
        bbox = BBox2D(x0=2, y0=3, x1=7, y1=11)
        self.assertEqual(bbox.w, 5)
        self.assertEqual(bbox.h, 8)
        self.assertEqual(bbox.area, 40)

    def test_from_xywh(self) -> None:
        bbox = BBox2D.from_xywh(10, 20, 5, 6)
        self.assertEqual((bbox.x0, bbox.y0, bbox.x1, bbox.y1), (10, 20, 15, 26))
        self.assertEqual(bbox.to_xywh(), (10, 20, 5, 6))

    def test_inflate(self) -> None:
        bbox = BBox2D.from_xywh(10, 10, 20, 20).inflate(4, 4)
        self.assertEqual(bbox.to_xywh(), (6, 6, 28, 28))

    def test_contains(self) -> None:
        outer = BBox2D.from_xywh(0, 0, 10, 10)
        self.assertTrue(outer.contains(BBox2D.from_xywh(2, 2, 3, 3)))
        self.assertTrue(outer.contains(outer))
        self.assertFalse(outer.contains(BBox2D.from_xywh(8, 8, 5, 5)))
        self.assertFalse(BBox2D.from_xywh(2, 2, 3, 3).contains(outer))


class TestContour(unittest.TestCase):
    def test_from_points(self) -> None:
        contour = Contour.from_points(_square(0, 0, 10), index=3, next_index=4)
        self.assertEqual(contour.point_count, 4)
        self.assertAlmostEqual(contour.area, 100.0)
        self.assertEqual(contour.bounding_rect.to_xywh(), (0, 0, 11, 11))
        self.assertEqual(contour.index, 3)
        self.assertEqual(contour.next_index, 4)

    def test_accepts_opencv_layout(self) -> None:
        raw = _square(0, 0, 5).reshape(-1, 1, 2)
        contour = Contour(points=raw, area=25.0, bounding_rect=BBox2D(0, 0, 6, 6))
        self.assertEqual(contour.points.shape, (4, 2))

    def test_points_are_read_only(self) -> None:
        contour = Contour.from_points(_square(0, 0, 10))
        with self.assertRaises(ValueError):
            contour.points[0, 0] = 99

    def test_rejects_bad_shape(self) -> None:
        with self.assertRaises(ValueError):
            Contour(points=np.zeros((4, 3)), area=0.0, bounding_rect=BBox2D(0, 0, 1, 1))

    def test_point_at(self) -> None:
        contour = Contour.from_points(_square(5, 7, 10))
        self.assertEqual(contour.point_at(0), (5, 7))
        self.assertEqual(contour.point_at(2), (15, 17))


class TestContourSet(unittest.TestCase):
    def test_siblings_follow_links(self) -> None:
        contours = [
            Contour.from_points(_square(0, 0, 5), index=0, next_index=2),
            Contour.from_points(_square(10, 0, 5), index=1, next_index=None),
            Contour.from_points(_square(20, 0, 5), index=2, next_index=1),
        ]
        traced = ContourSet(contours)
        self.assertEqual([c.index for c in traced.siblings()], [0, 2, 1])
        self.assertEqual([c.index for c in traced.siblings(start=2)], [2, 1])
        self.assertEqual(len(traced), 3)

    def test_empty_set(self) -> None:
        self.assertEqual(list(ContourSet().siblings()), [])

    def test_cycle_terminates(self) -> None:
        contours = [
            Contour.from_points(_square(0, 0, 5), index=0, next_index=1),
            Contour.from_points(_square(10, 0, 5), index=1, next_index=0),
        ]
        self.assertEqual([c.index for c in ContourSet(contours).siblings()], [0, 1])


if __name__ == "__main__":
    unittest.main()

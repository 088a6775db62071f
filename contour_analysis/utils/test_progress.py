"""Tests for progress output helpers (pure Python)."""

from __future__ import annotations

import io
import unittest

from contour_analysis.utils.progress import iter_progress, progress_print


class TestProgressPrint(unittest.TestCase):
    def test_enabled_writes_to_file(self) -> None:
        out = io.StringIO()
        progress_print("a", 1, enabled=True, file=out)
        self.assertEqual(out.getvalue(), "a 1\n")

    def test_enabled_honours_sep_and_end(self) -> None:
        out = io.StringIO()
        progress_print("a", "b", enabled=True, file=out, sep="-", end="!")
        self.assertEqual(out.getvalue(), "a-b!")

    def test_disabled_uses_print(self) -> None:
        out = io.StringIO()
        progress_print("a", "b", enabled=False, file=out, sep=",")
        self.assertEqual(out.getvalue(), "a,b\n")


class TestIterProgress(unittest.TestCase):
    def test_disabled_returns_iterable(self) -> None:
        items = [1, 2, 3]
        self.assertIs(iter_progress(items, enabled=False), items)


if __name__ == "__main__":
    unittest.main()

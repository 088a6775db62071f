"""Tests for the contour-detect command line (pure Python)."""

from __future__ import annotations

import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

import numpy as np
from PIL import Image

from contour_analysis.main_detection import build_parser, config_from_args, main


def _save(path: Path, square_at: int) -> Path:
    image = np.full((240, 240), 255, dtype=np.uint8)
    image[square_at:square_at + 40, square_at:square_at + 40] = 0
    Image.fromarray(image).save(path)
    return path


class TestConfigFromArgs(unittest.TestCase):
    def test_defaults(self) -> None:
        config = config_from_args(build_parser().parse_args(["frame.png"]))
        self.assertTrue(config.preprocess.blur)
        self.assertTrue(config.preprocess.add_canny)
        self.assertFalse(config.preprocess.noise_filter)
        self.assertTrue(config.contour_filter.filter_contours_by_size)
        self.assertEqual(config.matching.template_size, 30)
        self.assertIsNone(config.max_workers)

    def test_flags(self) -> None:
        args = build_parser().parse_args(
            [
                "frame.png",
                "--noise-filter",
                "--no-blur",
                "--no-size-filter",
                "--block-size", "7",
                "--template-size", "40",
                "--method", "I1",
                "--max-workers", "2",
            ]
        )
        config = config_from_args(args)
        self.assertTrue(config.preprocess.noise_filter)
        self.assertFalse(config.preprocess.blur)
        self.assertFalse(config.contour_filter.filter_contours_by_size)
        self.assertEqual(config.preprocess.effective_block_size, 9)
        self.assertEqual(config.matching.template_size, 40)
        self.assertEqual(config.matching.method, "I1")
        self.assertEqual(config.max_workers, 2)

    def test_invalid_values_exit(self) -> None:
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                main(["frame.png", "--template-size", "2", "--no-progress"])


class TestMain(unittest.TestCase):
    def test_detects_and_writes_outputs(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            refs = root / "refs"
            refs.mkdir()
            _save(refs / "square.png", 80)
            frame = _save(root / "frame.png", 40)
            manifest_path = root / "run.json"

            with contextlib.redirect_stdout(io.StringIO()):
                code = main(
                    [
                        str(frame),
                        "--templates", str(refs),
                        "--overlay", str(root / "overlays"),
                        "--manifest", str(manifest_path),
                        "--no-progress",
                    ]
                )

            self.assertEqual(code, 0)
            self.assertTrue((root / "overlays" / "frame_overlay.png").is_file())
            manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
            self.assertEqual(manifest["errors"], [])
            self.assertEqual(manifest["context"]["frames_processed"], 1)
            summary = manifest["outputs"][str(frame)]
            self.assertGreaterEqual(len(summary["detections"]), 1)
            self.assertEqual(summary["detections"][0]["name"], "square")
            self.assertEqual(len(summary["shapes"]), len(summary["detections"]))

    def test_missing_frame_is_reported(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            manifest_path = root / "run.json"
            with contextlib.redirect_stdout(io.StringIO()):
                code = main(
                    [
                        str(root / "missing.png"),
                        "--only-find-contours",
                        "--manifest", str(manifest_path),
                        "--no-progress",
                    ]
                )
            self.assertEqual(code, 1)
            manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
            self.assertEqual(len(manifest["errors"]), 1)


if __name__ == "__main__":
    unittest.main()

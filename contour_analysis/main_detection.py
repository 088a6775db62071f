"""
Command-line entry point for contour detection.

Usage:
    contour-detect frame.png --templates refs/
    contour-detect frames/ --templates star.png circle.png --overlay out/
    contour-detect frame.png --only-find-contours --manifest run.json

Reference images are scanned in contours-only mode and their largest contour
becomes a named template for this run. Nothing is persisted.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import Image

from contour_analysis.config import (
    ContourFilterConfig,
    DetectionConfig,
    MatchConfig,
    PreprocessConfig,
)
from contour_analysis.detection_pipeline import ShapeDetectionPipeline
from contour_analysis.integration.image_processing.image_loader import (
    expand_image_paths,
    load_image,
    load_named_images,
)
from contour_analysis.integration.shape_matching.contour_analyzer import analyze_shape
from contour_analysis.utils.manifest import build_manifest, write_manifest
from contour_analysis.utils.progress import iter_progress, progress_print
from contour_analysis.visualization import draw_detections


def build_parser() -> argparse.ArgumentParser:
    defaults_pre = PreprocessConfig()
    defaults_filter = ContourFilterConfig()
    defaults_match = MatchConfig()

    parser = argparse.ArgumentParser(
        prog="contour-detect",
        description="Find contours in frames and match them against reference shapes.",
    )
    parser.add_argument("frames", nargs="+", help="Frame images or directories")
    parser.add_argument(
        "--templates",
        nargs="*",
        default=[],
        help="Reference images or directories; each becomes a named template",
    )
    parser.add_argument("--all-template-contours", action="store_true",
                        help="Keep every contour of a reference image, not only the largest")

    pre = parser.add_argument_group("preprocessing")
    pre.add_argument("--equalize-hist", action="store_true")
    pre.add_argument("--noise-filter", action="store_true",
                     help="Build an edge mask and require edge support for contours")
    pre.add_argument("--canny-threshold", type=int, default=defaults_pre.canny_threshold)
    pre.add_argument("--no-blur", action="store_true",
                     help="Binarize the raw frame instead of the pyramid-smoothed one")
    pre.add_argument("--block-size", type=int,
                     default=defaults_pre.adaptive_threshold_block_size,
                     help="Adaptive threshold window (coerced to odd, >= 3)")
    pre.add_argument("--threshold-constant", type=float,
                     default=defaults_pre.adaptive_threshold_parameter)
    pre.add_argument("--no-add-canny", action="store_true",
                     help="Do not OR the edge mask into the binarized frame")

    flt = parser.add_argument_group("contour filter")
    flt.add_argument("--no-size-filter", action="store_true")
    flt.add_argument("--min-contour-length", type=int,
                     default=defaults_filter.min_contour_length)
    flt.add_argument("--min-contour-area", type=float,
                     default=defaults_filter.min_contour_area)
    flt.add_argument("--min-form-factor", type=float,
                     default=defaults_filter.min_form_factor)

    match = parser.add_argument_group("matching")
    match.add_argument("--only-find-contours", action="store_true")
    match.add_argument("--template-size", type=int, default=defaults_match.template_size)
    match.add_argument("--min-rate", type=float, default=defaults_match.min_rate)
    match.add_argument("--method", choices=("I1", "I2", "I3"), default=defaults_match.method)
    match.add_argument("--max-workers", type=int, default=None)

    out = parser.add_argument_group("output")
    out.add_argument("--overlay", help="Directory for annotated frames")
    out.add_argument("--manifest", help="Path of the JSON run manifest")
    out.add_argument("--no-progress", action="store_true")
    return parser


def config_from_args(args: argparse.Namespace) -> DetectionConfig:
    config = DetectionConfig(
        preprocess=PreprocessConfig(
            equalize_hist=args.equalize_hist,
            noise_filter=args.noise_filter,
            canny_threshold=args.canny_threshold,
            blur=not args.no_blur,
            adaptive_threshold_block_size=args.block_size,
            adaptive_threshold_parameter=args.threshold_constant,
            add_canny=not args.no_add_canny,
        ),
        contour_filter=ContourFilterConfig(
            filter_contours_by_size=not args.no_size_filter,
            min_contour_length=args.min_contour_length,
            min_contour_area=args.min_contour_area,
            min_form_factor=args.min_form_factor,
        ),
        matching=MatchConfig(
            only_find_contours=args.only_find_contours,
            template_size=args.template_size,
            min_rate=args.min_rate,
            method=args.method,
        ),
        max_workers=args.max_workers,
    )
    config.validate()
    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = config_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))

    show_progress = not args.no_progress
    pipeline = ShapeDetectionPipeline(config)
    context = pipeline.context
    warnings: List[str] = []
    errors: List[str] = []

    with context.time_block("build_library"):
        library = pipeline.build_library(
            load_named_images(args.templates),
            largest_only=not args.all_template_contours,
        )
    if args.templates and len(library) == 0:
        warnings.append("no templates could be built from the reference images")
    progress_print(
        f"Loaded {len(library)} templates: {', '.join(n or '?' for n in library.names())}",
        enabled=show_progress,
    )

    overlay_dir = Path(args.overlay) if args.overlay else None
    if overlay_dir is not None:
        overlay_dir.mkdir(parents=True, exist_ok=True)

    frame_paths = expand_image_paths(args.frames)
    outputs = {}
    for path in iter_progress(frame_paths, desc="frames", enabled=show_progress):
        try:
            frame = load_image(path)
        except (FileNotFoundError, OSError) as exc:
            errors.append(f"{path}: {exc}")
            progress_print(f"ERROR: {path}: {exc}", enabled=show_progress)
            continue

        result = pipeline.process_frame(frame, library)
        summary = result.summary()
        summary["shapes"] = [
            analyze_shape(desc.sample.contour) for desc in result.found_templates
        ]
        outputs[str(path)] = summary

        names = ", ".join(
            f"{d.template.name}({d.rate:.2f})" for d in result.found_templates
        )
        progress_print(
            f"{path.name}: {len(result.contours)} contours, "
            f"{len(result.found_templates)} detections" + (f": {names}" if names else ""),
            enabled=show_progress,
        )

        if overlay_dir is not None:
            overlay = draw_detections(frame, result)
            Image.fromarray(overlay).save(overlay_dir / f"{path.stem}_overlay.png")

    if args.manifest:
        manifest = build_manifest(context, outputs=outputs, warnings=warnings, errors=errors)
        write_manifest(args.manifest, manifest)
        progress_print(f"Wrote manifest to {args.manifest}", enabled=show_progress)

    return 1 if errors else 0


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3
"""
Contour Analysis Test Runner - Runs the unit test suites.

Usage:
    python -m contour_analysis.test_runner
    python -m contour_analysis.test_runner --verbose
    python -m contour_analysis.test_runner --quick  # Skip slow tests

Exit codes:
    0: All tests passed
    1: One or more tests failed
"""

from __future__ import annotations

import argparse
import sys
import traceback
import unittest
from typing import Dict, List, Optional, Sequence, Tuple

from contour_analysis.utils.progress import iter_progress, progress_print

UNIT_TESTS: List[Tuple[str, str]] = [
    ("run_context", "contour_analysis.utils.test_run_context"),
    ("manifest_schema", "contour_analysis.utils.test_manifest_schema"),
    ("progress", "contour_analysis.utils.test_progress"),
    ("config_defaults", "contour_analysis.test_config_defaults"),
    ("config_validation", "contour_analysis.test_config_validation"),
    ("contour_models", "contour_analysis.test_contour_models"),
    ("image_processor", "contour_analysis.test_image_processor"),
    ("contour_analyzer", "contour_analysis.test_contour_analyzer"),
    ("contour_filter", "contour_analysis.test_contour_filter"),
    ("templates", "contour_analysis.test_templates"),
    ("shape_matcher", "contour_analysis.test_shape_matcher"),
    ("overlap_resolver", "contour_analysis.test_overlap_resolver"),
]

# Run full detection passes on synthetic frames
SLOW_TESTS: List[Tuple[str, str]] = [
    ("detection_pipeline", "contour_analysis.test_detection_pipeline"),
    ("main_detection", "contour_analysis.test_main_detection"),
]


def run_unittest_modules(
    modules: List[Tuple[str, str]],
    verbose: bool = False,
    progress: bool = False,
) -> Dict[str, bool]:
    """Run unittest modules by dotted name."""
    results: Dict[str, bool] = {}
    for label, module_name in iter_progress(
        modules,
        desc="tests",
        total=len(modules),
        enabled=progress and len(modules) > 1,
    ):
        progress_print("\n" + "-" * 70, enabled=progress)
        progress_print(f"{label} ({module_name})", enabled=progress)
        progress_print("-" * 70, enabled=progress)
        try:
            suite = unittest.defaultTestLoader.loadTestsFromName(module_name)
            if suite.countTestCases() == 0:
                progress_print(
                    f"WARN: No tests discovered in {module_name}", enabled=progress
                )
                results[label] = False
                continue
            runner = unittest.TextTestRunner(verbosity=2 if verbose else 1)
            result = runner.run(suite)
            results[label] = result.wasSuccessful()
        except Exception as e:
            progress_print(f"FAIL: Test crashed: {e}", enabled=progress)
            if verbose:
                traceback.print_exc()
            results[label] = False
    return results


def run_test_suite(
    verbose: bool = False, quick: bool = False, progress: bool = False
) -> Dict[str, Optional[bool]]:
    """
    Run the complete test suite.

    Args:
        verbose: Enable verbose output
        quick: Skip slow tests

    Returns:
        dict: Test results with pass/fail status (None when skipped)
    """
    results: Dict[str, Optional[bool]] = {}

    print("\n" + "=" * 70)
    print("CONTOUR ANALYSIS - TEST SUITE")
    print("=" * 70)

    print("\n" + "-" * 70)
    print("[1/2] Unit Tests")
    print("-" * 70)
    results.update(run_unittest_modules(UNIT_TESTS, verbose=verbose, progress=progress))

    print("\n" + "-" * 70)
    print("[2/2] Detection Passes" + (" (SKIPPED - quick mode)" if quick else ""))
    print("-" * 70)
    if quick:
        for label, _ in SLOW_TESTS:
            results[label] = None
    else:
        results.update(
            run_unittest_modules(SLOW_TESTS, verbose=verbose, progress=progress)
        )

    return results


def print_summary(results: Dict[str, Optional[bool]]) -> int:
    """Print test summary and return exit code."""
    print("\n" + "=" * 70)
    print("TEST SUMMARY")
    print("=" * 70)

    passed = 0
    failed = 0
    skipped = 0

    for test_name, result in results.items():
        if result is True:
            status = "PASS"
            passed += 1
        elif result is False:
            status = "FAIL"
            failed += 1
        else:
            status = "- SKIP"
            skipped += 1

        print(f"  {test_name:.<50} {status}")

    print("=" * 70)
    print(f"\nResults: {passed} passed, {failed} failed, {skipped} skipped")

    if failed > 0:
        print("\nTESTS FAILED")
        print("=" * 70)
        return 1
    print("\nALL TESTS PASSED")
    print("=" * 70)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run contour analysis tests")
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--quick", action="store_true", help="Skip slow tests")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    args = parser.parse_args(argv)

    results = run_test_suite(verbose=args.verbose, quick=args.quick, progress=args.progress)
    return print_summary(results)


if __name__ == "__main__":
    sys.exit(main())

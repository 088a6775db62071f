"""Run bookkeeping helpers: context, manifest and progress output."""

from .run_context import DetectionRunContext, StageTiming, SCHEMA_VERSION
from .manifest import build_manifest, write_manifest
from .progress import iter_progress, progress_print

__all__ = [
    "DetectionRunContext",
    "StageTiming",
    "SCHEMA_VERSION",
    "build_manifest",
    "write_manifest",
    "iter_progress",
    "progress_print",
]

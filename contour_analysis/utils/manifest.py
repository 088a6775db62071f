"""Manifest helpers for recording detection run metadata."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from contour_analysis.utils.run_context import DetectionRunContext


def _safe_json(value: Any) -> Any:
    """Ensure value is JSON-serializable; fallback to string."""
    try:
        json.dumps(value)
        return value
    except TypeError:
        return str(value)


def build_manifest(
    context: DetectionRunContext,
    outputs: Optional[Dict[str, Any]] = None,
    warnings: Optional[List[str]] = None,
    errors: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Build the run manifest payload."""
    return {
        "manifest_version": context.schema_version,
        "run_id": context.run_id,
        "created_utc": context.created_utc or datetime.now(timezone.utc).isoformat(),
        "context": context.to_dict(),
        "stages": [stage.to_dict() for stage in context.recent_stages()],
        "stage_totals_ms": context.stage_totals(),
        "stage_counts": context.stage_counts(),
        "outputs": {key: _safe_json(value) for key, value in (outputs or {}).items()},
        "warnings": warnings or [],
        "errors": errors or [],
    }


def write_manifest(path: Union[str, Path], manifest: Dict[str, Any]) -> Path:
    """Write the manifest as pretty-printed JSON and return its path."""
    if manifest is None:
        raise ValueError("manifest is required")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    return path

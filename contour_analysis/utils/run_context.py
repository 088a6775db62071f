"""Run context and stage timing for detection runs."""

from __future__ import annotations

from collections import deque
import contextlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
import json
import logging
import threading
import time
import uuid
from typing import Any, Deque, Dict, Iterator, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from contour_analysis.config import DetectionConfig


SCHEMA_VERSION = "contour_detect_manifest_v1"

# Recent entries kept for the manifest; totals cover the whole run
MAX_STAGE_HISTORY = 256
MAX_LOG_HISTORY = 256

logger = logging.getLogger(__name__)


@dataclass
class StageTiming:
    """Timing information for a pipeline stage."""

    stage: str
    elapsed_ms: float
    started_utc: str

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "stage": self.stage,
            "elapsed_ms": self.elapsed_ms,
            "started_utc": self.started_utc,
        }


@dataclass
class DetectionRunContext:
    """Execution context capturing stage timings and manifest metadata."""

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_utc: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    schema_version: str = SCHEMA_VERSION
    frames_processed: int = 0
    stages: Deque[StageTiming] = field(
        default_factory=lambda: deque(maxlen=MAX_STAGE_HISTORY)
    )
    logs: Deque[Dict[str, object]] = field(
        default_factory=lambda: deque(maxlen=MAX_LOG_HISTORY)
    )
    config: Optional["DetectionConfig"] = None
    _totals_ms: Dict[str, float] = field(default_factory=dict, repr=False)
    _counts: Dict[str, int] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def log(self, level: str, message: str, **fields: Any) -> str:
        """Record a structured log line tagged with the current run_id."""
        ordered_fields = " ".join(f"{key}={fields[key]}" for key in sorted(fields))
        line = f"[contour-detect] run_id={self.run_id} level={level} msg={message}"
        if ordered_fields:
            line = f"{line} {ordered_fields}"
        level_no = logging.getLevelName(level.upper())
        if not isinstance(level_no, int):
            level_no = logging.INFO
        logger.log(level_no, line)
        self.logs.append({"level": level, "message": message, **fields})
        return line

    @contextlib.contextmanager
    def time_block(self, stage: str) -> Iterator[StageTiming]:
        """Context manager that records elapsed time for a stage.

        Yields the StageTiming entry; ``elapsed_ms`` is filled in on exit.
        """
        timing = StageTiming(
            stage=stage,
            elapsed_ms=0.0,
            started_utc=datetime.now(timezone.utc).isoformat(),
        )
        start = time.perf_counter()
        try:
            yield timing
        finally:
            timing.elapsed_ms = (time.perf_counter() - start) * 1000.0
            with self._lock:
                self.stages.append(timing)
                self._totals_ms[stage] = self._totals_ms.get(stage, 0.0) + timing.elapsed_ms
                self._counts[stage] = self._counts.get(stage, 0) + 1

    def recent_stages(self) -> List[StageTiming]:
        """Snapshot of the most recent stage entries, oldest first."""
        with self._lock:
            return list(self.stages)

    def stage_totals(self) -> Dict[str, float]:
        """Sum elapsed milliseconds per stage name over the whole run."""
        with self._lock:
            return dict(self._totals_ms)

    def stage_counts(self) -> Dict[str, int]:
        """Number of timed blocks per stage name over the whole run."""
        with self._lock:
            return dict(self._counts)

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict describing this context."""
        data: Dict[str, object] = {
            "run_id": self.run_id,
            "created_utc": self.created_utc,
            "schema_version": self.schema_version,
            "frames_processed": self.frames_processed,
        }
        if self.config is not None:
            data["config"] = self.config.to_dict()
        try:
            json.dumps(data)
        except TypeError as exc:
            raise ValueError(
                "DetectionRunContext contains non-serializable values"
            ) from exc
        return data

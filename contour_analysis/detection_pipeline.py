"""
Per-frame detection pass.

A pass turns one frame into filtered contours, a samples library and a
deduplicated set of template matches:

    frame -> binarized frame -> contours -> filtered contours
          -> descriptors -> matches -> resolved detections

Each contour is handled by a worker thread. The known-templates library is
locked by the calling thread for the whole fan-out, so nothing can add to it
while workers match against it; the samples library and the detection list
each take their own lock only for a single insertion.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
import logging
import threading
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from contour_analysis.config import DetectionConfig
from contour_analysis.geometry.contour_models import Contour
from contour_analysis.integration.image_processing.image_processor import (
    preprocess_frame,
)
from contour_analysis.integration.shape_matching.contour_analyzer import find_contours
from contour_analysis.integration.shape_matching.contour_filter import ContourFilter
from contour_analysis.integration.shape_matching.descriptor_builder import (
    build_template,
)
from contour_analysis.integration.shape_matching.overlap_resolver import (
    resolve_overlaps,
)
from contour_analysis.integration.shape_matching.shape_matcher import (
    HuMomentMatchEngine,
    MatchEngine,
)
from contour_analysis.integration.shape_matching.templates import (
    FoundTemplateDesc,
    TemplateLibrary,
)
from contour_analysis.utils.run_context import DetectionRunContext, StageTiming

logger = logging.getLogger(__name__)


@dataclass
class FrameResult:
    """Everything one detection pass produces."""

    contours: List[Contour]
    binarized_frame: np.ndarray
    samples: TemplateLibrary
    found_templates: List[FoundTemplateDesc]
    edge_mask: Optional[np.ndarray] = None
    raw_match_count: int = 0
    stage_timings: Dict[str, float] = field(default_factory=dict)

    def summary(self) -> Dict[str, object]:
        """Return a JSON-serializable summary of the pass."""
        return {
            "contours": len(self.contours),
            "samples": len(self.samples),
            "raw_matches": self.raw_match_count,
            "detections": [desc.to_dict() for desc in self.found_templates],
            "stage_timings_ms": dict(self.stage_timings),
        }


def run_detection(
    contours: Sequence[Contour],
    templates: TemplateLibrary,
    *,
    template_size: Optional[int] = None,
    only_find_contours: bool = False,
    engine: Optional[MatchEngine] = None,
    max_workers: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Tuple[TemplateLibrary, List[FoundTemplateDesc]]:
    """
    Build a descriptor for every contour and match it against ``templates``.

    Args:
        contours: Filtered contours
        templates: Known-templates library (read-only during the pass)
        template_size: Descriptor length; defaults to the library's
        only_find_contours: Build samples but never call the matcher
        engine: Matcher; defaults to HuMomentMatchEngine()
        max_workers: Thread pool bound (None uses the executor default)
        cancel_event: When set, units that have not started are skipped

    Returns:
        (samples library, unresolved detections)
    """
    if template_size is None:
        template_size = templates.template_size
    if not only_find_contours and template_size != templates.template_size:
        raise ValueError(
            f"template_size {template_size} does not match library size "
            f"{templates.template_size}"
        )
    if engine is None and not only_find_contours:
        engine = HuMomentMatchEngine()

    samples = TemplateLibrary(template_size)
    found: List[FoundTemplateDesc] = []
    found_lock = threading.Lock()

    def process_contour(contour: Contour) -> None:
        if cancel_event is not None and cancel_event.is_set():
            return
        sample = build_template(contour, template_size)
        samples.add(sample)
        if only_find_contours:
            return
        desc = engine.match(templates, sample)
        if desc is not None:
            with found_lock:
                found.append(desc)

    if not contours:
        return samples, found

    with templates.lock:
        with ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="contour-match"
        ) as executor:
            futures = [executor.submit(process_contour, c) for c in contours]
            for future in futures:
                future.result()

    return samples, found


def process_frame(
    frame: np.ndarray,
    templates: Optional[TemplateLibrary] = None,
    config: Optional[DetectionConfig] = None,
    engine: Optional[MatchEngine] = None,
    context: Optional[DetectionRunContext] = None,
    cancel_event: Optional[threading.Event] = None,
) -> FrameResult:
    """
    Run one full detection pass on a frame.

    Holds no state between calls, so passes on distinct frames may run
    concurrently.

    Args:
        frame: Input image (gray, RGB or RGBA)
        templates: Known-templates library; an empty one when None
        config: Detection options
        engine: Matcher; defaults to a HuMomentMatchEngine built from config
        context: Run context receiving stage timings
        cancel_event: Optional cancellation flag checked between contours

    Returns:
        FrameResult with filtered contours, samples and resolved detections
    """
    if config is None:
        config = DetectionConfig()
    config.validate()
    matching = config.matching

    if templates is None:
        templates = TemplateLibrary(matching.template_size)
    if engine is None and not matching.only_find_contours:
        engine = HuMomentMatchEngine(min_rate=matching.min_rate, method=matching.method)
    if context is None:
        context = DetectionRunContext(config=config)
    timed: List[StageTiming] = []

    with context.time_block("preprocess") as timing:
        timed.append(timing)
        prepared = preprocess_frame(frame, config.preprocess)

    with context.time_block("find_contours") as timing:
        timed.append(timing)
        traced = find_contours(prepared.binarized)
        contour_filter = ContourFilter(
            config.contour_filter, edge_support=config.preprocess.noise_filter
        )
        contours = contour_filter.filter(
            traced.siblings(),
            prepared.width,
            prepared.height,
            edge_mask=prepared.edge_mask,
        )

    template_size = (
        matching.template_size if matching.only_find_contours else templates.template_size
    )
    with context.time_block("match") as timing:
        timed.append(timing)
        samples, raw_found = run_detection(
            contours,
            templates,
            template_size=template_size,
            only_find_contours=matching.only_find_contours,
            engine=engine,
            max_workers=config.max_workers,
            cancel_event=cancel_event,
        )

    with context.time_block("resolve_overlaps") as timing:
        timed.append(timing)
        found = resolve_overlaps(raw_found)

    logger.debug(
        "traced=%d filtered=%d raw_matches=%d detections=%d",
        len(traced),
        len(contours),
        len(raw_found),
        len(found),
    )

    timings = {timing.stage: timing.elapsed_ms for timing in timed}

    return FrameResult(
        contours=contours,
        binarized_frame=prepared.binarized,
        samples=samples,
        found_templates=found,
        edge_mask=prepared.edge_mask,
        raw_match_count=len(raw_found),
        stage_timings=timings,
    )


class ShapeDetectionPipeline:
    """Runs detection passes with a fixed configuration and matcher."""

    def __init__(
        self,
        config: Optional[DetectionConfig] = None,
        engine: Optional[MatchEngine] = None,
        context: Optional[DetectionRunContext] = None,
    ):
        self.config = config or DetectionConfig()
        self.config.validate()
        matching = self.config.matching
        self.engine = engine or HuMomentMatchEngine(
            min_rate=matching.min_rate, method=matching.method
        )
        self.context = context or DetectionRunContext(config=self.config)
        self._count_lock = threading.Lock()

    def new_library(self) -> TemplateLibrary:
        return TemplateLibrary(self.config.matching.template_size)

    def process_frame(
        self,
        frame: np.ndarray,
        templates: Optional[TemplateLibrary] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> FrameResult:
        result = process_frame(
            frame,
            templates,
            self.config,
            self.engine,
            self.context,
            cancel_event,
        )
        with self._count_lock:
            self.context.frames_processed += 1
        return result

    def build_library(
        self,
        images: Mapping[str, np.ndarray],
        *,
        largest_only: bool = True,
        library: Optional[TemplateLibrary] = None,
    ) -> TemplateLibrary:
        """
        Collect known templates from reference images.

        Each image is processed in contours-only mode; its samples are named
        after the image key. With ``largest_only`` only the sample with the
        largest bounding box is kept per image.

        Args:
            images: Mapping of template name to reference image
            largest_only: Keep a single template per image
            library: Library to extend; a new one when None

        Returns:
            The known-templates library
        """
        if library is None:
            library = self.new_library()
        scan_config = replace(
            self.config,
            matching=replace(self.config.matching, only_find_contours=True),
        )
        for name, image in images.items():
            result = process_frame(image, None, scan_config, context=self.context)
            samples = sorted(result.samples, key=lambda t: t.contour.index)
            if not samples:
                self.context.log("warning", "no contours in reference image", name=name)
                continue
            if largest_only:
                samples = [
                    max(samples, key=lambda t: t.contour.bounding_rect.area)
                ]
            library.extend(sample.with_name(name) for sample in samples)
        return library

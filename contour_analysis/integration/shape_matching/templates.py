"""Template descriptors, template libraries and match results."""

from __future__ import annotations

from dataclasses import dataclass
import threading
from typing import Dict, Iterable, Iterator, List, Optional

import numpy as np

from contour_analysis.geometry.contour_models import Contour


@dataclass(frozen=True, eq=False)
class Template:
    """Fixed-length shape descriptor built from a contour.

    ``vector`` holds ``template_size`` normalized boundary points (float32).
    """

    vector: np.ndarray
    contour: Contour
    area: float
    template_size: int
    name: Optional[str] = None

    def __post_init__(self):
        if self.vector.shape != (self.template_size, 2):
            raise ValueError(
                f"Template vector shape {self.vector.shape} != ({self.template_size}, 2)"
            )
        self.vector.setflags(write=False)

    def with_name(self, name: str) -> "Template":
        return Template(
            vector=self.vector,
            contour=self.contour,
            area=self.area,
            template_size=self.template_size,
            name=name,
        )


@dataclass(frozen=True, eq=False)
class FoundTemplateDesc:
    """A sample accepted by the matcher, with the library entry it matched."""

    sample: Template
    template: Template
    rate: float

    def to_dict(self) -> Dict[str, object]:
        """Return a serializable summary."""
        return {
            "name": self.template.name,
            "rate": float(self.rate),
            "contour_index": self.sample.contour.index,
            "bounding_box": list(self.sample.contour.bounding_rect.to_xywh()),
            "area": float(self.sample.area),
        }


class TemplateLibrary:
    """
    Append-only collection of templates sharing one descriptor length.

    ``lock`` guards mutation. A detection pass holds it for the whole
    fan-out so the library cannot change while workers read it; workers
    themselves read without taking it.
    """

    def __init__(self, template_size: int = 30, templates: Iterable[Template] = ()):
        if template_size < 3:
            raise ValueError("template_size must be >= 3")
        self.template_size = template_size
        self.lock = threading.RLock()
        self._templates: List[Template] = []
        for template in templates:
            self.add(template)

    def add(self, template: Template) -> None:
        if template.template_size != self.template_size:
            raise ValueError(
                f"Template size {template.template_size} does not match "
                f"library size {self.template_size}"
            )
        with self.lock:
            self._templates.append(template)

    def extend(self, templates: Iterable[Template]) -> None:
        for template in templates:
            self.add(template)

    def clear(self) -> None:
        with self.lock:
            self._templates.clear()

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[Template]:
        return iter(self._templates)

    def __getitem__(self, index: int) -> Template:
        return self._templates[index]

    def names(self) -> List[Optional[str]]:
        return [t.name for t in self._templates]

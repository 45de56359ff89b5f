"""Retouch shapes: the editor-side record of a cleanup or inpaint result."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# (value, label) pairs offered for edge feathering
FEATHER_OPTIONS: list[tuple[str | int, str]] = [
    (0, "Disabled"),
    ("1%", "Small"),
    ("2.5%", "Medium"),
    ("5%", "Large"),
]

DEFAULT_INPAINT_FEATHER = "1%"


class ShapeStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass
class InpaintState:
    prompt: str
    selection: tuple[Any, ...]
    results: list[str] = field(default_factory=list)


@dataclass
class RetouchShape:
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: ShapeStatus = ShapeStatus.LOADING
    background_image: Any = None
    feather: str | int | None = None
    inpaint: InpaintState | None = None

    def add_results(self, results: list[str]) -> None:
        """Prepend new inpaint results and show the first of them."""
        if self.inpaint is None:
            raise ValueError(f"Shape {self.id} is not an inpaint shape")
        if not results:
            raise ValueError("No results received")
        self.inpaint.results = [*results, *self.inpaint.results]
        self.background_image = results[0]
        self.feather = DEFAULT_INPAINT_FEATHER

    @property
    def can_navigate(self) -> bool:
        return (
            self.status != ShapeStatus.LOADING
            and self.inpaint is not None
            and len(self.inpaint.results) > 1
        )

    def _step(self, delta: int) -> str | None:
        if not self.can_navigate:
            return None
        results = self.inpaint.results
        try:
            current = results.index(self.background_image)
        except ValueError:
            current = -1 if delta > 0 else 0
        self.background_image = results[(current + delta) % len(results)]
        return self.background_image

    def next_result(self) -> str | None:
        """Show the next result, wrapping to the first."""
        return self._step(1)

    def previous_result(self) -> str | None:
        """Show the previous result, wrapping to the last."""
        return self._step(-1)

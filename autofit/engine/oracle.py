"""
oracle.py — Contract between the font-size resolver and a text layout engine.

The resolver never lays text out itself. It asks a MeasurementOracle how tall
a text block would be, and how many lines it would wrap to, at a candidate
size. Implementations must use the same line-breaking rules as the renderer
that will eventually draw the text, and must account for every style
attribute that changes wrap geometry (stroke width and letter spacing in
particular).

Implementations may keep private scratch state (font caches, a reusable
layout object) but calls must not influence each other: measuring size 40
after size 12 gives the same answer as measuring size 40 first.

Oracle instances are not required to be thread-safe. Give each worker its
own instance.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple

from autofit.dsl.schema import StyleConfig


@dataclass(frozen=True)
class Measurement:
    """Result of laying text out at one size."""
    rendered_height: float      # Box height including stroke, px
    line_count: int             # Number of wrapped lines
    rendered_width: float = 0.0  # Widest line including stroke, px
    lines: Tuple[str, ...] = ()  # Wrapped lines, when the oracle reports them


class MeasurementOracle(ABC):
    """Abstract base class for text measurement backends.

    Subclasses implement measure(). Backends that depend on a rendering
    surface which may be missing (headless workers, stripped-down builds)
    override ``available``.
    """

    @property
    def available(self) -> bool:
        """Whether this oracle can measure in the current environment."""
        return True

    @abstractmethod
    def measure(
        self,
        text: str,
        box_width: float,
        size: int,
        style: StyleConfig,
    ) -> Measurement:
        """Lay out ``text`` at ``size`` inside a box ``box_width`` wide.

        Args:
            text: Text to lay out.
            box_width: Width available for wrapping, in px.
            size: Candidate font size, in px.
            style: Everything else that affects layout.

        Returns:
            Measurement with the rendered height and wrapped line count.
        """

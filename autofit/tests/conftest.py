"""Pytest configuration and fixtures."""

import math
from typing import Callable

import pytest

from autofit.config import AutoFitSettings, get_settings
from autofit.dsl.schema import StyleConfig, TextElement
from autofit.engine.oracle import Measurement, MeasurementOracle
from autofit.engine.text_measure import PillowMeasurementOracle

HeightFn = Callable[[int, StyleConfig], float]
LinesFn = Callable[[int, StyleConfig], int]


class FormulaOracle(MeasurementOracle):
    """Stub oracle computing height and line count from plain functions.

    Records every probed size and asserts that the formulas behave
    monotonically across the probes it has seen.
    """

    def __init__(
        self,
        height_fn: HeightFn,
        lines_fn: LinesFn | None = None,
        available: bool = True,
    ):
        self.height_fn = height_fn
        self.lines_fn = lines_fn or (lambda size, style: 1)
        self._available = available
        self.calls: list[int] = []
        self._seen: dict[int, Measurement] = {}

    @property
    def available(self) -> bool:
        return self._available

    def measure(self, text, box_width, size, style) -> Measurement:
        self.calls.append(size)
        measurement = Measurement(
            rendered_height=self.height_fn(size, style),
            line_count=self.lines_fn(size, style),
        )
        for other_size, other in self._seen.items():
            if other_size < size:
                assert other.rendered_height <= measurement.rendered_height
                assert other.line_count <= measurement.line_count
        self._seen[size] = measurement
        return measurement


class CharGridOracle(MeasurementOracle):
    """Monospace stub: every character is ``0.6 * size`` wide."""

    char_width_ratio = 0.6

    def __init__(self, stroke_inflation: float = 0.0):
        # Extra height per unit of stroke width
        self.stroke_inflation = stroke_inflation
        self.calls: list[int] = []

    def per_line_capacity(self, size: int, box_width: float) -> int:
        return max(1, math.floor(box_width / (size * self.char_width_ratio)))

    def measure(self, text, box_width, size, style) -> Measurement:
        self.calls.append(size)
        lines = math.ceil(len(text) / self.per_line_capacity(size, box_width))
        height = size * style.line_height * lines
        return Measurement(
            rendered_height=height + self.stroke_inflation * style.stroke_width,
            line_count=lines,
        )


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so environment changes in a test take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_formula_oracle() -> Callable[..., FormulaOracle]:
    """Factory for formula-driven stub oracles."""
    return FormulaOracle


@pytest.fixture
def make_grid_oracle() -> Callable[..., CharGridOracle]:
    """Factory for monospace stub oracles."""
    return CharGridOracle


@pytest.fixture
def pillow_oracle() -> PillowMeasurementOracle:
    """Pillow oracle that only uses Pillow's built-in font."""
    return PillowMeasurementOracle(include_system_fonts=False)


@pytest.fixture
def settings() -> AutoFitSettings:
    """Settings with defaults, ignoring the environment."""
    return AutoFitSettings(_env_file=None)


@pytest.fixture
def headline_element() -> TextElement:
    """An auto-fit headline box."""
    return TextElement(
        id="headline",
        text="Fresh Summer Salad Recipes",
        width=400,
        height=120,
        font_size=16,
        auto_fit=True,
        min_font_size=8,
        max_font_size=200,
    )

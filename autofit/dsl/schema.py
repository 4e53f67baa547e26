"""Pydantic v2 models for auto-fit requests, results and text elements.

All lengths are in canvas pixels and font sizes are integer pixel sizes.
Value types (``StyleConfig``, ``FitRequest``, ``FitResult``) are frozen so a
request can be handed to the resolver, the batch pool or a cache without
anybody changing it underneath. ``TextElement`` models the live, editable
object on a canvas and is therefore mutable.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# Defaults shared by the adapter, the CLI and the settings layer
DEFAULT_MIN_FONT_SIZE = 8
DEFAULT_MAX_FONT_SIZE = 500
DEFAULT_FONT_FAMILY = "Arial"
DEFAULT_LINE_HEIGHT = 1.2


class FontStyle(str, Enum):
    """Font slant."""

    NORMAL = "normal"
    ITALIC = "italic"


class TextAlign(str, Enum):
    """Horizontal text alignment."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"


class WrapMode(str, Enum):
    """Where line breaks may occur."""

    WORD = "word"  # Whitespace boundaries
    CHARACTER = "character"  # Any grapheme boundary


class PaintOrder(str, Enum):
    """Which of fill and stroke is painted first."""

    FILL = "fill"  # Fill, then stroke on top
    STROKE = "stroke"  # Stroke, then fill on top


class TextTransform(str, Enum):
    """Case transform applied to text before layout."""

    NONE = "none"
    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"
    CAPITALIZE = "capitalize"


class FitOutcome(str, Enum):
    """Classification of a resolved font size."""

    FITTED_WITHIN_RANGE = "fitted_within_range"
    FITTED_BELOW_RANGE = "fitted_below_range"
    UNSATISFIABLE = "unsatisfiable"


# ============================================================================
# Fit Models
# ============================================================================


class StyleConfig(BaseModel):
    """Everything that affects text layout except the font size itself."""

    model_config = ConfigDict(frozen=True)

    font_family: str = Field(default=DEFAULT_FONT_FAMILY, description="Font family name")
    font_weight: Union[str, int] = Field(default="normal", description="CSS-like weight")
    font_style: FontStyle = Field(default=FontStyle.NORMAL, description="Font slant")
    line_height: float = Field(default=DEFAULT_LINE_HEIGHT, gt=0, description="Line height multiplier")
    text_align: TextAlign = Field(default=TextAlign.LEFT, description="Horizontal alignment")
    letter_spacing: float = Field(
        default=0.0,
        description="Extra space between graphemes in 1/1000 em",
    )
    wrap_mode: WrapMode = Field(default=WrapMode.WORD, description="Line breaking mode")
    stroke_width: float = Field(default=0.0, ge=0, description="Outline stroke width in px")
    paint_order: PaintOrder = Field(default=PaintOrder.FILL, description="Fill/stroke order")


class FitRequest(BaseModel):
    """Input to the font-size resolver."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Text to fit; empty text is a degenerate request")
    box_width: float = Field(description="Box width in px")
    box_height: float = Field(description="Box height in px")
    style: StyleConfig = Field(default_factory=StyleConfig)
    min_size: int = Field(default=DEFAULT_MIN_FONT_SIZE, ge=1, description="Smallest preferred size")
    max_size: int = Field(default=DEFAULT_MAX_FONT_SIZE, ge=1, description="Largest allowed size")
    max_lines: Optional[int] = Field(default=None, ge=1, description="Hard ceiling on wrapped lines")

    @model_validator(mode="after")
    def _validate_range(self) -> "FitRequest":
        if self.max_size < self.min_size:
            raise ValueError(
                f"max_size ({self.max_size}) must be >= min_size ({self.min_size})"
            )
        return self

    @property
    def is_degenerate(self) -> bool:
        """True when there is nothing to measure."""
        return not self.text or self.box_width <= 0 or self.box_height <= 0


class FitResult(BaseModel):
    """Resolved font size and how it was reached."""

    model_config = ConfigDict(frozen=True)

    font_size: int = Field(description="Resolved font size in px")
    outcome: FitOutcome
    probes: int = Field(default=0, ge=0, description="Number of oracle measurements made")

    @property
    def fits(self) -> bool:
        """Whether the size satisfies every constraint."""
        return self.outcome != FitOutcome.UNSATISFIABLE


# ============================================================================
# Canvas Elements
# ============================================================================


class TextElement(BaseModel):
    """A text box on a template canvas.

    Width and height are the fixed target box; ``font_size`` is what auto-fit
    writes back.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str
    text: str = ""
    width: float = Field(default=0.0, description="Target box width in px")
    height: float = Field(default=0.0, description="Target box height in px")
    font_size: int = Field(default=16, ge=1)

    # Style
    font_family: str = DEFAULT_FONT_FAMILY
    font_weight: Union[str, int] = "normal"
    font_style: FontStyle = FontStyle.NORMAL
    line_height: float = Field(default=DEFAULT_LINE_HEIGHT, gt=0)
    text_align: TextAlign = TextAlign.LEFT
    letter_spacing: float = 0.0
    wrap_mode: WrapMode = WrapMode.WORD
    stroke_width: float = Field(default=0.0, ge=0)
    paint_order: PaintOrder = PaintOrder.FILL
    text_transform: TextTransform = TextTransform.NONE

    # Auto-fit settings
    auto_fit: bool = False
    min_font_size: Optional[int] = Field(default=None, ge=1)
    max_font_size: Optional[int] = Field(default=None, ge=1)
    max_lines: Optional[int] = Field(default=None, ge=1)
    auto_fit_padding: float = Field(default=0.0, ge=0)

    def style_config(self) -> StyleConfig:
        """Snapshot of the layout-affecting style attributes."""
        return StyleConfig(
            font_family=self.font_family,
            font_weight=self.font_weight,
            font_style=self.font_style,
            line_height=self.line_height,
            text_align=self.text_align,
            letter_spacing=self.letter_spacing,
            wrap_mode=self.wrap_mode,
            stroke_width=self.stroke_width,
            paint_order=self.paint_order,
        )

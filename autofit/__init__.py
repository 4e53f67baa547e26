"""Auto-fit font-size resolution for template text boxes.

Finds the largest font size that makes text fit a fixed box, optionally
under a hard line-count limit, by binary search against a text measurement
oracle.
"""

from autofit.dsl.schema import (
    FitOutcome,
    FitRequest,
    FitResult,
    FontStyle,
    PaintOrder,
    StyleConfig,
    TextAlign,
    TextElement,
    TextTransform,
    WrapMode,
)
from autofit.engine import (
    FontSizeResolver,
    Measurement,
    MeasurementOracle,
    PillowMeasurementOracle,
    resolve,
)
from autofit.constraints import AutoFitConstraint, apply_auto_fit

__version__ = "0.1.0"

__all__ = [
    # Models
    "FitOutcome",
    "FitRequest",
    "FitResult",
    "FontStyle",
    "PaintOrder",
    "StyleConfig",
    "TextAlign",
    "TextElement",
    "TextTransform",
    "WrapMode",
    # Engine
    "FontSizeResolver",
    "Measurement",
    "MeasurementOracle",
    "PillowMeasurementOracle",
    "resolve",
    # Adapter
    "AutoFitConstraint",
    "apply_auto_fit",
]

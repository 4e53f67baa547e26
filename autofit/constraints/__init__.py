"""Constraint module - fitting text elements to their boxes."""

from autofit.constraints.text_fitting import (
    AutoFitConstraint,
    apply_auto_fit,
    build_fit_request,
    fit_text_elements,
)

__all__ = [
    "AutoFitConstraint",
    "apply_auto_fit",
    "build_fit_request",
    "fit_text_elements",
]

"""Auto-fit constraint: size text elements so their text fills the box."""

import logging
from typing import Optional

from autofit.config import AutoFitSettings, get_settings
from autofit.dsl.schema import FitOutcome, FitRequest, FitResult, TextElement
from autofit.engine.oracle import Measurement, MeasurementOracle
from autofit.engine.resolver import FontSizeResolver
from autofit.engine.text_shared import apply_text_transform

logger = logging.getLogger(__name__)


def build_fit_request(
    element: TextElement,
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
    max_lines: Optional[int] = None,
    padding: Optional[float] = None,
    settings: Optional[AutoFitSettings] = None,
) -> FitRequest:
    """Build a resolver request from an element's current geometry and style.

    Explicit arguments win over the element's own auto-fit settings, which
    win over the configured defaults.

    Args:
        element: Text element to fit.
        min_size: Smallest preferred font size.
        max_size: Largest allowed font size.
        max_lines: Hard ceiling on wrapped lines.
        padding: Inner padding on every side of the box, in px.
        settings: Settings for default bounds.

    Returns:
        FitRequest for the element.
    """
    settings = settings or get_settings()

    if min_size is None:
        min_size = element.min_font_size or settings.default_min_font_size
    if max_size is None:
        max_size = element.max_font_size or settings.default_max_font_size
    if max_lines is None:
        max_lines = element.max_lines
    if padding is None:
        padding = element.auto_fit_padding

    if max_size < min_size:
        logger.warning(
            f"Element {element.id}: max_size {max_size} below min_size {min_size}, clamping"
        )
        max_size = min_size

    return FitRequest(
        text=apply_text_transform(element.text, element.text_transform),
        box_width=element.width - 2 * padding,
        box_height=element.height - 2 * padding,
        style=element.style_config(),
        min_size=min_size,
        max_size=max_size,
        max_lines=max_lines,
    )


class AutoFitConstraint:
    """Constraint that sizes text to fill its element's fixed box.

    With ``strict=False`` (the default) an unsatisfiable fit still applies
    min_size, matching what the editor has always done. With ``strict=True``
    the element keeps its current size and callers inspect the outcome.
    """

    def __init__(
        self,
        oracle: Optional[MeasurementOracle],
        strict: bool = False,
        settings: Optional[AutoFitSettings] = None,
    ):
        self.settings = settings or get_settings()
        self.strict = strict
        self.resolver = FontSizeResolver(
            oracle,
            max_iterations=self.settings.max_search_iterations,
            height_tolerance=self.settings.height_tolerance,
        )

    @property
    def oracle(self) -> Optional[MeasurementOracle]:
        return self.resolver.oracle

    def resolve(
        self,
        element: TextElement,
        min_size: Optional[int] = None,
        max_size: Optional[int] = None,
        max_lines: Optional[int] = None,
        padding: Optional[float] = None,
    ) -> FitResult:
        """Resolve the font size for an element without touching it."""
        request = build_fit_request(
            element,
            min_size=min_size,
            max_size=max_size,
            max_lines=max_lines,
            padding=padding,
            settings=self.settings,
        )
        if not request.text.strip():
            return FitResult(font_size=request.min_size, outcome=FitOutcome.FITTED_WITHIN_RANGE)
        return self.resolver.resolve(request)

    def _should_apply(self, element: TextElement, result: FitResult) -> bool:
        if not element.text.strip():
            return False
        if result.outcome == FitOutcome.UNSATISFIABLE:
            logger.warning(
                f"Element {element.id}: text cannot fit {element.width}x{element.height}"
                + (" (strict, size unchanged)" if self.strict else f", using {result.font_size}")
            )
            return not self.strict
        return True

    def fit(self, element: TextElement, **bounds) -> tuple[TextElement, FitResult]:
        """Fit an element, returning a resized copy.

        Args:
            element: Element to fit. Not modified.
            **bounds: min_size, max_size, max_lines, padding overrides.

        Returns:
            Tuple of (fitted element, fit result).
        """
        result = self.resolve(element, **bounds)
        if not self._should_apply(element, result):
            return element, result
        return element.model_copy(update={"font_size": result.font_size}), result

    def apply(self, element: TextElement, **bounds) -> FitResult:
        """Fit an element in place.

        Args:
            element: Element to resize.
            **bounds: min_size, max_size, max_lines, padding overrides.

        Returns:
            Fit result; ``element.font_size`` holds the applied size.
        """
        result = self.resolve(element, **bounds)
        if self._should_apply(element, result):
            element.font_size = result.font_size
        return result

    def check_fit(self, element: TextElement) -> tuple[bool, Optional[Measurement]]:
        """Check whether an element's text fits at its current font size.

        Returns:
            Tuple of (fits, measurement). Measurement is None when there is
            nothing to measure or no oracle.
        """
        request = build_fit_request(element, settings=self.settings)
        if request.is_degenerate or not request.text.strip() or not self.resolver.oracle_available:
            return True, None

        measurement = self.oracle.measure(
            request.text, request.box_width, element.font_size, request.style
        )
        fits = measurement.rendered_height <= request.box_height + self.resolver.height_tolerance
        if request.max_lines is not None:
            fits = fits and measurement.line_count <= request.max_lines
        return fits, measurement


def apply_auto_fit(
    element: TextElement,
    oracle: Optional[MeasurementOracle],
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
    max_lines: Optional[int] = None,
    padding: Optional[float] = None,
    strict: bool = False,
) -> FitResult:
    """Resolve and apply an auto-fit font size to an element in place.

    Args:
        element: Element to resize.
        oracle: Measurement backend.
        min_size: Smallest preferred font size.
        max_size: Largest allowed font size.
        max_lines: Hard ceiling on wrapped lines.
        padding: Inner padding on every side, in px.
        strict: Leave the size alone when nothing fits.

    Returns:
        The fit result.
    """
    constraint = AutoFitConstraint(oracle, strict=strict)
    return constraint.apply(
        element,
        min_size=min_size,
        max_size=max_size,
        max_lines=max_lines,
        padding=padding,
    )


def fit_text_elements(
    elements: list[TextElement],
    oracle: Optional[MeasurementOracle],
    strict: bool = False,
) -> list[TextElement]:
    """Fit every auto-fit element in a list.

    Elements with ``auto_fit`` disabled are returned as-is.

    Args:
        elements: Elements to fit.
        oracle: Measurement backend.
        strict: Leave sizes alone when nothing fits.

    Returns:
        Fitted elements, in input order.
    """
    constraint = AutoFitConstraint(oracle, strict=strict)

    fitted = []
    for element in elements:
        if element.auto_fit:
            fitted.append(constraint.fit(element)[0])
        else:
            fitted.append(element)

    return fitted

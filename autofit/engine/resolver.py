"""
resolver.py — Find the largest font size that makes text fit its box.

Binary search over integer font sizes, probing a MeasurementOracle at each
step. A size fits when the rendered height is within the box height (plus a
1px tolerance) and, if a line limit is set, the text wraps to no more lines
than allowed.

Resolution runs in up to two passes:

1. Search [min_size, max_size]. Any hit is FITTED_WITHIN_RANGE.
2. Only when pass 1 found nothing, a line limit is set and min_size > 1:
   search [1, min_size - 1]. A hit is FITTED_BELOW_RANGE. The line limit is
   the stricter contract, so the configured minimum gives way first.

If both passes come up empty the result is UNSATISFIABLE with min_size as a
best-effort value. The resolver never raises for a valid request: empty
text, a non-positive box or a missing oracle all return min_size as a
vacuous fit.
"""

import logging
from typing import Optional, Tuple

from autofit.dsl.schema import FitOutcome, FitRequest, FitResult
from .oracle import MeasurementOracle
from .units import ABSOLUTE_MIN_FONT_SIZE, HEIGHT_TOLERANCE, MAX_SEARCH_ITERATIONS

logger = logging.getLogger(__name__)


class FontSizeResolver:
    """Resolves auto-fit font sizes against a measurement oracle.

    Stateless between calls apart from the oracle's own private caches.
    Not thread-safe when the oracle isn't; give each thread its own resolver
    and oracle.
    """

    def __init__(
        self,
        oracle: Optional[MeasurementOracle],
        max_iterations: int = MAX_SEARCH_ITERATIONS,
        height_tolerance: float = HEIGHT_TOLERANCE,
    ):
        self.oracle = oracle
        self.max_iterations = max_iterations
        self.height_tolerance = height_tolerance

    @property
    def oracle_available(self) -> bool:
        """Whether the oracle can measure in this environment."""
        return self.oracle is not None and self.oracle.available

    def fits(self, request: FitRequest, size: int) -> bool:
        """Check whether ``size`` satisfies the height and line constraints."""
        measurement = self.oracle.measure(
            request.text, request.box_width, size, request.style
        )

        height_ok = measurement.rendered_height <= request.box_height + self.height_tolerance
        lines_ok = request.max_lines is None or measurement.line_count <= request.max_lines

        logger.debug(
            f"probe size={size} height={measurement.rendered_height:.2f} "
            f"lines={measurement.line_count} fits={height_ok and lines_ok}"
        )
        return height_ok and lines_ok

    def search_range(self, request: FitRequest, lower: int, upper: int) -> Tuple[int, int]:
        """Binary search for the largest fitting size in [lower, upper].

        Returns:
            Tuple of (best size, or 0 when nothing in the range fits;
            number of oracle measurements made).
        """
        lo, hi = lower, upper
        best = 0
        iterations = 0
        probes = 0

        while lo <= hi and iterations < self.max_iterations:
            iterations += 1
            mid = (lo + hi) // 2
            if mid <= 0:
                lo += 1
                continue

            probes += 1
            if self.fits(request, mid):
                best = mid  # This size fits, try larger
                lo = mid + 1
            else:
                hi = mid - 1  # Too big, try smaller

        return best, probes

    def resolve(self, request: FitRequest) -> FitResult:
        """Resolve the font size for a request.

        Args:
            request: Text, box, style and size constraints.

        Returns:
            FitResult with the chosen size, its outcome and the probe count.
        """
        if request.is_degenerate:
            logger.debug("Nothing to measure, using min_size")
            return FitResult(font_size=request.min_size, outcome=FitOutcome.FITTED_WITHIN_RANGE)

        if not self.oracle_available:
            logger.debug("Measurement oracle unavailable, using min_size")
            return FitResult(font_size=request.min_size, outcome=FitOutcome.FITTED_WITHIN_RANGE)

        # PASS 1: configured range
        size, probes = self.search_range(request, request.min_size, request.max_size)
        if size:
            return FitResult(
                font_size=size,
                outcome=FitOutcome.FITTED_WITHIN_RANGE,
                probes=probes,
            )

        # PASS 2: give up the minimum size to honour the line limit
        if request.max_lines is not None and request.min_size > ABSOLUTE_MIN_FONT_SIZE:
            size, below_probes = self.search_range(
                request, ABSOLUTE_MIN_FONT_SIZE, request.min_size - 1
            )
            probes += below_probes
            if size:
                logger.info(
                    f"Fitted below min_size to keep max_lines={request.max_lines}: "
                    f"{size} < {request.min_size}"
                )
                return FitResult(
                    font_size=size,
                    outcome=FitOutcome.FITTED_BELOW_RANGE,
                    probes=probes,
                )

        logger.info(
            f"No size in range fits {request.box_width}x{request.box_height} box, "
            f"falling back to min_size={request.min_size}"
        )
        return FitResult(
            font_size=request.min_size,
            outcome=FitOutcome.UNSATISFIABLE,
            probes=probes,
        )


def resolve(
    request: FitRequest,
    oracle: Optional[MeasurementOracle] = None,
    max_iterations: int = MAX_SEARCH_ITERATIONS,
    height_tolerance: float = HEIGHT_TOLERANCE,
) -> FitResult:
    """Resolve a font size with a one-off resolver.

    Args:
        request: Text, box, style and size constraints.
        oracle: Measurement backend. None means no measuring surface is
            available and yields the degenerate min_size result.
        max_iterations: Iteration cap per search pass.
        height_tolerance: Slack added to the box height.

    Returns:
        FitResult for the request.
    """
    resolver = FontSizeResolver(
        oracle,
        max_iterations=max_iterations,
        height_tolerance=height_tolerance,
    )
    return resolver.resolve(request)

"""Batch auto-fitting for bulk renders."""

import logging
import threading
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Sequence

from autofit.config import get_settings
from autofit.constraints.text_fitting import AutoFitConstraint
from autofit.dsl.schema import FitRequest, FitResult, TextElement
from autofit.engine.oracle import MeasurementOracle
from autofit.engine.resolver import FontSizeResolver
from autofit.engine.text_measure import PillowMeasurementOracle
from autofit.engine.text_shared import replace_dynamic_fields

logger = logging.getLogger(__name__)

OracleFactory = Callable[[], MeasurementOracle]


@dataclass
class BatchSettings:
    """Batch fitting configuration."""
    max_workers: int = 4
    strict: bool = False  # Leave sizes alone when nothing fits


def default_oracle_factory() -> MeasurementOracle:
    """Build a Pillow oracle using the configured font directories."""
    return PillowMeasurementOracle(font_dirs=get_settings().font_dirs)


class BatchFitter:
    """Fits many requests or elements across a thread pool.

    Oracles are not thread-safe, so every worker thread builds its own from
    ``oracle_factory`` the first time it needs one.
    """

    def __init__(
        self,
        oracle_factory: OracleFactory = default_oracle_factory,
        settings: BatchSettings | None = None,
    ):
        self.oracle_factory = oracle_factory
        self.settings = settings or BatchSettings(max_workers=get_settings().batch_max_workers)
        self._local = threading.local()

    def _constraint(self) -> AutoFitConstraint:
        """Per-thread constraint holding the thread's own oracle."""
        constraint = getattr(self._local, "constraint", None)
        if constraint is None:
            constraint = AutoFitConstraint(self.oracle_factory(), strict=self.settings.strict)
            self._local.constraint = constraint
        return constraint

    def _resolver(self) -> FontSizeResolver:
        return self._constraint().resolver

    def _fit_request(self, request: FitRequest) -> FitResult:
        try:
            return self._resolver().resolve(request)
        except Exception:
            logger.exception(f"Auto-fit failed for text {request.text[:30]!r}")
            raise

    def _fit_element(self, element: TextElement) -> TextElement:
        if not element.auto_fit:
            return element
        try:
            fitted, _ = self._constraint().fit(element)
        except Exception:
            logger.exception(f"Auto-fit failed for element {element.id}")
            raise
        return fitted

    def fit_requests(self, requests: Sequence[FitRequest]) -> list[FitResult]:
        """Resolve a batch of requests.

        Args:
            requests: Requests to resolve.

        Returns:
            Results in input order.
        """
        logger.info(f"Fitting {len(requests)} requests with {self.settings.max_workers} workers")

        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as pool:
            results = list(pool.map(self._fit_request, requests))

        outcomes = Counter(result.outcome.value for result in results)
        logger.info(f"Batch complete: {dict(outcomes)}")
        return results

    def fit_elements(
        self,
        elements: Sequence[TextElement],
        row_data: Optional[Mapping[str, str]] = None,
        field_mapping: Optional[Mapping[str, str]] = None,
    ) -> list[TextElement]:
        """Fill dynamic fields and auto-fit a set of text elements.

        Args:
            elements: Template text elements. Not modified.
            row_data: Data row for ``{{field}}`` placeholders.
            field_mapping: Template field -> data column mapping.

        Returns:
            New elements in input order.
        """
        if row_data is not None:
            elements = [
                element.model_copy(
                    update={"text": replace_dynamic_fields(element.text, row_data, field_mapping)}
                )
                for element in elements
            ]

        logger.info(f"Fitting {len(elements)} elements with {self.settings.max_workers} workers")

        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as pool:
            fitted = list(pool.map(self._fit_element, elements))

        logger.info(f"Batch complete: {sum(1 for e in elements if e.auto_fit)} auto-fitted")
        return fitted


def fit_batch(
    requests: Sequence[FitRequest],
    oracle_factory: OracleFactory = default_oracle_factory,
    max_workers: int | None = None,
) -> list[FitResult]:
    """Resolve a batch of requests with a temporary fitter.

    Args:
        requests: Requests to resolve.
        oracle_factory: Builds one oracle per worker thread.
        max_workers: Pool size (defaults to settings).

    Returns:
        Results in input order.
    """
    settings = BatchSettings(max_workers=max_workers or get_settings().batch_max_workers)
    return BatchFitter(oracle_factory, settings).fit_requests(requests)

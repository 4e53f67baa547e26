"""Batch auto-fit tasks."""

from autofit.tasks.batch import BatchFitter, BatchSettings, fit_batch

__all__ = [
    "BatchFitter",
    "BatchSettings",
    "fit_batch",
]

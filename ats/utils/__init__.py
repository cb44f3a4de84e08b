"""Utility helpers."""

from .timeout import OperationTimeoutError, run_with_timeout

__all__ = [
    "OperationTimeoutError",
    "run_with_timeout",
]

"""Deadline wrapper for blocking provider calls.

Provider calls (token exchange, SMTP, HTTP) each carry their own socket
timeout, but a slow sequence of them can still exceed what a caller is
willing to wait. ``run_with_timeout`` bounds the whole operation.
"""

import contextvars
import threading
from typing import Any, Callable, Dict, TypeVar

from ats.logging import get_logger

logger = get_logger(__name__, component="timeout")

T = TypeVar("T")


class OperationTimeoutError(TimeoutError):
    """The wrapped call did not finish before its deadline."""

    def __init__(self, message: str, timeout_seconds: float) -> None:
        super().__init__(message)
        self.timeout_seconds = timeout_seconds


def run_with_timeout(
    func: Callable[..., T],
    timeout_seconds: float,
    *args: Any,
    **kwargs: Any,
) -> T:
    """Run ``func(*args, **kwargs)`` and wait at most ``timeout_seconds``.

    The call runs in a daemon thread with a copy of the caller's context
    variables, so scoped logging fields stay attached. On timeout the thread
    is left behind, not interrupted; its result is discarded and it does not
    keep the interpreter alive at exit.

    Args:
        func: Callable to run
        timeout_seconds: Deadline in seconds (must be positive)
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Whatever func returns

    Raises:
        ValueError: If timeout_seconds is not positive
        OperationTimeoutError: If the deadline passes first
        Exception: Anything func raises is re-raised unchanged
    """
    if timeout_seconds <= 0:
        raise ValueError(f"timeout_seconds must be positive, got: {timeout_seconds}")

    name = getattr(func, "__name__", repr(func))
    context = contextvars.copy_context()
    outcome: Dict[str, Any] = {}

    def target() -> None:
        try:
            outcome["value"] = context.run(func, *args, **kwargs)
        except BaseException as e:  # re-raised in the calling thread
            outcome["error"] = e

    worker = threading.Thread(target=target, name=f"ats-timeout-{name}", daemon=True)
    worker.start()
    worker.join(timeout_seconds)

    if worker.is_alive():
        logger.error(
            f"Operation '{name}' timed out after {timeout_seconds} seconds",
            extra={"event": "operation.timeout", "operation": name, "timeout": timeout_seconds},
        )
        raise OperationTimeoutError(
            f"Operation '{name}' timed out after {timeout_seconds} seconds",
            timeout_seconds=timeout_seconds,
        )

    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]

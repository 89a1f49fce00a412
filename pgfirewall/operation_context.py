"""Cancellation context and completion polling for long-running operations.

Every remote call made by the firewall rule resource is preceded by a check
of an ``OperationContext``. Long-running operations returned by the Azure SDK
(``LROPoller``) are awaited in bounded steps so that cancellation and
deadlines are honoured while waiting.
"""

import logging
import threading
import time
from typing import Any, Optional

from .exceptions import OperationCancelledError
from .timeout_config import log_timeout_event

logger = logging.getLogger(__name__)


class OperationContext:
    """Cancellation flag plus an optional deadline shared by one operation.

    Attributes:
        timeout: Seconds allowed from construction, or None for no deadline
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        if timeout is not None and timeout <= 0:
            raise ValueError("Operation timeout must be positive")
        self.timeout = timeout
        self._cancelled = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        """Request cancellation; in-flight waits abort at their next check."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self, operation: str) -> None:
        """Raise OperationCancelledError if cancelled or past the deadline."""
        if self.cancelled:
            raise OperationCancelledError(
                f"Operation '{operation}' was cancelled", operation=operation
            )
        if self.expired:
            log_timeout_event(operation, self.timeout)
            raise OperationCancelledError(
                f"Operation '{operation}' exceeded its deadline",
                operation=operation,
                timeout_value=self.timeout,
            )

    def wait_step(self, interval: float) -> float:
        """Length of the next wait, clamped to the remaining time."""
        remaining = self.remaining()
        if remaining is None:
            return interval
        return min(interval, remaining)


def wait_for_completion(
    poller: Any,
    context: OperationContext,
    poll_interval: float,
    operation: str,
) -> Any:
    """
    Block until a long-running operation completes and return its result.

    Args:
        poller: Azure SDK ``LROPoller`` (``done``, ``wait``, ``result``)
        context: Cancellation context checked between poll steps
        poll_interval: Maximum seconds to wait per step
        operation: Operation name used in errors and logs

    Returns:
        The poller's final result

    Raises:
        OperationCancelledError: If the context is cancelled or expires first
        azure.core.exceptions.AzureError: If the operation itself failed
    """
    steps = 0
    while not poller.done():
        context.raise_if_cancelled(operation)
        poller.wait(timeout=context.wait_step(poll_interval))
        steps += 1
    logger.debug(f"Operation '{operation}' completed after {steps} poll step(s)")
    return poller.result()

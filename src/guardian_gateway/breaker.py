"""Failure gate, a two-state circuit breaker around the generation service.

Closed while fewer than ``threshold`` consecutive failures have been
recorded, open from then on until a success (or an explicit reset) zeroes
the counter.  There is no half-open state and no timer: the only way
back to closed is ``record_success()`` or ``reset()``.

The gate never calls the downstream service itself.  The orchestrating
flow asks ``is_open()`` before each attempt and reports the outcome
afterwards.
"""

from __future__ import annotations
import logging
import threading

logger = logging.getLogger(__name__)

FAILURE_THRESHOLD = 3


class CircuitOpenError(Exception):
    """Raised by the orchestrating flow when the gate rejects a call."""

    def __init__(self, message: str = "Service Busy") -> None:
        super().__init__(message)


class FailureGate:
    """Consecutive-failure counter with a derived open/closed state.

    Instances are independent; share one by reference between the
    callers that guard the same downstream service.
    """

    __slots__ = ("_threshold", "_failures", "_lock")

    def __init__(self, threshold: int = FAILURE_THRESHOLD) -> None:
        if threshold < 1:
            raise ValueError(f"threshold must be >= 1, got {threshold}")
        self._threshold = threshold
        self._failures = 0
        self._lock = threading.Lock()

    @property
    def threshold(self) -> int:
        return self._threshold

    def is_open(self) -> bool:
        with self._lock:
            return self._failures >= self._threshold

    def record_failure(self) -> None:
        """Count one failed downstream call."""
        with self._lock:
            self._failures += 1
            failures = self._failures
        if failures == self._threshold:
            logger.warning("failure gate opened after %d consecutive failures", failures)
        else:
            logger.debug("failure gate count=%d", failures)

    def record_success(self) -> None:
        """Zero the counter, closing the gate whatever its prior state."""
        with self._lock:
            was_open = self._failures >= self._threshold
            self._failures = 0
        if was_open:
            logger.info("failure gate closed")

    def reset(self) -> None:
        """Administrative alias for :meth:`record_success`."""
        self.record_success()

    def get_failure_count(self) -> int:
        with self._lock:
            return self._failures

    def __repr__(self) -> str:
        state = "open" if self.is_open() else "closed"
        return f"FailureGate({state}, failures={self.get_failure_count()}, threshold={self._threshold})"

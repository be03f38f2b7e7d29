"""
Timing Utilities for Latency Instrumentation

Context managers for logging execution times of the repeated-evaluation
engines (sensitivity sweeps, scenario comparisons).  Timing is reported
through logging only; it never feeds back into any result.
"""

import logging
import time
from contextlib import contextmanager
from typing import Optional

logger = logging.getLogger(__name__)


def log_timing(stage: str, action: str, duration_ms: Optional[float] = None):
    """Log a timing event in standard format."""
    if duration_ms is not None:
        logger.debug("[TIMING] %s: %s | duration=%.1fms", stage, action, duration_ms)
    else:
        logger.debug("[TIMING] %s: %s", stage, action)


@contextmanager
def sync_timer(stage: str, action: str = "OPERATION"):
    """Synchronous context manager for timing operations."""
    log_timing(stage, f"{action} START")
    start = time.perf_counter()
    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        log_timing(stage, f"{action} END", duration_ms)


class StepTimer:
    """
    Utility class for timing multiple steps within one engine call.

    Usage:
        timer = StepTimer("sensitivity")
        with timer.step("baseline"):
            evaluate(...)
        with timer.step("sweep"):
            ...
        timer.summary()
    """

    def __init__(self, stage: str):
        self.stage = stage
        self.steps: dict[str, float] = {}
        self.start_time = time.perf_counter()

    @contextmanager
    def step(self, step_name: str):
        """Time a single step."""
        start = time.perf_counter()
        try:
            yield
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            self.steps[step_name] = duration_ms
            log_timing(self.stage, step_name, duration_ms)

    def summary(self) -> float:
        """Log summary of all steps."""
        total_ms = (time.perf_counter() - self.start_time) * 1000
        log_timing(self.stage, "TOTAL", total_ms)
        return total_ms

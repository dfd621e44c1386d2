"""Ordered detector registry."""

import logging
import time

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.detectors import PatternDetector


logger = logging.getLogger(__name__)


class DetectorRegistry:
    """Holds detectors and runs them sequentially in registration order.

    Priorities are not used for ordering. A detector that raises aborts the
    run and the exception propagates to the caller; detectors registered
    after it are not executed.
    """

    def __init__(self, detectors: list[PatternDetector] | None = None):
        self._detectors: list[PatternDetector] = []
        if detectors:
            self.register(*detectors)

    def register(self, *detectors: PatternDetector) -> None:
        """Append detectors to the run order."""
        for detector in detectors:
            logger.debug(f'[DETECTOR] Registered {detector.name} (priority {detector.priority})')
            self._detectors.append(detector)

    @property
    def detectors(self) -> tuple[PatternDetector, ...]:
        return tuple(self._detectors)

    def __len__(self) -> int:
        return len(self._detectors)

    def run_all(self, ctx: DetectionContext) -> None:
        """Run every registered detector against ctx.

        Args:
            ctx: Shared read-only detection context.
        """
        for detector in self._detectors:
            start = time.perf_counter()
            detector.detect(ctx)
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.debug(f'[DETECTOR] {detector.name}: {len(detector.issues)} issues in {elapsed_ms:.2f}ms')

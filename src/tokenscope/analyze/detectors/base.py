"""Base class for pattern detectors."""

from abc import ABC, abstractmethod

from tokenscope.analyze.context import DetectionContext


CONTEXT_RADIUS = 20  # Characters kept on each side of a match in issue context


class PatternDetector(ABC):
    """Base class for all pattern detectors.

    Subclass this to create a detector. Each detector scans the shared
    context for a single kind of issue and keeps its findings in a private
    list that is replaced on every call to detect(), so running the same
    detector twice never accumulates results.
    """

    def __init__(self):
        self._issues: list = []

    @property
    @abstractmethod
    def name(self) -> str:
        """Detector identifier (e.g., 'emoji', 'bidi_control')."""
        pass

    @property
    @abstractmethod
    def priority(self) -> int:
        """Severity tier: 1-11 for LLM safety checks, 12-15 for stylistic patterns.

        Informational only. Detectors run in registration order.
        """
        pass

    @abstractmethod
    def detect(self, ctx: DetectionContext) -> None:
        """Scan the context and replace this detector's issue list.

        Args:
            ctx: Shared read-only detection context.

        Raises:
            Exception: Only for unrecoverable internal faults; aborts the run.
        """
        pass

    @property
    def issues(self) -> tuple:
        """Issues found by the most recent detect() call."""
        return tuple(self._issues)

    def __repr__(self) -> str:
        return f'{type(self).__name__}(name={self.name!r}, priority={self.priority})'


def extract_context(line: str, pos: int, radius: int = CONTEXT_RADIUS) -> str:
    """Return the slice of line within radius characters of pos."""
    return line[max(0, pos - radius) : pos + radius]

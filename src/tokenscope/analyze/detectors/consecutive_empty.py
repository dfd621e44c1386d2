"""Consecutive empty line detector."""

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import ConsecutiveEmptyLines

from .base import PatternDetector


class ConsecutiveEmptyDetector(PatternDetector):
    """Groups runs of blank lines (whitespace-only counts as blank)."""

    def __init__(self, min_run: int = 2):
        """Initialize detector.

        Args:
            min_run: Minimum run length worth reporting.
        """
        super().__init__()
        self.min_run = min_run

    @property
    def name(self) -> str:
        return 'consecutive_empty'

    @property
    def priority(self) -> int:
        return 13

    def detect(self, ctx: DetectionContext) -> None:
        runs = []
        current = None

        for insight in ctx.line_insights:
            if insight.is_empty:
                if current is None:
                    current = ConsecutiveEmptyLines(start_line=insight.line_number, end_line=insight.line_number, count=1)
                else:
                    current.end_line = insight.line_number
                    current.count += 1
            else:
                if current is not None and current.count >= self.min_run:
                    runs.append(current)
                current = None

        if current is not None and current.count >= self.min_run:
            runs.append(current)

        self._issues = runs

"""Long-context placement (lost-in-the-middle) detector."""

from collections.abc import Sequence

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import ContextPlacementIssue

from .base import PatternDetector
from .tables import IMPORTANT_KEYWORDS


MIN_CONTEXT_TOKENS = 4000
EDGE_LINES = 5


def contains_important_content(lines: Sequence[str]) -> bool:
    for line in lines:
        lower = line.lower()
        if any(keyword in lower for keyword in IMPORTANT_KEYWORDS):
            return True
    return False


class ContextPlacementDetector(PatternDetector):
    """Reports where instruction markers sit in a long context.

    Only runs for contexts of 4000+ tokens. The start region is the first
    five lines, the end region the last five, and the middle region is the
    middle third of the file. Exactly one issue is produced per run.
    """

    RECOMMENDED_CHANGES = 'Move key facts to start/end; avoid burying instructions in middle'

    @property
    def name(self) -> str:
        return 'context_placement'

    @property
    def priority(self) -> int:
        return 10

    def detect(self, ctx: DetectionContext) -> None:
        self._issues = []
        if ctx.total_tokens < MIN_CONTEXT_TOKENS:
            return

        lines = ctx.lines
        n = len(lines)
        middle = lines[n // 3 : 2 * n // 3]

        self._issues = [
            ContextPlacementIssue(
                total_tokens=ctx.total_tokens,
                important_at_start=contains_important_content(lines[:EDGE_LINES]),
                important_at_end=contains_important_content(lines[-EDGE_LINES:]),
                important_in_middle=bool(middle) and contains_important_content(middle),
                recommended_changes=self.RECOMMENDED_CHANGES,
            )
        ]

"""Long line detector."""

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import LongLine
from tokenscope.utils import get_long_line_threshold, truncate

from .base import PatternDetector


PREVIEW_LENGTH = 100


class LongLineDetector(PatternDetector):
    """Flags tokenized lines longer than a character threshold."""

    def __init__(self, threshold: int | None = None):
        """Initialize detector.

        Args:
            threshold: Character limit. Defaults to TOKENSCOPE_LONG_LINE_THRESHOLD (120).
        """
        super().__init__()
        self.threshold = threshold if threshold is not None else get_long_line_threshold()

    @property
    def name(self) -> str:
        return 'long_line'

    @property
    def priority(self) -> int:
        return 14

    def detect(self, ctx: DetectionContext) -> None:
        self._issues = [
            LongLine(
                line_number=insight.line_number,
                length=insight.chars,
                tokens=insight.tokens,
                content=truncate(insight.content, PREVIEW_LENGTH),
            )
            for insight in ctx.line_insights
            if insight.chars > self.threshold and insight.tokens > 0
        ]

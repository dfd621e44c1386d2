"""Known glitch token detector."""

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import GlitchTokenIssue

from .base import PatternDetector, extract_context
from .tables import GLITCH_TOKENS


class GlitchTokenDetector(PatternDetector):
    """Detects substrings known to destabilize model output (e.g. ' SolidGoldMagikarp')."""

    KNOWN_ISSUE = 'Known glitch token causes unstable behavior'

    def __init__(self, glitch_tokens: tuple[str, ...] = GLITCH_TOKENS):
        super().__init__()
        self.glitch_tokens = tuple(dict.fromkeys(glitch_tokens))

    @property
    def name(self) -> str:
        return 'glitch_token'

    @property
    def priority(self) -> int:
        return 9

    def detect(self, ctx: DetectionContext) -> None:
        issues = []
        for line_idx, line in enumerate(ctx.lines):
            for token in self.glitch_tokens:
                pos = line.find(token)
                if pos < 0:
                    continue
                issues.append(
                    GlitchTokenIssue(
                        token=token,
                        line_number=line_idx + 1,
                        position=pos,
                        context=extract_context(line, pos),
                        known_issue=self.KNOWN_ISSUE,
                    )
                )
        self._issues = issues

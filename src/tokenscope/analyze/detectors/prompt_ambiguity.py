"""Prompt ambiguity detector."""

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import AmbiguityIssue

from .base import PatternDetector
from .tables import ROLE_CONFUSION_PHRASES, SYCOPHANTIC_PHRASES


MAX_QUOTES = 6


def has_conflicting_instructions(lower: str) -> bool:
    return 'but' in lower and ('however' in lower or 'although' in lower)


def has_excessive_quotes(line: str) -> bool:
    return line.count('"') + line.count("'") > MAX_QUOTES


def has_sycophantic_framing(lower: str) -> bool:
    return any(phrase in lower for phrase in SYCOPHANTIC_PHRASES)


def has_role_confusion(lower: str) -> bool:
    return any(phrase in lower for phrase in ROLE_CONFUSION_PHRASES)


class PromptAmbiguityDetector(PatternDetector):
    """Runs four independent wording checks on every line."""

    @property
    def name(self) -> str:
        return 'prompt_ambiguity'

    @property
    def priority(self) -> int:
        return 11

    def detect(self, ctx: DetectionContext) -> None:
        issues = []
        for line_idx, line in enumerate(ctx.lines):
            lower = line.lower()
            checks = (
                (
                    has_conflicting_instructions(lower),
                    'conflicting_instructions',
                    'Line contains potentially conflicting instructions',
                    'medium',
                ),
                (
                    has_excessive_quotes(line),
                    'nested_quotes',
                    'Excessive quote nesting can confuse parsing',
                    'low',
                ),
                (
                    has_sycophantic_framing(lower),
                    'sycophantic_frame',
                    'Sycophantic framing reduces truthfulness',
                    'high',
                ),
                (
                    has_role_confusion(lower),
                    'role_confusion',
                    'Multiple or conflicting role definitions can confuse the model',
                    'high',
                ),
            )
            for matched, pattern, description, severity in checks:
                if matched:
                    issues.append(
                        AmbiguityIssue(
                            pattern=pattern,
                            line_number=line_idx + 1,
                            description=description,
                            example=line,
                            severity=severity,
                        )
                    )
        self._issues = issues

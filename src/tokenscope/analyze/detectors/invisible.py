"""Zero-width and invisible character detector."""

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import InvisibleCharIssue

from .base import PatternDetector, extract_context
from .tables import INVISIBLE_CHARS, SUSPICIOUS_KEYWORDS


def has_suspicious_keyword(line: str) -> bool:
    folded = line.casefold()
    return any(keyword in folded for keyword in SUSPICIOUS_KEYWORDS)


class InvisibleCharDetector(PatternDetector):
    """Detects zero-width and invisible formatting characters.

    A hit is marked as evasion when the same line carries an instruction-like
    keyword, the usual shape of hidden-character prompt injection.
    """

    @property
    def name(self) -> str:
        return 'invisible_char'

    @property
    def priority(self) -> int:
        return 2

    def detect(self, ctx: DetectionContext) -> None:
        merged: dict[tuple[int, str], InvisibleCharIssue] = {}

        for line_idx, line in enumerate(ctx.lines):
            evasion = None
            for pos, ch in enumerate(line):
                char_type = INVISIBLE_CHARS.get(ch)
                if char_type is None:
                    continue

                key = (line_idx + 1, char_type)
                if key in merged:
                    merged[key].count += 1
                    continue

                if evasion is None:
                    evasion = has_suspicious_keyword(line)
                merged[key] = InvisibleCharIssue(
                    char_type=char_type,
                    line_number=line_idx + 1,
                    position=pos,
                    context=extract_context(line, pos),
                    count=1,
                    is_evasion=evasion,
                )

        self._issues = list(merged.values())

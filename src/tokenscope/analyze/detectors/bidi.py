"""Bidirectional control character (Trojan Source) detector."""

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import BiDiControlIssue

from .base import PatternDetector, extract_context
from .tables import BIDI_CONTROLS, LTR_BIDI_CONTROLS, RTL_BIDI_CONTROLS


def is_trojan_source_line(line: str) -> bool:
    """True when a line mixes LTR-forcing and RTL-forcing controls (CVE-2021-42574)."""
    chars = set(line)
    return bool(chars & LTR_BIDI_CONTROLS) and bool(chars & RTL_BIDI_CONTROLS)


class BiDiControlDetector(PatternDetector):
    """Detects the nine Unicode bidirectional formatting controls."""

    @property
    def name(self) -> str:
        return 'bidi_control'

    @property
    def priority(self) -> int:
        return 5

    def detect(self, ctx: DetectionContext) -> None:
        merged: dict[tuple[int, str], BiDiControlIssue] = {}

        for line_idx, line in enumerate(ctx.lines):
            trojan = None
            for pos, ch in enumerate(line):
                control_type = BIDI_CONTROLS.get(ch)
                if control_type is None:
                    continue

                key = (line_idx + 1, control_type)
                if key in merged:
                    merged[key].count += 1
                    continue

                if trojan is None:
                    trojan = is_trojan_source_line(line)
                merged[key] = BiDiControlIssue(
                    control_type=control_type,
                    line_number=line_idx + 1,
                    position=pos,
                    context=extract_context(line, pos),
                    count=1,
                    is_trojan_source=trojan,
                )

        self._issues = list(merged.values())

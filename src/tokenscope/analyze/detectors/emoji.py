"""Emoji detector."""

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import EmojiIssue

from .base import PatternDetector
from .tables import EMOJI_RANGES, EMOJI_TOKEN_COSTS, REGIONAL_INDICATORS, SKIN_TONE_MODIFIERS


ZWJ = 0x200D


def is_emoji(cp: int) -> bool:
    return any(first <= cp <= last for first, last in EMOJI_RANGES)


def _in_range(cp: int, bounds: tuple[int, int]) -> bool:
    return bounds[0] <= cp <= bounds[1]


class EmojiDetector(PatternDetector):
    """Detects emoji and classifies them by how expensively they tokenize.

    The type of each emoji is decided by the code point that follows it:
    a zero width joiner makes it part of a ZWJ sequence, a skin tone
    modifier makes it a skin-tone variant, and a second regional indicator
    makes it a flag. Occurrences of the same type on a line are merged.
    """

    @property
    def name(self) -> str:
        return 'emoji'

    @property
    def priority(self) -> int:
        return 1

    def detect(self, ctx: DetectionContext) -> None:
        merged: dict[tuple[int, str], EmojiIssue] = {}

        for line_idx, line in enumerate(ctx.lines):
            i = 0
            while i < len(line):
                cp = ord(line[i])
                if not is_emoji(cp):
                    i += 1
                    continue

                emoji_type, width = self._classify(line, i)
                emoji = line[i : i + width]
                key = (line_idx + 1, emoji_type)
                cost = EMOJI_TOKEN_COSTS[emoji_type]

                existing = merged.get(key)
                if existing is not None:
                    existing.count += 1
                    existing.token_cost += cost
                else:
                    merged[key] = EmojiIssue(
                        emoji=emoji,
                        emoji_type=emoji_type,
                        line_number=line_idx + 1,
                        count=1,
                        line_content=line,
                        token_cost=cost,
                    )
                i += width

        self._issues = list(merged.values())

    @staticmethod
    def _classify(line: str, i: int) -> tuple[str, int]:
        """Return (emoji_type, code points consumed) for the emoji at index i."""
        cp = ord(line[i])
        nxt = ord(line[i + 1]) if i + 1 < len(line) else None

        if nxt == ZWJ:
            return 'zwj_sequence', 1
        if nxt is not None and _in_range(nxt, SKIN_TONE_MODIFIERS):
            return 'skin_tone', 2
        if _in_range(cp, REGIONAL_INDICATORS) and nxt is not None and _in_range(nxt, REGIONAL_INDICATORS):
            return 'flag', 2
        return 'standard', 1

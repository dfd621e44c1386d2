"""Homoglyph / confusable character detector (UTS #39 skeletons)."""

import logging
import unicodedata
from functools import lru_cache
from types import MappingProxyType

from confusable_homoglyphs import categories, confusables

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import ConfusableIssue

from .base import PatternDetector, extract_context


logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def prototype_table() -> MappingProxyType:
    """One-way source -> prototype map rebuilt from the Unicode confusables data.

    confusable_homoglyphs stores every confusables.txt line twice, as
    source -> target and target -> source, keyed in file order. A source is a
    single code point that occurs in exactly one line, so it has one link,
    and its target either has other links or was keyed after it.
    """
    data = confusables.confusables_data
    order = {char: i for i, char in enumerate(data)}

    table = {}
    for char, links in data.items():
        if len(char) != 1 or len(links) != 1:
            continue
        target = links[0]['c']
        partner = data.get(target, ())
        if len(partner) > 1 or order.get(target, -1) > order[char]:
            table[char] = target

    logger.debug(f'[DETECTOR] confusables: {len(table)} source characters')
    return MappingProxyType(table)


def prototype(char: str) -> str:
    """Map one character to its prototype; prototypes map to themselves."""
    return prototype_table().get(char, char)


def skeleton(text: str) -> str:
    """Compute the UTS #39 skeleton: NFD, map every char to its prototype, NFD again."""
    decomposed = unicodedata.normalize('NFD', text)
    return unicodedata.normalize('NFD', ''.join(prototype(ch) for ch in decomposed))


def script_of(char: str) -> str | None:
    """Return 'latin', 'cyrillic', 'greek' or None for the scripts that matter for spoofing."""
    cp = ord(char)
    if ('a' <= char <= 'z') or ('A' <= char <= 'Z') or 0x00C0 <= cp <= 0x024F:
        return 'latin'
    if 0x0400 <= cp <= 0x04FF:
        return 'cyrillic'
    if 0x0370 <= cp <= 0x03FF:
        return 'greek'
    return None


def is_mixed_script_word(line: str, pos: int) -> bool:
    """Check whether the alphanumeric word around pos mixes two or more scripts."""
    start = pos
    while start > 0 and line[start - 1].isalnum():
        start -= 1
    end = pos
    while end < len(line) and line[end].isalnum():
        end += 1

    scripts = {script_of(ch) for ch in line[start:end]}
    scripts.discard(None)
    return len(scripts) >= 2


def describe_confusable(original: str, target: str) -> str:
    """Human readable label, e.g. "Cyrillic 'а' vs Latin 'a'"."""
    return f"{categories.alias(original).title()} '{original}' vs {categories.alias(target).title()} '{target}'"


class ConfusablesDetector(PatternDetector):
    """Detects non-ASCII characters whose skeleton differs from the character itself.

    The reported target is the first character of the skeleton. Occurrences
    of the same original character on a line are merged.
    """

    @property
    def name(self) -> str:
        return 'confusables'

    @property
    def priority(self) -> int:
        return 6

    def detect(self, ctx: DetectionContext) -> None:
        merged: dict[tuple[int, str], ConfusableIssue] = {}

        for line_idx, line in enumerate(ctx.lines):
            for pos, ch in enumerate(line):
                if ord(ch) < 128:
                    continue

                key = (line_idx + 1, ch)
                if key in merged:
                    merged[key].count += 1
                    continue

                skel = skeleton(ch)
                if skel == ch:
                    continue

                target = skel[0] if skel else ch
                merged[key] = ConfusableIssue(
                    original_char=ch,
                    confusable_char=target,
                    char_name=describe_confusable(ch, target),
                    line_number=line_idx + 1,
                    position=pos,
                    context=extract_context(line, pos),
                    count=1,
                    is_mixed_script=is_mixed_script_word(line, pos),
                )

        self._issues = list(merged.values())

"""Encoding and obfuscation detector."""

import codecs
import re

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import EncodingIssue

from .base import PatternDetector
from .tables import ASCII_ART_CHARS, LEETSPEAK_DECODE, LEETSPEAK_PATTERNS


ROT13_MIN_LENGTH = 20
ROT13_VOWEL_RATIO_LOW = 0.25
ROT13_VOWEL_RATIO_HIGH = 0.60
ASCII_ART_MIN_LENGTH = 10
ASCII_ART_RATIO = 0.5

VOWELS = frozenset('aeiouAEIOU')


def has_leetspeak(line: str) -> bool:
    lower = line.lower()
    return any(pattern in lower for pattern in LEETSPEAK_PATTERNS)


def decode_leetspeak(text: str) -> str:
    return text.translate(LEETSPEAK_DECODE)


def looks_like_rot13(line: str) -> bool:
    """Heuristic: English text run through ROT13 has an unusual vowel ratio."""
    if len(line) < ROT13_MIN_LENGTH:
        return False
    letters = [ch for ch in line if ch.isalpha()]
    if not letters:
        return False
    vowel_ratio = sum(1 for ch in letters if ch in VOWELS) / len(letters)
    return vowel_ratio < ROT13_VOWEL_RATIO_LOW or vowel_ratio > ROT13_VOWEL_RATIO_HIGH


def looks_like_ascii_art(line: str) -> bool:
    """True when more than half of a line's characters are box-drawing or art characters."""
    if len(line) < ASCII_ART_MIN_LENGTH:
        return False
    art_count = sum(1 for ch in line if ch in ASCII_ART_CHARS)
    return art_count / len(line) > ASCII_ART_RATIO


class EncodingDetector(PatternDetector):
    """Detects Base64, hex escapes, leetspeak, ROT13 and ASCII art.

    Each check runs independently on every line, so one line can produce
    issues of several encoding types. The thresholds are rough heuristics.
    """

    BASE64_PATTERN = re.compile(r'[A-Za-z0-9+/]{20,}={0,2}')
    HEX_PATTERN = re.compile(r'(?:\\x[0-9a-fA-F]{2}|0x[0-9a-fA-F]{8,})')

    @property
    def name(self) -> str:
        return 'encoding'

    @property
    def priority(self) -> int:
        return 7

    def detect(self, ctx: DetectionContext) -> None:
        issues = []
        for line_idx, line in enumerate(ctx.lines):
            line_number = line_idx + 1

            for match in self.BASE64_PATTERN.finditer(line):
                issues.append(self._span_issue('base64', match, line_number, len(match.group()) // 4))

            for match in self.HEX_PATTERN.finditer(line):
                issues.append(self._span_issue('hex', match, line_number, len(match.group()) // 3))

            if has_leetspeak(line):
                issues.append(self._line_issue('leetspeak', line, line_number, decode_leetspeak(line), 5))

            if looks_like_rot13(line):
                issues.append(
                    self._line_issue('rot13', line, line_number, codecs.decode(line, 'rot13'), len(line) // 4)
                )

            if looks_like_ascii_art(line):
                issues.append(self._line_issue('ascii_art', line, line_number, '', len(line)))

        self._issues = issues

    @staticmethod
    def _span_issue(encoding_type: str, match: re.Match, line_number: int, token_cost: int) -> EncodingIssue:
        encoded = match.group()
        return EncodingIssue(
            encoding_type=encoding_type,
            encoded_text=encoded,
            decoded_text='',
            line_number=line_number,
            position=match.start(),
            length=len(encoded),
            token_cost=token_cost,
        )

    @staticmethod
    def _line_issue(encoding_type: str, line: str, line_number: int, decoded: str, token_cost: int) -> EncodingIssue:
        return EncodingIssue(
            encoding_type=encoding_type,
            encoded_text=line,
            decoded_text=decoded,
            line_number=line_number,
            position=0,
            length=len(line),
            token_cost=token_cost,
        )

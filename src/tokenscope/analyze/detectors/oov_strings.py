"""Out-of-vocabulary string detector."""

import re

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import OOVStringIssue

from .base import PatternDetector


MIN_URL_LENGTH = 50
MIN_HASH_LENGTH = 32
HEX_RATIO_THRESHOLD = 0.8

HEX_CHARS = frozenset('0123456789abcdefABCDEF')


def is_url(text: str) -> bool:
    return text.startswith(('http://', 'https://'))


def is_hash(text: str) -> bool:
    """Return True for long, mostly-hex strings."""
    if len(text) < MIN_HASH_LENGTH:
        return False
    hex_count = sum(1 for ch in text if ch in HEX_CHARS)
    return hex_count / len(text) > HEX_RATIO_THRESHOLD


class OOVStringsDetector(PatternDetector):
    """Detects URLs, UUIDs, hashes and opaque IDs that split into many subword tokens.

    Each line is checked against every pattern in one pass. A string can be
    reported under more than one type (a UUID is also a long opaque ID);
    the id pattern skips anything that looks like a URL or hash.
    """

    URL_PATTERN = re.compile(r'https?://[^\s]+')
    UUID_PATTERN = re.compile(r'[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}')
    HASH_PATTERN = re.compile(r'\b[0-9a-f]{32,}\b')
    ID_PATTERN = re.compile(r'[a-zA-Z0-9_-]{20,}')

    @property
    def name(self) -> str:
        return 'oov_strings'

    @property
    def priority(self) -> int:
        return 4

    def detect(self, ctx: DetectionContext) -> None:
        issues = []
        for line_idx, line in enumerate(ctx.lines):
            for string_type, pattern in self._patterns():
                for match in pattern.findall(line):
                    issue = self._make_issue(string_type, match, line_idx + 1, line)
                    if issue is not None:
                        issues.append(issue)
        self._issues = issues

    def _patterns(self) -> tuple[tuple[str, re.Pattern], ...]:
        return (
            ('url', self.URL_PATTERN),
            ('uuid', self.UUID_PATTERN),
            ('hash', self.HASH_PATTERN),
            ('id', self.ID_PATTERN),
        )

    @staticmethod
    def _make_issue(string_type: str, match: str, line_number: int, line: str) -> OOVStringIssue | None:
        if string_type == 'url':
            if len(match) <= MIN_URL_LENGTH:
                return None
            token_count = (len(match) + 4) // 5
            recommendation = 'Replace with short URL or <URL> placeholder'
        elif string_type == 'uuid':
            token_count = 5
            recommendation = 'Replace with <UUID> placeholder'
        elif string_type == 'hash':
            if not is_hash(match):
                return None
            token_count = (len(match) + 3) // 4
            recommendation = 'Replace with <HASH> placeholder or semantic name'
        else:
            if is_url(match) or is_hash(match):
                return None
            token_count = len(match) // 2
            recommendation = 'Use shorter identifier or break into semantic parts'

        return OOVStringIssue(
            string=match,
            string_type=string_type,
            line_number=line_number,
            token_count=token_count,
            context=line,
            recommendation=recommendation,
        )

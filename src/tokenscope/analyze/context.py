"""Per-file detection context shared by all detectors."""

import bisect
from collections.abc import Sequence
from dataclasses import dataclass

from tokenscope.tokens import Token


@dataclass(frozen=True)
class LineInsight:
    """Token metrics for a single line.

    Built once per analysis from the content and its token list; never
    modified afterwards.
    """

    line_number: int  # 1-based
    content: str  # Line text without the trailing newline
    tokens: int  # Tokens whose start offset falls on this line
    chars: int  # Code points on the line
    token_char_ratio: float  # tokens / chars, 0.0 for empty lines
    is_empty: bool  # Blank after stripping whitespace
    is_whitespace_only: bool  # Blank but not zero-length
    has_unicode: bool  # Contains a code point above 127


@dataclass(frozen=True)
class DetectionContext:
    """Read-only bundle handed to every detector.

    Use DetectionContext.build() rather than constructing it directly so
    that lines and line insights stay consistent with the content.
    """

    content: str
    lines: tuple[str, ...]
    tokens: tuple[Token, ...]
    line_insights: tuple[LineInsight, ...]
    total_tokens: int

    @classmethod
    def build(cls, content: str, tokens: Sequence[Token], total_tokens: int) -> 'DetectionContext':
        """Split content into lines and derive per-line insights.

        Args:
            content: Full text being analyzed.
            tokens: Decoded tokens with byte offsets into content.
            total_tokens: Authoritative token total for the file.

        Returns:
            A frozen context.
        """
        lines = content.split('\n')
        return cls(
            content=content,
            lines=tuple(lines),
            tokens=tuple(tokens),
            line_insights=tuple(map_tokens_to_lines(lines, tokens)),
            total_tokens=total_tokens,
        )


def calculate_line_starts(lines: Sequence[str]) -> list[int]:
    """Return the UTF-8 byte offset at which each line starts."""
    starts = []
    pos = 0
    for line in lines:
        starts.append(pos)
        pos += len(line.encode('utf-8')) + 1
    return starts


def find_line_for_position(position: int, line_starts: Sequence[int]) -> int:
    """Return the 0-based line index containing a byte offset, or -1."""
    if not line_starts or position < 0:
        return -1
    return bisect.bisect_right(line_starts, position) - 1


def tokens_per_line(lines: Sequence[str], tokens: Sequence[Token]) -> list[int]:
    """Count tokens by the line their first byte falls on."""
    counts = [0] * len(lines)
    line_starts = calculate_line_starts(lines)
    for token in tokens:
        idx = find_line_for_position(token.position, line_starts)
        if 0 <= idx < len(counts):
            counts[idx] += 1
    return counts


def has_unicode(text: str) -> bool:
    return any(ord(ch) > 127 for ch in text)


def map_tokens_to_lines(lines: Sequence[str], tokens: Sequence[Token]) -> list[LineInsight]:
    """Build a LineInsight for every line.

    Args:
        lines: Content split on newlines.
        tokens: Tokens with byte offsets into the joined content.

    Returns:
        One insight per line, in line order.
    """
    counts = tokens_per_line(lines, tokens)
    insights = []
    for i, line in enumerate(lines):
        blank = line.strip() == ''
        chars = len(line)
        insights.append(
            LineInsight(
                line_number=i + 1,
                content=line,
                tokens=counts[i],
                chars=chars,
                token_char_ratio=counts[i] / chars if chars > 0 else 0.0,
                is_empty=blank,
                is_whitespace_only=blank and chars > 0,
                has_unicode=has_unicode(line),
            )
        )
    return insights

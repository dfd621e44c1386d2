"""Distribution, density and category statistics over per-line token counts."""

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from tokenscope.analyze.context import LineInsight, tokens_per_line
from tokenscope.analyze.detectors.url import URLDetector
from tokenscope.tokens import Token
from tokenscope.utils import estimate_tokens, get_heatmap_block_size


HOT_BLOCK_RATIO = 0.8
HEATMAP_MAX_WIDTH = 30
CHART_BAR_MAX_WIDTH = 24
BAR_FILLED = '█'
BAR_EMPTY = '░'
HOT_MARKER = '🔥'


# ============================================================================
# Percentiles
# ============================================================================


@dataclass
class PercentileStats:
    """Distribution of tokens per line."""

    min: int = 0
    p25: float = 0.0
    median: float = 0.0
    p75: float = 0.0
    p90: float = 0.0
    p95: float = 0.0
    max: int = 0
    top10_pct: float = 0.0  # Share of all tokens held by the top 10% of lines

    def format_percentiles(self) -> str:
        return (
            f'Min: {self.min} | 25%: {self.p25:.1f} | 50%: {self.median:.1f} | 75%: {self.p75:.1f} | '
            f'90%: {self.p90:.1f} | 95%: {self.p95:.1f} | Max: {self.max}'
        )


def percentile(sorted_values: Sequence[int], p: float) -> float:
    """Linearly interpolated percentile of an ascending sequence.

    Args:
        sorted_values: Values sorted ascending.
        p: Fraction in [0, 1]. Values outside are clamped.

    Returns:
        The interpolated value, or 0.0 for an empty sequence.
    """
    if not sorted_values:
        return 0.0
    if p <= 0:
        return float(sorted_values[0])
    if p >= 1:
        return float(sorted_values[-1])

    index = p * (len(sorted_values) - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return float(sorted_values[lower])
    fraction = index - lower
    return sorted_values[lower] * (1 - fraction) + sorted_values[upper] * fraction


def calculate_percentiles(insights: Sequence[LineInsight]) -> PercentileStats:
    """Compute the per-line token distribution and top-10% concentration."""
    if not insights:
        return PercentileStats()

    counts = sorted(insight.tokens for insight in insights)
    total = sum(counts)

    top10_index = int(len(counts) * 0.9)
    top10_tokens = sum(counts[top10_index:])

    return PercentileStats(
        min=counts[0],
        p25=percentile(counts, 0.25),
        median=percentile(counts, 0.50),
        p75=percentile(counts, 0.75),
        p90=percentile(counts, 0.90),
        p95=percentile(counts, 0.95),
        max=counts[-1],
        top10_pct=top10_tokens / total * 100 if total > 0 else 0.0,
    )


# ============================================================================
# Density heatmap
# ============================================================================


@dataclass
class DensityBlock:
    start_line: int  # 1-based, inclusive
    end_line: int  # inclusive
    tokens: int
    percentage: float
    is_hot: bool = False


@dataclass
class TokenDensityMap:
    blocks: list[DensityBlock] = field(default_factory=list)

    def format_heatmap(self, width: int = HEATMAP_MAX_WIDTH) -> str:
        """Render one bar per block, scaled to the densest block."""
        if not self.blocks:
            return 'No data'

        max_tokens = max(block.tokens for block in self.blocks)
        rows = []
        for block in self.blocks:
            bar_length = int(block.tokens / max_tokens * width) if max_tokens > 0 else 0
            bar = BAR_FILLED * bar_length + BAR_EMPTY * (width - bar_length)
            marker = HOT_MARKER if block.is_hot else '  '
            rows.append(
                f'Line {block.start_line:>3}-{block.end_line:<3}: {bar} '
                f'({block.tokens} tokens, {block.percentage:.1f}%) {marker}'
            )
        return '\n'.join(rows) + '\n'


def render_token_density_map(
    insights: Sequence[LineInsight], total_tokens: int, block_size: int | None = None
) -> TokenDensityMap:
    """Sum tokens over fixed-size line blocks and mark the densest ones hot.

    Args:
        insights: Per-line insights in line order.
        total_tokens: Denominator for block percentages.
        block_size: Lines per block. Defaults to TOKENSCOPE_HEATMAP_BLOCK_SIZE (50).

    Returns:
        The density map; a block is hot when it holds at least 80% of the
        densest block's tokens.
    """
    if block_size is None:
        block_size = get_heatmap_block_size()
    if not insights:
        return TokenDensityMap()

    blocks = []
    for start in range(0, len(insights), block_size):
        chunk = insights[start : start + block_size]
        block_tokens = sum(insight.tokens for insight in chunk)
        blocks.append(
            DensityBlock(
                start_line=start + 1,
                end_line=start + len(chunk),
                tokens=block_tokens,
                percentage=block_tokens / total_tokens * 100 if total_tokens > 0 else 0.0,
            )
        )

    max_tokens = max(block.tokens for block in blocks)
    if max_tokens > 0:
        threshold = max_tokens * HOT_BLOCK_RATIO
        for block in blocks:
            block.is_hot = block.tokens >= threshold

    return TokenDensityMap(blocks=blocks)


# ============================================================================
# Category breakdown
# ============================================================================


@dataclass
class CategoryStats:
    """Category shares in percent."""

    prose: float = 0.0
    code_blocks: float = 0.0
    urls: float = 0.0
    formatting: float = 0.0
    whitespace: float = 0.0


@dataclass
class CategoryBreakdown:
    """Token counts per content category."""

    prose: int = 0
    code_blocks: int = 0
    urls: int = 0
    formatting: int = 0
    whitespace: int = 0

    @property
    def total(self) -> int:
        return self.prose + self.code_blocks + self.urls + self.formatting + self.whitespace

    def get_stats(self) -> CategoryStats:
        total = self.total
        if total == 0:
            return CategoryStats()
        return CategoryStats(
            prose=self.prose / total * 100,
            code_blocks=self.code_blocks / total * 100,
            urls=self.urls / total * 100,
            formatting=self.formatting / total * 100,
            whitespace=self.whitespace / total * 100,
        )


CODE_FENCE = '```'
MARKDOWN_HEADER = re.compile(r'^#{1,6}\s')
MARKDOWN_LIST = re.compile(r'^\s*[-*+]\s')
MARKDOWN_BOLD = re.compile(r'\*\*[^*]+\*\*|__[^_]+__')
MARKDOWN_ITALIC = re.compile(r'\*[^*]+\*|_[^_]+_')
MARKDOWN_LINK = re.compile(r'\[([^\]]+)\]\([^)]+\)')
MARKDOWN_CODE = re.compile(r'`[^`]+`')


def _marker_chars(line: str, pattern: re.Pattern) -> int:
    """Count the delimiter characters of bold, italic and inline code spans."""
    count = 0
    for match in pattern.findall(line):
        if match.startswith(('**', '__')):
            count += 4
        elif match.startswith(('*', '_', '`')):
            count += 2
    return count


def formatting_chars(line: str) -> int:
    """Estimate the markdown formatting characters on a line."""
    count = 0
    for pattern in (MARKDOWN_HEADER, MARKDOWN_LIST):
        match = pattern.match(line)
        if match:
            count += len(match.group())
    count += _marker_chars(line, MARKDOWN_BOLD)
    count += _marker_chars(line, MARKDOWN_ITALIC)
    count += 4 * len(MARKDOWN_LINK.findall(line))
    count += _marker_chars(line, MARKDOWN_CODE)
    return count


def categorize_tokens(
    lines: Sequence[str], tokens: Sequence[Token], insights: Sequence[LineInsight]
) -> CategoryBreakdown:
    """Split token counts across prose, code, URL, formatting and whitespace.

    Lines are processed in order with a fenced-code-block state toggled by
    triple backticks. Blank lines are whitespace, fence lines are formatting
    and fenced lines are code. Other lines are divided heuristically between
    URL, formatting and prose tokens, never exceeding the line's token count.
    """
    breakdown = CategoryBreakdown()
    line_tokens = tokens_per_line(lines, tokens)
    in_code_block = False

    for i, line in enumerate(lines):
        count = line_tokens[i]

        if i < len(insights) and insights[i].is_empty:
            breakdown.whitespace += count
            continue

        if CODE_FENCE in line:
            in_code_block = not in_code_block
            breakdown.formatting += count
            continue

        if in_code_block:
            breakdown.code_blocks += count
            continue

        url_tokens = sum(estimate_tokens(url) for url in URLDetector.URL_PATTERN.findall(line))
        format_tokens = formatting_chars(line) // 4

        if format_tokens > count:
            format_tokens = count // 4
        if url_tokens > count:
            url_tokens = count // 2

        prose_tokens = count - url_tokens - format_tokens
        if prose_tokens < 0:
            prose_tokens = count // 2
            url_tokens = count // 4
            format_tokens = count - prose_tokens - url_tokens

        breakdown.urls += url_tokens
        breakdown.formatting += format_tokens
        breakdown.prose += prose_tokens

    return breakdown


def render_category_bar(percentage: float, max_width: int = CHART_BAR_MAX_WIDTH) -> str:
    """Filled bar proportional to a percentage."""
    if max_width <= 0:
        max_width = CHART_BAR_MAX_WIDTH
    length = round(percentage / 100 * max_width)
    return BAR_FILLED * max(0, min(max_width, length))

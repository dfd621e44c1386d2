"""Tests for percentiles, density heatmap and category breakdown."""

import pytest

from tokenscope.analyze.context import LineInsight
from tokenscope.analyze.statistics import (
    CategoryBreakdown,
    PercentileStats,
    TokenDensityMap,
    calculate_percentiles,
    categorize_tokens,
    formatting_chars,
    percentile,
    render_category_bar,
    render_token_density_map,
)


def make_insights(token_counts: list[int]) -> list[LineInsight]:
    """Helper to create LineInsights with the given token counts."""
    return [
        LineInsight(
            line_number=i + 1,
            content='x',
            tokens=count,
            chars=1,
            token_char_ratio=float(count),
            is_empty=False,
            is_whitespace_only=False,
            has_unicode=False,
        )
        for i, count in enumerate(token_counts)
    ]


class TestPercentile:
    """Tests for percentile()."""

    def test_interpolation(self):
        assert percentile([1, 2, 3, 4], 0.5) == 2.5
        assert percentile([0, 10], 0.25) == 2.5

    def test_exact_index(self):
        assert percentile([1, 2, 3], 0.5) == 2.0

    def test_bounds(self):
        values = [3, 5, 9]
        assert percentile(values, 0) == 3.0
        assert percentile(values, -1) == 3.0
        assert percentile(values, 1) == 9.0
        assert percentile(values, 2) == 9.0

    def test_empty(self):
        assert percentile([], 0.5) == 0.0


class TestCalculatePercentiles:
    """Tests for calculate_percentiles()."""

    def test_monotonic(self):
        stats = calculate_percentiles(make_insights([7, 1, 0, 12, 3, 3, 25, 8, 1, 4, 6]))
        ordered = [stats.min, stats.p25, stats.median, stats.p75, stats.p90, stats.p95, stats.max]
        assert ordered == sorted(ordered)
        assert stats.min == 0
        assert stats.max == 25

    def test_top10_share(self):
        stats = calculate_percentiles(make_insights(list(range(1, 11))))
        assert stats.top10_pct == pytest.approx(10 / 55 * 100)

    def test_empty(self):
        assert calculate_percentiles([]) == PercentileStats()

    def test_all_zero(self):
        stats = calculate_percentiles(make_insights([0, 0, 0]))
        assert stats.max == 0
        assert stats.top10_pct == 0.0

    def test_format(self):
        text = PercentileStats(min=1, median=2.5, max=9).format_percentiles()
        assert text.startswith('Min: 1 |')
        assert '50%: 2.5' in text
        assert text.endswith('Max: 9')


class TestDensityMap:
    """Tests for render_token_density_map()."""

    def test_blocks_of_fifty(self):
        density = render_token_density_map(make_insights([1] * 120), total_tokens=120)
        assert [(b.start_line, b.end_line) for b in density.blocks] == [(1, 50), (51, 100), (101, 120)]
        assert [b.tokens for b in density.blocks] == [50, 50, 20]
        assert density.blocks[0].percentage == pytest.approx(50 / 120 * 100)

    def test_hot_blocks(self):
        density = render_token_density_map(make_insights([10, 8, 7]), total_tokens=25, block_size=1)
        assert [b.is_hot for b in density.blocks] == [True, True, False]

    def test_no_hot_blocks_without_tokens(self):
        density = render_token_density_map(make_insights([0, 0]), total_tokens=0, block_size=1)
        assert not any(b.is_hot for b in density.blocks)
        assert all(b.percentage == 0.0 for b in density.blocks)

    def test_block_size_from_environment(self, monkeypatch):
        monkeypatch.setenv('TOKENSCOPE_HEATMAP_BLOCK_SIZE', '10')
        density = render_token_density_map(make_insights([1] * 25), total_tokens=25)
        assert len(density.blocks) == 3

    def test_invalid_block_size_falls_back(self, monkeypatch):
        monkeypatch.setenv('TOKENSCOPE_HEATMAP_BLOCK_SIZE', '0')
        density = render_token_density_map(make_insights([1] * 60), total_tokens=60)
        assert len(density.blocks) == 2

    def test_empty(self):
        assert render_token_density_map([], total_tokens=0).blocks == []

    def test_format_heatmap(self):
        density = render_token_density_map(make_insights([4, 2]), total_tokens=6, block_size=1)
        rows = density.format_heatmap(width=10).splitlines()
        assert len(rows) == 2
        assert '█' * 10 in rows[0]
        assert '🔥' in rows[0]
        assert '█' * 5 + '░' * 5 in rows[1]

    def test_format_empty_heatmap(self):
        assert TokenDensityMap().format_heatmap() == 'No data'


class TestCategorizeTokens:
    """Tests for categorize_tokens()."""

    def test_markdown_document(self, make_context):
        ctx = make_context('# Title\n\n```\ncode here now\n```\nPlain prose words here')
        breakdown = categorize_tokens(ctx.lines, ctx.tokens, ctx.line_insights)
        assert breakdown.prose == 6
        assert breakdown.code_blocks == 3
        assert breakdown.formatting == 2
        assert breakdown.whitespace == 0
        assert breakdown.urls == 0

    def test_total_matches_token_count(self, make_context):
        content = (
            'Visit https://example.com/some/long/path today\n'
            '**bold** and _italic_ and `code` and [link](http://x.io)\n'
            '- list item\n'
            '```\nfenced\n```\n'
            '   '
        )
        ctx = make_context(content)
        breakdown = categorize_tokens(ctx.lines, ctx.tokens, ctx.line_insights)
        assert breakdown.total == len(ctx.tokens)
        assert breakdown.urls > 0

    def test_stats_percentages(self):
        stats = CategoryBreakdown(prose=50, code_blocks=25, urls=25).get_stats()
        assert stats.prose == 50.0
        assert stats.code_blocks == 25.0
        assert stats.urls == 25.0
        assert stats.formatting == 0.0

    def test_stats_empty(self):
        stats = CategoryBreakdown().get_stats()
        assert stats.prose == 0.0

    def test_formatting_chars(self):
        assert formatting_chars('## Header') == 3
        assert formatting_chars('an *italic* word') == 2
        assert formatting_chars('see [docs](https://example.com)') == 4
        assert formatting_chars('- item') == 2
        assert formatting_chars('plain') == 0


class TestCategoryBar:
    """Tests for render_category_bar()."""

    def test_widths(self):
        assert render_category_bar(50) == '█' * 12
        assert render_category_bar(0) == ''
        assert render_category_bar(150) == '█' * 24
        assert render_category_bar(100, max_width=10) == '█' * 10

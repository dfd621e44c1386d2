"""Analysis entry point."""

import logging
import time
from dataclasses import dataclass, field

from tokenscope import prometheus as prom
from tokenscope.analyze.aggregate import (
    AdvancedPatterns,
    LLMSafetyAnalysis,
    Patterns,
    aggregate_issues,
    detect_patterns,
)
from tokenscope.analyze.context import DetectionContext, LineInsight
from tokenscope.analyze.detectors import PatternDetector, default_detectors
from tokenscope.analyze.recommendations import Recommendation, generate_recommendations
from tokenscope.analyze.registry import DetectorRegistry
from tokenscope.analyze.scoring import calculate_efficiency_score, calculate_reliability_score
from tokenscope.analyze.statistics import (
    CategoryBreakdown,
    PercentileStats,
    TokenDensityMap,
    calculate_percentiles,
    categorize_tokens,
    render_token_density_map,
)
from tokenscope.tokens import TokenExtractionError, TokenSource


logger = logging.getLogger(__name__)


@dataclass
class Analysis:
    """Complete analysis of one file.

    Created by analyze_file() and not updated afterwards.
    """

    total_tokens: int
    total_lines: int
    total_chars: int
    avg_tokens_per_line: float
    efficiency_score: int
    line_insights: list[LineInsight]
    patterns: Patterns
    advanced_patterns: AdvancedPatterns
    category_breakdown: CategoryBreakdown
    percentiles: PercentileStats
    density_map: TokenDensityMap
    llm_safety_analysis: LLMSafetyAnalysis
    recommendations: list[Recommendation] = field(default_factory=list)
    quick_wins: list[Recommendation] = field(default_factory=list)
    potential_savings: int = 0
    waste_tokens: int = 0

    @property
    def total_issues(self) -> int:
        """Issues across all safety and pattern buckets."""
        advanced = self.advanced_patterns
        return (
            self.llm_safety_analysis.total_issues
            + len(advanced.urls)
            + len(advanced.consecutive_empty)
            + len(advanced.long_lines)
            + len(self.patterns.repeated_phrases)
        )

    def get_top_expensive_lines(self, n: int) -> list[LineInsight]:
        """Return up to n lines with the most tokens; ties keep file order."""
        if n <= 0:
            return []
        return sorted(self.line_insights, key=lambda insight: insight.tokens, reverse=True)[:n]


def analyze_file(
    content: str,
    total_tokens: int,
    token_source: TokenSource,
    detectors: list[PatternDetector] | None = None,
) -> Analysis:
    """Analyze content for token waste and LLM reliability hazards.

    Args:
        content: Full file text.
        total_tokens: Authoritative token count for the file.
        token_source: Collaborator that tokenizes content.
        detectors: Detectors to run, in order. Defaults to default_detectors().

    Returns:
        The analysis.

    Raises:
        TokenExtractionError: If the token source fails.
    """
    start_time = time.time()
    try:
        analysis = _analyze(content, total_tokens, token_source, detectors)
    except Exception:
        prom.record_analysis_error(time.time() - start_time)
        raise

    prom.record_analysis(analysis, time.time() - start_time)
    return analysis


def _analyze(
    content: str,
    total_tokens: int,
    token_source: TokenSource,
    detectors: list[PatternDetector] | None,
) -> Analysis:
    try:
        tokens = token_source.extract_tokens(content)
    except Exception as e:
        logger.error(f'[ANALYZE] Token extraction failed: {e}')
        raise TokenExtractionError(f'failed to extract tokens: {e}') from e

    ctx = DetectionContext.build(content, tokens, total_tokens)
    total_chars = len(content)
    avg_ratio = len(tokens) / total_chars if total_chars > 0 else 0.0
    logger.debug(f'[ANALYZE] {len(ctx.lines)} lines, {total_chars} chars, {len(tokens)} tokens')

    registry = DetectorRegistry(detectors if detectors is not None else default_detectors())
    registry.run_all(ctx)

    aggregated = aggregate_issues(registry)
    safety = aggregated.safety
    safety.reliability_score = calculate_reliability_score(safety)
    patterns = detect_patterns(ctx.line_insights, avg_ratio, aggregated.repeated_phrases)

    recommendations = generate_recommendations(patterns, aggregated.advanced, safety, total_tokens)
    quick_wins = [rec for rec in recommendations if rec.is_quick_win]

    # Whitespace-only lines are also empty, so their tokens count twice
    waste_tokens = patterns.empty_line_tokens + patterns.whitespace_tokens

    analysis = Analysis(
        total_tokens=total_tokens,
        total_lines=len(ctx.lines),
        total_chars=total_chars,
        avg_tokens_per_line=total_tokens / len(ctx.lines),
        efficiency_score=calculate_efficiency_score(total_tokens, total_chars, waste_tokens, avg_ratio),
        line_insights=list(ctx.line_insights),
        patterns=patterns,
        advanced_patterns=aggregated.advanced,
        category_breakdown=categorize_tokens(ctx.lines, ctx.tokens, ctx.line_insights),
        percentiles=calculate_percentiles(ctx.line_insights),
        density_map=render_token_density_map(ctx.line_insights, total_tokens),
        llm_safety_analysis=safety,
        recommendations=recommendations,
        quick_wins=quick_wins,
        potential_savings=sum(rec.estimated_save for rec in recommendations),
        waste_tokens=waste_tokens,
    )
    logger.info(
        f'[ANALYZE] Done: {analysis.total_issues} issues, reliability {safety.reliability_score}, '
        f'efficiency {analysis.efficiency_score}'
    )
    return analysis

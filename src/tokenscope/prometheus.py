"""Prometheus metrics for tokenscope"""

from typing import TYPE_CHECKING

from prometheus_client import Counter, Gauge, Histogram


if TYPE_CHECKING:
    from tokenscope.analyze.engine import Analysis


# ============================================================================
# Request Metrics
# ============================================================================

# Total number of analyze_file calls
analyze_requests_total = Counter(
    'tokenscope_analyze_requests_total',
    'Total number of file analysis requests',
    ['status'],  # success, error
)


# ============================================================================
# Performance Metrics
# ============================================================================

analyze_duration_seconds = Histogram(
    'tokenscope_analyze_duration_seconds',
    'Time spent analyzing a single file',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
    # 1ms to 10s - single in-memory files, dominated by detector scans
)


# ============================================================================
# Content Metrics
# ============================================================================

tokens_analyzed_total = Counter('tokenscope_tokens_analyzed_total', 'Total number of tokens analyzed')

lines_analyzed_total = Counter('tokenscope_lines_analyzed_total', 'Total number of lines analyzed')

issues_found_total = Counter(
    'tokenscope_issues_found_total',
    'Total number of issues found',
    ['bucket'],  # emoji, invisible_char, ..., url, consecutive_empty, long_line, repeated_phrase
)

recommendations_total = Counter(
    'tokenscope_recommendations_total',
    'Total number of recommendations produced',
    ['quick_win'],  # true, false
)


# ============================================================================
# Score Metrics
# ============================================================================

reliability_score = Gauge('tokenscope_reliability_score', 'Reliability score of the most recent analysis')

efficiency_score = Gauge('tokenscope_efficiency_score', 'Efficiency score of the most recent analysis')

reliability_score_distribution = Histogram(
    'tokenscope_reliability_score_distribution',
    'Distribution of reliability scores',
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 99, 100],
)


# ============================================================================
# Helper Functions
# ============================================================================


def record_analysis(analysis: 'Analysis', duration: float):
    """Record metrics for a successful analysis"""
    analyze_requests_total.labels(status='success').inc()
    analyze_duration_seconds.observe(duration)
    tokens_analyzed_total.inc(analysis.total_tokens)
    lines_analyzed_total.inc(analysis.total_lines)

    safety = analysis.llm_safety_analysis
    for bucket, issues in safety.buckets().items():
        if issues:
            issues_found_total.labels(bucket=bucket).inc(len(issues))

    advanced = analysis.advanced_patterns
    for bucket, count in (
        ('url', len(advanced.urls)),
        ('consecutive_empty', len(advanced.consecutive_empty)),
        ('long_line', len(advanced.long_lines)),
        ('repeated_phrase', len(analysis.patterns.repeated_phrases)),
    ):
        if count:
            issues_found_total.labels(bucket=bucket).inc(count)

    quick_wins = len(analysis.quick_wins)
    if quick_wins:
        recommendations_total.labels(quick_win='true').inc(quick_wins)
    if len(analysis.recommendations) > quick_wins:
        recommendations_total.labels(quick_win='false').inc(len(analysis.recommendations) - quick_wins)

    reliability_score.set(safety.reliability_score)
    reliability_score_distribution.observe(safety.reliability_score)
    efficiency_score.set(analysis.efficiency_score)


def record_analysis_error(duration: float):
    """Record metrics for a failed analysis"""
    analyze_requests_total.labels(status='error').inc()
    analyze_duration_seconds.observe(duration)

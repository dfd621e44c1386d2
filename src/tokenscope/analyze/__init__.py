"""Token efficiency and LLM reliability analysis.

This module provides:
- Pattern detectors and the registry that runs them
- Aggregation of detector findings into typed buckets
- Per-line statistics, density heatmap and category breakdown
- Recommendations and reliability/efficiency scores
"""

from .aggregate import (
    AdvancedPatterns,
    AggregatedIssues,
    LLMSafetyAnalysis,
    Patterns,
    aggregate_issues,
    detect_patterns,
)
from .context import DetectionContext, LineInsight, map_tokens_to_lines
from .detectors import PatternDetector, default_detectors
from .engine import Analysis, analyze_file
from .recommendations import Recommendation, generate_recommendations
from .registry import DetectorRegistry
from .scoring import calculate_efficiency_score, calculate_reliability_score
from .statistics import (
    CategoryBreakdown,
    CategoryStats,
    DensityBlock,
    PercentileStats,
    TokenDensityMap,
    calculate_percentiles,
    categorize_tokens,
    render_token_density_map,
)


__all__ = [
    # Entry point
    'Analysis',
    'analyze_file',
    # Detection
    'DetectionContext',
    'LineInsight',
    'map_tokens_to_lines',
    'PatternDetector',
    'DetectorRegistry',
    'default_detectors',
    # Aggregation
    'AdvancedPatterns',
    'AggregatedIssues',
    'LLMSafetyAnalysis',
    'Patterns',
    'aggregate_issues',
    'detect_patterns',
    # Statistics
    'CategoryBreakdown',
    'CategoryStats',
    'DensityBlock',
    'PercentileStats',
    'TokenDensityMap',
    'calculate_percentiles',
    'categorize_tokens',
    'render_token_density_map',
    # Recommendations and scores
    'Recommendation',
    'generate_recommendations',
    'calculate_efficiency_score',
    'calculate_reliability_score',
]

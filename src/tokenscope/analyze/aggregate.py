"""Reduce detector output into typed issue collections."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import assert_never

from tokenscope.analyze.context import LineInsight
from tokenscope.analyze.issues import (
    AmbiguityIssue,
    BiDiControlIssue,
    ConfusableIssue,
    ConsecutiveEmptyLines,
    ContextPlacementIssue,
    EmojiIssue,
    EncodingIssue,
    GlitchTokenIssue,
    InvisibleCharIssue,
    Issue,
    LongLine,
    NormalizationIssue,
    NumberFormatIssue,
    OOVStringIssue,
    RepeatedPhrase,
    URLIssue,
)
from tokenscope.analyze.registry import DetectorRegistry


@dataclass
class LLMSafetyAnalysis:
    """Issues that affect how reliably a model reads the content."""

    emoji_issues: list[EmojiIssue] = field(default_factory=list)
    invisible_char_issues: list[InvisibleCharIssue] = field(default_factory=list)
    number_format_issues: list[NumberFormatIssue] = field(default_factory=list)
    oov_string_issues: list[OOVStringIssue] = field(default_factory=list)
    bidi_control_issues: list[BiDiControlIssue] = field(default_factory=list)
    confusable_issues: list[ConfusableIssue] = field(default_factory=list)
    encoding_issues: list[EncodingIssue] = field(default_factory=list)
    normalization_issues: list[NormalizationIssue] = field(default_factory=list)
    glitch_token_issues: list[GlitchTokenIssue] = field(default_factory=list)
    context_issues: list[ContextPlacementIssue] = field(default_factory=list)
    ambiguity_issues: list[AmbiguityIssue] = field(default_factory=list)
    total_issues: int = 0
    reliability_score: int = 100

    def buckets(self) -> dict[str, list]:
        """Issue lists keyed by bucket name, in detector order."""
        return {
            'emoji': self.emoji_issues,
            'invisible_char': self.invisible_char_issues,
            'number_format': self.number_format_issues,
            'oov_string': self.oov_string_issues,
            'bidi_control': self.bidi_control_issues,
            'confusable': self.confusable_issues,
            'encoding': self.encoding_issues,
            'normalization': self.normalization_issues,
            'glitch_token': self.glitch_token_issues,
            'context_placement': self.context_issues,
            'ambiguity': self.ambiguity_issues,
        }

    def count_issues(self) -> int:
        return sum(len(bucket) for bucket in self.buckets().values())


@dataclass
class AdvancedPatterns:
    urls: list[URLIssue] = field(default_factory=list)
    consecutive_empty: list[ConsecutiveEmptyLines] = field(default_factory=list)
    long_lines: list[LongLine] = field(default_factory=list)


@dataclass
class AggregatedIssues:
    safety: LLMSafetyAnalysis
    advanced: AdvancedPatterns
    repeated_phrases: list[RepeatedPhrase]

    @property
    def total_issues(self) -> int:
        """Issues across all fifteen buckets."""
        return (
            self.safety.count_issues()
            + len(self.advanced.urls)
            + len(self.advanced.consecutive_empty)
            + len(self.advanced.long_lines)
            + len(self.repeated_phrases)
        )


def aggregate_issues(registry: DetectorRegistry) -> AggregatedIssues:
    """Sort every detector's issues into typed buckets.

    Args:
        registry: Registry whose detectors have already run.

    Returns:
        Typed collections; safety.total_issues is filled in.
    """
    result = AggregatedIssues(safety=LLMSafetyAnalysis(), advanced=AdvancedPatterns(), repeated_phrases=[])
    for detector in registry.detectors:
        for issue in detector.issues:
            _dispatch(result, issue)
    result.safety.total_issues = result.safety.count_issues()
    return result


def _dispatch(result: AggregatedIssues, issue: Issue) -> None:
    safety = result.safety
    advanced = result.advanced
    match issue:
        case EmojiIssue():
            safety.emoji_issues.append(issue)
        case InvisibleCharIssue():
            safety.invisible_char_issues.append(issue)
        case NumberFormatIssue():
            safety.number_format_issues.append(issue)
        case OOVStringIssue():
            safety.oov_string_issues.append(issue)
        case BiDiControlIssue():
            safety.bidi_control_issues.append(issue)
        case ConfusableIssue():
            safety.confusable_issues.append(issue)
        case EncodingIssue():
            safety.encoding_issues.append(issue)
        case NormalizationIssue():
            safety.normalization_issues.append(issue)
        case GlitchTokenIssue():
            safety.glitch_token_issues.append(issue)
        case ContextPlacementIssue():
            safety.context_issues.append(issue)
        case AmbiguityIssue():
            safety.ambiguity_issues.append(issue)
        case URLIssue():
            advanced.urls.append(issue)
        case ConsecutiveEmptyLines():
            advanced.consecutive_empty.append(issue)
        case LongLine():
            advanced.long_lines.append(issue)
        case RepeatedPhrase():
            result.repeated_phrases.append(issue)
        case _:
            assert_never(issue)


HIGH_RATIO_MULTIPLIER = 1.5
HIGH_RATIO_MIN_TOKENS = 5


@dataclass
class Patterns:
    """Line-level inefficiency patterns derived from line insights."""

    empty_lines: int = 0
    empty_line_tokens: int = 0
    whitespace_only_lines: int = 0
    whitespace_tokens: int = 0
    high_ratio_lines: list[LineInsight] = field(default_factory=list)
    unicode_lines: list[LineInsight] = field(default_factory=list)
    repeated_phrases: list[RepeatedPhrase] = field(default_factory=list)


def detect_patterns(
    insights: Sequence[LineInsight], avg_ratio: float, repeated_phrases: list[RepeatedPhrase] | None = None
) -> Patterns:
    """Summarize blank, token-dense and non-ASCII lines.

    Args:
        insights: Per-line insights.
        avg_ratio: File-wide tokens per character.
        repeated_phrases: Output of the repeated phrase detector.

    Returns:
        Patterns for the file. Whitespace-only lines are a subset of empty lines.
    """
    patterns = Patterns(repeated_phrases=list(repeated_phrases or []))
    for insight in insights:
        if insight.is_empty:
            patterns.empty_lines += 1
            patterns.empty_line_tokens += insight.tokens
        if insight.is_whitespace_only:
            patterns.whitespace_only_lines += 1
            patterns.whitespace_tokens += insight.tokens
        if (
            avg_ratio > 0
            and insight.token_char_ratio > avg_ratio * HIGH_RATIO_MULTIPLIER
            and insight.tokens > HIGH_RATIO_MIN_TOKENS
        ):
            patterns.high_ratio_lines.append(insight)
        if insight.has_unicode and insight.tokens > 0:
            patterns.unicode_lines.append(insight)
    return patterns

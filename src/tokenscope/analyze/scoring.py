"""Reliability and efficiency scores."""

from types import MappingProxyType

from tokenscope.analyze.aggregate import LLMSafetyAnalysis


IDEAL_TOKEN_CHAR_RATIO = 0.25
LONG_CONTEXT_TOKENS = 8000

ENCODING_DEDUCTIONS = MappingProxyType({'base64': 10, 'hex': 10, 'leetspeak': 10, 'rot13': 10, 'ascii_art': 12})
AMBIGUITY_DEDUCTIONS = MappingProxyType({'high': 8, 'medium': 6, 'low': 3})
OOV_DEDUCTIONS = MappingProxyType({'hash': 3, 'uuid': 3, 'url': 2})


def reliability_deductions(safety: LLMSafetyAnalysis) -> int:
    """Total points deducted for the safety issues found."""
    points = 3 * len(safety.emoji_issues)
    points += sum(10 if issue.is_evasion else 5 for issue in safety.invisible_char_issues)
    points += sum(15 if issue.is_trojan_source else 5 for issue in safety.bidi_control_issues)
    points += 8 * len(safety.confusable_issues)
    points += sum(ENCODING_DEDUCTIONS.get(issue.encoding_type, 8) for issue in safety.encoding_issues)
    points += 3 * len(safety.normalization_issues)
    points += 12 * len(safety.glitch_token_issues)
    points += sum(5 for issue in safety.context_issues if issue.total_tokens > LONG_CONTEXT_TOKENS)
    points += sum(AMBIGUITY_DEDUCTIONS.get(issue.severity, 0) for issue in safety.ambiguity_issues)
    points += 2 * len(safety.number_format_issues)
    points += sum(OOV_DEDUCTIONS.get(issue.string_type, 1) for issue in safety.oov_string_issues)
    return points


def calculate_reliability_score(safety: LLMSafetyAnalysis) -> int:
    """Score from 0 to 100; exactly 100 only when no safety issue was found.

    Args:
        safety: Aggregated safety issues.

    Returns:
        100 minus weighted deductions, clamped to [0, 100]. Any non-empty
        issue set scores at most 99, even when its deductions sum to zero.
    """
    if safety.count_issues() == 0:
        return 100
    score = 100 - reliability_deductions(safety)
    return max(0, min(99, score))


def calculate_efficiency_score(total_tokens: int, total_chars: int, waste_tokens: int, avg_ratio: float) -> int:
    """Score from 0 to 100 combining token density and wasted tokens.

    Args:
        total_tokens: Tokens in the file.
        total_chars: Characters in the file.
        waste_tokens: Empty-line tokens plus whitespace-only-line tokens.
        avg_ratio: Tokens per character.

    Returns:
        0.6 * ratio score + 0.4 * waste score, clamped and truncated.
    """
    if total_tokens == 0 or total_chars == 0:
        return 0

    ratio_score = 100.0
    if avg_ratio > IDEAL_TOKEN_CHAR_RATIO:
        ratio_score = 100.0 * IDEAL_TOKEN_CHAR_RATIO / avg_ratio

    waste_pct = waste_tokens / total_tokens * 100
    waste_score = 100.0 - waste_pct * 2

    score = ratio_score * 0.6 + waste_score * 0.4
    return int(max(0.0, min(100.0, score)))

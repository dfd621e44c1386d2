"""Turn detected issues into prioritized, token-quantified recommendations.

Safety recommendations come from one generator class per issue type.
Stylistic recommendations come from plain functions over the pattern
collections. Everything is merged and sorted by generate_recommendations().
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from tokenscope.analyze.aggregate import AdvancedPatterns, LLMSafetyAnalysis, Patterns
from tokenscope.utils import format_number, truncate


KEEP_EMPTY_LINES = 1
MIN_URL_OCCURRENCES = 2
MIN_URL_LENGTH = 40
MIN_UNICODE_LINES = 5
UNICODE_SAVINGS = 0.3
MIN_LONG_LINES = 10
LONG_LINE_SAVINGS = 0.15
MIN_PHRASE_COUNT = 5


@dataclass(frozen=True)
class Recommendation:
    title: str
    description: str
    affected_lines: tuple[int, ...]
    estimated_save: int
    save_percentage: float
    priority: int  # 1 = high, 3 = low
    difficulty: str  # easy, medium, hard
    before_example: str
    after_example: str
    is_quick_win: bool


def save_percentage(save: int, total_tokens: int) -> float:
    if total_tokens <= 0:
        return 0.0
    return save / total_tokens * 100


def affected_lines(issues: Iterable) -> tuple[int, ...]:
    """Sorted, de-duplicated line numbers of issues."""
    return tuple(sorted({issue.line_number for issue in issues}))


def sort_key(rec: Recommendation) -> tuple[bool, int, int]:
    """Quick wins first, then priority ascending, then savings descending."""
    return (not rec.is_quick_win, rec.priority, -rec.estimated_save)


# ============================================================================
# Safety issue generators
# ============================================================================


class IssueRecommendationGenerator(Protocol):
    def generate(self, safety: LLMSafetyAnalysis, total_tokens: int) -> list[Recommendation]: ...


class EmojiRecommendationGenerator:
    def generate(self, safety: LLMSafetyAnalysis, total_tokens: int) -> list[Recommendation]:
        issues = safety.emoji_issues
        if not issues:
            return []
        save = sum(issue.token_cost for issue in issues)
        return [
            Recommendation(
                title='Remove emojis for LLM safety',
                description=(
                    'Emojis, especially ZWJ sequences, reduce judge reliability and split '
                    'unpredictably across tokenizers (arXiv:2411.01077)'
                ),
                affected_lines=affected_lines(issues),
                estimated_save=save,
                save_percentage=save_percentage(save, total_tokens),
                priority=1,
                difficulty='easy',
                before_example='Deploy now 🚀✅💯',
                after_example='Deploy now',
                is_quick_win=len(issues) <= 5,
            )
        ]


class InvisibleCharRecommendationGenerator:
    def generate(self, safety: LLMSafetyAnalysis, total_tokens: int) -> list[Recommendation]:
        issues = safety.invisible_char_issues
        if not issues:
            return []
        description = 'Zero-width characters enable prompt injection and confuse model reasoning'
        evasion_count = sum(1 for issue in issues if issue.is_evasion)
        if evasion_count:
            description += f' CRITICAL: {evasion_count} potential evasion patterns detected'
        save = len(issues) * 2
        return [
            Recommendation(
                title='Remove invisible Unicode characters',
                description=description,
                affected_lines=affected_lines(issues),
                estimated_save=save,
                save_percentage=save_percentage(save, total_tokens),
                priority=1,
                difficulty='easy',
                before_example='Text with\u200bhidden\u200bzero-widths',
                after_example='Text with hidden zero widths',
                is_quick_win=True,
            )
        ]


class NumberFormatRecommendationGenerator:
    def generate(self, safety: LLMSafetyAnalysis, total_tokens: int) -> list[Recommendation]:
        issues = safety.number_format_issues
        if not issues:
            return []
        save = sum(issue.save_estimate for issue in issues)
        return [
            Recommendation(
                title='Format large numbers with commas',
                description='Comma-grouped digits (e.g., 1,234,567) improve LLM arithmetic accuracy',
                affected_lines=affected_lines(issues),
                estimated_save=save,
                save_percentage=save_percentage(save, total_tokens),
                priority=2,
                difficulty='easy',
                before_example='1234567890 users',
                after_example='1,234,567,890 users',
                is_quick_win=True,
            )
        ]


class OOVRecommendationGenerator:
    def generate(self, safety: LLMSafetyAnalysis, total_tokens: int) -> list[Recommendation]:
        issues = safety.oov_string_issues
        if not issues:
            return []
        save = sum(issue.token_count for issue in issues) // 2
        return [
            Recommendation(
                title='Replace OOV strings with semantic placeholders',
                description=(
                    'Long URLs, hashes, and IDs split into many subword tokens, harming embeddings '
                    'and accuracy (arXiv:2406.08477)'
                ),
                affected_lines=affected_lines(issues),
                estimated_save=save,
                save_percentage=save_percentage(save, total_tokens),
                priority=2,
                difficulty='medium',
                before_example='https://github.com/.../releases/.../app.tar.gz OR 2f4a45fa34d6a6ff...',
                after_example='<RELEASE_URL> OR <HASH> OR <UUID>',
                is_quick_win=False,
            )
        ]


class BiDiControlRecommendationGenerator:
    def generate(self, safety: LLMSafetyAnalysis, total_tokens: int) -> list[Recommendation]:
        issues = safety.bidi_control_issues
        if not issues:
            return []
        description = 'Bidirectional text controls enable Trojan Source attacks (CVE-2021-42574)'
        trojan_count = sum(1 for issue in issues if issue.is_trojan_source)
        if trojan_count:
            description += f' CRITICAL: {trojan_count} Trojan Source patterns detected'
        save = len(issues) * 2
        return [
            Recommendation(
                title='Remove BiDi control characters',
                description=description,
                affected_lines=affected_lines(issues),
                estimated_save=save,
                save_percentage=save_percentage(save, total_tokens),
                priority=1,
                difficulty='easy',
                before_example='Code with hidden BiDi controls',
                after_example='Code without BiDi controls',
                is_quick_win=True,
            )
        ]


class ConfusableRecommendationGenerator:
    def generate(self, safety: LLMSafetyAnalysis, total_tokens: int) -> list[Recommendation]:
        issues = safety.confusable_issues
        if not issues:
            return []
        description = 'Homoglyphs and mixed-script identifiers enable spoofing attacks (UTS #39)'
        mixed_count = sum(1 for issue in issues if issue.is_mixed_script)
        if mixed_count:
            description += f'. {mixed_count} mixed-script identifiers detected'
        save = len(issues)
        return [
            Recommendation(
                title='Replace confusable characters with ASCII equivalents',
                description=description,
                affected_lines=affected_lines(issues),
                estimated_save=save,
                save_percentage=save_percentage(save, total_tokens),
                priority=1,
                difficulty='easy',
                before_example="Cyrillic 'а' (U+0430) in identifier",
                after_example="Latin 'a' (U+0061) in identifier",
                is_quick_win=True,
            )
        ]


class EncodingRecommendationGenerator:
    def generate(self, safety: LLMSafetyAnalysis, total_tokens: int) -> list[Recommendation]:
        issues = safety.encoding_issues
        if not issues:
            return []
        description = 'Encoded text bypasses moderation and confuses models'
        base64_count = sum(1 for issue in issues if issue.encoding_type == 'base64')
        hex_count = sum(1 for issue in issues if issue.encoding_type == 'hex')
        if base64_count or hex_count:
            description += f'. Found {base64_count} Base64 and {hex_count} hex patterns'
        save = sum(issue.token_cost for issue in issues)
        return [
            Recommendation(
                title='Decode or remove encoded/obfuscated text',
                description=description,
                affected_lines=affected_lines(issues),
                estimated_save=save,
                save_percentage=save_percentage(save, total_tokens),
                priority=1,
                difficulty='easy',
                before_example='SGVsbG8gV29ybGQh (Base64) or 0x48656c6c6f (hex)',
                after_example='Hello World (decoded plaintext)',
                is_quick_win=True,
            )
        ]


class NormalizationRecommendationGenerator:
    def generate(self, safety: LLMSafetyAnalysis, total_tokens: int) -> list[Recommendation]:
        issues = safety.normalization_issues
        if not issues:
            return []
        save = len(issues) * 2
        return [
            Recommendation(
                title='Normalize Unicode to NFC form',
                description='Non-normalized text causes tokenization inconsistencies (UAX #15)',
                affected_lines=affected_lines(issues),
                estimated_save=save,
                save_percentage=save_percentage(save, total_tokens),
                priority=2,
                difficulty='easy',
                before_example='e + combining acute (U+0065 U+0301)',
                after_example='é (single char U+00E9)',
                is_quick_win=False,
            )
        ]


class GlitchTokenRecommendationGenerator:
    def generate(self, safety: LLMSafetyAnalysis, total_tokens: int) -> list[Recommendation]:
        issues = safety.glitch_token_issues
        if not issues:
            return []
        save = len(issues) * 10
        return [
            Recommendation(
                title='Remove or replace glitch tokens',
                description='Known glitch tokens cause unstable model behavior (arXiv:2404.09894)',
                affected_lines=affected_lines(issues),
                estimated_save=save,
                save_percentage=save_percentage(save, total_tokens),
                priority=1,
                difficulty='medium',
                before_example=' SolidGoldMagikarp',
                after_example='Solid Gold Magikarp',
                is_quick_win=False,
            )
        ]


class ContextPlacementRecommendationGenerator:
    def generate(self, safety: LLMSafetyAnalysis, total_tokens: int) -> list[Recommendation]:
        # Accuracy improvement only, so no token savings
        return [
            Recommendation(
                title='Move important content to start/end (Lost-in-the-Middle)',
                description='Key facts in middle sections receive less attention (arXiv:2307.03172)',
                affected_lines=(),
                estimated_save=0,
                save_percentage=0.0,
                priority=2,
                difficulty='medium',
                before_example='Instructions buried in middle of long context',
                after_example='TL;DR at top, recap at bottom',
                is_quick_win=False,
            )
            for issue in safety.context_issues
            if issue.important_in_middle
        ]


class AmbiguityRecommendationGenerator:
    def generate(self, safety: LLMSafetyAnalysis, total_tokens: int) -> list[Recommendation]:
        issues = safety.ambiguity_issues
        if not issues:
            return []
        description = 'Ambiguous or sycophantic prompts reduce truthfulness'
        high_count = sum(1 for issue in issues if issue.severity == 'high')
        if high_count:
            description += f'. {high_count} high-severity patterns detected'
        return [
            Recommendation(
                title='Clarify prompts and remove sycophantic framing',
                description=description,
                affected_lines=affected_lines(issues),
                estimated_save=0,
                save_percentage=0.0,
                priority=2,
                difficulty='medium',
                before_example='You are a helpful assistant who always agrees with the user',
                after_example='You are a truthful assistant. Cite evidence before answering.',
                is_quick_win=False,
            )
        ]


def default_generators() -> list[IssueRecommendationGenerator]:
    """One generator per safety issue type, in detector order."""
    return [
        EmojiRecommendationGenerator(),
        InvisibleCharRecommendationGenerator(),
        NumberFormatRecommendationGenerator(),
        OOVRecommendationGenerator(),
        BiDiControlRecommendationGenerator(),
        ConfusableRecommendationGenerator(),
        EncodingRecommendationGenerator(),
        NormalizationRecommendationGenerator(),
        GlitchTokenRecommendationGenerator(),
        ContextPlacementRecommendationGenerator(),
        AmbiguityRecommendationGenerator(),
    ]


def generate_safety_recommendations(safety: LLMSafetyAnalysis, total_tokens: int) -> list[Recommendation]:
    recommendations = []
    if safety.count_issues() == 0:
        return recommendations
    for generator in default_generators():
        recommendations.extend(generator.generate(safety, total_tokens))
    return recommendations


# ============================================================================
# Pattern generators
# ============================================================================


def consecutive_empty_recommendations(advanced: AdvancedPatterns, total_tokens: int) -> list[Recommendation]:
    runs = advanced.consecutive_empty
    if not runs:
        return []
    save = sum(run.count - KEEP_EMPTY_LINES for run in runs)
    if save <= 0:
        return []
    lines = tuple(line for run in runs for line in range(run.start_line, run.end_line + 1))
    first = runs[0]
    return [
        Recommendation(
            title='Consolidate consecutive empty lines',
            description='Multiple empty lines in a row can be reduced to single empty lines',
            affected_lines=lines,
            estimated_save=save,
            save_percentage=save_percentage(save, total_tokens),
            priority=1,
            difficulty='easy',
            before_example=f'Lines {first.start_line}-{first.end_line}: {format_number(first.count)}+ empty lines',
            after_example='1 empty line per group',
            is_quick_win=True,
        )
    ]


def url_recommendations(advanced: AdvancedPatterns, total_tokens: int) -> list[Recommendation]:
    recommendations = []
    for url in advanced.urls:
        if url.occurrences < MIN_URL_OCCURRENCES or url.length <= MIN_URL_LENGTH:
            continue
        save = url.token_cost * url.occurrences - (url.token_cost + url.occurrences * 2)
        recommendations.append(
            Recommendation(
                title='Use link references for repeated URL',
                description='Long URL appears multiple times. Use markdown reference links [1]',
                affected_lines=tuple(url.line_numbers),
                estimated_save=save,
                save_percentage=save_percentage(save, total_tokens),
                priority=1,
                difficulty='easy',
                before_example=f'{truncate(url.url, 50)} ({format_number(url.occurrences)} times)',
                after_example='[1] reference + definition at bottom',
                is_quick_win=save > 10,
            )
        )
    return recommendations


def unicode_recommendations(patterns: Patterns, total_tokens: int) -> list[Recommendation]:
    lines = patterns.unicode_lines
    if len(lines) <= MIN_UNICODE_LINES:
        return []
    save = int(sum(line.tokens for line in lines) * UNICODE_SAVINGS)
    return [
        Recommendation(
            title='Replace Unicode box-drawing characters',
            description='Box-drawing and other non-ASCII characters often use multiple tokens each',
            affected_lines=tuple(line.line_number for line in lines),
            estimated_save=save,
            save_percentage=save_percentage(save, total_tokens),
            priority=2,
            difficulty='medium',
            before_example='├── file.py (Unicode box-drawing)',
            after_example='  - file.py (plain indentation)',
            is_quick_win=False,
        )
    ]


def long_line_recommendations(advanced: AdvancedPatterns, total_tokens: int) -> list[Recommendation]:
    long_lines = advanced.long_lines
    if len(long_lines) <= MIN_LONG_LINES:
        return []
    save = int(sum(line.tokens for line in long_lines) * LONG_LINE_SAVINGS)
    return [
        Recommendation(
            title='Wrap long lines',
            description='Lines longer than 120 characters can often be wrapped for better readability',
            affected_lines=tuple(line.line_number for line in long_lines),
            estimated_save=save,
            save_percentage=save_percentage(save, total_tokens),
            priority=3,
            difficulty='easy',
            before_example='Single line >120 chars',
            after_example='Wrapped to multiple shorter lines',
            is_quick_win=False,
        )
    ]


def phrase_recommendations(patterns: Patterns, total_tokens: int) -> list[Recommendation]:
    recommendations = []
    for phrase in patterns.repeated_phrases:
        if phrase.count < MIN_PHRASE_COUNT:
            continue
        save = phrase.total_tokens // 2
        recommendations.append(
            Recommendation(
                title='Abbreviate repeated phrase',
                description=f'"{truncate(phrase.phrase, 40)}" appears {format_number(phrase.count)} times',
                affected_lines=tuple(phrase.line_numbers),
                estimated_save=save,
                save_percentage=save_percentage(save, total_tokens),
                priority=2,
                difficulty='medium',
                before_example=f'{phrase.phrase} (full text each time)',
                after_example='Use abbreviation or variable',
                is_quick_win=False,
            )
        )
    return recommendations


def generate_recommendations(
    patterns: Patterns,
    advanced: AdvancedPatterns,
    safety: LLMSafetyAnalysis,
    total_tokens: int,
) -> list[Recommendation]:
    """Build the full, sorted recommendation list.

    Args:
        patterns: Line-level patterns, including repeated phrases.
        advanced: URL, empty-run and long-line findings.
        safety: Aggregated safety issues.
        total_tokens: Denominator for savings percentages.

    Returns:
        Safety recommendations then pattern recommendations, stably sorted
        so quick wins come first, then by priority, then by savings.
    """
    recommendations = generate_safety_recommendations(safety, total_tokens)
    recommendations.extend(consecutive_empty_recommendations(advanced, total_tokens))
    recommendations.extend(url_recommendations(advanced, total_tokens))
    recommendations.extend(unicode_recommendations(patterns, total_tokens))
    recommendations.extend(long_line_recommendations(advanced, total_tokens))
    recommendations.extend(phrase_recommendations(patterns, total_tokens))
    recommendations.sort(key=sort_key)
    return recommendations

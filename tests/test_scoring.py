"""Tests for reliability and efficiency scores."""

import pytest

from tokenscope.analyze.aggregate import LLMSafetyAnalysis
from tokenscope.analyze.issues import (
    AmbiguityIssue,
    BiDiControlIssue,
    ContextPlacementIssue,
    EmojiIssue,
    EncodingIssue,
    GlitchTokenIssue,
    OOVStringIssue,
)
from tokenscope.analyze.scoring import (
    calculate_efficiency_score,
    calculate_reliability_score,
    reliability_deductions,
)


def bidi(trojan: bool) -> BiDiControlIssue:
    return BiDiControlIssue(
        control_type='rlo', line_number=1, position=0, context='', count=1, is_trojan_source=trojan
    )


def context_issue(total_tokens: int) -> ContextPlacementIssue:
    return ContextPlacementIssue(
        total_tokens=total_tokens,
        important_at_start=False,
        important_at_end=False,
        important_in_middle=True,
        recommended_changes='',
    )


class TestReliabilityScore:
    """Tests for calculate_reliability_score()."""

    def test_no_issues(self):
        assert calculate_reliability_score(LLMSafetyAnalysis()) == 100

    def test_emoji_deduction(self):
        issue = EmojiIssue(emoji='🚀', emoji_type='standard', line_number=1, count=1, line_content='', token_cost=1)
        assert calculate_reliability_score(LLMSafetyAnalysis(emoji_issues=[issue])) == 97

    def test_trojan_source_deduction(self):
        assert calculate_reliability_score(LLMSafetyAnalysis(bidi_control_issues=[bidi(True), bidi(True)])) == 70
        assert calculate_reliability_score(LLMSafetyAnalysis(bidi_control_issues=[bidi(False)])) == 95

    def test_encoding_deductions(self):
        def encoding(encoding_type):
            return EncodingIssue(
                encoding_type=encoding_type,
                encoded_text='',
                decoded_text='',
                line_number=1,
                position=0,
                length=0,
                token_cost=0,
            )

        safety = LLMSafetyAnalysis(encoding_issues=[encoding('base64'), encoding('ascii_art'), encoding('other')])
        assert reliability_deductions(safety) == 10 + 12 + 8

    def test_ambiguity_and_oov_deductions(self):
        safety = LLMSafetyAnalysis(
            ambiguity_issues=[
                AmbiguityIssue(pattern='p', line_number=1, description='', example='', severity=severity)
                for severity in ('high', 'medium', 'low')
            ],
            oov_string_issues=[
                OOVStringIssue(
                    string='', string_type=string_type, line_number=1, token_count=1, context='', recommendation=''
                )
                for string_type in ('hash', 'uuid', 'url', 'id')
            ],
        )
        assert reliability_deductions(safety) == (8 + 6 + 3) + (3 + 3 + 2 + 1)

    def test_issue_without_deduction_is_capped(self):
        safety = LLMSafetyAnalysis(context_issues=[context_issue(5000)])
        assert reliability_deductions(safety) == 0
        assert calculate_reliability_score(safety) == 99

    def test_long_context_deduction(self):
        assert calculate_reliability_score(LLMSafetyAnalysis(context_issues=[context_issue(9000)])) == 95

    def test_clamped_at_zero(self):
        glitches = [
            GlitchTokenIssue(token=' SolidGold', line_number=i, position=0, context='', known_issue='')
            for i in range(20)
        ]
        assert calculate_reliability_score(LLMSafetyAnalysis(glitch_token_issues=glitches)) == 0


class TestEfficiencyScore:
    """Tests for calculate_efficiency_score()."""

    def test_empty_input(self):
        assert calculate_efficiency_score(0, 0, 0, 0.0) == 0
        assert calculate_efficiency_score(10, 0, 0, 0.0) == 0
        assert calculate_efficiency_score(0, 10, 0, 0.0) == 0

    def test_ideal_ratio_no_waste(self):
        assert calculate_efficiency_score(100, 400, 0, 0.25) == 100

    def test_dense_tokens(self):
        # ratio score 50, waste score 100
        assert calculate_efficiency_score(100, 200, 0, 0.5) == 70

    def test_waste(self):
        assert calculate_efficiency_score(100, 400, 50, 0.25) == 60
        assert calculate_efficiency_score(100, 400, 100, 0.25) == 20

    @pytest.mark.parametrize(
        'total_tokens,total_chars,waste,ratio',
        [(1, 1, 1, 10.0), (1000, 10, 0, 100.0), (50, 5000, 0, 0.01), (7, 30, 3, 0.23)],
    )
    def test_range(self, total_tokens, total_chars, waste, ratio):
        assert 0 <= calculate_efficiency_score(total_tokens, total_chars, waste, ratio) <= 100

"""Tests for DetectorRegistry and issue aggregation."""

import pytest

from tokenscope.analyze.aggregate import aggregate_issues, detect_patterns
from tokenscope.analyze.detectors import (
    BiDiControlDetector,
    ConsecutiveEmptyDetector,
    EmojiDetector,
    PatternDetector,
    RepeatedPhraseDetector,
    URLDetector,
    default_detectors,
)
from tokenscope.analyze.registry import DetectorRegistry


class RecordingDetector(PatternDetector):
    """Detector that records when it runs and finds nothing."""

    def __init__(self, detector_name: str, calls: list[str]):
        super().__init__()
        self.detector_name = detector_name
        self.calls = calls

    @property
    def name(self) -> str:
        return self.detector_name

    @property
    def priority(self) -> int:
        return 99

    def detect(self, ctx) -> None:
        self.calls.append(self.detector_name)
        self._issues = []


class FailingDetector(RecordingDetector):
    def detect(self, ctx) -> None:
        self.calls.append(self.detector_name)
        raise RuntimeError('detector failed')


class UnknownIssueDetector(RecordingDetector):
    def detect(self, ctx) -> None:
        self._issues = [object()]


class TestDetectorRegistry:
    """Tests for registration and execution order."""

    def test_runs_in_registration_order(self, make_context):
        calls = []
        registry = DetectorRegistry()
        registry.register(RecordingDetector('b', calls), RecordingDetector('a', calls))
        registry.register(RecordingDetector('c', calls))

        registry.run_all(make_context('text'))
        assert calls == ['b', 'a', 'c']
        assert len(registry) == 3
        assert [d.name for d in registry.detectors] == ['b', 'a', 'c']

    def test_registration_order_wins_over_priority(self, make_context):
        registry = DetectorRegistry([URLDetector(), EmojiDetector()])
        assert [d.priority for d in registry.detectors] == [12, 1]

    def test_fail_fast(self, make_context):
        calls = []
        registry = DetectorRegistry(
            [
                RecordingDetector('first', calls),
                FailingDetector('boom', calls),
                RecordingDetector('never', calls),
            ]
        )
        with pytest.raises(RuntimeError, match='detector failed'):
            registry.run_all(make_context('text'))
        assert calls == ['first', 'boom']

    def test_empty_registry(self, make_context):
        registry = DetectorRegistry()
        registry.run_all(make_context('text'))
        assert len(registry) == 0


class TestAggregateIssues:
    """Tests for aggregate_issues()."""

    def test_issues_routed_to_buckets(self, make_context):
        content = (
            'Launch 🚀 and visit https://example.com/docs\n'
            'order1234567 access\u202d level\u202e admin\n'
            '\n'
            '\n'
            'API key\nAPI key\nAPI key'
        )
        registry = DetectorRegistry(default_detectors())
        registry.run_all(make_context(content))
        result = aggregate_issues(registry)

        safety = result.safety
        assert len(safety.emoji_issues) == 1
        assert len(safety.number_format_issues) == 1
        assert len(safety.bidi_control_issues) == 2
        assert len(result.advanced.urls) == 1
        assert len(result.advanced.consecutive_empty) == 1
        assert [p.phrase for p in result.repeated_phrases] == ['API key']
        assert safety.total_issues == safety.count_issues()
        assert result.total_issues == (
            safety.total_issues
            + len(result.advanced.urls)
            + len(result.advanced.consecutive_empty)
            + len(result.advanced.long_lines)
            + len(result.repeated_phrases)
        )

    def test_detector_order_preserved_within_bucket(self, make_context):
        registry = DetectorRegistry([BiDiControlDetector()])
        registry.run_all(make_context('a\u202db\n\u202ec'))
        result = aggregate_issues(registry)
        assert [i.line_number for i in result.safety.bidi_control_issues] == [1, 2]

    def test_unknown_issue_raises(self, make_context):
        registry = DetectorRegistry([UnknownIssueDetector('unknown', [])])
        registry.run_all(make_context('text'))
        with pytest.raises(AssertionError):
            aggregate_issues(registry)

    def test_no_issues(self, make_context):
        registry = DetectorRegistry([ConsecutiveEmptyDetector(), RepeatedPhraseDetector()])
        registry.run_all(make_context('clean text'))
        result = aggregate_issues(registry)
        assert result.total_issues == 0
        assert result.safety.reliability_score == 100


class TestDetectPatterns:
    """Tests for detect_patterns()."""

    def test_empty_and_whitespace_lines(self, make_context):
        ctx = make_context('a\n\n   \nb')
        patterns = detect_patterns(ctx.line_insights, avg_ratio=0.5)
        assert patterns.empty_lines == 2
        assert patterns.whitespace_only_lines == 1
        assert patterns.empty_line_tokens == 0

    def test_high_ratio_lines(self, make_context):
        dense = 'a b c d e f g'  # 7 tokens / 13 chars
        sparse = 'x' * 100
        ctx = make_context(f'{dense}\n{sparse}')
        patterns = detect_patterns(ctx.line_insights, avg_ratio=0.1)
        assert [i.line_number for i in patterns.high_ratio_lines] == [1]

    def test_high_ratio_needs_enough_tokens(self, make_context):
        ctx = make_context('a b')
        patterns = detect_patterns(ctx.line_insights, avg_ratio=0.01)
        assert patterns.high_ratio_lines == []

    def test_unicode_lines(self, make_context):
        ctx = make_context('plain\n├── file.py\n ')
        patterns = detect_patterns(ctx.line_insights, avg_ratio=0.2)
        assert [i.line_number for i in patterns.unicode_lines] == [2]

    def test_repeated_phrases_carried(self, make_context):
        ctx = make_context('x')
        patterns = detect_patterns(ctx.line_insights, 0.1, repeated_phrases=None)
        assert patterns.repeated_phrases == []

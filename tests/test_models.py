"""Tests for the pydantic report models."""

import json

from tokenscope.models import AnalysisReport


CONTENT = 'Deploy 🚀 today\nuser1234567\n\n\n\n# Notes\nSee https://example.com/docs for details'


class TestAnalysisReport:
    """Tests for AnalysisReport.from_analysis() and its renderings."""

    def make_report(self, analyze_text, content: str = CONTENT, top_n: int = 3) -> AnalysisReport:
        analysis = analyze_text(content)
        return AnalysisReport.from_analysis('notes.md', 'words', analysis, elapsed=0.01, top_n=top_n)

    def test_summary_fields(self, analyze_text):
        analysis = analyze_text(CONTENT)
        report = AnalysisReport.from_analysis('notes.md', 'words', analysis, elapsed=0.01, top_n=3)
        assert report.path == 'notes.md'
        assert report.total_tokens == analysis.total_tokens
        assert report.total_lines == 7
        assert report.reliability_score == analysis.llm_safety_analysis.reliability_score
        assert report.total_issues == analysis.total_issues
        assert len(report.top_lines) == 3
        assert len(report.recommendations) == len(analysis.recommendations)

    def test_issue_counts_cover_every_bucket(self, analyze_text):
        report = self.make_report(analyze_text)
        assert len(report.issue_counts) == 15
        assert report.issue_counts['emoji'] == 1
        assert report.issue_counts['number_format'] == 1
        assert report.issue_counts['url'] == 1
        assert report.issue_counts['consecutive_empty'] == 1
        assert sum(report.issue_counts.values()) == report.total_issues

    def test_issue_details_only_for_found_buckets(self, analyze_text):
        report = self.make_report(analyze_text)
        assert report.issues['number_format'][0]['suggestion'] == '1,234,567'
        assert 'glitch_token' not in report.issues

    def test_json_round_trip(self, analyze_text):
        report = self.make_report(analyze_text)
        data = json.loads(report.model_dump_json(indent=2))
        assert data['path'] == 'notes.md'
        assert data['encoding'] == 'words'
        assert set(data['categories']['counts']) == {'prose', 'code_blocks', 'urls', 'formatting', 'whitespace'}
        assert data['density'][0]['start_line'] == 1
        assert isinstance(data['recommendations'][0]['affected_lines'], list)

    def test_to_cli_plain(self, analyze_text):
        output = self.make_report(analyze_text).to_cli(colorize=False)
        assert 'Token Analysis' in output
        assert 'Path: notes.md' in output
        assert 'Recommendations:' in output
        assert 'Most expensive lines:' in output
        assert '\033[' not in output

    def test_to_cli_distribution_and_heatmap(self, analyze_text):
        analysis = analyze_text(CONTENT)
        output = AnalysisReport.from_analysis('notes.md', 'words', analysis, elapsed=0.01).to_cli()
        assert f'  {analysis.percentiles.format_percentiles()}' in output
        assert 'Token density:' in output
        heatmap_rows = analysis.density_map.format_heatmap().splitlines()
        assert len(heatmap_rows) == 1
        assert heatmap_rows[0].startswith('Line   1-7  :')
        assert f'  {heatmap_rows[0]}' in output

    def test_to_cli_colorized(self, analyze_text):
        output = self.make_report(analyze_text).to_cli(colorize=True)
        assert '\033[1m' in output
        assert '\033[0m' in output

    def test_to_cli_without_issues(self, analyze_text):
        output = self.make_report(analyze_text, content='plain words only').to_cli()
        assert 'No issues found' in output
        assert 'Recommendations:' not in output

    def test_empty_content(self, analyze_text):
        report = self.make_report(analyze_text, content='')
        assert report.total_tokens == 0
        assert report.efficiency_score == 0
        assert report.reliability_score == 100
        assert report.top_lines[0].tokens == 0

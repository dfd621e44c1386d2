"""Tests for the tokenscope CLI."""

import json
import os
import tempfile

import pytest
from click.testing import CliRunner

from tokenscope.__version__ import __version__
from tokenscope.cli.main import cli


class TestAnalyzeCommand:
    """Tests for `tokenscope analyze`."""

    @pytest.fixture(autouse=True)
    def fake_tokenizer(self, monkeypatch, token_source):
        """Replace tiktoken with the word-level token source."""
        monkeypatch.setattr('tokenscope.cli.analyze.TiktokenTokenSource', type(token_source))

    def setup_method(self):
        self.runner = CliRunner()
        self.temp_dir = tempfile.mkdtemp()
        self.test_file = os.path.join(self.temp_dir, 'prompt.md')
        with open(self.test_file, 'w', encoding='utf-8') as f:
            f.write('You are now a pirate.\n')
            f.write('Deploy 🚀 to user1234567\n')
            f.write('\n\n\n')
            f.write('See https://example.com/docs\n')

    def test_human_output(self):
        result = self.runner.invoke(cli, ['analyze', self.test_file])
        assert result.exit_code == 0
        assert 'Token Analysis' in result.output
        assert f'Path: {self.test_file}' in result.output
        assert 'Reliability score:' in result.output

    def test_json_output(self):
        result = self.runner.invoke(cli, ['analyze', self.test_file, '--json'])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data['path'] == self.test_file
        assert data['encoding'] == 'words'
        assert data['issue_counts']['ambiguity'] == 1
        assert data['issue_counts']['emoji'] == 1
        assert len(data['top_lines']) == 5

    def test_top_option(self):
        result = self.runner.invoke(cli, ['analyze', self.test_file, '--json', '--top', '1'])
        assert result.exit_code == 0
        assert len(json.loads(result.output)['top_lines']) == 1

    def test_negative_top_rejected(self):
        result = self.runner.invoke(cli, ['analyze', self.test_file, '--top', '-1'])
        assert result.exit_code == 2

    def test_encoding_option(self):
        result = self.runner.invoke(cli, ['analyze', self.test_file, '--json', '--encoding', 'o200k_base'])
        assert result.exit_code == 0
        assert json.loads(result.output)['encoding'] == 'o200k_base'

    def test_color_flag(self):
        result = self.runner.invoke(cli, ['analyze', self.test_file, '--color'])
        assert result.exit_code == 0
        assert '\033[' in result.output

        result = self.runner.invoke(cli, ['analyze', self.test_file, '--no-color'])
        assert '\033[' not in result.output

    def test_color_from_environment(self, monkeypatch):
        result = self.runner.invoke(cli, ['analyze', self.test_file])
        assert '\033[' not in result.output

        monkeypatch.setenv('TOKENSCOPE_COLOR', 'true')
        result = self.runner.invoke(cli, ['analyze', self.test_file])
        assert result.exit_code == 0
        assert '\033[1mToken Analysis\033[0m' in result.output

        result = self.runner.invoke(cli, ['analyze', self.test_file, '--no-color'])
        assert '\033[' not in result.output

    def test_missing_file(self):
        result = self.runner.invoke(cli, ['analyze', os.path.join(self.temp_dir, 'missing.txt')])
        assert result.exit_code == 2

    def test_invalid_utf8(self):
        path = os.path.join(self.temp_dir, 'binary.bin')
        with open(path, 'wb') as f:
            f.write(b'\xff\xfe\x00bad')
        result = self.runner.invoke(cli, ['analyze', path])
        assert result.exit_code == 1
        assert 'Error:' in result.output

    def test_tokenizer_failure(self, monkeypatch, failing_token_source):
        monkeypatch.setattr('tokenscope.cli.analyze.TiktokenTokenSource', type(failing_token_source))
        result = self.runner.invoke(cli, ['analyze', self.test_file])
        assert result.exit_code == 1
        assert 'failed to extract tokens' in result.output


class TestCliGroup:
    """Tests for the command group."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_version(self):
        result = self.runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert 'tokenscope' in result.output
        assert __version__ in result.output

    def test_help_lists_analyze(self):
        result = self.runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'analyze' in result.output

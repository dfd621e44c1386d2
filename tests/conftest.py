"""Pytest configuration and shared fixtures for tokenscope tests.

This module provides a deterministic token source so that tests never load
a real tiktoken encoding, and an auto-use fixture that keeps TOKENSCOPE_*
environment variables from leaking between tests.
"""

import os
import re

import pytest

from tokenscope.analyze import Analysis, analyze_file
from tokenscope.analyze.context import DetectionContext
from tokenscope.tokens import Token


WORD_PATTERN = re.compile(r'\S+')


class WordTokenSource:
    """Token source that emits one token per whitespace-separated word.

    Token positions are UTF-8 byte offsets, like the real tokenizer.
    Mirrors the TiktokenTokenSource interface used by the CLI.
    """

    def __init__(self, encoding_name: str | None = None):
        self.encoding_name = encoding_name or 'words'

    def extract_tokens(self, content: str) -> list[Token]:
        tokens = []
        for match in WORD_PATTERN.finditer(content):
            position = len(content[: match.start()].encode('utf-8'))
            text = match.group()
            tokens.append(Token(text=text, position=position, length=len(text.encode('utf-8'))))
        return tokens

    def count_tokens(self, content: str) -> int:
        return len(WORD_PATTERN.findall(content))


class FailingTokenSource(WordTokenSource):
    """Token source whose tokenizer always fails."""

    def extract_tokens(self, content: str) -> list[Token]:
        raise ValueError('tokenizer exploded')


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Auto-use fixture that removes TOKENSCOPE_* variables for each test.

    Tests that need a setting use monkeypatch.setenv() explicitly.
    """
    for key in list(os.environ):
        if key.startswith('TOKENSCOPE_'):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def token_source():
    """Word-level token source."""
    return WordTokenSource()


@pytest.fixture
def failing_token_source():
    """Token source that raises ValueError on tokenization."""
    return FailingTokenSource()


@pytest.fixture
def analyze_text():
    """Factory fixture running analyze_file() with word tokens.

    Returns:
        Callable taking content and an optional total_tokens override
        (defaults to the number of word tokens).
    """

    def _analyze(content: str, total_tokens: int | None = None) -> Analysis:
        source = WordTokenSource()
        if total_tokens is None:
            total_tokens = source.count_tokens(content)
        return analyze_file(content, total_tokens, source)

    return _analyze


@pytest.fixture
def make_context():
    """Factory fixture building a DetectionContext from text.

    Returns:
        Callable taking content and an optional total_tokens override
        (defaults to the number of word tokens).
    """

    def _make(content: str, total_tokens: int | None = None) -> DetectionContext:
        tokens = WordTokenSource().extract_tokens(content)
        return DetectionContext.build(content, tokens, len(tokens) if total_tokens is None else total_tokens)

    return _make

"""Repeated phrase detector."""

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import RepeatedPhrase
from tokenscope.utils import estimate_tokens

from .base import PatternDetector


DEFAULT_CANDIDATE_PHRASES = (
    'token count',
    'API key',
    'All rights reserved',
    'Licensed under the Apache License',
    'Copyright (c)',
    'This file was automatically generated',
)


class RepeatedPhraseDetector(PatternDetector):
    """Counts occurrences of a fixed list of candidate phrases.

    Phrases seen at least min_repetitions times are reported, most
    expensive first.
    """

    def __init__(self, candidates: tuple[str, ...] = DEFAULT_CANDIDATE_PHRASES, min_repetitions: int = 3):
        super().__init__()
        self.candidates = tuple(dict.fromkeys(candidates))
        self.min_repetitions = min_repetitions

    @property
    def name(self) -> str:
        return 'repeated_phrase'

    @property
    def priority(self) -> int:
        return 15

    def detect(self, ctx: DetectionContext) -> None:
        content = '\n'.join(ctx.lines)
        phrases = []
        for phrase in self.candidates:
            if not phrase:
                continue
            count = content.count(phrase)
            if count < self.min_repetitions:
                continue
            phrases.append(
                RepeatedPhrase(
                    phrase=phrase,
                    count=count,
                    total_tokens=estimate_tokens(phrase) * count,
                    line_numbers=[i + 1 for i, line in enumerate(ctx.lines) if phrase in line],
                )
            )
        phrases.sort(key=lambda p: p.total_tokens, reverse=True)
        self._issues = phrases

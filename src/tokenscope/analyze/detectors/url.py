"""URL detector."""

import re

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import URLIssue
from tokenscope.utils import estimate_tokens

from .base import PatternDetector


class URLDetector(PatternDetector):
    """Collects every distinct URL in the file with its occurrence count."""

    URL_PATTERN = re.compile(r'https?://[^\s)]+')
    TRAILING_PUNCTUATION = '.,;:!?'

    @property
    def name(self) -> str:
        return 'url'

    @property
    def priority(self) -> int:
        return 12

    def detect(self, ctx: DetectionContext) -> None:
        urls: dict[str, URLIssue] = {}
        for line_idx, line in enumerate(ctx.lines):
            for match in self.URL_PATTERN.findall(line):
                url = match.rstrip(self.TRAILING_PUNCTUATION)
                existing = urls.get(url)
                if existing is not None:
                    existing.occurrences += 1
                    existing.line_numbers.append(line_idx + 1)
                else:
                    urls[url] = URLIssue(
                        url=url,
                        length=len(url),
                        occurrences=1,
                        line_numbers=[line_idx + 1],
                        token_cost=estimate_tokens(url),
                    )
        self._issues = list(urls.values())

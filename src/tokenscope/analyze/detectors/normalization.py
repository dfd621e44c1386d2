"""Unicode normalization detector."""

import unicodedata

from tokenscope.analyze.context import DetectionContext
from tokenscope.analyze.issues import NormalizationIssue

from .base import PatternDetector


class NormalizationDetector(PatternDetector):
    """Flags lines that are not in NFC or not in NFKC form.

    A line failing both checks yields two independent issues.
    """

    FORMS = (('NFC', 'not_nfc'), ('NFKC', 'not_nfkc'))

    @property
    def name(self) -> str:
        return 'normalization'

    @property
    def priority(self) -> int:
        return 8

    def detect(self, ctx: DetectionContext) -> None:
        issues = []
        for line_idx, line in enumerate(ctx.lines):
            if line.isascii():
                continue
            for form, issue_type in self.FORMS:
                normalized = unicodedata.normalize(form, line)
                if normalized != line:
                    issues.append(
                        NormalizationIssue(
                            original_text=line,
                            normalized_text=normalized,
                            form_expected=form,
                            line_number=line_idx + 1,
                            position=0,
                            issue_type=issue_type,
                        )
                    )
        self._issues = issues

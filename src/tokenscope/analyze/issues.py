"""Issue records produced by detectors.

Every detector emits instances of exactly one of the classes below. The
`Issue` alias is the closed union of all of them; the aggregator matches
on it exhaustively.

Line numbers are 1-based. Positions are 0-based code point offsets within
the line.
"""

from dataclasses import dataclass, field


# ============================================================================
# LLM safety issues
# ============================================================================


@dataclass
class EmojiIssue:
    emoji: str  # First emoji seen for this (line, type)
    emoji_type: str  # standard, skin_tone, flag, zwj_sequence
    line_number: int
    count: int
    line_content: str
    token_cost: int  # Accumulated over merged occurrences


@dataclass
class InvisibleCharIssue:
    char_type: str  # zwsp, zwnj, zwj, lrm, rlm, alm, shy, bom, wj
    line_number: int
    position: int
    context: str
    count: int
    is_evasion: bool  # Line also contains a suspicious keyword


@dataclass
class NumberFormatIssue:
    number: str
    line_number: int
    line_content: str
    token_cost: int  # Character-count proxy, not a tokenizer count
    suggestion: str  # Comma-grouped form
    save_estimate: int
    is_formatted: bool = False


@dataclass
class OOVStringIssue:
    string: str
    string_type: str  # url, uuid, hash, id
    line_number: int
    token_count: int
    context: str
    recommendation: str


@dataclass
class BiDiControlIssue:
    control_type: str  # lre, rle, pdf, lro, rlo, lri, rli, fsi, pdi
    line_number: int
    position: int
    context: str
    count: int
    is_trojan_source: bool


@dataclass
class ConfusableIssue:
    original_char: str
    confusable_char: str  # Leading character of the skeleton
    char_name: str
    line_number: int
    position: int
    context: str
    count: int
    is_mixed_script: bool


@dataclass
class EncodingIssue:
    encoding_type: str  # base64, hex, leetspeak, rot13, ascii_art
    encoded_text: str
    decoded_text: str
    line_number: int
    position: int
    length: int
    token_cost: int


@dataclass
class NormalizationIssue:
    original_text: str
    normalized_text: str
    form_expected: str  # NFC or NFKC
    line_number: int
    position: int
    issue_type: str  # not_nfc, not_nfkc


@dataclass
class GlitchTokenIssue:
    token: str
    line_number: int
    position: int
    context: str
    known_issue: str
    severity: str = 'critical'
    token_id: str = ''


@dataclass
class ContextPlacementIssue:
    total_tokens: int
    important_at_start: bool
    important_at_end: bool
    important_in_middle: bool
    recommended_changes: str


@dataclass
class AmbiguityIssue:
    pattern: str  # conflicting_instructions, nested_quotes, sycophantic_frame, role_confusion
    line_number: int
    description: str
    example: str
    severity: str  # high, medium, low


# ============================================================================
# Stylistic patterns
# ============================================================================


@dataclass
class URLIssue:
    url: str
    length: int
    occurrences: int
    line_numbers: list[int] = field(default_factory=list)
    token_cost: int = 0  # Estimated tokens for a single occurrence


@dataclass
class ConsecutiveEmptyLines:
    start_line: int
    end_line: int
    count: int


@dataclass
class LongLine:
    line_number: int
    length: int
    tokens: int
    content: str  # Truncated preview


@dataclass
class RepeatedPhrase:
    phrase: str
    count: int
    total_tokens: int
    line_numbers: list[int] = field(default_factory=list)


Issue = (
    EmojiIssue
    | InvisibleCharIssue
    | NumberFormatIssue
    | OOVStringIssue
    | BiDiControlIssue
    | ConfusableIssue
    | EncodingIssue
    | NormalizationIssue
    | GlitchTokenIssue
    | ContextPlacementIssue
    | AmbiguityIssue
    | URLIssue
    | ConsecutiveEmptyLines
    | LongLine
    | RepeatedPhrase
)

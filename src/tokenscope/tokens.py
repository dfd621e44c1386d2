"""Token model and client-side token sources."""

import logging
from dataclasses import dataclass
from typing import Protocol

import tiktoken

from tokenscope.utils import get_str_env


logger = logging.getLogger(__name__)

DEFAULT_ENCODING = 'cl100k_base'


class TokenExtractionError(RuntimeError):
    """Raised when a token source fails to tokenize content."""


@dataclass(frozen=True)
class Token:
    """A single decoded token and where it sits in the analyzed content."""

    text: str  # Decoded token text (may contain U+FFFD for partial UTF-8 sequences)
    position: int  # 0-based UTF-8 byte offset into content
    length: int  # Length in bytes


class TokenSource(Protocol):
    """Anything that can turn content into an ordered token list."""

    def extract_tokens(self, content: str) -> list[Token]: ...


class TiktokenTokenSource:
    """Client-side tokenizer backed by tiktoken.

    Token positions are byte offsets, computed by walking the raw bytes of
    each token in order, so they always line up with the UTF-8 encoding of
    the content even when a token splits a multi-byte character.
    """

    def __init__(self, encoding_name: str | None = None):
        """Create a token source.

        Args:
            encoding_name: tiktoken encoding name. Defaults to TOKENSCOPE_ENCODING
                or cl100k_base.
        """
        self.encoding_name = encoding_name or get_str_env('TOKENSCOPE_ENCODING', DEFAULT_ENCODING)
        self._encoding = None

    @property
    def encoding(self) -> tiktoken.Encoding:
        if self._encoding is None:
            logger.debug(f'[TOKENS] Loading tiktoken encoding {self.encoding_name}')
            self._encoding = tiktoken.get_encoding(self.encoding_name)
        return self._encoding

    def count_tokens(self, content: str) -> int:
        """Return the number of tokens in content."""
        return len(self.encoding.encode(content, disallowed_special=()))

    def extract_tokens(self, content: str) -> list[Token]:
        """Tokenize content and map every token to its byte offset.

        Args:
            content: Text to tokenize.

        Returns:
            Tokens in content order.
        """
        encoding = self.encoding
        token_ids = encoding.encode(content, disallowed_special=())

        tokens = []
        position = 0
        for token_id in token_ids:
            raw = encoding.decode_single_token_bytes(token_id)
            tokens.append(Token(text=raw.decode('utf-8', errors='replace'), position=position, length=len(raw)))
            position += len(raw)

        logger.debug(f'[TOKENS] Extracted {len(tokens)} tokens from {len(content)} chars')
        return tokens

"""Tests for the tiktoken-backed token source."""

import pytest

from tokenscope.tokens import DEFAULT_ENCODING, TiktokenTokenSource, Token


class FakeEncoding:
    """Stands in for tiktoken.Encoding with a fixed byte-level vocabulary."""

    def __init__(self, pieces: list[bytes]):
        self.pieces = pieces
        self.encode_calls = []

    def encode(self, content: str, disallowed_special=()) -> list[int]:
        self.encode_calls.append((content, disallowed_special))
        return list(range(len(self.pieces)))

    def decode_single_token_bytes(self, token_id: int) -> bytes:
        return self.pieces[token_id]


def make_source(pieces: list[bytes]) -> TiktokenTokenSource:
    source = TiktokenTokenSource('fake_base')
    source._encoding = FakeEncoding(pieces)
    return source


class TestTiktokenTokenSource:
    """Tests for TiktokenTokenSource."""

    def test_encoding_name_default(self):
        assert TiktokenTokenSource().encoding_name == DEFAULT_ENCODING

    def test_encoding_name_from_env(self, monkeypatch):
        monkeypatch.setenv('TOKENSCOPE_ENCODING', 'o200k_base')
        assert TiktokenTokenSource().encoding_name == 'o200k_base'
        assert TiktokenTokenSource('p50k_base').encoding_name == 'p50k_base'

    def test_encoding_is_lazy(self):
        source = TiktokenTokenSource()
        assert source._encoding is None

    def test_byte_offsets(self):
        source = make_source([b'caf', 'é'.encode('utf-8'), b' ok'])
        tokens = source.extract_tokens('café ok')
        assert tokens == [
            Token(text='caf', position=0, length=3),
            Token(text='é', position=3, length=2),
            Token(text=' ok', position=5, length=3),
        ]

    def test_split_multibyte_character(self):
        rocket = '🚀'.encode('utf-8')
        source = make_source([rocket[:2], rocket[2:], b'!'])
        tokens = source.extract_tokens('🚀!')
        assert [token.position for token in tokens] == [0, 2, 4]
        assert tokens[0].text == '\ufffd'
        assert tokens[2].text == '!'

    def test_special_tokens_allowed_as_text(self):
        source = make_source([b'<|endoftext|>'])
        source.extract_tokens('<|endoftext|>')
        assert source.count_tokens('<|endoftext|>') == 1
        assert all(call[1] == () for call in source._encoding.encode_calls)

    def test_unknown_encoding(self):
        source = TiktokenTokenSource('not_a_real_encoding')
        with pytest.raises(ValueError):
            source.encoding

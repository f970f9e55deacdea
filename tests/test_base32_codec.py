"""Tests for Base32 secret decoding and secret generation."""

import base64

import pytest

from totp_core import InvalidEncodingError, InvalidParameterError, generate_secret
from totp_core import base32_codec
from totp_core.base32_codec import ALPHABET, base32_decode, generate_base32_secret


class TestDecode:
    def test_known_secret(self):
        assert base32_decode("JBSWY3DPEHPK3PXP") == b"Hello!\xde\xad\xbe\xef"

    @pytest.mark.parametrize("raw", [b"", b"f", b"fo", b"foo", b"foob", b"fooba", b"foobar", bytes(range(40))])
    def test_matches_stdlib_for_padded_input(self, raw):
        text = base64.b32encode(raw).decode("ascii")
        assert base32_decode(text) == raw

    def test_padding_is_optional(self):
        assert base32_decode("MZXW6") == b"foo"
        assert base32_decode("MZXW6===") == b"foo"

    def test_lowercase_is_accepted(self):
        assert base32_decode("jbswy3dpehpk3pxp") == base32_decode("JBSWY3DPEHPK3PXP")

    def test_leftover_bits_are_dropped(self):
        # 3 chars = 15 bits -> 1 full byte
        assert base32_decode("MZX") == b"f"
        assert base32_decode("A") == b""

    @pytest.mark.parametrize("text", ["12345", "JBSW Y3DP", "AB=CD", "JBSWY3DP!", "ÄBCD"])
    def test_rejects_characters_outside_alphabet(self, text):
        with pytest.raises(InvalidEncodingError):
            base32_decode(text)

    def test_rejects_non_string(self):
        with pytest.raises(InvalidEncodingError):
            base32_decode(b"JBSWY3DP")

    def test_encoding_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            base32_decode("0")


class TestGenerateSecret:
    @pytest.mark.parametrize("length", [1, 10, 16, 32, 64])
    def test_length_and_alphabet(self, length):
        secret = generate_secret(length)
        assert len(secret) == length
        assert set(secret) <= set(ALPHABET)

    def test_default_length(self):
        assert len(generate_secret()) == 32

    def test_successive_secrets_differ(self):
        assert generate_secret() != generate_secret()

    def test_generated_secret_decodes(self):
        assert len(base32_decode(generate_secret(32))) == 20

    def test_bytes_are_mapped_modulo_32(self, monkeypatch):
        monkeypatch.setattr(base32_codec.os, "urandom", lambda n: bytes([0, 31, 32, 255, 33])[:n])
        assert generate_base32_secret(5) == "A7A7B"

    @pytest.mark.parametrize("length", [0, -1, 2.5, "16", True])
    def test_rejects_invalid_length(self, length):
        with pytest.raises(InvalidParameterError):
            generate_secret(length)

"""TOTP generation and window verification through the public API."""

import pytest

from totp_core import (
    CryptographyHmacProvider,
    HashAlgorithm,
    InvalidEncodingError,
    InvalidParameterError,
    OTPOptions,
    UnsupportedAlgorithmError,
    generate_code,
    generate_secret,
    verify_code,
)
from totp_core import options as options_module
from tests.vectors import RFC6238_TABLE, RFC_SECRET, RFC_SECRETS

ALGORITHMS = ["SHA-1", "SHA-256", "SHA-512"]
T = 1_700_000_010_000  # ms, start of a 30 s step


@pytest.mark.parametrize("seconds, sha1, sha256, sha512", RFC6238_TABLE)
def test_rfc6238_vectors(seconds, sha1, sha256, sha512):
    for algorithm, code in zip(ALGORITHMS, (sha1, sha256, sha512)):
        secret = RFC_SECRETS[algorithm]
        assert generate_code(secret, timestamp=seconds * 1000, digits=8, algorithm=algorithm) == code


@pytest.mark.parametrize("seconds, sha1, sha256, sha512", RFC6238_TABLE)
def test_rfc6238_vectors_verify(seconds, sha1, sha256, sha512):
    for algorithm, code in zip(ALGORITHMS, (sha1, sha256, sha512)):
        opts = OTPOptions(timestamp=seconds * 1000, digits=8, algorithm=algorithm, window=0)
        assert verify_code(code, RFC_SECRETS[algorithm], opts)


def test_default_code_shape():
    code = generate_code(generate_secret())
    assert len(code) == 6
    assert code.isdigit()


@pytest.mark.parametrize("digits", [1, 6, 7, 8, 9, 10])
def test_code_length_follows_digits(digits):
    code = generate_code(RFC_SECRET, timestamp=T, digits=digits)
    assert len(code) == digits
    assert code.isdigit()


def test_leading_zeros_are_kept():
    # RFC 6238: T = 1111111109 -> 07081804
    assert generate_code(RFC_SECRET, timestamp=1111111109000, digits=8) == "07081804"


def test_options_object_and_overrides_combine():
    opts = OTPOptions(digits=8, timestamp=59000)
    assert generate_code(RFC_SECRET, opts) == "94287082"
    assert generate_code(RFC_SECRET, opts, digits=6) == "287082"


def test_timestamp_defaults_to_now(monkeypatch):
    monkeypatch.setattr(options_module, "now_millis", lambda: 59000)
    assert generate_code(RFC_SECRET, digits=8) == "94287082"


def test_float_timestamp_is_floored():
    assert generate_code(RFC_SECRET, timestamp=59999.9, digits=8) == "94287082"


@pytest.mark.parametrize("algorithm", ALGORITHMS + [HashAlgorithm.SHA256, "sha512"])
def test_round_trip_per_algorithm(algorithm):
    secret = generate_secret()
    code = generate_code(secret, algorithm=algorithm, timestamp=T)
    assert verify_code(code, secret, algorithm=algorithm, timestamp=T)


@pytest.mark.parametrize("window", [0, 1, 2, 5])
def test_round_trip_any_window(window):
    secret = generate_secret(16)
    opts = OTPOptions(timestamp=T, window=window, digits=7, time_step=60)
    assert verify_code(generate_code(secret, opts), secret, opts)


def test_round_trip_with_cryptography_provider():
    provider = CryptographyHmacProvider()
    code = generate_code(RFC_SECRET, timestamp=T, provider=provider)
    assert code == generate_code(RFC_SECRET, timestamp=T)
    assert verify_code(code, RFC_SECRET, timestamp=T, provider=provider)


class TestWindow:
    def test_small_drift_is_accepted(self):
        code = generate_code(RFC_SECRET, timestamp=T)
        assert verify_code(code, RFC_SECRET, timestamp=T + 15000, window=1)
        assert verify_code(code, RFC_SECRET, timestamp=T + 30000, window=1)
        assert verify_code(code, RFC_SECRET, timestamp=T - 30000, window=1)

    def test_large_drift_is_rejected(self):
        code = generate_code(RFC_SECRET, timestamp=T)
        assert not verify_code(code, RFC_SECRET, timestamp=T + 120000, window=1)

    def test_large_drift_accepted_by_wide_window(self):
        code = generate_code(RFC_SECRET, timestamp=T)
        assert verify_code(code, RFC_SECRET, timestamp=T + 120000, window=4)

    def test_window_zero_checks_current_counter_only(self):
        # 755224 is the code for counter 0; 59 s is counter 1
        assert not verify_code("755224", RFC_SECRET, timestamp=59000, window=0)
        assert verify_code("755224", RFC_SECRET, timestamp=59000, window=1)
        assert verify_code("287082", RFC_SECRET, timestamp=59000, window=0)

    def test_negative_counters_are_skipped(self):
        assert verify_code("755224", RFC_SECRET, timestamp=0, window=3)
        assert not verify_code("000000", RFC_SECRET, timestamp=0, window=3)


class TestMismatch:
    def test_all_zero_token(self):
        # counters 0..2 -> 755224, 287082, 359152
        assert verify_code("000000", RFC_SECRET, timestamp=59000) is False

    def test_wrong_digit(self):
        code = generate_code(RFC_SECRET, timestamp=59000)
        wrong = str((int(code[0]) + 1) % 10) + code[1:]
        assert not verify_code(wrong, RFC_SECRET, timestamp=59000, window=0)

    @pytest.mark.parametrize("token", ["0287082", "28708", "287082 ", "", "２８７０８２"])
    def test_exact_string_match(self, token):
        assert not verify_code(token, RFC_SECRET, timestamp=59000)

    def test_token_must_be_a_string(self):
        with pytest.raises(InvalidParameterError):
            verify_code(287082, RFC_SECRET, timestamp=59000)


class TestErrors:
    @pytest.mark.parametrize("secret", ["12345", "JBSW Y3DP", "", "A"])
    def test_invalid_secret_fails_generation(self, secret):
        with pytest.raises(InvalidEncodingError):
            generate_code(secret, timestamp=T)

    @pytest.mark.parametrize("secret", ["12345", ""])
    def test_invalid_secret_fails_verification(self, secret):
        with pytest.raises(InvalidEncodingError):
            verify_code("123456", secret, timestamp=T)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"time_step": 0},
            {"time_step": -30},
            {"time_step": 1.5},
            {"digits": 0},
            {"digits": 11},
            {"window": -1},
            {"window": "1"},
            {"timestamp": -1},
            {"timestamp": "now"},
            {"timestamp": float("nan")},
            {"period": 30},
        ],
    )
    def test_invalid_parameters(self, overrides):
        with pytest.raises(InvalidParameterError):
            verify_code("123456", RFC_SECRET, **overrides)

    def test_unsupported_algorithm(self):
        with pytest.raises(UnsupportedAlgorithmError):
            generate_code(RFC_SECRET, algorithm="SHA-384")

    def test_counter_beyond_64_bits_fails_verification(self):
        with pytest.raises(InvalidParameterError):
            verify_code("123456", RFC_SECRET, timestamp=10 ** 30)
        with pytest.raises(InvalidParameterError):
            generate_code(RFC_SECRET, timestamp=10 ** 30)

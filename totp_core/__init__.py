"""
totp_core
=========

Công cụ tạo và xác minh OTP (HOTP/TOTP) theo chuẩn RFC 4226 & RFC 6238,
kèm secret Base32 và otpauth:// URI để import vào app Authenticator.

──────────────────────────────────────────────
Giải thuật cốt lõi
──────────────────────────────────────────────
- HOTP:  code = Truncate(HMAC(key=secret, msg=counter)) mod 10^digits
- TOTP:  HOTP với counter = floor(timestamp_ms / 1000 / time_step)
  → Mặc định: step 30s, 6 chữ số, SHA-1, window xác minh +/- 1 step.

──────────────────────────────────────────────
Ví dụ sử dụng nhanh
──────────────────────────────────────────────
>>> from totp_core import generate_secret, generate_code, verify_code
>>> secret = generate_secret()
>>> code = generate_code(secret)
>>> verify_code(code, secret)
True

Tạo URI cho app Authenticator:

>>> from totp_core import build_provisioning_uri
>>> build_provisioning_uri(account_name="alice@example.com", issuer="MyService", secret=secret)
'otpauth://totp/MyService%3Aalice%40example.com?secret=...&issuer=MyService&algorithm=SHA1&digits=6&period=30'

Thư viện không lưu gì: lưu secret, giới hạn số lần thử và chặn mã dùng lại
là việc của caller.
"""

import dataclasses
from typing import Optional

from .base32_codec import base32_decode, generate_base32_secret
from .errors import (
    InvalidEncodingError,
    InvalidParameterError,
    OTPError,
    UnsupportedAlgorithmError,
)
from .hmac_provider import (
    DEFAULT_PROVIDER,
    CryptographyHmacProvider,
    HashlibHmacProvider,
    HmacProvider,
)
from .options import (
    DEFAULT_DIGITS,
    DEFAULT_SECRET_LENGTH,
    DEFAULT_TIME_STEP,
    DEFAULT_WINDOW,
    HashAlgorithm,
    OTPOptions,
    ProvisioningOptions,
)
from .otp_core import generate_totp, hotp, seconds_remaining, verify_hotp, verify_totp
from .otp_uri import format_hotp_uri, format_otpauth_uri, qr_code_url

__version__ = "1.0.0"


def generate_secret(length: int = DEFAULT_SECRET_LENGTH) -> str:
    """Secret Base32 ngẫu nhiên gồm `length` ký tự."""
    return generate_base32_secret(length)


def generate_code(
    secret: str,
    options: Optional[OTPOptions] = None,
    provider: HmacProvider = DEFAULT_PROVIDER,
    **overrides,
) -> str:
    """
    Mã TOTP hiện tại (hoặc tại `timestamp`) cho một secret Base32.

    Option lấy từ `options` và/hoặc keyword overrides, ví dụ
    ``generate_code(secret, digits=8, algorithm="SHA-256")``.
    """
    return generate_totp(secret, _options(options, overrides), provider)


def verify_code(
    token: str,
    secret: str,
    options: Optional[OTPOptions] = None,
    provider: HmacProvider = DEFAULT_PROVIDER,
    **overrides,
) -> bool:
    """True nếu `token` khớp một mã trong window xác minh."""
    return verify_totp(token, secret, _options(options, overrides), provider)


def build_provisioning_uri(options: Optional[ProvisioningOptions] = None, **fields) -> str:
    """
    otpauth://totp/ URI từ ProvisioningOptions và/hoặc keyword fields
    (account_name, issuer, secret, digits, period, algorithm).
    """
    try:
        if options is None:
            options = ProvisioningOptions(**fields)
        elif fields:
            options = dataclasses.replace(options, **fields)
    except TypeError as e:
        raise InvalidParameterError(str(e)) from e
    return format_otpauth_uri(
        options.account_name,
        options.issuer,
        options.secret,
        digits=options.digits,
        period=options.period,
        algorithm=options.algorithm,
    )


def _options(options: Optional[OTPOptions], overrides: dict) -> OTPOptions:
    options = options or OTPOptions()
    return options.replace(**overrides) if overrides else options


__all__ = [
    "CryptographyHmacProvider",
    "DEFAULT_DIGITS",
    "DEFAULT_SECRET_LENGTH",
    "DEFAULT_TIME_STEP",
    "DEFAULT_WINDOW",
    "HashAlgorithm",
    "HashlibHmacProvider",
    "HmacProvider",
    "InvalidEncodingError",
    "InvalidParameterError",
    "OTPError",
    "OTPOptions",
    "ProvisioningOptions",
    "UnsupportedAlgorithmError",
    "base32_decode",
    "build_provisioning_uri",
    "format_hotp_uri",
    "format_otpauth_uri",
    "generate_code",
    "generate_secret",
    "hotp",
    "qr_code_url",
    "seconds_remaining",
    "verify_code",
    "verify_hotp",
]

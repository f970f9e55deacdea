"""
otp_uri.py — tạo otpauth:// URI để import vào app Authenticator.

    otpauth://totp/Issuer%3Aaccount?secret=...&issuer=...&algorithm=SHA1&digits=6&period=30

Xem https://github.com/google/google-authenticator/wiki/Key-Uri-Format

- Label được percent-encode giống encodeURIComponent của JavaScript
- Query string form-encoded (space thành "+"), đúng như app Authenticator đọc
- Secret không được validate ở đây; secret sai chỉ lỗi khi decode để sinh mã
"""

from urllib.parse import quote, urlencode

from .errors import InvalidParameterError
from .options import (
    DEFAULT_ALGORITHM,
    DEFAULT_DIGITS,
    DEFAULT_TIME_STEP,
    MAX_COUNTER,
    AlgorithmLike,
    HashAlgorithm,
    require_digits,
    require_int,
)

QR_SERVICE_URL = "https://api.qrserver.com/v1/create-qr-code/"
DEFAULT_QR_SIZE = 256

# các ký tự encodeURIComponent giữ nguyên, ngoài mặc định của quote()
_COMPONENT_SAFE = "!~*'()"


def _encode_component(value: str) -> str:
    return quote(value, safe=_COMPONENT_SAFE)


def _encode_query(params) -> str:
    # application/x-www-form-urlencoded giữ "*" nhưng escape "~"
    return urlencode(params, safe="*").replace("~", "%7E")


def _label(issuer: str, account_name: str) -> str:
    for name, value in (("issuer", issuer), ("account_name", account_name)):
        if not isinstance(value, str):
            raise InvalidParameterError(f"{name} must be a string, got {type(value).__name__}")
    return _encode_component(f"{issuer}:{account_name}")


def format_otpauth_uri(
    account_name: str,
    issuer: str,
    secret: str,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_TIME_STEP,
    algorithm: AlgorithmLike = DEFAULT_ALGORITHM,
) -> str:
    """
    Tạo otpauth:// URI cho TOTP.

    Arguments:
        account_name: label account (ví dụ 'alice@example.com')
        issuer: issuer label (ví dụ 'MyService'), dùng cả trong label và query
        secret: Base32 secret, giữ nguyên như truyền vào
        digits: số chữ số
        period: timestep (giây)
        algorithm: viết không có gạch nối (SHA-1 -> SHA1)

    Trả về:
        str: otpauth://totp/... URI
    """
    label = _label(issuer, account_name)
    query = _encode_query([
        ("secret", secret),
        ("issuer", issuer),
        ("algorithm", HashAlgorithm.parse(algorithm).uri_name),
        ("digits", require_digits(digits)),
        ("period", require_int("period", period, 1)),
    ])
    return f"otpauth://totp/{label}?{query}"


def format_hotp_uri(
    account_name: str,
    issuer: str,
    secret: str,
    counter: int = 0,
    digits: int = DEFAULT_DIGITS,
    algorithm: AlgorithmLike = DEFAULT_ALGORITHM,
) -> str:
    """Bản HOTP: otpauth://hotp/...&counter=N thay cho period."""
    label = _label(issuer, account_name)
    query = _encode_query([
        ("secret", secret),
        ("issuer", issuer),
        ("algorithm", HashAlgorithm.parse(algorithm).uri_name),
        ("digits", require_digits(digits)),
        ("counter", require_int("counter", counter, 0, MAX_COUNTER)),
    ])
    return f"otpauth://hotp/{label}?{query}"


def qr_code_url(uri: str, size: int = DEFAULT_QR_SIZE) -> str:
    """URL ảnh PNG QR code cho `uri`, render bởi một image service bên ngoài."""
    require_int("size", size, 1)
    return f"{QR_SERVICE_URL}?size={size}x{size}&data={_encode_component(uri)}"

"""
otp_core.py — HOTP (RFC 4226) và TOTP (RFC 6238) engine.

Hàm thuần, không I/O: secret được truyền vào mỗi lần gọi và không được giữ lại.

- HOTP:  code = Truncate(HMAC(key=secret, msg=counter)) mod 10^digits
- TOTP:  HOTP với counter = floor(timestamp_ms / 1000 / time_step)
- Dynamic truncation: offset = last byte & 0x0F, lấy 4 bytes từ offset rồi
  clear bit cao nhất -> integer 31-bit.

Khi xác minh, duyệt các counter từ -window đến +window quanh counter hiện tại
và so sánh constant-time.
"""

import hmac
import logging
from typing import Optional, Tuple

from .base32_codec import base32_decode
from .errors import InvalidEncodingError, InvalidParameterError
from .hmac_provider import DEFAULT_PROVIDER, HmacProvider
from .options import (
    DEFAULT_ALGORITHM,
    DEFAULT_DIGITS,
    MAX_COUNTER,
    AlgorithmLike,
    HashAlgorithm,
    OTPOptions,
    require_digits,
    require_int,
)

logger = logging.getLogger(__name__)


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(counter: int) -> bytes:
    """
    Chuyển counter sang message 8-byte big-endian như RFC4226 yêu cầu.

    Ví dụ: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    require_int("counter", counter, 0, MAX_COUNTER)
    return counter.to_bytes(8, "big")


def dynamic_truncate(mac: bytes) -> int:
    """
    Áp dụng dynamic truncation theo RFC4226, trả về integer 31-bit.

    Dùng được cho mọi digest dài ít nhất 19 bytes (offset tối đa 15).
    """
    offset = mac[-1] & 0x0F
    return (
        ((mac[offset] & 0x7F) << 24)
        | ((mac[offset + 1] & 0xFF) << 16)
        | ((mac[offset + 2] & 0xFF) << 8)
        | (mac[offset + 3] & 0xFF)
    )


def decode_secret(secret_b32: str) -> bytes:
    """
    Decode secret Base32 để dùng làm HMAC key.

    Raises:
        InvalidEncodingError: nếu có ký tự sai, hoặc decode ra key rỗng
            (ví dụ "" hay chỉ một ký tự)
    """
    key = base32_decode(secret_b32)
    if not key:
        raise InvalidEncodingError("Base32 secret decodes to an empty key")
    return key


def time_counter(timestamp_ms: int, time_step: int) -> int:
    """floor(timestamp_ms / 1000 / time_step), tính bằng số nguyên chính xác."""
    return timestamp_ms // 1000 // time_step


def seconds_remaining(time_step: int, timestamp_ms: int) -> int:
    """Số giây còn lại trước khi mã của `timestamp_ms` đổi (1..time_step)."""
    require_int("time_step", time_step, 1)
    return time_step - (timestamp_ms // 1000) % time_step


# --- HOTP ------------------------------------------------------------------
def hotp(
    key: bytes,
    counter: int,
    digits: int = DEFAULT_DIGITS,
    algorithm: AlgorithmLike = DEFAULT_ALGORITHM,
    provider: HmacProvider = DEFAULT_PROVIDER,
) -> str:
    """
    Sinh mã HOTP theo RFC4226 từ raw key và counter.

    Steps:
    1. message = counter 8-byte big-endian
    2. mac = HMAC-<algorithm>(key, message)
    3. dynamic truncate -> giá trị 31-bit
    4. value mod 10^digits, zero-pad để có đúng `digits` chữ số

    Arguments:
        key: raw secret bytes (không phải Base32)
        counter: số nguyên không âm, nhỏ hơn 2**64
        digits: số chữ số OTP, 1..10
        algorithm: SHA-1 / SHA-256 / SHA-512
        provider: HMAC implementation

    Trả về:
        str: mã HOTP dạng zero-padded

    Raises:
        InvalidParameterError: key rỗng, counter hoặc digits không hợp lệ
        UnsupportedAlgorithmError: hash không hỗ trợ
    """
    if not key:
        raise InvalidParameterError("HMAC key must not be empty")
    digits = require_digits(digits)
    algorithm = HashAlgorithm.parse(algorithm)

    mac = provider.sign(algorithm, key, int_to_bytes(counter))
    value = dynamic_truncate(mac) % (10 ** digits)
    return str(value).zfill(digits)


def verify_hotp(
    token: str,
    secret_b32: str,
    counter: int,
    look_ahead: int = 1,
    digits: int = DEFAULT_DIGITS,
    algorithm: AlgorithmLike = DEFAULT_ALGORITHM,
    provider: HmacProvider = DEFAULT_PROVIDER,
) -> Tuple[bool, int]:
    """
    Xác minh mã HOTP với các counter từ counter đến counter + look_ahead.

    Trả về:
        (True, matched_counter + 1) nếu khớp, để caller lưu counter kế tiếp;
        (False, counter) nếu không khớp. Việc lưu counter là của caller.
    """
    _require_token(token)
    require_int("counter", counter, 0, MAX_COUNTER)
    require_int("look_ahead", look_ahead, 0)
    key = decode_secret(secret_b32)

    for candidate in range(counter, min(counter + look_ahead, MAX_COUNTER) + 1):
        if _codes_equal(token, hotp(key, candidate, digits, algorithm, provider)):
            logger.debug("HOTP matched at look-ahead %d", candidate - counter)
            return True, candidate + 1
    logger.debug("HOTP did not match within look-ahead %d", look_ahead)
    return False, counter


# --- TOTP ------------------------------------------------------------------
def generate_totp(
    secret_b32: str,
    options: Optional[OTPOptions] = None,
    provider: HmacProvider = DEFAULT_PROVIDER,
) -> str:
    """
    Sinh mã TOTP theo RFC6238 cho một secret Base32.

    Arguments:
        secret_b32: Base32 secret
        options: time_step / digits / timestamp / algorithm (bỏ qua window)
        provider: HMAC implementation

    Trả về:
        str: mã TOTP

    Raises:
        InvalidEncodingError: nếu secret không decode được
        InvalidParameterError: nếu option không hợp lệ
    """
    opts = (options or OTPOptions()).resolve()
    key = decode_secret(secret_b32)
    counter = time_counter(opts.timestamp, opts.time_step)
    logger.debug("TOTP generate: counter=%d step=%ds algorithm=%s", counter, opts.time_step, opts.algorithm.value)
    return hotp(key, counter, opts.digits, opts.algorithm, provider)


def verify_totp(
    token: str,
    secret_b32: str,
    options: Optional[OTPOptions] = None,
    provider: HmacProvider = DEFAULT_PROVIDER,
) -> bool:
    """
    Xác minh mã TOTP, chấp nhận lệch đồng hồ +/- `options.window` step.

    - Duyệt counter tăng dần từ counter - window, dừng ở lần khớp đầu tiên
    - Counter ở mép window nhỏ hơn 0 hoặc lớn hơn 2**64-1 bị bỏ qua
    - Không khớp thì trả về False, không phải lỗi

    Raises:
        InvalidEncodingError: nếu secret không decode được
        InvalidParameterError: nếu option không hợp lệ, counter hiện tại vượt
            64 bit, hoặc token không phải string
    """
    _require_token(token)
    opts = (options or OTPOptions()).resolve()
    key = decode_secret(secret_b32)
    counter = time_counter(opts.timestamp, opts.time_step)
    require_int("counter", counter, 0, MAX_COUNTER)

    for error_window in range(-opts.window, opts.window + 1):
        candidate = counter + error_window
        if candidate < 0 or candidate > MAX_COUNTER:
            continue
        if _codes_equal(token, hotp(key, candidate, opts.digits, opts.algorithm, provider)):
            logger.debug("TOTP matched at drift %+d step(s)", error_window)
            return True
    logger.debug("TOTP did not match within window %d", opts.window)
    return False


def _require_token(token) -> None:
    if not isinstance(token, str):
        raise InvalidParameterError(f"token must be a string, got {type(token).__name__}")


def _codes_equal(token: str, expected: str) -> bool:
    # constant-time khi cùng độ dài; khớp chính xác, kể cả số 0 ở đầu
    return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))

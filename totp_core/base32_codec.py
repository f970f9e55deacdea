"""
base32_codec.py — secret Base32 (RFC 4648): decode chuỗi secret dùng chung với
app Authenticator thành raw key bytes, và sinh secret ngẫu nhiên mới.

Decode không khắt khe về độ dài: otpauth không pad secret có độ dài không chia
hết cho 8, nên "=" ở cuối là tùy chọn và các bit thừa (không đủ 1 byte) bị bỏ.
"""

import logging
import os

from .errors import InvalidEncodingError
from .options import DEFAULT_SECRET_LENGTH, require_int

logger = logging.getLogger(__name__)

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_VALUES = {char: index for index, char in enumerate(ALPHABET)}


def base32_decode(text: str) -> bytes:
    """
    Decode secret Base32 thành raw bytes.

    - Bỏ padding "=" ở cuối, chuyển input sang chữ hoa
    - Mỗi ký tự góp 5 bit; byte đủ 8 bit được lấy từ đầu bit stream,
      phần bit còn lại (< 8) bị bỏ

    Arguments:
        text: Base32 secret (ví dụ "JBSWY3DPEHPK3PXP")

    Trả về:
        bytes: key đã decode

    Raises:
        InvalidEncodingError: nếu có ký tự ngoài A-Z / 2-7
    """
    if not isinstance(text, str):
        raise InvalidEncodingError(f"Base32 secret must be a string, got {type(text).__name__}")

    output = bytearray()
    buffer = 0
    bits = 0
    for char in text.rstrip("=").upper():
        value = _VALUES.get(char)
        if value is None:
            raise InvalidEncodingError("Invalid Base32 character in secret")
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            output.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    return bytes(output)


def generate_base32_secret(length: int = DEFAULT_SECRET_LENGTH) -> str:
    """
    Sinh secret Base32 ngẫu nhiên gồm `length` ký tự.

    - Mỗi ký tự lấy 1 byte từ os.urandom (CSPRNG) rồi mod 32
    - 256 chia hết cho 32 nên mọi ký tự có xác suất như nhau

    Arguments:
        length: số ký tự Base32 (32 -> key 160 bit)

    Trả về:
        str: Base32 secret, không có padding

    Raises:
        InvalidParameterError: nếu length không phải số nguyên dương
    """
    require_int("length", length, 1)
    secret = "".join(ALPHABET[byte % len(ALPHABET)] for byte in os.urandom(length))
    logger.debug("Generated a %d-character Base32 secret", length)
    return secret

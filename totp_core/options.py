"""
options.py — chọn thuật toán hash và các cấu trúc option dùng chung cho
HOTP/TOTP engine, URI builder và các lớp ngoài (CLI, Flask API).

Giá trị mặc định được resolve một lần ở đầu mỗi thao tác:

    time_step = 30 s, digits = 6, window = 1, algorithm = SHA-1,
    timestamp = thời điểm hiện tại (milliseconds).
"""

import dataclasses
import enum
import math
import time
from dataclasses import dataclass
from typing import Optional, Union

from .errors import InvalidParameterError, UnsupportedAlgorithmError

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6          # chuẩn: 6 chữ số
DEFAULT_TIME_STEP = 30      # TOTP step (giây)
DEFAULT_WINDOW = 1          # số counter kiểm tra mỗi phía của "now"
DEFAULT_SECRET_LENGTH = 32  # số ký tự Base32
# 10 ** 10 đã lớn hơn giá trị 31-bit sau truncate, dài hơn chỉ thêm số 0 ở đầu
MAX_DIGITS = 10
MAX_COUNTER = 2 ** 64 - 1


class HashAlgorithm(enum.Enum):
    """Các hàm hash HMAC dùng được để sinh OTP."""

    SHA1 = "SHA-1"
    SHA256 = "SHA-256"
    SHA512 = "SHA-512"

    @property
    def uri_name(self) -> str:
        """Tên dùng trong otpauth:// URI ("SHA1", "SHA256", "SHA512")."""
        return self.value.replace("-", "")

    @property
    def hashlib_name(self) -> str:
        return self.uri_name.lower()

    @property
    def digest_size(self) -> int:
        return {"SHA-1": 20, "SHA-256": 32, "SHA-512": 64}[self.value]

    @classmethod
    def parse(cls, value: Union["HashAlgorithm", str]) -> "HashAlgorithm":
        """
        Nhận enum member hoặc các cách viết phổ biến: "SHA-1", "SHA1", "sha1".

        Raises:
            UnsupportedAlgorithmError: với mọi giá trị khác (MD5, "SHA-384", None...)
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().upper().replace("-", "").replace("_", "")
            for member in cls:
                if member.uri_name == normalized:
                    return member
        raise UnsupportedAlgorithmError(f"Unsupported hash algorithm: {value!r}")


DEFAULT_ALGORITHM = HashAlgorithm.SHA1

AlgorithmLike = Union[HashAlgorithm, str]


# --- Validation helpers ----------------------------------------------------
def require_int(name: str, value, minimum: int, maximum: Optional[int] = None) -> int:
    """
    Kiểm tra `value` là int thật (không nhận bool) nằm trong [minimum, maximum].

    Trả về:
        int: chính `value` nếu hợp lệ

    Raises:
        InvalidParameterError: nếu sai kiểu hoặc ngoài khoảng
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidParameterError(f"{name} must be >= {minimum}, got {value}")
    if maximum is not None and value > maximum:
        raise InvalidParameterError(f"{name} must be <= {maximum}, got {value}")
    return value


def require_digits(digits) -> int:
    return require_int("digits", digits, 1, MAX_DIGITS)


def require_timestamp(timestamp) -> int:
    """Milliseconds từ epoch; float được làm tròn xuống thành ms nguyên."""
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        raise InvalidParameterError(f"timestamp must be a number of milliseconds, got {timestamp!r}")
    if not math.isfinite(timestamp) or timestamp < 0:
        raise InvalidParameterError(f"timestamp must be a non-negative finite number, got {timestamp!r}")
    return int(timestamp)


def now_millis() -> int:
    return int(time.time() * 1000)


# --- Option structures -----------------------------------------------------
@dataclass(frozen=True)
class OTPOptions:
    """
    Option cho sinh mã và xác minh mã.

    Attributes:
        time_step: chu kỳ TOTP (giây)
        digits: số chữ số của mã
        timestamp: milliseconds từ epoch; None nghĩa là "now"
        algorithm: hash HMAC (enum member hoặc tên như "SHA-256")
        window: số counter kiểm tra mỗi phía counter hiện tại (chỉ dùng khi verify)
    """

    time_step: int = DEFAULT_TIME_STEP
    digits: int = DEFAULT_DIGITS
    timestamp: Optional[float] = None
    algorithm: AlgorithmLike = DEFAULT_ALGORITHM
    window: int = DEFAULT_WINDOW

    def replace(self, **overrides) -> "OTPOptions":
        """Bản copy với một số field được thay; tên field lạ bị từ chối."""
        try:
            return dataclasses.replace(self, **overrides)
        except TypeError as e:
            raise InvalidParameterError(str(e)) from e

    def resolve(self) -> "OTPOptions":
        """
        Validate mọi field và gán `timestamp` = thời điểm hiện tại nếu chưa có.

        Bản trả về có algorithm là HashAlgorithm member và timestamp là int.
        """
        timestamp = now_millis() if self.timestamp is None else require_timestamp(self.timestamp)
        return OTPOptions(
            time_step=require_int("time_step", self.time_step, 1),
            digits=require_digits(self.digits),
            timestamp=timestamp,
            algorithm=HashAlgorithm.parse(self.algorithm),
            window=require_int("window", self.window, 0),
        )


@dataclass(frozen=True)
class ProvisioningOptions:
    """Mọi thứ app Authenticator cần để import một TOTP secret."""

    account_name: str
    issuer: str
    secret: str
    digits: int = DEFAULT_DIGITS
    period: int = DEFAULT_TIME_STEP
    algorithm: AlgorithmLike = DEFAULT_ALGORITHM

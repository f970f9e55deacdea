"""
errors.py — các loại lỗi mà OTP core raise ra.

Tất cả đều kế thừa ValueError, nên code cũ đang bắt ValueError quanh bước
decode secret vẫn chạy bình thường.
"""


class OTPError(ValueError):
    """Lớp gốc cho mọi lỗi của totp_core."""


class InvalidEncodingError(OTPError):
    """Secret Base32 chứa ký tự ngoài A-Z / 2-7 (hoặc decode ra rỗng)."""


class UnsupportedAlgorithmError(OTPError):
    """HMAC provider không tính được hash được yêu cầu."""


class InvalidParameterError(OTPError):
    """Tham số số (digits, time step, window, counter...) sai kiểu hoặc ngoài khoảng."""

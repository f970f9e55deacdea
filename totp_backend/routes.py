"""
OTP API ROUTES - FLASK BLUEPRINT

Đây là file chứa các JSON endpoint bọc quanh totp_core. Mỗi request tự gửi
secret cần dùng; server không giữ gì giữa các request.

VÍ DỤ:
curl -X POST http://localhost:5000/api/secret -H "Content-Type: application/json" -d "{}"
curl -X POST http://localhost:5000/api/totp -H "Content-Type: application/json" -d '{"secret": "JBSWY3DPEHPK3PXP"}'
curl -X POST http://localhost:5000/api/verify_totp -H "Content-Type: application/json" -d '{"secret": "JBSWY3DPEHPK3PXP", "code": "123456"}'
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from totp_core import (
    DEFAULT_DIGITS,
    DEFAULT_SECRET_LENGTH,
    DEFAULT_TIME_STEP,
    DEFAULT_WINDOW,
    OTPOptions,
    format_otpauth_uri,
    generate_code,
    generate_secret,
    hotp,
    qr_code_url,
    seconds_remaining,
    verify_code,
    verify_hotp,
)
from totp_core.options import DEFAULT_ALGORITHM, require_int
from totp_core.otp_core import decode_secret

logger = logging.getLogger(__name__)

otp_bp = Blueprint("otp", __name__, url_prefix="/api")


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def _require(data: dict, *names: str) -> None:
    missing = [name for name in names if data.get(name) is None]
    if missing:
        raise BadRequest(f"Missing required field(s): {', '.join(missing)}")


def _limited(data: dict, name: str, default: int, limit_key: str, minimum: int = 0) -> int:
    # giới hạn khối lượng việc một request được yêu cầu
    return require_int(name, data.get(name, default), minimum, current_app.config[limit_key])


def _options_from(data: dict, **extra) -> OTPOptions:
    return OTPOptions(
        time_step=data.get("period", DEFAULT_TIME_STEP),
        digits=data.get("digits", DEFAULT_DIGITS),
        timestamp=data.get("timestamp"),
        algorithm=data.get("algorithm", DEFAULT_ALGORITHM),
        **extra,
    )


@otp_bp.route("/secret", methods=["POST"])
def create_secret():
    """
    TẠO SECRET KEY NGẪU NHIÊN

      Body:   {"length": 32}   (optional)
      Output: {"secret": "JBSWY3DPEHPK3PXP..."}

    length bị giới hạn bởi OTP_MAX_SECRET_LENGTH.
    """
    data = _json_body()
    secret = generate_secret(
        _limited(data, "length", DEFAULT_SECRET_LENGTH, "OTP_MAX_SECRET_LENGTH", minimum=1)
    )
    logger.info("Generated a new secret (%d chars)", len(secret))
    return jsonify({"secret": secret}), 201


@otp_bp.route("/totp", methods=["POST"])
def get_totp():
    """
    MÃ TOTP HIỆN TẠI

      Body:   {"secret": "...", "digits": 6, "period": 30, "algorithm": "SHA-1",
               "timestamp": 1700000000000}
      Output: {"code": "123456", "remaining": 17, "period": 30}

    Route này không dùng window, nếu gửi lên sẽ bị bỏ qua.
    """
    data = _json_body()
    _require(data, "secret")
    options = _options_from(data).resolve()
    code = generate_code(data["secret"], options)
    return jsonify({
        "code": code,
        "remaining": seconds_remaining(options.time_step, options.timestamp),
        "period": options.time_step,
    })


@otp_bp.route("/hotp", methods=["POST"])
def get_hotp():
    """
    MÃ HOTP CHO MỘT COUNTER

      Body:   {"secret": "...", "counter": 1, "digits": 6, "algorithm": "SHA-1"}
      Output: {"code": "287082"}
    """
    data = _json_body()
    _require(data, "secret", "counter")
    code = hotp(
        decode_secret(data["secret"]),
        data["counter"],
        data.get("digits", DEFAULT_DIGITS),
        data.get("algorithm", DEFAULT_ALGORITHM),
    )
    return jsonify({"code": code})


@otp_bp.route("/verify_totp", methods=["POST"])
def verify_totp_route():
    """
    XÁC MINH MÃ TOTP

      Body:   {"code": "123456", "secret": "...", "window": 1, "digits": 6,
               "period": 30, "algorithm": "SHA-1"}
      Output: {"valid": true}  or  {"valid": false}

    window bị giới hạn bởi OTP_MAX_WINDOW.
    """
    data = _json_body()
    _require(data, "code", "secret")
    window = _limited(data, "window", DEFAULT_WINDOW, "OTP_MAX_WINDOW")
    valid = verify_code(data["code"], data["secret"], _options_from(data, window=window))
    logger.info("TOTP verification: %s", "valid" if valid else "invalid")
    return jsonify({"valid": valid})


@otp_bp.route("/verify_hotp", methods=["POST"])
def verify_hotp_route():
    """
    XÁC MINH MÃ HOTP

      Body:   {"code": "755224", "secret": "...", "counter": 0, "look_ahead": 1}
      Output: {"valid": true, "next_counter": 1}

    next_counter là counter caller nên lưu cho lần kiểm tra sau; nếu không
    khớp thì đó chính là counter đã gửi lên.
    look_ahead bị giới hạn bởi OTP_MAX_LOOK_AHEAD.
    """
    data = _json_body()
    _require(data, "code", "secret", "counter")
    valid, next_counter = verify_hotp(
        data["code"],
        data["secret"],
        data["counter"],
        look_ahead=_limited(data, "look_ahead", 1, "OTP_MAX_LOOK_AHEAD"),
        digits=data.get("digits", DEFAULT_DIGITS),
        algorithm=data.get("algorithm", DEFAULT_ALGORITHM),
    )
    logger.info("HOTP verification: %s", "valid" if valid else "invalid")
    return jsonify({"valid": valid, "next_counter": next_counter})


@otp_bp.route("/otpauth_uri", methods=["POST"])
def get_otpauth_uri():
    """
    OTPAUTH URI + URL ẢNH QR CHO APP AUTHENTICATOR

      Body:   {"account": "alice@example.com", "issuer": "MyApp", "secret": "...",
               "digits": 6, "period": 30, "algorithm": "SHA-1"}
      Output: {"uri": "otpauth://totp/...", "qr_url": "https://api.qrserver.com/..."}
    """
    data = _json_body()
    _require(data, "account", "secret")
    uri = format_otpauth_uri(
        data["account"],
        data.get("issuer", current_app.config["OTP_ISSUER"]),
        data["secret"],
        digits=data.get("digits", DEFAULT_DIGITS),
        period=data.get("period", DEFAULT_TIME_STEP),
        algorithm=data.get("algorithm", DEFAULT_ALGORITHM),
    )
    return jsonify({"uri": uri, "qr_url": qr_code_url(uri, current_app.config["OTP_QR_SIZE"])})

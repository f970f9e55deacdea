"""
FLASK APP ENTRY POINT - TOTP API SERVER
=======================================

File này khởi tạo Flask app, CORS, error handler và đăng ký OTP blueprint.

Server stateless: mỗi request tự gửi secret cần dùng, server không lưu gì.
Lưu secret theo user, rate limiting và chống replay là việc của ứng dụng
nhúng API này.

CẤU HÌNH (mặc định ở DEFAULT_CONFIG, override bằng biến môi trường có tiền tố
FLASK_, ví dụ FLASK_OTP_ISSUER="My Company", hoặc mapping truyền vào create_app):
- OTP_ISSUER: issuer dùng cho otpauth URI khi request không gửi
- OTP_QR_SIZE: kích thước (pixel) của ảnh QR
- OTP_MAX_WINDOW, OTP_MAX_LOOK_AHEAD, OTP_MAX_SECRET_LENGTH: giới hạn trên cho
  window, HOTP look-ahead và độ dài secret của mỗi request
- CORS_ORIGINS: origin được phép gọi API từ trình duyệt
"""
from typing import Any, Mapping, Optional

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from totp_core import OTPError, __version__
from totp_core.otp_uri import DEFAULT_QR_SIZE

DEFAULT_CONFIG = {
    "OTP_ISSUER": "otp-tool",
    "OTP_QR_SIZE": DEFAULT_QR_SIZE,
    "OTP_MAX_WINDOW": 10,
    "OTP_MAX_LOOK_AHEAD": 100,
    "OTP_MAX_SECRET_LENGTH": 256,
    "CORS_ORIGINS": "*",
}


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Tạo Flask app.

    Thứ tự ưu tiên: DEFAULT_CONFIG < biến môi trường FLASK_* < `config`.
    """
    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    app.config.from_prefixed_env()
    if config:
        app.config.update(config)

    # Cho phép frontend ở origin khác gọi API từ trình duyệt
    CORS(app, origins=app.config["CORS_ORIGINS"])

    from totp_backend.routes import otp_bp
    app.register_blueprint(otp_bp)

    @app.errorhandler(OTPError)
    def handle_otp_error(e: OTPError):
        # secret / option sai: lỗi của client, không bao giờ là 500
        app.logger.info("Rejected request: %s", type(e).__name__)
        return jsonify({"error": str(e), "kind": type(e).__name__}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description}), e.code

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "version": __version__})

    return app


app = create_app()


if __name__ == "__main__":
    # Server dev; production nên chạy bằng WSGI server (gunicorn, waitress...)
    app.run(host="0.0.0.0", port=5000)

"""
Flask JSON API (stateless) bọc quanh totp_core.

Chạy server dev bằng ``flask --app totp_backend.app run`` hoặc tự tạo instance
bằng ``create_app(config)``.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]

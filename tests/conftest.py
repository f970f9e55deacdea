import pytest

from totp_backend import create_app


@pytest.fixture
def app():
    return create_app({"TESTING": True, "OTP_ISSUER": "Test Issuer", "OTP_QR_SIZE": 128})


@pytest.fixture
def client(app):
    return app.test_client()

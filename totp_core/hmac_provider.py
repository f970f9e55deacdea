"""
hmac_provider.py — ký HMAC có key, dùng bởi HOTP engine.

Engine chỉ cần `sign(algorithm, key, message) -> bytes`. Có sẵn hai provider:

- HashlibHmacProvider: hmac + hashlib của standard library (mặc định)
- CryptographyHmacProvider: package `cryptography` (backend OpenSSL)

Cả hai trả về 20 / 32 / 64 bytes cho SHA-1 / SHA-256 / SHA-512 và raise
UnsupportedAlgorithmError với thuật toán khác.
"""

import hashlib
import hmac
from abc import ABC, abstractmethod

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

from .errors import UnsupportedAlgorithmError
from .options import AlgorithmLike, HashAlgorithm


class HmacProvider(ABC):
    """Interface của một primitive ký HMAC."""

    @abstractmethod
    def sign(self, algorithm: AlgorithmLike, key: bytes, message: bytes) -> bytes:
        ...


class HashlibHmacProvider(HmacProvider):
    def sign(self, algorithm: AlgorithmLike, key: bytes, message: bytes) -> bytes:
        algorithm = HashAlgorithm.parse(algorithm)
        try:
            return hmac.new(key, message, getattr(hashlib, algorithm.hashlib_name)).digest()
        except ValueError as e:  # digest bị tắt trong bản build OpenSSL này
            raise UnsupportedAlgorithmError(f"hashlib cannot compute HMAC-{algorithm.value}") from e


class CryptographyHmacProvider(HmacProvider):
    _HASHES = {
        HashAlgorithm.SHA1: hashes.SHA1,
        HashAlgorithm.SHA256: hashes.SHA256,
        HashAlgorithm.SHA512: hashes.SHA512,
    }

    def sign(self, algorithm: AlgorithmLike, key: bytes, message: bytes) -> bytes:
        algorithm = HashAlgorithm.parse(algorithm)
        try:
            signer = crypto_hmac.HMAC(key, self._HASHES[algorithm]())
        except UnsupportedAlgorithm as e:
            raise UnsupportedAlgorithmError(f"OpenSSL backend cannot compute HMAC-{algorithm.value}") from e
        signer.update(message)
        return signer.finalize()


DEFAULT_PROVIDER = HashlibHmacProvider()

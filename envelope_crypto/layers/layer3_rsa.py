"""
Layer 3 — ASYMMETRIC: RSA-2048 + OAEP key pairs
================================================
Generates the recipient key pair and turns key bytes back into key objects.

The key is RSA-2048 with public exponent 65537, used only with OAEP
(SHA-256 digest, MGF1-SHA-256, no label) and only to wrap a symmetric key.

Wire contract for the two halves:
  - public key:  DER SubjectPublicKeyInfo
  - private key: DER PKCS#8, unencrypted

These encodings are what the PEM layer armors as "RSA PUBLIC KEY" and
"RSA PRIVATE KEY". Any consumer holding the other half must read the same
encodings, so they are fixed.

Dependencies: cryptography >= 41.0
"""

import logging
from typing import NamedTuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ..config import RSA_KEY_SIZE, RSA_PUBLIC_EXPONENT
from ..errors import KeyExportError, KeyGenerationError, KeyImportError

logger = logging.getLogger(__name__)


class KeyPair(NamedTuple):
    public_key_bytes: bytes
    private_key_bytes: bytes


class KeyPairGenerator:
    """RSA-OAEP key pair generation and DER export."""

    KEY_SIZE        = RSA_KEY_SIZE
    PUBLIC_EXPONENT = RSA_PUBLIC_EXPONENT

    @classmethod
    def generate(cls) -> KeyPair:
        """
        Generate a fresh key pair. Every call yields independent keys.
        Raises KeyGenerationError or KeyExportError; nothing partial is returned.
        """
        try:
            private_key = rsa.generate_private_key(
                public_exponent=cls.PUBLIC_EXPONENT,
                key_size=cls.KEY_SIZE,
            )
        except Exception as exc:
            raise KeyGenerationError("Error generating keys.") from exc

        try:
            public_der = private_key.public_key().public_bytes(
                serialization.Encoding.DER,
                serialization.PublicFormat.SubjectPublicKeyInfo
            )
        except Exception as exc:
            raise KeyExportError("Error exporting public key.") from exc

        try:
            private_der = private_key.private_bytes(
                serialization.Encoding.DER,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption()
            )
        except Exception as exc:
            raise KeyExportError("Error exporting private key.") from exc

        logger.debug(f"Generated RSA-{cls.KEY_SIZE} key pair "
                     f"(public={len(public_der)}B private={len(private_der)}B)")
        return KeyPair(public_der, private_der)


def load_public_key(data: bytes) -> rsa.RSAPublicKey:
    """DER SubjectPublicKeyInfo → RSA public key, or KeyImportError."""
    try:
        key = serialization.load_der_public_key(bytes(data))
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyImportError("Public key is invalid.") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyImportError("Public key is invalid.")
    return key


def load_private_key(data: bytes) -> rsa.RSAPrivateKey:
    """DER PKCS#8 → RSA private key, or KeyImportError."""
    try:
        key = serialization.load_der_private_key(bytes(data), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyImportError("Private key is invalid.") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyImportError("Private key is invalid.")
    return key


def modulus_length(key) -> int:
    """Size in bytes of an RSA-OAEP output for `key` (public or private)."""
    return (key.key_size + 7) // 8

"""
Layer 2 — SYMMETRIC: AES-256-GCM
================================
AES-256 in Galois/Counter Mode, the bulk cipher of the envelope.

GCM provides authenticated encryption: it not only encrypts the data
but produces a 128-bit authentication tag. Any tampering with the
ciphertext is detected on decryption.

Key size: 256 bits (32 bytes).
IV:       96 bits (12 bytes), randomly generated per message.
Tag:      128 bits (16 bytes), appended to the ciphertext.

Unlike a self-contained bundle, the IV is handed back to the caller: the
envelope stores it in its own fixed-position field, between the wrapped
key and the ciphertext.

Dependencies: cryptography >= 41.0
"""

import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..config import AES_KEY_SIZE, IV_LENGTH, TAG_LENGTH
from ..errors import DecryptError, EncryptError, KeyGenerationError

logger = logging.getLogger(__name__)


class AESCipher:
    """AES-256-GCM with a caller-visible IV."""

    KEY_SIZE  = AES_KEY_SIZE
    IV_SIZE   = IV_LENGTH
    TAG_SIZE  = TAG_LENGTH

    def __init__(self, key: bytes):
        if len(key) != self.KEY_SIZE:
            raise ValueError(f"AES-256 key must be {self.KEY_SIZE} bytes.")
        self._key    = bytes(key)
        self._aesgcm = AESGCM(self._key)

    @property
    def key(self) -> bytes:
        return self._key

    @classmethod
    def generate(cls) -> "AESCipher":
        """Fresh random 256-bit key."""
        try:
            key = os.urandom(cls.KEY_SIZE)
        except (OSError, NotImplementedError) as exc:
            raise KeyGenerationError("Error generating symmetric key.") from exc
        return cls(key)

    @classmethod
    def new_iv(cls) -> bytes:
        return os.urandom(cls.IV_SIZE)

    def encrypt(self, iv: bytes, plaintext: bytes) -> bytes:
        """Returns ciphertext || tag."""
        try:
            return self._aesgcm.encrypt(iv, plaintext, None)
        except (ValueError, OverflowError) as exc:
            raise EncryptError() from exc

    def decrypt(self, iv: bytes, data: bytes) -> bytes:
        """
        Verify the tag and decrypt ciphertext || tag.
        Raises DecryptError on any authentication failure.
        """
        try:
            return self._aesgcm.decrypt(iv, data, None)
        except (InvalidTag, ValueError) as exc:
            logger.debug(f"GCM tag rejected ({len(data)} bytes)")
            raise DecryptError() from exc

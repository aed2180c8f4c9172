"""
Layer 4 — HYBRID: RSA-OAEP + AES-256-GCM (Envelope Encryption)
================================================================
RSA for the key, AES for the data.

RSA-OAEP can only encrypt a few hundred bytes, so the message itself is
encrypted with a fresh AES-256 key and only that key goes through RSA.
The recipient unwraps the AES key with their private key, then decrypts
the data.

Envelope format (positional, no length prefixes or delimiters):

    [wrapped key: modulus bytes][IV: 12][ciphertext || tag: len(plaintext) + 16]

For a 2048-bit key the envelope is 256 + 12 + len(plaintext) + 16 bytes.
The wrapped-key length comes from the recipient key, not from a constant,
so larger moduli work without a format change.

Both directions are fail-fast pipelines: the first stage that fails raises
and nothing after it runs. Unwrap failures are reported the same way
whatever their cause, so a caller cannot use them as a padding oracle.

Dependencies: cryptography >= 41.0
"""

import logging

from ..config import IV_LENGTH, oaep_padding
from ..errors import MalformedEnvelopeError, UnwrapError, WrapError
from .layer2_aes import AESCipher
from .layer3_rsa import load_private_key, load_public_key, modulus_length

logger = logging.getLogger(__name__)


class HybridCipher:
    """Stateless RSA-OAEP + AES-256-GCM envelope encryption."""

    IV_SIZE = IV_LENGTH

    @classmethod
    def encrypt(cls, plaintext: bytes, public_key_bytes: bytes) -> bytes:
        """
        Encrypt `plaintext` for the holder of the private half of
        `public_key_bytes` (DER SubjectPublicKeyInfo).
        Returns the envelope bytes.
        """
        # 1. Recipient key
        public_key = load_public_key(public_key_bytes)

        # 2. Fresh AES-256 session key and IV
        aes = AESCipher.generate()
        iv  = AESCipher.new_iv()

        # 3. Wrap the session key with RSA-OAEP
        try:
            wrapped_key = public_key.encrypt(aes.key, oaep_padding())
        except ValueError as exc:
            raise WrapError() from exc

        # 4. Encrypt the data with AES-256-GCM
        encrypted_data = aes.encrypt(iv, plaintext)

        logger.debug(f"Envelope: wrapped_key={len(wrapped_key)}B iv={len(iv)}B "
                     f"data={len(encrypted_data)}B")
        return wrapped_key + iv + encrypted_data

    @classmethod
    def decrypt(cls, envelope: bytes, private_key_bytes: bytes) -> bytes:
        """
        Decrypt an envelope produced by encrypt() with the matching
        private key (DER PKCS#8).
        """
        # 1. Recipient key
        private_key = load_private_key(private_key_bytes)

        # 2. Split the envelope
        key_len = modulus_length(private_key)
        if len(envelope) < key_len + cls.IV_SIZE:
            raise MalformedEnvelopeError()
        wrapped_key    = bytes(envelope[:key_len])
        iv             = bytes(envelope[key_len:key_len + cls.IV_SIZE])
        encrypted_data = bytes(envelope[key_len + cls.IV_SIZE:])

        # 3. Recover the AES key
        try:
            aes_key = private_key.decrypt(wrapped_key, oaep_padding())
            aes = AESCipher(aes_key)
        except ValueError:
            logger.debug("Symmetric key unwrap failed")
            raise UnwrapError() from None

        # 4. Verify and decrypt the data
        return aes.decrypt(iv, encrypted_data)

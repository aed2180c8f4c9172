"""
Error taxonomy for envelope_crypto.

Every failure raised by the library is an EnvelopeError. Each subclass
carries a default user-facing message; call sites pass a more specific one
where the context is known ("Public key is invalid." rather than "Key is
invalid."). Messages never contain key bytes or plaintext.
"""

from typing import Optional


class EnvelopeError(Exception):
    """Base class for every error raised by envelope_crypto."""

    default_message = "Operation failed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class ValidationError(EnvelopeError):
    """A required input field is empty or missing."""
    default_message = "Required input must be specified."


class MalformedPemError(EnvelopeError):
    """PEM text is not valid base64 once the armor lines are removed."""
    default_message = "PEM text is not valid base64."


class KeyImportError(EnvelopeError):
    """Key bytes are not a valid RSA key encoding of the expected kind."""
    default_message = "Key is invalid."


class KeyGenerationError(EnvelopeError):
    default_message = "Error generating keys."


class KeyExportError(EnvelopeError):
    default_message = "Error exporting keys."


class WrapError(EnvelopeError):
    default_message = "Error encrypting symmetric key."


class EncryptError(EnvelopeError):
    default_message = "Error encrypting data."


class UnwrapError(EnvelopeError):
    """
    RSA-OAEP unwrap failed.

    Raised both for a wrong private key and for a corrupted wrapped-key
    field; the two cases are never told apart.
    """
    default_message = "Error decrypting symmetric key."


class DecryptError(EnvelopeError):
    """AES-GCM authentication tag did not verify."""
    default_message = "Error decrypting data."


class MalformedEnvelopeError(EnvelopeError):
    """Envelope is shorter than its fixed-length prefix."""
    default_message = "Encrypted text is invalid."

"""
OPERATIONS  |  envelope_crypto
Generate keys, encrypt, decrypt, all over PEM text.

The three functions here are what a front end calls. Each validates its
text fields, runs the matching pipeline and returns an OperationResult
instead of raising, so a UI can show `result.message` directly while code
can branch on `result.kind`.

The functions share no state. Running two operations at once against the
same set of text fields is the caller's problem to prevent; the library
itself is safe to call from several threads.
"""

import logging
from typing import Any, NamedTuple, Optional

from .config import CIPHERTEXT_LABEL, PRIVATE_KEY_LABEL, PUBLIC_KEY_LABEL
from .errors import EnvelopeError, MalformedPemError, ValidationError
from .layers import layer1_pem as pem
from .layers.layer3_rsa import KeyPairGenerator
from .layers.layer4_hybrid import HybridCipher

logger = logging.getLogger(__name__)


class PemKeyPair(NamedTuple):
    public_key_pem: str
    private_key_pem: str


class OperationResult(NamedTuple):
    """Either a value or the EnvelopeError that stopped the operation."""

    value: Any = None
    error: Optional[EnvelopeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        return None if self.error is None else self.error.message

    @property
    def kind(self) -> Optional[str]:
        return None if self.error is None else self.error.kind

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


def _run(name: str, pipeline, *args) -> OperationResult:
    try:
        value = pipeline(*args)
    except EnvelopeError as e:
        logger.warning(f"{name} failed: {e.kind}")
        return OperationResult(error=e)
    logger.info(f"{name} succeeded")
    return OperationResult(value=value)


def _require(text: Optional[str], message: str) -> str:
    if text is None or text.strip() == "":
        raise ValidationError(message)
    return text.strip()


def _decode_field(text: str, message: str) -> bytes:
    try:
        return pem.decode(text)
    except MalformedPemError as e:
        raise MalformedPemError(message) from e


def _utf8(text: str) -> bytes:
    # Lone surrogates become U+FFFD, paired ones are joined
    text = text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
    return text.encode("utf-8")


# ── pipelines ────────────────────────────────────────────────────────────────
def _generate_keys() -> PemKeyPair:
    pair = KeyPairGenerator.generate()
    return PemKeyPair(
        public_key_pem=pem.encode(pair.public_key_bytes, PUBLIC_KEY_LABEL),
        private_key_pem=pem.encode(pair.private_key_bytes, PRIVATE_KEY_LABEL),
    )


def _encrypt(plaintext: Optional[str], public_key_pem: Optional[str]) -> str:
    public_key_pem = _require(public_key_pem, "Public key must be specified.")
    public_key = _decode_field(public_key_pem, "Public key is invalid.")
    _require(plaintext, "Text to encrypt must be specified.")

    envelope = HybridCipher.encrypt(_utf8(plaintext), public_key)
    return pem.encode(envelope, CIPHERTEXT_LABEL)


def _decrypt(ciphertext_pem: Optional[str], private_key_pem: Optional[str]) -> str:
    private_key_pem = _require(private_key_pem, "Private key must be specified.")
    private_key = _decode_field(private_key_pem, "Private key is invalid.")
    ciphertext_pem = _require(ciphertext_pem, "Text to decrypt must be specified.")
    envelope = _decode_field(ciphertext_pem, "Encrypted text is invalid.")

    plaintext = HybridCipher.decrypt(envelope, private_key)
    return plaintext.decode("utf-8", errors="replace")


# ── public API ───────────────────────────────────────────────────────────────
def generate_keys() -> OperationResult:
    """New key pair as PEM text. Value: PemKeyPair."""
    return _run("generate_keys", _generate_keys)


def encrypt(plaintext: str, public_key_pem: str) -> OperationResult:
    """Encrypt UTF-8 text for `public_key_pem`. Value: "RSA TEXT" PEM block."""
    return _run("encrypt", _encrypt, plaintext, public_key_pem)


def decrypt(ciphertext_pem: str, private_key_pem: str) -> OperationResult:
    """Decrypt an "RSA TEXT" PEM block. Value: the original text."""
    return _run("decrypt", _decrypt, ciphertext_pem, private_key_pem)

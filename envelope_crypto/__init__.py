"""
envelope_crypto
===============
Hybrid public-key encryption for text, exchanged as PEM armor.

A user generates an RSA key pair, encrypts text for a recipient's public
key, and the recipient decrypts with the matching private key. Keys and
ciphertexts are plain ASCII, ready to paste or save as files.

Layers:
    1  ARMOR       — Base64/PEM codec ("RSA PUBLIC KEY", "RSA PRIVATE KEY", "RSA TEXT")
    2  SYMMETRIC   — AES-256-GCM (bulk encryption)
    3  ASYMMETRIC  — RSA-2048 + OAEP/SHA-256 key pairs (SPKI / PKCS#8 DER)
    4  HYBRID      — wrapped key || IV || ciphertext+tag envelopes

    operations     — generate_keys / encrypt / decrypt over PEM text
    cli            — the `envelope-crypto` command

License: Unlicense
"""

__version__ = "1.0.0"

from .errors import (
    EnvelopeError,
    ValidationError,
    MalformedPemError,
    KeyImportError,
    KeyGenerationError,
    KeyExportError,
    WrapError,
    EncryptError,
    UnwrapError,
    DecryptError,
    MalformedEnvelopeError,
)
from .layers.layer1_pem     import PemBlock
from .layers.layer2_aes     import AESCipher
from .layers.layer3_rsa     import KeyPair, KeyPairGenerator
from .layers.layer4_hybrid  import HybridCipher
from .operations            import OperationResult, PemKeyPair, generate_keys, encrypt, decrypt

__all__ = [
    "EnvelopeError",
    "ValidationError",
    "MalformedPemError",
    "KeyImportError",
    "KeyGenerationError",
    "KeyExportError",
    "WrapError",
    "EncryptError",
    "UnwrapError",
    "DecryptError",
    "MalformedEnvelopeError",
    "PemBlock",
    "AESCipher",
    "KeyPair",
    "KeyPairGenerator",
    "HybridCipher",
    "OperationResult",
    "PemKeyPair",
    "generate_keys",
    "encrypt",
    "decrypt",
]

"""
envelope_crypto — Layer Test Suite
==================================
Run with:  python -m pytest tests/ -v
       or:  python tests/test_all_layers.py
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from envelope_crypto.errors import (
    DecryptError, EncryptError, KeyExportError, KeyGenerationError, KeyImportError,
    MalformedEnvelopeError, MalformedPemError, UnwrapError, WrapError,
)
from envelope_crypto.layers import layer2_aes, layer3_rsa
from envelope_crypto.layers import layer1_pem as pem
from envelope_crypto.layers.layer1_pem   import PemBlock
from envelope_crypto.layers.layer2_aes   import AESCipher
from envelope_crypto.layers.layer3_rsa   import KeyPairGenerator, load_private_key, load_public_key
from envelope_crypto.layers.layer4_hybrid import HybridCipher

MSG = b"Encrypt arbitrary text for a recipient's public key."

# Key generation is the slow part; two pairs are enough for every test here.
K1 = KeyPairGenerator.generate()
K2 = KeyPairGenerator.generate()

ENVELOPE_OVERHEAD = 256 + 12 + 16

# ── Layer 1: PEM ──────────────────────────────────────────────────────────────
@pytest.mark.parametrize("data", [b"", b"\x00", b"ab", bytes(range(256)) * 3])
def test_layer1_pem_roundtrip(data):
    assert pem.decode(pem.encode(data, "RSA TEXT")) == data

def test_layer1_pem_framing():
    text = pem.encode(b"\xff" * 100, "RSA TEXT")
    lines = text.split("\n")
    assert lines[0] == "-----BEGIN RSA TEXT-----"
    assert lines[-2] == "-----END RSA TEXT-----"
    assert lines[-1] == ""
    body = lines[1:-2]
    assert all(len(line) == 64 for line in body[:-1])
    assert 0 < len(body[-1]) <= 64

def test_layer1_pem_empty_body_has_no_body_lines():
    assert pem.encode(b"", "X") == "-----BEGIN X-----\n-----END X-----\n"

def test_layer1_pem_decode_tolerates_crlf_and_indent():
    text = pem.encode(MSG, "RSA TEXT").replace("\n", "\r\n")
    text = "\n".join("  " + line for line in text.split("\n"))
    assert pem.decode(text) == MSG

def test_layer1_pem_decode_ignores_label():
    text = pem.encode(MSG, "RSA PUBLIC KEY")
    assert pem.decode(text.replace("PUBLIC", "PRIVATE")) == MSG

@pytest.mark.parametrize("text", ["not a pem", "abc", "a*bc", "aGVsbG8", "-----BEGIN X-----\n!!!!\n-----END X-----"])
def test_layer1_pem_malformed(text):
    with pytest.raises(MalformedPemError):
        pem.decode(text)

def test_layer1_pem_block_label():
    block = PemBlock.from_text(PemBlock("RSA PRIVATE KEY", MSG).to_text())
    assert block == PemBlock("RSA PRIVATE KEY", MSG)
    assert PemBlock.from_text("aGVsbG8=").label is None

# ── Layer 2: AES-256-GCM ──────────────────────────────────────────────────────
def test_layer2_aes_roundtrip():
    a  = AESCipher.generate()
    iv = AESCipher.new_iv()
    ct = a.encrypt(iv, MSG)
    assert len(ct) == len(MSG) + 16
    assert a.decrypt(iv, ct) == MSG

def test_layer2_aes_tamper_detected():
    a  = AESCipher.generate()
    iv = AESCipher.new_iv()
    ct = bytearray(a.encrypt(iv, MSG))
    ct[5] ^= 0x01
    with pytest.raises(DecryptError):
        a.decrypt(iv, bytes(ct))

def test_layer2_aes_rejects_short_key():
    with pytest.raises(ValueError):
        AESCipher(b"\x00" * 16)

def test_layer2_aes_key_generation_failure(monkeypatch):
    def no_entropy(n):
        raise OSError("entropy source unavailable")
    monkeypatch.setattr(layer2_aes.os, "urandom", no_entropy)
    with pytest.raises(KeyGenerationError, match="Error generating symmetric key."):
        AESCipher.generate()

def test_layer2_aes_encrypt_failure():
    # GCM rejects an empty nonce
    with pytest.raises(EncryptError, match="Error encrypting data."):
        AESCipher.generate().encrypt(b"", MSG)

# ── Layer 3: RSA key pairs ────────────────────────────────────────────────────
def test_layer3_keypair_encodings():
    pub  = load_public_key(K1.public_key_bytes)
    priv = load_private_key(K1.private_key_bytes)
    assert pub.key_size == 2048
    assert pub.public_numbers().e == 65537
    assert priv.public_key().public_numbers() == pub.public_numbers()
    # DER SPKI and PKCS#8 exactly
    assert K1.public_key_bytes == pub.public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo)
    assert K1.private_key_bytes == priv.private_bytes(
        serialization.Encoding.DER, serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption())

def test_layer3_keypairs_are_independent():
    assert K1.public_key_bytes != K2.public_key_bytes
    assert K1.private_key_bytes != K2.private_key_bytes

def test_layer3_import_rejects_wrong_half():
    with pytest.raises(KeyImportError, match="Private key is invalid."):
        load_private_key(K1.public_key_bytes)
    with pytest.raises(KeyImportError, match="Public key is invalid."):
        load_public_key(K1.private_key_bytes)

def test_layer3_import_rejects_non_rsa_key():
    ec_key = ec.generate_private_key(ec.SECP256R1())
    ec_pub = ec_key.public_key().public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo)
    with pytest.raises(KeyImportError):
        load_public_key(ec_pub)

class _UnexportableKey:
    """Stands in for a generated key whose public or private export fails."""

    def __init__(self, real, broken):
        self._real   = real
        self._broken = broken

    def public_key(self):
        return self if self._broken == "public" else self._real.public_key()

    def public_bytes(self, *args):
        raise ValueError("export failed")

    def private_bytes(self, *args):
        if self._broken == "private":
            raise ValueError("export failed")
        return self._real.private_bytes(*args)

def test_layer3_generation_failure(monkeypatch):
    def no_entropy(**kwargs):
        raise ValueError("entropy source unavailable")
    monkeypatch.setattr(layer3_rsa.rsa, "generate_private_key", no_entropy)
    with pytest.raises(KeyGenerationError, match="Error generating keys."):
        KeyPairGenerator.generate()

@pytest.mark.parametrize("broken,message", [
    ("public",  "Error exporting public key."),
    ("private", "Error exporting private key."),
])
def test_layer3_export_failure(monkeypatch, broken, message):
    real = load_private_key(K1.private_key_bytes)
    monkeypatch.setattr(layer3_rsa.rsa, "generate_private_key",
                        lambda **kwargs: _UnexportableKey(real, broken))
    with pytest.raises(KeyExportError, match=message):
        KeyPairGenerator.generate()

# ── Layer 4: Hybrid envelope ──────────────────────────────────────────────────
@pytest.mark.parametrize("plaintext", [b"", b"x", MSG, b"X" * 100_000])
def test_layer4_hybrid_roundtrip(plaintext):
    env = HybridCipher.encrypt(plaintext, K1.public_key_bytes)
    assert len(env) == ENVELOPE_OVERHEAD + len(plaintext)
    assert HybridCipher.decrypt(env, K1.private_key_bytes) == plaintext

def test_layer4_hybrid_never_repeats():
    a = HybridCipher.encrypt(MSG, K1.public_key_bytes)
    b = HybridCipher.encrypt(MSG, K1.public_key_bytes)
    assert a != b
    assert a[256:268] != b[256:268]

@pytest.mark.parametrize("offset,bit", [(268, 0), (268 + 7, 3), (-17, 7), (-1, 0), (-8, 5)])
def test_layer4_hybrid_bit_flip_in_data(offset, bit):
    env = bytearray(HybridCipher.encrypt(MSG, K1.public_key_bytes))
    env[offset] ^= 1 << bit
    with pytest.raises(DecryptError, match="Error decrypting data."):
        HybridCipher.decrypt(bytes(env), K1.private_key_bytes)

def test_layer4_hybrid_bit_flip_in_iv():
    env = bytearray(HybridCipher.encrypt(MSG, K1.public_key_bytes))
    env[260] ^= 0x80
    with pytest.raises(DecryptError):
        HybridCipher.decrypt(bytes(env), K1.private_key_bytes)

def test_layer4_hybrid_bit_flip_in_wrapped_key():
    env = bytearray(HybridCipher.encrypt(MSG, K1.public_key_bytes))
    env[10] ^= 0x01
    with pytest.raises(UnwrapError):
        HybridCipher.decrypt(bytes(env), K1.private_key_bytes)

def test_layer4_hybrid_wrong_key():
    env = HybridCipher.encrypt(MSG, K1.public_key_bytes)
    with pytest.raises(UnwrapError, match="Error decrypting symmetric key."):
        HybridCipher.decrypt(env, K2.private_key_bytes)

def test_layer4_hybrid_short_envelope():
    with pytest.raises(MalformedEnvelopeError):
        HybridCipher.decrypt(b"\x00" * 267, K1.private_key_bytes)
    with pytest.raises(MalformedEnvelopeError):
        HybridCipher.decrypt(b"", K1.private_key_bytes)

def test_layer4_hybrid_truncated_tag():
    env = HybridCipher.encrypt(MSG, K1.public_key_bytes)
    with pytest.raises(DecryptError):
        HybridCipher.decrypt(env[:268 + 5], K1.private_key_bytes)

def test_layer4_hybrid_wrap_failure():
    # A 513-bit modulus is too small for OAEP-SHA256 to carry a 32-byte key
    n   = 3 * (2**255 - 19) * (2**256 - 189)
    pub = rsa.RSAPublicNumbers(65537, n).public_key().public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo)
    with pytest.raises(WrapError, match="Error encrypting symmetric key."):
        HybridCipher.encrypt(MSG, pub)

def test_layer4_hybrid_symmetric_key_failure(monkeypatch):
    def no_entropy(n):
        raise OSError("entropy source unavailable")
    monkeypatch.setattr(layer2_aes.os, "urandom", no_entropy)
    with pytest.raises(KeyGenerationError, match="Error generating symmetric key."):
        HybridCipher.encrypt(MSG, K1.public_key_bytes)

def test_layer4_hybrid_encrypt_failure(monkeypatch):
    monkeypatch.setattr(AESCipher, "new_iv", classmethod(lambda cls: b""))
    with pytest.raises(EncryptError, match="Error encrypting data."):
        HybridCipher.encrypt(MSG, K1.public_key_bytes)

def test_layer4_hybrid_invalid_keys():
    with pytest.raises(KeyImportError, match="Public key is invalid."):
        HybridCipher.encrypt(MSG, b"hello")
    env = HybridCipher.encrypt(MSG, K1.public_key_bytes)
    with pytest.raises(KeyImportError, match="Private key is invalid."):
        HybridCipher.decrypt(env, b"hello")

def test_layer4_hybrid_larger_modulus():
    # wrapped-key length follows the key, not a constant
    key = rsa.generate_private_key(public_exponent=65537, key_size=3072)
    pub = key.public_key().public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo)
    priv = key.private_bytes(
        serialization.Encoding.DER, serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption())
    env = HybridCipher.encrypt(MSG, pub)
    assert len(env) == 384 + 12 + len(MSG) + 16
    assert HybridCipher.decrypt(env, priv) == MSG

# ── run directly ─────────────────────────────────────────────────────────────
if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))

"""
Named parameters for the envelope format and the RSA/AES primitives.

Changing any of these values changes the wire format: envelopes and keys
produced with one set of values cannot be read with another.
"""

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

RSA_KEY_SIZE        = 2048
RSA_PUBLIC_EXPONENT = 65537

AES_KEY_SIZE = 32   # 256-bit key
IV_LENGTH    = 12   # 96-bit nonce (GCM standard)
TAG_LENGTH   = 16   # 128-bit authentication tag

PEM_DELIMITER   = "-----"
PEM_LINE_LENGTH = 64

PUBLIC_KEY_LABEL  = "RSA PUBLIC KEY"
PRIVATE_KEY_LABEL = "RSA PRIVATE KEY"
CIPHERTEXT_LABEL  = "RSA TEXT"


def oaep_padding() -> padding.OAEP:
    """RSA-OAEP with SHA-256 for both the digest and MGF1, no label."""
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None
    )

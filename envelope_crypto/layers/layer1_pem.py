"""
Layer 1 — ARMOR: Base64/PEM Codec
==================================
Turns raw byte buffers into copy-pasteable ASCII text and back.

Keys and envelopes travel as text, so every binary value leaving the
library is wrapped in a labeled PEM-style block:

    -----BEGIN RSA TEXT-----
    <base64, 64 characters per line>
    -----END RSA TEXT-----

Decoding is forgiving about the armor and strict about the body: any line
starting with "-----" is ignored, whatever its label, and the rest must be
valid base64. The label is never checked here. A public key pasted where a
private key belongs decodes fine and fails later, at key import.

Dependencies: standard library only
"""

import base64
import binascii
import logging
from typing import NamedTuple, Optional

from ..config import PEM_DELIMITER, PEM_LINE_LENGTH
from ..errors import MalformedPemError

logger = logging.getLogger(__name__)


def encode(data: bytes, label: str) -> str:
    """Armor `data` under `label`. Never fails."""
    body = base64.b64encode(bytes(data)).decode("ascii")
    lines = [f"{PEM_DELIMITER}BEGIN {label}{PEM_DELIMITER}"]
    lines += [body[i:i + PEM_LINE_LENGTH]
              for i in range(0, len(body), PEM_LINE_LENGTH)]
    lines.append(f"{PEM_DELIMITER}END {label}{PEM_DELIMITER}")
    return "\n".join(lines) + "\n"


def decode(text: str) -> bytes:
    """
    Strip the armor lines and base64-decode what is left.
    Raises MalformedPemError if the body is not valid base64.
    """
    body = "".join(
        stripped for stripped in (line.strip() for line in text.splitlines())
        if not stripped.startswith(PEM_DELIMITER)
    )
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        logger.debug(f"PEM body rejected ({len(body)} chars)")
        raise MalformedPemError() from exc


class PemBlock(NamedTuple):
    """A labeled binary value and its text form."""

    label: str
    body: bytes

    def to_text(self) -> str:
        return encode(self.body, self.label)

    @classmethod
    def from_text(cls, text: str) -> "PemBlock":
        """Decode `text`; the label is taken from the first BEGIN line, if any."""
        return cls(label=_find_label(text), body=decode(text))


def _find_label(text: str) -> Optional[str]:
    begin = f"{PEM_DELIMITER}BEGIN "
    for line in text.splitlines():
        line = line.strip()
        if line.startswith(begin):
            return line[len(begin):].rstrip("-").strip()
    return None

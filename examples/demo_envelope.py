"""
envelope_crypto — Live Demo: keys, envelope, armor, failures
=============================================================
Run:  python examples/demo_envelope.py

Walks through the three user-visible operations and the ways decryption
refuses bad input, with timing and sizes printed for each step.
"""

import sys, os, time
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from envelope_crypto import operations
from envelope_crypto.layers import layer1_pem as pem

LINE = "═" * 70
MSG  = "Meet me at the usual place at noon."

def header(step, name):
    print(f"\n{LINE}")
    print(f"  Step {step} — {name}")
    print(LINE)

def ok(label, value=""):
    print(f"  ✓  {label}{f': {value}' if value else ''}")

def refused(label, result):
    print(f"  ✗  {label:<28} {result.kind}: {result.message}")

# ─────────────────────────────────────────────────────────────────────────────
print(f"\n{LINE}")
print("  envelope_crypto — RSA-OAEP + AES-256-GCM Demo")
print(LINE)
print(f"  Message: {MSG}\n")

# ── STEP 1 ───────────────────────────────────────────────────────────────────
header(1, "Generate keys (RSA-2048, OAEP/SHA-256)")
t0   = time.perf_counter()
keys = operations.generate_keys().unwrap()
elapsed = time.perf_counter() - t0
ok("Public key",  f"{len(keys.public_key_pem)} chars of PEM")
ok("Private key", f"{len(keys.private_key_pem)} chars of PEM")
ok("Generated",   f"{elapsed*1000:.0f} ms")
print()
print(keys.public_key_pem)

# ── STEP 2 ───────────────────────────────────────────────────────────────────
header(2, "Encrypt (wrapped key || IV || AES-256-GCM)")
t0 = time.perf_counter()
ct = operations.encrypt(MSG, keys.public_key_pem).unwrap()
elapsed = time.perf_counter() - t0
envelope = pem.decode(ct)
ok("Envelope",  f"{len(envelope)} bytes (256 + 12 + {len(MSG.encode())} + 16)")
ok("Encrypted", f"{elapsed*1000:.1f} ms")
print()
print(ct)

# ── STEP 3 ───────────────────────────────────────────────────────────────────
header(3, "Decrypt")
t0 = time.perf_counter()
pt = operations.decrypt(ct, keys.private_key_pem).unwrap()
elapsed = time.perf_counter() - t0
ok("Decrypted", pt)
ok("Round-trip", f"{elapsed*1000:.1f} ms")

# ── STEP 4 ───────────────────────────────────────────────────────────────────
header(4, "Refusals")
other    = operations.generate_keys().unwrap()
tampered = bytearray(envelope)
tampered[-1] ^= 0x01

refused("Empty private key",    operations.decrypt(ct, ""))
refused("Garbage public key",   operations.encrypt(MSG, "not a pem"))
refused("Tampered ciphertext",  operations.decrypt(pem.encode(bytes(tampered), "RSA TEXT"),
                                                   keys.private_key_pem))
refused("Someone else's key",   operations.decrypt(ct, other.private_key_pem))
print(f"\n{LINE}\n")

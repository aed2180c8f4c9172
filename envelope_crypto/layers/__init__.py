"""Envelope layers, leaf-first: PEM armor, AES-256-GCM, RSA key pairs, hybrid envelope."""

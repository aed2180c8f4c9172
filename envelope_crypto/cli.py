"""
Command line front end: envelope-crypto genkeys | encrypt | decrypt.

Keys and encrypted text are read from and written to PEM files, or
stdin/stdout when no path is given. Existing files are never overwritten
and private keys are created readable by the owner only.
"""

import argparse
import logging
import os
import stat
import sys

from .errors import EnvelopeError
from .operations import decrypt, encrypt, generate_keys

log = logging.getLogger(__name__)


def _read_text(path):
    if path is None or path == '-':
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def _write_text(path, text, private=False):
    if path is None or path == '-':
        sys.stdout.write(text)
        return
    if os.path.exists(path):
        raise FileExistsError(f"Output file '{path}' already exists")
    if private:
        # Owner read/write only
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, stat.S_IRUSR | stat.S_IWUSR)
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(text)
    else:
        with open(path, 'x', encoding='utf-8') as f:
            f.write(text)


def _genkeys(args):
    keys = generate_keys().unwrap()
    if args.output is None:
        sys.stdout.write(keys.public_key_pem)
        sys.stdout.write(keys.private_key_pem)
        print("Your keys will be lost unless you save them.", file=sys.stderr)
        return

    public_key_file = f"{args.output}_public.pem"
    private_key_file = f"{args.output}_private.pem"
    if os.path.exists(private_key_file) or os.path.exists(public_key_file):
        raise FileExistsError(f"File '{private_key_file}' or '{public_key_file}' already exists.")
    _write_text(public_key_file, keys.public_key_pem)
    try:
        _write_text(private_key_file, keys.private_key_pem, private=True)
    except OSError:
        os.remove(public_key_file)
        raise
    print(f"RSA keys saved to '{private_key_file}' and '{public_key_file}'", file=sys.stderr)


def _encrypt(args):
    public_key_pem = _read_text(args.keyfile)
    text = _read_text(args.input)
    _write_text(args.output, encrypt(text, public_key_pem).unwrap())


def _decrypt(args):
    private_key_pem = _read_text(args.keyfile)
    ciphertext_pem = _read_text(args.input)
    _write_text(args.output, decrypt(ciphertext_pem, private_key_pem).unwrap())


def build_parser():
    parser = argparse.ArgumentParser(
        prog='envelope-crypto',
        description="RSA-OAEP + AES-256-GCM text encryption with PEM armor",
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    gen = sub.add_parser('genkeys', help='Generate an RSA key pair')
    gen.add_argument('-o', '--output', help="Prefix for '<prefix>_public.pem' and '<prefix>_private.pem' (default: print to stdout)")
    gen.set_defaults(func=_genkeys)

    enc = sub.add_parser('encrypt', help='Encrypt text for a public key')
    enc.add_argument('-k', '--keyfile', required=True, help='Recipient public key (PEM)')
    enc.add_argument('-i', '--input', help='Text file to encrypt (default: stdin)')
    enc.add_argument('-o', '--output', help='Output file for the encrypted text (default: stdout)')
    enc.set_defaults(func=_encrypt)

    dec = sub.add_parser('decrypt', help='Decrypt text with a private key')
    dec.add_argument('-k', '--keyfile', required=True, help='Private key (PEM)')
    dec.add_argument('-i', '--input', help='Encrypted text file (default: stdin)')
    dec.add_argument('-o', '--output', help='Output file for the decrypted text (default: stdout)')
    dec.set_defaults(func=_decrypt)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )
    log.debug(f"Running '{args.command}'")

    try:
        args.func(args)
    except (OSError, UnicodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except EnvelopeError as e:
        print(e.message, file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())

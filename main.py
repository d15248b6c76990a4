#!/usr/bin/env python3
"""
main.py

Command-line front end. Usage:

  python main.py b58encode <hex>          python main.py b58decode <text>
  python main.py checkencode <hex>        python main.py checkdecode <text>
  python main.py genkey
  python main.py pubkey <priv-hex> [--uncompressed]
  python main.py sign <hash-hex> <priv-hex> [--der] [--deterministic]
  python main.py recover <hash-hex> <sig-hex> [--uncompressed]
  python main.py combine <pub-hex> [<pub-hex> ...] [--uncompressed]

Binary results are printed as hex. Failures go to stderr with exit status 1.
"""

import argparse
import logging
import sys

import b58
import secp256k1
from config import LOG_DATEFMT, LOG_FORMAT


def _hex(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a hex string: {value!r}")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chaincrypt", description="Base58 and secp256k1 tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("b58encode", help="hex -> Base58")
    p.add_argument("data", type=_hex)
    p = sub.add_parser("b58decode", help="Base58 -> hex")
    p.add_argument("text")
    p = sub.add_parser("checkencode", help="hex -> Base58Check")
    p.add_argument("data", type=_hex)
    p = sub.add_parser("checkdecode", help="Base58Check -> hex")
    p.add_argument("text")

    sub.add_parser("genkey", help="new random private key")

    p = sub.add_parser("pubkey", help="public key of a private key")
    p.add_argument("private_key", type=_hex)
    p.add_argument("--uncompressed", action="store_true")

    p = sub.add_parser("sign", help="sign a 32-byte digest")
    p.add_argument("hash", type=_hex)
    p.add_argument("private_key", type=_hex)
    p.add_argument("--der", action="store_true", help="DER output instead of r||s||recid")
    p.add_argument("--deterministic", action="store_true", help="no extra entropy (plain RFC 6979)")

    p = sub.add_parser("recover", help="public key from digest + 65-byte signature")
    p.add_argument("hash", type=_hex)
    p.add_argument("signature", type=_hex)
    p.add_argument("--uncompressed", action="store_true")

    p = sub.add_parser("combine", help="sum of public keys")
    p.add_argument("public_keys", type=_hex, nargs="+")
    p.add_argument("--uncompressed", action="store_true")
    return parser

def run(args) -> object:
    cmd = args.command
    if cmd == "b58encode":
        return b58.encode(args.data)
    if cmd == "b58decode":
        return b58.decode(args.text)
    if cmd == "checkencode":
        return b58.check_encode(args.data)
    if cmd == "checkdecode":
        return b58.check_decode(args.text)
    if cmd == "genkey":
        return secp256k1.generate_private_key()
    if cmd == "pubkey":
        return secp256k1.derive_public_key(args.private_key, compressed=not args.uncompressed)
    if cmd == "sign":
        fn = secp256k1.signature_der if args.der else secp256k1.sign
        return fn(args.hash, args.private_key, use_extra_entropy=not args.deterministic)
    if cmd == "recover":
        return secp256k1.recover_public_key(args.hash, args.signature, compressed=not args.uncompressed)
    if cmd == "combine":
        return secp256k1.combine_public_keys(args.public_keys, output_compressed=not args.uncompressed)
    raise ValueError(f"unknown command {cmd}")

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT
    )

    result = run(args)
    if result is None:
        print(f"{args.command}: failed", file=sys.stderr)
        return 1
    print(result.hex() if isinstance(result, bytes) else result)
    return 0

if __name__ == "__main__":
    sys.exit(main())

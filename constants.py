#!/usr/bin/env python3
"""
constants.py

Byte-exact format constants: the Base58 alphabet, key and signature sizes,
public-key prefixes.
"""

# Base58 alphabet (no 0, O, I, l, + or /). Position is the digit value.
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BASE58_ZERO = BASE58_ALPHABET[0]

# Base58Check trailer length:
CHECKSUM_LENGTH = 4

# Empirical buffer bounds, approx. log(256)/log(58) and its inverse:
ENCODE_SIZE_NUM, ENCODE_SIZE_DEN = 138, 100
DECODE_SIZE_NUM, DECODE_SIZE_DEN = 733, 1000

# Keys and digests:
HASH_LENGTH = 32
PRIVATE_KEY_LENGTH = 32
ENTROPY_LENGTH = 32
COORDINATE_LENGTH = 32
COMPRESSED_PUBKEY_LENGTH = 33
UNCOMPRESSED_PUBKEY_LENGTH = 65

# Public-key prefixes:
PUBKEY_EVEN = 0x02
PUBKEY_ODD = 0x03
PUBKEY_UNCOMPRESSED = 0x04

# Signatures:
COMPACT_SIGNATURE_LENGTH = 64
RECOVERABLE_SIGNATURE_LENGTH = 65
MAX_RECOVERY_ID = 3

"""
Shared helpers for the test modules.
"""
import ecdsa

CURVE_ORDER = ecdsa.SECP256k1.order

# Compressed encoding of the generator point G (the public key of private key 1).
G_COMPRESSED = bytes.fromhex(
    "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
)


def key_from_int(value: int) -> bytes:
    """Private key bytes for a scalar."""
    return value.to_bytes(32, "big")


def negate_compressed(public_key: bytes) -> bytes:
    """-P for a compressed key: same x, opposite parity prefix."""
    return bytes([public_key[0] ^ 1]) + public_key[1:]

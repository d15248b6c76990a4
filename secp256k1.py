#!/usr/bin/env python3
"""
secp256k1.py

Recoverable ECDSA signatures and key utilities for secp256k1.

Wire formats:
- recoverable signature: r (32) || s (32) || recovery id (1), 65 bytes
- DER signature: SEQUENCE { INTEGER r, INTEGER s }
- public key: 33 bytes compressed (02/03 + x) or 65 bytes uncompressed (04 + x + y)

Signing never hands out a signature it has not checked: the public key
recovered from each candidate must equal the key derived from the private
key, otherwise the candidate is dropped and signing retries (bounded by a
RetryPolicy).

All public functions return None (False for predicates) on failure.
"""

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from config import LOGGER_NAME, MAX_ATTEMPTS, RETRY_BACKOFF
from constants import (
    COMPACT_SIGNATURE_LENGTH, COORDINATE_LENGTH, ENTROPY_LENGTH, HASH_LENGTH,
    PRIVATE_KEY_LENGTH, RECOVERABLE_SIGNATURE_LENGTH,
)
from crypto_utils import random_bytes
from ec_context import ECContext, get_context
from errors import (
    CryptoError, InvalidInput, InvalidKey, PrimitiveFailure, RetryExhausted,
    no_result, require_bytes,
)

logger = logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = MAX_ATTEMPTS
    backoff: float = RETRY_BACKOFF  # seconds between failed attempts

DEFAULT_POLICY = RetryPolicy()

@dataclass
class UnmarshaledSignature:
    v: int
    r: bytes
    s: bytes


# -------------------------------------------------------------------------
# HELPERS
# -------------------------------------------------------------------------
def constant_time_equal(a: Optional[bytes], b: Optional[bytes]) -> bool:
    """
    Compare two buffers without an early exit. Lengths are not secret, so
    unequal lengths return False straight away.
    """
    if a is None or b is None:
        return False
    if len(a) != len(b):
        return False
    diff = 0
    for x, y in zip(a, b):
        diff |= x ^ y
    return diff == 0

def _split_recoverable(ctx: ECContext, signature: bytes) -> Tuple[int, int, int]:
    signature = require_bytes(signature, "signature", RECOVERABLE_SIGNATURE_LENGTH)
    r, s = ctx.decode_compact(signature[:COMPACT_SIGNATURE_LENGTH])
    return r, s, signature[COMPACT_SIGNATURE_LENGTH]

def _checked_inputs(ctx: ECContext, hash32, private_key) -> Tuple[bytes, bytes]:
    hash32 = require_bytes(hash32, "hash", HASH_LENGTH)
    private_key = require_bytes(private_key, "private key", PRIVATE_KEY_LENGTH)
    if not ctx.is_valid_private_key(private_key):
        raise InvalidKey("private key is not in (0, n)")
    return hash32, private_key

def _sign_checked(ctx: ECContext, hash32: bytes, private_key: bytes,
                  use_extra_entropy: bool, policy: RetryPolicy) -> Tuple[int, int, int]:
    """
    The signing loop shared by sign() and signature_der(). Each attempt signs
    with fresh entropy (when asked) and keeps the result only if the key
    recovered from it matches the key derived from private_key.
    """
    expected = ctx.serialize_public_key(ctx.derive_point(private_key), compressed=False)

    for attempt in range(policy.max_attempts):
        if attempt and policy.backoff:
            time.sleep(policy.backoff)

        extra = b""
        if use_extra_entropy:
            extra = random_bytes(ENTROPY_LENGTH)
            if extra is None:
                continue
        try:
            r, s, recid = ctx.sign_recoverable(hash32, private_key,
                                               extra_entropy=extra, retry_gen=attempt)
            recovered = ctx.recover_point(hash32, r, s, recid)
            recovered = ctx.serialize_public_key(recovered, compressed=False)
        except PrimitiveFailure as e:
            logger.debug("Signing attempt %d failed: %s", attempt + 1, e)
            continue

        if not constant_time_equal(recovered, expected):
            logger.debug("Signing attempt %d: recovered key mismatch, retrying", attempt + 1)
            continue
        return r, s, recid

    raise RetryExhausted(f"no verified signature after {policy.max_attempts} attempts")


# -------------------------------------------------------------------------
# SIGNING
# -------------------------------------------------------------------------
@no_result()
def sign(hash32: bytes, private_key: bytes, use_extra_entropy: bool = True,
         policy: RetryPolicy = None, context: ECContext = None) -> Optional[bytes]:
    """
    Sign a 32-byte digest and return the 65-byte recoverable signature
    r || s || recid. With use_extra_entropy=False the result is the plain
    RFC 6979 deterministic signature.
    """
    ctx = context or get_context()
    hash32, private_key = _checked_inputs(ctx, hash32, private_key)
    r, s, recid = _sign_checked(ctx, hash32, private_key, use_extra_entropy, policy or DEFAULT_POLICY)
    return ctx.encode_compact(r, s) + bytes([recid])

@no_result()
def signature_der(hash32: bytes, private_key: bytes, use_extra_entropy: bool = True,
                  policy: RetryPolicy = None, context: ECContext = None) -> Optional[bytes]:
    """Like sign(), but return (r, s) DER-encoded, without the recovery id."""
    ctx = context or get_context()
    hash32, private_key = _checked_inputs(ctx, hash32, private_key)
    r, s, _ = _sign_checked(ctx, hash32, private_key, use_extra_entropy, policy or DEFAULT_POLICY)
    return ctx.encode_der(r, s)

@no_result(failure=False)
def verify(hash32: bytes, signature: bytes, public_key: bytes) -> bool:
    """
    Check a signature over hash32 against public_key. Accepts the 65-byte
    recoverable form (recovery id ignored), the 64-byte compact form or DER.
    """
    ctx = get_context()
    hash32 = require_bytes(hash32, "hash", HASH_LENGTH)
    signature = require_bytes(signature, "signature")
    point = ctx.parse_public_key(require_bytes(public_key, "public key"))
    if len(signature) == RECOVERABLE_SIGNATURE_LENGTH:
        r, s, _ = _split_recoverable(ctx, signature)
    elif len(signature) == COMPACT_SIGNATURE_LENGTH:
        r, s = ctx.decode_compact(signature)
    else:
        r, s = ctx.decode_der(signature)
    return ctx.verify(hash32, r, s, point)


# -------------------------------------------------------------------------
# PUBLIC KEYS
# -------------------------------------------------------------------------
@no_result()
def recover_public_key(hash32: bytes, signature: bytes, compressed: bool = True) -> Optional[bytes]:
    """Recover the signer's public key from a digest and a 65-byte signature."""
    ctx = get_context()
    hash32 = require_bytes(hash32, "hash", HASH_LENGTH)
    r, s, recid = _split_recoverable(ctx, signature)
    point = ctx.recover_point(hash32, r, s, recid)
    return ctx.serialize_public_key(point, compressed)

@no_result()
def combine_public_keys(public_keys: List[bytes], output_compressed: bool = True) -> Optional[bytes]:
    """
    Add public keys together (A + B + ...) and serialize the sum. Fails if
    the list is empty, any key does not parse, or the sum is at infinity.
    """
    if not public_keys:
        raise InvalidInput("no public keys to combine")
    ctx = get_context()
    points = [ctx.parse_public_key(require_bytes(k, "public key")) for k in public_keys]
    return ctx.serialize_public_key(ctx.add_points(points), output_compressed)

@no_result()
def derive_public_key(private_key: bytes, compressed: bool = True) -> Optional[bytes]:
    ctx = get_context()
    private_key = require_bytes(private_key, "private key", PRIVATE_KEY_LENGTH)
    return ctx.serialize_public_key(ctx.derive_point(private_key), compressed)


# -------------------------------------------------------------------------
# PRIVATE KEYS
# -------------------------------------------------------------------------
def is_valid_private_key(private_key: Optional[bytes]) -> bool:
    try:
        private_key = require_bytes(private_key, "private key", PRIVATE_KEY_LENGTH)
    except CryptoError:
        return False
    return get_context().is_valid_private_key(private_key)

@no_result()
def generate_private_key(policy: RetryPolicy = None) -> Optional[bytes]:
    """Draw 32 CSPRNG bytes until they form a valid key (0 < key < n)."""
    policy = policy or DEFAULT_POLICY
    for attempt in range(policy.max_attempts):
        if attempt and policy.backoff:
            time.sleep(policy.backoff)
        candidate = random_bytes(PRIVATE_KEY_LENGTH)
        if candidate is not None and is_valid_private_key(candidate):
            return candidate
    raise RetryExhausted(f"no valid private key after {policy.max_attempts} draws")


# -------------------------------------------------------------------------
# SIGNATURE LAYOUT
# -------------------------------------------------------------------------
@no_result()
def unmarshal_signature(signature: bytes) -> Optional[UnmarshaledSignature]:
    signature = require_bytes(signature, "signature", RECOVERABLE_SIGNATURE_LENGTH)
    return UnmarshaledSignature(
        v=signature[COMPACT_SIGNATURE_LENGTH],
        r=signature[:COORDINATE_LENGTH],
        s=signature[COORDINATE_LENGTH:COMPACT_SIGNATURE_LENGTH],
    )

@no_result()
def marshal_signature(v: Union[int, bytes], r: bytes, s: bytes) -> Optional[bytes]:
    """r || s || v. `v` is an int in 0..255 or raw bytes appended as-is."""
    if v is None:
        raise InvalidInput("v is missing")
    if isinstance(v, int):
        if not 0 <= v <= 0xFF:
            raise InvalidInput(f"v out of byte range: {v}")
        v = bytes([v])
    else:
        v = require_bytes(v, "v")
    r = require_bytes(r, "r", COORDINATE_LENGTH)
    s = require_bytes(s, "s", COORDINATE_LENGTH)
    return r + s + v

@no_result()
def der_to_compact(der: bytes) -> Optional[bytes]:
    """DER signature -> 64-byte r || s."""
    ctx = get_context()
    r, s = ctx.decode_der(require_bytes(der, "DER signature"))
    return ctx.encode_compact(r, s)

@no_result()
def compact_to_der(compact: bytes) -> Optional[bytes]:
    """64-byte r || s (or the 65-byte recoverable form) -> DER signature."""
    ctx = get_context()
    compact = require_bytes(compact, "signature")
    if len(compact) == RECOVERABLE_SIGNATURE_LENGTH:
        r, s, _ = _split_recoverable(ctx, compact)
    else:
        r, s = ctx.decode_compact(compact)
    return ctx.encode_der(r, s)

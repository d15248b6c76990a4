#!/usr/bin/env python3
"""
ec_context.py

The secp256k1 capability used by the signature layer, built on the `ecdsa`
package: key checks, point derivation, parsing and serialization, point
addition, RFC 6979 recoverable signing, public-key recovery and DER/compact
signature encodings.

One ECContext is built lazily per process (see get_context) and never
mutated afterwards. python-ecdsa guards its own precomputation tables, so
the shared instance can be used from several threads at once.

Errors from `ecdsa` are translated into the errors.py taxonomy here, so the
layers above never see library exceptions.
"""

import hashlib
import logging
import threading
from typing import Iterable, Tuple

import ecdsa
from ecdsa.ecdsa import Public_key, Signature
from ecdsa.ellipticcurve import INFINITY, PointJacobi
from ecdsa.numbertheory import SquareRootError, inverse_mod, square_root_mod_prime
from ecdsa.rfc6979 import generate_k
from ecdsa.util import (
    MalformedSignature, sigdecode_der, sigdecode_string, sigencode_der, sigencode_string,
)

from config import LOGGER_NAME
from constants import (
    COMPACT_SIGNATURE_LENGTH, COMPRESSED_PUBKEY_LENGTH, HASH_LENGTH,
    MAX_RECOVERY_ID, PRIVATE_KEY_LENGTH, UNCOMPRESSED_PUBKEY_LENGTH,
)
from errors import InvalidInput, InvalidKey, PrimitiveFailure

logger = logging.getLogger(LOGGER_NAME)


class ECContext:
    def __init__(self, curve=ecdsa.SECP256k1):
        self.curve = curve
        self.generator = curve.generator
        self.order = curve.order
        self.field_prime = curve.curve.p()

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------
    def signing_key(self, private_key: bytes) -> ecdsa.SigningKey:
        if private_key is None or len(private_key) != PRIVATE_KEY_LENGTH:
            raise InvalidKey("private key must be 32 bytes")
        try:
            return ecdsa.SigningKey.from_string(bytes(private_key), curve=self.curve)
        except ecdsa.MalformedPointError as e:
            raise InvalidKey(str(e)) from e

    def is_valid_private_key(self, private_key: bytes) -> bool:
        """True iff the key is 32 bytes and 0 < key < n."""
        try:
            self.signing_key(private_key)
        except InvalidKey:
            return False
        return True

    def derive_point(self, private_key: bytes):
        return self.signing_key(private_key).verifying_key.pubkey.point

    def parse_public_key(self, data: bytes):
        if len(data) not in (COMPRESSED_PUBKEY_LENGTH, UNCOMPRESSED_PUBKEY_LENGTH):
            raise InvalidKey(f"unsupported public key length {len(data)}")
        try:
            vk = ecdsa.VerifyingKey.from_string(bytes(data), curve=self.curve)
        except ecdsa.MalformedPointError as e:
            raise InvalidKey(str(e)) from e
        return vk.pubkey.point

    def serialize_public_key(self, point, compressed: bool) -> bytes:
        if point == INFINITY:
            raise PrimitiveFailure("cannot serialize the point at infinity")
        vk = ecdsa.VerifyingKey.from_public_point(point, curve=self.curve, validate_point=False)
        return vk.to_string("compressed" if compressed else "uncompressed")

    def add_points(self, points: Iterable):
        points = list(points)
        if not points:
            raise InvalidInput("no points to add")
        total = points[0]
        for p in points[1:]:
            total = total + p
        if total == INFINITY:
            raise PrimitiveFailure("point sum is at infinity")
        return total

    # ------------------------------------------------------------------
    # Signatures
    # ------------------------------------------------------------------
    def _digest_scalar(self, digest: bytes) -> int:
        if digest is None or len(digest) != HASH_LENGTH:
            raise InvalidInput("digest must be 32 bytes")
        return int.from_bytes(digest, "big") % self.order

    def _check_rs(self, r: int, s: int) -> None:
        if not (0 < r < self.order and 0 < s < self.order):
            raise InvalidInput("signature values out of range")

    def sign_recoverable(self, digest: bytes, private_key: bytes,
                         extra_entropy: bytes = b"", retry_gen: int = 0) -> Tuple[int, int, int]:
        """
        RFC 6979 signature with recovery id. `extra_entropy` is mixed into the
        nonce derivation; `retry_gen` selects the next deterministic nonce.
        Returns (r, s, recid) with s normalized to the lower half of the order.
        """
        e = self._digest_scalar(digest)
        d = self.signing_key(private_key).privkey.secret_multiplier
        n = self.order

        k = generate_k(n, d, hashlib.sha256, bytes(digest),
                       retry_gen=retry_gen, extra_entropy=extra_entropy)
        R = self.generator * k
        if R == INFINITY:
            raise PrimitiveFailure("nonce point at infinity")
        x, y = R.x(), R.y()
        r = x % n
        if r == 0:
            raise PrimitiveFailure("r is zero")
        s = inverse_mod(k, n) * (e + r * d) % n
        if s == 0:
            raise PrimitiveFailure("s is zero")

        recid = (y & 1) | (2 if x >= n else 0)
        if s > n // 2:
            s = n - s
            recid ^= 1
        return r, s, recid

    def recover_point(self, digest: bytes, r: int, s: int, recid: int):
        """Public key point Q such that (r, s) is Q's signature over digest."""
        e = self._digest_scalar(digest)
        self._check_rs(r, s)
        if not 0 <= recid <= MAX_RECOVERY_ID:
            raise InvalidInput(f"recovery id {recid} out of range")

        n, p = self.order, self.field_prime
        curve = self.curve.curve
        x = r + (recid >> 1) * n
        if x >= p:
            raise PrimitiveFailure("R.x beyond field prime")
        alpha = (pow(x, 3, p) + curve.a() * x + curve.b()) % p
        try:
            beta = square_root_mod_prime(alpha, p)
        except SquareRootError as e_:
            raise PrimitiveFailure("r is not the x of a curve point") from e_
        y = beta if (beta & 1) == (recid & 1) else p - beta

        R = PointJacobi(curve, x, y, 1, n)
        Q = (R * s + self.generator * (-e % n)) * inverse_mod(r, n)
        if Q == INFINITY:
            raise PrimitiveFailure("recovered point at infinity")
        return Q

    def verify(self, digest: bytes, r: int, s: int, point) -> bool:
        e = self._digest_scalar(digest)
        self._check_rs(r, s)
        pub = Public_key(self.generator, point, verify=False)
        return pub.verifies(e, Signature(r, s))

    def encode_der(self, r: int, s: int) -> bytes:
        self._check_rs(r, s)
        return sigencode_der(r, s, self.order)

    def decode_der(self, der: bytes) -> Tuple[int, int]:
        try:
            r, s = sigdecode_der(bytes(der), self.order)
        except ecdsa.UnexpectedDER as e:
            raise InvalidInput(f"bad DER signature: {e}") from e
        self._check_rs(r, s)
        return r, s

    def encode_compact(self, r: int, s: int) -> bytes:
        self._check_rs(r, s)
        return sigencode_string(r, s, self.order)

    def decode_compact(self, data: bytes) -> Tuple[int, int]:
        if len(data) != COMPACT_SIGNATURE_LENGTH:
            raise InvalidInput("compact signature must be 64 bytes")
        try:
            r, s = sigdecode_string(bytes(data), self.order)
        except MalformedSignature as e:
            raise InvalidInput(str(e)) from e
        self._check_rs(r, s)
        return r, s


_context = None
_context_lock = threading.Lock()

def get_context() -> ECContext:
    """Process-wide secp256k1 context, built on first use."""
    global _context
    if _context is None:
        with _context_lock:
            if _context is None:
                logger.debug("Creating secp256k1 context")
                _context = ECContext()
    return _context

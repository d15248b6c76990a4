#!/usr/bin/env python3
"""
b58.py

Base58 and Base58Check text encoding.

Base58 treats a byte string as one big-endian number and writes it in base
58 using an alphabet without look-alike characters (0, O, I, l) and without
'+' or '/'. Leading zero bytes carry no magnitude, so each one is written as
a literal '1' instead.

Base58Check appends the first 4 bytes of double-SHA256(payload) before
encoding, so a mistyped string is rejected on decode instead of silently
yielding a different payload.

The conversion does not use Python's big integers: it keeps a fixed-size
digit buffer and pushes a multiply-and-add carry through it for every input
digit, like the reference Bitcoin implementation.
"""

from typing import Callable, List, Optional, Sequence

from constants import (
    BASE58_ALPHABET, BASE58_ZERO, CHECKSUM_LENGTH,
    ENCODE_SIZE_NUM, ENCODE_SIZE_DEN, DECODE_SIZE_NUM, DECODE_SIZE_DEN,
)
from crypto_utils import double_sha256
from errors import DecodeFailure, InvalidInput, no_result, require_bytes

_DIGIT_VALUES = {ch: i for i, ch in enumerate(BASE58_ALPHABET)}


def _count_leading(seq: Sequence, zero) -> int:
    n = 0
    for item in seq:
        if item != zero:
            break
        n += 1
    return n

def _convert(digits: Sequence[int], from_base: int, to_base: int, size: int) -> List[int]:
    """
    Re-express big-endian `digits` (base `from_base`) as big-endian digits in
    base `to_base`, using a buffer of `size` positions. Leading zero digits
    of the buffer are stripped from the result.
    """
    buf = [0] * size
    length = 0  # positions in use, counted from the least significant end
    for d in digits:
        carry = d
        i = 0
        pos = size - 1
        while (carry or i < length) and pos >= 0:
            carry += from_base * buf[pos]
            buf[pos] = carry % to_base
            carry //= to_base
            pos -= 1
            i += 1
        if carry:
            # The size bounds make this unreachable for well-formed input.
            raise DecodeFailure(f"digit buffer of {size} overflowed")
        length = i

    start = _count_leading(buf, 0)
    return buf[start:]

@no_result()
def encode(data: bytes) -> str:
    """Encode bytes as a Base58 string. Empty input gives an empty string."""
    data = require_bytes(data, "data")
    zeros = _count_leading(data, 0)
    body = data[zeros:]
    size = len(body) * ENCODE_SIZE_NUM // ENCODE_SIZE_DEN + 1
    digits = _convert(body, 256, 58, size)
    return BASE58_ZERO * zeros + "".join(BASE58_ALPHABET[d] for d in digits)

@no_result()
def decode(text: str) -> Optional[bytes]:
    """
    Decode a Base58 string. Surrounding whitespace is ignored.
    Returns None for an empty string or any character outside the alphabet.
    """
    if not isinstance(text, str):
        raise InvalidInput("Base58 input must be a str")
    text = text.strip()
    if not text:
        raise DecodeFailure("empty Base58 string")

    values = []
    for ch in text:
        v = _DIGIT_VALUES.get(ch)
        if v is None:
            raise DecodeFailure(f"invalid Base58 character {ch!r}")
        values.append(v)

    zeros = _count_leading(values, 0)
    body = values[zeros:]
    size = len(body) * DECODE_SIZE_NUM // DECODE_SIZE_DEN + 1
    digits = _convert(body, 58, 256, size)
    return b"\x00" * zeros + bytes(digits)

def checksum(payload: bytes, hash_fn: Callable[[bytes], bytes] = double_sha256) -> bytes:
    return hash_fn(payload)[:CHECKSUM_LENGTH]

@no_result()
def check_encode(payload: bytes, hash_fn: Callable[[bytes], bytes] = double_sha256) -> str:
    """
    Base58Check: encode(payload + first 4 bytes of hash_fn(payload)).
    hash_fn defaults to double-SHA256.
    """
    payload = require_bytes(payload, "payload")
    return encode(payload + checksum(payload, hash_fn))

@no_result()
def check_decode(text: str, hash_fn: Callable[[bytes], bytes] = double_sha256) -> Optional[bytes]:
    """
    Decode a Base58Check string and verify its checksum. Returns the payload,
    or None on any decode failure, short input or checksum mismatch.
    """
    full = decode(text)
    if full is None:
        raise DecodeFailure("not a Base58 string")
    if len(full) <= CHECKSUM_LENGTH:
        raise DecodeFailure(f"Base58Check data too short ({len(full)} bytes)")
    payload, carried = full[:-CHECKSUM_LENGTH], full[-CHECKSUM_LENGTH:]
    if checksum(payload, hash_fn) != carried:
        raise DecodeFailure("Invalid base58 checksum")
    return payload

#!/usr/bin/env python3
"""
crypto_utils.py

Hashing, Base64 and CSPRNG helpers: sha256, double-sha256, sha512, random bytes, etc.
"""

import base64
import binascii
import hashlib
import logging
import os
from typing import Optional, Union

from config import LOGGER_NAME, MAX_ATTEMPTS

logger = logging.getLogger(LOGGER_NAME)


def sha256(b: bytes) -> bytes:
    return hashlib.sha256(b).digest()

def double_sha256(b: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(b).digest()).digest()

def sha512(b: bytes) -> bytes:
    return hashlib.sha512(b).digest()

def double_sha512(b: bytes) -> bytes:
    return hashlib.sha512(hashlib.sha512(b).digest()).digest()

def random_bytes(length: int, attempts: int = MAX_ATTEMPTS) -> Optional[bytes]:
    """
    Read `length` bytes from the OS CSPRNG. A failed read is retried up to
    `attempts` times; returns None when every read fails or length < 1.
    """
    if length < 1:
        return None
    for _ in range(attempts):
        try:
            return os.urandom(length)
        except OSError as e:
            logger.debug("CSPRNG read failed: %s", e)
    logger.warning("CSPRNG gave no data after %d attempts", attempts)
    return None

def base64_encode(data: Optional[bytes]) -> Optional[bytes]:
    if data is None:
        return None
    return base64.b64encode(data)

def base64_decode(data: Union[str, bytes, None]) -> Optional[bytes]:
    """
    Decode Base64, tolerating missing '=' padding. Returns None on malformed input.
    """
    if data is None:
        return None
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("ascii")
        except UnicodeDecodeError:
            return None
    data = data.strip().rstrip("=")
    data += "=" * (-len(data) % 4)
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        return None

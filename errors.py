#!/usr/bin/env python3
"""
errors.py

Failure taxonomy. Internal helpers raise these; public operations are wrapped
with `no_result`, so callers only ever see a missing result (None / False).
"""

import functools
import logging

from config import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class CryptoError(Exception):
    """Base class for every failure raised inside this package."""


class InvalidInput(CryptoError):
    """Missing argument or wrong-length buffer."""


class InvalidKey(CryptoError):
    """Private key outside (0, n) or public key that does not parse."""


class DecodeFailure(CryptoError):
    """Non-alphabet character, checksum mismatch or undersized payload."""


class PrimitiveFailure(CryptoError):
    """An external EC, hash or random call failed."""


class RetryExhausted(CryptoError):
    """A bounded retry loop did not converge."""


def no_result(failure=None):
    """
    Decorator: turn a raised CryptoError into `failure` (None by default).
    """
    def wrap(fn):
        @functools.wraps(fn)
        def inner(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except RetryExhausted as e:
                logger.warning("%s: %s", fn.__name__, e)
            except CryptoError as e:
                logger.debug("%s failed (%s): %s", fn.__name__, type(e).__name__, e)
            return failure
        return inner
    return wrap


def require_bytes(value, name: str, length: int = None) -> bytes:
    """Check that `value` is bytes-like (and of `length`, if given); return a bytes copy."""
    if value is None:
        raise InvalidInput(f"{name} is missing")
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidInput(f"{name} must be bytes, got {type(value).__name__}")
    value = bytes(value)
    if length is not None and len(value) != length:
        raise InvalidInput(f"{name} must be {length} bytes, got {len(value)}")
    return value

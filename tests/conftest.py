"""
Project-wide pytest fixtures.
"""
import hashlib
import os
import sys

import pytest

# Modules live at the project root (flat layout).
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


@pytest.fixture
def digest() -> bytes:
    """A fixed 32-byte message digest."""
    return hashlib.sha256(b"chaincrypt test message").digest()


@pytest.fixture
def private_key() -> bytes:
    """A fixed, valid private key."""
    return hashlib.sha256(b"chaincrypt test key").digest()


@pytest.fixture
def other_private_key() -> bytes:
    return hashlib.sha256(b"chaincrypt other key").digest()

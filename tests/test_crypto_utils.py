"""
Tests for hashing, Base64 and CSPRNG helpers.
"""
import crypto_utils


class TestHashing:
    """Tests for the SHA-2 helpers."""

    def test_sha256(self):
        assert crypto_utils.sha256(b"abc").hex() == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_double_sha256(self):
        assert crypto_utils.double_sha256(b"").hex() == (
            "5df6e0e2761359d30a8275058e299fcc0381534545f55cf43e41983f5d4c9456"
        )
        assert crypto_utils.double_sha256(b"abc") == crypto_utils.sha256(crypto_utils.sha256(b"abc"))

    def test_sha512(self):
        digest = crypto_utils.sha512(b"abc")
        assert len(digest) == 64
        assert digest.hex().startswith("ddaf35a193617aba")

    def test_double_sha512(self):
        assert crypto_utils.double_sha512(b"abc") == crypto_utils.sha512(crypto_utils.sha512(b"abc"))


class TestRandomBytes:
    """Tests for the CSPRNG helper."""

    def test_length(self):
        data = crypto_utils.random_bytes(32)
        assert isinstance(data, bytes) and len(data) == 32
        assert crypto_utils.random_bytes(32) != data

    def test_non_positive_length(self):
        assert crypto_utils.random_bytes(0) is None
        assert crypto_utils.random_bytes(-1) is None

    def test_retries_then_gives_up(self, monkeypatch):
        calls = []

        def broken(length):
            calls.append(length)
            raise OSError("no entropy")

        monkeypatch.setattr(crypto_utils.os, "urandom", broken)
        assert crypto_utils.random_bytes(16, attempts=5) is None
        assert calls == [16] * 5

    def test_recovers_after_failure(self, monkeypatch):
        outcomes = [OSError("busy"), b"\x07" * 4]

        def flaky(length):
            result = outcomes.pop(0)
            if isinstance(result, Exception):
                raise result
            return result

        monkeypatch.setattr(crypto_utils.os, "urandom", flaky)
        assert crypto_utils.random_bytes(4) == b"\x07" * 4


class TestBase64:
    """Tests for the Base64 helpers."""

    def test_encode(self):
        assert crypto_utils.base64_encode(b"hello") == b"aGVsbG8="
        assert crypto_utils.base64_encode(None) is None

    def test_decode(self):
        assert crypto_utils.base64_decode("aGVsbG8=") == b"hello"
        assert crypto_utils.base64_decode(b"aGVsbG8=") == b"hello"

    def test_decode_repairs_padding(self):
        assert crypto_utils.base64_decode("aGVsbG8") == b"hello"
        assert crypto_utils.base64_decode("aGk") == b"hi"

    def test_decode_malformed(self):
        assert crypto_utils.base64_decode("!!!!") is None
        assert crypto_utils.base64_decode("a") is None
        assert crypto_utils.base64_decode(b"\xff\xfe") is None
        assert crypto_utils.base64_decode(None) is None

"""
Tests for the command-line front end.
"""
import pytest

import main
import secp256k1
from tests.common import G_COMPRESSED, key_from_int

DIGEST_HEX = "ab" * 32


class TestCommands:
    """End-to-end runs of main.main()."""

    def test_b58_round_trip(self, capsys):
        assert main.main(["b58encode", "68656c6c6f20776f726c64"]) == 0
        assert capsys.readouterr().out.strip() == "StV1DL6CwTryKyV"
        assert main.main(["b58decode", "StV1DL6CwTryKyV"]) == 0
        assert capsys.readouterr().out.strip() == "68656c6c6f20776f726c64"

    def test_check_round_trip(self, capsys):
        assert main.main(["checkencode", "00" * 21]) == 0
        assert capsys.readouterr().out.strip() == "1111111111111111111114oLvT2"
        assert main.main(["checkdecode", "1111111111111111111114oLvT2"]) == 0
        assert capsys.readouterr().out.strip() == "00" * 21

    def test_checkdecode_failure(self, capsys):
        assert main.main(["checkdecode", "1111111111111111111114oLvT3"]) == 1
        assert "failed" in capsys.readouterr().err

    def test_genkey(self, capsys):
        assert main.main(["genkey"]) == 0
        key = bytes.fromhex(capsys.readouterr().out.strip())
        assert secp256k1.is_valid_private_key(key)

    def test_pubkey(self, capsys):
        assert main.main(["pubkey", key_from_int(1).hex()]) == 0
        assert capsys.readouterr().out.strip() == G_COMPRESSED.hex()
        assert main.main(["pubkey", key_from_int(1).hex(), "--uncompressed"]) == 0
        assert capsys.readouterr().out.strip().startswith("04" + G_COMPRESSED[1:].hex())

    def test_sign_and_recover(self, capsys, private_key):
        assert main.main(["sign", DIGEST_HEX, private_key.hex()]) == 0
        sig = capsys.readouterr().out.strip()
        assert len(bytes.fromhex(sig)) == 65
        assert main.main(["recover", DIGEST_HEX, sig]) == 0
        assert bytes.fromhex(capsys.readouterr().out.strip()) == secp256k1.derive_public_key(private_key)

    def test_sign_der_deterministic(self, capsys, private_key):
        assert main.main(["sign", DIGEST_HEX, private_key.hex(), "--der", "--deterministic"]) == 0
        der = bytes.fromhex(capsys.readouterr().out.strip())
        expected = secp256k1.signature_der(bytes.fromhex(DIGEST_HEX), private_key, use_extra_entropy=False)
        assert der == expected

    def test_sign_invalid_key(self, capsys):
        assert main.main(["sign", DIGEST_HEX, "00" * 32]) == 1
        assert "sign: failed" in capsys.readouterr().err

    def test_combine(self, capsys):
        one, two = (secp256k1.derive_public_key(key_from_int(i)).hex() for i in (1, 2))
        assert main.main(["combine", one, two]) == 0
        assert bytes.fromhex(capsys.readouterr().out.strip()) == \
            secp256k1.derive_public_key(key_from_int(3))

    def test_bad_hex_is_usage_error(self):
        with pytest.raises(SystemExit) as exc:
            main.main(["b58encode", "zz"])
        assert exc.value.code == 2

import pytest

from nokanban.core.security import Pbkdf2PinHasher, hash_pin, verify_pin


def test_hash_has_four_components(hasher: Pbkdf2PinHasher) -> None:
    algorithm, iterations, salt_hex, digest_hex = hasher.hash("1234").split(":")

    assert algorithm == "pbkdf2"
    assert iterations == "1000"
    assert len(bytes.fromhex(salt_hex)) == 16
    assert len(bytes.fromhex(digest_hex)) == 32


def test_verify_round_trip(hasher: Pbkdf2PinHasher) -> None:
    stored = hasher.hash("1234")

    assert hasher.verify("1234", stored) is True
    assert hasher.verify("4321", stored) is False


def test_same_pin_gets_fresh_salt(hasher: Pbkdf2PinHasher) -> None:
    assert hasher.hash("0000") != hasher.hash("0000")


def test_verify_uses_stored_iteration_count() -> None:
    stored = Pbkdf2PinHasher(iterations=500).hash("9876")

    assert Pbkdf2PinHasher(iterations=2000).verify("9876", stored) is True


@pytest.mark.parametrize(
    "stored",
    [
        "",
        "pbkdf2:1000:abcd",
        "pbkdf2:1000:abcd:ef01:extra",
        "bcrypt:1000:abcd:ef01",
        "pbkdf2:many:abcd:ef01",
        "pbkdf2:0:abcd:ef01",
        "pbkdf2:-5:abcd:ef01",
        "pbkdf2:1000:zz:ef01",
        "pbkdf2:1000::ef01",
        "pbkdf2:1000:abcd:",
        "pbkdf2:1000:aa:\u00e90",
        "pbkdf2:1000:aa:zz",
        "pbkdf2:1000:aa:abc",
    ],
)
def test_malformed_digest_never_matches(hasher: Pbkdf2PinHasher, stored: str) -> None:
    assert hasher.verify("1234", stored) is False


def test_module_helpers_use_configured_hasher() -> None:
    stored = hash_pin("2468")

    assert verify_pin("2468", stored) is True
    assert verify_pin("1357", stored) is False

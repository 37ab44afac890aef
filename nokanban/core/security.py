import hashlib
import hmac
import secrets
from typing import Protocol

from nokanban.core.config import get_settings
from nokanban.core.constants import PinHashFormat


class PinHasher(Protocol):
    """Derives and checks board PIN digests."""

    def hash(self, pin: str) -> str: ...

    def verify(self, pin: str, stored_hash: str) -> bool: ...


class Pbkdf2PinHasher:
    """PBKDF2-HMAC-SHA256 digests stored as ``pbkdf2:<iterations>:<saltHex>:<digestHex>``."""

    def __init__(self, iterations: int | None = None):
        self.iterations = iterations or get_settings().pin_iterations

    @staticmethod
    def _derive(pin: str, salt: bytes, iterations: int) -> bytes:
        return hashlib.pbkdf2_hmac(
            PinHashFormat.DIGEST,
            pin.encode(),
            salt,
            iterations,
            dklen=PinHashFormat.KEY_BYTES,
        )

    def hash(self, pin: str) -> str:
        salt = secrets.token_bytes(PinHashFormat.SALT_BYTES)
        digest = self._derive(pin, salt, self.iterations)
        return PinHashFormat.SEPARATOR.join(
            (PinHashFormat.ALGORITHM, str(self.iterations), salt.hex(), digest.hex())
        )

    def verify(self, pin: str, stored_hash: str) -> bool:
        parts = stored_hash.split(PinHashFormat.SEPARATOR)
        if len(parts) != PinHashFormat.COMPONENTS or parts[0] != PinHashFormat.ALGORITHM:
            return False

        _, iterations_raw, salt_hex, digest_hex = parts
        if not salt_hex or not digest_hex:
            return False
        try:
            iterations = int(iterations_raw)
            salt = bytes.fromhex(salt_hex)
            expected = bytes.fromhex(digest_hex)
        except (ValueError, TypeError):
            return False
        if iterations <= 0:
            return False

        return hmac.compare_digest(self._derive(pin, salt, iterations), expected)


_pin_hasher: Pbkdf2PinHasher | None = None


def get_pin_hasher() -> Pbkdf2PinHasher:
    global _pin_hasher
    if _pin_hasher is None:
        _pin_hasher = Pbkdf2PinHasher()
    return _pin_hasher


def hash_pin(pin: str) -> str:
    """Hash a board PIN using PBKDF2."""
    return get_pin_hasher().hash(pin)


def verify_pin(pin: str, stored_hash: str) -> bool:
    """Verify a board PIN against its stored digest. Malformed digests never match."""
    return get_pin_hasher().verify(pin, stored_hash)


from dataclasses import dataclass
from enum import StrEnum

from loguru import logger

from nokanban.core.exceptions.domain import InvalidCredentialError
from nokanban.core.security import PinHasher, get_pin_hasher


class AuthState(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHORIZED = "authorized"
    REJECTED = "rejected"


@dataclass(frozen=True)
class AuthDecision:
    state: AuthState
    reason: str | None = None

    @property
    def authorized(self) -> bool:
        return self.state == AuthState.AUTHORIZED


class PinGate:
    """Decides, per request, whether a presented PIN may mutate a shared board.

    Holds no per-request state; the plaintext PIN only lives for the duration of
    ``authorize``.
    """

    def __init__(self, hasher: PinHasher | None = None):
        self.hasher = hasher or get_pin_hasher()

    def authorize(self, pin: str | None, stored_hash: str | None) -> AuthDecision:
        if not pin:
            return AuthDecision(AuthState.REJECTED, "PIN required")
        if not stored_hash or not self.hasher.verify(pin, stored_hash):
            return AuthDecision(AuthState.REJECTED, "Invalid PIN")
        return AuthDecision(AuthState.AUTHORIZED)

    def require(self, pin: str | None, stored_hash: str | None) -> None:
        """Raise ``InvalidCredentialError`` unless the PIN matches the stored digest."""
        decision = self.authorize(pin, stored_hash)
        if not decision.authorized:
            logger.info(f"PIN check rejected: {decision.reason}")
            raise InvalidCredentialError(decision.reason or "Invalid PIN")


_pin_gate: PinGate | None = None


def get_pin_gate() -> PinGate:
    global _pin_gate
    if _pin_gate is None:
        _pin_gate = PinGate()
    return _pin_gate

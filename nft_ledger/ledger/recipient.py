"""Recipient Acceptance - проверка получателя в safe_transfer_from.

Получатель-контракт (код окружения, вне реестра) обязан подтвердить приём
токена, вернув ACCEPTANCE_VALUE из on_token_received.

Любой другой результат считается отказом:
- возвращено другое значение или не bytes
- hook поднял исключение

Hook пересекает границу доверия, поэтому check_recipient возвращает
результат-объект и никогда не пропускает исключение hook наружу.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, runtime_checkable

from nft_ledger.core.domain.identity import IdentityLike, normalize_identity

logger = logging.getLogger(__name__)

# bytes4(keccak256("onERC721Received(address,address,uint256,bytes)"))
ACCEPTANCE_VALUE = bytes.fromhex("150b7a02")


@runtime_checkable
class TokenReceiver(Protocol):
    """Acceptance hook получателя-контракта."""

    def on_token_received(
        self, operator: str, from_: str, token_id: int, data: bytes
    ) -> bytes: ...


@runtime_checkable
class RecipientResolver(Protocol):
    """Определяет, является ли адрес получателем-контрактом.

    resolve возвращает None для обычных (не контрактных) адресов.
    """

    def resolve(self, identity: str) -> Optional[TokenReceiver]: ...


class RecipientRegistry:
    """In-memory RecipientResolver: адрес → TokenReceiver."""

    def __init__(self):
        self._receivers: Dict[str, TokenReceiver] = {}

    def register(self, identity: IdentityLike, receiver: TokenReceiver) -> str:
        """Регистрация получателя-контракта. Возвращает адрес в канонической форме."""
        address = normalize_identity(identity)
        self._receivers[address] = receiver
        return address

    def unregister(self, identity: IdentityLike) -> None:
        self._receivers.pop(normalize_identity(identity), None)

    def resolve(self, identity: str) -> Optional[TokenReceiver]:
        return self._receivers.get(identity)

    def __contains__(self, identity: object) -> bool:
        return identity in self._receivers

    def __len__(self) -> int:
        return len(self._receivers)


@dataclass(frozen=True)
class RecipientCheckResult:
    """Результат проверки получателя."""

    accepted: bool
    reason: str

    # Исключение, поднятое hook (если было)
    error: Optional[Exception]

    details: str


def check_recipient(
    receiver: TokenReceiver,
    operator: str,
    from_: str,
    token_id: int,
    data: bytes,
) -> RecipientCheckResult:
    """Вызов acceptance hook получателя и интерпретация ответа.

    Args:
        receiver: hook получателя
        operator: адрес, инициировавший transfer (caller)
        from_: предыдущий владелец
        token_id: передаваемый токен
        data: произвольные данные вызова

    Returns:
        RecipientCheckResult (accepted=True только при ответе ACCEPTANCE_VALUE)
    """
    try:
        response = receiver.on_token_received(operator, from_, token_id, data)
    except Exception as e:
        logger.warning(f"Acceptance hook raised for token {token_id}: {e!r}")
        return RecipientCheckResult(
            accepted=False,
            reason="hook_raised",
            error=e,
            details=f"{type(e).__name__}: {e}",
        )

    if not isinstance(response, (bytes, bytearray)):
        return RecipientCheckResult(
            accepted=False,
            reason="malformed_acknowledgment",
            error=None,
            details=f"expected bytes, got {type(response).__name__}",
        )

    if bytes(response) != ACCEPTANCE_VALUE:
        return RecipientCheckResult(
            accepted=False,
            reason="wrong_acknowledgment",
            error=None,
            details=f"expected 0x{ACCEPTANCE_VALUE.hex()}, got 0x{bytes(response).hex()}",
        )

    return RecipientCheckResult(
        accepted=True,
        reason="",
        error=None,
        details=f"PASS: token {token_id} accepted",
    )

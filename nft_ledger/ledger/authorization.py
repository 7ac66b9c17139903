"""Mint Authorization - политики доступа к выпуску токенов.

Реестр не хранит администратора напрямую: проверка права mint вынесена
в инжектируемый предикат. Это позволяет заменить единственного
администратора набором ролей без изменения реестра.
"""

from typing import FrozenSet, Iterable, Optional, Protocol, Tuple, runtime_checkable

from nft_ledger.core.domain.errors import InvalidArgumentError
from nft_ledger.core.domain.identity import NULL_IDENTITY, IdentityLike, normalize_identity


@runtime_checkable
class MintPolicy(Protocol):
    """Предикат авторизации mint.

    administrator - адрес, сообщаемый запросом owner(); None если политика
    не выделяет единственного администратора.
    """

    @property
    def administrator(self) -> Optional[str]: ...

    def is_authorized(self, caller: str) -> bool: ...


def _checked_admin(value: IdentityLike) -> str:
    identity = normalize_identity(value)
    if identity == NULL_IDENTITY:
        raise InvalidArgumentError("null identity cannot be an administrator")
    return identity


class AdministratorPolicy:
    """Единственный администратор: mint разрешён только ему."""

    def __init__(self, administrator: IdentityLike):
        self._administrator = _checked_admin(administrator)

    @property
    def administrator(self) -> str:
        return self._administrator

    def is_authorized(self, caller: str) -> bool:
        return caller == self._administrator

    def __repr__(self) -> str:
        return f"AdministratorPolicy(administrator={self._administrator})"


class RoleSetPolicy:
    """Набор администраторов (multi-admin).

    Набор неизменяем после создания. Первый адрес в порядке передачи
    сообщается как administrator.
    """

    def __init__(self, identities: Iterable[IdentityLike]):
        ordered: Tuple[str, ...] = tuple(_checked_admin(i) for i in identities)
        if not ordered:
            raise InvalidArgumentError("RoleSetPolicy requires at least one identity")
        self._ordered = ordered
        self._members: FrozenSet[str] = frozenset(ordered)

    @property
    def administrator(self) -> str:
        return self._ordered[0]

    @property
    def members(self) -> FrozenSet[str]:
        return self._members

    def is_authorized(self, caller: str) -> bool:
        return caller in self._members

    def __repr__(self) -> str:
        return f"RoleSetPolicy(members={len(self._members)})"

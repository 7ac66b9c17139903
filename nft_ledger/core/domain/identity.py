"""
Identity - Адреса аккаунтов и идентификаторы токенов

Identity - непрозрачная ссылка фиксированной ширины на аккаунт (20-байтовый адрес).
Каноническая форма: строка '0x' + 40 hex-символов в нижнем регистре.

TokenId - беззнаковое целое в диапазоне [0, 2**256 - 1].

ЗАПРЕЩЕНО сравнивать адреса в неканонической форме: все входы реестра
проходят через normalize_identity().
"""

import re
from typing import Annotated, Final, Union

from pydantic import Field

from .errors import InvalidArgumentError


# =============================================================================
# CONSTANTS
# =============================================================================

# Ширина адреса в байтах
IDENTITY_BYTES: Final[int] = 20

# Null identity: никогда не владеет, не хранит и не получает токены
NULL_IDENTITY: Final[str] = "0x" + "0" * (IDENTITY_BYTES * 2)

# Максимальный token_id (uint256)
MAX_TOKEN_ID: Final[int] = 2**256 - 1

IDENTITY_PATTERN: Final[str] = r"^0x[0-9a-f]{40}$"

_IDENTITY_INPUT_RE = re.compile(r"^0[xX][0-9a-fA-F]{40}$")

# Тип поля для pydantic моделей (адрес в канонической форме)
IdentityStr = Annotated[str, Field(pattern=IDENTITY_PATTERN, description="Адрес (0x + 40 hex)")]

IdentityLike = Union[str, bytes]


# =============================================================================
# IDENTITY
# =============================================================================


def normalize_identity(value: IdentityLike) -> str:
    """
    Приведение адреса к канонической форме.

    Args:
        value: '0x'-строка из 40 hex-символов (любой регистр) или 20 байт

    Returns:
        Адрес в нижнем регистре с префиксом '0x'

    Raises:
        InvalidArgumentError: Если значение не является адресом
    """
    if isinstance(value, (bytes, bytearray)):
        if len(value) != IDENTITY_BYTES:
            raise InvalidArgumentError(
                f"identity must be {IDENTITY_BYTES} bytes, got {len(value)}"
            )
        return "0x" + bytes(value).hex()

    if isinstance(value, str):
        if not _IDENTITY_INPUT_RE.match(value):
            raise InvalidArgumentError(f"malformed identity: {value!r}")
        return "0x" + value[2:].lower()

    raise InvalidArgumentError(
        f"identity must be str or bytes, got {type(value).__name__}"
    )


def is_null_identity(value: IdentityLike) -> bool:
    """True если адрес - null identity (все нули)."""
    return normalize_identity(value) == NULL_IDENTITY


def identity_from_int(number: int) -> str:
    """
    Адрес из целого числа (удобно для тестов и детерминированных фикстур).

    Examples:
        >>> identity_from_int(1)
        '0x0000000000000000000000000000000000000001'
    """
    if number < 0 or number >= 2 ** (IDENTITY_BYTES * 8):
        raise InvalidArgumentError(f"identity number out of range: {number}")
    return "0x" + format(number, f"0{IDENTITY_BYTES * 2}x")


# =============================================================================
# TOKEN ID
# =============================================================================


def validate_token_id(token_id: int, max_token_id: int = MAX_TOKEN_ID) -> int:
    """
    Проверка token_id.

    bool отклоняется явно, так как является подклассом int.

    Args:
        token_id: Идентификатор токена
        max_token_id: Верхняя граница (включительно)

    Returns:
        token_id без изменений

    Raises:
        InvalidArgumentError: Если token_id не целое, отрицательное или вне диапазона
    """
    if isinstance(token_id, bool) or not isinstance(token_id, int):
        raise InvalidArgumentError(
            f"token_id must be int, got {type(token_id).__name__}"
        )
    if token_id < 0 or token_id > max_token_id:
        raise InvalidArgumentError(
            f"token_id {token_id} out of range [0, {max_token_id}]"
        )
    return token_id

"""
LedgerError - Таксономия ошибок реестра токенов

Каждое нарушенное предусловие поднимает отдельный, различимый тип ошибки.
Ошибки локальны для вызова: реестр не выполняет частичных изменений и
ничего не повторяет сам, решение о повторе принимает вызывающая сторона.

Сообщения совпадают с revert-строками стандартного ERC-721 контракта.
"""

from enum import Enum
from typing import Optional


# =============================================================================
# ENUMS
# =============================================================================


class LedgerErrorKind(str, Enum):
    """Вид ошибки реестра"""

    UNAUTHORIZED = "Unauthorized"
    INVALID_RECIPIENT = "InvalidRecipient"
    INVALID_APPROVEE = "InvalidApprovee"
    ALREADY_EXISTS = "AlreadyExists"
    NOT_FOUND = "NotFound"
    NOT_OWNER = "NotOwner"
    REDUNDANT_APPROVAL = "RedundantApproval"
    RECIPIENT_REJECTED = "RecipientRejected"
    INVALID_ARGUMENT = "InvalidArgument"
    REENTRANCY = "Reentrancy"


# =============================================================================
# REVERT MESSAGES
# =============================================================================

MSG_MINT_NOT_ADMIN = "ERC721: only owner can mint"
MSG_MINT_TO_ZERO = "ERC721: mint to the zero address"
MSG_ALREADY_MINTED = "ERC721: token already minted"
MSG_OWNER_QUERY_NONEXISTENT = "ERC721: owner query for nonexistent token"
MSG_APPROVED_QUERY_NONEXISTENT = "ERC721: approved query for nonexistent token"
MSG_OPERATOR_QUERY_NONEXISTENT = "ERC721: operator query for nonexistent token"
MSG_APPROVE_NOT_OWNER = "ERC721: approve caller is not owner"
MSG_APPROVE_TO_ZERO = "ERC721: approval to the zero address"
MSG_APPROVE_TO_OWNER = "ERC721: approval to current owner"
MSG_TRANSFER_NOT_OWN = "ERC721: transfer of token that is not own"
MSG_TRANSFER_TO_ZERO = "ERC721: transfer to the zero address"
MSG_TRANSFER_NOT_APPROVED = "ERC721: transfer caller is not owner nor approved"
MSG_NON_RECEIVER = "ERC721: transfer to non ERC721Receiver implementer"
MSG_REENTRANT_CALL = "ERC721: reentrant call"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class LedgerError(Exception):
    """
    Базовая ошибка реестра.

    Attributes:
        kind: Вид ошибки (LedgerErrorKind)
        message: Текст ошибки
        token_id: Токен, к которому относится ошибка (если применимо)
    """

    kind: LedgerErrorKind

    def __init__(self, message: str, token_id: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.token_id = token_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value}, message={self.message!r})"


class UnauthorizedError(LedgerError):
    """Вызывающий не имеет права на операцию (не администратор / не владелец / не approved)."""

    kind = LedgerErrorKind.UNAUTHORIZED


class InvalidRecipientError(LedgerError):
    """Получатель mint/transfer - null identity."""

    kind = LedgerErrorKind.INVALID_RECIPIENT


class InvalidApproveeError(LedgerError):
    """Approve на null identity."""

    kind = LedgerErrorKind.INVALID_APPROVEE


class AlreadyExistsError(LedgerError):
    """Повторный mint уже выпущенного token_id."""

    kind = LedgerErrorKind.ALREADY_EXISTS


class NotFoundError(LedgerError):
    """Операция над невыпущенным token_id."""

    kind = LedgerErrorKind.NOT_FOUND


class NotOwnerError(LedgerError):
    """Адрес from не совпадает с текущим владельцем токена."""

    kind = LedgerErrorKind.NOT_OWNER


class RedundantApprovalError(LedgerError):
    """Approve на текущего владельца токена."""

    kind = LedgerErrorKind.REDUNDANT_APPROVAL


class RecipientRejectedError(LedgerError):
    """Получатель-контракт не подтвердил приём токена в safe_transfer_from."""

    kind = LedgerErrorKind.RECIPIENT_REJECTED


class InvalidArgumentError(LedgerError, ValueError):
    """Некорректный формат identity или token_id."""

    kind = LedgerErrorKind.INVALID_ARGUMENT


class ReentrancyError(LedgerError):
    """Изменяющая операция вызвана изнутри acceptance hook получателя."""

    kind = LedgerErrorKind.REENTRANCY


class LedgerInvariantError(RuntimeError):
    """
    Нарушение внутренней согласованности реестра.

    Не является LedgerError: сигнализирует о дефекте реализации,
    а не о некорректном вызове.
    """

"""Token Ledger - реестр владения невзаимозаменяемыми токенами.

Единственный владелец изменяемого состояния:
- записи токенов token_id → TokenRecord{owner, approved}
- балансы identity → количество токенов (инкрементально, O(1) запрос)
- администратор (через инжектируемую MintPolicy)

Операции: mint, owner_of, balance_of, approve, get_approved,
transfer_from, safe_transfer_from.

Семантика каждого вызова - всё или ничего:
- все предусловия проверяются до записи состояния
- safe_transfer_from применяет изменение, вызывает hook получателя
  и откатывает изменение при отказе
- уведомление публикуется ровно один раз и только после успешного вызова

Инварианты (после каждой операции):
1. Каждый token_id имеет не более одного владельца
2. Сумма балансов равна количеству выпущенных токенов
3. Null identity не бывает владельцем или approved
4. Approval сбрасывается при любой смене владельца
5. balance_of(x) == |{token_id : owner(token_id) == x}|
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple, Union

from nft_ledger.core.contracts import validate_event, validate_ledger_snapshot
from nft_ledger.core.domain.errors import (
    MSG_ALREADY_MINTED,
    MSG_APPROVE_NOT_OWNER,
    MSG_APPROVE_TO_OWNER,
    MSG_APPROVE_TO_ZERO,
    MSG_APPROVED_QUERY_NONEXISTENT,
    MSG_MINT_NOT_ADMIN,
    MSG_MINT_TO_ZERO,
    MSG_NON_RECEIVER,
    MSG_OPERATOR_QUERY_NONEXISTENT,
    MSG_OWNER_QUERY_NONEXISTENT,
    MSG_REENTRANT_CALL,
    MSG_TRANSFER_NOT_APPROVED,
    MSG_TRANSFER_NOT_OWN,
    MSG_TRANSFER_TO_ZERO,
    AlreadyExistsError,
    InvalidApproveeError,
    InvalidArgumentError,
    InvalidRecipientError,
    LedgerInvariantError,
    NotFoundError,
    NotOwnerError,
    RecipientRejectedError,
    ReentrancyError,
    RedundantApprovalError,
    UnauthorizedError,
)
from nft_ledger.core.domain.events import ApprovalEvent, TransferEvent, event_to_dict
from nft_ledger.core.domain.identity import (
    NULL_IDENTITY,
    IdentityLike,
    normalize_identity,
    validate_token_id,
)
from nft_ledger.core.domain.ledger_state import LedgerSnapshot
from nft_ledger.core.domain.token import TokenRecord
from nft_ledger.ledger.authorization import AdministratorPolicy, MintPolicy
from nft_ledger.ledger.config import LedgerConfig
from nft_ledger.ledger.event_sink import EventSink, InMemoryEventSink
from nft_ledger.ledger.recipient import (
    RecipientCheckResult,
    RecipientResolver,
    TokenReceiver,
    check_recipient,
)

logger = logging.getLogger(__name__)

Event = Union[TransferEvent, ApprovalEvent]


class TokenLedger:
    """Реестр владения и авторизации transfer для NFT.

    Один экземпляр на развёртывание; глобального состояния нет.
    Вызовы предполагаются строго последовательными (single-writer).

    Коллабораторы (инжектируются):
    - mint_policy: кто может выпускать токены
    - event_sink: канал уведомлений (по умолчанию InMemoryEventSink)
    - recipients: определяет получателей-контрактов для safe_transfer_from
      (None - все получатели обычные адреса)
    - config: LedgerConfig
    """

    def __init__(
        self,
        mint_policy: MintPolicy,
        event_sink: Optional[EventSink] = None,
        recipients: Optional[RecipientResolver] = None,
        config: Optional[LedgerConfig] = None
    ):
        self.mint_policy = mint_policy
        self.config = config or LedgerConfig()
        # Ledger сам валидирует события (config.validate_events), sink по умолчанию - нет
        self.event_sink = event_sink if event_sink is not None else InMemoryEventSink(validate=False)
        self.recipients = recipients

        self._records: Dict[int, TokenRecord] = {}
        self._balances: Dict[str, int] = {}
        self._event_count = 0

        # True пока выполняется acceptance hook получателя
        self._in_recipient_hook = False

        logger.info(
            f"TokenLedger created: name={self.config.name}, symbol={self.config.symbol}, "
            f"policy={self.mint_policy!r}"
        )

    @classmethod
    def with_administrator(cls, administrator: IdentityLike, **kwargs) -> "TokenLedger":
        """Реестр с единственным администратором (AdministratorPolicy)."""
        return cls(AdministratorPolicy(administrator), **kwargs)

    # =========================================================================
    # METADATA
    # =========================================================================

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def symbol(self) -> str:
        return self.config.symbol

    @property
    def administrator(self) -> Optional[str]:
        """Администратор реестра (запрос owner() контракта)."""
        return getattr(self.mint_policy, "administrator", None)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def owner_of(self, token_id: int) -> str:
        """Владелец токена.

        Raises:
            NotFoundError: токен не выпущен
        """
        return self._require_record(token_id, MSG_OWNER_QUERY_NONEXISTENT).owner

    def balance_of(self, identity: IdentityLike) -> int:
        """Количество токенов у адреса. Для null identity всегда 0."""
        return self._balances.get(normalize_identity(identity), 0)

    def get_approved(self, token_id: int) -> str:
        """Approved-адрес токена; null identity если approval не установлен.

        Raises:
            NotFoundError: токен не выпущен
        """
        record = self._require_record(token_id, MSG_APPROVED_QUERY_NONEXISTENT)
        return record.approved if record.approved is not None else NULL_IDENTITY

    def exists(self, token_id: int) -> bool:
        return self._token_id(token_id) in self._records

    def total_supply(self) -> int:
        return len(self._records)

    def tokens_of_owner(self, identity: IdentityLike) -> List[int]:
        """Все token_id адреса (по возрастанию). O(n) по числу токенов."""
        owner = normalize_identity(identity)
        return sorted(tid for tid, record in self._records.items() if record.owner == owner)

    def record(self, token_id: int) -> TokenRecord:
        """Полная запись токена.

        Raises:
            NotFoundError: токен не выпущен
        """
        return self._require_record(token_id, MSG_OWNER_QUERY_NONEXISTENT)

    # =========================================================================
    # MINT
    # =========================================================================

    def mint(self, caller: IdentityLike, to: IdentityLike, token_id: int) -> None:
        """Выпуск нового токена.

        Порядок проверок:
        1. caller авторизован политикой mint → иначе UnauthorizedError
        2. to != null identity → иначе InvalidRecipientError
        3. token_id не выпущен → иначе AlreadyExistsError

        Публикует Transfer(from=null, to, token_id).
        """
        self._ensure_not_reentrant()
        caller = normalize_identity(caller)
        to = normalize_identity(to)
        token_id = self._token_id(token_id)

        if not self.mint_policy.is_authorized(caller):
            raise UnauthorizedError(MSG_MINT_NOT_ADMIN, token_id)
        if to == NULL_IDENTITY:
            raise InvalidRecipientError(MSG_MINT_TO_ZERO, token_id)
        if token_id in self._records:
            raise AlreadyExistsError(MSG_ALREADY_MINTED, token_id)

        record = TokenRecord(token_id=token_id, owner=to)
        event = self._prepare(TransferEvent(from_=NULL_IDENTITY, to=to, token_id=token_id))

        with self._staged(token_id, to):
            self._records[token_id] = record
            self._credit(to)
            self._publish(event)

        logger.debug(f"Minted token {token_id} to {to}")

    # =========================================================================
    # APPROVE
    # =========================================================================

    def approve(self, caller: IdentityLike, approved: IdentityLike, token_id: int) -> None:
        """Установка approval для одного токена.

        Порядок проверок:
        1. токен выпущен → иначе NotFoundError
        2. caller - текущий владелец → иначе UnauthorizedError
        3. approved != null identity → иначе InvalidApproveeError
        4. approved != владелец → иначе RedundantApprovalError

        Предыдущий approval перезаписывается. Публикует Approval(owner, approved, token_id).
        """
        self._ensure_not_reentrant()
        caller = normalize_identity(caller)
        approved = normalize_identity(approved)
        record = self._require_record(token_id, MSG_OWNER_QUERY_NONEXISTENT)

        if caller != record.owner:
            raise UnauthorizedError(MSG_APPROVE_NOT_OWNER, record.token_id)
        if approved == NULL_IDENTITY:
            raise InvalidApproveeError(MSG_APPROVE_TO_ZERO, record.token_id)
        if approved == record.owner:
            raise RedundantApprovalError(MSG_APPROVE_TO_OWNER, record.token_id)

        updated = record.with_approval(approved)
        event = self._prepare(
            ApprovalEvent(owner=record.owner, approved=approved, token_id=record.token_id)
        )

        with self._staged(record.token_id):
            self._records[record.token_id] = updated
            self._publish(event)

        logger.debug(f"Approved {approved} for token {record.token_id}")

    # =========================================================================
    # TRANSFER
    # =========================================================================

    def transfer_from(
        self,
        caller: IdentityLike,
        from_: IdentityLike,
        to: IdentityLike,
        token_id: int
    ) -> None:
        """Передача токена.

        Порядок проверок:
        1. токен выпущен → иначе NotFoundError
        2. from_ - текущий владелец → иначе NotOwnerError
        3. to != null identity → иначе InvalidRecipientError
        4. caller - владелец или approved → иначе UnauthorizedError

        Approval сбрасывается безусловно. Публикует Transfer(from, to, token_id).
        """
        self._ensure_not_reentrant()
        caller, from_, to, record = self._check_transfer(caller, from_, to, token_id)
        event = self._prepare(TransferEvent(from_=from_, to=to, token_id=record.token_id))

        with self._staged(record.token_id, from_, to):
            self._move(record, to)
            self._publish(event)

        logger.debug(f"Transferred token {record.token_id}: {from_} → {to} (caller={caller})")

    def safe_transfer_from(
        self,
        caller: IdentityLike,
        from_: IdentityLike,
        to: IdentityLike,
        token_id: int,
        data: bytes = b""
    ) -> None:
        """Передача токена с подтверждением получателя-контракта.

        Предусловия и эффект как у transfer_from. Если to - получатель-контракт,
        после применения изменения вызывается его acceptance hook;
        отказ (неверный ответ или исключение) → RecipientRejectedError
        и откат всех изменений вызова. Для обычных адресов проверка пропускается.
        """
        self._ensure_not_reentrant()
        if not isinstance(data, (bytes, bytearray)):
            raise InvalidArgumentError(f"data must be bytes, got {type(data).__name__}")

        caller, from_, to, record = self._check_transfer(caller, from_, to, token_id)
        event = self._prepare(TransferEvent(from_=from_, to=to, token_id=record.token_id))
        receiver = self.recipients.resolve(to) if self.recipients is not None else None

        with self._staged(record.token_id, from_, to):
            self._move(record, to)

            if receiver is not None:
                result = self._call_receiver(receiver, caller, from_, record.token_id, bytes(data))
                if not result.accepted:
                    logger.warning(
                        f"Recipient {to} rejected token {record.token_id}: "
                        f"{result.reason} ({result.details}), rolling back"
                    )
                    raise RecipientRejectedError(MSG_NON_RECEIVER, record.token_id) from result.error

            self._publish(event)

        logger.debug(f"Safe-transferred token {record.token_id}: {from_} → {to} (caller={caller})")

    # =========================================================================
    # SNAPSHOT / INVARIANTS
    # =========================================================================

    def snapshot(self) -> LedgerSnapshot:
        """Immutable снапшот полного состояния реестра.

        JSON-представление проверяется по контракту ledger_snapshot.
        """
        snap = LedgerSnapshot(
            name=self.config.name,
            symbol=self.config.symbol,
            administrator=self.administrator,
            tokens=[self._records[tid] for tid in sorted(self._records)],
            balances=dict(sorted(self._balances.items())),
            total_supply=len(self._records),
            event_count=self._event_count,
        )
        validate_ledger_snapshot(snap.model_dump(mode="json"))
        return snap

    def verify_invariants(self) -> None:
        """Полная перепроверка инвариантов по записям токенов.

        Raises:
            LedgerInvariantError: со списком всех найденных нарушений
        """
        violations: List[str] = []

        expected: Dict[str, int] = {}
        for token_id, record in self._records.items():
            if record.token_id != token_id:
                violations.append(f"record key {token_id} != record.token_id {record.token_id}")
            if record.owner == NULL_IDENTITY:
                violations.append(f"token {token_id} owned by null identity")
            if record.approved == NULL_IDENTITY:
                violations.append(f"token {token_id} approved to null identity")
            if record.approved is not None and record.approved == record.owner:
                violations.append(f"token {token_id} approved to its owner")
            expected[record.owner] = expected.get(record.owner, 0) + 1

        if expected != self._balances:
            violations.append(f"balances {self._balances} != recomputed {expected}")

        balance_sum = sum(self._balances.values())
        if balance_sum != len(self._records):
            violations.append(f"sum of balances {balance_sum} != minted count {len(self._records)}")

        if violations:
            raise LedgerInvariantError("; ".join(violations))

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _token_id(self, token_id: int) -> int:
        return validate_token_id(token_id, self.config.max_token_id)

    def _require_record(self, token_id: int, message: str) -> TokenRecord:
        token_id = self._token_id(token_id)
        record = self._records.get(token_id)
        if record is None:
            raise NotFoundError(message, token_id)
        return record

    def _check_transfer(
        self,
        caller: IdentityLike,
        from_: IdentityLike,
        to: IdentityLike,
        token_id: int
    ) -> Tuple[str, str, str, TokenRecord]:
        """Общие предусловия transfer_from / safe_transfer_from."""
        caller = normalize_identity(caller)
        from_ = normalize_identity(from_)
        to = normalize_identity(to)
        record = self._require_record(token_id, MSG_OPERATOR_QUERY_NONEXISTENT)

        if from_ != record.owner:
            raise NotOwnerError(MSG_TRANSFER_NOT_OWN, record.token_id)
        if to == NULL_IDENTITY:
            raise InvalidRecipientError(MSG_TRANSFER_TO_ZERO, record.token_id)
        if not record.can_transfer(caller):
            raise UnauthorizedError(MSG_TRANSFER_NOT_APPROVED, record.token_id)

        return caller, from_, to, record

    def _ensure_not_reentrant(self) -> None:
        if self._in_recipient_hook:
            raise ReentrancyError(MSG_REENTRANT_CALL)

    def _prepare(self, event: Event) -> Event:
        """Проверка уведомления по контракту до изменения состояния."""
        if self.config.validate_events:
            validate_event(event_to_dict(event))
        return event

    def _publish(self, event: Event) -> None:
        self.event_sink.publish(event)
        self._event_count += 1

    def _credit(self, identity: str) -> None:
        self._balances[identity] = self._balances.get(identity, 0) + 1

    def _debit(self, identity: str) -> None:
        remaining = self._balances[identity] - 1
        if remaining:
            self._balances[identity] = remaining
        else:
            del self._balances[identity]

    def _move(self, record: TokenRecord, to: str) -> None:
        self._records[record.token_id] = record.transferred_to(to)
        self._debit(record.owner)
        self._credit(to)

    def _call_receiver(
        self,
        receiver: TokenReceiver,
        operator: str,
        from_: str,
        token_id: int,
        data: bytes
    ) -> RecipientCheckResult:
        self._in_recipient_hook = True
        try:
            return check_recipient(receiver, operator, from_, token_id, data)
        finally:
            self._in_recipient_hook = False

    @contextmanager
    def _staged(self, token_id: int, *identities: str) -> Iterator[None]:
        """Откат записи токена и балансов при любой ошибке внутри блока."""
        saved_record = self._records.get(token_id)
        saved_balances = {identity: self._balances.get(identity) for identity in identities}
        saved_event_count = self._event_count
        try:
            yield
        except BaseException:
            if saved_record is None:
                self._records.pop(token_id, None)
            else:
                self._records[token_id] = saved_record
            for identity, balance in saved_balances.items():
                if balance is None:
                    self._balances.pop(identity, None)
                else:
                    self._balances[identity] = balance
            self._event_count = saved_event_count
            raise

    def __repr__(self) -> str:
        return (
            f"TokenLedger(name={self.config.name!r}, total_supply={len(self._records)}, "
            f"events={self._event_count})"
        )

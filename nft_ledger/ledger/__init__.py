"""Ledger - реестр владения NFT и его коллабораторы.

- TokenLedger: state machine mint / approve / transfer
- MintPolicy: инжектируемая авторизация mint (AdministratorPolicy, RoleSetPolicy)
- EventSink: append-only канал уведомлений, replay истории владения
- RecipientResolver / TokenReceiver: acceptance hook для safe_transfer_from
"""

from .authorization import AdministratorPolicy, MintPolicy, RoleSetPolicy
from .config import LedgerConfig
from .event_sink import EventSink, InMemoryEventSink, ReplayState, replay_ownership
from .recipient import (
    ACCEPTANCE_VALUE,
    RecipientCheckResult,
    RecipientRegistry,
    RecipientResolver,
    TokenReceiver,
    check_recipient,
)
from .token_ledger import TokenLedger

__all__ = [
    "TokenLedger",
    "LedgerConfig",
    "MintPolicy",
    "AdministratorPolicy",
    "RoleSetPolicy",
    "EventSink",
    "InMemoryEventSink",
    "ReplayState",
    "replay_ownership",
    "ACCEPTANCE_VALUE",
    "RecipientCheckResult",
    "RecipientRegistry",
    "RecipientResolver",
    "TokenReceiver",
    "check_recipient",
]

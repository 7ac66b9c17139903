"""Event Sink - поток уведомлений реестра.

Sink - append-only упорядоченный канал: реестр публикует уведомления
и никогда не читает их обратно. Потребители восстанавливают историю
владения, проигрывая поток с genesis (replay_ownership).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Protocol, Tuple, Union, runtime_checkable

from nft_ledger.core.contracts import validate_event
from nft_ledger.core.domain.events import ApprovalEvent, TransferEvent, event_to_dict
from nft_ledger.core.domain.identity import NULL_IDENTITY

logger = logging.getLogger(__name__)

Event = Union[TransferEvent, ApprovalEvent]


@runtime_checkable
class EventSink(Protocol):
    """Канал уведомлений."""

    def publish(self, event: Event) -> None: ...


class InMemoryEventSink:
    """Append-only sink в памяти.

    Каждому событию присваивается монотонный sequence, начиная с 0.
    При validate=True JSON-представление события проверяется по контракту
    до добавления в поток.
    """

    def __init__(self, validate: bool = True):
        self.validate = validate
        self._events: List[Event] = []

    def publish(self, event: Event) -> None:
        sequenced = event.model_copy(update={"sequence": len(self._events)})
        if self.validate:
            validate_event(event_to_dict(sequenced))
        self._events.append(sequenced)
        logger.debug(f"Published {sequenced.event_type} #{sequenced.sequence} token={sequenced.token_id}")

    @property
    def events(self) -> Tuple[Event, ...]:
        return tuple(self._events)

    def transfers(self) -> List[TransferEvent]:
        return [e for e in self._events if isinstance(e, TransferEvent)]

    def approvals(self) -> List[ApprovalEvent]:
        return [e for e in self._events if isinstance(e, ApprovalEvent)]

    def __iter__(self) -> Iterator[Event]:
        return iter(tuple(self._events))

    def __len__(self) -> int:
        return len(self._events)


@dataclass
class ReplayState:
    """Состояние, восстановленное из потока уведомлений."""

    owners: Dict[int, str] = field(default_factory=dict)
    approvals: Dict[int, str] = field(default_factory=dict)
    balances: Dict[str, int] = field(default_factory=dict)

    def balance_of(self, identity: str) -> int:
        return self.balances.get(identity, 0)

    def get_approved(self, token_id: int) -> str:
        return self.approvals.get(token_id, NULL_IDENTITY)


def replay_ownership(events: Iterable[Event]) -> ReplayState:
    """Восстановление владения по истории уведомлений.

    Args:
        events: уведомления в порядке публикации, начиная с genesis

    Returns:
        ReplayState с владельцами, approvals и ненулевыми балансами

    Raises:
        ValueError: если история внутренне противоречива
            (transfer не от текущего владельца, повторный mint,
            approval для невыпущенного токена)
    """
    state = ReplayState()

    for event in events:
        if isinstance(event, TransferEvent):
            current = state.owners.get(event.token_id)
            if event.is_mint:
                if current is not None:
                    raise ValueError(f"token {event.token_id} minted twice")
            elif current != event.from_:
                raise ValueError(
                    f"token {event.token_id}: transfer from {event.from_}, owner is {current}"
                )
            else:
                remaining = state.balances[current] - 1
                if remaining:
                    state.balances[current] = remaining
                else:
                    del state.balances[current]

            state.owners[event.token_id] = event.to
            state.approvals.pop(event.token_id, None)
            state.balances[event.to] = state.balances.get(event.to, 0) + 1

        elif isinstance(event, ApprovalEvent):
            if state.owners.get(event.token_id) != event.owner:
                raise ValueError(
                    f"token {event.token_id}: approval by {event.owner}, "
                    f"owner is {state.owners.get(event.token_id)}"
                )
            state.approvals[event.token_id] = event.approved

        else:
            raise ValueError(f"Unknown event: {event!r}")

    return state

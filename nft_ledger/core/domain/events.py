"""
Ledger Events - Уведомления реестра

Две формы уведомлений:
- Transfer{from, to, token_id} (mint моделируется как Transfer из null identity)
- Approval{owner, approved, token_id}

Immutable Pydantic модели. JSON-представление (by_alias=True) соответствует
схемам contracts/schema/transfer_event.json и approval_event.json.
Поле sequence присваивается event sink при публикации.
"""

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from .identity import NULL_IDENTITY, IdentityStr


# =============================================================================
# EVENT MODELS
# =============================================================================


class TransferEvent(BaseModel):
    """
    Уведомление о смене владельца токена.

    from == null identity означает mint.
    """

    event_type: Literal["Transfer"] = "Transfer"
    from_: IdentityStr = Field(..., alias="from", description="Предыдущий владелец")
    to: IdentityStr = Field(..., description="Новый владелец")
    token_id: int = Field(..., ge=0, description="Идентификатор токена")
    sequence: Optional[int] = Field(
        None, ge=0, description="Порядковый номер в потоке событий (присваивает sink)"
    )

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def is_mint(self) -> bool:
        """True если событие - выпуск токена."""
        return self.from_ == NULL_IDENTITY


class ApprovalEvent(BaseModel):
    """Уведомление об установке approval для токена."""

    event_type: Literal["Approval"] = "Approval"
    owner: IdentityStr = Field(..., description="Владелец токена")
    approved: IdentityStr = Field(..., description="Адрес, получивший право transfer")
    token_id: int = Field(..., ge=0, description="Идентификатор токена")
    sequence: Optional[int] = Field(
        None, ge=0, description="Порядковый номер в потоке событий (присваивает sink)"
    )

    model_config = {"frozen": True, "populate_by_name": True}


LedgerEvent = Annotated[
    Union[TransferEvent, ApprovalEvent], Field(discriminator="event_type")
]

_EVENT_ADAPTER: TypeAdapter = TypeAdapter(LedgerEvent)


# =============================================================================
# SERIALIZATION
# =============================================================================


def event_to_dict(event: Union[TransferEvent, ApprovalEvent]) -> Dict[str, Any]:
    """
    JSON-совместимое представление события (ключ 'from' вместо 'from_').

    sequence опускается, если ещё не присвоен.
    """
    return event.model_dump(mode="json", by_alias=True, exclude_none=True)


def event_from_dict(data: Dict[str, Any]) -> Union[TransferEvent, ApprovalEvent]:
    """
    Восстановление события из dict по полю event_type.

    Raises:
        pydantic.ValidationError: Если данные не соответствуют ни одной модели
    """
    return _EVENT_ADAPTER.validate_python(data)

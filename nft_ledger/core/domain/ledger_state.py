"""
LedgerSnapshot - Снапшот состояния реестра

Immutable Pydantic модель полного состояния реестра на момент вызова
TokenLedger.snapshot(). JSON-представление соответствует схеме
contracts/schema/ledger_snapshot.json.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field, model_validator

from .identity import IdentityStr
from .token import TokenRecord


class LedgerSnapshot(BaseModel):
    """
    Снапшот реестра.

    Содержит:
    - Метаданные (name, symbol, administrator)
    - Записи всех выпущенных токенов (упорядочены по token_id)
    - Балансы адресов с ненулевым балансом
    - Количество опубликованных событий
    """

    name: str = Field(..., min_length=1, description="Название коллекции")
    symbol: str = Field(..., min_length=1, description="Тикер коллекции")
    administrator: Optional[IdentityStr] = Field(
        None, description="Администратор (если политика mint его определяет)"
    )
    tokens: list[TokenRecord] = Field(
        default_factory=list, description="Записи выпущенных токенов"
    )
    balances: Dict[IdentityStr, int] = Field(
        default_factory=dict, description="Ненулевые балансы"
    )
    total_supply: int = Field(..., ge=0, description="Количество выпущенных токенов")
    event_count: int = Field(..., ge=0, description="Количество опубликованных событий")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_totals(self) -> "LedgerSnapshot":
        """Сумма балансов равна количеству выпущенных токенов."""
        if len(self.tokens) != self.total_supply:
            raise ValueError(
                f"tokens count {len(self.tokens)} != total_supply {self.total_supply}"
            )
        balance_sum = sum(self.balances.values())
        if balance_sum != self.total_supply:
            raise ValueError(
                f"sum of balances {balance_sum} != total_supply {self.total_supply}"
            )
        return self

    def owner_of(self, token_id: int) -> Optional[str]:
        """Владелец токена в снапшоте (None если токен не выпущен)."""
        for record in self.tokens:
            if record.token_id == token_id:
                return record.owner
        return None

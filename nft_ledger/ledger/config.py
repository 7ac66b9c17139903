"""Конфигурация реестра токенов."""

from dataclasses import dataclass

from nft_ledger.core.domain.identity import MAX_TOKEN_ID


@dataclass(frozen=True)
class LedgerConfig:
    """Конфигурация TokenLedger.

    - name / symbol: метаданные коллекции
    - max_token_id: верхняя граница token_id (включительно), по умолчанию uint256
    - validate_events: проверять каждое уведомление по JSON Schema перед публикацией
    """
    name: str = "NonFungibleToken"
    symbol: str = "NFT"
    max_token_id: int = MAX_TOKEN_ID
    validate_events: bool = True

    def __post_init__(self):
        if not self.name:
            raise ValueError("name must be non-empty")
        if not self.symbol:
            raise ValueError("symbol must be non-empty")
        if self.max_token_id < 0 or self.max_token_id > MAX_TOKEN_ID:
            raise ValueError(
                f"max_token_id {self.max_token_id} out of range [0, {MAX_TOKEN_ID}]"
            )

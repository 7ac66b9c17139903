"""
TokenRecord - Запись владения токеном

Immutable Pydantic модель, объединяющая владельца и approved-адрес токена
в одной записи. Смена владельца создаёт новую запись без approval,
поэтому инвариант "approval существует только для текущего владельца"
обеспечивается структурой, а не соглашением.
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .identity import NULL_IDENTITY, IdentityStr


class TokenRecord(BaseModel):
    """
    Запись по одному выпущенному токену.

    Отсутствие записи означает, что token_id не выпущен.
    Все изменения создают новый экземпляр (frozen=True).
    """

    token_id: int = Field(..., ge=0, description="Идентификатор токена")
    owner: IdentityStr = Field(..., description="Текущий владелец")
    approved: Optional[IdentityStr] = Field(
        None, description="Адрес, которому разрешён transfer (nullable)"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_parties(self) -> "TokenRecord":
        """
        Null identity не может быть владельцем или approved.
        Approved не может совпадать с владельцем.
        """
        if self.owner == NULL_IDENTITY:
            raise ValueError(f"token {self.token_id}: null identity cannot own a token")
        if self.approved is not None:
            if self.approved == NULL_IDENTITY:
                raise ValueError(
                    f"token {self.token_id}: null identity cannot be approved"
                )
            if self.approved == self.owner:
                raise ValueError(
                    f"token {self.token_id}: approved party equals owner {self.owner}"
                )
        return self

    @property
    def is_approved(self) -> bool:
        """True если для токена установлен approval."""
        return self.approved is not None

    def transferred_to(self, new_owner: str) -> "TokenRecord":
        """
        Новая запись после смены владельца.

        Approval всегда сбрасывается.

        Args:
            new_owner: Новый владелец (каноническая форма)

        Returns:
            Новый TokenRecord без approval
        """
        return TokenRecord(token_id=self.token_id, owner=new_owner, approved=None)

    def with_approval(self, approved: str) -> "TokenRecord":
        """
        Новая запись с установленным approval (предыдущий перезаписывается).

        Args:
            approved: Адрес, получающий право transfer

        Returns:
            Новый TokenRecord
        """
        return TokenRecord(token_id=self.token_id, owner=self.owner, approved=approved)

    def can_transfer(self, caller: str) -> bool:
        """Владелец или approved адрес."""
        return caller == self.owner or (
            self.approved is not None and caller == self.approved
        )

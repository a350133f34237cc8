"""
PaymentAssetEntry — Запись реестра платёжных активов

Курс задаётся как "единиц платёжного актива за 1 токен", масштабирован
на decimals самого актива. Пример: rate = 100 * 10^18 означает
1 токен = 100 единиц актива с 18 знаками.

Удаление логическое: supported=False, история не стирается.
"""

from pydantic import BaseModel, Field

from .units import MAX_DECIMALS, UINT256_MAX


class PaymentAssetEntry(BaseModel):
    """
    Запись реестра платёжных активов.

    Immutable модель (frozen=True): изменение курса создаёт новую запись.
    """

    asset_id: str = Field(..., min_length=1, description="Идентификатор актива")
    rate: int = Field(..., ge=0, le=UINT256_MAX, description="Единиц актива за 1 токен")
    decimals: int = Field(18, ge=0, le=MAX_DECIMALS, description="Знаков у актива")
    supported: bool = Field(True, description="Актив принимается к оплате")
    updated_at: int = Field(0, ge=0, description="Время последнего изменения (unix sec)")

    model_config = {"frozen": True}

    def is_active(self) -> bool:
        """
        Проверка, что актив можно использовать в свопах.

        Returns:
            True если supported и rate > 0
        """
        return self.supported and self.rate > 0

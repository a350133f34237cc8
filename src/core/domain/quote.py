"""
PriceQuote — Модель котировки нативной валюты

Immutable Pydantic модели:
- RoundData: сырой ответ внешнего price feed
  (round_id, answer, started_at, updated_at, answered_in_round)
- PriceQuote: нормализованная котировка (price, decimals, updated_at)
"""

from pydantic import BaseModel, Field

from .units import MAX_DECIMALS, UINT256_MAX


class RoundData(BaseModel):
    """
    Сырой ответ latest_round_data() внешнего агрегатора.

    answer может быть <= 0 (feed сломан) — такие данные отсеивает адаптер,
    а не модель.
    """

    round_id: int = Field(..., ge=0, description="Идентификатор раунда")
    answer: int = Field(..., description="Цена (signed, как в агрегаторе)")
    started_at: int = Field(..., ge=0, description="Начало раунда (unix sec)")
    updated_at: int = Field(..., ge=0, description="Последнее обновление (unix sec)")
    answered_in_round: int = Field(..., ge=0, description="Раунд, в котором получен ответ")

    model_config = {"frozen": True}

    @classmethod
    def from_tuple(cls, data: tuple) -> "RoundData":
        """Построение из кортежа (round_id, answer, started_at, updated_at, answered_in_round)."""
        round_id, answer, started_at, updated_at, answered_in_round = data
        return cls(
            round_id=round_id,
            answer=answer,
            started_at=started_at,
            updated_at=updated_at,
            answered_in_round=answered_in_round,
        )


class PriceQuote(BaseModel):
    """
    Нормализованная котировка нативной валюты.

    Инвариант: price > 0. Котировка с price <= 0 не может быть построена.
    """

    price: int = Field(..., gt=0, le=UINT256_MAX, description="Цена (fixed-point)")
    decimals: int = Field(..., ge=0, le=MAX_DECIMALS, description="Знаков в цене")
    updated_at: int = Field(..., ge=0, description="Время обновления (unix sec)")
    round_id: int = Field(0, ge=0, description="Раунд агрегатора")

    model_config = {"frozen": True}

    def age_sec(self, now: int) -> int:
        """
        Возраст котировки в секундах.

        Returns:
            now - updated_at (отрицательное значение, если котировка из будущего)
        """
        return now - self.updated_at

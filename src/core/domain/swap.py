"""
Swap — Модели свопов и событий движка

Immutable Pydantic модели событий для внешних индексаторов:
- SwapEvent: каждый завершённый buy/sell
- RegistryChangeEvent: каждое изменение реестра платёжных активов
- AdminChangeEvent: передача прав, смена price feed, смена logo
- TokenMetadata: метаданные токена (name/symbol/decimals/logo)
"""

from enum import Enum

from pydantic import BaseModel, Field

from .units import MAX_DECIMALS, UINT256_MAX


# =============================================================================
# ENUMS
# =============================================================================


class SwapDirection(str, Enum):
    """Направление свопа относительно вызывающего"""

    BUY = "buy"  # платёж → токены
    SELL = "sell"  # токены → платёж


class SwapKind(str, Enum):
    """Тип операции движка (направление × класс актива)"""

    BUY_WITH_NATIVE = "buy_with_native"
    BUY_WITH_ASSET = "buy_with_asset"
    SELL_FOR_NATIVE = "sell_for_native"
    SELL_FOR_ASSET = "sell_for_asset"

    @property
    def direction(self) -> SwapDirection:
        if self in (SwapKind.BUY_WITH_NATIVE, SwapKind.BUY_WITH_ASSET):
            return SwapDirection.BUY
        return SwapDirection.SELL

    @property
    def is_native(self) -> bool:
        return self in (SwapKind.BUY_WITH_NATIVE, SwapKind.SELL_FOR_NATIVE)


class AdminAction(str, Enum):
    """Тип административного изменения"""

    TRANSFER_ADMIN = "transfer_admin"
    SET_PRICE_FEED = "set_price_feed"
    SET_LOGO_URI = "set_logo_uri"


# =============================================================================
# EVENTS
# =============================================================================


class SwapEvent(BaseModel):
    """
    Событие завершённого свопа.

    amount_in приходит в казну, amount_out уходит из казны к initiator.
    Для buy: asset_in = платёжный актив, asset_out = токен.
    Для sell: asset_in = токен, asset_out = платёжный актив.
    """

    initiator: str = Field(..., min_length=1, description="Инициатор свопа")
    kind: SwapKind = Field(..., description="Тип операции")
    asset_in: str = Field(..., min_length=1, description="Актив, полученный казной")
    amount_in: int = Field(..., gt=0, le=UINT256_MAX, description="Сумма, полученная казной")
    asset_out: str = Field(..., min_length=1, description="Актив, выплаченный казной")
    amount_out: int = Field(..., ge=0, le=UINT256_MAX, description="Сумма, выплаченная казной")
    block: int = Field(..., ge=0, description="Порядковый номер операции движка")

    model_config = {"frozen": True}

    @property
    def direction(self) -> SwapDirection:
        return self.kind.direction

    @property
    def token_amount(self) -> int:
        """Сумма в токенах (вне зависимости от направления)."""
        return self.amount_out if self.direction == SwapDirection.BUY else self.amount_in

    @property
    def payment_amount(self) -> int:
        """Сумма в платёжном активе (вне зависимости от направления)."""
        return self.amount_in if self.direction == SwapDirection.BUY else self.amount_out

    @property
    def payment_asset(self) -> str:
        return self.asset_in if self.direction == SwapDirection.BUY else self.asset_out


class RegistryChangeEvent(BaseModel):
    """Событие изменения реестра платёжных активов."""

    asset_id: str = Field(..., min_length=1)
    old_rate: int | None = Field(None, ge=0, le=UINT256_MAX, description="Прежний курс (None если новый)")
    new_rate: int = Field(..., ge=0, le=UINT256_MAX)
    supported: bool = Field(...)
    changed_by: str = Field(..., min_length=1)
    block: int = Field(..., ge=0)

    model_config = {"frozen": True}


class AdminChangeEvent(BaseModel):
    """Событие административного изменения."""

    action: AdminAction = Field(...)
    old_value: str = Field(...)
    new_value: str = Field(...)
    changed_by: str = Field(..., min_length=1)
    block: int = Field(..., ge=0)

    model_config = {"frozen": True}


# =============================================================================
# TOKEN METADATA
# =============================================================================


class TokenMetadata(BaseModel):
    """Метаданные токена."""

    name: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1)
    decimals: int = Field(18, ge=0, le=MAX_DECIMALS)
    logo_uri: str = Field("", description="URI логотипа (например, IPFS)")

    model_config = {"frozen": True}

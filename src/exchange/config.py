"""Конфигурация обменного движка и развёртывания.

Frozen dataclasses с defaults, валидация в __post_init__.
Передаются явно при создании компонентов; глобальной конфигурации нет.
"""

from dataclasses import dataclass
from typing import Final

from src.core.domain.units import (
    NATIVE_ASSET_ID,
    NATIVE_DECIMALS,
    TOKEN_DECIMALS,
    UINT256_MAX,
    validate_decimals,
)

# Доля эмиссии, переводимая в пул продажи при развёртывании (10%)
DEFAULT_SALE_POOL_SHARE_BPS: Final[int] = 1000

BPS_DENOMINATOR: Final[int] = 10_000


@dataclass(frozen=True)
class ExchangeConfig:
    """Конфигурация ExchangeEngine.

    native_decimals: decimals ledger нативной валюты; движок отклоняет ledger
    с другим значением.
    reject_zero_output: отклонять свопы, встречная сумма которых после
    округления вниз равна нулю (вызывающий отдал бы средства ни за что).
    """

    token_decimals: int = TOKEN_DECIMALS
    native_decimals: int = NATIVE_DECIMALS
    native_asset_id: str = NATIVE_ASSET_ID
    reject_zero_output: bool = True

    def __post_init__(self):
        validate_decimals(self.token_decimals)
        validate_decimals(self.native_decimals)
        if not self.native_asset_id:
            raise ValueError("native_asset_id must be non-empty")


@dataclass(frozen=True)
class DeploymentConfig:
    """Параметры развёртывания токена и движка.

    Вся эмиссия выпускается на счёт deployer, затем sale_pool_share_bps
    от неё переводится в казну движка.
    """

    name: str = "Exchange Token"
    symbol: str = "EXT"
    initial_supply: int = 100_000_000 * 10**TOKEN_DECIMALS
    sale_pool_share_bps: int = DEFAULT_SALE_POOL_SHARE_BPS
    logo_uri: str = ""
    initial_native_liquidity: int = 0

    def __post_init__(self):
        if not self.name or not self.symbol:
            raise ValueError("name and symbol must be non-empty")
        if not 0 <= self.initial_supply <= UINT256_MAX:
            raise ValueError(f"initial_supply out of uint256 range: {self.initial_supply}")
        if not 0 <= self.sale_pool_share_bps <= BPS_DENOMINATOR:
            raise ValueError(
                f"sale_pool_share_bps must be in [0, {BPS_DENOMINATOR}], "
                f"got {self.sale_pool_share_bps}"
            )
        if self.initial_native_liquidity < 0:
            raise ValueError("initial_native_liquidity cannot be negative")

    @property
    def sale_pool(self) -> int:
        """Количество токенов, переводимое в пул продажи."""
        return self.initial_supply * self.sale_pool_share_bps // BPS_DENOMINATOR

"""Развёртывание токена и обменного движка.

Порядок:
1. AdminController (реестр платёжных активов)
2. Токен: вся эмиссия выпускается на счёт deployer
3. ExchangeEngine с price feed и admin
4. Перевод доли эмиссии в пул продажи
5. Опционально: начальная нативная ликвидность для выплат продавцам
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from src.admin.controller import AdminController
from src.core.domain.swap import TokenMetadata
from src.core.events.log import EventLog
from src.exchange.config import DeploymentConfig, ExchangeConfig
from src.exchange.engine import ExchangeEngine
from src.ledger.assets import InMemoryFungibleAsset
from src.ledger.native import NativeLedger
from src.oracle.adapter import OracleConfig, PriceOracleAdapter
from src.oracle.price_feed import PriceFeed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExchangeDeployment:
    """Результат развёртывания."""

    engine: ExchangeEngine
    admin: AdminController
    token: InMemoryFungibleAsset
    native: NativeLedger
    event_log: EventLog
    deployer: str


def deploy_exchange(
    deployer: str,
    price_feed: PriceFeed,
    config: Optional[DeploymentConfig] = None,
    exchange_config: Optional[ExchangeConfig] = None,
    oracle_config: Optional[OracleConfig] = None,
    native: Optional[NativeLedger] = None,
    event_log: Optional[EventLog] = None,
    clock: Callable[[], float] = time.time,
) -> ExchangeDeployment:
    """Развёртывание токена, администратора и движка.

    Args:
        deployer: счёт, получающий эмиссию и роль администратора
        price_feed: внешний feed цены нативной валюты
        config: параметры токена и пула продажи
        exchange_config: конфигурация движка
        oracle_config: конфигурация адаптера оракула
        native: ledger нативной валюты (новый, если не задан)
        event_log: журнал событий (новый, если не задан)
        clock: источник времени

    Returns:
        ExchangeDeployment

    Raises:
        TransferFailed: у deployer недостаточно нативной валюты для
            initial_native_liquidity
    """
    config = config or DeploymentConfig()
    exchange_config = exchange_config or ExchangeConfig()
    native = native if native is not None else NativeLedger(exchange_config.native_decimals)
    event_log = event_log if event_log is not None else EventLog()

    admin = AdminController(deployer, event_log=event_log, clock=clock)
    logger.info("Admin controller deployed, admin=%s", deployer)

    token = InMemoryFungibleAsset(
        asset_id=config.symbol,
        name=config.name,
        symbol=config.symbol,
        decimals=exchange_config.token_decimals,
    )
    token.mint(deployer, config.initial_supply)

    engine = ExchangeEngine(
        token=token,
        native=native,
        oracle=PriceOracleAdapter(price_feed, oracle_config, clock=clock),
        admin=admin,
        config=exchange_config,
        metadata=TokenMetadata(
            name=config.name,
            symbol=config.symbol,
            decimals=exchange_config.token_decimals,
            logo_uri=config.logo_uri,
        ),
    )
    logger.info("Exchange engine deployed at %s (supply=%d)", engine.address, config.initial_supply)

    if config.sale_pool > 0:
        engine.deposit_tokens(deployer, config.sale_pool)
    if config.initial_native_liquidity > 0:
        engine.receive_native(deployer, config.initial_native_liquidity)

    return ExchangeDeployment(
        engine=engine,
        admin=admin,
        token=token,
        native=native,
        event_log=event_log,
        deployer=deployer,
    )

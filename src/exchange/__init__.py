"""Exchange — обменный движок токена с котировкой оракула и реестром активов.

Операции:
- buy_with_native / buy_with_asset
- sell_for_native / sell_for_asset
"""

from .config import DeploymentConfig, ExchangeConfig
from .deployment import ExchangeDeployment, deploy_exchange
from .engine import ExchangeEngine, SwapJournal

__all__ = [
    "ExchangeConfig",
    "DeploymentConfig",
    "ExchangeEngine",
    "SwapJournal",
    "ExchangeDeployment",
    "deploy_exchange",
]

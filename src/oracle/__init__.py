"""Oracle — источник котировки нативной валюты."""

from .adapter import OracleConfig, PriceOracleAdapter
from .price_feed import PriceFeed, RoundTuple, StaticPriceFeed

__all__ = [
    "PriceFeed",
    "RoundTuple",
    "StaticPriceFeed",
    "OracleConfig",
    "PriceOracleAdapter",
]

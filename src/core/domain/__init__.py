"""
Domain models and value objects.

Contains fundamental domain entities like PriceQuote, PaymentAssetEntry,
SwapEvent and the exchange error taxonomy.
"""

from src.core.domain.errors import (
    ArithmeticOverflow,
    ExchangeError,
    InsufficientTreasury,
    InvalidRate,
    OracleUnavailable,
    ReentrantCall,
    StalePrice,
    TransferFailed,
    Unauthorized,
    UnsupportedAsset,
    ZeroAmount,
)
from src.core.domain.payment_asset import PaymentAssetEntry
from src.core.domain.quote import PriceQuote, RoundData
from src.core.domain.swap import (
    AdminAction,
    AdminChangeEvent,
    RegistryChangeEvent,
    SwapDirection,
    SwapEvent,
    SwapKind,
    TokenMetadata,
)
from src.core.domain.units import (
    NATIVE_ASSET_ID,
    NATIVE_DECIMALS,
    TOKEN_DECIMALS,
    UINT256_MAX,
    format_units,
    parse_units,
    validate_amount,
    validate_decimals,
)

__all__ = [
    # Units module
    "UINT256_MAX",
    "TOKEN_DECIMALS",
    "NATIVE_DECIMALS",
    "NATIVE_ASSET_ID",
    "parse_units",
    "format_units",
    "validate_amount",
    "validate_decimals",
    # Errors
    "ExchangeError",
    "ZeroAmount",
    "UnsupportedAsset",
    "InsufficientTreasury",
    "OracleUnavailable",
    "StalePrice",
    "Unauthorized",
    "ReentrantCall",
    "TransferFailed",
    "InvalidRate",
    "ArithmeticOverflow",
    # Quote models
    "PriceQuote",
    "RoundData",
    # Registry model
    "PaymentAssetEntry",
    # Swap models
    "SwapDirection",
    "SwapKind",
    "SwapEvent",
    "RegistryChangeEvent",
    "AdminAction",
    "AdminChangeEvent",
    "TokenMetadata",
]

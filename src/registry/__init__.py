"""Registry — реестр платёжных активов с фиксированными курсами."""

from .payment_assets import AccessControl, PaymentAssetRegistry

__all__ = [
    "AccessControl",
    "PaymentAssetRegistry",
]

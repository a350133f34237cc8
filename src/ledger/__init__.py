"""Ledger — внешние коллабораторы движка: fungible-активы и нативная валюта."""

from .assets import FungibleAsset, InMemoryFungibleAsset, Revertible
from .native import NativeLedger, ReceiveHook

__all__ = [
    "FungibleAsset",
    "Revertible",
    "InMemoryFungibleAsset",
    "NativeLedger",
    "ReceiveHook",
]

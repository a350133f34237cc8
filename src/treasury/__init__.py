"""Treasury — учёт пула токенов и полученных платежей."""

from .accounting import Treasury

__all__ = [
    "Treasury",
]

"""Admin — привилегированная роль, управляющая реестром и конфигурацией."""

from .controller import AdminController

__all__ = [
    "AdminController",
]

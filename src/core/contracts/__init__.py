"""
Contract Validation Module

Модуль для валидации JSON контрактов событий обменного движка.
"""

from .validators import (
    EVENT_SCHEMAS,
    AdminChangeEventValidator,
    ContractValidator,
    PriceQuoteValidator,
    RegistryChangeEventValidator,
    SchemaLoader,
    SwapEventValidator,
    ValidationError,
    validate_admin_change_event,
    validate_model,
    validate_price_quote,
    validate_registry_change_event,
    validate_swap_event,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "SwapEventValidator",
    "RegistryChangeEventValidator",
    "AdminChangeEventValidator",
    "PriceQuoteValidator",
    "ValidationError",
    "EVENT_SCHEMAS",
    # Functions
    "validate_swap_event",
    "validate_registry_change_event",
    "validate_admin_change_event",
    "validate_price_quote",
    "validate_model",
]

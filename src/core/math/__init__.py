"""
Core math modules

Целочисленные примитивы с гарантией отсутствия молчаливого переполнения
и формулы встречных сумм свопа.
"""

# Checked integer arithmetic
from src.core.math.numerical_safeguards import (
    checked_add,
    checked_mul,
    checked_sub,
    mul_div_floor,
    pow10,
    validate_uint,
)

# Swap conversions
from src.core.math.conversions import (
    native_to_tokens,
    payment_to_tokens,
    tokens_to_native,
    tokens_to_payment,
)

__all__ = [
    "validate_uint",
    "checked_add",
    "checked_sub",
    "checked_mul",
    "pow10",
    "mul_div_floor",
    "native_to_tokens",
    "tokens_to_native",
    "payment_to_tokens",
    "tokens_to_payment",
]

"""
Numerical Safeguards — Checked Integer Math

Модуль обеспечивает безопасность всей арифметики над суммами:
- Проверка переполнения uint256 на каждом шаге
- Запрет отрицательных промежуточных результатов
- Единое правило округления: floor (в пользу казны)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Переполнение никогда не происходит молча (ArithmeticOverflow)
2. Дробный остаток отбрасывается только через mul_div_floor
3. Деление на ноль никогда не происходит (ArithmeticOverflow)
4. Все операции детерминированы и воспроизводимы
"""

from typing import Final

from src.core.domain.errors import ArithmeticOverflow
from src.core.domain.units import MAX_DECIMALS, UINT256_MAX


# Кэш степеней десяти для типичных decimals
_POW10_CACHE: Final[dict[int, int]] = {d: 10**d for d in range(0, 37)}


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_uint(value: int, name: str = "value") -> int:
    """
    Проверка, что значение — uint256.

    Raises:
        ArithmeticOverflow: Если value < 0 или value > UINT256_MAX
        TypeError: Если value не int
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")
    if value < 0:
        raise ArithmeticOverflow(f"{name} underflow: {value} < 0")
    if value > UINT256_MAX:
        raise ArithmeticOverflow(f"{name} overflow: exceeds uint256")
    return value


# =============================================================================
# CHECKED ARITHMETIC
# =============================================================================


def checked_add(a: int, b: int) -> int:
    """
    Сложение с проверкой переполнения.

    Examples:
        >>> checked_add(1, 2)
        3
        >>> checked_add(UINT256_MAX, 1)
        Traceback (most recent call last):
        ArithmeticOverflow: ...
    """
    validate_uint(a, "a")
    validate_uint(b, "b")
    return validate_uint(a + b, "a + b")


def checked_sub(a: int, b: int) -> int:
    """
    Вычитание с запретом отрицательного результата.

    Raises:
        ArithmeticOverflow: Если b > a
    """
    validate_uint(a, "a")
    validate_uint(b, "b")
    return validate_uint(a - b, "a - b")


def checked_mul(a: int, b: int) -> int:
    """Умножение с проверкой переполнения uint256."""
    validate_uint(a, "a")
    validate_uint(b, "b")
    return validate_uint(a * b, "a * b")


def pow10(decimals: int) -> int:
    """
    10^decimals с проверкой диапазона.

    Raises:
        ArithmeticOverflow: Если результат не помещается в uint256
    """
    if decimals < 0 or decimals > MAX_DECIMALS:
        raise ArithmeticOverflow(f"decimals out of range: {decimals}")
    cached = _POW10_CACHE.get(decimals)
    if cached is not None:
        return cached
    return validate_uint(10**decimals, "10^decimals")


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator) с проверкой переполнения.

    Единственная допустимая операция с отбрасыванием дробного остатка.
    Округление вниз всегда в пользу казны: сумма, причитающаяся
    вызывающему, никогда не завышается.

    Args:
        a: Первый множитель
        b: Второй множитель
        denominator: Делитель (строго > 0)

    Returns:
        floor(a * b / denominator)

    Raises:
        ArithmeticOverflow: Если a * b > UINT256_MAX или denominator == 0

    Examples:
        >>> mul_div_floor(7, 3, 2)
        10
    """
    validate_uint(denominator, "denominator")
    if denominator == 0:
        raise ArithmeticOverflow("division by zero")
    product = checked_mul(a, b)
    return product // denominator

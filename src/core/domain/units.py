"""
Units — Централизованный модуль конверсии fixed-point единиц

Все суммы (TokenAmount, PaymentAmount) — беззнаковые целые, масштабированные
на 10^decimals. Единственный допустимый способ перевода между
человекочитаемым значением и целыми единицами — функции этого модуля.

ЗАПРЕЩЕНО использовать float для сумм: только int и Decimal.
"""

from decimal import Decimal, InvalidOperation
from typing import Final, Union


# =============================================================================
# КОНСТАНТЫ
# =============================================================================
# Верхняя граница беззнакового 256-битного целого
UINT256_MAX: Final[int] = 2**256 - 1

# Количество знаков токена и нативной валюты
TOKEN_DECIMALS: Final[int] = 18
NATIVE_DECIMALS: Final[int] = 18

# Верхняя граница decimals (как uint8)
MAX_DECIMALS: Final[int] = 255

# Идентификатор-маркер нативной валюты
NATIVE_ASSET_ID: Final[str] = "NATIVE"


# =============================================================================
# КОНВЕРТЕРЫ
# =============================================================================


def validate_decimals(decimals: int) -> int:
    """
    Проверка количества знаков (uint8).

    Raises:
        ValueError: Если decimals вне [0, 255]
    """
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise ValueError(f"decimals must be int, got {type(decimals).__name__}")
    if not 0 <= decimals <= MAX_DECIMALS:
        raise ValueError(f"decimals must be in [0, {MAX_DECIMALS}], got {decimals}")
    return decimals


def parse_units(value: Union[str, int, Decimal], decimals: int = TOKEN_DECIMALS) -> int:
    """
    Конверсия: человекочитаемое значение → целые единицы.

    parse_units("0.03", 18) == 30_000_000_000_000_000

    Args:
        value: Значение (str/int/Decimal, float запрещён)
        decimals: Количество знаков

    Returns:
        Целое количество минимальных единиц

    Raises:
        ValueError: Если значение отрицательное, нецелое после масштабирования
            или превышает UINT256_MAX
    """
    validate_decimals(decimals)
    if isinstance(value, float):
        raise ValueError("float values are not accepted, pass str or Decimal")

    try:
        dec = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Cannot parse amount {value!r}: {e}")

    if not dec.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")

    # Точная целочисленная арифметика: Decimal-контекст округляет до 28 знаков
    sign, digits, exponent = dec.as_tuple()
    coefficient = int("".join(map(str, digits))) if digits else 0
    shift = exponent + decimals
    if shift >= 0:
        result = coefficient * 10**shift
    else:
        divisor = 10 ** (-shift)
        if coefficient % divisor:
            raise ValueError(f"Amount {value!r} has more than {decimals} fractional digits")
        result = coefficient // divisor

    if sign and result != 0:
        raise ValueError(f"Amount cannot be negative: {value!r}")
    if result > UINT256_MAX:
        raise ValueError(f"Amount {value!r} exceeds uint256")
    return result


def format_units(amount: int, decimals: int = TOKEN_DECIMALS) -> str:
    """
    Конверсия: целые единицы → строка без потери точности.

    format_units(30_000_000_000_000_000, 18) == "0.03"
    """
    validate_decimals(decimals)
    validate_amount(amount)
    whole, fraction = divmod(amount, 10**decimals)
    if fraction == 0:
        return str(whole)
    return f"{whole}.{str(fraction).zfill(decimals).rstrip('0')}"


def validate_amount(amount: int, name: str = "amount") -> int:
    """
    Проверка, что сумма — целое в диапазоне uint256.

    Raises:
        ValueError: Если тип не int, значение отрицательное или > UINT256_MAX
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"{name} must be int, got {type(amount).__name__}")
    if amount < 0:
        raise ValueError(f"{name} cannot be negative: {amount}")
    if amount > UINT256_MAX:
        raise ValueError(f"{name} exceeds uint256: {amount}")
    return amount

"""
Conversions — Расчёт встречных сумм свопа

Формулы (все с округлением вниз в пользу казны):

Нативная валюта (price — котировка оракула):
    tokens_out = floor(native_amount * 10^token_decimals / price)
    native_out = floor(token_amount * price / 10^token_decimals)

Платёжный актив (rate — единиц актива за 1 токен):
    tokens_out  = floor(payment_amount * 10^token_decimals / rate)
    payment_out = floor(token_amount * rate / 10^token_decimals)

Инвариант round-trip: купить и сразу продать по той же цене
никогда не возвращает больше исходной суммы.
"""

from typing import Final

from src.core.domain.units import TOKEN_DECIMALS
from src.core.math.numerical_safeguards import mul_div_floor, pow10, validate_uint


DEFAULT_TOKEN_DECIMALS: Final[int] = TOKEN_DECIMALS


def _require_positive_price(price: int, name: str) -> None:
    validate_uint(price, name)
    if price == 0:
        raise ValueError(f"{name} must be > 0")


def native_to_tokens(
    native_amount: int, price: int, token_decimals: int = DEFAULT_TOKEN_DECIMALS
) -> int:
    """
    Количество токенов за native_amount нативной валюты.

    Args:
        native_amount: Сумма нативной валюты (fixed-point)
        price: Котировка оракула (> 0)
        token_decimals: Знаков у токена

    Returns:
        floor(native_amount * 10^token_decimals / price)

    Examples:
        >>> native_to_tokens(3 * 10**16, 300 * 10**8)
        1000000000000000000000000
    """
    _require_positive_price(price, "price")
    return mul_div_floor(native_amount, pow10(token_decimals), price)


def tokens_to_native(
    token_amount: int, price: int, token_decimals: int = DEFAULT_TOKEN_DECIMALS
) -> int:
    """
    Сумма нативной валюты за token_amount токенов.

    Returns:
        floor(token_amount * price / 10^token_decimals)
    """
    _require_positive_price(price, "price")
    return mul_div_floor(token_amount, price, pow10(token_decimals))


def payment_to_tokens(
    payment_amount: int, rate: int, token_decimals: int = DEFAULT_TOKEN_DECIMALS
) -> int:
    """
    Количество токенов за payment_amount платёжного актива.

    Examples:
        >>> payment_to_tokens(200 * 10**18, 100 * 10**18)
        2000000000000000000
    """
    _require_positive_price(rate, "rate")
    return mul_div_floor(payment_amount, pow10(token_decimals), rate)


def tokens_to_payment(
    token_amount: int, rate: int, token_decimals: int = DEFAULT_TOKEN_DECIMALS
) -> int:
    """
    Сумма платёжного актива за token_amount токенов.

    Returns:
        floor(token_amount * rate / 10^token_decimals)
    """
    _require_positive_price(rate, "rate")
    return mul_div_floor(token_amount, rate, pow10(token_decimals))

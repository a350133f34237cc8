"""
Тесты формул встречных сумм свопа

Coverage:
- Котировка нативной валюты (300 * 10^8, 8 decimals)
- Фиксированный курс платёжного актива
- Округление вниз в пользу казны
- Round-trip: купить и продать по той же цене ≤ исходной суммы
"""

import pytest

from src.core.domain.errors import ArithmeticOverflow
from src.core.math.conversions import (
    native_to_tokens,
    payment_to_tokens,
    tokens_to_native,
    tokens_to_payment,
)

ONE = 10**18
PRICE = 300 * 10**8


class TestNativeConversions:
    """Конверсии нативной валюты"""

    def test_buy_scenario_exact(self):
        """0.03 нативной валюты по цене 300e8 → ровно 10^24 единиц токена"""
        native_in = 3 * 10**16
        tokens = native_to_tokens(native_in, PRICE)
        assert tokens == native_in * ONE // PRICE
        assert tokens == 10**24

    def test_sell_scenario_exact(self):
        assert tokens_to_native(10**24, PRICE) == 3 * 10**16

    def test_tokens_rounded_down(self):
        """Остаток деления отбрасывается"""
        assert native_to_tokens(1, 3) == ONE // 3
        assert tokens_to_native(ONE - 1, 1) == 0

    def test_zero_price_rejected(self):
        with pytest.raises(ValueError):
            native_to_tokens(ONE, 0)
        with pytest.raises(ValueError):
            tokens_to_native(ONE, 0)

    def test_custom_token_decimals(self):
        assert native_to_tokens(10**18, 10**18, token_decimals=6) == 10**6


class TestAssetConversions:
    """Конверсии платёжного актива по фиксированному курсу"""

    def test_buy_with_rate_100(self):
        """200 единиц при курсе 100 за токен → ровно 2 токена"""
        assert payment_to_tokens(200 * ONE, 100 * ONE) == 2 * ONE

    def test_sell_with_rate_100(self):
        assert tokens_to_payment(ONE, 100 * ONE) == 100 * ONE

    def test_asset_with_six_decimals(self):
        """Курс в decimals актива: 1 токен = 2.5 единицы актива с 6 знаками"""
        rate = 2_500_000
        assert tokens_to_payment(4 * ONE, rate) == 10_000_000
        assert payment_to_tokens(10_000_000, rate) == 4 * ONE

    def test_overflow_is_reported(self):
        with pytest.raises(ArithmeticOverflow):
            payment_to_tokens(2**250, 1)


class TestRoundTripBound:
    """Инвариант: round-trip никогда не выгоден вызывающему"""

    @pytest.mark.parametrize(
        "native_in,price",
        [
            (3 * 10**16, PRICE),
            (10**16 + 12_345, PRICE),
            (1, PRICE),
            (7 * 10**18 + 1, 333_333_333),
            (10**18, 99_999_999_999),
        ],
    )
    def test_native_round_trip(self, native_in, price):
        tokens = native_to_tokens(native_in, price)
        assert tokens_to_native(tokens, price) <= native_in

    @pytest.mark.parametrize(
        "payment_in,rate",
        [
            (200 * ONE, 100 * ONE),
            (ONE + 1, 3 * ONE),
            (17, 7),
        ],
    )
    def test_asset_round_trip(self, payment_in, rate):
        tokens = payment_to_tokens(payment_in, rate)
        assert tokens_to_payment(tokens, rate) <= payment_in

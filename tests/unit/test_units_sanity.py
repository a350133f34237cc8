"""
Sanity-тест для модуля Units

Проверяет:
1. Корректность конверсий человекочитаемое значение ↔ fixed-point
2. Запрет float и дробных остатков сверх decimals
3. Границы uint256 и decimals
"""

from decimal import Decimal

import pytest

from src.core.domain.units import (
    NATIVE_ASSET_ID,
    TOKEN_DECIMALS,
    UINT256_MAX,
    format_units,
    parse_units,
    validate_amount,
    validate_decimals,
)


class TestParseUnits:
    """Тесты для parse_units"""

    def test_fractional_native_amount(self) -> None:
        """0.03 с 18 знаками"""
        assert parse_units("0.03", 18) == 30_000_000_000_000_000

    def test_integer_amount(self) -> None:
        """Целое значение масштабируется на 10^decimals"""
        assert parse_units("100", 18) == 100 * 10**18
        assert parse_units(200, 18) == 200 * 10**18

    def test_decimal_input(self) -> None:
        """Decimal принимается без потери точности"""
        assert parse_units(Decimal("1.5"), 6) == 1_500_000

    def test_default_decimals_is_token(self) -> None:
        """По умолчанию используются decimals токена"""
        assert TOKEN_DECIMALS == 18
        assert parse_units("1") == 10**18

    def test_large_value_exact(self) -> None:
        """Больше 28 значащих цифр — без округления"""
        value = "123456789012345678901234567890.123456789012345678"
        assert parse_units(value, 18) == 123456789012345678901234567890123456789012345678

    def test_float_rejected(self) -> None:
        """float запрещён"""
        with pytest.raises(ValueError, match="float"):
            parse_units(0.1, 18)

    def test_excess_precision_rejected(self) -> None:
        """Больше знаков, чем decimals — ошибка, а не молчаливое усечение"""
        with pytest.raises(ValueError, match="fractional digits"):
            parse_units("0.0000001", 6)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="negative"):
            parse_units("-1", 18)

    def test_garbage_rejected(self) -> None:
        with pytest.raises(ValueError):
            parse_units("abc", 18)

    def test_overflow_rejected(self) -> None:
        with pytest.raises(ValueError, match="uint256"):
            parse_units(str(UINT256_MAX), 1)


class TestFormatUnits:
    """Тесты для format_units"""

    def test_fractional(self) -> None:
        assert format_units(30_000_000_000_000_000, 18) == "0.03"

    def test_integer(self) -> None:
        assert format_units(2 * 10**18, 18) == "2"

    def test_zero_decimals(self) -> None:
        assert format_units(12345, 0) == "12345"

    def test_roundtrip(self) -> None:
        """Инвариант: parse(format(x)) == x"""
        for amount in (0, 1, 10**18 - 1, 123_456_789_000_000_000_001):
            assert parse_units(format_units(amount, 18), 18) == amount


class TestValidation:
    """Тесты валидации сумм и decimals"""

    def test_validate_amount_bounds(self) -> None:
        assert validate_amount(0) == 0
        assert validate_amount(UINT256_MAX) == UINT256_MAX

        with pytest.raises(ValueError, match="negative"):
            validate_amount(-1)
        with pytest.raises(ValueError, match="uint256"):
            validate_amount(UINT256_MAX + 1)

    def test_validate_amount_type(self) -> None:
        """bool и float не являются суммой"""
        with pytest.raises(ValueError):
            validate_amount(True)
        with pytest.raises(ValueError):
            validate_amount(1.0)

    def test_validate_decimals(self) -> None:
        assert validate_decimals(0) == 0
        assert validate_decimals(255) == 255
        with pytest.raises(ValueError):
            validate_decimals(256)
        with pytest.raises(ValueError):
            validate_decimals(-1)

    def test_native_sentinel(self) -> None:
        assert NATIVE_ASSET_ID == "NATIVE"

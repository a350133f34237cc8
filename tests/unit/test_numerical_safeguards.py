"""
Tests for Numerical Safeguards (checked integer math)

Проверяет:
- Переполнение uint256 никогда не происходит молча
- Отрицательные результаты запрещены
- mul_div_floor округляет вниз
- pow10 и кэш степеней
"""

import pytest

from src.core.domain.errors import ArithmeticOverflow, ExchangeError
from src.core.domain.units import UINT256_MAX
from src.core.math.numerical_safeguards import (
    checked_add,
    checked_mul,
    checked_sub,
    mul_div_floor,
    pow10,
    validate_uint,
)


# =============================================================================
# VALIDATE_UINT
# =============================================================================


class TestValidateUint:
    """Тесты validate_uint"""

    def test_valid_range(self):
        assert validate_uint(0) == 0
        assert validate_uint(UINT256_MAX) == UINT256_MAX

    def test_negative_is_underflow(self):
        with pytest.raises(ArithmeticOverflow, match="underflow"):
            validate_uint(-1)

    def test_above_max_is_overflow(self):
        with pytest.raises(ArithmeticOverflow, match="overflow"):
            validate_uint(UINT256_MAX + 1)

    def test_non_int_rejected(self):
        with pytest.raises(TypeError):
            validate_uint(1.5)
        with pytest.raises(TypeError):
            validate_uint(False)

    def test_overflow_is_exchange_error(self):
        """ArithmeticOverflow входит в таксономию ошибок движка"""
        assert issubclass(ArithmeticOverflow, ExchangeError)
        assert ArithmeticOverflow().code == "arithmetic_overflow"


# =============================================================================
# CHECKED ARITHMETIC
# =============================================================================


class TestCheckedArithmetic:
    """Тесты checked_add / checked_sub / checked_mul"""

    def test_add(self):
        assert checked_add(2, 3) == 5
        assert checked_add(UINT256_MAX - 1, 1) == UINT256_MAX

    def test_add_overflow(self):
        with pytest.raises(ArithmeticOverflow):
            checked_add(UINT256_MAX, 1)

    def test_sub(self):
        assert checked_sub(5, 3) == 2
        assert checked_sub(5, 5) == 0

    def test_sub_underflow(self):
        with pytest.raises(ArithmeticOverflow):
            checked_sub(3, 5)

    def test_mul(self):
        assert checked_mul(10**18, 10**18) == 10**36

    def test_mul_overflow(self):
        with pytest.raises(ArithmeticOverflow):
            checked_mul(2**200, 2**100)


# =============================================================================
# MUL_DIV_FLOOR / POW10
# =============================================================================


class TestMulDivFloor:
    """Тесты mul_div_floor"""

    def test_exact_division(self):
        assert mul_div_floor(200 * 10**18, 10**18, 100 * 10**18) == 2 * 10**18

    def test_rounds_down(self):
        """Дробный остаток отбрасывается"""
        assert mul_div_floor(7, 3, 2) == 10
        assert mul_div_floor(1, 1, 3) == 0
        assert mul_div_floor(10**18, 1, 3) == 333_333_333_333_333_333

    def test_zero_denominator(self):
        with pytest.raises(ArithmeticOverflow, match="division by zero"):
            mul_div_floor(1, 1, 0)

    def test_product_overflow(self):
        """Переполнение проверяется на произведении, а не на результате"""
        with pytest.raises(ArithmeticOverflow):
            mul_div_floor(UINT256_MAX, 2, 2)

    def test_negative_operand(self):
        with pytest.raises(ArithmeticOverflow):
            mul_div_floor(-1, 10, 3)


class TestPow10:
    """Тесты pow10"""

    @pytest.mark.parametrize("decimals", [0, 6, 8, 18, 36])
    def test_cached_values(self, decimals):
        assert pow10(decimals) == 10**decimals

    def test_large_exponent(self):
        assert pow10(77) == 10**77

    def test_exponent_overflows_uint256(self):
        with pytest.raises(ArithmeticOverflow):
            pow10(78)

    def test_out_of_range(self):
        with pytest.raises(ArithmeticOverflow):
            pow10(-1)
        with pytest.raises(ArithmeticOverflow):
            pow10(256)

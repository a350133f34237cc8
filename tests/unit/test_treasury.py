"""
Unit тесты для Treasury Accounting

Проверяет:
1. debit/credit токенов и платёжных активов
2. InsufficientTreasury без изменения состояния
3. Переполнение uint256
4. Компенсирующие debit/credit
"""

import pytest

from src.core.domain import UINT256_MAX
from src.core.domain.errors import ArithmeticOverflow, InsufficientTreasury
from src.treasury import Treasury

ONE = 10**18


@pytest.fixture
def treasury():
    t = Treasury("EXT")
    t.credit_token(10 * ONE)
    t.credit_payment("NATIVE", 2 * ONE)
    return t


def test_initial_state():
    t = Treasury("EXT")
    assert t.token_balance() == 0
    assert t.native_balance() == 0
    assert t.payment_balance("MPT") == 0
    assert t.holdings() == {"EXT": 0}


def test_token_debit_credit(treasury):
    assert treasury.debit_token(4 * ONE) == 6 * ONE
    assert treasury.credit_token(ONE) == 7 * ONE
    assert treasury.token_balance() == 7 * ONE


def test_token_debit_exact_balance(treasury):
    assert treasury.debit_token(10 * ONE) == 0


def test_token_debit_insufficient(treasury):
    with pytest.raises(InsufficientTreasury, match="Insufficient tokens in contract"):
        treasury.debit_token(10 * ONE + 1)
    assert treasury.token_balance() == 10 * ONE


def test_payment_balances_are_separate(treasury):
    treasury.credit_payment("MPT", 200 * ONE)

    assert treasury.native_balance() == 2 * ONE
    assert treasury.payment_balance("MPT") == 200 * ONE
    assert treasury.holdings() == {"EXT": 10 * ONE, "NATIVE": 2 * ONE, "MPT": 200 * ONE}


def test_payment_debit_insufficient(treasury):
    with pytest.raises(InsufficientTreasury):
        treasury.debit_payment("MPT", 1)
    with pytest.raises(InsufficientTreasury):
        treasury.debit_payment("NATIVE", 3 * ONE)
    assert treasury.native_balance() == 2 * ONE


def test_credit_overflow(treasury):
    with pytest.raises(ArithmeticOverflow):
        treasury.credit_token(UINT256_MAX)
    assert treasury.token_balance() == 10 * ONE


def test_negative_debit_rejected(treasury):
    with pytest.raises(ArithmeticOverflow):
        treasury.debit_token(-1)


def test_debit_credit_compensate_each_other(treasury):
    """Компенсация: credit после debit возвращает баланс, чужие балансы не трогаются"""
    treasury.credit_payment("MPT", 5 * ONE)
    treasury.debit_payment("NATIVE", ONE)
    treasury.credit_payment("NATIVE", ONE)

    assert treasury.native_balance() == 2 * ONE
    assert treasury.payment_balance("MPT") == 5 * ONE


def test_token_and_native_ids_must_differ():
    with pytest.raises(ValueError):
        Treasury("NATIVE")

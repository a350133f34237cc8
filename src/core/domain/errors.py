"""
Exchange Errors — Таксономия ошибок обменного движка

Каждая ошибка прерывает операцию целиком (all-or-nothing).
Локальных повторов внутри ядра нет: повтор — ответственность клиента.

Каждое исключение несёт:
- code: стабильный машинный код (snake_case)
- reason: человекочитаемая причина отказа
"""

from typing import Optional


class ExchangeError(Exception):
    """Базовое исключение обменного движка."""

    code: str = "exchange_error"
    default_reason: str = "Exchange operation failed"

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason or self.default_reason
        super().__init__(self.reason)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, reason={self.reason!r})"


class ZeroAmount(ExchangeError):
    """Нулевая сумма во входе buy/sell операции."""

    code = "zero_amount"
    default_reason = "Amount must be > 0"


class UnsupportedAsset(ExchangeError):
    """Платёжный актив не зарегистрирован в реестре."""

    code = "unsupported_asset"
    default_reason = "Unsupported payment token"


class InsufficientTreasury(ExchangeError):
    """В казне недостаточно средств для выплаты."""

    code = "insufficient_treasury"
    default_reason = "Insufficient treasury balance"


class OracleUnavailable(ExchangeError):
    """Вызов внешнего price feed завершился ошибкой или вернул невалидную цену."""

    code = "oracle_unavailable"
    default_reason = "Price feed unavailable"


class StalePrice(ExchangeError):
    """Котировка устарела (now - updated_at > max age) или раунд не завершён."""

    code = "stale_price"
    default_reason = "Price quote is stale"


class Unauthorized(ExchangeError):
    """Вызывающий не обладает правами администратора."""

    code = "unauthorized"
    default_reason = "Caller is not the admin"


class ReentrantCall(ExchangeError):
    """Повторный вход в движок во время незавершённой операции."""

    code = "reentrant_call"
    default_reason = "Reentrant call"


class TransferFailed(ExchangeError):
    """Перевод отклонён логикой самого актива (баланс, allowance, hook)."""

    code = "transfer_failed"
    default_reason = "Transfer failed"


class InvalidRate(ExchangeError):
    """Нулевой или отрицательный курс платёжного актива."""

    code = "invalid_rate"
    default_reason = "Rate must be > 0"


class ArithmeticOverflow(ExchangeError):
    """Выход за границы uint256 (переполнение или отрицательный результат)."""

    code = "arithmetic_overflow"
    default_reason = "Arithmetic overflow"

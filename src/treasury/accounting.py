"""
Treasury Accounting — учёт собственных средств движка

Казна хранит:
- token: пул токенов на продажу
- payment[asset_id]: нативную валюту (NATIVE_ASSET_ID) и платёжные активы,
  полученные от покупателей и доступные для выплат продавцам

debit_*/credit_* — единственные мутаторы состояния казны.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Баланс никогда не становится отрицательным (InsufficientTreasury)
2. Баланс никогда не превышает uint256 (ArithmeticOverflow)
3. Внешних писателей нет: казной владеет только движок (под его lock)

Откат операции выполняется компенсирующими debit/credit в обратном порядке.
"""

import logging
from typing import Dict

from src.core.domain.errors import InsufficientTreasury
from src.core.domain.units import NATIVE_ASSET_ID
from src.core.math.numerical_safeguards import checked_add, validate_uint

logger = logging.getLogger(__name__)


class Treasury:
    """Балансы казны движка."""

    def __init__(self, token_id: str, native_id: str = NATIVE_ASSET_ID):
        """
        Args:
            token_id: идентификатор токена движка
            native_id: идентификатор нативной валюты
        """
        if token_id == native_id:
            raise ValueError("token_id and native_id must differ")
        self.token_id = token_id
        self.native_id = native_id
        self._token_balance = 0
        self._payment_balances: Dict[str, int] = {}

    # =========================================================================
    # VIEWS
    # =========================================================================

    def token_balance(self) -> int:
        return self._token_balance

    def payment_balance(self, asset_id: str) -> int:
        """Баланс нативной валюты или платёжного актива."""
        return self._payment_balances.get(asset_id, 0)

    def native_balance(self) -> int:
        return self.payment_balance(self.native_id)

    def holdings(self) -> Dict[str, int]:
        """Снимок всех балансов (token_id → пул токенов)."""
        result = {self.token_id: self._token_balance}
        result.update(self._payment_balances)
        return result

    # =========================================================================
    # MUTATORS
    # =========================================================================

    def debit_token(self, amount: int) -> int:
        """
        Списание токенов из пула.

        Raises:
            InsufficientTreasury: Если amount > token_balance
        """
        validate_uint(amount, "amount")
        if amount > self._token_balance:
            raise InsufficientTreasury(
                f"Insufficient tokens in contract: {amount} > {self._token_balance}"
            )
        self._token_balance -= amount
        logger.debug("Treasury token debit %d (pool=%d)", amount, self._token_balance)
        return self._token_balance

    def credit_token(self, amount: int) -> int:
        self._token_balance = checked_add(self._token_balance, amount)
        return self._token_balance

    def debit_payment(self, asset_id: str, amount: int) -> int:
        """
        Списание нативной валюты / платёжного актива.

        Raises:
            InsufficientTreasury: Если amount > payment_balance(asset_id)
        """
        validate_uint(amount, "amount")
        balance = self.payment_balance(asset_id)
        if amount > balance:
            raise InsufficientTreasury(
                f"Insufficient {asset_id} balance in contract: {amount} > {balance}"
            )
        self._payment_balances[asset_id] = balance - amount
        logger.debug("Treasury %s debit %d (balance=%d)", asset_id, amount, balance - amount)
        return balance - amount

    def credit_payment(self, asset_id: str, amount: int) -> int:
        balance = checked_add(self.payment_balance(asset_id), amount)
        self._payment_balances[asset_id] = balance
        return balance

"""
NativeLedger — балансы нативной валюты

Перевод нативной валюты на счёт с зарегистрированным receive hook вызывает
этот hook после зачисления (аналог fallback/receive у контракта-получателя).
Hook может повторно войти в движок: именно так моделируется re-entrancy.

Любая ошибка внутри hook отклоняет перевод как TransferFailed: зачисление
компенсируется, балансы sender и получателя возвращаются к прежним.
"""

import logging
import threading
from typing import Callable, Dict, Optional

from src.core.domain.errors import TransferFailed
from src.core.domain.units import (
    NATIVE_ASSET_ID,
    NATIVE_DECIMALS,
    validate_amount,
    validate_decimals,
)
from src.core.math.numerical_safeguards import checked_add

logger = logging.getLogger(__name__)

# hook(sender, amount) вызывается на стороне получателя
ReceiveHook = Callable[[str, int], None]


class NativeLedger:
    """Балансы нативной валюты с поддержкой receive hooks."""

    asset_id = NATIVE_ASSET_ID

    def __init__(self, decimals: int = NATIVE_DECIMALS):
        self.decimals = validate_decimals(decimals)
        self._balances: Dict[str, int] = {}
        self._hooks: Dict[str, ReceiveHook] = {}
        # hooks вызываются вне lock: они могут сами переводить средства
        self._lock = threading.Lock()

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def fund(self, account: str, amount: int) -> None:
        """Начальное зачисление (genesis/faucet)."""
        validate_amount(amount)
        with self._lock:
            self._balances[account] = checked_add(self.balance_of(account), amount)

    def set_receive_hook(self, account: str, hook: Optional[ReceiveHook]) -> None:
        """Регистрация (или снятие при hook=None) receive hook для счёта."""
        if hook is None:
            self._hooks.pop(account, None)
        else:
            self._hooks[account] = hook

    def transfer(self, sender: str, to: str, amount: int) -> None:
        """
        Перевод нативной валюты.

        Сначала изменяются балансы, затем вызывается hook получателя.

        Raises:
            TransferFailed: Если баланса недостаточно или hook получателя упал
        """
        validate_amount(amount)
        with self._lock:
            self._move(sender, to, amount)

        hook = self._hooks.get(to)
        if hook is None:
            return
        try:
            hook(sender, amount)
        except Exception as e:
            logger.warning("Receive hook of %s rejected %d: %s", to, amount, e)
            self.revert_transfer(sender, to, amount)
            raise TransferFailed(f"native: receiver {to} rejected transfer: {e}") from e

    def revert_transfer(self, sender: str, to: str, amount: int) -> None:
        """
        Компенсация transfer(sender, to, amount) без вызова hooks.

        Raises:
            TransferFailed: Если to уже не владеет amount
        """
        validate_amount(amount)
        with self._lock:
            self._move(to, sender, amount)
        logger.debug("native revert transfer %d: %s -> %s", amount, to, sender)

    def _move(self, sender: str, to: str, amount: int) -> None:
        balance = self.balance_of(sender)
        if balance < amount:
            raise TransferFailed(f"native: insufficient balance ({balance} < {amount})")
        self._balances[sender] = balance - amount
        self._balances[to] = self.balance_of(to) + amount

"""
Fungible Assets — внешний коллаборатор движка

FungibleAsset: протокол fungible-актива (transfer / approve / transfer_from).
InMemoryFungibleAsset: реализация в памяти для токена движка, платёжных
активов и локальной симуляции.

Все ошибки перевода — TransferFailed. Каждый перевод можно компенсировать
(revert_transfer / revert_transfer_from), затрагивая только его счета,
чтобы движок мог откатить свою операцию целиком (all-or-nothing).
"""

import logging
import threading
from typing import Dict, Protocol, Tuple, runtime_checkable

from src.core.domain.errors import TransferFailed
from src.core.domain.units import TOKEN_DECIMALS, validate_amount, validate_decimals
from src.core.math.numerical_safeguards import checked_add

logger = logging.getLogger(__name__)


# =============================================================================
# PROTOCOLS
# =============================================================================


@runtime_checkable
class Revertible(Protocol):
    """Ledger, способный компенсировать собственный перевод.

    Компенсация затрагивает только счета исходного перевода, поэтому
    параллельные переводы других участников не теряются.
    """

    def revert_transfer(self, sender: str, to: str, amount: int) -> None: ...


@runtime_checkable
class FungibleAsset(Revertible, Protocol):
    """Протокол fungible-актива с предварительной авторизацией списаний."""

    asset_id: str
    decimals: int

    def balance_of(self, account: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def approve(self, owner: str, spender: str, amount: int) -> None: ...

    def transfer(self, sender: str, to: str, amount: int) -> None: ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None: ...

    def revert_transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None: ...


# =============================================================================
# IN-MEMORY IMPLEMENTATION
# =============================================================================


class InMemoryFungibleAsset:
    """
    Fungible-актив в памяти.

    Хранит балансы и allowance; total_supply меняется только через mint.
    Каждая мутация атомарна относительно других потоков.
    """

    def __init__(
        self,
        asset_id: str,
        name: str = "",
        symbol: str = "",
        decimals: int = TOKEN_DECIMALS,
    ):
        if not asset_id:
            raise ValueError("asset_id must be non-empty")
        self.asset_id = asset_id
        self.name = name or asset_id
        self.symbol = symbol or asset_id
        self.decimals = validate_decimals(decimals)

        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._total_supply = 0
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"InMemoryFungibleAsset({self.asset_id!r}, decimals={self.decimals})"

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def mint(self, to: str, amount: int) -> None:
        """Выпуск новых единиц на счёт to."""
        validate_amount(amount)
        with self._lock:
            self._total_supply = checked_add(self._total_supply, amount)
            self._balances[to] = self.balance_of(to) + amount
        logger.debug("%s mint %d -> %s", self.asset_id, amount, to)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Авторизация spender списывать до amount со счёта owner."""
        validate_amount(amount)
        with self._lock:
            self._allowances[(owner, spender)] = amount

    def transfer(self, sender: str, to: str, amount: int) -> None:
        """
        Перевод amount со счёта sender на счёт to.

        Raises:
            TransferFailed: Если баланса sender недостаточно
        """
        validate_amount(amount)
        with self._lock:
            self._move(sender, to, amount)

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None:
        """
        Списание по предварительной авторизации.

        Raises:
            TransferFailed: Если allowance или баланс owner недостаточны
        """
        validate_amount(amount)
        with self._lock:
            allowed = self.allowance(owner, spender)
            if allowed < amount:
                raise TransferFailed(
                    f"{self.asset_id}: insufficient allowance ({allowed} < {amount})"
                )
            self._move(owner, to, amount)
            self._allowances[(owner, spender)] = allowed - amount

    def _move(self, sender: str, to: str, amount: int) -> None:
        balance = self.balance_of(sender)
        if balance < amount:
            raise TransferFailed(
                f"{self.asset_id}: insufficient balance ({balance} < {amount})"
            )
        self._balances[sender] = balance - amount
        self._balances[to] = self.balance_of(to) + amount

    # -------------------------------------------------------------------------
    # Compensation
    # -------------------------------------------------------------------------

    def revert_transfer(self, sender: str, to: str, amount: int) -> None:
        """
        Компенсация transfer(sender, to, amount): amount возвращается с to на sender.

        Raises:
            TransferFailed: Если to уже не владеет amount
        """
        validate_amount(amount)
        with self._lock:
            self._move(to, sender, amount)
        logger.debug("%s revert transfer %d: %s -> %s", self.asset_id, amount, to, sender)

    def revert_transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None:
        """Компенсация transfer_from: возврат средств owner и восстановление allowance."""
        validate_amount(amount)
        with self._lock:
            self._move(to, owner, amount)
            self._allowances[(owner, spender)] = checked_add(
                self.allowance(owner, spender), amount
            )
        logger.debug("%s revert transfer_from %d: %s -> %s", self.asset_id, amount, to, owner)

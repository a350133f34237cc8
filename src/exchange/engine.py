"""Exchange Engine — обмен нативной валюты и платёжных активов на токен.

Четыре операции (направление × класс актива):
- buy_with_native:  нативная валюта → токены по котировке оракула
- buy_with_asset:   платёжный актив → токены по курсу реестра
- sell_for_native:  токены → нативная валюта по котировке оракула
- sell_for_asset:   токены → платёжный актив по курсу реестра

Порядок внутри операции фиксирован:
validate → debit исходящей стороны → credit входящей стороны → событие.
Исходящий внешний перевод (нативная валюта / актив продавцу) — всегда последний шаг.

Атомарность: каждая операция выполняется под re-entrancy guard и журналом
компенсаций. Каждый выполненный шаг (перевод, debit/credit казны) регистрирует
обратный шаг; при ошибке они выполняются в обратном порядке и затрагивают
только счета этой операции. События операции записываются в журнал после
успеха, подписчики уведомляются уже после снятия guard.

Округление — всегда вниз, в пользу казны.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Tuple, Union

from src.admin.controller import AdminController
from src.core.domain.errors import (
    InsufficientTreasury,
    ReentrantCall,
    UnsupportedAsset,
    ZeroAmount,
)
from src.core.domain.payment_asset import PaymentAssetEntry
from src.core.domain.quote import PriceQuote
from src.core.domain.swap import AdminAction, SwapEvent, SwapKind, TokenMetadata
from src.core.events.log import Event
from src.core.math.conversions import (
    native_to_tokens,
    payment_to_tokens,
    tokens_to_native,
    tokens_to_payment,
)
from src.core.math.numerical_safeguards import validate_uint
from src.exchange.config import ExchangeConfig
from src.ledger.assets import FungibleAsset
from src.ledger.native import NativeLedger
from src.oracle.adapter import PriceOracleAdapter
from src.oracle.price_feed import PriceFeed
from src.treasury.accounting import Treasury

logger = logging.getLogger(__name__)

Compensation = Callable[[], None]
Ledger = Union[FungibleAsset, NativeLedger]


class SwapJournal:
    """Журнал одной операции: компенсации для отката и отложенные события."""

    def __init__(self):
        self._compensations: List[Tuple[str, Compensation]] = []
        self.pending: List[Event] = []
        self.published: List[Event] = []

    def on_rollback(self, description: str, compensation: Compensation) -> None:
        """Регистрация обратного шага для уже выполненного шага."""
        self._compensations.append((description, compensation))

    def record(self, event: Event) -> None:
        self.pending.append(event)

    def rollback(self) -> None:
        """Выполнение компенсаций в обратном порядке, отложенные события отбрасываются."""
        self.pending.clear()
        while self._compensations:
            description, compensation = self._compensations.pop()
            try:
                compensation()
            except Exception:
                # Остальные компенсации всё равно выполняются
                logger.exception("Compensation failed: %s", description)


class ExchangeEngine:
    """Обменный движок с единой казной и котировкой оракула."""

    def __init__(
        self,
        token: FungibleAsset,
        native: NativeLedger,
        oracle: PriceOracleAdapter,
        admin: AdminController,
        config: Optional[ExchangeConfig] = None,
        metadata: Optional[TokenMetadata] = None,
        address: Optional[str] = None,
    ):
        """
        Args:
            token: ledger токена движка
            native: ledger нативной валюты
            oracle: адаптер котировки нативной валюты
            admin: привилегированная роль (владеет реестром)
            config: конфигурация движка
            metadata: метаданные токена
            address: счёт движка в ledger'ах
        """
        self.config = config or ExchangeConfig()
        if token.decimals != self.config.token_decimals:
            raise ValueError(
                f"token decimals {token.decimals} != configured {self.config.token_decimals}"
            )
        if native.decimals != self.config.native_decimals:
            raise ValueError(
                f"native decimals {native.decimals} != configured {self.config.native_decimals}"
            )

        self.token = token
        self.native = native
        self.oracle = oracle
        self.admin = admin
        self.registry = admin.registry
        self.events = admin.event_log
        self.address = address or f"exchange:{token.asset_id}"
        self.treasury = Treasury(token.asset_id, self.config.native_asset_id)
        self.metadata = metadata or TokenMetadata(
            name=token.asset_id, symbol=token.asset_id, decimals=token.decimals
        )

        self._lock = threading.RLock()
        self._entered = False

    # =========================================================================
    # GUARDS
    # =========================================================================

    @contextmanager
    def _non_reentrant(self, operation: str) -> Iterator[None]:
        """Сериализация операций и запрет повторного входа.

        Разные потоки ждут на lock; повторный вход из того же потока
        (например, из receive hook) получает ReentrantCall.
        """
        with self._lock:
            if self._entered:
                logger.warning("Reentrant call to %s rejected", operation)
                raise ReentrantCall(f"Reentrant call to {operation}")
            self._entered = True
            try:
                yield
            finally:
                self._entered = False

    @contextmanager
    def _operation(self, operation: str, caller: str) -> Iterator[SwapJournal]:
        """Атомарная операция: всё или ничего."""
        with self._non_reentrant(operation):
            journal = SwapJournal()
            try:
                yield journal
                if journal.pending:
                    block = self.events.next_block()
                    stamped = [e.model_copy(update={"block": block}) for e in journal.pending]
                    self.events.append(*stamped)
                    journal.published = stamped
            except Exception as e:
                journal.rollback()
                logger.warning("%s by %s reverted: %r", operation, caller, e)
                raise

        # Операция зафиксирована: подписчики уже не могут её откатить
        if journal.published:
            self.events.notify(*journal.published)

    def _require_positive(self, amount: int, reason: str) -> None:
        if isinstance(amount, int) and not isinstance(amount, bool) and amount == 0:
            raise ZeroAmount(reason)
        validate_uint(amount, "amount")

    def _require_output(self, amount_out: int, amount_in: int) -> None:
        if self.config.reject_zero_output and amount_out == 0:
            raise ZeroAmount(f"Amount {amount_in} is too small: output rounds down to zero")

    def _resolve_asset(self, asset_id: str) -> Tuple[int, FungibleAsset]:
        rate = self.registry.rate_of(asset_id)
        if rate is None:
            raise UnsupportedAsset(f"Unsupported payment token: {asset_id}")
        return rate, self.registry.asset_contract(asset_id)

    # -------------------------------------------------------------------------
    # Compensated steps
    # -------------------------------------------------------------------------

    def _transfer(
        self, journal: SwapJournal, ledger: Ledger, sender: str, to: str, amount: int
    ) -> None:
        ledger.transfer(sender, to, amount)
        journal.on_rollback(
            f"{ledger.asset_id} transfer {amount} {sender} -> {to}",
            lambda: ledger.revert_transfer(sender, to, amount),
        )

    def _pull(self, journal: SwapJournal, asset: FungibleAsset, owner: str, amount: int) -> None:
        """Списание актива owner по allowance, выданному движку."""
        asset.transfer_from(self.address, owner, self.address, amount)
        journal.on_rollback(
            f"{asset.asset_id} transfer_from {amount} {owner}",
            lambda: asset.revert_transfer_from(self.address, owner, self.address, amount),
        )

    def _debit_token(self, journal: SwapJournal, amount: int) -> None:
        self.treasury.debit_token(amount)
        journal.on_rollback(
            f"treasury token debit {amount}", lambda: self.treasury.credit_token(amount)
        )

    def _credit_token(self, journal: SwapJournal, amount: int) -> int:
        balance = self.treasury.credit_token(amount)
        journal.on_rollback(
            f"treasury token credit {amount}", lambda: self.treasury.debit_token(amount)
        )
        return balance

    def _debit_payment(self, journal: SwapJournal, asset_id: str, amount: int) -> None:
        self.treasury.debit_payment(asset_id, amount)
        journal.on_rollback(
            f"treasury {asset_id} debit {amount}",
            lambda: self.treasury.credit_payment(asset_id, amount),
        )

    def _credit_payment(self, journal: SwapJournal, asset_id: str, amount: int) -> int:
        balance = self.treasury.credit_payment(asset_id, amount)
        journal.on_rollback(
            f"treasury {asset_id} credit {amount}",
            lambda: self.treasury.debit_payment(asset_id, amount),
        )
        return balance

    # =========================================================================
    # SWAPS
    # =========================================================================

    def buy_with_native(self, caller: str, native_amount: int) -> SwapEvent:
        """Покупка токенов за нативную валюту.

        Нативная валюта поступает вместе с вызовом: сначала она зачисляется
        на счёт движка, затем расчёт идёт по уже полученной сумме.

        tokens_out = floor(native_amount * 10^token_decimals / price)

        Raises:
            ZeroAmount: native_amount == 0
            OracleUnavailable, StalePrice: котировка недоступна
            InsufficientTreasury: tokens_out > пул токенов
            TransferFailed: у вызывающего недостаточно нативной валюты
        """
        native_id = self.config.native_asset_id
        with self._operation(SwapKind.BUY_WITH_NATIVE.value, caller) as journal:
            self._require_positive(native_amount, "No native currency sent")

            # 1. Получение средств вместе с вызовом
            self._transfer(journal, self.native, caller, self.address, native_amount)

            # 2. Validate
            quote = self.oracle.get_native_price()
            tokens_out = native_to_tokens(native_amount, quote.price, self.config.token_decimals)
            self._require_output(tokens_out, native_amount)
            if tokens_out > self.treasury.token_balance():
                raise InsufficientTreasury(
                    f"Insufficient tokens in contract: {tokens_out} > {self.treasury.token_balance()}"
                )

            # 3. Debit outgoing
            self._debit_token(journal, tokens_out)
            self._transfer(journal, self.token, self.address, caller, tokens_out)

            # 4. Credit incoming
            self._credit_payment(journal, native_id, native_amount)

            journal.record(
                SwapEvent(
                    initiator=caller,
                    kind=SwapKind.BUY_WITH_NATIVE,
                    asset_in=native_id,
                    amount_in=native_amount,
                    asset_out=self.token.asset_id,
                    amount_out=tokens_out,
                    block=0,
                )
            )

        event = journal.published[0]
        logger.info(
            "%s bought %d tokens for %d %s (price=%d)",
            caller, tokens_out, native_amount, native_id, quote.price,
        )
        return event

    def buy_with_asset(self, caller: str, asset_id: str, payment_amount: int) -> SwapEvent:
        """Покупка токенов за платёжный актив по курсу реестра.

        Вызывающий должен заранее авторизовать движок на списание payment_amount.

        tokens_out = floor(payment_amount * 10^token_decimals / rate)

        Raises:
            ZeroAmount: payment_amount == 0
            UnsupportedAsset: актив не зарегистрирован
            InsufficientTreasury: tokens_out > пул токенов
            TransferFailed: списание актива отклонено (allowance / баланс)
        """
        with self._operation(SwapKind.BUY_WITH_ASSET.value, caller) as journal:
            self._require_positive(payment_amount, "Payment amount must be > 0")
            rate, asset = self._resolve_asset(asset_id)

            tokens_out = payment_to_tokens(payment_amount, rate, self.config.token_decimals)
            self._require_output(tokens_out, payment_amount)
            if tokens_out > self.treasury.token_balance():
                raise InsufficientTreasury(
                    f"Insufficient tokens in contract: {tokens_out} > {self.treasury.token_balance()}"
                )

            self._pull(journal, asset, caller, payment_amount)

            self._debit_token(journal, tokens_out)
            self._transfer(journal, self.token, self.address, caller, tokens_out)
            self._credit_payment(journal, asset_id, payment_amount)

            journal.record(
                SwapEvent(
                    initiator=caller,
                    kind=SwapKind.BUY_WITH_ASSET,
                    asset_in=asset_id,
                    amount_in=payment_amount,
                    asset_out=self.token.asset_id,
                    amount_out=tokens_out,
                    block=0,
                )
            )

        logger.info("%s bought %d tokens for %d %s", caller, tokens_out, payment_amount, asset_id)
        return journal.published[0]

    def sell_for_native(self, caller: str, token_amount: int) -> SwapEvent:
        """Продажа токенов за нативную валюту.

        native_out = floor(token_amount * price / 10^token_decimals)

        Перевод нативной валюты продавцу — последний шаг, после всех
        изменений казны.

        Raises:
            ZeroAmount: token_amount == 0
            OracleUnavailable, StalePrice: котировка недоступна
            InsufficientTreasury: native_out > нативный баланс казны
            TransferFailed: у продавца недостаточно токенов или получатель отклонил перевод
            ReentrantCall: вызов из receive hook во время другой операции
        """
        native_id = self.config.native_asset_id
        with self._operation(SwapKind.SELL_FOR_NATIVE.value, caller) as journal:
            self._require_positive(token_amount, "Token amount must be > 0")

            quote = self.oracle.get_native_price()
            native_out = tokens_to_native(token_amount, quote.price, self.config.token_decimals)
            self._require_output(native_out, token_amount)
            if native_out > self.treasury.payment_balance(native_id):
                raise InsufficientTreasury(
                    f"Insufficient native balance in contract: "
                    f"{native_out} > {self.treasury.payment_balance(native_id)}"
                )

            # Токены продавца поступают на счёт движка
            self._transfer(journal, self.token, caller, self.address, token_amount)

            self._debit_payment(journal, native_id, native_out)
            self._credit_token(journal, token_amount)

            journal.record(
                SwapEvent(
                    initiator=caller,
                    kind=SwapKind.SELL_FOR_NATIVE,
                    asset_in=self.token.asset_id,
                    amount_in=token_amount,
                    asset_out=native_id,
                    amount_out=native_out,
                    block=0,
                )
            )

            # Interaction последним
            self._transfer(journal, self.native, self.address, caller, native_out)

        logger.info(
            "%s sold %d tokens for %d %s (price=%d)",
            caller, token_amount, native_out, native_id, quote.price,
        )
        return journal.published[0]

    def sell_for_asset(self, caller: str, asset_id: str, token_amount: int) -> SwapEvent:
        """Продажа токенов за платёжный актив по курсу реестра.

        payment_out = floor(token_amount * rate / 10^token_decimals)

        Raises:
            ZeroAmount: token_amount == 0
            UnsupportedAsset: актив не зарегистрирован
            InsufficientTreasury: payment_out > баланс актива в казне
            TransferFailed: у продавца недостаточно токенов или актив отклонил перевод
        """
        with self._operation(SwapKind.SELL_FOR_ASSET.value, caller) as journal:
            self._require_positive(token_amount, "Token amount must be > 0")
            rate, asset = self._resolve_asset(asset_id)

            payment_out = tokens_to_payment(token_amount, rate, self.config.token_decimals)
            self._require_output(payment_out, token_amount)
            if payment_out > self.treasury.payment_balance(asset_id):
                raise InsufficientTreasury(
                    f"Insufficient {asset_id} balance in contract: "
                    f"{payment_out} > {self.treasury.payment_balance(asset_id)}"
                )

            self._transfer(journal, self.token, caller, self.address, token_amount)

            self._debit_payment(journal, asset_id, payment_out)
            self._credit_token(journal, token_amount)

            journal.record(
                SwapEvent(
                    initiator=caller,
                    kind=SwapKind.SELL_FOR_ASSET,
                    asset_in=self.token.asset_id,
                    amount_in=token_amount,
                    asset_out=asset_id,
                    amount_out=payment_out,
                    block=0,
                )
            )

            self._transfer(journal, asset, self.address, caller, payment_out)

        logger.info("%s sold %d tokens for %d %s", caller, token_amount, payment_out, asset_id)
        return journal.published[0]

    # Имена внешнего интерфейса контракта
    buy_tokens = buy_with_native
    buy_tokens_with_token = buy_with_asset
    sell_tokens_for_native = sell_for_native
    sell_tokens_for_token = sell_for_asset

    # =========================================================================
    # FUNDING
    # =========================================================================

    def receive_native(self, sender: str, amount: int) -> int:
        """Приём нативной валюты вне свопа (пополнение резерва для выплат).

        Returns:
            Нативный баланс казны после зачисления
        """
        with self._operation("receive_native", sender) as journal:
            self._require_positive(amount, "No native currency sent")
            self._transfer(journal, self.native, sender, self.address, amount)
            balance = self._credit_payment(journal, self.config.native_asset_id, amount)
        logger.info("Received %d native from %s (reserve=%d)", amount, sender, balance)
        return balance

    def deposit_tokens(self, sender: str, amount: int) -> int:
        """Пополнение пула токенов на продажу.

        Returns:
            Пул токенов после зачисления
        """
        with self._operation("deposit_tokens", sender) as journal:
            self._require_positive(amount, "Token amount must be > 0")
            self._transfer(journal, self.token, sender, self.address, amount)
            balance = self._credit_token(journal, amount)
        logger.info("Sale pool funded with %d tokens by %s (pool=%d)", amount, sender, balance)
        return balance

    def deposit_payment_asset(self, sender: str, asset_id: str, amount: int) -> int:
        """Пополнение резерва платёжного актива для выплат продавцам.

        Raises:
            UnsupportedAsset: актив не зарегистрирован
        """
        with self._operation("deposit_payment_asset", sender) as journal:
            self._require_positive(amount, "Payment amount must be > 0")
            _, asset = self._resolve_asset(asset_id)
            self._transfer(journal, asset, sender, self.address, amount)
            balance = self._credit_payment(journal, asset_id, amount)
        logger.info("%s reserve funded with %d by %s (reserve=%d)", asset_id, amount, sender, balance)
        return balance

    # =========================================================================
    # VIEWS
    # =========================================================================

    def get_latest_price(self) -> PriceQuote:
        """Текущая котировка нативной валюты."""
        return self.oracle.get_native_price()

    def payment_token_price(self, asset_id: str) -> Optional[int]:
        """Курс платёжного актива (None — не поддерживается)."""
        return self.registry.rate_of(asset_id)

    def quote_buy_with_native(self, native_amount: int) -> int:
        price = self.oracle.get_native_price().price
        return native_to_tokens(native_amount, price, self.config.token_decimals)

    def quote_sell_for_native(self, token_amount: int) -> int:
        price = self.oracle.get_native_price().price
        return tokens_to_native(token_amount, price, self.config.token_decimals)

    def quote_buy_with_asset(self, asset_id: str, payment_amount: int) -> int:
        rate = self.registry.require_rate(asset_id)
        return payment_to_tokens(payment_amount, rate, self.config.token_decimals)

    def quote_sell_for_asset(self, asset_id: str, token_amount: int) -> int:
        rate = self.registry.require_rate(asset_id)
        return tokens_to_payment(token_amount, rate, self.config.token_decimals)

    def token_pool(self) -> int:
        return self.treasury.token_balance()

    def native_reserve(self) -> int:
        return self.treasury.payment_balance(self.config.native_asset_id)

    def payment_reserve(self, asset_id: str) -> int:
        return self.treasury.payment_balance(asset_id)

    # =========================================================================
    # ADMIN
    # =========================================================================

    def set_payment_token_price(
        self, caller: str, asset: FungibleAsset, rate: int
    ) -> PaymentAssetEntry:
        """Установка курса платёжного актива (только администратор)."""
        with self._non_reentrant("set_payment_token_price"):
            return self.admin.set_payment_asset_rate(caller, asset, rate)

    def set_price_feed(self, caller: str, feed: PriceFeed) -> None:
        """Замена внешнего price feed (только администратор)."""
        with self._non_reentrant("set_price_feed"):
            self.admin.require_admin(caller)
            previous = self.oracle.set_feed(feed)
            self.admin.record_change(
                caller, AdminAction.SET_PRICE_FEED, _describe_feed(previous), _describe_feed(feed)
            )
        logger.info("Price feed replaced by %s: %s", caller, _describe_feed(feed))

    def set_logo_uri(self, caller: str, logo_uri: str) -> None:
        """Обновление URI логотипа токена (только администратор)."""
        with self._non_reentrant("set_logo_uri"):
            self.admin.require_admin(caller)
            previous = self.metadata.logo_uri
            self.metadata = self.metadata.model_copy(update={"logo_uri": logo_uri})
            self.admin.record_change(caller, AdminAction.SET_LOGO_URI, previous, logo_uri)
        logger.info("Logo URI updated by %s", caller)


def _describe_feed(feed: PriceFeed) -> str:
    describe = getattr(feed, "description", None)
    if callable(describe):
        return f"{type(feed).__name__}({describe()})"
    return type(feed).__name__

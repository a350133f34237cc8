"""Payment Asset Registry — реестр альтернативных платёжных активов.

Курс: единиц платёжного актива за 1 токен, масштабирован на decimals актива.

Правила:
- Запись изменяется только через администратора (Unauthorized иначе)
- rate == 0 → InvalidRate
- register — идемпотентный upsert
- Удаление логическое (supported=False); история изменений хранится целиком
- rate_of() → None — единственный источник истины для "актив не поддерживается"

Размер реестра — десятки записей, линейные структуры допустимы.
"""

import logging
import time
from typing import Callable, Dict, List, Optional, Protocol

from src.core.domain.errors import InvalidRate, UnsupportedAsset
from src.core.domain.payment_asset import PaymentAssetEntry
from src.core.domain.swap import RegistryChangeEvent
from src.core.domain.units import NATIVE_ASSET_ID, validate_amount
from src.core.events.log import EventLog
from src.ledger.assets import FungibleAsset

logger = logging.getLogger(__name__)


class AccessControl(Protocol):
    """Проверка административных прав."""

    def require_admin(self, caller: str) -> None: ...


class PaymentAssetRegistry:
    """Реестр платёжных активов: asset_id → PaymentAssetEntry."""

    def __init__(
        self,
        access: AccessControl,
        event_log: Optional[EventLog] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            access: владелец прав записи (AdminController)
            event_log: журнал для RegistryChangeEvent
            clock: источник времени для updated_at
        """
        self._access = access
        self._event_log = event_log if event_log is not None else EventLog()
        self._clock = clock

        self._entries: Dict[str, PaymentAssetEntry] = {}
        self._contracts: Dict[str, FungibleAsset] = {}
        self._history: List[RegistryChangeEvent] = []

    # -------------------------------------------------------------------------
    # Writes (admin-only)
    # -------------------------------------------------------------------------

    def register(self, caller: str, asset: FungibleAsset, rate: int) -> PaymentAssetEntry:
        """Регистрация или обновление курса платёжного актива.

        Args:
            caller: инициатор (должен быть администратором)
            asset: контракт платёжного актива
            rate: единиц актива за 1 токен (> 0)

        Returns:
            Новая запись реестра

        Raises:
            Unauthorized: caller не администратор
            InvalidRate: rate == 0
        """
        self._access.require_admin(caller)
        if isinstance(rate, bool) or not isinstance(rate, int) or rate <= 0:
            raise InvalidRate(f"Rate for {asset.asset_id} must be > 0, got {rate!r}")
        validate_amount(rate, "rate")
        if asset.asset_id == NATIVE_ASSET_ID:
            raise ValueError(f"{NATIVE_ASSET_ID} is priced by the oracle, not the registry")

        previous = self._entries.get(asset.asset_id)
        entry = PaymentAssetEntry(
            asset_id=asset.asset_id,
            rate=rate,
            decimals=asset.decimals,
            supported=True,
            updated_at=int(self._clock()),
        )
        self._entries[asset.asset_id] = entry
        self._contracts[asset.asset_id] = asset
        self._record(caller, previous, entry)

        logger.info(
            "Payment asset %s rate set: %s -> %d by %s",
            asset.asset_id,
            previous.rate if previous else None,
            rate,
            caller,
        )
        return entry

    def remove(self, caller: str, asset_id: str) -> PaymentAssetEntry:
        """Логическое удаление актива (supported=False, история сохраняется).

        Raises:
            Unauthorized: caller не администратор
            UnsupportedAsset: актив не зарегистрирован или уже удалён
        """
        self._access.require_admin(caller)
        previous = self._entries.get(asset_id)
        if previous is None or not previous.supported:
            raise UnsupportedAsset(f"Unsupported payment token: {asset_id}")

        entry = previous.model_copy(
            update={"supported": False, "updated_at": int(self._clock())}
        )
        self._entries[asset_id] = entry
        self._record(caller, previous, entry)

        logger.info("Payment asset %s removed by %s", asset_id, caller)
        return entry

    def _record(
        self, caller: str, previous: Optional[PaymentAssetEntry], entry: PaymentAssetEntry
    ) -> None:
        event = RegistryChangeEvent(
            asset_id=entry.asset_id,
            old_rate=previous.rate if previous and previous.supported else None,
            new_rate=entry.rate,
            supported=entry.supported,
            changed_by=caller,
            block=self._event_log.next_block(),
        )
        self._event_log.publish(event)
        self._history.append(event)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def rate_of(self, asset_id: str) -> Optional[int]:
        """Текущий курс актива.

        Returns:
            rate, либо None если актив не регистрировался или удалён
        """
        entry = self._entries.get(asset_id)
        if entry is None or not entry.is_active():
            return None
        return entry.rate

    def require_rate(self, asset_id: str) -> int:
        """rate_of() с UnsupportedAsset вместо None."""
        rate = self.rate_of(asset_id)
        if rate is None:
            raise UnsupportedAsset(f"Unsupported payment token: {asset_id}")
        return rate

    def asset_contract(self, asset_id: str) -> FungibleAsset:
        """Контракт поддерживаемого актива.

        Raises:
            UnsupportedAsset: актив не поддерживается
        """
        self.require_rate(asset_id)
        return self._contracts[asset_id]

    def entry(self, asset_id: str) -> Optional[PaymentAssetEntry]:
        """Последняя запись (включая удалённые)."""
        return self._entries.get(asset_id)

    def supported_assets(self) -> List[str]:
        return [asset_id for asset_id, e in self._entries.items() if e.is_active()]

    def history(self, asset_id: Optional[str] = None) -> List[RegistryChangeEvent]:
        """История изменений реестра (опционально по одному активу)."""
        if asset_id is None:
            return list(self._history)
        return [e for e in self._history if e.asset_id == asset_id]

    def __contains__(self, asset_id: str) -> bool:
        return self.rate_of(asset_id) is not None

    def __len__(self) -> int:
        return len(self.supported_assets())

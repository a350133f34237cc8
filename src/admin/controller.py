"""Admin Controller — единственная привилегированная роль.

Хранит identity администратора и владеет правами записи в реестр платёжных
активов. Глобального состояния нет: контроллер явно передаётся движку
при создании.

Операции:
- set_payment_asset_rate / remove_payment_asset → реестр
- transfer_admin → передача роли (AdminChangeEvent)
- require_admin → проверка для остальных компонентов (смена feed, logo)
"""

import logging
import time
from typing import Callable, Optional

from src.core.domain.errors import Unauthorized
from src.core.domain.payment_asset import PaymentAssetEntry
from src.core.domain.swap import AdminAction, AdminChangeEvent
from src.core.events.log import EventLog
from src.ledger.assets import FungibleAsset
from src.registry.payment_assets import PaymentAssetRegistry

logger = logging.getLogger(__name__)


class AdminController:
    """Привилегированная роль с аудируемой передачей прав."""

    def __init__(
        self,
        admin: str,
        event_log: Optional[EventLog] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            admin: identity администратора
            event_log: журнал для AdminChangeEvent / RegistryChangeEvent
            clock: источник времени
        """
        if not admin:
            raise ValueError("admin identity must be non-empty")
        self._admin = admin
        self.event_log = event_log if event_log is not None else EventLog()
        self.registry = PaymentAssetRegistry(self, event_log=self.event_log, clock=clock)

    @property
    def admin(self) -> str:
        return self._admin

    def is_admin(self, caller: str) -> bool:
        return caller == self._admin

    def require_admin(self, caller: str) -> None:
        """
        Raises:
            Unauthorized: caller не администратор
        """
        if not self.is_admin(caller):
            logger.warning("Unauthorized admin call by %s", caller)
            raise Unauthorized(f"Caller {caller} is not the admin")

    def set_payment_asset_rate(
        self, caller: str, asset: FungibleAsset, rate: int
    ) -> PaymentAssetEntry:
        """Установка курса платёжного актива (единиц актива за 1 токен)."""
        return self.registry.register(caller, asset, rate)

    # Имя из внешнего интерфейса контракта
    set_payment_token_price = set_payment_asset_rate

    def remove_payment_asset(self, caller: str, asset_id: str) -> PaymentAssetEntry:
        """Логическое удаление платёжного актива."""
        return self.registry.remove(caller, asset_id)

    def transfer_admin(self, caller: str, new_admin: str) -> AdminChangeEvent:
        """Передача роли администратора.

        Raises:
            Unauthorized: caller не администратор
            ValueError: new_admin пустой
        """
        self.require_admin(caller)
        if not new_admin:
            raise ValueError("new_admin must be non-empty")

        event = self.record_change(caller, AdminAction.TRANSFER_ADMIN, self._admin, new_admin)
        self._admin = new_admin
        logger.info("Admin role transferred: %s -> %s", caller, new_admin)
        return event

    def record_change(
        self, caller: str, action: AdminAction, old_value: str, new_value: str
    ) -> AdminChangeEvent:
        """Публикация AdminChangeEvent для административного изменения."""
        event = AdminChangeEvent(
            action=action,
            old_value=old_value,
            new_value=new_value,
            changed_by=caller,
            block=self.event_log.next_block(),
        )
        self.event_log.publish(event)
        return event

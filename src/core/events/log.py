"""
EventLog — Журнал наблюдаемых событий движка

Публикует SwapEvent, RegistryChangeEvent и AdminChangeEvent для внешних
индексаторов. Каждая публикация — одна операция (block): события операции
публикуются вместе, после успешного завершения, либо не публикуются вовсе.

При validate=True каждое событие проверяется против своей JSON Schema
(src/core/contracts/schema) до записи в журнал. Подписчики уведомляются
после записи; их ошибки логируются и не отменяют событие.
"""

import logging
import threading
from typing import Callable, Dict, List, Optional, Type, TypeVar, Union

from src.core.contracts.validators import EVENT_SCHEMAS, ContractValidator
from src.core.domain.swap import AdminChangeEvent, RegistryChangeEvent, SwapEvent

logger = logging.getLogger(__name__)

Event = Union[SwapEvent, RegistryChangeEvent, AdminChangeEvent]
EventT = TypeVar("EventT", SwapEvent, RegistryChangeEvent, AdminChangeEvent)
Subscriber = Callable[[Event], None]


class EventLog:
    """Append-only журнал событий с подписчиками."""

    def __init__(self, validate: bool = True):
        self.validate = validate
        self._events: List[Event] = []
        self._subscribers: List[Subscriber] = []
        self._validators: Dict[str, ContractValidator] = {}
        self._height = 0
        self._lock = threading.RLock()

    @property
    def height(self) -> int:
        """Номер последней опубликованной операции."""
        return self._height

    def next_block(self) -> int:
        """Номер, который получит следующая публикация."""
        return self._height + 1

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    def publish(self, *events: Event) -> int:
        """
        Публикация событий одной операции: append + notify.

        Args:
            events: События операции (все с block == next_block())

        Returns:
            Номер операции (block)

        Raises:
            jsonschema.ValidationError: Если событие не соответствует схеме
            ValueError: Если block события не совпадает с next_block()
        """
        block = self.append(*events)
        self.notify(*events)
        return block

    def append(self, *events: Event) -> int:
        """
        Запись событий одной операции в журнал без уведомления подписчиков.

        Событие либо проходит все проверки и записывается, либо журнал
        не меняется.

        Raises:
            jsonschema.ValidationError: Если событие не соответствует схеме
            ValueError: Если block события не совпадает с next_block()
        """
        with self._lock:
            block = self.next_block()
            for event in events:
                if event.block != block:
                    raise ValueError(
                        f"{type(event).__name__}.block={event.block}, expected {block}"
                    )
                if self.validate:
                    self._validator_for(event).validate(event.model_dump(mode="json"))

            self._events.extend(events)
            self._height = block
        return block

    def notify(self, *events: Event) -> None:
        """
        Уведомление подписчиков об уже записанных событиях.

        Ошибка подписчика не отменяет записанное событие и не мешает
        остальным подписчикам: она логируется.
        """
        for event in events:
            logger.debug("Event #%d %s", event.block, type(event).__name__)
            for subscriber in self._subscribers:
                try:
                    subscriber(event)
                except Exception:
                    logger.exception(
                        "Subscriber %r failed on %s #%d",
                        subscriber,
                        type(event).__name__,
                        event.block,
                    )

    def events(self, event_type: Optional[Type[EventT]] = None) -> List[Event]:
        """Список событий (опционально только заданного типа)."""
        if event_type is None:
            return list(self._events)
        return [e for e in self._events if isinstance(e, event_type)]

    def swaps(self) -> List[SwapEvent]:
        return self.events(SwapEvent)

    def last(self) -> Optional[Event]:
        return self._events[-1] if self._events else None

    def __len__(self) -> int:
        return len(self._events)

    def _validator_for(self, event: Event) -> ContractValidator:
        schema_name = EVENT_SCHEMAS[type(event).__name__]
        validator = self._validators.get(schema_name)
        if validator is None:
            validator = ContractValidator(schema_name)
            self._validators[schema_name] = validator
        return validator

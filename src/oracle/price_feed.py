"""
Price Feed — интерфейс внешнего агрегатора цены

PriceFeed: протокол чтения (latest_round_data, decimals) в формате
агрегатора: (round_id, answer, started_at, updated_at, answered_in_round).

StaticPriceFeed: детерминированный feed для тестов и локальной симуляции
(аналог mock-агрегатора): цену и время задаёт владелец.
"""

import time
from typing import Callable, Optional, Protocol, Tuple, runtime_checkable

RoundTuple = Tuple[int, int, int, int, int]


@runtime_checkable
class PriceFeed(Protocol):
    """Протокол внешнего price feed."""

    def latest_round_data(self) -> RoundTuple: ...

    def decimals(self) -> int: ...

    def description(self) -> str: ...


class StaticPriceFeed:
    """
    Feed с ручным управлением ценой.

    Каждое set_answer открывает новый завершённый раунд.
    set_unavailable заставляет latest_round_data падать с заданной ошибкой.
    """

    def __init__(
        self,
        answer: int,
        decimals: int = 8,
        description: str = "NATIVE / USD",
        clock: Callable[[], float] = time.time,
        updated_at: Optional[int] = None,
    ):
        self._decimals = decimals
        self._description = description
        self._clock = clock
        self._round_id = 0
        self._answered_in_round = 0
        self._answer = 0
        self._started_at = 0
        self._updated_at = 0
        self._error: Optional[Exception] = None
        self.set_answer(answer, updated_at=updated_at)

    def set_answer(self, answer: int, updated_at: Optional[int] = None) -> None:
        """Публикация новой цены (новый раунд)."""
        now = int(self._clock()) if updated_at is None else updated_at
        self._round_id += 1
        self._answered_in_round = self._round_id
        self._answer = answer
        self._started_at = now
        self._updated_at = now

    def set_incomplete_round(self) -> None:
        """Открытие раунда без ответа: answered_in_round отстаёт от round_id."""
        self._round_id += 1

    def set_unavailable(self, error: Optional[Exception]) -> None:
        """Перевод feed в режим ошибки (None — восстановление)."""
        self._error = error

    def latest_round_data(self) -> RoundTuple:
        if self._error is not None:
            raise self._error
        return (
            self._round_id,
            self._answer,
            self._started_at,
            self._updated_at,
            self._answered_in_round,
        )

    def decimals(self) -> int:
        return self._decimals

    def description(self) -> str:
        return self._description

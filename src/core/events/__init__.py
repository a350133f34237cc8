"""Events — журнал событий движка для внешних индексаторов."""

from .log import Event, EventLog, Subscriber

__all__ = [
    "Event",
    "EventLog",
    "Subscriber",
]

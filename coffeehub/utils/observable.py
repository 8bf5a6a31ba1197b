import logging
from typing import Callable, Generic, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Observable(Generic[T]):
    """Minimal publish/subscribe channel.

    Listeners are called synchronously, in subscription order, on the
    emitting thread. A failing listener is logged and does not stop the
    others.
    """

    def __init__(self):
        self._listeners: List[Callable[[T], None]] = []

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, value: T) -> None:
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception("Listener %r failed", listener)

    def __len__(self):
        return len(self._listeners)

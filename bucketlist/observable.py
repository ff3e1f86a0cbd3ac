"""Change notification for state read by the front end."""

from typing import Callable, List, Optional

Dispatch = Callable[[Callable[[], None]], None]
Listener = Callable[[str], None]


def call_now(fn: Callable[[], None]) -> None:
    """Default dispatcher: run on the calling thread."""
    fn()


class Observable:
    """Base for state containers the front end subscribes to.

    Synchronous operations mutate state directly and notify listeners. Results
    of async work are handed to ``dispatch`` first so that state only changes
    on the thread that owns the UI.
    """

    def __init__(self, dispatch: Optional[Dispatch] = None):
        self._listeners: List[Listener] = []
        self._dispatch: Dispatch = dispatch or call_now

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener(attribute)``; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, *attributes: str) -> None:
        for attribute in attributes:
            for listener in list(self._listeners):
                listener(attribute)

    def _publish(self, **changes) -> None:
        """Apply attribute changes and notify listeners on the UI context."""
        def apply():
            for name, value in changes.items():
                setattr(self, name, value)
            self._notify(*changes)

        self._dispatch(apply)

from typing import Any, Callable, List

Listener = Callable[[str, Any], None]


class Observable:
    """Minimal publish/subscribe for state objects the UI polls or watches.

    Subscribers are called as ``callback(name, value)`` after a published
    field changes. Unchanged assignments are not published.
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _publish(self, name: str, value: Any):
        for cb in list(self._listeners):
            cb(name, value)

    def _set(self, name: str, value: Any):
        if hasattr(self, name) and getattr(self, name) == value:
            return
        setattr(self, name, value)
        self._publish(name, value)

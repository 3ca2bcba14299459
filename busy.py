import threading
from contextlib import contextmanager


class BusyError(Exception):
    """Raised when an action is started while a previous call for it is still pending."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Another {action} request is already in progress")


class InFlightGuard:
    """At most one in-flight call per action.

    Idle while the token is free, Pending while ``hold()`` is active.
    """

    def __init__(self, action: str):
        self.action = action
        self._token = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._token.locked()

    @contextmanager
    def hold(self):
        if not self._token.acquire(blocking=False):
            raise BusyError(self.action)
        try:
            yield
        finally:
            self._token.release()

import threading
import time
from collections.abc import Callable


class ModelThrottle:
    """Enforce a minimum interval between consecutive calls to the same model."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._clock = clock
        self._sleep = sleep
        self._last_call: dict[str, float] = {}
        self._lock = threading.Lock()

    def wait(self, model: str, min_interval: float) -> float:
        """Block until ``model`` may be called again; returns seconds waited.

        The slot is reserved under the lock; the sleep happens outside it.
        """
        with self._lock:
            now = self._clock()
            slot = now
            last = self._last_call.get(model)
            if last is not None and min_interval > 0:
                slot = max(now, last + min_interval)
            self._last_call[model] = slot

        waited = slot - now
        if waited <= 0:
            return 0.0
        self._sleep(waited)
        return waited

    def reset(self) -> None:
        with self._lock:
            self._last_call.clear()


default_throttle = ModelThrottle()

import threading
import time
from typing import Callable

from cachetools import TTLCache
from .config import settings

try:
    import redis  # Optional dependency
except ImportError:
    redis = None

class WindowCounter:
    """
    Fixed-window hit counter keyed by client id.
    In-process by default; Redis when USE_REDIS is set so several workers share quota.

    `hit` is the single check-and-increment step: it returns the count for the
    current window, or None when the key is already at `limit`.
    """
    def __init__(
        self,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
        maxsize: int = 8192,
    ):
        self.limit = max(1, limit)
        self.window = max(1, window_seconds)
        self.clock = clock
        self.backend = None
        if settings.USE_REDIS and redis is not None:
            self.backend = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
        # Entries expire no earlier than their window, so stale clients are evicted.
        self._local = TTLCache(maxsize=maxsize, ttl=self.window, timer=clock)
        self._lock = threading.Lock()

    def hit(self, key: str) -> int | None:
        if self.backend:
            return self._hit_redis(key)
        with self._lock:
            now = self.clock()
            record = self._local.get(key)
            if record is None or now >= record[1]:
                # First request, or first request after the window expired.
                self._local[key] = (1, now + self.window)
                return 1
            count, reset_at = record
            if count >= self.limit:
                return None
            self._local[key] = (count + 1, reset_at)
            return count + 1

    def _hit_redis(self, key: str) -> int | None:
        # INCR is atomic in Redis; the first hit of a window arms the expiry.
        rkey = f"rate:{key}"
        count = self.backend.incr(rkey)
        if count == 1:
            self.backend.expire(rkey, self.window)
        if count > self.limit:
            return None
        return count

    def clear(self) -> None:
        with self._lock:
            self._local.clear()

rate_counter = WindowCounter(settings.RATE_LIMIT_RPM, settings.RATE_LIMIT_WINDOW_SECONDS)

"""In-process cache of resolved trip forecasts."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from trip_weather.config import CACHE_DURATION_SECONDS, CACHE_MAX_ENTRIES
from trip_weather.weather.models import ForecastDay

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Forecast sequence for one trip span and the time it was stored."""
    data: Tuple[ForecastDay, ...]
    timestamp: float


class WeatherCache:
    """Time-boxed, size-bounded memoization of trip forecasts.

    Entries are keyed by destination and trip span. An entry older than the
    freshness window is never returned, and after every ``set`` at most
    ``max_entries`` entries remain, the oldest being discarded first.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        max_age_seconds: float = CACHE_DURATION_SECONDS,
        max_entries: int = CACHE_MAX_ENTRIES
    ):
        """Initialize the cache.

        Args:
            clock: Returns the current time in seconds
            max_age_seconds: Freshness window for entries
            max_entries: Upper bound on stored entries after ``set``
        """
        self.clock = clock
        self.max_age_seconds = max_age_seconds
        self.max_entries = max_entries
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def generate_key(destination: str, start_date: str, end_date: str) -> str:
        """Build the composite cache key.

        Changing this format invalidates every stored entry.
        """
        return f"{destination}-{start_date}-{end_date}"

    def get(self, destination: str, start_date: str, end_date: str) -> Optional[List[ForecastDay]]:
        """Return the cached forecast for a trip span, if still fresh.

        Args:
            destination: Destination string as given by the caller
            start_date: First trip day, YYYY-MM-DD
            end_date: Last trip day, YYYY-MM-DD

        Returns:
            Cached forecast days, or None on a miss or an expired entry
        """
        key = self.generate_key(destination, start_date, end_date)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            age = self.clock() - entry.timestamp
            if age > self.max_age_seconds:
                del self._entries[key]
                logger.debug(f"Evicted expired cache entry '{key}' (age {age:.0f}s)")
                return None

            return list(entry.data)

    def set(
        self,
        destination: str,
        start_date: str,
        end_date: str,
        data: Sequence[ForecastDay]
    ) -> None:
        """Store the forecast for a trip span and prune the cache.

        Args:
            destination: Destination string as given by the caller
            start_date: First trip day, YYYY-MM-DD
            end_date: Last trip day, YYYY-MM-DD
            data: Resolved forecast days
        """
        key = self.generate_key(destination, start_date, end_date)
        with self._lock:
            self._entries[key] = CacheEntry(data=tuple(data), timestamp=self.clock())
            self._cleanup_old_entries()

    def _cleanup_old_entries(self) -> None:
        """Drop expired entries, then the oldest ones beyond ``max_entries``.

        Caller must hold ``self._lock``.
        """
        now = self.clock()
        expired = [
            key for key, entry in self._entries.items()
            if now - entry.timestamp > self.max_age_seconds
        ]
        for key in expired:
            del self._entries[key]

        overflow = len(self._entries) - self.max_entries
        if overflow > 0:
            oldest = sorted(self._entries.items(), key=lambda item: item[1].timestamp)[:overflow]
            for key, _ in oldest:
                del self._entries[key]

        if expired or overflow > 0:
            logger.debug(
                f"Cache cleanup removed {len(expired)} expired and {max(overflow, 0)} overflow entries"
            )

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict:
        """Return cache size and the age in whole seconds of each entry."""
        with self._lock:
            now = self.clock()
            entries = [
                {"key": key, "age": int(now - entry.timestamp)}
                for key, entry in self._entries.items()
            ]
        return {"size": len(entries), "entries": entries}


# Process-wide cache shared by the service entry points
weather_cache = WeatherCache()

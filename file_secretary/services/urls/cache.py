"""Process-wide cache of resolved base addresses."""

import logging
import threading
from typing import Any, Callable, Dict, Hashable, Optional

logger = logging.getLogger(__name__)


class AddressCache:
    """
    Cache mapping resolution keys to computed base addresses.

    Values are pure functions of the loaded configuration, so two threads
    computing the same key concurrently store the same value. purge()
    swaps in a new map; a value computed against the old map is dropped
    instead of leaking into the new one.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[Hashable, Any] = {}

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return key in self._entries

    def get_or_compute(self, key: Hashable, compute_fn: Callable[[], Optional[Any]]):
        """
        Return the cached value for key, computing and storing it on a miss.

        A compute_fn result of None is returned but not stored.
        """
        entries = self._entries
        try:
            return entries[key]
        except KeyError:
            pass

        value = compute_fn()
        if value is None:
            return None

        with self._lock:
            # Skip the store if a purge happened while computing
            if entries is self._entries:
                entries[key] = value
        logger.debug(f"Cached base address for {key!r}")
        return value

    def purge(self) -> None:
        with self._lock:
            self._entries = {}
        logger.info("Purged calculated URL cache")

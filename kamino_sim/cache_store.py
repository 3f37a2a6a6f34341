# kamino_sim/cache_store.py
from collections import OrderedDict
from typing import Iterable

DEFAULT_CAPACITY = 100
EVICTION_MODES   = ("fifo", "lru")


class CacheStore:
    """
    Bounded set of data items cached on one host.

    Items are kept in an OrderedDict so eviction follows an explicit order:
    ``"fifo"`` evicts the oldest insertion, ``"lru"`` additionally moves an
    item to the back whenever it is touched by a hit.
    Capacity counts items, not bytes.
    """
    def __init__(self, capacity: int = DEFAULT_CAPACITY, eviction: str = "fifo",
                 prewarm_enforces_capacity: bool = False):
        if not isinstance(capacity, int) or capacity <= 0:
            raise ValueError("capacity must be a positive integer")
        if eviction not in EVICTION_MODES:
            raise ValueError(f"unknown eviction mode {eviction!r}")
        self.capacity = capacity
        self.eviction = eviction
        self.prewarm_enforces_capacity = prewarm_enforces_capacity
        self.items    = OrderedDict()   # item -> None, oldest first
        self.evicted  = 0               # items dropped so far

    def __len__(self):
        return len(self.items)

    def __contains__(self, item):
        return item in self.items

    def __iter__(self):
        return iter(self.items)

    def contains(self, item: str) -> bool:
        return item in self.items

    def touch(self, item: str) -> None:
        """Record a hit. Only changes order for LRU stores."""
        if self.eviction == "lru" and item in self.items:
            self.items.move_to_end(item)

    # ----------------------------------------------------------
    def insert(self, item: str) -> None:
        """Access-driven insertion; trims back to capacity."""
        self._add(item)
        self._trim()

    def bulk_insert(self, items: Iterable[str]) -> None:
        # sorted so the surviving items never depend on set iteration order
        for item in sorted(items):
            self._add(item)
        self._trim()

    def prewarm(self, item: str) -> None:
        self._add(item)
        if self.prewarm_enforces_capacity:
            self._trim()

    # ----------------------------------------------------------
    def _add(self, item):
        if item in self.items:
            self.touch(item)
        else:
            self.items[item] = None

    def _trim(self):
        while len(self.items) > self.capacity:
            self.items.popitem(last=False)
            self.evicted += 1

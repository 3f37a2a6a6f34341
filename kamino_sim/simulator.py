# kamino_sim/simulator.py
import logging
from typing import Callable, Dict, Mapping, Optional

import pandas as pd

from .cache_store import CacheStore

logger = logging.getLogger(__name__)


def vm_host(vm):
    return getattr(vm, "host", None)


class CacheAccessSimulator:
    """
    Replays data accesses against the per-host caches after placement.

    ``caches`` is shared with the placement policy (host id -> CacheStore).
    ``resolve_host(vm)`` returns the host a VM runs on, or None; accesses
    from an unresolved VM are ignored entirely.
    """
    def __init__(self, caches: Optional[Dict[int, CacheStore]] = None,
                 resolve_host: Callable = vm_host,
                 store_factory: Callable[[], CacheStore] = CacheStore):
        self.caches        = caches if caches is not None else {}
        self.resolve_host  = resolve_host
        self.store_factory = store_factory
        self.total_accesses = 0
        self.total_hits     = 0

    def reset(self) -> None:
        self.total_accesses = 0
        self.total_hits     = 0

    def hit_rate(self) -> float:
        if not self.total_accesses:
            return 0.0
        return self.total_hits / self.total_accesses

    # ----------------------------------------------------------
    def access(self, vm, item: str) -> bool:
        """
        Process one read of ``item`` by ``vm``.
        Return True on hit, False on miss (after inserting).
        """
        host = self.resolve_host(vm)
        if host is None:
            return False

        self.total_accesses += 1
        cache = self.caches.get(host.id)
        if cache is None:
            cache = self.caches[host.id] = self.store_factory()

        if item in cache:
            self.total_hits += 1
            cache.touch(item)
            return True
        cache.insert(item)
        return False

    def replay(self, df: pd.DataFrame, tasks: Mapping[int, object]) -> float:
        """
        Replays an access trace with ``task_id`` and ``item`` columns.
        Each outcome is also recorded on its task. Rows whose task has no
        placed VM are skipped. Returns the hit ratio of the replayed rows.
        """
        hits = reqs = skipped = 0
        for row in df.itertuples(index=False):
            task = tasks[row.task_id]
            if self.resolve_host(task.vm) is None:
                skipped += 1
                continue
            hit = self.access(task.vm, row.item)
            task.record_access(hit)
            reqs += 1
            if hit:
                hits += 1
        if skipped:
            logger.info("skipped %d accesses from unplaced tasks", skipped)
        return hits / reqs if reqs else 0.0

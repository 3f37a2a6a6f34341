# kamino_sim/policies/kamino.py
import logging
from functools import partial
from typing import Dict, Optional

from ..cache_store import DEFAULT_CAPACITY, CacheStore
from ..patterns import DataAccessPatternGenerator, vm_patterns
from ..scoring import CachePlacementScorer
from ..simulator import CacheAccessSimulator
from .base import BasePlacementPolicy, resource_fit

logger = logging.getLogger(__name__)

BASE_LATENCY_MS       = 5.0
LOAD_LATENCY_SLOPE_MS = 20.0   # extra ms at 100% CPU


class KaminoPlacementPolicy(BasePlacementPolicy):
    """
    Cache-aware, latency-driven placement.

    Every suitable host is scored on how much of the VM's data it already
    caches, its predicted latency and how close it sits to 50% load; the
    highest score wins and the first host in list order wins ties.
    The winner's cache is then warmed with the VM's data and its predicted
    latency is refreshed from its current CPU load.

    Parameters
    ----------
    hosts : iterable
        Candidate hosts, in tie-break order.
    is_suitable : callable
        ``is_suitable(host, vm) -> bool`` resource check.
    patterns : DataAccessPatternGenerator
        Maps a VM id to the data items it needs.
    simulator : CacheAccessSimulator
        Access-replay engine. Built on the policy's caches when omitted;
        when given, its cache mapping becomes the policy's.
    capacity, eviction, prewarm_enforces_capacity :
        Settings for every per-host CacheStore the policy creates.
    """
    name = "kamino"

    def __init__(self, hosts=(), is_suitable=resource_fit,
                 patterns: Optional[DataAccessPatternGenerator] = None,
                 simulator: Optional[CacheAccessSimulator] = None,
                 capacity: int = DEFAULT_CAPACITY, eviction: str = "fifo",
                 prewarm_enforces_capacity: bool = False):
        super().__init__(hosts, is_suitable)
        self.patterns  = patterns or vm_patterns()
        self.new_store = partial(CacheStore, capacity, eviction,
                                 prewarm_enforces_capacity)
        self.new_store()   # fail fast on bad cache settings

        if simulator is None:
            simulator = CacheAccessSimulator(store_factory=self.new_store)
        else:
            # stores the simulator creates must share the policy's settings
            simulator.store_factory = self.new_store
        self.simulator = simulator
        self.caches: Dict[int, CacheStore] = simulator.caches
        self.latencies: Dict[int, float]   = {}
        self.vm_data: Dict[int, frozenset] = {}    # vm id -> access pattern
        self.scorer = CachePlacementScorer(self.caches, self.latencies)

    # ----------------------------------------------------------
    def find_host_for_vm(self, vm):
        if not self.hosts:
            return None
        for host in self.hosts:
            self._track(host)
        needed = self.access_pattern(vm)

        best_host, best_score = None, float("-inf")
        for host in self.hosts:
            if not self.is_suitable(host, vm):
                continue
            score = self.scorer.score(host, needed)
            logger.debug("%r on %r scores %.4f", vm, host, score)
            if score > best_score:
                best_host, best_score = host, score

        if best_host is not None:
            self.caches[best_host.id].bulk_insert(needed)
            self.latencies[best_host.id] = (
                BASE_LATENCY_MS + LOAD_LATENCY_SLOPE_MS * best_host.cpu_utilization)
        return best_host

    def access_pattern(self, vm) -> frozenset:
        if vm.id not in self.vm_data:
            self.vm_data[vm.id] = self.patterns.pattern(vm.id)
        return self.vm_data[vm.id]

    def _track(self, host):
        if host.id not in self.caches:
            self.caches[host.id] = self.new_store()
        self.latencies.setdefault(host.id, 0.0)

    # ----------------------------------------------------------
    def prewarm_host_cache(self, host, item: str) -> None:
        """Seed a host's cache before any placement; a new host starts at 0 ms."""
        self._track(host)
        self.caches[host.id].prewarm(item)

    def simulate_access(self, vm, item: str) -> bool:
        return self.simulator.access(vm, item)

    def hit_rate(self) -> float:
        return self.simulator.hit_rate()

    def cache_for(self, host) -> Optional[CacheStore]:
        return self.caches.get(host.id)

    def predicted_latency(self, host) -> float:
        return self.latencies.get(host.id, 0.0)

    def average_predicted_latency(self) -> float:
        if not self.latencies:
            return 0.0
        return sum(self.latencies.values()) / len(self.latencies)

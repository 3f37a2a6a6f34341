# kamino_sim/scoring.py
import math
from typing import Mapping, NamedTuple

from .cache_store import CacheStore

CACHE_WEIGHT   = 0.6
LATENCY_WEIGHT = 0.3
LOAD_WEIGHT    = 0.1

LATENCY_DECAY_MS   = 10.0
TARGET_UTILIZATION = 0.5

# cache affinity when a VM needs no data at all
COLD_AFFINITY = 0.3
WARM_AFFINITY = 0.7


class ScoreComponents(NamedTuple):
    cache_affinity: float
    latency_score: float
    load_score: float

    @property
    def total(self) -> float:
        return (CACHE_WEIGHT * self.cache_affinity
                + LATENCY_WEIGHT * self.latency_score
                + LOAD_WEIGHT * self.load_score)


def cache_affinity(cache: CacheStore, required) -> float:
    """Fraction of ``required`` already resident in ``cache``."""
    if not required:
        return WARM_AFFINITY if len(cache) else COLD_AFFINITY
    hits = sum(1 for item in required if item in cache)
    return hits / len(required)


def latency_score(predicted_latency_ms: float) -> float:
    return math.exp(-predicted_latency_ms / LATENCY_DECAY_MS)


def load_score(host) -> float:
    # peaks at 50% average utilization, negative past the extremes
    avg_util = (host.cpu_utilization + host.ram_utilization
                + host.bw_utilization) / 3.0
    return 1.0 - abs(avg_util - TARGET_UTILIZATION)


class CachePlacementScorer:
    """
    Scores a host for a set of required data items.

    ``caches`` and ``latencies`` are the policy's per-host state, keyed by
    host id; the scorer only reads them.
    """
    def __init__(self, caches: Mapping[int, CacheStore],
                 latencies: Mapping[int, float]):
        self.caches    = caches
        self.latencies = latencies

    def components(self, host, required) -> ScoreComponents:
        return ScoreComponents(
            cache_affinity(self.caches[host.id], required),
            latency_score(self.latencies[host.id]),
            load_score(host),
        )

    def score(self, host, required) -> float:
        return self.components(host, required).total

import math

import pytest

from kamino_sim.cache_store import CacheStore
from kamino_sim.scoring import (CACHE_WEIGHT, LATENCY_WEIGHT, LOAD_WEIGHT,
                                CachePlacementScorer, ScoreComponents,
                                cache_affinity, latency_score, load_score)

from .support import FixedHost


def make_scorer(host, cached=(), latency=0.0):
    store = CacheStore()
    for item in cached:
        store.prewarm(item)
    return CachePlacementScorer({host.id: store}, {host.id: latency})


def test_weights_sum_to_one():
    assert CACHE_WEIGHT + LATENCY_WEIGHT + LOAD_WEIGHT == pytest.approx(1.0)


def test_cold_start_affinity():
    assert cache_affinity(CacheStore(), frozenset()) == 0.3
    warm = CacheStore()
    warm.prewarm("x")
    assert cache_affinity(warm, frozenset()) == 0.7


def test_affinity_is_overlap_fraction():
    store = CacheStore()
    store.bulk_insert({"a", "b", "z"})
    assert cache_affinity(store, {"a", "b", "c", "d"}) == 0.5


def test_latency_score_decays():
    assert latency_score(0.0) == 1.0
    assert latency_score(10.0) == pytest.approx(math.exp(-1))
    assert latency_score(5.0) > latency_score(25.0) > 0.0


@pytest.mark.parametrize("util, expected", [
    (0.5, 1.0),
    (0.0, 0.5),
    (1.0, 0.5),
])
def test_load_score_peaks_at_half(util, expected):
    host = FixedHost(0, util, util, util)
    assert load_score(host) == pytest.approx(expected)


def test_load_score_can_go_negative():
    # utilization fractions above 1 push the score below zero
    host = FixedHost(0, 2.0, 2.0, 2.0)
    assert load_score(host) == pytest.approx(-0.5)


def test_total_combines_weights():
    parts = ScoreComponents(0.5, 1.0, 0.5)
    assert parts.total == pytest.approx(0.6 * 0.5 + 0.3 * 1.0 + 0.1 * 0.5)


def test_components_read_policy_state():
    host = FixedHost(3, 0.5, 0.5, 0.5)
    scorer = make_scorer(host, cached={"a"}, latency=10.0)
    parts = scorer.components(host, {"a", "b"})
    assert parts == pytest.approx((0.5, math.exp(-1), 1.0))
    assert scorer.score(host, {"a", "b"}) == pytest.approx(parts.total)


def test_more_overlap_scores_higher():
    host = FixedHost(0, 0.3, 0.2, 0.1)
    required = {f"d{i}" for i in range(10)}
    scores = [make_scorer(host, cached=sorted(required)[:n]).score(host, required)
              for n in range(11)]
    assert all(lo < hi for lo, hi in zip(scores, scores[1:]))

import pandas as pd
import pytest

from kamino_sim.cache_store import CacheStore
from kamino_sim.entities import Task
from kamino_sim.patterns import vm_patterns
from kamino_sim.simulator import CacheAccessSimulator

from .support import FixedHost, PlacedVm


def test_two_cycles_cold_then_warm():
    sim = CacheAccessSimulator()
    vm = PlacedVm(0, host=FixedHost(0))
    task = Task(0, length=10_000, pes=2, data_items=vm_patterns()(0))

    for cycle in range(2):
        for item in sorted(task.data_items):
            task.record_access(sim.access(vm, item))
        if cycle == 0:
            assert (task.hits, task.misses) == (0, 10)

    assert (task.hits, task.misses) == (10, 10)
    assert task.io_overhead == pytest.approx(0.51)
    assert sim.hit_rate() == 0.5


def test_unresolved_vm_is_a_noop():
    store = CacheStore()
    sim = CacheAccessSimulator({0: store})
    assert sim.access(PlacedVm(0), "a") is False
    assert sim.access(None, "a") is False
    assert (sim.total_accesses, sim.total_hits) == (0, 0)
    assert len(store) == 0


def test_custom_resolver():
    host = FixedHost(9)
    sim = CacheAccessSimulator(resolve_host={"vm-1": host}.get)
    sim.access("vm-1", "a")
    sim.access("vm-2", "a")
    assert sim.total_accesses == 1
    assert "a" in sim.caches[9]


def test_hit_rate_is_zero_before_any_access():
    assert CacheAccessSimulator().hit_rate() == 0.0


def test_hit_rate_bounded_and_reset():
    sim = CacheAccessSimulator()
    vm = PlacedVm(0, host=FixedHost(0))
    for item in "abcabcaa":
        sim.access(vm, item)
    assert 0.0 <= sim.hit_rate() <= 1.0
    assert (sim.total_accesses, sim.total_hits) == (8, 5)

    sim.reset()
    assert (sim.total_accesses, sim.total_hits, sim.hit_rate()) == (0, 0, 0.0)
    assert "a" in sim.caches[0]


def test_miss_inserts_with_capacity_enforced():
    sim = CacheAccessSimulator(store_factory=lambda: CacheStore(capacity=2))
    vm = PlacedVm(0, host=FixedHost(0))
    for item in "abc":
        sim.access(vm, item)
    assert list(sim.caches[0]) == ["b", "c"]
    assert sim.access(vm, "a") is False


def test_replay_records_on_tasks_and_skips_unplaced():
    placed = Task(0, 100, 1)
    placed.vm = PlacedVm(0, host=FixedHost(0))
    unplaced = Task(1, 100, 1)
    unplaced.vm = PlacedVm(1)
    trace = pd.DataFrame({"task_id": [0, 0, 1, 0], "item": ["x", "x", "x", "y"]})

    sim = CacheAccessSimulator()
    assert sim.replay(trace, {0: placed, 1: unplaced}) == pytest.approx(1 / 3)
    assert (placed.hits, placed.misses) == (1, 2)
    assert unplaced.accesses == 0
    assert sim.total_accesses == 3

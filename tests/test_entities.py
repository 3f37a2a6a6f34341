import pytest

from kamino_sim.entities import HIT_LATENCY, MISS_LATENCY, Host, Task, Vm


def test_host_utilization_tracks_allocations():
    host = Host(0, pes=8, mips=1000, ram=4096, bw=10_000, storage=1_000_000)
    host.create_vm(Vm(0, pes=4, mips=1000, ram=1024, bw=2500))
    assert host.cpu_utilization == 0.5
    assert host.ram_utilization == 0.25
    assert host.bw_utilization == 0.25
    assert host.free_pes == 4


def test_host_refuses_oversized_vm():
    host = Host(0, pes=2, mips=1000, ram=4096, bw=10_000, storage=1_000_000)
    vm = Vm(0, pes=4, mips=1000)
    assert not host.is_suitable_for(vm)
    with pytest.raises(ValueError):
        host.create_vm(vm)
    assert vm.host is None


def test_ram_limits_suitability():
    host = Host(0, pes=8, mips=1000, ram=600, bw=10_000, storage=1_000_000)
    host.create_vm(Vm(0, pes=1, mips=1000, ram=512))
    assert not host.is_suitable_for(Vm(1, pes=1, mips=1000, ram=512))


def test_task_io_overhead():
    task = Task(0, length=1000, pes=1, data_items={"a", "b"})
    for hit in (True, True, False):
        task.record_access(hit)
    assert task.accesses == 3
    assert task.io_overhead == pytest.approx(2 * HIT_LATENCY + MISS_LATENCY)

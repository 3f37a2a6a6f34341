import pytest

from kamino_sim.entities import Host, Vm

from .support import FixedHost


@pytest.fixture
def fixed_hosts():
    return [FixedHost(0), FixedHost(1)]


@pytest.fixture
def hosts():
    return [Host(i, pes=8, mips=1000, ram=4096, bw=10_000, storage=1_000_000)
            for i in range(3)]


@pytest.fixture
def make_vm():
    def _make(id, pes=4):
        return Vm(id, pes=pes, mips=1000)
    return _make

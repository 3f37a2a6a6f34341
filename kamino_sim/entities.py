# kamino_sim/entities.py
"""
Minimal hosts, VMs and tasks used to drive the placement policies.

Utilization is the fraction of a host's capacity allocated to its VMs.
"""
from typing import List, Optional

HIT_LATENCY  = 0.001   # seconds per local cache hit
MISS_LATENCY = 0.050   # seconds per remote fetch


class Host:
    def __init__(self, id: int, pes: int, mips: float, ram: int, bw: int,
                 storage: int):
        self.id      = id
        self.pes     = pes
        self.mips    = mips
        self.ram     = ram
        self.bw      = bw
        self.storage = storage
        self.vms: List["Vm"] = []

    def __repr__(self):
        return f"Host({self.id})"

    @property
    def used_pes(self) -> int:
        return sum(vm.pes for vm in self.vms)

    @property
    def free_pes(self) -> int:
        return self.pes - self.used_pes

    @property
    def cpu_utilization(self) -> float:
        return self.used_pes / self.pes

    @property
    def ram_utilization(self) -> float:
        return sum(vm.ram for vm in self.vms) / self.ram

    @property
    def bw_utilization(self) -> float:
        return sum(vm.bw for vm in self.vms) / self.bw

    def is_suitable_for(self, vm: "Vm") -> bool:
        return (self.free_pes >= vm.pes
                and self.ram - sum(v.ram for v in self.vms) >= vm.ram
                and self.bw - sum(v.bw for v in self.vms) >= vm.bw
                and self.storage - sum(v.size for v in self.vms) >= vm.size)

    def create_vm(self, vm: "Vm") -> None:
        if not self.is_suitable_for(vm):
            raise ValueError(f"{self!r} cannot hold {vm!r}")
        self.vms.append(vm)
        vm.host = self


class Vm:
    def __init__(self, id: int, pes: int, mips: float, ram: int = 512,
                 bw: int = 1000, size: int = 10_000):
        self.id   = id
        self.pes  = pes
        self.mips = mips
        self.ram  = ram
        self.bw   = bw
        self.size = size
        self.host: Optional[Host] = None

    def __repr__(self):
        return f"Vm({self.id})"


class Task:
    """
    Data-intensive task: runs on one VM and reads a fixed set of data items.
    Every access is recorded as a hit or a miss and costs I/O time.
    """
    def __init__(self, id: int, length: int, pes: int, data_items=()):
        self.id         = id
        self.length     = length
        self.pes        = pes
        self.data_items = frozenset(data_items)
        self.vm: Optional[Vm] = None
        self.hits       = 0
        self.misses     = 0

    def __repr__(self):
        return f"Task({self.id})"

    def record_access(self, hit: bool) -> None:
        if hit:
            self.hits += 1
        else:
            self.misses += 1

    @property
    def accesses(self) -> int:
        return self.hits + self.misses

    @property
    def io_overhead(self) -> float:
        return self.hits * HIT_LATENCY + self.misses * MISS_LATENCY

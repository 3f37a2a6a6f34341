from dataclasses import dataclass


@dataclass(eq=False)
class FixedHost:
    """Host with pinned utilization, for scoring without VM bookkeeping."""
    id: int
    cpu_utilization: float = 0.0
    ram_utilization: float = 0.0
    bw_utilization: float = 0.0
    suitable: bool = True

    def is_suitable_for(self, vm):
        return self.suitable


@dataclass
class PlacedVm:
    id: int
    host: object = None

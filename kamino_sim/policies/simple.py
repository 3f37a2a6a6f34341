# kamino_sim/policies/simple.py
from .base import BasePlacementPolicy


class SimplePlacementPolicy(BasePlacementPolicy):
    """
    Worst fit: the suitable host with the most free PEs.
    Ties go to the earlier host.
    """
    name = "simple"

    def find_host_for_vm(self, vm):
        best = None
        for host in self.suitable_hosts(vm):
            if best is None or host.free_pes > best.free_pes:
                best = host
        return best


class FirstFitPlacementPolicy(BasePlacementPolicy):
    name = "first-fit"

    def find_host_for_vm(self, vm):
        for host in self.hosts:
            if self.is_suitable(host, vm):
                return host
        return None

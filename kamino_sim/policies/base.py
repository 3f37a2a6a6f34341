# kamino_sim/policies/base.py
import logging

logger = logging.getLogger(__name__)


def resource_fit(host, vm) -> bool:
    return host.is_suitable_for(vm)


class BasePlacementPolicy:
    """
    Chooses a host for each VM from a fixed, ordered host list.
    ``is_suitable(host, vm)`` decides whether a host can hold the VM.
    """
    name = "base"
    simulator = None        # policies without cache modelling leave this unset

    def __init__(self, hosts=(), is_suitable=resource_fit):
        self.hosts       = list(hosts)
        self.is_suitable = is_suitable

    def find_host_for_vm(self, vm):
        """Return the chosen host, or None when the VM is rejected."""
        raise NotImplementedError

    def allocate_host_for_vm(self, vm):
        host = self.find_host_for_vm(vm)
        if host is None:
            logger.warning("%s: no suitable host for %r", self.name, vm)
            return None
        host.create_vm(vm)
        logger.debug("%s: %r -> %r", self.name, vm, host)
        return host

    def suitable_hosts(self, vm):
        return [host for host in self.hosts if self.is_suitable(host, vm)]

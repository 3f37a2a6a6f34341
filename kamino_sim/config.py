# kamino_sim/config.py
import dataclasses
import logging
from dataclasses import dataclass, field
from typing import List

import yaml

from .cache_store import DEFAULT_CAPACITY, EVICTION_MODES
from .policies import POLICIES

logger = logging.getLogger(__name__)


def check_number(name: str, value, positive=False) -> None:
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if positive and value <= 0:
        raise ValueError(f"{name} must be positive")
    if value < 0:
        raise ValueError(f"{name} must not be negative")


def check_keys(where: str, raw: dict, cls, required=()) -> None:
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"{where}: unknown config keys {unknown}")
    missing = sorted(set(required) - set(raw))
    if missing:
        raise ValueError(f"{where}: missing config keys {missing}")


@dataclass
class ScenarioConfig:
    name: str
    hosts: int
    vms: int
    tasks: int

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise ValueError(f"scenario name must be a string, got {self.name!r}")
        for key in ("hosts", "vms", "tasks"):
            check_number(f"scenario {self.name!r}: {key}", getattr(self, key),
                         positive=True)

    @classmethod
    def from_dict(cls, raw) -> "ScenarioConfig":
        if not isinstance(raw, dict):
            raise ValueError(f"scenario must be a mapping, got {raw!r}")
        check_keys("scenario", raw, cls,
                   required=[f.name for f in dataclasses.fields(cls)])
        return cls(**raw)


def default_scenarios() -> List[ScenarioConfig]:
    return [
        ScenarioConfig("moderate", hosts=6, vms=12, tasks=24),
        ScenarioConfig("high", hosts=4, vms=16, tasks=48),
        ScenarioConfig("unbalanced", hosts=8, vms=10, tasks=30),
    ]


@dataclass
class SimulationConfig:
    policy: str = "kamino"

    hosts: int = 6
    host_pes: int = 8
    host_mips: float = 1000
    host_ram: int = 4096
    host_bw: int = 10_000
    host_storage: int = 1_000_000

    vms: int = 12
    vm_pes: int = 4
    vm_ram: int = 512
    vm_bw: int = 1000
    vm_size: int = 10_000

    tasks: int = 24
    task_pes: int = 2
    task_length: int = 10_000

    access_cycles: int = 40
    cache_capacity: int = DEFAULT_CAPACITY
    eviction: str = "fifo"
    prewarm_enforces_capacity: bool = False
    prewarm_hosts: int = 3
    prewarm_groups_per_host: int = 2

    vm_group_stride: int = 2
    task_group_stride: int = 4

    scenarios: List[ScenarioConfig] = field(default_factory=default_scenarios)

    def __post_init__(self):
        positive = {"hosts", "host_pes", "host_mips", "vms", "vm_pes",
                    "task_pes", "task_length", "cache_capacity",
                    "vm_group_stride", "task_group_stride"}
        for f in dataclasses.fields(self):
            if f.type in (int, float):
                check_number(f.name, getattr(self, f.name), f.name in positive)
        if not isinstance(self.cache_capacity, int):
            raise ValueError("cache_capacity must be an integer")
        if not isinstance(self.prewarm_enforces_capacity, bool):
            raise ValueError("prewarm_enforces_capacity must be true or false")
        if not isinstance(self.policy, str) or self.policy not in POLICIES:
            raise ValueError(f"unknown policy {self.policy!r}")
        if not isinstance(self.eviction, str) or self.eviction not in EVICTION_MODES:
            raise ValueError(f"eviction must be one of {EVICTION_MODES}")
        if not isinstance(self.scenarios, list):
            raise ValueError(f"scenarios must be a list, got {self.scenarios!r}")
        self.scenarios = [s if isinstance(s, ScenarioConfig) else ScenarioConfig.from_dict(s)
                          for s in self.scenarios]

    def for_scenario(self, scenario: ScenarioConfig, policy: str = None) -> "SimulationConfig":
        return dataclasses.replace(
            self, hosts=scenario.hosts, vms=scenario.vms, tasks=scenario.tasks,
            policy=policy or self.policy)


def load_config(path) -> SimulationConfig:
    with open(path, "r") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping at top level")

    check_keys(str(path), raw, SimulationConfig)
    logger.debug("loaded config %s: %s", path, raw)
    return SimulationConfig(**raw)

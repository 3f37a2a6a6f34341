# kamino_sim/metrics.py
import math
from collections import defaultdict

import numpy as np
import pandas as pd

TASK_COLUMNS = ["task_id", "vm_id", "host_id", "exec_time", "hits", "misses",
                "io_overhead", "total_latency"]


def nearest_rank(values, pct: float) -> float:
    ordered = np.sort(np.asarray(values, dtype=float))
    if not len(ordered):
        return 0.0
    return float(ordered[max(math.ceil(pct * len(ordered)) - 1, 0)])


def execution_times(tasks) -> dict:
    """
    CPU time per placed task: ``length / (vm_mips * pes)``, stretched when
    the tasks on a VM ask for more PEs than the VM has.
    """
    demand = defaultdict(int)
    for task in tasks:
        if task.vm is not None and task.vm.host is not None:
            demand[task.vm.id] += task.pes

    times = {}
    for task in tasks:
        if task.vm is None or task.vm.host is None:
            continue
        stretch = max(1.0, demand[task.vm.id] / task.vm.pes)
        times[task.id] = task.length / (task.vm.mips * task.pes) * stretch
    return times


def task_table(tasks) -> pd.DataFrame:
    times = execution_times(tasks)
    rows = []
    for task in tasks:
        if task.id not in times:
            continue
        exec_time = times[task.id]
        rows.append((task.id, task.vm.id, task.vm.host.id, exec_time,
                     task.hits, task.misses, task.io_overhead,
                     exec_time + task.io_overhead))
    return pd.DataFrame(rows, columns=TASK_COLUMNS)


def summarize(table: pd.DataFrame, hosts, policy) -> dict:
    finished = len(table)
    active = [h.cpu_utilization for h in hosts if h.vms]
    sim_time = float(table.exec_time.max()) if finished else 0.0
    total_io = float(table.io_overhead.sum()) if finished else 0.0

    simulator = policy.simulator
    avg_latency = getattr(policy, "average_predicted_latency", None)
    return {
        "policy": policy.name,
        "tasks_finished": finished,
        "mean_latency": float(table.total_latency.mean()) if finished else 0.0,
        "p90_latency": nearest_rank(table.total_latency, 0.90),
        "total_io_overhead": total_io,
        "avg_io_overhead": total_io / finished if finished else 0.0,
        "hit_rate": simulator.hit_rate() if simulator is not None else 0.0,
        "avg_host_cpu_util": float(np.mean(active)) if active else 0.0,
        "active_hosts": len(active),
        "sim_time": sim_time,
        "throughput": finished / sim_time if sim_time else 0.0,
        "avg_predicted_latency_ms": avg_latency() if avg_latency else 0.0,
    }


def improvement(baseline: float, candidate: float, lower_is_better=True) -> float:
    """Relative improvement of ``candidate`` over ``baseline``, in percent."""
    if not baseline:
        return 0.0
    delta = baseline - candidate if lower_is_better else candidate - baseline
    return delta / baseline * 100

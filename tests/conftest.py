"""Shared fixtures: a fake cpufreq sysfs tree."""

from pathlib import Path

import pytest


def write_core(
    root: Path,
    index: int,
    *,
    cpuinfo_min: int = 400000,
    cpuinfo_max: int = 4800000,
    scaling_min: int = 400000,
    scaling_max: int = 4800000,
    cur: int = 1200000,
    governor: str = "powersave",
    driver: str = "intel_pstate",
    epp: str | None = "balance_performance",
) -> None:
    """Write one core's cpufreq directory. Frequencies are kHz, as the kernel reports."""
    cpufreq = root / f"cpu{index}" / "cpufreq"
    cpufreq.mkdir(parents=True, exist_ok=True)
    files = {
        "cpuinfo_min_freq": str(cpuinfo_min),
        "cpuinfo_max_freq": str(cpuinfo_max),
        "scaling_min_freq": str(scaling_min),
        "scaling_max_freq": str(scaling_max),
        "scaling_cur_freq": str(cur),
        "scaling_governor": governor,
        "scaling_driver": driver,
        "scaling_available_governors": "performance powersave",
    }
    if epp is not None:
        files["energy_performance_preference"] = epp
        files["energy_performance_available_preferences"] = (
            "default performance balance_performance balance_power power"
        )
    for name, value in files.items():
        (cpufreq / name).write_text(value + "\n")


def write_cpu_lists(root: Path, online: str, present: str, offline: str = "", possible: str | None = None) -> None:
    root.mkdir(parents=True, exist_ok=True)
    (root / "online").write_text(online + "\n")
    (root / "present").write_text(present + "\n")
    (root / "offline").write_text(offline + "\n")
    (root / "possible").write_text((possible or present) + "\n")


@pytest.fixture
def sysfs_root(tmp_path: Path) -> Path:
    """A four-core machine with identical cores."""
    root = tmp_path / "cpu"
    write_cpu_lists(root, online="0-3", present="0-3", possible="0-7")
    for i in range(4):
        write_core(root, i)
    return root

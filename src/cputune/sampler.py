"""Read-only access to the Linux cpufreq sysfs interface."""

from pathlib import Path

import psutil
import structlog

from cputune.models import CpuSample, GeneralCpuInfo, LogicalCoreInfo

log = structlog.get_logger()

DEFAULT_SYSFS_ROOT = "/sys/devices/system/cpu"

# cpufreq reports kHz, the models carry Hz
_HZ_PER_KHZ = 1000


def parse_cpu_list(text: str) -> tuple[int, ...]:
    """
    Parse a kernel cpulist string such as ``"0-3,6,8-9"``.

    An empty string (e.g. an empty ``offline`` file) yields an empty tuple.
    """
    cores: list[int] = []
    for part in text.strip().split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            start, end = part.split("-", 1)
            cores.extend(range(int(start), int(end) + 1))
        else:
            cores.append(int(part))
    return tuple(cores)


class HardwareSampler:
    """
    Samples per-core scaling state and machine-wide CPU info from sysfs.

    Attribute files that are missing or unreadable (offline cores, drivers
    without EPP support, permission errors) read as ``0`` or ``""``.
    """

    def __init__(self, sysfs_root: str = DEFAULT_SYSFS_ROOT) -> None:
        """Initialize the sampler for the given sysfs cpu directory."""
        self._root = Path(sysfs_root)

    @property
    def sysfs_root(self) -> Path:
        """The sysfs cpu directory being read."""
        return self._root

    def sample(self) -> CpuSample:
        """Read general info and all online cores in one pass."""
        cpu_info = self.get_general_cpu_info()
        cores = self._read_cores(cpu_info.online)
        return CpuSample(cpu_info=cpu_info, cores=tuple(cores))

    def get_general_cpu_info(self) -> GeneralCpuInfo:
        """Read the online, offline, possible and present core lists."""
        online = self._read_cpu_list("online")
        present = self._read_cpu_list("present")
        available = len(present) or psutil.cpu_count(logical=True) or 0
        return GeneralCpuInfo(
            available_cores=available,
            online=online,
            offline=self._read_cpu_list("offline"),
            possible=self._read_cpu_list("possible"),
            present=present,
        )

    def get_logical_core_info(self) -> list[LogicalCoreInfo]:
        """Read cpufreq state for every online core that exposes cpufreq."""
        return self._read_cores(self._read_cpu_list("online"))

    def _read_cores(self, online: tuple[int, ...]) -> list[LogicalCoreInfo]:
        """Read one core's cpufreq attributes."""
        """Read each listed core that has a cpufreq directory."""
        cores: list[LogicalCoreInfo] = []
        for index in online:
            cpufreq = self._root / f"cpu{index}" / "cpufreq"
            if not cpufreq.is_dir():
                continue
            cores.append(self._read_core(index, cpufreq))
        return cores

    def _read_core(self, index: int, cpufreq: Path) -> LogicalCoreInfo:
        return LogicalCoreInfo(
            index=index,
            cpuinfo_min_freq=_read_khz(cpufreq / "cpuinfo_min_freq"),
            cpuinfo_max_freq=_read_khz(cpufreq / "cpuinfo_max_freq"),
            scaling_min_freq=_read_khz(cpufreq / "scaling_min_freq"),
            scaling_max_freq=_read_khz(cpufreq / "scaling_max_freq"),
            scaling_governor=_read_str(cpufreq / "scaling_governor"),
            scaling_driver=_read_str(cpufreq / "scaling_driver"),
            energy_performance_preference=_read_str(
                cpufreq / "energy_performance_preference"
            ),
            scaling_cur_freq=_read_khz(cpufreq / "scaling_cur_freq"),
            scaling_available_governors=tuple(
                _read_str(cpufreq / "scaling_available_governors").split()
            ),
            energy_performance_available_preferences=tuple(
                _read_str(cpufreq / "energy_performance_available_preferences").split()
            ),
        )

    def _read_cpu_list(self, name: str) -> tuple[int, ...]:
        """Read a cpulist file, treating a malformed one as empty."""
        text = _read_str(self._root / name)
        try:
            return parse_cpu_list(text)
        except ValueError:
            log.warning("malformed_cpu_list", file=name, content=text)
            return ()


def _read_str(path: Path) -> str:
    """Read a sysfs attribute, returning an empty string if it cannot be read."""
    try:
        return path.read_text(encoding="utf-8").strip()
    except (FileNotFoundError, PermissionError):
        return ""
    except (OSError, UnicodeDecodeError) as exc:
        # Some cpufreq attributes raise EIO/EBUSY on read or hold stray bytes
        log.debug("sysfs_read_failed", path=str(path), error=str(exc))
        return ""


def _read_khz(path: Path) -> int:
    """Read a kHz attribute as Hz, or 0 if it is not a number."""
    text = _read_str(path)
    try:
        return int(text) * _HZ_PER_KHZ
    except ValueError:
        return 0

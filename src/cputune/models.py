"""Data models for cputune."""

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class LogicalCoreInfo:
    """Immutable snapshot of one logical core's cpufreq state."""

    index: int
    cpuinfo_min_freq: int  # Hz, hardware bound
    cpuinfo_max_freq: int  # Hz, hardware bound
    scaling_min_freq: int  # Hz
    scaling_max_freq: int  # Hz
    scaling_governor: str
    scaling_driver: str
    energy_performance_preference: str
    scaling_cur_freq: int = 0  # Hz
    scaling_available_governors: tuple[str, ...] = ()
    energy_performance_available_preferences: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class GeneralCpuInfo:
    """Machine-wide CPU information."""

    available_cores: int
    online: tuple[int, ...] = ()
    offline: tuple[int, ...] = ()
    possible: tuple[int, ...] = ()
    present: tuple[int, ...] = ()

    @property
    def min_core_online(self) -> int | None:
        """Lowest online core index."""
        return min(self.online) if self.online else None

    @property
    def max_core_online(self) -> int | None:
        """Highest online core index."""
        return max(self.online) if self.online else None


@dataclass(slots=True, frozen=True)
class CpuSample:
    """Everything read from the hardware in a single poll."""

    cpu_info: GeneralCpuInfo
    cores: tuple[LogicalCoreInfo, ...]


@dataclass(slots=True, frozen=True)
class CpuSettings:
    """
    Desired CPU settings of a profile.

    A ``None`` field is unset and inherits the live hardware value when the
    profile is opened for editing.
    """

    online_cores: int | None = None
    scaling_min_frequency: int | None = None  # Hz
    scaling_max_frequency: int | None = None  # Hz
    governor: str | None = None
    energy_performance_preference: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "CpuSettings":
        """Build settings from a plain mapping, ignoring unknown keys."""
        return cls(
            online_cores=data.get("online_cores"),
            scaling_min_frequency=data.get("scaling_min_frequency"),
            scaling_max_frequency=data.get("scaling_max_frequency"),
            governor=data.get("governor"),
            energy_performance_preference=data.get("energy_performance_preference"),
        )


@dataclass(slots=True, frozen=True)
class Profile:
    """A named bundle of CPU settings."""

    name: str
    cpu: CpuSettings = field(default_factory=CpuSettings)
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Profile":
        """
        Build a profile from a plain mapping.

        Raises:
            KeyError: ``name`` is missing.
            TypeError: ``data`` or its ``cpu`` entry is not a mapping.
        """
        if not isinstance(data, dict):
            raise TypeError(f"profile must be an object, got {type(data).__name__}")
        cpu = data.get("cpu") or {}
        if not isinstance(cpu, dict):
            raise TypeError(f"profile {data.get('name')!r}: cpu must be an object")
        return cls(
            name=data["name"],
            cpu=CpuSettings.from_dict(cpu),
            description=data.get("description", ""),
        )


@dataclass(slots=True, frozen=True)
class AggregatedView:
    """Deduplicated summary of a per-core snapshot, in first-seen order."""

    scaling_min_freqs: tuple[str, ...] = ()
    scaling_max_freqs: tuple[str, ...] = ()
    scaling_drivers: tuple[str, ...] = ()
    scaling_governors: tuple[str, ...] = ()
    energy_performance_preferences: tuple[str, ...] = ()
    active_cores: int = 0

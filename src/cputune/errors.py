"""Exceptions raised by cputune."""


class CpuTuneError(Exception):
    """Base class for all cputune errors."""


class EmptySampleError(CpuTuneError):
    """The hardware sampler returned no logical cores."""


class UnknownProfileError(CpuTuneError, LookupError):
    """No profile with the requested name exists."""

    def __init__(self, name: str) -> None:
        """Record the missing profile name."""
        super().__init__(f"Unknown profile: {name!r}")
        self.name = name


class DuplicateProfileError(CpuTuneError, ValueError):
    """A profile with the requested name already exists."""

    def __init__(self, name: str) -> None:
        """Record the clashing profile name."""
        super().__init__(f"Profile already exists: {name!r}")
        self.name = name


class ConfigError(CpuTuneError):
    """The configuration file could not be read or parsed."""

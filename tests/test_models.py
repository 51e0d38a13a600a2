"""Tests for cputune data models."""

import pytest

from cputune.models import (
    AggregatedView,
    CpuSettings,
    GeneralCpuInfo,
    LogicalCoreInfo,
    Profile,
)


def make_core(**overrides) -> LogicalCoreInfo:
    values = dict(
        index=0,
        cpuinfo_min_freq=400_000_000,
        cpuinfo_max_freq=4_800_000_000,
        scaling_min_freq=400_000_000,
        scaling_max_freq=4_800_000_000,
        scaling_governor="powersave",
        scaling_driver="intel_pstate",
        energy_performance_preference="balance_performance",
    )
    values.update(overrides)
    return LogicalCoreInfo(**values)


def test_logical_core_info_creation():
    """Test LogicalCoreInfo dataclass creation."""
    core = make_core(index=3)

    assert core.index == 3
    assert core.cpuinfo_max_freq == 4_800_000_000
    assert core.scaling_governor == "powersave"
    assert core.scaling_cur_freq == 0
    assert core.scaling_available_governors == ()


def test_logical_core_info_is_frozen():
    """Test that LogicalCoreInfo is immutable (frozen)."""
    core = make_core()

    with pytest.raises(AttributeError):
        core.scaling_governor = "performance"


def test_logical_core_info_uses_slots():
    """Test that LogicalCoreInfo uses __slots__ for memory efficiency."""
    assert not hasattr(make_core(), "__dict__")


def test_general_cpu_info_online_bounds():
    info = GeneralCpuInfo(available_cores=8, online=(0, 1, 2, 5))

    assert info.min_core_online == 0
    assert info.max_core_online == 5


def test_general_cpu_info_no_online_cores():
    info = GeneralCpuInfo(available_cores=0)

    assert info.min_core_online is None
    assert info.max_core_online is None


def test_cpu_settings_default_to_unset():
    """Unset fields are None, never zero."""
    settings = CpuSettings()

    assert settings.online_cores is None
    assert settings.scaling_min_frequency is None
    assert settings.scaling_max_frequency is None
    assert settings.governor is None
    assert settings.energy_performance_preference is None


def test_profile_from_dict():
    profile = Profile.from_dict(
        {
            "name": "Gaming",
            "description": "All cores",
            "cpu": {"governor": "performance", "online_cores": 8, "bogus": 1},
        }
    )

    assert profile.name == "Gaming"
    assert profile.description == "All cores"
    assert profile.cpu.governor == "performance"
    assert profile.cpu.online_cores == 8
    assert profile.cpu.scaling_max_frequency is None


def test_profile_from_dict_without_cpu():
    profile = Profile.from_dict({"name": "Empty"})

    assert profile.cpu == CpuSettings()


def test_aggregated_view_defaults_empty():
    view = AggregatedView()

    assert view.scaling_min_freqs == ()
    assert view.active_cores == 0


def test_profile_from_dict_rejects_non_mapping_cpu():
    with pytest.raises(TypeError):
        Profile.from_dict({"name": "x", "cpu": 5})

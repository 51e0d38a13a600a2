"""Aggregation of per-core cpufreq snapshots into a display summary."""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from cputune.errors import EmptySampleError
from cputune.models import AggregatedView, LogicalCoreInfo

_HZ_PER_MHZ = Decimal(1_000_000)
_TWO_PLACES = Decimal("0.01")


def format_frequency(frequency: int) -> str:
    """Format a frequency in Hz as MHz with two decimals, e.g. ``"1500.00"``."""
    mhz = (Decimal(frequency) / _HZ_PER_MHZ).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    return f"{mhz:f}"


class Aggregator:
    """
    Builds an AggregatedView from the latest per-core snapshot.

    Every refresh replaces the previous view wholesale. A failed refresh
    leaves the previous view in place.
    """

    def __init__(self) -> None:
        """Initialize the Aggregator with an empty view."""
        self._view = AggregatedView()

    @property
    def view(self) -> AggregatedView:
        """The most recently computed view."""
        return self._view

    def refresh(self, snapshot: Sequence[LogicalCoreInfo]) -> AggregatedView:
        """
        Recompute the view from a snapshot.

        Raises:
            EmptySampleError: The snapshot contains no cores.
        """
        if not snapshot:
            raise EmptySampleError("Hardware sampler returned no logical cores")

        # dicts keep insertion order, so keys act as first-seen ordered sets
        min_freqs: dict[str, None] = {}
        max_freqs: dict[str, None] = {}
        drivers: dict[str, None] = {}
        governors: dict[str, None] = {}
        preferences: dict[str, None] = {}

        for core in snapshot:
            min_freqs.setdefault(format_frequency(core.scaling_min_freq))
            max_freqs.setdefault(format_frequency(core.scaling_max_freq))
            drivers.setdefault(core.scaling_driver)
            governors.setdefault(core.scaling_governor)
            preferences.setdefault(core.energy_performance_preference)

        self._view = AggregatedView(
            scaling_min_freqs=tuple(min_freqs),
            scaling_max_freqs=tuple(max_freqs),
            scaling_drivers=tuple(drivers),
            scaling_governors=tuple(governors),
            energy_performance_preferences=tuple(preferences),
            active_cores=len(snapshot),
        )
        return self._view

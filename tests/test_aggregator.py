"""Tests for the Aggregator."""

import pytest

from cputune.aggregator import Aggregator, format_frequency
from cputune.errors import EmptySampleError
from cputune.models import AggregatedView
from test_models import make_core


class TestFormatFrequency:
    """Tests for format_frequency."""

    def test_whole_megahertz(self):
        assert format_frequency(1_500_000_000) == "1500.00"

    def test_rounds_up_not_truncates(self):
        assert format_frequency(999_999) == "1.00"

    def test_rounds_half_up(self):
        assert format_frequency(1_235_000) == "1.24"
        assert format_frequency(1_234_999) == "1.23"

    def test_zero(self):
        assert format_frequency(0) == "0.00"

    def test_no_grouping_separator(self):
        assert format_frequency(4_800_000_000) == "4800.00"


class TestAggregator:
    """Tests for Aggregator.refresh."""

    def test_initial_view_is_empty(self):
        assert Aggregator().view == AggregatedView()

    def test_identical_cores_collapse_to_one_entry(self):
        snapshot = [make_core(index=i) for i in range(8)]

        view = Aggregator().refresh(snapshot)

        assert view.scaling_min_freqs == ("400.00",)
        assert view.scaling_max_freqs == ("4800.00",)
        assert view.scaling_drivers == ("intel_pstate",)
        assert view.scaling_governors == ("powersave",)
        assert view.energy_performance_preferences == ("balance_performance",)
        assert view.active_cores == 8

    def test_first_seen_order_preserved(self):
        snapshot = [
            make_core(index=0, scaling_governor="schedutil", scaling_max_freq=3_000_000_000),
            make_core(index=1, scaling_governor="performance", scaling_max_freq=1_000_000_000),
            make_core(index=2, scaling_governor="schedutil", scaling_max_freq=3_000_000_000),
            make_core(index=3, scaling_governor="conservative", scaling_max_freq=2_000_000_000),
        ]

        view = Aggregator().refresh(snapshot)

        assert view.scaling_governors == ("schedutil", "performance", "conservative")
        assert view.scaling_max_freqs == ("3000.00", "1000.00", "2000.00")

    def test_no_duplicates(self):
        snapshot = [
            make_core(index=i, energy_performance_preference=epp)
            for i, epp in enumerate(["power", "default", "power", "default", "power"])
        ]

        view = Aggregator().refresh(snapshot)

        for values in (
            view.scaling_min_freqs,
            view.scaling_max_freqs,
            view.scaling_drivers,
            view.scaling_governors,
            view.energy_performance_preferences,
        ):
            assert len(values) == len(set(values))
        assert view.energy_performance_preferences == ("power", "default")

    def test_dedup_uses_formatted_frequency(self):
        """Frequencies that round to the same MHz string are one entry."""
        snapshot = [
            make_core(index=0, scaling_min_freq=800_001_000),
            make_core(index=1, scaling_min_freq=800_004_000),
        ]

        view = Aggregator().refresh(snapshot)

        assert view.scaling_min_freqs == ("800.00",)

    def test_refresh_replaces_previous_view(self):
        aggregator = Aggregator()
        aggregator.refresh([make_core(index=0, scaling_governor="performance")])

        view = aggregator.refresh([make_core(index=0, scaling_governor="powersave")])

        assert view.scaling_governors == ("powersave",)
        assert aggregator.view is view

    def test_empty_snapshot_raises_and_keeps_previous_view(self):
        aggregator = Aggregator()
        previous = aggregator.refresh([make_core()])

        with pytest.raises(EmptySampleError):
            aggregator.refresh([])

        assert aggregator.view is previous

    def test_input_not_mutated(self):
        snapshot = [make_core(index=0), make_core(index=1)]
        copy = list(snapshot)

        Aggregator().refresh(snapshot)

        assert snapshot == copy

"""Tests for the bag duration partitioner."""

import itertools

import pytest

from infusion_schedule.core.bag_schedule.constants import MAX_BAGS
from infusion_schedule.core.bag_schedule.partitioner import (
    allowed_durations,
    greedy_duration,
    partition,
)

FLAG_COMBINATIONS = list(itertools.product([False, True], repeat=2))

OVERRIDE_PATTERNS = [
    [],
    [1] * MAX_BAGS,
    [7] * MAX_BAGS,
    [5] * MAX_BAGS,
    [6] * MAX_BAGS,
    [3, 4, None, None, 2],
    [None, 6, 5, 7, 1, 9, 0, -2],
]


class TestAllowedDurations:
    """Tests for the allowed override set."""

    def test_base_set(self):
        assert allowed_durations(False) == [1, 2, 3, 4, 7]

    def test_five_day_flag(self):
        assert allowed_durations(False, enable_5=True) == [1, 2, 3, 4, 5, 7]

    def test_six_day_flag(self):
        assert allowed_durations(False, enable_6=True) == [1, 2, 3, 4, 6, 7]

    def test_both_flags(self):
        assert allowed_durations(False, True, True) == [1, 2, 3, 4, 5, 6, 7]

    def test_preservative_free_ignores_flags(self):
        """Preservative-free bags are always 1 day."""
        assert allowed_durations(True, True, True) == [1]


class TestGreedyDuration:
    """Tests for the greedy remainder policy table."""

    @pytest.mark.parametrize("remaining", [1, 2, 3, 4])
    def test_small_remainder_consumed_whole(self, remaining):
        assert greedy_duration(remaining) == remaining

    def test_five_days_split(self):
        assert greedy_duration(5) == 2

    def test_six_days_split(self):
        assert greedy_duration(6) == 3

    @pytest.mark.parametrize("remaining", [7, 14, 21, 28])
    def test_whole_weeks(self, remaining):
        assert greedy_duration(remaining) == 7

    @pytest.mark.parametrize(
        ("remaining", "expected"),
        [(8, 1), (9, 2), (10, 3), (11, 4), (12, 2), (13, 3), (26, 2), (27, 3)],
    )
    def test_modulus_remap(self, remaining, expected):
        """Remainders of 5 and 6 modulo 7 split like a 5- or 6-day span."""
        assert greedy_duration(remaining) == expected


class TestPartitionScenarios:
    """Worked examples of the partitioning rules."""

    def test_26_days_no_overrides(self):
        """26 = 5 + 21; the 5-day remainder splits 2 + 3 ahead of the weeks."""
        assert partition(26) == [2, 3, 7, 7, 7]

    def test_six_days_without_flag(self):
        assert partition(6) == [3, 3]

    def test_six_day_override_with_flag(self):
        assert partition(6, [6], enable_6=True) == [6]

    def test_six_day_override_without_flag_ignored(self):
        assert partition(6, [6]) == [3, 3]

    def test_five_day_override_with_flag(self):
        assert partition(5, [5], enable_5=True) == [5]

    def test_five_days_with_flag_but_no_override_still_splits(self):
        """Enabling 5-day bags does not change the greedy path."""
        assert partition(5, enable_5=True) == [2, 3]

    def test_preservative_free_rejects_larger_override(self):
        assert partition(5, [3], is_preservative_free=True) == [1, 1, 1, 1, 1]

    def test_preservative_free_ignores_flags(self):
        assert partition(3, [5, 6], True, True, True) == [1, 1, 1]

    def test_overrides_then_greedy(self):
        """3 + 4 by override, then 19 days: 2 + 3 + 7 + 7."""
        assert partition(26, [3, 4]) == [3, 4, 2, 3, 7, 7]

    def test_override_longer_than_remaining_is_clamped(self):
        assert partition(3, [7]) == [3]

    def test_override_mid_schedule(self):
        assert partition(14, [None, 3]) == [7, 3, 4]

    @pytest.mark.parametrize("bad", [0, 8, 9, -1, 100])
    def test_out_of_range_override_ignored(self, bad):
        assert partition(7, [bad]) == [7]

    def test_boolean_override_ignored(self):
        assert partition(7, [True]) == [7]

    def test_whole_cycle(self):
        assert partition(28) == [7, 7, 7, 7]

    @pytest.mark.parametrize("remaining", [0, -3])
    def test_non_positive_remaining_is_empty(self, remaining):
        assert partition(remaining) == []

    def test_bag_ceiling_truncates_long_cycles(self):
        """Only MAX_BAGS bags are produced even when days remain."""
        durations = partition(40, is_preservative_free=True)
        assert len(durations) == MAX_BAGS
        assert sum(durations) == MAX_BAGS


class TestPartitionInvariants:
    """Properties that hold for every input in the modeled range."""

    @pytest.mark.parametrize("enable_5,enable_6", FLAG_COMBINATIONS)
    @pytest.mark.parametrize("preservative_free", [False, True])
    def test_sum_and_ceiling(self, enable_5, enable_6, preservative_free):
        for remaining in range(1, MAX_BAGS + 1):
            for overrides in OVERRIDE_PATTERNS:
                durations = partition(
                    remaining, overrides, preservative_free, enable_5, enable_6
                )
                assert sum(durations) == remaining
                assert len(durations) <= MAX_BAGS
                assert all(1 <= d <= 7 for d in durations)

    @pytest.mark.parametrize("enable_5,enable_6", FLAG_COMBINATIONS)
    def test_preservative_free_always_one_day(self, enable_5, enable_6):
        for remaining in range(1, MAX_BAGS + 1):
            for overrides in OVERRIDE_PATTERNS:
                durations = partition(remaining, overrides, True, enable_5, enable_6)
                assert set(durations) == {1}

    @pytest.mark.parametrize("enable_5,enable_6", FLAG_COMBINATIONS)
    def test_greedy_path_never_uses_five_or_six(self, enable_5, enable_6):
        for remaining in range(1, MAX_BAGS + 1):
            durations = partition(remaining, [], False, enable_5, enable_6)
            assert 5 not in durations
            assert 6 not in durations

    def test_five_and_six_only_from_enabled_overrides(self):
        for remaining in range(1, MAX_BAGS + 1):
            assert 5 not in partition(remaining, [5] * MAX_BAGS, enable_6=True)
            assert 6 not in partition(remaining, [6] * MAX_BAGS, enable_5=True)

    def test_deterministic(self):
        first = partition(23, [None, 4, 1], False, True, False)
        second = partition(23, [None, 4, 1], False, True, False)
        assert first == second

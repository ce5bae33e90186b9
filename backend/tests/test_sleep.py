"""Tests for sleep reconstruction."""

from datetime import date

import pytest

from athlete_insights.models.biometrics import BiometricRecord
from athlete_insights.services.sleep import (
    aggregate_by_date,
    consistency_level,
    duration_hours,
    parse_clock_time,
    sleep_consistency,
    sleep_debt,
    sleep_efficiency,
    sleep_for_date,
    sleep_quality_score,
    time_in_bed_hours,
)


def _segment(day: date, onset=None, wake=None, duration=None) -> BiometricRecord:
    return BiometricRecord(date=day, onset_time=onset, wake_time=wake, duration_hours=duration)


class TestParseClockTime:
    """Tests for clock time parsing."""

    def test_parses_hours_and_minutes(self):
        """Test a regular time."""
        assert parse_clock_time("22:30") == 22 * 60 + 30

    @pytest.mark.parametrize("value", [None, "", "   ", "00:00", "25:10", "ab:cd", "1230"])
    def test_absent_values(self, value):
        """Test that missing, sentinel and malformed times are absent."""
        assert parse_clock_time(value) is None


class TestDurationHours:
    """Tests for single-segment duration."""

    def test_crosses_midnight(self):
        """Test a wake time earlier than onset wraps past midnight."""
        assert duration_hours("22:30", "05:15") == pytest.approx(6.75)

    def test_same_day_segment(self):
        """Test a daytime nap."""
        assert duration_hours("13:00", "14:30") == pytest.approx(1.5)

    def test_midnight_sentinel_uses_fallback(self):
        """Test "00:00" is not treated as a real midnight."""
        assert duration_hours("00:00", "07:00", fallback=6.5) == pytest.approx(6.5)

    def test_missing_times_without_fallback(self):
        """Test a segment with nothing usable contributes zero."""
        assert duration_hours(None, "07:00") == 0.0
        assert duration_hours(None, None, fallback=0) == 0.0

    def test_result_stays_within_a_day(self):
        """Test duration is always in [0, 24)."""
        assert 0 <= duration_hours("07:00", "07:00") < 24
        assert 0 <= duration_hours("07:01", "07:00") < 24

    @pytest.mark.parametrize("fallback", [24.0, 30.0])
    def test_fallback_of_a_day_or_more_is_ignored(self, fallback):
        """Test an implausible device duration does not leave the [0, 24) range."""
        assert duration_hours(None, None, fallback=fallback) == 0.0

    def test_fallback_just_under_a_day(self):
        """Test the largest plausible device duration is kept."""
        assert duration_hours(None, None, fallback=23.5) == pytest.approx(23.5)


class TestAggregateByDate:
    """Tests for per-date sleep totals."""

    def test_sums_segments_sharing_a_date(self):
        """Test main sleep and nap on the same date are added together."""
        day = date(2024, 5, 1)
        records = [
            _segment(day, "22:30", "05:15"),
            _segment(day, "13:00", "14:00"),
        ]

        days = aggregate_by_date(records)

        assert len(days) == 1
        assert days[0].total_hours == pytest.approx(7.75)
        assert sleep_for_date(records, day) == pytest.approx(7.75)

    @pytest.mark.parametrize("order", [(0, 1, 2, 3), (3, 2, 1, 0), (2, 0, 3, 1), (1, 3, 0, 2)])
    def test_one_entry_per_date_oldest_first(self, order):
        """Test ordering and uniqueness of dates whatever the input order."""
        segments = [
            _segment(date(2024, 5, 3), "23:00", "07:00"),
            _segment(date(2024, 5, 1), "23:00", "06:00"),
            _segment(date(2024, 5, 3), "14:00", "14:30"),
            _segment(date(2024, 5, 2), duration=6.0),
        ]
        records = [segments[i] for i in order]

        days = aggregate_by_date(records)

        assert [d.date for d in days] == [date(2024, 5, 1), date(2024, 5, 2), date(2024, 5, 3)]
        assert [d.total_hours for d in days] == pytest.approx([7.0, 6.0, 8.5])

    def test_empty_input(self):
        """Test no records gives no days."""
        assert aggregate_by_date([]) == []

    def test_sleep_for_date_without_segments(self):
        """Test a date with no segments has zero sleep."""
        assert sleep_for_date([_segment(date(2024, 5, 1), "23:00", "07:00")], date(2024, 5, 2)) == 0.0


class TestSleepIndicators:
    """Tests for debt, efficiency, consistency and quality."""

    def test_sleep_debt(self):
        """Test debt is the shortfall and never negative."""
        assert sleep_debt(6.5, 8.0) == pytest.approx(1.5)
        assert sleep_debt(9.0, 8.0) == 0.0

    def test_time_in_bed_fallback_adds_latency(self):
        """Test time in bed without clock times adds 30 minutes."""
        record = _segment(date(2024, 5, 1), duration=7.0)
        assert time_in_bed_hours(record) == pytest.approx(7.5)

    def test_sleep_efficiency(self):
        """Test efficiency percentage."""
        assert sleep_efficiency(7.0, 7.5) == pytest.approx(93.333, rel=1e-3)
        assert sleep_efficiency(0, 7.5) == 0.0

    def test_consistency_needs_two_nights(self):
        """Test consistency is undefined with a single night."""
        assert sleep_consistency([_segment(date(2024, 5, 1), "23:00", "07:00")]) is None

    def test_consistency_of_regular_schedule(self):
        """Test identical schedules give zero deviation."""
        records = [_segment(date(2024, 5, d), "23:00", "07:00") for d in range(1, 5)]
        stddev = sleep_consistency(records)
        assert stddev == 0.0
        assert consistency_level(stddev) == "high"

    def test_consistency_is_population_deviation(self):
        """Test onsets and wakes 30 minutes apart average 15 minutes."""
        records = [
            _segment(date(2024, 5, 1), "23:00", "07:00"),
            _segment(date(2024, 5, 2), "23:30", "07:30"),
            _segment(date(2024, 5, 3), "00:00", duration=7.0),
        ]
        assert sleep_consistency(records) == pytest.approx(15.0)

    def test_consistency_levels(self):
        """Test level thresholds."""
        assert consistency_level(15) == "high"
        assert consistency_level(30) == "moderate"
        assert consistency_level(46) == "low"

    def test_quality_score_bounds(self):
        """Test quality score hits 100 at targets and 0 with nothing."""
        assert sleep_quality_score(8.0, 90, 20, 18) == 100
        assert sleep_quality_score(0, 0, 0, 0) == 0
        assert sleep_quality_score(6.0, 90, 20, 18) == 91

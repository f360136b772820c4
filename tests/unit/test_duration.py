"""Tests for hour/minute conversion."""

from timekeeper.utils.duration import hours_to_minutes, minutes_to_hours, round_half_up


class TestDurationConversion:
    def test_quarter_hour_roundtrip(self):
        """1.25h -> 75 min -> 1.25h with no drift."""
        assert hours_to_minutes(1.25) == 75
        assert minutes_to_hours(75) == 1.25

    def test_quarter_hours_are_exact(self):
        for quarters in range(1, 41):
            hours = quarters / 4
            assert minutes_to_hours(hours_to_minutes(hours)) == hours

    def test_rounds_half_up(self):
        """.5 rounds up, unlike round()."""
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert hours_to_minutes(0.0125) == 1  # 0.75 min

    def test_sub_minute_rounds_to_zero(self):
        assert hours_to_minutes(0.001) == 0

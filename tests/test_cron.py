"""
Cron translator tests.
"""

import pytest

from gold_alert.scheduler.cron import build_cron, describe_cron


class TestBuildCron:
    """Test cron expression building."""

    def test_hourly(self):
        """Should fire every hour at the given minute."""
        assert build_cron("hourly", "09:30") == "30 * * * *"

    def test_daily(self):
        """Should fire once a day."""
        assert build_cron("daily", "09:30") == "30 9 * * *"

    def test_weekly(self):
        """Should fire on Mondays."""
        assert build_cron("weekly", "09:30") == "30 9 * * 1"

    def test_unknown_frequency_falls_back_to_daily(self):
        """Should use the daily rule for unknown frequencies."""
        assert build_cron("monthly", "18:05") == "5 18 * * *"

    def test_empty_time_uses_defaults(self):
        """Should default to 09:00."""
        assert build_cron("daily", "") == "0 9 * * *"

    def test_missing_minute(self):
        """Should default the minute to 0."""
        assert build_cron("daily", "14") == "0 14 * * *"

    @pytest.mark.parametrize("time", ["garbage", "ab:cd", ":", None])
    def test_malformed_time_never_raises(self, time):
        """Should fall back to defaults on malformed input."""
        assert build_cron("daily", time) == "0 9 * * *"


class TestDescribeCron:
    """Test cron descriptions."""

    def test_hourly(self):
        assert describe_cron("30 * * * *") == "Every hour at minute 30"

    def test_daily(self):
        assert describe_cron("30 9 * * *") == "Daily at 09:30"

    def test_weekly(self):
        assert describe_cron("0 9 * * 1") == "Every Monday at 09:00"

    def test_multiple_weekdays(self):
        assert describe_cron("0 18 * * 1,3") == "Every Monday, Wednesday at 18:00"

    def test_weekdays_range(self):
        assert describe_cron("15 8 * * 1-5") == "Weekdays at 08:15"

    def test_every_n_minutes(self):
        assert describe_cron("*/15 * * * *") == "Every 15 minutes"

    def test_monthly(self):
        assert describe_cron("0 6 1 * *") == "Monthly on day 1 at 06:00"

    @pytest.mark.parametrize(
        "expression",
        ["", "not a cron", "0 9 * *", "0 9 * 1 *", "0 9-17 * * *", "@daily"],
    )
    def test_unrecognized_returned_literally(self, expression):
        """Should return input it can't describe unchanged."""
        assert describe_cron(expression) == expression

    def test_non_string_input(self):
        """Should not raise on non-string input."""
        assert describe_cron(None) == "None"

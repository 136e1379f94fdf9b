"""
Data model tests.
Tests for dataclass models and their validation.
"""

import pytest

from gold_alert.scheduler.models import ExecutionLog, Schedule
from gold_alert.storage.models import AlertSettings, SettingsValidationError


class TestAlertSettings:
    """Test AlertSettings model."""

    def test_defaults(self):
        """Should create settings with defaults."""
        settings = AlertSettings()
        assert settings.recipient_emails == []
        assert settings.frequency == "daily"
        assert settings.trigger_time == "09:00"
        assert settings.timezone == "America/New_York"
        assert settings.threshold_enabled is False
        assert settings.threshold_above == "2500"
        assert settings.threshold_below == "2000"
        assert settings.unit == "ounce"

    def test_defaults_not_shared(self):
        """Should not share the recipient list between instances."""
        first = AlertSettings()
        first.add_recipient("a@example.com")
        assert AlertSettings().recipient_emails == []

    def test_add_recipient(self):
        """Should add a trimmed email."""
        settings = AlertSettings()
        assert settings.add_recipient("  trader@example.com ") is True
        assert settings.recipient_emails == ["trader@example.com"]

    def test_add_duplicate_recipient(self):
        """Should ignore duplicates."""
        settings = AlertSettings(recipient_emails=["trader@example.com"])
        assert settings.add_recipient("trader@example.com") is False
        assert settings.recipient_emails == ["trader@example.com"]

    @pytest.mark.parametrize("email", ["", "   ", "not-an-email"])
    def test_add_invalid_recipient(self, email):
        """Should ignore blank input and input without @."""
        settings = AlertSettings()
        assert settings.add_recipient(email) is False
        assert settings.recipient_emails == []

    def test_insertion_order_preserved(self):
        """Should keep recipients in the order they were added."""
        settings = AlertSettings()
        for email in ["c@example.com", "a@example.com", "b@example.com"]:
            settings.add_recipient(email)
        assert settings.recipient_emails == ["c@example.com", "a@example.com", "b@example.com"]

    def test_remove_recipient(self):
        """Should remove a recipient."""
        settings = AlertSettings(recipient_emails=["a@example.com", "b@example.com"])
        assert settings.remove_recipient("a@example.com") is True
        assert settings.remove_recipient("a@example.com") is False
        assert settings.recipient_emails == ["b@example.com"]

    def test_validate_accepts_defaults(self):
        """Should accept default settings."""
        AlertSettings().validate()

    @pytest.mark.parametrize(
        "changes",
        [
            {"frequency": "monthly"},
            {"unit": "kilogram"},
            {"timezone": ""},
            {"timezone": "Mars/Olympus_Mons"},
        ],
    )
    def test_validate_rejects(self, changes):
        """Should reject unsupported values."""
        with pytest.raises(SettingsValidationError):
            AlertSettings(**changes).validate()

    def test_from_dict_merges_defaults(self):
        """Should fill missing fields with defaults and drop unknown keys."""
        settings = AlertSettings.from_dict({"frequency": "weekly", "legacy": True})
        assert settings.frequency == "weekly"
        assert settings.unit == "ounce"

    def test_from_dict_drops_duplicate_recipients(self):
        """Should enforce the no-duplicates invariant on load."""
        settings = AlertSettings.from_dict(
            {"recipient_emails": ["a@example.com", "a@example.com", "", 5]}
        )
        assert settings.recipient_emails == ["a@example.com"]

    def test_dict_round_trip(self, sample_settings):
        """Should survive to_dict/from_dict unchanged."""
        assert AlertSettings.from_dict(sample_settings.to_dict()) == sample_settings


class TestScheduleModel:
    """Test Schedule model."""

    def test_from_api(self, sample_schedule_data):
        """Should build a schedule from API data."""
        schedule = Schedule.from_api(sample_schedule_data)
        assert schedule.id == "sched-1"
        assert schedule.is_active is True
        assert schedule.cron_expression == "30 9 * * *"
        assert schedule.next_run_time == "2026-02-20T14:30:00Z"
        assert schedule.timezone == "America/New_York"

    def test_from_api_minimal(self):
        """Should tolerate missing fields."""
        schedule = Schedule.from_api({"id": 42, "extra": "ignored"})
        assert schedule.id == "42"
        assert schedule.is_active is False
        assert schedule.cron_expression == ""
        assert schedule.next_run_time is None


class TestExecutionLogModel:
    """Test ExecutionLog model."""

    def test_from_api(self, sample_execution_data):
        """Should build an execution log from API data."""
        log = ExecutionLog.from_api(sample_execution_data)
        assert log.id == "exec-1"
        assert log.success is True
        assert log.attempt == 1
        assert log.max_attempts == 3
        assert log.response_status == 200
        assert log.error_message is None

    def test_from_api_failed_run(self):
        """Should keep the error message of a failed run."""
        log = ExecutionLog.from_api(
            {"id": "exec-2", "success": False, "error_message": "Agent timed out"}
        )
        assert log.success is False
        assert log.error_message == "Agent timed out"
        assert log.response_output is None

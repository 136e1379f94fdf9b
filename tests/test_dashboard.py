"""
Dashboard rendering tests.
"""

import json

from gold_alert.dashboard import (
    PLACEHOLDER,
    alerts_sent,
    email_sent,
    format_timestamp,
    render_logs,
    render_result,
    render_schedule,
    threshold_badge,
    trend_arrow,
    trend_direction,
)
from gold_alert.scheduler.models import ExecutionLog, Schedule


class TestHelpers:
    """Test small formatting helpers."""

    def test_trend_direction(self):
        assert trend_direction("+$12.30") == "up"
        assert trend_direction("-0.20%") == "down"
        assert trend_direction("0.00") == "flat"
        assert trend_direction(None) == "flat"

    def test_trend_arrow(self):
        """Should prefix an arrow for rising and falling prices."""
        assert trend_arrow("+$12.30") == "▲ +$12.30"
        assert trend_arrow("-$3.10") == "▼ -$3.10"
        assert trend_arrow("") == PLACEHOLDER

    def test_format_timestamp_fallbacks(self):
        """Should keep unparseable timestamps as-is."""
        assert format_timestamp(None) == PLACEHOLDER
        assert format_timestamp("yesterday") == "yesterday"

    def test_format_timestamp_naive(self):
        assert format_timestamp("2026-02-19T14:30:00") == "2026-02-19 14:30:00"

    def test_threshold_badge(self, sample_agent_result):
        """Should describe the threshold evaluation."""
        assert threshold_badge(sample_agent_result) == "Threshold Met"
        assert threshold_badge({"threshold_evaluation": {"threshold_configured": True}}) == "Below Threshold"
        assert threshold_badge({"summary": "ok"}) == "Not Configured"
        assert threshold_badge(None) == "Not Configured"


class TestAlertsSent:
    """Test counting delivered alerts."""

    def test_counts_only_sent_emails(self, sample_agent_result):
        """Should count executions whose output reports a sent email."""
        not_sent = dict(sample_agent_result, email_status={"email_sent": False})
        logs = [
            ExecutionLog(id="1", response_output=json.dumps(sample_agent_result)),
            ExecutionLog(id="2", response_output=json.dumps(not_sent)),
            ExecutionLog(id="3", response_output="agent crashed"),
            ExecutionLog(id="4", response_output=None),
        ]
        assert alerts_sent(logs) == 1

    def test_string_true_is_not_sent(self):
        """Should require a literal boolean."""
        log = ExecutionLog(id="1", response_output='{"email_status": {"email_sent": "true"}}')
        assert email_sent(log) is False


class TestRenderResult:
    """Test agent result rendering."""

    def test_no_result(self):
        assert render_result(None).startswith("No results yet")

    def test_full_result(self, sample_agent_result):
        """Should render every section."""
        rendered = render_result(sample_agent_result)
        assert "Gold price (oz):   $2,847.50" in rendered
        assert "24h change:        ▲ +$12.30 (+0.43%)" in rendered
        assert "Threshold:         Threshold Met" in rendered
        assert "Email:             Sent" in rendered
        assert "To: trader@example.com, analyst@example.com" in rendered
        assert rendered.endswith("Gold is trading at $2,847.50 per ounce.")

    def test_sparse_result(self):
        """Should render placeholders for missing fields."""
        rendered = render_result({"price_data": "not a dict"})
        assert f"Gold price (g):    {PLACEHOLDER}" in rendered
        assert f"As of:             {PLACEHOLDER}" in rendered
        assert "Threshold:" not in rendered
        assert "Email:" not in rendered


class TestRenderSchedule:
    """Test schedule rendering."""

    def test_no_schedule(self):
        assert render_schedule(None) == "Schedule:          not available"

    def test_schedule(self):
        """Should show status and a readable cron description."""
        schedule = Schedule(
            id="sched-1",
            is_active=False,
            cron_expression="30 9 * * *",
            timezone="America/New_York",
        )
        rendered = render_schedule(schedule)
        assert "sched-1 (Paused)" in rendered
        assert "Daily at 09:30" in rendered
        assert f"Next run:          {PLACEHOLDER}" in rendered
        assert "America/New_York" in rendered


class TestRenderLogs:
    """Test execution history rendering."""

    def test_empty(self):
        assert render_logs([]) == "No execution history yet."

    def test_table(self, sample_agent_result):
        """Should render one row per execution and the sent count."""
        logs = [
            ExecutionLog(
                id="1",
                executed_at="2026-02-19T14:30:00",
                success=True,
                response_output=json.dumps(sample_agent_result),
            ),
            ExecutionLog(
                id="2",
                executed_at="2026-02-18T14:30:00",
                success=False,
                response_output="timeout",
            ),
        ]
        lines = render_logs(logs).splitlines()

        assert lines[0].split() == ["Time", "Price", "Threshold", "Recipients", "Status"]
        assert "$2,847.50" in lines[1]
        assert "Met" in lines[1]
        assert lines[1].endswith("Success")
        assert lines[2].endswith("Failed")
        assert lines[-1] == "Alerts sent: 1"


class TestLooselyTypedFields:
    """Test agent data whose fields aren't strings."""

    def test_numeric_timestamp(self):
        """Should show a numeric timestamp as-is."""
        rendered = render_result({"price_data": {"timestamp": 1771511400}})
        assert "As of:             1771511400" in rendered

    def test_numeric_price_change(self):
        """Should classify numeric changes like their string form."""
        assert trend_direction(12.3) == "flat"
        assert trend_direction(-3.1) == "down"
        assert trend_arrow(-3.1) == "▼ -3.1"
        rendered = render_result({"price_data": {"price_change_24h": 12.3}})
        assert "24h change:        12.3" in rendered

    def test_zero_change(self):
        assert trend_arrow(0) == "0"

    def test_numeric_executed_at(self):
        """Should render a log row with a numeric execution time."""
        lines = render_logs([ExecutionLog(id="1", executed_at=1771511400)]).splitlines()
        assert lines[1].startswith("1771511400")
        assert lines[-1] == "Alerts sent: 0"

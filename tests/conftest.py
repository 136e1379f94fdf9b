"""
Pytest configuration and shared fixtures.
"""

import json
from typing import Any, Optional
from unittest.mock import Mock

import pytest

from gold_alert.storage.connection import Database
from gold_alert.storage.models import AlertSettings


@pytest.fixture
def db():
    """In-memory database with schema."""
    db = Database(":memory:")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def sample_settings():
    """Alert settings with recipients and an upper threshold."""
    return AlertSettings(
        recipient_emails=["trader@example.com", "analyst@example.com"],
        frequency="daily",
        trigger_time="09:30",
        timezone="America/New_York",
        threshold_enabled=True,
        threshold_above="2500",
        threshold_below="",
        unit="ounce",
    )


@pytest.fixture
def sample_schedule_data():
    """Sample scheduler service schedule record."""
    return {
        "id": "sched-1",
        "is_active": True,
        "cron_expression": "30 9 * * *",
        "next_run_time": "2026-02-20T14:30:00Z",
        "last_run_at": "2026-02-19T14:30:00Z",
        "agent_id": "agent-manager",
        "timezone": "America/New_York",
    }


@pytest.fixture
def sample_agent_result():
    """Sample canonical agent result."""
    return {
        "price_data": {
            "current_price_per_ounce": "$2,847.50",
            "current_price_per_gram": "$91.57",
            "price_change_24h": "+$12.30",
            "price_change_percentage": "+0.43%",
            "daily_high": "$2,855.00",
            "daily_low": "$2,832.10",
            "weekly_trend": "Bullish",
            "data_source": "Market Data API",
            "timestamp": "2026-02-19T14:30:00Z",
        },
        "threshold_evaluation": {
            "threshold_configured": True,
            "threshold_met": True,
            "threshold_details": "Current price $2,847.50/oz exceeds threshold of $2,500/oz",
        },
        "email_status": {
            "email_sent": True,
            "recipient_emails": "trader@example.com, analyst@example.com",
            "status_message": "Alert email sent successfully to all recipients",
        },
        "summary": "Gold is trading at $2,847.50 per ounce.",
    }


@pytest.fixture
def sample_execution_data(sample_agent_result):
    """Sample scheduler service execution record."""
    return {
        "id": "exec-1",
        "schedule_id": "sched-1",
        "executed_at": "2026-02-19T14:30:00Z",
        "attempt": 1,
        "max_attempts": 3,
        "success": True,
        "payload_message": "Fetch current gold prices and send an alert email.",
        "response_status": 200,
        "response_output": json.dumps(sample_agent_result),
        "error_message": None,
    }


@pytest.fixture
def make_response():
    """Factory for mocked requests.Response objects."""

    def _make(
        status_code: int = 200,
        body: Any = None,
        text: Optional[str] = None,
        history: Optional[list] = None,
        url: str = "https://api.example.com/",
    ) -> Mock:
        response = Mock()
        response.status_code = status_code
        response.history = history or []
        response.url = url
        if body is None:
            response.json.side_effect = ValueError("No JSON")
            response.text = text or ""
        else:
            response.json.return_value = body
            response.text = text if text is not None else json.dumps(body)
        return response

    return _make

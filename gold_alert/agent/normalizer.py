"""
Normalization of agent result payloads.
"""

import json
import re
from typing import Any, Optional, TypedDict

# First "{" to last "}", across newlines
_JSON_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)


class PriceData(TypedDict, total=False):
    """Gold price snapshot reported by the agent."""

    current_price_per_ounce: str
    current_price_per_gram: str
    price_change_24h: str
    price_change_percentage: str
    daily_high: str
    daily_low: str
    weekly_trend: str
    data_source: str
    timestamp: str


class ThresholdEvaluation(TypedDict, total=False):
    """Threshold check reported by the agent."""

    threshold_configured: bool
    threshold_met: bool
    threshold_details: str


class EmailStatus(TypedDict, total=False):
    """Email delivery status reported by the agent."""

    email_sent: bool
    recipient_emails: str
    status_message: str


class AgentResult(TypedDict, total=False):
    """Canonical agent result. Every field may be missing."""

    price_data: PriceData
    threshold_evaluation: ThresholdEvaluation
    email_status: EmailStatus
    summary: str


def normalize(raw: Any) -> Optional[AgentResult]:
    """
    Parse an agent result payload into the canonical result shape.

    Structured payloads are returned unchanged. Strings are parsed as JSON,
    falling back to the first embedded {...} span when the agent wrapped its
    JSON in prose.

    Args:
        raw: Payload from the agent response (dict, JSON string, free text)

    Returns:
        AgentResult, or None when there is no usable result
    """
    if raw is None:
        return None
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, str) or not raw:
        return None

    try:
        result = _as_result(json.loads(raw))
    except (ValueError, RecursionError):
        result = None
    if result is not None:
        return result

    # Non-object JSON falls through to the embedded object search
    match = _JSON_OBJECT_PATTERN.search(raw)
    if not match:
        return None
    try:
        return _as_result(json.loads(match.group(0)))
    except (ValueError, RecursionError):
        return None


def _as_result(value: Any) -> Optional[AgentResult]:
    """Accept only JSON objects as results."""
    if isinstance(value, dict):
        return value
    return None

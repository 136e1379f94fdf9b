"""
Plain-text rendering of agent results, schedules and execution history.

Agent results are loosely shaped; any missing field renders as a
placeholder instead of failing.
"""

from datetime import datetime
from typing import Any, Iterable, Optional

from gold_alert.agent.normalizer import AgentResult, normalize
from gold_alert.scheduler.cron import describe_cron
from gold_alert.scheduler.models import ExecutionLog, Schedule

PLACEHOLDER = "--"


def _section(result: Optional[AgentResult], key: str) -> dict[str, Any]:
    """Get a nested section of a result, or an empty dict."""
    if not isinstance(result, dict):
        return {}
    section = result.get(key)
    return section if isinstance(section, dict) else {}


def _value(section: dict[str, Any], key: str) -> str:
    value = section.get(key)
    if value is None or value == "":
        return PLACEHOLDER
    return str(value)


def format_timestamp(value: Any) -> str:
    """Format an ISO timestamp for display, falling back to the raw value."""
    if value is None or value == "":
        return PLACEHOLDER
    text = str(value)
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return text
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def trend_direction(change: Any) -> str:
    """Classify a change like "+$12.30", "-0.20%" or a bare number."""
    if change is None or change == "":
        return "flat"
    text = str(change)
    if "+" in text:
        return "up"
    if "-" in text:
        return "down"
    return "flat"


def trend_arrow(change: Any) -> str:
    if change is None or change == "":
        return PLACEHOLDER
    arrow = {"up": "▲ ", "down": "▼ "}.get(trend_direction(change), "")
    return f"{arrow}{change}"


def email_sent(log: ExecutionLog) -> bool:
    """Whether an execution's output reports a sent email."""
    parsed = normalize(log.response_output)
    return _section(parsed, "email_status").get("email_sent") is True


def alerts_sent(logs: Iterable[ExecutionLog]) -> int:
    """Count executions that delivered an alert email."""
    return sum(1 for log in logs if email_sent(log))


def threshold_badge(result: Optional[AgentResult]) -> str:
    evaluation = _section(result, "threshold_evaluation")
    if not evaluation.get("threshold_configured"):
        return "Not Configured"
    return "Threshold Met" if evaluation.get("threshold_met") else "Below Threshold"


def render_result(result: Optional[AgentResult]) -> str:
    """Render the latest agent result."""
    if result is None:
        return "No results yet. Run a check to fetch the current gold price."

    price = _section(result, "price_data")
    lines = [
        f"Gold price (oz):   {_value(price, 'current_price_per_ounce')}",
        f"Gold price (g):    {_value(price, 'current_price_per_gram')}",
        f"24h change:        {trend_arrow(price.get('price_change_24h'))}"
        f" ({_value(price, 'price_change_percentage')})",
        f"Daily high / low:  {_value(price, 'daily_high')} / {_value(price, 'daily_low')}",
        f"Weekly trend:      {_value(price, 'weekly_trend')}",
        f"Source:            {_value(price, 'data_source')}",
        f"As of:             {format_timestamp(price.get('timestamp'))}",
    ]

    evaluation = _section(result, "threshold_evaluation")
    if evaluation:
        lines.append(f"Threshold:         {threshold_badge(result)}")
        if evaluation.get("threshold_details"):
            lines.append(f"                   {evaluation['threshold_details']}")

    status = _section(result, "email_status")
    if status:
        lines.append(f"Email:             {'Sent' if status.get('email_sent') else 'Not Sent'}")
        if status.get("recipient_emails"):
            lines.append(f"                   To: {status['recipient_emails']}")
        if status.get("status_message"):
            lines.append(f"                   {status['status_message']}")

    summary = result.get("summary")
    if summary:
        lines.extend(["", str(summary)])
    return "\n".join(lines)


def render_schedule(schedule: Optional[Schedule]) -> str:
    """Render the managed schedule's status."""
    if schedule is None:
        return "Schedule:          not available"
    lines = [
        f"Schedule:          {schedule.id} ({'Active' if schedule.is_active else 'Paused'})",
        f"Runs:              {describe_cron(schedule.cron_expression) or PLACEHOLDER}",
        f"Next run:          {format_timestamp(schedule.next_run_time)}",
        f"Last run:          {format_timestamp(schedule.last_run_at)}",
    ]
    if schedule.timezone:
        lines.append(f"Timezone:          {schedule.timezone}")
    return "\n".join(lines)


def render_logs(logs: list[ExecutionLog]) -> str:
    """Render execution history as a table, newest first."""
    if not logs:
        return "No execution history yet."

    rows = [("Time", "Price", "Threshold", "Recipients", "Status")]
    for log in logs:
        parsed = normalize(log.response_output)
        evaluation = _section(parsed, "threshold_evaluation")
        if evaluation.get("threshold_configured"):
            threshold = "Met" if evaluation.get("threshold_met") else "Not Met"
        else:
            threshold = PLACEHOLDER
        rows.append((
            format_timestamp(log.executed_at),
            _value(_section(parsed, "price_data"), "current_price_per_ounce"),
            threshold,
            _value(_section(parsed, "email_status"), "recipient_emails"),
            "Success" if log.success else "Failed",
        ))

    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    lines = ["  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip() for row in rows]
    lines.append("")
    lines.append(f"Alerts sent: {alerts_sent(logs)}")
    return "\n".join(lines)

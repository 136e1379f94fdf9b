"""
Cron expression building and description.
"""

DEFAULT_HOUR = 9
DEFAULT_MINUTE = 0

WEEKDAYS = {
    "0": "Sunday",
    "1": "Monday",
    "2": "Tuesday",
    "3": "Wednesday",
    "4": "Thursday",
    "5": "Friday",
    "6": "Saturday",
    "7": "Sunday",
}


def _parse_part(value: str, default: int) -> int:
    """Parse one HH or MM component, falling back to the default."""
    value = value.strip()
    if not value.isdigit():
        return default
    return int(value)


def build_cron(frequency: str, time: str) -> str:
    """
    Build a 5-field cron expression for an alert frequency.

    Args:
        frequency: "hourly", "daily" or "weekly" (anything else is daily)
        time: Local time of day as "HH:MM"

    Returns:
        Cron expression (minute hour day-of-month month day-of-week)
    """
    parts = (time or "").split(":")
    hour = _parse_part(parts[0], DEFAULT_HOUR)
    minute = _parse_part(parts[1], DEFAULT_MINUTE) if len(parts) > 1 else DEFAULT_MINUTE

    if frequency == "hourly":
        return f"{minute} * * * *"
    elif frequency == "weekly":
        return f"{minute} {hour} * * 1"
    else:
        return f"{minute} {hour} * * *"


def describe_cron(expression: str) -> str:
    """
    Describe a cron expression in plain English.

    Shapes that aren't recognized are returned unchanged.
    """
    if not isinstance(expression, str):
        return str(expression)

    fields = expression.split()
    if len(fields) != 5:
        return expression

    minute, hour, day, month, weekday = fields

    if minute.startswith("*/") and minute[2:].isdigit() and fields[1:] == ["*"] * 4:
        return f"Every {minute[2:]} minutes"

    if not minute.isdigit() or month != "*":
        return expression

    if hour == "*" and day == "*" and weekday == "*":
        return f"Every hour at minute {int(minute)}"

    if not hour.isdigit():
        return expression
    at = f"{int(hour):02d}:{int(minute):02d}"

    if day == "*" and weekday == "*":
        return f"Daily at {at}"

    if day == "*":
        names = [WEEKDAYS.get(d) for d in weekday.split(",")]
        if all(names):
            return f"Every {', '.join(names)} at {at}"
        if weekday == "1-5":
            return f"Weekdays at {at}"
        return expression

    if weekday == "*" and day.isdigit():
        return f"Monthly on day {int(day)} at {at}"

    return expression

"""
Agent instruction composition.
"""

from gold_alert.storage.models import AlertSettings

NO_RECIPIENTS = "no recipients configured"
NO_THRESHOLD = "No threshold configured"


def compose_message(settings: AlertSettings) -> str:
    """
    Render alert settings into the instruction sent to the manager agent.

    The output depends only on the settings, so repeated checks with
    unchanged settings send identical instructions.
    """
    if settings.recipient_emails:
        recipients = ", ".join(settings.recipient_emails)
    else:
        recipients = NO_RECIPIENTS

    return (
        "Fetch current gold prices and send an alert email.\n"
        f"Recipients: {recipients}\n"
        f"Threshold: {threshold_clause(settings)}\n"
        f"Unit preference: {settings.unit}"
    )


def threshold_clause(settings: AlertSettings) -> str:
    """Describe the configured price threshold."""
    if not settings.threshold_enabled:
        return NO_THRESHOLD

    unit_label = "g" if settings.unit == "gram" else "oz"
    parts = []
    if settings.threshold_above:
        parts.append(f"above ${settings.threshold_above}/{unit_label}")
    if settings.threshold_below:
        parts.append(f"below ${settings.threshold_below}/{unit_label}")

    if not parts:
        return NO_THRESHOLD
    return f"Alert when price goes {' or '.join(parts)}"

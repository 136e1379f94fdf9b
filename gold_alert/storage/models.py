"""
Alert settings model.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

FREQUENCIES = ("hourly", "daily", "weekly")
UNITS = ("ounce", "gram")


class SettingsValidationError(Exception):
    """Raised when alert settings are invalid."""

    pass


@dataclass
class AlertSettings:
    """User's desired alert configuration."""

    recipient_emails: list[str] = field(default_factory=list)
    frequency: str = "daily"  # "hourly", "daily", "weekly"
    trigger_time: str = "09:00"
    timezone: str = "America/New_York"
    threshold_enabled: bool = False
    threshold_above: str = "2500"
    threshold_below: str = "2000"
    unit: str = "ounce"  # "ounce", "gram"

    def add_recipient(self, email: str) -> bool:
        """
        Add a recipient email.

        Blank input, input without an "@" and duplicates are ignored.

        Returns:
            True if the recipient was added
        """
        email = email.strip()
        if not email or "@" not in email:
            return False
        if email in self.recipient_emails:
            return False
        self.recipient_emails.append(email)
        return True

    def remove_recipient(self, email: str) -> bool:
        """Remove a recipient email. Returns True if it was present."""
        if email not in self.recipient_emails:
            return False
        self.recipient_emails = [e for e in self.recipient_emails if e != email]
        return True

    def validate(self) -> None:
        """
        Validate settings before they are saved.

        Raises:
            SettingsValidationError: If a field holds an unsupported value
        """
        if self.frequency not in FREQUENCIES:
            raise SettingsValidationError(f"Unknown frequency: {self.frequency}")
        if self.unit not in UNITS:
            raise SettingsValidationError(f"Unknown unit: {self.unit}")
        if not self.timezone:
            raise SettingsValidationError("Timezone cannot be empty")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise SettingsValidationError(f"Unknown timezone: {self.timezone}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize settings to a JSON-compatible dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AlertSettings":
        """Build settings from stored data, falling back to defaults per field."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        settings = cls(**values)
        # Stored lists may predate the duplicate check
        emails = settings.recipient_emails if isinstance(settings.recipient_emails, list) else []
        settings.recipient_emails = []
        for email in emails:
            if isinstance(email, str):
                settings.add_recipient(email)
        return settings

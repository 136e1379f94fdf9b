"""
Repository classes for locally persisted state.
"""

import json
import logging
from typing import Optional

from .connection import Database
from .models import AlertSettings

logger = logging.getLogger(__name__)

SETTINGS_KEY = "gold_alert_settings"
SCHEDULE_ID_KEY = "gold_alert_schedule_id"


class KeyValueRepository:
    """Plain get/set operations on the settings table."""

    def __init__(self, db: Database):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        """Get a stored value by key."""
        cursor = self.db.connection.cursor()
        cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
        row = cursor.fetchone()
        if row is None:
            return None
        return row["value"]

    def set(self, key: str, value: str) -> None:
        """Insert or replace a stored value."""
        cursor = self.db.connection.cursor()
        cursor.execute(
            """
            INSERT INTO settings (key, value)
            VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = CURRENT_TIMESTAMP
            """,
            (key, value),
        )
        self.db.connection.commit()

    def delete(self, key: str) -> None:
        """Delete a stored value."""
        cursor = self.db.connection.cursor()
        cursor.execute("DELETE FROM settings WHERE key = ?", (key,))
        self.db.connection.commit()


class SettingsRepository:
    """Loads and saves alert settings and the managed schedule ID."""

    def __init__(self, db: Database, initial_schedule_id: Optional[str] = None):
        """
        Initialize settings repository.

        Args:
            db: Database instance
            initial_schedule_id: Schedule ID to manage when none is stored yet
        """
        self.store = KeyValueRepository(db)
        self.initial_schedule_id = initial_schedule_id

    def load_settings(self) -> AlertSettings:
        """Load settings, falling back to defaults on absence or parse failure."""
        raw = self.store.get(SETTINGS_KEY)
        if not raw:
            return AlertSettings()
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("stored settings are not an object")
            return AlertSettings.from_dict(data)
        except (ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable stored settings: {e}")
            return AlertSettings()

    def save_settings(self, settings: AlertSettings) -> None:
        """Persist settings as JSON."""
        self.store.set(SETTINGS_KEY, json.dumps(settings.to_dict()))

    def load_schedule_id(self) -> Optional[str]:
        """Load the managed schedule ID, or the initial ID if none is stored."""
        return self.store.get(SCHEDULE_ID_KEY) or self.initial_schedule_id

    def save_schedule_id(self, schedule_id: str) -> None:
        """Persist the managed schedule ID."""
        self.store.set(SCHEDULE_ID_KEY, schedule_id)

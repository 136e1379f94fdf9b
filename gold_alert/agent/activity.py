"""
Agent activity subscription.

The transport delivering live events is external; it feeds events in through
record(). The controller only observes the events and toggles processing.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class ActivityEvent:
    """One activity or "thinking" event emitted while an agent runs."""

    type: str
    message: str
    agent_id: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)


class ActivityMonitor:
    """Live view of the activity stream for one agent session."""

    def __init__(self):
        self.session_id: Optional[str] = None
        self.connected = False
        self.processing = False
        self.events: list[ActivityEvent] = []

    def subscribe(self, session_id: Optional[str]) -> None:
        """Follow a new session. Events from the previous session are dropped."""
        if session_id != self.session_id:
            self.events = []
        self.session_id = session_id
        self.connected = session_id is not None

    def set_processing(self, processing: bool) -> None:
        self.processing = processing

    def record(self, event: ActivityEvent) -> None:
        """Append an event delivered by the transport."""
        if not self.connected:
            return
        self.events.append(event)

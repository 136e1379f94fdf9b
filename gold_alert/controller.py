"""
Orchestration controller for gold price alerts.

Owns the client-side state: current settings, the managed schedule, recent
executions, the last agent result and the live notification. Each user
operation runs on its own track with its own in-flight flag. No public
operation raises; failures end up as an error notification.
"""

import asyncio
import dataclasses
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from gold_alert.agent.activity import ActivityMonitor
from gold_alert.agent.client import AgentClient
from gold_alert.agent.composer import compose_message
from gold_alert.agent.normalizer import AgentResult, normalize
from gold_alert.scheduler.manager import ScheduleManager
from gold_alert.scheduler.models import ExecutionLog, Schedule
from gold_alert.storage.models import AlertSettings
from gold_alert.storage.repository import SettingsRepository

logger = logging.getLogger(__name__)

NOTIFICATION_TTL_SECONDS = 5.0


class Track(Enum):
    """Independently loading operation lanes."""

    FETCH_SCHEDULE = "fetch_schedule"
    FETCH_LOGS = "fetch_logs"
    CHECK_NOW = "check_now"
    TOGGLE_SCHEDULE = "toggle_schedule"
    SAVE_SETTINGS = "save_settings"


@dataclass(frozen=True)
class Notification:
    """Transient user-facing message."""

    type: str  # "success", "error"
    message: str
    created_at: float


@dataclass(frozen=True)
class ControllerState:
    """Read-only snapshot of the controller state."""

    settings: AlertSettings
    schedule_id: Optional[str]
    schedule: Optional[Schedule]
    logs: tuple[ExecutionLog, ...]
    last_result: Optional[AgentResult]
    notification: Optional[Notification]
    in_flight: frozenset[Track]
    session_id: Optional[str]
    active_agent_id: Optional[str]

    def is_loading(self, track: Track) -> bool:
        return track in self.in_flight


class AlertController:
    """Coordinates settings, the schedule lifecycle and on-demand checks."""

    def __init__(
        self,
        manager: ScheduleManager,
        agent_client: AgentClient,
        repository: SettingsRepository,
        manager_agent_id: str,
        activity: Optional[ActivityMonitor] = None,
        log_limit: int = 20,
        notification_ttl: float = NOTIFICATION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize controller.

        Args:
            manager: Lifecycle manager for the schedule this installation owns
            agent_client: Client for the agent-execution service
            repository: Local persistence for settings
            manager_agent_id: Agent that runs the price check and email
            activity: Activity stream monitor for agent sessions
            log_limit: Number of recent executions to load
            notification_ttl: Seconds before a notification expires
            clock: Monotonic clock used for notification expiry
        """
        self.manager = manager
        self.agent_client = agent_client
        self.repository = repository
        self.manager_agent_id = manager_agent_id
        self.activity = activity or ActivityMonitor()
        self.log_limit = log_limit
        self.notification_ttl = notification_ttl
        self.clock = clock

        self.settings = AlertSettings()
        self.logs: list[ExecutionLog] = []
        self.last_result: Optional[AgentResult] = None
        self.session_id: Optional[str] = None
        self.active_agent_id: Optional[str] = None
        self._notification: Optional[Notification] = None
        self._in_flight: set[Track] = set()

    # State

    @property
    def notification(self) -> Optional[Notification]:
        """The live notification, or None once it has expired."""
        if self._notification is None:
            return None
        if self.clock() - self._notification.created_at >= self.notification_ttl:
            self._notification = None
        return self._notification

    def dismiss_notification(self) -> None:
        self._notification = None

    def is_loading(self, track: Track) -> bool:
        return track in self._in_flight

    def snapshot(self) -> ControllerState:
        """Return a copy of the current state."""
        return ControllerState(
            settings=dataclasses.replace(
                self.settings, recipient_emails=list(self.settings.recipient_emails)
            ),
            schedule_id=self.manager.schedule_id,
            schedule=self.manager.schedule,
            logs=tuple(self.logs),
            last_result=self.last_result,
            notification=self.notification,
            in_flight=frozenset(self._in_flight),
            session_id=self.session_id,
            active_agent_id=self.active_agent_id,
        )

    def _notify(self, type: str, message: str) -> None:
        self._notification = Notification(
            type=type, message=message, created_at=self.clock()
        )

    def _start(self, track: Track) -> bool:
        """Mark a track in flight. Returns False if it already was."""
        if track in self._in_flight:
            logger.debug(f"{track.value} already in flight, ignoring")
            return False
        self._in_flight.add(track)
        return True

    def _finish(self, track: Track) -> None:
        self._in_flight.discard(track)

    # Settings editing

    def update_settings(self, **changes: Any) -> AlertSettings:
        """Apply in-memory settings changes. Nothing is persisted until save."""
        self.settings = dataclasses.replace(self.settings, **changes)
        return self.settings

    def add_recipient(self, email: str) -> bool:
        return self.settings.add_recipient(email)

    def remove_recipient(self, email: str) -> bool:
        return self.settings.remove_recipient(email)

    # Operations

    async def load(self) -> None:
        """Load persisted settings, then fetch the schedule and its history."""
        try:
            self.settings = self.repository.load_settings()
        except Exception as e:
            logger.error(f"Error loading settings, using defaults: {e}")
            self.settings = AlertSettings()
        await asyncio.gather(self.refresh_schedule(), self.refresh_logs())

    async def refresh_schedule(self) -> None:
        """Fetch the managed schedule. Failures are silent."""
        if not self._start(Track.FETCH_SCHEDULE):
            return
        try:
            await self.manager.fetch()
        except Exception as e:
            logger.debug(f"Schedule not available: {e}")
        finally:
            self._finish(Track.FETCH_SCHEDULE)

    async def refresh_logs(self) -> None:
        """Fetch recent executions. Failures are silent."""
        if not self._start(Track.FETCH_LOGS):
            return
        try:
            result = await self.manager.fetch_executions(limit=self.log_limit)
            if result.success:
                self.logs = list(result.executions)
        except Exception as e:
            logger.debug(f"Execution history not available: {e}")
        finally:
            self._finish(Track.FETCH_LOGS)

    async def check_now(self) -> None:
        """Run the manager agent once with the current settings."""
        if not self._start(Track.CHECK_NOW):
            return
        self.active_agent_id = self.manager_agent_id
        self.activity.set_processing(True)
        try:
            message = compose_message(self.settings)
            response = await self.agent_client.invoke(message, self.manager_agent_id)

            if response.session_id:
                self.session_id = response.session_id
                self.activity.subscribe(response.session_id)

            if response.success:
                parsed = normalize(response.result)
                if parsed is not None:
                    self.last_result = parsed
                    self._notify("success", "Gold price check completed successfully")
                else:
                    self._notify("success", "Agent responded. Check results below.")
            else:
                self._notify("error", response.error or "Failed to check gold price")
        except Exception as e:
            logger.error(f"Error checking gold price: {e}")
            self._notify("error", "Network error while checking gold price")
        finally:
            self.active_agent_id = None
            self.activity.set_processing(False)
            self._finish(Track.CHECK_NOW)

    async def toggle_schedule(self) -> None:
        """Pause the schedule if active, resume it if paused."""
        schedule = self.manager.schedule
        if schedule is None:
            return
        if not self._start(Track.TOGGLE_SCHEDULE):
            return
        try:
            result = await self.manager.toggle()
            if result.success:
                self._notify(
                    "success",
                    "Schedule paused" if schedule.is_active else "Schedule resumed",
                )
            else:
                self._notify("error", "Failed to update schedule status")
        except Exception as e:
            logger.error(f"Error toggling schedule: {e}")
            self._notify("error", "Failed to update schedule status")
        finally:
            self._finish(Track.TOGGLE_SCHEDULE)

    async def save_settings(self) -> None:
        """
        Persist settings locally, then replace the remote schedule.

        Local persistence happens regardless of the remote outcome; the
        notification reports the remote outcome.
        """
        if not self._start(Track.SAVE_SETTINGS):
            return
        try:
            self.repository.save_settings(self.settings)

            result = await self.manager.replace(self.settings, self.manager_agent_id)
            if result.success:
                self._notify("success", "Configuration saved and schedule updated")
            else:
                self._notify("error", result.error or "Failed to update schedule")
        except Exception as e:
            logger.error(f"Error saving configuration: {e}")
            self._notify("error", "Error saving configuration")
        finally:
            self._finish(Track.SAVE_SETTINGS)

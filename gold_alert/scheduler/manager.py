"""
Lifecycle management for the single schedule this installation owns.
"""

import itertools
import logging
from typing import Optional

from gold_alert.agent.composer import compose_message
from gold_alert.storage.models import AlertSettings
from gold_alert.storage.repository import SettingsRepository
from .client import SchedulerClient
from .cron import build_cron
from .models import ExecutionsResult, Schedule, ScheduleResult

logger = logging.getLogger(__name__)


class ScheduleManager:
    """Tracks the managed schedule and replaces it when settings change."""

    def __init__(
        self,
        client: SchedulerClient,
        repository: SettingsRepository,
        schedule_id: Optional[str] = None,
    ):
        """
        Initialize schedule manager.

        Args:
            client: Scheduler service client
            repository: Where the managed schedule ID is persisted
            schedule_id: Managed schedule ID (defaults to the stored one)
        """
        self.client = client
        self.repository = repository
        self.schedule_id = schedule_id or repository.load_schedule_id()
        self.schedule: Optional[Schedule] = None

        # Operations are numbered when they start. A schedule snapshot is only
        # adopted if no later-started operation has already written one.
        self._sequence = itertools.count(1)
        self._applied = 0

    def _begin(self) -> int:
        return next(self._sequence)

    def _adopt(self, schedule: Schedule, token: int) -> bool:
        """Cache a schedule snapshot unless a newer one was already cached."""
        if token < self._applied:
            logger.debug(f"Dropping stale schedule snapshot from operation {token}")
            return False
        self._applied = token
        self.schedule = schedule
        return True

    async def fetch(self) -> ScheduleResult:
        """
        Refresh the cached schedule.

        A failure is not an error: the schedule may not exist yet.
        """
        if not self.schedule_id:
            return ScheduleResult(success=False)
        token = self._begin()
        result = await self.client.get(self.schedule_id)
        if result.success and result.schedule:
            self._adopt(result.schedule, token)
        return result

    async def fetch_executions(self, limit: int = 20) -> ExecutionsResult:
        """Get the most recent executions of the managed schedule."""
        if not self.schedule_id:
            return ExecutionsResult(success=False)
        return await self.client.list_executions(self.schedule_id, limit=limit)

    async def toggle(self) -> ScheduleResult:
        """
        Pause an active schedule or resume a paused one.

        The schedule is always re-fetched afterwards, since pause/resume
        responses don't necessarily carry the updated record.

        Returns:
            Result of the pause/resume call
        """
        if self.schedule is None:
            return ScheduleResult(success=False, error="No schedule loaded")

        token = self._begin()
        if self.schedule.is_active:
            result = await self.client.pause(self.schedule.id)
        else:
            result = await self.client.resume(self.schedule.id)

        refreshed = await self.client.get(self.schedule.id)
        if refreshed.success and refreshed.schedule:
            self._adopt(refreshed.schedule, token)
        return result

    async def replace(self, settings: AlertSettings, agent_id: str) -> ScheduleResult:
        """
        Replace the managed schedule with one built from the given settings.

        The old schedule is deleted first (best effort), then a new one is
        created. On success the new schedule becomes the managed one. On
        failure the managed ID is left as it was, even though the old
        schedule is already gone.
        """
        token = self._begin()

        if self.schedule_id:
            try:
                deleted = await self.client.delete(self.schedule_id)
                if not deleted.success:
                    logger.info(
                        f"Could not delete schedule {self.schedule_id}: "
                        f"{deleted.error or 'no response'}"
                    )
            except Exception as e:
                logger.info(f"Could not delete schedule {self.schedule_id}: {e}")

        created = await self.client.create(
            agent_id=agent_id,
            cron_expression=build_cron(settings.frequency, settings.trigger_time),
            message=compose_message(settings),
            timezone=settings.timezone,
        )

        if created.success and created.schedule:
            self.schedule_id = created.schedule.id
            self.repository.save_schedule_id(created.schedule.id)
            self._adopt(created.schedule, token)
            logger.info(f"Now managing schedule {created.schedule.id}")
        elif created.success:
            return ScheduleResult(success=False, error=created.error)

        return created

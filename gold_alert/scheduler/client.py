"""
Scheduler service client.
"""

import logging
from typing import Any, Optional

from gold_alert.gateway import Gateway
from .models import ExecutionLog, ExecutionsResult, Schedule, ScheduleResult

logger = logging.getLogger(__name__)


class SchedulerClient:
    """Talks to the schedule-management service through the gateway."""

    def __init__(self, gateway: Gateway, base_url: str, api_key: str = ""):
        """
        Initialize scheduler client.

        Args:
            gateway: Gateway all calls are routed through
            base_url: Scheduler service base URL
            api_key: Optional API key sent as X-API-Key
        """
        self.gateway = gateway
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    async def get(self, schedule_id: str) -> ScheduleResult:
        """Get the current state of a schedule."""
        return await self._schedule_call("GET", f"/schedules/{schedule_id}")

    async def create(
        self,
        agent_id: str,
        cron_expression: str,
        message: str,
        timezone: str,
    ) -> ScheduleResult:
        """Create a new schedule."""
        return await self._schedule_call(
            "POST",
            "/schedules",
            json={
                "agent_id": agent_id,
                "cron_expression": cron_expression,
                "message": message,
                "timezone": timezone,
            },
        )

    async def delete(self, schedule_id: str) -> ScheduleResult:
        """Delete a schedule."""
        return await self._schedule_call("DELETE", f"/schedules/{schedule_id}")

    async def pause(self, schedule_id: str) -> ScheduleResult:
        """Pause a schedule."""
        return await self._schedule_call("POST", f"/schedules/{schedule_id}/pause")

    async def resume(self, schedule_id: str) -> ScheduleResult:
        """Resume a paused schedule."""
        return await self._schedule_call("POST", f"/schedules/{schedule_id}/resume")

    async def list_executions(
        self, schedule_id: str, limit: int = 20
    ) -> ExecutionsResult:
        """List the most recent executions of a schedule, newest first."""
        body, error = await self._call(
            "GET",
            f"/schedules/{schedule_id}/executions",
            params={"limit": limit},
        )
        if body is None:
            return ExecutionsResult(success=False, error=error)

        executions = body.get("executions")
        if not body.get("success") or not isinstance(executions, list):
            return ExecutionsResult(success=False, error=body.get("error"))

        return ExecutionsResult(
            success=True,
            executions=[
                ExecutionLog.from_api(item)
                for item in executions
                if isinstance(item, dict)
            ],
        )

    async def _schedule_call(
        self, method: str, path: str, **kwargs: Any
    ) -> ScheduleResult:
        """Make a call whose envelope carries an optional schedule."""
        body, error = await self._call(method, path, **kwargs)
        if body is None:
            return ScheduleResult(success=False, error=error)

        if not body.get("success"):
            return ScheduleResult(success=False, error=body.get("error"))

        schedule = None
        data = body.get("schedule")
        if isinstance(data, dict) and "id" in data:
            schedule = Schedule.from_api(data)
        return ScheduleResult(success=True, schedule=schedule)

    async def _call(
        self, method: str, path: str, **kwargs: Any
    ) -> tuple[Optional[dict[str, Any]], Optional[str]]:
        """
        Make a gateway call and decode the JSON envelope.

        Returns:
            (body, None) on a decodable response, (None, error) otherwise.
            The error is None when the gateway already handled the failure.
        """
        headers = {"X-API-Key": self.api_key} if self.api_key else {}
        response = await self.gateway.request(
            method, f"{self.base_url}{path}", headers=headers, **kwargs
        )
        if response is None:
            return None, None

        try:
            body = response.json()
        except ValueError:
            logger.warning(f"{method} {path} returned a non-JSON body")
            return None, f"HTTP {response.status_code}: {response.text}"

        if not isinstance(body, dict):
            return None, f"HTTP {response.status_code}: unexpected response"
        return body, None

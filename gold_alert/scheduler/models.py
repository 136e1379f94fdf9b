"""
Scheduler service data models.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class Schedule:
    """Recurring job as reported by the scheduler service."""

    id: str
    is_active: bool = False
    cron_expression: str = ""
    next_run_time: Optional[str] = None
    last_run_at: Optional[str] = None
    agent_id: Optional[str] = None
    message: Optional[str] = None
    timezone: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Schedule":
        """Construct from API JSON, tolerating missing and extra fields."""
        return cls(
            id=str(data["id"]),
            is_active=bool(data.get("is_active", False)),
            cron_expression=data.get("cron_expression") or "",
            next_run_time=data.get("next_run_time"),
            last_run_at=data.get("last_run_at"),
            agent_id=data.get("agent_id"),
            message=data.get("message"),
            timezone=data.get("timezone"),
        )


@dataclass
class ExecutionLog:
    """One historical run of a schedule."""

    id: str
    schedule_id: Optional[str] = None
    executed_at: Optional[str] = None
    attempt: int = 1
    max_attempts: int = 1
    success: bool = False
    payload_message: Optional[str] = None
    response_status: Optional[int] = None
    response_output: Any = None
    error_message: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ExecutionLog":
        """Construct from API JSON, tolerating missing and extra fields."""
        return cls(
            id=str(data.get("id", "")),
            schedule_id=data.get("schedule_id"),
            executed_at=data.get("executed_at"),
            attempt=data.get("attempt", 1),
            max_attempts=data.get("max_attempts", 1),
            success=bool(data.get("success", False)),
            payload_message=data.get("payload_message"),
            response_status=data.get("response_status"),
            response_output=data.get("response_output"),
            error_message=data.get("error_message"),
        )


@dataclass
class ScheduleResult:
    """Result of a scheduler call that returns a schedule."""

    success: bool
    schedule: Optional[Schedule] = None
    error: Optional[str] = None


@dataclass
class ExecutionsResult:
    """Result of listing a schedule's executions."""

    success: bool
    executions: list[ExecutionLog] = field(default_factory=list)
    error: Optional[str] = None

"""
Configuration loading and validation.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml


class ConfigValidationError(Exception):
    """Raised when configuration is invalid."""

    pass


@dataclass
class AgentConfig:
    """Agent-execution service configuration."""

    base_url: str = "http://localhost:8000/api"
    api_key: str = ""
    manager_agent_id: str = ""


@dataclass
class SchedulerConfig:
    """Scheduler service configuration."""

    base_url: str = "http://localhost:8000/api/scheduler"
    api_key: str = ""
    initial_schedule_id: Optional[str] = None
    log_limit: int = 20


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: str = "data/gold_alert.db"


@dataclass
class NotificationsConfig:
    """Notification display configuration."""

    dismiss_after_seconds: float = 5.0


@dataclass
class AdvancedConfig:
    """Advanced configuration."""

    log_level: str = "INFO"
    request_timeout_seconds: Optional[float] = None


@dataclass
class AppConfig:
    """Main application configuration."""

    agent: AgentConfig = field(default_factory=AgentConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)
    advanced: AdvancedConfig = field(default_factory=AdvancedConfig)


def _substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in string values."""
    if isinstance(value, str):
        # Match ${VAR_NAME} pattern
        pattern = r"\$\{([^}]+)\}"
        matches = re.findall(pattern, value)
        for var_name in matches:
            env_value = os.environ.get(var_name, "")
            value = value.replace(f"${{{var_name}}}", env_value)
        return value
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    return value


def _validate_config(config_dict: dict[str, Any]) -> None:
    """Validate configuration values."""
    agent = config_dict.get("agent") or {}
    if not agent.get("manager_agent_id"):
        raise ConfigValidationError("agent.manager_agent_id is required")
    if "base_url" in agent and not agent["base_url"]:
        raise ConfigValidationError("agent.base_url cannot be empty")

    scheduler = config_dict.get("scheduler") or {}
    if "base_url" in scheduler and not scheduler["base_url"]:
        raise ConfigValidationError("scheduler.base_url cannot be empty")
    log_limit = scheduler.get("log_limit", 20)
    if not isinstance(log_limit, int) or log_limit <= 0:
        raise ConfigValidationError(f"Invalid scheduler.log_limit: {log_limit}")

    # Check database path is provided
    db_config = config_dict.get("database") or {}
    if "path" in db_config:
        db_path = db_config["path"]
        if not db_path:
            raise ConfigValidationError("Database path is required")
        parent = Path(db_path).parent
        if parent.exists() and not os.access(parent, os.W_OK):
            raise ConfigValidationError(f"Database path not writable: {parent}")

    notifications = config_dict.get("notifications") or {}
    ttl = notifications.get("dismiss_after_seconds", 5.0)
    if not isinstance(ttl, (int, float)) or ttl <= 0:
        raise ConfigValidationError(
            f"Invalid notifications.dismiss_after_seconds: {ttl}"
        )


def load_config(config_path: str) -> AppConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        AppConfig instance

    Raises:
        ConfigValidationError: If configuration is invalid
        FileNotFoundError: If config file doesn't exist
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    # Substitute environment variables
    config_dict = _substitute_env_vars(raw_config)

    # Validate
    _validate_config(config_dict)

    # Empty strings from unset ${VAR}s fall back to "no value"
    scheduler_dict = dict(config_dict.get("scheduler") or {})
    if not scheduler_dict.get("initial_schedule_id"):
        scheduler_dict["initial_schedule_id"] = None

    advanced_dict = dict(config_dict.get("advanced") or {})
    if advanced_dict.get("request_timeout_seconds") in ("", 0):
        advanced_dict["request_timeout_seconds"] = None

    return AppConfig(
        agent=AgentConfig(**(config_dict.get("agent") or {})),
        scheduler=SchedulerConfig(**scheduler_dict),
        database=DatabaseConfig(**(config_dict.get("database") or {})),
        notifications=NotificationsConfig(**(config_dict.get("notifications") or {})),
        advanced=AdvancedConfig(**advanced_dict),
    )

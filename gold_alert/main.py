"""
Application wiring.
"""

import logging
from typing import Optional

import requests

from gold_alert.agent.activity import ActivityMonitor
from gold_alert.agent.client import AgentClient
from gold_alert.config import AppConfig
from gold_alert.controller import AlertController
from gold_alert.gateway import Gateway, RecoveryPolicy
from gold_alert.scheduler.client import SchedulerClient
from gold_alert.scheduler.manager import ScheduleManager
from gold_alert.storage.connection import Database
from gold_alert.storage.repository import SettingsRepository

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", debug: bool = False) -> None:
    """Configure root logging."""
    log_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)


class GoldAlertApp:
    """Gold alert application: storage, service clients and controller."""

    def __init__(
        self,
        config: AppConfig,
        db: Database,
        recovery: Optional[RecoveryPolicy] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the app.

        Args:
            config: Application configuration
            db: Database instance (already initialized)
            recovery: Recovery policy for redirects and backend failures
            session: Caller-owned HTTP session for all service calls; by
                default the gateway opens one per worker thread
        """
        self.config = config
        self.db = db

        # Initialize storage
        self.repository = SettingsRepository(
            db, initial_schedule_id=config.scheduler.initial_schedule_id
        )

        # Initialize services
        self.gateway = Gateway(
            session=session,
            recovery=recovery,
            timeout=config.advanced.request_timeout_seconds,
        )
        self.scheduler_client = SchedulerClient(
            self.gateway, config.scheduler.base_url, api_key=config.scheduler.api_key
        )
        self.agent_client = AgentClient(
            self.gateway, config.agent.base_url, api_key=config.agent.api_key
        )
        self.activity = ActivityMonitor()

        self.manager = ScheduleManager(self.scheduler_client, self.repository)
        self.controller = AlertController(
            manager=self.manager,
            agent_client=self.agent_client,
            repository=self.repository,
            manager_agent_id=config.agent.manager_agent_id,
            activity=self.activity,
            log_limit=config.scheduler.log_limit,
            notification_ttl=config.notifications.dismiss_after_seconds,
        )

    def close(self) -> None:
        """Release HTTP sessions and the database connection."""
        self.gateway.close()
        self.db.close()

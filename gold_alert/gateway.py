"""
Resilient call gateway for outbound HTTP requests.

Every call to the agent and scheduler services goes through here. Redirects
are treated as session expiry, 5xx responses and connection failures offer a
full reload, and everything else is handed back to the caller untouched.
What "navigate" and "reload" mean is decided by the RecoveryPolicy the
embedding layer provides.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol

import requests

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = (
    "Backend is not responding.\n\n"
    "Reload to try again. If you keep seeing this, the backend needs attention."
)
NETWORK_ERROR_MESSAGE = (
    "Cannot connect to backend.\n\n"
    "Reload to try again. If you keep seeing this, the backend needs attention."
)


class CallOutcome(Enum):
    """Classification of a single outbound call."""

    SUCCESS = "success"
    REDIRECTED = "redirected"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"


@dataclass
class CallResult:
    """Result of a gateway call."""

    outcome: CallOutcome
    response: Optional[requests.Response] = None
    redirect_url: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome == CallOutcome.SUCCESS

    @property
    def recovery_message(self) -> Optional[str]:
        """Prompt text for outcomes that offer a reload."""
        if self.outcome == CallOutcome.SERVER_ERROR:
            return SERVER_ERROR_MESSAGE
        if self.outcome == CallOutcome.NETWORK_ERROR:
            return NETWORK_ERROR_MESSAGE
        return None


class RecoveryPolicy(Protocol):
    """How the embedding layer reacts to recoverable failures."""

    def redirect(self, url: str) -> None:
        """Send the user to the redirect target (usually a login page)."""
        ...

    def confirm_reload(self, message: str) -> bool:
        """Ask the user whether to reload the whole client."""
        ...

    def reload(self) -> None:
        """Reload the whole client, discarding in-flight state."""
        ...


class Gateway:
    """Wraps outbound requests with a uniform recovery policy."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        recovery: Optional[RecoveryPolicy] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize gateway.

        Args:
            session: Caller-owned HTTP session used for every request. Without
                one, each worker thread gets a session of its own, since
                requests.Session is not safe to share across threads.
            recovery: Policy for redirects and reload prompts; without one,
                every reload prompt is declined
            timeout: Per-request timeout in seconds (None waits indefinitely)
        """
        self.session = session
        self.recovery = recovery
        self.timeout = timeout

        self._local = threading.local()
        self._owned_sessions: list[requests.Session] = []
        self._owned_lock = threading.Lock()

    def _thread_session(self) -> requests.Session:
        """Session for the calling thread."""
        if self.session is not None:
            return self.session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._owned_lock:
                self._owned_sessions.append(session)
        return session

    def _send_sync(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        return self._thread_session().request(method, url, **kwargs)

    def close(self) -> None:
        """Close the sessions this gateway created. A caller-owned session stays open."""
        with self._owned_lock:
            sessions, self._owned_sessions = self._owned_sessions, []
        for session in sessions:
            session.close()

    async def send(self, method: str, url: str, **kwargs: Any) -> CallResult:
        """Send a request and classify the outcome. Never raises for transport errors."""
        if self.timeout is not None:
            kwargs.setdefault("timeout", self.timeout)

        try:
            response = await asyncio.to_thread(self._send_sync, method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            return CallResult(outcome=CallOutcome.NETWORK_ERROR, error=str(e))

        if response.history:
            logger.info(f"{method} {url} was redirected to {response.url}")
            return CallResult(
                outcome=CallOutcome.REDIRECTED,
                redirect_url=response.url,
            )

        if response.status_code >= 500:
            logger.warning(f"{method} {url} returned HTTP {response.status_code}")
            return CallResult(
                outcome=CallOutcome.SERVER_ERROR,
                error=f"HTTP {response.status_code}",
            )

        return CallResult(outcome=CallOutcome.SUCCESS, response=response)

    async def request(
        self, method: str, url: str, **kwargs: Any
    ) -> Optional[requests.Response]:
        """
        Send a request, applying the recovery policy to failures.

        Returns:
            The raw response for status < 500, otherwise None
        """
        result = await self.send(method, url, **kwargs)
        if result.ok:
            return result.response
        self.recover(result)
        return None

    def recover(self, result: CallResult) -> None:
        """Apply the recovery policy to a failed call."""
        if result.outcome == CallOutcome.REDIRECTED:
            if self.recovery and result.redirect_url:
                self.recovery.redirect(result.redirect_url)
            return

        message = result.recovery_message
        if message is None:
            return
        if self.recovery is None:
            logger.debug("No recovery policy configured, declining reload")
            return
        if self.recovery.confirm_reload(message):
            self.recovery.reload()

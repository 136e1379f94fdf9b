"""
Agent-execution service client.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from gold_alert.gateway import Gateway

logger = logging.getLogger(__name__)


@dataclass
class AgentResponse:
    """Envelope returned by an agent invocation."""

    success: bool
    session_id: Optional[str] = None
    result: Any = None
    error: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "AgentResponse":
        """Construct from API JSON. The result lives under response.result."""
        response = data.get("response")
        result = response.get("result") if isinstance(response, dict) else None
        return cls(
            success=bool(data.get("success", False)),
            session_id=data.get("session_id"),
            result=result,
            error=data.get("error"),
        )


class AgentClient:
    """Invokes agents on the agent-execution service."""

    def __init__(self, gateway: Gateway, base_url: str, api_key: str = ""):
        """
        Initialize agent client.

        Args:
            gateway: Gateway all calls are routed through
            base_url: Agent service base URL
            api_key: Optional API key sent as X-API-Key
        """
        self.gateway = gateway
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    async def invoke(self, message: str, agent_id: str) -> AgentResponse:
        """
        Send a natural-language instruction to an agent.

        Args:
            message: Instruction for the agent
            agent_id: Agent to run

        Returns:
            AgentResponse; success is False when the call failed or the
            service reported an error
        """
        headers = {"X-API-Key": self.api_key} if self.api_key else {}
        response = await self.gateway.request(
            "POST",
            f"{self.base_url}/agent/invoke",
            json={"message": message, "agent_id": agent_id},
            headers=headers,
        )
        if response is None:
            return AgentResponse(success=False)

        try:
            body = response.json()
        except ValueError:
            logger.warning(f"Agent {agent_id} returned a non-JSON body")
            return AgentResponse(
                success=False,
                error=f"HTTP {response.status_code}: {response.text}",
            )

        if not isinstance(body, dict):
            return AgentResponse(success=False, error="Unexpected agent response")
        return AgentResponse.from_api(body)

# ================================
# AGENT SERVICE (services/agent_service.py)
# ================================

import logging

from estate_admin.schemas.agent import Agent, AgentStatusUpdate
from estate_admin.services.api_client import ResourceClient, WRITE, validate_payload

logger = logging.getLogger(__name__)

class AgentService(ResourceClient):
    """Agent applications; documents are normalized when the Agent model is built"""

    resource = "agents"
    model = Agent
    items_key = "agents"
    entity_key = "agent"

    async def update_status(self, agent_id: str, status: str):
        """Record a review decision (form-encoded, like the agent onboarding backend expects)"""
        safe_id = self._require_id(agent_id)
        decision = validate_payload(AgentStatusUpdate, {"status": status})
        body = await self.api.put(WRITE, f"{self.write_prefix}/update-status/{safe_id}", data={"status": decision.status})
        logger.info(f"Agent {agent_id} marked {decision.status}")
        return self._written_entity(body)

from typing import Any, Dict

from estate_admin.forms.base import ConditionalForm
from estate_admin.forms.validators import check_aadhar, check_email, check_pan, check_phone
from estate_admin.schemas.agent import Agent, AgentCreate, AgentUpdate

AGENT_EDIT_FIELDS = ("name", "email", "phone", "pan_number", "aadhar_number", "rera_id", "agency_name", "city")

class AgentForm(ConditionalForm):
    create_schema = AgentCreate
    update_schema = AgentUpdate
    required_fields = ("name", "email", "phone")
    labels = {"pan_number": "PAN", "aadhar_number": "Aadhar number", "rera_id": "RERA ID"}

    @classmethod
    def from_entity(cls, agent: Agent, target: Any = None) -> "AgentForm":
        values = agent.model_dump(include=set(AGENT_EDIT_FIELDS))
        values["name"] = values.get("name") or agent.full_name
        return cls(values, entity_id=agent.id, target=target)

    def check(self, payload: Dict[str, Any]) -> Dict[str, str]:
        return {
            "email": check_email(payload.get("email")),
            "phone": check_phone(payload.get("phone")),
            "pan_number": check_pan(payload.get("pan_number")),
            "aadhar_number": check_aadhar(payload.get("aadhar_number")),
        }

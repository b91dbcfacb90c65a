# ================================
# ADMIN FORM (forms/admin.py)
# ================================

from typing import Any, Dict

from estate_admin.forms.base import ConditionalForm
from estate_admin.forms.validators import check_email, check_password
from estate_admin.schemas.admin import Admin, AdminCreate, AdminUpdate

class AdminForm(ConditionalForm):
    """Password is required for new admins and optional when editing"""

    create_schema = AdminCreate
    update_schema = AdminUpdate
    required_fields = ("name", "email")
    create_only_fields = ("password",)

    @classmethod
    def from_entity(cls, admin: Admin, target: Any = None) -> "AdminForm":
        return cls({"name": admin.name, "email": admin.email, "password": ""}, entity_id=admin.id, target=target)

    def shape(self) -> Dict[str, Any]:
        payload = super().shape()
        if self.is_edit:
            password = self.values.get("password")
            if password:
                payload["password"] = password
        return payload

    def check(self, payload: Dict[str, Any]) -> Dict[str, str]:
        return {
            "email": check_email(payload.get("email")),
            "password": check_password(payload.get("password")),
        }

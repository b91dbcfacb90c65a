# ================================
# CONTACT FORMS (forms/contact.py)
# ================================

from typing import Any, Dict

from estate_admin.forms.base import ConditionalForm
from estate_admin.forms.validators import check_address, check_email, check_phone
from estate_admin.schemas.contact import ContactInfo, ContactInfoCreate, ContactInfoUpdate

VALUE_CHECKS = {
    "phone": check_phone,
    "email": lambda value: check_email(value, strict=False),
    "address": check_address,
}

class ContactInfoForm(ConditionalForm):
    """contact_type decides how contact_value is checked"""

    create_schema = ContactInfoCreate
    update_schema = ContactInfoUpdate
    required_fields = ("contact_type", "contact_value", "label")
    defaults = {"contact_type": "phone", "is_primary": False}
    labels = {"contact_type": "Contact type", "contact_value": "Contact value"}

    @classmethod
    def from_entity(cls, contact: ContactInfo, target: Any = None) -> "ContactInfoForm":
        values = contact.model_dump(include={"contact_type", "contact_value", "label", "is_primary", "is_active"})
        return cls(values, entity_id=contact.id, target=target)

    def check(self, payload: Dict[str, Any]) -> Dict[str, str]:
        contact_type = (payload.get("contact_type") or "").lower()
        value_check = VALUE_CHECKS.get(contact_type)
        if value_check is None:
            return {"contact_type": "Contact type must be phone, email or address"}
        return {"contact_value": value_check(payload.get("contact_value"))}

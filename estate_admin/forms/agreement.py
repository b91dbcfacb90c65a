# ================================
# LEGAL AGREEMENT FORM (forms/agreement.py)
# ================================

from typing import Any, Dict

from estate_admin.forms.base import ConditionalForm
from estate_admin.forms.validators import check_date_order, is_blank
from estate_admin.schemas.agreement import (
    MIN_SIGNATORIES, AgreementCreate, AgreementUpdate, LegalAgreement
)

class AgreementForm(ConditionalForm):
    """Agreement metadata plus its document; the file is mandatory only on create"""

    create_schema = AgreementCreate
    update_schema = AgreementUpdate
    required_fields = ("agreement_type", "document_name", "agreement_date", "status")
    create_only_fields = ("unit_id",)
    defaults = {
        "agreement_type": "agreement_of_sale",
        "status": "draft",
        "signatories": ["", ""],
    }
    labels = {"unit_id": "Unit", "document_name": "Document name"}

    @classmethod
    def for_unit(cls, unit_id: str, target: Any = None) -> "AgreementForm":
        return cls({"unit_id": unit_id}, target=target)

    @classmethod
    def from_entity(cls, agreement: LegalAgreement, target: Any = None) -> "AgreementForm":
        signatories = list(agreement.signatories)
        while len(signatories) < MIN_SIGNATORIES:
            signatories.append("")
        values = {
            "agreement_type": agreement.agreement_type,
            "document_name": agreement.document_name,
            "signatories": signatories,
            "agreement_date": agreement.agreement_date,
            "valid_until": agreement.valid_until,
            "status": agreement.status,
        }
        return cls(values, entity_id=agreement.id, target=target)

    def add_signatory(self) -> None:
        self.set("signatories", list(self.values.get("signatories") or []) + [""])

    def set_signatory(self, index: int, name: str) -> None:
        signatories = list(self.values.get("signatories") or [])
        signatories[index] = name
        self.set("signatories", signatories)

    def remove_signatory(self, index: int) -> None:
        signatories = list(self.values.get("signatories") or [])
        if len(signatories) <= MIN_SIGNATORIES:
            return
        signatories.pop(index)
        self.set("signatories", signatories)

    def check(self, payload: Dict[str, Any]) -> Dict[str, str]:
        errors = {}
        named = [s for s in payload.get("signatories") or [] if not is_blank(s)]
        if len(named) < MIN_SIGNATORIES:
            errors["signatories"] = f"At least {MIN_SIGNATORIES} signatories are required"
        errors["valid_until"] = check_date_order(
            payload.get("agreement_date"), payload.get("valid_until"),
            "Valid until cannot be before the agreement date"
        )
        if not self.is_edit and self.file is None:
            errors["file"] = "Please select a file"
        return errors

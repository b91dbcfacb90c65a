# ================================
# PROJECT / SCHEME / UNIT FORMS (forms/business.py)
# ================================

import logging
from typing import Any, Dict, List, Optional

from estate_admin.forms.base import ConditionalForm
from estate_admin.forms.validators import (
    check_date_order, check_percentage, check_share_total, check_unit_counts, is_blank
)
from estate_admin.schemas.business import (
    SCHEME_FIELD_GROUPS, Project, ProjectCreate, ProjectUpdate,
    PurchasedUnit, Scheme, SchemeCreate, SchemeUpdate, UnitCreate, UnitUpdate
)
from estate_admin.schemas.document import FileUpload
from estate_admin.workflow.selection import CascadingSelection, option_id, option_parent

logger = logging.getLogger(__name__)

# ================================
# Project
# ================================

PROJECT_EDIT_FIELDS = (
    "title", "location", "description", "long_description", "website_url", "status",
    "property_type", "base_price", "has_rental_income", "pricing_details", "key_highlights",
    "features", "investment_highlights", "amenities", "total_units", "available_units",
    "rera_number", "building_permission",
)

class ProjectForm(ConditionalForm):
    create_schema = ProjectCreate
    update_schema = ProjectUpdate
    required_fields = ("title", "location", "status", "property_type")
    defaults = {
        "status": "available",
        "property_type": "residential",
        "base_price": 0,
        "has_rental_income": False,
        "total_units": 1,
        "available_units": 1,
        "key_highlights": [],
        "features": [],
        "investment_highlights": [],
        "amenities": [],
    }

    def __init__(self, values: Optional[Dict[str, Any]] = None, entity_id: Optional[str] = None, target: Any = None):
        super().__init__(values, entity_id, target)
        self.images: List[FileUpload] = []

    @classmethod
    def from_entity(cls, project: Project, target: Any = None) -> "ProjectForm":
        values = project.model_dump(include=set(PROJECT_EDIT_FIELDS))
        return cls(values, entity_id=project.id, target=target)

    def add_image(self, image: FileUpload) -> None:
        self.images.append(image)
        self.file = self.images

    def remove_existing_image(self, url: str) -> None:
        """Mark a stored gallery image for deletion on save"""
        deleted = list(self.values.get("deleted_images") or [])
        if url not in deleted:
            deleted.append(url)
        self.values["deleted_images"] = deleted

    def reset(self) -> None:
        super().reset()
        self.images = []

    def check(self, payload: Dict[str, Any]) -> Dict[str, str]:
        return {"available_units": check_unit_counts(payload.get("total_units"), payload.get("available_units"))}

# ================================
# Scheme
# ================================

SCHEME_EDIT_FIELDS = (
    "scheme_type", "scheme_name", "area_sqft", "booking_advance", "balance_payment_days",
    "total_installments", "monthly_installment_amount", "rental_start_month",
    "start_date", "end_date", "is_active",
)

class SchemeForm(ConditionalForm):
    """Single-payment schemes need balance_payment_days, installment schemes the installment pair"""

    create_schema = SchemeCreate
    update_schema = SchemeUpdate
    discriminants = {"scheme_type": SCHEME_FIELD_GROUPS}
    required_fields = ("scheme_type", "scheme_name", "area_sqft", "start_date")
    create_only_fields = ("project_id",)
    defaults = {
        "scheme_type": "single_payment",
        "booking_advance": 0,
        "rental_start_month": 1,
        "is_active": True,
    }
    labels = {
        "project_id": "Project",
        "area_sqft": "Area (sq ft)",
        "balance_payment_days": "Balance payment days",
        "monthly_installment_amount": "Monthly installment amount",
    }

    @classmethod
    def from_entity(cls, scheme: Scheme, target: Any = None) -> "SchemeForm":
        values = scheme.model_dump(include=set(SCHEME_EDIT_FIELDS))
        return cls(values, entity_id=scheme.id, target=target)

    def check(self, payload: Dict[str, Any]) -> Dict[str, str]:
        return {"end_date": check_date_order(payload.get("start_date"), payload.get("end_date"))}

# ================================
# Purchased Unit
# ================================

UNIT_EDIT_FIELDS = (
    "unit_number", "is_joint_ownership", "joint_owners", "number_of_units", "user_paid",
    "payment_status", "unit_status", "monthly_rental", "rental_start_date", "floor_number",
)

class UnitForm(ConditionalForm):
    """Unit purchase; the scheme list depends on the chosen project"""

    create_schema = UnitCreate
    update_schema = UnitUpdate
    discriminants = {"is_joint_ownership": {True: ("joint_owners",), False: ()}}
    create_only_fields = ("project_id", "scheme_id")
    defaults = {
        "is_joint_ownership": False,
        "joint_owners": [],
        "number_of_units": 1,
    }
    labels = {
        "project_id": "Project",
        "scheme_id": "Scheme",
        "joint_owners": "At least one joint owner",
    }

    def __init__(
        self,
        values: Optional[Dict[str, Any]] = None,
        entity_id: Optional[str] = None,
        target: Any = None,
        selection: Optional[CascadingSelection] = None
    ):
        super().__init__(values, entity_id, target)
        self.selection = selection

    @classmethod
    def from_entity(cls, unit: PurchasedUnit, target: Any = None) -> "UnitForm":
        values = unit.model_dump(include=set(UNIT_EDIT_FIELDS))
        values["joint_owners"] = values.get("joint_owners") or []
        return cls(values, entity_id=unit.id, target=target)

    async def choose_project(self, project_id: Optional[str]) -> List[Any]:
        """Changing the project always drops the chosen scheme"""
        self.set("project_id", project_id)
        self.set("scheme_id", None)
        if self.selection is None:
            return []
        return await self.selection.select_parent(project_id)

    def choose_scheme(self, scheme_id: Optional[str]) -> None:
        if self.selection is not None:
            self.selection.select_child(scheme_id)
        self.set("scheme_id", scheme_id)

    def set_joint_ownership(self, is_joint: bool) -> None:
        self.set("is_joint_ownership", bool(is_joint))
        if is_joint and not self.values.get("joint_owners"):
            self.add_joint_owner()

    def add_joint_owner(self) -> None:
        owners = list(self.values.get("joint_owners") or [])
        owners.append({"user_profile_id": "", "relation": "", "share_percentage": None})
        self.set("joint_owners", owners)

    def update_joint_owner(self, index: int, **fields) -> None:
        owners = [dict(o) for o in self.values.get("joint_owners") or []]
        owners[index].update(fields)
        self.set("joint_owners", owners)

    def remove_joint_owner(self, index: int) -> None:
        owners = list(self.values.get("joint_owners") or [])
        owners.pop(index)
        self.set("joint_owners", owners)

    def shape(self) -> Dict[str, Any]:
        payload = super().shape()
        owners = payload.get("joint_owners")
        if owners:
            payload["joint_owners"] = [
                {k: (None if isinstance(v, str) and not v.strip() else v) for k, v in dict(owner).items()}
                for owner in owners
            ]
        return payload

    def check(self, payload: Dict[str, Any]) -> Dict[str, str]:
        errors: Dict[str, Optional[str]] = {}
        owners = payload.get("joint_owners") or []
        for index, owner in enumerate(owners):
            prefix = f"joint_owners.{index}"
            if is_blank(owner.get("user_profile_id")):
                errors[f"{prefix}.user_profile_id"] = "Owner is required"
            if is_blank(owner.get("relation")):
                errors[f"{prefix}.relation"] = "Relation is required"
            errors[f"{prefix}.share_percentage"] = check_percentage(owner.get("share_percentage"))
        if owners:
            errors["joint_owners"] = check_share_total(o.get("share_percentage") for o in owners)

        if not self.is_edit and self.selection is not None and payload.get("scheme_id"):
            errors["scheme_id"] = self.check_scheme(payload.get("project_id"), payload["scheme_id"])
        return errors

    def check_scheme(self, project_id: Optional[str], scheme_id: str) -> Optional[str]:
        """The scheme must be the resolver's current choice and belong to the unit's project"""
        selected = self.selection.dependent.selected_child
        if project_id != self.selection.parent_id or selected is None or option_id(selected) != scheme_id:
            return "Please select a scheme for the selected project"
        owner = option_parent(selected, "project_id")
        if owner is not None and owner != project_id:
            return "Selected scheme does not belong to the selected project"
        return None

# ================================
# PURCHASED UNIT SERVICE (services/unit_service.py)
# ================================

from typing import List, Optional, Union, Dict, Any
import logging

from estate_admin.config import settings
from estate_admin.core.exceptions import FormValidationError
from estate_admin.schemas.base import Page
from estate_admin.schemas.business import PurchasedUnit, UnitCreate, UnitUpdate, ProjectOption, SchemeOption
from estate_admin.services.api_client import ResourceClient, READ, dump_payload, validate_payload
from estate_admin.services.project_service import ProjectService
from estate_admin.services.scheme_service import SchemeService
from estate_admin.mappers.page_mapper import to_page, to_entity

logger = logging.getLogger(__name__)

class PurchasedUnitService(ResourceClient):
    """Purchased units; balance_amount is computed by the server"""

    resource = "units"
    model = PurchasedUnit
    items_key = "units"
    entity_key = "unit"

    def __init__(self, api, projects: Optional[ProjectService] = None, schemes: Optional[SchemeService] = None):
        super().__init__(api)
        self.projects = projects or ProjectService(api)
        self.schemes = schemes or SchemeService(api)

    async def create(self, payload: Union[UnitCreate, Dict[str, Any]], files=None):
        if isinstance(payload, dict):
            payload = validate_payload(UnitCreate, payload)
        await self.check_scheme(payload.project_id, payload.scheme_id)
        data = dump_payload(payload)
        if not payload.is_joint_ownership:
            data.pop("joint_owners", None)
        return await super().create(data)

    async def check_scheme(self, project_id: str, scheme_id: str) -> None:
        """The scheme must belong to the unit's project, checked against the read service"""
        scheme = await self.schemes.get_by_id(scheme_id)
        if scheme.project_id != project_id:
            logger.warning(f"Scheme {scheme_id} belongs to project {scheme.project_id}, not {project_id}")
            raise FormValidationError({"scheme_id": "Selected scheme does not belong to the selected project"})

    async def update(self, unit_id: str, partial: Union[UnitUpdate, Dict[str, Any]], files=None):
        if isinstance(partial, dict):
            partial = dict(partial)
            partial.pop("balance_amount", None)
            partial = validate_payload(UnitUpdate, partial)
        data = dump_payload(partial, partial=True)
        if data.get("is_joint_ownership") is False:
            data["joint_owners"] = []
        return await super().update(unit_id, data)

    async def get_by_unit_number(self, unit_number: str) -> PurchasedUnit:
        safe_number = self._require_id(unit_number, "unit_number")
        body = await self.api.get(READ, f"{self.read_prefix}/unit-number/{safe_number}")
        return to_entity(body, PurchasedUnit, self.entity_key)

    async def list_by_user(self, user_id: str, page: int = 1, limit: Optional[int] = None) -> Page[PurchasedUnit]:
        limit = limit or settings.DEFAULT_PAGE_SIZE
        safe_id = self._require_id(user_id, "user_id")
        body = await self.api.get(READ, f"{self.read_prefix}/user/{safe_id}", params={"page": page, "limit": limit})
        return to_page(body, PurchasedUnit, page=page, limit=limit, items_key=self.items_key)

    async def projects_for_dropdown(self) -> List[ProjectOption]:
        return await self.projects.dropdown()

    async def schemes_for_dropdown(self, project_id: str) -> List[SchemeOption]:
        if not project_id:
            raise FormValidationError({"project_id": "Please select a project first"})
        return await self.schemes.options_for_project(project_id)

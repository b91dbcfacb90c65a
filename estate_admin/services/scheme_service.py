# ================================
# SCHEME SERVICE (services/scheme_service.py)
# ================================

from typing import List, Optional, Union, Dict, Any
import logging

from estate_admin.config import settings
from estate_admin.schemas.base import Page
from estate_admin.schemas.business import Scheme, SchemeCreate, SchemeUpdate, SchemeOption
from estate_admin.services.api_client import ResourceClient, READ, dump_payload, validate_payload
from estate_admin.mappers.page_mapper import to_page

logger = logging.getLogger(__name__)

class SchemeService(ResourceClient):
    """Investment schemes; project_id is fixed once created"""

    resource = "schemes"
    model = Scheme
    items_key = "schemes"
    entity_key = "scheme"

    async def create(self, payload: Union[SchemeCreate, Dict[str, Any]], files=None):
        if isinstance(payload, dict):
            # Validate locally so a malformed scheme never reaches the server
            payload = validate_payload(SchemeCreate, payload)
        data = payload.model_dump(mode="json")
        return await super().create(data)

    async def update(self, scheme_id: str, partial: Union[SchemeUpdate, Dict[str, Any]], files=None):
        if isinstance(partial, dict):
            partial = dict(partial)
            if partial.pop("project_id", None) is not None:
                logger.warning(f"Ignoring project_id change on scheme {scheme_id}")
            partial = validate_payload(SchemeUpdate, partial)
        data = dump_payload(partial, partial=True)
        # The inactive payment group goes out explicitly empty
        if data.get("scheme_type") == "single_payment":
            data.update({"total_installments": None, "monthly_installment_amount": None})
        elif data.get("scheme_type") == "installment":
            data["balance_payment_days"] = None
        return await super().update(scheme_id, data)

    async def delete(self, scheme_id: str):
        """Schemes are deactivated, not removed"""
        return await super().update(scheme_id, {"is_active": False})

    async def list(self, filters: Optional[Dict[str, Any]] = None, page: int = 1, limit: Optional[int] = None, project_id: Optional[str] = None) -> Page[Scheme]:
        filters = dict(filters or {})
        if project_id:
            filters["project_id"] = project_id
        return await super().list(filters, page, limit)

    async def list_by_project(self, project_id: str, page: int = 1, limit: Optional[int] = None) -> Page[Scheme]:
        limit = limit or settings.DEFAULT_PAGE_SIZE
        self._require_id(project_id, "project_id")
        body = await self.api.get(READ, f"{self.read_prefix}/project", params={"project_id": project_id, "page": page, "limit": limit})
        return to_page(body, Scheme, page=page, limit=limit, items_key=self.items_key)

    async def options_for_project(self, project_id: str) -> List[SchemeOption]:
        """Active schemes of one project, for dependent selection"""
        page = await self.list_by_project(project_id, limit=settings.DROPDOWN_PAGE_SIZE)
        return [
            SchemeOption(id=s.id, scheme_name=s.scheme_name, project_id=s.project_id)
            for s in page.items
            if s.is_active and s.project_id == project_id
        ]

# ================================
# PROJECT SERVICE (services/project_service.py)
# ================================

from typing import List, Optional, Union, Dict, Any
import logging

from estate_admin.config import settings
from estate_admin.schemas.base import Page
from estate_admin.schemas.business import Project, ProjectCreate, ProjectUpdate, ProjectOption
from estate_admin.schemas.document import FileUpload
from estate_admin.services.api_client import ResourceClient, READ, dump_payload, validate_payload
from estate_admin.mappers.page_mapper import to_page, extract_items

logger = logging.getLogger(__name__)

Images = Optional[Union[FileUpload, List[FileUpload]]]

def _as_list(images: Images) -> List[FileUpload]:
    if images is None:
        return []
    return images if isinstance(images, list) else [images]

class ProjectService(ResourceClient):
    """Projects: multipart writes with gallery images, soft delete"""

    resource = "projects"
    model = Project
    metadata_key = "project"
    items_key = "projects"
    entity_key = "project"

    async def create(self, payload: Union[ProjectCreate, Dict[str, Any]], images: Images = None):
        """Create a project; new projects start with nothing reserved and everything not available sold"""
        if isinstance(payload, dict):
            payload = validate_payload(ProjectCreate, payload)
        data = dump_payload(payload)
        data["sold_units"] = max(payload.total_units - payload.available_units, 0)
        data["reserved_units"] = 0
        return await super().create(data, files={"images": _as_list(images)})

    async def update(self, project_id: str, partial: Union[ProjectUpdate, Dict[str, Any]], images: Images = None):
        """Partial update; deleted_images removes gallery entries by URL"""
        if isinstance(partial, dict):
            partial = validate_payload(ProjectUpdate, partial)
        return await super().update(project_id, partial, files={"images": _as_list(images)})

    async def delete(self, project_id: str):
        """Projects are never removed, only deactivated"""
        return await super().update(project_id, {"is_active": False})

    async def list_by_status(self, status: str, page: int = 1, limit: Optional[int] = None) -> Page[Project]:
        limit = limit or settings.DEFAULT_PAGE_SIZE
        body = await self.api.get(READ, f"{self.read_prefix}/by-status", params={"status": status, "page": page, "limit": limit})
        return to_page(body, Project, page=page, limit=limit, items_key=self.items_key)

    async def list_by_property_type(self, property_type: str, page: int = 1, limit: Optional[int] = None) -> Page[Project]:
        limit = limit or settings.DEFAULT_PAGE_SIZE
        safe_type = self._require_id(property_type, "property_type")
        body = await self.api.get(READ, f"{self.read_prefix}/property-type/{safe_type}", params={"page": page, "limit": limit})
        return to_page(body, Project, page=page, limit=limit, items_key=self.items_key)

    async def search(self, search_term: str, page: int = 1, limit: Optional[int] = None) -> Page[Project]:
        limit = limit or settings.DEFAULT_PAGE_SIZE
        body = await self.api.get(READ, f"{self.read_prefix}/search", params={"search_term": search_term, "page": page, "limit": limit})
        return to_page(body, Project, page=page, limit=limit, items_key=self.items_key)

    async def dropdown(self, page: int = 1, limit: Optional[int] = None) -> List[ProjectOption]:
        """Lightweight {id, title} list for selection controls"""
        limit = limit or settings.DROPDOWN_PAGE_SIZE
        body = await self.api.get(READ, f"{self.read_prefix}/list", params={"page": page, "limit": limit})
        return [ProjectOption.model_validate(row) for row in extract_items(body, self.items_key)]

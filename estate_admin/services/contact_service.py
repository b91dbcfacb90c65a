# ================================
# CONTACT SERVICES (services/contact_service.py)
# ================================

from typing import Any, Dict, Optional, Union
import logging

from estate_admin.config import settings
from estate_admin.schemas.base import Page, SuccessResponse
from estate_admin.schemas.contact import (
    ContactInfo, ContactInfoCreate, ContactInfoUpdate,
    ContactInquiry, InquiryFilter, InquiryStatusUpdate
)
from estate_admin.services.api_client import ResourceClient, READ, WRITE, dump_payload, validate_payload
from estate_admin.mappers.page_mapper import to_page, extract_items

logger = logging.getLogger(__name__)

class ContactInfoService(ResourceClient):
    """Public contact details shown on the site.

    This backend uses verb paths (add/edit/delete) instead of the
    create/{id} convention and returns a bare array from /all.
    """

    resource = "contact_info"
    model = ContactInfo

    async def list(self, filters: Optional[Dict[str, Any]] = None, page: int = 1, limit: Optional[int] = None) -> Page[ContactInfo]:
        limit = limit or settings.DROPDOWN_PAGE_SIZE
        body = await self.api.get(READ, f"{self.read_prefix}/all", params=filters)
        # Inactive rows are soft-deleted leftovers
        rows = [row for row in extract_items(body) if row.get("is_active", True)]
        return to_page(rows, ContactInfo, page=page, limit=limit)

    async def create(self, payload: Union[ContactInfoCreate, Dict[str, Any]], files=None):
        if isinstance(payload, dict):
            payload = validate_payload(ContactInfoCreate, payload)
        body = await self.api.post(WRITE, f"{self.write_prefix}/add", json_body=dump_payload(payload))
        logger.info(f"Added {payload.contact_type} contact '{payload.label}'")
        return self._written_entity(body)

    async def update(self, contact_id: str, partial: Union[ContactInfoUpdate, Dict[str, Any]], files=None):
        safe_id = self._require_id(contact_id)
        if isinstance(partial, dict):
            partial = validate_payload(ContactInfoUpdate, partial)
        body = await self.api.put(WRITE, f"{self.write_prefix}/edit/{safe_id}", json_body=dump_payload(partial))
        logger.info(f"Updated contact {contact_id}")
        return self._written_entity(body)

    async def delete(self, contact_id: str) -> SuccessResponse:
        safe_id = self._require_id(contact_id)
        body = await self.api.delete(WRITE, f"{self.write_prefix}/delete/{safe_id}")
        logger.info(f"Deleted contact {contact_id}")
        return SuccessResponse.model_validate(body if isinstance(body, dict) else {})

class ContactInquiryService(ResourceClient):
    """Inbound inquiries; read-only apart from status changes"""

    resource = "contact_inquiries"
    model = ContactInquiry

    async def list(self, filters: Optional[Union[InquiryFilter, Dict[str, Any]]] = None, page: int = 1, limit: Optional[int] = None) -> Page[ContactInquiry]:
        if isinstance(filters, dict):
            filters = validate_payload(InquiryFilter, filters)
        params = filters.model_dump(mode="json", exclude_none=True) if filters else {}
        limit = limit or settings.DEFAULT_PAGE_SIZE
        body = await self.api.get(READ, f"{self.read_prefix}/", params=params)
        return to_page(body, ContactInquiry, page=page, limit=limit)

    async def update_status(self, inquiry_id: str, status: str) -> Dict[str, Any]:
        """Change status; the server answers with the new follow_up_date"""
        safe_id = self._require_id(inquiry_id)
        update = validate_payload(InquiryStatusUpdate, {"status": status})
        body = await self.api.put(WRITE, f"{self.write_prefix}/update-status/{safe_id}", json_body=update.model_dump())
        logger.info(f"Inquiry {inquiry_id} moved to {status}")
        data = body.get("data") if isinstance(body, dict) else None
        return data if isinstance(data, dict) else {}

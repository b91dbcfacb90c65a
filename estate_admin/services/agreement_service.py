# ================================
# LEGAL AGREEMENT SERVICE (services/agreement_service.py)
# ================================

from typing import List, Optional, Union, Dict, Any
import logging

from estate_admin.core.exceptions import AttachmentRequiredError
from estate_admin.schemas.agreement import LegalAgreement, AgreementCreate, AgreementUpdate
from estate_admin.schemas.document import FileUpload
from estate_admin.services.api_client import ResourceClient, READ, dump_payload, validate_payload
from estate_admin.mappers.page_mapper import to_page

logger = logging.getLogger(__name__)

class LegalAgreementService(ResourceClient):
    """Agreements carry exactly one document file"""

    resource = "agreements"
    model = LegalAgreement
    metadata_key = "agreement"
    items_key = "agreements"
    entity_key = "agreement"

    async def create(self, payload: Union[AgreementCreate, Dict[str, Any]], file: Optional[FileUpload] = None):
        if file is None:
            raise AttachmentRequiredError()
        if isinstance(payload, dict):
            payload = validate_payload(AgreementCreate, payload)
        return await super().create(dump_payload(payload), files={"file": file})

    async def update(self, agreement_id: str, partial: Union[AgreementUpdate, Dict[str, Any]], file: Optional[FileUpload] = None):
        """Without a new file the stored document is kept"""
        if isinstance(partial, dict):
            partial = validate_payload(AgreementUpdate, partial)
        data = dump_payload(partial, partial=True)
        return await super().update(agreement_id, data, files={"file": file} if file else None)

    async def list_by_unit(self, unit_id: str) -> List[LegalAgreement]:
        safe_id = self._require_id(unit_id, "unit_id")
        body = await self.api.get(READ, f"{self.read_prefix}/unit/{safe_id}")
        return to_page(body, LegalAgreement, items_key=self.items_key).items

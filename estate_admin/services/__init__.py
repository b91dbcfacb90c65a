from estate_admin.services.api_client import ApiClient, ResourceClient
from estate_admin.services.admin_service import AdminService
from estate_admin.services.agent_service import AgentService
from estate_admin.services.agreement_service import LegalAgreementService
from estate_admin.services.contact_service import ContactInfoService, ContactInquiryService
from estate_admin.services.project_service import ProjectService
from estate_admin.services.scheme_service import SchemeService
from estate_admin.services.unit_service import PurchasedUnitService

__all__ = [
    "ApiClient",
    "ResourceClient",
    "AdminService",
    "AgentService",
    "LegalAgreementService",
    "ContactInfoService",
    "ContactInquiryService",
    "ProjectService",
    "SchemeService",
    "PurchasedUnitService",
]

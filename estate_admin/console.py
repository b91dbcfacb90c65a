# ================================
# ADMIN CONSOLE (console.py)
# ================================

"""
Entry point for front ends.

Wires settings, the admin session, the API client, every resource service
and a notifier, and hands out per-screen lifecycle managers and forms.
"""

import logging
from typing import Any, Optional

import httpx

from estate_admin.core.security import AuthContext
from estate_admin.forms import (
    AdminForm, AgentForm, AgreementForm, ContactInfoForm, ProjectForm, SchemeForm, UnitForm
)
from estate_admin.services import (
    AdminService, AgentService, ApiClient, ContactInfoService, ContactInquiryService,
    LegalAgreementService, ProjectService, PurchasedUnitService, SchemeService
)
from estate_admin.utils import setup_logging
from estate_admin.workflow.lifecycle import Confirm, EntityLifecycleManager
from estate_admin.workflow.notifications import LoggingNotifier, Notifier
from estate_admin.workflow.selection import CascadingSelection

logger = logging.getLogger(__name__)

class AdminConsole:
    def __init__(
        self,
        auth: Optional[AuthContext] = None,
        notifier: Optional[Notifier] = None,
        confirm: Optional[Confirm] = None,
        write_url: Optional[str] = None,
        read_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.auth = auth if auth is not None else AuthContext.from_settings()
        self.notifier = notifier or LoggingNotifier()
        self.confirm = confirm
        self.api = ApiClient(self.auth, write_url=write_url, read_url=read_url, transport=transport)

        self.admins = AdminService(self.api)
        self.projects = ProjectService(self.api)
        self.schemes = SchemeService(self.api)
        self.units = PurchasedUnitService(self.api, projects=self.projects, schemes=self.schemes)
        self.agreements = LegalAgreementService(self.api)
        self.agents = AgentService(self.api)
        self.contact_info = ContactInfoService(self.api)
        self.inquiries = ContactInquiryService(self.api)

    @classmethod
    def from_settings(cls, **kwargs) -> "AdminConsole":
        setup_logging()
        return cls(**kwargs)

    # Session

    async def login(self, email: str, password: str):
        result = await self.admins.login(email, password)
        self.notifier.success("Login successful", f"Welcome back, {result.name}")
        return result

    def logout(self) -> None:
        self.admins.logout()

    @property
    def is_authenticated(self) -> bool:
        return self.auth.is_authenticated

    # Screens

    def manager(self, service: Any, **filters) -> EntityLifecycleManager:
        """Fresh lifecycle manager; listings are never shared between screens"""
        return EntityLifecycleManager(service, confirm=self.confirm, notifier=self.notifier, filters=filters or None)

    def unit_selection(self) -> CascadingSelection:
        return CascadingSelection.for_units(self.units)

    def project_form(self, project=None, target=None) -> ProjectForm:
        target = target or self.manager(self.projects)
        return ProjectForm.from_entity(project, target) if project else ProjectForm(target=target)

    def scheme_form(self, project_id: Optional[str] = None, scheme=None, target=None) -> SchemeForm:
        target = target or self.manager(self.schemes)
        if scheme:
            return SchemeForm.from_entity(scheme, target)
        return SchemeForm({"project_id": project_id}, target=target)

    def unit_form(self, unit=None, target=None) -> UnitForm:
        target = target or self.manager(self.units)
        if unit:
            return UnitForm.from_entity(unit, target)
        return UnitForm(target=target, selection=self.unit_selection())

    def agreement_form(self, unit_id: Optional[str] = None, agreement=None, target=None) -> AgreementForm:
        target = target or self.manager(self.agreements)
        if agreement:
            return AgreementForm.from_entity(agreement, target)
        return AgreementForm.for_unit(unit_id, target)

    def contact_info_form(self, contact=None, target=None) -> ContactInfoForm:
        target = target or self.manager(self.contact_info)
        return ContactInfoForm.from_entity(contact, target) if contact else ContactInfoForm(target=target)

    def admin_form(self, admin=None, target=None) -> AdminForm:
        target = target or self.manager(self.admins)
        return AdminForm.from_entity(admin, target) if admin else AdminForm(target=target)

    def agent_form(self, agent=None, target=None) -> AgentForm:
        target = target or self.manager(self.agents)
        return AgentForm.from_entity(agent, target) if agent else AgentForm(target=target)

# ================================
# ENTITY LIFECYCLE (workflow/lifecycle.py)
# ================================

import inspect
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Union

from estate_admin.core.exceptions import (
    AppException, ActionInProgressError, AttachmentRequiredError, ConfirmationDeclinedError
)
from estate_admin.mappers.document_mapper import map_gallery_to_attachments
from estate_admin.schemas.base import Page
from estate_admin.schemas.document import Attachment, AttachmentList, FileUpload
from estate_admin.services.api_client import ResourceClient
from estate_admin.utils.error_messages import describe_error
from estate_admin.utils.files import download_filename, save_download
from estate_admin.workflow.notifications import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)

class DeletePolicy(str, Enum):
    SOFT = "soft"  # update is_active=false
    HARD = "hard"  # DELETE

@dataclass
class ResourcePolicy:
    label: str
    delete: DeletePolicy = DeletePolicy.HARD
    attachment_required: bool = False
    accepts_files: bool = False
    download_fallback: str = "download"

RESOURCE_POLICIES: Dict[str, ResourcePolicy] = {
    "projects": ResourcePolicy("Project", DeletePolicy.SOFT, accepts_files=True),
    "schemes": ResourcePolicy("Scheme", DeletePolicy.SOFT),
    "units": ResourcePolicy("Unit"),
    "agreements": ResourcePolicy("Agreement", attachment_required=True, accepts_files=True, download_fallback="agreement.pdf"),
    "agents": ResourcePolicy("Agent"),
    "admins": ResourcePolicy("Admin"),
    "contact_info": ResourcePolicy("Contact"),
    "contact_inquiries": ResourcePolicy("Inquiry"),
}

def policy_for(resource: str) -> ResourcePolicy:
    return RESOURCE_POLICIES.get(resource) or ResourcePolicy(resource.replace("_", " ").title())

def _entity_id(entity: Any) -> Optional[str]:
    if isinstance(entity, dict):
        return entity.get("id")
    return getattr(entity, "id", None)

# ================================
# LOCAL LISTING STATE
# ================================

@dataclass
class PendingChange:
    action: str
    entity_id: Optional[str] = None
    data: Any = None

@dataclass
class ListingState:
    """Committed rows from the last fetch plus mutations awaiting the server.

    Pending changes never alter the committed rows; they are either
    committed (and the list re-fetched) or dropped.
    """

    items: List[Any] = field(default_factory=list)
    page: int = 1
    limit: int = 10
    total: int = 0
    total_pages: int = 1
    pending: Dict[str, PendingChange] = field(default_factory=dict)
    load_error: Optional[Exception] = None

    def replace(self, page: Page) -> None:
        self.items = list(page.items)
        self.page = page.page
        self.limit = page.limit
        self.total = page.total
        self.total_pages = page.total_pages
        self.load_error = None

    def get(self, entity_id: str) -> Optional[Any]:
        for item in self.items:
            if _entity_id(item) == entity_id:
                return item
        return None

    def stage(self, key: str, change: PendingChange) -> None:
        self.pending[key] = change

    def commit(self, key: str, entity: Any = None) -> None:
        change = self.pending.pop(key, None)
        if change is None:
            return
        if change.action == "delete":
            self.items = [i for i in self.items if _entity_id(i) != change.entity_id]
            self.total = max(self.total - 1, 0)
        elif change.action == "deactivate":
            self.items = [_deactivated(i) if _entity_id(i) == change.entity_id else i for i in self.items]
        elif entity is not None:
            if change.action == "update":
                self.items = [entity if _entity_id(i) == change.entity_id else i for i in self.items]
            # created rows appear with the next fetch

    def rollback(self, key: str) -> None:
        change = self.pending.pop(key, None)
        if change is not None:
            logger.debug(f"Rolled back pending {change.action} {change.entity_id or ''}".rstrip())

    def is_pending(self, entity_id: str) -> bool:
        return any(c.entity_id == entity_id for c in self.pending.values())

    @property
    def visible_items(self) -> List[Any]:
        return list(self.items)

def _deactivated(item: Any) -> Any:
    if isinstance(item, dict):
        return {**item, "is_active": False}
    if hasattr(item, "model_copy"):
        return item.model_copy(update={"is_active": False})
    return item

# ================================
# LIFECYCLE MANAGER
# ================================

Confirm = Callable[[str], Union[bool, Awaitable[bool]]]

class EntityLifecycleManager:
    """Create/update/delete/download for one listing screen"""

    def __init__(
        self,
        service: ResourceClient,
        policy: Optional[ResourcePolicy] = None,
        confirm: Optional[Confirm] = None,
        notifier: Optional[Notifier] = None,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None
    ):
        self.service = service
        self.policy = policy or policy_for(service.resource)
        self.confirm = confirm
        self.notifier = notifier or LoggingNotifier()
        self.filters: Dict[str, Any] = dict(filters or {})
        self.limit = limit
        self.listing = ListingState()
        self._in_flight: Set[str] = set()

    def is_busy(self, key: Optional[str] = None) -> bool:
        if key is None:
            return bool(self._in_flight)
        return key in self._in_flight

    @asynccontextmanager
    async def _guard(self, key: str):
        if key in self._in_flight:
            raise ActionInProgressError(key)
        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)

    def _notify_failure(self, error: Exception, fallback: str) -> None:
        notice = describe_error(error, fallback)
        self.notifier.error(notice.title, notice.description)

    async def _confirmed(self, message: str) -> bool:
        if self.confirm is None:
            return True
        answer = self.confirm(message)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    # Listing

    async def refresh(self, page: Optional[int] = None) -> List[Any]:
        """Load the listing; errors are notified and re-raised"""
        try:
            result = await self.service.list(self.filters, page or self.listing.page, self.limit)
        except Exception as e:
            self.listing.load_error = e
            self._notify_failure(e, f"Failed to load {self.policy.label.lower()} list")
            raise
        self.listing.replace(result)
        return self.listing.visible_items

    async def _refetch(self) -> None:
        """Post-mutation re-fetch; the write already succeeded, so failures only log"""
        try:
            result = await self.service.list(self.filters, self.listing.page, self.limit)
        except AppException as e:
            logger.warning(f"Re-fetch of {self.service.resource} after mutation failed: {e.detail}")
            self.listing.load_error = e
            return
        self.listing.replace(result)

    # Mutations

    def _check_file(self, file: Optional[FileUpload], creating: bool) -> None:
        if file is not None and not self.policy.accepts_files:
            raise AppException(f"{self.policy.label} does not take attachments", 400, "ATTACHMENT_NOT_SUPPORTED")
        if creating and self.policy.attachment_required and file is None:
            raise AttachmentRequiredError()

    async def create(self, payload: Any, file: Optional[FileUpload] = None):
        try:
            self._check_file(file, creating=True)
        except AppException as e:
            self._notify_failure(e, f"Failed to create {self.policy.label.lower()}")
            raise

        key = "create"
        async with self._guard(key):
            self.listing.stage(key, PendingChange("create", data=payload))
            try:
                if file is not None:
                    entity = await self.service.create(payload, file)
                else:
                    entity = await self.service.create(payload)
            except Exception as e:
                self.listing.rollback(key)
                self._notify_failure(e, f"Failed to create {self.policy.label.lower()}")
                raise
            self.listing.commit(key, entity)
            self.notifier.success(f"{self.policy.label} created", f"{self.policy.label} has been created successfully.")

        await self._refetch()
        return entity

    async def update(self, entity_id: str, partial: Any, file: Optional[FileUpload] = None):
        """Without a file the current attachment is kept"""
        try:
            self._check_file(file, creating=False)
        except AppException as e:
            self._notify_failure(e, f"Failed to update {self.policy.label.lower()}")
            raise

        key = f"update:{entity_id}"
        async with self._guard(key):
            self.listing.stage(key, PendingChange("update", entity_id, partial))
            try:
                if file is not None:
                    entity = await self.service.update(entity_id, partial, file)
                else:
                    entity = await self.service.update(entity_id, partial)
            except Exception as e:
                self.listing.rollback(key)
                self._notify_failure(e, f"Failed to update {self.policy.label.lower()}")
                raise
            self.listing.commit(key, entity)
            self.notifier.success(f"{self.policy.label} updated", f"{self.policy.label} has been updated successfully.")

        await self._refetch()
        return entity

    async def delete(self, entity_id: str) -> bool:
        """Delete after confirmation; soft-deleted rows that are already inactive are left alone"""
        key = f"delete:{entity_id}"
        if self.is_busy(key):
            raise ActionInProgressError(key)

        label = self.policy.label.lower()
        if not await self._confirmed(f"Are you sure you want to delete this {label}? This action cannot be undone."):
            logger.info(f"Delete of {self.service.resource} {entity_id} cancelled")
            raise ConfirmationDeclinedError()

        soft = self.policy.delete == DeletePolicy.SOFT
        current = self.listing.get(entity_id)
        if soft and current is not None and getattr(current, "is_active", True) is False:
            logger.info(f"{self.policy.label} {entity_id} is already inactive")
            return True

        async with self._guard(key):
            self.listing.stage(key, PendingChange("deactivate" if soft else "delete", entity_id))
            try:
                if soft:
                    await self.service.update(entity_id, {"is_active": False})
                else:
                    await self.service.delete(entity_id)
            except Exception as e:
                self.listing.rollback(key)
                self._notify_failure(e, f"Failed to delete {label}. Please try again.")
                raise
            self.listing.commit(key)
            self.notifier.success(f"{self.policy.label} deleted", f"{self.policy.label} has been deleted successfully.")

        await self._refetch()
        return True

    # Attachments

    def attachments_of(self, entity: Any) -> AttachmentList:
        """Canonical attachment list for any entity this console handles"""
        if isinstance(getattr(entity, "attachments", None), AttachmentList):
            return entity.attachments
        if getattr(entity, "gallery_images", None):
            return map_gallery_to_attachments(entity.gallery_images)
        file_path = getattr(entity, "file_path", None)
        if file_path:
            name = getattr(entity, "document_name", None) or download_filename(file_path)
            return AttachmentList([Attachment(display_name=name, url=self.service.download_url(file_path), kind="document")])
        return AttachmentList([])

    async def download(self, file_path: str, destination: Optional[str] = None, filename: Optional[str] = None):
        """Fetch a stored file through the read service; the listing is never touched"""
        key = f"download:{file_path}"
        async with self._guard(key):
            try:
                content = await self.service.download(file_path)
            except Exception as e:
                self._notify_failure(e, "Failed to download file")
                raise

        if destination is None:
            return content
        name = download_filename(file_path, filename, self.policy.download_fallback)
        return save_download(content, destination, name)

# ================================
# ENTITY LIFECYCLE TESTS (test_lifecycle.py)
# ================================

import asyncio

import httpx
import pytest

from conftest import agreement_row, json_body, project_row, scheme_row
from estate_admin.core.exceptions import (
    ActionInProgressError, ApiError, AttachmentRequiredError, ConfirmationDeclinedError, FormValidationError
)
from estate_admin.schemas.document import FileUpload
from estate_admin.workflow.lifecycle import EntityLifecycleManager, ListingState, PendingChange

PDF = FileUpload(filename="deed.pdf", content=b"%PDF-1.4", content_type="application/pdf")


def agreement_payload(**overrides):
    payload = {
        "unit_id": "u1",
        "agreement_type": "sale_deed",
        "document_name": "Sale Deed",
        "signatories": ["Buyer One", "Seller Two"],
        "agreement_date": "2025-03-01",
    }
    payload.update(overrides)
    return payload


class TestCreateAndUpdate:

    def test_agreement_requires_file(self, console, backend, notifier):
        manager = console.manager(console.agreements)

        with pytest.raises(AttachmentRequiredError):
            asyncio.run(manager.create(agreement_payload()))

        assert backend.requests == []
        assert notifier.errors[0].title == "Validation Error"

    def test_create_refetches_listing(self, console, backend, notifier):
        backend.on("POST", "write", "/legal-agreements/create", json={"message": "Created"})
        backend.on("GET", "read", "/legal-agreements/all", json={"agreements": [agreement_row()], "total": 1})
        manager = console.manager(console.agreements)

        asyncio.run(manager.create(agreement_payload(), PDF))

        assert [r.method for r in backend.requests] == ["POST", "GET"]
        assert [a.id for a in manager.listing.visible_items] == ["a1"]
        assert manager.listing.pending == {}
        assert notifier.notices[-1].level == "success"

    def test_update_without_file_keeps_attachment(self, console, backend):
        backend.on("PUT", "write", "/legal-agreements/a1", json={"message": "Updated"})
        backend.on("GET", "read", "/legal-agreements/all", json={"agreements": [agreement_row(status="executed")]})
        manager = console.manager(console.agreements)

        asyncio.run(manager.update("a1", {"status": "executed"}))

        request = backend.requests[0]
        assert request.headers["content-type"] == "application/json"
        assert json_body(request) == {"status": "executed"}
        assert manager.listing.visible_items[0].file_path == "uploads/agreements/sale-deed.pdf"

    def test_update_with_file_is_multipart(self, console, backend):
        backend.on("PUT", "write", "/legal-agreements/a1", json={"message": "Updated"})
        backend.on("GET", "read", "/legal-agreements/all", json={"agreements": []})
        manager = console.manager(console.agreements)

        asyncio.run(manager.update("a1", {"document_name": "Signed Deed"}, PDF))

        assert backend.requests[0].headers["content-type"].startswith("multipart/form-data")

    def test_rejected_create_rolls_back(self, console, backend, notifier):
        backend.on("GET", "read", "/legal-agreements/all", json={"agreements": [agreement_row()]})
        backend.on("POST", "write", "/legal-agreements/create", status=400, json={"message": "Unit not found"})
        manager = console.manager(console.agreements)
        asyncio.run(manager.refresh())

        with pytest.raises(ApiError):
            asyncio.run(manager.create(agreement_payload(unit_id="missing"), PDF))

        assert [a.id for a in manager.listing.visible_items] == ["a1"]
        assert manager.listing.pending == {}
        assert notifier.errors[-1].title == "Invalid Request"
        assert notifier.errors[-1].description == "Unit not found"

    def test_refetch_failure_does_not_fail_mutation(self, console, backend, notifier):
        backend.on("POST", "write", "/legal-agreements/create", json={"message": "Created"})
        backend.on("GET", "read", "/legal-agreements/all", status=500, json={"detail": "Read replica down"})
        manager = console.manager(console.agreements)

        asyncio.run(manager.create(agreement_payload(), PDF))

        assert isinstance(manager.listing.load_error, ApiError)
        assert notifier.errors == []


    def test_invalid_payload_rolls_back_and_notifies(self, console, backend, notifier):
        manager = console.manager(console.schemes)

        with pytest.raises(FormValidationError):
            asyncio.run(manager.create({"scheme_type": "installment", "balance_payment_days": 10, "total_installments": 12}))

        assert manager.listing.pending == {}
        assert len(notifier.errors) == 1
        assert notifier.errors[0].title == "Validation Error"
        assert backend.requests == []

    def test_unexpected_error_rolls_back(self, notifier):
        class BrokenService:
            resource = "units"

            async def update(self, entity_id, partial):
                raise RuntimeError("serializer crashed")

        manager = EntityLifecycleManager(BrokenService(), notifier=notifier)

        with pytest.raises(RuntimeError):
            asyncio.run(manager.update("u1", {"floor_number": 3}))

        assert manager.listing.pending == {}
        assert not manager.is_busy()
        assert notifier.errors[-1].title == "Unexpected Error"

class TestDelete:

    def test_soft_delete_sends_inactive_flag(self, console, backend):
        backend.on("GET", "read", "/projects/all", json={"projects": [project_row("p1")]})
        backend.on("PUT", "write", "/projects/p1", json={"message": "Updated"})
        manager = console.manager(console.projects)
        asyncio.run(manager.refresh())

        asyncio.run(manager.delete("p1"))

        put = backend.calls("PUT", "write")[0]
        assert json_body(put) == {"is_active": False}
        assert backend.calls("DELETE") == []

    def test_soft_delete_is_idempotent(self, console, backend):
        backend.on("GET", "read", "/investment-schemes/all", json={"schemes": [scheme_row("s1", is_active=False)]})
        manager = console.manager(console.schemes)
        asyncio.run(manager.refresh())

        assert asyncio.run(manager.delete("s1")) is True
        assert asyncio.run(manager.delete("s1")) is True

        assert backend.calls(service="write") == []
        assert manager.listing.get("s1").is_active is False

    def test_hard_delete_uses_delete_verb(self, console, backend):
        backend.on("GET", "read", "/legal-agreements/all", json={"agreements": [agreement_row()]})
        backend.on("DELETE", "write", "/legal-agreements/a1", json={"message": "Deleted"})
        manager = console.manager(console.agreements)
        asyncio.run(manager.refresh())

        asyncio.run(manager.delete("a1"))

        assert len(backend.calls("DELETE", "write")) == 1

    def test_declined_confirmation_sends_nothing(self, console, backend):
        manager = console.manager(console.agreements)
        manager.confirm = lambda message: False

        with pytest.raises(ConfirmationDeclinedError):
            asyncio.run(manager.delete("a1"))

        assert backend.requests == []

    def test_async_confirmation(self, console, backend):
        backend.on("DELETE", "write", "/legal-agreements/a1", json={"message": "Deleted"})
        backend.on("GET", "read", "/legal-agreements/all", json={"agreements": []})
        prompts = []

        async def confirm(message):
            prompts.append(message)
            return True

        manager = console.manager(console.agreements)
        manager.confirm = confirm
        asyncio.run(manager.delete("a1"))

        assert "delete this agreement" in prompts[0]

    def test_failed_delete_keeps_row(self, console, backend, notifier):
        backend.on("GET", "read", "/legal-agreements/all", json={"agreements": [agreement_row()]})
        backend.on("DELETE", "write", "/legal-agreements/a1", status=403, json={"detail": "Not allowed"})
        manager = console.manager(console.agreements)
        asyncio.run(manager.refresh())

        with pytest.raises(ApiError):
            asyncio.run(manager.delete("a1"))

        assert manager.listing.get("a1") is not None
        assert notifier.errors[-1].title == "Permission Denied"


class TestInFlightGuard:

    def test_double_submit_rejected(self, console, backend):
        async def scenario():
            release = asyncio.Event()

            async def slow_create(request):
                await release.wait()
                return httpx.Response(200, json={"message": "Created"})

            backend.on("POST", "write", "/legal-agreements/create", handler=slow_create)
            backend.on("GET", "read", "/legal-agreements/all", json={"agreements": []})
            manager = console.manager(console.agreements)

            first = asyncio.create_task(manager.create(agreement_payload(), PDF))
            await asyncio.sleep(0.01)
            assert manager.is_busy("create")
            with pytest.raises(ActionInProgressError):
                await manager.create(agreement_payload(), PDF)
            release.set()
            await first
            return manager

        manager = asyncio.run(scenario())

        assert not manager.is_busy()
        assert len(backend.calls("POST")) == 1


class TestAttachments:

    def test_agreement_round_trip(self, console, backend):
        """Created with a file and two signatories, fetched by unit, downloadable."""
        backend.on("POST", "write", "/legal-agreements/create", json={"message": "Created", "data": agreement_row()})
        backend.on("GET", "read", "/legal-agreements/all", json={"agreements": [agreement_row()]})
        backend.on("GET", "read", "/legal-agreements/unit/u1", json={"success": True, "data": [agreement_row()]})
        backend.on("GET", "read", "/legal-agreements/download/uploads/agreements/sale-deed.pdf", content=b"%PDF-1.4")
        manager = console.manager(console.agreements)

        asyncio.run(manager.create(agreement_payload(), PDF))
        agreements = asyncio.run(console.agreements.list_by_unit("u1"))
        attachments = manager.attachments_of(agreements[0])
        content = asyncio.run(manager.download(agreements[0].file_path))

        assert len(agreements[0].signatories) >= 2
        assert attachments[0].url.startswith("http://read.test/api/legal-agreements/download/")
        assert content == b"%PDF-1.4"

    def test_download_saved_under_document_name(self, console, backend, tmp_path):
        backend.on("GET", "read", "/legal-agreements/download/uploads/agreements/sale-deed.pdf", content=b"%PDF-1.4")
        manager = console.manager(console.agreements)

        saved = asyncio.run(manager.download("uploads/agreements/sale-deed.pdf", str(tmp_path), "Sale Deed"))

        assert saved.endswith("Sale Deed.pdf")
        assert (tmp_path / "Sale Deed.pdf").read_bytes() == b"%PDF-1.4"

    def test_failed_download_leaves_listing(self, console, backend, notifier):
        backend.on("GET", "read", "/legal-agreements/all", json={"agreements": [agreement_row()]})
        manager = console.manager(console.agreements)
        asyncio.run(manager.refresh())

        with pytest.raises(ApiError):
            asyncio.run(manager.download("uploads/missing.pdf"))

        assert [a.id for a in manager.listing.visible_items] == ["a1"]
        assert notifier.errors[-1].title == "Not Found"

    def test_agent_documents_normalized(self, console, backend):
        backend.on("GET", "read", "/agents/all", json={"agents": [
            {"id": "ag1", "name": "Ravi", "pan_card": "docs/pan.jpg"},
            {"id": "ag2", "name": "Meera"},
        ]})
        manager = console.manager(console.agents)

        agents = asyncio.run(manager.refresh())

        assert [a.display_name for a in manager.attachments_of(agents[0])] == ["PAN Card"]
        assert len(manager.attachments_of(agents[1])) == 0


class TestListingState:

    def test_pending_changes_never_visible(self):
        state = ListingState(items=[{"id": "x", "is_active": True}])
        state.stage("delete:x", PendingChange("delete", "x"))

        assert state.visible_items == [{"id": "x", "is_active": True}]
        assert state.is_pending("x")

        state.rollback("delete:x")
        assert not state.is_pending("x")
        assert state.visible_items == [{"id": "x", "is_active": True}]

    def test_commit_deactivation(self):
        state = ListingState(items=[{"id": "x", "is_active": True}])
        state.stage("delete:x", PendingChange("deactivate", "x"))
        state.commit("delete:x")

        assert state.get("x")["is_active"] is False

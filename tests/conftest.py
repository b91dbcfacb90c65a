# ================================
# TEST FIXTURES (tests/conftest.py)
# ================================

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from estate_admin.console import AdminConsole
from estate_admin.core.security import AuthContext, MemorySessionStore
from estate_admin.services.api_client import ApiClient
from estate_admin.workflow.notifications import RecordingNotifier

WRITE_URL = "http://write.test/api"
READ_URL = "http://read.test/api"
TOKEN = "test-token"

class FakeBackend:
    """Routes requests for both services to canned responses.

    Routes are keyed by (method, service, path below /api). Unknown routes
    answer 404 with a detail body.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str, str], Tuple[Optional[Callable], int, Any, Optional[bytes]]] = {}
        self.requests: List[httpx.Request] = []

    def on(
        self,
        method: str,
        service: str,
        path: str,
        json: Any = None,
        status: int = 200,
        content: Optional[bytes] = None,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None
    ) -> None:
        self.routes[(method.upper(), service, path)] = (handler, status, json, content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        service = "write" if request.url.host == "write.test" else "read"
        path = request.url.path[len("/api"):]

        route = self.routes.get((request.method, service, path))
        if route is None:
            return httpx.Response(404, json={"detail": f"No route for {request.method} {path}"})

        handler, status, body, content = route
        if handler is not None:
            return handler(request)
        if content is not None:
            return httpx.Response(status, content=content)
        return httpx.Response(status, json=body if body is not None else {})

    def calls(self, method: Optional[str] = None, service: Optional[str] = None) -> List[httpx.Request]:
        found = []
        for request in self.requests:
            if method and request.method != method.upper():
                continue
            if service and (request.url.host == "write.test") != (service == "write"):
                continue
            found.append(request)
        return found

def json_body(request: httpx.Request) -> Dict[str, Any]:
    return json.loads(request.content)

@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()

@pytest.fixture
def auth() -> AuthContext:
    context = AuthContext(MemorySessionStore())
    context.login(TOKEN, {"id": "admin-1", "name": "Test Admin", "email": "admin@example.com"})
    return context

@pytest.fixture
def anonymous() -> AuthContext:
    return AuthContext(MemorySessionStore())

@pytest.fixture
def api(backend, auth) -> ApiClient:
    return ApiClient(auth, write_url=WRITE_URL, read_url=READ_URL, transport=httpx.MockTransport(backend))

@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()

@pytest.fixture
def console(backend, auth, notifier) -> AdminConsole:
    return AdminConsole(
        auth=auth,
        notifier=notifier,
        confirm=lambda message: True,
        write_url=WRITE_URL,
        read_url=READ_URL,
        transport=httpx.MockTransport(backend)
    )

# ================================
# SAMPLE RECORDS
# ================================

def project_row(project_id: str = "p1", **overrides) -> Dict[str, Any]:
    row = {
        "id": project_id,
        "title": f"Project {project_id}",
        "location": "Pune",
        "status": "available",
        "property_type": "commercial",
        "base_price": 2500000,
        "total_units": 10,
        "available_units": 6,
        "sold_units": 4,
        "reserved_units": 0,
        "is_active": True,
        "gallery_images": [],
    }
    row.update(overrides)
    return row

def scheme_row(scheme_id: str = "s1", project_id: str = "p1", **overrides) -> Dict[str, Any]:
    row = {
        "id": scheme_id,
        "project_id": project_id,
        "scheme_type": "single_payment",
        "scheme_name": f"Scheme {scheme_id}",
        "area_sqft": 1200,
        "booking_advance": 100000,
        "balance_payment_days": 30,
        "total_installments": None,
        "monthly_installment_amount": None,
        "rental_start_month": 3,
        "start_date": "2025-01-01",
        "end_date": "2025-12-31",
        "is_active": True,
    }
    row.update(overrides)
    return row

def agreement_row(agreement_id: str = "a1", unit_id: str = "u1", **overrides) -> Dict[str, Any]:
    row = {
        "id": agreement_id,
        "unit_id": unit_id,
        "agreement_type": "sale_deed",
        "document_name": "Sale Deed",
        "signatories": ["Buyer One", "Seller Two"],
        "agreement_date": "2025-03-01T00:00:00",
        "valid_until": "2030-03-01T00:00:00",
        "status": "signed",
        "file_path": "uploads/agreements/sale-deed.pdf",
    }
    row.update(overrides)
    return row

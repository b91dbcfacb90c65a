# ================================
# ADMIN SERVICE (services/admin_service.py)
# ================================

import logging

from estate_admin.core.exceptions import AuthenticationError
from estate_admin.schemas.admin import Admin, LoginRequest, LoginResult
from estate_admin.services.api_client import ResourceClient, READ, WRITE, validate_payload
from estate_admin.mappers.page_mapper import to_entity
from estate_admin.utils.error_messages import extract_detail

logger = logging.getLogger(__name__)

class AdminService(ResourceClient):
    """Admin accounts and the admin session"""

    resource = "admins"
    model = Admin
    items_key = "admins"

    async def login(self, email: str, password: str) -> LoginResult:
        """Authenticate and store the session in the client's AuthContext"""
        credentials = validate_payload(LoginRequest, {"email": email, "password": password})
        body = await self.api.post(
            WRITE,
            f"{self.write_prefix}/login",
            json_body=credentials.model_dump(),
            auth_required=False
        )

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict) or not data.get("access_token") or body.get("success") is False:
            detail = extract_detail(body, "Login failed")
            logger.warning(f"Login rejected for {email}: {detail}")
            raise AuthenticationError(detail, "LOGIN_FAILED")

        result = LoginResult.model_validate(data)
        self.api.auth.login(result.access_token, {"id": result.id, "name": result.name, "email": result.email})
        return result

    def logout(self) -> None:
        self.api.auth.logout()

    async def me(self) -> Admin:
        """Profile of the logged-in admin"""
        body = await self.api.get(READ, f"{self.read_prefix}/profile/me", auth_required=True)
        return to_entity(body, Admin)

# ================================
# API CLIENT (services/api_client.py)
# ================================

import json
import logging
from typing import Any, Dict, List, Optional, Type, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from estate_admin.config import settings, RESOURCE_PATHS
from estate_admin.core.exceptions import (
    ApiError, FormValidationError, UnparseableResponseError, UnreachableError
)
from estate_admin.core.security import AuthContext
from estate_admin.mappers.page_mapper import to_entity, to_page
from estate_admin.schemas.base import Page, SuccessResponse
from estate_admin.schemas.document import FileUpload
from estate_admin.utils.error_messages import extract_detail, pydantic_field_errors

logger = logging.getLogger(__name__)

WRITE = "write"
READ = "read"

# field name -> one upload or several
Files = Dict[str, Union[FileUpload, List[FileUpload]]]


def validate_payload(schema: Type[BaseModel], payload: Any) -> BaseModel:
    """Schema instance from a dict; schema errors are raised as field errors"""
    if isinstance(payload, BaseModel):
        return payload
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise FormValidationError(pydantic_field_errors(e)) from e


def dump_payload(payload: Any, partial: bool = False) -> Dict[str, Any]:
    """JSON-ready dict from a schema instance or a plain dict"""
    if isinstance(payload, BaseModel):
        if partial:
            return payload.model_dump(mode="json", exclude_unset=True)
        return payload.model_dump(mode="json", exclude_none=True)
    return dict(payload or {})


def encode_multipart(metadata_key: str, payload: Dict[str, Any], files: Files):
    """Multipart body: JSON metadata part plus binary parts"""
    data = {metadata_key: json.dumps(payload, default=str)}
    parts = []
    for field, uploads in files.items():
        if uploads is None:
            continue
        if not isinstance(uploads, list):
            uploads = [uploads]
        for upload in uploads:
            parts.append((field, (upload.filename, upload.content, upload.content_type)))
    return data, parts


class ApiClient:
    """HTTP access to the write and read services.

    The session comes from the injected AuthContext; nothing here reads
    session storage on its own.
    """

    def __init__(
        self,
        auth: Optional[AuthContext] = None,
        write_url: Optional[str] = None,
        read_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.auth = auth if auth is not None else AuthContext.from_settings()
        self.write_url = (write_url or settings.WRITE_API_URL).rstrip("/")
        self.read_url = (read_url or settings.READ_API_URL).rstrip("/")
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.transport = transport

    def _url(self, service: str, path: str) -> str:
        base = self.write_url if service == WRITE else self.read_url
        return f"{base}/{path.lstrip('/')}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    def _headers(self, service: str, auth_required: Optional[bool]) -> Dict[str, str]:
        if auth_required is None:
            auth_required = service == WRITE
        headers = {"Accept": "application/json"}
        headers.update(self.auth.auth_headers(required=auth_required))
        return headers

    async def request(
        self,
        method: str,
        service: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Any] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[List] = None,
        auth_required: Optional[bool] = None
    ) -> Any:
        """Send one request and return the parsed JSON body"""
        headers = self._headers(service, auth_required)
        url = self._url(service, path)
        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}

        async with self._client() as client:
            try:
                response = await client.request(
                    method,
                    url,
                    params=params or None,
                    json=json_body,
                    data=data,
                    files=files,
                    headers=headers
                )
            except httpx.RequestError as e:
                logger.error(f"Request error to {method} {url}: {str(e)}")
                raise UnreachableError() from e

        return self._handle_response(response, method, url)

    def _handle_response(self, response: httpx.Response, method: str, url: str) -> Any:
        status = response.status_code

        if not response.content:
            if response.is_success:
                return {}
            logger.error(f"API error: {method} {url} -> {status} with empty body")
            raise UnparseableResponseError(status)

        try:
            body = response.json()
        except ValueError:
            logger.error(f"API error: {method} {url} -> {status}, unparseable body: {response.text[:200]}")
            raise UnparseableResponseError(status)

        if not response.is_success:
            detail = extract_detail(body)
            logger.error(f"API error: {method} {url} -> {status} - {detail}")
            raise ApiError(status, detail, body if isinstance(body, dict) else None)

        return body

    async def download(self, path: str) -> bytes:
        """Fetch raw bytes from the read service"""
        headers = self._headers(READ, False)
        headers["Accept"] = "*/*"
        url = self._url(READ, path)

        async with self._client() as client:
            try:
                response = await client.get(url, headers=headers)
            except httpx.RequestError as e:
                logger.error(f"Download error for {url}: {str(e)}")
                raise UnreachableError() from e

        if not response.is_success:
            # Error bodies are JSON even though the success body is a blob
            self._handle_response(response, "GET", url)
        return response.content

    # Convenience wrappers

    async def get(self, service: str, path: str, params: Optional[Dict[str, Any]] = None, auth_required: Optional[bool] = None) -> Any:
        return await self.request("GET", service, path, params=params, auth_required=auth_required)

    async def post(self, service: str, path: str, json_body: Any = None, auth_required: Optional[bool] = None) -> Any:
        return await self.request("POST", service, path, json_body=json_body, auth_required=auth_required)

    async def put(self, service: str, path: str, json_body: Any = None, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("PUT", service, path, json_body=json_body, data=data)

    async def delete(self, service: str, path: str) -> Any:
        return await self.request("DELETE", service, path)


class ResourceClient:
    """Generic CRUD contract for one resource over the write/read split"""

    resource: str = ""
    model: Type[BaseModel] = BaseModel
    metadata_key: str = "request"
    items_key: Optional[str] = None
    entity_key: Optional[str] = None

    def __init__(self, api: ApiClient):
        self.api = api
        self.write_prefix, self.read_prefix = RESOURCE_PATHS[self.resource]

    @staticmethod
    def _require_id(entity_id: Any, field: str = "id") -> str:
        if entity_id is None or not str(entity_id).strip():
            raise FormValidationError({field: f"{field} is required"})
        return quote(str(entity_id).strip(), safe="")

    def _written_entity(self, body: Any):
        """Entity echoed by the write service, if any"""
        candidate = body
        if isinstance(body, dict):
            candidate = body.get(self.entity_key) if self.entity_key and isinstance(body.get(self.entity_key), dict) else body.get("data", body)
        if isinstance(candidate, dict) and candidate.get("id"):
            return to_entity(candidate, self.model)
        return None

    async def _send_write(self, method: str, path: str, payload: Dict[str, Any], files: Optional[Files]) -> Any:
        if files and any(files.values()):
            data, parts = encode_multipart(self.metadata_key, payload, files)
            return await self.api.request(method, WRITE, path, data=data, files=parts)
        return await self.api.request(method, WRITE, path, json_body=payload)

    async def list(self, filters: Optional[Dict[str, Any]] = None, page: int = 1, limit: Optional[int] = None) -> Page:
        limit = limit or settings.DEFAULT_PAGE_SIZE
        params = {"page": page, "limit": limit}
        params.update(filters or {})
        body = await self.api.get(READ, f"{self.read_prefix}/all", params=params)
        return to_page(body, self.model, page=page, limit=limit, items_key=self.items_key)

    async def get_by_id(self, entity_id: str):
        safe_id = self._require_id(entity_id)
        body = await self.api.get(READ, f"{self.read_prefix}/{safe_id}")
        return to_entity(body, self.model, self.entity_key)

    async def create(self, payload: Any, files: Optional[Files] = None):
        body = await self._send_write("POST", f"{self.write_prefix}/create", dump_payload(payload), files)
        logger.info(f"Created {self.resource} record")
        return self._written_entity(body)

    async def update(self, entity_id: str, partial: Any, files: Optional[Files] = None):
        safe_id = self._require_id(entity_id)
        body = await self._send_write("PUT", f"{self.write_prefix}/{safe_id}", dump_payload(partial, partial=True), files)
        logger.info(f"Updated {self.resource} {entity_id}")
        return self._written_entity(body)

    async def delete(self, entity_id: str) -> SuccessResponse:
        safe_id = self._require_id(entity_id)
        body = await self.api.delete(WRITE, f"{self.write_prefix}/{safe_id}")
        logger.info(f"Deleted {self.resource} {entity_id}")
        return SuccessResponse.model_validate(body if isinstance(body, dict) else {})

    def _download_path(self, file_path: str) -> str:
        if not file_path:
            raise FormValidationError({"file_path": "No file available for download"})
        return f"{self.read_prefix}/download/{quote(file_path, safe='')}"

    def download_url(self, file_path: str) -> str:
        """Absolute read-service URL a stored file can be fetched from"""
        return self.api._url(READ, self._download_path(file_path))

    async def download(self, file_path: str) -> bytes:
        return await self.api.download(self._download_path(file_path))

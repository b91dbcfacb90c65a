import logging
import math
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from estate_admin.core.exceptions import UnparseableResponseError
from estate_admin.schemas.base import Page

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# Keys the read service uses for list payloads, in lookup order
ITEM_KEYS = ("items", "projects", "schemes", "admins", "agents", "units", "agreements", "data")


def extract_items(body: Any, items_key: Optional[str] = None) -> List[Dict[str, Any]]:
    """Pull the row list out of a list response of any known shape"""
    if isinstance(body, list):
        return body
    if not isinstance(body, dict):
        return []

    keys = (items_key,) + ITEM_KEYS if items_key else ITEM_KEYS
    for key in keys:
        value = body.get(key)
        if isinstance(value, list):
            return value
        # single entity wrapped in "data"
        if key == "data" and isinstance(value, dict):
            return [value]
    return []


def _total(body: Dict[str, Any], count: int) -> int:
    if "total" in body:
        return int(body["total"])
    for key, value in body.items():
        if key.startswith("total_") and key != "total_pages" and isinstance(value, int):
            return value
    return count


def to_page(body: Any, model: Type[T], page: int = 1, limit: int = 10, items_key: Optional[str] = None) -> Page[T]:
    """Normalize a list response into Page[model]"""
    rows = extract_items(body, items_key)
    try:
        items = [model.model_validate(row) for row in rows]
    except ValidationError as e:
        logger.error(f"List response does not match {model.__name__}: {e}")
        raise UnparseableResponseError(200) from e

    meta = body if isinstance(body, dict) else {}
    total = _total(meta, len(items))
    limit = int(meta.get("limit", limit) or limit)
    page = int(meta.get("page", page) or page)
    total_pages = meta.get("total_pages") or max(1, math.ceil(total / limit))
    total_pages = int(total_pages)

    return Page[model](
        items=items,
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        is_previous=bool(meta.get("is_previous", page > 1)),
        is_next=bool(meta.get("is_next", page < total_pages)),
    )


def to_entity(body: Any, model: Type[T], entity_key: Optional[str] = None) -> T:
    """Unwrap {data: {...}} / {<entity_key>: {...}} / bare entity bodies"""
    row = body
    if isinstance(body, dict):
        if entity_key and isinstance(body.get(entity_key), dict):
            row = body[entity_key]
        elif isinstance(body.get("data"), dict):
            row = body["data"]
    try:
        return model.model_validate(row)
    except ValidationError as e:
        logger.error(f"Entity response does not match {model.__name__}: {e}")
        raise UnparseableResponseError(200) from e

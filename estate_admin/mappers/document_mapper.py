import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from estate_admin.schemas.document import Attachment, AttachmentList

logger = logging.getLogger(__name__)

# Array-valued keys, in lookup order
ARRAY_KEYS = ("agent_documents", "documents", "files")

# Individually named document fields -> display name
NAMED_DOCUMENT_FIELDS = (
    ("rera_certificate", "RERA Certificate"),
    ("pan_card", "PAN Card"),
    ("aadhar_card", "Aadhar Card"),
    ("resume_cv", "Resume/CV"),
)


class DocumentShape(str, Enum):
    ARRAY = "array"
    JSON_STRING = "json_string"
    NAMED_FIELDS = "named_fields"
    NONE = "none"


def detect_shape(raw: Dict[str, Any]) -> Tuple[DocumentShape, Any]:
    """Resolve which of the three document representations an entity carries"""
    for key in ARRAY_KEYS:
        value = raw.get(key)
        if isinstance(value, list) and value:
            return DocumentShape.ARRAY, value
        if key == "agent_documents" and isinstance(value, str) and value.strip():
            return DocumentShape.JSON_STRING, value

    named = [(field, label, raw[field]) for field, label in NAMED_DOCUMENT_FIELDS if raw.get(field)]
    if named:
        return DocumentShape.NAMED_FIELDS, named

    return DocumentShape.NONE, None


def _display_name(doc: Dict[str, Any]) -> str:
    for key in ("file_name", "name", "original_name"):
        if doc.get(key):
            return str(doc[key])
    path = doc.get("file_path")
    if path:
        return str(path).rstrip("/").split("/")[-1] or "Document"
    return "Document"


def _url(doc: Dict[str, Any]) -> Optional[str]:
    for key in ("file_path", "url", "download_url"):
        if doc.get(key):
            return str(doc[key])
    return None


def _from_entries(entries: List[Any]) -> List[Attachment]:
    attachments = []
    for entry in entries:
        if isinstance(entry, str):
            entry = {"file_path": entry}
        if not isinstance(entry, dict):
            logger.debug(f"Skipping document entry of type {type(entry).__name__}")
            continue
        url = _url(entry)
        if not url:
            logger.debug(f"Skipping document without a location: {entry}")
            continue
        attachments.append(Attachment(
            display_name=_display_name(entry),
            url=url,
            kind=entry.get("type") or entry.get("document_type")
        ))
    return attachments


def normalize_attachments(raw: Optional[Dict[str, Any]]) -> AttachmentList:
    """Map array, JSON-string or named-field documents to one AttachmentList"""
    if not raw:
        return AttachmentList([])

    shape, value = detect_shape(raw)

    if shape == DocumentShape.ARRAY:
        return AttachmentList(_from_entries(value))

    if shape == DocumentShape.JSON_STRING:
        try:
            parsed = json.loads(value)
        except ValueError as e:
            logger.warning(f"Could not parse agent_documents JSON: {str(e)}")
            return AttachmentList([])
        return AttachmentList(_from_entries(parsed if isinstance(parsed, list) else []))

    if shape == DocumentShape.NAMED_FIELDS:
        return AttachmentList([
            Attachment(display_name=label, url=str(path), kind=field)
            for field, label, path in value
        ])

    return AttachmentList([])


def map_gallery_to_attachments(gallery_images: List[Any]) -> AttachmentList:
    """Project gallery images ordered by sort_order"""
    ordered = sorted(gallery_images or [], key=lambda img: getattr(img, "sort_order", 0))
    return AttachmentList([
        Attachment(display_name=img.filename or _display_name({"file_path": img.url}), url=img.url, kind="image")
        for img in ordered
    ])

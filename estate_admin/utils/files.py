import logging
import mimetypes
import os
from typing import Optional

from estate_admin.core.exceptions import AppException
from estate_admin.schemas.document import FileUpload

logger = logging.getLogger(__name__)


def upload_from_path(path: str, content_type: Optional[str] = None) -> FileUpload:
    """Read a local file into a multipart upload part"""
    if not os.path.isfile(path):
        raise AppException(status_code=400, detail=f"File not found: {path}")

    with open(path, "rb") as fh:
        content = fh.read()

    if not content_type:
        content_type, _ = mimetypes.guess_type(path)

    return FileUpload(
        filename=os.path.basename(path),
        content=content,
        content_type=content_type or "application/octet-stream"
    )


def download_filename(file_path: Optional[str], preferred: Optional[str] = None, fallback: str = "download") -> str:
    """Filename for a saved download: preferred name, then path basename, then fallback"""
    if preferred:
        name = preferred
    elif file_path:
        name = file_path.rstrip("/").split("/")[-1] or fallback
    else:
        name = fallback

    # Keep the server's extension when the display name has none
    if file_path and not os.path.splitext(name)[1]:
        ext = os.path.splitext(file_path)[1]
        if ext:
            name = f"{name}{ext}"
    return name.replace("/", "_")


def save_download(content: bytes, destination: str, filename: str) -> str:
    """Write downloaded bytes; destination may be a directory or a full path"""
    if os.path.isdir(destination):
        target = os.path.join(destination, filename)
    else:
        target = destination
        parent = os.path.dirname(target)
        if parent:
            os.makedirs(parent, exist_ok=True)

    with open(target, "wb") as fh:
        fh.write(content)

    logger.info(f"Saved download to {target} ({len(content)} bytes)")
    return target

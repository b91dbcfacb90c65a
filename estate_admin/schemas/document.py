from typing import Optional, List, Iterator
from pydantic import Field, RootModel
from estate_admin.schemas.base import BaseSchema


class Attachment(BaseSchema):
    """Canonical attachment reference"""
    display_name: str = Field(..., min_length=1)
    url: str
    kind: Optional[str] = None  # e.g. "pan_card", "rera_certificate"


class AttachmentList(RootModel[List[Attachment]]):
    """Ordered list of attachments, possibly empty"""
    root: List[Attachment] = Field(default_factory=list)

    def __iter__(self) -> Iterator[Attachment]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> Attachment:
        return self.root[index]


class FileUpload(BaseSchema):
    """Binary part of a multipart request"""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

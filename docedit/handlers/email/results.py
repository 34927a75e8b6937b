"""Result models for email operations."""

from typing import List, Optional

from pydantic import BaseModel, Field

from docedit.operations.results import OperationResult


class EmailContentResult(OperationResult):
    subject: Optional[str] = None
    sender: Optional[str] = Field(None, description="From header")
    to: List[str] = Field(default_factory=list)
    cc: List[str] = Field(default_factory=list)
    bcc: List[str] = Field(default_factory=list)
    date: Optional[str] = None
    body: Optional[str] = None
    is_html: bool = False
    attachment_count: int = 0


class EmailUpdateResult(OperationResult):
    field: str


class RecipientsResult(OperationResult):
    to: List[str]
    cc: List[str]
    bcc: List[str]


class AttachmentInfo(BaseModel):
    index: int
    filename: Optional[str]
    content_type: str
    size: int = Field(description="Decoded size in bytes")


class AttachmentListResult(OperationResult):
    count: int
    attachments: List[AttachmentInfo]


class AttachmentResult(OperationResult):
    attachment_index: int
    filename: Optional[str] = None
    size: int = 0
    output_path: Optional[str] = None

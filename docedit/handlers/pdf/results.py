"""Result models for PDF operations."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from docedit.operations.results import OperationResult


class PageResult(OperationResult):
    page_index: int
    page_count: int


class PageInfo(BaseModel):
    index: int
    width: float = Field(description="Media box width in points")
    height: float = Field(description="Media box height in points")
    rotation: int


class PageInfoResult(OperationResult):
    page_count: int
    pages: List[PageInfo]


class RotateResult(OperationResult):
    rotation: int
    rotated_pages: List[int]


class PropertiesResult(OperationResult):
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    keywords: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None
    page_count: int


class PropertiesSetResult(OperationResult):
    updated: Dict[str, str]


class PageText(BaseModel):
    page_index: int
    text: str


class TextExtractResult(OperationResult):
    page_count: int
    pages: List[PageText]
    total_characters: int

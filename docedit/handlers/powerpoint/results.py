"""Result models for PowerPoint operations."""

from typing import List, Optional

from pydantic import BaseModel, Field

from docedit.operations.results import OperationResult


class SlideResult(OperationResult):
    slide_index: int
    layout: Optional[str] = None


class SlideInfo(BaseModel):
    index: int
    layout: Optional[str]
    shape_count: int
    title: Optional[str]
    hidden: bool


class SlideListResult(OperationResult):
    count: int
    slide_width: float = Field(description="Slide width in points")
    slide_height: float = Field(description="Slide height in points")
    slides: List[SlideInfo]


class ShapeResult(OperationResult):
    slide_index: int
    shape_index: int
    shape_id: Optional[int] = None


class ShapeInfo(BaseModel):
    index: int
    shape_id: int
    name: str
    shape_type: Optional[str]
    x: Optional[float] = Field(None, description="Left position in points")
    y: Optional[float] = Field(None, description="Top position in points")
    width: Optional[float] = None
    height: Optional[float] = None
    text: Optional[str] = None


class ShapeListResult(OperationResult):
    slide_index: int
    count: int
    shapes: List[ShapeInfo]

"""Result models for Word operations."""

from typing import List, Optional

from pydantic import BaseModel, Field

from docedit.operations.results import OperationResult


class TextAddResult(OperationResult):
    paragraph_index: int
    style: Optional[str] = None


class TextReplaceResult(OperationResult):
    replacements: int = Field(description="Number of occurrences replaced")


class SearchMatch(BaseModel):
    paragraph_index: int
    position: int = Field(description="Character offset of the match within the paragraph")
    context: str


class SearchResult(OperationResult):
    search_text: str
    match_count: int
    truncated: bool = Field(description="True when more matches exist than maxResults")
    matches: List[SearchMatch]


class WordStatisticsResult(OperationResult):
    paragraphs: int
    non_empty_paragraphs: int
    words: int
    characters: int
    characters_no_spaces: int
    tables: int
    sections: int


class ParagraphResult(OperationResult):
    paragraph_index: int
    style: Optional[str] = None
    text: Optional[str] = None


class ParagraphInfo(BaseModel):
    index: int
    style: Optional[str]
    alignment: Optional[str]
    text: str


class ParagraphListResult(OperationResult):
    count: int
    paragraphs: List[ParagraphInfo]

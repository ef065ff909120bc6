from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, List
from datetime import datetime


class StringCreate(BaseModel):
    value: str = Field(..., description="String to analyze")


class StringProperties(BaseModel):
    length: int
    is_palindrome: bool
    unique_characters: int
    word_count: int
    sha256_hash: str
    character_frequency_map: Dict[str, int]


class StringResponse(BaseModel):
    id: str
    value: str
    properties: StringProperties
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StructuredFilter(BaseModel):
    """Optional predicates over stored strings; absent fields do not filter."""

    is_palindrome: Optional[bool] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    word_count: Optional[int] = None
    contains_character: Optional[str] = None
    contains_text: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.applied()

    def applied(self) -> Dict[str, Any]:
        """Only the predicates that are present"""
        return self.model_dump(exclude_none=True)


class StringListResponse(BaseModel):
    data: List[StringResponse]
    count: int
    filters_applied: Optional[Dict[str, Any]] = None


class InterpretedQuery(BaseModel):
    original: str
    parsed_filters: Dict[str, Any]


class NaturalLanguageResponse(BaseModel):
    data: List[StringResponse]
    count: int
    interpreted_query: InterpretedQuery

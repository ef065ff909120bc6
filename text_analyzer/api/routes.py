from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
import os
import logging

from text_analyzer.crud import text as crud
from text_analyzer.database import get_db
from text_analyzer.schemas.text import (
    InterpretedQuery,
    NaturalLanguageResponse,
    StringCreate,
    StringListResponse,
    StringResponse,
    StructuredFilter,
)
from text_analyzer.services.corpus import SqlCorpusProvider, get_corpus
from text_analyzer.services.filter_executor import execute
from text_analyzer.services.formatter import format_record, format_records, to_string_response
from text_analyzer.services.query_interpreter import interpret
from text_analyzer.utils import get_character_frequency, is_integer_literal

router = APIRouter()
logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = int(os.getenv("MAX_QUERY_LENGTH", "500"))

FILTER_PARAMS = {
    "is_palindrome",
    "min_length",
    "max_length",
    "word_count",
    "contains_character",
    "contains_text",
}


@router.post("/strings", response_model=StringResponse, status_code=status.HTTP_201_CREATED)
def create_string(
    string_data: StringCreate,
    db: Session = Depends(get_db),
):
    """
    Analyze and store a string.
    Returns 409 if string already exists.
    """
    if not string_data.value.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid request body or missing 'value' field"
        )

    if is_integer_literal(string_data.value):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid data type for 'value' (must be a non-numeric string)"
        )

    if crud.get_text_by_value(db, string_data.value):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="String already exists in the system"
        )

    try:
        db_text = crud.create_text_record(db, string_data.value)
    except IntegrityError:
        # Another request stored the same value first
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="String already exists in the system"
        )

    logger.info(f"Stored string {db_text.id}")
    # counts were computed from this value and stored in the same commit
    return to_string_response(db_text, get_character_frequency(string_data.value))


@router.get("/strings", response_model=StringListResponse)
def get_all_strings(
    request: Request,
    is_palindrome: Optional[bool] = Query(None),
    min_length: Optional[int] = Query(None, ge=0),
    max_length: Optional[int] = Query(None, ge=0),
    word_count: Optional[int] = Query(None, ge=0),
    contains_character: Optional[str] = Query(None, min_length=1, max_length=1),
    contains_text: Optional[str] = Query(None, min_length=1),
    corpus: SqlCorpusProvider = Depends(get_corpus),
):
    """
    Get all strings with optional filtering.
    """
    unknown = set(request.query_params.keys()) - FILTER_PARAMS
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Invalid query parameter values or types",
                "details": {name: "unknown parameter" for name in sorted(unknown)},
            }
        )

    filters = StructuredFilter(
        is_palindrome=is_palindrome,
        min_length=min_length,
        max_length=max_length,
        word_count=word_count,
        contains_character=contains_character,
        contains_text=contains_text,
    )

    records = corpus.fetch_matching(filters)
    data = format_records(records, corpus)

    return StringListResponse(
        data=data,
        count=len(data),
        filters_applied=filters.applied() or None
    )


@router.get("/strings/filter-by-natural-language", response_model=NaturalLanguageResponse)
def filter_by_natural_language(
    query: str = Query(..., min_length=1, max_length=MAX_QUERY_LENGTH, description="Natural language query"),
    corpus: SqlCorpusProvider = Depends(get_corpus),
):
    """
    Filter strings using natural language queries.
    Example: "all single word palindromic strings"
    """
    filters = interpret(query)

    if (
        filters.min_length is not None
        and filters.max_length is not None
        and filters.min_length > filters.max_length
    ):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Query parsed but resulted in conflicting filters",
                "interpreted_query": {"original": query, "parsed_filters": filters.applied()},
            }
        )

    records = execute(filters, corpus)
    data = format_records(records, corpus)

    return NaturalLanguageResponse(
        data=data,
        count=len(data),
        interpreted_query=InterpretedQuery(original=query, parsed_filters=filters.applied())
    )


@router.get("/strings/{string_value}", response_model=StringResponse)
def get_string(
    string_value: str,
    db: Session = Depends(get_db),
    corpus: SqlCorpusProvider = Depends(get_corpus),
):
    """
    Get analysis for a specific string.
    Returns 404 if string doesn't exist.
    """
    db_text = crud.get_text_by_value(db, string_value)
    if not db_text:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="String does not exist in the system"
        )
    return format_record(db_text, corpus)


@router.delete("/strings/{string_value}", status_code=status.HTTP_204_NO_CONTENT)
def delete_string(string_value: str, db: Session = Depends(get_db)):
    """
    Delete a string from the system.
    Returns 404 if string doesn't exist.
    """
    success = crud.delete_text_record(db, string_value)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="String does not exist in the system"
        )
    logger.info(f"Deleted string {string_value!r}")
    return None

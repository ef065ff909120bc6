from typing import Any, Dict, Iterable, List
import logging

from text_analyzer.exceptions import StorageError
from text_analyzer.schemas.text import StringProperties, StringResponse

logger = logging.getLogger(__name__)


def to_string_response(record: Any, frequency: Dict[str, int]) -> StringResponse:
    """Shape a stored record into the response envelope"""
    return StringResponse(
        id=record.id,
        value=record.value,
        properties=StringProperties(
            length=record.length,
            is_palindrome=record.is_palindrome,
            unique_characters=record.unique_characters,
            word_count=record.word_count,
            sha256_hash=record.sha256_hash,
            character_frequency_map=frequency,
        ),
        created_at=record.created_at,
    )


def format_record(record: Any, corpus) -> StringResponse:
    """Format a single record; a failed frequency lookup propagates"""
    return to_string_response(record, corpus.fetch_character_frequency(record.id))


def format_records(records: Iterable[Any], corpus) -> List[StringResponse]:
    """
    Format a list of records, attaching each one's character frequency map.

    A failed lookup for one record yields an empty map for that record
    instead of failing the whole list.
    """
    formatted = []
    for record in records:
        try:
            frequency = corpus.fetch_character_frequency(record.id)
        except StorageError as e:
            logger.warning(f"Character counts unavailable for {record.id}: {e}")
            frequency = {}
        formatted.append(to_string_response(record, frequency))
    return formatted

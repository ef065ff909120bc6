"""
Applies a StructuredFilter to the whole corpus in process.

The natural-language path never pushes predicates down to the store: the
corpus is fetched once and every present predicate is checked per record,
which also covers substring predicates a plain store query cannot express.
"""
from typing import Any, List, Optional, Protocol, Sequence

from text_analyzer.exceptions import CorpusUnavailable, QueryCancelled, StorageError
from text_analyzer.schemas.text import StructuredFilter


class CorpusProvider(Protocol):
    """Source of stored text records."""

    def fetch_all(self) -> Sequence[Any]:
        ...

    def fetch_matching(self, filters: StructuredFilter) -> Sequence[Any]:
        ...

    def fetch_character_frequency(self, record_id: str) -> dict:
        ...


class CancelEvent(Protocol):
    def is_set(self) -> bool:
        ...


def matches(filters: StructuredFilter, record: Any) -> bool:
    """True when the record satisfies every present predicate."""
    if filters.is_palindrome is not None and record.is_palindrome != filters.is_palindrome:
        return False
    if filters.min_length is not None and record.length < filters.min_length:
        return False
    if filters.max_length is not None and record.length > filters.max_length:
        return False
    if filters.word_count is not None and record.word_count != filters.word_count:
        return False
    if filters.contains_character is not None and filters.contains_character not in record.value:
        return False
    if filters.contains_text is not None and filters.contains_text not in record.value:
        return False
    return True


def _check_cancelled(cancel_event: Optional[CancelEvent]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise QueryCancelled("query execution cancelled")


def execute(
    filters: StructuredFilter,
    corpus: CorpusProvider,
    cancel_event: Optional[CancelEvent] = None,
) -> List[Any]:
    """
    Return the corpus records matching ``filters`` in the provider's order.

    Raises:
        CorpusUnavailable: the provider failed to return the corpus.
        QueryCancelled: ``cancel_event`` was set before scanning began.
    """
    _check_cancelled(cancel_event)
    try:
        records = corpus.fetch_all()
    except StorageError as e:
        raise CorpusUnavailable(f"could not fetch corpus: {e}") from e
    _check_cancelled(cancel_event)

    return [record for record in records if matches(filters, record)]

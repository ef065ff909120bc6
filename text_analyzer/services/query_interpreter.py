"""
Natural-language query interpreter.

Turns free text such as "all single word palindromes" or "length > 10" into a
StructuredFilter. Each rule below scans the whole (lowercased, trimmed) query
independently and may overwrite fields set by the rules before it, so the order
of RULES is part of the observable behavior.
"""
import re
from typing import Callable, Tuple

from text_analyzer.exceptions import UnparseableQuery
from text_analyzer.schemas.text import StructuredFilter
from text_analyzer.utils import parse_int64

ALL_PREFIX = "all "

PALINDROME_CUES = ("palindrom", "reads the same", "same forwards and backwards")
NEGATION_CUES = ("not", "non")

WORD_COUNT_PHRASES: Tuple[Tuple[str, int], ...] = (
    ("single word", 1),
    ("one word", 1),
    ("1 word", 1),
    ("two words", 2),
    ("2 words", 2),
    ("three words", 3),
    ("3 words", 3),
    ("four words", 4),
    ("4 words", 4),
    ("five words", 5),
    ("5 words", 5),
)

# Groups: 1 = greater than, 2 = less than, 3 = exactly / bare number
_COMPARATOR = (
    r"\s*(?:"
    r"(?:is\s*)?(?:greater\s+than|more\s+than|over|>)\s*(\d+)"
    r"|(?:is\s*)?(?:less\s+than|fewer\s+than|under|<)\s*(\d+)"
    r"|(?:is\s*)?(?:exactly\s*)?(\d+)"
    r")"
)

WORD_COUNT_PATTERN = re.compile(r"(?:words?|word count)" + _COMPARATOR, re.ASCII)
LENGTH_PATTERN = re.compile(r"(?:length|characters?|chars?)" + _COMPARATOR, re.ASCII)
CHARACTER_PATTERN = re.compile(
    r"contains?\s+(?:the\s+)?(?:character|char|letter)\s+['\"]?([a-zA-Z])['\"]?"
)
SUBSTRING_PATTERN = re.compile(r"contains?\s+['\"]([^'\"]+)['\"]")


def _palindrome_rule(query: str, filters: StructuredFilter) -> None:
    for cue in PALINDROME_CUES:
        if cue in query:
            filters.is_palindrome = not any(neg in query for neg in NEGATION_CUES)
            return


def _word_phrase_rule(query: str, filters: StructuredFilter) -> None:
    for phrase, count in WORD_COUNT_PHRASES:
        if phrase in query:
            filters.word_count = count
            return


def _comparisons(pattern, query: str):
    """Yield (kind, number) per match; numbers outside the 64-bit range are skipped."""
    for match in pattern.finditer(query):
        for kind, digits in zip(("greater", "less", "exact"), match.groups()):
            if digits is not None:
                number = parse_int64(digits)
                if number is not None:
                    yield kind, number
                break


def _word_comparator_rule(query: str, filters: StructuredFilter) -> None:
    # "more than N words" collapses to exactly N+1, "fewer than N" to N-1
    for kind, number in _comparisons(WORD_COUNT_PATTERN, query):
        if kind == "greater":
            filters.word_count = number + 1
        elif kind == "less":
            filters.word_count = number - 1
        else:
            filters.word_count = number


def _length_comparator_rule(query: str, filters: StructuredFilter) -> None:
    for kind, number in _comparisons(LENGTH_PATTERN, query):
        if kind == "greater":
            filters.min_length = number
        elif kind == "less":
            filters.max_length = number
        else:
            filters.min_length = number
            filters.max_length = number


def _character_rule(query: str, filters: StructuredFilter) -> None:
    match = CHARACTER_PATTERN.search(query)
    if match:
        filters.contains_character = match.group(1)


def _substring_rule(query: str, filters: StructuredFilter) -> None:
    match = SUBSTRING_PATTERN.search(query)
    if match:
        filters.contains_text = match.group(1)


RULES: Tuple[Callable[[str, StructuredFilter], None], ...] = (
    _palindrome_rule,
    _word_phrase_rule,
    _word_comparator_rule,
    _length_comparator_rule,
    _character_rule,
    _substring_rule,
)


def normalize_query(query: str) -> str:
    """Lowercase, trim, and drop a single leading "all " token."""
    normalized = query.strip().lower()
    if normalized.startswith(ALL_PREFIX):
        normalized = normalized[len(ALL_PREFIX):].strip()
    return normalized


def interpret(query: str) -> StructuredFilter:
    """
    Translate a natural-language query into a StructuredFilter.

    Raises:
        UnparseableQuery: when no rule recognises any part of the query.
    """
    normalized = normalize_query(query)
    filters = StructuredFilter()

    for rule in RULES:
        rule(normalized, filters)

    if filters.is_empty():
        raise UnparseableQuery(query)

    return filters

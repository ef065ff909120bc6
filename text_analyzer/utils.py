import hashlib
import re
from collections import Counter
from typing import Dict, Optional

_INTEGER_LITERAL = re.compile(r"[+-]?\d+", re.ASCII)
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def compute_sha256(text: str) -> str:
    """Compute SHA-256 hash of a string"""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def is_palindrome(text: str) -> bool:
    """Check if string reads the same reversed (case-insensitive, spaces and punctuation kept)"""
    lowered = text.lower()
    return lowered == lowered[::-1]


def count_characters(text: str) -> int:
    """Count non-whitespace characters"""
    return sum(1 for char in text if not char.isspace())


def count_words(text: str) -> int:
    """Count words separated by whitespace"""
    return len(text.split())


def get_character_frequency(text: str) -> Dict[str, int]:
    """Get frequency map of each character"""
    return dict(Counter(text))


def is_integer_literal(text: str) -> bool:
    """True when the whole string is a plain (optionally signed) 64-bit integer"""
    return parse_int64(text) is not None


def parse_int64(text: str) -> Optional[int]:
    """Parse an ASCII decimal integer; None when malformed or outside the signed 64-bit range"""
    if not _INTEGER_LITERAL.fullmatch(text):
        return None
    sign = -1 if text[0] == "-" else 1
    digits = text.lstrip("+-").lstrip("0") or "0"
    # bound the length before converting
    if len(digits) > 19:
        return None
    value = sign * int(digits)
    if not INT64_MIN <= value <= INT64_MAX:
        return None
    return value


def analyze_string(value: str) -> Dict:
    """Analyze a string and return all computed properties"""
    sha256_hash = compute_sha256(value)
    frequency = get_character_frequency(value)

    return {
        "id": sha256_hash,
        "value": value,
        "length": count_characters(value),
        "is_palindrome": is_palindrome(value),
        "unique_characters": len(frequency),
        "word_count": count_words(value),
        "sha256_hash": sha256_hash,
        "character_frequency_map": frequency,
    }

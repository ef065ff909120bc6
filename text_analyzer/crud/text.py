from sqlalchemy.orm import Session
from sqlalchemy import and_
from text_analyzer.models.text import TextRecord, CharacterCount
from text_analyzer.schemas.text import StructuredFilter
from text_analyzer.utils import analyze_string, compute_sha256
from typing import Dict, List, Optional


def create_text_record(db: Session, value: str) -> TextRecord:
    """Analyze a string and store it with its character counts"""
    analysis = analyze_string(value)

    db_text = TextRecord(
        id=analysis["id"],
        value=analysis["value"],
        length=analysis["length"],
        is_palindrome=analysis["is_palindrome"],
        unique_characters=analysis["unique_characters"],
        word_count=analysis["word_count"],
        sha256_hash=analysis["sha256_hash"],
    )
    db_text.character_counts = [
        CharacterCount(character=character, count=count)
        for character, count in analysis["character_frequency_map"].items()
    ]

    db.add(db_text)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_text)
    return db_text


def get_text_by_id(db: Session, text_id: str) -> Optional[TextRecord]:
    """Get text record by ID (hash)"""
    return db.query(TextRecord).filter(TextRecord.id == text_id).first()


def get_text_by_value(db: Session, value: str) -> Optional[TextRecord]:
    """Get text record by exact value"""
    # The id is the value's digest, so this is an exact, case-sensitive lookup
    return get_text_by_id(db, compute_sha256(value))


def get_all_texts(db: Session) -> List[TextRecord]:
    """Get every stored text record"""
    return db.query(TextRecord).all()


def filter_texts(db: Session, filters: StructuredFilter) -> List[TextRecord]:
    """Get text records matching the present predicates of a structured filter"""
    query = db.query(TextRecord)

    conditions = []

    if filters.is_palindrome is not None:
        conditions.append(TextRecord.is_palindrome == filters.is_palindrome)

    if filters.min_length is not None:
        conditions.append(TextRecord.length >= filters.min_length)

    if filters.max_length is not None:
        conditions.append(TextRecord.length <= filters.max_length)

    if filters.word_count is not None:
        conditions.append(TextRecord.word_count == filters.word_count)

    if filters.contains_character is not None:
        conditions.append(TextRecord.value.contains(filters.contains_character, autoescape=True))

    if filters.contains_text is not None:
        conditions.append(TextRecord.value.contains(filters.contains_text, autoescape=True))

    if conditions:
        query = query.filter(and_(*conditions))

    return query.all()


def get_character_frequency(db: Session, text_id: str) -> Dict[str, int]:
    """Get the character frequency map stored for a text record"""
    rows = db.query(CharacterCount).filter(CharacterCount.string_id == text_id).all()
    return {row.character: row.count for row in rows}


def delete_text_record(db: Session, value: str) -> bool:
    """Delete text record (and its character counts) by value"""
    db_text = get_text_by_value(db, value)
    if db_text:
        db.delete(db_text)
        db.commit()
        return True
    return False

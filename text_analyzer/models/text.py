from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from text_analyzer.database import Base


class TextRecord(Base):
    __tablename__ = "text_records"

    id = Column(String(64), primary_key=True, index=True)  # SHA-256 hash of value
    value = Column(Text, nullable=False)
    length = Column(Integer, nullable=False)
    is_palindrome = Column(Boolean, nullable=False, index=True)
    unique_characters = Column(Integer, nullable=False)
    word_count = Column(Integer, nullable=False, index=True)
    sha256_hash = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    character_counts = relationship(
        "CharacterCount",
        back_populates="text_record",
        cascade="all, delete-orphan",
    )


class CharacterCount(Base):
    __tablename__ = "character_counts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    string_id = Column(
        String(64),
        ForeignKey("text_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    character = Column(String(1), nullable=False)
    count = Column(Integer, nullable=False)

    text_record = relationship("TextRecord", back_populates="character_counts")

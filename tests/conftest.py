"""
Pytest configuration and fixtures
"""
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

# Point the app at an in-memory database before it is imported
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from text_analyzer.database import Base, SessionLocal, engine
from text_analyzer.exceptions import StorageError
from text_analyzer.main import app
from text_analyzer.models import text  # noqa: F401
from text_analyzer.services.filter_executor import matches
from text_analyzer.utils import analyze_string


@dataclass
class StubRecord:
    """Plain stand-in for a stored text row."""

    id: str
    value: str
    length: int
    is_palindrome: bool
    unique_characters: int
    word_count: int
    sha256_hash: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_value(cls, value: str) -> "StubRecord":
        props = analyze_string(value)
        return cls(
            id=props["id"],
            value=value,
            length=props["length"],
            is_palindrome=props["is_palindrome"],
            unique_characters=props["unique_characters"],
            word_count=props["word_count"],
            sha256_hash=props["sha256_hash"],
        )


@dataclass
class StubCorpus:
    """In-memory corpus provider that records calls and can be made to fail."""

    records: List[StubRecord] = field(default_factory=list)
    fail_fetch: bool = False
    failing_frequency_ids: set = field(default_factory=set)
    fetch_calls: int = 0

    @classmethod
    def of(cls, *values: str, **kwargs) -> "StubCorpus":
        return cls(records=[StubRecord.from_value(v) for v in values], **kwargs)

    def fetch_all(self) -> List[StubRecord]:
        self.fetch_calls += 1
        if self.fail_fetch:
            raise StorageError("connection refused")
        return list(self.records)

    def fetch_matching(self, filters) -> List[StubRecord]:
        return [r for r in self.fetch_all() if matches(filters, r)]

    def fetch_character_frequency(self, record_id: str) -> Dict[str, int]:
        if record_id in self.failing_frequency_ids:
            raise StorageError(f"no counts for {record_id}")
        for record in self.records:
            if record.id == record_id:
                return analyze_string(record.value)["character_frequency_map"]
        return {}


@pytest.fixture
def stub_corpus_factory():
    return StubCorpus.of


@pytest.fixture(scope="function")
def db():
    """Database session on a freshly created schema"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db):
    """Test client bound to the per-test schema"""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

from typing import Dict, List
import logging

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from text_analyzer.crud import text as crud
from text_analyzer.database import get_db
from text_analyzer.exceptions import StorageError
from text_analyzer.models.text import TextRecord
from text_analyzer.schemas.text import StructuredFilter

logger = logging.getLogger(__name__)


class SqlCorpusProvider:
    """Corpus provider backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_all(self) -> List[TextRecord]:
        try:
            return crud.get_all_texts(self.db)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching text corpus: {e}")
            raise StorageError("Unable to fetch texts from database") from e

    def fetch_matching(self, filters: StructuredFilter) -> List[TextRecord]:
        try:
            return crud.filter_texts(self.db, filters)
        except SQLAlchemyError as e:
            logger.error(f"Error filtering text corpus: {e}")
            raise StorageError("Unable to retrieve filtered texts from database") from e

    def fetch_character_frequency(self, record_id: str) -> Dict[str, int]:
        try:
            return crud.get_character_frequency(self.db, record_id)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching character counts for {record_id}: {e}")
            raise StorageError("Unable to get character counts from database") from e


def get_corpus(db: Session = Depends(get_db)) -> SqlCorpusProvider:
    """Dependency to provide the corpus for the current request."""
    return SqlCorpusProvider(db)

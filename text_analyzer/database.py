from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
import os
from dotenv import load_dotenv
import logging

load_dotenv()
logger = logging.getLogger(__name__)

# ------------------------------------------------------------------------------
# DATABASE URL HANDLING
# ------------------------------------------------------------------------------

DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    # Fallback for local dev
    logger.warning("DATABASE_URL not found in environment, using local MySQL instance.")
    DATABASE_URL = "mysql+pymysql://root:@localhost:3306/text_analyzer"

# Hosted MySQL providers hand out plain "mysql://" URLs
if DATABASE_URL.startswith("mysql://"):
    # SQLAlchemy expects "mysql+pymysql://"
    DATABASE_URL = DATABASE_URL.replace("mysql://", "mysql+pymysql://", 1)


def _engine_options(url: str) -> dict:
    """Driver specific engine keyword arguments."""
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live on a single connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_pre_ping": True,   # prevents "MySQL server has gone away" issues
        "pool_recycle": 280,     # helps with idle connection timeouts
    }


# ------------------------------------------------------------------------------
# DATABASE ENGINE & SESSION
# ------------------------------------------------------------------------------
try:
    engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base = declarative_base()
except Exception as e:
    logger.error(f"Failed to create SQLAlchemy engine: {e}")
    raise


# ------------------------------------------------------------------------------
# DB DEPENDENCY
# ------------------------------------------------------------------------------
def get_db():
    """Dependency to provide a DB session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ------------------------------------------------------------------------------
# INITIALIZATION
# ------------------------------------------------------------------------------
def init_db():
    """Initialize database tables (runs once on startup)."""
    from text_analyzer.models import text  # noqa: F401  ensure models are imported
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully.")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

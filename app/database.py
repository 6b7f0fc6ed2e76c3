from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
import os
from dotenv import load_dotenv
import logging

load_dotenv()
logger = logging.getLogger(__name__)

# ------------------------------------------------------------------------------
# DATABASE URL HANDLING
# ------------------------------------------------------------------------------

DEFAULT_DATABASE_URL = "sqlite:///./string_analyzer.db"


def normalize_database_url(url: str) -> str:
    """Rewrite provider-style URLs into the driver URLs SQLAlchemy expects."""
    if url.startswith("mysql://"):
        # SQLAlchemy expects "mysql+pymysql://"
        return url.replace("mysql://", "mysql+pymysql://", 1)
    return url


DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    # Fallback for local dev
    logger.warning("DATABASE_URL not found in environment, using local SQLite database.")
    DATABASE_URL = DEFAULT_DATABASE_URL

DATABASE_URL = normalize_database_url(DATABASE_URL)

# ------------------------------------------------------------------------------
# DATABASE ENGINE & SESSION
# ------------------------------------------------------------------------------


def build_engine(url: str, **kwargs):
    """Create an engine with the pool settings used for the configured backend."""
    if url.startswith("sqlite"):
        # sessions are handed across the threadpool FastAPI runs sync routes in
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)   # prevents "server has gone away" issues
        kwargs.setdefault("pool_recycle", 280)     # helps with idle connection timeouts
    return create_engine(url, **kwargs)


try:
    engine = build_engine(DATABASE_URL)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base = declarative_base()
except Exception as e:
    logger.error(f"Failed to create SQLAlchemy engine: {e}")
    raise e


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
def init_db(bind=None):
    """Initialize database tables (runs once on startup)."""
    from app import models  # ensure models are imported
    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("Database tables created successfully.")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

from datetime import datetime, timezone
from sqlalchemy.orm import Session
from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from app.models import StringAnalysis
from app.schemas import QueryFilters
from app.utils import analyze_string, compute_sha256
from app.filters import build_conditions, apply_filters
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


def string_exists(db: Session, string_id: str) -> bool:
    """
    Check whether a record with this id is already stored.
    The id is the hash of the exact value, so this also covers the value
    without relying on the column collation of the backend.
    """
    return db.query(StringAnalysis.id).filter(StringAnalysis.id == string_id).first() is not None


def create_string_analysis(db: Session, value: str) -> Optional[StringAnalysis]:
    """
    Create a new string analysis.
    Returns None if the string (or its hash) is already stored.
    """
    analysis_data = analyze_string(value)

    if string_exists(db, analysis_data["id"]):
        logger.warning(f"Duplicate string rejected: {analysis_data['id']}")
        return None

    db_string = StringAnalysis(
        id=analysis_data["id"],
        value=analysis_data["value"],
        length=analysis_data["length"],
        is_palindrome=analysis_data["is_palindrome"],
        unique_characters=analysis_data["unique_characters"],
        word_count=analysis_data["word_count"],
        character_frequency_map=analysis_data["character_frequency_map"],
        created_at=datetime.now(timezone.utc),
    )

    db.add(db_string)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent insert of the same value won the race
        db.rollback()
        logger.warning(f"Duplicate string rejected at write: {analysis_data['id']}")
        return None
    db.refresh(db_string)
    logger.info(f"Stored string analysis {db_string.id}")
    return db_string


def get_string_by_value(db: Session, value: str) -> Optional[StringAnalysis]:
    """Get string analysis by value, looked up through its hash"""
    return get_string_by_id(db, compute_sha256(value))


def get_string_by_id(db: Session, string_id: str) -> Optional[StringAnalysis]:
    """Get string analysis by ID (hash)"""
    return db.query(StringAnalysis).filter(StringAnalysis.id == string_id).first()


def get_all_strings(db: Session, filters: Optional[QueryFilters] = None) -> List[StringAnalysis]:
    """Get all strings matching the filters, newest first"""
    filters = filters or QueryFilters()
    query = db.query(StringAnalysis)

    conditions = build_conditions(filters)
    if conditions:
        query = query.filter(and_(*conditions))

    strings = query.order_by(StringAnalysis.created_at.desc()).all()

    if filters.contains_character is not None:
        strings = apply_filters(strings, filters)

    return strings


def _delete(db: Session, condition) -> bool:
    """Delete matching rows in one statement; False when nothing matched"""
    deleted = db.query(StringAnalysis).filter(condition).delete(synchronize_session=False)
    db.commit()
    if deleted:
        logger.info(f"Deleted {deleted} string analysis record(s)")
    return deleted > 0


def delete_string_by_value(db: Session, value: str) -> bool:
    """Delete string analysis by value, matched through its hash"""
    return _delete(db, StringAnalysis.id == compute_sha256(value))


def delete_string_by_id(db: Session, string_id: str) -> bool:
    """Delete string analysis by ID (hash)"""
    return _delete(db, StringAnalysis.id == string_id)

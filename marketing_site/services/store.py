# marketing_site/services/store.py

import logging
from datetime import datetime, timedelta
from typing import NamedTuple, Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from marketing_site.database.database import utcnow
from marketing_site.models.contact_messages import ContactMessage
from marketing_site.models.gdpr_requests import GdprRequest
from marketing_site.schemas.contact import ContactMessageCreate, GdprRequestCreate

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a submission could not be written."""


class PurgeResult(NamedTuple):
    contact_messages: int
    gdpr_requests: int


def _insert(db: Session, record) -> int:
    try:
        db.add(record)
        db.commit()
        db.refresh(record)
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Could not store {record.__tablename__} row") from e
    return record.id


def insert_contact_message(db: Session, payload: ContactMessageCreate) -> int:
    return _insert(db, ContactMessage(**payload.model_dump()))


def insert_gdpr_request(db: Session, payload: GdprRequestCreate) -> int:
    return _insert(db, GdprRequest(**payload.model_dump()))


def _purge_table(session_factory: sessionmaker, model, retention_days: int, now: datetime) -> int:
    if not retention_days or retention_days <= 0:
        return 0

    cutoff = now - timedelta(days=retention_days)
    db = session_factory()
    try:
        result = db.execute(delete(model).where(model.created_at <= cutoff))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Could not purge old rows from {model.__tablename__}: {str(e)}")
        return 0
    finally:
        db.close()

    if result.rowcount:
        logger.info(f"Purged {result.rowcount} rows from {model.__tablename__} (retention {retention_days} days)")
    return result.rowcount or 0


def purge_expired_entries(
    session_factory: sessionmaker,
    retention_days: int,
    gdpr_retention_days: int,
    now: Optional[datetime] = None,
) -> PurgeResult:
    """
    Delete contact messages and GDPR requests older than their retention
    window. A zero threshold leaves that table alone. Failures are logged and
    reported as zero deletions; nothing is raised.
    """
    now = now or utcnow()
    return PurgeResult(
        contact_messages=_purge_table(session_factory, ContactMessage, retention_days, now),
        gdpr_requests=_purge_table(session_factory, GdprRequest, gdpr_retention_days, now),
    )

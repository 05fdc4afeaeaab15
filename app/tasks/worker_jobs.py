import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import ProgrammingError, OperationalError
from app.db.session import SessionLocal
from app.services.email_service import process_pending_emails

logger = logging.getLogger(__name__)


def process_email_queue(limit: int = 50, session_factory=SessionLocal) -> dict:
    """Process queued/failed emails (retry send). Run periodically via Celery beat."""
    db: Session = session_factory()
    try:
        try:
            return process_pending_emails(db, limit=limit)
        except (ProgrammingError, OperationalError) as e:
            # DB not migrated yet (missing table) or unreachable; don't crash the worker.
            db.rollback()
            logger.warning("Email queue skipped: %s", e)
            return {"skipped": True, "reason": "database_unavailable"}
    finally:
        db.close()

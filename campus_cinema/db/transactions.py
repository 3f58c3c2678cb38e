import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campus_cinema.core.errors import PersistenceFailure

logger = logging.getLogger(__name__)


def commit_or_raise(db: Session, what: str) -> None:
    """Commit, or roll back and raise PersistenceFailure naming the failed write."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to %s: %s", what, e)
        raise PersistenceFailure(f"Could not {what}, please try again") from e

import logging
from functools import wraps

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


def db_exception(func):
    """Turn raw SQLAlchemy failures escaping a service call into PersistenceError."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except IntegrityError as e:
            logger.error(f"Integrity error in {func.__qualname__}: {e.orig}")
            raise PersistenceError("Duplicate entry: already exists", 409)
        except SQLAlchemyError as e:
            logger.error(f"Database error in {func.__qualname__}: {e}", exc_info=True)
            raise PersistenceError("Database error occurred", 500)

    return wrapper

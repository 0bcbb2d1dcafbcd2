# services/unit_of_work.py
"""
Transaction boundary for service operations.

Each decorated service function is one unit of work: it runs against the
caller's session and commits once at the end. Any failure rolls the session
back so no partial contract or schedule is ever visible. A transient
``OperationalError`` (dropped connection, lock timeout) gets exactly one
retry; after that, and for any other driver error, the caller receives a
``PersistenceError``.
"""
import functools
import logging

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from exceptions import ConcurrentModificationError, PersistenceError, UniqueConstraintViolation

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2


def unit_of_work(func):
     """Commit on success, roll back on failure, retry a transient failure once."""

     @functools.wraps(func)
     def wrapper(db, *args, **kwargs):
          attempt = 1
          while True:
               try:
                    result = func(db, *args, **kwargs)
                    db.commit()
                    return result
               except OperationalError as exc:
                    db.rollback()
                    if attempt >= MAX_ATTEMPTS:
                         raise PersistenceError(
                              f"{func.__name__} failed after {attempt} attempts: {exc.orig}"
                         ) from exc
                    logger.warning("Transient storage failure in %s, retrying: %s", func.__name__, exc.orig)
                    attempt += 1
               except StaleDataError as exc:
                    db.rollback()
                    raise ConcurrentModificationError(
                         "Contract was modified by another session; reload and try again"
                    ) from exc
               except IntegrityError as exc:
                    db.rollback()
                    raise UniqueConstraintViolation(f"Integrity constraint violated: {exc.orig}") from exc
               except SQLAlchemyError as exc:
                    db.rollback()
                    raise PersistenceError(f"{func.__name__} failed: {exc}") from exc
               except Exception:
                    db.rollback()
                    raise

     return wrapper

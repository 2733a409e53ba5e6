import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from clinic.errors import InternalError


logger = logging.getLogger("clinic.db")


@contextmanager
def transaction(session, action: str = "write"):
    """
    Provide a transactional scope around a series of DB operations.

    Commits when the block finishes, rolls back on any error. Storage failures
    surface as InternalError so callers never see driver diagnostics;
    IntegrityError is re-raised untouched for services that map it (e.g. to
    Conflict).
    """
    try:
        yield session
        session.commit()
    except IntegrityError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"[{action}] storage failure: {e.__class__.__name__}")
        raise InternalError() from e
    except Exception:
        session.rollback()
        raise

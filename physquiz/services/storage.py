from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from physquiz.errors import StorageFailure


@contextmanager
def transaction(session, action: str):
    """Run one public service operation as a single committed transaction.

    Any failure rolls the session back. Database errors surface as
    StorageFailure; domain errors raised inside the block pass through.
    """
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        current_app.logger.error(f"[storage-failure] action={action} error={exc}")
        raise StorageFailure(f"{action} failed") from exc
    except Exception:
        session.rollback()
        raise

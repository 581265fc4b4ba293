"""Shared service base: one SQLAlchemy session per request, committed by the service."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backoffice.database.db import SessionLocal

logger = logging.getLogger(__name__)


class BaseService:
    """Base class for pipeline services.

    A service given a session shares it with its collaborators and leaves
    closing it to whoever opened it. Without one, the service opens its own
    and closes it on ``close()`` or when used as a context manager.
    """

    def __init__(self, db: Session | None = None) -> None:
        self._owns_session = db is None
        self.db = db or SessionLocal()

    def commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def commit_unique(self) -> bool:
        """Commit; a unique-constraint violation rolls back and returns False."""
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning(
                "database.unique_violation",
                extra={"event": "database.unique_violation", "error": str(exc.orig)},
            )
            return False
        except Exception:
            self.db.rollback()
            raise
        return True

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        if self._owns_session:
            self.db.close()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()

"""Shared repository base."""

from __future__ import annotations

from sqlalchemy.orm import Session


class BaseRepository:
    """Repositories flush but never commit; the owning service controls the transaction."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity):
        self.session.add(entity)
        self.session.flush()
        return entity

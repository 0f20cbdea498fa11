"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import Iterator

from sqlalchemy.orm import Session

from .database import SessionLocal


def get_db() -> Iterator[Session]:
    """Yield a session for one request.

    Handlers commit their own work; anything left pending when a handler
    raises is rolled back before the session closes.
    """

    with SessionLocal() as db:
        try:
            yield db
        except Exception:
            db.rollback()
            raise

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Database unit of work implementation."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from authcore.domain.users.repositories import SessionStore, UnitOfWork
from authcore.infrastructure.repositories.users import SqlAlchemySessionStore
from authcore.shared.logging import logger


@dataclass(slots=True)
class SqlAlchemyUnitOfWork(AbstractContextManager, UnitOfWork):
    """SQLAlchemy-backed unit of work."""

    session_factory: Callable[[], Session]
    _session: Session | None = field(default=None, init=False, repr=False)
    _store: SqlAlchemySessionStore | None = field(default=None, init=False, repr=False)

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self.session_factory()
        self._store = SqlAlchemySessionStore(self._session)
        logger.debug("uow: session opened")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        assert self._session is not None
        try:
            if exc:
                logger.warning(f"uow: rollback due to {exc_type.__name__}")
                self._session.rollback()
            else:
                self._session.commit()
                logger.debug("uow: committed")
        except Exception:
            logger.exception("uow: exception while finalising")
            self._session.rollback()
            raise
        finally:
            self._session.close()
            logger.debug("uow: session closed")
            self._session = None
            self._store = None

    @property
    def store(self) -> SessionStore:
        if self._store is None:
            msg = "UnitOfWork store accessed before entering context"
            raise RuntimeError(msg)
        return self._store


def sqlalchemy_uow_factory(session_factory: Callable[[], Session]) -> Callable[[], UnitOfWork]:
    """Return a factory opening a fresh unit of work per operation."""

    def _factory() -> UnitOfWork:
        return SqlAlchemyUnitOfWork(session_factory)

    return _factory

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from authcore.domain.users.entities import SessionToken as DomainSessionToken
from authcore.domain.users.entities import UserRecord
from authcore.domain.users.exceptions import StoreConflictError
from authcore.domain.users.repositories import SessionStore
from authcore.infrastructure.db.models import User, UserAuthToken
from authcore.shared.logging import logger


def _utc(value: datetime | None) -> datetime | None:
    # Columns hold UTC wall time; SQLite drops the offset on the way back.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _to_user(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        uuid=row.uuid,
        username=row.username,
        email=row.email,
        salt=row.salt,
        password_digest=row.password,
        created_at=_utc(row.created_at),
    )


def _to_token(row: UserAuthToken) -> DomainSessionToken:
    return DomainSessionToken(
        id=row.id,
        uuid=row.uuid,
        user_id=row.user_id,
        user_uuid=row.user.uuid,
        access_token=row.access_token,
        issued_at=_utc(row.login_at),
        expires_at=_utc(row.expires_at),
        logged_out_at=_utc(row.logout_at),
    )


class SqlAlchemySessionStore(SessionStore):
    """Store adapter bound to the session of the current unit of work."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_user_by_username(self, username: str) -> UserRecord | None:
        row = self._session.scalars(select(User).where(User.username == username)).first()
        return _to_user(row) if row else None

    def find_user_by_email(self, email: str) -> UserRecord | None:
        row = self._session.scalars(select(User).where(User.email == email)).first()
        return _to_user(row) if row else None

    def find_user_by_uuid(self, uuid: str) -> UserRecord | None:
        row = self._session.scalars(select(User).where(User.uuid == uuid)).first()
        return _to_user(row) if row else None

    def create_user(self, user: UserRecord) -> UserRecord:
        row = User(
            uuid=user.uuid,
            username=user.username,
            email=user.email,
            salt=user.salt,
            password=user.password_digest,
            created_at=_utc(user.created_at),
        )
        self._session.add(row)
        try:
            self._session.flush()
        except IntegrityError as exc:
            # The transaction is unusable after a failed flush; nothing of it survives.
            self._session.rollback()
            field = "username" if self.find_user_by_username(user.username) else "email"
            logger.warning(f"store: unique constraint rejected new user on {field}")
            raise StoreConflictError(field) from exc
        return _to_user(row)

    def create_token(self, token: DomainSessionToken) -> DomainSessionToken:
        row = UserAuthToken(
            uuid=token.uuid,
            user_id=token.user_id,
            access_token=token.access_token,
            login_at=_utc(token.issued_at),
            expires_at=_utc(token.expires_at),
            logout_at=_utc(token.logged_out_at),
        )
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return _to_token(row)

    def find_token_by_value(self, access_token: str) -> DomainSessionToken | None:
        row = self._session.scalars(
            select(UserAuthToken).where(UserAuthToken.access_token == access_token)
        ).first()
        return _to_token(row) if row else None

    def update_token(self, token: DomainSessionToken) -> DomainSessionToken:
        row = self._session.scalars(
            select(UserAuthToken).where(UserAuthToken.uuid == token.uuid)
        ).one()
        row.logout_at = _utc(token.logged_out_at)
        self._session.flush()
        return _to_token(row)

from __future__ import annotations

import copy
from dataclasses import replace
from datetime import UTC, datetime, timedelta

import pytest

from authcore.application.services.authentication import AuthenticationService
from authcore.application.services.password_hashing import Pbkdf2CredentialHasher
from authcore.application.services.token_issuer import JwtTokenIssuer
from authcore.domain.users.entities import SessionToken, UserRecord
from authcore.domain.users.exceptions import StoreConflictError
from authcore.domain.users.repositories import SessionStore, UnitOfWork
from authcore.shared.config.settings import HashingConfig
from authcore.shared.logging import get_correlation_id


class FrozenClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class InMemorySessionStore(SessionStore):
    def __init__(self) -> None:
        self.users: dict[int, UserRecord] = {}
        self.tokens: dict[int, SessionToken] = {}
        self._seq = 1

    def _next_id(self) -> int:
        value = self._seq
        self._seq += 1
        return value

    def find_user_by_username(self, username: str) -> UserRecord | None:
        return next((u for u in self.users.values() if u.username == username), None)

    def find_user_by_email(self, email: str) -> UserRecord | None:
        return next((u for u in self.users.values() if u.email == email), None)

    def find_user_by_uuid(self, uuid: str) -> UserRecord | None:
        return next((u for u in self.users.values() if u.uuid == uuid), None)

    def create_user(self, user: UserRecord) -> UserRecord:
        if self.find_user_by_username(user.username):
            raise StoreConflictError("username")
        if self.find_user_by_email(user.email):
            raise StoreConflictError("email")
        stored = replace(user, id=self._next_id())
        self.users[stored.id] = stored
        return stored

    def create_token(self, token: SessionToken) -> SessionToken:
        stored = replace(token, id=self._next_id())
        self.tokens[stored.id] = stored
        return stored

    def find_token_by_value(self, access_token: str) -> SessionToken | None:
        return next(
            (t for t in self.tokens.values() if t.access_token == access_token), None
        )

    def update_token(self, token: SessionToken) -> SessionToken:
        assert token.id in self.tokens
        self.tokens[token.id] = token
        return token


class InMemoryUnitOfWork(UnitOfWork):
    """Applies the store changes of one block, or none of them."""

    def __init__(self, store: InMemorySessionStore) -> None:
        self._store = store
        self.commits = 0
        self.rollbacks = 0
        self.correlation_ids: list[str] = []

    def __enter__(self) -> InMemoryUnitOfWork:
        self.correlation_ids.append(get_correlation_id())
        self._snapshot = (
            copy.copy(self._store.users),
            copy.copy(self._store.tokens),
            self._store._seq,
        )
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc:
            self._store.users, self._store.tokens, self._store._seq = self._snapshot
            self.rollbacks += 1
        else:
            self.commits += 1

    @property
    def store(self) -> InMemorySessionStore:
        return self._store


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture()
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture()
def uow(store: InMemorySessionStore) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(store)


@pytest.fixture()
def hasher() -> Pbkdf2CredentialHasher:
    return Pbkdf2CredentialHasher(HashingConfig(iterations=100))


@pytest.fixture()
def issuer() -> JwtTokenIssuer:
    return JwtTokenIssuer()


@pytest.fixture()
def service(
    uow: InMemoryUnitOfWork,
    hasher: Pbkdf2CredentialHasher,
    issuer: JwtTokenIssuer,
    clock: FrozenClock,
) -> AuthenticationService:
    return AuthenticationService(
        uow_factory=lambda: uow,
        password_hasher=hasher,
        token_issuer=issuer,
        clock=clock,
    )

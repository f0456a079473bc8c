# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from .entities import SessionToken, UserRecord


class SessionStore(Protocol):
    def find_user_by_username(self, username: str) -> UserRecord | None: ...
    def find_user_by_email(self, email: str) -> UserRecord | None: ...
    def find_user_by_uuid(self, uuid: str) -> UserRecord | None: ...
    def create_user(self, user: UserRecord) -> UserRecord: ...
    def create_token(self, token: SessionToken) -> SessionToken: ...
    def find_token_by_value(self, access_token: str) -> SessionToken | None: ...
    def update_token(self, token: SessionToken) -> SessionToken: ...


class UnitOfWork(Protocol):
    """One transaction against the store; commits on clean exit, rolls back otherwise."""

    def __enter__(self) -> UnitOfWork: ...

    def __exit__(self, exc_type, exc, tb) -> None: ...

    @property
    def store(self) -> SessionStore: ...


class CredentialHasher(Protocol):
    def generate_salted_digest(self, plaintext: str) -> tuple[str, str]: ...
    def verify(self, plaintext: str, salt: str) -> str: ...
    def digests_match(self, candidate: str, stored: str) -> bool: ...


class TokenIssuer(Protocol):
    def issue(
        self, subject_id: str, issued_at: datetime, expires_at: datetime, secret: str
    ) -> str: ...
    def decode(self, token: str, secret: str) -> dict[str, Any]: ...

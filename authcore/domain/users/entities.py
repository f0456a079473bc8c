# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum


class TokenState(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    LOGGED_OUT = "logged_out"


@dataclass(slots=True, frozen=True)
class UserRecord:
    """A registered user. ``password_digest`` is derived from the secret and ``salt``."""

    id: int | None
    uuid: str
    username: str
    email: str
    salt: str
    password_digest: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class SessionToken:
    """Persisted session bound to one user.

    The row, not the token string, is authoritative for validity. A token is
    active while it has not been logged out and ``now`` is before its expiry.
    """

    id: int | None
    uuid: str
    user_id: int
    user_uuid: str
    access_token: str
    issued_at: datetime
    expires_at: datetime
    logged_out_at: datetime | None = None

    def state(self, now: datetime) -> TokenState:
        if self.logged_out_at is not None:
            return TokenState.LOGGED_OUT
        if now >= self.expires_at:
            return TokenState.EXPIRED
        return TokenState.ACTIVE

    def is_active(self, now: datetime) -> bool:
        return self.state(now) is TokenState.ACTIVE

    def logged_out(self, at: datetime) -> SessionToken:
        if self.logged_out_at is not None:
            return self
        return replace(self, logged_out_at=at)

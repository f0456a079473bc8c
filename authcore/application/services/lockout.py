# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Sign-in throttling layered over the authentication service."""

from __future__ import annotations

from datetime import timedelta

from authcore.application.services.authentication import AuthenticationService
from authcore.domain.result import Err, Result
from authcore.domain.users.entities import SessionToken
from authcore.domain.users.exceptions import (
    AccountLockedError,
    BadCredentialsError,
    UnknownUserError,
)
from authcore.infrastructure.audit import AuditAction, audit_log
from authcore.infrastructure.auth.login_attempts import LoginAttemptsTracker
from authcore.shared.logging import correlation_scope


class LockoutSignInPolicy:
    def __init__(
        self,
        *,
        service: AuthenticationService,
        tracker: LoginAttemptsTracker,
    ) -> None:
        self._service = service
        self._tracker = tracker

    def sign_in(
        self, username: str, password: str, *, ttl: timedelta | None = None
    ) -> Result[SessionToken]:
        with correlation_scope():
            return self._sign_in(username, password, ttl)

    def _sign_in(
        self, username: str, password: str, ttl: timedelta | None
    ) -> Result[SessionToken]:
        if self._tracker.is_locked(username):
            remaining = self._tracker.get_lockout_remaining(username)
            audit_log(
                AuditAction.SIGN_IN_LOCKED,
                details={"username": username, "remaining": round(remaining, 1)},
                success=False,
            )
            return Err(AccountLockedError(lockout_remaining=remaining))

        result = self._service.sign_in(username, password, ttl=ttl)
        if result.ok:
            self._tracker.record_attempt(username, success=True)
        elif isinstance(result.error, (BadCredentialsError, UnknownUserError)):
            self._tracker.record_attempt(username, success=False)
        return result

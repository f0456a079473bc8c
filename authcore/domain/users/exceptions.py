# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from authcore.shared.errors.base import DomainError, InfrastructureError


class AuthError(DomainError):
    code = "auth_error"


class DuplicateUsernameError(AuthError):
    code = "SGR-001"
    status = HTTPStatus.CONFLICT
    message = "Username already exists"


class DuplicateEmailError(AuthError):
    code = "SGR-002"
    status = HTTPStatus.CONFLICT
    message = "Email already exists"


class UnknownUserError(AuthError):
    code = "ATH-001"
    status = HTTPStatus.UNAUTHORIZED
    message = "This username does not exist"


class BadCredentialsError(AuthError):
    code = "ATH-002"
    status = HTTPStatus.UNAUTHORIZED
    message = "Password failed"


class AccountLockedError(AuthError):
    code = "ATH-003"
    status = HTTPStatus.TOO_MANY_REQUESTS
    message = "Too many failed sign-in attempts"

    def __init__(self, lockout_remaining: float = 0) -> None:
        super().__init__(context={"lockout_remaining_seconds": round(lockout_remaining, 1)})


class NotSignedInError(AuthError):
    code = "SGO-001"
    status = HTTPStatus.UNAUTHORIZED
    message = "User is not signed in"


class StoreConflictError(InfrastructureError):
    """Raised by a store when a unique constraint rejects a write."""

    def __init__(self, field: str) -> None:
        super().__init__(
            "store_conflict",
            status=HTTPStatus.CONFLICT,
            context={"field": field},
        )
        self.field = field

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from collections.abc import Callable

from authcore.domain.result import Err, Ok, Result
from authcore.domain.users.entities import UserRecord
from authcore.domain.users.exceptions import (
    AuthError,
    DuplicateEmailError,
    DuplicateUsernameError,
    StoreConflictError,
)
from authcore.domain.users.repositories import CredentialHasher, SessionStore, UnitOfWork
from authcore.infrastructure.audit import AuditAction, audit_log
from authcore.shared.utils.clock import Clock, utcnow


class SignUpUserUseCase:
    def __init__(
        self,
        *,
        uow_factory: Callable[[], UnitOfWork],
        password_hasher: CredentialHasher,
        clock: Clock = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._password_hasher = password_hasher
        self._clock = clock

    def execute(self, username: str, email: str, password: str) -> Result[UserRecord]:
        try:
            with self._uow_factory() as uow:
                user = self._sign_up(uow.store, username, email, password)
        except AuthError as exc:
            audit_log(
                AuditAction.SIGN_UP_REJECTED,
                details={"username": username, "reason": exc.code},
                success=False,
            )
            return Err(exc)

        audit_log(AuditAction.SIGN_UP, user_id=user.uuid, details={"username": username})
        return Ok(user)

    def _sign_up(
        self, store: SessionStore, username: str, email: str, password: str
    ) -> UserRecord:
        # Username wins when both collide.
        if store.find_user_by_username(username) is not None:
            raise DuplicateUsernameError()
        if store.find_user_by_email(email) is not None:
            raise DuplicateEmailError()

        salt, digest = self._password_hasher.generate_salted_digest(password)
        user = UserRecord(
            id=None,
            uuid=str(uuid.uuid4()),
            username=username,
            email=email,
            salt=salt,
            password_digest=digest,
            created_at=self._clock(),
        )
        try:
            return store.create_user(user)
        except StoreConflictError as exc:
            if exc.field == "username":
                raise DuplicateUsernameError() from exc
            raise DuplicateEmailError() from exc

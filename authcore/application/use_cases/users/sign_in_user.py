# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import timedelta

from authcore.domain.result import Err, Ok, Result
from authcore.domain.users.entities import SessionToken
from authcore.domain.users.exceptions import (
    AuthError,
    BadCredentialsError,
    UnknownUserError,
)
from authcore.domain.users.repositories import (
    CredentialHasher,
    SessionStore,
    TokenIssuer,
    UnitOfWork,
)
from authcore.infrastructure.audit import AuditAction, audit_log
from authcore.shared.utils.clock import Clock, utcnow

DEFAULT_TOKEN_TTL = timedelta(hours=8)


class SignInUserUseCase:
    def __init__(
        self,
        *,
        uow_factory: Callable[[], UnitOfWork],
        password_hasher: CredentialHasher,
        token_issuer: TokenIssuer,
        token_ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Clock = utcnow,
    ) -> None:
        if token_ttl <= timedelta(0):
            raise ValueError(f"token ttl must be positive, got {token_ttl}")
        self._uow_factory = uow_factory
        self._password_hasher = password_hasher
        self._token_issuer = token_issuer
        self._token_ttl = token_ttl
        self._clock = clock

    def execute(
        self, username: str, password: str, *, ttl: timedelta | None = None
    ) -> Result[SessionToken]:
        ttl = ttl if ttl is not None else self._token_ttl
        if ttl <= timedelta(0):
            raise ValueError(f"token ttl must be positive, got {ttl}")
        try:
            with self._uow_factory() as uow:
                token = self._sign_in(uow.store, username, password, ttl)
        except AuthError as exc:
            audit_log(
                AuditAction.SIGN_IN_FAILED,
                details={"username": username, "reason": exc.code},
                success=False,
            )
            return Err(exc)

        audit_log(AuditAction.SIGN_IN_SUCCESS, user_id=token.user_uuid)
        return Ok(token)

    def _sign_in(
        self, store: SessionStore, username: str, password: str, ttl: timedelta
    ) -> SessionToken:
        user = store.find_user_by_username(username)
        if user is None:
            raise UnknownUserError()

        digest = self._password_hasher.verify(password, user.salt)
        if not self._password_hasher.digests_match(digest, user.password_digest):
            raise BadCredentialsError()

        issued_at = self._clock()
        expires_at = issued_at + ttl
        access_token = self._token_issuer.issue(user.uuid, issued_at, expires_at, digest)
        assert user.id is not None
        return store.create_token(
            SessionToken(
                id=None,
                uuid=str(uuid.uuid4()),
                user_id=user.id,
                user_uuid=user.uuid,
                access_token=access_token,
                issued_at=issued_at,
                expires_at=expires_at,
            )
        )

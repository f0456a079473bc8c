# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta

from authcore.application.use_cases.users.sign_in_user import (
    DEFAULT_TOKEN_TTL,
    SignInUserUseCase,
)
from authcore.application.use_cases.users.sign_out_user import SignOutUserUseCase
from authcore.application.use_cases.users.sign_up_user import SignUpUserUseCase
from authcore.domain.result import Result
from authcore.domain.users.entities import SessionToken, UserRecord
from authcore.domain.users.repositories import CredentialHasher, TokenIssuer, UnitOfWork
from authcore.shared.logging import correlation_scope
from authcore.shared.utils.clock import Clock, utcnow


class AuthenticationService:
    """Sign-up, sign-in and sign-out over one store.

    Each call runs under its own correlation id and opens its own unit of
    work from ``uow_factory``. No records are kept between calls. Failures
    come back as ``Err`` values carrying the matching ``AuthError``.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], UnitOfWork],
        password_hasher: CredentialHasher,
        token_issuer: TokenIssuer,
        token_ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Clock = utcnow,
    ) -> None:
        self._sign_up = SignUpUserUseCase(
            uow_factory=uow_factory, password_hasher=password_hasher, clock=clock
        )
        self._sign_in = SignInUserUseCase(
            uow_factory=uow_factory,
            password_hasher=password_hasher,
            token_issuer=token_issuer,
            token_ttl=token_ttl,
            clock=clock,
        )
        self._sign_out = SignOutUserUseCase(uow_factory=uow_factory, clock=clock)

    def sign_up(self, username: str, email: str, password: str) -> Result[UserRecord]:
        with correlation_scope():
            return self._sign_up.execute(username, email, password)

    def sign_in(
        self, username: str, password: str, *, ttl: timedelta | None = None
    ) -> Result[SessionToken]:
        with correlation_scope():
            return self._sign_in.execute(username, password, ttl=ttl)

    def sign_out(self, access_token: str) -> Result[SessionToken]:
        with correlation_scope():
            return self._sign_out.execute(access_token)

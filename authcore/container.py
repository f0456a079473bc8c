# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from authcore.application.services.authentication import AuthenticationService
from authcore.application.services.lockout import LockoutSignInPolicy
from authcore.application.services.password_hashing import Pbkdf2CredentialHasher
from authcore.application.services.token_issuer import JwtTokenIssuer
from authcore.domain.users.repositories import UnitOfWork
from authcore.infrastructure.auth.login_attempts import LoginAttemptsTracker
from authcore.infrastructure.db import build_engine, build_session_factory, init_db
from authcore.infrastructure.unit_of_work import sqlalchemy_uow_factory
from authcore.shared.config import AppConfig, load_config
from authcore.shared.logging import logger, setup_logging
from authcore.shared.utils.clock import Clock, utcnow


class Container:
    def __init__(self, config: AppConfig | None = None, *, clock: Clock = utcnow) -> None:
        self.config = config or load_config()
        self.clock = clock

    @cached_property
    def engine(self) -> Engine:
        engine = build_engine(self.config.database)
        init_db(engine)
        return engine

    @cached_property
    def session_factory(self) -> Callable[[], Session]:
        return build_session_factory(self.engine)

    @cached_property
    def uow_factory(self) -> Callable[[], UnitOfWork]:
        return sqlalchemy_uow_factory(self.session_factory)

    @cached_property
    def password_hasher(self) -> Pbkdf2CredentialHasher:
        return Pbkdf2CredentialHasher(self.config.hashing)

    @cached_property
    def token_issuer(self) -> JwtTokenIssuer:
        return JwtTokenIssuer(self.config.token)

    @cached_property
    def authentication_service(self) -> AuthenticationService:
        return AuthenticationService(
            uow_factory=self.uow_factory,
            password_hasher=self.password_hasher,
            token_issuer=self.token_issuer,
            token_ttl=timedelta(hours=self.config.token.ttl_hours),
            clock=self.clock,
        )

    @cached_property
    def login_attempts_tracker(self) -> LoginAttemptsTracker:
        lockout = self.config.lockout
        return LoginAttemptsTracker(
            max_attempts=lockout.max_attempts,
            lockout_duration=lockout.duration,
            attempt_window=lockout.window,
        )

    @cached_property
    def lockout_policy(self) -> LockoutSignInPolicy:
        return LockoutSignInPolicy(
            service=self.authentication_service,
            tracker=self.login_attempts_tracker,
        )

    @cached_property
    def sign_in_policy(self) -> LockoutSignInPolicy | AuthenticationService:
        if self.config.lockout.enabled:
            return self.lockout_policy
        return self.authentication_service


def create_container(config: AppConfig | None = None) -> Container:
    config = config or load_config()
    setup_logging(config.log_level, config.log_file)
    logger.info(f"authcore: starting in {config.app_env} mode")
    return Container(config)

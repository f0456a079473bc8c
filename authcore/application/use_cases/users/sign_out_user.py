"""Use-case for signing a session token out."""

from __future__ import annotations

from collections.abc import Callable

from authcore.domain.result import Err, Ok, Result
from authcore.domain.users.entities import SessionToken, TokenState
from authcore.domain.users.exceptions import AuthError, NotSignedInError
from authcore.domain.users.repositories import SessionStore, UnitOfWork
from authcore.infrastructure.audit import AuditAction, audit_log
from authcore.shared.logging import logger
from authcore.shared.utils.clock import Clock, utcnow


class SignOutUserUseCase:
    """Marks a token as logged out.

    Expired tokens can still be signed out. A token that is already logged
    out is returned unchanged, so repeating the call succeeds and keeps the
    first ``logged_out_at``.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], UnitOfWork],
        clock: Clock = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def execute(self, access_token: str) -> Result[SessionToken]:
        try:
            with self._uow_factory() as uow:
                token = self._sign_out(uow.store, access_token)
        except AuthError as exc:
            audit_log(AuditAction.SIGN_OUT_REJECTED, details={"reason": exc.code}, success=False)
            return Err(exc)

        audit_log(AuditAction.SIGN_OUT, user_id=token.user_uuid)
        return Ok(token)

    def _sign_out(self, store: SessionStore, access_token: str) -> SessionToken:
        token = store.find_token_by_value(access_token) if access_token else None
        if token is None:
            raise NotSignedInError()

        now = self._clock()
        state = token.state(now)
        if state is TokenState.LOGGED_OUT:
            logger.debug(f"sign_out: token {token.uuid} already logged out")
            return token
        if state is TokenState.EXPIRED:
            logger.info(f"sign_out: token {token.uuid} expired before sign-out")
        return store.update_token(token.logged_out(now))

from __future__ import annotations

from datetime import timedelta

import pytest

from authcore.application.services.authentication import AuthenticationService
from authcore.application.use_cases.users.sign_up_user import SignUpUserUseCase
from authcore.domain import Err, Ok, TokenState
from authcore.domain.users.exceptions import (
    BadCredentialsError,
    DuplicateEmailError,
    DuplicateUsernameError,
    NotSignedInError,
    StoreConflictError,
    UnknownUserError,
)
from authcore.shared.logging import get_correlation_id

from .conftest import InMemorySessionStore, InMemoryUnitOfWork


def test_sign_up_persists_salted_digest(
    service: AuthenticationService, store: InMemorySessionStore
) -> None:
    result = service.sign_up("alice", "a@x.com", "pw")

    assert isinstance(result, Ok)
    user = result.value
    assert user.id is not None
    assert user.username == "alice"
    assert user.email == "a@x.com"
    assert user.password_digest != "pw"
    assert user.salt
    assert store.find_user_by_uuid(user.uuid) == user


def test_same_password_never_stores_same_digest(service: AuthenticationService) -> None:
    first = service.sign_up("alice", "a@x.com", "pw").unwrap()
    second = service.sign_up("bob", "b@x.com", "pw").unwrap()
    assert first.salt != second.salt
    assert first.password_digest != second.password_digest


def test_sign_up_duplicate_username(
    service: AuthenticationService, store: InMemorySessionStore
) -> None:
    service.sign_up("alice", "a@x.com", "pw")

    result = service.sign_up("alice", "b@x.com", "pw2")

    assert isinstance(result, Err)
    assert isinstance(result.error, DuplicateUsernameError)
    assert store.find_user_by_email("b@x.com") is None


def test_sign_up_duplicate_email(service: AuthenticationService) -> None:
    service.sign_up("bob", "c@x.com", "pw")

    result = service.sign_up("carol", "c@x.com", "pw2")

    assert isinstance(result.error, DuplicateEmailError)


def test_sign_up_username_checked_before_email(service: AuthenticationService) -> None:
    service.sign_up("alice", "a@x.com", "pw")

    result = service.sign_up("alice", "a@x.com", "pw")

    assert isinstance(result.error, DuplicateUsernameError)


class _RacingStore(InMemorySessionStore):
    """Lookups miss, as if a concurrent sign-up committed in between."""

    def __init__(self, field: str) -> None:
        super().__init__()
        self._field = field

    def find_user_by_username(self, username):
        return None

    def find_user_by_email(self, email):
        return None

    def create_user(self, user):
        raise StoreConflictError(self._field)


def test_constraint_violation_maps_to_duplicate_errors(hasher) -> None:
    for field, expected in (("username", DuplicateUsernameError), ("email", DuplicateEmailError)):
        uow = InMemoryUnitOfWork(_RacingStore(field))
        use_case = SignUpUserUseCase(uow_factory=lambda: uow, password_hasher=hasher)

        result = use_case.execute("alice", "a@x.com", "pw")

        assert isinstance(result.error, expected)
        assert uow.rollbacks == 1


def test_sign_in_unknown_user(service: AuthenticationService) -> None:
    result = service.sign_in("nouser", "anything")
    assert isinstance(result.error, UnknownUserError)


def test_sign_in_bad_credentials_persists_nothing(
    service: AuthenticationService, store: InMemorySessionStore
) -> None:
    service.sign_up("dave", "d@x.com", "secret")

    result = service.sign_in("dave", "wrong")

    assert isinstance(result.error, BadCredentialsError)
    assert store.tokens == {}


def test_sign_in_issues_eight_hour_token(
    service: AuthenticationService, store: InMemorySessionStore, clock
) -> None:
    user = service.sign_up("dave", "d@x.com", "secret").unwrap()

    token = service.sign_in("dave", "secret").unwrap()

    assert token.user_id == user.id
    assert token.user_uuid == user.uuid
    assert token.issued_at == clock.now
    assert token.expires_at - token.issued_at == timedelta(hours=8)
    assert token.logged_out_at is None
    assert token.state(clock.now) is TokenState.ACTIVE
    assert store.find_token_by_value(token.access_token) == token


def test_sign_in_ttl_override(service: AuthenticationService) -> None:
    service.sign_up("dave", "d@x.com", "secret")

    token = service.sign_in("dave", "secret", ttl=timedelta(minutes=30)).unwrap()

    assert token.expires_at - token.issued_at == timedelta(minutes=30)


def test_token_signed_with_sign_in_digest(
    service: AuthenticationService, store: InMemorySessionStore, issuer
) -> None:
    user = service.sign_up("dave", "d@x.com", "secret").unwrap()
    token = service.sign_in("dave", "secret").unwrap()

    claims = issuer.decode(token.access_token, user.password_digest)

    assert claims["sub"] == user.uuid


def test_rapid_sign_ins_yield_distinct_tokens(service: AuthenticationService) -> None:
    service.sign_up("dave", "d@x.com", "secret")

    first = service.sign_in("dave", "secret").unwrap()
    second = service.sign_in("dave", "secret").unwrap()

    assert first.access_token != second.access_token
    assert first.issued_at == second.issued_at


def test_sign_out_marks_token(service: AuthenticationService, clock) -> None:
    service.sign_up("dave", "d@x.com", "secret")
    token = service.sign_in("dave", "secret").unwrap()
    clock.advance(timedelta(minutes=10))

    signed_out = service.sign_out(token.access_token).unwrap()

    assert signed_out.logged_out_at == clock.now
    assert signed_out.state(clock.now) is TokenState.LOGGED_OUT


def test_second_sign_out_succeeds_and_keeps_timestamp(
    service: AuthenticationService, clock
) -> None:
    service.sign_up("dave", "d@x.com", "secret")
    token = service.sign_in("dave", "secret").unwrap()
    first = service.sign_out(token.access_token).unwrap()
    clock.advance(timedelta(minutes=10))

    second = service.sign_out(token.access_token)

    assert isinstance(second, Ok)
    assert second.value.logged_out_at == first.logged_out_at


def test_sign_out_of_expired_token_is_allowed(service: AuthenticationService, clock) -> None:
    service.sign_up("dave", "d@x.com", "secret")
    token = service.sign_in("dave", "secret").unwrap()
    clock.advance(timedelta(hours=9))

    signed_out = service.sign_out(token.access_token).unwrap()

    assert signed_out.logged_out_at == clock.now
    assert signed_out.state(clock.now) is TokenState.LOGGED_OUT


def test_sign_out_unknown_token(service: AuthenticationService) -> None:
    assert isinstance(service.sign_out("not-a-real-token").error, NotSignedInError)
    assert isinstance(service.sign_out("").error, NotSignedInError)


def test_sign_out_leaves_other_tokens_active(
    service: AuthenticationService, store: InMemorySessionStore, clock
) -> None:
    service.sign_up("dave", "d@x.com", "secret")
    first = service.sign_in("dave", "secret").unwrap()
    second = service.sign_in("dave", "secret").unwrap()

    service.sign_out(first.access_token)

    assert store.find_token_by_value(second.access_token).is_active(clock.now)
    assert not store.find_token_by_value(first.access_token).is_active(clock.now)


def test_sign_in_rejects_non_positive_ttl(
    service: AuthenticationService, store: InMemorySessionStore
) -> None:
    service.sign_up("dave", "d@x.com", "secret")

    for ttl in (timedelta(0), timedelta(minutes=-5)):
        with pytest.raises(ValueError):
            service.sign_in("dave", "secret", ttl=ttl)

    assert store.tokens == {}


def test_service_rejects_non_positive_default_ttl(uow, hasher, issuer) -> None:
    with pytest.raises(ValueError):
        AuthenticationService(
            uow_factory=lambda: uow,
            password_hasher=hasher,
            token_issuer=issuer,
            token_ttl=timedelta(0),
        )


def test_each_operation_runs_under_its_own_correlation_id(
    service: AuthenticationService, uow: InMemoryUnitOfWork
) -> None:
    service.sign_up("dave", "d@x.com", "secret")
    token = service.sign_in("dave", "secret").unwrap()
    service.sign_out(token.access_token)

    assert len(uow.correlation_ids) == 3
    assert "-" not in uow.correlation_ids
    assert len(set(uow.correlation_ids)) == 3
    assert get_correlation_id() == "-"

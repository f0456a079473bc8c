# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import SessionToken, TokenState, UserRecord
from .exceptions import (
    AccountLockedError,
    AuthError,
    BadCredentialsError,
    DuplicateEmailError,
    DuplicateUsernameError,
    NotSignedInError,
    StoreConflictError,
    UnknownUserError,
)
from .repositories import CredentialHasher, SessionStore, TokenIssuer, UnitOfWork

__all__ = [
    "AccountLockedError",
    "AuthError",
    "BadCredentialsError",
    "CredentialHasher",
    "DuplicateEmailError",
    "DuplicateUsernameError",
    "NotSignedInError",
    "SessionStore",
    "SessionToken",
    "StoreConflictError",
    "TokenIssuer",
    "TokenState",
    "UnitOfWork",
    "UnknownUserError",
    "UserRecord",
]

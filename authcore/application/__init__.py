# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.authentication import AuthenticationService
from .services.lockout import LockoutSignInPolicy
from .use_cases.users.sign_in_user import SignInUserUseCase
from .use_cases.users.sign_out_user import SignOutUserUseCase
from .use_cases.users.sign_up_user import SignUpUserUseCase

__all__ = [
    "AuthenticationService",
    "LockoutSignInPolicy",
    "SignInUserUseCase",
    "SignOutUserUseCase",
    "SignUpUserUseCase",
]

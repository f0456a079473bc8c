# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Tagged success/failure values returned by the authentication operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar

from authcore.domain.users.exceptions import AuthError

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> T:
        return self.value


@dataclass(slots=True, frozen=True)
class Err:
    error: AuthError

    @property
    def ok(self) -> bool:
        return False

    @property
    def code(self) -> str:
        return self.error.code

    def unwrap(self) -> NoReturn:
        raise self.error


Result = Ok[T] | Err

__all__ = ["Err", "Ok", "Result"]

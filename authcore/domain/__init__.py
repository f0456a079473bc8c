# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .result import Err, Ok, Result
from .users import SessionToken, TokenState, UserRecord

__all__ = ["Err", "Ok", "Result", "SessionToken", "TokenState", "UserRecord"]

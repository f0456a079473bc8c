# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .sqlalchemy_session_store import SqlAlchemySessionStore

__all__ = ["SqlAlchemySessionStore"]

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from datetime import datetime
from typing import Any

from jose import jwt

from authcore.domain.users.repositories import TokenIssuer
from authcore.shared.config.settings import TokenConfig


class JwtTokenIssuer(TokenIssuer):
    """Signs session tokens with a per-sign-in secret.

    The secret is the password digest computed for that sign-in, so a token
    cannot be forged from the subject and timestamps alone. A random ``jti``
    keeps two issuances with identical inputs distinct.
    """

    def __init__(self, config: TokenConfig | None = None) -> None:
        self._config = config or TokenConfig()  # type: ignore[call-arg]

    def issue(
        self, subject_id: str, issued_at: datetime, expires_at: datetime, secret: str
    ) -> str:
        claims = {
            "iss": self._config.issuer,
            "sub": subject_id,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }
        return jwt.encode(claims, secret, algorithm=self._config.algorithm)

    def decode(self, token: str, secret: str) -> dict[str, Any]:
        # Expiry is decided by the persisted row, not the claim.
        return jwt.decode(
            token,
            secret,
            algorithms=[self._config.algorithm],
            options={"verify_exp": False},
        )

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import Enum
from typing import Any

from authcore.shared.logging import logger


class AuditAction(str, Enum):
    SIGN_UP = "sign_up"
    SIGN_UP_REJECTED = "sign_up_rejected"
    SIGN_IN_SUCCESS = "sign_in_success"
    SIGN_IN_FAILED = "sign_in_failed"
    SIGN_IN_LOCKED = "sign_in_locked"
    SIGN_OUT = "sign_out"
    SIGN_OUT_REJECTED = "sign_out_rejected"


class AuditLogger:
    @staticmethod
    def log(
        action: AuditAction,
        user_id: str | None = None,
        details: dict[str, Any] | None = None,
        success: bool = True,
    ) -> None:
        safe_details = _sanitize_details(details) if details else {}

        log_message = f"AUDIT: {action.value} | user_id={user_id} | success={success}"
        if safe_details:
            log_message += f" | details={safe_details}"

        if success:
            logger.info(log_message)
        else:
            logger.warning(log_message)


def _sanitize_details(details: dict[str, Any]) -> dict[str, Any]:
    sensitive_keys = {
        "password",
        "token",
        "salt",
        "digest",
        "secret",
        "email",
    }

    sanitized = {}
    for key, value in details.items():
        key_lower = key.lower()

        if any(sensitive in key_lower for sensitive in sensitive_keys):
            sanitized[key] = "***REDACTED***"
        else:
            sanitized[key] = value

    return sanitized


audit = AuditLogger()


def audit_log(
    action: AuditAction,
    user_id: str | None = None,
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> None:
    audit.log(action, user_id, details, success)


__all__ = [
    "AuditAction",
    "AuditLogger",
    "audit",
    "audit_log",
]

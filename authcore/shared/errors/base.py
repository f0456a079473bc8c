# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    message: str = ""
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message or self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.message:
            payload["message"] = self.message
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        message: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(self, "code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(self, "status", HTTPStatus.BAD_REQUEST)
        )
        resolved_message = message or cast(str, getattr(self, "message", ""))
        super().__init__(
            code=resolved_code,
            status=resolved_status,
            message=resolved_message,
            context=context,
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus | None = None,
        message: str = "",
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(code=code, status=resolved_status, message=message, context=context)

"""Domain errors raised by the depth chart services.

Every error carries a machine-readable ``kind`` and a human ``message``;
``main.py`` renders them as ``{"kind": ..., "message": ...}``.
"""

from __future__ import annotations

from typing import Any


class DepthChartError(Exception):
    kind = "error"
    status_code = 400

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"kind": self.kind, "message": self.message}
        if self.extra:
            body.update(self.extra)
        return body


class ValidationError(DepthChartError):
    """Malformed input: empty names, duplicate codes, unusable depth orders."""

    kind = "validation"
    status_code = 422


class ConflictError(DepthChartError):
    """Business rule violation, e.g. player already in the slot."""

    kind = "conflict"
    status_code = 409


class NotFoundError(DepthChartError):
    kind = "not_found"
    status_code = 404


class AuthorizationError(DepthChartError):
    kind = "authorization"
    status_code = 403


class OperationTimeout(DepthChartError):
    """A long operation ran past its deadline and was rolled back."""

    kind = "timeout"
    status_code = 503

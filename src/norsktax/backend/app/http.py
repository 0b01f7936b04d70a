"""HTTP helper utilities shared across Flask blueprints."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Mapping

from flask import jsonify

from norsktax.backend.app.models import InvalidArgumentError
from norsktax.backend.config.schema import ConfigurationError


@dataclass(frozen=True)
class ProblemResponse:
    """Lightweight representation of an RFC 7807-style error payload."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] | None = None

    @property
    def title(self) -> str:
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Error"

    def as_dict(self) -> dict[str, Any]:
        """Return the serialisable payload for this problem response."""

        payload: dict[str, Any] = {
            "error": self.error,
            "title": self.title,
            "status": self.status,
        }
        if self.message:
            payload["message"] = self.message
        if self.extra:
            payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Any, int]:
        """Convert the problem payload into a Flask response tuple."""

        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Convenience factory mirroring Flask's ``jsonify`` interface."""

    additional: Mapping[str, Any] | None = extra or None
    return ProblemResponse(error=error, status=status, message=message, extra=additional)


def problem_for_exception(error: Exception) -> ProblemResponse:
    """Map a domain exception onto the problem payload returned to clients."""

    if isinstance(error, FileNotFoundError):
        return problem_response("not_found", status=404, message=str(error))
    if isinstance(error, ConfigurationError):
        return problem_response("configuration_error", status=400, message=str(error))
    if isinstance(error, InvalidArgumentError):
        return problem_response("invalid_argument", status=400, message=str(error))
    return problem_response("validation_error", status=400, message=str(error))


__all__ = ["ProblemResponse", "problem_for_exception", "problem_response"]

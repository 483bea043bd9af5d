"""
Error taxonomy for GH Score.

Every error raised by the service layer derives from GHScoreError and
carries the HTTP status and machine-readable code the API renders.
"""

from typing import Any, Optional


class GHScoreError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for an API response body."""
        body: dict[str, Any] = {"error": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(GHScoreError):
    """Missing or malformed fields; correctable by the user."""

    status_code = 422
    code = "validation_error"

    @classmethod
    def from_pydantic(cls, exc: Any, message: str = "Invalid input") -> "ValidationError":
        """Build from a pydantic ValidationError, keeping field-level errors."""
        fields = [
            {
                "field": ".".join(str(p) for p in err.get("loc", ())),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        return cls(message, details=fields)


class NotFoundError(GHScoreError):
    """Unknown identifier."""

    status_code = 404
    code = "not_found"


class AuthError(GHScoreError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    code = "unauthorized"


class ForbiddenError(AuthError):
    """Authenticated, but the role does not allow the operation."""

    status_code = 403
    code = "forbidden"


class ConflictError(GHScoreError):
    """The operation collides with existing state (duplicates, dependents)."""

    status_code = 409
    code = "conflict"


class StoreError(GHScoreError):
    """The store rejected or failed a write."""

    status_code = 503
    code = "store_unavailable"


class UpstreamDegraded(GHScoreError):
    """An external provider is unavailable; callers fall back to defaults."""

    status_code = 502
    code = "upstream_degraded"

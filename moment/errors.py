"""Error taxonomy shared by the store, policy and services.

Every error is an HTTPException so routes can let them propagate; the
handlers in main.py render them as {"error": "<message>"}.
"""

from typing import Optional

from fastapi import HTTPException


class MomentError(HTTPException):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=message or self.default_message,
            headers=headers,
        )

    @property
    def message(self) -> str:
        return self.detail


class ValidationError(MomentError):
    status_code = 400
    default_message = "Invalid request"


class Unauthenticated(MomentError):
    status_code = 401
    default_message = "Unauthorized - No token provided"


class Forbidden(MomentError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(MomentError):
    status_code = 404
    default_message = "Not found"


class Conflict(MomentError):
    status_code = 409
    default_message = "Resource already exists"


class UpstreamFailure(MomentError):
    status_code = 500
    default_message = "Upstream service failure"

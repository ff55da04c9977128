"""
Domain errors raised by services and rendered by the API error handler.

Each error carries the HTTP status it maps to, so services stay free of
FastAPI imports while routes stay free of status-code decisions.
"""

from typing import Optional


class AppError(Exception):
    status_code: int = 500
    error: str = "InternalServerError"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.error
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.status_code, "error": self.error, "message": self.message}


class BadRequestError(AppError):
    status_code = 400
    error = "BadRequest"


class UnauthorizedError(AppError):
    status_code = 401
    error = "Unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    error = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    error = "NotFound"


class ConflictError(AppError):
    status_code = 409
    error = "Conflict"


class GoneError(AppError):
    status_code = 410
    error = "Gone"


class UnprocessableEntityError(AppError):
    status_code = 422
    error = "UnprocessableEntity"

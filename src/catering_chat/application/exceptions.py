from __future__ import annotations


class AppError(Exception):
    """Base application error.

    ``code`` and ``status_code`` feed the ``{ok: false, error: {...}}`` envelope.
    """

    code = "SERVER_ERROR"
    status_code = 500

    def __init__(self, detail: str = "Bir hata oluştu") -> None:
        self.detail = detail
        super().__init__(detail)


class UnauthorizedError(AppError):
    code = "UNAUTHORIZED"
    status_code = 401


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404


class ForbiddenError(AppError):
    code = "FORBIDDEN"
    status_code = 403


class ConflictError(AppError):
    code = "CONFLICT"
    status_code = 409


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    status_code = 400


class InvalidStatusError(AppError):
    code = "INVALID_STATUS"
    status_code = 400


class QuoteExpiredError(AppError):
    code = "EXPIRED"
    status_code = 400


class RateLimitedError(AppError):
    code = "RATE_LIMITED"
    status_code = 429

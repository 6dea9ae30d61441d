"""Domain errors surfaced to clients as ``{error, flash, cta}`` responses.

Services raise these; the handlers registered in ``app.main`` turn them into
JSON. The ``flash`` text of an ``AppError`` is always safe to show to users.
"""
from http import HTTPStatus


class AppError(Exception):
    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    code: str = "AppError"
    default_flash: str = "An internal server error occurred."

    def __init__(self, flash: str | None = None, cta: str | None = None):
        self.flash = flash or self.default_flash
        self.cta = cta
        super().__init__(self.flash)

    def descriptor(self) -> dict:
        return {
            "status": int(self.status_code),
            "error": HTTPStatus(self.status_code).phrase,
            "code": self.code,
        }


class ValidationError(AppError):
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY
    code = "ValidationError"
    default_flash = "The submitted data is invalid."


class Conflict(AppError):
    status_code = HTTPStatus.CONFLICT
    code = "Conflict"
    default_flash = "That resource already exists."


class EmailTaken(Conflict):
    code = "EmailTaken"
    default_flash = "A user with this email already exists. Please use a different email address."


class SlugConflict(Conflict):
    code = "SlugConflict"
    default_flash = "A page with this slug already exists. Please choose a different slug."


class NotFound(AppError):
    status_code = HTTPStatus.NOT_FOUND
    code = "NotFound"
    default_flash = "The requested resource does not exist."


class UserNotFound(NotFound):
    code = "UserNotFound"
    default_flash = "We were unable to find a user associated with that email address."


class PageNotFound(NotFound):
    code = "PageNotFound"
    default_flash = "That page does not exist."


class TokenInvalidOrExpired(AppError):
    status_code = HTTPStatus.BAD_REQUEST
    code = "TokenInvalidOrExpired"
    default_flash = "We were unable to verify your email address. That link may have expired."


class InvalidCredentials(AppError):
    status_code = HTTPStatus.UNAUTHORIZED
    code = "InvalidCredentials"
    default_flash = (
        "The email or password that you provided does not match our records. "
        "Do you need to register for an account?"
    )


class EmailNotVerified(AppError):
    status_code = HTTPStatus.FORBIDDEN
    code = "EmailNotVerified"
    default_flash = (
        "You have not verified your email address. "
        "Please check your email for a verification link or request a new one."
    )


class Unauthenticated(AppError):
    status_code = HTTPStatus.UNAUTHORIZED
    code = "Unauthenticated"
    default_flash = "Please log in to continue."


class Forbidden(AppError):
    status_code = HTTPStatus.FORBIDDEN
    code = "Forbidden"
    default_flash = "You do not have permission to access this resource."


class UpstreamFailure(AppError):
    status_code = HTTPStatus.BAD_GATEWAY
    code = "UpstreamFailure"
    default_flash = "A service we depend on failed. Please try again later."

"""Error taxonomy shared by the repositories, the auth layer and the routes.

Every error carries the HTTP status it maps to; ``main`` turns them into the
``{"success": false, "error": ...}`` envelope.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Already exists"


# Auth failures. Callers treat all of them as "unauthenticated"; the concrete
# class is kept for logging.
class AuthError(AppError):
    status_code = 401
    default_message = "Invalid token."


class Unauthenticated(AuthError):
    default_message = "Access denied. No token provided."


class InvalidCredentials(AuthError):
    default_message = "Invalid credentials"


class MalformedToken(AuthError):
    default_message = "Invalid token."


class InvalidSignature(AuthError):
    default_message = "Invalid token."


class InvalidTokenType(AuthError):
    default_message = "Invalid token type"


class TokenExpired(AuthError):
    default_message = "Token expired. Please login again."


# Store failures. Reads degrade, writes propagate.
class StoreUnavailable(AppError):
    status_code = 500
    default_message = "Data store unavailable"


class StoreNotConfigured(StoreUnavailable):
    default_message = "Google Sheets not configured"

"""
Application error taxonomy.

Every error carries the HTTP status it maps to; ``main.py`` registers a single
handler for ``LMSException`` that renders ``{"error": ..., "type": ...}``.
"""


class LMSException(Exception):
    status_code = 400
    error_type = "error"

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(LMSException):
    status_code = 400
    error_type = "validation_error"


class AuthenticationError(LMSException):
    status_code = 401
    error_type = "authentication_error"


class AuthorizationError(LMSException):
    status_code = 403
    error_type = "authorization_error"


class NotFoundError(LMSException):
    status_code = 404
    error_type = "not_found"


class DuplicateAttemptError(LMSException):
    status_code = 409
    error_type = "duplicate_attempt"

    def __init__(
        self,
        message: str = "You have already attempted this quiz. Only one attempt is allowed.",
    ):
        super().__init__(message)


class InvalidAnswerError(LMSException):
    status_code = 400
    error_type = "invalid_answer"


class PersistenceError(LMSException):
    status_code = 500
    error_type = "database_error"

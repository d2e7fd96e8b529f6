"""Custom exceptions for DSA Tracker application"""

from typing import Any


class DsaTrackerException(Exception):
    """Base exception for all DSA Tracker business errors

    All custom exceptions should inherit from this class.
    The global exception handler will catch this and return ErrorResponse
    with ``status_code`` as the HTTP status.

    Attributes:
        message: Human-readable error message
        code: Error code for client-side error handling
        status_code: HTTP status returned to the client
        details: Optional structured context sent along with the error
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Any = None,
    ):
        """Initialize DSA Tracker exception

        Args:
            message: Human-readable error message
            code: Error code (e.g., "VALIDATION_ERROR", "CONFLICT")
            status_code: HTTP status code
            details: Optional extra payload for the client
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(DsaTrackerException):
    """Validation error (invalid input data)

    Examples:
        - Question topic list is empty
        - Problem link is not an absolute http(s) URL
        - No platform username submitted
        - A submitted platform username does not exist
    """

    def __init__(self, message: str, details: Any = None):
        super().__init__(message, "VALIDATION_ERROR", 400, details)


class AuthenticationError(DsaTrackerException):
    """Missing, malformed or expired bearer token

    Examples:
        - No Authorization header
        - Token signature invalid or token expired
        - Account referenced by the token no longer exists
    """

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, "UNAUTHORIZED", 401)


class VerificationRequiredError(DsaTrackerException):
    """Credentials are valid but the account email is not verified yet

    A fresh verification code has been issued when this is raised.
    """

    def __init__(self, email: str):
        super().__init__(
            "Please verify your email first. A verification code was sent to your email.",
            "VERIFICATION_REQUIRED",
            403,
            {"requires_verification": True, "email": email},
        )
        self.email = email


class ConflictError(DsaTrackerException):
    """Resource conflict error

    Examples:
        - Email already registered by a verified account
        - Account already verified
        - Platform usernames already submitted
    """

    def __init__(self, message: str, details: Any = None):
        super().__init__(message, "CONFLICT", 400, details)


class InvalidCodeError(DsaTrackerException):
    """Verification code does not match the stored one"""

    def __init__(self, message: str = "Invalid verification code"):
        super().__init__(message, "INVALID_CODE", 400)


class ExpiredCodeError(DsaTrackerException):
    """Verification code is past its expiry time"""

    def __init__(self, message: str = "Verification code has expired. Please request a new one."):
        super().__init__(message, "EXPIRED_CODE", 400)


class InvalidCredentialsError(DsaTrackerException):
    """Wrong email/password combination

    The same message is used for an unknown email and for a wrong password.
    """

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, "INVALID_CREDENTIALS", 400)


class NotFoundError(DsaTrackerException):
    """Resource not found error

    Examples:
        - No account registered with this email
        - Question does not exist or belongs to another account
        - Platform user does not exist
    """

    def __init__(self, message: str):
        super().__init__(message, "NOT_FOUND", 404)


class NotificationError(DsaTrackerException):
    """Outbound email could not be delivered"""

    def __init__(self, message: str = "Failed to send verification email. Please try again."):
        super().__init__(message, "NOTIFICATION_ERROR", 500)


class UpstreamUnavailableError(DsaTrackerException):
    """Third-party platform could not be reached or answered garbage"""

    def __init__(self, message: str):
        super().__init__(message, "UPSTREAM_UNAVAILABLE", 502)

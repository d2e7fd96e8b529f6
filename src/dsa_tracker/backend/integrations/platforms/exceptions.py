"""
Platform Integration Exception Classes
======================================

Custom exception hierarchy for third-party platform errors. Services
translate these into the application exceptions of ``backend.exception``.
"""


class PlatformError(Exception):
    """Base exception for all platform integration errors."""
    pass


class PlatformUserNotFoundError(PlatformError):
    """The requested username does not exist on the platform."""
    pass


class PlatformUnavailableError(PlatformError):
    """Platform unreachable, timed out, or answered with an unusable payload."""
    pass

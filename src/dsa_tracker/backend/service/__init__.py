"""
Service layer: business logic shared by the API routes.
"""

from .auth_service import AuthService
from .question_service import QuestionService
from .account_service import AccountService
from .platform_service import PlatformService

__all__ = [
    "AuthService",
    "QuestionService",
    "AccountService",
    "PlatformService",
]

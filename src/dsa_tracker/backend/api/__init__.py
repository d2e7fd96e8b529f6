"""
API package for REST endpoints.
"""

from .auth import router as auth_router
from .question import router as question_router
from .user import router as user_router
from .platform import leetcode_router, codeforces_router

__all__ = [
    "auth_router",
    "question_router",
    "user_router",
    "leetcode_router",
    "codeforces_router",
]

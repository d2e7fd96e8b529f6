"""
Schema package for API request/response models.
"""

from .response import (
    BaseResponse,
    SuccessResponse,
    ErrorResponse,
    PaginatedData,
)
from .auth import (
    RegisterRequest,
    VerifyCodeRequest,
    ResendCodeRequest,
    LoginRequest,
    Preferences,
    AccountOut,
    VerificationPendingResponse,
    AuthResponse,
    CodeSentResponse,
)
from .question import (
    RevisionSchedule,
    SavedSolutionIn,
    SavedSolutionOut,
    QuestionCreate,
    QuestionUpdate,
    ToggleRevisionRequest,
    QuestionQuery,
    QuestionOut,
    GroupCount,
    TopicGroupCount,
    QuestionStats,
)
from .user import (
    PreferencesUpdate,
    UpdateProfileRequest,
    ChangePasswordRequest,
    DeleteAccountRequest,
    PlatformUsernamesRequest,
    PlatformUsernames,
    ProfileOut,
    PlatformUsernamesOut,
)
from .platform import (
    LeetCodeSolved,
    LeetCodeStats,
    CodeforcesProfile,
    GitHubStats,
    UsernameCheck,
    PlatformStatsOut,
)

__all__ = [
    # Response schemas
    "BaseResponse",
    "SuccessResponse",
    "ErrorResponse",
    "PaginatedData",
    # Auth schemas
    "RegisterRequest",
    "VerifyCodeRequest",
    "ResendCodeRequest",
    "LoginRequest",
    "Preferences",
    "AccountOut",
    "VerificationPendingResponse",
    "AuthResponse",
    "CodeSentResponse",
    # Question schemas
    "RevisionSchedule",
    "SavedSolutionIn",
    "SavedSolutionOut",
    "QuestionCreate",
    "QuestionUpdate",
    "ToggleRevisionRequest",
    "QuestionQuery",
    "QuestionOut",
    "GroupCount",
    "TopicGroupCount",
    "QuestionStats",
    # Account management schemas
    "PreferencesUpdate",
    "UpdateProfileRequest",
    "ChangePasswordRequest",
    "DeleteAccountRequest",
    "PlatformUsernamesRequest",
    "PlatformUsernames",
    "ProfileOut",
    "PlatformUsernamesOut",
    # Platform schemas
    "LeetCodeSolved",
    "LeetCodeStats",
    "CodeforcesProfile",
    "GitHubStats",
    "UsernameCheck",
    "PlatformStatsOut",
]

"""Account management schemas (profile, password, platform usernames)"""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints

from .auth import Password, Preferences

ProfileName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
PlatformUsername = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]


# ==================== Input Schemas ====================

class PreferencesUpdate(BaseModel):
    """Partial preferences; omitted keys keep their stored value"""

    dark_mode: Optional[bool] = None
    notifications: Optional[bool] = None


class UpdateProfileRequest(BaseModel):
    """Update display name and/or preferences"""

    name: Optional[ProfileName] = None
    preferences: Optional[PreferencesUpdate] = None


class ChangePasswordRequest(BaseModel):
    """Change password of the current account"""

    current_password: str = Field(..., min_length=1)
    new_password: Password = Field(..., description="New password (at least 6 characters)")


class DeleteAccountRequest(BaseModel):
    """Account deletion must be confirmed with the password"""

    password: str = Field(..., min_length=1)


class PlatformUsernamesRequest(BaseModel):
    """Usernames on third-party platforms

    An empty string or ``null`` clears a platform on update; fields missing
    from the request are left untouched.
    """

    github: Optional[PlatformUsername] = None
    leetcode: Optional[PlatformUsername] = None
    codeforces: Optional[PlatformUsername] = None


# ==================== Output Schemas ====================

class PlatformUsernames(BaseModel):
    github: Optional[str] = None
    leetcode: Optional[str] = None
    codeforces: Optional[str] = None


class ProfileOut(BaseModel):
    """Full profile of the current account"""

    id: int
    name: str
    email: str
    preferences: Preferences
    platform_usernames: Optional[PlatformUsernames] = None
    has_platform_data: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class PlatformUsernamesOut(BaseModel):
    """Stored platform usernames after a submit or update"""

    platform_usernames: PlatformUsernames
    has_platform_data: bool

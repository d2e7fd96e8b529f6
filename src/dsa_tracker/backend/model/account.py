"""Account model: identity and authentication state"""
from datetime import datetime
from typing import Optional

from sqlmodel import Field, Column, JSON

from .base import BaseModel, UTCDateTime


def default_preferences() -> dict:
    return {"dark_mode": False, "notifications": True}


class Account(BaseModel, table=True):
    """
    Account model - a registered user.

    ``is_verified`` is true exactly when no verification code is pending.
    ``issue_verification_code`` and ``mark_verified`` are the only writers of
    the three verification fields and keep that invariant.
    """

    __tablename__ = "accounts"

    name: str = Field(max_length=50)
    email: str = Field(
        index=True,
        unique=True,
        max_length=255,
        description="Lower-cased email, natural key for login"
    )
    hashed_password: str = Field(max_length=255)

    # Verification state
    is_verified: bool = Field(default=False)
    verification_code: Optional[str] = Field(default=None, max_length=10)
    code_expires_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    # Third-party platform usernames: {"github": ..., "leetcode": ..., "codeforces": ...}
    platform_usernames: Optional[dict] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True)
    )
    has_platform_data: bool = Field(
        default=False,
        description="Set once platform usernames were submitted"
    )

    preferences: dict = Field(
        default_factory=default_preferences,
        sa_column=Column(JSON, nullable=False)
    )

    def issue_verification_code(self, code: str, expires_at: datetime) -> None:
        """Attach a pending verification code (account becomes unverified)"""
        self.is_verified = False
        self.verification_code = code
        self.code_expires_at = expires_at
        self.touch()

    def mark_verified(self) -> None:
        """Consume the pending code and flag the account as verified"""
        self.is_verified = True
        self.verification_code = None
        self.code_expires_at = None
        self.touch()

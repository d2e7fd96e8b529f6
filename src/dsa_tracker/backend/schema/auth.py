"""Authentication-related schemas for API input/output"""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, EmailStr, Field, field_validator


def _normalize_email(value: str) -> str:
    return value.strip().lower()


NormalizedEmail = Annotated[EmailStr, AfterValidator(_normalize_email)]

Name = Annotated[str, Field(min_length=1, max_length=50)]

Password = Annotated[str, Field(min_length=6, max_length=128)]


def _strip_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Name must be between 1 and 50 characters")
    return value


# ==================== Input Schemas ====================

class RegisterRequest(BaseModel):
    """Account registration request"""

    name: Name = Field(..., examples=["Ann"])
    email: NormalizedEmail = Field(..., examples=["ann@example.com"])
    password: Password = Field(
        ...,
        description="Password (at least 6 characters)",
        examples=["secret1"]
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_name(v)


class VerifyCodeRequest(BaseModel):
    """Verification code submission"""

    email: NormalizedEmail
    otp: str = Field(
        ...,
        pattern=r"^\d{4,10}$",
        description="Numeric verification code sent to email (6 digits by default)",
        examples=["123456"]
    )


class ResendCodeRequest(BaseModel):
    """Request a fresh verification code"""

    email: NormalizedEmail


class LoginRequest(BaseModel):
    """Login request"""

    email: NormalizedEmail
    password: str = Field(..., min_length=1)


# ==================== Output Schemas ====================

class Preferences(BaseModel):
    """Per-account UI preferences"""

    dark_mode: bool = False
    notifications: bool = True


class AccountOut(BaseModel):
    """Account output schema (safe for API responses, excludes sensitive fields)"""

    id: int
    name: str
    email: str
    preferences: Preferences

    model_config = {"from_attributes": True}


class VerificationPendingResponse(BaseModel):
    """Returned by register: a code was sent, no token issued yet"""

    requires_verification: bool = True
    email: str


class AuthResponse(BaseModel):
    """Authentication response (for verify-otp/login)"""

    user: AccountOut
    access_token: str
    token_type: str = "bearer"


class CodeSentResponse(BaseModel):
    """Returned by resend-otp"""

    email: str
    expires_at: datetime

"""Security utilities for password hashing and JWT token handling"""

import hashlib
import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from .config import Settings
from .exception import AuthenticationError
from .model import Account

logger = logging.getLogger(__name__)

# Password encryption context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _normalize_password(password: str) -> bytes:
    """Normalize password to handle bcrypt's 72-byte limitation

    Uses SHA256 to hash the password first, ensuring it fits within
    bcrypt's 72-byte limit while maintaining security for long passwords.
    """
    return hashlib.sha256(password.encode("utf-8")).hexdigest().encode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hashed password"""
    normalized = _normalize_password(plain_password)
    return pwd_context.verify(normalized, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash password using bcrypt with SHA256 normalization"""
    normalized = _normalize_password(password)
    return pwd_context.hash(normalized)


def codes_match(submitted: str, stored: str | None) -> bool:
    """Constant-time comparison of a submitted verification code"""
    if stored is None:
        return False
    return hmac.compare_digest(submitted.encode("utf-8"), stored.encode("utf-8"))


def create_access_token(
    account_id: int,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Create JWT access token for an account

    The token only carries the account id (``sub``) and a fixed expiry;
    there is no refresh mechanism.

    Args:
        account_id: Account ID to encode in token
        settings: Application settings (secret key, algorithm, lifetime)
        expires_delta: Override of the configured lifetime

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = datetime.now(timezone.utc) + expires_delta

    payload = {
        "sub": str(account_id),
        "exp": expire,
    }

    try:
        encoded_jwt = jwt.encode(
            payload,
            settings.secret_key,
            algorithm=settings.algorithm,
        )
        logger.debug(f"Created access token for account: {account_id}")
        return encoded_jwt
    except Exception:
        logger.exception(f"Failed to create access token for account {account_id}")
        raise


def decode_access_token(token: str, settings: Settings) -> dict[str, Any] | None:
    """Decode and validate JWT access token

    Returns:
        Decoded payload dict if valid, None if invalid/expired
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
    except JWTError as e:
        logger.debug(f"Failed to decode JWT token: {e}")
        return None


async def verify_token_and_get_account(
    token: str,
    settings: Settings,
    session: AsyncSession,
) -> Account:
    """Verify JWT token and retrieve the owning account from database.

    Args:
        token: JWT token string
        settings: Application settings
        session: Database session

    Returns:
        Account: Authenticated account

    Raises:
        AuthenticationError: If token is invalid, expired, or the account is
            gone or unverified
    """
    payload = decode_access_token(token, settings)
    if not payload:
        logger.warning("Invalid or expired JWT token")
        raise AuthenticationError("Invalid or expired token")

    account_id = payload.get("sub")
    if not account_id or not str(account_id).isdigit():
        logger.warning("JWT token missing or malformed 'sub' claim")
        raise AuthenticationError("Invalid token payload")

    result = await session.execute(select(Account).where(Account.id == int(account_id)))
    account = result.scalar_one_or_none()

    if not account:
        logger.warning(f"Account {account_id} not found")
        raise AuthenticationError("Account not found")

    if not account.is_verified:
        logger.warning(f"Account {account_id} is not verified")
        raise AuthenticationError("Account is not verified")

    logger.debug(f"Authenticated account: {account.email}")
    return account

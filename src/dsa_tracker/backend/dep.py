"""Dependency injection functions for FastAPI routes"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import Request, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings
from .exception import AuthenticationError
from .integrations.platforms import PlatformClient
from .model import Account
from .security import verify_token_and_get_account
from .utils.email import EmailService

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme for JWT authentication; a missing header is
# reported through AuthenticationError so it gets the 401 error envelope
security_scheme = HTTPBearer(auto_error=False)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get async database session from app state

    This dependency provides a database session to route handlers.
    The session is automatically committed on success or rolled back on exception.

    Usage:
        from typing import Annotated
        from fastapi import Depends

        SessionDep = Annotated[AsyncSession, Depends(get_db_session)]

        @router.get("/example")
        async def example_route(session: SessionDep):
            result = await session.execute(select(Question))
            ...

    Args:
        request: FastAPI request object (injected automatically)

    Yields:
        AsyncSession: Database session for this request
    """
    async_session_factory = request.app.state.async_session_factory

    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def get_settings(request: Request) -> Settings:
    """Settings the application was created with"""
    return request.app.state.settings


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_platform_client(request: Request) -> PlatformClient:
    return request.app.state.platform_client


async def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(get_db_session),
) -> Account:
    """Get current authenticated account from JWT token

    This dependency extracts the JWT token from the Authorization header,
    decodes it, retrieves the account from database, and returns it.

    Usage:
        from typing import Annotated
        from fastapi import Depends

        CurrentAccountDep = Annotated[Account, Depends(get_current_account)]

        @router.get("/me")
        async def get_me(current_account: CurrentAccountDep):
            return current_account

    Raises:
        AuthenticationError: If the header is missing, the token is invalid
            or expired, or the account is gone or unverified
    """
    if credentials is None or not credentials.credentials:
        logger.debug("Request without bearer token")
        raise AuthenticationError("No token, authorization denied")

    # Delegate to shared verification function in security module
    return await verify_token_and_get_account(credentials.credentials, settings, session)

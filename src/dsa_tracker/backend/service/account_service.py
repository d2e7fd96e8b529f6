"""Account service: profile, password, deletion and platform usernames"""
import logging
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from ..enum import ExternalPlatform
from ..exception import ConflictError, InvalidCredentialsError, ValidationError
from ..integrations.platforms import PlatformClient
from ..model import Account, Question
from ..schema.auth import AccountOut
from ..schema.user import (
    ChangePasswordRequest,
    DeleteAccountRequest,
    PlatformUsernames,
    PlatformUsernamesOut,
    PlatformUsernamesRequest,
    ProfileOut,
    UpdateProfileRequest,
)
from ..security import get_password_hash, verify_password
from .platform_service import PlatformService

logger = logging.getLogger(__name__)


class AccountService:
    """Account management for the authenticated account"""

    @staticmethod
    def get_profile(account: Account) -> ProfileOut:
        return ProfileOut.model_validate(account)

    @staticmethod
    async def update_profile(
        session: AsyncSession,
        account: Account,
        request: UpdateProfileRequest,
    ) -> AccountOut:
        """Update name and merge preferences

        Preference keys missing from the request keep their stored value.
        """
        if request.name is not None:
            account.name = request.name
        if request.preferences is not None:
            account.preferences = {
                **account.preferences,
                **request.preferences.model_dump(exclude_none=True),
            }

        account.touch()
        session.add(account)
        await session.commit()

        logger.info(f"Profile updated: account_id={account.id}")
        return AccountOut.model_validate(account)

    @staticmethod
    async def change_password(
        session: AsyncSession,
        account: Account,
        request: ChangePasswordRequest,
    ) -> None:
        """Replace the password after checking the current one

        Raises:
            InvalidCredentialsError: Current password is wrong
        """
        if not verify_password(request.current_password, account.hashed_password):
            logger.warning(f"Password change rejected: account_id={account.id}")
            raise InvalidCredentialsError("Current password is incorrect")

        account.hashed_password = get_password_hash(request.new_password)
        account.touch()
        session.add(account)
        await session.commit()
        logger.info(f"Password changed: account_id={account.id}")

    @staticmethod
    async def delete_account(
        session: AsyncSession,
        account: Account,
        request: DeleteAccountRequest,
    ) -> None:
        """Delete the account together with all of its questions

        Both deletions are committed in one transaction.

        Raises:
            InvalidCredentialsError: Password is wrong
        """
        if not verify_password(request.password, account.hashed_password):
            logger.warning(f"Account deletion rejected: account_id={account.id}")
            raise InvalidCredentialsError("Password is incorrect")

        account_id = account.id
        result = await session.execute(delete(Question).where(Question.owner_id == account_id))
        await session.delete(account)
        await session.commit()

        logger.info(f"Account deleted: account_id={account_id}, questions_removed={result.rowcount}")

    @staticmethod
    async def _validate_or_raise(
        client: PlatformClient,
        usernames: dict[ExternalPlatform, str],
    ) -> None:
        results = await PlatformService.validate_usernames(client, usernames)
        if not all(check.valid for check in results.values()):
            raise ValidationError(
                "Some usernames are invalid",
                details={
                    platform.value: check.model_dump(exclude_none=True)
                    for platform, check in results.items()
                },
            )

    @staticmethod
    async def submit_platform_usernames(
        session: AsyncSession,
        client: PlatformClient,
        account: Account,
        request: PlatformUsernamesRequest,
    ) -> PlatformUsernamesOut:
        """One-time submission of platform usernames

        All provided usernames are checked upstream first; if any is invalid
        nothing is stored.

        Raises:
            ConflictError: Usernames were already submitted
            ValidationError: No username given, or some username is invalid
        """
        if account.has_platform_data:
            raise ConflictError(
                "Platform usernames already submitted. Use update endpoint to modify.",
                details={"already_exists": True},
            )

        provided = {
            platform: getattr(request, platform.value)
            for platform in ExternalPlatform
            if getattr(request, platform.value)
        }
        if not provided:
            raise ValidationError("At least one platform username is required")

        await AccountService._validate_or_raise(client, provided)

        account.platform_usernames = {
            platform.value: provided.get(platform) for platform in ExternalPlatform
        }
        account.has_platform_data = True
        account.touch()
        session.add(account)
        await session.commit()

        logger.info(f"Platform usernames saved: account_id={account.id}")
        return AccountService._platform_usernames_out(account)

    @staticmethod
    async def update_platform_usernames(
        session: AsyncSession,
        client: PlatformClient,
        account: Account,
        request: PlatformUsernamesRequest,
    ) -> PlatformUsernamesOut:
        """Merge provided usernames into the stored ones

        An empty string or ``null`` clears a platform. Usernames that differ
        from the stored value are checked upstream, all-or-nothing.

        Raises:
            ValidationError: Some new username is invalid
        """
        current: dict[str, Optional[str]] = {
            platform.value: None for platform in ExternalPlatform
        }
        current.update(account.platform_usernames or {})

        updates = {
            ExternalPlatform(field): getattr(request, field) or None
            for field in request.model_fields_set
        }
        changed = {
            platform: username
            for platform, username in updates.items()
            if username and username != current.get(platform.value)
        }
        if changed:
            await AccountService._validate_or_raise(client, changed)

        current.update({platform.value: username for platform, username in updates.items()})
        account.platform_usernames = current
        account.has_platform_data = True
        account.touch()
        session.add(account)
        await session.commit()

        logger.info(
            f"Platform usernames updated: account_id={account.id}, "
            f"fields={sorted(p.value for p in updates)}"
        )
        return AccountService._platform_usernames_out(account)

    @staticmethod
    def _platform_usernames_out(account: Account) -> PlatformUsernamesOut:
        return PlatformUsernamesOut(
            platform_usernames=PlatformUsernames(**(account.platform_usernames or {})),
            has_platform_data=account.has_platform_data,
        )

"""Authentication service: registration, email verification and login"""
import logging
import secrets
import string
from datetime import timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..config import Settings
from ..exception import (
    ConflictError,
    ExpiredCodeError,
    InvalidCodeError,
    InvalidCredentialsError,
    NotFoundError,
    NotificationError,
    VerificationRequiredError,
)
from ..model import Account, utc_now
from ..schema.auth import (
    AccountOut,
    AuthResponse,
    CodeSentResponse,
    LoginRequest,
    RegisterRequest,
    ResendCodeRequest,
    VerificationPendingResponse,
    VerifyCodeRequest,
)
from ..security import codes_match, create_access_token, get_password_hash, verify_password
from ..utils.background import fire_and_forget
from ..utils.email import EmailService

logger = logging.getLogger(__name__)


class AuthService:
    """Authentication service

    An account is created unverified and can only obtain a session token
    after a verification code sent to its email has been confirmed.
    """

    @staticmethod
    def _generate_verification_code(settings: Settings) -> str:
        """Generate random numeric verification code"""
        return "".join(
            secrets.choice(string.digits)
            for _ in range(settings.verification_code_length)
        )

    @staticmethod
    def _issue_code(account: Account, settings: Settings) -> str:
        """Attach a fresh code to ``account`` and return it"""
        code = AuthService._generate_verification_code(settings)
        expires_at = utc_now() + timedelta(
            minutes=settings.verification_code_expire_minutes
        )
        account.issue_verification_code(code, expires_at)
        logger.debug(
            f"Generated verification code for {account.email}, "
            f"expires at {expires_at}"
        )
        return code

    @staticmethod
    async def get_account_by_email(session: AsyncSession, email: str) -> Account | None:
        result = await session.execute(select(Account).where(Account.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def register(
        session: AsyncSession,
        settings: Settings,
        email_service: EmailService,
        request: RegisterRequest,
    ) -> tuple[VerificationPendingResponse, bool]:
        """Register a new account, or restart registration of an unverified one

        Args:
            session: Database session
            settings: Application settings
            email_service: Outbound email capability
            request: Registration request

        Returns:
            (pending-verification response, whether a new account was created)

        Raises:
            ConflictError: Email already registered by a verified account
            NotificationError: Verification email could not be sent; the
                registration is undone
        """
        logger.info(f"Processing registration for email: {request.email}")

        account = await AuthService.get_account_by_email(session, request.email)
        if account and account.is_verified:
            logger.warning(f"Email already registered: {request.email}")
            raise ConflictError("User already exists with this email")

        created = account is None
        previous = None
        if created:
            account = Account(
                name=request.name,
                email=request.email,
                hashed_password=get_password_hash(request.password),
            )
        else:
            previous = (
                account.name,
                account.hashed_password,
                account.verification_code,
                account.code_expires_at,
            )
            account.name = request.name
            account.hashed_password = get_password_hash(request.password)

        code = AuthService._issue_code(account, settings)
        session.add(account)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            logger.warning(f"Concurrent registration for {request.email}")
            raise ConflictError("User already exists with this email")

        sent = await email_service.send_verification_code(account.email, code, account.name)
        if not sent:
            logger.error(f"Verification email to {account.email} failed, undoing registration")
            if created:
                await session.delete(account)
            else:
                name, hashed_password, old_code, old_expires_at = previous
                account.name = name
                account.hashed_password = hashed_password
                account.issue_verification_code(old_code, old_expires_at)
                session.add(account)
            await session.commit()
            raise NotificationError()

        if created:
            logger.info(f"Account created (pending verification): id={account.id}, email={account.email}")
        else:
            logger.info(f"Registration restarted for unverified account: id={account.id}")

        return VerificationPendingResponse(email=account.email), created

    @staticmethod
    async def verify_code(
        session: AsyncSession,
        settings: Settings,
        email_service: EmailService,
        request: VerifyCodeRequest,
    ) -> AuthResponse:
        """Confirm the pending verification code and log the account in

        Raises:
            NotFoundError: No account with this email
            ConflictError: Account already verified
            InvalidCodeError: Code does not match
            ExpiredCodeError: Code is past its expiry time
        """
        account = await AuthService.get_account_by_email(session, request.email)
        if not account:
            logger.warning(f"Verification attempt for unknown email: {request.email}")
            raise NotFoundError("User not found")

        if account.is_verified:
            raise ConflictError("Email is already verified")

        if not codes_match(request.otp, account.verification_code):
            logger.warning(f"Invalid verification code for {request.email}")
            raise InvalidCodeError()

        if account.code_expires_at is None or utc_now() >= account.code_expires_at:
            logger.warning(f"Expired verification code for {request.email}")
            raise ExpiredCodeError()

        account.mark_verified()
        session.add(account)
        await session.commit()
        logger.info(f"Account verified: id={account.id}, email={account.email}")

        fire_and_forget(
            email_service.send_welcome(account.email, account.name),
            name=f"welcome-email-{account.id}",
        )

        return AuthResponse(
            user=AccountOut.model_validate(account),
            access_token=create_access_token(account.id, settings),
        )

    @staticmethod
    async def resend_code(
        session: AsyncSession,
        settings: Settings,
        email_service: EmailService,
        request: ResendCodeRequest,
    ) -> CodeSentResponse:
        """Replace the pending code with a fresh one and send it

        The new code stays stored even when sending fails.

        Raises:
            NotFoundError: No account with this email
            ConflictError: Account already verified
            NotificationError: Email could not be sent
        """
        account = await AuthService.get_account_by_email(session, request.email)
        if not account:
            raise NotFoundError("User not found")

        if account.is_verified:
            raise ConflictError("Email is already verified")

        code = AuthService._issue_code(account, settings)
        session.add(account)
        await session.commit()

        sent = await email_service.send_verification_code(account.email, code, account.name)
        if not sent:
            raise NotificationError()

        logger.info(f"Verification code resent to {account.email}")
        return CodeSentResponse(email=account.email, expires_at=account.code_expires_at)

    @staticmethod
    async def login(
        session: AsyncSession,
        settings: Settings,
        email_service: EmailService,
        request: LoginRequest,
    ) -> AuthResponse:
        """Authenticate with email and password

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            VerificationRequiredError: Credentials are valid but the email is
                not verified; a fresh code has been sent
        """
        logger.info(f"Login attempt: {request.email}")

        account = await AuthService.get_account_by_email(session, request.email)
        if not account or not verify_password(request.password, account.hashed_password):
            logger.warning(f"Login failed for {request.email}")
            raise InvalidCredentialsError()

        if not account.is_verified:
            code = AuthService._issue_code(account, settings)
            session.add(account)
            await session.commit()

            sent = await email_service.send_verification_code(account.email, code, account.name)
            if not sent:
                logger.error(f"Failed to send verification code to {account.email} during login")
            raise VerificationRequiredError(account.email)

        logger.info(f"Login successful: id={account.id}")
        return AuthResponse(
            user=AccountOut.model_validate(account),
            access_token=create_access_token(account.id, settings),
        )

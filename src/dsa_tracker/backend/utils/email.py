"""Email sending service

Messages are rendered from jinja2 templates and delivered over SMTP. The
blocking smtplib calls run in a worker thread so the event loop keeps
serving requests while a message is in flight.
"""
import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from jinja2 import Template

from ..config import Settings

logger = logging.getLogger(__name__)


class EmailService:
    """Outbound notification capability

    Every ``send_*`` coroutine reports delivery as a bool and never raises;
    callers decide whether a failed delivery is fatal.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    async def send_verification_code(self, to_email: str, code: str, name: str) -> bool:
        """Send verification code email

        Args:
            to_email: Recipient email address
            code: Verification code
            name: Display name used in the greeting

        Returns:
            True if email sent successfully, False otherwise
        """
        if not self.settings.smtp_configured:
            logger.warning(
                "SMTP configuration incomplete, skipping email send "
                "(development mode)"
            )
            if self.settings.debug:
                logger.info(f"Verification code for {to_email}: {code}")
                return True
            return False

        context = {
            "app_name": self.settings.app_name,
            "name": name,
            "code": code,
            "expire_minutes": self.settings.verification_code_expire_minutes,
        }
        return await self._deliver(
            to_email,
            f"Verify Your {self.settings.app_name} Account",
            Template(VERIFICATION_TEXT_TEMPLATE).render(**context),
            Template(VERIFICATION_HTML_TEMPLATE, autoescape=True).render(**context),
        )

    async def send_welcome(self, to_email: str, name: str) -> bool:
        """Send the welcome email that follows a successful verification"""
        if not self.settings.smtp_configured:
            logger.info(f"SMTP not configured, welcome email to {to_email} skipped")
            return self.settings.debug

        context = {"app_name": self.settings.app_name, "name": name}
        return await self._deliver(
            to_email,
            f"Welcome to {self.settings.app_name}!",
            Template(WELCOME_TEXT_TEMPLATE).render(**context),
            Template(WELCOME_HTML_TEMPLATE, autoescape=True).render(**context),
        )

    async def _deliver(self, to_email: str, subject: str, text: str, html: str) -> bool:
        msg = MIMEMultipart("alternative")
        msg["From"] = f"{self.settings.smtp_from_name} <{self.settings.smtp_from or self.settings.smtp_user}>"
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))

        try:
            await asyncio.to_thread(self._send_message, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False

        logger.info(f"Email '{subject}' sent to {to_email}")
        return True

    def _send_message(self, msg: MIMEMultipart) -> None:
        settings = self.settings
        if settings.smtp_use_ssl:
            server = smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, timeout=30)
        else:
            server = smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30)
            server.starttls()

        try:
            server.login(settings.smtp_user, settings.smtp_password)
            server.send_message(msg)
        finally:
            server.close()


# ========== Email Templates ==========

VERIFICATION_TEXT_TEMPLATE = """\
Hey {{ name }}!

Thanks for signing up for {{ app_name }}. Your verification code is: {{ code }}

The code will expire in {{ expire_minutes }} minutes.

If you didn't create an account, you can safely ignore this email.

---
{{ app_name }} Team
"""

VERIFICATION_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html>
<body style="margin: 0; padding: 0; font-family: 'Segoe UI', Tahoma, sans-serif; background-color: #f4f7fa;">
  <div style="max-width: 600px; margin: 0 auto; padding: 40px 20px;">
    <div style="background: #667eea; border-radius: 16px 16px 0 0; padding: 32px; text-align: center;">
      <h1 style="color: #ffffff; margin: 0;">{{ app_name }}</h1>
    </div>
    <div style="background: #ffffff; padding: 32px; border-radius: 0 0 16px 16px;">
      <h2 style="color: #1a202c; margin: 0 0 20px 0;">Hey {{ name }}!</h2>
      <p style="color: #4a5568;">Thanks for signing up! To complete your registration, please use the verification code below:</p>
      <div style="font-size: 36px; font-weight: 700; letter-spacing: 8px; color: #667eea; text-align: center; font-family: 'Courier New', monospace;">
        {{ code }}
      </div>
      <p style="color: #718096;">This code will expire in <strong>{{ expire_minutes }} minutes</strong>.</p>
      <p style="color: #718096;">If you didn't create an account with {{ app_name }}, you can safely ignore this email.</p>
    </div>
  </div>
</body>
</html>
"""

WELCOME_TEXT_TEMPLATE = """\
Congratulations, {{ name }}!

Your {{ app_name }} account has been verified. You can now add and track
your DSA questions, view your progress statistics and plan your revisions.

---
{{ app_name }} Team
"""

WELCOME_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html>
<body style="margin: 0; padding: 0; font-family: 'Segoe UI', Tahoma, sans-serif; background-color: #f4f7fa;">
  <div style="max-width: 600px; margin: 0 auto; padding: 40px 20px;">
    <div style="background: #10b981; border-radius: 16px 16px 0 0; padding: 32px; text-align: center;">
      <h1 style="color: #ffffff; margin: 0;">Welcome to {{ app_name }}!</h1>
    </div>
    <div style="background: #ffffff; padding: 32px; border-radius: 0 0 16px 16px;">
      <h2 style="color: #1a202c; margin: 0 0 20px 0;">Congratulations, {{ name }}!</h2>
      <p style="color: #4a5568;">Your account has been verified successfully. You're now ready to start your DSA journey.</p>
      <ul style="color: #4a5568; line-height: 1.8;">
        <li>Add and track your DSA questions</li>
        <li>View your progress statistics</li>
        <li>Plan your revisions</li>
      </ul>
    </div>
  </div>
</body>
</html>
"""

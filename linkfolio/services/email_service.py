import smtplib
import ssl
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from pathlib import Path
from typing import Optional
import logging

from jinja2 import Template
from linkfolio.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Sends transactional email over SMTP."""

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.SMTP_FROM_EMAIL or settings.SMTP_USER
        self.from_name = settings.SMTP_FROM_NAME
        self.frontend_url = settings.FRONTEND_URL

    def _get_template_path(self, template_name: str) -> Path:
        base_path = Path(__file__).parent.parent
        return base_path / "templates" / "emails" / template_name

    def _render_template(self, template_name: str, context: dict) -> str:
        template_path = self._get_template_path(template_name)

        if not template_path.exists():
            raise FileNotFoundError(f"Template not found: {template_path}")

        with open(template_path, "r", encoding="utf-8") as f:
            template_content = f.read()

        template = Template(template_content)
        return template.render(**context)

    def _send_email(
        self,
        to: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> bool:
        if not self.smtp_user or not self.smtp_password:
            logger.error("SMTP credentials not configured")
            return False

        try:
            message = MIMEMultipart("alternative")
            message["Subject"] = subject
            message["From"] = f"{self.from_name} <{self.from_email}>"
            message["To"] = to

            message.attach(MIMEText(html_content, "html", "utf-8"))
            if text_content:
                message.attach(MIMEText(text_content, "plain", "utf-8"))

            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(self.smtp_host, self.smtp_port, context=context) as server:
                server.login(self.smtp_user, self.smtp_password)
                server.sendmail(self.from_email, [to], message.as_string())

            logger.info(f"Email sent to: {to}")
            return True

        except smtplib.SMTPException as e:
            logger.error(f"SMTP error sending email to {to}: {e}")
            return False
        except OSError as e:
            logger.error(f"Connection error sending email to {to}: {e}")
            return False

    def send_team_invite_email(self, to_email: str, team_name: str, inviter_name: str, token: str) -> bool:
        invite_url = f"{self.frontend_url}/invite/{token}"
        context = {
            "team_name": team_name,
            "inviter_name": inviter_name,
            "invite_url": invite_url,
            "expiration_days": settings.INVITE_EXPIRATION_DAYS,
        }
        try:
            html_content = self._render_template("team_invite.html", context)
        except FileNotFoundError as e:
            logger.error(f"Could not render invite email for {to_email}: {e}")
            return False

        text_content = f"""
Hi,

{inviter_name} invited you to join {team_name} on Linkfolio.

Accept the invitation here:

{invite_url}

This link expires in {settings.INVITE_EXPIRATION_DAYS} days.
"""
        return self._send_email(
            to=to_email,
            subject=f"You're invited to join {team_name} on Linkfolio",
            html_content=html_content,
            text_content=text_content,
        )

    def send_member_credentials_email(
        self,
        to_email: str,
        member_name: Optional[str],
        team_name: str,
        username: str,
        temporary_password: str,
    ) -> bool:
        login_url = f"{self.frontend_url}/auth"
        context = {
            "member_name": member_name or username,
            "team_name": team_name,
            "username": username,
            "email": to_email,
            "temporary_password": temporary_password,
            "login_url": login_url,
        }
        try:
            html_content = self._render_template("member_credentials.html", context)
        except FileNotFoundError as e:
            logger.error(f"Could not render credentials email for {to_email}: {e}")
            return False

        text_content = f"""
Hi {member_name or username},

An account was created for you on the {team_name} team.

Email: {to_email}
Temporary password: {temporary_password}

Sign in at {login_url}. You will be asked to choose a new password.
"""
        return self._send_email(
            to=to_email,
            subject=f"Your {team_name} account on Linkfolio",
            html_content=html_content,
            text_content=text_content,
        )

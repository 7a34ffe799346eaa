"""Service for sending emails."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from ..domain.errors import NotificationError

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP."""

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_address: str = '"DevSphere" <no-reply@devsphere.com>',
    ):
        self.smtp_host = smtp_host or ""
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username or ""
        self.smtp_password = smtp_password or ""
        self.from_address = from_address
        self.enabled = bool(self.smtp_host and self.smtp_username and self.smtp_password)

    def send_password_reset_otp(self, to_email: str, otp: str, ttl_minutes: int) -> None:
        """
        Send the password reset code.

        Args:
            to_email: Recipient email
            otp: Plaintext one-time code
            ttl_minutes: Minutes until the code expires

        Raises:
            NotificationError: If the SMTP exchange fails
        """
        if not self.enabled:
            logger.warning("SMTP credentials not provided. Email not sent.")
            return

        subject = "Password Reset OTP"
        text_body = f"Your password reset OTP is: {otp}. It expires in {ttl_minutes} minutes."
        html_body = f"""
        <div style="font-family: Arial, sans-serif; padding: 20px; color: #333;">
            <h2 style="color: #6d28d9;">Password Reset Request</h2>
            <p>You requested a password reset. Use the code below to proceed:</p>
            <div style="background-color: #f3f4f6; padding: 15px; border-radius: 8px;
                        text-align: center; margin: 20px 0;">
                <h1 style="letter-spacing: 5px; color: #6d28d9; margin: 0;">{otp}</h1>
            </div>
            <p>This code expires in {ttl_minutes} minutes.</p>
            <p style="font-size: 12px; color: #666;">
                If you didn't request this, please ignore this email.
            </p>
        </div>
        """

        self._send_email(to_email, subject, html_body, text_body)

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        try:
            if self.smtp_port == 465:
                with smtplib.SMTP_SSL(self.smtp_host, self.smtp_port) as server:
                    server.login(self.smtp_username, self.smtp_password)
                    server.send_message(msg)
            else:
                with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                    server.starttls()
                    server.login(self.smtp_username, self.smtp_password)
                    server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"Failed to send email to {to_email}: {exc}") from exc

        logger.info("Email '%s' sent to %s", subject, to_email)

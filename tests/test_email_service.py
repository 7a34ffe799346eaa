import smtplib
from unittest.mock import patch

import pytest

from devsphere.domain.errors import NotificationError
from devsphere.services.email_service import EmailService


def _service(port=587):
    return EmailService(
        smtp_host="smtp.devsphere.io",
        smtp_port=port,
        smtp_username="mailer",
        smtp_password="secret",
    )


def test_disabled_without_credentials(caplog):
    service = EmailService(smtp_host="smtp.devsphere.io")
    assert service.enabled is False
    with patch("smtplib.SMTP") as smtp:
        service.send_password_reset_otp("a@x.com", "123456", 10)
    smtp.assert_not_called()
    assert "Email not sent" in caplog.text


def test_starttls_delivery_includes_code_and_ttl():
    with patch("smtplib.SMTP") as smtp:
        _service().send_password_reset_otp("a@x.com", "123456", 10)

    server = smtp.return_value.__enter__.return_value
    smtp.assert_called_once_with("smtp.devsphere.io", 587)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("mailer", "secret")
    message = server.send_message.call_args.args[0]
    assert message["To"] == "a@x.com"
    assert message["Subject"] == "Password Reset OTP"
    plain = message.get_payload()[0].get_payload(decode=True).decode()
    assert "123456" in plain and "10 minutes" in plain


def test_implicit_tls_on_port_465():
    with patch("smtplib.SMTP_SSL") as smtp_ssl, patch("smtplib.SMTP") as smtp:
        _service(port=465).send_password_reset_otp("a@x.com", "123456", 10)
    smtp_ssl.assert_called_once_with("smtp.devsphere.io", 465)
    smtp.assert_not_called()


def test_smtp_failure_raises_notification_error():
    with patch("smtplib.SMTP") as smtp:
        smtp.return_value.__enter__.return_value.login.side_effect = smtplib.SMTPAuthenticationError(535, b"nope")
        with pytest.raises(NotificationError):
            _service().send_password_reset_otp("a@x.com", "123456", 10)

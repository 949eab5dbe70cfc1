"""SMTP notifier backed by fastapi-mail.

Implements `INotifier`: a single ``send(address, subject, body)`` that
reports delivery as a boolean. Transport failures (connection refused,
authentication errors, timeouts) are logged and normalized to ``False``;
they never propagate to the auth service. In test mode messages are logged
instead of sent and always count as delivered.
"""

import asyncio
from typing import Optional

import structlog
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from credo.core.config.settings import Settings
from credo.domain.interfaces.services import INotifier
from credo.domain.value_objects.email import mask_email

logger = structlog.get_logger(__name__)


class SmtpNotifier(INotifier):
    """Delivers HTML messages over SMTP.

    Attributes:
        settings: Application settings providing the EMAIL_* values.
        fastmail: FastMail client; None in test mode.
        timeout: Upper bound for one send, in seconds.
    """

    def __init__(self, settings: Settings, fastmail: Optional[FastMail] = None):
        self.settings = settings
        self.test_mode = settings.EMAIL_TEST_MODE
        self.timeout = settings.EMAIL_SEND_TIMEOUT_SECONDS
        self.fastmail = fastmail
        if self.fastmail is None and not self.test_mode:
            self.fastmail = FastMail(self._connection_config(settings))
        logger.debug(
            "smtp_notifier_initialized",
            test_mode=self.test_mode,
            smtp_host=settings.EMAIL_SMTP_HOST,
            smtp_configured=bool(settings.EMAIL_SMTP_USERNAME),
        )

    @staticmethod
    def _connection_config(settings: Settings) -> ConnectionConfig:
        password = settings.EMAIL_SMTP_PASSWORD
        return ConnectionConfig(
            MAIL_USERNAME=settings.EMAIL_SMTP_USERNAME or "",
            MAIL_PASSWORD=password.get_secret_value() if password else "",
            MAIL_FROM=settings.EMAIL_FROM_EMAIL,
            MAIL_FROM_NAME=settings.EMAIL_FROM_NAME,
            MAIL_PORT=settings.EMAIL_SMTP_PORT,
            MAIL_SERVER=settings.EMAIL_SMTP_HOST,
            MAIL_STARTTLS=settings.EMAIL_SMTP_USE_TLS,
            MAIL_SSL_TLS=settings.EMAIL_SMTP_USE_SSL,
            USE_CREDENTIALS=bool(settings.EMAIL_SMTP_USERNAME and password),
            VALIDATE_CERTS=True,
        )

    async def send(self, address: str, subject: str, body: str) -> bool:
        if self.test_mode:
            logger.info(
                "email_test_mode_send",
                recipient=mask_email(address),
                subject=subject,
                body_length=len(body),
            )
            return True

        message = MessageSchema(
            subject=subject,
            recipients=[address],
            body=body,
            subtype=MessageType.html,
        )
        try:
            await asyncio.wait_for(self.fastmail.send_message(message), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error("email_send_timeout", recipient=mask_email(address), timeout=self.timeout)
            return False
        except Exception as exc:
            logger.error(
                "email_send_failed",
                recipient=mask_email(address),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return False

        logger.info("email_sent", recipient=mask_email(address), subject=subject)
        return True

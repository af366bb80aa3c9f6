# warehub/shared/services/notification_service.py
import logging
import smtplib
import time
from contextlib import contextmanager
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, List, Optional

from warehub.config.settings import settings

logger = logging.getLogger(__name__)


class EmailClient:
    """SMTP client with an optional retry loop"""

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        username: str,
        password: str,
        use_ssl: bool = False,
        max_retries: int = 3,
        retry_delay: int = 3
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    @contextmanager
    def _connection(self):
        server = None
        try:
            if self.use_ssl:
                server = smtplib.SMTP_SSL(self.smtp_host, self.smtp_port)
            else:
                server = smtplib.SMTP(self.smtp_host, self.smtp_port)
                server.starttls()
            server.login(self.username, self.password)
            yield server
        finally:
            if server:
                try:
                    server.quit()
                except Exception as e:
                    logger.warning(f"Error closing SMTP connection: {e}")

    def _build_message(self, sender: str, recipients: List[str], subject: str, text_body: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = sender
        msg["To"] = ", ".join(recipients)
        msg["Subject"] = subject
        msg.attach(MIMEText(text_body or "", "plain"))
        return msg

    def send_email(self, sender: str, recipients: List[str], subject: str, text_body: str) -> bool:
        """Send a plain-text email; False after exhausting retries"""
        msg = self._build_message(sender, recipients, subject, text_body)

        for attempt in range(1, self.max_retries + 1):
            try:
                with self._connection() as server:
                    server.sendmail(sender, recipients, msg.as_string())
                logger.info(f"✅ Email sent to {', '.join(recipients)}")
                return True
            except smtplib.SMTPAuthenticationError:
                logger.error("❌ SMTP authentication failed")
                break
            except Exception as e:
                logger.error(f"❌ Attempt {attempt} failed: {e}")
                if attempt < self.max_retries:
                    time.sleep(self.retry_delay)

        logger.error("❌ Failed to send email after all retry attempts")
        return False


class NotificationService:
    """
    Notification sender: accepts {to, subject, body} and delivers it.

    Meant to run outside the request (FastAPI BackgroundTasks). Delivery is
    attempted once; failures are logged and never raised to the caller.
    """

    def __init__(self, client: Optional[EmailClient] = None):
        if client is None and settings.smtp_configured:
            client = EmailClient(
                smtp_host=settings.smtp_host,
                smtp_port=settings.smtp_port,
                username=settings.smtp_username,
                password=settings.smtp_password,
                use_ssl=settings.smtp_use_ssl,
                max_retries=1,
            )
        self.client = client
        self.sender = settings.mail_from

    def send(self, message: Dict[str, Any]) -> bool:
        to = message.get("to")
        subject = message.get("subject", "")
        body = message.get("body", "")

        if not to:
            logger.warning(f"⚠️ Notification without recipient dropped: {subject}")
            return False

        if self.client is None:
            logger.info(f"📭 SMTP not configured - notification to {to} logged only: {subject}")
            return False

        try:
            return self.client.send_email(self.sender, [to], subject, body)
        except Exception:
            logger.exception(f"❌ Error sending notification to {to}")
            return False


def get_notification_service() -> NotificationService:
    """Dependency for routes that notify users"""
    return NotificationService()

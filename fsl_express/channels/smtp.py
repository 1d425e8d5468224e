from contextlib import contextmanager
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

import aiosmtplib
import structlog

from ..config import is_configured
from ..domain.ports import ChannelError, ErrorKind, NotificationChannel
from ..domain.value_objects import OutgoingMessage

logger = structlog.get_logger()


@contextmanager
def _smtp_errors(channel: str, operation: str):
    """Translate aiosmtplib failures into ChannelError kinds."""
    try:
        yield
    except aiosmtplib.SMTPTimeoutError as e:
        raise ChannelError(ErrorKind.TIMEOUT, f"SMTP {operation} timed out: {e}") from e
    except aiosmtplib.SMTPAuthenticationError as e:
        # "EAUTH" matches the remediation hint patterns downstream
        raise ChannelError(
            ErrorKind.AUTH, f"EAUTH: SMTP authentication failed ({e.code} {e.message})"
        ) from e
    except (aiosmtplib.SMTPSenderRefused, aiosmtplib.SMTPRecipientsRefused, aiosmtplib.SMTPDataError) as e:
        raise ChannelError(ErrorKind.REJECTED, f"SMTP {operation} rejected: {e}") from e
    except (aiosmtplib.SMTPException, OSError) as e:
        logger.debug("SMTP error", channel=channel, operation=operation, error=str(e))
        raise ChannelError(ErrorKind.UNAVAILABLE, f"SMTP {operation} failed: {e}") from e


def build_mime_message(message: OutgoingMessage) -> EmailMessage:
    """Render an OutgoingMessage as a MIME message with a fresh Message-ID."""
    mime = EmailMessage()
    mime["From"] = formataddr((message.sender_name, message.sender_email))
    mime["To"] = message.recipient
    mime["Subject"] = message.subject
    domain = message.sender_email.rpartition("@")[2] or None
    mime["Message-ID"] = make_msgid(domain=domain)

    if message.text_body and message.html_body:
        mime.set_content(message.text_body)
        mime.add_alternative(message.html_body, subtype="html")
    elif message.html_body:
        mime.set_content(message.html_body, subtype="html")
    else:
        mime.set_content(message.text_body)
    return mime


class SmtpChannel(NotificationChannel):
    """
    Authenticated SMTP relay profile.

    Port 465 uses implicit TLS, anything else upgrades with STARTTLS.
    When ``send_as_account`` is set the relay only accepts mail from the
    authenticated account, so the sender address is replaced per attempt.
    """

    def __init__(
        self,
        name: str,
        host: str,
        port: int,
        username: str,
        password: str,
        *,
        send_as_account: bool = False,
        ready_timeout: float = 10.0,
        send_timeout: float = 15.0,
    ) -> None:
        super().__init__(name, ready_timeout=ready_timeout, send_timeout=send_timeout)
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._send_as_account = send_as_account

    def is_active(self) -> bool:
        return bool(self._host) and is_configured(self._username) and is_configured(self._password)

    def _client(self, timeout: float) -> aiosmtplib.SMTP:
        implicit_tls = self._port == 465
        return aiosmtplib.SMTP(
            hostname=self._host,
            port=self._port,
            use_tls=implicit_tls,
            start_tls=not implicit_tls,
            timeout=timeout,
        )

    async def check_ready(self) -> None:
        """Connect, upgrade to TLS and authenticate, then disconnect."""
        with _smtp_errors(self.name, "verify"):
            async with self._client(self.ready_timeout) as smtp:
                await smtp.login(self._username, self._password)
        logger.debug("SMTP relay verified", channel=self.name, host=self._host)

    async def send(self, message: OutgoingMessage) -> str:
        if self._send_as_account:
            message = message.with_sender(self._username)

        mime = build_mime_message(message)
        with _smtp_errors(self.name, "send"):
            async with self._client(self.send_timeout) as smtp:
                await smtp.login(self._username, self._password)
                await smtp.send_message(mime)

        message_id = mime["Message-ID"]
        logger.info("Email sent", channel=self.name, message_id=message_id)
        return message_id

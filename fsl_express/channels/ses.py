import structlog
from aiobotocore.session import get_session
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from ..config import is_configured
from ..domain.ports import ChannelError, ErrorKind, NotificationChannel
from ..domain.value_objects import OutgoingMessage

logger = structlog.get_logger()

_AUTH_CODES = {
    "AccessDenied",
    "AccessDeniedException",
    "InvalidClientTokenId",
    "SignatureDoesNotMatch",
    "UnrecognizedClientException",
}
_REJECTED_CODES = {
    "MessageRejected",
    "MailFromDomainNotVerifiedException",
    "ConfigurationSetDoesNotExistException",
}


def _channel_error(e: Exception) -> ChannelError:
    if isinstance(e, NoCredentialsError):
        return ChannelError(ErrorKind.AUTH, f"SES credentials missing: {e}")
    if isinstance(e, ClientError):
        code = e.response.get("Error", {}).get("Code", "")
        message = e.response.get("Error", {}).get("Message", str(e))
        if code in _AUTH_CODES:
            return ChannelError(ErrorKind.AUTH, f"SES auth error: {code} {message}")
        if code in _REJECTED_CODES:
            return ChannelError(ErrorKind.REJECTED, f"SES rejected message: {code} {message}")
        return ChannelError(ErrorKind.UNAVAILABLE, f"SES error: {code} {message}")
    return ChannelError(ErrorKind.UNAVAILABLE, f"SES unreachable: {e}")


class SesChannel(NotificationChannel):
    """AWS SES email channel; credentials come from the default AWS chain."""

    def __init__(
        self,
        sender_email: str,
        region: str = "us-east-1",
        name: str = "ses",
        ready_timeout: float = 10.0,
        send_timeout: float = 15.0,
    ) -> None:
        super().__init__(name, ready_timeout=ready_timeout, send_timeout=send_timeout)
        self._sender_email = sender_email
        self._region = region
        self._session = get_session()

    def is_active(self) -> bool:
        return is_configured(self._sender_email)

    async def check_ready(self) -> None:
        try:
            async with self._session.create_client("ses", region_name=self._region) as client:
                await client.get_send_quota()
        except (BotoCoreError, ClientError) as e:
            raise _channel_error(e) from e

    async def send(self, message: OutgoingMessage) -> str:
        """Send via SES; the verified sender identity replaces the nominal one."""
        message = message.with_sender(self._sender_email)

        body = {"Html": {"Data": message.html_body, "Charset": "UTF-8"}}
        if message.text_body:
            body["Text"] = {"Data": message.text_body, "Charset": "UTF-8"}

        try:
            async with self._session.create_client("ses", region_name=self._region) as client:
                response = await client.send_email(
                    Source=message.formatted_sender,
                    Destination={"ToAddresses": [message.recipient]},
                    Message={
                        "Subject": {"Data": message.subject, "Charset": "UTF-8"},
                        "Body": body,
                    },
                )
        except (BotoCoreError, ClientError) as e:
            raise _channel_error(e) from e

        message_id = response.get("MessageId")
        if not message_id:
            raise ChannelError(ErrorKind.UNAVAILABLE, "SES returned no MessageId")

        logger.info("Email sent", channel=self.name, message_id=message_id)
        return message_id

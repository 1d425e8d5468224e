import httpx
import structlog

from ..config import is_configured
from ..domain.ports import ChannelError, ErrorKind, NotificationChannel
from ..domain.value_objects import OutgoingMessage

logger = structlog.get_logger()


def _error_from_response(response: httpx.Response) -> ChannelError:
    try:
        body = response.json()
        reason = body.get("message") or body.get("code") or response.text
    except ValueError:
        reason = response.text
    detail = f"Brevo API error: {response.status_code} {reason}".strip()

    if response.status_code in (401, 403):
        return ChannelError(ErrorKind.AUTH, detail)
    if response.status_code >= 500:
        return ChannelError(ErrorKind.UNAVAILABLE, detail)
    return ChannelError(ErrorKind.REJECTED, detail)


class BrevoApiChannel(NotificationChannel):
    """
    Brevo transactional email HTTP API.

    The API refuses a message without a sender address, so the channel is
    only active when both the key and a sender are configured.
    """

    BASE_URL = "https://api.brevo.com/v3"

    def __init__(
        self,
        api_key: str,
        sender_email: str = "",
        name: str = "brevo_api",
        base_url: str = BASE_URL,
        ready_timeout: float = 10.0,
        send_timeout: float = 15.0,
    ) -> None:
        super().__init__(name, ready_timeout=ready_timeout, send_timeout=send_timeout)
        self._api_key = api_key
        self._sender_email = sender_email
        self._base_url = base_url.rstrip("/")

    def is_active(self) -> bool:
        return is_configured(self._api_key) and is_configured(self._sender_email)

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "api-key": self._api_key,
            "accept": "application/json",
            "content-type": "application/json",
        }

    async def _request(self, method: str, path: str, timeout: float, **kwargs) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.request(
                    method, f"{self._base_url}{path}", headers=self._headers, **kwargs
                )
        except httpx.TimeoutException as e:
            raise ChannelError(ErrorKind.TIMEOUT, f"Brevo API timed out: {e}") from e
        except httpx.HTTPError as e:
            raise ChannelError(ErrorKind.UNAVAILABLE, f"Brevo API unreachable: {e}") from e

        if response.is_error:
            raise _error_from_response(response)
        return response

    async def check_ready(self) -> None:
        """Authenticated account lookup; cheapest call that validates the key."""
        await self._request("GET", "/account", self.ready_timeout)

    async def send(self, message: OutgoingMessage) -> str:
        sender_email = message.sender_email or self._sender_email
        payload = {
            "sender": {"name": message.sender_name, "email": sender_email},
            "to": [{"email": message.recipient}],
            "subject": message.subject,
            "htmlContent": message.html_body,
        }
        if message.text_body:
            payload["textContent"] = message.text_body

        response = await self._request("POST", "/smtp/email", self.send_timeout, json=payload)
        try:
            message_id = response.json().get("messageId")
        except ValueError:
            message_id = None
        if not message_id:
            raise ChannelError(ErrorKind.UNAVAILABLE, "Brevo API returned no messageId")

        logger.info("Email sent", channel=self.name, message_id=message_id)
        return message_id

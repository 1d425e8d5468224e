import asyncio
import io

import pytest
from PIL import Image

from fsl_express.domain.ports import NotificationChannel
from fsl_express.domain.value_objects import OutgoingMessage


class FakeChannel(NotificationChannel):
    """In-memory channel recording every call made by the orchestrator."""

    def __init__(
        self,
        name: str,
        *,
        active: bool = True,
        ready_error: Exception | None = None,
        send_error: Exception | None = None,
        message_id: str | None = None,
        ready_delay: float = 0.0,
        send_delay: float = 0.0,
        ready_timeout: float = 1.0,
        send_timeout: float = 1.0,
    ) -> None:
        super().__init__(name, ready_timeout=ready_timeout, send_timeout=send_timeout)
        self._active = active
        self._ready_error = ready_error
        self._send_error = send_error
        self._message_id = f"<{name}-001@test>" if message_id is None else message_id
        self._ready_delay = ready_delay
        self._send_delay = send_delay
        self.ready_calls = 0
        self.sent: list[OutgoingMessage] = []

    def is_active(self) -> bool:
        return self._active

    async def check_ready(self) -> None:
        self.ready_calls += 1
        if self._ready_delay:
            await asyncio.sleep(self._ready_delay)
        if self._ready_error:
            raise self._ready_error

    async def send(self, message: OutgoingMessage) -> str:
        self.sent.append(message)
        if self._send_delay:
            await asyncio.sleep(self._send_delay)
        if self._send_error:
            raise self._send_error
        return self._message_id

    @property
    def send_calls(self) -> int:
        return len(self.sent)


@pytest.fixture
def fake_channel():
    """Factory for FakeChannel instances."""
    return FakeChannel


@pytest.fixture
def sample_message() -> OutgoingMessage:
    return OutgoingMessage(
        recipient="a@b.com",
        subject="Your OTP Code",
        html_body="<p>Your OTP code is: <b>123456</b></p>",
        text_body="Your OTP code is: 123456",
        sender_email="noreply@fsl.example",
        sender_name="FSL Express",
    )


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (32, 48), color=(255, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()

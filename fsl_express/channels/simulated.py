from uuid import uuid4

import structlog

from ..domain.ports import NotificationChannel
from ..domain.value_objects import OutgoingMessage

logger = structlog.get_logger()


class SimulatedChannel(NotificationChannel):
    """Dev-mode channel: logs the message instead of sending it."""

    def __init__(self, name: str = "simulated") -> None:
        super().__init__(name, ready_timeout=1.0, send_timeout=1.0)

    def is_active(self) -> bool:
        return True

    async def check_ready(self) -> None:
        return None

    async def send(self, message: OutgoingMessage) -> str:
        message_id = f"<simulated-{uuid4().hex}@localhost>"
        logger.info(
            "Email simulated",
            channel=self.name,
            message_id=message_id,
            subject=message.subject,
            html_size=len(message.html_body),
        )
        return message_id

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class OutgoingMessage:
    """Immutable email handed to the delivery orchestrator."""
    recipient: str
    subject: str
    html_body: str
    sender_email: str
    sender_name: str = ""
    text_body: str | None = None

    def __post_init__(self) -> None:
        if not self.recipient or not self.recipient.strip():
            raise ValueError("Recipient cannot be empty")
        if not self.html_body and not self.text_body:
            raise ValueError("Message needs an HTML or plain-text body")

    @property
    def formatted_sender(self) -> str:
        if self.sender_name:
            return f'"{self.sender_name}" <{self.sender_email}>'
        return self.sender_email

    def with_sender(self, sender_email: str) -> "OutgoingMessage":
        """Copy with a different sender address; display name is kept."""
        return replace(self, sender_email=sender_email)

from .brevo_api import BrevoApiChannel
from .ses import SesChannel
from .simulated import SimulatedChannel
from .smtp import SmtpChannel, build_mime_message

__all__ = [
    "BrevoApiChannel",
    "SesChannel",
    "SimulatedChannel",
    "SmtpChannel",
    "build_mime_message",
]

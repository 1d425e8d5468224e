from .asset_index import AssetIndex
from .notification_channel import ChannelError, ErrorKind, NotificationChannel

__all__ = [
    "AssetIndex",
    "ChannelError",
    "ErrorKind",
    "NotificationChannel",
]

"""Out-of-band notifications (Telegram and friends)."""

from .manager import NotificationError, NotificationManager, NotificationProvider
from .telegram import TelegramProvider

__all__ = ["NotificationError", "NotificationManager", "NotificationProvider", "TelegramProvider"]

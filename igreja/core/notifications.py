"""
User-visible notifications (toasts)
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List
import structlog

logger = structlog.get_logger(__name__)


class NotificationVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass
class Notification:
    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT
    created_at: datetime = field(default_factory=datetime.utcnow)


class Notifier:
    """Collects notifications for the presentation layer to render"""

    def __init__(self):
        self._notifications: List[Notification] = []

    def notify(
        self,
        title: str,
        description: str,
        variant: NotificationVariant = NotificationVariant.DEFAULT,
    ) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self._notifications.append(notification)
        logger.info("notification", title=title, description=description, variant=variant.value)
        return notification

    def success(self, description: str, title: str = "Sucesso") -> Notification:
        return self.notify(title, description)

    def error(self, description: str, title: str = "Erro") -> Notification:
        return self.notify(title, description, NotificationVariant.DESTRUCTIVE)

    @property
    def notifications(self) -> List[Notification]:
        return list(self._notifications)

    @property
    def last(self):
        return self._notifications[-1] if self._notifications else None

    def drain(self) -> List[Notification]:
        """Return pending notifications and forget them"""
        pending, self._notifications = self._notifications, []
        return pending

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from itertools import count
from typing import Callable, List, Optional

from loguru import logger

from ..config import settings


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    id: int
    message: str
    level: NotificationLevel
    icon: Optional[str]
    created_at: datetime


@dataclass
class Notifier:
    """
    Transient message queue. Each notification stays visible for `ttl` and is
    dropped on the next read or write after that.
    """
    ttl: timedelta = field(default_factory=lambda: timedelta(seconds=settings.NOTIFICATION_TTL_SECONDS))
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(timezone.utc))
    _items: List[Notification] = field(default_factory=list)
    _ids: "count[int]" = field(default_factory=lambda: count(1))

    def notify(
        self,
        message: str,
        level: NotificationLevel = NotificationLevel.SUCCESS,
        icon: Optional[str] = None,
    ) -> Notification:
        item = Notification(
            id=next(self._ids),
            message=message,
            level=NotificationLevel(level),
            icon=icon,
            created_at=self.clock(),
        )
        self._prune()
        self._items.append(item)
        logger.debug("Notification [{}] {}", item.level.value, message)
        return item

    def success(self, message: str, icon: Optional[str] = None) -> Notification:
        return self.notify(message, NotificationLevel.SUCCESS, icon)

    def error(self, message: str, icon: Optional[str] = None) -> Notification:
        return self.notify(message, NotificationLevel.ERROR, icon)

    def info(self, message: str, icon: Optional[str] = None) -> Notification:
        return self.notify(message, NotificationLevel.INFO, icon)

    def active(self) -> List[Notification]:
        """Notifications still within their display window, oldest first."""
        self._prune()
        return list(self._items)

    def messages(self) -> List[str]:
        self._prune()
        return [n.message for n in self._items]

    def _prune(self) -> None:
        cutoff = self.clock() - self.ttl
        self._items = [n for n in self._items if n.created_at > cutoff]

"""
Realtime change feed for table rows
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional
import structlog

logger = structlog.get_logger(__name__)


@dataclass
class RowChange:
    """One row-level change: INSERT, UPDATE or DELETE"""
    table: str
    event_type: str
    new: Optional[Dict[str, Any]]
    old: Optional[Dict[str, Any]]
    commit_timestamp: datetime = field(default_factory=datetime.utcnow)

    def value(self, column: str) -> Any:
        row = self.new if self.new is not None else self.old
        return (row or {}).get(column)


ChangeHandler = Callable[[RowChange], Awaitable[None]]


class Subscription:
    """Handle returned by Channel.subscribe"""

    def __init__(self, hub: "RealtimeHub", channel: "Channel", handler: ChangeHandler):
        self._hub = hub
        self.channel = channel
        self.handler = handler
        self.active = True

    def matches(self, change: RowChange) -> bool:
        if change.table != self.channel.table:
            return False
        return all(str(change.value(col)) == str(val) for col, val in self.channel.filters.items())

    def unsubscribe(self):
        if self.active:
            self._hub.remove(self)
            self.active = False


class Channel:
    """Change feed for one table, optionally filtered by column equality"""

    def __init__(self, hub: "RealtimeHub", table: str, filters: Dict[str, Any]):
        self._hub = hub
        self.table = table
        self.filters = filters

    @property
    def name(self) -> str:
        suffix = "_".join(str(v) for v in self.filters.values())
        return f"{self.table}_{suffix}" if suffix else self.table

    def subscribe(self, handler: ChangeHandler) -> Subscription:
        subscription = Subscription(self._hub, self, handler)
        self._hub.add(subscription)
        logger.debug("Realtime subscription opened", channel=self.name)
        return subscription


class RealtimeHub:
    """Fan-out of row changes to every matching subscription"""

    def __init__(self):
        self._subscriptions: List[Subscription] = []

    def channel(self, table: str, **filters: Any) -> Channel:
        return Channel(self, table, filters)

    def add(self, subscription: Subscription):
        self._subscriptions.append(subscription)

    def remove(self, subscription: Subscription):
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    async def publish(self, change: RowChange):
        for subscription in [s for s in self._subscriptions if s.matches(change)]:
            try:
                await subscription.handler(change)
            except Exception as e:
                logger.error(
                    "Realtime handler failed",
                    channel=subscription.channel.name,
                    error=str(e),
                    exc_info=True,
                )

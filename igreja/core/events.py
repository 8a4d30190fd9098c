"""
Domain events system

Typed in-process events used to refresh dependents (tenant branding,
profile-derived state) without ambient globals. Each application context
owns its own bus.
"""

from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type
import uuid
import structlog

logger = structlog.get_logger(__name__)


class DomainEvent:
    """Base class for domain events"""

    def __init__(self, event_id: uuid.UUID = None):
        self.event_id = event_id or uuid.uuid4()
        self.occurred_at = datetime.utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary"""
        return {
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "event_type": self.__class__.__name__
        }


class ProfileChanged(DomainEvent):
    """Fired when the session's profile is loaded, replaced or cleared"""

    def __init__(
        self,
        profile_id: Optional[uuid.UUID],
        tenant_id: Optional[uuid.UUID],
        event_id: uuid.UUID = None
    ):
        super().__init__(event_id)
        self.profile_id = profile_id
        self.tenant_id = tenant_id

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "profile_id": str(self.profile_id) if self.profile_id else None,
            "tenant_id": str(self.tenant_id) if self.tenant_id else None,
        })
        return data


class TenantUpdated(DomainEvent):
    """Fired after tenant branding changes (e.g. a new logo)"""

    def __init__(
        self,
        tenant_id: uuid.UUID,
        logo: Optional[str] = None,
        event_id: uuid.UUID = None
    ):
        super().__init__(event_id)
        self.tenant_id = tenant_id
        self.logo = logo

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "tenant_id": str(self.tenant_id),
            "logo": self.logo,
        })
        return data


class SignedOut(DomainEvent):
    """Fired when the session is cleared"""


Handler = Callable[[DomainEvent], Awaitable[None]]


class EventBus:
    """Simple in-memory event bus for publishing domain events"""

    def __init__(self):
        self._subscribers: Dict[Type[DomainEvent], List[Handler]] = {}

    def subscribe(self, event_type: Type[DomainEvent], handler: Handler) -> Callable[[], None]:
        """Subscribe to a specific event type; returns the matching unsubscribe callable"""
        self._subscribers.setdefault(event_type, []).append(handler)
        logger.debug("Subscribed handler", event_type=event_type.__name__)
        return lambda: self.unsubscribe(event_type, handler)

    def unsubscribe(self, event_type: Type[DomainEvent], handler: Handler):
        """Unsubscribe from an event type"""
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            logger.debug("Unsubscribed handler", event_type=event_type.__name__)

    def subscriber_count(self, event_type: Type[DomainEvent]) -> int:
        return len(self._subscribers.get(event_type, []))

    async def publish(self, event: DomainEvent):
        """Publish an event to all subscribers"""
        event_type = type(event)
        handlers = list(self._subscribers.get(event_type, []))

        if not handlers:
            logger.debug("No subscribers for event type", event_type=event_type.__name__)
            return

        logger.info("Publishing event", event_type=event_type.__name__, event_id=str(event.event_id))

        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.error("Error in event handler", event_type=event_type.__name__, error=str(e), exc_info=True)

    def clear_subscribers(self):
        """Clear all subscribers"""
        self._subscribers.clear()
        logger.debug("Cleared all event subscribers")

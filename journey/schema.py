"""
Journey Event Schema

Wire contract between the storefront and the analytics collectors.
Events are built, dispatched and discarded; nothing here is persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

MOBILE_BREAKPOINT = 768
TABLET_BREAKPOINT = 1024


class EventType(Enum):
    """17 journey event types accepted by the collectors"""
    PAGE_VIEW = "page_view"
    BUTTON_CLICK = "button_click"
    FORM_SUBMIT = "form_submit"
    PRODUCT_VIEW = "product_view"
    ADD_TO_CART = "add_to_cart"
    REMOVE_FROM_CART = "remove_from_cart"
    CART_CLEARED = "cart_cleared"
    CART_ABANDONED = "cart_abandoned"
    CHECKOUT_START = "checkout_start"
    CHECKOUT_COMPLETE = "checkout_complete"
    SEARCH = "search"
    FILTER = "filter"
    SIGNUP = "signup"
    LOGIN = "login"
    LOGOUT = "logout"
    CLICK = "click"
    CUSTOM = "custom"

    @classmethod
    def coerce(cls, value: Union["EventType", str]) -> "EventType":
        """Accept either a member or its string value"""
        if isinstance(value, cls):
            return value
        return cls(value)


class DeviceType(Enum):
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


def get_device_type(viewport_width: int) -> DeviceType:
    """Classify a viewport width against the mobile and tablet breakpoints"""
    if viewport_width < MOBILE_BREAKPOINT:
        return DeviceType.MOBILE
    if viewport_width < TABLET_BREAKPOINT:
        return DeviceType.TABLET
    return DeviceType.DESKTOP


def utc_timestamp() -> str:
    """ISO-8601 UTC instant with millisecond precision"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class JourneyEvent:
    """
    A single user action enriched with session and page context

    userId stays None for anonymous visitors.
    """
    event_type: EventType
    event_name: str
    session_id: str
    user_id: Optional[str] = None
    metadata: Optional[dict] = None
    timestamp: str = field(default_factory=utc_timestamp)
    page: Optional[str] = None
    referrer: Optional[str] = None
    device_type: Optional[DeviceType] = None

    def to_dict(self) -> dict:
        """
        Serialize to the collectors' camelCase JSON body

        Unset optional fields are omitted (anonymous events carry no userId).
        """
        payload = {
            "eventType": self.event_type.value,
            "eventName": self.event_name,
            "userId": self.user_id,
            "sessionId": self.session_id,
            "metadata": self.metadata,
            "timestamp": self.timestamp,
            "page": self.page,
            "referrer": self.referrer,
            "deviceType": self.device_type.value if self.device_type else None,
        }
        return {k: v for k, v in payload.items() if v is not None}

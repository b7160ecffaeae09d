"""
Backend wire models.

Request bodies for the /logs/* endpoints and the response bodies the
collectors and the health endpoint return. Field names are snake_case in
Python and camelCase on the wire.
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .schema import utc_timestamp


class WireModel(BaseModel):
    """Base for camelCase payloads"""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# Collector responses

class CollectorReceipt(BaseModel):
    """Success body of a collector or log endpoint"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    log_id: Optional[Union[str, int]] = Field(default=None, alias="logId")
    event_id: Optional[Union[str, int]] = Field(default=None, alias="eventId")
    success: Optional[bool] = None

    @property
    def receipt_id(self) -> Optional[str]:
        value = self.log_id if self.log_id is not None else self.event_id
        return None if value is None else str(value)


class HealthResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str = "unknown"

    @property
    def is_ok(self) -> bool:
        return self.status == "ok"


# Journey logs

class JourneyLogType(str, Enum):
    """Event types accepted by /logs/journey"""
    PAGE_VIEW = "page_view"
    BUTTON_CLICK = "button_click"
    PRODUCT_VIEW = "product_view"
    ADD_TO_CART = "add_to_cart"
    REMOVE_FROM_CART = "remove_from_cart"
    CART_CLEARED = "cart_cleared"
    CART_ABANDONED = "cart_abandoned"
    CHECKOUT_START = "checkout_start"
    CHECKOUT_COMPLETE = "checkout_complete"
    SEARCH = "search"
    FILTER = "filter"
    CLICK = "click"
    CUSTOM = "custom"


class JourneyLog(WireModel):
    event_type: JourneyLogType = Field(alias="eventType")
    event_name: str = Field(alias="eventName")
    user_id: Optional[str] = Field(default=None, alias="userId")
    session_id: str = Field(alias="sessionId")
    metadata: Optional[Dict[str, Any]] = None
    timestamp: str = Field(default_factory=utc_timestamp)
    page: Optional[str] = None
    referrer: Optional[str] = None
    device_type: Optional[str] = Field(default=None, alias="deviceType")


# User activity logs

class UserAction(str, Enum):
    SIGNUP = "signup"
    LOGIN = "login"
    LOGOUT = "logout"
    PROFILE_UPDATE = "profile_update"
    PASSWORD_CHANGE = "password_change"
    PREFERENCES_UPDATE = "preferences_update"
    QUESTIONNAIRE_COMPLETE = "questionnaire_complete"
    ACCOUNT_DELETE = "account_delete"


class UserLog(WireModel):
    user_id: str = Field(alias="userId")
    email: str
    action: UserAction
    details: Optional[Dict[str, Any]] = None
    timestamp: str = Field(default_factory=utc_timestamp)
    ip_address: Optional[str] = Field(default=None, alias="ipAddress")
    user_agent: Optional[str] = Field(default=None, alias="userAgent")

    @field_validator("email")
    @classmethod
    def email_present(cls, v):
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v


# Order lifecycle logs

class OrderAction(str, Enum):
    CREATED = "created"
    PAYMENT_PENDING = "payment_pending"
    PAYMENT_CONFIRMED = "payment_confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    FAILED = "failed"


class OrderLog(WireModel):
    order_id: str = Field(alias="orderId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    email: Optional[str] = None
    action: OrderAction
    details: Optional[Dict[str, Any]] = None
    timestamp: str = Field(default_factory=utc_timestamp)
    order_total: Optional[float] = Field(default=None, alias="orderTotal", ge=0.0)
    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")


CART_LINE_KEYS = (
    ("productId", ("id", "productId")),
    ("productName", ("name", "productName")),
    ("price", ("price",)),
    ("quantity", ("quantity",)),
)


def _pick(item: Any, keys: tuple) -> Any:
    for key in keys:
        if isinstance(item, Mapping):
            value = item.get(key)
        else:
            value = getattr(item, key, None)
        if value is not None:
            return value
    return None


def cart_snapshot(items: Optional[Iterable[Any]]) -> List[Dict[str, Any]]:
    """
    Project cart items onto wire line items (cart_abandoned metadata)

    Items may be mappings or objects, keyed by the cart's own names
    (id/name) or the wire names (productId/productName). Values pass
    through unvalidated; missing ones are omitted.
    """
    lines = []
    for item in items or []:
        line = {wire_key: _pick(item, keys) for wire_key, keys in CART_LINE_KEYS}
        lines.append({k: v for k, v in line.items() if v is not None})
    return lines

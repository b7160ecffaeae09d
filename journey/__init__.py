"""
Storefront Journey Tracker

Client-side analytics for the furniture storefront: journey events with
session and page context, delivered best effort to the backend collectors.
"""

from .config import JourneyConfig
from .schema import EventType, DeviceType, JourneyEvent, get_device_type
from .storage import InMemoryStorage, JsonFileStorage, StorageAccessError
from .session import get_session_id, get_user_id
from .dom import Document, Element, Location, MouseEvent, Viewport
from .collectors import (
    CollectorDispatcher,
    CollectorSink,
    SinkResult,
    CURRENT_COLLECTOR,
    LEGACY_COLLECTOR,
)
from .tracker import JourneyTracker, get_tracker, set_tracker
from .instrumentation import TrackingSubscription, init_journey_tracking
from .logs import DatabaseLogger
from .connection import quick_connection_check, run_connection_test

__version__ = "1.0.0"

__all__ = [
    # Config
    "JourneyConfig",
    # Schema
    "EventType",
    "DeviceType",
    "JourneyEvent",
    "get_device_type",
    # Storage / session
    "InMemoryStorage",
    "JsonFileStorage",
    "StorageAccessError",
    "get_session_id",
    "get_user_id",
    # Page environment
    "Document",
    "Element",
    "Location",
    "MouseEvent",
    "Viewport",
    # Collectors
    "CollectorDispatcher",
    "CollectorSink",
    "SinkResult",
    "CURRENT_COLLECTOR",
    "LEGACY_COLLECTOR",
    # Tracker
    "JourneyTracker",
    "get_tracker",
    "set_tracker",
    "TrackingSubscription",
    "init_journey_tracking",
    # Logs / connectivity
    "DatabaseLogger",
    "quick_connection_check",
    "run_connection_test",
]

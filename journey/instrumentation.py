"""
Global Page Instrumentation

Wires a tracker to a Document: an initial page view, a fixed-interval
route-change poll and one capture-phase click listener. Everything installed
here is torn down by the returned subscription.
"""

import asyncio
import logging
from typing import Optional

from .dom import Document, MouseEvent
from .schema import EventType
from .tracker import JourneyTracker

logger = logging.getLogger(__name__)

ELEMENT_TEXT_LIMIT = 50


def describe_click(event: MouseEvent) -> dict:
    """Best-effort identifier, text and position of a clicked element"""
    target = event.target
    return {
        "elementId": target.id or target.class_name or target.tag_name,
        "elementText": (target.text_content or "")[:ELEMENT_TEXT_LIMIT],
        "elementType": target.tag_name.lower(),
        "x": event.client_x,
        "y": event.client_y,
    }


class TrackingSubscription:
    """Handle for the listener and poll task installed by init_journey_tracking"""

    def __init__(self, tracker: JourneyTracker, document: Document, poll_interval: float):
        self.tracker = tracker
        self.document = document
        self.poll_interval = poll_interval
        self.last_path = document.location.pathname
        self._poll_task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def active(self) -> bool:
        return not self._closed

    def on_click(self, event: MouseEvent):
        try:
            metadata = describe_click(event)
        except Exception as e:
            logger.error(f"Could not describe clicked element: {e}")
            return
        self.tracker.emit(EventType.CLICK, "Element Clicked", metadata)

    def check_route(self) -> bool:
        """Emit a page view if the path changed since the last check"""
        current_path = self.document.location.pathname
        if current_path == self.last_path:
            return False
        self.last_path = current_path
        self.tracker.track_page_view(current_path)
        return True

    async def _poll_routes(self):
        while True:
            await asyncio.sleep(self.poll_interval)
            self.check_route()

    def start(self):
        self.tracker.track_page_view(self.last_path)
        self.document.add_event_listener("click", self.on_click, capture=True)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, route-change polling disabled")
            return
        self._poll_task = loop.create_task(self._poll_routes())

    def close(self):
        """Stop polling and remove the click listener (safe to call twice)"""
        if self._closed:
            return
        self._closed = True
        self.document.remove_event_listener("click", self.on_click, capture=True)
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None
        logger.info("Journey instrumentation stopped")


def init_journey_tracking(
    tracker: JourneyTracker,
    document: Optional[Document] = None,
    poll_interval: Optional[float] = None
) -> TrackingSubscription:
    """
    Start automatic page-view and click tracking

    Args:
        tracker: Tracker that receives the events
        document: Page to instrument (defaults to the tracker's own)
        poll_interval: Seconds between route checks (defaults to config)

    Without a running event loop only the click listener is installed;
    the initial page view is dropped and no route polling happens.

    Returns:
        Subscription whose close() undoes everything installed here
    """
    document = document or tracker.document
    interval = poll_interval if poll_interval is not None else tracker.config.poll_interval

    subscription = TrackingSubscription(tracker, document, interval)
    subscription.start()
    logger.info(f"Journey instrumentation started (poll every {interval}s)")
    return subscription

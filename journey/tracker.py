"""
Journey Tracker

Turns storefront actions into journey events and delivers them, best effort,
to the analytics collectors. Nothing here ever raises into the caller:
delivery failures are logged and the event is dropped.
"""

import asyncio
import logging
from typing import Optional, Union

import httpx

from .collectors import CollectorDispatcher, CollectorSink
from .config import JourneyConfig
from .dom import Document
from .models import cart_snapshot
from .schema import EventType, JourneyEvent, get_device_type
from .session import get_session_id, get_user_id
from .storage import InMemoryStorage, KeyValueStorage

logger = logging.getLogger(__name__)


class JourneyTracker:
    """
    Event emitter for one browsing session

    Reads the visitor's identity and the session id from storage, the page
    context from the Document, and fans each event out to the collector
    sinks. Without a project id and publishable key it is inert.
    """

    def __init__(
        self,
        config: Optional[JourneyConfig] = None,
        document: Optional[Document] = None,
        session_storage: Optional[KeyValueStorage] = None,
        local_storage: Optional[KeyValueStorage] = None,
        sinks: Optional[list[CollectorSink]] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the tracker

        Args:
            config: Backend settings (defaults to JOURNEY_* environment)
            document: Page environment providing path, referrer and viewport
            session_storage: Session-scoped slot for the session id
            local_storage: Persisted slot holding the signed-in user id
            sinks: Collector sinks (defaults to current + legacy)
            client: Shared HTTP client, mainly for tests
        """
        self.config = config or JourneyConfig.from_env()
        self.document = document or Document()
        self.session_storage = session_storage if session_storage is not None else InMemoryStorage()
        self.local_storage = local_storage if local_storage is not None else InMemoryStorage()
        self.dispatcher = CollectorDispatcher(self.config, sinks=sinks, client=client)
        self._pending: set[asyncio.Task] = set()
        self._warned_unconfigured = False

    @property
    def session_id(self) -> str:
        return get_session_id(self.session_storage)

    def _network_enabled(self) -> bool:
        if self.config.is_configured:
            return True
        if not self._warned_unconfigured:
            logger.warning("Journey tracking disabled: project id or publishable key not configured")
            self._warned_unconfigured = True
        return False

    def build_event(
        self,
        event_type: Union[EventType, str],
        event_name: str,
        metadata: Optional[dict] = None
    ) -> JourneyEvent:
        """Assemble an event with identity, session and page context"""
        return JourneyEvent(
            event_type=EventType.coerce(event_type),
            event_name=event_name,
            user_id=get_user_id(self.local_storage),
            session_id=get_session_id(self.session_storage),
            metadata=metadata,
            page=self.document.location.pathname,
            referrer=self.document.referrer,
            device_type=get_device_type(self.document.viewport.width),
        )

    async def track_event(
        self,
        event_type: Union[EventType, str],
        event_name: str,
        metadata: Optional[dict] = None
    ) -> None:
        """
        Build one journey event and send it to every collector sink

        Never raises. Sink failures are logged by the dispatcher; anything
        failing before dispatch (bad event type, storage errors) is logged
        at error level.
        """
        try:
            event = self.build_event(event_type, event_name, metadata)

            if not self._network_enabled():
                return

            logger.info(f"Sending journey event: {event.event_type.value} {event_name}")
            await self.dispatcher.dispatch(event.to_dict())

        except Exception as e:
            logger.error(f"Failed to track journey event {event_type}: {e}")

    def emit(
        self,
        event_type: Union[EventType, str],
        event_name: str,
        metadata: Optional[dict] = None
    ) -> Optional[asyncio.Task]:
        """
        Fire-and-forget variant of track_event

        Schedules delivery on the running event loop and returns the task.
        Without a running loop the event is dropped with a warning, so
        synchronous hosts must run the tracker inside an asyncio loop
        (for example under asyncio.run) for events to be delivered.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop, dropping journey event {event_type}")
            return None

        task = loop.create_task(self.track_event(event_type, event_name, metadata))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def flush(self):
        """Wait for every scheduled event to finish delivering"""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self):
        await self.flush()
        await self.dispatcher.close()

    async def __aenter__(self) -> "JourneyTracker":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    # Convenience wrappers

    def track_page_view(self, page_name: str):
        return self.emit(EventType.PAGE_VIEW, page_name)

    def track_button_click(self, button_name: str, metadata: Optional[dict] = None):
        return self.emit(EventType.BUTTON_CLICK, button_name, metadata)

    def track_form_submit(self, form_name: str, metadata: Optional[dict] = None):
        return self.emit(EventType.FORM_SUBMIT, form_name, metadata)

    def track_product_view(self, product_id: str, product_name: str, price: float):
        return self.emit(EventType.PRODUCT_VIEW, "Product Viewed", {
            "productId": product_id,
            "productName": product_name,
            "price": price
        })

    def track_add_to_cart(self, product_id: str, product_name: str, price: float, quantity: int):
        return self.emit(EventType.ADD_TO_CART, "Added to Cart", {
            "productId": product_id,
            "productName": product_name,
            "price": price,
            "quantity": quantity
        })

    def track_remove_from_cart(self, product_id: str, product_name: str, price: float, quantity: int):
        logger.debug(f"Tracking cart item removal: {product_name} x{quantity}")
        return self.emit(EventType.REMOVE_FROM_CART, "Removed from Cart", {
            "productId": product_id,
            "productName": product_name,
            "price": price,
            "quantity": quantity
        })

    def track_cart_cleared(self, item_count: int, cart_total: float):
        logger.debug(f"Tracking cart cleared: {item_count} items, total {cart_total}")
        return self.emit(EventType.CART_CLEARED, "Cart Cleared", {
            "itemCount": item_count,
            "cartTotal": cart_total
        })

    def track_cart_abandoned(self, item_count: int, cart_total: float, items_in_cart: Optional[list] = None):
        """
        Cart abandonment carries a snapshot of every line item

        The event is sent even when the items cannot be read; it then
        carries an empty item list.
        """
        try:
            items = cart_snapshot(items_in_cart)
        except Exception as e:
            logger.error(f"Failed to snapshot abandoned cart: {e}")
            items = []

        logger.debug(f"Tracking cart abandonment: {item_count} items, total {cart_total}")
        return self.emit(EventType.CART_ABANDONED, "Cart Abandoned", {
            "itemCount": item_count,
            "cartTotal": cart_total,
            "items": items
        })

    def track_checkout_start(self, cart_total: float, item_count: int):
        return self.emit(EventType.CHECKOUT_START, "Checkout Started", {
            "cartTotal": cart_total,
            "itemCount": item_count
        })

    def track_checkout_complete(self, order_id: str, total: float, payment_method: str):
        return self.emit(EventType.CHECKOUT_COMPLETE, "Order Completed", {
            "orderId": order_id,
            "total": total,
            "paymentMethod": payment_method
        })

    def track_search(self, search_term: str, results_count: int):
        return self.emit(EventType.SEARCH, "Search Performed", {
            "searchTerm": search_term,
            "resultsCount": results_count
        })

    def track_filter(self, filter_name: str, value):
        return self.emit(EventType.FILTER, "Filter Applied", {
            "filterName": filter_name,
            "value": value
        })

    def track_signup(self, method: str):
        return self.emit(EventType.SIGNUP, "User Signed Up", {"method": method})

    def track_login(self, method: str):
        return self.emit(EventType.LOGIN, "User Logged In", {"method": method})

    def track_logout(self):
        return self.emit(EventType.LOGOUT, "User Logged Out")


_default_tracker: Optional[JourneyTracker] = None


def get_tracker() -> JourneyTracker:
    """Process-wide tracker configured from the environment"""
    global _default_tracker
    if _default_tracker is None:
        _default_tracker = JourneyTracker()
    return _default_tracker


def set_tracker(tracker: Optional[JourneyTracker]):
    global _default_tracker
    _default_tracker = tracker


async def track_event(event_type: Union[EventType, str], event_name: str, metadata: Optional[dict] = None):
    await get_tracker().track_event(event_type, event_name, metadata)


def emit(event_type: Union[EventType, str], event_name: str, metadata: Optional[dict] = None):
    return get_tracker().emit(event_type, event_name, metadata)


def track_page_view(page_name: str):
    return get_tracker().track_page_view(page_name)


def track_add_to_cart(product_id: str, product_name: str, price: float, quantity: int):
    return get_tracker().track_add_to_cart(product_id, product_name, price, quantity)


def track_checkout_complete(order_id: str, total: float, payment_method: str):
    return get_tracker().track_checkout_complete(order_id, total, payment_method)

"""
Database Logger

Posts journey, user-activity and order-lifecycle records to the backend's
/logs/* endpoints. Unlike the tracker, callers get a success flag back,
but errors are still logged rather than raised.
"""

import logging
from typing import Optional

import httpx

from .config import JourneyConfig
from .models import (
    CollectorReceipt,
    JourneyLog,
    OrderAction,
    OrderLog,
    UserAction,
    UserLog,
    WireModel,
)

logger = logging.getLogger(__name__)


class DatabaseLogger:
    """Client for the organized /logs/journey, /logs/user and /logs/order endpoints"""

    def __init__(
        self,
        config: Optional[JourneyConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        user_agent: str = "journey-tracker"
    ):
        self.config = config or JourneyConfig.from_env()
        self.user_agent = user_agent
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=self.config.timeout)

    async def _post_log(self, section: str, record: WireModel) -> bool:
        if not self.config.is_configured:
            logger.warning(f"[{section.upper()} LOG] Skipped: backend not configured")
            return False

        try:
            response = await self.client.post(
                f"{self.config.api_base}/logs/{section}",
                json=record.to_wire(),
                headers=self.config.headers()
            )

            if not response.is_success:
                logger.error(f"[{section.upper()} LOG] Server error: {response.status_code}")
                return False

            receipt = CollectorReceipt.model_validate(response.json())
            logger.info(f"[{section.upper()} LOG] Saved: {receipt.log_id}")
            return True

        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[{section.upper()} LOG] Failed: {e}")
            return False

    async def log_journey_event(self, log: JourneyLog) -> bool:
        logger.debug(f"[JOURNEY LOG] Tracking: {log.event_type} {log.event_name}")
        return await self._post_log("journey", log)

    async def log_user_activity(self, log: UserLog) -> bool:
        logger.debug(f"[USER LOG] Activity: {log.action} for {log.email}")
        return await self._post_log("user", log)

    async def log_order_event(self, log: OrderLog) -> bool:
        logger.debug(f"[ORDER LOG] Event: {log.action} for order {log.order_id}")
        return await self._post_log("order", log)

    async def _log_user(self, **fields) -> bool:
        try:
            log = UserLog(**fields)
        except ValueError as e:
            logger.error(f"[USER LOG] Invalid record: {e}")
            return False
        return await self.log_user_activity(log)

    async def _log_order(self, **fields) -> bool:
        try:
            log = OrderLog(**fields)
        except ValueError as e:
            logger.error(f"[ORDER LOG] Invalid record: {e}")
            return False
        return await self.log_order_event(log)

    # User helpers

    async def log_user_signup(self, user_id: str, email: str, method: str) -> bool:
        return await self._log_user(
            user_id=user_id,
            email=email,
            action=UserAction.SIGNUP,
            details={"method": method},
            user_agent=self.user_agent
        )

    async def log_user_login(self, user_id: str, email: str, method: str) -> bool:
        return await self._log_user(
            user_id=user_id,
            email=email,
            action=UserAction.LOGIN,
            details={"method": method},
            user_agent=self.user_agent
        )

    async def log_user_logout(self, user_id: str, email: str) -> bool:
        return await self._log_user(
            user_id=user_id,
            email=email,
            action=UserAction.LOGOUT,
            user_agent=self.user_agent
        )

    async def log_preferences_update(self, user_id: str, email: str, preferences: dict) -> bool:
        return await self._log_user(
            user_id=user_id,
            email=email,
            action=UserAction.PREFERENCES_UPDATE,
            details={"preferences": preferences},
            user_agent=self.user_agent
        )

    # Order helpers

    async def log_order_created(
        self,
        order_id: str,
        order_total: float,
        payment_method: str,
        user_id: Optional[str] = None,
        email: Optional[str] = None
    ) -> bool:
        return await self._log_order(
            order_id=order_id,
            user_id=user_id,
            email=email,
            action=OrderAction.CREATED,
            order_total=order_total,
            payment_method=payment_method
        )

    async def log_order_status_change(
        self,
        order_id: str,
        status: str,
        details: Optional[dict] = None
    ) -> bool:
        """
        Record an order moving to a new lifecycle status

        Args:
            order_id: Order identifier
            status: Any OrderAction value except "created"
            details: Free-form context (carrier, refund reason, ...)
        """
        try:
            action = OrderAction(status)
        except ValueError:
            logger.error(f"[ORDER LOG] Unknown order status: {status}")
            return False
        if action is OrderAction.CREATED:
            logger.error("[ORDER LOG] Use log_order_created for new orders")
            return False

        return await self._log_order(
            order_id=order_id,
            action=action,
            details=details
        )

    async def close(self):
        if self._owns_client:
            await self.client.aclose()

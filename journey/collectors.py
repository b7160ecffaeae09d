"""
Collector Dispatch

Fans a journey event out to every configured collector sink. Each sink call
is isolated: a failing sink is logged and never affects the other sinks or
the caller. There is no retry and no queue.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .config import JourneyConfig
from .models import CollectorReceipt

logger = logging.getLogger(__name__)

BODY_SNIPPET_LENGTH = 200


@dataclass(frozen=True)
class CollectorSink:
    """
    One remote collector

    Args:
        name: Label used in logs
        path: Endpoint path under the API base
        failure_level: Log level for non-2xx responses
    """
    name: str
    path: str
    failure_level: int = logging.DEBUG


CURRENT_COLLECTOR = CollectorSink(name="current", path="/logs/journey", failure_level=logging.WARNING)
LEGACY_COLLECTOR = CollectorSink(name="legacy", path="/analytics/track", failure_level=logging.DEBUG)

DEFAULT_SINKS = (CURRENT_COLLECTOR, LEGACY_COLLECTOR)


@dataclass
class SinkResult:
    sink: str
    delivered: bool
    status_code: Optional[int] = None
    receipt_id: Optional[str] = None
    error: Optional[str] = None


class CollectorDispatcher:
    """
    Posts payloads to a list of collector sinks over one shared HTTP client

    The client carries the publishable key as a bearer token.
    """

    def __init__(
        self,
        config: JourneyConfig,
        sinks: Optional[list[CollectorSink]] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.config = config
        self.sinks = list(DEFAULT_SINKS if sinks is None else sinks)
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=config.timeout)

    def add_sink(self, sink: CollectorSink):
        if sink not in self.sinks:
            self.sinks.append(sink)

    def remove_sink(self, name: str):
        self.sinks = [s for s in self.sinks if s.name != name]

    async def dispatch(self, payload: dict) -> list[SinkResult]:
        """
        Send one payload to every sink concurrently

        Args:
            payload: JSON body (a serialized JourneyEvent)

        Returns:
            One SinkResult per sink, in sink order
        """
        if not self.sinks:
            return []
        return list(await asyncio.gather(
            *(self._post(sink, payload) for sink in self.sinks)
        ))

    async def _post(self, sink: CollectorSink, payload: dict) -> SinkResult:
        url = f"{self.config.api_base}{sink.path}"
        try:
            response = await self.client.post(url, json=payload, headers=self.config.headers())

            if response.is_success:
                receipt = CollectorReceipt.model_validate(response.json())
                logger.info(f"Event tracked by {sink.name} collector: {receipt.receipt_id}")
                return SinkResult(
                    sink=sink.name,
                    delivered=True,
                    status_code=response.status_code,
                    receipt_id=receipt.receipt_id
                )

            snippet = response.text[:BODY_SNIPPET_LENGTH]
            logger.log(
                sink.failure_level,
                f"{sink.name} collector returned {response.status_code}: {snippet}"
            )
            return SinkResult(
                sink=sink.name,
                delivered=False,
                status_code=response.status_code,
                error=snippet
            )

        except (httpx.HTTPError, ValueError) as e:
            # ValueError covers undecodable JSON and receipt validation
            logger.debug(f"{sink.name} collector unavailable: {e}")
            return SinkResult(sink=sink.name, delivered=False, error=str(e))

    async def close(self):
        """Close the HTTP client if this dispatcher created it"""
        if self._owns_client:
            await self.client.aclose()

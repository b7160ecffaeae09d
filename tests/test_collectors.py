"""Unit tests for CollectorDispatcher"""

import logging

import httpx
import pytest

from journey.collectors import (
    CURRENT_COLLECTOR,
    LEGACY_COLLECTOR,
    CollectorDispatcher,
    CollectorSink,
)

PAYLOAD = {"eventType": "page_view", "eventName": "/", "sessionId": "session_1_abc"}


class TestCollectorDispatcher:
    """Tests for fan-out and per-sink isolation"""

    @pytest.fixture
    def dispatcher(self, config, client):
        return CollectorDispatcher(config, client=client)

    @pytest.mark.asyncio
    async def test_receipts(self, dispatcher, backend):
        backend.route("/logs/journey", body={"success": True, "logId": "journey:event:1"})
        backend.route("/analytics/track", body={"success": True, "eventId": "evt_9"})

        results = await dispatcher.dispatch(PAYLOAD)

        assert [r.sink for r in results] == ["current", "legacy"]
        assert all(r.delivered for r in results)
        assert results[0].receipt_id == "journey:event:1"
        assert results[1].receipt_id == "evt_9"

    @pytest.mark.asyncio
    async def test_failure_isolated(self, dispatcher, backend):
        backend.route("/logs/journey", error=httpx.ConnectError)

        results = await dispatcher.dispatch(PAYLOAD)

        assert results[0].delivered is False
        assert "simulated failure" in results[0].error
        assert results[1].delivered is True

    @pytest.mark.asyncio
    async def test_non_json_success_body(self, dispatcher, backend):
        backend.route("/analytics/track", status=200, body="<html>ok</html>")

        results = await dispatcher.dispatch(PAYLOAD)

        assert results[1].delivered is False
        assert results[1].status_code is None

    @pytest.mark.asyncio
    async def test_status_failure_levels(self, dispatcher, backend, caplog):
        backend.route("/logs/journey", status=503, body="unavailable")
        backend.route("/analytics/track", status=404, body="not found")

        with caplog.at_level(logging.DEBUG, logger="journey.collectors"):
            results = await dispatcher.dispatch(PAYLOAD)

        assert [r.status_code for r in results] == [503, 404]
        levels = {r.message.split(" ")[0]: r.levelno for r in caplog.records}
        assert levels["current"] == logging.WARNING
        assert levels["legacy"] == logging.DEBUG

    @pytest.mark.asyncio
    async def test_body_snippet_truncated(self, dispatcher, backend):
        backend.route("/logs/journey", status=500, body="x" * 1000)

        results = await dispatcher.dispatch(PAYLOAD)

        assert len(results[0].error) == 200

    @pytest.mark.asyncio
    async def test_sink_list_management(self, config, client, backend):
        dispatcher = CollectorDispatcher(config, sinks=[], client=client)
        assert await dispatcher.dispatch(PAYLOAD) == []

        dispatcher.add_sink(CURRENT_COLLECTOR)
        dispatcher.add_sink(CURRENT_COLLECTOR)
        dispatcher.add_sink(CollectorSink(name="warehouse", path="/events/warehouse"))
        results = await dispatcher.dispatch(PAYLOAD)

        assert [r.sink for r in results] == ["current", "warehouse"]
        assert backend.paths()[-1].endswith("/events/warehouse")

    def test_default_sinks(self, config, client):
        dispatcher = CollectorDispatcher(config, client=client)
        assert dispatcher.sinks == [CURRENT_COLLECTOR, LEGACY_COLLECTOR]


class TestReceipts:
    """Tests for collector receipt parsing"""

    @pytest.mark.asyncio
    async def test_numeric_receipt_ids(self, config, client, backend):
        backend.route("/logs/journey", body={"success": True, "logId": 42})
        backend.route("/analytics/track", body={"eventId": 7})

        results = await CollectorDispatcher(config, client=client).dispatch(PAYLOAD)

        assert all(r.delivered for r in results)
        assert [r.receipt_id for r in results] == ["42", "7"]

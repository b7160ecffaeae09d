"""Unit tests for connectivity checks"""

import httpx
import pytest

from journey import JourneyConfig
from journey.connection import quick_connection_check, run_connection_test


class TestQuickConnectionCheck:
    """Tests for quick_connection_check"""

    @pytest.mark.asyncio
    async def test_healthy(self, config, client, backend):
        backend.route("/health", body={"status": "ok"})

        assert await quick_connection_check(config, client=client) is True
        assert backend.requests[0].method == "GET"
        assert backend.paths()[0].endswith("/health")

    @pytest.mark.asyncio
    async def test_unexpected_status_value(self, config, client, backend):
        backend.route("/health", body={"status": "degraded"})

        assert await quick_connection_check(config, client=client) is False

    @pytest.mark.asyncio
    async def test_server_error(self, config, client, backend):
        backend.route("/health", status=502, body={"status": "ok"})

        assert await quick_connection_check(config, client=client) is False

    @pytest.mark.asyncio
    async def test_timeout_is_unreachable(self, config, client, backend):
        backend.route("/health", error=httpx.ConnectTimeout)

        assert await quick_connection_check(config, client=client) is False

    @pytest.mark.asyncio
    async def test_unconfigured(self, client, backend):
        assert await quick_connection_check(JourneyConfig(), client=client) is False
        assert backend.requests == []


class TestRunConnectionTest:
    """Tests for the full diagnostic"""

    @pytest.mark.asyncio
    async def test_all_endpoints(self, config, client, backend):
        backend.route("/health", body={"status": "ok"})
        backend.route("/stats", body={"totalLeads": 3})
        backend.route("/leads", body={"leads": [{"id": 1}, {"id": 2}, {"id": 3}]})
        backend.route("/users", body={"users": []})
        backend.route("/orders", status=500, body={"error": "db down"})

        report = await run_connection_test(config, client=client)

        assert report.success is True
        assert [c.path for c in report.checks] == ["/health", "/stats", "/leads", "/users", "/orders"]
        by_path = {c.path: c for c in report.checks}
        assert by_path["/leads"].item_count == 3
        assert by_path["/users"].item_count == 0
        assert by_path["/stats"].item_count is None
        assert by_path["/orders"].ok is False
        assert by_path["/orders"].status_code == 500

    @pytest.mark.asyncio
    async def test_health_failure_stops_run(self, config, client, backend):
        backend.route("/health", error=httpx.ConnectError)

        report = await run_connection_test(config, client=client)

        assert report.success is False
        assert report.message == "Health check failed"
        assert len(report.checks) == 1
        assert len(backend.requests) == 1

    @pytest.mark.asyncio
    async def test_unconfigured(self, client, backend):
        report = await run_connection_test(JourneyConfig(), client=client)

        assert report.success is False
        assert report.key_present is False
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_report_to_dict(self, config, client, backend):
        backend.route("/health", body={"status": "ok"})

        report = await run_connection_test(config, client=client)
        d = report.to_dict()

        assert d["success"] is True
        assert d["checks"][0]["path"] == "/health"

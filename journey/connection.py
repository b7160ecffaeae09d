"""
Backend Connectivity Checks

quick_connection_check answers "is the backend reachable right now" within
a few seconds. run_connection_test walks the health, stats and CRM list
endpoints and reports each result.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from .config import JourneyConfig
from .models import HealthResponse

logger = logging.getLogger(__name__)

QUICK_CHECK_TIMEOUT = 3.0

# (path, key holding the list in the response body)
DIAGNOSTIC_ENDPOINTS = [
    ("/stats", None),
    ("/leads", "leads"),
    ("/users", "users"),
    ("/orders", "orders"),
]


@dataclass
class EndpointCheck:
    path: str
    ok: bool
    status_code: Optional[int] = None
    item_count: Optional[int] = None
    error: Optional[str] = None


@dataclass
class ConnectionReport:
    api_base: str
    key_present: bool
    success: bool = False
    checks: list[EndpointCheck] = field(default_factory=list)
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "api_base": self.api_base,
            "key_present": self.key_present,
            "success": self.success,
            "message": self.message,
            "checks": [vars(c) for c in self.checks],
        }


async def quick_connection_check(
    config: Optional[JourneyConfig] = None,
    client: Optional[httpx.AsyncClient] = None
) -> bool:
    """
    Check the health endpoint, bounded to a few seconds

    Returns:
        True only for a 2xx response with {"status": "ok"}. Timeouts,
        network errors and unconfigured backends all count as unreachable.
    """
    config = config or JourneyConfig.from_env()
    if not config.is_configured:
        return False

    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=QUICK_CHECK_TIMEOUT)
    try:
        response = await client.get(
            f"{config.api_base}/health",
            headers=config.headers(),
            timeout=QUICK_CHECK_TIMEOUT
        )
        health = HealthResponse.model_validate(response.json())
        return response.is_success and health.is_ok
    except (httpx.HTTPError, ValueError) as e:
        # Offline mode is expected when the backend is not deployed
        logger.debug(f"Backend unreachable: {e}")
        return False
    finally:
        if owns_client:
            await client.aclose()


async def _check_endpoint(
    client: httpx.AsyncClient,
    config: JourneyConfig,
    path: str,
    list_key: Optional[str]
) -> EndpointCheck:
    try:
        response = await client.get(f"{config.api_base}{path}", headers=config.headers())
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"{path} check failed: {e}")
        return EndpointCheck(path=path, ok=False, error=str(e))

    check = EndpointCheck(path=path, ok=response.is_success, status_code=response.status_code)
    if list_key and isinstance(data, dict):
        check.item_count = len(data.get(list_key) or [])
    if check.ok:
        logger.info(f"{path} endpoint working" + (f" ({check.item_count} items)" if list_key else ""))
    else:
        logger.warning(f"{path} endpoint returned {response.status_code}")
    return check


async def run_connection_test(
    config: Optional[JourneyConfig] = None,
    client: Optional[httpx.AsyncClient] = None
) -> ConnectionReport:
    """
    Run the full connection diagnostic

    A failing health check ends the run early; later endpoint failures are
    recorded in the report but do not stop it.
    """
    config = config or JourneyConfig.from_env()
    report = ConnectionReport(api_base=config.api_base, key_present=bool(config.publishable_key))

    logger.info(f"Testing backend connection: {config.api_base or '<unset>'}")
    if not config.is_configured:
        report.message = "Backend not configured"
        logger.warning(report.message)
        return report

    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=config.timeout)
    try:
        try:
            response = await client.get(f"{config.api_base}/health", headers=config.headers())
            health = HealthResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Health check failed: {e}")
            report.checks.append(EndpointCheck(path="/health", ok=False, error=str(e)))
            report.message = "Health check failed"
            return report

        healthy = response.is_success and health.is_ok
        report.checks.append(EndpointCheck(path="/health", ok=healthy, status_code=response.status_code))
        if healthy:
            logger.info("Health check passed")
        else:
            logger.warning(f"Health check returned unexpected response: {health.status}")

        for path, list_key in DIAGNOSTIC_ENDPOINTS:
            report.checks.append(await _check_endpoint(client, config, path, list_key))

        report.success = True
        report.message = "All tests completed"
        return report
    finally:
        if owns_client:
            await client.aclose()


async def main():
    """Print a diagnostic report for the configured backend"""
    report = await run_connection_test()
    print(f"\nAPI base: {report.api_base or '<unset>'}")
    print(f"Publishable key: {'present' if report.key_present else 'missing'}")
    for check in report.checks:
        mark = "ok" if check.ok else "FAIL"
        detail = check.error or (f"{check.item_count} items" if check.item_count is not None else "")
        print(f"  [{mark}] {check.path} {check.status_code or ''} {detail}")
    print(f"\n{report.message}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())

"""
Journey Tracker Configuration

Reads the backend project identity and the publishable key from the
environment. Without both, every network call is skipped.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_FUNCTION_NAME = "make-server-3cbf86a5"

logger = logging.getLogger(__name__)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring malformed {name}={raw!r}, using {default}")
        return default


@dataclass
class JourneyConfig:
    """Connection settings for the hosted backend"""
    project_id: Optional[str] = None
    publishable_key: Optional[str] = None
    function_name: str = DEFAULT_FUNCTION_NAME
    api_base_override: Optional[str] = None
    timeout: float = 10.0
    poll_interval: float = 1.0

    @classmethod
    def from_env(cls) -> "JourneyConfig":
        """Build a config from JOURNEY_* environment variables"""
        return cls(
            project_id=os.getenv("JOURNEY_PROJECT_ID") or None,
            publishable_key=os.getenv("JOURNEY_PUBLISHABLE_KEY") or None,
            function_name=os.getenv("JOURNEY_FUNCTION_NAME", DEFAULT_FUNCTION_NAME),
            api_base_override=os.getenv("JOURNEY_API_BASE") or None,
            timeout=_float_env("JOURNEY_TIMEOUT", 10.0),
            poll_interval=_float_env("JOURNEY_POLL_INTERVAL", 1.0),
        )

    @property
    def api_base(self) -> str:
        """Edge function base URL, empty when no project is configured"""
        if self.api_base_override:
            return self.api_base_override.rstrip("/")
        if not self.project_id:
            return ""
        return f"https://{self.project_id}.supabase.co/functions/v1/{self.function_name}"

    @property
    def is_configured(self) -> bool:
        return bool(self.api_base) and bool(self.publishable_key)

    def headers(self) -> dict:
        """Headers sent with every backend request"""
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.publishable_key}" if self.publishable_key else "",
        }

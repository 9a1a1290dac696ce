"""ChamberMaster directory configuration values.

Credentials (association id, API key, base URL) live on each chamber record;
only the mock/live switch and HTTP behaviour are process-wide.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .env import env_flag, env_float
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig
from .storage import get_storage_config

DEFAULT_CHAMBERMASTER_BASE_URL = "http://secure2.chambermaster.com/api"
CHAMBERMASTER_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class ChamberMasterConfig:
    mock: bool
    mock_path: Path
    default_base_url: str = DEFAULT_CHAMBERMASTER_BASE_URL
    timeout_seconds: float = CHAMBERMASTER_TIMEOUT_SECONDS
    ratelimit: RateLimit | None = None

    def resilience_for(self, *, api_key: str, base_url: str | None = None) -> ResilienceConfig:
        """Build the HTTP settings for one chamber's directory account."""

        return ResilienceConfig(
            name="chambermaster",
            base_url=base_url or self.default_base_url,
            timeout_seconds=self.timeout_seconds,
            retry=NO_RETRY,
            ratelimit=self.ratelimit,
            default_headers={"X-ApiKey": api_key, "Content-Type": "application/json"},
        )


def get_chambermaster_config() -> ChamberMasterConfig:
    env_path = os.getenv("CHAMBERMASTER_MOCK_PATH")
    mock_path = Path(env_path) if env_path else get_storage_config().mock_directory_path()
    return ChamberMasterConfig(
        mock=env_flag("CHAMBERMASTER_MOCK"),
        mock_path=mock_path.expanduser(),
        timeout_seconds=env_float(
            "CHAMBERMASTER_TIMEOUT_SECONDS", default=CHAMBERMASTER_TIMEOUT_SECONDS
        ),
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
    )

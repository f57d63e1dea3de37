# sportradar_proxy/core/config.py
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# ----- Sportradar defaults -----
SPORTRADAR_BASE_URL = "https://api.sportradar.com"
SOCCER_PATH = "/soccer/trial/v4/en"
USER_AGENT = "sportradar-proxy/0.1"


# ----- App settings (env-driven) -----
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", env_file=".env", case_sensitive=False, extra="ignore")

    sportradar_api_key: Optional[str] = None
    sportradar_base_url: str = SPORTRADAR_BASE_URL
    sportradar_soccer_path: str = SOCCER_PATH

    cache_ttl_seconds: float = 60.0
    cache_soft_capacity: int = 100

    max_retries: int = 3
    retry_delays_seconds: List[float] = [1.0, 2.0, 4.0]
    http_timeout_seconds: float = 20.0
    user_agent: str = USER_AGENT

    coalesce_requests: bool = True
    # empty -> forward any endpoint path (first-party frontend)
    allowed_endpoint_prefixes: List[str] = []

    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

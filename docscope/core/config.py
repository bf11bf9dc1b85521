"""
DocScope - Client Configuration
===============================

Settings are read from the environment (and a local .env file).
The document service and the search service are configured
independently because search may run as a separate service instance.

Environment Variables:
    DOCSCOPE_API_BASE_URL: Document listing/detail/upload service
    DOCSCOPE_SEARCH_URL: Search service (defaults to DOCSCOPE_API_BASE_URL)
    DOCSCOPE_REQUEST_TIMEOUT: Total timeout per request in seconds (default: 30)
    DOCSCOPE_PROGRESS_TICK_SECONDS: Simulated progress interval (default: 1.0)
    DOCSCOPE_MAX_TICK_INCREMENT: Largest simulated step in percent (default: 15)
"""

import logging
import os
from functools import lru_cache
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from docscope.shared.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:8000"
MAX_TICK_INCREMENT = 15.0


def _validate_url(name: str, value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"{name} must be an http(s) URL, got {value!r}")
    return value.rstrip("/")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


class Settings:
    """Client settings from environment."""

    def __init__(
        self,
        api_base_url: Optional[str] = None,
        search_url: Optional[str] = None,
        request_timeout: Optional[float] = None,
        progress_tick_seconds: Optional[float] = None,
        max_tick_increment: Optional[float] = None,
    ):
        # Services
        self.api_base_url: str = _validate_url(
            "DOCSCOPE_API_BASE_URL",
            api_base_url or os.getenv("DOCSCOPE_API_BASE_URL", DEFAULT_API_BASE_URL),
        )
        self.search_url: str = _validate_url(
            "DOCSCOPE_SEARCH_URL",
            search_url or os.getenv("DOCSCOPE_SEARCH_URL") or self.api_base_url,
        )

        # Requests
        self.request_timeout: float = (
            request_timeout if request_timeout is not None
            else _float_env("DOCSCOPE_REQUEST_TIMEOUT", 30.0)
        )
        if self.request_timeout <= 0:
            raise ConfigurationError("DOCSCOPE_REQUEST_TIMEOUT must be positive")

        # Simulated progress
        self.progress_tick_seconds: float = (
            progress_tick_seconds if progress_tick_seconds is not None
            else _float_env("DOCSCOPE_PROGRESS_TICK_SECONDS", 1.0)
        )
        increment = (
            max_tick_increment if max_tick_increment is not None
            else _float_env("DOCSCOPE_MAX_TICK_INCREMENT", MAX_TICK_INCREMENT)
        )
        if increment > MAX_TICK_INCREMENT:
            logger.warning(
                f"DOCSCOPE_MAX_TICK_INCREMENT={increment} exceeds {MAX_TICK_INCREMENT}, clamping"
            )
        self.max_tick_increment: float = max(0.0, min(MAX_TICK_INCREMENT, increment))

    def __repr__(self) -> str:
        return (
            f"Settings(api_base_url={self.api_base_url!r}, search_url={self.search_url!r}, "
            f"request_timeout={self.request_timeout})"
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings, loading .env first."""
    load_dotenv()
    return Settings()

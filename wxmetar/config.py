"""
Runtime configuration for the metar tool.

Defaults can be overridden through environment variables, and command line
options override both.
"""

import os
import logging
import tempfile
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://aviationweather.gov/adds/dataserver_current/httpparam"
DEFAULT_USER_AGENT = "Metar/1.0"

# Cached documents older than this are fetched again
CACHE_TTL_SECONDS = 900

# Pause between stations to avoid server side throttling
STATION_DELAY_SECONDS = 1.0


@dataclass
class MetarConfig:
    """Settings for document retrieval and output."""

    base_url: str = DEFAULT_BASE_URL
    cache_dir: str = tempfile.gettempdir()
    hours: int = 1
    max_entries: int = 10
    cache_ttl_seconds: int = CACHE_TTL_SECONDS
    delay_seconds: float = STATION_DELAY_SECONDS
    timeout: int = 15
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> 'MetarConfig':
        """
        Build a configuration from METAR_* environment variables.

        Recognized: METAR_BASE_URL, METAR_CACHE_DIR, METAR_HOURS,
        METAR_MAX_ENTRIES, METAR_DELAY.
        """
        config = cls()
        config.base_url = os.getenv("METAR_BASE_URL", config.base_url)
        config.cache_dir = os.getenv("METAR_CACHE_DIR", config.cache_dir)
        config.hours = _env_number("METAR_HOURS", config.hours, int)
        config.max_entries = _env_number("METAR_MAX_ENTRIES", config.max_entries, int)
        config.delay_seconds = _env_number("METAR_DELAY", config.delay_seconds, float)
        return config


def _env_number(name: str, default, convert):
    """Numeric environment value, or default (with a warning) when unset or invalid."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return convert(value)
    except ValueError:
        logger.warning(f"Ignoring {name}={value!r}, using {default}")
        return default

"""Aviation Weather Center (aviationweather.gov) XML data server source."""

import logging
from typing import Optional

import requests

from wxmetar.config import (
    CACHE_TTL_SECONDS,
    DEFAULT_BASE_URL,
    DEFAULT_USER_AGENT,
    MetarConfig,
)
from wxmetar.exceptions import FetchError
from wxmetar.sources.cached import CachedSource

logger = logging.getLogger(__name__)


class AviationWeatherSource(CachedSource):
    """
    Fetch METAR/SPECI XML documents from the aviationweather.gov data server.

    Each station is requested separately and the response body is cached
    as-is, so a later run can decode it without touching the network.

    Example:
        source = AviationWeatherSource("/tmp")
        data = source.get_document("KPDX")
    """

    DEFAULT_TIMEOUT = 15

    def __init__(
        self,
        cache_dir: str,
        base_url: str = DEFAULT_BASE_URL,
        hours: int = 1,
        ttl_seconds: int = CACHE_TTL_SECONDS,
        session: Optional[requests.Session] = None,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """
        Args:
            cache_dir: Directory holding cached documents.
            base_url: Data server endpoint.
            hours: Hours of history to request.
            ttl_seconds: Maximum age of a cached document.
            session: Optional requests.Session for dependency injection (testing).
            timeout: HTTP request timeout in seconds.
            user_agent: User-Agent header sent with each request.
        """
        super().__init__(cache_dir, ttl_seconds)
        self.base_url = base_url
        self.hours = hours
        self._session = session or requests.Session()
        self._timeout = timeout
        # requests fills in its own User-Agent; only a caller supplied one is kept
        current = self._session.headers.get("User-Agent", "")
        if not current or current.startswith("python-requests/"):
            self._session.headers["User-Agent"] = user_agent

    @classmethod
    def from_config(
        cls, config: MetarConfig, session: Optional[requests.Session] = None
    ) -> 'AviationWeatherSource':
        return cls(
            config.cache_dir,
            base_url=config.base_url,
            hours=config.hours,
            ttl_seconds=config.cache_ttl_seconds,
            session=session,
            timeout=config.timeout,
            user_agent=config.user_agent,
        )

    def request_params(self, station: str) -> dict:
        return {
            "dataSource": "metars",
            "requestType": "retrieve",
            "format": "xml",
            "stationString": station,
            "hoursBeforeNow": str(self.hours),
        }

    def fetch_document(self, station: str) -> bytes:
        """
        Make the HTTP GET request and return the response body.

        Raises:
            FetchError: on connection failure or an HTTP error status
        """
        try:
            response = self._session.get(
                self.base_url,
                params=self.request_params(station),
                timeout=self._timeout,
                allow_redirects=True,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning("Fetch failed for %s: %s", station, e)
            raise FetchError(str(e)) from e
        return response.content

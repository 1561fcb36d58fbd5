"""
HexJSON Reference: layouts and lookup tables are served as JSON over HTTP.
Purpose: Wrap network calls with retry/back-off for robustness.
Dependencies: requests, time, core/config.py.
Ext Hooks: Add authentication, caching headers.
Client Only: HTTP client with resilience.
"""

import logging
import time
from typing import Any, Optional

import requests

from core.config import (NETWORK_BACKOFF_FACTOR, NETWORK_MAX_RETRIES,
                         NETWORK_RETRY_DELAY, NETWORK_TIMEOUT)

logger = logging.getLogger(__name__)


class NetworkClient:
    def __init__(self, base_url: str = "", max_retries: int = NETWORK_MAX_RETRIES,
                 retry_delay: float = NETWORK_RETRY_DELAY, backoff_factor: float = NETWORK_BACKOFF_FACTOR):
        self.base_url = base_url.rstrip('/')
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.backoff_factor = backoff_factor

    def url_for(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}{endpoint}"

    def _request_with_retry(self, method: str, endpoint: str, timeout: float = NETWORK_TIMEOUT,
                            **kwargs) -> Optional[requests.Response]:
        """Send a request with exponential backoff retry. None once retries are exhausted."""
        url = self.url_for(endpoint)
        delay = self.retry_delay
        for attempt in range(self.max_retries):
            try:
                response = requests.request(method, url, timeout=timeout, **kwargs)
                if response.status_code == 200:
                    return response
                logger.warning("Server error %s on attempt %d for %s",
                               response.status_code, attempt + 1, url)
            except requests.exceptions.RequestException as e:
                logger.warning("Network error on attempt %d for %s: %s", attempt + 1, url, e)

            if attempt < self.max_retries - 1:
                logger.info("Retrying in %s seconds...", delay)
                time.sleep(delay)
                delay *= self.backoff_factor
        logger.error("Giving up on %s after %d attempts", url, self.max_retries)
        return None

    def get_text_with_retry(self, endpoint: str, timeout: float = NETWORK_TIMEOUT) -> Optional[str]:
        response = self._request_with_retry("GET", endpoint, timeout=timeout)
        return response.text if response is not None else None

    def get_json_with_retry(self, endpoint: str, timeout: float = NETWORK_TIMEOUT) -> Optional[Any]:
        response = self._request_with_retry("GET", endpoint, timeout=timeout)
        return response.json() if response is not None else None

# Usage: client = NetworkClient(SERVER_URL)
# layout = client.get_text_with_retry("/api/layouts/calderdale")

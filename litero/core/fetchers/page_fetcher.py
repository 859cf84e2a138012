from typing import Mapping, Optional

import requests
from requests.exceptions import HTTPError, RequestException

from litero.utils.logger import get_logger
from .base_fetcher import BaseFetcher, FetchResult
from .exceptions import FetcherError
from .user_agents import choose_user_agent

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15


class PageFetcher(BaseFetcher):
    """Fetches story, page and series-index markup over HTTPS with ``requests``."""

    def __init__(self, user_agent: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        super().__init__(user_agent or choose_user_agent())
        self.timeout = timeout

    def _get_text(self, url: str, headers: Mapping[str, str]) -> requests.Response:
        try:
            response = requests.get(url, headers=dict(headers), timeout=self.timeout)
            response.raise_for_status()
        except HTTPError as http_err:
            raise FetcherError(f"HTTP error occurred while fetching {url}: {http_err}") from http_err
        except RequestException as req_err:
            raise FetcherError(f"Request failed for {url}: {req_err}") from req_err

        content_type = response.headers.get('content-type', '')
        if content_type and not content_type.startswith('text/'):
            raise FetcherError(f"Expected a text response from {url}, got '{content_type}'")
        return response

    def fetch_url(self, url: str, headers: Optional[Mapping[str, str]] = None) -> FetchResult:
        logger.info(f"Fetching HTML content from URL: {url}")
        try:
            response = self._get_text(url, self.request_headers(headers))
            return FetchResult(url=url, html=response.text, status_code=response.status_code)
        except FetcherError as e:
            logger.error(str(e))
            return FetchResult(url=url, error=str(e))
        except Exception as e:
            logger.error(f"An unexpected error occurred while fetching {url}: {e}", exc_info=True)
            return FetchResult(url=url, error=f"An unexpected error occurred for {url}: {e}")

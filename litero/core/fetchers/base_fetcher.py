from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass
class FetchResult:
    url: str
    html: Optional[str] = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.html is not None and self.error is None


def build_page_url(host: str, path: str, page_number: int = 1) -> str:
    """
    Page 1 lives at the bare path; later pages add a ``page`` query parameter.
    """
    url = f"https://{host}{path}"
    if page_number <= 1:
        return url
    joiner = '&' if '?' in path else '?'
    return f"{url}{joiner}page={page_number}"


class BaseFetcher(ABC):
    def __init__(self, user_agent: str):
        self.user_agent = user_agent

    def request_headers(self, headers: Optional[Mapping[str, str]] = None) -> dict:
        """Every outgoing request carries this run's User-Agent."""
        merged = dict(headers or {})
        merged['User-Agent'] = self.user_agent
        return merged

    @abstractmethod
    def fetch_url(self, url: str, headers: Optional[Mapping[str, str]] = None) -> FetchResult:
        """
        Issues one GET for ``url``.
        Failures are returned as ``FetchResult.error``, never raised.
        """
        pass

    def fetch(self, host: str, path: str, page_number: int = 1,
              headers: Optional[Mapping[str, str]] = None) -> FetchResult:
        return self.fetch_url(build_page_url(host, path, page_number), headers)

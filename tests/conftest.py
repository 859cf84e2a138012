import os
import tempfile
import threading
import time
from typing import Callable, Dict, List, Mapping, Optional, Union

import pytest

from litero.core.fetchers.base_fetcher import BaseFetcher, FetchResult

TEST_USER_AGENT = "litero-tests/1.0"


@pytest.fixture(autouse=True)
def isolated_workspace(monkeypatch):
    """Isolate the workspace for each test."""
    with tempfile.TemporaryDirectory() as temp_dir:
        monkeypatch.setenv("LITERO_WORKSPACE_ROOT", temp_dir)
        monkeypatch.delenv("LITERO_CONFIG_PATH", raising=False)
        monkeypatch.delenv("LITERO_OUTPUT_DIR", raising=False)
        yield temp_dir


# A response is either markup, an error string wrapped in FetchError, or a
# callable that produces either of the two when the URL is requested.
class FetchError(str):
    pass


Response = Union[str, FetchError, Callable[[], Union[str, FetchError]]]


class InMemoryFetcher(BaseFetcher):
    """
    Serves canned markup by URL and records every request it receives.
    Unknown URLs come back as a failed FetchResult, never as an exception.
    """

    def __init__(self, responses: Optional[Dict[str, Response]] = None, delays: Optional[Dict[str, float]] = None,
                 user_agent: str = TEST_USER_AGENT):
        super().__init__(user_agent)
        self.responses: Dict[str, Response] = dict(responses or {})
        self.delays: Dict[str, float] = dict(delays or {})
        self.requested: List[str] = []
        self.sent_headers: List[dict] = []
        self.timeline: List[tuple] = []
        self._lock = threading.Lock()

    def _record(self, *entry):
        with self._lock:
            self.timeline.append(entry)

    def fetch_url(self, url: str, headers: Optional[Mapping[str, str]] = None) -> FetchResult:
        with self._lock:
            self.requested.append(url)
            self.sent_headers.append(self.request_headers(headers))
        self._record("start", url)
        if url in self.delays:
            time.sleep(self.delays[url])
        response = self.responses.get(url)
        if callable(response):
            response = response()
        self._record("end", url)
        if response is None:
            return FetchResult(url=url, error=f"404 for {url}", status_code=404)
        if isinstance(response, FetchError):
            return FetchResult(url=url, error=str(response))
        return FetchResult(url=url, html=response, status_code=200)


def modern_page(title: str = "", author: str = "", author_url: str = "", paragraphs=(), last_page_link: Optional[int] = None,
                series_url: str = "") -> str:
    """Builds markup shaped like a page of the modern story layout."""
    parts = ["<html><body>"]
    if title:
        parts.append(f'<div class="panel clearfix j_bl j_bv"><h1>{title}</h1></div>')
    if author:
        parts.append(
            '<div class="clearfix panel y_eP y_eQ"><div class="y_eS">'
            f'<a class="y_eU" href="{author_url}">{author}</a></div></div>'
        )
    body = "".join(f"<p>{paragraph}</p>" for paragraph in paragraphs)
    parts.append(f'<div class="panel article aa_eQ"><div class="aa_ht"><div>{body}</div></div></div>')
    if last_page_link:
        links = "".join(f'<a class="l_bJ" href="?page={n}">{n}</a>' for n in range(1, last_page_link + 1))
        parts.append(f'<div class="l_bH">{links}</div>')
    if series_url:
        parts.append(
            '<div class="page__aside page__aside--float"><div class="panel z_r z_R">'
            '<div class="z_S z_fh"><a class="z_t" href="https://www.literotica.com/s/previous-part">Previous</a></div>'
            f'<div class="z_S z_fh"><a class="z_t" href="{series_url}">More from this series</a></div>'
            '</div></div>'
        )
    parts.append("</body></html>")
    return "".join(parts)


def series_index_page(title: str, author: str, author_url: str, story_urls) -> str:
    links = "".join(f'<a class="br_rj" href="{url}">{url.rsplit("/", 1)[-1]}</a>' for url in story_urls)
    return (
        "<html><body>"
        f'<div class="panel clearfix j_bl j_bv"><h1>{title}</h1></div>'
        '<div class="clearfix panel y_eP y_eQ"><div class="y_eS">'
        f'<a class="y_eU" href="{author_url}">{author}</a></div></div>'
        '<div class="page__main page__main-wrapper clearfix">'
        f'<div class="panel article aa_eQ">{links}</div>'
        "</div></body></html>"
    )


def classic_page(title: str = "", author: str = "", author_url: str = "", paragraphs=(), page_count: int = 0) -> str:
    """Builds markup shaped like a page of the classic story layout."""
    options = "".join(f"<option>{n}</option>" for n in range(1, page_count + 1))
    body = "".join(f"<p>{paragraph}</p>" for paragraph in paragraphs)
    return (
        "<html><body>"
        f'<div class="b-story-header"><h1>{title}</h1></div>'
        '<div class="b-story-user-y"><a href="https://www.literotica.com/authors/avatar"><img src="a.png"/></a>'
        f'<a href="{author_url}">{author}</a></div>'
        f'<div class="b-story-body-x"><div>{body}</div></div>'
        f'<div class="b-pager-pages"><select>{options}</select></div>'
        "</body></html>"
    )


@pytest.fixture
def fetcher_factory():
    def _factory(responses=None, delays=None):
        return InMemoryFetcher(responses, delays)
    return _factory

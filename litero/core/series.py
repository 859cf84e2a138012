from typing import List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from litero.utils.logger import get_logger
from .events import ProgressStream
from .fetchers.base_fetcher import BaseFetcher
from .formats import StoryFormat
from .parsers.layout_extractors import extract_series_index, prefer_existing
from .story import StoryDocument
from .url_classifier import SeriesUrl, StoryRequest, StoryUrl, classify_url

logger = get_logger(__name__)


class SeriesDocument:
    """
    The stories listed on a series index page, in the order the page lists them.

    The story the series was discovered from takes its own place in the list,
    so it is not fetched a second time.
    """

    def __init__(self, initial_story: StoryDocument, series_url: str = ""):
        initial_story.set_in_series()
        self._initial_story = initial_story
        self.format: StoryFormat = initial_story.format or StoryFormat.HTML
        self._stories: List[StoryDocument] = []
        self._request: Optional[StoryRequest] = None
        self.series_url = series_url or initial_story.series_url
        self.title = ""
        self.author = ""
        self.author_url = ""

    @property
    def stories(self) -> List[StoryDocument]:
        return list(self._stories)

    @property
    def post_title(self) -> str:
        return "" if self.format == StoryFormat.HTML else "-" * len(self.title)

    @property
    def first_story_url_title(self) -> str:
        if not self._stories:
            return ""
        classified = classify_url(self._stories[0].url)
        return classified.slug if isinstance(classified, StoryUrl) else ""

    def _build_request(self) -> Optional[StoryRequest]:
        headers = dict(self._initial_story.request.headers) if self._initial_story.request else {}
        classified = classify_url(self.series_url)
        if isinstance(classified, SeriesUrl):
            return StoryRequest(path=classified.path, host=classified.host, headers=headers)
        parsed = urlparse(self.series_url)
        if not parsed.netloc or not parsed.path:
            return None
        return StoryRequest(path=parsed.path, host=parsed.netloc, headers=headers)

    def request_series(self, fetcher: BaseFetcher, events: Optional[ProgressStream] = None) -> None:
        if events is None:
            events = ProgressStream()
        if not self.series_url:
            events.error("No series URL provided")
            return

        self._request = self._build_request()
        if not self._request:
            events.error("Looking up the series page failed. Please try again later.")
            return

        url = f"https://{self._request.host}{self._request.path}"
        events.emit(f"Requesting series page - {url}")
        result = fetcher.fetch_url(url, self._request.headers)
        if not result.ok:
            events.error("Error getting the series. Well, that sucks. Please try again later.", force=False)
            events.error(result.error or f"No content returned for {url}", force=False)
            return

        self.process_series(BeautifulSoup(result.html, 'html.parser'), fetcher, events)

    def process_series(self, soup: BeautifulSoup, fetcher: BaseFetcher, events: Optional[ProgressStream] = None) -> None:
        if events is None:
            events = ProgressStream()
        index = extract_series_index(soup)
        self.title = prefer_existing(self.title, index.metadata.title)
        self.author = prefer_existing(self.author, index.metadata.author)
        self.author_url = prefer_existing(self.author_url, index.metadata.author_url)

        self._stories = [self._story_for(link, events) for link in index.story_urls]
        events.emit(f"Series '{self.title}' lists {len(self._stories)} stories")

        # One story at a time; each story already fetches its own pages concurrently
        for position, story in enumerate(self._stories, start=1):
            events.emit(f"Getting story {position} of {len(self._stories)} - {story.url}")
            story.request_pages(fetcher, events)

    def _story_for(self, link: str, events: ProgressStream) -> StoryDocument:
        story = StoryDocument(
            url=link,
            request=self._request,
            format=self._initial_story.format,
            classic=False,
            series_url=self.series_url,
            in_series=True,
        )
        if story.parse_url_to_request(events) is self._request:
            # Unrecognised link; leave it without a request so it is reported, not fetched
            story.request = None
            return story
        initial_request = self._initial_story.request
        if initial_request and story.request.path == initial_request.path:
            return self._initial_story
        return story

    def __repr__(self) -> str:
        return f"SeriesDocument(series_url={self.series_url!r}, title={self.title!r}, stories={len(self._stories)})"

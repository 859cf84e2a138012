from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional, Union

from bs4 import BeautifulSoup

from litero.utils.helpers import array_of_other_pages
from litero.utils.logger import get_logger
from .events import ProgressStream
from .fetchers.base_fetcher import BaseFetcher, build_page_url
from .formats import StoryFormat
from .parsers.canonicalizer import canonicalize
from .parsers.layout_extractors import LayoutExtractor, get_layout_extractor
from .url_classifier import StoryRequest, StoryUrl, build_story_request, classify_url

logger = get_logger(__name__)


@dataclass
class PageResult:
    index: int
    content: Optional[str] = None
    series_url: str = ''
    error: Optional[str] = None


class StoryDocument:
    """
    One story: its metadata, request and one slot per page.

    Slots are filled by ``request_pages``; a slot whose page could not be
    fetched stays ``None``. Title, author and author URL are only ever filled
    when empty, so values supplied by the caller win over extracted ones.
    """

    def __init__(
        self,
        url: str = "",
        format: Union[StoryFormat, str] = StoryFormat.HTML,
        classic: bool = False,
        title: str = "",
        author: str = "",
        author_url: str = "",
        pages: Optional[List[Optional[str]]] = None,
        total_pages: int = 0,
        pages_completed: int = 0,
        request: Optional[StoryRequest] = None,
        in_series: bool = False,
        series_url: str = "",
    ):
        self.url = url or ""
        self.format = StoryFormat.parse(format or StoryFormat.HTML)
        self.classic = classic
        self.title = title or ""
        self.author = author or ""
        self.author_url = author_url or ""
        self.pages: List[Optional[str]] = list(pages or [])
        self._total_pages = total_pages or 0
        self.pages_completed = pages_completed or 0
        self.request = request
        self.in_series = in_series
        self.series_url = series_url or ""

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def extractor(self) -> LayoutExtractor:
        return get_layout_extractor(self.classic)

    @property
    def post_title(self) -> str:
        """A row of dashes under the title for the non-html formats."""
        return "" if self.format == StoryFormat.HTML else "-" * len(self.title)

    @property
    def slug(self) -> str:
        classified = classify_url(self.url)
        return classified.slug if isinstance(classified, StoryUrl) else ""

    def set_in_series(self) -> None:
        self.in_series = True

    def resolve_total_pages(self, soup: BeautifulSoup) -> int:
        """
        Fixes the page count from the first fetched page and sizes the page
        slots to match. Later calls return the count already fixed.
        """
        if not self._total_pages:
            self._total_pages = self.extractor.count_pages(soup) or 1
        if len(self.pages) != self._total_pages:
            self.pages = (self.pages + [None] * self._total_pages)[:self._total_pages]
        return self._total_pages

    def parse_url_to_request(self, events: Optional[ProgressStream] = None) -> Optional[StoryRequest]:
        if events is None:
            events = ProgressStream()
        classified = classify_url(self.url)
        if not isinstance(classified, StoryUrl):
            events.error(f"The url {self.url} is not valid.")
            return self.request
        inherited_headers = self.request.headers if self.request else {}
        self.request = build_story_request(classified, classic=self.classic, headers=inherited_headers)
        return self.request

    def request_pages(self, fetcher: BaseFetcher, events: Optional[ProgressStream] = None) -> str:
        """
        Retrieves every page of the story and returns the series URL found on
        its last page, or an empty string. Pages that fail are left empty.
        """
        if events is None:
            events = ProgressStream()
        self.parse_url_to_request(events)
        if self.pages:
            # Already retrieved, e.g. the story a series was discovered from
            return self.series_url
        self.request_first_page(fetcher, events)
        self.request_other_pages(fetcher, events)
        return self.series_url

    def request_first_page(self, fetcher: BaseFetcher, events: ProgressStream) -> None:
        html = self._download(fetcher, events, 1)
        if html is None:
            return
        soup = BeautifulSoup(html, 'html.parser')
        self.resolve_total_pages(soup)
        events.emit(f"This story has totally {self._total_pages} Pages")

        metadata = self.extractor.extract_metadata(soup).merged_into(self.title, self.author, self.author_url)
        self.title, self.author, self.author_url = metadata.title, metadata.author, metadata.author_url

        self._store_page(self._process_page(soup, 0), events)

    def request_other_pages(self, fetcher: BaseFetcher, events: ProgressStream) -> None:
        if self._total_pages <= 1:
            return
        page_numbers = array_of_other_pages(self._total_pages)
        if not self.request:
            for page_number in page_numbers:
                events.error(f"Looking up the story page {page_number} failed. Please try again later.")
            return

        # One worker per page; each result lands in its own slot as it arrives
        with ThreadPoolExecutor(max_workers=len(page_numbers)) as executor:
            futures = {}
            for page_number in page_numbers:
                events.emit(f"Requesting page - {page_number} - {self._page_url(page_number)}")
                futures[executor.submit(self._fetch_and_process, fetcher, page_number)] = page_number
            for future in as_completed(futures):
                page_number = futures[future]
                try:
                    result = future.result()
                except Exception as e:
                    logger.error(f"Unexpected error processing page {page_number} of {self.url}: {e}", exc_info=True)
                    result = PageResult(index=page_number - 1, error=str(e))
                self._store_page(result, events)

    def _page_url(self, page_number: int) -> str:
        if not self.request:
            return ""
        return build_page_url(self.request.host, self.request.path, page_number)

    def _download(self, fetcher: BaseFetcher, events: ProgressStream, page_number: int) -> Optional[str]:
        if not self.request or not self.request.host or not self.request.path:
            events.error(f"Looking up the story page {page_number} failed. Please try again later.")
            return None
        events.emit(f"Requesting page - {page_number} - {self._page_url(page_number)}")
        result = fetcher.fetch(self.request.host, self.request.path, page_number, self.request.headers)
        if not result.ok:
            events.error("Error getting the story. Well, that sucks. Please try again later.", force=False)
            events.error(result.error or f"No content returned for {result.url}", force=False)
            return None
        return result.html

    def _fetch_and_process(self, fetcher: BaseFetcher, page_number: int) -> PageResult:
        """Runs on a worker thread: reads the document, never writes it."""
        result = fetcher.fetch(self.request.host, self.request.path, page_number, self.request.headers)
        if not result.ok:
            return PageResult(index=page_number - 1, error=result.error or f"No content returned for {result.url}")
        soup = BeautifulSoup(result.html, 'html.parser')
        return self._process_page(soup, page_number - 1)

    def _process_page(self, soup: BeautifulSoup, index: int) -> PageResult:
        extractor = self.extractor
        result = PageResult(index=index, content=canonicalize(extractor.extract_page_content(soup)))
        if not self.in_series and index == self._total_pages - 1:
            result.series_url = extractor.discover_series_url(soup)
        return result

    def _store_page(self, result: PageResult, events: ProgressStream) -> None:
        if result.error is not None:
            events.error("Error getting the story. Well, that sucks. Please try again later.", force=False)
            events.error(f"Page {result.index + 1}: {result.error}", force=False)
            return
        if result.index >= len(self.pages):
            logger.warning(f"Page {result.index + 1} is outside the {len(self.pages)} known pages of {self.url}")
            return
        self.pages[result.index] = result.content
        self.pages_completed += 1
        events.emit(f"Got page {result.index + 1}; Total pages done so far : {self.pages_completed}")
        if result.series_url:
            self.series_url = self.series_url or result.series_url

    def __repr__(self) -> str:
        return (f"StoryDocument(url={self.url!r}, title={self.title!r}, "
                f"pages={self.pages_completed}/{self._total_pages}, in_series={self.in_series})")

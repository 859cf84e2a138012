import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

# Modern layout selectors
MODERN_TITLE_SELECTOR = '.panel.clearfix.j_bl.j_bv h1'
MODERN_AUTHOR_SELECTOR = '.clearfix.panel.y_eP.y_eQ .y_eS > .y_eU'
MODERN_CONTENT_SELECTOR = '.panel.article.aa_eQ .aa_ht > div'
MODERN_PAGE_LINK_SELECTOR = '.l_bH a.l_bJ'
SERIES_PANEL_SELECTORS = ('.page__aside.page__aside--float', '.panel.z_r.z_R', '.z_S.z_fh', 'a.z_t')
SERIES_STORY_LINK_SELECTOR = '.page__main.page__main-wrapper.clearfix .panel.article.aa_eQ a.br_rj'

# Classic layout selectors
CLASSIC_TITLE_SELECTOR = '.b-story-header h1'
CLASSIC_USER_SELECTOR = '.b-story-user-y'
CLASSIC_CONTENT_SELECTOR = '.b-story-body-x p'
CLASSIC_PAGE_OPTION_SELECTOR = '.b-pager-pages select option'

LEADING_NUMBER_REGEX = re.compile(r"\s*(\d+)")


def prefer_existing(current: Optional[str], extracted: Optional[str]) -> str:
    """A field keeps its value once set; only an empty one takes the extracted value."""
    return current or extracted or ''


@dataclass
class StoryMetadata:
    title: str = ''
    author: str = ''
    author_url: str = ''

    def merged_into(self, title: str, author: str, author_url: str) -> 'StoryMetadata':
        """Applies ``prefer_existing`` to each field, the existing values winning."""
        return StoryMetadata(
            title=prefer_existing(title, self.title),
            author=prefer_existing(author, self.author),
            author_url=prefer_existing(author_url, self.author_url),
        )


@dataclass
class SeriesIndex:
    metadata: StoryMetadata = field(default_factory=StoryMetadata)
    story_urls: List[str] = field(default_factory=list)


def _joined_text(soup: BeautifulSoup, selector: str) -> str:
    return ''.join(element.get_text() for element in soup.select(selector)).strip()


def _outer_markup(soup: BeautifulSoup, selector: str) -> str:
    return ''.join(str(element) for element in soup.select(selector)).strip()


def _href(tag: Optional[Tag]) -> str:
    if tag is None:
        return ''
    href = tag.get('href')
    if isinstance(href, list):
        href = href[0] if href else ''
    return (href or '').strip()


def _modern_metadata(soup: BeautifulSoup) -> StoryMetadata:
    author_link = soup.select_one(MODERN_AUTHOR_SELECTOR)
    return StoryMetadata(
        title=_joined_text(soup, MODERN_TITLE_SELECTOR),
        author=author_link.get_text().strip() if author_link else '',
        author_url=_href(author_link),
    )


class LayoutExtractor(ABC):
    """Pulls metadata, page content and page count out of one layout's markup."""

    @abstractmethod
    def extract_metadata(self, soup: BeautifulSoup) -> StoryMetadata:
        pass

    @abstractmethod
    def extract_page_content(self, soup: BeautifulSoup) -> str:
        """Returns the markup fragment holding the page's story text."""
        pass

    @abstractmethod
    def count_pages(self, soup: BeautifulSoup) -> int:
        """Page count as advertised by the page; 0 when it cannot be told."""
        pass

    def discover_series_url(self, soup: BeautifulSoup) -> str:
        return ''


class ClassicLayoutExtractor(LayoutExtractor):

    def extract_metadata(self, soup: BeautifulSoup) -> StoryMetadata:
        metadata = StoryMetadata(title=_joined_text(soup, CLASSIC_TITLE_SELECTOR))
        user_block = soup.select_one(CLASSIC_USER_SELECTOR)
        if user_block is not None:
            # The second child element of the user block is the author link
            children = user_block.find_all(True, recursive=False)
            if len(children) > 1:
                metadata.author = children[1].get_text().strip()
                metadata.author_url = _href(children[1])
        return metadata

    def extract_page_content(self, soup: BeautifulSoup) -> str:
        return _outer_markup(soup, CLASSIC_CONTENT_SELECTOR)

    def count_pages(self, soup: BeautifulSoup) -> int:
        return len(soup.select(CLASSIC_PAGE_OPTION_SELECTOR))


class ModernLayoutExtractor(LayoutExtractor):

    def extract_metadata(self, soup: BeautifulSoup) -> StoryMetadata:
        return _modern_metadata(soup)

    def extract_page_content(self, soup: BeautifulSoup) -> str:
        return _outer_markup(soup, MODERN_CONTENT_SELECTOR)

    def count_pages(self, soup: BeautifulSoup) -> int:
        page_links = soup.select(MODERN_PAGE_LINK_SELECTOR)
        if not page_links:
            return 1
        match = LEADING_NUMBER_REGEX.match(page_links[-1].get_text())
        return int(match.group(1)) if match else 1

    def discover_series_url(self, soup: BeautifulSoup) -> str:
        """Finds the 'read more in this series' link in the side panel, if any."""
        aside_selector, panel_selector, link_div_selector, link_selector = SERIES_PANEL_SELECTORS
        aside = soup.select_one(aside_selector)
        if aside is None:
            return ''
        panel = aside.select_one(panel_selector)
        if panel is None:
            return ''
        link_divs = panel.select(link_div_selector)
        if not link_divs:
            return ''
        return _href(link_divs[-1].select_one(link_selector))


def get_layout_extractor(classic: bool) -> LayoutExtractor:
    return ClassicLayoutExtractor() if classic else ModernLayoutExtractor()


def extract_series_index(soup: BeautifulSoup) -> SeriesIndex:
    """Series title, author and the member story links, in page order."""
    links = [_href(link) for link in soup.select(SERIES_STORY_LINK_SELECTOR)]
    return SeriesIndex(metadata=_modern_metadata(soup), story_urls=[link for link in links if link])

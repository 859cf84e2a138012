import re
from typing import Optional

import markdown
from markdownify import markdownify

from .html_cleaner import HTMLCleaner

# Zero-width characters and the byte-order mark some pages start with
LEADING_INVISIBLE_REGEX = re.compile('^[\u200B\u200C\u200D\u200E\u200F\uFEFF]')
EXCESS_BLANK_LINES_REGEX = re.compile(r'\n{3,}')

_default_cleaner = HTMLCleaner()


def canonicalize(fragment: str, cleaner: Optional[HTMLCleaner] = None) -> str:
    """
    Turns a page's content fragment into canonical text (markdown), the form
    every page is stored in whatever output format is requested later.
    """
    fragment = LEADING_INVISIBLE_REGEX.sub('', fragment or '', count=1)
    sanitized = (cleaner or _default_cleaner).sanitize(fragment)
    if not sanitized:
        return ''
    text = markdownify(sanitized, heading_style='ATX')
    text = EXCESS_BLANK_LINES_REGEX.sub('\n\n', text)
    return text.strip()


def render_canonical(text: str) -> str:
    """Canonical text back to HTML, for the html output format."""
    return markdown.markdown(text or '')

import re

from bs4 import BeautifulSoup, NavigableString, Tag


class HTMLCleaner:
    def __init__(self, config=None):
        """
        Initializes the HTMLCleaner.
        Config may extend the tag and attribute lists with 'extra_tags_to_remove'
        and 'extra_attributes_to_remove'.
        """
        self.config = config if config else {}
        # Tags that execute, embed or submit anything; removed with their contents.
        self.default_tags_to_remove = [
            'script', 'style', 'link', 'meta', 'noscript', 'iframe', 'frame', 'frameset',
            'object', 'embed', 'applet', 'form', 'input', 'button', 'select', 'textarea', 'svg', 'math',
        ] + list(self.config.get('extra_tags_to_remove', []))
        self.default_attributes_to_remove = [
            'style', 'class', 'id',
            'aria-labelledby', 'aria-describedby', 'role',
        ] + list(self.config.get('extra_attributes_to_remove', []))
        self.url_attributes = ['href', 'src', 'action', 'formaction', 'xlink:href']
        self.void_tags = ['br', 'hr', 'img']

    def _is_unwanted_attribute(self, attr: str) -> bool:
        attr = attr.lower()
        return (
            attr in self.default_attributes_to_remove
            or attr.startswith('on')
            or attr.startswith('data-')
        )

    @staticmethod
    def _is_script_url(value) -> bool:
        if isinstance(value, list):
            value = ' '.join(value)
        # Browsers ignore whitespace and control characters inside the scheme
        compact = re.sub(r'[\s\x00-\x1f]+', '', str(value)).lower()
        return compact.startswith(('javascript:', 'vbscript:', 'data:text/html'))

    def sanitize(self, markup: str) -> str:
        """
        Returns ``markup`` with executable content, event handlers, presentational
        attributes and empty elements removed. Text and structural markup are kept.
        """
        if not markup:
            return ''
        soup = BeautifulSoup(markup, 'html.parser')

        # 1. Remove unwanted tags together with their contents
        for tag_name in self.default_tags_to_remove:
            for tag in soup.find_all(tag_name):
                tag.decompose()

        # 2. Remove unwanted attributes and script URLs from all remaining tags
        for tag in soup.find_all(True):
            for attr in list(tag.attrs):
                if self._is_unwanted_attribute(attr):
                    del tag[attr]
                elif attr.lower() in self.url_attributes and self._is_script_url(tag[attr]):
                    del tag[attr]

        # 3. Remove empty tags, innermost first, keeping void elements like <br/>
        for tag in reversed(soup.find_all(True)):
            if tag.name in self.void_tags:
                continue
            has_content = any(
                isinstance(child, Tag) or (isinstance(child, NavigableString) and child.strip())
                for child in tag.children
            )
            if not has_content:
                tag.decompose()

        return str(soup).strip()

from html.parser import HTMLParser

import pytest

from litero.core.builders.content_assembler import PAGE_RULE, render_series, render_story, separator_for
from litero.core.formats import StoryFormat
from litero.core.series import SeriesDocument
from litero.core.story import StoryDocument


def story_with(pages, format="txt", title="Tale", url="https://www.literotica.com/s/tale"):
    return StoryDocument(url=url, format=format, title=title, pages=pages, total_pages=len(pages))


class ParagraphDepth(HTMLParser):
    """Tracks open <p> tags; a stray close drives the depth below zero."""

    def __init__(self):
        super().__init__()
        self.depth = 0
        self.lowest = 0
        self.deepest = 0

    def handle_starttag(self, tag, attrs):
        if tag == "p":
            self.depth += 1
            self.deepest = max(self.deepest, self.depth)

    def handle_endtag(self, tag):
        if tag == "p":
            self.depth -= 1
            self.lowest = min(self.lowest, self.depth)


def paragraph_depth(content):
    parser = ParagraphDepth()
    parser.feed(content)
    parser.close()
    return parser


class TestSeparator:

    def test_plain_formats_use_newlines(self):
        assert separator_for(StoryFormat.TXT) == "\n"
        assert separator_for("md", no_paragraph_break=True) == "\n"

    def test_html_uses_line_or_paragraph_breaks(self):
        assert separator_for(StoryFormat.HTML) == "<br />"
        assert separator_for(StoryFormat.HTML, no_paragraph_break=True) == "<p></p>"


class TestRenderStory:

    def test_page_indicators_between_pages(self):
        story = story_with(["A", "B", "C"])
        assert render_story(story) == f"A\n\nPage 2:\n{PAGE_RULE}\n\nB\n\nPage 3:\n{PAGE_RULE}\n\nC"

    def test_without_page_indicators(self):
        story = story_with(["A", "B", "C"])
        assert render_story(story, page_indicator=False) == "A\n\nB\n\nC"

    def test_single_page_has_no_indicator(self):
        assert render_story(story_with(["Only page"])) == "Only page"

    def test_missing_page_renders_empty_but_keeps_its_label(self):
        story = story_with(["A", None, "C"])
        assert render_story(story) == f"A\n\nPage 2:\n{PAGE_RULE}\n\n\n\nPage 3:\n{PAGE_RULE}\n\nC"

    def test_markdown_keeps_canonical_text(self):
        story = story_with(["Some *emphasis*", "More"], format="md")
        assert render_story(story, page_indicator=False) == "Some *emphasis*\n\nMore"

    def test_html_renders_paragraphs_and_line_breaks(self):
        story = story_with(["Hello **world**", "Second"], format="html")

        assert render_story(story) == (
            "<p>Hello <strong>world</strong></p><br /><br />Page 2:<br />"
            f"{PAGE_RULE}<br /><br /><p>Second</p>"
        )

    def test_html_has_no_raw_newlines(self):
        story = story_with(["One\n\nTwo", "Three"], format="html")
        content = render_story(story, no_paragraph_break=True)

        assert "\n" not in content
        assert content.startswith("<p>One</p><p></p><p>Two</p>")

    @pytest.mark.parametrize("no_paragraph_break", [False, True])
    def test_html_paragraphs_stay_balanced(self, no_paragraph_break):
        story = story_with(["One\n\nTwo  \nstill two", "Three", None, "Four"], format="html")
        content = render_story(story, no_paragraph_break=no_paragraph_break)

        depth = paragraph_depth(content)
        assert "\n" not in content
        assert depth.depth == 0
        assert depth.lowest == 0
        assert depth.deepest == 1

    def test_soft_break_inside_paragraph_is_a_space_between_paragraph_separators(self):
        story = story_with(["first line\nsame paragraph"], format="html")

        assert render_story(story, no_paragraph_break=True) == "<p>first line same paragraph</p>"
        assert render_story(story) == "<p>first line<br />same paragraph</p>"

    def test_series_html_paragraphs_stay_balanced(self):
        first = story_with(["One\n\nTwo"], format="html", title="First", url="https://www.literotica.com/s/first")
        series = SeriesDocument(first, "https://www.literotica.com/series/se/1")
        second = story_with(["Three", "Four"], format="html", title="Second", url="https://www.literotica.com/s/second")
        series._stories = [first, second]

        depth = paragraph_depth(render_series(series, no_paragraph_break=True))
        assert (depth.depth, depth.lowest, depth.deepest) == (0, 0, 1)

    def test_format_argument_overrides_story_format(self):
        story = story_with(["A", "B"], format="html")
        assert render_story(story, StoryFormat.TXT, page_indicator=False) == "A\n\nB"

    @pytest.mark.parametrize("format, header", [
        ("txt", "Tale\n----"),
        ("md", "## Tale"),
        ("html", "<h2>Tale</h2>"),
    ])
    def test_within_series_puts_the_title_on_top(self, format, header):
        content = render_story(story_with(["Body"], format=format), within_series=True)
        assert content.startswith(header)
        assert content.count("Tale") == 1


class TestRenderSeries:

    def _series(self, format):
        first = story_with(["One"], format=format, title="First", url="https://www.literotica.com/s/first")
        series = SeriesDocument(first, "https://www.literotica.com/series/se/1")
        second = story_with(["Two", "Three"], format=format, title="Second", url="https://www.literotica.com/s/second")
        series._stories = [first, second]
        return series

    def test_stories_in_series_order(self):
        content = render_series(self._series("txt"))
        assert content == (
            "First\n-----\n\nOne"
            "\n\n"
            f"Second\n------\n\nTwo\n\nPage 2:\n{PAGE_RULE}\n\nThree"
        )

    def test_markdown_series(self):
        content = render_series(self._series("md"), page_indicator=False)
        assert content == "## First\n\nOne\n\n## Second\n\nTwo\n\nThree"

    def test_empty_series(self):
        series = SeriesDocument(story_with([]), "https://www.literotica.com/series/se/1")
        assert render_series(series) == ""

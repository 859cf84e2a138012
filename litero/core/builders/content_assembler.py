import re
from typing import List, Optional, Union

from ..formats import StoryFormat
from ..parsers.canonicalizer import render_canonical
from ..series import SeriesDocument
from ..story import StoryDocument

PAGE_RULE = "-" * 10
HTML_LINE_BREAK = "<br />"
HTML_PARAGRAPH_BREAK = "<p></p>"
NEWLINE_REGEX = re.compile(r"\r\n?|\n")
PARAGRAPH_OPEN_REGEX = re.compile(r"<p[\s>]", re.IGNORECASE)
PARAGRAPH_CLOSE_REGEX = re.compile(r"</p\s*>", re.IGNORECASE)


def separator_for(format: Union[StoryFormat, str], no_paragraph_break: bool = False) -> str:
    if StoryFormat.parse(format) != StoryFormat.HTML:
        return "\n"
    return HTML_PARAGRAPH_BREAK if no_paragraph_break else HTML_LINE_BREAK


def story_header(story: StoryDocument, format: StoryFormat) -> str:
    if format == StoryFormat.HTML:
        return f"<h2>{story.title}</h2>"
    if format == StoryFormat.MD:
        return f"## {story.title}"
    return f"{story.title}\n{story.post_title}"


def replace_html_newlines(content: str, sep: str) -> str:
    """
    Replaces raw line breaks in rendered html with ``sep``. A break inside an
    open paragraph becomes a line break instead (a space when ``sep`` is the
    paragraph separator), so the paragraph tags stay balanced.
    """
    lines = NEWLINE_REGEX.split(content)
    inner = HTML_LINE_BREAK if sep == HTML_LINE_BREAK else " "
    depth = 0
    parts = []
    for index, line in enumerate(lines):
        if index:
            parts.append(inner if depth > 0 else sep)
        parts.append(line)
        depth = max(0, depth + len(PARAGRAPH_OPEN_REGEX.findall(line)) - len(PARAGRAPH_CLOSE_REGEX.findall(line)))
    return "".join(parts)


def render_page(page: Optional[str], format: StoryFormat) -> str:
    """A page that could not be fetched renders as an empty chunk."""
    if not page:
        return ""
    return render_canonical(page) if format == StoryFormat.HTML else page


def render_story(
    story: StoryDocument,
    format: Optional[Union[StoryFormat, str]] = None,
    page_indicator: bool = True,
    within_series: bool = False,
    no_paragraph_break: bool = False,
) -> str:
    """
    Renders a story's canonical pages in ``format`` (the story's own format by default).

    The first page opens the text. Every later page follows a blank line and,
    with ``page_indicator``, a "Page N:" label over a dash rule. Within a series
    the story's title is put on top as a heading.
    """
    format = StoryFormat.parse(format or story.format)
    sep = separator_for(format, no_paragraph_break)

    chunks: List[str] = []
    for index, page in enumerate(story.pages):
        rendered = render_page(page, format)
        if index == 0:
            chunks.append(rendered)
        elif page_indicator:
            chunks.extend(["", f"Page {index + 1}:", PAGE_RULE, "", rendered])
        else:
            chunks.extend(["", rendered])

    content = sep.join(chunks)
    if format == StoryFormat.HTML:
        # Markdown rendering already decided the paragraphs; leftover line breaks are noise
        content = replace_html_newlines(content, sep)

    if not within_series:
        return content
    return (sep + sep).join([story_header(story, format), content])


def render_series(
    series: SeriesDocument,
    format: Optional[Union[StoryFormat, str]] = None,
    page_indicator: bool = True,
    no_paragraph_break: bool = False,
) -> str:
    format = StoryFormat.parse(format or series.format)
    sep = separator_for(format, no_paragraph_break)
    return (sep + sep).join(
        render_story(story, format, page_indicator, within_series=True, no_paragraph_break=no_paragraph_break)
        for story in series.stories
    )

import re
from dataclasses import dataclass
from typing import Callable, Optional, Union

from slugify import slugify

from litero.utils.logger import get_logger
from .builders.content_assembler import render_series, render_story
from .builders.template_renderer import fill_template, template_values
from .events import ProgressListener, ProgressStream
from .fetchers.base_fetcher import BaseFetcher
from .fetchers.exceptions import StoryOptionsError
from .fetchers.page_fetcher import PageFetcher
from .formats import StoryFormat
from .series import SeriesDocument
from .story import StoryDocument
from .url_classifier import InvalidUrl, SeriesUrl, classify_url

logger = get_logger(__name__)

ErrorCallback = Callable[[str], None]

USAGE_LINES = [
    "",
    "",
    "Usage:",
    "=" * 7,
    "Requires a valid Literotica story or series URL.",
    "",
    "litero download https://www.literotica.com/s/how-to-write-for-literotica",
    "litero download https://www.literotica.com/s/how-to-write-for-literotica --filename writing-stories --format txt",
    "litero download https://www.literotica.com/series/se/434268 --series",
    "",
]
FILE_SUFFIX_REGEX = re.compile(r"(\.[a-z]+)?$")


@dataclass
class StoryOptions:
    url: str = ""
    format: str = StoryFormat.HTML.value
    classic: bool = False
    no_page_numbers: bool = False
    series: bool = False
    filename: str = ""
    no_paragraph_break: bool = False


@dataclass
class StoryOutcome:
    content: str
    body: str
    title: str
    author: str
    author_url: str
    story_url: str
    filename: str
    format: StoryFormat
    story: StoryDocument
    series: Optional[SeriesDocument] = None


@dataclass
class ValidatedRequest:
    story: StoryDocument
    format: StoryFormat
    series_requested: str = ""
    filename: str = ""


def usage_message(reason: str) -> str:
    return "\n".join([f"Error : {reason}"] + USAGE_LINES)


def to_options(options: Union[str, StoryOptions]) -> StoryOptions:
    """Ensures the incoming request is always a StoryOptions object."""
    if isinstance(options, str):
        return StoryOptions(url=options)
    return options


def validate_options(options: StoryOptions) -> ValidatedRequest:
    """
    Classifies the URL and checks the options fit together.
    Raises StoryOptionsError before anything is fetched.
    """
    if not options.url:
        raise StoryOptionsError("No URL Provided!")

    classified = classify_url(options.url)
    if isinstance(classified, InvalidUrl):
        raise StoryOptionsError("URL Provided was invalid.")

    series_requested = options.url if isinstance(classified, SeriesUrl) else ""
    wants_series = options.series or bool(series_requested)
    classic = options.classic or classified.is_classic
    if classic and wants_series:
        raise StoryOptionsError("Cannot download series from classic layout!")

    if not StoryFormat.is_valid(options.format or StoryFormat.HTML.value):
        raise StoryOptionsError("Unknown Format provided in the arguments.")
    format = StoryFormat.parse(options.format or StoryFormat.HTML.value)

    story = StoryDocument(url=options.url, format=format, classic=classic, in_series=bool(series_requested))
    filename = options.filename
    if not wants_series:
        filename = filename or classified.slug
    return ValidatedRequest(story=story, format=format, series_requested=series_requested, filename=filename)


def output_filename(filename: str, format: StoryFormat) -> str:
    """Replaces any trailing extension with the requested format's."""
    return FILE_SUFFIX_REGEX.sub(f".{format.value}", filename, count=1)


def fetch_story(
    options: Union[str, StoryOptions],
    template: str = "",
    progress_callback: Optional[ProgressListener] = None,
    error_callback: Optional[ErrorCallback] = None,
    fetcher: Optional[BaseFetcher] = None,
) -> Optional[StoryOutcome]:
    """
    Downloads a story, or a whole series, and renders it into ``template``.

    Returns None when the request is rejected; the reason goes to
    ``error_callback``. Pages or stories that fail to download are reported
    through ``progress_callback`` and left out of the output.
    """
    options = to_options(options)
    try:
        validated = validate_options(options)
    except StoryOptionsError as e:
        logger.error(f"Cannot get story: {e}")
        if error_callback:
            error_callback(usage_message(str(e)))
        return None

    events = ProgressStream(progress_callback)
    fetcher = fetcher or PageFetcher()
    story = validated.story
    series: Optional[SeriesDocument] = None

    if not validated.series_requested:
        events.emit(f"Getting story from {story.url}")
        series_url = story.request_pages(fetcher, events)
        wants_series = options.series
    else:
        series_url = validated.series_requested
        wants_series = True

    if series_url and wants_series:
        series = SeriesDocument(story, series_url)
        events.emit(f"Story is part of a series. Getting series from {series_url}")
        series.request_series(fetcher, events)
    elif series_url:
        events.emit(f"Story is part of a series: {series_url}")

    events.emit(f"Finished downloading all {story.total_pages} pages.")
    return assemble_outcome(story, series, validated, options, template, events)


def assemble_outcome(
    story: StoryDocument,
    series: Optional[SeriesDocument],
    validated: ValidatedRequest,
    options: StoryOptions,
    template: str,
    events: ProgressStream,
) -> StoryOutcome:
    format = validated.format
    page_indicator = not options.no_page_numbers
    if series is not None:
        body = render_series(series, format, page_indicator, options.no_paragraph_break)
        title = series.title or story.title
        post_title = series.post_title if series.title else story.post_title
        author = series.author or story.author
        author_url = series.author_url or story.author_url
        story_url = series.series_url or story.url
    else:
        body = render_story(story, format, page_indicator, no_paragraph_break=options.no_paragraph_break)
        title, author, author_url, story_url = story.title, story.author, story.author_url, story.url
        post_title = story.post_title

    if series is not None:
        filename = validated.filename or series.first_story_url_title or story.slug
    else:
        filename = validated.filename or story.slug
    filename = output_filename(filename or slugify(title) or "story", format)
    events.emit(f'Attempting to write to file: "{title}" as {filename}')

    content = fill_template(template, template_values(title, post_title, author, author_url, body, story_url))
    return StoryOutcome(
        content=content,
        body=body,
        title=title,
        author=author,
        author_url=author_url,
        story_url=story_url,
        filename=filename,
        format=format,
        story=story,
        series=series,
    )

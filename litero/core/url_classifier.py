import re
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional, Union

HOST_PREFIXES = (
    'www', 'german', 'spanish', 'french', 'dutch', 'italian', 'romanian', 'portuguese', 'classic',
)
_PREFIX_GROUP = '(' + '|'.join(rf'{prefix}\.' for prefix in HOST_PREFIXES) + ')?'

STORY_URL_REGEX = re.compile(
    r'^(?:https?://)?' + _PREFIX_GROUP + r'(?:i\.)?(literotica\.com)'
    r'(/s(?:tories)?/(?:showstory\.php\?(?:url|id)=)?([a-z-0-9]+))$'
)
# e.g. https://www.literotica.com/series/se/434268
SERIES_URL_REGEX = re.compile(
    r'^(?:https?://)?' + _PREFIX_GROUP + r'(?:i\.)?(literotica\.com)'
    r'(/series/se/([-a-zA-Z0-9]+))$'
)

CLASSIC_HOST = 'classic.literotica.com'
CLASSIC_COOKIE = 'enable_classic=1'
_MODERN_HOST_REGEX = re.compile(r'^(www\.)?literotica\.com', re.IGNORECASE)


@dataclass(frozen=True)
class StoryUrl:
    host: str
    path: str
    slug: str
    prefix: str = ''

    @property
    def is_classic(self) -> bool:
        return 'classic' in self.prefix


@dataclass(frozen=True)
class SeriesUrl:
    host: str
    path: str
    series_id: str
    prefix: str = ''

    @property
    def is_classic(self) -> bool:
        return 'classic' in self.prefix


@dataclass(frozen=True)
class InvalidUrl:
    url: str
    is_classic: bool = False


ClassifiedUrl = Union[StoryUrl, SeriesUrl, InvalidUrl]


def classify_url(url: Optional[str]) -> ClassifiedUrl:
    """Sorts a user supplied URL into a story URL, a series index URL or neither."""
    candidate = (url or '').strip()

    match = STORY_URL_REGEX.match(candidate)
    if match:
        prefix = match.group(1) or ''
        return StoryUrl(host=prefix + match.group(2), path=match.group(3), slug=match.group(4), prefix=prefix)

    match = SERIES_URL_REGEX.match(candidate)
    if match:
        prefix = match.group(1) or ''
        return SeriesUrl(host=prefix + match.group(2), path=match.group(3), series_id=match.group(4), prefix=prefix)

    return InvalidUrl(url=candidate)


@dataclass(frozen=True)
class StoryRequest:
    path: str
    host: str
    headers: Dict[str, str] = field(default_factory=dict)


def with_classic_mode(request: StoryRequest) -> StoryRequest:
    """
    Points a request at the classic subdomain and adds the cookie that turns the
    classic layout on. Applying it twice gives the same request.
    """
    host = _MODERN_HOST_REGEX.sub(CLASSIC_HOST, request.host)
    headers = dict(request.headers)
    cookie = headers.get('Cookie', '')
    cookie_parts = [part.strip() for part in cookie.split(';') if part.strip()]
    if CLASSIC_COOKIE not in cookie_parts:
        headers['Cookie'] = '; '.join([CLASSIC_COOKIE] + cookie_parts)
    return replace(request, host=host, headers=headers)


def build_story_request(classified: Union[StoryUrl, SeriesUrl], classic: bool = False,
                        headers: Optional[Mapping[str, str]] = None) -> StoryRequest:
    request = StoryRequest(path=classified.path, host=classified.host, headers=dict(headers or {}))
    if classic:
        request = with_classic_mode(request)
    return request

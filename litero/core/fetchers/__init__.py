from .base_fetcher import BaseFetcher, FetchResult, build_page_url
from .page_fetcher import PageFetcher
from .user_agents import USER_AGENTS, choose_user_agent
from .exceptions import LiteroError, FetcherError, StoryOptionsError

__all__ = [
    "BaseFetcher",
    "FetchResult",
    "build_page_url",
    "PageFetcher",
    "USER_AGENTS",
    "choose_user_agent",
    "LiteroError",
    "FetcherError",
    "StoryOptionsError",
]

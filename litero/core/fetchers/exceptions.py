class LiteroError(Exception):
    """Base exception for the package."""
    pass

class FetcherError(LiteroError):
    """Raised inside a fetcher when a page cannot be retrieved as text."""
    pass

class StoryOptionsError(LiteroError):
    """Raised when a story request cannot be classified or is contradictory."""
    pass

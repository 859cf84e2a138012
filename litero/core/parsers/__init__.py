from .html_cleaner import HTMLCleaner
from .canonicalizer import canonicalize, render_canonical
from .layout_extractors import (
    LayoutExtractor,
    ClassicLayoutExtractor,
    ModernLayoutExtractor,
    StoryMetadata,
    SeriesIndex,
    get_layout_extractor,
    extract_series_index,
    prefer_existing,
)

__all__ = [
    "HTMLCleaner",
    "canonicalize",
    "render_canonical",
    "LayoutExtractor",
    "ClassicLayoutExtractor",
    "ModernLayoutExtractor",
    "StoryMetadata",
    "SeriesIndex",
    "get_layout_extractor",
    "extract_series_index",
    "prefer_existing",
]

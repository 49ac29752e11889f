"""Media extraction for Parsoid-rendered article HTML."""

from .collector import (
    MediaCollector,
    combine_responses,
    dedupe,
    get_media_items_from_doc,
    get_media_items_from_page,
)
from .models import MediaExtractionError, MediaItem, MediaVariant

__all__ = [
    "MediaCollector",
    "MediaExtractionError",
    "MediaItem",
    "MediaVariant",
    "combine_responses",
    "dedupe",
    "get_media_items_from_doc",
    "get_media_items_from_page",
]

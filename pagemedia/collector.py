"""Walk a Parsoid document and assemble its ordered media list."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Mapping

from bs4 import BeautifulSoup, Tag

from .classifier import classify, resource_element
from .extractor import extract, is_eligible
from .models import MediaExtractionError, MediaItem, MediaVariant
from .thumbnail import MediaCollaborators

LOGGER = logging.getLogger(__name__)


def iter_elements(root: Tag) -> Iterator[Tag]:
    """Yield the element descendants of ``root`` in pre-order."""

    for node in root.descendants:
        if isinstance(node, Tag):
            yield node


def _document_root(doc: object) -> Tag:
    if not isinstance(doc, Tag):
        raise MediaExtractionError(f"Expected a parsed HTML document, got {type(doc).__name__}")
    body = doc if doc.name == "body" else doc.find("body")
    return body if body is not None else doc


class MediaCollector:
    """Collect media items from Parsoid HTML using injected collaborators."""

    def __init__(self, collaborators: MediaCollaborators | None = None) -> None:
        self._collaborators = collaborators or MediaCollaborators.from_config()

    def collect(self, doc: Tag) -> list[MediaItem]:
        root = _document_root(doc)
        # Snapshot the walk; image scaling rewrites attributes as it goes.
        elements = list(iter_elements(root))
        results: list[MediaItem] = []
        for elem in elements:
            variant = classify(elem)
            if variant is MediaVariant.UNKNOWN:
                continue
            item = self._collect_element(variant, elem)
            if item is not None:
                results.append(item)
        return dedupe(results)

    def collect_html(self, html: str | bytes) -> list[MediaItem]:
        if not isinstance(html, (str, bytes)):
            raise MediaExtractionError(f"Expected HTML text, got {type(html).__name__}")
        return self.collect(BeautifulSoup(html, "html.parser"))

    def _collect_element(self, variant: MediaVariant, elem: Tag) -> MediaItem | None:
        try:
            resource = resource_element(variant, elem)
            if not is_eligible(variant, elem, resource, self._collaborators):
                LOGGER.debug("Skipping ineligible %s element <%s>", variant.value, elem.name)
                return None
            return extract(variant, elem, resource, self._collaborators)
        except (AttributeError, TypeError, ValueError):
            LOGGER.exception("Failed to extract %s media from <%s>", variant.value, elem.name)
            return None


def dedupe(items: Iterable[MediaItem]) -> list[MediaItem]:
    """Drop later items sharing a title (or original source) with an earlier one."""

    seen: set[str] = set()
    unique: list[MediaItem] = []
    for item in items:
        key = item.dedupe_key
        if key is not None:
            if key in seen:
                continue
            seen.add(key)
        unique.append(item)
    return unique


def get_media_items_from_doc(
    doc: Tag, collaborators: MediaCollaborators | None = None
) -> list[MediaItem]:
    return MediaCollector(collaborators).collect(doc)


def get_media_items_from_page(
    html: str | bytes, collaborators: MediaCollaborators | None = None
) -> list[MediaItem]:
    """Parse raw Parsoid HTML and return its media items in document order."""

    return MediaCollector(collaborators).collect_html(html)


def media_titles(items: Iterable[MediaItem]) -> list[str]:
    return [item.title for item in items if item.title]


def combine_responses(
    lookup: Mapping[str, Mapping[str, Any]], items: Iterable[MediaItem]
) -> list[dict[str, Any]]:
    """Merge per-title metadata into the extracted records."""

    combined: list[dict[str, Any]] = []
    for item in items:
        record = item.to_dict()
        title = record.get("title")
        if title:
            record.update(lookup.get(title) or {})
        record.pop("title", None)
        if "sources" in record:
            record.pop("original", None)
        combined.append(record)
    return combined

"""Assemble the media list of a page from Parsoid HTML and file metadata."""

from __future__ import annotations

import logging
from typing import Any

from .collector import MediaCollector, combine_responses, media_titles
from .config import ServiceConfig
from .http_client import HttpFetcher
from .thumbnail import MediaCollaborators

LOGGER = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


class MediaListService:
    """Fetch a page, extract its media and merge in file metadata."""

    def __init__(
        self,
        config: ServiceConfig | None = None,
        *,
        fetcher: HttpFetcher | None = None,
        collaborators: MediaCollaborators | None = None,
    ) -> None:
        self._config = config or ServiceConfig()
        self._fetcher = fetcher or HttpFetcher(self._config.fetch)
        self._owns_fetcher = fetcher is None
        self._collector = MediaCollector(collaborators or MediaCollaborators.from_config(self._config.media))

    def get_media_list(self, title: str, revision: str | int | None = None) -> dict[str, Any]:
        html, resolved_revision = self._fetcher.fetch_page_html(title, revision)
        items = self._collector.collect_html(html)
        titles = media_titles(items)
        lookup = self._fetcher.fetch_media_metadata(titles) if titles else {}
        LOGGER.info("Collected %d media items for %s", len(items), title)
        return {
            "revision": resolved_revision,
            "items": combine_responses(lookup, items),
        }

    def close(self) -> None:
        if self._owns_fetcher:
            self._fetcher.close()

    def __enter__(self) -> "MediaListService":  # pragma: no cover - convenience wrapper
        return self

    def __exit__(self, *_exc_info) -> None:  # pragma: no cover - convenience wrapper
        self.close()

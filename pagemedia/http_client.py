"""HTTP utilities for fetching Parsoid HTML and file metadata."""

from __future__ import annotations

import logging
from typing import Any, Iterable
from urllib.parse import quote

import httpx
from bs4 import BeautifulSoup

from .config import FetchConfig

LOGGER = logging.getLogger(__name__)

_IMAGEINFO_PROPS = "url|size|mime|extmetadata"


class HttpFetchError(RuntimeError):
    """Raised when an HTTP request fails irrecoverably."""


def revision_from_etag(etag: str | None) -> str | None:
    """Pull the revision id out of a Parsoid ``ETag`` such as ``W/"123/abc"``."""

    if not etag:
        return None
    cleaned = etag.strip()
    if cleaned.startswith("W/"):
        cleaned = cleaned[2:]
    cleaned = cleaned.strip('"')
    revision = cleaned.split("/")[0]
    return revision or None


def _html_text_pair(value: str | None) -> dict[str, str] | None:
    if not value:
        return None
    text = BeautifulSoup(value, "html.parser").get_text().strip()
    return {"html": value, "text": text}


def _ext_value(extmetadata: dict[str, Any], key: str) -> str | None:
    entry = extmetadata.get(key)
    if not isinstance(entry, dict):
        return None
    value = entry.get("value")
    if value is None:
        return None
    return str(value)


def _page_metadata(page: dict[str, Any]) -> dict[str, Any] | None:
    imageinfo = page.get("imageinfo")
    if not isinstance(imageinfo, list) or not imageinfo:
        return None
    info = imageinfo[0]
    if not isinstance(info, dict):
        return None

    extmetadata = info.get("extmetadata")
    if not isinstance(extmetadata, dict):
        extmetadata = {}

    original = {
        "source": info.get("url"),
        "width": info.get("width"),
        "height": info.get("height"),
        "mime": info.get("mime"),
    }
    license_info = {
        "type": _ext_value(extmetadata, "LicenseShortName"),
        "url": _ext_value(extmetadata, "LicenseUrl"),
    }
    metadata = {
        "original": {key: value for key, value in original.items() if value is not None},
        "filePage": info.get("descriptionurl"),
        "artist": _html_text_pair(_ext_value(extmetadata, "Artist")),
        "credit": _html_text_pair(_ext_value(extmetadata, "Credit")),
        "license": {key: value for key, value in license_info.items() if value is not None} or None,
        "description": _html_text_pair(_ext_value(extmetadata, "ImageDescription")),
    }
    return {key: value for key, value in metadata.items() if value}


def parse_imageinfo_response(payload: object, requested: Iterable[str]) -> dict[str, dict[str, Any]]:
    """Map an action API ``imageinfo`` response back onto the requested titles."""

    if not isinstance(payload, dict):
        raise HttpFetchError("Metadata response is not a JSON object")
    query = payload.get("query")
    if not isinstance(query, dict):
        return {}

    aliases: dict[str, list[str]] = {}
    for title in requested:
        aliases.setdefault(title, []).append(title)
    for entry in query.get("normalized") or []:
        if not isinstance(entry, dict):
            continue
        source, target = entry.get("from"), entry.get("to")
        if source and target:
            aliases.setdefault(target, []).extend(aliases.pop(source, [source]))

    result: dict[str, dict[str, Any]] = {}
    for page in query.get("pages") or []:
        if not isinstance(page, dict) or page.get("missing"):
            continue
        metadata = _page_metadata(page)
        page_title = page.get("title")
        if metadata is None or not page_title:
            continue
        for title in aliases.get(page_title, [page_title]):
            result[title] = metadata
    return result


class HttpFetcher:
    """Lightweight HTTP client for the Parsoid and action API endpoints."""

    def __init__(
        self,
        config: FetchConfig,
        *,
        client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client = client or self._build_client()
        self._owns_client = client is None

    def _build_client(self) -> httpx.Client:
        kwargs: dict[str, object] = {
            "timeout": self._config.timeout.request_timeout,
            "headers": {"User-Agent": self._config.user_agent},
            "follow_redirects": True,
        }
        if self._transport:
            kwargs["transport"] = self._transport
        return httpx.Client(**kwargs)

    def _get(self, url: str, params: dict[str, str] | None = None) -> httpx.Response:
        try:
            response = self._client.get(url, params=params)
        except httpx.HTTPError as exc:  # pragma: no cover - network failure path
            raise HttpFetchError(str(exc)) from exc
        if response.status_code != httpx.codes.OK:
            raise HttpFetchError(f"Unexpected status {response.status_code} for {url}")
        return response

    def fetch_page_html(self, title: str, revision: str | int | None = None) -> tuple[str, str | None]:
        """Return the Parsoid HTML of ``title`` and the revision it was rendered from."""

        url = f"{self._config.rest_base_url.rstrip('/')}/page/html/{quote(title.replace(' ', '_'), safe='')}"
        if revision is not None:
            url = f"{url}/{revision}"
        response = self._get(url)
        content_type = response.headers.get("content-type", "")
        if "html" not in content_type:
            raise HttpFetchError(f"Unsupported content type '{content_type}' for {url}")
        return response.text, revision_from_etag(response.headers.get("etag"))

    def fetch_media_metadata(self, titles: Iterable[str]) -> dict[str, dict[str, Any]]:
        """Look up file metadata for ``titles`` in batches."""

        unique = list(dict.fromkeys(title for title in titles if title))
        batch_size = max(1, self._config.metadata_batch_size)
        lookup: dict[str, dict[str, Any]] = {}
        for start in range(0, len(unique), batch_size):
            batch = unique[start:start + batch_size]
            params = {
                "action": "query",
                "format": "json",
                "formatversion": "2",
                "prop": "imageinfo",
                "iiprop": _IMAGEINFO_PROPS,
                "titles": "|".join(batch),
            }
            response = self._get(self._config.action_api_url, params=params)
            try:
                payload = response.json()
            except ValueError as exc:
                raise HttpFetchError(f"Metadata response for {len(batch)} titles is not JSON") from exc
            lookup.update(parse_imageinfo_response(payload, batch))
        LOGGER.debug("Resolved metadata for %d of %d titles", len(lookup), len(unique))
        return lookup

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpFetcher":  # pragma: no cover - convenience wrapper
        return self

    def __exit__(self, *_exc_info) -> None:  # pragma: no cover - convenience wrapper
        self.close()

"""Configuration utilities shared by the media extraction pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_REST_BASE_URL = "https://en.wikipedia.org/api/rest_v1"
DEFAULT_ACTION_API_URL = "https://en.wikipedia.org/w/api.php"
DEFAULT_USER_AGENT = "pagemedia/1.0"
DEFAULT_MIN_IMAGE_SIZE = 48
DEFAULT_MAX_IMAGE_WIDTH = 1280
DEFAULT_REQUEST_TIMEOUT = 10.0

_REST_BASE_ENV = "PAGEMEDIA_REST_BASE_URL"
_ACTION_API_ENV = "PAGEMEDIA_ACTION_API_URL"
_USER_AGENT_ENV = "PAGEMEDIA_USER_AGENT"
_REQUEST_TIMEOUT_ENV = "PAGEMEDIA_REQUEST_TIMEOUT"
_MIN_IMAGE_SIZE_ENV = "PAGEMEDIA_MIN_IMAGE_SIZE"
_MAX_IMAGE_WIDTH_ENV = "PAGEMEDIA_MAX_IMAGE_WIDTH"


@dataclass(slots=True)
class MediaConfig:
    """Thresholds and markers used by the default extraction collaborators."""

    min_image_size: int = DEFAULT_MIN_IMAGE_SIZE
    max_image_width: int = DEFAULT_MAX_IMAGE_WIDTH
    disallowed_classes: tuple[str, ...] = ("noviewer",)
    spoken_region_selector: str = "#section_SpokenWikipedia"


@dataclass(slots=True)
class TimeoutConfig:
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


@dataclass(slots=True)
class FetchConfig:
    rest_base_url: str = DEFAULT_REST_BASE_URL
    action_api_url: str = DEFAULT_ACTION_API_URL
    user_agent: str = DEFAULT_USER_AGENT
    metadata_batch_size: int = 50
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)


@dataclass(slots=True)
class ServiceConfig:
    media: MediaConfig = field(default_factory=MediaConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)


def _coerce_int(raw_value: str | None, default: int) -> int:
    if raw_value is None or not raw_value.strip():
        return default
    try:
        value = int(raw_value.strip())
    except ValueError as exc:
        raise ValueError(f"Expected an integer, got {raw_value!r}") from exc
    if value <= 0:
        raise ValueError(f"Expected a positive integer, got {value}")
    return value


def _coerce_float(raw_value: str | None, default: float) -> float:
    if raw_value is None or not raw_value.strip():
        return default
    try:
        value = float(raw_value.strip())
    except ValueError as exc:
        raise ValueError(f"Expected a number, got {raw_value!r}") from exc
    if value <= 0:
        raise ValueError(f"Expected a positive number, got {value}")
    return value


def load_service_config() -> ServiceConfig:
    """Load service settings from environment variables."""

    media = MediaConfig(
        min_image_size=_coerce_int(os.getenv(_MIN_IMAGE_SIZE_ENV), DEFAULT_MIN_IMAGE_SIZE),
        max_image_width=_coerce_int(os.getenv(_MAX_IMAGE_WIDTH_ENV), DEFAULT_MAX_IMAGE_WIDTH),
    )
    fetch = FetchConfig(
        rest_base_url=(os.getenv(_REST_BASE_ENV) or DEFAULT_REST_BASE_URL).strip().rstrip("/"),
        action_api_url=(os.getenv(_ACTION_API_ENV) or DEFAULT_ACTION_API_URL).strip(),
        user_agent=(os.getenv(_USER_AGENT_ENV) or DEFAULT_USER_AGENT).strip(),
        timeout=TimeoutConfig(
            request_timeout=_coerce_float(
                os.getenv(_REQUEST_TIMEOUT_ENV), DEFAULT_REQUEST_TIMEOUT
            ),
        ),
    )
    return ServiceConfig(media=media, fetch=fetch)

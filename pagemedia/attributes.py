"""Pure helpers for reading and normalising Parsoid element attributes."""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any
from urllib.parse import unquote

from bs4 import Tag

from .models import SrcsetEntry

LOGGER = logging.getLogger(__name__)

_LEADING_DOT_SLASH = re.compile(r"^\./")
_TIMESTAMP_PATTERN = re.compile(r"^(?:(?:(?P<hours>\d+):)?(?P<minutes>\d+):)?(?P<seconds>\d+(?:\.\d+)?)$")
_DEFAULT_SCALE = "1x"


def attr_text(elem: Tag, name: str) -> str | None:
    """Return an attribute as a single string, joining multi-valued attributes."""

    value = elem.get(name)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def class_names(elem: Tag) -> list[str]:
    value = elem.get("class")
    if not value:
        return []
    if isinstance(value, str):
        return value.split()
    return list(value)


def split_mime_type(type_str: str | None) -> tuple[str | None, list[str] | None]:
    """Split ``video/webm; codecs="vp9, opus"`` into the base MIME and codec list."""

    if not type_str:
        return None, None
    segments = type_str.split("; ")
    return segments[0] or None, get_codecs(type_str)


def get_codecs(type_str: str | None) -> list[str] | None:
    if not type_str:
        return None
    segments = type_str.split("; ")
    if len(segments) < 2 or not segments[1]:
        return None
    quoted = segments[1].split('"')
    if len(quoted) < 2 or not quoted[1]:
        return None
    return quoted[1].split(", ")


def parse_srcset(value: str | None) -> list[SrcsetEntry]:
    entries: list[SrcsetEntry] = []
    if not value:
        return entries
    for candidate in value.split(","):
        parts = candidate.split()
        if not parts:
            continue
        scale = parts[1] if len(parts) > 1 else _DEFAULT_SCALE
        entries.append(SrcsetEntry(src=parts[0], scale=scale))
    return entries


def get_structured_srcset(img: Tag) -> list[SrcsetEntry]:
    """Collect ``src`` then ``srcset`` candidates of an image as scale descriptors."""

    result: list[SrcsetEntry] = []
    for attr in ("src", "srcset"):
        result.extend(parse_srcset(attr_text(img, attr)))
    return result


def normalize_title(resource: str | None) -> str | None:
    """Turn a ``./File:Foo%20bar.jpg`` resource reference into a page title."""

    if not resource:
        return None
    title = unquote(_LEADING_DOT_SLASH.sub("", resource, count=1))
    return title or None


def parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    cleaned = value.strip()
    if not cleaned:
        return None
    try:
        return int(cleaned)
    except ValueError:
        try:
            number = float(cleaned)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number)


def parse_seconds(value: Any) -> float | int | None:
    """Coerce a timing value from structured data into seconds."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None
    match = _TIMESTAMP_PATTERN.match(value.strip())
    if not match:
        return None
    hours = int(match.group("hours") or 0)
    minutes = int(match.group("minutes") or 0)
    seconds = float(match.group("seconds"))
    try:
        total = hours * 3600 + minutes * 60 + seconds
    except OverflowError:
        return None
    if not math.isfinite(total):
        return None
    return int(total) if total.is_integer() else total


def parse_structured_data(raw_value: str | None) -> dict[str, Any] | None:
    """Decode a JSON-valued attribute, returning ``None`` when it is unusable."""

    if raw_value is None:
        return None
    try:
        data = json.loads(raw_value)
    except (TypeError, json.JSONDecodeError) as exc:
        LOGGER.warning("Ignoring malformed structured data attribute: %s", exc)
        return None
    if not isinstance(data, dict):
        return None
    return data

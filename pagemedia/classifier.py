"""Decide which media variant a Parsoid element represents."""

from __future__ import annotations

from bs4 import Tag

from .attributes import attr_text, class_names
from .models import MediaVariant
from .selectors import (
    BROKEN_MEDIA_CLASS,
    MATHOID_IMG_CLASS,
    MEDIA_LINK_REL,
    MEDIA_RESOURCE_SELECTOR,
    MEDIA_TYPEOF_PATTERN,
    TIMELINE_TYPEOF_PREFIX,
)

_RESOURCE_VARIANTS = {
    "img": MediaVariant.IMAGE,
    "video": MediaVariant.VIDEO,
    "audio": MediaVariant.AUDIO,
}


def is_mathoid_image(elem: Tag) -> bool:
    return any(MATHOID_IMG_CLASS in name for name in class_names(elem))


def _classify_media_resource(elem: Tag) -> MediaVariant:
    resource = elem.select_one(MEDIA_RESOURCE_SELECTOR)
    if resource is None:
        return MediaVariant.UNKNOWN
    if resource.name == "span" and BROKEN_MEDIA_CLASS in class_names(resource):
        # Broken file links render a placeholder instead of media.
        return MediaVariant.UNKNOWN
    return _RESOURCE_VARIANTS.get(resource.name, MediaVariant.UNKNOWN)


def classify(elem: object) -> MediaVariant:
    """Return the media variant of ``elem``; unmatched input is UNKNOWN."""

    if not isinstance(elem, Tag):
        return MediaVariant.UNKNOWN

    type_of = attr_text(elem, "typeof")
    if type_of:
        if MEDIA_TYPEOF_PATTERN.search(type_of):
            return _classify_media_resource(elem)
        if type_of.startswith(TIMELINE_TYPEOF_PREFIX):
            return MediaVariant.TIMELINE_IMAGE
        return MediaVariant.UNKNOWN
    if attr_text(elem, "rel") == MEDIA_LINK_REL:
        return MediaVariant.PRONUNCIATION
    if is_mathoid_image(elem):
        return MediaVariant.MATH_IMAGE
    return MediaVariant.UNKNOWN


def resource_element(variant: MediaVariant, elem: Tag) -> Tag:
    """Return the element holding the variant's identifying attributes."""

    if variant is MediaVariant.IMAGE:
        resource = elem.find("img")
    elif variant is MediaVariant.VIDEO:
        resource = elem.find("video")
    elif variant is MediaVariant.AUDIO:
        resource = elem.find("audio")
    elif variant in (
        MediaVariant.PRONUNCIATION,
        MediaVariant.MATH_IMAGE,
        MediaVariant.TIMELINE_IMAGE,
        MediaVariant.UNKNOWN,
    ):
        resource = None
    else:  # pragma: no cover - guards new variants
        raise AssertionError(f"Unhandled media variant {variant!r}")
    return resource if resource is not None else elem

"""Eligibility rules and per-variant record extraction."""

from __future__ import annotations

from bs4 import Tag

from .attributes import (
    attr_text,
    get_structured_srcset,
    normalize_title,
    parse_int,
    parse_seconds,
    parse_structured_data,
    split_mime_type,
)
from .models import AudioType, Caption, MediaItem, MediaVariant, OriginalFile, VideoSource
from .selectors import CAPTION_SELECTOR, GALLERY_SELECTOR, SECTION_ID_ATTR, SECTION_SELECTOR
from .thumbnail import MediaCollaborators

_TIMELINE_EXTENSION = ".png"
_MATH_MIME = "image/svg"
_TIMELINE_MIME = "image/png"


def _timeline_source(elem: Tag) -> str | None:
    img = elem.find("img")
    if img is None:
        return None
    src = attr_text(img, "src")
    if not src or not src.endswith(_TIMELINE_EXTENSION):
        return None
    return src


def is_eligible(
    variant: MediaVariant,
    elem: Tag,
    resource: Tag,
    collaborators: MediaCollaborators,
) -> bool:
    if variant is MediaVariant.IMAGE:
        return not (collaborators.is_too_small(resource) or collaborators.is_disallowed(elem))
    if variant is MediaVariant.TIMELINE_IMAGE:
        return _timeline_source(elem) is not None
    if variant in (MediaVariant.VIDEO, MediaVariant.AUDIO, MediaVariant.PRONUNCIATION, MediaVariant.MATH_IMAGE):
        return True
    if variant is MediaVariant.UNKNOWN:
        return False
    raise AssertionError(f"Unhandled media variant {variant!r}")  # pragma: no cover - guards new variants


def _extract_caption(elem: Tag) -> Caption | None:
    caption_tag = elem.select_one(CAPTION_SELECTOR)
    if caption_tag is None:
        return None
    return Caption(html=caption_tag.decode_contents(), text=caption_tag.get_text())


def _extract_section_id(elem: Tag) -> int | None:
    section = elem.css.closest(SECTION_SELECTOR)
    if section is None:
        return None
    return parse_int(attr_text(section, SECTION_ID_ATTR))


def _extract_gallery_id(elem: Tag) -> str | None:
    gallery = elem.css.closest(GALLERY_SELECTOR)
    if gallery is None:
        return None
    return attr_text(gallery, "id")


def _extract_video_source(source: Tag) -> VideoSource:
    mime, codecs = split_mime_type(attr_text(source, "type"))
    return VideoSource(
        url=attr_text(source, "src"),
        mime=mime,
        codecs=codecs,
        name=attr_text(source, "data-title"),
        short_name=attr_text(source, "data-shorttitle"),
        width=parse_int(attr_text(source, "data-file-width") or attr_text(source, "data-width")),
        height=parse_int(attr_text(source, "data-file-height") or attr_text(source, "data-height")),
    )


def _fill_video(item: MediaItem, elem: Tag) -> None:
    data_mw = parse_structured_data(attr_text(elem, "data-mw"))
    if data_mw:
        item.start_time = parse_seconds(data_mw.get("starttime"))
        item.end_time = parse_seconds(data_mw.get("endtime"))
        item.thumb_time = parse_seconds(data_mw.get("thumbtime"))
    item.sources = [_extract_video_source(source) for source in elem.find_all("source")]


def _fill_image(item: MediaItem, elem: Tag, collaborators: MediaCollaborators) -> None:
    img = elem if elem.name == "img" else elem.find("img")
    if img is None:
        return
    collaborators.scale_element(img)
    srcset = get_structured_srcset(img)
    item.srcset = srcset or None


def extract(
    variant: MediaVariant,
    elem: Tag,
    resource: Tag,
    collaborators: MediaCollaborators,
) -> MediaItem:
    """Build the media record for an eligible element."""

    item = MediaItem(
        variant=variant,
        title=normalize_title(attr_text(resource, "resource")),
        section_id=_extract_section_id(elem),
        caption=_extract_caption(elem),
        gallery_id=_extract_gallery_id(elem),
    )

    if variant is MediaVariant.VIDEO:
        _fill_video(item, elem)
    elif variant is MediaVariant.PRONUNCIATION:
        item.audio_type = AudioType.PRONUNCIATION
    elif variant is MediaVariant.AUDIO:
        item.audio_type = AudioType.SPOKEN if collaborators.in_spoken_region(elem) else AudioType.GENERIC
    elif variant is MediaVariant.MATH_IMAGE:
        item.original = OriginalFile(source=attr_text(elem, "src"), mime=_MATH_MIME)
    elif variant is MediaVariant.TIMELINE_IMAGE:
        item.original = OriginalFile(source=_timeline_source(elem), mime=_TIMELINE_MIME)
    elif variant is MediaVariant.IMAGE:
        _fill_image(item, elem, collaborators)
    else:
        raise AssertionError(f"Cannot extract media variant {variant!r}")
    return item

"""Data models for media items extracted from Parsoid article HTML."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MediaVariant(str, Enum):
    """Classified media kind of a candidate element."""

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    PRONUNCIATION = "pronunciation"
    MATH_IMAGE = "math_image"
    TIMELINE_IMAGE = "timeline_image"
    UNKNOWN = "unknown"

    @property
    def type_name(self) -> str:
        """Name reported in the ``type`` field of the output record."""

        return _TYPE_NAMES[self]

    @property
    def shows_in_gallery(self) -> bool:
        return self in (MediaVariant.IMAGE, MediaVariant.VIDEO)


_TYPE_NAMES = {
    MediaVariant.IMAGE: "image",
    MediaVariant.VIDEO: "video",
    MediaVariant.AUDIO: "audio",
    MediaVariant.PRONUNCIATION: "audio",
    MediaVariant.MATH_IMAGE: "image",
    MediaVariant.TIMELINE_IMAGE: "image",
    MediaVariant.UNKNOWN: "unknown",
}


class AudioType(str, Enum):
    PRONUNCIATION = "pronunciation"
    SPOKEN = "spoken"
    GENERIC = "generic"


class MediaExtractionError(RuntimeError):
    """Raised when a document cannot be traversed for media items."""


@dataclass(slots=True)
class Caption:
    html: str
    text: str

    def to_dict(self) -> dict[str, str]:
        return {"html": self.html, "text": self.text}


@dataclass(slots=True)
class SrcsetEntry:
    src: str
    scale: str = "1x"

    def to_dict(self) -> dict[str, str]:
        return {"src": self.src, "scale": self.scale}


@dataclass(slots=True)
class OriginalFile:
    source: str | None
    mime: str

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "mime": self.mime}


@dataclass(slots=True)
class VideoSource:
    url: str | None
    mime: str | None = None
    codecs: list[str] | None = None
    name: str | None = None
    short_name: str | None = None
    width: int | None = None
    height: int | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = {
            "url": self.url,
            "mime": self.mime,
            "codecs": self.codecs,
            "name": self.name,
            "shortName": self.short_name,
            "width": self.width,
            "height": self.height,
        }
        return {key: value for key, value in payload.items() if value is not None}


@dataclass(slots=True)
class MediaItem:
    """One media entry of an article, in document order.

    Only the fields relevant to ``variant`` are populated. ``to_dict`` drops
    everything left unset so each record keeps a minimal JSON shape.
    """

    variant: MediaVariant
    title: str | None = None
    lead_image: bool = False
    section_id: int | None = None
    caption: Caption | None = None
    start_time: float | None = None
    end_time: float | None = None
    thumb_time: float | None = None
    audio_type: AudioType | None = None
    gallery_id: str | None = None
    sources: list[VideoSource] | None = None
    srcset: list[SrcsetEntry] | None = None
    original: OriginalFile | None = None

    @property
    def type(self) -> str:
        return self.variant.type_name

    @property
    def show_in_gallery(self) -> bool:
        return self.variant.shows_in_gallery

    @property
    def dedupe_key(self) -> str | None:
        if self.title:
            return self.title
        if self.original is not None:
            return self.original.source
        return None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "leadImage": self.lead_image,
            "sectionId": self.section_id,
            "type": self.type,
            "caption": self.caption.to_dict() if self.caption else None,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "thumbTime": self.thumb_time,
            "audioType": self.audio_type.value if self.audio_type else None,
            "galleryId": self.gallery_id,
            "sources": [source.to_dict() for source in self.sources] if self.sources is not None else None,
            "showInGallery": self.show_in_gallery,
            "srcset": [entry.to_dict() for entry in self.srcset] if self.srcset else None,
            "original": self.original.to_dict() if self.original else None,
        }
        return {key: value for key, value in payload.items() if value is not None}

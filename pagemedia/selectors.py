"""Markup conventions of Parsoid HTML relied upon by the extractor."""

from __future__ import annotations

import re

MEDIA_TYPEOF_PATTERN = re.compile(r"(^|\s)mw:(File|Image|Video|Audio)\b")
TIMELINE_TYPEOF_PREFIX = "mw:Extension/timeline"
MEDIA_LINK_REL = "mw:MediaLink"

MEDIA_RESOURCE_SELECTOR = "img, audio, video, span.mw-broken-media"
BROKEN_MEDIA_CLASS = "mw-broken-media"
MATHOID_IMG_CLASS = "mwe-math-fallback-image"

SECTION_SELECTOR = "section"
SECTION_ID_ATTR = "data-mw-section-id"
GALLERY_SELECTOR = ".gallery"
CAPTION_SELECTOR = "figcaption"

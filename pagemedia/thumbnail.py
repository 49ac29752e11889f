"""Default image-size, denylist, rescaling and region collaborators."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable

from bs4 import Tag

from .attributes import attr_text, class_names, parse_int
from .config import MediaConfig

LOGGER = logging.getLogger(__name__)

_THUMB_WIDTH_PATTERN = re.compile(r"/(?P<width>\d+)px-")


def _dimension(img: Tag, display_attr: str, file_attr: str) -> int | None:
    value = parse_int(attr_text(img, display_attr))
    if value is None:
        value = parse_int(attr_text(img, file_attr))
    return value


def is_too_small(img: Tag, min_size: int) -> bool:
    """Return True when a known image dimension is below ``min_size`` pixels."""

    width = _dimension(img, "width", "data-file-width")
    height = _dimension(img, "height", "data-file-height")
    return (width is not None and width < min_size) or (height is not None and height < min_size)


def is_disallowed(elem: Tag, disallowed_classes: tuple[str, ...]) -> bool:
    blocked = set(disallowed_classes)
    if blocked.intersection(class_names(elem)):
        return True
    img = elem if elem.name == "img" else elem.find("img")
    return img is not None and bool(blocked.intersection(class_names(img)))


def scale_element_if_necessary(img: Tag, max_width: int) -> bool:
    """Shrink an oversized thumbnail to ``max_width``.

    Only thumbnail URLs carrying a ``/NNNpx-`` width segment can be rescaled.
    Returns True when the element was modified.
    """

    width = parse_int(attr_text(img, "width"))
    src = attr_text(img, "src")
    if width is None or width <= max_width or not src:
        return False
    if not _THUMB_WIDTH_PATTERN.search(src):
        return False

    img["src"] = _THUMB_WIDTH_PATTERN.sub(f"/{max_width}px-", src, count=1)
    height = parse_int(attr_text(img, "height"))
    img["width"] = str(max_width)
    if height is not None:
        img["height"] = str(round(height * max_width / width))
    if img.has_attr("srcset"):
        del img["srcset"]
    LOGGER.debug("Scaled image %s from %dpx to %dpx", src, width, max_width)
    return True


def in_spoken_region(elem: Tag, selector: str) -> bool:
    return elem.css.closest(selector) is not None


@dataclass(slots=True)
class MediaCollaborators:
    """Predicates and mutators the extractor consults but does not own."""

    is_too_small: Callable[[Tag], bool]
    is_disallowed: Callable[[Tag], bool]
    scale_element: Callable[[Tag], object]
    in_spoken_region: Callable[[Tag], bool]

    @classmethod
    def from_config(cls, config: MediaConfig | None = None) -> "MediaCollaborators":
        config = config or MediaConfig()
        return cls(
            is_too_small=lambda img: is_too_small(img, config.min_image_size),
            is_disallowed=lambda elem: is_disallowed(elem, config.disallowed_classes),
            scale_element=lambda img: scale_element_if_necessary(img, config.max_image_width),
            in_spoken_region=lambda elem: in_spoken_region(elem, config.spoken_region_selector),
        )

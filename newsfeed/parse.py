# newsfeed/parse.py

import logging
from typing import Any, Callable, Iterable, List, Optional

from newsfeed.models import RawFeedEntry

logger = logging.getLogger(__name__)

# Exceptions a half-decoded entry can raise when one of its fields is poked at.
_FIELD_ERRORS = (AttributeError, KeyError, IndexError, TypeError, ValueError)


def _field(entry, getter: Callable[[Any], Any]) -> Optional[Any]:
    try:
        return getter(entry)
    except _FIELD_ERRORS as e:
        logger.debug("Dropping undecodable field from entry: %s", e)
        return None


def _text(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _first_content(entry) -> Optional[str]:
    content = entry.get("content")
    if not content:
        return None
    return content[0].get("value")


def _first_image(entry) -> Optional[str]:
    """
    Return the first image URL carried by an entry.
    Media RSS thumbnails win over media content, which wins over
    image-typed enclosures.
    """
    for key in ("media_thumbnail", "media_content"):
        for media in entry.get(key) or []:
            if media.get("url"):
                return media["url"]

    for link in (entry.get("enclosures") or []) + (entry.get("links") or []):
        if str(link.get("type", "")).startswith("image/") and link.get("href"):
            return link["href"]

    return None


def parse_entries(entries: Iterable[Any]) -> List[RawFeedEntry]:
    """
    Turn entry-like records (feedparser entries or plain dicts) into
    RawFeedEntry values, in source order.

    Nothing is dropped here; validation happens during normalization.
    """
    parsed = []

    for entry in entries:
        parsed.append(RawFeedEntry(
            title=_text(_field(entry, lambda e: e.get("title"))) or "",
            link=_text(_field(entry, lambda e: e.get("link"))) or "",
            description=_text(_field(
                entry, lambda e: e.get("summary") or e.get("description")
            )),
            author=_text(_field(entry, lambda e: e.get("author"))) or "",
            guid=_text(_field(entry, lambda e: e.get("id") or e.get("guid"))) or "",
            images=_text(_field(entry, _first_image)),
            published=_text(_field(entry, lambda e: e.get("published"))),
            content=_text(_field(entry, _first_content)),
        ))

    return parsed


def parse_feed(parsed_feed) -> List[RawFeedEntry]:
    return parse_entries(parsed_feed.entries)

# newsfeed/models.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class RawFeedEntry(BaseModel):
    """One syndicated item as received from a source, before any cleaning."""

    title: str = ""
    link: str = ""
    description: Optional[str] = None
    author: str = ""
    guid: str = ""
    images: Optional[str] = None
    published: Optional[str] = None
    content: Optional[str] = None


class NormalizedFeedRecord(BaseModel):
    title: str
    link: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    image: Optional[str] = None
    published: Optional[datetime] = None


class StoredFeedItem(NormalizedFeedRecord):
    id: int

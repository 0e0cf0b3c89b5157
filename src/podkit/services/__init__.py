"""Service modules for podkit."""

from podkit.services.feed import PodcastLoader
from podkit.services.itunes import (
    ENTITIES_BY_MEDIA,
    Entity,
    ITunesSearch,
    MediaType,
    SearchParams,
    SearchResponse,
    SearchResult,
)
from podkit.services.xmltree import parse_xml

__all__ = [
    "ENTITIES_BY_MEDIA",
    "Entity",
    "ITunesSearch",
    "MediaType",
    "PodcastLoader",
    "SearchParams",
    "SearchResponse",
    "SearchResult",
    "parse_xml",
]

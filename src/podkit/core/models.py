"""Data models for podkit."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    """A single iTunes category label."""

    name: str


@dataclass(frozen=True)
class Enclosure:
    """Media attachment of an episode.

    All three values are kept exactly as they appear in the feed;
    ``length`` is the advertised byte count and is not parsed.
    """

    url: str
    type: str
    length: str


@dataclass(frozen=True)
class Episode:
    """Represents a podcast episode from an RSS feed."""

    guid: str
    title: str | None = None
    link_url: str | None = None
    pub_date: str | None = None  # as published, not parsed
    description: str | None = None
    duration_in_seconds: str | int | None = None
    image_url: str | None = None
    explicit: bool = False
    number: str | int | None = None
    season: str | int | None = None
    type: str | None = None
    enclosure: Enclosure | None = None


@dataclass(frozen=True)
class Podcast:
    """Represents a podcast channel and its episodes.

    ``categories`` is flat: a parent category is followed directly by its
    sub-categories. ``episodes`` keeps document order.
    """

    title: str
    link: str
    description: str | None = None
    language: str | None = None
    categories: tuple[Category, ...] = ()
    explicit: bool = False
    image_url: str | None = None
    author: str | None = None
    copyright: str | None = None
    funding_url: str | None = None
    type: str | None = None
    complete: bool = False
    episodes: tuple[Episode, ...] = ()

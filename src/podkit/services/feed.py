"""Podcast feed loader.

Fetches an RSS feed, parses it into a loosely-typed tree and maps the
channel into the immutable :class:`~podkit.core.models.Podcast` model.
"""

from __future__ import annotations

import asyncio
import warnings
from typing import Any

import httpx

from podkit.core.config import DEFAULT_FEED_TIMEOUT, Config
from podkit.core.errors import (
    FeedFormatError,
    InvalidInputError,
    MissingFieldError,
    PodkitError,
    RequestTimeoutError,
    TransportError,
    WrappedError,
)
from podkit.core.models import Category, Enclosure, Episode, Podcast
from podkit.services.xmltree import as_list, attr, parse_xml, text_of

LOAD_FAILED_PREFIX = "Failed to load podcast feed"

REQUIRED_CHANNEL_FIELDS = ("title", "link")


class PodcastLoader:
    """Loads podcast feeds into :class:`Podcast` objects.

    Holds only its timeout. Each call performs a single fetch with no
    retries or caching.
    """

    def __init__(self, timeout: float = DEFAULT_FEED_TIMEOUT) -> None:
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Config) -> PodcastLoader:
        """Create a loader from the ``[feed]`` configuration section."""
        return cls(timeout=config.get_feed_timeout())

    @property
    def timeout_ms(self) -> int:
        return round(self.timeout * 1000)

    async def get_podcast_from_feed(
        self,
        feed_url: str,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> Podcast:
        """
        Fetch and parse a podcast feed.

        Args:
            feed_url: URL of the RSS feed
            client: Optional httpx client for testing

        Returns:
            The mapped Podcast

        Raises:
            InvalidInputError: If ``feed_url`` is not an absolute URL
            RequestTimeoutError: If the fetch exceeds the timeout
            TransportError: If the server returns an error status or is unreachable
            FeedFormatError: If the feed is empty, has no channel, or lacks
                a required field
            WrappedError: For any other failure (parse errors, malformed items)
        """
        self._validate_url(feed_url)

        try:
            xml_text = await self._fetch(feed_url, client)
            if not xml_text.strip():
                raise FeedFormatError("Podcast feed is empty")

            tree = parse_xml(xml_text)
            channel = extract_channel(tree)
            validate_channel(channel)
            return map_channel(channel)
        except PodkitError:
            raise
        except Exception as e:
            raise WrappedError(f"{LOAD_FAILED_PREFIX}: {e}") from e

    def _validate_url(self, feed_url: str) -> None:
        try:
            url = httpx.URL(feed_url)
        except (httpx.InvalidURL, TypeError) as e:
            raise InvalidInputError(f"Invalid feed URL: {feed_url}") from e
        if not url.is_absolute_url:
            raise InvalidInputError(f"Invalid feed URL: {feed_url}")

    async def _fetch(self, feed_url: str, client: httpx.AsyncClient | None) -> str:
        should_close_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)

        try:
            async with asyncio.timeout(self.timeout):
                response = await client.get(feed_url)
        except (TimeoutError, httpx.TimeoutException) as e:
            raise RequestTimeoutError(
                f"Podcast feed request timeout after {self.timeout_ms}ms",
                timeout_ms=self.timeout_ms,
            ) from e
        except httpx.RequestError as e:
            raise TransportError(f"{LOAD_FAILED_PREFIX}: {e}") from e
        finally:
            if should_close_client:
                await client.aclose()

        if not response.is_success:
            raise TransportError(
                f"{LOAD_FAILED_PREFIX}: Failed to fetch podcast feed: "
                f"{response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        return response.text


def extract_channel(tree: Any) -> dict[str, Any]:
    """Return the ``rss.channel`` node of a parsed feed.

    Raises:
        FeedFormatError: If the channel is missing.
    """
    rss = tree.get("rss") if isinstance(tree, dict) else None
    channel = as_list(rss.get("channel")) if isinstance(rss, dict) else []

    if not channel or not isinstance(channel[0], dict):
        raise FeedFormatError("Invalid podcast feed: missing channel data")

    return channel[0]


def validate_channel(channel: dict[str, Any]) -> None:
    """Check that the channel carries a title and a link.

    Raises:
        MissingFieldError: Naming the first missing field.
    """
    for field in REQUIRED_CHANNEL_FIELDS:
        if not text_of(channel.get(field)):
            raise MissingFieldError(field)


def map_channel(channel: dict[str, Any]) -> Podcast:
    """Map a validated channel node to a Podcast."""
    return Podcast(
        title=text_of(channel["title"]),
        link=text_of(channel["link"]),
        description=text_of(channel.get("description")),
        language=text_of(channel.get("language")),
        categories=map_categories(channel.get("itunes:category")),
        # the channel uses true/false, items use yes/no
        explicit=text_of(channel.get("itunes:explicit")) == "true",
        image_url=attr(channel.get("itunes:image"), "href"),
        author=text_of(channel.get("itunes:author")),
        copyright=text_of(channel.get("copyright")),
        funding_url=attr(channel.get("podcast:funding"), "url"),
        type=text_of(channel.get("itunes:type")),
        complete=text_of(channel.get("itunes:complete")) == "Yes",
        episodes=map_episodes(channel.get("item")),
    )


def _category_name(node: Any) -> str:
    return attr(node, "text") or text_of(node) or ""


def map_categories(categories: Any) -> tuple[Category, ...]:
    """Flatten categories into parent, children, parent, children...

    Only direct sub-categories are kept; deeper levels are ignored.
    """
    result: list[Category] = []
    for category in as_list(categories):
        result.append(Category(name=_category_name(category)))
        if isinstance(category, dict):
            for sub in as_list(category.get("itunes:category")):
                result.append(Category(name=_category_name(sub)))
    return tuple(result)


def map_episodes(items: Any) -> tuple[Episode, ...]:
    """Map item nodes to episodes, in document order."""
    return tuple(map_episode(item) for item in as_list(items))


def map_episode(item: Any) -> Episode:
    """Map a single item node.

    Raises:
        ValueError: If the item has no guid.
    """
    if not isinstance(item, dict):
        raise ValueError("episode is missing required element 'guid'")

    guid = text_of(item.get("guid"))
    if guid is None:
        raise ValueError("episode is missing required element 'guid'")

    return Episode(
        guid=guid,
        title=text_of(item.get("title")),
        link_url=text_of(item.get("link")),
        pub_date=text_of(item.get("pubDate")),
        description=text_of(item.get("description")),
        duration_in_seconds=text_of(item.get("itunes:duration")),
        image_url=attr(item.get("itunes:image"), "href"),
        explicit=text_of(item.get("itunes:explicit")) == "yes",
        number=text_of(item.get("itunes:episode")),
        season=text_of(item.get("itunes:season")),
        type=text_of(item.get("itunes:episodeType")),
        enclosure=map_enclosure(item.get("enclosure"), guid=guid),
    )


def map_enclosure(enclosure: Any, guid: str | None = None) -> Enclosure | None:
    """Map the first enclosure entry, or return None when there is none.

    An entry without attributes, or lacking url, type or length, maps to
    None. The latter also emits a warning.
    """
    entries = as_list(enclosure)
    if not entries:
        return None

    if len(entries) > 1:
        warnings.warn(
            f"Episode {guid!r} has {len(entries)} enclosures; only the first is used.",
            UserWarning,
            stacklevel=2,
        )

    first = entries[0]
    if not isinstance(first, dict):
        return None

    values = {name: attr(first, name) for name in ("url", "type", "length")}
    missing = [name for name, value in values.items() if value is None]
    if missing:
        warnings.warn(
            f"Episode {guid!r} enclosure is missing {', '.join(missing)}; it is ignored.",
            UserWarning,
            stacklevel=2,
        )
        return None

    return Enclosure(url=values["url"], type=values["type"], length=values["length"])

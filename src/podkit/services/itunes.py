"""iTunes API client for catalog search and lookup.

Builds query URLs for Apple's iTunes Search and Lookup APIs and returns
the decoded JSON envelope as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, TypedDict

import httpx

from podkit.core.config import (
    DEFAULT_TIMEOUT,
    ITUNES_LOOKUP_URL,
    ITUNES_SEARCH_URL,
    Config,
)
from podkit.core.errors import InvalidInputError, PodkitError, TransportError, WrappedError

FETCH_FAILED_PREFIX = "Fetch failed"


class MediaType(Enum):
    """Media types accepted by the ``media`` parameter."""

    MOVIE = "movie"
    PODCAST = "podcast"
    MUSIC = "music"
    MUSIC_VIDEO = "musicVideo"
    AUDIOBOOK = "audiobook"
    SHORT_FILM = "shortFilm"
    TV_SHOW = "tvShow"
    SOFTWARE = "software"
    EBOOK = "ebook"
    ALL = "all"


class Entity(Enum):
    """Result entities accepted by the ``entity`` parameter."""

    MOVIE_ARTIST = "movieArtist"
    MOVIE = "movie"
    PODCAST_AUTHOR = "podcastAuthor"
    PODCAST = "podcast"
    MUSIC_ARTIST = "musicArtist"
    MUSIC_TRACK = "musicTrack"
    ALBUM = "album"
    MUSIC_VIDEO = "musicVideo"
    MIX = "mix"
    SONG = "song"
    AUDIOBOOK_AUTHOR = "audiobookAuthor"
    AUDIOBOOK = "audiobook"
    SHORT_FILM_ARTIST = "shortFilmArtist"
    SHORT_FILM = "shortFilm"
    TV_EPISODE = "tvEpisode"
    TV_SEASON = "tvSeason"
    SOFTWARE = "software"
    IPAD_SOFTWARE = "iPadSoftware"
    MAC_SOFTWARE = "macSoftware"
    EBOOK = "ebook"
    ALL_ARTIST = "allArtist"
    ALL_TRACK = "allTrack"


ENTITIES_BY_MEDIA: dict[MediaType, frozenset[Entity]] = {
    MediaType.MOVIE: frozenset({Entity.MOVIE_ARTIST, Entity.MOVIE}),
    MediaType.PODCAST: frozenset({Entity.PODCAST_AUTHOR, Entity.PODCAST}),
    MediaType.MUSIC: frozenset(
        {
            Entity.MUSIC_ARTIST,
            Entity.MUSIC_TRACK,
            Entity.ALBUM,
            Entity.MUSIC_VIDEO,
            Entity.MIX,
            Entity.SONG,
        }
    ),
    MediaType.MUSIC_VIDEO: frozenset({Entity.MUSIC_ARTIST, Entity.MUSIC_VIDEO}),
    MediaType.AUDIOBOOK: frozenset({Entity.AUDIOBOOK_AUTHOR, Entity.AUDIOBOOK}),
    MediaType.SHORT_FILM: frozenset({Entity.SHORT_FILM_ARTIST, Entity.SHORT_FILM}),
    MediaType.TV_SHOW: frozenset({Entity.TV_EPISODE, Entity.TV_SEASON}),
    MediaType.SOFTWARE: frozenset(
        {Entity.SOFTWARE, Entity.IPAD_SOFTWARE, Entity.MAC_SOFTWARE}
    ),
    MediaType.EBOOK: frozenset({Entity.EBOOK}),
    MediaType.ALL: frozenset(
        {
            Entity.MOVIE,
            Entity.ALBUM,
            Entity.ALL_ARTIST,
            Entity.PODCAST,
            Entity.MUSIC_VIDEO,
            Entity.MIX,
            Entity.AUDIOBOOK,
            Entity.TV_SEASON,
            Entity.ALL_TRACK,
        }
    ),
}

EXPLICIT_VALUES = ("Yes", "No")

_QUERY_ORDER = ("media", "entity", "term", "country", "limit", "lang", "version", "explicit")


@dataclass(frozen=True)
class SearchParams:
    """Parameters of an iTunes Search API request.

    ``media`` and ``entity`` accept either the enum members or their
    string values.

    Raises:
        InvalidInputError: If the term is empty, the entity is not
            permitted for the media type, or another value is out of range.
    """

    media: MediaType | str
    term: str
    entity: Entity | str | None = None
    country: str | None = None
    limit: int | None = None
    lang: str | None = None
    version: int | None = None
    explicit: Literal["Yes", "No"] | None = None

    def __post_init__(self) -> None:
        try:
            media = MediaType(self.media)
        except ValueError as e:
            raise InvalidInputError(f"Unknown media type: {self.media!r}") from e
        object.__setattr__(self, "media", media)

        if not isinstance(self.term, str) or not self.term.strip():
            raise InvalidInputError("Search term cannot be empty")

        if self.entity is not None:
            try:
                entity = Entity(self.entity)
            except ValueError as e:
                raise InvalidInputError(f"Unknown entity: {self.entity!r}") from e
            if entity not in ENTITIES_BY_MEDIA[media]:
                allowed = ", ".join(sorted(item.value for item in ENTITIES_BY_MEDIA[media]))
                raise InvalidInputError(
                    f"Entity '{entity.value}' is not valid for media '{media.value}'. "
                    f"Valid options: {allowed}"
                )
            object.__setattr__(self, "entity", entity)

        if self.limit is not None and (
            isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit < 1
        ):
            raise InvalidInputError(f"Limit must be a positive integer, got {self.limit!r}")

        if self.explicit is not None and self.explicit not in EXPLICIT_VALUES:
            raise InvalidInputError(f"Explicit must be 'Yes' or 'No', got {self.explicit!r}")

    def query_items(self) -> list[tuple[str, str]]:
        """Return the query parameters for every value that is set.

        ``media`` comes first and ``entity`` directly before ``term``.
        """
        items: list[tuple[str, str]] = []
        for name in _QUERY_ORDER:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            items.append((name, str(value)))
        return items


WrapperType = Literal["track", "collection", "artist"]
Explicitness = Literal["explicit", "cleaned", "notExplicit"]
Kind = Literal[
    "book",
    "album",
    "coached-audio",
    "feature-movie",
    "interactive-booklet",
    "music-video",
    "pdf",
    "podcast",
    "podcast-episode",
    "software-package",
    "song",
    "tv-episode",
    "artist",
]


class SearchResult(TypedDict, total=False):
    """A single iTunes result record. Absent fields are omitted."""

    wrapperType: WrapperType
    kind: Kind
    artistId: int
    collectionId: int
    trackId: int
    artistName: str
    collectionName: str
    trackName: str
    collectionCensoredName: str
    trackCensoredName: str
    artistViewUrl: str
    collectionViewUrl: str
    trackViewUrl: str
    feedUrl: str
    previewUrl: str
    artworkUrl30: str
    artworkUrl60: str
    artworkUrl100: str
    artworkUrl600: str
    collectionPrice: float
    trackPrice: float
    collectionExplicitness: Explicitness
    trackExplicitness: Explicitness
    discCount: int
    discNumber: int
    trackCount: int
    trackNumber: int
    trackTimeMillis: int
    country: str
    currency: str
    primaryGenreName: str
    genres: list[str]
    releaseDate: str


class SearchResponse(TypedDict):
    """Envelope returned by both the Search and the Lookup API."""

    resultCount: int
    results: list[SearchResult]


class ITunesSearch:
    """Client for the iTunes Search and Lookup APIs.

    Holds only its endpoints and timeout; every call performs exactly
    one GET request and never retries.
    """

    def __init__(
        self,
        search_url: str = ITUNES_SEARCH_URL,
        lookup_url: str = ITUNES_LOOKUP_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.search_url = search_url
        self.lookup_url = lookup_url
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Config) -> ITunesSearch:
        """Create a client from the ``[itunes]`` configuration section."""
        return cls(
            search_url=config.itunes.search_url,
            lookup_url=config.itunes.lookup_url,
            timeout=config.get_itunes_timeout(),
        )

    def build_search_url(self, params: SearchParams) -> str:
        """Build the full Search API URL for ``params``."""
        return str(httpx.URL(self.search_url, params=params.query_items()))

    async def search(
        self,
        params: SearchParams,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> SearchResponse:
        """
        Search the iTunes catalog.

        Args:
            params: Validated search parameters
            client: Optional httpx client for testing

        Returns:
            The decoded JSON response, unvalidated

        Raises:
            TransportError: If the API returns an error status or is unreachable
            WrappedError: If the response body is not valid JSON, or on any
                other failure
        """
        url = self.build_search_url(params)
        return await self._get_json(url, "iTunes Search API", client)

    async def lookup_by_id(
        self,
        item_id: int | str,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> SearchResponse:
        """
        Look up a catalog item by its iTunes id.

        Same contract as :meth:`search`, against the Lookup API.
        """
        url = str(httpx.URL(self.lookup_url, params={"id": str(item_id)}))
        return await self._get_json(url, "iTunes Lookup API", client)

    async def _get_json(
        self,
        url: str,
        api_name: str,
        client: httpx.AsyncClient | None,
    ) -> Any:
        should_close_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=self.timeout)

        try:
            response = await client.get(url)
            if not response.is_success:
                raise TransportError(
                    f"{FETCH_FAILED_PREFIX}: Failed to fetch data from {api_name}: "
                    f"{response.status_code}",
                    status_code=response.status_code,
                )
            return response.json()
        except httpx.RequestError as e:
            raise TransportError(f"{FETCH_FAILED_PREFIX}: {e}") from e
        except ValueError as e:
            # JSON decode error
            raise WrappedError(f"{FETCH_FAILED_PREFIX}: {e}") from e
        except PodkitError:
            raise
        except Exception as e:
            raise WrappedError(f"{FETCH_FAILED_PREFIX}: {e}") from e
        finally:
            if should_close_client:
                await client.aclose()

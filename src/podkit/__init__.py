"""podkit - iTunes catalog search and podcast feed loading."""

from podkit.core import (
    Category,
    Config,
    Enclosure,
    Episode,
    ErrorKind,
    Podcast,
    PodkitError,
    load_config,
)
from podkit.services import (
    Entity,
    ITunesSearch,
    MediaType,
    PodcastLoader,
    SearchParams,
    SearchResponse,
    SearchResult,
)

__version__ = "0.1.0"

__all__ = [
    "Category",
    "Config",
    "Enclosure",
    "Entity",
    "Episode",
    "ErrorKind",
    "ITunesSearch",
    "MediaType",
    "Podcast",
    "PodcastLoader",
    "PodkitError",
    "SearchParams",
    "SearchResponse",
    "SearchResult",
    "__version__",
    "load_config",
]

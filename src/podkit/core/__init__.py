"""Core modules for podkit."""

from podkit.core.config import (
    Config,
    FeedConfig,
    ITunesConfig,
    get_config,
    load_config,
)
from podkit.core.errors import (
    ConfigError,
    ErrorKind,
    FeedFormatError,
    InvalidInputError,
    MissingFieldError,
    PodkitError,
    RequestTimeoutError,
    TransportError,
    WrappedError,
)
from podkit.core.models import Category, Enclosure, Episode, Podcast

__all__ = [
    "Category",
    "Config",
    "ConfigError",
    "Enclosure",
    "Episode",
    "ErrorKind",
    "FeedConfig",
    "FeedFormatError",
    "ITunesConfig",
    "InvalidInputError",
    "MissingFieldError",
    "Podcast",
    "PodkitError",
    "RequestTimeoutError",
    "TransportError",
    "WrappedError",
    "get_config",
    "load_config",
]

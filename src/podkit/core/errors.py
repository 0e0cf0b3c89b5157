"""Custom exceptions for podkit.

Every error carries an ``ErrorKind`` discriminant so callers can branch on
the failure class without matching message text.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Classification of a failed call."""

    INPUT = "input"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    FORMAT = "format"
    WRAPPED = "wrapped"


class PodkitError(Exception):
    """Base exception for all podkit errors."""

    kind: ErrorKind = ErrorKind.WRAPPED


class InvalidInputError(PodkitError, ValueError):
    """Malformed caller input, detected before any network call."""

    kind = ErrorKind.INPUT


class ConfigError(PodkitError):
    """Configuration-related errors."""

    kind = ErrorKind.INPUT


class TransportError(PodkitError):
    """Non-success HTTP status or network-level failure."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RequestTimeoutError(PodkitError):
    """The request did not complete within its time bound."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, message: str, timeout_ms: int) -> None:
        super().__init__(message)
        self.timeout_ms = timeout_ms


class FeedFormatError(PodkitError):
    """The feed document is empty or structurally invalid."""

    kind = ErrorKind.FORMAT


class MissingFieldError(FeedFormatError):
    """A mandatory channel field is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(f'Invalid podcast feed: missing required field "{field}"')
        self.field = field


class WrappedError(PodkitError):
    """Any other failure, wrapped once with a subsystem prefix."""

    kind = ErrorKind.WRAPPED

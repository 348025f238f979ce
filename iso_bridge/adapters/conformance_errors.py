"""Project-native typed exceptions for external conformance-check failures."""

from __future__ import annotations


class ConformanceAdapterError(Exception):
    """Base exception for conformance adapter failures.

    Attributes:
        status_code: Optional HTTP status code returned by the endpoint.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConformanceUnavailableError(ConformanceAdapterError, ConnectionError):
    """Endpoint could not produce a usable verdict (unreachable, rejected or unreadable)."""


class ConformanceTimeoutError(ConformanceUnavailableError, TimeoutError):
    """Request exceeded the configured conformance-check timeout."""


class ConformanceResponseError(ConformanceUnavailableError, ValueError):
    """Endpoint answered with a body that does not match the `{valid, errors, warnings}` contract."""

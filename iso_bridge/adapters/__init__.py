"""Adapter layer package for external conformance-check boundaries."""

from .conformance_client import HttpConformanceClient
from .conformance_errors import (
	ConformanceAdapterError,
	ConformanceResponseError,
	ConformanceTimeoutError,
	ConformanceUnavailableError,
)
from .interfaces import ConformanceCheckResult, ConformancePort

__all__ = [
	"ConformanceAdapterError",
	"ConformanceCheckResult",
	"ConformancePort",
	"ConformanceResponseError",
	"ConformanceTimeoutError",
	"ConformanceUnavailableError",
	"HttpConformanceClient",
]

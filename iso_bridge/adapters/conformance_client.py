"""HTTP adapter for the external ISO 20022 conformance-check endpoint."""

from __future__ import annotations

import logging
from typing import Final

import httpx

from iso_bridge.domain import MessageType

from .conformance_errors import (
    ConformanceResponseError,
    ConformanceTimeoutError,
    ConformanceUnavailableError,
)
from .interfaces import ConformanceCheckResult, ConformancePort

logger = logging.getLogger(__name__)


class HttpConformanceClient(ConformancePort):
    """Adapter posting `{message, messageType}` to `<base_url>/validate`.

    Every call opens its own short-lived HTTP client bounded by the configured
    timeout. Failed calls are never retried.
    """

    _USER_AGENT: Final[str] = "iso-bridge/1.0 (Python/httpx)"
    _VALIDATE_PATH: Final[str] = "/validate"

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize conformance adapter.

        Args:
            base_url: Base endpoint URL of the conformance service.
            timeout_seconds: Per-request timeout in seconds.
            transport: Optional sync transport override.
            async_transport: Optional async transport override.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_base_url = base_url.strip()
        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

        self._validate_url = f"{normalized_base_url.rstrip('/')}{self._VALIDATE_PATH}"
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self._async_transport = async_transport

    def adapter_check(self, xml_document: str, message_type: MessageType) -> ConformanceCheckResult:
        """Submit one document and wait for the checker verdict.

        Args:
            xml_document: Generated XML document.
            message_type: Message family of the document.

        Returns:
            ConformanceCheckResult: Checker verdict.

        Raises:
            ConformanceTimeoutError: Raised when the request exceeds the timeout.
            ConformanceUnavailableError: Raised for transport failures and HTTP error statuses.
            ConformanceResponseError: Raised when the body violates the response contract.
        """

        try:
            with httpx.Client(timeout=self._timeout_seconds, transport=self._transport) as client:
                response = client.post(
                    self._validate_url,
                    json=self._adapter_build_payload(xml_document, message_type),
                    headers={"User-Agent": self._USER_AGENT},
                )
        except httpx.TimeoutException as error:
            raise ConformanceTimeoutError("Conformance check timed out") from error
        except httpx.HTTPError as error:
            raise ConformanceUnavailableError("Conformance check transport request failed") from error

        return self._adapter_parse_response(response)

    async def adapter_check_async(self, xml_document: str, message_type: MessageType) -> ConformanceCheckResult:
        """Awaitable variant of `adapter_check`.

        Args:
            xml_document: Generated XML document.
            message_type: Message family of the document.

        Returns:
            ConformanceCheckResult: Checker verdict.

        Raises:
            ConformanceTimeoutError: Raised when the request exceeds the timeout.
            ConformanceUnavailableError: Raised for transport failures and HTTP error statuses.
            ConformanceResponseError: Raised when the body violates the response contract.
        """

        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds, transport=self._async_transport) as client:
                response = await client.post(
                    self._validate_url,
                    json=self._adapter_build_payload(xml_document, message_type),
                    headers={"User-Agent": self._USER_AGENT},
                )
        except httpx.TimeoutException as error:
            raise ConformanceTimeoutError("Conformance check timed out") from error
        except httpx.HTTPError as error:
            raise ConformanceUnavailableError("Conformance check transport request failed") from error

        return self._adapter_parse_response(response)

    def _adapter_build_payload(self, xml_document: str, message_type: MessageType) -> dict[str, str]:
        return {"message": xml_document, "messageType": message_type.value}

    def _adapter_parse_response(self, response: httpx.Response) -> ConformanceCheckResult:
        """Parse one checker response into a typed verdict.

        Args:
            response: HTTP response from the checker.

        Returns:
            ConformanceCheckResult: Typed checker verdict.

        Raises:
            ConformanceUnavailableError: Raised for HTTP error statuses.
            ConformanceResponseError: Raised when the body violates the response contract.
        """

        if response.status_code >= 400:
            raise ConformanceUnavailableError(
                f"Conformance checker returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as error:
            raise ConformanceResponseError(
                "Conformance checker returned a non-JSON body",
                status_code=response.status_code,
            ) from error

        if not isinstance(body, dict):
            raise ConformanceResponseError(
                "Conformance checker body must be a JSON object",
                status_code=response.status_code,
            )

        raw_valid = body.get("valid")
        valid = raw_valid if isinstance(raw_valid, bool) else None
        result = ConformanceCheckResult(
            valid=valid,
            errors=_adapter_string_tuple(body.get("errors")),
            warnings=_adapter_string_tuple(body.get("warnings")),
        )
        logger.debug(
            "Conformance checker verdict valid=%s errors=%d warnings=%d",
            result.valid,
            len(result.errors),
            len(result.warnings),
        )
        return result


def _adapter_string_tuple(value: object) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(item) for item in value)

"""Regression tests for the HTTP conformance-check adapter."""

from __future__ import annotations

import asyncio
import json

import httpx

import pytest

from iso_bridge.adapters import (
    ConformanceCheckResult,
    ConformanceResponseError,
    ConformanceTimeoutError,
    ConformanceUnavailableError,
    HttpConformanceClient,
)
import iso_bridge.adapters.conformance_client as conformance_module
from iso_bridge.domain import MessageType
from iso_bridge.validation import Iso20022ValidationService, ValidationIssueKind


def test_adapters_conformance_posts_message_and_parses_verdict() -> None:
    """Post `{message, messageType}` to `/validate` and parse the verdict body.

    Returns:
        None: Assertions validate request shape and response parsing.

    Raises:
        AssertionError: Raised when the request or parsed verdict differ.
    """

    captured_requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(200, json={"valid": True, "errors": [], "warnings": ["minor"]})

    client = HttpConformanceClient(
        base_url="https://checker.test/api/",
        transport=httpx.MockTransport(_handler),
    )

    result = client.adapter_check("<Document/>", MessageType.CREDIT_TRANSFER_INITIATION)

    assert result == ConformanceCheckResult(valid=True, errors=(), warnings=("minor",))
    assert len(captured_requests) == 1
    assert captured_requests[0].method == "POST"
    assert str(captured_requests[0].url) == "https://checker.test/api/validate"
    assert json.loads(captured_requests[0].content) == {"message": "<Document/>", "messageType": "pain.001"}


def test_adapters_conformance_normalizes_partial_verdict_body() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        _ = request
        return httpx.Response(200, json={"valid": "yes", "errors": ["e1", 2], "warnings": "not-a-list"})

    client = HttpConformanceClient(base_url="https://checker.test", transport=httpx.MockTransport(_handler))

    result = client.adapter_check("<Document/>", MessageType.FI_TO_FI_CREDIT_TRANSFER)

    assert result.valid is None
    assert result.errors == ("e1", "2")
    assert result.warnings == ()
    assert result.reports_failure is True


def test_adapters_conformance_http_timeout_raises_timeout_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """Raise `ConformanceTimeoutError` when the transport reports a timeout.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate timeout mapping behavior.

    Raises:
        AssertionError: Raised when timeout mapping is incorrect.
    """

    client = HttpConformanceClient(base_url="https://checker.test", timeout_seconds=0.5)

    def _raise_timeout(_self: object, url: str, **kwargs: object) -> httpx.Response:
        _ = (url, kwargs)
        raise httpx.TimeoutException("timed out")

    monkeypatch.setattr(conformance_module.httpx.Client, "post", _raise_timeout)

    with pytest.raises(ConformanceTimeoutError, match="timed out"):
        client.adapter_check("<Document/>", MessageType.FI_TO_FI_CREDIT_TRANSFER)


def test_adapters_conformance_connection_failure_raises_unavailable_error() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = HttpConformanceClient(base_url="https://checker.test", transport=httpx.MockTransport(_handler))

    with pytest.raises(ConformanceUnavailableError) as error_info:
        client.adapter_check("<Document/>", MessageType.FI_TO_FI_CREDIT_TRANSFER)

    assert not isinstance(error_info.value, ConformanceTimeoutError)


def test_adapters_conformance_http_error_status_raises_unavailable_error() -> None:
    """Map HTTP error statuses to `ConformanceUnavailableError` with status code.

    Returns:
        None: Assertions validate status mapping.

    Raises:
        AssertionError: Raised when error statuses are treated as verdicts.
    """

    def _handler(request: httpx.Request) -> httpx.Response:
        _ = request
        return httpx.Response(503, text="maintenance")

    client = HttpConformanceClient(base_url="https://checker.test", transport=httpx.MockTransport(_handler))

    with pytest.raises(ConformanceUnavailableError, match="HTTP 503") as error_info:
        client.adapter_check("<Document/>", MessageType.FI_TO_FI_CREDIT_TRANSFER)

    assert error_info.value.status_code == 503


def test_adapters_conformance_contract_violations_raise_response_error() -> None:
    """Reject non-JSON and non-object response bodies.

    Returns:
        None: Assertions validate response contract enforcement.

    Raises:
        AssertionError: Raised when malformed bodies are accepted.
    """

    bodies = iter([httpx.Response(200, text="<html>ok</html>"), httpx.Response(200, json=["valid"])])

    def _handler(request: httpx.Request) -> httpx.Response:
        _ = request
        return next(bodies)

    client = HttpConformanceClient(base_url="https://checker.test", transport=httpx.MockTransport(_handler))

    with pytest.raises(ConformanceResponseError, match="non-JSON"):
        client.adapter_check("<Document/>", MessageType.FI_TO_FI_CREDIT_TRANSFER)
    with pytest.raises(ConformanceResponseError, match="JSON object"):
        client.adapter_check("<Document/>", MessageType.FI_TO_FI_CREDIT_TRANSFER)


def test_adapters_conformance_rejects_invalid_configuration() -> None:
    with pytest.raises(ValueError, match="base_url"):
        HttpConformanceClient(base_url="  ")
    with pytest.raises(ValueError, match="timeout_seconds"):
        HttpConformanceClient(base_url="https://checker.test", timeout_seconds=0)


def test_adapters_conformance_async_check_uses_async_transport() -> None:
    """Submit documents through the async client and parse the verdict.

    Returns:
        None: Assertions validate async verdict parsing.

    Raises:
        AssertionError: Raised when async parsing differs from sync parsing.
    """

    def _handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content)["messageType"] == "pacs.008"
        return httpx.Response(200, json={"valid": False, "errors": ["bad CtrlSum"]})

    client = HttpConformanceClient(
        base_url="https://checker.test",
        async_transport=httpx.MockTransport(_handler),
    )

    result = asyncio.run(client.adapter_check_async("<Document/>", MessageType.FI_TO_FI_CREDIT_TRANSFER))

    assert result == ConformanceCheckResult(valid=False, errors=("bad CtrlSum",), warnings=())


def test_adapters_conformance_unreachable_endpoint_yields_single_validator_warning() -> None:
    """Surface an unreachable checker as exactly one validator warning.

    Returns:
        None: Assertions validate end-to-end outage degradation.

    Raises:
        AssertionError: Raised when outages flip validity or duplicate warnings.
    """

    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    validator = Iso20022ValidationService(
        conformance_client=HttpConformanceClient(
            base_url="https://checker.test",
            transport=httpx.MockTransport(_handler),
        )
    )
    xml_document = (
        '<Document xmlns="urn:iso:std:iso:20022:tech:xsd:pacs.008.001.08"><FIToFICstmrCdtTrf><GrpHdr>'
        "<MsgId>M1</MsgId><CreDtTm>2026-03-01T12:00:00Z</CreDtTm><NbOfTxs>1</NbOfTxs></GrpHdr>"
        "<CdtTrfTxInf><PmtId><InstrId>M1</InstrId><EndToEndId>M1</EndToEndId></PmtId>"
        '<IntrBkSttlmAmt Ccy="HCT">1</IntrBkSttlmAmt></CdtTrfTxInf></FIToFICstmrCdtTrf></Document>'
    )

    result = validator.validator_validate(xml_document, "pacs.008")

    assert result.is_valid is True
    assert len(result.warnings) == 1
    assert len(result.issues_of_kind(ValidationIssueKind.EXTERNAL_VALIDATOR_UNAVAILABLE)) == 1

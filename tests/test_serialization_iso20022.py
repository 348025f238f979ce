"""Regression tests for ISO 20022 XML rendering of canonical payment records."""

from __future__ import annotations

import xml.etree.ElementTree as element_tree
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from iso_bridge.domain import IssuedAmount, MessageType, RawLedgerTransaction, RemittanceInformation
from iso_bridge.mapping import CanonicalMappingService, MappingServiceConfig
from iso_bridge.serialization import (
    MESSAGE_NAMESPACES,
    XML_DECLARATION,
    Iso20022XmlSerializer,
    SerializerConfig,
    UnsupportedMessageTypeError,
)
from iso_bridge.validation import validation_find_first_element, validation_local_name


def _build_record(message_type: str = "pacs.008"):
    service = CanonicalMappingService(
        config=MappingServiceConfig(clock=lambda: datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))
    )
    transaction = RawLedgerTransaction(
        transaction_type="Payment",
        amount=IssuedAmount(currency="HCT", value="100.00", issuer="rISSUER"),
        account="rDEBTOR123",
        destination="rCREDITOR456",
        transaction_hash="TXN-001",
    )
    return service.mapping_map_transaction(transaction, message_type)


def _parse(xml_document: str) -> element_tree.Element:
    return element_tree.fromstring(xml_document.encode("utf-8"))


def _count_local(root: element_tree.Element, local_name: str) -> int:
    return sum(1 for element in root.iter() if validation_local_name(element.tag) == local_name)


def test_serializer_renders_declaration_namespace_and_indented_header() -> None:
    """Emit the XML declaration, namespaced `Document` root and two-space indentation.

    Returns:
        None: Assertions validate document framing.

    Raises:
        AssertionError: Raised when document framing differs.
    """

    xml_document = Iso20022XmlSerializer().serializer_render(_build_record(), "pacs.008")

    assert xml_document.startswith(
        f"{XML_DECLARATION}\n"
        '<Document xmlns="urn:iso:std:iso:20022:tech:xsd:pacs.008.001.08" '
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">\n'
        "  <FIToFICstmrCdtTrf>\n"
        "    <GrpHdr>\n"
        "      <MsgId>TXN001</MsgId>\n"
    )
    assert xml_document.endswith("</Document>\n")
    root = _parse(xml_document)
    assert root.tag == f"{{{MESSAGE_NAMESPACES[MessageType.FI_TO_FI_CREDIT_TRANSFER]}}}Document"


def test_serializer_render_is_reproducible_for_the_same_record() -> None:
    record = _build_record()
    serializer = Iso20022XmlSerializer()

    assert serializer.serializer_render(record, "pacs.008") == serializer.serializer_render(record, "pacs.008")


def test_serializer_fi_to_fi_transfer_carries_amount_parties_and_agents() -> None:
    """Render settlement amount, party blocks and proprietary agent ids for `pacs.008`.

    Returns:
        None: Assertions validate `pacs.008` body content.

    Raises:
        AssertionError: Raised when body elements are missing or wrong.
    """

    root = _parse(Iso20022XmlSerializer().serializer_render(_build_record(), "pacs.008"))

    settlement_amount = validation_find_first_element(root, "IntrBkSttlmAmt")
    assert settlement_amount is not None
    assert settlement_amount.attrib == {"Ccy": "HCT"}
    assert settlement_amount.text == "100.00"
    assert validation_find_first_element(root, "CtrlSum").text == "100.00"
    assert validation_find_first_element(root, "SttlmMtd").text == "CLRG"
    assert validation_find_first_element(root, "TxId").text == "TXN001"
    assert validation_find_first_element(root, "ChrgBr").text == "SLEV"
    assert validation_find_first_element(root, "Ctry").text == "XX"
    assert validation_find_first_element(root, "Dept").text == "LEDGER"
    assert _count_local(root, "BICFI") == 0
    assert _count_local(root, "Dbtr") == 1
    assert _count_local(root, "Cdtr") == 1

    debtor = validation_find_first_element(root, "Dbtr")
    assert [validation_local_name(child.tag) for child in debtor] == ["Nm", "PstlAdr", "Id"]
    assert validation_find_first_element(debtor, "Nm").text == "Account_rDEBTOR1"


def test_serializer_emits_optional_purpose_and_remittance_exactly_once() -> None:
    root = _parse(Iso20022XmlSerializer().serializer_render(_build_record(), "pacs.008"))

    assert _count_local(root, "Purp") == 1
    assert _count_local(root, "RmtInf") == 1
    assert validation_find_first_element(root, "Ustrd").text == "HCT Transfer - TXN-001"
    transaction = validation_find_first_element(root, "CdtTrfTxInf")
    assert [validation_local_name(child.tag) for child in transaction][-2:] == ["Purp", "RmtInf"]


def test_serializer_omits_empty_purpose_and_remittance() -> None:
    """Omit `Purp` and `RmtInf` entirely when their values are empty.

    Returns:
        None: Assertions validate optional element omission.

    Raises:
        AssertionError: Raised when empty optional elements are rendered.
    """

    record = replace(_build_record(), purpose_code="", remittance_information=RemittanceInformation(unstructured=""))

    for message_type in ("pacs.008", "pain.001"):
        root = _parse(Iso20022XmlSerializer().serializer_render(record, message_type))
        assert _count_local(root, "Purp") == 0
        assert _count_local(root, "RmtInf") == 0


def test_serializer_uses_bic_when_agent_bic_is_configured() -> None:
    serializer = Iso20022XmlSerializer(
        config=SerializerConfig(instructing_agent_bic="HCTBUS33XXX", instructed_agent_bic="LEDGUS44")
    )

    root = _parse(serializer.serializer_render(_build_record(), "pacs.008"))

    assert [element.text for element in root.iter() if validation_local_name(element.tag) == "BICFI"] == [
        "HCTBUS33XXX",
        "LEDGUS44",
        "HCTBUS33XXX",
        "LEDGUS44",
    ]
    assert _count_local(root, "Othr") == 4


def test_serializer_credit_transfer_initiation_structure() -> None:
    """Render `pain.001` with initiating party, payment information and instructed amount.

    Returns:
        None: Assertions validate `pain.001` structure.

    Raises:
        AssertionError: Raised when `pain.001` elements are missing or misplaced.
    """

    xml_document = Iso20022XmlSerializer().serializer_render(_build_record("pain.001"), "pain.001")
    root = _parse(xml_document)

    assert root.tag == "{urn:iso:std:iso:20022:tech:xsd:pain.001.001.09}Document"
    assert validation_local_name(root[0].tag) == "CstmrCdtTrfInitn"
    assert validation_find_first_element(root, "InitgPty") is not None
    assert validation_find_first_element(validation_find_first_element(root, "InitgPty"), "Nm").text == (
        "HCT Ledger Middleware"
    )
    assert validation_find_first_element(root, "PmtInfId").text == "TXN001"
    assert validation_find_first_element(root, "PmtMtd").text == "TRF"
    assert validation_find_first_element(root, "ReqdExctnDt")[0].text == "2026-03-01"
    instructed_amount = validation_find_first_element(root, "InstdAmt")
    assert instructed_amount.attrib == {"Ccy": "HCT"}
    assert instructed_amount.text == "100.00"
    assert _count_local(root, "IntrBkSttlmAmt") == 0
    assert _count_local(root, "TxId") == 0


def test_serializer_rejects_unsupported_message_type() -> None:
    with pytest.raises(UnsupportedMessageTypeError):
        Iso20022XmlSerializer().serializer_render(_build_record(), "camt.053")

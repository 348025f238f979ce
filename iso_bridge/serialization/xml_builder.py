"""ISO 20022 XML serializer for canonical payment records.

Each supported message family has a fixed element tree. The only optional
elements are `Purp` (emitted when a purpose code is set) and `RmtInf`
(emitted when remittance text is set). Identifiers and texts are written
verbatim because the mapper already truncated and sanitized them.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as element_tree
from dataclasses import dataclass
from typing import Final

from iso_bridge.domain import (
    AccountRecord,
    AmountRecord,
    CanonicalPaymentRecord,
    MessageType,
    PartyRecord,
    domain_resolve_message_type,
)

from .interfaces import MESSAGE_NAMESPACES, XSI_NAMESPACE, SerializerPort

logger = logging.getLogger(__name__)

XML_DECLARATION: Final[str] = '<?xml version="1.0" encoding="UTF-8"?>'


@dataclass(frozen=True)
class SerializerConfig:
    """Fixed agent and initiating-party identity used in generated messages.

    Attributes:
        instructing_agent_id: Proprietary id of the instructing/debtor agent.
        instructing_agent_bic: Optional BIC replacing the proprietary instructing agent id.
        instructed_agent_id: Proprietary id of the instructed/creditor agent.
        instructed_agent_bic: Optional BIC replacing the proprietary instructed agent id.
        initiating_party_name: Initiating party name for `pain.001`.
        initiating_party_id: Initiating party id for `pain.001`.
        settlement_method: `pacs.008` settlement method code.
        payment_method: `pain.001` payment method code.
        indent: Indentation unit for pretty printing.
    """

    instructing_agent_id: str = "HCTMIDDLEWARE"
    instructing_agent_bic: str | None = None
    instructed_agent_id: str = "LEDGERNETWORK"
    instructed_agent_bic: str | None = None
    initiating_party_name: str = "HCT Ledger Middleware"
    initiating_party_id: str = "HCT_MIDDLEWARE"
    settlement_method: str = "CLRG"
    payment_method: str = "TRF"
    indent: str = "  "


class Iso20022XmlSerializer(SerializerPort):
    """Serializer for `pacs.008` and `pain.001` documents built on ElementTree."""

    def __init__(self, config: SerializerConfig | None = None):
        self._config = config or SerializerConfig()

    def serializer_render(self, record: CanonicalPaymentRecord, message_type: MessageType | str) -> str:
        """Render one canonical record as an XML document string.

        Args:
            record: Canonical payment record.
            message_type: Target message family.

        Returns:
            str: XML declaration followed by the indented document.

        Raises:
            UnsupportedMessageTypeError: Raised for selectors outside the supported families.
        """

        resolved_message_type = domain_resolve_message_type(message_type)
        document = self.serializer_build_document(record, resolved_message_type)
        element_tree.indent(document, space=self._config.indent)
        body = element_tree.tostring(document, encoding="unicode")
        logger.debug("Rendered %s document for message %s", resolved_message_type.value, record.message_id)
        return f"{XML_DECLARATION}\n{body}\n"

    def serializer_build_document(
        self,
        record: CanonicalPaymentRecord,
        message_type: MessageType | str,
    ) -> element_tree.Element:
        """Build the un-indented `Document` element tree for one record.

        Args:
            record: Canonical payment record.
            message_type: Target message family.

        Returns:
            xml.etree.ElementTree.Element: `Document` root with namespace declarations.

        Raises:
            UnsupportedMessageTypeError: Raised for selectors outside the supported families.
        """

        resolved_message_type = domain_resolve_message_type(message_type)
        document = element_tree.Element(
            "Document",
            {"xmlns": MESSAGE_NAMESPACES[resolved_message_type], "xmlns:xsi": XSI_NAMESPACE},
        )
        if resolved_message_type is MessageType.FI_TO_FI_CREDIT_TRANSFER:
            self._serializer_build_fi_to_fi_credit_transfer(document, record)
        else:
            self._serializer_build_credit_transfer_initiation(document, record)
        return document

    def _serializer_build_fi_to_fi_credit_transfer(
        self,
        document: element_tree.Element,
        record: CanonicalPaymentRecord,
    ) -> None:
        message = element_tree.SubElement(document, "FIToFICstmrCdtTrf")

        group_header = element_tree.SubElement(message, "GrpHdr")
        _serializer_text(group_header, "MsgId", record.message_id)
        _serializer_text(group_header, "CreDtTm", record.creation_date_time)
        _serializer_text(group_header, "NbOfTxs", record.number_of_transactions)
        _serializer_text(group_header, "CtrlSum", record.control_sum)
        settlement_information = element_tree.SubElement(group_header, "SttlmInf")
        _serializer_text(settlement_information, "SttlmMtd", self._config.settlement_method)
        _serializer_agent(
            group_header,
            "InstgAgt",
            self._config.instructing_agent_id,
            self._config.instructing_agent_bic,
        )
        _serializer_agent(
            group_header,
            "InstdAgt",
            self._config.instructed_agent_id,
            self._config.instructed_agent_bic,
        )

        transaction = element_tree.SubElement(message, "CdtTrfTxInf")
        payment_identification = element_tree.SubElement(transaction, "PmtId")
        _serializer_text(payment_identification, "InstrId", record.instruction_id)
        _serializer_text(payment_identification, "EndToEndId", record.end_to_end_id)
        _serializer_text(payment_identification, "TxId", record.transaction_id)
        _serializer_amount(transaction, "IntrBkSttlmAmt", record.instructed_amount)
        _serializer_text(transaction, "ChrgBr", record.charge_bearer)
        _serializer_party(transaction, "Dbtr", record.debtor)
        _serializer_account(transaction, "DbtrAcct", record.debtor_account)
        _serializer_agent(
            transaction,
            "DbtrAgt",
            self._config.instructing_agent_id,
            self._config.instructing_agent_bic,
        )
        _serializer_agent(
            transaction,
            "CdtrAgt",
            self._config.instructed_agent_id,
            self._config.instructed_agent_bic,
        )
        _serializer_party(transaction, "Cdtr", record.creditor)
        _serializer_account(transaction, "CdtrAcct", record.creditor_account)
        _serializer_optional_tail(transaction, record)

    def _serializer_build_credit_transfer_initiation(
        self,
        document: element_tree.Element,
        record: CanonicalPaymentRecord,
    ) -> None:
        message = element_tree.SubElement(document, "CstmrCdtTrfInitn")

        group_header = element_tree.SubElement(message, "GrpHdr")
        _serializer_text(group_header, "MsgId", record.message_id)
        _serializer_text(group_header, "CreDtTm", record.creation_date_time)
        _serializer_text(group_header, "NbOfTxs", record.number_of_transactions)
        _serializer_text(group_header, "CtrlSum", record.control_sum)
        initiating_party = element_tree.SubElement(group_header, "InitgPty")
        _serializer_text(initiating_party, "Nm", self._config.initiating_party_name)
        _serializer_organisation_id(initiating_party, self._config.initiating_party_id)

        payment_information = element_tree.SubElement(message, "PmtInf")
        _serializer_text(payment_information, "PmtInfId", record.message_id)
        _serializer_text(payment_information, "PmtMtd", self._config.payment_method)
        _serializer_text(payment_information, "NbOfTxs", record.number_of_transactions)
        _serializer_text(payment_information, "CtrlSum", record.control_sum)
        requested_execution_date = element_tree.SubElement(payment_information, "ReqdExctnDt")
        _serializer_text(requested_execution_date, "Dt", record.creation_date_time[:10])
        _serializer_party(payment_information, "Dbtr", record.debtor)
        _serializer_account(payment_information, "DbtrAcct", record.debtor_account)
        _serializer_agent(
            payment_information,
            "DbtrAgt",
            self._config.instructing_agent_id,
            self._config.instructing_agent_bic,
        )
        _serializer_text(payment_information, "ChrgBr", record.charge_bearer)

        transaction = element_tree.SubElement(payment_information, "CdtTrfTxInf")
        payment_identification = element_tree.SubElement(transaction, "PmtId")
        _serializer_text(payment_identification, "InstrId", record.instruction_id)
        _serializer_text(payment_identification, "EndToEndId", record.end_to_end_id)
        amount = element_tree.SubElement(transaction, "Amt")
        _serializer_amount(amount, "InstdAmt", record.instructed_amount)
        _serializer_agent(
            transaction,
            "CdtrAgt",
            self._config.instructed_agent_id,
            self._config.instructed_agent_bic,
        )
        _serializer_party(transaction, "Cdtr", record.creditor)
        _serializer_account(transaction, "CdtrAcct", record.creditor_account)
        _serializer_optional_tail(transaction, record)


def _serializer_text(parent: element_tree.Element, tag: str, text: str) -> element_tree.Element:
    element = element_tree.SubElement(parent, tag)
    element.text = text
    return element


def _serializer_amount(parent: element_tree.Element, tag: str, amount: AmountRecord) -> None:
    element = element_tree.SubElement(parent, tag, {"Ccy": amount.currency})
    element.text = amount.value


def _serializer_organisation_id(parent: element_tree.Element, identification: str) -> None:
    other = element_tree.SubElement(element_tree.SubElement(element_tree.SubElement(parent, "Id"), "OrgId"), "Othr")
    _serializer_text(other, "Id", identification)


def _serializer_party(parent: element_tree.Element, tag: str, party: PartyRecord) -> None:
    """Append a party block with name, postal placeholder and organisation id."""

    party_element = element_tree.SubElement(parent, tag)
    _serializer_text(party_element, "Nm", party.name)

    address = party.address
    postal_address = element_tree.SubElement(party_element, "PstlAdr")
    address_type = element_tree.SubElement(postal_address, "AdrTp")
    _serializer_text(address_type, "Cd", address.address_type)
    _serializer_text(postal_address, "Dept", address.department)
    _serializer_text(postal_address, "StrtNm", address.street_name)
    _serializer_text(postal_address, "BldgNb", address.building_number)
    _serializer_text(postal_address, "PstCd", address.post_code)
    _serializer_text(postal_address, "TwnNm", address.town_name)
    _serializer_text(postal_address, "Ctry", address.country)

    _serializer_organisation_id(party_element, party.identification)


def _serializer_account(parent: element_tree.Element, tag: str, account: AccountRecord) -> None:
    account_element = element_tree.SubElement(parent, tag)
    other = element_tree.SubElement(element_tree.SubElement(account_element, "Id"), "Othr")
    _serializer_text(other, "Id", account.identification)
    _serializer_text(account_element, "Ccy", account.currency)


def _serializer_agent(
    parent: element_tree.Element,
    tag: str,
    proprietary_id: str,
    bic: str | None,
) -> None:
    institution = element_tree.SubElement(element_tree.SubElement(parent, tag), "FinInstnId")
    if bic:
        _serializer_text(institution, "BICFI", bic)
        return
    other = element_tree.SubElement(institution, "Othr")
    _serializer_text(other, "Id", proprietary_id)


def _serializer_optional_tail(transaction: element_tree.Element, record: CanonicalPaymentRecord) -> None:
    # Purp precedes RmtInf in both schemas.
    if record.purpose_code:
        purpose = element_tree.SubElement(transaction, "Purp")
        _serializer_text(purpose, "Cd", record.purpose_code)
    if record.remittance_information.unstructured:
        remittance = element_tree.SubElement(transaction, "RmtInf")
        _serializer_text(remittance, "Ustrd", record.remittance_information.unstructured)


__all__ = ["Iso20022XmlSerializer", "SerializerConfig", "XML_DECLARATION"]

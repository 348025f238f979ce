"""Typed interfaces for canonical-record XML serialization."""

from typing import Final, Protocol

from iso_bridge.domain import CanonicalPaymentRecord, MessageType

XSI_NAMESPACE: Final[str] = "http://www.w3.org/2001/XMLSchema-instance"

MESSAGE_NAMESPACES: Final[dict[MessageType, str]] = {
    MessageType.FI_TO_FI_CREDIT_TRANSFER: "urn:iso:std:iso:20022:tech:xsd:pacs.008.001.08",
    MessageType.CREDIT_TRANSFER_INITIATION: "urn:iso:std:iso:20022:tech:xsd:pain.001.001.09",
}


class SerializerPort(Protocol):
    """Port definition for rendering canonical records into ISO 20022 XML."""

    def serializer_render(self, record: CanonicalPaymentRecord, message_type: MessageType | str) -> str:
        """Render one canonical record as an XML document string.

        Args:
            record: Canonical payment record.
            message_type: Target message family.

        Returns:
            str: Pretty-printed UTF-8 XML document.

        Raises:
            UnsupportedMessageTypeError: Raised for selectors outside the supported families.
        """
